"""
Routes package for the News Verification API.
"""

from newsverify.routes.auth import router as auth_router
from newsverify.routes.comments import router as comments_router
from newsverify.routes.news import router as news_router
from newsverify.routes.upload import router as upload_router
from newsverify.routes.users import router as users_router
from newsverify.routes.votes import router as votes_router

__all__ = [
    "auth_router", "users_router", "news_router",
    "comments_router", "votes_router", "upload_router",
]
