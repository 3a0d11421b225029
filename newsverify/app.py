"""
News Verification API Service - FastAPI Application.

REST API for crowd-moderated news verification: submission, voting,
comments and moderation.
"""

import logging
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from newsverify.config import get_settings
from newsverify.database import init_db
from newsverify.errors import register_error_handlers
from newsverify.models import ErrorResponse
from newsverify.routes import (
    auth_router, comments_router, news_router, upload_router,
    users_router, votes_router
)
from newsverify.storage import upload_root


settings = get_settings()

# Configure logging
logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    # Startup
    logger.info("Starting News Verification API Service...")
    init_db()
    logger.info("Database initialized")

    yield

    # Shutdown
    logger.info("Shutting down News Verification API Service...")


# Create FastAPI application
app = FastAPI(
    title=settings.app_name,
    description="""
## News Verification API

Crowd-moderated checking of news items.

### Roles

- **READER**: votes and comments
- **MEMBER**: also submits news
- **ADMIN**: also classifies news, hides/restores news, hides comments
  and manages roles

### API Flow

1. Register or log in (POST /auth/register, POST /auth/login)
2. Members submit news (POST /news)
3. Everyone votes once per item (POST /news/{id}/vote) and comments
   (POST /news/{id}/comments)
4. Lists and details carry live vote counts and comment counts
   (GET /news, GET /news/{id})

Send the token as `Authorization: Bearer <token>`. Errors are returned as
`{"error": "..."}` or, for invalid input, `{"error": [issues]}`.
    """,
    version=settings.app_version,
    lifespan=lifespan,
    responses={
        400: {"model": ErrorResponse, "description": "Invalid input or business rule violated"},
        401: {"model": ErrorResponse, "description": "Missing or invalid token"},
        403: {"model": ErrorResponse, "description": "Role not allowed"},
        404: {"model": ErrorResponse, "description": "Not found"},
    },
)

register_error_handlers(app)

# Configure CORS
origins = [o.strip() for o in settings.allowed_origins.split(",") if o.strip()]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Access log: method, path, status and duration."""
    started = time.perf_counter()
    response = await call_next(request)
    duration_ms = (time.perf_counter() - started) * 1000
    logger.info(f"{request.method} {request.url.path} -> {response.status_code} ({duration_ms:.2f}ms)")
    return response


# Include routers
app.include_router(auth_router)
app.include_router(users_router)
app.include_router(news_router)
app.include_router(votes_router)
app.include_router(comments_router)
app.include_router(upload_router)

# Uploaded files
app.mount("/uploads", StaticFiles(directory=str(upload_root())), name="uploads")


# Root endpoint
@app.get("/")
def root():
    """Root endpoint with API information."""
    return {
        "name": settings.app_name,
        "version": settings.app_version,
        "description": "Crowd-moderated news verification API",
        "docs_url": "/docs",
        "openapi_url": "/openapi.json",
        "endpoints": {
            "auth": "/auth",
            "users": "/users",
            "news": "/news",
            "comments": "/comments",
            "upload": "/upload",
            "health": "/health",
        }
    }


@app.get("/health")
def health():
    """Quick health check."""
    return {"status": "ok", "version": settings.app_version}


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "newsverify.app:app",
        host="0.0.0.0",
        port=8000,
        reload=settings.debug
    )
