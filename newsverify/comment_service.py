"""
Comments on news items.

Hidden comments are left in the table but never listed or counted, for
any caller. Hiding a comment does not touch the vote tally.
"""

import logging
from typing import List, Tuple

from sqlalchemy.orm import Session, selectinload

from newsverify.access import CAN_MODERATE, Caller, authorize
from newsverify.database import Comment, News
from newsverify.errors import NotFound
from newsverify.models import CreateCommentRequest, PaginationInfo, UserRole, Visibility
from newsverify.pagination import PageRequest, paginate_query


logger = logging.getLogger(__name__)


class CommentService:
    """Lists, creates and hides comments."""

    def __init__(self, db: Session):
        self.db = db

    def list_comments(self, news_id: str, page: PageRequest) -> Tuple[List[Comment], PaginationInfo]:
        """Live comments on a news item, newest first."""
        query = self.db.query(Comment).options(
            selectinload(Comment.user)
        ).filter(
            Comment.news_id == news_id,
            Comment.visibility == Visibility.ACTIVE.value,
        ).order_by(Comment.created_at.desc(), Comment.id.desc())
        return paginate_query(query, page)

    def create_comment(self, caller: Caller, news_id: str, request: CreateCommentRequest) -> Comment:
        """
        Comment on a news item the caller can see.

        Commenting does not require having voted.

        Raises:
            Unauthenticated: anonymous caller
            NotFound: news absent, or hidden and the caller is not an admin
        """
        identity = authorize(caller, set(UserRole))

        news = self.db.get(News, news_id)
        if news is None or (news.is_deleted and not identity.is_admin):
            raise NotFound("News not found")

        comment = Comment(
            news_id=news_id,
            user_id=identity.user_id,
            content=request.content,
            image_url=request.image_url,
            visibility=Visibility.ACTIVE.value,
        )
        self.db.add(comment)
        self.db.commit()
        self.db.refresh(comment)
        return comment

    def soft_delete_comment(self, caller: Caller, comment_id: str) -> Comment:
        """
        Hide a comment. The row is kept.

        Raises:
            Forbidden: caller is not an admin
            NotFound: comment absent
        """
        identity = authorize(caller, CAN_MODERATE)

        comment = self.db.get(Comment, comment_id)
        if comment is None:
            raise NotFound("Comment not found")

        comment.visibility = Visibility.HIDDEN.value
        self.db.commit()
        self.db.refresh(comment)

        logger.info(f"Comment {comment_id} hidden by {identity.user_id}")
        return comment
