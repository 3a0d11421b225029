"""
API routes for comments.

Comments are listed and created under their news item and hidden
through the top-level ``/comments`` resource.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from newsverify.access import CAN_MODERATE, Identity, get_current_identity, require_roles
from newsverify.config import get_settings
from newsverify.comment_service import CommentService
from newsverify.database import get_db
from newsverify.errors import ValidationFailed
from newsverify.models import CommentListResponse, CommentResponse, CreateCommentRequest
from newsverify.pagination import PageRequest


router = APIRouter(tags=["Comments"])

settings = get_settings()


def _list(db: Session, news_id: str, page: int, page_size: int) -> CommentListResponse:
    comments, pagination = CommentService(db).list_comments(news_id, PageRequest(page, page_size))
    return CommentListResponse(
        data=[CommentResponse.model_validate(c) for c in comments],
        pagination=pagination,
    )


@router.get("/news/{news_id}/comments", response_model=CommentListResponse)
def list_news_comments(
    news_id: str,
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size, alias="pageSize"),
    db: Session = Depends(get_db)
) -> CommentListResponse:
    """Live comments on a news item, newest first. Hidden comments never appear."""
    return _list(db, news_id, page, page_size)


@router.get("/comments", response_model=CommentListResponse)
def list_comments(
    news_id: Optional[str] = Query(default=None, alias="newsId"),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size, alias="pageSize"),
    db: Session = Depends(get_db)
) -> CommentListResponse:
    """Same as the nested listing; ``newsId`` is required."""
    if not news_id:
        raise ValidationFailed("News ID is required")
    return _list(db, news_id, page, page_size)


@router.post("/news/{news_id}/comments", response_model=CommentResponse, status_code=201)
def create_comment(
    news_id: str,
    request: CreateCommentRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
) -> CommentResponse:
    """Comment on a news item (any signed-in user)."""
    comment = CommentService(db).create_comment(identity, news_id, request)
    return CommentResponse.model_validate(comment)


@router.delete("/comments/{comment_id}", response_model=CommentResponse)
def delete_comment(
    comment_id: str,
    identity: Identity = Depends(require_roles(CAN_MODERATE)),
    db: Session = Depends(get_db)
) -> CommentResponse:
    """Hide a comment (admin only). The record is kept."""
    comment = CommentService(db).soft_delete_comment(identity, comment_id)
    return CommentResponse.model_validate(comment)
