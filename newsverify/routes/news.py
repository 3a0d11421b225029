"""
API routes for news items.

Reads accept an optional bearer token; an admin token lets the caller
see hidden news. Writes require a token.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from newsverify.access import (
    CAN_AUTHOR_NEWS, CAN_MODERATE, Caller, Identity, get_caller, require_roles
)
from newsverify.config import get_settings
from newsverify.database import get_db
from newsverify.models import (
    CreateNewsRequest, NewsDetailResponse, NewsListResponse, NewsResponse,
    NewsStatus, UpdateNewsStatusRequest, UpdateVisibilityRequest
)
from newsverify.news_service import NewsFilter, NewsService
from newsverify.pagination import PageRequest


router = APIRouter(prefix="/news", tags=["News"])

settings = get_settings()


# =============================================================================
# Read
# =============================================================================


@router.get("", response_model=NewsListResponse)
def list_news(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=settings.default_page_size, ge=1, le=settings.max_page_size, alias="pageSize"),
    status: Optional[NewsStatus] = None,
    q: Optional[str] = Query(default=None, max_length=200),
    include_deleted: bool = Query(default=False, alias="includeDeleted"),
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db)
) -> NewsListResponse:
    """
    List news, newest first.

    Hidden items are only included for admins passing
    ``includeDeleted=true``. ``q`` is a case-insensitive substring match
    on topic, short detail and full detail.
    """
    filters = NewsFilter(status=status, query=q, include_deleted=include_deleted)
    items, pagination = NewsService(db).list_news(filters, PageRequest(page, page_size), caller)
    return NewsListResponse(data=items, pagination=pagination)


@router.get("/{news_id}", response_model=NewsDetailResponse)
def get_news(
    news_id: str,
    caller: Caller = Depends(get_caller),
    db: Session = Depends(get_db)
) -> NewsDetailResponse:
    """One news item with vote counts and the caller's own vote."""
    return NewsService(db).get_news(news_id, caller)


# =============================================================================
# Write
# =============================================================================


@router.post("", response_model=NewsResponse, status_code=201)
def create_news(
    request: CreateNewsRequest,
    identity: Identity = Depends(require_roles(CAN_AUTHOR_NEWS)),
    db: Session = Depends(get_db)
) -> NewsResponse:
    """Submit a news item (members and admins)."""
    return NewsResponse.model_validate(NewsService(db).create_news(identity, request))


@router.patch("/{news_id}", response_model=NewsResponse)
def update_news_status(
    news_id: str,
    request: UpdateNewsStatusRequest,
    identity: Identity = Depends(require_roles(CAN_MODERATE)),
    db: Session = Depends(get_db)
) -> NewsResponse:
    """Classify a news item (admin only)."""
    news = NewsService(db).update_status(identity, news_id, request.status)
    return NewsResponse.model_validate(news)


@router.patch("/{news_id}/visibility", response_model=NewsResponse)
def set_news_visibility(
    news_id: str,
    request: UpdateVisibilityRequest,
    identity: Identity = Depends(require_roles(CAN_MODERATE)),
    db: Session = Depends(get_db)
) -> NewsResponse:
    """Hide (``isDeleted: true``) or restore a news item (admin only)."""
    news = NewsService(db).set_visibility(identity, news_id, request.is_deleted)
    return NewsResponse.model_validate(news)
