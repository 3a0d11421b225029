"""
News read-model and news mutations.

Aggregates (vote tally, live comment count, the caller's own vote) are
computed from the ``votes`` and ``comments`` tables on every read. Hidden
news is invisible to everyone but admins: a lookup by id answers
NotFound, and lists only include it when an admin explicitly asks.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session, selectinload

from newsverify.access import ANONYMOUS, CAN_AUTHOR_NEWS, CAN_MODERATE, Caller, authorize
from newsverify.database import Comment, News, Vote
from newsverify.errors import NotFound
from newsverify.models import (
    CreateNewsRequest, NewsDetailResponse, NewsStatus, NewsSummaryResponse,
    PaginationInfo, Visibility, VoteCounts, VoteValue
)
from newsverify.pagination import PageRequest, paginate_query


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class NewsFilter:
    """
    List filters.

    ``query`` matches topic, short detail or full detail by
    case-insensitive substring on every database backend.
    """

    status: Optional[NewsStatus] = None
    query: Optional[str] = None
    include_deleted: bool = False


def can_see_hidden(caller: Caller) -> bool:
    return caller.is_admin


class NewsService:
    """
    Reads and writes news items on behalf of a caller.

    Authorization is checked here as well as at the route, so the rules
    hold for any entry point.
    """

    def __init__(self, db: Session):
        self.db = db

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_news(
        self,
        filters: NewsFilter,
        page: PageRequest,
        caller: Caller = ANONYMOUS
    ) -> Tuple[List[NewsSummaryResponse], PaginationInfo]:
        """Newest first, with aggregates for every item on the page."""
        query = self.db.query(News).options(selectinload(News.reporter))

        # Both conditions are required to see hidden items
        if not (can_see_hidden(caller) and filters.include_deleted):
            query = query.filter(News.visibility == Visibility.ACTIVE.value)

        if filters.status is not None:
            query = query.filter(News.status == NewsStatus(filters.status).value)

        if filters.query:
            query = query.filter(or_(
                News.topic.icontains(filters.query, autoescape=True),
                News.short_detail.icontains(filters.query, autoescape=True),
                News.full_detail.icontains(filters.query, autoescape=True),
            ))

        query = query.order_by(News.created_at.desc(), News.id.desc())
        rows, pagination = paginate_query(query, page)

        news_ids = [n.id for n in rows]
        tallies = self._vote_tallies(news_ids)
        comment_counts = self._live_comment_counts(news_ids)

        items = [
            self._summarize(n, tallies.get(n.id), comment_counts.get(n.id, 0))
            for n in rows
        ]
        return items, pagination

    def get_news(self, news_id: str, caller: Caller = ANONYMOUS) -> NewsDetailResponse:
        """
        One news item with aggregates and the caller's own vote.

        Raises:
            NotFound: absent, or hidden and the caller is not an admin
        """
        news = self._get_visible(news_id, caller)

        tallies = self._vote_tallies([news.id])
        comment_counts = self._live_comment_counts([news.id])
        summary = self._summarize(news, tallies.get(news.id), comment_counts.get(news.id, 0))

        detail = NewsDetailResponse(**summary.model_dump())
        detail.user_vote = self._user_vote(news.id, caller)
        return detail

    def _get_visible(self, news_id: str, caller: Caller) -> News:
        news = self.db.get(News, news_id)
        if news is None or (news.is_deleted and not can_see_hidden(caller)):
            raise NotFound("News not found")
        return news

    def _vote_tallies(self, news_ids: List[str]) -> Dict[str, VoteCounts]:
        if not news_ids:
            return {}
        rows = self.db.query(
            Vote.news_id, Vote.vote, func.count(Vote.id)
        ).filter(
            Vote.news_id.in_(news_ids)
        ).group_by(Vote.news_id, Vote.vote).all()

        counts: Dict[str, Dict[str, int]] = {}
        for news_id, value, count in rows:
            counts.setdefault(news_id, {})[value] = count

        return {
            news_id: VoteCounts.from_tally(
                fake=by_value.get(VoteValue.FAKE.value, 0),
                not_fake=by_value.get(VoteValue.NOT_FAKE.value, 0),
            )
            for news_id, by_value in counts.items()
        }

    def _live_comment_counts(self, news_ids: List[str]) -> Dict[str, int]:
        if not news_ids:
            return {}
        rows = self.db.query(
            Comment.news_id, func.count(Comment.id)
        ).filter(
            Comment.news_id.in_(news_ids),
            Comment.visibility == Visibility.ACTIVE.value,
        ).group_by(Comment.news_id).all()
        return {news_id: count for news_id, count in rows}

    def _user_vote(self, news_id: str, caller: Caller) -> Optional[VoteValue]:
        if not caller.authenticated:
            return None
        vote = self.db.query(Vote).filter(
            Vote.news_id == news_id,
            Vote.user_id == caller.user_id
        ).first()
        return VoteValue(vote.vote) if vote else None

    @staticmethod
    def _summarize(
        news: News,
        tally: Optional[VoteCounts],
        comment_count: int
    ) -> NewsSummaryResponse:
        summary = NewsSummaryResponse.model_validate(news)
        summary.vote_counts = tally or VoteCounts()
        summary.comment_count = comment_count
        return summary

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create_news(self, caller: Caller, request: CreateNewsRequest) -> News:
        """Submit a news item; starts UNKNOWN and visible."""
        identity = authorize(caller, CAN_AUTHOR_NEWS)

        news = News(
            topic=request.topic,
            short_detail=request.short_detail,
            full_detail=request.full_detail,
            image_url=request.image_url,
            status=NewsStatus.UNKNOWN.value,
            visibility=Visibility.ACTIVE.value,
            reporter_id=identity.user_id,
        )
        self.db.add(news)
        self.db.commit()
        self.db.refresh(news)

        logger.info(f"News {news.id} submitted by {identity.user_id}")
        return news

    def update_status(self, caller: Caller, news_id: str, status: NewsStatus) -> News:
        """Moderator classification; unrelated to the vote tally."""
        identity = authorize(caller, CAN_MODERATE)

        news = self.db.get(News, news_id)
        if news is None:
            raise NotFound("News not found")

        news.status = NewsStatus(status).value
        self.db.commit()
        self.db.refresh(news)

        logger.info(f"News {news_id} status set to {news.status} by {identity.user_id}")
        return news

    def set_visibility(self, caller: Caller, news_id: str, is_deleted: bool) -> News:
        """Hide or restore a news item. Idempotent."""
        identity = authorize(caller, CAN_MODERATE)

        news = self.db.get(News, news_id)
        if news is None:
            raise NotFound("News not found")

        news.visibility = Visibility.from_deleted(is_deleted).value
        self.db.commit()
        self.db.refresh(news)

        logger.info(f"News {news_id} visibility set to {news.visibility} by {identity.user_id}")
        return news
