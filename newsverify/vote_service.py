"""
Casting votes on news items.

A user votes at most once per news item and never changes the vote.
The pre-check gives a clean error for the common case; the
``uq_vote_news_user`` constraint decides concurrent double submits.
"""

import logging

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from newsverify.access import Caller, authorize
from newsverify.database import News, Vote
from newsverify.errors import Conflict, NotFound
from newsverify.models import UserRole, VoteValue


logger = logging.getLogger(__name__)

ALREADY_VOTED = "You have already voted on this news."


class VoteService:
    """Records community verdicts."""

    def __init__(self, db: Session):
        self.db = db

    def cast_vote(self, caller: Caller, news_id: str, value: VoteValue) -> Vote:
        """
        Vote on a visible news item.

        Raises:
            Unauthenticated: anonymous caller
            NotFound: news absent or hidden (for every role)
            Conflict: the caller already voted on this item
        """
        identity = authorize(caller, set(UserRole))

        news = self.db.get(News, news_id)
        if news is None or news.is_deleted:
            raise NotFound("News not found")

        if self._find_existing_vote(news_id, identity.user_id) is not None:
            raise Conflict(ALREADY_VOTED)

        vote = Vote(news_id=news_id, user_id=identity.user_id, vote=VoteValue(value).value)
        self.db.add(vote)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning(f"Duplicate vote by {identity.user_id} on {news_id} rejected by constraint")
            raise Conflict(ALREADY_VOTED)

        self.db.refresh(vote)
        return vote

    def _find_existing_vote(self, news_id: str, user_id: str):
        return self.db.query(Vote).filter(
            Vote.news_id == news_id,
            Vote.user_id == user_id
        ).first()
