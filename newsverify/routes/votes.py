"""
API routes for voting on news items.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from newsverify.access import Identity, get_current_identity
from newsverify.database import get_db
from newsverify.models import CastVoteRequest, VoteResponse
from newsverify.vote_service import VoteService


router = APIRouter(prefix="/news", tags=["Votes"])


@router.post("/{news_id}/vote", response_model=VoteResponse, status_code=201)
def cast_vote(
    news_id: str,
    request: CastVoteRequest,
    identity: Identity = Depends(get_current_identity),
    db: Session = Depends(get_db)
) -> VoteResponse:
    """
    Vote FAKE or NOT_FAKE on a news item.

    One vote per user per item; a second attempt is rejected and the
    first vote stands.
    """
    vote = VoteService(db).cast_vote(identity, news_id, request.vote)
    return VoteResponse.model_validate(vote)
