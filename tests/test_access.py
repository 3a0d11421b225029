# tests/test_access.py
import pytest

from newsverify.access import (
    ANONYMOUS, CAN_AUTHOR_NEWS, CAN_MODERATE, Identity, authenticate,
    authorize, bearer_token, resolve_caller
)
from newsverify.errors import Forbidden, Unauthenticated
from newsverify.models import UserRole
from newsverify.security import issue_token


def test_bearer_token_parsing():
    assert bearer_token("Bearer abc") == "abc"
    assert bearer_token("bearer abc") == "abc"
    assert bearer_token(None) is None
    assert bearer_token("") is None
    assert bearer_token("Basic abc") is None
    assert bearer_token("Bearer ") is None


def test_authenticate_uses_stored_role(db, make_user):
    user_id = make_user(UserRole.MEMBER)
    # Token still claims READER; the stored role wins
    identity = authenticate(f"Bearer {issue_token(user_id, UserRole.READER)}", db)
    assert identity == Identity(user_id=user_id, role=UserRole.MEMBER)


def test_authenticate_rejects_missing_and_invalid(db):
    with pytest.raises(Unauthenticated):
        authenticate(None, db)
    with pytest.raises(Unauthenticated):
        authenticate("Bearer not-a-token", db)


def test_authenticate_rejects_unknown_user(db):
    token = issue_token("no-such-user", UserRole.ADMIN)
    with pytest.raises(Unauthenticated):
        authenticate(f"Bearer {token}", db)


def test_resolve_caller_degrades_to_anonymous(db):
    assert resolve_caller(None, db) is ANONYMOUS
    assert resolve_caller("Bearer broken", db) is ANONYMOUS
    assert resolve_caller("Token abc", db) is ANONYMOUS


def test_resolve_caller_returns_identity(db, make_user):
    admin_id = make_user(UserRole.ADMIN)
    caller = resolve_caller(f"Bearer {issue_token(admin_id, UserRole.ADMIN)}", db)
    assert caller.authenticated
    assert caller.is_admin


def test_authorize_capability_sets():
    member = Identity(user_id="m", role=UserRole.MEMBER)
    admin = Identity(user_id="a", role=UserRole.ADMIN)
    reader = Identity(user_id="r", role=UserRole.READER)

    assert authorize(member, CAN_AUTHOR_NEWS) is member
    assert authorize(admin, CAN_AUTHOR_NEWS) is admin
    with pytest.raises(Forbidden):
        authorize(reader, CAN_AUTHOR_NEWS)
    # Members author but do not moderate
    with pytest.raises(Forbidden):
        authorize(member, CAN_MODERATE)
    with pytest.raises(Unauthenticated):
        authorize(ANONYMOUS, CAN_MODERATE)
