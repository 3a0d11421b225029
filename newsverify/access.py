"""
Access policy: who is calling, and may they do this.

Writes authenticate strictly (no or bad token is 401). Reads resolve the
caller leniently: any failure degrades to ``ANONYMOUS`` so public pages
still render, while a valid admin token unlocks hidden content.

Roles are capability sets per action, not a ranking: members may author
news, only admins may moderate.
"""

import logging
from dataclasses import dataclass
from typing import Callable, FrozenSet, Iterable, Optional, Union

from fastapi import Depends, Header
from sqlalchemy.orm import Session

from newsverify.database import User, get_db
from newsverify.errors import Forbidden, InvalidToken, Unauthenticated
from newsverify.models import UserRole
from newsverify.security import verify_token


logger = logging.getLogger(__name__)


CAN_AUTHOR_NEWS: FrozenSet[UserRole] = frozenset({UserRole.MEMBER, UserRole.ADMIN})
CAN_MODERATE: FrozenSet[UserRole] = frozenset({UserRole.ADMIN})


@dataclass(frozen=True)
class Identity:
    """An authenticated caller."""

    user_id: str
    role: UserRole

    authenticated = True

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN


@dataclass(frozen=True)
class Anonymous:
    """A caller without a usable token."""

    authenticated = False
    is_admin = False
    user_id = None
    role = None


ANONYMOUS = Anonymous()

Caller = Union[Identity, Anonymous]


def bearer_token(authorization: Optional[str]) -> Optional[str]:
    """Extract the token from an ``Authorization: Bearer <token>`` header."""
    if not authorization:
        return None
    scheme, _, token = authorization.strip().partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


def authenticate(authorization: Optional[str], db: Session) -> Identity:
    """
    Resolve the caller of a protected action.

    The role is read from the stored user, so role changes apply to
    tokens already issued.

    Raises:
        Unauthenticated: header absent, token invalid, or user gone
    """
    token = bearer_token(authorization)
    if token is None:
        raise Unauthenticated("No token provided")

    try:
        claims = verify_token(token)
    except InvalidToken:
        raise Unauthenticated("Invalid token")

    user = db.get(User, claims["userId"])
    if user is None:
        raise Unauthenticated("Invalid token")

    return Identity(user_id=user.id, role=UserRole(user.role))


def resolve_caller(authorization: Optional[str], db: Session) -> Caller:
    """Best-effort identity for read paths; never raises."""
    if not authorization:
        return ANONYMOUS
    try:
        return authenticate(authorization, db)
    except Unauthenticated as e:
        logger.debug("Treating caller as anonymous: %s", e.detail)
        return ANONYMOUS


def authorize(identity: Caller, allowed_roles: Iterable[UserRole]) -> Identity:
    """
    Check the caller's role against an action's capability set.

    Raises:
        Unauthenticated: caller is anonymous
        Forbidden: role not in ``allowed_roles``
    """
    if not identity.authenticated:
        raise Unauthenticated()
    if identity.role not in set(allowed_roles):
        raise Forbidden()
    return identity


# =============================================================================
# FastAPI dependencies
# =============================================================================


def get_current_identity(
    authorization: Optional[str] = Header(default=None),
    db: Session = Depends(get_db)
) -> Identity:
    """Dependency for endpoints that require any signed-in user."""
    return authenticate(authorization, db)


def get_caller(
    authorization: Optional[str] = Header(default=None),
    db: Session = Depends(get_db)
) -> Caller:
    """Dependency for public reads that honour an optional token."""
    return resolve_caller(authorization, db)


def require_roles(allowed_roles: Iterable[UserRole]) -> Callable[..., Identity]:
    """Dependency factory for endpoints restricted to a capability set."""
    allowed = frozenset(allowed_roles)

    def dependency(identity: Identity = Depends(get_current_identity)) -> Identity:
        return authorize(identity, allowed)

    return dependency
