"""
Accounts: registration, sign-in, profiles and role management.
"""

import logging
from typing import List, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from newsverify.access import CAN_MODERATE, Caller, authorize
from newsverify.database import User
from newsverify.errors import Conflict, NotFound, Unauthenticated
from newsverify.models import (
    LoginRequest, RegisterRequest, UpdateProfileRequest, UserRole
)
from newsverify.security import hash_password, issue_token, verify_password


logger = logging.getLogger(__name__)

USER_EXISTS = "User already exists"
INVALID_CREDENTIALS = "Invalid credentials"


class UserService:
    """User account operations."""

    def __init__(self, db: Session):
        self.db = db

    def register(self, request: RegisterRequest) -> Tuple[User, str]:
        """
        Create a READER account and sign it in.

        Raises:
            Conflict: the email is taken
        """
        if self._find_by_email(request.email) is not None:
            raise Conflict(USER_EXISTS)

        user = User(
            email=request.email,
            password_hash=hash_password(request.password),
            first_name=request.first_name,
            last_name=request.last_name,
            avatar_url=request.avatar_url,
            role=UserRole.READER.value,
        )
        self.db.add(user)
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            raise Conflict(USER_EXISTS)
        self.db.refresh(user)

        logger.info(f"Registered user {user.id}")
        return user, issue_token(user.id, UserRole(user.role))

    def login(self, request: LoginRequest) -> Tuple[User, str]:
        """
        Exchange credentials for a token.

        Raises:
            Unauthenticated: unknown email or wrong password
        """
        user = self._find_by_email(request.email)
        if user is None or not verify_password(request.password, user.password_hash):
            logger.info("Failed login attempt")
            raise Unauthenticated(INVALID_CREDENTIALS)
        return user, issue_token(user.id, UserRole(user.role))

    def get_user(self, user_id: str) -> User:
        user = self.db.get(User, user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def list_users(self, caller: Caller) -> List[User]:
        """All accounts, newest first (admin only)."""
        authorize(caller, CAN_MODERATE)
        return self.db.query(User).order_by(User.created_at.desc(), User.id).all()

    def update_role(self, caller: Caller, user_id: str, role: UserRole) -> User:
        """
        Change a user's role (admin only).

        Admins may demote themselves.
        """
        identity = authorize(caller, CAN_MODERATE)

        user = self.get_user(user_id)
        user.role = UserRole(role).value
        self.db.commit()
        self.db.refresh(user)

        logger.info(f"User {user_id} role set to {user.role} by {identity.user_id}")
        return user

    def update_profile(self, caller: Caller, request: UpdateProfileRequest) -> User:
        """Partial update of the caller's own name and avatar."""
        identity = authorize(caller, set(UserRole))

        user = self.get_user(identity.user_id)
        for field, value in request.model_dump(exclude_unset=True).items():
            if value is not None:
                setattr(user, field, value)
        self.db.commit()
        self.db.refresh(user)
        return user

    def _find_by_email(self, email: str):
        return self.db.query(User).filter(User.email == email.strip().lower()).first()
