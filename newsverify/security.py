"""
Password hashing and bearer token signing.

Passwords are salted one-way hashes from ``werkzeug.security``. Tokens are
HMAC-signed JWTs carrying ``userId`` and ``role``.

Tokens have no expiry and no revocation list; a leaked token stays valid
until ``secret_key`` is rotated.
"""

from datetime import datetime, UTC
from typing import Dict, Optional

import jwt
from werkzeug.security import check_password_hash, generate_password_hash

from newsverify.config import get_settings
from newsverify.errors import InvalidToken
from newsverify.models import UserRole


def hash_password(plaintext: str) -> str:
    """Salted one-way hash of a password."""
    settings = get_settings()
    return generate_password_hash(plaintext, method=settings.password_hash_method)


def verify_password(plaintext: str, password_hash: Optional[str]) -> bool:
    """Compare a password against a stored hash. Never raises on mismatch."""
    if not password_hash:
        return False
    try:
        return check_password_hash(password_hash, plaintext)
    except ValueError:
        # Unknown or corrupt hash format
        return False


def issue_token(user_id: str, role: UserRole) -> str:
    """Sign a bearer token for a user."""
    settings = get_settings()
    payload = {
        "userId": user_id,
        "role": UserRole(role).value,
        "iat": int(datetime.now(UTC).timestamp()),
    }
    return jwt.encode(payload, settings.secret_key, algorithm=settings.token_algorithm)


def verify_token(token: Optional[str]) -> Dict[str, object]:
    """
    Decode a bearer token.

    Returns:
        ``{"userId": str, "role": UserRole}``

    Raises:
        InvalidToken: token missing, malformed, forged, or missing claims
    """
    if not token:
        raise InvalidToken("No token provided")

    settings = get_settings()
    try:
        payload = jwt.decode(
            token,
            settings.secret_key,
            algorithms=[settings.token_algorithm],
            options={"require": ["userId", "role"]},
        )
    except jwt.PyJWTError as e:
        raise InvalidToken(str(e)) from e

    user_id = payload.get("userId")
    if not isinstance(user_id, str) or not user_id:
        raise InvalidToken("Token has no user")
    try:
        role = UserRole(payload.get("role"))
    except ValueError as e:
        raise InvalidToken("Token has an unknown role") from e

    return {"userId": user_id, "role": role}
