"""Credentials — password hashing (werkzeug) and access-token signing (PyJWT).

Invariants:
    - Plain passwords are never stored or logged
    - Tokens carry the user id in the `userId` claim and expire after jwt_expires_hours
    - Any decode failure (bad signature, expired, malformed, missing claim) -> AuthenticationError
"""

from datetime import datetime, timedelta, timezone
from uuid import UUID

import jwt
from werkzeug.security import check_password_hash, generate_password_hash

from bookstore.config import Settings
from bookstore.core.domain_types import UserId
from bookstore.core.errors import AuthenticationError

_USER_CLAIM = "userId"


def hash_password(password: str) -> str:
    return generate_password_hash(password)


def verify_password(password_hash: str, password: str) -> bool:
    return check_password_hash(password_hash, password)


def create_access_token(user_id: UserId, settings: Settings) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        _USER_CLAIM: str(user_id),
        "iat": now,
        "exp": now + timedelta(hours=settings.jwt_expires_hours),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str, settings: Settings) -> UserId:
    """Verify signature and expiry, return the user id from the token."""
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm],
        )
        return UserId(UUID(payload[_USER_CLAIM]))
    except (jwt.PyJWTError, KeyError, ValueError, TypeError):
        raise AuthenticationError("Invalid or expired token")
