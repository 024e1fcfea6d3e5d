"""Identity Context — resolves the authenticated user id from a bearer token.

Invariants:
    - Missing header, wrong scheme, bad signature or expired token -> 401 AuthenticationError
    - Services receive the user id only; they never re-validate the caller
"""

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from bookstore.config import get_settings
from bookstore.core.domain_types import UserId
from bookstore.core.errors import AuthenticationError
from bookstore.infrastructure.security import decode_access_token

_bearer = HTTPBearer(auto_error=False)


async def get_current_user_id(
    credentials: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> UserId:
    """FastAPI dependency: authenticated user id or 401."""
    if credentials is None or not credentials.credentials:
        raise AuthenticationError("Missing Authorization header")
    return decode_access_token(credentials.credentials, get_settings())
