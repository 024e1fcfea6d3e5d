"""Auth Routes — register, login, and current-user profile.

Invariants:
    - Duplicate username or email -> 409 (checked before insert; unique constraints back it up)
    - Unknown email and wrong password produce the same 401 message
    - /me trusts the token's user id and 404s if the account no longer exists
"""

import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from bookstore.api.identity import get_current_user_id
from bookstore.config import get_settings
from bookstore.core.domain_types import UserId
from bookstore.core.errors import (
    AuthenticationError,
    DuplicateResourceError,
    ResourceNotFoundError,
)
from bookstore.infrastructure.database import get_db
from bookstore.infrastructure.security import (
    create_access_token,
    hash_password,
    verify_password,
)
from bookstore.models.user import User
from bookstore.schemas.auth import (
    AccessToken,
    LoginRequest,
    RegisterRequest,
    RegisteredUser,
    UserProfile,
)
from bookstore.schemas.envelope import ApiResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/register", response_model=ApiResponse[RegisteredUser],
    status_code=status.HTTP_201_CREATED,
)
async def register(body: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Create an account."""
    clauses = [User.email == body.email]
    if body.username:
        clauses.append(User.username == body.username)
    existing = await db.execute(select(User.id).where(or_(*clauses)))
    if existing.first() is not None:
        raise DuplicateResourceError("Username or email already exists")

    user = User(
        username=body.username,
        email=body.email,
        password_hash=hash_password(body.password),
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info("User registered", extra={"user_id": user.id})
    return ApiResponse[RegisteredUser](
        message="User registered successfully",
        data=RegisteredUser(id=user.id, email=user.email, created_at=user.created_at),
    )


@router.post("/login", response_model=ApiResponse[AccessToken])
async def login(body: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Exchange email and password for an access token."""
    result = await db.execute(select(User).where(User.email == body.email))
    user = result.scalar_one_or_none()
    if not user or not verify_password(user.password_hash, body.password):
        raise AuthenticationError("Invalid credentials")

    token = create_access_token(UserId(user.id), get_settings())
    return ApiResponse[AccessToken](
        message="Login successfully",
        data=AccessToken(access_token=token),
    )


@router.get("/me", response_model=ApiResponse[UserProfile])
async def me(
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Profile of the authenticated user."""
    user = await db.get(User, user_id)
    if not user:
        raise ResourceNotFoundError("User", str(user_id))
    return ApiResponse[UserProfile](
        message="Get me successfully",
        data=UserProfile(id=user.id, username=user.username, email=user.email),
    )
