"""Genre Routes — create, read, rename and soft-delete genres.

Invariants:
    - Deleted genres are invisible: get/patch/delete on them -> 404
    - Duplicate name among active genres -> 409
    - GET is public; writes require a bearer token
    - get_genre_or_404 exported for reuse by book routes
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bookstore.api.identity import get_current_user_id
from bookstore.core.domain_types import RecordStatus, UserId
from bookstore.core.errors import DuplicateResourceError, ResourceNotFoundError
from bookstore.infrastructure.database import get_db
from bookstore.models.genre import Genre
from bookstore.schemas.catalog import GenreCreated, GenreOut, GenreUpdated, GenreWrite
from bookstore.schemas.envelope import ApiResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/genre", tags=["genres"])


async def get_genre_or_404(genre_id: UUID, db: AsyncSession) -> Genre:
    """Active genre or raise 404."""
    result = await db.execute(
        select(Genre)
        .where(Genre.id == genre_id)
        .where(Genre.status == RecordStatus.ACTIVE.value)
    )
    genre = result.scalar_one_or_none()
    if not genre:
        raise ResourceNotFoundError("Genre", str(genre_id))
    return genre


async def _ensure_name_free(name: str, db: AsyncSession) -> None:
    result = await db.execute(
        select(Genre.id)
        .where(Genre.name == name)
        .where(Genre.status == RecordStatus.ACTIVE.value)
    )
    if result.first() is not None:
        raise DuplicateResourceError("Genre already exists")


@router.post(
    "", response_model=ApiResponse[GenreCreated],
    status_code=status.HTTP_201_CREATED,
)
async def create_genre(
    body: GenreWrite,
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    await _ensure_name_free(body.name, db)
    genre = Genre(name=body.name)
    db.add(genre)
    await db.commit()
    await db.refresh(genre)
    return ApiResponse[GenreCreated](
        message="Genre created successfully",
        data=GenreCreated(id=genre.id, name=genre.name, created_at=genre.created_at),
    )


@router.get("/{genre_id}", response_model=ApiResponse[GenreOut])
async def get_genre(genre_id: UUID, db: AsyncSession = Depends(get_db)):
    genre = await get_genre_or_404(genre_id, db)
    return ApiResponse[GenreOut](
        message="Get genre detail successfully",
        data=GenreOut(id=genre.id, name=genre.name),
    )


@router.patch("/{genre_id}", response_model=ApiResponse[GenreUpdated])
async def update_genre(
    genre_id: UUID,
    body: GenreWrite,
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    genre = await get_genre_or_404(genre_id, db)
    if body.name != genre.name:
        await _ensure_name_free(body.name, db)
    genre.name = body.name
    await db.commit()
    await db.refresh(genre)
    return ApiResponse[GenreUpdated](
        message="Genre updated successfully",
        data=GenreUpdated(id=genre.id, name=genre.name, updated_at=genre.updated_at),
    )


@router.delete("/{genre_id}", response_model=ApiResponse[None])
async def delete_genre(
    genre_id: UUID,
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Soft delete: the row stays so books and sales history still resolve."""
    genre = await get_genre_or_404(genre_id, db)
    genre.mark_deleted()
    await db.commit()
    logger.info(f"Genre {genre_id} soft-deleted", extra={"user_id": user_id})
    return ApiResponse[None](message="Genre removed successfully")
