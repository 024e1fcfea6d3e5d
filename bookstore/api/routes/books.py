"""Book Routes — create, read, patch and soft-delete books.

Invariants:
    - Deleted books are invisible here: get/patch/delete on them -> 404
    - Duplicate title among active books -> 409; unknown or deleted genre -> 404
    - PATCH sets stock_quantity directly (the only stock mutation besides order placement)
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from bookstore.api.identity import get_current_user_id
from bookstore.api.routes.genres import get_genre_or_404
from bookstore.core.domain_types import RecordStatus, UserId
from bookstore.core.errors import DuplicateResourceError, ResourceNotFoundError
from bookstore.infrastructure.database import get_db
from bookstore.models.book import Book
from bookstore.schemas.catalog import (
    BookCreate,
    BookCreated,
    BookOut,
    BookUpdate,
    BookUpdated,
)
from bookstore.schemas.envelope import ApiResponse

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/books", tags=["books"])


async def get_book_or_404(book_id: UUID, db: AsyncSession) -> Book:
    result = await db.execute(
        select(Book)
        .where(Book.id == book_id)
        .where(Book.status == RecordStatus.ACTIVE.value)
    )
    book = result.scalar_one_or_none()
    if not book:
        raise ResourceNotFoundError("Book", str(book_id))
    return book


@router.post(
    "", response_model=ApiResponse[BookCreated],
    status_code=status.HTTP_201_CREATED,
)
async def create_book(
    body: BookCreate,
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    duplicate = await db.execute(
        select(Book.id)
        .where(Book.title == body.title)
        .where(Book.status == RecordStatus.ACTIVE.value)
    )
    if duplicate.first() is not None:
        raise DuplicateResourceError("Book with this title already exists")
    await get_genre_or_404(body.genre_id, db)

    book = Book(
        title=body.title,
        writer=body.writer,
        publisher=body.publisher,
        publication_year=body.publication_year,
        description=body.description or None,
        price=body.price,
        stock_quantity=body.stock_quantity,
        genre_id=body.genre_id,
    )
    db.add(book)
    await db.commit()
    await db.refresh(book)
    return ApiResponse[BookCreated](
        message="Book added successfully",
        data=BookCreated(id=book.id, title=book.title, created_at=book.created_at),
    )


@router.get("/{book_id}", response_model=ApiResponse[BookOut])
async def get_book(
    book_id: UUID,
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    book = await get_book_or_404(book_id, db)
    return ApiResponse[BookOut](
        message="Get book detail successfully",
        data=BookOut(
            id=book.id,
            title=book.title,
            writer=book.writer,
            publisher=book.publisher,
            description=book.description,
            publication_year=book.publication_year,
            price=book.price,
            stock_quantity=book.stock_quantity,
            genre=book.genre.name,
        ),
    )


@router.patch("/{book_id}", response_model=ApiResponse[BookUpdated])
async def update_book(
    book_id: UUID,
    body: BookUpdate,
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    book = await get_book_or_404(book_id, db)
    changes = body.model_dump(exclude_unset=True)
    for field, value in changes.items():
        if field != "description" and value is None:
            continue
        setattr(book, field, value)
    await db.commit()
    await db.refresh(book)
    return ApiResponse[BookUpdated](
        message="Book updated successfully",
        data=BookUpdated(id=book.id, title=book.title, updated_at=book.updated_at),
    )


@router.delete("/{book_id}", response_model=ApiResponse[None])
async def delete_book(
    book_id: UUID,
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Soft delete: order history keeps resolving the id (as a placeholder)."""
    book = await get_book_or_404(book_id, db)
    book.mark_deleted()
    await db.commit()
    logger.info("Book soft-deleted", extra={"user_id": user_id, "book_id": book_id})
    return ApiResponse[None](message="Book removed successfully")
