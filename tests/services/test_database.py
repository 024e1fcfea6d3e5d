"""Database Session Manager — rollback and translation of driver failures.

Tests:
    - Unique violation -> DuplicateResourceError (409)
    - Stock check constraint -> InsufficientStockError (400)
    - BookstoreError raised inside a session passes through after rollback
    - Health check reports the engine's reachability
"""

import pytest
from sqlalchemy import select, update

from bookstore.core.errors import (
    DuplicateResourceError,
    InsufficientStockError,
    ResourceNotFoundError,
)
from bookstore.infrastructure.database import DatabaseSessionManager
from bookstore.models.book import Book
from bookstore.models.user import User


@pytest.fixture
def manager(test_engine, test_session_factory):
    """Session manager bound to the in-memory test engine."""
    instance = DatabaseSessionManager.__new__(DatabaseSessionManager)
    instance.engine = test_engine
    instance._session_factory = test_session_factory
    return instance


async def test_unique_violation_becomes_duplicate(manager, user, count_rows):
    email = user.email
    with pytest.raises(DuplicateResourceError) as exc:
        async with manager.session() as db:
            db.add(User(email=email, password_hash="x"))
            await db.commit()
    assert exc.value.http_status == 409
    assert await count_rows(User) == 1


async def test_negative_stock_becomes_insufficient_stock(manager, make_book, stock_of):
    book = await make_book(stock=1)
    book_id = book.id
    with pytest.raises(InsufficientStockError) as exc:
        async with manager.session() as db:
            await db.execute(
                update(Book).where(Book.id == book_id).values(stock_quantity=-1),
            )
            await db.commit()
    assert exc.value.code == "INSUFFICIENT_STOCK"
    assert await stock_of(book_id) == 1


async def test_domain_error_passes_through_and_rolls_back(manager, make_book, stock_of):
    book = await make_book(stock=4)
    book_id = book.id
    with pytest.raises(ResourceNotFoundError):
        async with manager.session() as db:
            await db.execute(
                update(Book).where(Book.id == book_id).values(stock_quantity=0),
            )
            raise ResourceNotFoundError("Book", "elsewhere")
    assert await stock_of(book_id) == 4


async def test_health_check(manager):
    assert await manager.health_check() is True


async def test_session_reads(manager, make_book):
    book = await make_book(title="Readable")
    async with manager.session() as db:
        title = await db.scalar(select(Book.title).where(Book.id == book.id))
    assert title == "Readable"
