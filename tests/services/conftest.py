"""Service test fixtures — async DB, FastAPI test client, catalog/order seeding.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use test DB session
    - db_manager patched so the readiness probe sees the test engine
    - Seeding helpers commit, so data is visible to the client's own sessions

Design Decisions:
    - SQLite in-memory: fast, no external dependency, sufficient for route tests
    - Stock is always read back with a column select (stock_of), never from a cached
      ORM instance: order placement updates stock without touching the identity map
"""

from decimal import Decimal

import pytest
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import create_async_engine
from httpx import ASGITransport, AsyncClient

from bookstore.config import get_settings
from bookstore.core.domain_types import UserId
from bookstore.db.base import Base
from bookstore.db.session import create_session_factory
from bookstore.infrastructure.database import get_db, DatabaseSessionManager
from bookstore.infrastructure.security import create_access_token, hash_password
from bookstore.models.book import Book
from bookstore.models.genre import Genre
from bookstore.models.order import Order
from bookstore.models.order_item import OrderItem
from bookstore.models.user import User
import bookstore.infrastructure.database as db_module
from bookstore.main import app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return create_session_factory(engine=test_engine)


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_engine, test_session_factory):
    """FastAPI test client with DB dependency overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db

    original_manager = db_module.db_manager
    fake_manager = DatabaseSessionManager.__new__(DatabaseSessionManager)
    fake_manager.engine = test_engine
    fake_manager._session_factory = test_session_factory
    db_module.db_manager = fake_manager

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    db_module.db_manager = original_manager


# ─── Seeding ─────────────────────────────────────────────────────

@pytest.fixture
async def user(test_db):
    """A registered user (password: secret123)."""
    account = User(
        username="reader",
        email="reader@example.com",
        password_hash=hash_password("secret123"),
    )
    test_db.add(account)
    await test_db.commit()
    await test_db.refresh(account)
    return account


@pytest.fixture
def auth_headers(user):
    token = create_access_token(UserId(user.id), get_settings())
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def make_genre(test_db):
    async def _make(name: str = "Fiction") -> Genre:
        genre = Genre(name=name)
        test_db.add(genre)
        await test_db.commit()
        await test_db.refresh(genre)
        return genre
    return _make


@pytest.fixture
def make_book(test_db, make_genre):
    async def _make(
        title: str = "Book",
        price: str = "10.00",
        stock: int = 5,
        genre: Genre | None = None,
    ) -> Book:
        if genre is None:
            genre = await make_genre(f"Genre of {title}")
        book = Book(
            title=title,
            writer="Writer",
            publisher="Publisher",
            publication_year=2020,
            price=Decimal(price),
            stock_quantity=stock,
            genre_id=genre.id,
        )
        test_db.add(book)
        await test_db.commit()
        await test_db.refresh(book)
        return book
    return _make


@pytest.fixture
def make_order(test_db, user):
    """Insert an order directly: lines is a list of (book, quantity)."""
    async def _make(lines) -> Order:
        order = Order(user_id=user.id)
        test_db.add(order)
        await test_db.flush()
        for position, (book, quantity) in enumerate(lines):
            test_db.add(OrderItem(
                order_id=order.id, book_id=book.id,
                quantity=quantity, line_number=position,
            ))
        await test_db.commit()
        return order
    return _make


@pytest.fixture
def stock_of(test_db):
    async def _stock(book_id) -> int:
        return await test_db.scalar(
            select(Book.stock_quantity).where(Book.id == book_id),
        )
    return _stock


@pytest.fixture
def count_rows(test_db):
    async def _count(model) -> int:
        return await test_db.scalar(select(func.count()).select_from(model))
    return _count
