"""Database Session Manager — async connection pool, rollback on failure, error translation.

Invariants:
    - Every session rolls back on exception (no partial commits leak)
    - Unique-constraint violations surface as DuplicateResourceError (409)
    - A violated ck_books_stock_non_negative surfaces as InsufficientStockError (400)
    - Every other SQLAlchemy exception surfaces as DatabaseError (500)
    - BookstoreError raised inside a session passes through unchanged (after rollback)

Design Decisions:
    - Singleton db_manager initialized and disposed by the FastAPI lifespan
    - expire_on_commit=False: prevents lazy-load issues in async context
    - Constraint detection reads the driver message: both asyncpg and sqlite name the
      violated constraint, and only named constraints are matched
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from bookstore.core.errors import (
    BookstoreError,
    DatabaseError,
    DuplicateResourceError,
    InsufficientStockError,
)

logger = logging.getLogger(__name__)

STOCK_CONSTRAINT = "ck_books_stock_non_negative"


def translate_db_error(exc: SQLAlchemyError) -> BookstoreError:
    """Map a SQLAlchemy failure onto the bookstore error hierarchy."""
    if isinstance(exc, IntegrityError):
        detail = str(exc.orig).lower()
        if STOCK_CONSTRAINT in detail:
            return InsufficientStockError()
        if "unique" in detail or "duplicate key" in detail:
            return DuplicateResourceError("Resource already exists")
        return DatabaseError("Integrity constraint violated", "commit")
    if isinstance(exc, OperationalError):
        return DatabaseError("Connection or operational error", "execute")
    if isinstance(exc, DBAPIError):
        return DatabaseError("Database driver error", "query")
    return DatabaseError("Database operation failed", "unknown")


class DatabaseSessionManager:
    """Owns the engine and hands out sessions that translate DB failures."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        engine_options = {"pool_pre_ping": True}
        if not database_url.startswith("sqlite"):
            engine_options.update(
                pool_size=pool_size, max_overflow=max_overflow, pool_recycle=3600,
            )
        self.engine = create_async_engine(database_url, **engine_options)
        self._session_factory = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        session = self._session_factory()
        try:
            yield session
        except SQLAlchemyError as e:
            await session.rollback()
            error = translate_db_error(e)
            log = logger.error if error.http_status >= 500 else logger.warning
            log(f"DB error ({type(e).__name__}): {e}", extra={"error_code": error.code})
            raise error from e
        except BookstoreError:
            await session.rollback()
            raise
        finally:
            await session.close()

    async def health_check(self) -> bool:
        """SELECT 1 through a fresh session; False on any failure."""
        try:
            async with self.session() as db:
                await db.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.error(f"DB health check failed: {e}")
            return False

    async def dispose(self) -> None:
        await self.engine.dispose()


# Singleton (initialized on startup)
db_manager: DatabaseSessionManager | None = None


def init_db(database_url: str, **kwargs):
    global db_manager
    db_manager = DatabaseSessionManager(database_url, **kwargs)


async def close_db() -> None:
    global db_manager
    if db_manager:
        await db_manager.dispose()
        db_manager = None


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency for database sessions."""
    if not db_manager:
        raise RuntimeError("Database not initialized")
    async with db_manager.session() as session:
        yield session
