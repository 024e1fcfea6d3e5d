"""Order Placement — validates requested items and commits order, items and stock atomically.

Invariants:
    - Validation (shape, existence, stock) happens before any write
    - The write is one transaction: order row + one row per item + guarded stock decrements
    - One decrement per book, issued in ascending book id order (never request order)
    - Guarded decrement: UPDATE ... WHERE stock_quantity >= quantity AND status = 'active';
      zero rows matched -> rollback + InsufficientStockError (stock never goes negative)
    - Any other DB failure -> rollback + DatabaseError; nothing partial is ever committed
    - Returned totals come from the validation pass, not re-read from storage

Design Decisions:
    - The pre-write stock check is advisory; the guard is what holds under concurrent orders
    - synchronize_session=False on the decrement: callers never re-read stock from this
      session's identity map after placing an order
"""

import logging
from dataclasses import dataclass
from typing import Sequence
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from bookstore.core.domain_types import Money, OrderId, RecordStatus, UserId
from bookstore.core.errors import (
    DatabaseError,
    ErrorContext,
    InsufficientStockError,
)
from bookstore.core.order_validation import (
    OrderPlan,
    StockDecrement,
    RequestedItem,
    check_items_shape,
    plan_order,
    requested_book_ids,
    stock_decrements,
)
from bookstore.models.book import Book
from bookstore.models.order import Order
from bookstore.models.order_item import OrderItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlacedOrder:
    order_id: OrderId
    total_quantity: int
    total_price: Money


class OrderPlacementService:
    """Write path for transactions."""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def place_order(
        self, user_id: UserId, items: Sequence[RequestedItem],
    ) -> PlacedOrder:
        """Validate, then create the order atomically. Raises BookstoreError subclasses."""
        check_items_shape(items)
        books = await self.fetch_active_books(requested_book_ids(items))
        plan = plan_order(items, books)
        order_id = await self.commit_order(user_id, plan)
        return PlacedOrder(
            order_id=order_id,
            total_quantity=plan.total_quantity,
            total_price=plan.total_price,
        )

    async def fetch_active_books(self, book_ids: list[UUID]) -> list[Book]:
        """Batch lookup of non-deleted books."""
        result = await self.db.execute(
            select(Book)
            .where(Book.id.in_(book_ids))
            .where(Book.status == RecordStatus.ACTIVE.value)
        )
        return list(result.scalars().all())

    async def commit_order(self, user_id: UserId, plan: OrderPlan) -> OrderId:
        """Single unit of work: order, items, guarded decrements, commit."""
        try:
            order = Order(user_id=user_id)
            self.db.add(order)
            await self.db.flush()

            self.db.add_all([
                OrderItem(
                    order_id=order.id,
                    book_id=line.book_id,
                    quantity=line.quantity,
                    line_number=position,
                )
                for position, line in enumerate(plan.lines)
            ])
            for decrement in stock_decrements(plan):
                await self._decrement_stock(decrement, user_id)

            await self.db.commit()
        except InsufficientStockError:
            await self.db.rollback()
            raise
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(
                f"Order commit failed: {e}",
                exc_info=True, extra={"user_id": user_id},
            )
            raise DatabaseError(
                "Transaction could not be created", "commit",
                ErrorContext(user_id=str(user_id)),
            )

        logger.info(
            f"Order placed with {len(plan.lines)} item(s)",
            extra={"user_id": user_id, "order_id": order.id},
        )
        return OrderId(order.id)

    async def _decrement_stock(
        self, decrement: StockDecrement, user_id: UserId,
    ) -> None:
        result = await self.db.execute(
            update(Book)
            .where(Book.id == decrement.book_id)
            .where(Book.status == RecordStatus.ACTIVE.value)
            .where(Book.stock_quantity >= decrement.quantity)
            .values(stock_quantity=Book.stock_quantity - decrement.quantity)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            logger.warning(
                "Stock changed between check and write; rolling back order",
                extra={"user_id": user_id, "book_id": decrement.book_id},
            )
            raise InsufficientStockError(
                decrement.book_title,
                ErrorContext(user_id=str(user_id), book_id=str(decrement.book_id)),
            )
