"""Order Summary — pure per-order totals derived from line items and current book prices.

Invariants:
    - All functions are pure (no IO, no async, no DB)
    - Price is never read from the line item: subtotal = quantity × book's current price
    - A line whose book is missing or soft-deleted -> DELETED_BOOK_TITLE, zero subtotal,
      quantity still counted toward total_quantity
    - Same rule for detail, history and the statistics average (views always agree)

Design Decisions:
    - Amount sort breaks ties by order id ascending so paging is deterministic
    - Id sort compares str(UUID): lexicographic, identical to the datastore's uuid ordering
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping
from uuid import UUID

from bookstore.core.domain_types import (
    DELETED_BOOK_TITLE,
    Money,
    SortDirection,
    ZERO_MONEY,
)
from bookstore.core.order_validation import is_active
from bookstore.core.repository_protocols import BookLike, LineItemLike


@dataclass(frozen=True)
class LineView:
    """A line item resolved against the current catalog."""
    book_id: UUID
    book_title: str
    quantity: int
    subtotal_price: Money


@dataclass(frozen=True)
class OrderTotals:
    """Derived totals for one order (history row)."""
    id: UUID
    total_quantity: int
    total_price: Money


@dataclass(frozen=True)
class OrderDetail:
    id: UUID
    items: tuple[LineView, ...]
    total_quantity: int
    total_price: Money


def resolve_line(line: LineItemLike, book: BookLike | None) -> LineView:
    """Resolve title and subtotal; deleted books degrade instead of failing."""
    if book is None or not is_active(book):
        return LineView(
            book_id=line.book_id,
            book_title=DELETED_BOOK_TITLE,
            quantity=line.quantity,
            subtotal_price=ZERO_MONEY,
        )
    return LineView(
        book_id=line.book_id,
        book_title=book.title,
        quantity=line.quantity,
        subtotal_price=Money(Decimal(book.price) * line.quantity),
    )


def build_order_detail(
    order_id: UUID,
    lines: Iterable[LineItemLike],
    books_by_id: Mapping[UUID, BookLike],
) -> OrderDetail:
    views = tuple(resolve_line(line, books_by_id.get(line.book_id)) for line in lines)
    return OrderDetail(
        id=order_id,
        items=views,
        total_quantity=sum(v.quantity for v in views),
        total_price=Money(sum((v.subtotal_price for v in views), ZERO_MONEY)),
    )


def summarize_order(
    order_id: UUID,
    lines: Iterable[LineItemLike],
    books_by_id: Mapping[UUID, BookLike],
) -> OrderTotals:
    """Collapse an order's lines into its history row."""
    detail = build_order_detail(order_id, lines, books_by_id)
    return OrderTotals(
        id=detail.id,
        total_quantity=detail.total_quantity,
        total_price=detail.total_price,
    )


def sort_order_totals(
    totals: Iterable[OrderTotals],
    sort_by_id: SortDirection | None = None,
    sort_by_amount: SortDirection | None = None,
) -> list[OrderTotals]:
    """Amount sort wins over id sort; default is id descending."""
    if sort_by_amount is not None:
        by_id = sorted(totals, key=lambda t: str(t.id))
        return sorted(
            by_id,
            key=lambda t: t.total_price,
            reverse=sort_by_amount == SortDirection.DESC,
        )
    direction = sort_by_id or SortDirection.DESC
    return sorted(
        totals,
        key=lambda t: str(t.id),
        reverse=direction == SortDirection.DESC,
    )
