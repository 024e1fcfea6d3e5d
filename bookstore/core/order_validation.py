"""Order Validation — pure existence/stock check that turns a request into an OrderPlan.

Invariants:
    - All functions are pure (no IO, no async, no DB)
    - Items are checked in request order; the first failure wins (errors never aggregated)
    - Empty items or a non-positive quantity -> InvalidRequestError before any lookup
    - Missing or soft-deleted book -> ResourceNotFoundError naming the book id
    - Quantity above remaining stock -> InsufficientStockError naming the book title
    - Totals use the book's current price and are for the response only (never persisted)
    - stock_decrements yields one decrement per book, ascending by book id

Design Decisions:
    - Remaining stock is tracked per book while walking the items, so a book listed
      twice is checked against its combined quantity (same rule the guarded decrement
      enforces at write time)
    - The plan carries book titles so a write-time stock conflict can name the book
    - Lines keep request order (they become the persisted line items); decrements are
      re-grouped and sorted so every order locks book rows in the same sequence
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Sequence

from bookstore.core.domain_types import BookId, Money, RecordStatus, ZERO_MONEY
from bookstore.core.errors import (
    ErrorContext,
    InsufficientStockError,
    InvalidRequestError,
    ResourceNotFoundError,
)
from bookstore.core.repository_protocols import BookLike


@dataclass(frozen=True)
class RequestedItem:
    """One (book, quantity) pair as submitted by the client."""
    book_id: BookId
    quantity: int


@dataclass(frozen=True)
class PlannedLine:
    """A validated line: what will be written as an order item."""
    book_id: BookId
    book_title: str
    quantity: int


@dataclass(frozen=True)
class OrderPlan:
    """Result of the validation pass — input to the atomic commit."""
    lines: tuple[PlannedLine, ...]
    total_quantity: int
    total_price: Money


@dataclass(frozen=True)
class StockDecrement:
    """Combined quantity to take from one book's stock."""
    book_id: BookId
    book_title: str
    quantity: int


def requested_book_ids(items: Sequence[RequestedItem]) -> list[BookId]:
    """Distinct book ids in first-seen order, for a single batch lookup."""
    return list(dict.fromkeys(item.book_id for item in items))


def is_active(record: BookLike) -> bool:
    return RecordStatus(record.status) == RecordStatus.ACTIVE


def check_items_shape(items: Sequence[RequestedItem] | None) -> None:
    """Reject absent/empty item lists and non-positive quantities."""
    if not items:
        raise InvalidRequestError(
            "Items array is required and cannot be empty", "items",
        )
    for index, item in enumerate(items):
        quantity = item.quantity
        if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
            raise InvalidRequestError(
                f"Quantity for item {index} must be a positive integer",
                f"items.{index}.quantity",
            )


def plan_order(
    items: Sequence[RequestedItem], books: Iterable[BookLike],
) -> OrderPlan:
    """Validate items against the fetched books and accumulate response totals."""
    check_items_shape(items)

    by_id = {book.id: book for book in books if is_active(book)}
    remaining: dict[BookId, int] = {}
    lines: list[PlannedLine] = []
    total_quantity = 0
    total_price = ZERO_MONEY

    for item in items:
        book = by_id.get(item.book_id)
        if book is None:
            raise ResourceNotFoundError(
                "Book", str(item.book_id),
                ErrorContext(book_id=str(item.book_id)),
            )
        available = remaining.get(book.id, book.stock_quantity)
        if available < item.quantity:
            raise InsufficientStockError(
                book.title, ErrorContext(book_id=str(book.id)),
            )
        remaining[book.id] = available - item.quantity

        lines.append(PlannedLine(
            book_id=BookId(book.id),
            book_title=book.title,
            quantity=item.quantity,
        ))
        total_quantity += item.quantity
        total_price = Money(total_price + Decimal(book.price) * item.quantity)

    return OrderPlan(
        lines=tuple(lines),
        total_quantity=total_quantity,
        total_price=total_price,
    )


def stock_decrements(plan: OrderPlan) -> list[StockDecrement]:
    """Sum quantities per book and order the result by book id."""
    combined: dict[BookId, StockDecrement] = {}
    for line in plan.lines:
        seen = combined.get(line.book_id)
        combined[line.book_id] = StockDecrement(
            book_id=line.book_id,
            book_title=line.book_title,
            quantity=line.quantity + (seen.quantity if seen else 0),
        )
    return [combined[book_id] for book_id in sorted(combined)]
