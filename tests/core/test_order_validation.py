"""Order Validation — verifies the pure existence/stock pass that precedes any write.

Tests:
    - Empty items and non-positive quantities rejected before lookups
    - Unknown and soft-deleted books -> ResourceNotFoundError
    - Quantity above stock -> InsufficientStockError naming the title
    - First failing item wins
    - Totals use current price; duplicate book ids checked against combined quantity
    - Stock decrements are grouped per book and ordered by book id
"""

from decimal import Decimal
from types import SimpleNamespace
from uuid import UUID, uuid4

import pytest

from bookstore.core.errors import (
    InsufficientStockError,
    InvalidRequestError,
    ResourceNotFoundError,
)
from bookstore.core.order_validation import (
    RequestedItem,
    check_items_shape,
    plan_order,
    requested_book_ids,
    stock_decrements,
)


def _book(title="Dune", price="10.00", stock=5, status="active"):
    return SimpleNamespace(
        id=uuid4(), title=title, price=Decimal(price),
        stock_quantity=stock, status=status,
    )


# ─── Shape ───────────────────────────────────────────────────────

@pytest.mark.parametrize("items", [None, []])
def test_empty_items_rejected(items):
    with pytest.raises(InvalidRequestError) as exc:
        check_items_shape(items)
    assert exc.value.message == "Items array is required and cannot be empty"
    assert exc.value.field == "items"
    assert exc.value.http_status == 400


@pytest.mark.parametrize("quantity", [0, -3, True, 1.5])
def test_non_positive_or_non_integer_quantity_rejected(quantity):
    items = [RequestedItem(uuid4(), 1), RequestedItem(uuid4(), quantity)]
    with pytest.raises(InvalidRequestError) as exc:
        check_items_shape(items)
    assert exc.value.field == "items.1.quantity"


def test_shape_check_runs_before_book_lookup():
    """A bad quantity is reported even when the book does not exist."""
    with pytest.raises(InvalidRequestError):
        plan_order([RequestedItem(uuid4(), 0)], [])


# ─── Existence & stock ───────────────────────────────────────────

def test_unknown_book_not_found():
    missing = uuid4()
    with pytest.raises(ResourceNotFoundError) as exc:
        plan_order([RequestedItem(missing, 1)], [])
    assert exc.value.message == f"Book with ID {missing} not found"
    assert exc.value.http_status == 404


def test_soft_deleted_book_treated_as_missing():
    book = _book(status="deleted")
    with pytest.raises(ResourceNotFoundError):
        plan_order([RequestedItem(book.id, 1)], [book])


def test_insufficient_stock_names_title():
    book = _book(title="Dune", stock=2)
    with pytest.raises(InsufficientStockError) as exc:
        plan_order([RequestedItem(book.id, 3)], [book])
    assert exc.value.message == 'Insufficient stock for book: "Dune"'
    assert exc.value.code == "INSUFFICIENT_STOCK"


def test_quantity_equal_to_stock_is_allowed():
    book = _book(stock=2)
    plan = plan_order([RequestedItem(book.id, 2)], [book])
    assert plan.total_quantity == 2


def test_first_failing_item_wins():
    short = _book(title="Short", stock=0)
    missing = uuid4()
    with pytest.raises(InsufficientStockError):
        plan_order(
            [RequestedItem(short.id, 1), RequestedItem(missing, 1)], [short],
        )


def test_duplicate_book_checked_against_combined_quantity():
    book = _book(title="Twice", stock=3)
    with pytest.raises(InsufficientStockError):
        plan_order(
            [RequestedItem(book.id, 2), RequestedItem(book.id, 2)], [book],
        )


# ─── Totals ──────────────────────────────────────────────────────

def test_totals_use_current_price():
    a = _book(title="A", price="10.00", stock=5)
    b = _book(title="B", price="20.00", stock=2)
    plan = plan_order(
        [RequestedItem(a.id, 2), RequestedItem(b.id, 1)], [a, b],
    )
    assert plan.total_quantity == 3
    assert plan.total_price == Decimal("40.00")
    assert [line.book_title for line in plan.lines] == ["A", "B"]
    assert [line.quantity for line in plan.lines] == [2, 1]


def test_decimal_prices_do_not_drift():
    book = _book(price="0.10", stock=10)
    plan = plan_order([RequestedItem(book.id, 3)], [book])
    assert plan.total_price == Decimal("0.30")


def test_requested_book_ids_are_distinct_in_order():
    a, b = uuid4(), uuid4()
    items = [RequestedItem(a, 1), RequestedItem(b, 1), RequestedItem(a, 2)]
    assert requested_book_ids(items) == [a, b]


# ─── Stock decrements ────────────────────────────────────────────

def _book_with_id(hex_digit, title, stock=10):
    book = _book(title=title, stock=stock)
    book.id = UUID(hex_digit * 32)
    return book


def test_decrements_follow_book_id_not_request_order():
    low = _book_with_id("1", "Low")
    high = _book_with_id("f", "High")

    forward = plan_order(
        [RequestedItem(low.id, 1), RequestedItem(high.id, 2)], [low, high],
    )
    backward = plan_order(
        [RequestedItem(high.id, 2), RequestedItem(low.id, 1)], [low, high],
    )

    expected = [(low.id, 1), (high.id, 2)]
    assert [(d.book_id, d.quantity) for d in stock_decrements(forward)] == expected
    assert [(d.book_id, d.quantity) for d in stock_decrements(backward)] == expected
    assert [line.book_title for line in backward.lines] == ["High", "Low"]


def test_decrements_combine_repeated_book():
    book = _book_with_id("a", "Twice", stock=5)
    other = _book_with_id("2", "Other", stock=5)
    plan = plan_order(
        [
            RequestedItem(book.id, 2),
            RequestedItem(other.id, 1),
            RequestedItem(book.id, 3),
        ],
        [book, other],
    )

    decrements = stock_decrements(plan)
    assert [(d.book_title, d.quantity) for d in decrements] == [
        ("Other", 1), ("Twice", 5),
    ]
    assert len(plan.lines) == 3
