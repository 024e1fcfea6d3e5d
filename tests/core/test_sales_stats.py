"""Sales Statistics — verifies average order value and genre ranking.

Tests:
    - Empty input -> zeros and "N/A"
    - Average counts each order once, using current prices
    - Ties resolve to the lexicographically smallest genre name
"""

from decimal import Decimal
from types import SimpleNamespace
from uuid import uuid4

from bookstore.core.domain_types import NOT_APPLICABLE
from bookstore.core.sales_stats import (
    average_order_amount,
    compute_sales_statistics,
    quantity_by_genre,
    rank_genres,
)


def _book(price, status="active"):
    return SimpleNamespace(
        id=uuid4(), title="T", price=Decimal(price),
        stock_quantity=0, status=status,
    )


def _line(order_id, book_id, quantity):
    return SimpleNamespace(order_id=order_id, book_id=book_id, quantity=quantity)


def test_no_sales_reports_not_applicable():
    stats = compute_sales_statistics(0, [], {}, {}, {})
    assert stats.total_transactions == 0
    assert stats.average_transaction_amount == Decimal("0")
    assert stats.most_sold_genre == NOT_APPLICABLE
    assert stats.least_sold_genre == NOT_APPLICABLE


def test_average_over_orders_not_lines():
    cheap, pricey = _book("10.00"), _book("30.00")
    first, second = uuid4(), uuid4()
    lines = [
        _line(first, cheap.id, 1),
        _line(first, cheap.id, 1),
        _line(second, pricey.id, 2),
    ]
    avg = average_order_amount(lines, {cheap.id: cheap, pricey.id: pricey})
    assert avg == Decimal("40.00")


def test_average_treats_deleted_book_as_zero():
    gone = _book("50.00", status="deleted")
    live = _book("10.00")
    first, second = uuid4(), uuid4()
    lines = [_line(first, gone.id, 1), _line(second, live.id, 1)]
    avg = average_order_amount(lines, {gone.id: gone, live.id: live})
    assert avg == Decimal("5.00")


def test_quantity_rolls_up_per_genre():
    a, b, c = uuid4(), uuid4(), uuid4()
    totals = quantity_by_genre(
        {a: 3, b: 2, c: 7}, {a: "Fantasy", b: "Fantasy", c: "Horror"},
    )
    assert totals == {"Fantasy": 5, "Horror": 7}


def test_rank_picks_most_and_least():
    assert rank_genres({"Fantasy": 5, "Horror": 7, "Poetry": 1}) == (
        "Horror", "Poetry",
    )


def test_rank_ties_resolve_lexicographically():
    assert rank_genres({"Sci-Fi": 4, "Drama": 4}) == ("Drama", "Drama")


def test_single_genre_is_both_most_and_least():
    assert rank_genres({"Poetry": 2}) == ("Poetry", "Poetry")
