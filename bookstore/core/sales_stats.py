"""Sales Statistics — pure aggregation of average order value and genre ranking.

Invariants:
    - All functions are pure (no IO, no async, no DB)
    - Average is over orders with at least one line item; no such orders -> 0
    - No sales at all -> most/least sold genre both NOT_APPLICABLE ("N/A")
    - Never raises on empty input

Design Decisions:
    - Quantities are summed per book first, then per genre (books without a resolvable
      genre are skipped)
    - Ties on quantity resolve to the lexicographically smallest genre name, for both
      the most and the least sold genre
    - Per-order totals reuse order_summary.resolve_line so the average agrees with
      the history and detail views
"""

from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Mapping
from uuid import UUID

from bookstore.core.domain_types import Money, NOT_APPLICABLE, ZERO_MONEY
from bookstore.core.order_summary import resolve_line
from bookstore.core.repository_protocols import BookLike, LineItemLike


@dataclass(frozen=True)
class SalesStatistics:
    total_transactions: int
    average_transaction_amount: Money
    most_sold_genre: str
    least_sold_genre: str


def average_order_amount(
    lines: Iterable[LineItemLike], books_by_id: Mapping[UUID, BookLike],
) -> Money:
    """Group line subtotals by order id and average the per-order sums."""
    per_order: dict[UUID, Decimal] = defaultdict(lambda: ZERO_MONEY)
    for line in lines:
        view = resolve_line(line, books_by_id.get(line.book_id))
        per_order[line.order_id] += view.subtotal_price
    if not per_order:
        return ZERO_MONEY
    return Money(sum(per_order.values(), ZERO_MONEY) / len(per_order))


def quantity_by_genre(
    sold_per_book: Mapping[UUID, int], genre_name_by_book: Mapping[UUID, str],
) -> dict[str, int]:
    totals: dict[str, int] = defaultdict(int)
    for book_id, quantity in sold_per_book.items():
        genre_name = genre_name_by_book.get(book_id)
        if genre_name is None:
            continue
        totals[genre_name] += quantity
    return dict(totals)


def rank_genres(genre_totals: Mapping[str, int]) -> tuple[str, str]:
    """Return (most_sold, least_sold) with lexicographic tie-break."""
    if not genre_totals:
        return NOT_APPLICABLE, NOT_APPLICABLE
    most = min(genre_totals, key=lambda name: (-genre_totals[name], name))
    least = min(genre_totals, key=lambda name: (genre_totals[name], name))
    return most, least


def compute_sales_statistics(
    total_transactions: int,
    lines: Iterable[LineItemLike],
    books_by_id: Mapping[UUID, BookLike],
    sold_per_book: Mapping[UUID, int],
    genre_name_by_book: Mapping[UUID, str],
) -> SalesStatistics:
    most, least = rank_genres(quantity_by_genre(sold_per_book, genre_name_by_book))
    return SalesStatistics(
        total_transactions=total_transactions,
        average_transaction_amount=average_order_amount(lines, books_by_id),
        most_sold_genre=most,
        least_sold_genre=least,
    )
