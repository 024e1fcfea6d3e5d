"""Sales Aggregator — statistics, paginated history and order detail (read path).

Invariants:
    - Read-only: never writes, never locks
    - Totals are derived in core/ from quantity × current book price (no stored totals)
    - Books are looked up by id without the status filter, so soft-deleted books still
      resolve and core/ decides how they degrade
    - History with amount sort loads the full filtered set in one joined query (never an
      id list bound back as parameters), then sorts and pages in memory;
      every other sort is pushed down (filter, order, count, offset/limit) to the datastore

Design Decisions:
    - Column selects (not ORM entities) for lines and books: rows satisfy the core
      protocols structurally and never go stale in the identity map
    - Order id search matches on the dash-less hex form, so the same substring works on
      PostgreSQL (native uuid) and SQLite (CHAR(32))
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from typing import Any, Iterable
from uuid import UUID

from sqlalchemy import String, cast, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from bookstore.core.domain_types import OrderId, SortDirection
from bookstore.core.errors import ErrorContext, ResourceNotFoundError
from bookstore.core.order_summary import (
    OrderDetail,
    OrderTotals,
    build_order_detail,
    sort_order_totals,
    summarize_order,
)
from bookstore.core.pagination import (
    PageMeta,
    build_page_meta,
    page_offset,
    slice_page,
)
from bookstore.core.sales_stats import SalesStatistics, compute_sales_statistics
from bookstore.models.book import Book
from bookstore.models.genre import Genre
from bookstore.models.order import Order
from bookstore.models.order_item import OrderItem

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class OrderPage:
    items: list[OrderTotals]
    meta: PageMeta


def _search_clause(search: str):
    term = search.replace("-", "").lower()
    hex_id = func.lower(func.replace(cast(Order.id, String), "-", ""))
    return hex_id.contains(term, autoescape=True)


class SalesAggregator:
    """Read path for transactions."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Statistics ──────────────────────────────────────────────

    async def get_statistics(self) -> SalesStatistics:
        total_transactions = await self.db.scalar(
            select(func.count()).select_from(Order),
        )
        lines = await self._line_rows()

        sold = await self.db.execute(
            select(OrderItem.book_id, func.sum(OrderItem.quantity))
            .group_by(OrderItem.book_id)
        )
        sold_per_book = {book_id: int(qty or 0) for book_id, qty in sold.all()}

        books_by_id = await self._book_rows(sold_per_book.keys())
        genre_name_by_book = await self._genre_names(sold_per_book.keys())

        return compute_sales_statistics(
            total_transactions=total_transactions or 0,
            lines=lines,
            books_by_id=books_by_id,
            sold_per_book=sold_per_book,
            genre_name_by_book=genre_name_by_book,
        )

    # ─── History ─────────────────────────────────────────────────

    async def list_orders(
        self,
        page: int,
        limit: int,
        search: str | None = None,
        sort_by_id: SortDirection | None = None,
        sort_by_amount: SortDirection | None = None,
    ) -> OrderPage:
        if sort_by_amount is not None:
            return await self._list_sorted_by_amount(page, limit, search, sort_by_amount)
        return await self._list_sorted_by_id(
            page, limit, search, sort_by_id or SortDirection.DESC,
        )

    async def _list_sorted_by_amount(
        self, page: int, limit: int, search: str | None, direction: SortDirection,
    ) -> OrderPage:
        # One row per line (or one bare row for an order without lines); each row
        # doubles as LineItemLike and, when its book exists, BookLike.
        query = (
            select(
                Order.id.label("order_id"),
                OrderItem.book_id,
                OrderItem.quantity,
                Book.id,
                Book.title,
                Book.price,
                Book.stock_quantity,
                Book.status,
            )
            .select_from(Order)
            .outerjoin(OrderItem, OrderItem.order_id == Order.id)
            .outerjoin(Book, Book.id == OrderItem.book_id)
        )
        if search:
            query = query.where(_search_clause(search))
        rows = (await self.db.execute(query)).all()

        lines_by_order: dict[UUID, list] = defaultdict(list)
        books_by_id: dict[UUID, Any] = {}
        for row in rows:
            lines = lines_by_order[row.order_id]
            if row.book_id is None:
                continue
            lines.append(row)
            if row.id is not None:
                books_by_id[row.book_id] = row
        logger.debug(f"Amount sort over {len(lines_by_order)} order(s)")

        totals = [
            summarize_order(order_id, lines, books_by_id)
            for order_id, lines in lines_by_order.items()
        ]
        ordered = sort_order_totals(totals, sort_by_amount=direction)
        return OrderPage(
            items=slice_page(ordered, page, limit),
            meta=build_page_meta(page, limit, len(ordered)),
        )

    async def _list_sorted_by_id(
        self, page: int, limit: int, search: str | None, direction: SortDirection,
    ) -> OrderPage:
        count_query = select(func.count()).select_from(Order)
        ids_query = select(Order.id)
        if search:
            count_query = count_query.where(_search_clause(search))
            ids_query = ids_query.where(_search_clause(search))

        total = await self.db.scalar(count_query) or 0
        id_order = Order.id.desc() if direction == SortDirection.DESC else Order.id.asc()
        ids_query = (
            ids_query.order_by(id_order)
            .offset(page_offset(page, limit))
            .limit(limit)
        )
        order_ids = list((await self.db.execute(ids_query)).scalars().all())

        totals = await self._summarize(order_ids)
        return OrderPage(
            items=sort_order_totals(totals, sort_by_id=direction),
            meta=build_page_meta(page, limit, total),
        )

    async def _summarize(self, order_ids: list[UUID]) -> list[OrderTotals]:
        if not order_ids:
            return []
        lines = await self._line_rows(order_ids)
        books_by_id = await self._book_rows({line.book_id for line in lines})

        lines_by_order: dict[UUID, list] = defaultdict(list)
        for line in lines:
            lines_by_order[line.order_id].append(line)
        return [
            summarize_order(order_id, lines_by_order.get(order_id, []), books_by_id)
            for order_id in order_ids
        ]

    # ─── Detail ──────────────────────────────────────────────────

    async def get_order(self, order_id: OrderId) -> OrderDetail:
        result = await self.db.execute(
            select(Order.id).where(Order.id == order_id),
        )
        if result.scalar_one_or_none() is None:
            raise ResourceNotFoundError(
                "Transaction", str(order_id), ErrorContext(order_id=str(order_id)),
            )
        lines = await self._line_rows([order_id])
        books_by_id = await self._book_rows({line.book_id for line in lines})
        return build_order_detail(order_id, lines, books_by_id)

    # ─── Row loaders ─────────────────────────────────────────────

    async def _line_rows(self, order_ids: list[UUID] | None = None) -> list[Any]:
        query = select(OrderItem.order_id, OrderItem.book_id, OrderItem.quantity)
        if order_ids is not None:
            query = query.where(OrderItem.order_id.in_(order_ids))
        query = query.order_by(OrderItem.order_id, OrderItem.line_number)
        return list((await self.db.execute(query)).all())

    async def _book_rows(self, book_ids: Iterable[UUID]) -> dict[UUID, Any]:
        ids = list(book_ids)
        if not ids:
            return {}
        result = await self.db.execute(
            select(
                Book.id, Book.title, Book.price, Book.stock_quantity, Book.status,
            ).where(Book.id.in_(ids))
        )
        return {row.id: row for row in result.all()}

    async def _genre_names(self, book_ids: Iterable[UUID]) -> dict[UUID, str]:
        ids = list(book_ids)
        if not ids:
            return {}
        result = await self.db.execute(
            select(Book.id, Genre.name)
            .join(Genre, Book.genre_id == Genre.id)
            .where(Book.id.in_(ids))
        )
        return {book_id: name for book_id, name in result.all()}
