"""Transaction Routes — order placement, statistics, history and detail.

Invariants:
    - Every endpoint requires an authenticated user (bearer token)
    - Routes only translate HTTP <-> service calls; all rules live in services/ and core/
    - /statistics is registered before /{transaction_id} so it is never captured as an id
    - An unparseable transaction id is reported as 404, same as an unknown one
"""

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from bookstore.api.identity import get_current_user_id
from bookstore.config import get_settings
from bookstore.core.domain_types import OrderId, SortDirection, UserId
from bookstore.core.errors import ErrorContext, ResourceNotFoundError
from bookstore.core.order_validation import RequestedItem
from bookstore.infrastructure.database import get_db
from bookstore.schemas.envelope import ApiResponse, PagedResponse, PageMetaOut
from bookstore.schemas.transaction import (
    TransactionCreate,
    TransactionCreated,
    TransactionDetail,
    TransactionLine,
    TransactionStatistics,
    TransactionSummary,
)
from bookstore.services.order_placement import OrderPlacementService
from bookstore.services.sales_aggregator import SalesAggregator

router = APIRouter(prefix="/transactions", tags=["transactions"])

_settings = get_settings()


def _parse_transaction_id(transaction_id: str) -> OrderId:
    try:
        return OrderId(UUID(transaction_id))
    except ValueError:
        raise ResourceNotFoundError(
            "Transaction", transaction_id, ErrorContext(order_id=transaction_id),
        )


@router.post(
    "", response_model=ApiResponse[TransactionCreated],
    status_code=status.HTTP_201_CREATED,
)
async def create_transaction(
    body: TransactionCreate,
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Place an order for the authenticated user."""
    placed = await OrderPlacementService(db).place_order(
        user_id,
        [RequestedItem(book_id=i.book_id, quantity=i.quantity) for i in body.items],
    )
    return ApiResponse[TransactionCreated](
        message="Transaction created successfully",
        data=TransactionCreated(
            transaction_id=placed.order_id,
            total_quantity=placed.total_quantity,
            total_price=placed.total_price,
        ),
    )


@router.get(
    "/statistics", response_model=ApiResponse[TransactionStatistics],
)
async def get_transaction_statistics(
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Order count, average order value, most/least sold genre."""
    stats = await SalesAggregator(db).get_statistics()
    return ApiResponse[TransactionStatistics](
        message="Get transactions statistics successfully",
        data=TransactionStatistics(
            total_transactions=stats.total_transactions,
            average_transaction_amount=stats.average_transaction_amount,
            fewest_book_sales_genre=stats.least_sold_genre,
            most_book_sales_genre=stats.most_sold_genre,
        ),
    )


@router.get("", response_model=PagedResponse[list[TransactionSummary]])
async def list_transactions(
    page: int = Query(1, ge=1),
    limit: int = Query(_settings.default_page_limit, ge=1),
    search: str | None = Query(None, max_length=64),
    order_by_id: SortDirection | None = Query(None, alias="orderById"),
    order_by_amount: SortDirection | None = Query(None, alias="orderByAmount"),
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Paginated order history with derived totals."""
    result = await SalesAggregator(db).list_orders(
        page=page,
        limit=limit,
        search=search,
        sort_by_id=order_by_id,
        sort_by_amount=order_by_amount,
    )
    meta = result.meta
    return PagedResponse[list[TransactionSummary]](
        message="Get all transaction successfully",
        data=[
            TransactionSummary(
                id=t.id, total_quantity=t.total_quantity, total_price=t.total_price,
            )
            for t in result.items
        ],
        meta=PageMetaOut(
            page=meta.page,
            limit=meta.limit,
            total=meta.total,
            prev_page=meta.prev_page,
            next_page=meta.next_page,
        ),
    )


@router.get(
    "/{transaction_id}", response_model=ApiResponse[TransactionDetail],
)
async def get_transaction(
    transaction_id: str,
    user_id: UserId = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
):
    """Order detail; lines whose book was deleted show a placeholder."""
    detail = await SalesAggregator(db).get_order(
        _parse_transaction_id(transaction_id),
    )
    return ApiResponse[TransactionDetail](
        message="Get transaction detail successfully",
        data=TransactionDetail(
            id=detail.id,
            items=[
                TransactionLine(
                    book_id=line.book_id,
                    book_title=line.book_title,
                    quantity=line.quantity,
                    subtotal_price=line.subtotal_price,
                )
                for line in detail.items
            ],
            total_quantity=detail.total_quantity,
            total_price=detail.total_price,
        ),
    )
