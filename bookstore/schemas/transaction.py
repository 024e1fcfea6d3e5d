"""Transaction Schemas — order placement input and reporting output.

Invariants:
    - TransactionCreate.items: at least 1 item; each quantity is a strict positive int
    - book_id must be a UUID (malformed ids are rejected as invalid input, not 404)
    - Money leaves the API as a JSON number (float); Decimal stays inside core/services
"""

from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_serializer


class TransactionItemIn(BaseModel):
    book_id: UUID
    quantity: int = Field(gt=0, strict=True)


class TransactionCreate(BaseModel):
    """POST /transactions body."""
    items: list[TransactionItemIn] = Field(min_length=1)


class _MoneyModel(BaseModel):
    """Serializes Decimal money fields as JSON numbers."""

    @field_serializer(
        "total_price", "subtotal_price", "average_transaction_amount",
        check_fields=False,
    )
    def _money_as_number(self, value: Decimal) -> float:
        return float(value)


class TransactionCreated(_MoneyModel):
    transaction_id: UUID
    total_quantity: int
    total_price: Decimal


class TransactionStatistics(_MoneyModel):
    total_transactions: int
    average_transaction_amount: Decimal
    fewest_book_sales_genre: str
    most_book_sales_genre: str


class TransactionSummary(_MoneyModel):
    """History row."""
    id: UUID
    total_quantity: int
    total_price: Decimal


class TransactionLine(_MoneyModel):
    book_id: UUID
    book_title: str
    quantity: int
    subtotal_price: Decimal


class TransactionDetail(_MoneyModel):
    id: UUID
    items: list[TransactionLine]
    total_quantity: int
    total_price: Decimal
