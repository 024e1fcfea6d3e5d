"""Catalog Schemas — genre and book payloads.

Invariants:
    - Genre names and book titles are stripped and non-empty
    - price >= 0 and stock_quantity >= 0 on create and update
    - BookUpdate only touches description, price and stock_quantity
"""

from datetime import datetime
from decimal import Decimal
from uuid import UUID

from pydantic import BaseModel, Field, field_serializer, field_validator


def _strip_required(v: str) -> str:
    v = v.strip()
    if not v:
        raise ValueError("value cannot be empty or whitespace")
    return v


# --- Genre --------------------------------------------------------------------

class GenreWrite(BaseModel):
    """Body for POST /genre and PATCH /genre/{id}."""
    name: str = Field(min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return _strip_required(v)


class GenreOut(BaseModel):
    id: UUID
    name: str


class GenreCreated(GenreOut):
    created_at: datetime


class GenreUpdated(GenreOut):
    updated_at: datetime


# --- Book ---------------------------------------------------------------------

class BookCreate(BaseModel):
    title: str = Field(min_length=1, max_length=255)
    writer: str = Field(min_length=1, max_length=255)
    publisher: str = Field(min_length=1, max_length=255)
    publication_year: int = Field(ge=0, le=9999)
    description: str | None = None
    price: Decimal = Field(ge=0, max_digits=12, decimal_places=2)
    stock_quantity: int = Field(ge=0)
    genre_id: UUID

    @field_validator("title", "writer", "publisher")
    @classmethod
    def strip_text(cls, v: str) -> str:
        return _strip_required(v)


class BookUpdate(BaseModel):
    description: str | None = None
    price: Decimal | None = Field(None, ge=0, max_digits=12, decimal_places=2)
    stock_quantity: int | None = Field(None, ge=0)


class BookOut(BaseModel):
    id: UUID
    title: str
    writer: str
    publisher: str
    description: str | None
    publication_year: int
    price: Decimal
    stock_quantity: int
    genre: str

    @field_serializer("price")
    def _price_as_number(self, value: Decimal) -> float:
        return float(value)


class BookCreated(BaseModel):
    id: UUID
    title: str
    created_at: datetime


class BookUpdated(BaseModel):
    id: UUID
    title: str
    updated_at: datetime
