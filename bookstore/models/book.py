"""Book ORM — a purchasable catalog item with price and stock.

Invariants:
    - Always belongs to a Genre (genre_id FK)
    - stock_quantity >= 0 (DB check constraint; the order engine decrements with a guard)
    - price is Numeric(12, 2) and read back as Decimal
    - status is one of RecordStatus (active | deleted); rows are never physically removed

Design Decisions:
    - genre loaded with selectin: book detail always shows the genre name
    - Line items reference books by id only, so a soft-deleted book stays resolvable
"""

import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import (
    String, Text, Integer, Numeric, DateTime, ForeignKey, CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from bookstore.core.domain_types import RecordStatus
from bookstore.db.base import Base


class Book(Base):
    """Book entity (soft-deletable)."""
    __tablename__ = "books"
    __table_args__ = (
        CheckConstraint("stock_quantity >= 0", name="ck_books_stock_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    writer: Mapped[str] = mapped_column(String(255), nullable=False)
    publisher: Mapped[str] = mapped_column(String(255), nullable=False)
    publication_year: Mapped[int] = mapped_column(Integer, nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    stock_quantity: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0,
    )
    genre_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("genres.id"), nullable=False,
    )
    status: Mapped[str] = mapped_column(
        String(10), nullable=False, default=RecordStatus.ACTIVE.value,
    )
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
    )
    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    genre: Mapped["Genre"] = relationship("Genre", lazy="selectin")

    def mark_deleted(self) -> None:
        self.status = RecordStatus.DELETED.value
        self.deleted_at = datetime.now(timezone.utc)
