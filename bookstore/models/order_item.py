"""OrderItem ORM — one book-and-quantity line within an Order.

Invariants:
    - Always belongs to an Order (order_id FK, cascade delete)
    - quantity > 0 (DB check constraint)
    - No price column: subtotal is always quantity × the book's current price
    - line_number is the item's 0-based position in the original request

Design Decisions:
    - book_id is a plain FK without an ORM relationship: the book may be soft-deleted
      later and readers resolve it explicitly (see core/order_summary.py)
"""

import uuid

from sqlalchemy import Integer, ForeignKey, CheckConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.dialects.postgresql import UUID

from bookstore.db.base import Base


class OrderItem(Base):
    """Order line item."""
    __tablename__ = "order_items"
    __table_args__ = (
        CheckConstraint("quantity > 0", name="ck_order_items_quantity_positive"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    order_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("orders.id", ondelete="CASCADE"),
        nullable=False, index=True,
    )
    book_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), ForeignKey("books.id"), nullable=False, index=True,
    )
    quantity: Mapped[int] = mapped_column(Integer, nullable=False)
    line_number: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    order: Mapped["Order"] = relationship("Order", back_populates="items")
