"""Boundary Protocols — structural contracts between core and shell.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - ORM models satisfy these protocols structurally; core never imports models

Design Decisions:
    - Protocol over ABC: structural subtyping, tests pass plain dataclasses
"""

from decimal import Decimal
from typing import Protocol
from uuid import UUID

from bookstore.core.domain_types import RecordStatus

class BookLike(Protocol):
    """Structural contract for Book objects read by order validation and summaries."""
    id: UUID
    title: str
    price: Decimal
    stock_quantity: int
    status: RecordStatus | str


class LineItemLike(Protocol):
    """Structural contract for a persisted order line item."""
    order_id: UUID
    book_id: UUID
    quantity: int
