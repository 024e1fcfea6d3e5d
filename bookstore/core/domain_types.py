"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - UserId, BookId, OrderId wrap UUIDs — never use bare UUID in domain logic
    - Money is always Decimal (never float) inside core/ and services/
    - All valid states encoded as Enums — no raw string matching

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: stored in String columns and serialized to JSON without custom encoders
"""

from decimal import Decimal
from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

UserId = NewType("UserId", UUID)
BookId = NewType("BookId", UUID)
OrderId = NewType("OrderId", UUID)


# ─── Value Types ─────────────────────────────────────────────────

Money = NewType("Money", Decimal)

ZERO_MONEY = Money(Decimal("0"))

# Reported for most/least sold genre when nothing has been sold yet
NOT_APPLICABLE = "N/A"

# Shown in order detail when the referenced book is gone
DELETED_BOOK_TITLE = "[Book Deleted]"


# ─── Enums ───────────────────────────────────────────────────────

class RecordStatus(str, Enum):
    """Soft-delete tag for catalog rows — maps to DB `status` column."""
    ACTIVE = "active"
    DELETED = "deleted"


class SortDirection(str, Enum):
    """Sort direction accepted by list endpoints (orderById / orderByAmount)."""
    ASC = "asc"
    DESC = "desc"
