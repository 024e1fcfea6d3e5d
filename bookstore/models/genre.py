"""Genre ORM — the category a book belongs to.

Invariants:
    - status is one of RecordStatus (active | deleted); rows are never physically removed
    - deleted_at is set exactly when status becomes deleted
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID

from bookstore.core.domain_types import RecordStatus
from bookstore.db.base import Base


class Genre(Base):
    """Genre entity (soft-deletable)."""
    __tablename__ = "genres"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4,
    )
    name: Mapped[str] = mapped_column(String(100), nullable=False)
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

    def mark_deleted(self) -> None:
        self.status = RecordStatus.DELETED.value
        self.deleted_at = datetime.now(timezone.utc)
