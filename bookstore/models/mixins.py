"""
Model Mixins

SoftDeleteMixin adds a nullable ``deleted_at`` timestamp. A row with a
non-null ``deleted_at`` is hidden from normal reads (listings, lookups,
duplicate-name checks) but stays in the table, so historical orders can
still reference it.

Queries should not repeat the ``deleted_at IS NULL`` filter by hand; the
repositories in ``bookstore.repositories`` apply ``not_deleted()`` for
every soft-deletable model.
"""

from datetime import UTC, datetime

from sqlalchemy import DateTime
from sqlalchemy.orm import Mapped, mapped_column


class SoftDeleteMixin:
    """Adds soft-delete support to a model."""

    deleted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True),
        nullable=True,
        default=None,
        index=True,
        comment="When the row was soft-deleted (NULL while visible)",
    )

    @classmethod
    def not_deleted(cls):
        """SQL predicate selecting only rows that have not been soft-deleted."""
        return cls.deleted_at.is_(None)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    def soft_delete(self) -> None:
        """Mark the row as deleted. The caller commits."""
        self.deleted_at = datetime.now(UTC)
