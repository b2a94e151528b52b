"""
Base model classes and mixins.

- TimestampMixin: created_at, updated_at (always use)
- UUIDMixin: UUID primary key
- StandardMixin: both of the above
"""

from datetime import datetime
from typing import Any
from uuid import UUID as PyUUID, uuid4
from sqlalchemy import DateTime, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column
from sqlalchemy.dialects.postgresql import UUID


class Base(DeclarativeBase):
    """Base class for all models."""

    # All datetimes are timezone-aware
    type_annotation_map = {
        datetime: DateTime(timezone=True),
    }

    def to_dict(self) -> dict[str, Any]:
        """Convert model to dictionary."""
        return {c.name: getattr(self, c.name) for c in self.__table__.columns}


# ============================================================
# TIMESTAMP MIXIN
# ============================================================

class TimestampMixin:
    """
    Mixin for created_at and updated_at timestamps.

    All timestamps are stored in UTC (timezone-aware).

    Note: bulk upserts bypass ``onupdate``; they must set
    ``updated_at`` explicitly in their conflict clause.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )


# ============================================================
# PRIMARY KEY MIXIN
# ============================================================

class UUIDMixin:
    """
    Mixin for UUID primary key.

    Uses UUID v4 (random) for primary keys.
    """

    id: Mapped[PyUUID] = mapped_column(
        UUID(as_uuid=True),
        primary_key=True,
        default=uuid4,
    )


class StandardMixin(UUIDMixin, TimestampMixin):
    """
    Standard mixin combining UUID + timestamps.

    Provides:
        - id: UUID primary key
        - created_at: When created (UTC)
        - updated_at: When last modified (UTC)
    """
    pass
