"""Reusable SQLAlchemy mixins shared by domain models (typed 2.0)."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime, Integer, func
from sqlalchemy.orm import Mapped, mapped_column, validates


class TimestampMixin:
    """Provide ``created_at`` and ``updated_at`` timestamp columns.

    Attributes
    ----------
    created_at:
        Timezone-aware timestamp filled by the database on insert.
    updated_at:
        Timezone-aware timestamp refreshed by the database on update.
    """

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )


class PKMixin:
    """Expose an integer surrogate primary key column named ``id``."""

    id: Mapped[int] = mapped_column(Integer, primary_key=True)


class ReprMixin:
    """Provide a concise ``__repr__`` including the class name and id."""

    def __repr__(self) -> str:
        cls = self.__class__.__name__
        key = getattr(self, "id", None)
        return f"<{cls} id={key}>"


NAME_MIN_LEN = 3
NAME_MAX_LEN = 30


class NamedMixin:
    """Validate the short ``name`` column shared by users, shops and categories."""

    @validates("name")
    def _normalize_name(self, key: str, value: str) -> str:
        """
        Trim and length-check ``name``.

        :raises ValueError: If the trimmed name is outside 3..30 characters.
        """
        if not isinstance(value, str):
            raise ValueError("Name is required.")
        v = value.strip()
        if not NAME_MIN_LEN <= len(v) <= NAME_MAX_LEN:
            raise ValueError(f"Name must be {NAME_MIN_LEN}-{NAME_MAX_LEN} characters long.")
        return v
