"""Shop, category and attachment models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    func,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from shopdesk.core.extensions import db

from .base import NamedMixin, PKMixin, ReprMixin, TimestampMixin


class Shop(PKMixin, ReprMixin, TimestampMixin, NamedMixin, db.Model):
    """
    A tenant-owned shop. Only ``created_by`` may modify or delete it.

    Fields
    ------
    name : str
        3..30 characters.
    budget : float
        Non-negative amount.
    created_by : int
        Owning user id.
    """

    __tablename__ = "shops"

    name: Mapped[str] = mapped_column(String(30), nullable=False)
    budget: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    created_by: Mapped[int] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"), nullable=False
    )

    files: Mapped[list[StoredFile]] = relationship(
        back_populates="shop",
        cascade="all, delete-orphan",
        order_by="StoredFile.id",
    )
    categories: Mapped[list[Category]] = relationship(
        back_populates="shop",
        cascade="all, delete-orphan",
        order_by="Category.id",
    )

    __table_args__ = (
        CheckConstraint("budget >= 0", name="budget_non_negative"),
        Index("ix_shops_created_by", "created_by"),
    )

    @validates("budget")
    def _validate_budget(self, key: str, value: float) -> float:
        v = float(value)
        if v < 0:
            raise ValueError("Budget must be zero or positive.")
        return v


class Category(PKMixin, ReprMixin, TimestampMixin, NamedMixin, db.Model):
    """Named grouping inside a shop; shares the shop's ownership."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(30), nullable=False)
    shop_id: Mapped[int] = mapped_column(
        ForeignKey("shops.id", ondelete="CASCADE"), nullable=False
    )

    shop: Mapped[Shop] = relationship(back_populates="categories")

    __table_args__ = (Index("ix_categories_shop_id", "shop_id"),)


class StoredFile(PKMixin, ReprMixin, db.Model):
    """
    Metadata of an attachment written under the upload directory.

    Fields
    ------
    name : str
        Random file name on disk (extension included).
    original_name : str
        Client-supplied name, sanitized.
    base_path : str
        Directory holding the blob.
    extension : str
        Lowercase extension with leading dot, or ``""``.
    """

    __tablename__ = "file_stores"

    shop_id: Mapped[int] = mapped_column(
        ForeignKey("shops.id", ondelete="CASCADE"), nullable=False
    )
    name: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    original_name: Mapped[str] = mapped_column(String(255), nullable=False)
    base_path: Mapped[str] = mapped_column(String(255), nullable=False)
    extension: Mapped[str] = mapped_column(String(16), nullable=False, default="")
    content_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    size: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )

    shop: Mapped[Shop] = relationship(back_populates="files")

    __table_args__ = (Index("ix_file_stores_shop_id", "shop_id"),)
