"""DTOs for CategoryService."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from shopdesk.models.shop import Category
from shopdesk.services._shared.dto import PageMeta


@dataclass(frozen=True, slots=True)
class CategoryCreateIn:
    """
    Input DTO for creating a category.

    :param name: 3..30 characters.
    :param shop_id: Shop the category belongs to; the caller must own it.
    """

    name: str
    shop_id: int


@dataclass(frozen=True, slots=True)
class CategorySearchIn:
    page: int = 1
    page_size: int = 10
    shop_id: int | None = None


@dataclass(frozen=True, slots=True)
class CategoryOut:
    id: int
    name: str
    shop_id: int
    created_at: datetime | None = None

    @classmethod
    def from_model(cls, category: Category) -> CategoryOut:
        return cls(
            id=category.id,
            name=category.name,
            shop_id=category.shop_id,
            created_at=category.created_at,
        )


@dataclass(frozen=True, slots=True)
class CategoryPageOut:
    items: list[CategoryOut]
    meta: PageMeta
