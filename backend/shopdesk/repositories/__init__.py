"""Repository package exposing persistence-layer access for all domain models."""

from __future__ import annotations

from shopdesk.repositories.base import BaseRepository, Page, Pagination, paginate_select
from shopdesk.repositories.shop import CategoryRepository, ShopRepository, StoredFileRepository
from shopdesk.repositories.user import UserRepository

__all__ = [
    "BaseRepository",
    "Page",
    "Pagination",
    "paginate_select",
    "UserRepository",
    "ShopRepository",
    "CategoryRepository",
    "StoredFileRepository",
]
