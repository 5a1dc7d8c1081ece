"""Repositories for shops, their categories and stored attachments."""

from __future__ import annotations

from typing import Any, cast

from sqlalchemy import Select, select
from sqlalchemy.orm import selectinload

from shopdesk.models.shop import Category, Shop, StoredFile
from shopdesk.repositories.base import BaseRepository, Page, Pagination, escape_like


class ShopRepository(BaseRepository[Shop]):
    """Persistence-only repository for :class:`Shop` (files eager-loaded)."""

    model = Shop

    def _default_eagerload(self, stmt: Select[Any]) -> Select[Any]:
        return stmt.options(selectinload(Shop.files))

    def _sortable_fields(self):
        return {
            "id": Shop.id,
            "name": Shop.name,
            "budget": Shop.budget,
            "created_at": Shop.created_at,
        }

    def _filterable_fields(self):
        return {"created_by": Shop.created_by}

    def _updatable_fields(self):
        return {"name", "budget"}

    def search(
        self,
        pagination: Pagination,
        *,
        name: str | None = None,
        created_by: int | None = None,
    ) -> Page[Shop]:
        stmt = self._base_select({"created_by": created_by})
        if name:
            stmt = stmt.where(Shop.name.ilike(f"%{escape_like(name)}%", escape="\\"))
        return self.paginate(pagination, stmt=stmt)

    def list_owned_by(self, user_id: int) -> list[Shop]:
        stmt = self._base_select({"created_by": user_id})
        return list(self.session.execute(stmt).scalars().all())


class CategoryRepository(BaseRepository[Category]):
    """Persistence-only repository for :class:`Category`."""

    model = Category

    def _default_eagerload(self, stmt: Select[Any]) -> Select[Any]:
        return stmt.options(selectinload(Category.shop))

    def _sortable_fields(self):
        return {"id": Category.id, "name": Category.name, "created_at": Category.created_at}

    def _filterable_fields(self):
        return {"shop_id": Category.shop_id}


class StoredFileRepository(BaseRepository[StoredFile]):
    """Persistence-only repository for :class:`StoredFile`."""

    model = StoredFile

    def get_for_shop(self, shop_id: int, file_id: int) -> StoredFile | None:
        stmt = select(StoredFile).where(StoredFile.id == file_id, StoredFile.shop_id == shop_id)
        return cast(StoredFile | None, self.session.execute(stmt).scalars().first())
