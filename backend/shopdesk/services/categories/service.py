"""
CategoryService
===============

Categories belong to a shop and share its ownership: only the shop owner may
create or delete them, any authenticated user may list them.
"""

from __future__ import annotations

import logging

from shopdesk.models.shop import Category
from shopdesk.repositories.shop import CategoryRepository
from shopdesk.services._shared.base import BaseService
from shopdesk.services._shared.dto import PageMeta
from shopdesk.services._shared.errors import NotFoundError, ValidationFailedError
from shopdesk.services._shared.ports.token_codec import Principal
from shopdesk.services.categories.dto import (
    CategoryCreateIn,
    CategoryOut,
    CategoryPageOut,
    CategorySearchIn,
)

log = logging.getLogger(__name__)


class CategoryService(BaseService):
    """Application service for ``Category``."""

    def list_categories(self, dto: CategorySearchIn) -> CategoryPageOut:
        pagination = self.ensure_pagination(page=dto.page, page_size=dto.page_size)
        with self.ro_uow() as uow:
            repo: CategoryRepository = uow.categories
            page = repo.paginate(pagination, filters={"shop_id": dto.shop_id})
            return CategoryPageOut(
                items=[CategoryOut.from_model(c) for c in page.items],
                meta=PageMeta.from_page(page),
            )

    def create_category(self, actor: Principal, dto: CategoryCreateIn) -> CategoryOut:
        """
        Create a category inside a shop owned by ``actor``.

        :param actor: Authenticated principal.
        :param dto: Name and target shop.
        :returns: Created category.
        :raises NotFoundError: Unknown shop.
        :raises AuthorizationError: Actor does not own the shop.
        :raises ValidationFailedError: Name outside 3..30 characters.
        """
        with self.rw_uow() as uow:
            shop = uow.shops.get(dto.shop_id)
            if shop is None:
                raise NotFoundError("Shop", dto.shop_id)
            self.ensure_owner(
                actor, shop.created_by, msg="Only the shop owner can add categories."
            )
            try:
                category = Category(name=dto.name, shop_id=shop.id)
            except ValueError as exc:
                raise ValidationFailedError(str(exc), {"name": [str(exc)]}) from exc
            uow.categories.add(category)
            out = CategoryOut.from_model(category)

        log.info("category.created category_id=%s shop_id=%s", out.id, out.shop_id)
        return out

    def delete_category(self, actor: Principal, category_id: int) -> None:
        """
        Delete a category of a shop owned by ``actor``.

        :raises NotFoundError: Unknown category.
        :raises AuthorizationError: Actor does not own the shop.
        """
        with self.rw_uow() as uow:
            repo: CategoryRepository = uow.categories
            category = repo.get(category_id)
            if category is None:
                raise NotFoundError("Category", category_id)
            self.ensure_owner(
                actor, category.shop.created_by, msg="Only the shop owner can delete categories."
            )
            repo.delete(category)
        log.info("category.deleted category_id=%s by=%s", category_id, actor.id)
