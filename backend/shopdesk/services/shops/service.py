"""
ShopService
===========

Aggregate service for ``Shop`` and its attachments.

Notes
-----
- Any authenticated user may read shops; only ``created_by`` may change them.
- Blobs are written before the rows and removed after the commit, so a failed
  transaction never leaves rows pointing at missing files.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from shopdesk.models.shop import Shop, StoredFile
from shopdesk.repositories.shop import ShopRepository
from shopdesk.services._shared.base import BaseService
from shopdesk.services._shared.dto import PageMeta
from shopdesk.services._shared.errors import NotFoundError, ValidationFailedError
from shopdesk.services._shared.ports.file_storage import FileStorage, SavedBlob
from shopdesk.services._shared.ports.token_codec import Principal
from shopdesk.services.shops.dto import (
    ShopCreateIn,
    ShopOut,
    ShopPageOut,
    ShopSearchIn,
    ShopUpdateIn,
    UploadIn,
)

log = logging.getLogger(__name__)


class ShopService(BaseService):
    """
    Application service for the ``Shop`` aggregate.

    :param storage: Blob storage for attachments.
    """

    def __init__(self, *, storage: FileStorage) -> None:
        self.storage = storage

    # --------------------------------------------------------------------- #
    # Queries
    # --------------------------------------------------------------------- #

    def get_shop(self, shop_id: int) -> ShopOut:
        with self.ro_uow() as uow:
            shop = uow.shops.get(shop_id)
            if shop is None:
                raise NotFoundError("Shop", shop_id)
            return ShopOut.from_model(shop)

    def list_shops(self, dto: ShopSearchIn) -> ShopPageOut:
        """
        Paginated listing with optional name/owner filters.

        :param dto: Page and filter parameters.
        :returns: Page of shops with metadata.
        """
        pagination = self.ensure_pagination(page=dto.page, page_size=dto.page_size)
        with self.ro_uow() as uow:
            repo: ShopRepository = uow.shops
            page = repo.search(pagination, name=dto.name, created_by=dto.created_by)
            return ShopPageOut(
                items=[ShopOut.from_model(s) for s in page.items],
                meta=PageMeta.from_page(page),
            )

    # --------------------------------------------------------------------- #
    # Commands
    # --------------------------------------------------------------------- #

    def create_shop(self, actor: Principal, dto: ShopCreateIn) -> ShopOut:
        """
        Create a shop owned by ``actor`` and store its attachments.

        :param actor: Authenticated principal; becomes ``created_by``.
        :param dto: Shop fields and uploads.
        :returns: Created shop.
        :raises ValidationFailedError: When the model rejects name or budget.
        """
        blobs = self._save_all(dto.files)
        try:
            with self.rw_uow() as uow:
                repo: ShopRepository = uow.shops
                try:
                    shop = Shop(name=dto.name, budget=dto.budget, created_by=int(actor.id))
                except ValueError as exc:
                    raise ValidationFailedError(str(exc)) from exc
                shop.files = [_to_row(blob, up) for blob, up in zip(blobs, dto.files)]
                repo.add(shop)
                out = ShopOut.from_model(shop)
        except Exception:
            self._discard(blobs)
            raise

        log.info("shop.created shop_id=%s by=%s files=%s", out.id, actor.id, len(blobs))
        return out

    def update_shop(self, actor: Principal, shop_id: int, dto: ShopUpdateIn) -> ShopOut:
        """
        Update name/budget and optionally replace attachments.

        :param actor: Authenticated principal; must own the shop.
        :param shop_id: Target shop.
        :param dto: New values; non-empty ``files`` replace the old ones.
        :returns: Updated shop.
        :raises NotFoundError: Unknown shop.
        :raises AuthorizationError: Actor is not the owner.
        """
        new_blobs: list[SavedBlob] = []
        old_blobs: list[tuple[str, str]] = []
        try:
            with self.rw_uow() as uow:
                repo: ShopRepository = uow.shops
                shop = repo.get(shop_id)
                if shop is None:
                    raise NotFoundError("Shop", shop_id)
                self.ensure_owner(actor, shop.created_by, msg="Only the owner can edit this shop.")

                changes = {
                    k: v for k, v in {"name": dto.name, "budget": dto.budget}.items() if v is not None
                }
                try:
                    repo.update(shop, **changes)
                except ValueError as exc:
                    raise ValidationFailedError(str(exc)) from exc

                if dto.files:
                    new_blobs = self._save_all(dto.files)
                    old_blobs = [(f.base_path, f.name) for f in shop.files]
                    shop.files = [_to_row(blob, up) for blob, up in zip(new_blobs, dto.files)]
                    repo.flush()
                out = ShopOut.from_model(shop)
        except Exception:
            self._discard(new_blobs)
            raise

        for base_path, name in old_blobs:
            self.storage.delete(base_path, name)
        log.info("shop.updated shop_id=%s by=%s replaced_files=%s", shop_id, actor.id, bool(new_blobs))
        return out

    def delete_shop(self, actor: Principal, shop_id: int) -> None:
        """
        Delete a shop with its categories, attachment rows and blobs.

        :raises NotFoundError: Unknown shop.
        :raises AuthorizationError: Actor is not the owner.
        """
        with self.rw_uow() as uow:
            repo: ShopRepository = uow.shops
            shop = repo.get(shop_id)
            if shop is None:
                raise NotFoundError("Shop", shop_id)
            self.ensure_owner(actor, shop.created_by, msg="Only the owner can delete this shop.")
            blobs = [(f.base_path, f.name) for f in shop.files]
            repo.delete(shop)

        for base_path, name in blobs:
            self.storage.delete(base_path, name)
        log.info("shop.deleted shop_id=%s by=%s", shop_id, actor.id)

    # --------------------------------------------------------------------- #
    # Helpers
    # --------------------------------------------------------------------- #

    def _save_all(self, uploads: Iterable[UploadIn]) -> list[SavedBlob]:
        saved: list[SavedBlob] = []
        try:
            for up in uploads:
                saved.append(self.storage.save(up.stream, up.filename))
        except Exception:
            self._discard(saved)
            raise
        return saved

    def _discard(self, blobs: Iterable[SavedBlob]) -> None:
        for blob in blobs:
            self.storage.delete(blob.base_path, blob.name)


def _to_row(blob: SavedBlob, upload: UploadIn) -> StoredFile:
    return StoredFile(
        name=blob.name,
        original_name=blob.original_name,
        base_path=blob.base_path,
        extension=blob.extension,
        content_type=upload.content_type,
        size=blob.size,
    )
