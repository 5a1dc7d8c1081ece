"""
DTOs for ShopService.

Uploads cross the service boundary as :class:`UploadIn` so services never
see Werkzeug objects.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import BinaryIO

from shopdesk.models.shop import Shop, StoredFile
from shopdesk.services._shared.dto import PageMeta

# --------------------------------------------------------------------------- #
# Input DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class UploadIn:
    """
    A file received with a multipart request.

    :param stream: Readable binary stream.
    :param filename: Client-supplied name (sanitized on save).
    :param content_type: Declared MIME type, if any.
    """

    stream: BinaryIO
    filename: str
    content_type: str | None = None


@dataclass(frozen=True, slots=True)
class ShopCreateIn:
    """
    Input DTO for creating a shop.

    :param name: 3..30 characters.
    :param budget: Non-negative amount.
    :param files: Attachments to store with the shop.
    """

    name: str
    budget: float
    files: list[UploadIn] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ShopUpdateIn:
    """
    Input DTO for updating a shop. ``None`` leaves a field untouched.

    When ``files`` is non-empty the new attachments replace all previous ones.
    """

    name: str | None = None
    budget: float | None = None
    files: list[UploadIn] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class ShopSearchIn:
    page: int = 1
    page_size: int = 10
    name: str | None = None
    created_by: int | None = None


# --------------------------------------------------------------------------- #
# Output DTOs
# --------------------------------------------------------------------------- #


@dataclass(frozen=True, slots=True)
class StoredFileOut:
    """
    Attachment metadata (never the on-disk location).

    :param id: File id.
    :param shop_id: Owning shop.
    :param original_name: Sanitized client name.
    :param extension: Lowercase extension with dot.
    :param content_type: MIME type recorded at upload.
    :param size: Size in bytes.
    """

    id: int
    shop_id: int
    original_name: str
    extension: str
    content_type: str | None
    size: int

    @classmethod
    def from_model(cls, f: StoredFile) -> StoredFileOut:
        return cls(
            id=f.id,
            shop_id=f.shop_id,
            original_name=f.original_name,
            extension=f.extension,
            content_type=f.content_type,
            size=f.size,
        )


@dataclass(frozen=True, slots=True)
class ShopOut:
    """
    Shop with its attachments.

    :param id: Shop id.
    :param name: Shop name.
    :param budget: Budget amount.
    :param created_by: Owner user id.
    :param files: Attachment metadata.
    :param created_at: Creation timestamp.
    :param updated_at: Last update timestamp.
    """

    id: int
    name: str
    budget: float
    created_by: int
    files: tuple[StoredFileOut, ...] = ()
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @classmethod
    def from_model(cls, shop: Shop) -> ShopOut:
        return cls(
            id=shop.id,
            name=shop.name,
            budget=shop.budget,
            created_by=shop.created_by,
            files=tuple(StoredFileOut.from_model(f) for f in shop.files),
            created_at=shop.created_at,
            updated_at=shop.updated_at,
        )


@dataclass(frozen=True, slots=True)
class ShopPageOut:
    items: list[ShopOut]
    meta: PageMeta
