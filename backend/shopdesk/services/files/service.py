"""Lookup of stored attachments for download."""

from __future__ import annotations

from shopdesk.services._shared.base import BaseService
from shopdesk.services._shared.errors import NotFoundError
from shopdesk.services._shared.ports.file_storage import FileStorage
from shopdesk.services.files.dto import FileDownloadOut


class FileService(BaseService):
    """
    Resolve an attachment of a shop to a readable path.

    :param storage: Blob storage the attachment was written to.
    """

    def __init__(self, *, storage: FileStorage) -> None:
        self.storage = storage

    def open_file(self, shop_id: int, file_id: int) -> FileDownloadOut:
        """
        :raises NotFoundError: The row is missing, belongs to another shop, or
            its blob is gone from storage.
        """
        with self.ro_uow() as uow:
            row = uow.files.get_for_shop(shop_id, file_id)
            if row is None:
                raise NotFoundError("File", file_id)
            path = self.storage.path_for(row.base_path, row.name)
            out = FileDownloadOut(
                path=path,
                download_name=row.original_name,
                content_type=row.content_type,
            )
        if not out.path.is_file():
            raise NotFoundError("File", file_id)
        return out
