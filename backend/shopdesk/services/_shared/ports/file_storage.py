from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Protocol


@dataclass(frozen=True, slots=True)
class SavedBlob:
    """
    Where an uploaded stream ended up.

    :param name: Random file name on disk, extension included.
    :param original_name: Sanitized client file name.
    :param base_path: Directory holding the blob.
    :param extension: Lowercase extension with the leading dot, or ``""``.
    :param size: Bytes written.
    """

    name: str
    original_name: str
    base_path: str
    extension: str
    size: int


class FileStorage(Protocol):
    """
    Blob storage for shop attachments.

    Services record metadata in the database and delegate bytes to this port.
    """

    def save(self, stream: BinaryIO, original_name: str) -> SavedBlob: ...
    def delete(self, base_path: str, name: str) -> None: ...
    def path_for(self, base_path: str, name: str) -> Path: ...
