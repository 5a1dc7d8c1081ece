"""DTOs for FileService."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path


@dataclass(frozen=True, slots=True)
class FileDownloadOut:
    """
    Everything the API layer needs to stream an attachment.

    :param path: Absolute or app-relative path of the blob.
    :param download_name: Name suggested to the client.
    :param content_type: MIME type recorded at upload, if any.
    """

    path: Path
    download_name: str
    content_type: str | None
