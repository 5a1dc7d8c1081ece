from __future__ import annotations

import logging
import shutil
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO

from werkzeug.utils import secure_filename

from shopdesk.services._shared.ports.file_storage import SavedBlob

log = logging.getLogger(__name__)


@dataclass(slots=True)
class LocalFileStorage:
    """
    Attachments on the local filesystem under ``root``.

    Each upload gets a random ``uuid4`` name that keeps the original
    extension; the client name is only kept (sanitized) as metadata.
    """

    root: Path

    def __post_init__(self) -> None:
        self.root = Path(self.root)

    def save(self, stream: BinaryIO, original_name: str) -> SavedBlob:
        cleaned = secure_filename(original_name or "") or "upload"
        extension = Path(cleaned).suffix.lower()
        name = f"{uuid.uuid4().hex}{extension}"
        self.root.mkdir(parents=True, exist_ok=True)
        target = self.root / name
        with target.open("wb") as fh:
            shutil.copyfileobj(stream, fh)
        size = target.stat().st_size
        log.debug("storage.saved name=%s size=%s", name, size)
        return SavedBlob(
            name=name,
            original_name=cleaned,
            base_path=str(self.root),
            extension=extension,
            size=size,
        )

    def delete(self, base_path: str, name: str) -> None:
        self.path_for(base_path, name).unlink(missing_ok=True)

    def path_for(self, base_path: str, name: str) -> Path:
        # Stored names are generated here, never taken from the client.
        return Path(base_path) / Path(name).name
