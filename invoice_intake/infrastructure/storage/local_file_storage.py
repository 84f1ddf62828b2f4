"""Local filesystem storage for uploaded invoice files.

Storage layout:
    <upload_dir>/<uuid4><ext>        — uploaded files

The stored name never reuses the original file name, so two uploads of
``invoice.pdf`` cannot collide.
"""

import logging
import uuid
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass
class StoredFile:
    """Result of storing a single file on disk."""

    stored_name: str
    file_size: int


class LocalFileStorage:
    """Infrastructure adapter for local file storage."""

    def __init__(self, upload_dir: str):
        self._upload_dir = Path(upload_dir)
        self._upload_dir.mkdir(parents=True, exist_ok=True)

    @property
    def upload_dir(self) -> Path:
        return self._upload_dir

    async def store_file(self, content: bytes, filename: str) -> StoredFile:
        """Store an uploaded file as ``<upload_dir>/<uuid4><ext>``."""
        suffix = Path(filename).suffix  # includes the dot
        stored_name = f"{uuid.uuid4()}{suffix}"

        dest_path = self._upload_dir / stored_name
        dest_path.write_bytes(content)

        logger.info("Stored file: %s (%d bytes)", dest_path, len(content))

        return StoredFile(
            stored_name=stored_name,
            file_size=len(content),
        )

    def get_file_path(self, stored_name: str) -> Path:
        """Return the path of a stored file, refusing names that escape the upload dir."""
        candidate = (self._upload_dir / stored_name).resolve()
        if candidate.parent != self._upload_dir.resolve():
            raise ValueError(f"Invalid stored file name: {stored_name!r}")
        return candidate

    def file_exists(self, stored_name: str) -> bool:
        """Check if a stored file exists."""
        try:
            return self.get_file_path(stored_name).is_file()
        except ValueError:
            return False
