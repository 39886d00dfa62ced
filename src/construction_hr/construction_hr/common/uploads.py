from __future__ import annotations

import logging
import os
import secrets
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, Optional

from werkzeug.datastructures import FileStorage
from werkzeug.utils import secure_filename

from ..core.exceptions import UploadError

logger = logging.getLogger(__name__)

URL_PREFIX = "uploads"


@dataclass(frozen=True)
class StoredFile:
    path: str  # relative, e.g. "uploads/applications/resume-1700000000000-1a2b3c.pdf"
    original_name: str


class UploadStore:
    """Disk storage for uploaded documents and photos.

    Files are written under ``base_dir/<subdir>/`` with a name built from the
    form field, a millisecond timestamp and a random suffix, so two uploads of
    ``cv.pdf`` never collide.
    """

    def __init__(self, base_dir: str | Path, *, max_bytes: int):
        self._base_dir = Path(base_dir)
        self._max_bytes = int(max_bytes)

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    @property
    def max_mb(self) -> int:
        return self._max_bytes // (1024 * 1024)

    def save(
        self,
        file: FileStorage,
        *,
        subdir: str,
        field_name: str,
        allowed_extensions: Iterable[str],
    ) -> StoredFile:
        original = file.filename or ""
        ext = Path(secure_filename(original)).suffix.lower()
        if ext not in set(allowed_extensions):
            allowed = ", ".join(sorted(e.lstrip(".").upper() for e in allowed_extensions))
            raise UploadError(f"Invalid file type. Only {allowed} files are allowed.")

        size = self._size_of(file)
        if size > self._max_bytes:
            raise UploadError(f"File too large. Maximum file size is {self.max_mb}MB.")

        target_dir = self._base_dir / subdir
        target_dir.mkdir(parents=True, exist_ok=True)

        filename = f"{field_name}-{int(time.time() * 1000)}-{secrets.token_hex(6)}{ext}"
        file.save(target_dir / filename)
        logger.info("Stored upload %s (%d bytes) as %s/%s", original, size, subdir, filename)
        return StoredFile(path=f"{URL_PREFIX}/{subdir}/{filename}", original_name=original)

    def absolute(self, relative_path: str) -> Path:
        rel = relative_path
        prefix = f"{URL_PREFIX}/"
        if rel.startswith(prefix):
            rel = rel[len(prefix):]
        resolved = (self._base_dir / rel).resolve()
        if self._base_dir.resolve() not in resolved.parents:
            raise UploadError("Invalid file path")
        return resolved

    def remove(self, relative_path: str) -> bool:
        """Best-effort delete; a missing file is not an error."""
        try:
            target = self.absolute(relative_path)
            if target.exists():
                target.unlink()
                return True
        except (OSError, UploadError):
            logger.warning("Could not remove upload %s", relative_path, exc_info=True)
        return False

    @staticmethod
    def _size_of(file: FileStorage) -> int:
        stream = file.stream
        try:
            pos = stream.tell()
            stream.seek(0, os.SEEK_END)
            size = stream.tell()
            stream.seek(pos)
            return size
        except (AttributeError, OSError):
            return file.content_length or 0


def first_file(files, field_name: str) -> Optional[FileStorage]:
    """Return the uploaded file for ``field_name`` if one was actually sent."""
    f = files.get(field_name) if files else None
    if f is None or not f.filename:
        return None
    return f
