"""Upload directory: incoming audio and generated covers side by side."""

import logging
import os
import time
import uuid
from typing import Optional

from fastapi import UploadFile

from cover_service.generation.errors import InputTooLarge, LocalIoError
from cover_service.generation.models import UploadedInput

logger = logging.getLogger(__name__)

_CHUNK_BYTES = 1024 * 1024


class UploadStore:
    """Stores uploads under random names and covers under timestamped names.

    Both kinds of file live in one directory, served at ``url_prefix``.
    """

    def __init__(self, base_dir: str, url_prefix: str = "/uploads"):
        self._base_dir = os.path.abspath(base_dir)
        self.url_prefix = url_prefix.rstrip("/")
        os.makedirs(self._base_dir, exist_ok=True)

    @property
    def base_dir(self) -> str:
        return self._base_dir

    def path_for(self, filename: str) -> str:
        return os.path.join(self._base_dir, filename)

    def url_for(self, filename: str) -> str:
        return f"{self.url_prefix}/{filename}"

    async def save_upload(self, file: UploadFile, max_bytes: int) -> UploadedInput:
        """Stream an upload to disk, enforcing ``max_bytes``.

        Raises InputTooLarge (partial file removed) or LocalIoError.
        """
        stored_name = uuid.uuid4().hex
        path = self.path_for(stored_name)
        total = 0
        try:
            with open(path, "wb") as dst:
                while True:
                    chunk = await file.read(_CHUNK_BYTES)
                    if not chunk:
                        break
                    total += len(chunk)
                    if total > max_bytes:
                        break
                    dst.write(chunk)
        except OSError as exc:
            self.remove(path)
            raise LocalIoError(f"Failed to save upload: {exc}") from exc

        if total > max_bytes:
            self.remove(path)
            raise InputTooLarge(
                f"File too large (max {max_bytes // (1024 * 1024)} MB)"
            )

        return UploadedInput(
            original_name=file.filename or "upload",
            stored_name=stored_name,
            stored_path=path,
            size_bytes=total,
        )

    def new_output_name(self, extension: str = ".mp3", now: Optional[float] = None) -> str:
        """Millisecond-timestamped cover filename, skipping names on disk.

        Two requests picking a name in the same millisecond can still race.
        """
        millis = int((time.time() if now is None else now) * 1000)
        while os.path.exists(self.path_for(f"cover-{millis}{extension}")):
            millis += 1
        return f"cover-{millis}{extension}"

    def remove(self, path: str) -> bool:
        """Delete a file; failures are logged and reported as False."""
        try:
            os.remove(path)
            return True
        except FileNotFoundError:
            return False
        except OSError as exc:
            logger.warning("Could not remove %s: %s", path, exc)
            return False
