"""Download the finished cover and retire the input upload."""

import asyncio
import logging
import os

from cover_service.generation.errors import DownloadFailure, LocalIoError, render_body
from cover_service.generation.models import StoredArtifact, UploadedInput
from cover_service.remote.backend import RemoteBackend, RemoteRequestError
from cover_service.storage.uploads import UploadStore

logger = logging.getLogger(__name__)


class ArtifactMaterializer:
    def __init__(self, backend: RemoteBackend, store: UploadStore):
        self._backend = backend
        self._store = store

    async def materialize(self, result_url: str, upload: UploadedInput) -> StoredArtifact:
        """Store the artifact under a fresh ``cover-<millis>.mp3`` name.

        The input upload is deleted only once the download succeeded; on any
        failure it stays in place.
        """
        filename = self._store.new_output_name()
        path = self._store.path_for(filename)
        logger.info("[5/5] Downloading result: %s -> %s", result_url, filename)

        loop = asyncio.get_event_loop()
        try:
            written = await loop.run_in_executor(
                None, self._backend.download, result_url, path
            )
        except RemoteRequestError as exc:
            self._discard_partial(path)
            logger.error(
                "Download of %s failed (status=%s): %s body=%s",
                result_url, exc.status_code, exc, render_body(exc.body),
            )
            raise DownloadFailure(
                f"Failed to download cover: {exc}",
                details=exc.body,
                remote_status=exc.status_code,
            ) from exc
        except OSError as exc:
            self._discard_partial(path)
            logger.error("Could not write %s: %s", path, exc)
            raise LocalIoError(f"Failed to store cover: {exc}") from exc

        logger.info("Stored cover %s (%d bytes)", filename, written)

        if not self._store.remove(upload.stored_path):
            logger.warning("Input upload %s was not removed", upload.stored_path)

        return StoredArtifact(path=path, filename=filename)

    def _discard_partial(self, path: str) -> None:
        if os.path.exists(path):
            self._store.remove(path)
