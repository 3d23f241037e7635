"""Request orchestration: upload -> submit -> poll -> download.

One call to ``handle_upload`` covers one HTTP request. Job state lives only
in the coroutine's locals; nothing is persisted, so a crash mid-poll loses
the remote task.
"""

import asyncio
import logging
from typing import Optional
from urllib.parse import urlparse, urlunparse

from fastapi import UploadFile

from cover_service.config import Settings
from cover_service.generation.errors import (
    CoverGenerationError,
    InputMissing,
    ServerNotReady,
)
from cover_service.generation.materializer import ArtifactMaterializer
from cover_service.generation.models import (
    GenerationResult,
    JobSubmissionRequest,
    UploadedInput,
    is_loopback_host,
)
from cover_service.generation.poller import StatusPoller
from cover_service.generation.submitter import JobSubmitter
from cover_service.reachability.availability import Availability
from cover_service.remote.profiles import RemoteProfile
from cover_service.storage.uploads import UploadStore

logger = logging.getLogger(__name__)

CALLBACK_PATH = "/api/suno-callback"

_NOT_READY = (
    "Server is not ready yet. Public URL not available. "
    "Please wait a moment and try again."
)


def to_https(base_url: str) -> str:
    """Force the https scheme; the remote API refuses plain http targets."""
    raw = base_url.strip().rstrip("/")
    if "://" not in raw:
        raw = f"https://{raw}"
    parsed = urlparse(raw)
    return urlunparse(parsed._replace(scheme="https")).rstrip("/")


class CoverOrchestrator:
    def __init__(
        self,
        settings: Settings,
        profile: RemoteProfile,
        submitter: JobSubmitter,
        poller: StatusPoller,
        materializer: ArtifactMaterializer,
        store: UploadStore,
    ):
        self._settings = settings
        self._profile = profile
        self._submitter = submitter
        self._poller = poller
        self._materializer = materializer
        self._store = store
        self._budget = settings.poll_budget()

    # -- preconditions -------------------------------------------------------

    def resolve_base_url(
        self, availability: Availability, request_host: Optional[str] = None
    ) -> str:
        """Public https base URL for this request, or ServerNotReady."""
        base_url = availability.current()
        if base_url is None and self._settings.use_request_host and request_host:
            base_url = request_host
        if not base_url:
            raise ServerNotReady(_NOT_READY)

        base_url = to_https(base_url)
        host = urlparse(base_url).hostname
        if is_loopback_host(host):
            logger.warning("Public URL %s points at a loopback host", base_url)
            raise ServerNotReady(_NOT_READY)
        return base_url

    def public_input_url(self, base_url: str, stored_name: str) -> str:
        return f"{to_https(base_url)}{self._store.url_for(stored_name)}"

    def build_request(self, upload: UploadedInput, base_url: str) -> JobSubmissionRequest:
        callback_url = None
        if self._profile.requires_callback:
            callback_url = f"{to_https(base_url)}{CALLBACK_PATH}"
        return JobSubmissionRequest(
            upload_url=self.public_input_url(base_url, upload.stored_name),
            style=self._settings.cover_style,
            title=f"{self._settings.cover_title} - {upload.original_name}",
            custom_mode=self._settings.custom_mode,
            instrumental=self._settings.instrumental,
            model=self._settings.cover_model,
            callback_url=callback_url,
            audio_weight=self._settings.audio_weight,
        )

    # -- lifecycle -----------------------------------------------------------

    async def handle_upload(
        self,
        file: Optional[UploadFile],
        availability: Availability,
        request_host: Optional[str] = None,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> GenerationResult:
        """Validate, store and process one uploaded file.

        No remote call is made unless a file is present, the server has a
        public URL and the upload fits the size cap.
        """
        if file is None or not file.filename:
            raise InputMissing("No audio file uploaded")

        base_url = self.resolve_base_url(availability, request_host)
        upload = await self._store.save_upload(file, self._settings.max_upload_bytes)
        logger.info(
            "[1/5] File uploaded: %s (%d bytes) as %s",
            upload.original_name, upload.size_bytes, upload.stored_name,
        )
        return await self.generate(upload, base_url, cancel_event=cancel_event)

    async def generate(
        self,
        upload: UploadedInput,
        base_url: str,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> GenerationResult:
        request = self.build_request(upload, base_url)
        logger.info("[2/5] Public audio URL: %s", request.upload_url)

        try:
            logger.info("[3/5] Sending request to remote API (%s)", self._profile.name)
            handle = await self._submitter.submit(request)
            logger.info("[3/5] Task started. ID: %s", handle.task_id)

            result_url = await self._poller.poll(handle, self._budget, cancel_event)
            logger.info("[4/5] Task %s completed: %s", handle.task_id, result_url)

            artifact = await self._materializer.materialize(result_url, upload)
        except CoverGenerationError as exc:
            logger.error(
                "Cover generation failed for %s (input kept at %s): %s",
                upload.original_name, upload.stored_path, exc.message,
            )
            raise

        logger.info("[5/5] Cover generated successfully: %s", artifact.filename)
        return GenerationResult(
            success=True,
            task_id=handle.task_id,
            source_url=result_url,
            stored_path=artifact.path,
            cover_url=self._store.url_for(artifact.filename),
        )
