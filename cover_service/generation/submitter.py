"""Job submission: one creation request, no retries."""

import asyncio
import json
import logging

from cover_service.generation.errors import (
    SubmissionNoIdentifier,
    SubmissionTransportError,
    render_body,
)
from cover_service.generation.models import JobHandle, JobSubmissionRequest
from cover_service.remote.backend import RemoteBackend, RemoteRequestError
from cover_service.remote.profiles import RemoteProfile
from cover_service.remote.schema import find_job_id

logger = logging.getLogger(__name__)


class JobSubmitter:
    def __init__(self, backend: RemoteBackend, profile: RemoteProfile):
        self._backend = backend
        self._profile = profile

    async def submit(self, request: JobSubmissionRequest) -> JobHandle:
        """Create a remote task and return its handle.

        Raises:
            SubmissionTransportError: connection error, timeout or non-2xx.
            SubmissionNoIdentifier: 2xx response without a task id.
        """
        payload = request.to_payload()
        logger.info("Submitting cover task: %s", json.dumps(payload))

        loop = asyncio.get_event_loop()
        try:
            body = await loop.run_in_executor(None, self._backend.create_task, payload)
        except RemoteRequestError as exc:
            logger.error(
                "Cover submission failed (status=%s): %s body=%s",
                exc.status_code, exc, render_body(exc.body),
            )
            raise SubmissionTransportError(
                str(exc), details=exc.body, remote_status=exc.status_code
            ) from exc

        logger.debug("Submission response: %s", render_body(body))
        task_id = find_job_id(body, self._profile.job_id_strategies)
        if task_id is None:
            logger.error("No task id in submission response: %s", render_body(body))
            raise SubmissionNoIdentifier(
                "No Task ID returned from remote API", details=body
            )
        return JobHandle(task_id=task_id)
