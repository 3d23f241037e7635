"""Fixed-delay status polling for a submitted task.

Each tick waits ``budget.interval_seconds``, counts one attempt and issues one
status query, so the total wait never exceeds ``interval x max_attempts``.

Transport errors on a tick are logged and retained, and polling continues;
flaky status endpoints are common. Any answered query clears the retained
error, so when the budget runs out ``PollTimeout`` carries an error only if
the final ticks failed at the transport level.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Optional

from cover_service.generation.errors import (
    PollCancelled,
    PollMissingArtifact,
    PollRemoteFailure,
    PollTimeout,
    render_body,
)
from cover_service.generation.models import JobHandle, PollBudget
from cover_service.remote.backend import RemoteBackend, RemoteRequestError
from cover_service.remote.profiles import RemoteProfile
from cover_service.remote.schema import (
    Failed,
    Succeeded,
    Unrecognized,
    describe,
    resolve_status,
)

logger = logging.getLogger(__name__)

SleepFn = Callable[[float], Awaitable[None]]


class StatusPoller:
    def __init__(
        self,
        backend: RemoteBackend,
        profile: RemoteProfile,
        sleep: SleepFn = asyncio.sleep,
    ):
        self._backend = backend
        self._profile = profile
        self._sleep = sleep

    async def poll(
        self,
        handle: JobHandle,
        budget: PollBudget,
        cancel_event: Optional[asyncio.Event] = None,
    ) -> str:
        """Poll until the task finishes. Returns the result audio URL.

        Raises:
            PollRemoteFailure: the remote API reported failure.
            PollMissingArtifact: success reported without a locatable URL.
            PollTimeout: attempt budget exhausted.
            PollCancelled: ``cancel_event`` was set.
        """
        loop = asyncio.get_event_loop()
        last_error: Optional[RemoteRequestError] = None
        attempts = 0

        logger.info(
            "[4/5] Polling task %s every %.1fs (max %d attempts, %.0fs)",
            handle.task_id, budget.interval_seconds, budget.max_attempts,
            budget.max_wait_seconds,
        )

        while attempts < budget.max_attempts:
            await self._sleep(budget.interval_seconds)
            attempts += 1

            if cancel_event is not None and cancel_event.is_set():
                raise PollCancelled(
                    f"Polling cancelled after {attempts - 1} attempts"
                )

            try:
                body = await loop.run_in_executor(
                    None, self._backend.get_task, handle.task_id
                )
            except RemoteRequestError as exc:
                last_error = exc
                logger.warning(
                    "Polling error (attempt %d/%d, status=%s): %s body=%s",
                    attempts, budget.max_attempts, exc.status_code, exc,
                    render_body(exc.body),
                )
                continue

            last_error = None
            status = resolve_status(
                body, self._profile.vocabulary, self._profile.result_url_strategies
            )
            logger.info(
                "Polling attempt %d/%d: %s",
                attempts, budget.max_attempts, describe(status),
            )

            if isinstance(status, Succeeded):
                if status.result_url:
                    return status.result_url
                logger.error(
                    "Task %s completed but no audio URL found: %s",
                    handle.task_id, render_body(body),
                )
                raise PollMissingArtifact(
                    "No audio URL in completed task", details=body
                )
            if isinstance(status, Failed):
                logger.error(
                    "Task %s failed: %s body=%s",
                    handle.task_id, status.reason, render_body(body),
                )
                raise PollRemoteFailure(
                    status.reason, details=body, raw_status=status.raw_status
                )
            if isinstance(status, Unrecognized):
                logger.warning(
                    "Unrecognized status payload for task %s: %s",
                    handle.task_id, render_body(body),
                )

        message = (
            f"Timeout waiting for generation after {attempts} attempts "
            f"({budget.max_wait_seconds:.0f}s)"
        )
        if last_error is not None:
            raise PollTimeout(
                f"{message}; last error: {last_error}",
                details=last_error.body,
                remote_status=last_error.status_code,
                last_error=last_error,
            )
        raise PollTimeout(message)
