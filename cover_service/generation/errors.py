"""Error taxonomy for cover generation.

Every exception carries the HTTP status it maps to and, where the remote API
answered, the remote status code and body for diagnosis.
"""

import json
from typing import Any, Optional


def render_body(body: Any) -> str:
    """Serialize a remote response body for logs and the ``details`` field."""
    if body is None:
        return ""
    if isinstance(body, str):
        return body
    try:
        return json.dumps(body)
    except (TypeError, ValueError):
        return repr(body)


class CoverGenerationError(Exception):
    http_status = 500

    def __init__(
        self,
        message: str,
        details: Any = None,
        remote_status: Optional[int] = None,
    ):
        super().__init__(message)
        self.message = message
        self.details = render_body(details)
        self.remote_status = remote_status


class InputMissing(CoverGenerationError):
    http_status = 400


class InputTooLarge(CoverGenerationError):
    http_status = 400


class ServerNotReady(CoverGenerationError):
    http_status = 503


class SubmissionTransportError(CoverGenerationError):
    """The creation request failed or returned a non-2xx status."""


class SubmissionNoIdentifier(CoverGenerationError):
    """The creation response carried no recognizable task id."""


class PollRemoteFailure(CoverGenerationError):
    """The remote API reported the task as failed."""

    def __init__(self, reason: str, details: Any = None, raw_status: Any = None):
        label = reason or (str(raw_status) if raw_status is not None else "unknown")
        super().__init__(f"Generation failed: {label}", details)
        self.reason = reason
        self.raw_status = raw_status


class PollMissingArtifact(CoverGenerationError):
    """The task succeeded but no result URL could be located."""


class PollTimeout(CoverGenerationError):
    """The attempt budget ran out before the task finished."""

    def __init__(
        self,
        message: str,
        details: Any = None,
        remote_status: Optional[int] = None,
        last_error: Optional[Exception] = None,
    ):
        super().__init__(message, details, remote_status)
        self.last_error = last_error


class PollCancelled(CoverGenerationError):
    """Polling was stopped through the cancellation token."""


class DownloadFailure(CoverGenerationError):
    """The finished artifact could not be fetched."""


class LocalIoError(CoverGenerationError):
    """Reading or writing the local upload directory failed."""
