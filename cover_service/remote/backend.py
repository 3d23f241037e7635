"""Remote generation backend interface."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional


class RemoteRequestError(Exception):
    """A request to the remote API failed at the transport or HTTP level."""

    def __init__(self, message: str, status_code: Optional[int] = None, body: Any = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class RemoteBackend(ABC):
    """Abstract interface for the cover generation API.

    Methods are synchronous; async callers run them in a thread executor.
    Every method raises RemoteRequestError on transport errors and non-2xx
    responses.
    """

    @abstractmethod
    def create_task(self, payload: Dict[str, Any]) -> Any:
        """Submit a generation task. Returns the parsed response body."""
        ...

    @abstractmethod
    def get_task(self, task_id: str) -> Any:
        """Query task status. Returns the parsed response body."""
        ...

    @abstractmethod
    def download(self, url: str, destination: str) -> int:
        """Stream ``url`` into ``destination``. Returns bytes written."""
        ...

    def close(self) -> None:
        """Release connections."""
