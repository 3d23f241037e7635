"""Public reachability of this server.

The remote API must fetch uploads (and post callbacks) through a public base
URL supplied by a tunnel or reverse proxy. That mechanism is the single
writer; request handlers only read the current value.
"""

import logging
import threading
from typing import Optional

logger = logging.getLogger(__name__)


class Availability:
    """Single-writer / multi-reader holder for the public base URL."""

    def __init__(self, base_url: Optional[str] = None):
        self._lock = threading.Lock()
        self._base_url: Optional[str] = None
        if base_url:
            self.mark_available(base_url)

    def mark_available(self, base_url: str) -> None:
        url = base_url.strip().rstrip("/")
        if not url:
            raise ValueError("base_url must be non-empty")
        with self._lock:
            self._base_url = url
        logger.info("Public URL available: %s", url)

    def mark_unavailable(self) -> None:
        with self._lock:
            self._base_url = None
        logger.warning("Public URL no longer available")

    def current(self) -> Optional[str]:
        with self._lock:
            return self._base_url

    @property
    def is_ready(self) -> bool:
        return self.current() is not None
