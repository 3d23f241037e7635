"""Suno-compatible cover generation API client (requests)."""

import logging
import os
from typing import Any, Dict, Optional

import requests

from cover_service.remote.backend import RemoteBackend, RemoteRequestError
from cover_service.remote.profiles import RemoteProfile

logger = logging.getLogger(__name__)

_CHUNK_BYTES = 1024 * 1024


def _parse_body(resp: requests.Response) -> Any:
    """JSON body when possible, raw text otherwise."""
    try:
        return resp.json()
    except ValueError:
        return resp.text


class SunoClient(RemoteBackend):
    """Bearer-token client for the upload-cover / status / download calls."""

    def __init__(
        self,
        base_url: str,
        api_key: str,
        profile: RemoteProfile,
        timeout_seconds: float = 30.0,
        session: Optional[requests.Session] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.profile = profile
        self.timeout_seconds = timeout_seconds
        self.session = session or requests.Session()
        self._auth_headers = {"Authorization": f"Bearer {api_key}"}

    def _request(self, method: str, path: str, **kwargs) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = self.session.request(
                method,
                url,
                headers=self._auth_headers,
                timeout=self.timeout_seconds,
                **kwargs,
            )
        except requests.RequestException as exc:
            raise RemoteRequestError(f"{method} {path} failed: {exc}") from exc

        body = _parse_body(resp)
        if not 200 <= resp.status_code < 300:
            raise RemoteRequestError(
                f"{method} {path} returned HTTP {resp.status_code}",
                status_code=resp.status_code,
                body=body,
            )
        return body

    def create_task(self, payload: Dict[str, Any]) -> Any:
        return self._request("POST", self.profile.submit_path, json=payload)

    def get_task(self, task_id: str) -> Any:
        path, params = self.profile.status_request(task_id)
        return self._request("GET", path, params=params or None)

    def download(self, url: str, destination: str) -> int:
        """Stream the artifact to disk. No size cap is applied."""
        written = 0
        try:
            with self.session.get(url, stream=True, timeout=self.timeout_seconds) as resp:
                if not 200 <= resp.status_code < 300:
                    raise RemoteRequestError(
                        f"GET {url} returned HTTP {resp.status_code}",
                        status_code=resp.status_code,
                        body=resp.text,
                    )
                with open(destination, "wb") as dst:
                    for chunk in resp.iter_content(chunk_size=_CHUNK_BYTES):
                        if chunk:
                            dst.write(chunk)
                            written += len(chunk)
        except requests.RequestException as exc:
            if os.path.exists(destination):
                os.remove(destination)
            raise RemoteRequestError(f"GET {url} failed: {exc}") from exc
        return written

    def close(self) -> None:
        self.session.close()
