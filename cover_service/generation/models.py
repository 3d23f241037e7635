"""Data model for one cover generation request."""

import ipaddress
from dataclasses import dataclass
from typing import Any, Dict, Optional
from urllib.parse import urlparse

from pydantic import BaseModel, ConfigDict, field_validator

_LOOPBACK_HOSTS = {"localhost", "localhost.localdomain", "ip6-localhost"}


def is_loopback_host(host: Optional[str]) -> bool:
    """True when ``host`` only resolves to the local machine."""
    if not host:
        return True
    host = host.strip("[]").lower()
    if host in _LOOPBACK_HOSTS or host.endswith(".localhost"):
        return True
    try:
        address = ipaddress.ip_address(host)
    except ValueError:
        return False
    return address.is_loopback or address.is_unspecified


class UploadedInput(BaseModel):
    """An audio file received from the caller and stored on disk."""
    original_name: str
    stored_name: str
    stored_path: str
    size_bytes: int


class JobSubmissionRequest(BaseModel):
    """Parameters sent to the remote API when creating a cover task."""
    upload_url: str
    style: str
    title: str
    custom_mode: bool = True
    instrumental: bool = True
    model: str = "V4"
    callback_url: Optional[str] = None
    audio_weight: Optional[float] = None

    @field_validator("upload_url")
    @classmethod
    def _must_be_publicly_reachable(cls, value: str) -> str:
        parsed = urlparse(value)
        if parsed.scheme != "https":
            raise ValueError(f"upload_url must use https, got '{parsed.scheme}'")
        if is_loopback_host(parsed.hostname):
            raise ValueError(f"upload_url host '{parsed.hostname}' is not reachable remotely")
        return value

    def to_payload(self) -> Dict[str, Any]:
        """Render the request with the remote API's field names."""
        payload = {
            "uploadUrl": self.upload_url,
            "style": self.style,
            "title": self.title,
            "customMode": self.custom_mode,
            "instrumental": self.instrumental,
            "model": self.model,
            "callBackUrl": self.callback_url,
            "audioWeight": self.audio_weight,
        }
        return {k: v for k, v in payload.items() if v is not None}


@dataclass(frozen=True)
class JobHandle:
    """Identifier of a task accepted by the remote API."""
    task_id: str

    def __post_init__(self):
        if not self.task_id or not str(self.task_id).strip():
            raise ValueError("task_id must be non-empty")


@dataclass(frozen=True)
class PollBudget:
    """Fixed-delay polling limits, configured per deployment."""
    interval_seconds: float
    max_attempts: int

    def __post_init__(self):
        if self.interval_seconds < 0:
            raise ValueError("interval_seconds must be >= 0")
        if self.max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")

    @property
    def max_wait_seconds(self) -> float:
        return self.interval_seconds * self.max_attempts


@dataclass(frozen=True)
class StoredArtifact:
    path: str
    filename: str


class GenerationResult(BaseModel):
    """Final outcome of a successful request."""
    model_config = ConfigDict(frozen=True)

    success: bool
    task_id: str
    source_url: str
    stored_path: str
    cover_url: str
