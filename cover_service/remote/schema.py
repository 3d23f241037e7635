"""Normalization of remote API response bodies.

The remote API has shipped several response schemas over time. Instead of
probing shapes with nested conditionals, each lookup is an ordered list of
extraction strategies (``payload -> Optional[str]``); the first strategy that
returns a value wins. The lists live in ``RemoteProfile`` so a new API
version only needs a new profile.

Nothing in this module raises on unexpected payloads: a body that cannot be
understood becomes ``None`` (no identifier) or ``Unrecognized``.
"""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Sequence, Tuple, Union

PathPart = Union[str, int]
Extractor = Callable[[Any], Optional[str]]

AUDIO_EXTENSIONS = (".mp3", ".wav", ".m4a", ".flac", ".ogg", ".aac")


def dig(payload: Any, path: Sequence[PathPart]) -> Any:
    """Follow dict keys and list indices; return None on any mismatch."""
    node = payload
    for part in path:
        if isinstance(part, int):
            if not isinstance(node, list) or len(node) <= part:
                return None
            node = node[part]
        else:
            if not isinstance(node, dict) or part not in node:
                return None
            node = node[part]
    return node


def _as_text(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return str(value)
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def field_at(*path: PathPart) -> Extractor:
    """Strategy: the non-empty string (or integer) found at ``path``."""
    def _extract(payload: Any) -> Optional[str]:
        return _as_text(dig(payload, path))
    _extract.__name__ = "field_at(" + ".".join(str(p) for p in path) + ")"
    return _extract


def first_audio_asset(*path: PathPart) -> Extractor:
    """Strategy: first string of the array at ``path``, if it looks like audio."""
    def _extract(payload: Any) -> Optional[str]:
        items = dig(payload, path)
        if not isinstance(items, list) or not items:
            return None
        first = items[0]
        if isinstance(first, str) and first.lower().split("?")[0].endswith(AUDIO_EXTENSIONS):
            return first
        return None
    _extract.__name__ = "first_audio_asset(" + ".".join(str(p) for p in path) + ")"
    return _extract


# Order matters: some schemas nest an ``id`` under ``data`` that would
# otherwise be shadowed by an unrelated top-level ``id``.
DEFAULT_JOB_ID_STRATEGIES: Tuple[Extractor, ...] = (
    field_at("data", "taskId"),
    field_at("taskId"),
    field_at("id"),
    field_at("data", "id"),
    field_at("data", 0, "id"),
    field_at("data", 0, "taskId"),
    field_at(0, "id"),
    field_at(0, "taskId"),
)

DEFAULT_RESULT_URL_STRATEGIES: Tuple[Extractor, ...] = (
    field_at("data", "response", "sunoData", 0, "audioUrl"),
    field_at("data", "response", "sunoData", 0, "audio_url"),
    field_at("clips", 0, "audio_url"),
    field_at("clips", 0, "audioUrl"),
    field_at("tracks", 0, "audio_url"),
    field_at("tracks", 0, "audioUrl"),
    field_at("data", 0, "audio_url"),
    field_at("data", 0, "audioUrl"),
    field_at("audioUrl"),
    field_at("audio_url"),
    field_at("url"),
    field_at("data", "audioUrl"),
    field_at("data", "audio_url"),
    first_audio_asset("assets"),
    first_audio_asset("output"),
    first_audio_asset("files"),
    first_audio_asset("data", "assets"),
)


def first_match(payload: Any, strategies: Sequence[Extractor]) -> Optional[str]:
    for strategy in strategies:
        value = strategy(payload)
        if value is not None:
            return value
    return None


def find_job_id(
    payload: Any,
    strategies: Sequence[Extractor] = DEFAULT_JOB_ID_STRATEGIES,
) -> Optional[str]:
    """Return the task identifier in a submission response, or None."""
    return first_match(payload, strategies)


# ---------------------------------------------------------------------------
# Job status
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Pending:
    raw_status: Any = None


@dataclass(frozen=True)
class Succeeded:
    result_url: Optional[str]


@dataclass(frozen=True)
class Failed:
    reason: str = ""
    raw_status: Any = None


@dataclass(frozen=True)
class Unrecognized:
    raw_payload: Any = None


JobStatus = Union[Pending, Succeeded, Failed, Unrecognized]


@dataclass(frozen=True)
class StatusVocabulary:
    """How one API version reports job status.

    kind:
        "string" - a textual status compared case-insensitively against
        ``success_values`` / ``failure_values``; anything else is pending.
        "flag"   - a numeric flag, 1 = success, -1 = failure.
    """
    kind: str = "string"
    status_paths: Tuple[Tuple[PathPart, ...], ...] = (("status",),)
    success_values: Tuple[str, ...] = ("completed", "succeeded")
    failure_values: Tuple[str, ...] = ("failed", "error")
    reason_paths: Tuple[Tuple[PathPart, ...], ...] = (
        ("errorMessage",),
        ("error",),
        ("msg",),
    )
    envelope_code_path: Optional[Tuple[PathPart, ...]] = None
    envelope_ok_codes: Tuple[int, ...] = (200,)

    def __post_init__(self):
        if self.kind not in ("string", "flag"):
            raise ValueError(f"Unknown status vocabulary kind '{self.kind}'")


def _find_status_value(payload: Any, paths) -> Any:
    for path in paths:
        value = dig(payload, path)
        if value is not None:
            return value
    return None


def _reason(payload: Any, vocabulary: StatusVocabulary) -> str:
    for path in vocabulary.reason_paths:
        text = _as_text(dig(payload, path))
        if text:
            return text
    return ""


def _envelope_ok(payload: Any, vocabulary: StatusVocabulary) -> bool:
    if vocabulary.envelope_code_path is None:
        return True
    code = dig(payload, vocabulary.envelope_code_path)
    try:
        return int(code) in vocabulary.envelope_ok_codes
    except (TypeError, ValueError):
        return False


def _flag_value(value: Any) -> Optional[int]:
    """Exact integers only; floats and other strings are not flags."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        text = value.strip()
        digits = text[1:] if text.startswith("-") else text
        if digits.isdecimal():
            return int(text)
    return None


def resolve_status(
    payload: Any,
    vocabulary: StatusVocabulary,
    url_strategies: Sequence[Extractor] = DEFAULT_RESULT_URL_STRATEGIES,
) -> JobStatus:
    """Interpret one status response. Never raises."""
    if not isinstance(payload, (dict, list)) or not _envelope_ok(payload, vocabulary):
        return Unrecognized(payload)

    value = _find_status_value(payload, vocabulary.status_paths)
    if value is None:
        return Unrecognized(payload)

    if vocabulary.kind == "flag":
        flag = _flag_value(value)
        if flag == 1:
            return Succeeded(first_match(payload, url_strategies))
        if flag == -1:
            return Failed(_reason(payload, vocabulary), raw_status=value)
        return Pending(value)

    status = str(value).strip()
    folded = status.casefold()
    if folded in {v.casefold() for v in vocabulary.success_values}:
        return Succeeded(first_match(payload, url_strategies))
    if folded in {v.casefold() for v in vocabulary.failure_values}:
        return Failed(_reason(payload, vocabulary), raw_status=status)
    return Pending(status)


def describe(status: JobStatus) -> str:
    """Short label for logs."""
    if isinstance(status, Pending):
        return f"pending ({status.raw_status})"
    if isinstance(status, Succeeded):
        return f"succeeded ({status.result_url or 'no artifact'})"
    if isinstance(status, Failed):
        return f"failed ({status.reason or status.raw_status or 'unknown'})"
    return "unrecognized"

