"""Remote API profiles.

Each profile pins one version of the cover generation API: endpoint paths,
whether a callback URL is mandatory, and how identifiers, statuses and
result URLs are read from its responses.
"""

from dataclasses import dataclass
from typing import Dict, Optional, Tuple

from cover_service.remote.schema import (
    DEFAULT_JOB_ID_STRATEGIES,
    DEFAULT_RESULT_URL_STRATEGIES,
    Extractor,
    StatusVocabulary,
)


@dataclass(frozen=True)
class RemoteProfile:
    name: str
    submit_path: str
    status_path: str  # formatted with task_id
    status_query_param: Optional[str]
    requires_callback: bool
    vocabulary: StatusVocabulary
    job_id_strategies: Tuple[Extractor, ...] = DEFAULT_JOB_ID_STRATEGIES
    result_url_strategies: Tuple[Extractor, ...] = DEFAULT_RESULT_URL_STRATEGIES

    def status_request(self, task_id: str) -> Tuple[str, Dict[str, str]]:
        """Return (path, query params) for a status query."""
        path = self.status_path.format(task_id=task_id)
        params = {self.status_query_param: task_id} if self.status_query_param else {}
        return path, params


# Record-info API: {code: 200, data: {status: "SUCCESS", response: {sunoData: [...]}}}
RECORD_INFO = RemoteProfile(
    name="record_info",
    submit_path="/generate/upload-cover",
    status_path="/generate/record-info",
    status_query_param="taskId",
    requires_callback=True,
    vocabulary=StatusVocabulary(
        kind="string",
        status_paths=(("data", "status"),),
        success_values=("SUCCESS", "FIRST_SUCCESS"),
        failure_values=(
            "GENERATE_AUDIO_FAILED",
            "CREATE_TASK_FAILED",
            "CALLBACK_EXCEPTION",
            "SENSITIVE_WORD_ERROR",
        ),
        # msg is the envelope text ("success"), never a failure reason
        reason_paths=(("data", "errorMessage"),),
        envelope_code_path=("code",),
        envelope_ok_codes=(200,),
    ),
)

# Clip API: {status: "completed", clips: [{audio_url: ...}]}
CLIPS = RemoteProfile(
    name="clips",
    submit_path="/generate/upload-cover",
    status_path="/get/{task_id}",
    status_query_param=None,
    requires_callback=False,
    vocabulary=StatusVocabulary(
        kind="string",
        status_paths=(("status",),),
        success_values=("completed", "succeeded"),
        failure_values=("failed", "error"),
        reason_paths=(("errorMessage",), ("error",), ("msg",)),
    ),
)

# Flag API: {successFlag: 1 | -1 | 0, errorMessage: ...}
SUCCESS_FLAG = RemoteProfile(
    name="success_flag",
    submit_path="/generate/upload-cover",
    status_path="/generate/record-info",
    status_query_param="taskId",
    requires_callback=False,
    vocabulary=StatusVocabulary(
        kind="flag",
        status_paths=(("successFlag",), ("data", "successFlag")),
        reason_paths=(("errorMessage",), ("data", "errorMessage")),
    ),
)

PROFILES: Dict[str, RemoteProfile] = {
    p.name: p for p in (RECORD_INFO, CLIPS, SUCCESS_FLAG)
}


def get_profile(name: str) -> RemoteProfile:
    profile = PROFILES.get(name)
    if profile is None:
        raise ValueError(
            f"Unknown remote profile '{name}'. Available: {list(PROFILES.keys())}"
        )
    return profile
