"""Tests for response normalization: task ids, statuses, result URLs."""

import pytest

from cover_service.remote.profiles import CLIPS, RECORD_INFO, SUCCESS_FLAG, get_profile
from cover_service.remote.schema import (
    Failed,
    Pending,
    StatusVocabulary,
    Succeeded,
    Unrecognized,
    dig,
    find_job_id,
    first_match,
    DEFAULT_RESULT_URL_STRATEGIES,
    resolve_status,
)


# ── Task id extraction ───────────────────────────────────────────────


@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"code": 200, "data": {"taskId": "T1"}}, "T1"),
        ({"taskId": "T2"}, "T2"),
        ({"id": "T3"}, "T3"),
        ({"data": {"id": "T4"}}, "T4"),
        ({"data": [{"id": "T5"}]}, "T5"),
        ({"data": [{"taskId": "T6"}]}, "T6"),
        ([{"id": "T7"}], "T7"),
        ([{"taskId": "T8"}], "T8"),
        ({"id": 42}, "42"),
    ],
)
def test_find_job_id_shapes(payload, expected):
    assert find_job_id(payload) == expected


def test_nested_task_id_wins_over_top_level_id():
    payload = {"id": "request-123", "data": {"taskId": "task-abc"}}
    assert find_job_id(payload) == "task-abc"


def test_top_level_task_id_wins_over_nested_id():
    payload = {"taskId": "outer", "data": {"id": "inner"}}
    assert find_job_id(payload) == "outer"


@pytest.mark.parametrize(
    "payload",
    [
        {"foo": "bar"},
        {},
        [],
        None,
        "plain text error",
        {"data": []},
        {"data": None},
        {"taskId": ""},
        {"id": True},
        {"data": {"taskId": {"nested": "x"}}},
    ],
)
def test_find_job_id_unrecognized_returns_none(payload):
    assert find_job_id(payload) is None


def test_dig_handles_mismatched_types():
    assert dig({"a": [1, 2]}, ("a", 5)) is None
    assert dig({"a": {"b": 1}}, ("a", 0)) is None
    assert dig([{"a": 1}], ("a",)) is None
    assert dig({"a": [{"b": "c"}]}, ("a", 0, "b")) == "c"


# ── Result URL extraction ────────────────────────────────────────────


@pytest.mark.parametrize(
    "payload, expected",
    [
        ({"data": {"response": {"sunoData": [{"audioUrl": "https://x/1.mp3"}]}}}, "https://x/1.mp3"),
        ({"clips": [{"audio_url": "https://x/2.mp3"}]}, "https://x/2.mp3"),
        ({"tracks": [{"audioUrl": "https://x/3.mp3"}]}, "https://x/3.mp3"),
        ({"audioUrl": "https://x/4.mp3"}, "https://x/4.mp3"),
        ({"audio_url": "https://x/5.mp3"}, "https://x/5.mp3"),
        ({"url": "https://x/6"}, "https://x/6"),
        ({"assets": ["https://x/7.wav"]}, "https://x/7.wav"),
        ({"output": ["https://x/8.MP3?sig=abc"]}, "https://x/8.MP3?sig=abc"),
    ],
)
def test_result_url_locations(payload, expected):
    assert first_match(payload, DEFAULT_RESULT_URL_STRATEGIES) == expected


def test_asset_array_without_audio_extension_is_ignored():
    payload = {"assets": ["https://x/cover.png", "https://x/a.mp3"]}
    assert first_match(payload, DEFAULT_RESULT_URL_STRATEGIES) is None


# ── String vocabulary ────────────────────────────────────────────────


@pytest.mark.parametrize("value", ["completed", "succeeded", "COMPLETED"])
def test_string_success_with_artifact(value):
    status = resolve_status(
        {"status": value, "clips": [{"audio_url": "https://x/a.mp3"}]},
        CLIPS.vocabulary,
    )
    assert status == Succeeded("https://x/a.mp3")


def test_string_success_without_artifact_is_not_pending():
    status = resolve_status({"status": "completed", "clips": []}, CLIPS.vocabulary)
    assert status == Succeeded(None)


@pytest.mark.parametrize("value", ["failed", "error"])
def test_string_failure_without_reason_keeps_raw_status(value):
    status = resolve_status({"status": value}, CLIPS.vocabulary)
    assert isinstance(status, Failed)
    assert status.reason == ""
    assert status.raw_status == value


def test_string_failure_uses_reason_field():
    status = resolve_status({"status": "failed", "errorMessage": "bad audio"}, CLIPS.vocabulary)
    assert isinstance(status, Failed)
    assert status.reason == "bad audio"


@pytest.mark.parametrize("value", ["PENDING", "queued", "streaming", ""])
def test_other_string_values_are_pending(value):
    assert isinstance(resolve_status({"status": value}, CLIPS.vocabulary), Pending)


def test_record_info_success_and_failure():
    vocab = RECORD_INFO.vocabulary
    ok = {
        "code": 200,
        "data": {
            "status": "FIRST_SUCCESS",
            "response": {"sunoData": [{"audioUrl": "https://x/r.mp3"}]},
        },
    }
    assert resolve_status(ok, vocab) == Succeeded("https://x/r.mp3")

    failed = {"code": 200, "data": {"status": "CREATE_TASK_FAILED", "errorMessage": "no credits"}}
    status = resolve_status(failed, vocab)
    assert isinstance(status, Failed)
    assert status.reason == "no credits"
    assert status.raw_status == "CREATE_TASK_FAILED"


def test_record_info_envelope_msg_is_not_a_failure_reason():
    payload = {
        "code": 200,
        "msg": "success",
        "data": {"status": "GENERATE_AUDIO_FAILED", "errorMessage": None},
    }
    status = resolve_status(payload, RECORD_INFO.vocabulary)
    assert isinstance(status, Failed)
    assert status.reason == ""
    assert status.raw_status == "GENERATE_AUDIO_FAILED"


def test_record_info_envelope_error_is_unrecognized():
    payload = {"code": 500, "msg": "busy", "data": {"status": "SUCCESS"}}
    assert isinstance(resolve_status(payload, RECORD_INFO.vocabulary), Unrecognized)


def test_record_info_null_data_is_unrecognized():
    payload = {"code": 200, "data": None}
    assert isinstance(resolve_status(payload, RECORD_INFO.vocabulary), Unrecognized)


# ── Flag vocabulary ──────────────────────────────────────────────────


def test_flag_success():
    payload = {"successFlag": 1, "audioUrl": "https://x/f.mp3"}
    assert resolve_status(payload, SUCCESS_FLAG.vocabulary) == Succeeded("https://x/f.mp3")


def test_flag_success_nested_and_string_valued():
    payload = {"data": {"successFlag": "1", "audioUrl": "https://x/g.mp3"}}
    assert resolve_status(payload, SUCCESS_FLAG.vocabulary) == Succeeded("https://x/g.mp3")


def test_flag_failure_reason():
    payload = {"successFlag": -1, "errorMessage": "quota exceeded"}
    status = resolve_status(payload, SUCCESS_FLAG.vocabulary)
    assert isinstance(status, Failed)
    assert status.reason == "quota exceeded"


def test_flag_failure_without_reason_is_empty():
    status = resolve_status({"successFlag": -1}, SUCCESS_FLAG.vocabulary)
    assert isinstance(status, Failed)
    assert status.reason == ""
    assert status.raw_status == -1


@pytest.mark.parametrize("flag", [0, 2, "x", None, 1.5, -1.5, "1.0", True])
def test_flag_other_values(flag):
    status = resolve_status({"successFlag": flag}, SUCCESS_FLAG.vocabulary)
    if flag is None:
        assert isinstance(status, Unrecognized)
    else:
        assert isinstance(status, Pending)


@pytest.mark.parametrize("flag, expected", [("1", Succeeded), (" -1 ", Failed), (-1, Failed)])
def test_flag_integer_strings(flag, expected):
    status = resolve_status({"successFlag": flag}, SUCCESS_FLAG.vocabulary)
    assert isinstance(status, expected)


# ── Robustness ───────────────────────────────────────────────────────


@pytest.mark.parametrize("payload", [None, "oops", 7, {"unrelated": True}])
def test_resolve_status_never_raises(payload):
    assert isinstance(resolve_status(payload, CLIPS.vocabulary), Unrecognized)


def test_unknown_vocabulary_kind_rejected():
    with pytest.raises(ValueError):
        StatusVocabulary(kind="emoji")


def test_get_profile_unknown_name():
    with pytest.raises(ValueError, match="Available"):
        get_profile("v99")


def test_status_request_shapes():
    assert RECORD_INFO.status_request("T1") == ("/generate/record-info", {"taskId": "T1"})
    assert CLIPS.status_request("T1") == ("/get/T1", {})
