"""Shared fixtures: a scripted remote backend and test settings."""

import pytest

from cover_service.config import Settings
from cover_service.remote.backend import RemoteBackend


class FakeBackend(RemoteBackend):
    """Scripted stand-in for the remote API.

    ``polls`` is consumed one item per status query; the last item repeats.
    Items that are exceptions are raised instead of returned.
    """

    def __init__(self, submit=None, polls=None, artifact=b"ID3-cover-bytes"):
        self.submit_response = submit
        self.poll_responses = list(polls or [{"status": "PENDING"}])
        self.artifact = artifact
        self.created = []
        self.polled = []
        self.downloaded = []
        self.closed = False

    def create_task(self, payload):
        self.created.append(payload)
        if isinstance(self.submit_response, Exception):
            raise self.submit_response
        return self.submit_response

    def get_task(self, task_id):
        self.polled.append(task_id)
        if len(self.poll_responses) > 1:
            item = self.poll_responses.pop(0)
        else:
            item = self.poll_responses[0]
        if isinstance(item, Exception):
            raise item
        return item

    def download(self, url, destination):
        self.downloaded.append(url)
        if isinstance(self.artifact, Exception):
            raise self.artifact
        with open(destination, "wb") as dst:
            dst.write(self.artifact)
        return len(self.artifact)

    def close(self):
        self.closed = True


@pytest.fixture
def fake_backend():
    return FakeBackend


@pytest.fixture
def make_settings(tmp_path):
    def _make(**overrides):
        values = {
            "upload_dir": str(tmp_path / "uploads"),
            "suno_base_url": "https://remote.example.com/api/v1",
            "suno_api_key": "test-key",
            "remote_profile": "clips",
            "poll_interval_seconds": 0.0,
            "poll_max_attempts": 3,
            "public_base_url": "https://cover.example.com",
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)

    return _make
