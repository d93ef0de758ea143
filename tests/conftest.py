"""
Shared fixtures: a scripted audio device, a synchronous executor and a mocked Supabase client.
"""
import concurrent.futures
from unittest.mock import MagicMock

import pytest

from scribe.capture import AudioDevice

WAV_BYTES = b"RIFF\x24\x00\x00\x00WAVEfmt \x10\x00\x00\x00" + b"\x00" * 32
PUBLIC_URL = "https://project.supabase.co/storage/v1/object/public/audio-recordings/user-1/recording_1.webm"


class FakeDevice(AudioDevice):
    """Audio device driven by the test instead of a microphone."""

    mime_type = "audio/webm"

    def __init__(self, open_error: Exception | None = None):
        self.open_error = open_error
        self.on_data = None
        self.on_error = None
        self.constraints = None
        self.timeslice_ms = None
        self.close_calls = 0

    def open(self, constraints, on_data, on_error, timeslice_ms):
        if self.open_error:
            raise self.open_error
        self.constraints = constraints
        self.on_data = on_data
        self.on_error = on_error
        self.timeslice_ms = timeslice_ms

    def close(self):
        self.close_calls += 1

    def emit(self, data: bytes):
        self.on_data(data)

    def fail(self, error: Exception):
        self.on_error(error)


class SyncExecutor(concurrent.futures.Executor):
    """Runs submitted work immediately on the calling thread."""

    def submit(self, fn, *args, **kwargs):
        future = concurrent.futures.Future()
        try:
            future.set_result(fn(*args, **kwargs))
        except Exception as e:
            future.set_exception(e)
        return future


@pytest.fixture
def fake_device():
    return FakeDevice()


@pytest.fixture
def sync_executor():
    return SyncExecutor()


@pytest.fixture
def notices():
    return []


@pytest.fixture
def mock_supabase():
    """Supabase client with a live session, working storage and an insertable table."""
    client = MagicMock()
    client.auth.get_session.return_value = MagicMock(access_token="token-123")
    client.auth.get_user.return_value = MagicMock(user=MagicMock(id="user-1"))

    bucket = client.storage.from_.return_value
    bucket.get_public_url.return_value = PUBLIC_URL
    bucket.download.return_value = WAV_BYTES

    client.from_.return_value.insert.return_value.execute.return_value = MagicMock(data=[{"id": "row-1"}])
    return client


@pytest.fixture
def sample_transcript():
    return "\n".join([
        "Anna: Let's review the launch plan.",
        "Ben: We need to send the press kit by Friday.",
        "Anna: Agreed. I will share the budget report.",
        "Ben: Great.",
    ])
