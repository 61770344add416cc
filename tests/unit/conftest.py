"""Shared fixtures for unit tests.

``FakeYotoAPI`` answers the Yoto endpoints through ``httpx.MockTransport``
and records every request so tests can assert on call counts and payloads.
"""

import base64
import copy
import json
import time
from typing import Any, Optional

import httpx
import pytest

from yotox.api import YotoTransport
from yotox.config import reset_config
from yotox.domain.models import AudioFile, UploadRequest

API_BASE = "https://api.example.com"
UPLOAD_URL = "https://uploads.example.com/audio/one-time?sig=xyz"
UPLOAD_ID = "upload-123"
SHA256 = "a1b2c3d4e5f6"


def make_card() -> dict[str, Any]:
    return {
        "cardId": "card-1",
        "title": "Old Title",
        "customField": {"keep": ["me", 1]},
        "content": {
            "chapters": [
                {"key": "01", "title": "Old chapter", "tracks": []},
                {"key": "02", "title": "Another", "tracks": []},
            ],
            "playbackType": "linear",
        },
        "metadata": {
            "description": "A card",
            "media": {"duration": 10, "fileSize": 100, "hasStreams": True},
        },
    }


def make_transcode(title: Optional[str] = "Tagged Title") -> dict[str, Any]:
    metadata = {"title": title} if title is not None else {}
    return {
        "transcodedSha256": SHA256,
        "transcodedInfo": {
            "duration": 312,
            "fileSize": 1572864,
            "channels": "stereo",
            "format": "aac",
            "metadata": metadata,
        },
    }


def make_jwt(exp: float) -> str:
    def segment(data: dict) -> str:
        raw = base64.urlsafe_b64encode(json.dumps(data).encode()).decode()
        return raw.rstrip("=")

    return f"{segment({'alg': 'none'})}.{segment({'exp': exp})}.signature"


class FakeYotoAPI:
    """Scriptable stand-in for the Yoto API and the upload host."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self.card = make_card()
        self.transcode = make_transcode()
        self.upload_payload: dict[str, Any] = {
            "upload": {"uploadUrl": UPLOAD_URL, "uploadId": UPLOAD_ID}
        }
        self.put_status = 200
        self.fetch_status = 200
        self.save_status = 200
        self.save_error_body = "card validation failed"
        # None means never ready
        self.ready_after_polls: Optional[int] = 0
        self.failing_polls = 0
        self.polls = 0

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        path = request.url.path

        if request.url.host == "uploads.example.com":
            return httpx.Response(self.put_status, text="" if self.put_status < 400 else "denied")

        if path == "/media/transcode/audio/uploadUrl":
            return httpx.Response(200, json=self.upload_payload)

        if path == f"/media/upload/{UPLOAD_ID}/transcoded":
            self.polls += 1
            if self.polls <= self.failing_polls:
                return httpx.Response(503, text="busy")
            if self.ready_after_polls is not None and self.polls > self.ready_after_polls:
                return httpx.Response(200, json={"transcode": self.transcode})
            return httpx.Response(200, json={"transcode": {"transcodedInfo": None}})

        if path == "/content/mine":
            return httpx.Response(200, json={"cards": []})

        if path.startswith("/content/") and request.method == "GET":
            if self.fetch_status >= 400:
                return httpx.Response(self.fetch_status, text="not found")
            return httpx.Response(200, json={"card": copy.deepcopy(self.card)})

        if path == "/content" and request.method == "POST":
            if self.save_status >= 400:
                return httpx.Response(self.save_status, text=self.save_error_body)
            return httpx.Response(200, json={"card": json.loads(request.content)})

        return httpx.Response(404, text="unknown route")

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self.handler))

    def calls(self, method: str, path: str) -> list[httpx.Request]:
        return [r for r in self.requests if r.method == method and r.url.path == path]

    @property
    def save_calls(self) -> list[httpx.Request]:
        return self.calls("POST", "/content")


@pytest.fixture
def fake_api() -> FakeYotoAPI:
    return FakeYotoAPI()


@pytest.fixture
def transport(fake_api):
    transport = YotoTransport("test-token", base_url=API_BASE, client=fake_api.client())
    yield transport
    transport.close()


@pytest.fixture
def audio_file() -> AudioFile:
    return AudioFile(data=b"ID3fake-mp3-bytes", content_type="audio/mpeg", name="story.mp3")


@pytest.fixture
def upload_request(audio_file) -> UploadRequest:
    return UploadRequest(
        audio_file=audio_file,
        title="New Title",
        card_id="card-1",
        access_token="test-token",
        api_base_url=API_BASE,
    )


@pytest.fixture
def no_sleep():
    """Sleep replacement that records requested delays."""
    delays: list[float] = []
    return delays.append, delays


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point configuration at a temporary token file."""
    monkeypatch.setenv("YOTOX_TOKEN_FILE", str(tmp_path / "tokens.json"))
    monkeypatch.setenv("YOTO_CLIENT_ID", "client-abc")
    reset_config()
    yield
    reset_config()


@pytest.fixture
def valid_jwt() -> str:
    return make_jwt(time.time() + 3600)


@pytest.fixture
def expired_jwt() -> str:
    return make_jwt(time.time() - 60)


@pytest.fixture
def card() -> dict[str, Any]:
    return make_card()


@pytest.fixture
def transcode_payload() -> dict[str, Any]:
    return make_transcode()


@pytest.fixture
def untitled_transcode_payload() -> dict[str, Any]:
    return make_transcode(title=None)
