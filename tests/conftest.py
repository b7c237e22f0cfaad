"""Pytest configuration - loads .env for live tests and fakes the HTTP layer for the rest."""

import email.message
import json
import urllib.error
import urllib.parse
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pytest
from dotenv import load_dotenv

# Load .env from project root
env_path = Path(__file__).parent.parent / ".env"
load_dotenv(env_path)

ENV_VARS = (
    "GROOVESHARK_API_KEY",
    "GROOVESHARK_API_SECRET",
    "GROOVESHARK_API_HOST",
    "GROOVESHARK_LOGIN",
    "GROOVESHARK_PASSWORD",
)

TEST_KEY = "pub"
TEST_SECRET = "secrets"


@dataclass
class RecordedRequest:
    """A request captured by FakeHTTP."""

    url: str
    method: str
    body: bytes
    content_type: str | None
    user_agent: str | None
    timeout: float | None

    @property
    def envelope(self) -> dict[str, Any]:
        return json.loads(self.body)

    @property
    def scheme(self) -> str:
        return urllib.parse.urlsplit(self.url).scheme

    @property
    def signature(self) -> str:
        return urllib.parse.parse_qs(urllib.parse.urlsplit(self.url).query)["sig"][0]


class FakeBody:
    """Response body that returns the data, or raises the queued read error."""

    def __init__(self, data: bytes, read_error: BaseException | None = None):
        self._data = data
        self._read_error = read_error

    def read(self, *_args) -> bytes:
        if self._read_error is not None:
            raise self._read_error
        return self._data

    def close(self) -> None:
        pass


class FakeResponse:
    def __init__(self, status: int, body: FakeBody):
        self.status = status
        self._body = body

    def read(self) -> bytes:
        return self._body.read()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False


class FakeHTTP:
    """Stand-in for urllib.request.urlopen that replays queued responses."""

    def __init__(self):
        self.requests: list[RecordedRequest] = []
        self._queue: list[tuple[int, Any, BaseException | None]] = []

    def queue(self, body: Any, status: int = 200, read_error: BaseException | None = None) -> None:
        """
        Queue a response body (dict/list are JSON encoded) or an exception to raise.

        With ``read_error``, the connection succeeds but reading the body raises it.
        """
        if isinstance(body, (dict, list)):
            body = json.dumps(body)
        self._queue.append((status, body, read_error))

    def urlopen(self, req: urllib.request.Request, timeout: float | None = None):
        self.requests.append(
            RecordedRequest(
                url=req.full_url,
                method=req.get_method(),
                body=req.data,
                content_type=req.get_header("Content-type"),
                user_agent=req.get_header("User-agent"),
                timeout=timeout,
            )
        )
        if not self._queue:
            raise AssertionError(f"Unexpected request to {req.full_url}")

        status, body, read_error = self._queue.pop(0)
        if isinstance(body, BaseException):
            raise body
        data = FakeBody(body.encode("utf-8") if isinstance(body, str) else body, read_error)
        if status >= 400:
            raise urllib.error.HTTPError(req.full_url, status, "Error", email.message.Message(), data)
        return FakeResponse(status, data)

    @property
    def last(self) -> RecordedRequest:
        return self.requests[-1]

    @property
    def methods(self) -> list[str]:
        return [r.envelope["method"] for r in self.requests]


@pytest.fixture
def clean_env(monkeypatch):
    """Remove GROOVESHARK_* variables so tests don't depend on the local .env."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def fake_http(monkeypatch, clean_env) -> FakeHTTP:
    """Patch urlopen and return the fake for queuing responses and inspecting requests."""
    fake = FakeHTTP()
    monkeypatch.setattr(urllib.request, "urlopen", fake.urlopen)
    return fake
