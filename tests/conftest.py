"""Shared fixtures: an in-memory profile backend mounted as a requests transport."""

import json
import os
from dataclasses import dataclass
from typing import Any
from urllib.parse import unquote, urlparse

import pytest
import requests
from requests.adapters import BaseAdapter

from context_admin.client.api import ContextProfileClient, PROFILES_PATH
from context_admin.config import get_settings


BASE_URL = "http://testserver"

SAMPLE_PROFILES = [
    {
        "id": "1",
        "role": "Backend Developer",
        "basePrompt": "You are a senior backend developer.\nPropose APIs and data models.",
        "maintainedBy": "alice",
    },
    {
        "id": "2",
        "role": "QA Engineer",
        "basePrompt": "You derive test plans and failure modes.",
        "maintainedBy": "bob",
    },
]


@dataclass
class RecordedRequest:
    method: str
    path: str
    body: Any
    headers: dict[str, str]


class FakeBackend(BaseAdapter):
    """Serves the context profile endpoints from a dict.

    ``fail`` maps an HTTP method to a status code returned for every request
    with that method; ``fail_once`` does the same for the next request only.
    """

    def __init__(self, profiles: list[dict[str, Any]] | None = None):
        super().__init__()
        self.profiles: dict[str, dict[str, Any]] = {
            p["id"]: dict(p) for p in (profiles or [])
        }
        self.requests: list[RecordedRequest] = []
        self.fail: dict[str, int] = {}
        self.fail_once: dict[str, int] = {}
        self._next_id = 100

    def send(self, request, stream=False, timeout=None, verify=True, cert=None, proxies=None):
        path = urlparse(request.url).path
        body = json.loads(request.body) if request.body else None
        self.requests.append(
            RecordedRequest(request.method, path, body, dict(request.headers))
        )

        if request.method in self.fail or request.method in self.fail_once:
            status = self.fail_once.pop(request.method, None) or self.fail[request.method]
            payload = {"error": "boom"} if status >= 400 else None
            return self._response(request, status, payload)

        if path == PROFILES_PATH:
            if request.method == "GET":
                return self._response(request, 200, list(self.profiles.values()))
            if request.method == "POST":
                profile_id = str(self._next_id)
                self._next_id += 1
                self.profiles[profile_id] = {"id": profile_id, **body}
                return self._response(request, 201, self.profiles[profile_id])

        if path.startswith(PROFILES_PATH + "/"):
            profile_id = unquote(path[len(PROFILES_PATH) + 1:])
            if profile_id not in self.profiles:
                return self._response(request, 404, {"error": "not found"})
            if request.method == "PUT":
                self.profiles[profile_id].update(body)
                return self._response(request, 200, self.profiles[profile_id])
            if request.method == "DELETE":
                del self.profiles[profile_id]
                return self._response(request, 204, None)

        return self._response(request, 405, {"error": "method not allowed"})

    def close(self):
        pass

    @property
    def last_request(self) -> RecordedRequest:
        return self.requests[-1]

    def methods(self) -> list[str]:
        return [r.method for r in self.requests]

    def _response(self, request, status: int, payload: Any) -> requests.Response:
        response = requests.Response()
        response.status_code = status
        response.reason = "OK" if status < 400 else "Error"
        response.url = request.url
        response.request = request
        response.encoding = "utf-8"
        response.headers["Content-Type"] = "application/json"
        response._content = json.dumps(payload).encode() if payload is not None else b""
        return response


class UnreachableBackend(BaseAdapter):
    """Fails every request at the transport level."""

    def send(self, request, **kwargs):
        raise requests.ConnectionError("Connection refused")

    def close(self):
        pass


def make_session(adapter: BaseAdapter) -> requests.Session:
    session = requests.Session()
    session.mount("http://", adapter)
    return session


@pytest.fixture(autouse=True)
def clean_settings(monkeypatch):
    """Isolate tests from CONTEXT_ADMIN_* variables in the environment."""
    for key in list(os.environ):
        if key.startswith("CONTEXT_ADMIN_"):
            monkeypatch.delenv(key)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def backend():
    """Backend pre-loaded with two profiles."""
    return FakeBackend(SAMPLE_PROFILES)


@pytest.fixture
def empty_backend():
    return FakeBackend()


@pytest.fixture
def session(backend):
    return make_session(backend)


@pytest.fixture
def client(session):
    return ContextProfileClient(BASE_URL, session=session)
