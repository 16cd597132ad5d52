"""
Shared pytest fixtures.

The HTTP layer is replaced by FakeSession, which records every request and
answers with real requests.Response objects, and HOME is redirected to a
temporary directory so the token file and log files stay isolated.
"""

import json
import logging
from typing import Any, Dict, List, Optional

import pytest
import requests

from collected_notes import client as client_module


def make_response(
    status_code: int = 200,
    body: Any = None,
    content_type: str = "application/json",
    url: str = "https://api.collectednotes.com/",
) -> requests.Response:
    """Build a requests.Response the way the transport would hand it back."""
    response = requests.Response()
    response.status_code = status_code
    response.url = url
    if body is None:
        response._content = b""
    elif isinstance(body, str):
        response._content = body.encode("utf-8")
    else:
        response._content = json.dumps(body).encode("utf-8")
    response.headers["Content-Type"] = content_type
    return response


class FakeSession:
    """Stands in for requests.Session and records every request."""

    def __init__(self) -> None:
        self.headers: Dict[str, str] = {}
        self.calls: List[Dict[str, Any]] = []
        self.responses: List[requests.Response] = []
        self.error: Optional[Exception] = None

    def queue(self, *args: Any, **kwargs: Any) -> None:
        self.responses.append(make_response(*args, **kwargs))

    def request(self, method, url, params=None, json=None, headers=None):
        self.calls.append(
            {"method": method, "url": url, "params": params, "json": json, "headers": headers}
        )
        if self.error is not None:
            raise self.error
        if self.responses:
            return self.responses.pop(0)
        return make_response(200, {})


@pytest.fixture
def fake_session(monkeypatch: pytest.MonkeyPatch) -> FakeSession:
    session = FakeSession()
    monkeypatch.setattr(client_module.requests, "Session", lambda: session)
    return session


@pytest.fixture
def home(tmp_path, monkeypatch: pytest.MonkeyPatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    return tmp_path


@pytest.fixture
def token_file(home):
    path = home / ".collected-notes"
    path.write_text("  abc123  \n", encoding="utf-8")
    return path


@pytest.fixture(autouse=True)
def reset_loggers():
    """Drop file handlers so each test logs into its own HOME."""
    yield
    for name in ("collected_notes", "collected_notes.debug"):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
