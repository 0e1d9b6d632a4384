"""Pytest fixtures for fcctl tests."""

import json
import os
import sys
from pathlib import Path

import httpx
import pytest

# Ensure src/ is importable without an editable install
_src = Path(__file__).resolve().parent.parent / "src"
if str(_src) not in sys.path:
    sys.path.insert(0, str(_src))

from core.config import AppSettings  # noqa: E402


@pytest.fixture(autouse=True)
def _isolated_env(monkeypatch, tmp_path):
    """Keep developer env vars and .env files out of the tests."""
    for key in list(os.environ):
        if key.upper().startswith("FCCTL_"):
            monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    monkeypatch.chdir(tmp_path)


@pytest.fixture
def settings(tmp_path) -> AppSettings:
    return AppSettings(api_socket=tmp_path / "api.sock", http_timeout_seconds=1.0)


class RecordingVmm:
    """In-memory stand-in for the VMM API; records every request it receives."""

    def __init__(self, status_code: int = 204, body: dict | None = None):
        self.requests: list[httpx.Request] = []
        self.status_code = status_code
        self.body = body

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.body is not None:
            return httpx.Response(self.status_code, json=self.body)
        return httpx.Response(self.status_code)

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self)

    def json_bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]


@pytest.fixture
def vmm() -> RecordingVmm:
    return RecordingVmm()


@pytest.fixture
def make_vmm():
    """Build a RecordingVmm that answers with a given status/body."""
    return RecordingVmm
