"""Shared fixtures for unit tests."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Any
from unittest.mock import MagicMock

import pytest
import requests

from sysdig_provisioner.client import MonitorClient, SecureClient
from sysdig_provisioner.config import load

if TYPE_CHECKING:
    from collections.abc import Callable
    from pathlib import Path

    from sysdig_provisioner.config.schema import Config

_SYSDIG_ENV_VARS = (
    "SYSDIG_MONITOR_URL",
    "SYSDIG_MONITOR_API_TOKEN",
    "SYSDIG_SECURE_URL",
    "SYSDIG_SECURE_API_TOKEN",
    "SYSDIG_INSECURE_TLS",
    "SYSDIG_LOG",
)


@pytest.fixture(autouse=True)
def _clean_sysdig_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove SYSDIG_* env vars so unit tests don't pick up real credentials."""
    for var in _SYSDIG_ENV_VARS:
        monkeypatch.delenv(var, raising=False)


@pytest.fixture
def make_config(tmp_path: Path) -> Callable[..., Config]:
    """Factory fixture: write YAML + optional .env, return loaded Config."""

    def _make(yaml_str: str, *, dotenv: str | None = None) -> Config:
        (tmp_path / "config.yaml").write_text(yaml_str)
        if dotenv is not None:
            (tmp_path / ".env").write_text(dotenv)
        return load(tmp_path / "config.yaml")

    return _make


@pytest.fixture
def make_response() -> Callable[..., requests.Response]:
    """Factory fixture: a real ``requests.Response`` with a JSON (or raw) body."""

    def _make(status: int, body: Any = None, *, raw: bytes | None = None) -> requests.Response:
        response = requests.Response()
        response.status_code = status
        if raw is not None:
            response._content = raw
        elif body is not None:
            response._content = json.dumps(body).encode("utf-8")
        else:
            response._content = b""
        return response

    return _make


@pytest.fixture
def requester() -> MagicMock:
    """Stand-in for ``Requester``; set ``requester.request.return_value`` per test."""
    return MagicMock()


@pytest.fixture
def monitor(requester: MagicMock) -> MonitorClient:
    return MonitorClient("https://monitor.test", requester)


@pytest.fixture
def secure(requester: MagicMock) -> SecureClient:
    return SecureClient("https://secure.test", requester)


@pytest.fixture
def echo(make_response: Callable[..., requests.Response]) -> Callable[..., Callable[..., Any]]:
    """Factory fixture: a ``requester.request`` side effect echoing the sent body.

    ``extra`` is merged into the echoed object, e.g. a server-assigned ``id``.
    ``envelope`` is a key both bodies nest the object under; ``wrap`` nests a
    bare request body under a key in the response only.
    """

    def _make(
        status: int = 200,
        *,
        envelope: str | None = None,
        wrap: str | None = None,
        **extra: Any,
    ):
        def _respond(method: str, url: str, payload: bytes | None = None) -> requests.Response:
            _ = method, url
            body = json.loads(payload) if payload else {}
            (body[envelope] if envelope else body).update(extra)
            return make_response(status, {wrap: body} if wrap else body)

        return _respond

    return _make
