"""Shared fixtures: a Client wired to an in-memory Rollbar endpoint."""

import json

import httpx
import pytest

from rollbar_reporter import Client, hooks


class RecordingService:
    """httpx.MockTransport handler that stores every posted item."""

    def __init__(self, status_code: int = 200, reply=None, error: Exception = None):
        self.status_code = status_code
        self.reply = reply if reply is not None else {"err": 0, "result": {"id": None, "uuid": "abc123"}}
        self.error = error
        self.requests = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status_code, json=self.reply)

    @property
    def items(self):
        return [json.loads(request.content.decode("utf-8")) for request in self.requests]


@pytest.fixture
def service():
    return RecordingService()


@pytest.fixture
def make_client():
    clients = []

    def _make(handler, **kwargs):
        http_client = httpx.Client(transport=httpx.MockTransport(handler))
        kwargs.setdefault("enable_console_fallback", False)
        client = Client.create("ACCESS_TOKEN", "ENVIRONMENT", http_client=http_client, **kwargs)
        clients.append(http_client)
        return client

    yield _make
    for http_client in clients:
        http_client.close()


@pytest.fixture
def client(make_client, service):
    return make_client(service)


@pytest.fixture(autouse=True)
def _reset_failure_hook(monkeypatch):
    # depends on monkeypatch so patched hooks are restored after uninstall
    hooks.uninstall()
    yield
    hooks.uninstall()
