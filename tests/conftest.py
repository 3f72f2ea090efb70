"""Fixtures partagées : un faux backend branché sur httpx.MockTransport."""

from __future__ import annotations

import json
from typing import Any, Callable, Iterator

import httpx
import pytest

from adminconsole.services import SessionApiClient

BASE_URL = "http://testserver"

Handler = Callable[[httpx.Request], httpx.Response]


class FakeBackend:
    """Enregistre chaque requête reçue et répond selon les routes déclarées."""

    def __init__(self) -> None:
        self.requests: list[httpx.Request] = []
        self._routes: dict[tuple[str, str], Handler] = {}

    def route(self, method: str, path: str, status: int = 200, **response_kwargs: Any) -> None:
        self._routes[(method, path)] = lambda request: httpx.Response(status, **response_kwargs)

    def handle(self, method: str, path: str, handler: Handler) -> None:
        self._routes[(method, path)] = handler

    def fail(self, method: str, path: str, message: str = "Connection refused") -> None:
        def _raise(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError(message, request=request)

        self._routes[(method, path)] = _raise

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        handler = self._routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"error": {"code": "not_found", "message": "Not found"}})
        return handler(request)

    def last_json(self) -> Any:
        return json.loads(self.requests[-1].content)


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def client(backend: FakeBackend) -> Iterator[SessionApiClient]:
    api = SessionApiClient(BASE_URL, transport=httpx.MockTransport(backend))
    yield api
    api.close()


@pytest.fixture
def logged_in_client(client: SessionApiClient, backend: FakeBackend) -> SessionApiClient:
    backend.route(
        "POST",
        "/api/login",
        json={"id": 1, "username": "admin", "isAdmin": True},
        headers={"Set-Cookie": "sid=tok123; Path=/; HttpOnly; SameSite=Lax"},
    )
    client.login("admin", "secret")
    backend.requests.clear()
    return client
