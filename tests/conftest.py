from __future__ import annotations

import json
from typing import Any, Callable, Optional, Union

import httpx
import pytest

from hillside.app import AppContext
from hillside.core.config import Settings

# Handlers may be coroutines; MockTransport awaits them.
RouteResult = Union[httpx.Response, Callable[[httpx.Request], Any]]


class FakeBackend:
    """Route table behind ``httpx.MockTransport``; every request is recorded."""

    def __init__(self):
        self.routes: dict[tuple[str, str], RouteResult] = {}
        self.calls: list[httpx.Request] = []

    def on(self, method: str, path: str, status: int = 200, json_body: Any = None, **kwargs) -> None:
        handler = kwargs.pop("handler", None)
        if handler is not None:
            self.routes[(method, path)] = handler
            return
        self.routes[(method, path)] = httpx.Response(status, json=json_body, **kwargs)

    def handle(self, request: httpx.Request) -> httpx.Response:
        self.calls.append(request)
        route = self.routes.get((request.method, request.url.path))
        if route is None:
            return httpx.Response(404, json={"message": f"no route for {request.method} {request.url.path}"})
        if callable(route):
            return route(request)
        return httpx.Response(route.status_code, content=route.content, headers=route.headers)

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handle)

    def calls_to(self, method: str, path: str) -> list[httpx.Request]:
        return [call for call in self.calls if call.method == method and call.url.path == path]

    def json_of(self, request: httpx.Request) -> Optional[Any]:
        return json.loads(request.content) if request.content else None


def user_payload(user_id: int = 2, role: str = "hillsider", position: str = "Contributor", **extra: Any) -> dict:
    return {"id": user_id, "name": f"User {user_id}", "email": f"u{user_id}@hillside.test", "role": role, "position": position, **extra}


def publication_payload(publication_id: int = 10, status: str = "published", user_id: int = 2, **extra: Any) -> dict:
    return {
        "publication_id": publication_id,
        "user_id": user_id,
        "title": f"Story {publication_id}",
        "byline": "Staff",
        "body": "Body text",
        "category": "University",
        "status": status,
        "writers": [{"id": user_id, "name": f"User {user_id}"}],
        **extra,
    }


@pytest.fixture
def settings() -> Settings:
    return Settings(api_origin="http://backend.test", proxy_target="http://backend.test", log_level="WARNING")


@pytest.fixture
def backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture
def ctx(settings: Settings, backend: FakeBackend) -> AppContext:
    return AppContext(settings, transport=backend.transport())
