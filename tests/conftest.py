"""Shared fixtures: a stub Blinko service on top of httpx.MockTransport."""

from __future__ import annotations

import json
from typing import Any

import httpx
import pytest

from mcp_server_blinko.config import Settings


class StubBlinko:
    """Answers Blinko API paths with canned responses and records every request."""

    def __init__(self) -> None:
        self.routes: dict[tuple[str, str], httpx.Response] = {}
        self.requests: list[httpx.Request] = []

    def route(self, method: str, path: str, status: int = 200, json_body: Any = None, text: str | None = None) -> None:
        if text is not None:
            response = httpx.Response(status, text=text)
        else:
            response = httpx.Response(status, json=json_body if json_body is not None else {})
        self.routes[(method, path)] = response

    def _handle(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        response = self.routes.get((request.method, request.url.path))
        if response is None:
            return httpx.Response(404, text=f"no route for {request.method} {request.url.path}")
        return response

    @property
    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self._handle)

    @property
    def last(self) -> httpx.Request:
        return self.requests[-1]

    def last_json(self) -> Any:
        return json.loads(self.last.content)


def make_note(**overrides: Any) -> dict[str, Any]:
    note = {
        "id": 1,
        "type": 0,
        "content": "hello",
        "isArchived": False,
        "isRecycle": False,
        "isShare": False,
        "isTop": False,
        "isReviewed": False,
        "createdAt": "2025-03-03T10:00:00.000Z",
        "updatedAt": "2025-03-04T10:00:00.000Z",
    }
    note.update(overrides)
    return note


@pytest.fixture
def stub() -> StubBlinko:
    return StubBlinko()


@pytest.fixture
def settings() -> Settings:
    return Settings(domain="blinko.test", api_key="secret-key")
