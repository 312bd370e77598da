"""
tests.conftest

Shared fixtures.

Responsibilities:
- Test settings backed by a temporary SQLite session database.
- The dev backend served in-process through `httpx.ASGITransport`.
- `FakeBackend`: an `httpx.MockTransport` handler that records every outbound
  request so tests can assert on exact headers and payloads.
"""

from __future__ import annotations

import json
from collections.abc import AsyncIterator, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import httpx
import pytest
import pytest_asyncio
from fastapi import FastAPI

from shop_admin.backend.app import create_app
from shop_admin.backend.store import BackendState
from shop_admin.console import AdminConsole, open_console
from shop_admin.settings import Settings

ADMIN = {"id": "a1", "username": "root", "email": "root@example.com", "role": "admin"}


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        env="test",
        log_level="WARNING",
        api_base_url="http://test/api",
        session_db_url=f"sqlite+aiosqlite:///{tmp_path / 'session.db'}",
    )


@pytest.fixture
def backend_state() -> BackendState:
    return BackendState()


@pytest.fixture
def backend_app(settings: Settings, backend_state: BackendState) -> FastAPI:
    return create_app(settings=settings, state=backend_state)


@pytest_asyncio.fixture
async def console(settings: Settings, backend_app: FastAPI) -> AsyncIterator[AdminConsole]:
    async with open_console(settings, transport=httpx.ASGITransport(app=backend_app)) as c:
        yield c


def order_payload(order_id: str = "o1", **overrides: Any) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "_id": order_id,
        "orderNumber": f"ORD-{order_id}",
        "orderStatus": "new",
        "paymentStatus": "pending",
        "trackingNumber": None,
        "paymentLink": None,
        "totalAmount": 2400,
        "items": [{"name": "Ceramic mug", "price": 1200, "quantity": 2}],
        "customer": {"firstName": "Anna", "lastName": "Petrova", "email": "anna@example.com"},
        "shipping": {"method": "post", "address": "Lenina 1", "city": "Moscow"},
    }
    payload.update(overrides)
    return payload


@dataclass(frozen=True, slots=True)
class Recorded:
    method: str
    path: str
    authorization: str | None
    body: dict[str, Any] | None


Handler = Callable[[httpx.Request], httpx.Response]


class FakeBackend:
    """
    Minimal stand-in for the shop backend. Routes can be overridden per
    (method, path) to simulate rejections, normalisation or outages.
    """

    def __init__(self, orders: list[dict[str, Any]] | None = None) -> None:
        self.orders: dict[str, dict[str, Any]] = {o["_id"]: dict(o) for o in orders or []}
        self.requests: list[Recorded] = []
        self.overrides: dict[tuple[str, str], Handler] = {}
        self.token = "tok-1"

    def override(self, method: str, path: str, handler: Handler) -> None:
        self.overrides[(method, path)] = handler

    def __call__(self, request: httpx.Request) -> httpx.Response:
        body = json.loads(request.content) if request.content else None
        self.requests.append(
            Recorded(
                method=request.method,
                path=request.url.path,
                authorization=request.headers.get("Authorization"),
                body=body,
            )
        )
        handler = self.overrides.get((request.method, request.url.path))
        if handler is not None:
            return handler(request)
        return self._default(request.method, request.url.path, body or {})

    def _default(self, method: str, path: str, body: dict[str, Any]) -> httpx.Response:
        if path in ("/api/auth/login", "/api/auth/register"):
            return httpx.Response(200, json={"success": True, "token": self.token, "admin": ADMIN})
        if method == "GET" and path == "/api/orders":
            return httpx.Response(200, json={"success": True, "data": list(self.orders.values())})

        parts = path.strip("/").split("/")
        order = self.orders.get(parts[2]) if len(parts) >= 4 else None
        if order is None:
            return httpx.Response(404, json={"success": False, "message": "Order not found"})
        if method == "PUT" and parts[3] == "status":
            order.update({k: v for k, v in body.items() if v is not None})
            return httpx.Response(200, json={"success": True, "data": order})
        if method == "POST" and parts[3] == "send-payment-link":
            order["paymentLink"] = body["paymentLink"]
            return httpx.Response(200, json={"success": True, "data": order})
        return httpx.Response(405, json={"success": False, "message": "Not allowed"})

    def calls(self, method: str, path: str) -> list[Recorded]:
        return [r for r in self.requests if r.method == method and r.path == path]


@pytest.fixture
def fake_backend() -> FakeBackend:
    return FakeBackend(orders=[order_payload("o1"), order_payload("o2", orderStatus="processing")])


@asynccontextmanager
async def console_for(settings: Settings, handler: Handler) -> AsyncIterator[AdminConsole]:
    async with open_console(settings, transport=httpx.MockTransport(handler)) as c:
        yield c


@pytest_asyncio.fixture
async def fake_console(settings: Settings, fake_backend: FakeBackend) -> AsyncIterator[AdminConsole]:
    async with console_for(settings, fake_backend) as c:
        yield c


@pytest_asyncio.fixture
async def signed_in(fake_console: AdminConsole, fake_backend: FakeBackend) -> AdminConsole:
    result = await fake_console.session.login("root", "secret")
    assert result.success
    listed = await fake_console.orders.list_orders()
    assert listed.ok
    fake_backend.requests.clear()
    return fake_console
