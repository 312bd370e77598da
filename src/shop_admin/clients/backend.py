"""
shop_admin.clients.backend

HTTP client boundary for the shop backend REST API.

Responsibilities:
- Build the shared `httpx.AsyncClient` with the session interceptor installed.
- Issue the auth exchanges and the order endpoints.
- Translate transport errors and non-success responses into typed exceptions.
"""

from __future__ import annotations

from typing import Any

import httpx

from shop_admin.errors import AuthRejected, BackendRejected, TransportFailure, Unauthorized
from shop_admin.session.state import SessionAuth, SessionState
from shop_admin.settings import Settings

TRANSPORT_FAILURE_MESSAGE = "Unable to reach the server"


def build_http_client(
    settings: Settings,
    state: SessionState,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> httpx.AsyncClient:
    # The auth flow is the only place a credential is attached to a request.
    return httpx.AsyncClient(
        base_url=settings.api_base_url,
        timeout=settings.http_timeout_seconds,
        auth=SessionAuth(state),
        transport=transport,
    )


def _decode(r: httpx.Response) -> dict[str, Any] | None:
    try:
        payload = r.json()
    except ValueError:
        return None
    return payload if isinstance(payload, dict) else None


class BackendClient:
    def __init__(self, http: httpx.AsyncClient) -> None:
        self._http = http

    # -- auth exchanges ------------------------------------------------------

    async def login(self, *, username: str, password: str) -> dict[str, Any]:
        return await self._exchange(
            "/auth/login",
            {"username": username, "password": password},
            fallback="Login failed",
        )

    async def register(self, *, username: str, email: str, password: str) -> dict[str, Any]:
        return await self._exchange(
            "/auth/register",
            {"username": username, "email": email, "password": password},
            fallback="Registration failed",
        )

    async def _exchange(self, path: str, body: dict[str, Any], *, fallback: str) -> dict[str, Any]:
        try:
            r = await self._http.post(path, json=body)
        except httpx.TransportError as e:
            raise TransportFailure(TRANSPORT_FAILURE_MESSAGE, details={"error": str(e)}) from e

        payload = _decode(r) or {}
        # A bad password is an expected answer here, not an expired session.
        if r.is_error or not payload.get("success"):
            raise AuthRejected(str(payload.get("message") or fallback), status_code=r.status_code)
        return payload

    # -- privileged calls ----------------------------------------------------

    async def list_orders(self) -> list[dict[str, Any]]:
        payload = await self._send("GET", "/orders")
        data = payload.get("data", [])
        if not isinstance(data, list):
            raise BackendRejected("Malformed order list", status_code=200)
        return data

    async def update_order_status(self, order_id: str, body: dict[str, Any]) -> dict[str, Any] | None:
        payload = await self._send("PUT", f"/orders/{order_id}/status", json=body)
        return _order_of(payload)

    async def send_payment_link(self, order_id: str, link: str) -> dict[str, Any] | None:
        payload = await self._send(
            "POST", f"/orders/{order_id}/send-payment-link", json={"paymentLink": link}
        )
        return _order_of(payload)

    async def _send(
        self, method: str, path: str, *, json: dict[str, Any] | None = None
    ) -> dict[str, Any]:
        try:
            r = await self._http.request(method, path, json=json)
        except httpx.TransportError as e:
            raise TransportFailure(TRANSPORT_FAILURE_MESSAGE, details={"error": str(e)}) from e

        payload = _decode(r)
        message = str((payload or {}).get("message") or "")
        if r.status_code == httpx.codes.UNAUTHORIZED:
            raise Unauthorized(message or "Session expired", status_code=r.status_code)
        if r.is_error:
            raise BackendRejected(
                message or f"Request failed with status {r.status_code}",
                status_code=r.status_code,
                details={"path": path},
            )
        if payload is None:
            raise BackendRejected("Malformed response", status_code=r.status_code)
        if payload.get("success") is False:
            raise BackendRejected(message or "Request rejected", status_code=r.status_code)
        return payload


def _order_of(payload: dict[str, Any]) -> dict[str, Any] | None:
    data = payload.get("data")
    return data if isinstance(data, dict) else None


# --- Module Notes -----------------------------------------------------------
# 401 handling (clearing the session) belongs to `SessionManager.privileged`;
# this boundary only classifies the response.
