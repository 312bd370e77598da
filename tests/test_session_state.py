from __future__ import annotations

import httpx
import pytest

from shop_admin.auth.models import Principal
from shop_admin.session.state import Session, SessionAuth, SessionState

ROOT = Principal(username="root")


def test_session_requires_both_parts_or_neither() -> None:
    assert not Session.anonymous().authenticated
    assert Session(credential="tok", principal=ROOT).authenticated

    with pytest.raises(ValueError):
        Session(credential="tok")
    with pytest.raises(ValueError):
        Session(principal=ROOT)
    with pytest.raises(ValueError):
        Session(credential="", principal=ROOT)


def test_transitions_swap_whole_snapshot() -> None:
    state = SessionState()
    before = state.current

    after = state.set("tok", ROOT)
    assert before.credential is None  # old snapshot untouched
    assert after.authenticated and state.current is after

    cleared = state.clear()
    assert cleared.credential is None and cleared.principal is None
    assert not state.current.authenticated


def test_decorate_attaches_current_credential() -> None:
    state = SessionState()
    state.set("tok-1", ROOT)
    request = httpx.Request("GET", "http://test/api/orders")

    assert state.decorate(request).headers["Authorization"] == "Bearer tok-1"


def test_decorate_strips_header_when_anonymous() -> None:
    state = SessionState()
    request = httpx.Request("GET", "http://test/api/orders", headers={"Authorization": "Bearer stale"})

    assert "Authorization" not in state.decorate(request).headers
    assert not state.current.authenticated


@pytest.mark.asyncio
async def test_session_auth_follows_state_changes() -> None:
    seen: list[str | None] = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request.headers.get("Authorization"))
        return httpx.Response(200, json={})

    state = SessionState()
    async with httpx.AsyncClient(
        transport=httpx.MockTransport(handler), base_url="http://test", auth=SessionAuth(state)
    ) as http:
        await http.get("/a")
        state.set("tok-1", ROOT)
        await http.get("/b")
        state.set("tok-2", ROOT)
        await http.get("/c")
        state.clear()
        await http.get("/d")

    assert seen == [None, "Bearer tok-1", "Bearer tok-2", None]
