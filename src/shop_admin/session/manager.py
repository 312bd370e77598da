"""
shop_admin.session.manager

Session Manager: the lifecycle of the one console session.

Responsibilities:
- Restore the durable session at process start.
- Run login/registration exchanges and report their outcome without raising.
- Clear the session on logout or on any unauthorized privileged response.
- Keep memory and the durable record in step on every transition.

State machine::

    Anonymous --login/register success--> Authenticated
    Authenticated --logout--> Anonymous
    Authenticated --401 on a privileged call--> Anonymous
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager
from dataclasses import dataclass
from typing import Any

import httpx

from shop_admin.auth.models import Principal
from shop_admin.clients.backend import BackendClient
from shop_admin.errors import AuthRejected, ErrorKind, TransportFailure, Unauthorized
from shop_admin.observability.logging import get_logger
from shop_admin.session.state import Session, SessionState
from shop_admin.session.store import SessionStore

log = get_logger(__name__)


@dataclass(frozen=True, slots=True)
class AuthResult:
    success: bool
    message: str | None = None
    error: ErrorKind | None = None

    @classmethod
    def ok(cls) -> AuthResult:
        return cls(success=True)

    @classmethod
    def rejected(cls, message: str) -> AuthResult:
        return cls(success=False, message=message, error=ErrorKind.auth_rejected)


class SessionManager:
    def __init__(
        self,
        *,
        state: SessionState,
        store: SessionStore,
        backend: BackendClient,
    ) -> None:
        self._state = state
        self._store = store
        self._backend = backend

    @property
    def current(self) -> Session:
        return self._state.current

    @property
    def authenticated(self) -> bool:
        return self._state.current.authenticated

    @property
    def principal(self) -> Principal | None:
        return self._state.current.principal

    async def restore(self) -> Session:
        session = self._state.replace(await self._store.load())
        log.info(
            "session_restored",
            authenticated=session.authenticated,
            username=session.principal.username if session.principal else None,
        )
        return session

    async def login(self, username: str, password: str) -> AuthResult:
        return await self._exchange(
            lambda: self._backend.login(username=username, password=password),
            fallback="Login failed",
        )

    async def register(self, username: str, email: str, password: str) -> AuthResult:
        # "First administrator only" is enforced by the backend.
        return await self._exchange(
            lambda: self._backend.register(username=username, email=email, password=password),
            fallback="Registration failed",
        )

    async def logout(self) -> None:
        await self._clear(reason="logout")

    async def invalidate(self, reason: str = "unauthorized") -> None:
        await self._clear(reason=reason)

    def decorate(self, request: httpx.Request) -> httpx.Request:
        return self._state.decorate(request)

    @asynccontextmanager
    async def privileged(self) -> AsyncIterator[Session]:
        """
        Scope for a privileged backend call. A 401 from inside clears the session
        before the error is passed on, so a dead credential is never reused.
        Only the session the call started with is cleared; if a newer one was
        established meanwhile, the 401 refers to the replaced credential.
        """

        snapshot = self._state.current
        try:
            yield snapshot
        except Unauthorized:
            if self._state.current is snapshot:
                await self.invalidate("unauthorized")
            else:
                log.info("stale_unauthorized_ignored")
            raise

    async def _exchange(
        self,
        call: Callable[[], Awaitable[dict[str, Any]]],
        *,
        fallback: str,
    ) -> AuthResult:
        try:
            payload = await call()
        except AuthRejected as e:
            log.info("auth_rejected", status_code=e.status_code)
            return AuthResult.rejected(e.message or fallback)
        except TransportFailure as e:
            log.warning("auth_transport_failed", error=e.details.get("error"))
            return AuthResult(success=False, message=e.message, error=ErrorKind.transport)

        token = payload.get("token")
        admin = payload.get("admin")
        # Never half-authenticate: a success without both parts is a rejection.
        if not isinstance(token, str) or not token or not isinstance(admin, dict):
            return AuthResult.rejected(fallback)
        try:
            principal = Principal.from_payload(admin)
        except ValueError:
            return AuthResult.rejected(fallback)

        session = self._state.set(token, principal)
        await self._store.save(session)
        log.info("session_established", username=principal.username, role=principal.role)
        return AuthResult.ok()

    async def _clear(self, *, reason: str) -> None:
        previous = self._state.current
        session = self._state.clear()
        await self._store.save(session)
        log.info(
            "session_cleared",
            reason=reason,
            username=previous.principal.username if previous.principal else None,
        )


# --- Module Notes -----------------------------------------------------------
# The store swallows its own failures, so `logout` and `invalidate` cannot fail.
