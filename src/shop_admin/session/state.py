"""
shop_admin.session.state

In-memory session state and the request interceptor built on it.

Responsibilities:
- `Session`: immutable snapshot; credential and principal are both present or both absent.
- `SessionState`: the single owned holder with explicit `set`/`clear` transitions.
- `SessionAuth`: httpx auth flow that decorates every request from the current snapshot.
"""

from __future__ import annotations

from collections.abc import Generator
from dataclasses import dataclass

import httpx

from shop_admin.auth.models import Principal


@dataclass(frozen=True, slots=True)
class Session:
    credential: str | None = None
    principal: Principal | None = None

    def __post_init__(self) -> None:
        if (self.credential is None) != (self.principal is None):
            raise ValueError("credential and principal must be set or cleared together")
        if self.credential is not None and not self.credential:
            raise ValueError("credential must be a non-empty string")

    @property
    def authenticated(self) -> bool:
        return self.credential is not None and self.principal is not None

    @classmethod
    def anonymous(cls) -> Session:
        return cls()


class SessionState:
    """
    Holder of the current `Session` snapshot.

    Transitions swap the whole snapshot in a single assignment, so readers never
    observe a credential without a principal (or the reverse).
    """

    def __init__(self, initial: Session | None = None) -> None:
        self._current = initial or Session.anonymous()

    @property
    def current(self) -> Session:
        return self._current

    def set(self, credential: str, principal: Principal) -> Session:
        self._current = Session(credential=credential, principal=principal)
        return self._current

    def replace(self, session: Session) -> Session:
        self._current = session
        return self._current

    def clear(self) -> Session:
        self._current = Session.anonymous()
        return self._current

    def decorate(self, request: httpx.Request) -> httpx.Request:
        """
        Attach the current credential as a bearer token, or strip any
        Authorization header when there is none.

        The request's headers are modified in place and the same request is
        returned; session state is only read.
        """

        credential = self._current.credential
        if credential:
            request.headers["Authorization"] = f"Bearer {credential}"
        else:
            request.headers.pop("Authorization", None)
        return request


class SessionAuth(httpx.Auth):
    """
    Installed as the `auth` of the shared client, so no request leaves without
    passing through `SessionState.decorate`.
    """

    def __init__(self, state: SessionState) -> None:
        self._state = state

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        yield self._state.decorate(request)


# --- Module Notes -----------------------------------------------------------
# Only `SessionManager` calls `set`/`replace`/`clear`; everything else reads `current`.
