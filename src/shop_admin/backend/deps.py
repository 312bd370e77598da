"""
shop_admin.backend.deps

FastAPI dependency wiring for the dev backend.
"""

from __future__ import annotations

from fastapi import Request

from shop_admin.backend.store import BackendState
from shop_admin.settings import Settings


def settings_from_app(request: Request) -> Settings:
    # Set in `shop_admin.backend.app.create_app`.
    return request.app.state.settings  # type: ignore[attr-defined]


def backend_state(request: Request) -> BackendState:
    return request.app.state.backend  # type: ignore[attr-defined]
