"""
shop_admin.console

Composition root for the administration console core.

Responsibilities:
- Wire settings, logging, the session store, the decorated HTTP client, the
  Session Manager and the Order Workflow Controller.
- Restore the durable session once at startup.
- Dispose the HTTP client and DB engine on exit.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

import httpx
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from shop_admin.clients.backend import BackendClient, build_http_client
from shop_admin.db.engine import create_engine, create_sessionmaker, init_db
from shop_admin.observability.logging import configure_logging, get_logger
from shop_admin.orders.workflow import OrderWorkflowController
from shop_admin.session.manager import SessionManager
from shop_admin.session.state import SessionState
from shop_admin.session.store import SessionStore
from shop_admin.settings import Settings, get_settings

log = get_logger(__name__)


@dataclass(slots=True)
class AdminConsole:
    settings: Settings
    session: SessionManager
    orders: OrderWorkflowController
    http: httpx.AsyncClient
    engine: AsyncEngine


@asynccontextmanager
async def open_console(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[AdminConsole]:
    settings = settings or get_settings()
    configure_logging(service_name=settings.service_name, level=settings.log_level)

    engine = create_engine(settings)
    try:
        try:
            await init_db(engine)
        except (SQLAlchemyError, OSError) as e:
            # The store degrades to an empty, non-durable session on its own.
            log.warning("session_store_init_failed", error=str(e))
        store = SessionStore(create_sessionmaker(engine), namespace=settings.session_namespace)

        state = SessionState()
        async with build_http_client(settings, state, transport=transport) as http:
            backend = BackendClient(http)
            session = SessionManager(state=state, store=store, backend=backend)
            await session.restore()

            log.info("console_started", env=settings.env, api_base_url=settings.api_base_url)
            yield AdminConsole(
                settings=settings,
                session=session,
                orders=OrderWorkflowController(backend=backend, session=session),
                http=http,
                engine=engine,
            )
    finally:
        await engine.dispose()
        log.info("console_stopped")


# --- Module Notes -----------------------------------------------------------
# `transport` lets tests and the dev backend run the console in-process via
# `httpx.ASGITransport` without a real network.
