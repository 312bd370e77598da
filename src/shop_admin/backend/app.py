"""
shop_admin.backend.app

FastAPI app factory for the development backend.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Render every error in the backend's `{success: false, message}` envelope.
"""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.status import HTTP_400_BAD_REQUEST

from shop_admin import __version__
from shop_admin.backend.routers.auth import router as auth_router
from shop_admin.backend.routers.health import router as health_router
from shop_admin.backend.routers.orders import router as orders_router
from shop_admin.backend.store import BackendState
from shop_admin.observability.logging import configure_logging, get_logger
from shop_admin.observability.middleware import RequestContextMiddleware
from shop_admin.settings import Settings

log = get_logger(__name__)

API_PREFIX = "/api"


def create_app(*, settings: Settings, state: BackendState | None = None) -> FastAPI:
    configure_logging(service_name=f"{settings.service_name}-dev-backend", level=settings.log_level)

    app = FastAPI(title="Shop Admin Dev Backend", version=__version__)
    app.state.settings = settings
    app.state.backend = state or BackendState()

    app.add_middleware(RequestContextMiddleware)
    app.include_router(health_router, tags=["health"])
    app.include_router(auth_router, prefix=API_PREFIX)
    app.include_router(orders_router, prefix=API_PREFIX)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(_: Request, exc: StarletteHTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": str(exc.detail)},
            headers=getattr(exc, "headers", None),
        )

    @app.exception_handler(RequestValidationError)
    async def _validation_error(_: Request, exc: RequestValidationError) -> JSONResponse:
        first = exc.errors()[0] if exc.errors() else {}
        field = ".".join(str(p) for p in first.get("loc", ())[1:]) or "body"
        return JSONResponse(
            status_code=HTTP_400_BAD_REQUEST,
            content={"success": False, "message": f"Invalid {field}: {first.get('msg', 'invalid')}"},
        )

    log.info("dev_backend_created", env=settings.env)
    return app


# --- Module Notes -----------------------------------------------------------
# State lives on `app.state.backend`; tests pass their own `BackendState` to
# seed orders and inspect recorded notifications.
