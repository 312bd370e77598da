"""
shop_admin.backend.__main__

Entrypoint for running the dev backend via `python -m shop_admin.backend`.

Responsibilities:
- Load settings.
- Create the app with demo orders.
- Start uvicorn with structlog-compatible logging config.
"""

from __future__ import annotations

import uvicorn

from shop_admin.backend.app import create_app
from shop_admin.backend.store import BackendState, seed_demo_orders
from shop_admin.settings import get_settings


def main() -> None:
    settings = get_settings()
    state = BackendState()
    seed_demo_orders(state)
    app = create_app(settings=settings, state=state)

    uvicorn.run(
        app,
        host=settings.api_host,
        port=settings.api_port,
        log_config=None,  # structlog
    )


if __name__ == "__main__":
    main()
