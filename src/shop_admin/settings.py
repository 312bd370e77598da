"""
shop_admin.settings

Central configuration model (Pydantic Settings).

Responsibilities:
- Provide strongly-typed, env-driven settings for the console and the dev backend.
- Hide secrets from repr/logging (e.g., JWT secret).
- Offer a cached settings instance for dependency injection.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """
    Single settings object shared by the console core and the dev backend.
    Every field can be overridden with a `SHOP_ADMIN_*` environment variable.
    """

    model_config = SettingsConfigDict(env_prefix="SHOP_ADMIN_", case_sensitive=False)

    env: Literal["dev", "test", "prod"] = "dev"
    service_name: str = "shop-admin"
    log_level: str = "INFO"

    # Backend REST API consumed by the console.
    api_base_url: str = "http://localhost:5000/api"
    http_timeout_seconds: float = Field(default=10.0, gt=0)

    # Durable session record (one row keyed by namespace).
    session_db_url: str = "sqlite+aiosqlite:///./shop_admin_session.db"
    session_namespace: str = "admin-auth"

    # Dev backend
    api_host: str = "0.0.0.0"
    api_port: int = 5000
    jwt_alg: str = "HS256"
    jwt_issuer: str = "shop-admin-dev-backend"
    jwt_audience: str = "shop-admin"
    jwt_secret: str = Field(default="dev-secret-change-me-please-0123456789", repr=False)
    jwt_ttl_minutes: int = 7 * 24 * 60


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    # Cache avoids re-parsing env vars for each dependency lookup.
    return Settings()


# --- Module Notes -----------------------------------------------------------
# The console and the dev backend read the same model; backend-only fields are
# simply ignored by the console composition root.
