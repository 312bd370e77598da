"""
shop_admin.backend.routers.auth

Login and first-administrator registration.

Responsibilities:
- Issue a bearer token for valid credentials.
- Allow registration only while no administrator exists.
"""

from __future__ import annotations

from datetime import timedelta
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from starlette.status import HTTP_401_UNAUTHORIZED, HTTP_403_FORBIDDEN

from shop_admin.auth.jwt import JwtConfig, issue_token
from shop_admin.backend.deps import backend_state, settings_from_app
from shop_admin.backend.store import AdminRecord, BackendState
from shop_admin.observability.logging import get_logger
from shop_admin.settings import Settings

log = get_logger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


class LoginRequest(BaseModel):
    username: str = Field(min_length=1, max_length=128)
    password: str = Field(min_length=1, max_length=256)


class RegisterRequest(BaseModel):
    username: str = Field(min_length=3, max_length=64)
    email: str = Field(pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$", max_length=254)
    password: str = Field(min_length=6, max_length=256)


def _session_payload(admin: AdminRecord, settings: Settings) -> dict[str, Any]:
    token = issue_token(
        cfg=JwtConfig.from_settings(settings),
        subject=admin.id,
        role=admin.role,
        ttl=timedelta(minutes=settings.jwt_ttl_minutes),
    )
    return {"success": True, "token": token, "admin": admin.to_payload()}


@router.post("/register")
async def register(
    body: RegisterRequest,
    state: BackendState = Depends(backend_state),
    settings: Settings = Depends(settings_from_app),
) -> dict[str, Any]:
    if state.admins:
        raise HTTPException(status_code=HTTP_403_FORBIDDEN, detail="Administrator already exists")
    admin = state.add_admin(username=body.username, email=body.email, password=body.password)
    log.info("admin_registered", username=admin.username)
    return _session_payload(admin, settings)


@router.post("/login")
async def login(
    body: LoginRequest,
    state: BackendState = Depends(backend_state),
    settings: Settings = Depends(settings_from_app),
) -> dict[str, Any]:
    admin = state.find_admin(body.username)
    if admin is None or not admin.check_password(body.password):
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Invalid username or password")
    log.info("admin_logged_in", username=admin.username)
    return _session_payload(admin, settings)
