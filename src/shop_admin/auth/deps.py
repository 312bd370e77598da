"""
shop_admin.auth.deps

FastAPI dependency functions for the dev backend.

Responsibilities:
- Convert a bearer token into a typed `Principal` of a registered admin.
- Reject missing/invalid/expired tokens with a 401.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from starlette.status import HTTP_401_UNAUTHORIZED

from shop_admin.auth.jwt import JwtConfig, JwtValidationError, decode_and_validate
from shop_admin.auth.models import Principal
from shop_admin.backend.deps import backend_state, settings_from_app
from shop_admin.backend.store import BackendState
from shop_admin.settings import Settings

_bearer = HTTPBearer(auto_error=False)


def get_principal(
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
    settings: Settings = Depends(settings_from_app),
    state: BackendState = Depends(backend_state),
) -> Principal:
    if creds is None or not creds.credentials:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Missing bearer token")

    try:
        payload = decode_and_validate(cfg=JwtConfig.from_settings(settings), token=creds.credentials)
    except JwtValidationError as e:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail=f"Invalid token: {e}") from e

    # A token for an admin that no longer exists is as dead as an expired one.
    admin = state.admins.get(str(payload.get("sub", "")))
    if admin is None:
        raise HTTPException(status_code=HTTP_401_UNAUTHORIZED, detail="Unknown administrator")
    return admin.principal()
