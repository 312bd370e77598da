"""
shop_admin.errors

Error taxonomy and structured outcomes for the console core.

Responsibilities:
- Define one exception class per failure class (validation, auth rejection,
  unauthorized, transport, backend rejection).
- Provide `Outcome`, the value returned at component boundaries instead of
  letting these exceptions escape.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class ErrorKind(enum.StrEnum):
    validation = "validation"
    auth_rejected = "auth_rejected"
    unauthorized = "unauthorized"
    transport = "transport"
    backend_rejected = "backend_rejected"


class ShopAdminError(Exception):
    """Base class for every failure the console core reports."""

    kind: ErrorKind = ErrorKind.backend_rejected

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details or {}


class ValidationFailed(ShopAdminError):
    """Malformed local input; raised before anything reaches the network."""

    kind = ErrorKind.validation


class AuthRejected(ShopAdminError):
    """Backend refused a login or registration exchange."""

    kind = ErrorKind.auth_rejected


class Unauthorized(ShopAdminError):
    """Credential missing, invalid or expired on a privileged call."""

    kind = ErrorKind.unauthorized


class TransportFailure(ShopAdminError):
    """No connectivity or timeout. Local state is unchanged and the call is safe to retry."""

    kind = ErrorKind.transport


class BackendRejected(ShopAdminError):
    """Backend answered but refused the request (e.g. illegal status transition)."""

    kind = ErrorKind.backend_rejected


@dataclass(frozen=True, slots=True)
class Outcome(Generic[T]):
    ok: bool
    value: T | None = None
    error: ErrorKind | None = None
    message: str | None = None
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def success(cls, value: T | None = None) -> Outcome[T]:
        return cls(ok=True, value=value)

    @classmethod
    def failure(cls, exc: ShopAdminError) -> Outcome[T]:
        return cls(ok=False, error=exc.kind, message=exc.message, details=dict(exc.details))


# --- Module Notes -----------------------------------------------------------
# Exceptions travel from the HTTP boundary (`shop_admin.clients`) up to the
# Session Manager / Order Workflow Controller, which convert them to Outcomes.
