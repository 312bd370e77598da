"""
shop_admin.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity (`Principal`) held by a console session.
- Convert between the backend's `admin` payload and the persisted form.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Authenticated administrator identity.
    """

    username: str
    role: str = "admin"
    email: str | None = None
    id: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"id": self.id, "username": self.username, "email": self.email, "role": self.role}

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> Principal:
        # Backend records use Mongo-style `_id`; the persisted form uses `id`.
        username = str(payload.get("username") or "").strip()
        if not username:
            raise ValueError("principal payload has no username")
        raw_id = payload.get("id", payload.get("_id"))
        return cls(
            username=username,
            role=str(payload.get("role") or "admin"),
            email=payload.get("email"),
            id=str(raw_id) if raw_id is not None else None,
        )
