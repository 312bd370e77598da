"""
shop_admin.db.models

Persistence schema for the durable console session.

Responsibilities:
- Define `StoredSession`: one row per namespace holding the credential and
  the serialized principal.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from sqlalchemy import JSON, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from shop_admin.db.base import Base


def _utcnow() -> datetime:
    return datetime.now(tz=UTC).replace(tzinfo=None)


class StoredSession(Base):
    __tablename__ = "admin_sessions"

    namespace: Mapped[str] = mapped_column(String(128), primary_key=True)
    # Both columns are written together; a row with only one of them is treated as empty.
    credential: Mapped[str | None] = mapped_column(Text, nullable=True)
    principal: Mapped[dict[str, Any] | None] = mapped_column(JSON, nullable=True)

    updated_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow, onupdate=_utcnow)
