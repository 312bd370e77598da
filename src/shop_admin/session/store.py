"""
shop_admin.session.store

Durable store for the console session.

Responsibilities:
- Load the session record for the configured namespace at startup.
- Overwrite it on every session transition.
- Degrade to an empty session when storage is unreadable or unwritable.
"""

from __future__ import annotations

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from shop_admin.auth.models import Principal
from shop_admin.db.models import StoredSession
from shop_admin.observability.logging import get_logger
from shop_admin.session.state import Session

log = get_logger(__name__)


class SessionStore:
    def __init__(
        self,
        session_factory: async_sessionmaker[AsyncSession],
        *,
        namespace: str,
    ) -> None:
        self._session_factory = session_factory
        self._namespace = namespace

    @property
    def namespace(self) -> str:
        return self._namespace

    async def load(self) -> Session:
        # ValueError covers a principal column holding undecodable JSON.
        try:
            async with self._session_factory() as db:
                row = await db.get(StoredSession, self._namespace)
        except (SQLAlchemyError, OSError, ValueError) as e:
            log.warning("session_store_read_failed", namespace=self._namespace, error=str(e))
            return Session.anonymous()

        if row is None or not row.credential or not row.principal:
            return Session.anonymous()
        try:
            principal = Principal.from_payload(row.principal)
        except (ValueError, TypeError, AttributeError) as e:
            log.warning("session_store_record_invalid", namespace=self._namespace, error=str(e))
            return Session.anonymous()
        return Session(credential=row.credential, principal=principal)

    async def save(self, session: Session) -> bool:
        credential = session.credential if session.authenticated else None
        principal = session.principal.to_dict() if session.principal and credential else None
        try:
            async with self._session_factory() as db:
                # Replace without loading the old row, which may not decode.
                await db.execute(
                    delete(StoredSession).where(StoredSession.namespace == self._namespace)
                )
                db.add(
                    StoredSession(
                        namespace=self._namespace,
                        credential=credential,
                        principal=principal,
                    )
                )
                await db.commit()
        except (SQLAlchemyError, OSError, ValueError) as e:
            # The in-memory transition already happened; only durability is lost.
            log.warning("session_store_write_failed", namespace=self._namespace, error=str(e))
            return False
        return True
