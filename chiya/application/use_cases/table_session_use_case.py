"""
Table Session Guard

Binds a customer's browsing session to one table for a bounded time
window. The session lives in memory and in device-local storage only.
"""

import json
import logging
from datetime import UTC, datetime, timedelta
from typing import Callable, Optional

from chiya.application.interfaces.local_storage import LocalStorage
from chiya.domain.entities.table_session_entity import TableSession
from chiya.infrastructure.utilities.constants import OrderSettings


def _utcnow() -> datetime:
    return datetime.now(UTC)


class TableSessionGuard:
    """Stores, expires and clears the customer's table session"""

    def __init__(
        self,
        storage: LocalStorage,
        ttl: timedelta = timedelta(hours=OrderSettings.TABLE_SESSION_TTL_HOURS),
        clock: Callable[[], datetime] = _utcnow,
        storage_key: str = OrderSettings.TABLE_SESSION_STORAGE_KEY,
    ):
        self._storage = storage
        self._ttl = ttl
        self._clock = clock
        self._storage_key = storage_key
        self._session: Optional[TableSession] = None
        self._logger = logging.getLogger(self.__class__.__name__)

    def set(self, table_number: int, shop_id: str, shop_slug: str) -> TableSession:
        """Bind the session to a table, stamped with the current time"""
        session = TableSession(
            table_number=int(table_number),
            shop_id=shop_id,
            shop_slug=shop_slug,
            timestamp=self._clock(),
        )
        self._session = session
        self._storage.set_item(self._storage_key, json.dumps(session.to_dict()))
        self._logger.info(
            "🪑 TABLE SESSION SET: table %s at %s", table_number, shop_slug
        )
        return session

    def get(self) -> Optional[TableSession]:
        """Current session, or None once it is older than the TTL"""
        session = self._session or self._load()
        if session is None:
            return None

        if session.is_expired(self._clock(), self._ttl):
            self._logger.info(
                "⌛ TABLE SESSION EXPIRED: table %s at %s",
                session.table_number,
                session.shop_slug,
            )
            self.clear()
            return None

        self._session = session
        return session

    def clear(self) -> None:
        self._session = None
        self._storage.remove_item(self._storage_key)

    def _load(self) -> Optional[TableSession]:
        raw = self._storage.get_item(self._storage_key)
        if not raw:
            return None
        try:
            session = TableSession.from_dict(json.loads(raw))
            # naive timestamps cannot be compared against the clock
            session.is_expired(self._clock(), self._ttl)
            return session
        except (ValueError, KeyError, TypeError) as e:
            self._logger.warning("⚠️ Discarding unreadable table session: %s", e)
            self._storage.remove_item(self._storage_key)
            return None
