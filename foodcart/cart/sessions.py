"""Checkout session registry: one CartStore per open checkout screen."""
import os
import time
from typing import Callable, Dict, Optional

from foodcart.errors import SessionNotFoundError
from foodcart.logging import get_logger, sanitize_id_for_logging
from .service import CartStore
from .storage import KeyValueStore, session_store

logger = get_logger(__name__)

# Sessions untouched for this long are closed on the next open; 0 disables
IDLE_TIMEOUT_SECONDS = float(os.environ.get("CHECKOUT_SESSION_IDLE_SECONDS", "1800"))


class CheckoutSessions:
    """
    Owns CartStore instances between screen entry and exit.

    ``open`` constructs and loads a store, ``close`` flushes pending saves
    and forgets it. Re-opening an existing session replaces its store with a
    freshly loaded one. Clients that leave without closing are reclaimed once
    their session has been idle for ``idle_timeout`` seconds.
    """

    def __init__(
        self,
        storage_factory: Optional[Callable[[str], KeyValueStore]] = None,
        *,
        idle_timeout: float = IDLE_TIMEOUT_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        **store_options,
    ):
        self._storage_factory = storage_factory or session_store
        self._idle_timeout = idle_timeout
        self._clock = clock
        self._store_options = store_options
        self._stores: Dict[str, CartStore] = {}
        self._last_seen: Dict[str, float] = {}

    def __contains__(self, session_id: str) -> bool:
        return session_id in self._stores

    def __len__(self) -> int:
        return len(self._stores)

    async def open(self, session_id: str) -> CartStore:
        """Screen entry."""
        await self.evict_idle()

        previous = self._stores.pop(session_id, None)
        if previous is not None:
            await previous.close()

        store = CartStore(self._storage_factory(session_id), **self._store_options)
        await store.load()
        self._stores[session_id] = store
        self._last_seen[session_id] = self._clock()
        logger.info(f"Opened checkout session {sanitize_id_for_logging(session_id)}")
        return store

    def get(self, session_id: str) -> CartStore:
        store = self._stores.get(session_id)
        if store is None:
            raise SessionNotFoundError(session_id)
        self._last_seen[session_id] = self._clock()
        return store

    async def close(self, session_id: str) -> bool:
        """Screen exit. Returns False if the session was not open."""
        store = self._stores.pop(session_id, None)
        self._last_seen.pop(session_id, None)
        if store is None:
            return False
        await store.close()
        logger.info(f"Closed checkout session {sanitize_id_for_logging(session_id)}")
        return True

    async def evict_idle(self) -> int:
        """Close sessions nobody has touched within the idle timeout."""
        if self._idle_timeout <= 0:
            return 0

        now = self._clock()
        idle = [sid for sid, seen in self._last_seen.items() if now - seen > self._idle_timeout]
        for session_id in idle:
            logger.info(f"Evicting idle checkout session {sanitize_id_for_logging(session_id)}")
            await self.close(session_id)
        return len(idle)

    async def close_all(self) -> None:
        for session_id in list(self._stores):
            await self.close(session_id)
