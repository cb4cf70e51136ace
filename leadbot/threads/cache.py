"""In-process fallback for thread handles the durable store did not accept."""

import asyncio
import threading
from datetime import datetime, timedelta, timezone
from typing import Callable

from ..config import THREAD_CACHE_TTL
from ..logging_config import get_logger
from ..models import ThreadCacheEntry

logger = get_logger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ThreadCache:
    """user_id -> ThreadCacheEntry, safe to share between tasks and threads.

    The lock only guards dict operations and is never held across an await.
    """

    def __init__(
        self,
        ttl: timedelta = THREAD_CACHE_TTL,
        clock: Callable[[], datetime] = _utcnow,
    ):
        self._ttl = ttl
        self._clock = clock
        self._entries: dict[str, ThreadCacheEntry] = {}
        self._lock = threading.Lock()

    @property
    def ttl(self) -> timedelta:
        return self._ttl

    def get(self, user_id: str) -> str | None:
        """Return the cached thread and mark it as used."""
        with self._lock:
            entry = self._entries.get(user_id)
            if entry is None:
                return None
            entry.last_updated = self._clock()
            return entry.thread_id

    def set(self, user_id: str, thread_id: str, now: datetime | None = None) -> None:
        """Cache a thread, replacing any previous one for the user."""
        with self._lock:
            self._entries[user_id] = ThreadCacheEntry(
                thread_id=thread_id, last_updated=now or self._clock()
            )

    def discard(self, user_id: str) -> bool:
        """Drop the user's entry. Returns whether one existed."""
        with self._lock:
            return self._entries.pop(user_id, None) is not None

    def sweep(self, now: datetime | None = None) -> int:
        """Remove entries untouched for longer than the TTL."""
        now = now or self._clock()
        with self._lock:
            expired = [
                user_id
                for user_id, entry in self._entries.items()
                if now - entry.last_updated > self._ttl
            ]
            for user_id in expired:
                del self._entries[user_id]

        if expired:
            logger.info(
                f"Cleaned up {len(expired)} expired threads from temporary storage"
            )
        return len(expired)

    def __contains__(self, user_id: str) -> bool:
        with self._lock:
            return user_id in self._entries

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


class CacheSweeper:
    """Background task that sweeps a ThreadCache on a fixed interval."""

    def __init__(self, cache: ThreadCache, interval: timedelta | None = None):
        self._cache = cache
        self._interval = (interval or cache.ttl).total_seconds()
        self._task: asyncio.Task | None = None

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Schedule the sweep loop on the running event loop."""
        if self.running:
            return
        self._task = asyncio.create_task(self._run())
        logger.info(f"Thread cache sweeper started (every {self._interval:.0f}s)")

    async def stop(self) -> None:
        """Cancel the sweep loop and wait for it to finish."""
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
        logger.info("Thread cache sweeper stopped")

    async def _run(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            try:
                self._cache.sweep()
            except Exception as e:
                logger.error(f"Thread cache sweep failed: {e}", exc_info=True)
