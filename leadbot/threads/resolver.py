"""Mapping end users to remote conversation threads."""

from typing import Protocol

from ..assistant import IAssistantRuntime
from ..errors import ThreadUnavailableError
from ..logging_config import get_logger
from ..services import IThreadStore
from ..tracker import ITracker
from .cache import ThreadCache

logger = get_logger(__name__)


class IThreadResolver(Protocol):
    """Finds or mints the thread a user's messages go to."""

    async def resolve(self, user_id: str) -> str:
        """Return the user's thread, minting one on first contact."""
        ...

    async def reset(self, user_id: str) -> bool:
        """Replace the user's thread with a new one."""
        ...


class ThreadResolver:
    """Durable store first, transient cache only when the store fails."""

    def __init__(
        self,
        runtime: IAssistantRuntime,
        thread_store: IThreadStore,
        cache: ThreadCache,
        tracker: ITracker,
    ):
        self._runtime = runtime
        self._store = thread_store
        self._cache = cache
        self._tracker = tracker

    async def resolve(self, user_id: str) -> str:
        """Return the user's thread, minting one on first contact.

        Raises:
            ThreadUnavailableError: minting failed and no fallback entry exists.
        """
        try:
            thread_id = await self._store.get_thread_id(user_id)
        except Exception as e:
            logger.error(
                f"Failed to read thread for user {user_id}: {e}", exc_info=True
            )
            thread_id = self._cache.get(user_id)
            if thread_id:
                logger.info(
                    f"Using fallback thread {thread_id} for user {user_id} "
                    "from temporary storage"
                )
                return thread_id

        if thread_id:
            logger.debug(f"Retrieved existing thread {thread_id} for user {user_id}")
            return thread_id

        try:
            thread_id = await self._runtime.create_thread()
        except Exception as e:
            logger.error(f"Failed to create thread for user {user_id}: {e}", exc_info=True)
            cached = self._cache.get(user_id)
            if cached:
                logger.info(
                    f"Using fallback thread {cached} for user {user_id} "
                    "from temporary storage"
                )
                return cached
            raise ThreadUnavailableError(user_id) from e

        await self._persist(user_id, thread_id, event_type="thread_created")
        return thread_id

    async def reset(self, user_id: str) -> bool:
        """Replace the user's thread with a new one.

        Returns False only when the remote runtime could not mint a thread.
        """
        try:
            thread_id = await self._runtime.create_thread()
        except Exception as e:
            logger.error(
                f"Error resetting conversation for user {user_id}: {e}", exc_info=True
            )
            return False

        await self._persist(user_id, thread_id, event_type="thread_reset")
        return True

    async def _persist(self, user_id: str, thread_id: str, event_type: str) -> bool:
        """Write the association durably, falling back to the cache."""
        try:
            stored = await self._store.set_thread_id(user_id, thread_id)
        except Exception as e:
            logger.error(
                f"Failed to store thread for user {user_id} in database, "
                f"using temporary storage: {e}",
                exc_info=True,
            )
            stored = False

        if stored:
            self._cache.discard(user_id)
            logger.info(f"Stored thread {thread_id} for user {user_id} ({event_type})")
            await self._tracker.track(
                event_type=event_type,
                actor="thread_resolver",
                data={"user_id": user_id, "thread_id": thread_id},
            )
        else:
            self._cache.set(user_id, thread_id)
            await self._tracker.track(
                event_type="thread_fallback",
                actor="thread_resolver",
                data={"user_id": user_id, "thread_id": thread_id, "reason": event_type},
            )
        return stored
