"""User records, thread handles and interaction history."""

import uuid
from datetime import datetime, timezone
from typing import Protocol

from ..logging_config import get_logger
from ..models import Interaction, UserProfile, UserRecord, UserStats
from ..storage import IStorage

logger = get_logger(__name__)


class IThreadStore(Protocol):
    """Durable user -> thread association."""

    async def get_thread_id(self, user_id: str) -> str | None:
        """Return the user's thread, or None if the user has none."""
        ...

    async def set_thread_id(self, user_id: str, thread_id: str) -> bool:
        """Persist the user's thread. Raises if the store is unreachable."""
        ...


class IUserService(IThreadStore, Protocol):
    """Thread store plus the interaction recorder."""

    async def get_or_create_user(
        self, user_id: str, thread_id: str, profile: UserProfile | None = None
    ) -> UserRecord:
        """Fetch the user, refreshing profile fields, or create it."""
        ...

    async def record_interaction(
        self, user: UserRecord, user_message: str, assistant_response: str
    ) -> None:
        """Count the message and append it to the interaction history."""
        ...

    async def get_stats(self, user_id: str) -> UserStats | None:
        """Summarize a user's activity."""
        ...


class UserService:
    """Storage-backed users."""

    def __init__(self, storage: IStorage):
        self._storage = storage

    async def get_thread_id(self, user_id: str) -> str | None:
        """Return the user's thread, or None if the user is unknown."""
        user = await self._storage.get_user(user_id)
        return user.thread_id if user else None

    async def set_thread_id(self, user_id: str, thread_id: str) -> bool:
        """Persist the user's thread."""
        await self._storage.set_thread_id(user_id, thread_id)
        return True

    async def get_or_create_user(
        self, user_id: str, thread_id: str, profile: UserProfile | None = None
    ) -> UserRecord:
        """Fetch the user, refreshing profile fields, or create it."""
        profile = profile or UserProfile()
        now = datetime.now(timezone.utc)

        user = await self._storage.get_user(user_id)
        if user is None:
            user = UserRecord(
                id=user_id,
                thread_id=thread_id,
                username=profile.username,
                first_name=profile.first_name,
                last_name=profile.last_name,
                first_interaction_at=now,
                last_interaction_at=now,
            )
            await self._storage.save_user(user)
            logger.info(f"Created new user {user_id}")
            return user

        changed = False
        if user.thread_id != thread_id:
            user.thread_id = thread_id
            changed = True

        for attr in ("username", "first_name", "last_name"):
            value = getattr(profile, attr)
            if value and getattr(user, attr) != value:
                setattr(user, attr, value)
                changed = True

        if changed:
            user.last_interaction_at = now
            await self._storage.save_user(user)
            logger.debug(f"Updated user {user_id}")

        return user

    async def record_interaction(
        self, user: UserRecord, user_message: str, assistant_response: str
    ) -> None:
        """Count the message and append it to the interaction history."""
        now = datetime.now(timezone.utc)
        user.message_count += 1
        user.last_interaction_at = now
        await self._storage.save_user(user)

        await self._storage.save_interaction(
            Interaction(
                id=str(uuid.uuid4()),
                user_id=user.id,
                thread_id=user.thread_id,
                user_message=user_message,
                assistant_response=assistant_response,
                created_at=now,
            )
        )
        logger.debug(f"Recorded message interaction for user {user.id}")

    async def get_stats(self, user_id: str) -> UserStats | None:
        """Summarize a user's activity."""
        user = await self._storage.get_user(user_id)
        if user is None or user.first_interaction_at is None:
            return None

        elapsed = datetime.now(timezone.utc) - user.first_interaction_at
        return UserStats(
            message_count=user.message_count,
            first_interaction_at=user.first_interaction_at,
            days_since_first_interaction=elapsed.days,
            username=user.username,
            first_name=user.first_name,
            last_name=user.last_name,
        )
