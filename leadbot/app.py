"""Application bootstrap and lifecycle management."""

import os
from typing import Protocol

from .assistant import AssistantRuntime, IAssistantRuntime
from .config import resolve_db_path
from .conversation import IRunOrchestrator, RunOrchestrator
from .logging_config import get_logger
from .services import LeadService, UserService
from .storage import IStorage, Storage
from .threads import CacheSweeper, ThreadCache, ThreadResolver
from .tools import FunctionCallResolver
from .tracker import ITracker, Tracker

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    @property
    def storage(self) -> IStorage: ...

    @property
    def orchestrator(self) -> IRunOrchestrator: ...

    @property
    def users(self) -> UserService: ...

    @property
    def leads(self) -> LeadService: ...


class Application:
    """Main application bootstrap."""

    def __init__(self, db_path: str | None = None):
        env_db_path = os.getenv("DATABASE_URL") if db_path is None else db_path
        self._db_path = resolve_db_path(env_db_path)

        # Components (will be initialized in start())
        self._storage: IStorage | None = None
        self._tracker: ITracker | None = None
        self._runtime: IAssistantRuntime | None = None
        self._thread_cache: ThreadCache | None = None
        self._sweeper: CacheSweeper | None = None
        self._users: UserService | None = None
        self._leads: LeadService | None = None
        self._orchestrator: IRunOrchestrator | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        try:
            # 1. Storage (no dependencies)
            self._storage = Storage(self._db_path)
            await self._storage.init()
            logger.info("Storage initialized")

            # 2. Tracker and services (depend on Storage)
            self._tracker = Tracker(self._storage)
            self._users = UserService(self._storage)
            self._leads = LeadService(self._storage)

            # 3. Remote runtime (no internal dependencies)
            self._runtime = AssistantRuntime()
            logger.info("Assistant runtime initialized")

            # 4. Transient thread cache and its sweeper
            self._thread_cache = ThreadCache()
            self._sweeper = CacheSweeper(self._thread_cache)
            self._sweeper.start()

            # 5. Orchestrator (depends on everything above)
            thread_resolver = ThreadResolver(
                runtime=self._runtime,
                thread_store=self._users,
                cache=self._thread_cache,
                tracker=self._tracker,
            )
            tool_resolver = FunctionCallResolver(
                runtime=self._runtime,
                lead_service=self._leads,
                tracker=self._tracker,
            )
            self._orchestrator = RunOrchestrator(
                runtime=self._runtime,
                thread_resolver=thread_resolver,
                tool_resolver=tool_resolver,
                user_service=self._users,
                tracker=self._tracker,
            )
            logger.info("All components initialized successfully")
        except Exception:
            logger.error("Application startup failed", exc_info=True)
            await self.stop()
            raise

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._sweeper:
            await self._sweeper.stop()
        if self._storage:
            await self._storage.close()
            logger.info("Storage closed")

    @property
    def storage(self) -> IStorage:
        """Get storage instance."""
        if not self._storage:
            raise RuntimeError("Application not started")
        return self._storage

    @property
    def orchestrator(self) -> IRunOrchestrator:
        """Get run orchestrator instance."""
        if not self._orchestrator:
            raise RuntimeError("Application not started")
        return self._orchestrator

    @property
    def users(self) -> UserService:
        """Get user service instance."""
        if not self._users:
            raise RuntimeError("Application not started")
        return self._users

    @property
    def leads(self) -> LeadService:
        """Get lead service instance."""
        if not self._leads:
            raise RuntimeError("Application not started")
        return self._leads

    @property
    def thread_cache(self) -> ThreadCache:
        """Get transient thread cache."""
        if not self._thread_cache:
            raise RuntimeError("Application not started")
        return self._thread_cache
