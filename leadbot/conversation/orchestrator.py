"""RunOrchestrator implementation."""

import asyncio
from typing import Protocol

from ..assistant import IAssistantRuntime
from ..config import RUN_MAX_POLL_ATTEMPTS, RUN_POLL_INTERVAL_SECONDS
from ..errors import RunFailedError, RunTimeoutError, UnresolvedActionError
from ..logging_config import get_logger
from ..models import RunSnapshot, RunStatus, UserProfile
from ..services import IUserService
from ..threads import IThreadResolver
from ..tools import IFunctionCallResolver
from ..tracker import ITracker

logger = get_logger(__name__)

NO_RESPONSE_REPLY = "I couldn't generate a response. Please try again."
ERROR_REPLY = (
    "Sorry, I encountered an error while processing your request. "
    "Please try again later."
)


class IRunOrchestrator(Protocol):
    """Drives one user message through a remote assistant run."""

    async def ask(
        self, user_id: str, text: str, profile: UserProfile | None = None
    ) -> str:
        """Send the message and return the assistant's reply. Never raises."""
        ...

    async def reset(self, user_id: str) -> bool:
        """Start the user on a new thread."""
        ...


class RunOrchestrator:
    """Submit, poll, resolve tool calls, extract the reply."""

    def __init__(
        self,
        runtime: IAssistantRuntime,
        thread_resolver: IThreadResolver,
        tool_resolver: IFunctionCallResolver,
        user_service: IUserService,
        tracker: ITracker,
        poll_interval: float = RUN_POLL_INTERVAL_SECONDS,
        max_poll_attempts: int = RUN_MAX_POLL_ATTEMPTS,
    ):
        self._runtime = runtime
        self._threads = thread_resolver
        self._tools = tool_resolver
        self._users = user_service
        self._tracker = tracker
        self._poll_interval = poll_interval
        self._max_poll_attempts = max_poll_attempts

    async def ask(
        self, user_id: str, text: str, profile: UserProfile | None = None
    ) -> str:
        """Send the message and return the assistant's reply.

        Any failure is logged and answered with an apology instead.
        """
        logger.info(f"Message received from {user_id}: {text[:100]}")

        thread_id = None
        try:
            thread_id = await self._threads.resolve(user_id)
            await self._runtime.add_user_message(thread_id, text)
            run = await self._runtime.create_run(thread_id)
            await self._wait_for_completion(user_id, thread_id, run.id)
            response_text = await self._latest_assistant_text(thread_id)
        except Exception as e:
            logger.error(
                f"Error asking assistant for user {user_id}: {e}",
                exc_info=True,
                extra={"user_id": user_id, "thread_id": thread_id},
            )
            await self._tracker.track(
                event_type="run_failed",
                actor="run_orchestrator",
                data={"user_id": user_id, "thread_id": thread_id, "error": str(e)},
            )
            return ERROR_REPLY

        await self._record_interaction(user_id, thread_id, text, response_text, profile)

        if not response_text:
            logger.warning(f"No assistant text found in thread {thread_id}")
            return NO_RESPONSE_REPLY

        await self._tracker.track(
            event_type="run_completed",
            actor="run_orchestrator",
            data={
                "user_id": user_id,
                "thread_id": thread_id,
                "run_id": run.id,
                "response_text": response_text,
            },
        )
        return response_text

    async def reset(self, user_id: str) -> bool:
        """Start the user on a new thread."""
        reset = await self._threads.reset(user_id)
        if reset:
            logger.info(f"Reset conversation for user {user_id}")
        return reset

    async def _wait_for_completion(
        self, user_id: str, thread_id: str, run_id: str
    ) -> RunSnapshot:
        """Poll until the run completes; tool calls are answered in between.

        Requires-action suspensions share the same attempt budget.
        """
        for attempt in range(1, self._max_poll_attempts + 1):
            run = await self._runtime.retrieve_run(thread_id, run_id)

            if run.status == RunStatus.COMPLETED:
                logger.debug(f"Run {run_id} completed after {attempt} status checks")
                return run

            if run.status.is_terminal_failure:
                raise RunFailedError(run_id, run.status.value)

            if run.status == RunStatus.REQUIRES_ACTION:
                handled = await self._tools.resolve(user_id, run)
                if not handled:
                    raise UnresolvedActionError(run_id)

            if attempt < self._max_poll_attempts:
                await asyncio.sleep(self._poll_interval)

        raise RunTimeoutError(run_id, self._max_poll_attempts)

    async def _latest_assistant_text(self, thread_id: str) -> str:
        """Text of the newest assistant message, or "" if there is none."""
        messages = await self._runtime.list_messages(thread_id)

        # Listing order is not guaranteed to follow creation time.
        assistant_messages = sorted(
            (msg for msg in messages if msg.role == "assistant"),
            key=lambda msg: msg.created_at,
            reverse=True,
        )
        if not assistant_messages:
            return ""

        return assistant_messages[0].text()

    async def _record_interaction(
        self,
        user_id: str,
        thread_id: str,
        text: str,
        response_text: str,
        profile: UserProfile | None,
    ) -> bool:
        """Best-effort history write; failures stop here."""
        try:
            user = await self._users.get_or_create_user(user_id, thread_id, profile)
            await self._users.record_interaction(user, text, response_text)
        except Exception as e:
            logger.error(
                f"Failed to record message interaction for user {user_id}: {e}",
                exc_info=True,
            )
            return False
        return True
