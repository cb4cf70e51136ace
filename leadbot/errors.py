"""Failures raised inside a conversation turn.

``RunOrchestrator.ask`` is the only place these are caught; there they are
logged and turned into a user-safe reply.
"""


class ConversationError(Exception):
    """Base class for conversation-turn failures."""


class ThreadUnavailableError(ConversationError):
    """Neither the remote runtime nor the fallback cache produced a thread."""

    def __init__(self, user_id: str):
        super().__init__(f"Could not establish a conversation for user {user_id}")
        self.user_id = user_id


class RunFailedError(ConversationError):
    """The remote run reached a terminal failure status."""

    def __init__(self, run_id: str, status: str):
        super().__init__(f"Run {run_id} failed with status: {status}")
        self.run_id = run_id
        self.status = status


class RunTimeoutError(ConversationError):
    """The run did not complete within the polling budget."""

    def __init__(self, run_id: str, attempts: int):
        super().__init__(
            f"Timed out waiting for run {run_id} after {attempts} status checks"
        )
        self.run_id = run_id
        self.attempts = attempts


class UnresolvedActionError(ConversationError):
    """The run asked for tool outputs that could not be produced or submitted."""

    def __init__(self, run_id: str):
        super().__init__(f"Could not resolve required action for run {run_id}")
        self.run_id = run_id
