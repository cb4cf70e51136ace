"""Remote assistant runtime data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Literal


class RunStatus(str, Enum):
    """Statuses reported by the remote runtime for a run."""

    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    REQUIRES_ACTION = "requires_action"
    CANCELLING = "cancelling"
    CANCELLED = "cancelled"
    FAILED = "failed"
    COMPLETED = "completed"
    INCOMPLETE = "incomplete"
    EXPIRED = "expired"

    @property
    def is_terminal_failure(self) -> bool:
        return self in TERMINAL_FAILURE_STATUSES


TERMINAL_FAILURE_STATUSES = frozenset(
    {
        RunStatus.FAILED,
        RunStatus.CANCELLED,
        RunStatus.EXPIRED,
        RunStatus.INCOMPLETE,
    }
)


@dataclass
class ToolCall:
    """A function call the assistant is waiting on."""

    id: str
    name: str
    arguments: str  # raw JSON as emitted by the assistant


@dataclass
class ToolOutput:
    """The answer to exactly one ToolCall."""

    tool_call_id: str
    output: str  # JSON payload

    def to_param(self) -> dict:
        return {"tool_call_id": self.tool_call_id, "output": self.output}


@dataclass
class RunSnapshot:
    """State of a run at the moment it was retrieved."""

    id: str
    thread_id: str
    status: RunStatus
    required_action_type: str | None = None
    tool_calls: list[ToolCall] = field(default_factory=list)


@dataclass
class MessageContent:
    """One content part of a thread message."""

    type: str  # "text", "image_file", ...
    text: str | None = None


@dataclass
class ThreadMessage:
    """A message listed from a remote thread."""

    id: str
    role: Literal["user", "assistant"]
    created_at: datetime
    content: list[MessageContent] = field(default_factory=list)

    def text(self) -> str:
        """Text parts joined by newline; other content types are skipped."""
        return "\n".join(
            part.text
            for part in self.content
            if part.type == "text" and part.text is not None
        )
