"""Tracing data models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class TraceEvent:
    """A single observability event of a conversation turn."""

    id: str
    event_type: str  # e.g. "thread_created", "run_completed"
    actor: str  # component that emitted it
    data: dict
    timestamp: datetime
