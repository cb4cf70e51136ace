"""Core data models for the lead assistant."""

from .leads import Lead, LeadData, LeadStatus
from .runs import (
    MessageContent,
    RunSnapshot,
    RunStatus,
    ThreadMessage,
    ToolCall,
    ToolOutput,
)
from .threads import ThreadCacheEntry
from .tracing import TraceEvent
from .users import Interaction, UserProfile, UserRecord, UserStats

__all__ = [
    # Users
    "UserProfile",
    "UserRecord",
    "Interaction",
    "UserStats",
    # Leads
    "Lead",
    "LeadData",
    "LeadStatus",
    # Runs
    "RunStatus",
    "RunSnapshot",
    "ToolCall",
    "ToolOutput",
    "ThreadMessage",
    "MessageContent",
    # Threads
    "ThreadCacheEntry",
    # Tracing
    "TraceEvent",
]
