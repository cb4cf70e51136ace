"""End-user and interaction data models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class UserProfile:
    """Display details supplied by the message transport."""

    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None


@dataclass
class UserRecord:
    """A persisted end user and their current conversation thread."""

    id: str
    thread_id: str
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
    message_count: int = 0
    first_interaction_at: datetime | None = None
    last_interaction_at: datetime | None = None
    is_active: bool = True


@dataclass
class Interaction:
    """One user message and the assistant reply it produced."""

    id: str
    user_id: str
    thread_id: str
    user_message: str
    assistant_response: str
    created_at: datetime


@dataclass
class UserStats:
    """Summary of a user's chat activity."""

    message_count: int
    first_interaction_at: datetime
    days_since_first_interaction: int
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None
