"""Lead capture data models."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum


class LeadStatus(str, Enum):
    """Follow-up state of a captured lead."""

    NEW = "new"
    CONTACTED = "contacted"
    CALLBACK = "callback"
    COMPLETED = "completed"
    NOT_INTERESTED = "not_interested"


@dataclass
class LeadData:
    """Contact details gathered by the assistant."""

    name: str
    email: str
    phone_number: str
    additional_info: dict | None = None


@dataclass
class Lead:
    """A stored lead."""

    id: str
    user_id: str
    name: str
    email: str
    phone_number: str
    created_at: datetime
    source: str = "assistant"
    status: LeadStatus = LeadStatus.NEW
    callback_date: datetime | None = None
    notes: str | None = None
    additional_info: dict = field(default_factory=dict)
