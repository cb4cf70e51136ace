"""Transient thread cache data models."""

from dataclasses import dataclass
from datetime import datetime


@dataclass
class ThreadCacheEntry:
    """A thread handle held in memory because the durable write failed."""

    thread_id: str
    last_updated: datetime
