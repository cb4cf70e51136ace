"""Thread resolution and the transient fallback cache."""

from .cache import CacheSweeper, ThreadCache
from .resolver import IThreadResolver, ThreadResolver

__all__ = ["ThreadCache", "CacheSweeper", "IThreadResolver", "ThreadResolver"]
