"""Remote assistant runtime module."""

from .runtime import AssistantRuntime, IAssistantRuntime

__all__ = ["AssistantRuntime", "IAssistantRuntime"]
