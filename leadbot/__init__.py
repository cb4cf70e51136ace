"""Lead assistant core."""

from .app import Application, IApplication
from .assistant import AssistantRuntime, IAssistantRuntime
from .conversation import IRunOrchestrator, RunOrchestrator
from .models import (
    Interaction,
    Lead,
    LeadData,
    LeadStatus,
    RunSnapshot,
    RunStatus,
    ThreadMessage,
    ToolCall,
    ToolOutput,
    TraceEvent,
    UserProfile,
    UserRecord,
    UserStats,
)
from .services import LeadService, UserService
from .storage import IStorage, Storage
from .threads import CacheSweeper, ThreadCache, ThreadResolver
from .tools import FunctionCallResolver, ToolName
from .tracker import ITracker, Tracker

__all__ = [
    # Application
    "Application",
    "IApplication",
    # Models
    "UserProfile",
    "UserRecord",
    "UserStats",
    "Interaction",
    "Lead",
    "LeadData",
    "LeadStatus",
    "RunStatus",
    "RunSnapshot",
    "ToolCall",
    "ToolOutput",
    "ThreadMessage",
    "TraceEvent",
    # Components
    "IStorage",
    "Storage",
    "ITracker",
    "Tracker",
    "IAssistantRuntime",
    "AssistantRuntime",
    "UserService",
    "LeadService",
    "ThreadCache",
    "CacheSweeper",
    "ThreadResolver",
    "ToolName",
    "FunctionCallResolver",
    "IRunOrchestrator",
    "RunOrchestrator",
]
