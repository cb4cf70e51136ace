"""Pytest configuration and fixtures."""

import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import AsyncMock, Mock

import pytest
import pytest_asyncio

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from leadbot.models import (  # noqa: E402
    MessageContent,
    RunSnapshot,
    RunStatus,
    ThreadMessage,
    ToolCall,
)

BASE_TIME = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


def make_run(
    status: RunStatus,
    tool_calls: list[ToolCall] | None = None,
    run_id: str = "run_1",
    thread_id: str = "thread_1",
) -> RunSnapshot:
    """Build a RunSnapshot; requires_action runs carry tool calls."""
    required_action_type = (
        "submit_tool_outputs" if status == RunStatus.REQUIRES_ACTION else None
    )
    return RunSnapshot(
        id=run_id,
        thread_id=thread_id,
        status=status,
        required_action_type=required_action_type,
        tool_calls=tool_calls or [],
    )


def make_message(
    text: str | None,
    role: str = "assistant",
    seconds: int = 0,
    message_id: str | None = None,
) -> ThreadMessage:
    """Build a ThreadMessage created `seconds` after BASE_TIME."""
    content = [MessageContent(type="text", text=text)] if text is not None else []
    return ThreadMessage(
        id=message_id or f"msg_{role}_{seconds}",
        role=role,
        created_at=BASE_TIME + timedelta(seconds=seconds),
        content=content,
    )


@pytest_asyncio.fixture
async def storage():
    """Create in-memory storage for testing."""
    from leadbot.storage import Storage

    st = Storage(":memory:")
    await st.init()
    yield st
    await st.close()


@pytest.fixture
def tracker(storage):
    """Create Tracker with storage."""
    from leadbot.tracker import Tracker

    return Tracker(storage=storage)


@pytest.fixture
def mock_tracker():
    """Tracker that records calls only."""
    tr = Mock()
    tr.track = AsyncMock()
    return tr


@pytest.fixture
def mock_runtime():
    """Create mock assistant runtime."""
    runtime = Mock()
    runtime.create_thread = AsyncMock(return_value="thread_1")
    runtime.add_user_message = AsyncMock()
    runtime.create_run = AsyncMock(return_value=make_run(RunStatus.QUEUED))
    runtime.retrieve_run = AsyncMock(return_value=make_run(RunStatus.COMPLETED))
    runtime.list_messages = AsyncMock(return_value=[make_message("Test response")])
    runtime.submit_tool_outputs = AsyncMock()
    return runtime


@pytest.fixture
def thread_cache():
    """Empty transient thread cache."""
    from leadbot.threads import ThreadCache

    return ThreadCache()


@pytest.fixture
def user_service(storage):
    """UserService over in-memory storage."""
    from leadbot.services import UserService

    return UserService(storage)


@pytest.fixture
def lead_service(storage):
    """LeadService over in-memory storage."""
    from leadbot.services import LeadService

    return LeadService(storage)
