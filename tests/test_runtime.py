"""Tests for AssistantRuntime."""

from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock, patch

import pytest

from leadbot.assistant import AssistantRuntime
from leadbot.models import RunStatus, ToolOutput


@pytest.fixture
def env(monkeypatch):
    monkeypatch.setenv("OPENAI_API_KEY", "test_key")
    monkeypatch.setenv("OPENAI_ASSISTANT_ID", "asst_test")


@pytest.fixture
def mock_client():
    return Mock()


@pytest.fixture
def runtime(env, mock_client):
    with patch(
        "leadbot.assistant.runtime.openai.AsyncOpenAI", return_value=mock_client
    ):
        yield AssistantRuntime()


def sdk_run(status: str, tool_calls=None):
    run = Mock(id="run_1", thread_id="thread_1", status=status, required_action=None)
    if tool_calls is not None:
        run.required_action = Mock(type="submit_tool_outputs")
        run.required_action.submit_tool_outputs.tool_calls = tool_calls
    return run


def sdk_tool_call(call_id: str, name: str, arguments: str):
    call = Mock(id=call_id)
    call.function.name = name
    call.function.arguments = arguments
    return call


class TestAssistantRuntimeInit:
    """Tests for AssistantRuntime initialization."""

    def test_init_with_env(self, env):
        """Test initialization from environment variables."""
        with patch("leadbot.assistant.runtime.openai.AsyncOpenAI") as client_cls:
            runtime = AssistantRuntime()

        assert runtime.assistant_id == "asst_test"
        client_cls.assert_called_once_with(api_key="test_key")

    def test_init_without_api_key(self, monkeypatch):
        """Test that a missing API key is rejected."""
        monkeypatch.delenv("OPENAI_API_KEY", raising=False)
        monkeypatch.setenv("OPENAI_ASSISTANT_ID", "asst_test")

        with patch("leadbot.assistant.runtime.openai.AsyncOpenAI"):
            with pytest.raises(ValueError, match="OPENAI_API_KEY"):
                AssistantRuntime()

    def test_init_without_assistant_id(self, monkeypatch):
        """Test that a missing assistant ID is rejected."""
        monkeypatch.setenv("OPENAI_API_KEY", "test_key")
        monkeypatch.delenv("OPENAI_ASSISTANT_ID", raising=False)

        with patch("leadbot.assistant.runtime.openai.AsyncOpenAI"):
            with pytest.raises(ValueError, match="OPENAI_ASSISTANT_ID"):
                AssistantRuntime()


class TestAssistantRuntimeThreads:
    """Tests for thread and message calls."""

    async def test_create_thread(self, runtime, mock_client):
        """Test that create_thread returns the new thread ID."""
        mock_client.beta.threads.create = AsyncMock(return_value=Mock(id="thread_abc"))

        assert await runtime.create_thread() == "thread_abc"

    async def test_add_user_message(self, runtime, mock_client):
        """Test that the message is posted as a user turn."""
        mock_client.beta.threads.messages.create = AsyncMock()

        await runtime.add_user_message("thread_1", "Hello")

        mock_client.beta.threads.messages.create.assert_awaited_once_with(
            "thread_1", role="user", content="Hello"
        )

    async def test_list_messages(self, runtime, mock_client):
        """Test conversion of listed messages."""
        text_block = Mock(type="text")
        text_block.text.value = "Hi there"
        image_block = Mock(type="image_file")
        message = Mock(
            id="msg_1",
            role="assistant",
            created_at=1704110400,
            content=[text_block, image_block],
        )
        mock_client.beta.threads.messages.list = AsyncMock(return_value=Mock(data=[message]))

        messages = await runtime.list_messages("thread_1")

        assert len(messages) == 1
        assert messages[0].role == "assistant"
        assert messages[0].created_at == datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)
        assert [part.type for part in messages[0].content] == ["text", "image_file"]
        assert messages[0].text() == "Hi there"

    async def test_errors_are_wrapped(self, runtime, mock_client):
        """Test that SDK errors surface as RuntimeError."""
        mock_client.beta.threads.create = AsyncMock(side_effect=Exception("API Error"))

        with pytest.raises(RuntimeError, match="Assistant API error: API Error"):
            await runtime.create_thread()


class TestAssistantRuntimeRuns:
    """Tests for run calls."""

    async def test_create_run_uses_assistant(self, runtime, mock_client):
        """Test that runs are bound to the configured assistant."""
        mock_client.beta.threads.runs.create = AsyncMock(return_value=sdk_run("queued"))

        run = await runtime.create_run("thread_1")

        assert run.status == RunStatus.QUEUED
        mock_client.beta.threads.runs.create.assert_awaited_once_with(
            "thread_1", assistant_id="asst_test"
        )

    async def test_retrieve_run_with_tool_calls(self, runtime, mock_client):
        """Test conversion of a run waiting on tool outputs."""
        calls = [sdk_tool_call("call_1", "gather_user_info", '{"name": "Al"}')]
        mock_client.beta.threads.runs.retrieve = AsyncMock(
            return_value=sdk_run("requires_action", tool_calls=calls)
        )

        run = await runtime.retrieve_run("thread_1", "run_1")

        assert run.status == RunStatus.REQUIRES_ACTION
        assert run.required_action_type == "submit_tool_outputs"
        assert run.tool_calls[0].id == "call_1"
        assert run.tool_calls[0].name == "gather_user_info"
        assert run.tool_calls[0].arguments == '{"name": "Al"}'
        mock_client.beta.threads.runs.retrieve.assert_awaited_once_with(
            "run_1", thread_id="thread_1"
        )

    async def test_retrieve_completed_run(self, runtime, mock_client):
        """Test conversion of a run with no pending action."""
        mock_client.beta.threads.runs.retrieve = AsyncMock(return_value=sdk_run("completed"))

        run = await runtime.retrieve_run("thread_1", "run_1")

        assert run.status == RunStatus.COMPLETED
        assert run.tool_calls == []
        assert run.required_action_type is None

    async def test_submit_tool_outputs(self, runtime, mock_client):
        """Test that outputs are sent in one batch."""
        mock_client.beta.threads.runs.submit_tool_outputs = AsyncMock()

        await runtime.submit_tool_outputs(
            "thread_1",
            "run_1",
            [
                ToolOutput(tool_call_id="call_1", output='{"success": true}'),
                ToolOutput(tool_call_id="call_2", output='{"success": false}'),
            ],
        )

        mock_client.beta.threads.runs.submit_tool_outputs.assert_awaited_once_with(
            "run_1",
            thread_id="thread_1",
            tool_outputs=[
                {"tool_call_id": "call_1", "output": '{"success": true}'},
                {"tool_call_id": "call_2", "output": '{"success": false}'},
            ],
        )

    async def test_unknown_status_is_an_error(self, runtime, mock_client):
        """Test that a status outside the known vocabulary is reported."""
        mock_client.beta.threads.runs.retrieve = AsyncMock(return_value=sdk_run("paused"))

        with pytest.raises(RuntimeError, match="Assistant API error"):
            await runtime.retrieve_run("thread_1", "run_1")
