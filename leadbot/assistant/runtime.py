"""Remote assistant runtime built on the OpenAI Assistants API."""

import os
from datetime import datetime, timezone
from typing import Protocol

import openai

from ..models import (
    MessageContent,
    RunSnapshot,
    RunStatus,
    ThreadMessage,
    ToolCall,
    ToolOutput,
)


class IAssistantRuntime(Protocol):
    """Threads, messages and runs on the remote assistant."""

    async def create_thread(self) -> str:
        """Mint a new conversation thread. Returns its ID."""
        ...

    async def add_user_message(self, thread_id: str, text: str) -> None:
        """Append a user turn to the thread."""
        ...

    async def create_run(self, thread_id: str) -> RunSnapshot:
        """Start the configured assistant on the thread."""
        ...

    async def retrieve_run(self, thread_id: str, run_id: str) -> RunSnapshot:
        """Fetch the current state of a run."""
        ...

    async def list_messages(self, thread_id: str) -> list[ThreadMessage]:
        """List the thread's most recent messages."""
        ...

    async def submit_tool_outputs(
        self, thread_id: str, run_id: str, outputs: list[ToolOutput]
    ) -> None:
        """Hand a batch of tool outputs back to a suspended run."""
        ...


def _to_run_snapshot(run) -> RunSnapshot:
    tool_calls = []
    required_action_type = None
    if run.required_action is not None:
        required_action_type = run.required_action.type
        if required_action_type == "submit_tool_outputs":
            tool_calls = [
                ToolCall(
                    id=call.id,
                    name=call.function.name,
                    arguments=call.function.arguments,
                )
                for call in run.required_action.submit_tool_outputs.tool_calls
            ]

    return RunSnapshot(
        id=run.id,
        thread_id=run.thread_id,
        status=RunStatus(run.status),
        required_action_type=required_action_type,
        tool_calls=tool_calls,
    )


def _to_thread_message(message) -> ThreadMessage:
    content = []
    for block in message.content or []:
        if block.type == "text":
            content.append(MessageContent(type="text", text=block.text.value))
        else:
            content.append(MessageContent(type=block.type))

    return ThreadMessage(
        id=message.id,
        role=message.role,
        created_at=datetime.fromtimestamp(message.created_at, tz=timezone.utc),
        content=content,
    )


class AssistantRuntime:
    """OpenAI Assistants API runtime."""

    def __init__(
        self,
        api_key: str | None = None,
        assistant_id: str | None = None,
        message_page_size: int = 20,
    ):
        self._api_key = api_key or os.getenv("OPENAI_API_KEY")
        if not self._api_key:
            raise ValueError("OPENAI_API_KEY environment variable not set")

        self._assistant_id = assistant_id or os.getenv("OPENAI_ASSISTANT_ID")
        if not self._assistant_id:
            raise ValueError("OPENAI_ASSISTANT_ID environment variable not set")

        self._message_page_size = message_page_size
        self._client = openai.AsyncOpenAI(api_key=self._api_key)

    @property
    def assistant_id(self) -> str:
        return self._assistant_id

    async def create_thread(self) -> str:
        """Mint a new conversation thread."""
        try:
            thread = await self._client.beta.threads.create()
        except Exception as e:
            raise RuntimeError(f"Assistant API error: {e}") from e
        return thread.id

    async def add_user_message(self, thread_id: str, text: str) -> None:
        """Append a user turn to the thread."""
        try:
            await self._client.beta.threads.messages.create(
                thread_id, role="user", content=text
            )
        except Exception as e:
            raise RuntimeError(f"Assistant API error: {e}") from e

    async def create_run(self, thread_id: str) -> RunSnapshot:
        """Start the configured assistant on the thread."""
        try:
            run = await self._client.beta.threads.runs.create(
                thread_id, assistant_id=self._assistant_id
            )
        except Exception as e:
            raise RuntimeError(f"Assistant API error: {e}") from e
        return _to_run_snapshot(run)

    async def retrieve_run(self, thread_id: str, run_id: str) -> RunSnapshot:
        """Fetch the current state of a run."""
        try:
            run = await self._client.beta.threads.runs.retrieve(
                run_id, thread_id=thread_id
            )
            return _to_run_snapshot(run)
        except Exception as e:
            raise RuntimeError(f"Assistant API error: {e}") from e

    async def list_messages(self, thread_id: str) -> list[ThreadMessage]:
        """List the thread's most recent messages, in listing order."""
        try:
            page = await self._client.beta.threads.messages.list(
                thread_id, order="desc", limit=self._message_page_size
            )
            return [_to_thread_message(message) for message in page.data]
        except Exception as e:
            raise RuntimeError(f"Assistant API error: {e}") from e

    async def submit_tool_outputs(
        self, thread_id: str, run_id: str, outputs: list[ToolOutput]
    ) -> None:
        """Hand a batch of tool outputs back to a suspended run."""
        try:
            await self._client.beta.threads.runs.submit_tool_outputs(
                run_id,
                thread_id=thread_id,
                tool_outputs=[output.to_param() for output in outputs],
            )
        except Exception as e:
            raise RuntimeError(f"Assistant API error: {e}") from e
