"""Answering the assistant's function calls while a run is suspended."""

import json
from enum import Enum
from typing import Awaitable, Callable, Protocol

from ..assistant import IAssistantRuntime
from ..logging_config import get_logger
from ..models import LeadData, RunSnapshot, RunStatus, ToolCall, ToolOutput
from ..services import ILeadService
from ..tracker import ITracker
from .validation import validate_lead_arguments

logger = get_logger(__name__)

INTERNAL_ERROR = "Internal error processing function call"


class ToolName(str, Enum):
    """Functions the assistant is configured with."""

    GATHER_USER_INFO = "gather_user_info"


ToolHandler = Callable[[str, dict], Awaitable[dict]]


def _success(message: str) -> dict:
    return {"success": True, "message": message}


def _failure(error: str) -> dict:
    return {"success": False, "error": error}


class IFunctionCallResolver(Protocol):
    """Produces and submits tool outputs for a suspended run."""

    async def resolve(self, user_id: str, run: RunSnapshot) -> bool:
        """Return True if a batch of tool outputs was submitted."""
        ...


class FunctionCallResolver:
    """One handler per ToolName; every call gets exactly one output."""

    def __init__(
        self,
        runtime: IAssistantRuntime,
        lead_service: ILeadService,
        tracker: ITracker,
    ):
        self._runtime = runtime
        self._leads = lead_service
        self._tracker = tracker
        self._handlers: dict[ToolName, ToolHandler] = {
            ToolName.GATHER_USER_INFO: self._gather_user_info,
        }

    async def resolve(self, user_id: str, run: RunSnapshot) -> bool:
        """Return True if a batch of tool outputs was submitted."""
        if (
            run.status != RunStatus.REQUIRES_ACTION
            or run.required_action_type != "submit_tool_outputs"
        ):
            return False

        outputs = [await self._resolve_call(user_id, call) for call in run.tool_calls]
        if not outputs:
            logger.warning(f"Run {run.id} requires action but lists no tool calls")
            return False

        try:
            await self._runtime.submit_tool_outputs(run.thread_id, run.id, outputs)
        except Exception as e:
            logger.error(f"Error submitting tool outputs for run {run.id}: {e}", exc_info=True)
            return False

        await self._tracker.track(
            event_type="tool_calls_submitted",
            actor="function_call_resolver",
            data={
                "user_id": user_id,
                "run_id": run.id,
                "tool_calls": [call.name for call in run.tool_calls],
            },
        )
        return True

    async def _resolve_call(self, user_id: str, call: ToolCall) -> ToolOutput:
        try:
            arguments = json.loads(call.arguments)
            if not isinstance(arguments, dict):
                raise ValueError("Function arguments must be a JSON object")

            logger.info(
                f"Processing function call: {call.name} with args: {call.arguments}",
                extra={"user_id": user_id, "tool_call_id": call.id},
            )

            try:
                tool = ToolName(call.name)
            except ValueError:
                payload = _failure(f"Function '{call.name}' is not supported")
            else:
                payload = await self._handlers[tool](user_id, arguments)
        except Exception as e:
            logger.error(f"Error processing tool call {call.id}: {e}", exc_info=True)
            payload = _failure(INTERNAL_ERROR)

        return ToolOutput(tool_call_id=call.id, output=json.dumps(payload))

    async def _gather_user_info(self, user_id: str, arguments: dict) -> dict:
        validation = validate_lead_arguments(arguments)
        if not validation.is_valid:
            return _failure(", ".join(validation.errors))

        additional_info = arguments.get("additional_info")
        data = LeadData(
            name=arguments["name"].strip(),
            email=arguments["email"].strip(),
            phone_number=arguments["phone_number"].strip(),
            additional_info=additional_info if isinstance(additional_info, dict) else None,
        )

        lead = await self._leads.store_lead(user_id, data)
        if lead is None:
            return _failure("Failed to store lead information in the database")

        await self._tracker.track(
            event_type="lead_captured",
            actor="function_call_resolver",
            data={"user_id": user_id, "lead_id": lead.id, "email": lead.email},
        )
        return _success(f"Successfully stored lead information for {data.name}")
