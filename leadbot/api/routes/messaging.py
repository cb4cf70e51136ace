"""Messaging API routes."""

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException

from ...app import IApplication
from ...models import UserProfile


class MessageRequest(BaseModel):
    """Request model for sending a message."""

    user_id: str
    text: str
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class MessageResponse(BaseModel):
    """Response model for message."""

    response: str


class ResetResponse(BaseModel):
    """Response model for a conversation reset."""

    reset: bool


def create_messaging_router(app: IApplication) -> APIRouter:
    """Create messaging router."""
    router = APIRouter(prefix="/api", tags=["messaging"])

    @router.post("/messages", response_model=MessageResponse)
    async def send_message(request: MessageRequest) -> dict:
        """Send a message to the assistant."""
        if not request.text.strip():
            raise HTTPException(status_code=400, detail="Message text is empty")

        profile = UserProfile(
            username=request.username,
            first_name=request.first_name,
            last_name=request.last_name,
        )
        response = await app.orchestrator.ask(
            user_id=request.user_id, text=request.text, profile=profile
        )
        return {"response": response}

    @router.post("/conversations/{user_id}/reset", response_model=ResetResponse)
    async def reset_conversation(user_id: str) -> dict:
        """Start the user on a fresh thread."""
        return {"reset": await app.orchestrator.reset(user_id)}

    return router
