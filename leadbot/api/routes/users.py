"""User statistics and lead API routes."""

from datetime import datetime
from typing import Any

from pydantic import BaseModel
from fastapi import APIRouter, HTTPException

from ...app import IApplication


class StatsResponse(BaseModel):
    """Response model for user statistics."""

    message_count: int
    first_interaction_at: datetime
    days_since_first_interaction: int
    username: str | None = None
    first_name: str | None = None
    last_name: str | None = None


class LeadResponse(BaseModel):
    """Response model for a captured lead."""

    id: str
    name: str
    email: str
    phone_number: str
    status: str
    source: str
    created_at: datetime
    additional_info: dict[str, Any]


def create_users_router(app: IApplication) -> APIRouter:
    """Create users router."""
    router = APIRouter(prefix="/api/users", tags=["users"])

    @router.get("/{user_id}/stats", response_model=StatsResponse)
    async def get_stats(user_id: str) -> dict:
        """Message count and first-contact details for a user."""
        try:
            stats = await app.users.get_stats(user_id)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        if stats is None:
            raise HTTPException(status_code=404, detail="No statistics available")

        return {
            "message_count": stats.message_count,
            "first_interaction_at": stats.first_interaction_at,
            "days_since_first_interaction": stats.days_since_first_interaction,
            "username": stats.username,
            "first_name": stats.first_name,
            "last_name": stats.last_name,
        }

    @router.get("/{user_id}/leads", response_model=list[LeadResponse])
    async def get_leads(user_id: str) -> list[dict]:
        """Leads the assistant captured for a user, newest first."""
        try:
            leads = await app.leads.get_leads_by_user(user_id)
        except Exception as e:
            raise HTTPException(status_code=500, detail=str(e))

        return [
            {
                "id": lead.id,
                "name": lead.name,
                "email": lead.email,
                "phone_number": lead.phone_number,
                "status": lead.status.value,
                "source": lead.source,
                "created_at": lead.created_at,
                "additional_info": lead.additional_info,
            }
            for lead in leads
        ]

    return router
