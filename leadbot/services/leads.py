"""Lead capture persistence."""

import uuid
from datetime import datetime, timezone
from typing import Protocol

from ..logging_config import get_logger
from ..models import Lead, LeadData, LeadStatus
from ..storage import IStorage

logger = get_logger(__name__)


class ILeadService(Protocol):
    """Stores contact details gathered by the assistant."""

    async def store_lead(self, user_id: str, data: LeadData) -> Lead | None:
        """Persist a lead. Returns None if it could not be stored."""
        ...


class LeadService:
    """Storage-backed leads."""

    def __init__(self, storage: IStorage, source: str = "assistant"):
        self._storage = storage
        self._source = source

    async def store_lead(self, user_id: str, data: LeadData) -> Lead | None:
        """Persist a lead for a known user. Returns None on any failure."""
        try:
            user = await self._storage.get_user(user_id)
            if user is None:
                logger.error(f"No user found with id: {user_id}")
                return None

            now = datetime.now(timezone.utc)
            lead = Lead(
                id=str(uuid.uuid4()),
                user_id=user_id,
                name=data.name,
                email=data.email,
                phone_number=data.phone_number,
                created_at=now,
                source=self._source,
                additional_info=data.additional_info
                or {
                    "captured_via": "assistant_function",
                    "timestamp": now.isoformat(),
                },
            )
            await self._storage.save_lead(lead)
        except Exception as e:
            logger.error(f"Failed to store lead information: {e}", exc_info=True)
            return None

        logger.info(f"Created new lead for user {user_id}: {lead.email}")
        return lead

    async def get_leads_by_user(self, user_id: str) -> list[Lead]:
        """All of a user's leads, newest first."""
        return await self._storage.get_leads(user_id)

    async def update_status(
        self,
        lead_id: str,
        status: LeadStatus,
        callback_date: datetime | None = None,
        notes: str | None = None,
    ) -> Lead | None:
        """Move a lead along its follow-up states."""
        lead = await self._storage.update_lead_status(
            lead_id, status, callback_date=callback_date, notes=notes
        )
        if lead is None:
            logger.warning(f"Lead {lead_id} not found")
        return lead
