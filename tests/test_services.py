"""Tests for UserService and LeadService."""

from datetime import datetime, timedelta, timezone
from unittest.mock import AsyncMock, Mock

from leadbot.models import LeadData, LeadStatus, UserProfile
from leadbot.services import LeadService


def lead_data(**overrides) -> LeadData:
    values = {
        "name": "Alice Smith",
        "email": "alice@example.com",
        "phone_number": "+1 555 123 4567",
    }
    values.update(overrides)
    return LeadData(**values)


class TestUserServiceThreads:
    """Tests for the durable thread store operations."""

    async def test_get_thread_id_unknown_user(self, user_service):
        """Test that an unknown user has no thread."""
        assert await user_service.get_thread_id("user1") is None

    async def test_set_then_get_thread_id(self, user_service):
        """Test that a stored thread is returned."""
        assert await user_service.set_thread_id("user1", "thread_1") is True
        assert await user_service.get_thread_id("user1") == "thread_1"

    async def test_set_thread_id_replaces(self, user_service):
        """Test that a reset thread supersedes the old one."""
        await user_service.set_thread_id("user1", "thread_1")
        await user_service.set_thread_id("user1", "thread_2")

        assert await user_service.get_thread_id("user1") == "thread_2"


class TestUserServiceUsers:
    """Tests for user records and interactions."""

    async def test_get_or_create_creates(self, user_service, storage):
        """Test that a new user is created with the given thread."""
        user = await user_service.get_or_create_user(
            "user1", "thread_1", UserProfile(username="alice", first_name="Alice")
        )

        assert user.thread_id == "thread_1"
        assert user.username == "alice"
        assert user.message_count == 0
        assert (await storage.get_user("user1")) is not None

    async def test_get_or_create_updates_profile(self, user_service, storage):
        """Test that changed profile fields are written back."""
        await user_service.get_or_create_user("user1", "thread_1", UserProfile(username="alice"))

        user = await user_service.get_or_create_user(
            "user1", "thread_other", UserProfile(username="alice2", last_name="Smith")
        )

        assert user.username == "alice2"
        assert user.last_name == "Smith"
        stored = await storage.get_user("user1")
        assert stored.username == "alice2"

    async def test_get_or_create_follows_current_thread(self, user_service, storage):
        """Test that interactions land on the thread the message went to."""
        await user_service.get_or_create_user("user1", "thread_stored")

        user = await user_service.get_or_create_user("user1", "thread_cached")
        await user_service.record_interaction(user, "Hello", "Hi")

        assert user.thread_id == "thread_cached"
        assert (await storage.get_user("user1")).thread_id == "thread_cached"
        interactions = await storage.get_interactions("user1")
        assert interactions[0].thread_id == "thread_cached"

    async def test_get_or_create_ignores_empty_profile(self, user_service):
        """Test that missing profile fields do not erase stored ones."""
        await user_service.get_or_create_user("user1", "thread_1", UserProfile(username="alice"))

        user = await user_service.get_or_create_user("user1", "thread_1")

        assert user.username == "alice"

    async def test_record_interaction(self, user_service, storage):
        """Test that recording counts the message and stores the exchange."""
        user = await user_service.get_or_create_user("user1", "thread_1")

        await user_service.record_interaction(user, "Hello", "Hi there")
        await user_service.record_interaction(user, "How are you?", "Fine")

        stored = await storage.get_user("user1")
        assert stored.message_count == 2

        interactions = await storage.get_interactions("user1")
        assert len(interactions) == 2
        assert {i.user_message for i in interactions} == {"Hello", "How are you?"}
        assert all(i.thread_id == "thread_1" for i in interactions)

    async def test_get_stats(self, user_service):
        """Test user statistics."""
        user = await user_service.get_or_create_user(
            "user1", "thread_1", UserProfile(first_name="Alice")
        )
        user.first_interaction_at = datetime.now(timezone.utc) - timedelta(days=3, hours=1)
        await user_service.record_interaction(user, "Hello", "Hi")

        stats = await user_service.get_stats("user1")

        assert stats.message_count == 1
        assert stats.days_since_first_interaction == 3
        assert stats.first_name == "Alice"

    async def test_get_stats_unknown_user(self, user_service):
        """Test that an unknown user has no stats."""
        assert await user_service.get_stats("nobody") is None


class TestLeadService:
    """Tests for LeadService."""

    async def test_store_lead(self, lead_service, user_service, storage):
        """Test storing a lead for a known user."""
        await user_service.set_thread_id("user1", "thread_1")

        lead = await lead_service.store_lead("user1", lead_data())

        assert lead is not None
        assert lead.status == LeadStatus.NEW
        assert lead.additional_info["captured_via"] == "assistant_function"
        assert "timestamp" in lead.additional_info

        leads = await storage.get_leads("user1")
        assert len(leads) == 1
        assert leads[0].email == "alice@example.com"

    async def test_store_lead_keeps_additional_info(self, lead_service, user_service):
        """Test that supplied extra info replaces the default."""
        await user_service.set_thread_id("user1", "thread_1")

        lead = await lead_service.store_lead(
            "user1", lead_data(additional_info={"budget": "10k"})
        )

        assert lead.additional_info == {"budget": "10k"}

    async def test_store_lead_unknown_user(self, lead_service, storage):
        """Test that a lead for an unknown user is not stored."""
        assert await lead_service.store_lead("nobody", lead_data()) is None
        assert await storage.get_leads("nobody") == []

    async def test_store_lead_storage_failure(self):
        """Test that storage errors are reported as None."""
        storage = Mock()
        storage.get_user = AsyncMock(side_effect=RuntimeError("database is locked"))

        assert await LeadService(storage).store_lead("user1", lead_data()) is None

    async def test_get_leads_by_user(self, lead_service, user_service):
        """Test listing a user's leads."""
        await user_service.set_thread_id("user1", "thread_1")
        await lead_service.store_lead("user1", lead_data())

        leads = await lead_service.get_leads_by_user("user1")

        assert len(leads) == 1
        assert leads[0].name == "Alice Smith"

    async def test_update_status(self, lead_service, user_service):
        """Test moving a lead to a new status."""
        await user_service.set_thread_id("user1", "thread_1")
        lead = await lead_service.store_lead("user1", lead_data())

        updated = await lead_service.update_status(lead.id, LeadStatus.CONTACTED, notes="Emailed")

        assert updated.status == LeadStatus.CONTACTED
        assert updated.notes == "Emailed"

    async def test_update_status_missing_lead(self, lead_service):
        """Test updating an unknown lead."""
        assert await lead_service.update_status("nope", LeadStatus.CONTACTED) is None
