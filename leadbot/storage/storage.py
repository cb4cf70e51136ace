"""SQLite storage implementation."""

import json
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Protocol

import aiosqlite

from ..config import resolve_db_path
from ..models import Interaction, Lead, LeadStatus, TraceEvent, UserRecord


def _to_db(value: datetime | None) -> str | None:
    return value.isoformat() if value else None


def _from_db(value: str | None) -> datetime | None:
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


class IStorage(Protocol):
    """Persistent storage for users, interactions, leads and traces (SQLite)."""

    async def init(self) -> None:
        """Initialize database and create tables."""
        ...

    async def close(self) -> None:
        """Close database connection."""
        ...

    # Users
    async def get_user(self, user_id: str) -> UserRecord | None:
        """Get a user by ID."""
        ...

    async def save_user(self, user: UserRecord) -> None:
        """Insert or replace a user."""
        ...

    async def set_thread_id(self, user_id: str, thread_id: str) -> None:
        """Point a user at a thread, creating the user row if missing."""
        ...

    # Interactions
    async def save_interaction(self, interaction: Interaction) -> None:
        """Save an interaction."""
        ...

    async def get_interactions(
        self, user_id: str, limit: int = 100
    ) -> list[Interaction]:
        """Get a user's interactions (newest first)."""
        ...

    # Leads
    async def save_lead(self, lead: Lead) -> None:
        """Save a lead."""
        ...

    async def get_leads(self, user_id: str) -> list[Lead]:
        """Get a user's leads (newest first)."""
        ...

    async def update_lead_status(
        self,
        lead_id: str,
        status: LeadStatus,
        callback_date: datetime | None = None,
        notes: str | None = None,
    ) -> Lead | None:
        """Change a lead's status; returns the updated lead."""
        ...

    # TraceEvents
    async def save_trace_event(self, event: TraceEvent) -> None:
        """Save a trace event."""
        ...

    async def get_trace_events(
        self,
        after: datetime | None = None,
        event_types: list[str] | None = None,
        actor: str | None = None,
        limit: int = 100,
    ) -> list[TraceEvent]:
        """Get trace events with optional filters."""
        ...

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        ...


class Storage:
    """SQLite storage implementation."""

    def __init__(self, db_path: str | Path | None = None):
        if db_path is None:
            self._db_path = resolve_db_path()
        else:
            self._db_path = resolve_db_path(db_path)
        self._conn: aiosqlite.Connection | None = None

    async def init(self) -> None:
        """Initialize database and create tables."""
        self._conn = await aiosqlite.connect(self._db_path)

        schema_path = Path(__file__).parent / "schema.sql"
        with open(schema_path, "r", encoding="utf-8") as f:
            schema_sql = f.read()
        await self._conn.executescript(schema_sql)
        await self._conn.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._conn:
            await self._conn.close()
            self._conn = None

    def _require_conn(self) -> aiosqlite.Connection:
        if not self._conn:
            raise RuntimeError("Storage not initialized")
        return self._conn

    # Users
    async def get_user(self, user_id: str) -> UserRecord | None:
        """Get a user by ID."""
        conn = self._require_conn()

        cursor = await conn.execute(
            """
            SELECT id, thread_id, username, first_name, last_name,
                   message_count, first_interaction_at, last_interaction_at,
                   is_active
            FROM users
            WHERE id = ?
            """,
            (user_id,),
        )
        row = await cursor.fetchone()

        if not row:
            return None

        return UserRecord(
            id=row[0],
            thread_id=row[1],
            username=row[2],
            first_name=row[3],
            last_name=row[4],
            message_count=row[5],
            first_interaction_at=_from_db(row[6]),
            last_interaction_at=_from_db(row[7]),
            is_active=bool(row[8]),
        )

    async def save_user(self, user: UserRecord) -> None:
        """Insert or replace a user."""
        conn = self._require_conn()
        now = datetime.now(timezone.utc)

        await conn.execute(
            """
            INSERT OR REPLACE INTO users
            (id, thread_id, username, first_name, last_name, message_count,
             first_interaction_at, last_interaction_at, is_active)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                user.id,
                user.thread_id,
                user.username,
                user.first_name,
                user.last_name,
                user.message_count,
                _to_db(user.first_interaction_at or now),
                _to_db(user.last_interaction_at or now),
                int(user.is_active),
            ),
        )
        await conn.commit()

    async def set_thread_id(self, user_id: str, thread_id: str) -> None:
        """Point a user at a thread, creating the user row if missing."""
        conn = self._require_conn()
        now = _to_db(datetime.now(timezone.utc))

        await conn.execute(
            """
            INSERT INTO users (id, thread_id, first_interaction_at, last_interaction_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT(id) DO UPDATE SET
                thread_id = excluded.thread_id,
                last_interaction_at = excluded.last_interaction_at
            """,
            (user_id, thread_id, now, now),
        )
        await conn.commit()

    # Interactions
    async def save_interaction(self, interaction: Interaction) -> None:
        """Save an interaction."""
        conn = self._require_conn()

        await conn.execute(
            """
            INSERT INTO interactions
            (id, user_id, thread_id, user_message, assistant_response, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (
                interaction.id or str(uuid.uuid4()),
                interaction.user_id,
                interaction.thread_id,
                interaction.user_message,
                interaction.assistant_response,
                _to_db(interaction.created_at),
            ),
        )
        await conn.commit()

    async def get_interactions(
        self, user_id: str, limit: int = 100
    ) -> list[Interaction]:
        """Get a user's interactions (newest first)."""
        conn = self._require_conn()

        cursor = await conn.execute(
            """
            SELECT id, user_id, thread_id, user_message, assistant_response, created_at
            FROM interactions
            WHERE user_id = ?
            ORDER BY created_at DESC
            LIMIT ?
            """,
            (user_id, limit),
        )
        rows = await cursor.fetchall()

        return [
            Interaction(
                id=row[0],
                user_id=row[1],
                thread_id=row[2],
                user_message=row[3],
                assistant_response=row[4],
                created_at=_from_db(row[5]),
            )
            for row in rows
        ]

    # Leads
    async def save_lead(self, lead: Lead) -> None:
        """Save a lead."""
        conn = self._require_conn()

        await conn.execute(
            """
            INSERT INTO leads
            (id, user_id, name, email, phone_number, source, status,
             callback_date, notes, additional_info, created_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
            """,
            (
                lead.id or str(uuid.uuid4()),
                lead.user_id,
                lead.name,
                lead.email,
                lead.phone_number,
                lead.source,
                lead.status.value,
                _to_db(lead.callback_date),
                lead.notes,
                json.dumps(lead.additional_info),
                _to_db(lead.created_at),
            ),
        )
        await conn.commit()

    async def get_leads(self, user_id: str) -> list[Lead]:
        """Get a user's leads (newest first)."""
        conn = self._require_conn()

        cursor = await conn.execute(
            """
            SELECT id, user_id, name, email, phone_number, source, status,
                   callback_date, notes, additional_info, created_at
            FROM leads
            WHERE user_id = ?
            ORDER BY created_at DESC
            """,
            (user_id,),
        )
        rows = await cursor.fetchall()

        return [self._row_to_lead(row) for row in rows]

    async def update_lead_status(
        self,
        lead_id: str,
        status: LeadStatus,
        callback_date: datetime | None = None,
        notes: str | None = None,
    ) -> Lead | None:
        """Change a lead's status; callback date and notes are kept unless given."""
        conn = self._require_conn()

        await conn.execute(
            """
            UPDATE leads
            SET status = ?,
                callback_date = COALESCE(?, callback_date),
                notes = COALESCE(?, notes)
            WHERE id = ?
            """,
            (status.value, _to_db(callback_date), notes, lead_id),
        )
        await conn.commit()

        cursor = await conn.execute(
            """
            SELECT id, user_id, name, email, phone_number, source, status,
                   callback_date, notes, additional_info, created_at
            FROM leads
            WHERE id = ?
            """,
            (lead_id,),
        )
        row = await cursor.fetchone()
        return self._row_to_lead(row) if row else None

    @staticmethod
    def _row_to_lead(row) -> Lead:
        return Lead(
            id=row[0],
            user_id=row[1],
            name=row[2],
            email=row[3],
            phone_number=row[4],
            source=row[5],
            status=LeadStatus(row[6]),
            callback_date=_from_db(row[7]),
            notes=row[8],
            additional_info=json.loads(row[9]),
            created_at=_from_db(row[10]),
        )

    # TraceEvents
    async def save_trace_event(self, event: TraceEvent) -> None:
        """Save a trace event."""
        conn = self._require_conn()

        await conn.execute(
            """
            INSERT INTO trace_events (id, event_type, actor, data, timestamp)
            VALUES (?, ?, ?, ?, ?)
            """,
            (
                event.id or str(uuid.uuid4()),
                event.event_type,
                event.actor,
                json.dumps(event.data),
                _to_db(event.timestamp),
            ),
        )
        await conn.commit()

    async def get_trace_events(
        self,
        after: datetime | None = None,
        event_types: list[str] | None = None,
        actor: str | None = None,
        limit: int = 100,
    ) -> list[TraceEvent]:
        """Get trace events with optional filters."""
        conn = self._require_conn()

        conditions = []
        params: list = []

        if after:
            if after.tzinfo is None:
                after = after.replace(tzinfo=timezone.utc)
            conditions.append("timestamp > ?")
            params.append(_to_db(after))
        if event_types:
            placeholders = ",".join("?" * len(event_types))
            conditions.append(f"event_type IN ({placeholders})")
            params.extend(event_types)
        if actor:
            conditions.append("actor = ?")
            params.append(actor)

        where_clause = f"WHERE {' AND '.join(conditions)}" if conditions else ""

        query = f"""
            SELECT id, event_type, actor, data, timestamp
            FROM trace_events
            {where_clause}
            ORDER BY timestamp DESC
            LIMIT ?
        """
        params.append(limit)

        cursor = await conn.execute(query, params)
        rows = await cursor.fetchall()

        return [
            TraceEvent(
                id=row[0],
                event_type=row[1],
                actor=row[2],
                data=json.loads(row[3]),
                timestamp=_from_db(row[4]),
            )
            for row in rows
        ]

    # Lifecycle
    async def clear(self) -> None:
        """Clear all data."""
        conn = self._require_conn()

        for table in ["interactions", "leads", "trace_events", "users"]:
            await conn.execute(f"DELETE FROM {table}")

        await conn.commit()
