"""EntryStore gateway implementations."""

from __future__ import annotations

import threading
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Protocol

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    Index,
    MetaData,
    String,
    Table,
    Text,
    delete,
    false,
    func,
    insert,
    select,
    update,
)
from sqlalchemy.engine import Engine

from ...config import DEFAULT_USER_ID
from ...infra.db import get_engine
from ...infra.logging import get_logger
from .models import Entry

__all__ = [
    "EntryStoreGateway",
    "InMemoryEntryStoreGateway",
    "PostgresEntryStoreGateway",
    "build_entries_table",
    "build_entry_store_gateway",
]

logger = get_logger(__name__)


class EntryStoreGateway(Protocol):  # pragma: no cover
    """Persistence operations the agenda service relies on.

    Lookups by an unknown identifier raise ``KeyError``.
    """

    def create_entry(
        self,
        *,
        title: str,
        user_id: str,
        note: Optional[str] = None,
        date: Optional[datetime] = None,
    ) -> Entry: ...

    def list_entries(self) -> List[Entry]: ...

    def update_entry(
        self, entry_id: str, *, title: str, note: Optional[str]
    ) -> Entry: ...

    def delete_entry(self, entry_id: str) -> None: ...


class InMemoryEntryStoreGateway(EntryStoreGateway):
    """Simple in-memory EntryStore used for local development and tests."""

    def __init__(self) -> None:
        self._entries: Dict[str, Entry] = {}
        self._lock = threading.Lock()

    def create_entry(
        self,
        *,
        title: str,
        user_id: str,
        note: Optional[str] = None,
        date: Optional[datetime] = None,
    ) -> Entry:
        record = Entry.new(title=title, user_id=user_id, note=note, date=date)
        with self._lock:
            self._entries[record.id] = record
        return record

    def list_entries(self) -> List[Entry]:
        with self._lock:
            records = list(reversed(self._entries.values()))
        # Same-timestamp entries stay newest-insert first.
        return sorted(records, key=lambda entry: entry.created_at, reverse=True)

    def update_entry(
        self, entry_id: str, *, title: str, note: Optional[str]
    ) -> Entry:
        with self._lock:
            record = self._entries.get(entry_id)
            if record is None:
                raise KeyError(f"Entry {entry_id} not found")
            updated = record.with_content(title=title, note=note)
            self._entries[entry_id] = updated
        return updated

    def delete_entry(self, entry_id: str) -> None:
        with self._lock:
            if self._entries.pop(entry_id, None) is None:
                raise KeyError(f"Entry {entry_id} not found")


def build_entries_table(metadata: MetaData) -> Table:
    """Declare the ``entries`` table as created by the initial migration."""

    return Table(
        "entries",
        metadata,
        Column("id", String(length=36), primary_key=True),
        Column(
            "user_id",
            String(length=128),
            nullable=False,
            server_default=DEFAULT_USER_ID,
        ),
        Column("title", Text(), nullable=False),
        Column("note", Text(), nullable=True),
        Column("date", DateTime(timezone=True), nullable=True),
        Column("done", Boolean(), nullable=False, server_default=false()),
        Column(
            "created_at",
            DateTime(timezone=True),
            nullable=False,
            server_default=func.now(),
        ),
        Index("ix_entries_created_at", "created_at"),
    )


class PostgresEntryStoreGateway(EntryStoreGateway):
    """SQLAlchemy-backed adapter that persists entries to PostgreSQL."""

    def __init__(
        self,
        engine: Optional[Engine] = None,
        *,
        table: Optional[Table] = None,
    ) -> None:
        self._engine = engine or get_engine()
        if table is not None:
            self._entries = table
            self._metadata = table.metadata
        else:
            self._metadata = MetaData()
            self._entries = Table("entries", self._metadata, autoload_with=self._engine)

    def create_entry(
        self,
        *,
        title: str,
        user_id: str,
        note: Optional[str] = None,
        date: Optional[datetime] = None,
    ) -> Entry:
        record = Entry.new(title=title, user_id=user_id, note=note, date=date)
        stmt = insert(self._entries).values(**record.to_dict())
        with self._engine.begin() as conn:
            conn.execute(stmt)
        return record

    def list_entries(self) -> List[Entry]:
        c = self._entries.c
        stmt = select(self._entries).order_by(c.created_at.desc(), c.id.desc())
        with self._engine.begin() as conn:
            rows = conn.execute(stmt).mappings().all()
        return [_row_to_entry(row) for row in rows]

    def update_entry(
        self, entry_id: str, *, title: str, note: Optional[str]
    ) -> Entry:
        stmt = (
            update(self._entries)
            .where(self._entries.c.id == entry_id)
            .values(title=title, note=note)
            .returning(self._entries)
        )
        with self._engine.begin() as conn:
            row = conn.execute(stmt).mappings().first()
        if row is None:
            raise KeyError(f"Entry {entry_id} not found")
        return _row_to_entry(row)

    def delete_entry(self, entry_id: str) -> None:
        stmt = delete(self._entries).where(self._entries.c.id == entry_id)
        with self._engine.begin() as conn:
            result = conn.execute(stmt)
        if result.rowcount == 0:
            raise KeyError(f"Entry {entry_id} not found")


def build_entry_store_gateway(
    *,
    prefer_postgres: bool = True,
    fallback_to_memory: bool = False,
) -> EntryStoreGateway:
    """Factory that returns the desired EntryStore gateway implementation."""

    if prefer_postgres:
        try:
            return PostgresEntryStoreGateway()
        except Exception:
            if not fallback_to_memory:
                raise
            logger.warning(
                "postgres_entry_store_unavailable_falling_back",
                exc_info=True,
            )
    return InMemoryEntryStoreGateway()


def _row_to_entry(row: Mapping[str, Any]) -> Entry:
    return Entry(
        id=row["id"],
        title=row["title"],
        user_id=row["user_id"],
        created_at=_ensure_aware(row["created_at"]),
        note=row.get("note"),
        date=_ensure_aware(row.get("date")),
        done=bool(row.get("done")),
    )


def _ensure_aware(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes even for timezone=True columns.
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
