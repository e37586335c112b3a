"""EntryStore data models."""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, Optional
from uuid import uuid4

__all__ = [
    "Entry",
    "utcnow",
]


def utcnow() -> datetime:
    """Return timezone-aware UTC timestamp."""

    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class Entry:
    """A stored agenda entry.

    ``done`` is part of the persisted shape but no operation sets or reads it.
    """

    id: str
    title: str
    user_id: str
    created_at: datetime
    note: Optional[str] = None
    date: Optional[datetime] = None
    done: bool = False

    @classmethod
    def new(
        cls,
        *,
        title: str,
        user_id: str,
        note: Optional[str] = None,
        date: Optional[datetime] = None,
        entry_id: Optional[str] = None,
        timestamp: Optional[datetime] = None,
    ) -> "Entry":
        """Factory that assigns the identifier and creation timestamp."""

        return cls(
            id=entry_id or str(uuid4()),
            title=title,
            user_id=user_id,
            created_at=timestamp or utcnow(),
            note=note,
            date=date,
        )

    def with_content(self, *, title: str, note: Optional[str]) -> "Entry":
        """Return a copy with a new title and note; everything else is kept."""

        return replace(self, title=title, note=note)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "note": self.note,
            "date": self.date,
            "user_id": self.user_id,
            "created_at": self.created_at,
            "done": self.done,
        }
