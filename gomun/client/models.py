"""Client-side entry record as received from the agenda API."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Mapping, Optional, Union

DateValue = Union[str, date, datetime, None]


@dataclass(frozen=True)
class AgendaEntry:
    """One entry of the fetched list.

    Fields are kept as delivered; malformed titles or dates are tolerated and
    handled by the section engine.
    """

    id: str
    title: Optional[str]
    user_id: Optional[str] = None
    note: Optional[str] = None
    date: DateValue = None
    created_at: DateValue = None
    done: bool = False

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "AgendaEntry":
        return cls(
            id=str(payload.get("id", "")),
            title=payload.get("title"),
            user_id=payload.get("user_id", payload.get("userId")),
            note=payload.get("note"),
            date=payload.get("date"),
            created_at=payload.get("created_at", payload.get("createdAt")),
            done=bool(payload.get("done", False)),
        )
