"""Agenda domain types."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from http import HTTPStatus
from typing import Any, Dict, Optional

INVALID_REQUEST_CODE = "GOMUN-INVALID-REQUEST"
NOT_FOUND_CODE = "GOMUN-NOT-FOUND"


@dataclass(frozen=True)
class EntryDraft:
    """Inbound create payload before validation and default resolution.

    The user tag resolves as: explicit value, trimmed and non-empty, else the
    configured default.
    """

    title: Optional[str]
    note: Optional[str] = None
    date: Optional[datetime] = None
    user_id: Optional[str] = None

    def resolve_user_id(self, default_user_id: str) -> str:
        if isinstance(self.user_id, str) and self.user_id.strip():
            return self.user_id.strip()
        return default_user_id


class AgendaServiceError(Exception):
    """Domain exception propagated to API handlers."""

    def __init__(
        self,
        *,
        status_code: HTTPStatus,
        error_code: str,
        message: str,
        details: Dict[str, Any] | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.details = details or {}


def clean_text(value: Optional[str]) -> Optional[str]:
    """Trim optional free text; blank collapses to ``None``."""

    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    return trimmed or None
