"""Agenda domain package."""

from .service import AgendaService
from .types import AgendaServiceError, EntryDraft

__all__ = [
    "AgendaService",
    "AgendaServiceError",
    "EntryDraft",
]
