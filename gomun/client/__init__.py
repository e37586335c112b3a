"""Agenda client: API access, session state and the section engine."""

from .api import AgendaApiClient
from .errors import (
    AgendaClientError,
    AgendaTransportError,
    AgendaValidationError,
    EntryBusyError,
    EntryNotFoundError,
)
from .models import AgendaEntry
from .sections import DisplaySection, build_sections
from .session import AgendaSession

__all__ = [
    "AgendaApiClient",
    "AgendaClientError",
    "AgendaEntry",
    "AgendaSession",
    "AgendaTransportError",
    "AgendaValidationError",
    "DisplaySection",
    "EntryBusyError",
    "EntryNotFoundError",
    "build_sections",
]
