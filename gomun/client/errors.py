"""Error taxonomy surfaced to agenda client users."""

from __future__ import annotations

from typing import Optional


class AgendaClientError(Exception):
    """Base error; ``message`` is short and meant for the end user."""

    def __init__(self, message: str, *, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code


class AgendaValidationError(AgendaClientError):
    """The request was rejected because a required field was blank or malformed."""


class EntryNotFoundError(AgendaClientError):
    """The referenced entry identifier does not exist."""


class AgendaTransportError(AgendaClientError):
    """Network failure or a non-success response without a specific meaning."""


class EntryBusyError(AgendaClientError):
    """Another mutation for the same entry is still in flight."""
