"""Agenda service: validation and defaulting in front of the EntryStore."""

from __future__ import annotations

from http import HTTPStatus
from typing import List, NoReturn, Optional

from ...infra.logging import get_logger
from ...infra.metrics import (
    ENTRIES_CREATED,
    ENTRIES_DELETED,
    ENTRIES_NOT_FOUND,
    ENTRIES_REJECTED,
    ENTRIES_UPDATED,
    MetricsClient,
    get_metrics_client,
)
from ..entrystore.gateway import EntryStoreGateway, InMemoryEntryStoreGateway
from ..entrystore.models import Entry
from .types import (
    INVALID_REQUEST_CODE,
    NOT_FOUND_CODE,
    AgendaServiceError,
    EntryDraft,
    clean_text,
)

logger = get_logger(__name__)


class AgendaService:
    """Stateless request handling over an EntryStore gateway."""

    def __init__(
        self,
        *,
        default_user_id: str,
        gateway: EntryStoreGateway | None = None,
        metrics: MetricsClient | None = None,
    ) -> None:
        self._default_user_id = default_user_id
        self._gateway = gateway or InMemoryEntryStoreGateway()
        self._metrics = metrics or get_metrics_client()

    @property
    def default_user_id(self) -> str:
        return self._default_user_id

    @property
    def store_backend(self) -> str:
        if isinstance(self._gateway, InMemoryEntryStoreGateway):
            return "memory"
        return "postgres"

    def list_entries(self) -> List[Entry]:
        return self._gateway.list_entries()

    def create_entry(self, draft: EntryDraft) -> Entry:
        title = self._require_title(draft.title)
        entry = self._gateway.create_entry(
            title=title,
            user_id=draft.resolve_user_id(self._default_user_id),
            note=clean_text(draft.note),
            date=draft.date,
        )
        self._metrics.increment(ENTRIES_CREATED)
        logger.info(
            "entry_created",
            extra={"entry_id": entry.id, "user_id": entry.user_id},
        )
        return entry

    def update_entry(
        self, entry_id: str, *, title: Optional[str], note: Optional[str] = None
    ) -> Entry:
        self._require_id(entry_id)
        cleaned_title = self._require_title(title)
        try:
            entry = self._gateway.update_entry(
                entry_id, title=cleaned_title, note=clean_text(note)
            )
        except KeyError:
            self._not_found(entry_id, operation="update")
        self._metrics.increment(ENTRIES_UPDATED)
        logger.info("entry_updated", extra={"entry_id": entry_id})
        return entry

    def delete_entry(self, entry_id: str) -> None:
        self._require_id(entry_id)
        try:
            self._gateway.delete_entry(entry_id)
        except KeyError:
            self._not_found(entry_id, operation="delete")
        self._metrics.increment(ENTRIES_DELETED)
        logger.info("entry_deleted", extra={"entry_id": entry_id})

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _require_title(self, title: Optional[str]) -> str:
        if not isinstance(title, str) or not title.strip():
            self._metrics.increment(ENTRIES_REJECTED)
            raise AgendaServiceError(
                status_code=HTTPStatus.BAD_REQUEST,
                error_code=INVALID_REQUEST_CODE,
                message="Title is required.",
                details={"field": "title"},
            )
        return title.strip()

    def _require_id(self, entry_id: str) -> None:
        if not entry_id or not entry_id.strip():
            raise AgendaServiceError(
                status_code=HTTPStatus.BAD_REQUEST,
                error_code=INVALID_REQUEST_CODE,
                message="Entry id is required.",
                details={"field": "id"},
            )

    def _not_found(self, entry_id: str, *, operation: str) -> NoReturn:
        self._metrics.increment(ENTRIES_NOT_FOUND)
        logger.warning(
            "entry_not_found",
            extra={"entry_id": entry_id, "operation": operation},
        )
        raise AgendaServiceError(
            status_code=HTTPStatus.NOT_FOUND,
            error_code=NOT_FOUND_CODE,
            message="Entry not found.",
            details={"entry_id": entry_id},
        )
