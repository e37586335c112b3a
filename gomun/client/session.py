"""Client session state: the fetched entry list and page-per-letter map."""

from __future__ import annotations

import datetime
from contextlib import contextmanager
from typing import Dict, Iterator, List, Optional, Tuple, Union

from ..infra.logging import get_logger
from .api import AgendaApiClient
from .errors import EntryBusyError
from .models import AgendaEntry
from .sections import (
    PAGE_SIZE,
    DisplaySection,
    build_sections,
    clamp_page,
    count_by_letter,
    letter_key,
    reconcile_pages,
    total_pages,
)

logger = get_logger(__name__)

PENDING_UPDATE = "updating"
PENDING_DELETE = "deleting"


class AgendaSession:
    """Owns the entry list for one client and derives sections from it.

    Failed requests leave both the list and the page map untouched.
    """

    def __init__(self, client: AgendaApiClient, *, page_size: int = PAGE_SIZE) -> None:
        if page_size < 1:
            raise ValueError("page_size must be a positive integer")
        self._client = client
        self._page_size = page_size
        self._entries: List[AgendaEntry] = []
        self._pages: Dict[str, int] = {}
        self._pending: Dict[str, str] = {}

    @property
    def entries(self) -> Tuple[AgendaEntry, ...]:
        return tuple(self._entries)

    @property
    def pages(self) -> Dict[str, int]:
        return dict(self._pages)

    @property
    def pending(self) -> Dict[str, str]:
        return dict(self._pending)

    def refresh(self) -> Tuple[AgendaEntry, ...]:
        """Fetch the whole list again and clamp stored pages to it."""

        self._replace_entries(self._client.list_entries())
        logger.debug("agenda_refreshed", extra={"entries": len(self._entries)})
        return self.entries

    def sections(self, query: Optional[str] = None) -> List[DisplaySection]:
        return build_sections(
            self._entries, self._pages, query=query, page_size=self._page_size
        )

    def set_page(self, letter: str, page: int) -> int:
        """Move one letter to ``page`` (clamped); other letters keep theirs."""

        count = count_by_letter(self._entries).get(letter, 0)
        safe = clamp_page(page, total_pages(count, self._page_size))
        self._pages[letter] = safe
        return safe

    def create(
        self,
        title: str,
        *,
        note: Optional[str] = None,
        date: Union[str, datetime.date, None] = None,
        user_id: Optional[str] = None,
    ) -> AgendaEntry:
        saved = self._client.create_entry(
            title, note=note, date=date, user_id=user_id
        )
        # The new entry must be visible right away on its letter's first page.
        self._pages[letter_key(saved.title)] = 1
        self._replace_entries([saved, *self._entries])
        return saved

    def update(
        self, entry_id: str, title: str, *, note: Optional[str] = None
    ) -> AgendaEntry:
        with self._mark_pending(entry_id, PENDING_UPDATE):
            saved = self._client.update_entry(entry_id, title, note=note)
        self._replace_entries(
            [saved if entry.id == saved.id else entry for entry in self._entries]
        )
        return saved

    def delete(self, entry_id: str) -> None:
        with self._mark_pending(entry_id, PENDING_DELETE):
            self._client.delete_entry(entry_id)
        self._replace_entries(
            [entry for entry in self._entries if entry.id != entry_id]
        )

    @contextmanager
    def _mark_pending(self, entry_id: str, state: str) -> Iterator[None]:
        current = self._pending.get(entry_id)
        if current is not None:
            raise EntryBusyError(f"Entry is already {current}.")
        self._pending[entry_id] = state
        try:
            yield
        finally:
            self._pending.pop(entry_id, None)

    def _replace_entries(self, entries: List[AgendaEntry]) -> None:
        self._entries = list(entries)
        self._pages = reconcile_pages(
            count_by_letter(self._entries), self._pages, self._page_size
        )
