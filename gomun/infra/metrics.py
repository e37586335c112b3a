"""Agenda mutation counters.

The service counts every accepted and refused mutation under the names below;
the in-memory client keeps them for the life of the process and mirrors each
bump to the debug log.
"""

from __future__ import annotations

from collections import Counter
from typing import Dict, Protocol

from .logging import get_logger

logger = get_logger(__name__)

ENTRIES_CREATED = "entries_created_total"
ENTRIES_UPDATED = "entries_updated_total"
ENTRIES_DELETED = "entries_deleted_total"
ENTRIES_NOT_FOUND = "entries_not_found_total"
ENTRIES_REJECTED = "entries_rejected_total"

AGENDA_COUNTERS = (
    ENTRIES_CREATED,
    ENTRIES_UPDATED,
    ENTRIES_DELETED,
    ENTRIES_NOT_FOUND,
    ENTRIES_REJECTED,
)


class MetricsClient(Protocol):
    def increment(self, metric: str, value: int = 1) -> None: ...


class AgendaCounters:
    """Process-local tally of agenda counters."""

    def __init__(self) -> None:
        self._counts: Counter[str] = Counter()

    def increment(self, metric: str, value: int = 1) -> None:
        self._counts[metric] += value
        logger.debug(
            "agenda_counter",
            extra={"metric": metric, "total": self._counts[metric]},
        )

    def count(self, metric: str) -> int:
        return self._counts[metric]

    def snapshot(self) -> Dict[str, int]:
        """Every agenda counter, zero when never bumped."""

        return {metric: self._counts[metric] for metric in AGENDA_COUNTERS}


_counters: AgendaCounters | None = None


def get_metrics_client() -> AgendaCounters:
    global _counters
    if _counters is None:
        _counters = AgendaCounters()
    return _counters
