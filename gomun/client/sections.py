"""Alphabetical sections over the fetched entry list.

Everything here is a pure function of its inputs: entries are grouped by the
first letter of their title, sections and entries are ordered with a
case- and accent-insensitive collation, each section is paginated on its own,
and an optional free-text query narrows the list first. Malformed titles and
dates never raise; they fall into the catch-all bucket or format as "".
"""

from __future__ import annotations

import math
import re
import unicodedata
from dataclasses import dataclass
from datetime import date, datetime
from typing import Dict, Iterable, List, Mapping, Optional, Sequence, Tuple

from .models import AgendaEntry, DateValue

__all__ = [
    "CATCH_ALL_KEY",
    "PAGE_SIZE",
    "DisplaySection",
    "build_sections",
    "clamp_page",
    "collation_key",
    "count_by_letter",
    "filter_entries",
    "format_date",
    "group_by_letter",
    "letter_key",
    "normalize_query",
    "parse_date",
    "reconcile_pages",
    "search_haystack",
    "sort_by_title",
    "sort_letters",
    "total_pages",
]

CATCH_ALL_KEY = "#"
PAGE_SIZE = 5

_LATIN_LETTER = re.compile(r"^[A-Z]$")

# Collation ranks: spacing and punctuation, then digits, then letters.
_RANK_PUNCTUATION = 0
_RANK_DIGIT = 1
_RANK_LETTER = 2


@dataclass(frozen=True)
class DisplaySection:
    """One rendered letter group."""

    letter: str
    items: Tuple[AgendaEntry, ...]
    visible: Tuple[AgendaEntry, ...]
    total_pages: int
    current_page: int


def letter_key(title: Optional[str]) -> str:
    """Return the A-Z bucket for a title, or the catch-all key."""

    if not isinstance(title, str):
        return CATCH_ALL_KEY
    trimmed = title.strip()
    if not trimmed:
        return CATCH_ALL_KEY
    initial = trimmed[0].upper()
    if _LATIN_LETTER.match(initial):
        return initial
    return CATCH_ALL_KEY


def collation_key(text: Optional[str]) -> Tuple[Tuple[int, str], ...]:
    """Sort key comparing base letters only (case and accents ignored)."""

    decomposed = unicodedata.normalize("NFD", text or "")
    stripped = "".join(
        char for char in decomposed if not unicodedata.combining(char)
    ).casefold()
    return tuple((_collation_rank(char), char) for char in stripped)


def _collation_rank(char: str) -> int:
    category = unicodedata.category(char)
    if category.startswith("N"):
        return _RANK_DIGIT
    if category.startswith("L"):
        return _RANK_LETTER
    return _RANK_PUNCTUATION


def parse_date(value: DateValue) -> Optional[date]:
    """Parse a datetime, date or ISO-8601 string; anything else is ``None``."""

    if isinstance(value, datetime):
        return _to_local(value)
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    candidate = value.strip()
    if not candidate:
        return None
    if candidate.endswith(("Z", "z")):
        candidate = candidate[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return None
    return _to_local(parsed)


def _to_local(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    try:
        return value.astimezone()
    except (OverflowError, ValueError):
        return value


def format_date(value: DateValue) -> str:
    """Render a calendar date as e.g. ``Mar 14, 2026``; invalid input is ``""``."""

    parsed = parse_date(value)
    if parsed is None:
        return ""
    return f"{parsed:%b} {parsed.day}, {parsed.year}"


def normalize_query(query: Optional[str]) -> str:
    return (query or "").strip().lower()


def search_haystack(entry: AgendaEntry) -> str:
    parts = [
        entry.title if isinstance(entry.title, str) else "",
        entry.note or "",
        entry.user_id or "",
        format_date(entry.date),
        format_date(entry.created_at),
    ]
    return " ".join(parts).lower()


def filter_entries(
    entries: Iterable[AgendaEntry], query: Optional[str]
) -> List[AgendaEntry]:
    """Keep entries whose haystack contains the normalized query."""

    needle = normalize_query(query)
    if not needle:
        return list(entries)
    return [entry for entry in entries if needle in search_haystack(entry)]


def group_by_letter(entries: Iterable[AgendaEntry]) -> Dict[str, List[AgendaEntry]]:
    groups: Dict[str, List[AgendaEntry]] = {}
    for entry in entries:
        groups.setdefault(letter_key(entry.title), []).append(entry)
    return groups


def count_by_letter(entries: Iterable[AgendaEntry]) -> Dict[str, int]:
    counts: Dict[str, int] = {}
    for entry in entries:
        key = letter_key(entry.title)
        counts[key] = counts.get(key, 0) + 1
    return counts


def sort_letters(letters: Iterable[str]) -> List[str]:
    return sorted(letters, key=collation_key)


def sort_by_title(entries: Iterable[AgendaEntry]) -> List[AgendaEntry]:
    # sorted() is stable: equal titles keep their incoming order.
    return sorted(entries, key=lambda entry: collation_key(entry.title))


def total_pages(count: int, page_size: int = PAGE_SIZE) -> int:
    if page_size < 1:
        raise ValueError("page_size must be a positive integer")
    return max(1, math.ceil(count / page_size))


def clamp_page(page: int, pages: int) -> int:
    return min(max(page, 1), max(pages, 1))


def reconcile_pages(
    counts: Mapping[str, int],
    previous: Mapping[str, int],
    page_size: int = PAGE_SIZE,
) -> Dict[str, int]:
    """Clamp every stored page into its letter's current range.

    Letters that no longer have entries are dropped; new letters start at 1.
    """

    return {
        key: clamp_page(previous.get(key, 1), total_pages(count, page_size))
        for key, count in counts.items()
    }


def build_sections(
    entries: Sequence[AgendaEntry],
    pages: Optional[Mapping[str, int]] = None,
    *,
    query: Optional[str] = None,
    page_size: int = PAGE_SIZE,
) -> List[DisplaySection]:
    """Group, order, filter and paginate entries into display sections.

    With a non-blank query every match of a section sits on a single page.
    """

    pages = pages or {}
    search_mode = bool(normalize_query(query))
    groups = group_by_letter(filter_entries(entries, query))
    sections: List[DisplaySection] = []
    for letter in sort_letters(groups):
        ordered = tuple(sort_by_title(groups[letter]))
        if search_mode:
            sections.append(
                DisplaySection(
                    letter=letter,
                    items=ordered,
                    visible=ordered,
                    total_pages=1,
                    current_page=1,
                )
            )
            continue
        page_count = total_pages(len(ordered), page_size)
        current = clamp_page(pages.get(letter, 1), page_count)
        start = (current - 1) * page_size
        sections.append(
            DisplaySection(
                letter=letter,
                items=ordered,
                visible=ordered[start : start + page_size],
                total_pages=page_count,
                current_page=current,
            )
        )
    return sections
