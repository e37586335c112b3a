"""Tests for letter grouping, ordering, search and per-letter pagination."""

from __future__ import annotations

from datetime import date, datetime, timezone

import pytest

from gomun.client.sections import (
    CATCH_ALL_KEY,
    build_sections,
    clamp_page,
    count_by_letter,
    filter_entries,
    format_date,
    letter_key,
    reconcile_pages,
    search_haystack,
    sort_letters,
    total_pages,
)
from tests.helpers.agenda import ids, letters, make_entry

pytestmark = [pytest.mark.client]


@pytest.mark.parametrize(
    ("title", "expected"),
    [
        ("Zebra", "Z"),
        ("apple", "A"),
        ("  mango tango", "M"),
        ("éclair", CATCH_ALL_KEY),
        ("Ñandú", CATCH_ALL_KEY),
        ("1984", CATCH_ALL_KEY),
        ("#hashtag", CATCH_ALL_KEY),
        ("", CATCH_ALL_KEY),
        ("   ", CATCH_ALL_KEY),
        (None, CATCH_ALL_KEY),
    ],
)
def test_letter_key_is_total(title, expected) -> None:
    assert letter_key(title) == expected


def test_section_order_puts_catch_all_before_letters_and_is_stable_across_runs() -> None:
    entries = [
        make_entry("banana"),
        make_entry("éclair"),
        make_entry("Zoo"),
        make_entry("apple"),
        make_entry("cherry"),
    ]

    first = build_sections(entries)
    second = build_sections(list(reversed(entries)))

    assert letters(first) == ["#", "A", "B", "C", "Z"]
    assert letters(second) == letters(first)
    assert sort_letters(["b", "A", "#", "Z"]) == ["#", "A", "b", "Z"]


def test_entries_within_section_sort_case_insensitively() -> None:
    entries = [make_entry("berry"), make_entry("Banana"), make_entry("bagel")]

    (section,) = build_sections(entries)

    assert [entry.title for entry in section.items] == ["bagel", "Banana", "berry"]


def test_equal_titles_keep_incoming_relative_order() -> None:
    entries = [
        make_entry("Avocado", entry_id="avocado"),
        make_entry("apple", entry_id="first"),
        make_entry("APPLE", entry_id="second"),
        make_entry("Apple", entry_id="third"),
    ]

    (section,) = build_sections(entries)
    assert ids(section.items) == ["first", "second", "third", "avocado"]

    (reversed_section,) = build_sections(list(reversed(entries)))
    assert ids(reversed_section.items) == ["third", "second", "first", "avocado"]


def test_catch_all_section_orders_punctuation_digits_then_letters_ignoring_accents() -> None:
    entries = [
        make_entry("éclair"),
        make_entry("1up"),
        make_entry("ébène"),
        make_entry("#tag"),
    ]

    (section,) = build_sections(entries)

    assert section.letter == CATCH_ALL_KEY
    assert [entry.title for entry in section.items] == ["#tag", "1up", "ébène", "éclair"]


def test_missing_title_lands_in_catch_all_without_raising() -> None:
    entries = [make_entry(None, entry_id="untitled"), make_entry("Alpha")]

    sections = build_sections(entries, query="")

    assert letters(sections) == ["#", "A"]
    assert ids(sections[0].items) == ["untitled"]
    assert search_haystack(entries[0]).startswith(" ")


def test_pagination_splits_twelve_entries_into_three_pages() -> None:
    entries = [make_entry(f"Apple {index:02d}") for index in range(12)]

    first_page = build_sections(entries, {"A": 1})[0]
    last_page = build_sections(entries, {"A": 3})[0]

    assert first_page.total_pages == 3
    assert len(first_page.visible) == 5
    assert [entry.title for entry in last_page.visible] == ["Apple 10", "Apple 11"]
    assert len(last_page.items) == 12


@pytest.mark.parametrize(("requested", "expected"), [(0, 1), (-3, 1), (2, 2), (4, 3)])
def test_requested_page_is_clamped_into_range(requested, expected) -> None:
    entries = [make_entry(f"Apple {index:02d}") for index in range(12)]

    (section,) = build_sections(entries, {"A": requested})

    assert section.current_page == expected
    assert clamp_page(requested, 3) == expected


def test_total_pages_has_a_floor_of_one() -> None:
    assert total_pages(0) == 1
    assert total_pages(5) == 1
    assert total_pages(6) == 2
    assert total_pages(12, 5) == 3
    with pytest.raises(ValueError):
        total_pages(3, 0)


def test_reconcile_pages_clamps_when_entries_shrink() -> None:
    assert reconcile_pages({"A": 4}, {"A": 3}) == {"A": 1}


def test_reconcile_pages_keeps_independent_letters_and_drops_missing_ones() -> None:
    previous = {"A": 3, "B": 2, "C": 1}

    reconciled = reconcile_pages({"A": 12, "B": 7, "D": 2}, previous)

    assert reconciled == {"A": 3, "B": 2, "D": 1}
    assert previous == {"A": 3, "B": 2, "C": 1}


def test_removing_the_only_entry_of_a_letter_removes_its_section() -> None:
    entries = [make_entry("Mars trip", entry_id="mars"), make_entry("Alps")]

    before = build_sections(entries)
    after = build_sections([entry for entry in entries if entry.id != "mars"])

    assert "M" in letters(before)
    assert letters(after) == ["A"]
    assert count_by_letter(entries) == {"M": 1, "A": 1}


def test_empty_query_matches_everything_like_browse_mode() -> None:
    entries = [make_entry(f"Apple {index:02d}") for index in range(7)] + [
        make_entry("Bruges")
    ]

    browse = build_sections(entries, {"A": 2})
    searched = build_sections(entries, {"A": 2}, query="   ")

    assert searched == browse
    assert filter_entries(entries, "") == entries


def test_query_matches_note_case_insensitively() -> None:
    entries = [
        make_entry("Visit Paris", note="Then the train to London"),
        make_entry("Hike Alps", note="Chamonix"),
    ]

    sections = build_sections(entries, query="  LONDON ")

    assert letters(sections) == ["V"]
    assert [entry.title for entry in sections[0].visible] == ["Visit Paris"]


def test_query_matches_user_tag_and_formatted_date() -> None:
    dated = make_entry(
        "Concert", user_id="ana", date="2026-03-14T12:00:00", entry_id="dated"
    )
    other = make_entry("Picnic", user_id="leo", entry_id="other")
    entries = [dated, other]

    assert ids(filter_entries(entries, "LEO")) == ["other"]
    needle = format_date("2026-03-14T12:00:00").lower()
    assert ids(filter_entries(entries, needle)) == ["dated"]


def test_query_without_matches_yields_no_sections() -> None:
    entries = [make_entry("Apple"), make_entry("Banana")]

    assert build_sections(entries, query="zanzibar") == []


def test_search_mode_shows_every_match_on_one_page() -> None:
    entries = [make_entry(f"Apple {index:02d}", note="orchard") for index in range(12)]

    (section,) = build_sections(entries, {"A": 3}, query="orchard")

    assert section.total_pages == 1
    assert section.current_page == 1
    assert len(section.visible) == 12


@pytest.mark.parametrize(
    "value",
    [None, "", "   ", "not a date", "2026-13-45", 12345],
)
def test_format_date_returns_empty_for_missing_or_invalid(value) -> None:
    assert format_date(value) == ""


@pytest.mark.parametrize(
    "value",
    [
        "2026-06-15",
        "2026-06-15T12:00:00Z",
        "2026-06-15T12:00:00.123456+00:00",
        date(2026, 6, 15),
        datetime(2026, 6, 15, 12, 0, tzinfo=timezone.utc),
    ],
)
def test_format_date_renders_valid_values(value) -> None:
    rendered = format_date(value)

    assert rendered
    assert "2026" in rendered
    assert "Invalid" not in rendered
