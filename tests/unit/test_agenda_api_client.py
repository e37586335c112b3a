"""Tests for the httpx agenda client and its error mapping."""

from __future__ import annotations

import json
from datetime import date

import httpx
import pytest

from gomun.client.api import BLANK_TITLE_MESSAGE, AgendaApiClient
from gomun.client.errors import (
    AgendaTransportError,
    AgendaValidationError,
    EntryNotFoundError,
)

pytestmark = [pytest.mark.client]

BASE_URL = "http://agenda.test"


def _client(handler, *, default_user_id: str = "couple") -> AgendaApiClient:
    transport = httpx.MockTransport(handler)
    return AgendaApiClient(
        default_user_id=default_user_id,
        http_client=httpx.Client(base_url=BASE_URL, transport=transport),
    )


def test_list_entries_accepts_snake_and_camel_case_payloads() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        assert request.method == "GET"
        assert request.url.path == "/api/entries"
        return httpx.Response(
            200,
            json=[
                {"id": "a", "title": "Alps", "user_id": "ana", "created_at": "2026-01-01T00:00:00Z"},
                {"id": "b", "title": "Bruges", "userId": "leo", "createdAt": "2026-01-02T00:00:00Z"},
            ],
        )

    entries = _client(handler).list_entries()

    assert [entry.user_id for entry in entries] == ["ana", "leo"]
    assert entries[1].created_at == "2026-01-02T00:00:00Z"


def test_list_entries_rejects_non_list_payload() -> None:
    client = _client(lambda request: httpx.Response(200, json={"items": []}))

    with pytest.raises(AgendaTransportError):
        client.list_entries()


@pytest.mark.parametrize(
    "body",
    [
        {"text": "<html>maintenance</html>"},
        {"json": [1]},
        {"json": [{"id": "a", "title": "Alps"}, "oops"]},
    ],
)
def test_list_entries_rejects_undecodable_items(body) -> None:
    client = _client(lambda request: httpx.Response(200, **body))

    with pytest.raises(AgendaTransportError) as exc:
        client.list_entries()

    assert exc.value.message == "Unable to load entries (unexpected payload)"


def test_save_rejects_non_json_or_non_object_body() -> None:
    html_client = _client(lambda request: httpx.Response(201, text="<html></html>"))
    list_client = _client(lambda request: httpx.Response(200, json=["Alps"]))

    with pytest.raises(AgendaTransportError) as created:
        html_client.create_entry("Alps")
    with pytest.raises(AgendaTransportError) as updated:
        list_client.update_entry("abc", "Alps")

    assert created.value.message == "Unable to save entry (unexpected payload)"
    assert updated.value.message == "Unable to save entry (unexpected payload)"


def test_create_entry_sends_trimmed_body_with_default_user() -> None:
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["body"] = json.loads(request.content)
        return httpx.Response(
            201, json={"id": "new", "title": "Visit Paris", "user_id": "couple"}
        )

    saved = _client(handler).create_entry(
        "  Visit Paris ", note="   ", date=date(2026, 6, 1)
    )

    assert captured["body"] == {
        "title": "Visit Paris",
        "user_id": "couple",
        "date": "2026-06-01",
    }
    assert saved.id == "new"


def test_create_entry_keeps_explicit_user_tag() -> None:
    captured = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured["body"] = json.loads(request.content)
        return httpx.Response(201, json={"id": "new", "title": "Hike", "user_id": "ana"})

    _client(handler).create_entry("Hike", note=" with snacks ", user_id=" ana ")

    assert captured["body"] == {"title": "Hike", "note": "with snacks", "user_id": "ana"}


def test_blank_title_is_rejected_before_any_request() -> None:
    calls = []

    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        return httpx.Response(500)

    client = _client(handler)
    with pytest.raises(AgendaValidationError) as exc:
        client.create_entry("   ")
    with pytest.raises(AgendaValidationError):
        client.update_entry("abc", "")

    assert exc.value.message == BLANK_TITLE_MESSAGE
    assert calls == []


@pytest.mark.parametrize(
    ("status_code", "error_type"),
    [
        (400, AgendaValidationError),
        (422, AgendaValidationError),
        (404, EntryNotFoundError),
        (500, AgendaTransportError),
        (503, AgendaTransportError),
    ],
)
def test_status_codes_map_to_error_types(status_code, error_type) -> None:
    client = _client(
        lambda request: httpx.Response(
            status_code,
            json={"detail": {"error_code": "X", "message": "Server said no."}},
        )
    )

    with pytest.raises(error_type) as exc:
        client.update_entry("abc", "Title")

    assert exc.value.status_code == status_code


def test_error_message_comes_from_detail_or_error_key() -> None:
    detail_client = _client(
        lambda request: httpx.Response(
            404, json={"detail": {"message": "Entry not found."}}
        )
    )
    error_client = _client(
        lambda request: httpx.Response(400, json={"error": "Title is required"})
    )
    plain_client = _client(lambda request: httpx.Response(404, text="nope"))

    with pytest.raises(EntryNotFoundError) as detail_exc:
        detail_client.delete_entry("abc")
    with pytest.raises(AgendaValidationError) as error_exc:
        error_client.create_entry("Title")
    with pytest.raises(EntryNotFoundError) as plain_exc:
        plain_client.delete_entry("abc")

    assert detail_exc.value.message == "Entry not found."
    assert error_exc.value.message == "Title is required"
    assert plain_exc.value.message == "Unable to delete entry (404)"


def test_network_failure_becomes_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(AgendaTransportError) as exc:
        _client(handler).list_entries()

    assert exc.value.status_code is None
    assert "Unable to load entries" in exc.value.message


def test_delete_targets_entry_path() -> None:
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append((request.method, request.url.path))
        return httpx.Response(204)

    _client(handler).delete_entry("abc-123")

    assert seen == [("DELETE", "/api/entries/abc-123")]
