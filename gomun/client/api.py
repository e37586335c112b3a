"""httpx client for the agenda CRUD endpoints."""

from __future__ import annotations

import datetime
from typing import Any, Dict, List, Mapping, Optional, Union

import httpx

from ..config.loader import (
    DEFAULT_API_BASE_URL,
    DEFAULT_CLIENT_TIMEOUT_SECONDS,
    DEFAULT_USER_ID,
)
from ..infra.logging import get_logger
from .errors import (
    AgendaClientError,
    AgendaTransportError,
    AgendaValidationError,
    EntryNotFoundError,
)
from .models import AgendaEntry

logger = get_logger(__name__)

ENTRIES_PATH = "/api/entries"
BLANK_TITLE_MESSAGE = "Every dream needs a name."


class AgendaApiClient:
    """Blocking client for list/create/update/delete; no retries."""

    def __init__(
        self,
        base_url: Optional[str] = None,
        *,
        default_user_id: str = DEFAULT_USER_ID,
        timeout: float = DEFAULT_CLIENT_TIMEOUT_SECONDS,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self._default_user_id = default_user_id.strip() or DEFAULT_USER_ID
        self._owns_client = http_client is None
        self._http = http_client or httpx.Client(
            base_url=base_url or DEFAULT_API_BASE_URL,
            timeout=timeout,
        )

    @property
    def default_user_id(self) -> str:
        return self._default_user_id

    def close(self) -> None:
        if self._owns_client:
            self._http.close()

    def __enter__(self) -> "AgendaApiClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def list_entries(self) -> List[AgendaEntry]:
        response = self._request("GET", ENTRIES_PATH, action="load entries")
        payload = _decode_json(response, action="load entries")
        if not isinstance(payload, list):
            raise _unexpected_payload("load entries")
        return [_entry_from(item, action="load entries") for item in payload]

    def create_entry(
        self,
        title: str,
        *,
        note: Optional[str] = None,
        date: Union[str, datetime.date, None] = None,
        user_id: Optional[str] = None,
    ) -> AgendaEntry:
        body = self._content_body(title, note)
        body["user_id"] = (user_id or "").strip() or self._default_user_id
        if date is not None:
            body["date"] = date if isinstance(date, str) else date.isoformat()
        response = self._request("POST", ENTRIES_PATH, json=body, action="save entry")
        return _entry_from(
            _decode_json(response, action="save entry"), action="save entry"
        )

    def update_entry(
        self, entry_id: str, title: str, *, note: Optional[str] = None
    ) -> AgendaEntry:
        body = self._content_body(title, note)
        response = self._request(
            "PUT", f"{ENTRIES_PATH}/{entry_id}", json=body, action="save entry"
        )
        return _entry_from(
            _decode_json(response, action="save entry"), action="save entry"
        )

    def delete_entry(self, entry_id: str) -> None:
        self._request("DELETE", f"{ENTRIES_PATH}/{entry_id}", action="delete entry")

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    @staticmethod
    def _content_body(title: str, note: Optional[str]) -> Dict[str, Any]:
        trimmed_title = (title or "").strip()
        if not trimmed_title:
            raise AgendaValidationError(BLANK_TITLE_MESSAGE)
        body: Dict[str, Any] = {"title": trimmed_title}
        if note and note.strip():
            body["note"] = note.strip()
        return body

    def _request(
        self,
        method: str,
        path: str,
        *,
        action: str,
        json: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        try:
            response = self._http.request(method, path, json=json)
        except httpx.HTTPError as exc:
            logger.warning(
                "agenda_request_failed",
                extra={"method": method, "path": path, "error": type(exc).__name__},
            )
            raise AgendaTransportError(f"Unable to {action} ({exc})") from exc
        if response.is_success:
            return response
        raise _error_for_response(response, action=action)


def _decode_json(response: httpx.Response, *, action: str) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise _unexpected_payload(action) from exc


def _entry_from(item: Any, *, action: str) -> AgendaEntry:
    if not isinstance(item, Mapping):
        raise _unexpected_payload(action)
    return AgendaEntry.from_payload(item)


def _unexpected_payload(action: str) -> AgendaTransportError:
    logger.warning("agenda_unexpected_payload", extra={"action": action})
    return AgendaTransportError(f"Unable to {action} (unexpected payload)")


def _error_for_response(response: httpx.Response, *, action: str) -> AgendaClientError:
    status_code = response.status_code
    message = _extract_message(response) or f"Unable to {action} ({status_code})"
    logger.info(
        "agenda_request_rejected",
        extra={"status_code": status_code, "path": response.request.url.path},
    )
    if status_code in (400, 422):
        return AgendaValidationError(message, status_code=status_code)
    if status_code == 404:
        return EntryNotFoundError(message, status_code=status_code)
    return AgendaTransportError(
        f"Unable to {action} ({status_code})", status_code=status_code
    )


def _extract_message(response: httpx.Response) -> Optional[str]:
    try:
        payload = response.json()
    except ValueError:
        return None
    if not isinstance(payload, dict):
        return None
    detail = payload.get("detail")
    if isinstance(detail, dict) and isinstance(detail.get("message"), str):
        return detail["message"]
    error = payload.get("error")
    if isinstance(error, str):
        return error
    return None
