"""Agenda entry CRUD endpoints."""

from __future__ import annotations

from datetime import datetime
from typing import Annotated, List, Optional

from fastapi import APIRouter, Depends, HTTPException, Path, Response, status
from pydantic import AliasChoices, BaseModel, Field

from ...api.dependencies import get_agenda_service
from ...domain.agenda import AgendaService, AgendaServiceError, EntryDraft
from ...domain.entrystore.models import Entry

router = APIRouter(prefix="/api/entries", tags=["entries"])

EntryId = Annotated[str, Path(..., min_length=1)]


class EntryCreateRequest(BaseModel):
    title: Optional[str] = None
    note: Optional[str] = None
    date: Optional[datetime] = None
    user_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("user_id", "userId"),
        description="Free-text user tag; blank falls back to the configured default.",
    )


class EntryUpdateRequest(BaseModel):
    title: Optional[str] = None
    note: Optional[str] = None


class EntryResponse(BaseModel):
    id: str
    title: str
    note: Optional[str] = None
    date: Optional[datetime] = None
    user_id: str
    created_at: datetime
    done: bool = False


def _to_response(entry: Entry) -> EntryResponse:
    return EntryResponse(**entry.to_dict())


def _handle_service_error(exc: AgendaServiceError) -> HTTPException:
    return HTTPException(
        status_code=int(exc.status_code),
        detail={
            "error_code": exc.error_code,
            "message": exc.message,
            "details": exc.details,
        },
    )


@router.get(
    "",
    response_model=List[EntryResponse],
    summary="List entries, newest first",
)
def list_entries(
    service: AgendaService = Depends(get_agenda_service),
) -> List[EntryResponse]:
    return [_to_response(entry) for entry in service.list_entries()]


@router.post(
    "",
    response_model=EntryResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create entry",
)
def create_entry(
    payload: EntryCreateRequest,
    service: AgendaService = Depends(get_agenda_service),
) -> EntryResponse:
    draft = EntryDraft(
        title=payload.title,
        note=payload.note,
        date=payload.date,
        user_id=payload.user_id,
    )
    try:
        entry = service.create_entry(draft)
    except AgendaServiceError as exc:
        raise _handle_service_error(exc) from exc
    return _to_response(entry)


@router.put(
    "/{entry_id}",
    response_model=EntryResponse,
    summary="Update entry title and note",
)
def update_entry(
    entry_id: EntryId,
    payload: EntryUpdateRequest,
    service: AgendaService = Depends(get_agenda_service),
) -> EntryResponse:
    try:
        entry = service.update_entry(entry_id, title=payload.title, note=payload.note)
    except AgendaServiceError as exc:
        raise _handle_service_error(exc) from exc
    return _to_response(entry)


@router.delete(
    "/{entry_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete entry",
)
def delete_entry(
    entry_id: EntryId,
    service: AgendaService = Depends(get_agenda_service),
) -> Response:
    try:
        service.delete_entry(entry_id)
    except AgendaServiceError as exc:
        raise _handle_service_error(exc) from exc
    return Response(status_code=status.HTTP_204_NO_CONTENT)
