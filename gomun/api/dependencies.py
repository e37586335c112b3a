"""Shared API dependencies."""

from __future__ import annotations

import os
from functools import lru_cache

from ..config import Settings, load_settings
from ..domain.agenda import AgendaService
from ..domain.entrystore.gateway import build_entry_store_gateway

__all__ = [
    "get_settings",
    "get_agenda_service",
]

ENTRY_STORE_ENV = "GOMUN_ENTRY_STORE"


@lru_cache()
def get_settings() -> Settings:
    """Return settings loaded once per process."""

    return load_settings()


@lru_cache()
def _agenda_service_singleton() -> AgendaService:
    store_kind = os.getenv(ENTRY_STORE_ENV, "postgres").lower()
    gateway = build_entry_store_gateway(
        prefer_postgres=store_kind != "memory",
        fallback_to_memory=os.getenv("ENTRY_STORE_FALLBACK_TO_MEMORY", "0").lower()
        in {"1", "true", "yes"},
    )
    return AgendaService(
        default_user_id=get_settings().default_user_id,
        gateway=gateway,
    )


def get_agenda_service() -> AgendaService:
    """Return the process-wide agenda service instance."""

    return _agenda_service_singleton()
