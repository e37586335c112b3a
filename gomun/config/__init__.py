"""Config package exporting loader helpers."""

from .loader import DEFAULT_USER_ID, Settings, load_settings

__all__ = ["Settings", "load_settings", "DEFAULT_USER_ID"]
