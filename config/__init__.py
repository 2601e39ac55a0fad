"""Application configuration utilities."""

from .settings import DEFAULT_DATA_DIR, Settings, configure_logging, get_settings

__all__ = [
    "DEFAULT_DATA_DIR",
    "Settings",
    "configure_logging",
    "get_settings",
]
