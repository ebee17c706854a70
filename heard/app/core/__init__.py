"""Core utilities for the Heard backend."""

from heard.app.core.config import Settings, settings
from heard.app.core.logging import get_logger, setup_logging
from heard.app.core.security import get_client_ip, hash_identity

__all__ = [
    "Settings",
    "settings",
    "get_logger",
    "setup_logging",
    "get_client_ip",
    "hash_identity",
]
