"""Infrastructure shared by the lending service: settings, database and logging."""

from .config import get_settings
from .database.session import async_session, create_tables
from .logging import get_logger

__all__ = [
    "async_session",
    "create_tables",
    "get_logger",
    "get_settings",
]
