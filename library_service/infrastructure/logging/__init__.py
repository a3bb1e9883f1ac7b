"""Centralized logging for the lending service.

Every module obtains its logger through ``get_logger``; the first call
configures the root logger from the application settings (handlers,
formatters and levels depend on the environment).

Usage:
    ```python
    from library_service.infrastructure.logging import get_logger

    logger = get_logger(__name__)
    logger.info("Book assigned", extra={"book_id": 1, "person_id": 7})
    ```
"""

from .config import (
    configure_testing_logging,
    generate_correlation_id,
    get_correlation_id,
    reset_correlation_id,
    set_correlation_id,
    setup_logging_configuration,
)
from .factory import configure_logging, get_logger

__all__ = [
    "configure_logging",
    "configure_testing_logging",
    "generate_correlation_id",
    "get_correlation_id",
    "get_logger",
    "reset_correlation_id",
    "set_correlation_id",
    "setup_logging_configuration",
]
