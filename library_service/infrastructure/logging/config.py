"""Environment-aware logging setup.

- Development/local: colored, detailed console output
- Staging: structured key=value console output
- Production: JSON console output, chatty third-party loggers quieted
- Tests: a null handler, errors only

File logging (rotating) can be switched on in any environment.
"""

import contextvars
import logging
import uuid

from ..config.settings import EnvironmentOption, get_settings
from .handlers import (
    create_console_handler,
    create_file_handler,
    create_null_handler,
)

correlation_id_var: contextvars.ContextVar[str] = contextvars.ContextVar("correlation_id")

CONSOLE_FORMATS = {
    EnvironmentOption.DEVELOPMENT: "detailed",
    EnvironmentOption.LOCAL: "detailed",
    EnvironmentOption.STAGING: "structured",
    EnvironmentOption.PRODUCTION: "json",
}


def setup_logging_configuration() -> None:
    """Set up the root logger based on application settings.

    Called once per process, normally through ``configure_logging``.
    """
    settings = get_settings()
    environment = settings.ENVIRONMENT

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.filters.clear()

    if settings.LOG_CONSOLE_ENABLED:
        root_logger.addHandler(
            create_console_handler(
                format_type=CONSOLE_FORMATS.get(environment, "detailed"),
                level=_console_level(settings),
                use_colors=environment in (EnvironmentOption.DEVELOPMENT, EnvironmentOption.LOCAL),
            )
        )

    if settings.LOG_FILE_ENABLED:
        root_logger.addHandler(
            create_file_handler(
                filepath=settings.LOG_FILE_PATH,
                format_type=settings.LOG_FORMAT,
                level=logging.DEBUG,
                max_bytes=settings.LOG_FILE_MAX_SIZE,
                backup_count=settings.LOG_FILE_BACKUP_COUNT,
            )
        )

    if settings.LOG_CORRELATION_ID:
        for handler in root_logger.handlers:
            handler.addFilter(CorrelationIdFilter())

    root_logger.setLevel(settings.LOG_LEVEL_INT)

    if environment == EnvironmentOption.PRODUCTION:
        _configure_noisy_loggers()


def _console_level(settings) -> int:
    if settings.ENVIRONMENT in (EnvironmentOption.DEVELOPMENT, EnvironmentOption.LOCAL):
        return logging.DEBUG if settings.LOG_DEVELOPMENT_VERBOSE else settings.LOG_LEVEL_INT
    if settings.ENVIRONMENT == EnvironmentOption.PRODUCTION and settings.LOG_PRODUCTION_OPTIMIZE:
        return logging.WARNING
    return settings.LOG_LEVEL_INT


def _configure_noisy_loggers() -> None:
    """Keep driver and server chatter out of production logs."""
    noisy_loggers = {
        "asyncpg": logging.WARNING,
        "sqlalchemy.engine": logging.WARNING,
        "sqlalchemy.dialects": logging.WARNING,
        "sqlalchemy.pool": logging.WARNING,
        "uvicorn.access": logging.WARNING,
    }

    for logger_name, level in noisy_loggers.items():
        logging.getLogger(logger_name).setLevel(level)


def configure_testing_logging() -> None:
    """Configure minimal logging for test runs.

    Replaces whatever handlers are installed with a null handler and only
    lets errors through. Meant to be called from a test fixture.
    """
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(create_null_handler())
    root_logger.setLevel(logging.ERROR)

    for logger_name in ("sqlalchemy.engine", "asyncpg", "aiosqlite"):
        logging.getLogger(logger_name).setLevel(logging.ERROR)


class CorrelationIdFilter(logging.Filter):
    """Stamp each record with the correlation id of the current request.

    Records emitted outside a request get ``no-correlation``.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        record.correlation_id = get_correlation_id() or "no-correlation"
        return True


def set_correlation_id(correlation_id: str) -> contextvars.Token:
    """Set the correlation id for the current context.

    Returns:
        Token that can be passed to ``correlation_id_var.reset``.
    """
    return correlation_id_var.set(correlation_id)


def get_correlation_id() -> str | None:
    """Get the current correlation id, or None outside a request."""
    try:
        return correlation_id_var.get()
    except LookupError:
        return None


def generate_correlation_id() -> str:
    """Generate a new UUID-based correlation id."""
    return str(uuid.uuid4())


def reset_correlation_id(token: contextvars.Token) -> None:
    """Restore the correlation id that was current before ``set_correlation_id``."""
    correlation_id_var.reset(token)
