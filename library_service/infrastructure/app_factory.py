from collections.abc import AsyncGenerator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager
from typing import Any, Dict, List, Optional

import anyio.to_thread
from fastapi import APIRouter, FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from .config.settings import (
    DatabaseSettings,
    EnvironmentOption,
    EnvironmentSettings,
    Settings,
    get_settings,
)
from .database.session import create_tables
from .logging import (
    generate_correlation_id,
    get_logger,
    reset_correlation_id,
    set_correlation_id,
)

logger = get_logger(__name__)

CORRELATION_ID_HEADER = "X-Correlation-ID"


async def set_threadpool_tokens(number_of_tokens: int = 100) -> None:
    """Configure the number of threadpool tokens for anyio."""
    limiter = anyio.to_thread.current_default_thread_limiter()
    limiter.total_tokens = number_of_tokens


def lifespan_factory(
    settings: Settings,
    create_tables_on_startup: bool = True,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Factory to create a lifespan async context manager for a FastAPI app.

    Args:
        settings: Application settings
        create_tables_on_startup: Whether to create database tables on startup

    Returns:
        An async context manager for FastAPI's lifespan
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        await set_threadpool_tokens()

        if isinstance(settings, DatabaseSettings) and create_tables_on_startup:
            await create_tables()
            logger.info("Database tables created")

        logger.info(f"{app.title} started", extra={"environment": settings.ENVIRONMENT.value})
        yield
        logger.info(f"{app.title} shutting down")

    return lifespan


def add_correlation_id_middleware(application: FastAPI) -> None:
    """Tag every request with a correlation id.

    The id comes from the ``X-Correlation-ID`` or ``X-Request-ID`` request
    header, or is generated. It is visible to log records emitted while the
    request is handled and echoed back in the ``X-Correlation-ID`` header.
    """

    @application.middleware("http")
    async def correlation_id_middleware(request: Request, call_next: Callable[[Request], Any]) -> Response:
        correlation_id = (
            request.headers.get("x-correlation-id") or request.headers.get("x-request-id") or generate_correlation_id()
        )
        token = set_correlation_id(correlation_id)
        try:
            response = await call_next(request)
        finally:
            reset_correlation_id(token)

        response.headers[CORRELATION_ID_HEADER] = correlation_id
        return response


def create_application(
    router: APIRouter,
    settings: Optional[Settings] = None,
    lifespan: Optional[Callable[[FastAPI], AbstractAsyncContextManager[None]]] = None,
    create_tables_on_startup: Optional[bool] = None,
    enable_cors: Optional[bool] = None,
    cors_origins: Optional[List[str]] = None,
    enable_docs_in_production: Optional[bool] = None,
    enable_gzip: Optional[bool] = None,
    title: Optional[str] = None,
    summary: Optional[str] = None,
    description: Optional[str] = None,
    version: Optional[str] = None,
    **kwargs: Any,
) -> FastAPI:
    """Creates and configures a FastAPI application based on the provided settings.

    Every ``Optional`` argument left as None falls back to the matching
    setting (``CREATE_TABLES_ON_STARTUP``, ``CORS_ENABLED``, ``CORS_ORIGINS``,
    ``ENABLE_DOCS_IN_PRODUCTION``, ``GZIP_ENABLED``, ``APP_NAME``,
    ``APP_DESCRIPTION``, ``VERSION``).

    Args:
        router: The APIRouter containing the routes for the application
        settings: Application settings (uses get_settings() if None)
        lifespan: Optional lifespan function. If None, ``lifespan_factory`` is used.
        create_tables_on_startup: Whether to create database tables on startup
        enable_cors: Whether to enable CORS middleware
        cors_origins: List of allowed origins for CORS
        enable_docs_in_production: Whether to serve API docs in production
        enable_gzip: Whether to enable GZip compression middleware
        title: The title of the API
        summary: A short summary of the API
        description: A detailed description of the API (supports Markdown)
        version: The version of the API
        **kwargs: Additional keyword arguments passed to FastAPI constructor

    Returns:
        A configured FastAPI application
    """

    if settings is None:
        settings = get_settings()

    _create_tables_on_startup = (
        create_tables_on_startup if create_tables_on_startup is not None else settings.CREATE_TABLES_ON_STARTUP
    )
    _enable_cors = enable_cors if enable_cors is not None else settings.CORS_ENABLED
    _cors_origins = cors_origins if cors_origins is not None else settings.CORS_ORIGINS_LIST
    _enable_docs_in_production = (
        enable_docs_in_production if enable_docs_in_production is not None else settings.ENABLE_DOCS_IN_PRODUCTION
    )
    _enable_gzip = enable_gzip if enable_gzip is not None else settings.GZIP_ENABLED

    metadata: Dict[str, Any] = {
        "title": title or settings.APP_NAME,
        "description": description or settings.APP_DESCRIPTION,
        "version": version or settings.VERSION,
        "docs_url": settings.DOCS_URL,
        "redoc_url": settings.REDOC_URL,
        "openapi_url": settings.OPENAPI_URL,
    }
    if summary is not None:
        metadata["summary"] = summary

    contact = {}
    if settings.API_CONTACT_NAME:
        contact["name"] = settings.API_CONTACT_NAME
    if settings.API_CONTACT_EMAIL:
        contact["email"] = settings.API_CONTACT_EMAIL
    if contact:
        metadata["contact"] = contact

    kwargs.update(metadata)

    hide_docs = (
        isinstance(settings, EnvironmentSettings)
        and settings.ENVIRONMENT == EnvironmentOption.PRODUCTION
        and not _enable_docs_in_production
    )
    if hide_docs:
        kwargs.update({"docs_url": None, "redoc_url": None, "openapi_url": None})

    if lifespan is None:
        lifespan = lifespan_factory(settings, create_tables_on_startup=_create_tables_on_startup)

    application = FastAPI(lifespan=lifespan, **kwargs)

    application.include_router(router)

    if _enable_cors:
        methods = settings.CORS_ALLOW_METHODS
        headers = settings.CORS_ALLOW_HEADERS
        application.add_middleware(
            CORSMiddleware,
            allow_origins=_cors_origins,
            allow_credentials=settings.CORS_ALLOW_CREDENTIALS,
            allow_methods=methods.split(",") if isinstance(methods, str) else methods,
            allow_headers=headers.split(",") if isinstance(headers, str) else headers,
            expose_headers=[CORRELATION_ID_HEADER],
        )

    if _enable_gzip:
        application.add_middleware(GZipMiddleware, minimum_size=settings.GZIP_MINIMUM_SIZE)

    if settings.LOG_CORRELATION_ID:
        add_correlation_id_middleware(application)

    return application
