"""Dependency injection for the slug shortener.

A ``ServiceContext`` is built once at startup and stored on ``app.state``.
Every request gets a lightweight ``RequestContext`` on top of it, and handlers
receive both through FastAPI dependencies rather than module-level globals.
"""

import logging
import time
import uuid
from dataclasses import dataclass, field
from typing import Optional

from fastapi import Depends, Request

from shortener.config import Settings
from shortener.database import MappingStore, connect_store
from shortener.url_service import URLShorteningService

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logger(settings: Settings) -> logging.Logger:
    """Configure the ``shortener`` logger once and return it."""
    logger = logging.getLogger("shortener")
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)
    logger.setLevel(settings.LOG_LEVEL.upper())
    return logger


# ============================================================================
# SERVICE CONTEXT
# ============================================================================


@dataclass
class ServiceContext:
    """Shared resources for the lifetime of the application.

    Attributes:
        settings: Loaded configuration
        store: Mapping store adapter
        logger: Configured service logger
    """

    settings: Settings
    store: MappingStore
    logger: logging.Logger

    @classmethod
    def from_settings(cls, settings: Settings) -> "ServiceContext":
        logger = setup_logger(settings)
        return cls(settings=settings, store=connect_store(settings), logger=logger)

    async def startup(self) -> None:
        await self.store.ensure_indexes()

    async def cleanup(self) -> None:
        await self.store.close()


# ============================================================================
# LIGHTWEIGHT REQUEST CONTEXT
# ============================================================================


@dataclass
class RequestContext:
    """Per-request view of the service context with tracking details.

    Attributes:
        service: Shared service context
        request_id: Unique identifier for this request
        user_agent: Client user agent string
        client_ip: Client IP address
        start_time: Request start timestamp
    """

    service: ServiceContext
    request_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    user_agent: Optional[str] = None
    client_ip: Optional[str] = None
    start_time: float = field(default_factory=lambda: time.time())

    @property
    def store(self) -> MappingStore:
        return self.service.store

    @property
    def settings(self) -> Settings:
        return self.service.settings

    @property
    def logger(self) -> logging.LoggerAdapter:
        """Shared logger with request context attached to every record."""
        return logging.LoggerAdapter(
            self.service.logger,
            {
                "request_id": self.request_id,
                "client_ip": self.client_ip,
                "user_agent": self.user_agent,
            },
        )

    def get_duration(self) -> float:
        """Get request duration in milliseconds."""
        return (time.time() - self.start_time) * 1000


# ============================================================================
# DEPENDENCY FUNCTIONS
# ============================================================================


def get_service_context(request: Request) -> ServiceContext:
    return request.app.state.context


def get_request_context(
    request: Request,
    service: ServiceContext = Depends(get_service_context),
) -> RequestContext:
    client_ip = request.client.host if request.client else None
    request_id = request.headers.get("x-request-id")

    ctx = RequestContext(
        service=service,
        user_agent=request.headers.get("user-agent"),
        client_ip=client_ip,
    )
    if request_id:
        ctx.request_id = request_id
    return ctx


def get_url_service(ctx: RequestContext = Depends(get_request_context)) -> URLShorteningService:
    return URLShorteningService.from_context(ctx)
