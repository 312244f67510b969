"""FastAPI application entry point for the slug shortener service.

Application Lifecycle Diagram
=============================
::
    ┌─────────────┐
    │  uvicorn    │
    │  startup    │
    └──────┬──────┘
           ▼
    ┌──────────────┐
    │ create_app() │
    │ middleware,  │
    │ handlers,    │
    │ routes       │
    └──────┬───────┘
           ▼
    ┌─────────────┐
    │ lifespan()  │
    │ startup:    │
    │ build       │
    │ context,    │
    │ ensure slug │
    │ index       │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Serve HTTP  │
    │ requests    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ lifespan()  │
    │ shutdown:   │
    │ close store │
    └─────────────┘

How to Use
===========
**Step 1 — Run**::
    MONGODB_URI=mongodb://localhost:27017/url_shortener slug-shortener

    # or directly with uvicorn
    uvicorn shortener.main:app --port 5000

**Step 2 — Make API calls**::
    curl -X POST http://localhost:5000/api/url \\
         -H "Content-Type: application/json" \\
         -d '{"url": "https://example.com", "slug": "my-link"}'

    curl -i http://localhost:5000/my-link

Key Behaviours
===============
- The unique slug index is created on startup before requests are served.
- A context passed to ``create_app`` is used as-is and never closed by the app.
- Every response carries security headers and is access-logged.
- Request count and latency per route are exposed at ``/api/metrics``.
- Errors are rendered as ``{"message", "stack"}`` JSON by ``shortener.handlers``.
"""

__all__ = ["app", "create_app", "run"]

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from prometheus_fastapi_instrumentator import Instrumentator

from shortener.config import get_settings
from shortener.dependencies import ServiceContext, setup_logger
from shortener.handlers import UnhandledErrorMiddleware, register_exception_handlers
from shortener.middleware import AccessLogMiddleware, SecurityHeadersMiddleware
from shortener.routes import router

logger = logging.getLogger("shortener")


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    context: ServiceContext | None = getattr(app.state, "context", None)
    owns_context = context is None
    if owns_context:
        context = ServiceContext.from_settings(get_settings())
        app.state.context = context

    # Startup
    context.logger.info(f"Starting {context.settings.APP_NAME} ({context.settings.APP_ENV})")
    try:
        await context.startup()
        yield
    finally:
        # Shutdown
        if owns_context:
            await context.cleanup()


def create_app(context: ServiceContext | None = None) -> FastAPI:
    app = FastAPI(
        title="Slug Shortener",
        version="1.0.0",
        description="Short links for long URLs",
        docs_url="/api/docs",
        redoc_url="/api/redoc",
        openapi_url="/api/openapi.json",
        lifespan=lifespan,
    )
    if context is not None:
        app.state.context = context

    register_exception_handlers(app)

    # Last added runs first.
    app.add_middleware(UnhandledErrorMiddleware)
    app.add_middleware(AccessLogMiddleware)
    app.add_middleware(SecurityHeadersMiddleware)

    Instrumentator(
        should_group_status_codes=True,
        should_ignore_untemplated=False,
        should_respect_env_var=False,
    ).instrument(app).expose(app, endpoint="/api/metrics", include_in_schema=False)

    app.include_router(router)
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    setup_logger(settings)
    logger.info(f"Server listening at http://localhost:{settings.PORT}")
    uvicorn.run(app, host=settings.HOST, port=settings.PORT, log_level=settings.LOG_LEVEL.lower())
