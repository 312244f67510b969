"""FastAPI route definitions for the slug shortener.

API Endpoint Overview
=====================
::
    GET  /
        └─ MessageResponse (200)

    POST /api/url
        ├─ URLCreate (request body)
        └─ URLResponse (201) or 400/409/500

    GET  /:slug
        └─ 302 Redirect or 404/500

Request Flow Diagram
====================
::
    ┌─────────────┐
    │  HTTP       │
    │  Request    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Validate &  │
    │ Parse       │
    │ (Pydantic)  │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Inject      │
    │ Context     │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Call Service│
    │ Layer       │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Serialize   │
    │ Response    │
    └─────────────┘

Key Behaviours
===============
- All endpoints are async; the only suspension points are store calls.
- Errors are raised as error kinds and rendered by ``shortener.handlers``.
- Redirects use 302 so browsers do not cache them permanently.
"""

from fastapi import APIRouter, Depends
from fastapi.responses import RedirectResponse

from shortener.dependencies import RequestContext, get_request_context, get_url_service
from shortener.exceptions import ShortenerError
from shortener.schemas import MessageResponse, URLCreate, URLResponse
from shortener.url_service import URLShorteningService

__all__ = ["router"]

ROOT_MESSAGE = "Short URLs at your service. POST {url, slug?} to /api/url."

router = APIRouter()


@router.get("/", response_model=MessageResponse, tags=["meta"])
async def root() -> MessageResponse:
    return MessageResponse(message=ROOT_MESSAGE)


@router.post("/api/url", response_model=URLResponse, status_code=201, tags=["urls"])
async def create_url(
    payload: URLCreate,
    ctx: RequestContext = Depends(get_request_context),
    service: URLShorteningService = Depends(get_url_service),
) -> URLResponse:
    ctx.logger.info(
        f"Mapping requested for {payload.url}",
        extra={"operation": "create_mapping", "target_url": payload.url, "slug": payload.slug},
    )

    try:
        mapping = await service.create_mapping(payload)
    except ShortenerError as exc:
        ctx.logger.warning(
            f"Mapping failed: {exc.message}",
            extra={"operation": "create_mapping", "error": exc.message, "duration_ms": ctx.get_duration()},
        )
        raise

    ctx.logger.info(
        f"Mapping created: {mapping.slug} -> {mapping.url}",
        extra={"operation": "create_mapping", "slug": mapping.slug, "duration_ms": ctx.get_duration()},
    )
    return URLResponse(id=mapping.id, url=mapping.url, slug=mapping.slug)


@router.get("/{slug}", tags=["redirect"])
async def redirect_to_url(
    slug: str,
    ctx: RequestContext = Depends(get_request_context),
    service: URLShorteningService = Depends(get_url_service),
) -> RedirectResponse:
    mapping = await service.lookup(slug)

    ctx.logger.info(
        f"Redirect: {mapping.slug} -> {mapping.url}",
        extra={"operation": "redirect", "slug": mapping.slug, "duration_ms": ctx.get_duration()},
    )
    return RedirectResponse(url=mapping.url, status_code=302)
