"""Slug shortener service layer - core business logic.

Request Flow Diagrams
=====================

Mapping Creation Flow
---------------------
::
    ┌─────────────┐
    │  POST /api  │
    │  /url       │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Validated   │
    │ URLCreate   │
    └──────┬──────┘
    SLUG? │
    ┌─────┴──────────┐
    │ NO              │ YES
    ▼                 ▼
┌──────────┐   ┌─────────────┐
│ nanoid(5)│   │ lowercase + │
│ lowercase│   │ find_one()  │──EXISTS──► ConflictError
└────┬─────┘   └──────┬──────┘
     └───────┬────────┘
             ▼
    ┌─────────────┐
    │ insert()    │──DUPLICATE KEY──► ConflictError
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ UrlMapping  │
    │ with id     │
    └─────────────┘

Slug Resolution Flow
--------------------
::
    ┌─────────────┐
    │ GET /:slug  │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ find_one()  │──STORE FAILURE──► StoreError
    └──────┬──────┘
    FOUND?│
    ┌─────┴─────┐
    │ NO         │ YES
    ▼            ▼
NotFoundError  302 Redirect

Key Behaviours
===============
- Generated slugs are not checked before insert; the unique index rejects the
  rare collision and the caller sees a conflict.
- Caller-supplied slugs are checked first, but the check is not atomic with
  the insert. Two racing requests both reach insert and the loser gets
  ConflictError from the store.
- No retries. A failed store call is reported on the same request.
"""

import time

from prometheus_client import Counter, Histogram

from shortener.enums import RequestStatus
from shortener.exceptions import ConflictError, NotFoundError, ShortenerError
from shortener.models import UrlMapping
from shortener.schemas import URLCreate
from shortener.service import generate_slug, normalize_slug

__all__ = ["URLShorteningService"]


# ============================================================================
# PROMETHEUS METRICS
# ============================================================================

URL_CREATION_REQUESTS_TOTAL = Counter(
    "shortener_creation_requests_total",
    "Total mapping creation requests",
    ["status"],
)
URL_LOOKUP_REQUESTS_TOTAL = Counter(
    "shortener_lookup_requests_total",
    "Total slug lookup requests",
    ["status"],
)
URL_CREATION_DURATION = Histogram(
    "shortener_creation_duration_seconds",
    "Time taken to create mappings",
    buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5],
)


def _status_for(exc: ShortenerError) -> RequestStatus:
    if isinstance(exc, ConflictError):
        return RequestStatus.CONFLICT
    if isinstance(exc, NotFoundError):
        return RequestStatus.NOT_FOUND
    return RequestStatus.ERROR


# ============================================================================
# CORE SERVICE CLASS
# ============================================================================


class URLShorteningService:
    """Creates mappings and resolves slugs against the mapping store.

    Example:
        >>> service = URLShorteningService.from_context(ctx)
        >>> mapping = await service.create_mapping(URLCreate(url="https://example.com"))
        >>> mapping.slug
        'x1_ab'
    """

    def __init__(self, ctx: "RequestContext"):
        self._store = ctx.store
        self._logger = ctx.logger
        self._settings = ctx.settings

    @classmethod
    def from_context(cls, ctx: "RequestContext") -> "URLShorteningService":
        return cls(ctx)

    async def resolve_slug(self, payload: URLCreate) -> str:
        """Pick the slug for a new mapping.

        Args:
            payload: Validated creation request

        Returns:
            str: Lowercase slug not seen in the store at check time

        Raises:
            ConflictError: If the caller-supplied slug is already taken
            StoreError: If the existence check fails
        """
        if payload.slug is None:
            return generate_slug(self._settings.SLUG_LENGTH)

        slug = normalize_slug(payload.slug)
        existing = await self._store.find_one(slug)
        if existing is not None:
            raise ConflictError()
        return slug

    async def create_mapping(self, payload: URLCreate) -> UrlMapping:
        """Resolve the slug and persist a new mapping.

        Raises:
            ConflictError: Slug taken, by pre-check or by the unique index
            StoreError: Any other persistence failure
        """
        start_time = time.perf_counter()
        try:
            slug = await self.resolve_slug(payload)
            mapping = await self._store.insert(UrlMapping(url=payload.url, slug=slug))
        except ShortenerError as exc:
            URL_CREATION_REQUESTS_TOTAL.labels(status=_status_for(exc)).inc()
            raise
        finally:
            URL_CREATION_DURATION.observe(time.perf_counter() - start_time)

        URL_CREATION_REQUESTS_TOTAL.labels(status=RequestStatus.SUCCESS).inc()
        self._logger.debug(f"Mapping stored: {mapping.slug} -> {mapping.url}")
        return mapping

    async def lookup(self, slug: str) -> UrlMapping:
        """Find the mapping for ``slug``.

        Raises:
            NotFoundError: No mapping exists for the slug
            StoreError: The lookup itself failed
        """
        slug = normalize_slug(slug)
        try:
            mapping = await self._store.find_one(slug)
        except ShortenerError as exc:
            URL_LOOKUP_REQUESTS_TOTAL.labels(status=_status_for(exc)).inc()
            raise

        if mapping is None:
            URL_LOOKUP_REQUESTS_TOTAL.labels(status=RequestStatus.NOT_FOUND).inc()
            raise NotFoundError(f"Slug not found - {slug}")

        URL_LOOKUP_REQUESTS_TOTAL.labels(status=RequestStatus.SUCCESS).inc()
        return mapping
