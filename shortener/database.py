"""MongoDB connection and mapping store for the slug shortener.

This module wraps a single MongoDB collection behind ``MappingStore``, the
only component that talks to the database. Driver errors are translated into
the service's error kinds here so nothing above this layer imports pymongo.

Flow Diagram — Store Operations
===============================
::
    ┌─────────────┐
    │  lifespan() │
    │  startup    │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ connect_    │
    │ store()     │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ ensure_     │
    │ indexes()   │  unique index on slug
    └──────┬──────┘
           ▼
    ┌─────────────┐      ┌──────────────────┐
    │ find_one()  │      │ insert()          │
    │ None if     │      │ DuplicateKeyError │
    │ missing     │      │ → ConflictError   │
    └──────┬──────┘      └────────┬─────────┘
           └──────────┬───────────┘
                      ▼
             PyMongoError → StoreError

How to Use
===========
**Step 1 — Connect on startup**::
    store = connect_store(settings)
    await store.ensure_indexes()

**Step 2 — Read and write mappings**::
    mapping = await store.find_one("my-link")
    created = await store.insert(UrlMapping(url="https://example.com", slug="abcde"))

**Step 3 — Cleanup on shutdown**::
    await store.close()

Key Behaviours
===============
- The unique index on ``slug`` is the authoritative uniqueness guarantee.
- ``find_one`` returns None for a missing slug and never raises for it.
- Index creation is idempotent and only runs at startup.
- The client connects lazily on the first operation.

Classes:
    MappingStore:  Thin async pass-through to the urls collection.

Functions:
    connect_store():  Builds a MappingStore from settings.
"""

import logging

from pymongo import ASCENDING, AsyncMongoClient
from pymongo.asynchronous.collection import AsyncCollection
from pymongo.errors import DuplicateKeyError, PyMongoError

from shortener.config import Settings
from shortener.exceptions import ConflictError, StoreError
from shortener.models import UrlMapping

__all__ = ["MappingStore", "connect_store"]

logger = logging.getLogger("shortener.database")


class MappingStore:
    """Slug to URL mappings stored in one MongoDB collection."""

    def __init__(self, collection: AsyncCollection, client: AsyncMongoClient | None = None) -> None:
        self._collection = collection
        self._client = client

    async def ensure_indexes(self) -> None:
        try:
            await self._collection.create_index([("slug", ASCENDING)], unique=True)
        except PyMongoError as exc:
            raise StoreError("Unable to create slug index.") from exc
        logger.info("Unique index on slug is in place")

    async def find_one(self, slug: str) -> UrlMapping | None:
        try:
            document = await self._collection.find_one({"slug": slug})
        except PyMongoError as exc:
            logger.error(f"Lookup failed for slug {slug!r}: {exc}")
            raise StoreError("Unable to resolve slug.") from exc
        if document is None:
            return None
        return UrlMapping.from_document(document)

    async def insert(self, mapping: UrlMapping) -> UrlMapping:
        try:
            result = await self._collection.insert_one(mapping.to_document())
        except DuplicateKeyError as exc:
            logger.warning(f"Duplicate slug rejected by unique index: {mapping.slug!r}")
            raise ConflictError() from exc
        except PyMongoError as exc:
            logger.error(f"Insert failed for slug {mapping.slug!r}: {exc}")
            raise StoreError("Unable to save URL.") from exc
        return mapping.model_copy(update={"id": str(result.inserted_id)})

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None


def connect_store(settings: Settings) -> MappingStore:
    client: AsyncMongoClient = AsyncMongoClient(
        settings.MONGODB_URI,
        serverSelectionTimeoutMS=settings.MONGODB_TIMEOUT_MS,
    )
    database = client.get_default_database(default=settings.MONGODB_DATABASE)
    return MappingStore(database[settings.MONGODB_COLLECTION], client=client)
