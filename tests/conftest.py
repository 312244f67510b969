"""Shared pytest fixtures: settings, an in-memory mapping store and an API client."""

import asyncio
import logging
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from bson import ObjectId
from httpx import ASGITransport, AsyncClient

from shortener.config import Settings
from shortener.dependencies import ServiceContext
from shortener.exceptions import ConflictError, StoreError
from shortener.main import create_app
from shortener.models import UrlMapping

TEST_MONGODB_URI = "mongodb://localhost:27017/url_shortener_test"


class InMemoryMappingStore:
    """Mapping store double that enforces slug uniqueness like the unique index."""

    def __init__(self) -> None:
        self.documents: dict[str, UrlMapping] = {}
        self.lookups: list[str] = []
        self.indexes_ensured = 0
        self.closed = False
        self.fail_lookups = False
        self.fail_inserts = False

    async def ensure_indexes(self) -> None:
        self.indexes_ensured += 1

    async def find_one(self, slug: str) -> UrlMapping | None:
        self.lookups.append(slug)
        await asyncio.sleep(0)
        if self.fail_lookups:
            raise StoreError("Unable to resolve slug.")
        return self.documents.get(slug)

    async def insert(self, mapping: UrlMapping) -> UrlMapping:
        await asyncio.sleep(0)
        if self.fail_inserts:
            raise StoreError("Unable to save URL.")
        if mapping.slug in self.documents:
            raise ConflictError()
        created = mapping.model_copy(update={"id": str(ObjectId())})
        self.documents[created.slug] = created
        return created

    async def close(self) -> None:
        self.closed = True


def make_settings(**overrides) -> Settings:
    values = {"MONGODB_URI": TEST_MONGODB_URI, "APP_ENV": "test"}
    values.update(overrides)
    return Settings(_env_file=None, **values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def store() -> InMemoryMappingStore:
    return InMemoryMappingStore()


@pytest.fixture
def context(settings: Settings, store: InMemoryMappingStore) -> ServiceContext:
    return ServiceContext(settings=settings, store=store, logger=logging.getLogger("shortener.test"))


@pytest_asyncio.fixture(scope="function")
async def client(context: ServiceContext) -> AsyncGenerator[AsyncClient, None]:
    app = create_app(context=context)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
