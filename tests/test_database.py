"""Mapping store adapter tests against a mocked pymongo collection."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from bson import ObjectId
from pymongo import ASCENDING
from pymongo.errors import DuplicateKeyError, OperationFailure, ServerSelectionTimeoutError

from shortener.database import MappingStore, connect_store
from shortener.exceptions import ConflictError, StoreError
from shortener.models import UrlMapping


@pytest.fixture
def collection() -> AsyncMock:
    collection = AsyncMock()
    collection.find_one = AsyncMock(return_value=None)
    collection.insert_one = AsyncMock()
    collection.create_index = AsyncMock(return_value="slug_1")
    return collection


@pytest.fixture
def mapping_store(collection: AsyncMock) -> MappingStore:
    return MappingStore(collection)


@pytest.mark.asyncio
async def test_ensure_indexes_creates_unique_slug_index(mapping_store, collection) -> None:
    await mapping_store.ensure_indexes()
    collection.create_index.assert_awaited_once_with([("slug", ASCENDING)], unique=True)


@pytest.mark.asyncio
async def test_ensure_indexes_failure(mapping_store, collection) -> None:
    collection.create_index.side_effect = OperationFailure("index build failed")
    with pytest.raises(StoreError):
        await mapping_store.ensure_indexes()


@pytest.mark.asyncio
async def test_find_one_missing_returns_none(mapping_store, collection) -> None:
    assert await mapping_store.find_one("abc") is None
    collection.find_one.assert_awaited_once_with({"slug": "abc"})


@pytest.mark.asyncio
async def test_find_one_returns_mapping(mapping_store, collection) -> None:
    oid = ObjectId()
    collection.find_one.return_value = {"_id": oid, "url": "https://example.com", "slug": "abc"}
    mapping = await mapping_store.find_one("abc")
    assert mapping == UrlMapping(id=str(oid), url="https://example.com", slug="abc")


@pytest.mark.asyncio
async def test_find_one_driver_error(mapping_store, collection) -> None:
    collection.find_one.side_effect = ServerSelectionTimeoutError("no servers")
    with pytest.raises(StoreError) as exc_info:
        await mapping_store.find_one("abc")
    assert exc_info.value.status_code == 500


@pytest.mark.asyncio
async def test_insert_assigns_id(mapping_store, collection) -> None:
    oid = ObjectId()
    collection.insert_one.return_value = MagicMock(inserted_id=oid)
    created = await mapping_store.insert(UrlMapping(url="https://example.com", slug="abc"))
    assert created.id == str(oid)
    collection.insert_one.assert_awaited_once_with({"url": "https://example.com", "slug": "abc"})


@pytest.mark.asyncio
async def test_insert_duplicate_key_is_conflict(mapping_store, collection) -> None:
    collection.insert_one.side_effect = DuplicateKeyError("E11000 duplicate key error", code=11000)
    with pytest.raises(ConflictError) as exc_info:
        await mapping_store.insert(UrlMapping(url="https://example.com", slug="abc"))
    assert exc_info.value.message == "Slug in use."


@pytest.mark.asyncio
async def test_insert_other_error_is_store_error(mapping_store, collection) -> None:
    collection.insert_one.side_effect = ServerSelectionTimeoutError("no servers")
    with pytest.raises(StoreError):
        await mapping_store.insert(UrlMapping(url="https://example.com", slug="abc"))


@pytest.mark.asyncio
async def test_close_closes_client_once(collection) -> None:
    client = MagicMock()
    client.close = AsyncMock()
    store = MappingStore(collection, client=client)
    await store.close()
    await store.close()
    client.close.assert_awaited_once()


@pytest.mark.asyncio
async def test_connect_store_uses_uri_database(settings) -> None:
    settings = settings.model_copy(update={"MONGODB_URI": "mongodb://localhost:27017/links", "MONGODB_COLLECTION": "short"})
    store = connect_store(settings)
    assert store._collection.name == "short"
    assert store._collection.database.name == "links"
    await store.close()


@pytest.mark.asyncio
async def test_connect_store_falls_back_to_default_database(settings) -> None:
    settings = settings.model_copy(update={"MONGODB_URI": "mongodb://localhost:27017", "MONGODB_DATABASE": "fallback"})
    store = connect_store(settings)
    assert store._collection.database.name == "fallback"
    await store.close()
