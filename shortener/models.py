"""Persisted document model for the slug shortener.

Data Model Layout
=================
::
    urls collection
    ├─ _id  (ObjectId, assigned by MongoDB on insert)
    ├─ url  (str, absolute URL validated at creation time)
    └─ slug (str, lowercase, UNIQUE INDEX)

How to Use
===========
**Step 1 — Build a mapping before insert**::
    mapping = UrlMapping(url="https://example.com", slug="my-link")

**Step 2 — Convert to a document**::
    await collection.insert_one(mapping.to_document())

**Step 3 — Load from a document**::
    doc = await collection.find_one({"slug": "my-link"})
    mapping = UrlMapping.from_document(doc)

Key Behaviours
===============
- ``id`` is None until the store assigns one.
- ``to_document`` never writes ``_id``; MongoDB generates it.
- ``from_document`` exposes ``_id`` as its string form.

Classes:
    UrlMapping:  A slug to URL association.
"""

from typing import Any

from pydantic import BaseModel

__all__ = ["UrlMapping"]


class UrlMapping(BaseModel):
    url: str
    slug: str
    id: str | None = None

    def to_document(self) -> dict[str, Any]:
        return {"url": self.url, "slug": self.slug}

    @classmethod
    def from_document(cls, document: dict[str, Any]) -> "UrlMapping":
        return cls(
            id=str(document["_id"]) if document.get("_id") is not None else None,
            url=document["url"],
            slug=document["slug"],
        )

    def __repr__(self) -> str:
        return f"<UrlMapping(id={self.id}, slug='{self.slug}')>"
