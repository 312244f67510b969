"""Pydantic schemas for request/response validation in the slug shortener.

Schema Hierarchy
=================
::
    URLCreate (Input)
    ├─ url: str (trimmed, absolute URL)
    └─ slug: str | None (trimmed, ^[\\w-]+$)

    URLResponse (Output)
    ├─ id: str
    ├─ url: str
    └─ slug: str

    MessageResponse (Output)
    └─ message: str

    ErrorResponse (Output)
    ├─ message: str
    └─ stack: str | None

How to Use
===========
**Step 1 — Input validation**::
    @router.post("/api/url")
    async def create_url(payload: URLCreate):
        # payload is already validated and trimmed
        ...

**Step 2 — Response serialization**::
    return URLResponse(id=mapping.id, url=mapping.url, slug=mapping.slug)

Key Behaviours
===============
- URL validation uses the validators library for RFC compliance.
- Slugs may hold ASCII letters, digits, underscores and hyphens, any case.
- Surrounding whitespace is trimmed from both fields before validation.
- A missing or null slug means "generate one"; an empty slug is rejected.
"""

import re

import validators
from pydantic import BaseModel, field_validator

__all__ = [
    "SLUG_PATTERN",
    "URLCreate",
    "URLResponse",
    "MessageResponse",
    "ErrorResponse",
]

SLUG_PATTERN = re.compile(r"^[\w\-]+$", re.IGNORECASE | re.ASCII)


class URLCreate(BaseModel):
    url: str
    slug: str | None = None

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("URL is required")
        if not validators.url(v):
            raise ValueError("Invalid URL provided")
        return v

    @field_validator("slug")
    @classmethod
    def validate_slug(cls, v: str | None) -> str | None:
        if v is None:
            return v
        v = v.strip()
        if not SLUG_PATTERN.fullmatch(v):
            raise ValueError("Slug may only contain letters, numbers, underscores and hyphens")
        return v


class URLResponse(BaseModel):
    id: str
    url: str
    slug: str


class MessageResponse(BaseModel):
    message: str


class ErrorResponse(BaseModel):
    message: str
    stack: str | None = None
