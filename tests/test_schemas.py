"""Validator tests for the creation payload."""

import pytest
from pydantic import ValidationError

from shortener.schemas import URLCreate


def test_url_only() -> None:
    payload = URLCreate(url="https://example.com")
    assert payload.url == "https://example.com"
    assert payload.slug is None


def test_fields_are_trimmed() -> None:
    payload = URLCreate(url="\thttps://example.com/path?q=1 ", slug="  Mixed-Case_1 ")
    assert payload.url == "https://example.com/path?q=1"
    # case is kept here; lowercasing belongs to slug resolution
    assert payload.slug == "Mixed-Case_1"


@pytest.mark.parametrize("url", ["not-a-url", "example.com", "https://", "", "http//example.com"])
def test_rejects_non_absolute_urls(url: str) -> None:
    with pytest.raises(ValidationError):
        URLCreate(url=url)


@pytest.mark.parametrize("slug", ["has space", "dot.ted", "semi;colon", "", "   "])
def test_rejects_bad_slugs(slug: str) -> None:
    with pytest.raises(ValidationError):
        URLCreate(url="https://example.com", slug=slug)


def test_rejects_non_string_url() -> None:
    with pytest.raises(ValidationError):
        URLCreate(url=42)
