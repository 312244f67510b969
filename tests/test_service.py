"""Unit tests for slug generation utilities."""

from unittest.mock import patch

from shortener.schemas import SLUG_PATTERN
from shortener.service import DEFAULT_SLUG_LENGTH, URL_SAFE_ALPHABET, generate_slug, normalize_slug

LOWERCASE_ALPHABET = set(URL_SAFE_ALPHABET.lower())


def test_generate_slug_default_length() -> None:
    assert DEFAULT_SLUG_LENGTH == 5
    assert len(generate_slug()) == 5


def test_generate_slug_custom_length() -> None:
    assert len(generate_slug(length=12)) == 12


def test_generate_slug_only_lowercase_url_safe() -> None:
    for _ in range(200):
        slug = generate_slug()
        assert set(slug) <= LOWERCASE_ALPHABET
        assert slug == slug.lower()
        assert SLUG_PATTERN.fullmatch(slug)


def test_generate_slug_uses_nanoid() -> None:
    with patch("shortener.service.generate", return_value="AbC-_") as mock_generate:
        assert generate_slug() == "abc-_"
    mock_generate.assert_called_once_with(URL_SAFE_ALPHABET, 5)


def test_generate_slug_varies() -> None:
    slugs = {generate_slug(length=10) for _ in range(500)}
    assert len(slugs) == 500


def test_normalize_slug() -> None:
    assert normalize_slug("My-Link_2") == "my-link_2"
