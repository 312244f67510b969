"""Slug generation and normalisation utilities.

Generated slugs come from nanoid's URL-safe alphabet and are lowercased, so
every slug the service stores matches ``^[a-z0-9_-]+$``.
"""

from nanoid import generate

__all__ = ["URL_SAFE_ALPHABET", "DEFAULT_SLUG_LENGTH", "generate_slug", "normalize_slug"]

URL_SAFE_ALPHABET = "_-0123456789abcdefghijklmnopqrstuvwxyzABCDEFGHIJKLMNOPQRSTUVWXYZ"

DEFAULT_SLUG_LENGTH = 5


def generate_slug(length: int = DEFAULT_SLUG_LENGTH) -> str:
    assert isinstance(length, int) and length > 0, f"length must be a positive integer, got {length!r}"
    return normalize_slug(generate(URL_SAFE_ALPHABET, length))


def normalize_slug(slug: str) -> str:
    return slug.lower()
