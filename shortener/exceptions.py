"""Error kinds raised by the slug shortener.

Every error carries the HTTP status it is reported with, so the single
translation step in ``shortener.handlers`` never has to guess a status code
from the exception type.

Error Taxonomy
==============
::
    ShortenerError (500)
    ├─ ValidationError (400)  malformed url/slug or request body
    ├─ ConflictError   (409)  slug already taken
    ├─ NotFoundError   (404)  unknown route or slug
    └─ StoreError      (500)  persistence failure (connectivity, timeouts)
"""

__all__ = [
    "ShortenerError",
    "ValidationError",
    "ConflictError",
    "NotFoundError",
    "StoreError",
    "SLUG_IN_USE",
]

SLUG_IN_USE = "Slug in use."


class ShortenerError(Exception):
    """Base class for errors that are reported to the HTTP caller."""

    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(ShortenerError):
    status_code = 400


class ConflictError(ShortenerError):
    status_code = 409

    def __init__(self, message: str = SLUG_IN_USE) -> None:
        super().__init__(message)


class NotFoundError(ShortenerError):
    status_code = 404


class StoreError(ShortenerError):
    """The mapping store failed for a reason other than a duplicate slug."""

    status_code = 500
