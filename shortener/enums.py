"""Shared enums for the slug shortener.

Using enums instead of string literals provides type safety and prevents typos
in environment checks and metric labels.
"""

from enum import StrEnum

__all__ = ["AppEnv", "RequestStatus"]


class AppEnv(StrEnum):
    """Runtime environment names."""

    DEVELOPMENT = "development"
    TEST = "test"
    PRODUCTION = "production"


class RequestStatus(StrEnum):
    """Outcome labels for request metrics."""

    SUCCESS = "success"
    CONFLICT = "conflict"
    NOT_FOUND = "not_found"
    ERROR = "error"
