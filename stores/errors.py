"""
Error types for the store directory.

Codes are machine-readable so the HTML views, the JSON API and the
typeahead client can react to specific failure modes.
"""

from enum import Enum

from django.http import Http404


class StoreErrorCode(str, Enum):
    """Machine-readable error codes for store operations."""

    VALIDATION_ERROR = "validation_error"  # Required field missing or invalid
    NOT_FOUND = "not_found"  # No store with that id/slug
    FORBIDDEN = "forbidden"  # User may not modify this store
    STORAGE_UNAVAILABLE = "storage_unavailable"  # Database unreachable, retry later
    SLUG_UNAVAILABLE = "slug_unavailable"  # Could not claim a unique slug


# HTTP status code mapping for each error
ERROR_STATUS_CODES = {
    StoreErrorCode.VALIDATION_ERROR: 422,
    StoreErrorCode.NOT_FOUND: 404,
    StoreErrorCode.FORBIDDEN: 403,
    StoreErrorCode.STORAGE_UNAVAILABLE: 503,
    StoreErrorCode.SLUG_UNAVAILABLE: 503,
}


def get_status_code(error_code: StoreErrorCode) -> int:
    """Get HTTP status code for an error code."""
    return ERROR_STATUS_CODES.get(error_code, 500)


class StoreError(Exception):
    """Base class for store directory errors."""

    code = StoreErrorCode.STORAGE_UNAVAILABLE

    @property
    def status_code(self) -> int:
        return get_status_code(self.code)


class StoreNotFound(StoreError, Http404):
    """No store matches the given identifier."""

    code = StoreErrorCode.NOT_FOUND


class StorageUnavailable(StoreError):
    """The database could not be reached after retrying."""

    code = StoreErrorCode.STORAGE_UNAVAILABLE


class SlugUnavailable(StoreError):
    """Every slug candidate collided with a concurrent save."""

    code = StoreErrorCode.SLUG_UNAVAILABLE
