"""
Transient storage failure handling.

Read paths retry OperationalError/InterfaceError a few times before giving
up with StorageUnavailable. Calls made inside a transaction are not retried,
since the transaction is already broken by the failure. Writes are never
retried; their errors are only translated.
"""

import functools
import logging
import time

from django.conf import settings
from django.db import InterfaceError, OperationalError, connection

from stores.errors import StorageUnavailable

logger = logging.getLogger(__name__)

TRANSIENT_ERRORS = (OperationalError, InterfaceError)
RETRY_BACKOFF_SECONDS = 0.1


def retry_transient(func):
    """Retry ``func`` on transient database errors, then raise StorageUnavailable."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        retries = 0 if connection.in_atomic_block else settings.STORE_STORAGE_RETRIES
        for attempt in range(retries + 1):
            try:
                return func(*args, **kwargs)
            except TRANSIENT_ERRORS as exc:
                if attempt < retries:
                    logger.warning(
                        f"{func.__name__} hit a transient storage error "
                        f"(attempt {attempt + 1}/{retries + 1}): {exc}"
                    )
                    connection.close_if_unusable_or_obsolete()
                    time.sleep(RETRY_BACKOFF_SECONDS * (attempt + 1))
                    continue
                logger.error(f"{func.__name__} failed after {attempt + 1} attempt(s): {exc}")
                raise StorageUnavailable("The store database is unavailable, please try again") from exc

    return wrapper


def translate_transient(func):
    """Turn transient database errors from a write into StorageUnavailable without retrying."""

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except TRANSIENT_ERRORS as exc:
            logger.error(f"{func.__name__} failed on a storage error: {exc}")
            raise StorageUnavailable("The store database is unavailable, please try again") from exc

    return wrapper
