"""Render a generic failure page when storage is unavailable."""

import logging

from django.shortcuts import render

from stores.errors import StoreError

logger = logging.getLogger(__name__)


class StorageUnavailableMiddleware:
    """Translate StoreError subclasses that escape a view into an error page."""

    def __init__(self, get_response):
        self.get_response = get_response

    def __call__(self, request):
        return self.get_response(request)

    def process_exception(self, request, exception):
        # StoreNotFound is an Http404; let Django's 404 handling take it
        if not isinstance(exception, StoreError) or exception.status_code == 404:
            return None
        logger.exception(f"{exception.code.value} while handling {request.method} {request.path}")
        return render(
            request,
            'stores/unavailable.html',
            {'title': 'Temporarily unavailable', 'message': str(exception)},
            status=exception.status_code,
        )
