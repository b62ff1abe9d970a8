"""
Ownership checks for store edits.

Handlers that modify a store call ``confirm_owner`` explicitly before
rendering or saving anything.
"""

from django.core.exceptions import PermissionDenied

NOT_OWNER_MESSAGE = 'You must own a store in order to edit it!'


def can_edit_store(store, user) -> bool:
    """Authors may edit their own stores; staff need the change_store permission."""
    if user is None or not user.is_authenticated:
        return False
    if store.author_id == user.pk:
        return True
    return user.has_perm('stores.change_store')


def confirm_owner(store, user):
    """Raise PermissionDenied unless ``user`` may edit ``store``."""
    if not can_edit_store(store, user):
        raise PermissionDenied(NOT_OWNER_MESSAGE)
