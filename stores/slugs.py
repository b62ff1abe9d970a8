"""
Slug generation for store names.

Slugs are lowercase, hyphen separated and unique across stores. When the
base slug is taken, a numeric suffix is appended: ``pizza``, ``pizza-2``,
``pizza-3``. The unique index on ``Store.slug`` is the final arbiter; see
``Store.save`` for the retry loop that handles concurrent saves.
"""

import re
from typing import Iterable, Set

from django.db.models import QuerySet
from django.utils.text import slugify

FALLBACK_SLUG = 'store'
SLUG_MAX_LENGTH = 220

# Leave room for a "-NNN" suffix
BASE_MAX_LENGTH = SLUG_MAX_LENGTH - 10


def slugify_name(name: str) -> str:
    """
    Build the base slug for a store name.

    Underscores are treated as word separators so the result only contains
    lowercase letters, digits and hyphens.

    Examples:
        "Pizza Palace" -> "pizza-palace"
        "Café_Royal!" -> "cafe-royal"
        "!!!" -> "store"
    """
    base = slugify((name or '').replace('_', ' '))
    base = base[:BASE_MAX_LENGTH].strip('-')
    return base or FALLBACK_SLUG


def slug_pattern(base: str) -> str:
    """Regex matching the base slug and any numbered variant of it."""
    return rf'^({re.escape(base)})(-[0-9]+)?$'


def taken_slugs(queryset: QuerySet, base: str) -> Set[str]:
    """Return slugs in ``queryset`` that collide with ``base`` or its variants."""
    matches = queryset.filter(slug__iregex=slug_pattern(base)).values_list('slug', flat=True)
    return {slug.lower() for slug in matches}


def next_available_slug(base: str, taken: Iterable[str]) -> str:
    """
    Pick the slug to try next.

    With no collisions the base slug is used as is. Otherwise the suffix
    starts at ``len(taken) + 1`` and moves up past any suffix already in use.
    """
    taken = set(taken)
    if not taken:
        return base

    n = len(taken) + 1
    candidate = f'{base}-{n}'
    while candidate in taken:
        n += 1
        candidate = f'{base}-{n}'
    return candidate
