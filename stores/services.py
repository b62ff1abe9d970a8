"""
Store operations shared by the HTML views and the JSON API.

Provides:
- create_store(): validate and persist a new store
- update_store(): replace submitted fields, re-validate, save
- get_stores(): paginated listing, reviews joined on request
- get_store() / get_store_by_slug() / get_store_for_edit(): single lookups
- search_stores(): name/description search for the typeahead
- get_tags_list() / get_stores_by_tag() / get_top_stores(): aggregates
"""

import logging
from typing import List, Optional

from django.conf import settings
from django.core.paginator import Page, Paginator
from django.db import transaction
from django.db.models import Case, IntegerField, Q, Value, When

from stores.errors import StoreNotFound
from stores.models import POINT, Store
from stores.permissions import confirm_owner
from stores.storage import retry_transient, translate_transient

logger = logging.getLogger(__name__)

TEXT_FIELDS = ('name', 'description', 'photo')


def _apply_payload(store: Store, data: dict):
    """Copy submitted fields onto ``store``; fields not submitted are left alone."""
    for field in TEXT_FIELDS:
        if field in data:
            value = data[field]
            setattr(store, field, '' if value is None else value)
    if 'location' in data:
        store.location = data['location'] or {}


def _read_queryset(include_reviews: bool):
    queryset = Store.objects.select_related('author').with_tags()
    if include_reviews:
        queryset = queryset.with_reviews()
    return queryset


@translate_transient
def create_store(author, data: dict) -> Store:
    """
    Validate and save a new store owned by ``author``.

    Raises django.core.exceptions.ValidationError with field-level messages
    when required fields are missing.
    """
    store = Store(author=author)
    _apply_payload(store, data)
    store.location_type = POINT
    store.full_clean(exclude=['slug'])

    with transaction.atomic():
        store.save()
        store.set_tags(data.get('tags') or [])

    logger.info(f"Created store {store.pk} '{store.name}' as {store.slug}")
    return store


@translate_transient
def update_store(store_id, data: dict, user=None) -> Store:
    """
    Replace the submitted fields of a store and save it.

    The location type is always forced to "Point". When ``user`` is given,
    ownership is confirmed before anything changes.

    Raises:
        StoreNotFound: no store with ``store_id``
        PermissionDenied: ``user`` does not own the store
        ValidationError: required fields missing after the update
    """
    store = get_store(store_id)
    if user is not None:
        confirm_owner(store, user)

    data = dict(data)
    if data.get('location') is not None:
        data['location'] = {**data['location'], 'type': POINT}

    _apply_payload(store, data)
    store.location_type = POINT
    store.full_clean(exclude=['slug'])

    with transaction.atomic():
        store.save()
        if 'tags' in data:
            store.set_tags(data['tags'] or [])

    logger.info(f"Updated store {store.pk} '{store.name}' ({store.slug})")
    return store


@retry_transient
def get_stores(page=1, per_page: Optional[int] = None, include_reviews: bool = False) -> Page:
    """
    Return one page of stores, newest first.

    Out-of-range pages clamp to the last page; ``per_page`` is clamped to
    1..MAX_STORES_PER_PAGE.
    """
    per_page = min(max(per_page or settings.STORES_PER_PAGE, 1), settings.MAX_STORES_PER_PAGE)
    paginator = Paginator(_read_queryset(include_reviews), per_page)
    result = paginator.get_page(page)
    result.object_list = list(result.object_list)
    return result


@retry_transient
def get_store(store_id, include_reviews: bool = False) -> Store:
    try:
        return _read_queryset(include_reviews).get(pk=store_id)
    except (Store.DoesNotExist, ValueError, TypeError):
        raise StoreNotFound(f"No store with id {store_id}")


@retry_transient
def get_store_by_slug(slug: str, include_reviews: bool = True) -> Store:
    try:
        return _read_queryset(include_reviews).get(slug=slug)
    except Store.DoesNotExist:
        raise StoreNotFound(f"No store with slug '{slug}'")


def get_store_for_edit(store_id, user) -> Store:
    """Look up a store for its edit form and confirm ``user`` owns it."""
    store = get_store(store_id)
    confirm_owner(store, user)
    return store


@retry_transient
def search_stores(query: str, limit: Optional[int] = None) -> List[Store]:
    """
    Find stores whose name or description contains any of the query terms.

    Ranked by:
    1. Name starts with the full query
    2. Name contains the full query
    3. Everything else, then by name
    """
    query = (query or '').strip()
    terms = query.split()
    if not terms:
        return []

    condition = Q()
    for term in terms:
        condition |= Q(name__icontains=term) | Q(description__icontains=term)

    rank = Case(
        When(name__istartswith=query, then=Value(0)),
        When(name__icontains=query, then=Value(1)),
        default=Value(2),
        output_field=IntegerField(),
    )
    limit = limit or settings.SEARCH_RESULTS_LIMIT
    return list(Store.objects.filter(condition).annotate(rank=rank).order_by('rank', 'name')[:limit])


@retry_transient
def get_tags_list() -> List[dict]:
    return Store.objects.get_tags_list()


@retry_transient
def get_stores_by_tag(tag: Optional[str] = None) -> List[Store]:
    """Stores carrying ``tag``, or every tagged store when no tag is given."""
    queryset = Store.objects.with_tags()
    if tag:
        queryset = queryset.filter(tag_entries__label=tag)
    else:
        queryset = queryset.filter(tag_entries__isnull=False)
    return list(queryset.distinct())


@retry_transient
def get_top_stores() -> List[Store]:
    return list(Store.objects.with_tags().get_top_stores())
