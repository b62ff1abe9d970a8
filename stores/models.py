"""
Store listing model.

A store has a unique slug derived from its name, an ordered list of tags
(kept as StoreTag rows so duplicates and ordering survive), and a point
location stored as longitude/latitude columns plus an address.
"""

import logging
from decimal import Decimal, InvalidOperation

from django.conf import settings
from django.db import IntegrityError, models, transaction
from django.db.models import Avg, Count, F, Prefetch
from django.utils import timezone

from stores.errors import SlugUnavailable
from stores.slugs import SLUG_MAX_LENGTH, next_available_slug, slugify_name, taken_slugs

logger = logging.getLogger(__name__)

POINT = 'Point'
COORDINATE_PLACES = Decimal('0.000001')


def _coordinate(value):
    """Round a longitude/latitude to the six decimal places the columns hold."""
    if value is None or value == '':
        return None
    try:
        return Decimal(str(value)).quantize(COORDINATE_PLACES)
    except (InvalidOperation, ValueError):
        # Left as-is so field validation reports it
        return value


class StoreQuerySet(models.QuerySet):
    """Read helpers for stores: review join, tag counts and ranking."""

    def with_reviews(self):
        """Attach each store's reviews (newest first) in one extra query."""
        from reviews.models import Review

        reviews = Review.objects.select_related('author').order_by('-created', '-id')
        return self.prefetch_related(Prefetch('reviews', queryset=reviews), 'tag_entries')

    def with_tags(self):
        return self.prefetch_related('tag_entries')

    def get_tags_list(self):
        """
        Count tag occurrences across the stores in this queryset.

        Every occurrence counts, so a store tagged ["a", "a"] adds 2 to "a".
        Returns a list of {"tag": label, "count": n}, most common first.
        """
        return list(
            StoreTag.objects.filter(store__in=self)
            .values(tag=F('label'))
            .annotate(count=Count('id'))
            .order_by('-count', 'tag')
        )

    def get_top_stores(self, limit=None):
        """
        Stores with two or more reviews, ranked by average rating.

        Stores with fewer than two reviews are excluded entirely.
        """
        limit = limit or settings.TOP_STORES_LIMIT
        return (
            self.annotate(
                review_count=Count('reviews'),
                average_rating=Avg('reviews__rating'),
            )
            .filter(review_count__gte=2)
            .order_by('-average_rating', '-review_count', 'name')[:limit]
        )


class Store(models.Model):
    """A store listing owned by the user who created it."""

    name = models.CharField(
        max_length=200,
        error_messages={
            'blank': 'Please enter a store name!',
            'null': 'Please enter a store name!',
        },
    )
    slug = models.SlugField(max_length=SLUG_MAX_LENGTH, unique=True, editable=False)
    description = models.TextField(blank=True)
    created = models.DateTimeField(default=timezone.now)

    # Location (GeoJSON point: coordinates are [longitude, latitude])
    location_type = models.CharField(max_length=20, default=POINT, editable=False)
    longitude = models.DecimalField(
        max_digits=9, decimal_places=6,
        error_messages={'null': 'You must supply coordinates!'},
    )
    latitude = models.DecimalField(
        max_digits=9, decimal_places=6,
        error_messages={'null': 'You must supply coordinates!'},
    )
    address = models.CharField(
        max_length=255,
        error_messages={
            'blank': 'You must supply an address!',
            'null': 'You must supply an address!',
        },
    )

    photo = models.CharField(max_length=255, blank=True)
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='stores',
        error_messages={'null': 'You must supply an author'},
    )

    objects = StoreQuerySet.as_manager()

    # Name as last loaded from the database; None for unsaved stores
    _loaded_name = None

    class Meta:
        ordering = ['-created', '-id']
        indexes = [
            models.Index(fields=['name'], name='store_name_idx'),
            models.Index(fields=['latitude', 'longitude'], name='store_lat_lng_idx'),
        ]

    def __str__(self) -> str:
        return self.name

    @classmethod
    def from_db(cls, db, field_names, values):
        instance = super().from_db(db, field_names, values)
        if 'name' in field_names:
            instance._loaded_name = instance.name
        return instance

    @property
    def location(self) -> dict:
        coordinates = []
        if self.longitude is not None and self.latitude is not None:
            coordinates = [float(self.longitude), float(self.latitude)]
        return {
            'type': self.location_type,
            'coordinates': coordinates,
            'address': self.address,
        }

    @location.setter
    def location(self, value: dict):
        coordinates = list(value.get('coordinates') or [])
        self.location_type = value.get('type') or POINT
        self.longitude = _coordinate(coordinates[0]) if len(coordinates) > 0 else None
        self.latitude = _coordinate(coordinates[1]) if len(coordinates) > 1 else None
        self.address = value.get('address') or ''

    @property
    def tags(self) -> list:
        if self.pk is None:
            return []
        return [entry.label for entry in self.tag_entries.all()]

    def set_tags(self, labels):
        """Replace this store's tags, keeping order and duplicates."""
        self.tag_entries.all().delete()
        StoreTag.objects.bulk_create([
            StoreTag(store=self, label=label, position=position)
            for position, label in enumerate(labels or [])
        ])
        # Drop any prefetched tags so ``tags`` reflects the new rows
        prefetched = getattr(self, '_prefetched_objects_cache', None)
        if prefetched:
            prefetched.pop('tag_entries', None)

    def get_absolute_url(self) -> str:
        from django.urls import reverse
        return reverse('stores:detail', kwargs={'slug': self.slug})

    def clean_fields(self, exclude=None):
        """Trim text fields before the required-field checks run."""
        for field_name in ('name', 'description', 'address'):
            value = getattr(self, field_name)
            if isinstance(value, str):
                setattr(self, field_name, value.strip())
        super().clean_fields(exclude=exclude)

    def name_changed(self) -> bool:
        return self._state.adding or not self.slug or self.name != self._loaded_name

    def save(self, *args, **kwargs):
        """
        Recompute the slug when the name changed, then save.

        The slug column is unique. If a concurrent save claims the chosen slug
        first, the insert fails inside a savepoint and the next free suffix is
        tried, up to STORE_SLUG_MAX_ATTEMPTS times.
        """
        if not self.name_changed():
            super().save(*args, **kwargs)
            return

        base = slugify_name(self.name)
        others = Store.objects.exclude(pk=self.pk) if self.pk else Store.objects.all()
        attempts = settings.STORE_SLUG_MAX_ATTEMPTS
        update_fields = kwargs.get('update_fields')
        if update_fields is not None and 'slug' not in update_fields:
            kwargs['update_fields'] = list(update_fields) + ['slug']

        for attempt in range(1, attempts + 1):
            self.slug = next_available_slug(base, taken_slugs(others, base))
            try:
                with transaction.atomic():
                    super().save(*args, **kwargs)
            except IntegrityError:
                if not others.filter(slug=self.slug).exists():
                    raise
                logger.warning(
                    f"Slug '{self.slug}' was claimed concurrently "
                    f"(attempt {attempt}/{attempts}), retrying"
                )
                continue
            self._loaded_name = self.name
            return

        raise SlugUnavailable(f"Could not find a free slug for '{self.name}' after {attempts} attempts")


class StoreTag(models.Model):
    """One tag occurrence on a store, in the order it was entered."""

    store = models.ForeignKey(Store, on_delete=models.CASCADE, related_name='tag_entries')
    label = models.CharField(max_length=100)
    position = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ['position', 'id']
        indexes = [
            models.Index(fields=['label'], name='storetag_label_idx'),
        ]

    def __str__(self) -> str:
        return f'{self.store_id}: {self.label}'
