"""
Review model.

A review points at the store it rates; stores reach their reviews through
the ``reviews`` reverse relation.
"""

from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models
from django.utils import timezone


class Review(models.Model):
    """A user's rating (1-5) and comment on a store."""

    store = models.ForeignKey(
        'stores.Store',
        on_delete=models.CASCADE,
        related_name='reviews',
        error_messages={'null': 'You must supply a store!'},
    )
    author = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.CASCADE,
        related_name='reviews',
        error_messages={'null': 'You must supply an author!'},
    )
    text = models.TextField(error_messages={'blank': 'Your review must have text!'})
    rating = models.PositiveSmallIntegerField(
        validators=[MinValueValidator(1), MaxValueValidator(5)],
    )
    created = models.DateTimeField(default=timezone.now)

    class Meta:
        ordering = ['-created', '-id']
        indexes = [
            models.Index(fields=['store', '-created'], name='review_store_created_idx'),
        ]

    def __str__(self) -> str:
        return f'{self.rating}/5 for store {self.store_id}'
