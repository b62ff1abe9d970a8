import logging

from django.db import transaction

from reviews.models import Review
from stores.services import get_store
from stores.storage import translate_transient

logger = logging.getLogger(__name__)


@translate_transient
def add_review(store_id, author, text: str, rating) -> Review:
    """
    Validate and save a review for a store.

    Raises StoreNotFound for an unknown store and ValidationError for a
    missing text or an out-of-range rating.
    """
    store = get_store(store_id)
    review = Review(store=store, author=author, text=(text or '').strip(), rating=rating)
    review.full_clean()
    with transaction.atomic():
        review.save()
    logger.info(f"Review {review.pk} ({review.rating}/5) added to store {store.pk}")
    return review
