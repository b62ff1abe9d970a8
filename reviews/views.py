from django.contrib import messages
from django.core.exceptions import ValidationError
from django.shortcuts import redirect
from django.views.decorators.http import require_POST

from accounts.decorators import login_required
from reviews import services
from reviews.forms import ReviewForm
from stores.services import get_store


@login_required
@require_POST
def add_review(request, store_id):
    """Save a review from the store page form and send the user back to the store."""
    store = get_store(store_id)
    form = ReviewForm(request.POST)
    if not form.is_valid():
        for errors in form.errors.values():
            for error in errors:
                messages.error(request, error)
        return redirect(store.get_absolute_url())

    try:
        services.add_review(store.pk, request.user, form.cleaned_data['text'], form.cleaned_data['rating'])
    except ValidationError as exc:
        for error in exc.messages:
            messages.error(request, error)
    else:
        messages.success(request, 'Review Saved!')
    return redirect(store.get_absolute_url())
