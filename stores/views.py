"""
HTML views for the store directory.

Provides:
- Store listing (paginated) and store detail pages
- Add/edit forms backed by stores.services
- Tag and top-store pages
"""

from django.core.exceptions import ValidationError
from django.contrib import messages
from django.shortcuts import redirect, render
from django.utils.html import format_html
from django.views.decorators.http import require_GET, require_http_methods

from accounts.decorators import login_required
from stores import services
from stores.forms import StoreForm


@require_GET
def store_list(request):
    page = services.get_stores(page=request.GET.get('page', 1))
    return render(request, 'stores/stores.html', {
        'title': 'Stores',
        'stores': page.object_list,
        'page': page,
    })


@require_GET
def store_detail(request, slug):
    store = services.get_store_by_slug(slug, include_reviews=True)
    return render(request, 'stores/store.html', {
        'title': store.name,
        'store': store,
        'reviews': store.reviews.all(),
    })


@login_required
@require_http_methods(['GET', 'POST'])
def add_store(request):
    """Show the add form, or create the store on POST."""
    if request.method == 'GET':
        return render(request, 'stores/edit_store.html', {'title': 'Add Store', 'form': StoreForm()})

    form = StoreForm(request.POST)
    if form.is_valid():
        try:
            store = services.create_store(request.user, form.to_payload())
        except ValidationError as exc:
            form.add_service_errors(exc)
        else:
            messages.success(request, f'Successfully Created {store.name}. Care to leave a review?')
            return redirect('stores:detail', slug=store.slug)

    return render(request, 'stores/edit_store.html', {'title': 'Add Store', 'form': form}, status=400)


@login_required
@require_http_methods(['GET', 'POST'])
def edit_store(request, store_id):
    """Show the edit form for an owned store, or apply the update on POST."""
    store = services.get_store_for_edit(store_id, request.user)

    if request.method == 'GET':
        return render(request, 'stores/edit_store.html', {
            'title': f'Edit {store.name}',
            'form': StoreForm(store=store),
            'store': store,
        })

    form = StoreForm(request.POST, store=store)
    if form.is_valid():
        try:
            store = services.update_store(store.pk, form.to_payload(), user=request.user)
        except ValidationError as exc:
            form.add_service_errors(exc)
        else:
            messages.success(request, format_html(
                'Successfully updated <strong>{}</strong>. <a href="{}">View Store</a>',
                store.name,
                store.get_absolute_url(),
            ))
            return redirect('stores:edit', store_id=store.pk)

    return render(request, 'stores/edit_store.html', {
        'title': f'Edit {store.name}',
        'form': form,
        'store': store,
    }, status=400)


@require_GET
def tag_list(request, tag=None):
    return render(request, 'stores/tags.html', {
        'title': 'Tags',
        'tags': services.get_tags_list(),
        'active_tag': tag,
        'stores': services.get_stores_by_tag(tag),
    })


@require_GET
def top_stores(request):
    return render(request, 'stores/top.html', {
        'title': 'Top Stores!',
        'stores': services.get_top_stores(),
    })
