from django.contrib import admin

from reviews.models import Review


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    """Admin interface for store reviews."""

    list_display = ['store', 'author', 'rating', 'created']
    list_filter = ['rating', 'created']
    search_fields = ['text', 'store__name', 'author__username']
    raw_id_fields = ['store', 'author']
    ordering = ['-created']
