"""
Store admin configuration with Grappelli styling.
"""

from django.contrib import admin
from django.db.models import Avg, Count

from stores.models import Store, StoreTag


class StoreTagInline(admin.TabularInline):
    model = StoreTag
    extra = 1
    fields = ['position', 'label']
    ordering = ['position']


@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    """Admin interface for store listings."""

    list_display = ['name', 'slug', 'author', 'address', 'review_count', 'average_rating', 'created']
    list_filter = ['created', 'tag_entries__label']
    search_fields = ['name', 'slug', 'description', 'address']
    readonly_fields = ['slug', 'location_type', 'created']
    raw_id_fields = ['author']
    inlines = [StoreTagInline]

    fieldsets = (
        ('Identity', {
            'fields': ('name', 'slug', 'description', 'photo', 'author')
        }),
        ('Location', {
            'fields': ('location_type', 'address', 'longitude', 'latitude')
        }),
        ('Timestamps', {
            'fields': ('created',),
            'classes': ('collapse',)
        }),
    )

    def get_queryset(self, request):
        return super().get_queryset(request).annotate(
            _review_count=Count('reviews', distinct=True),
            _average_rating=Avg('reviews__rating'),
        )

    @admin.display(ordering='_review_count', description='Reviews')
    def review_count(self, obj):
        return obj._review_count

    @admin.display(ordering='_average_rating', description='Avg rating')
    def average_rating(self, obj):
        if obj._average_rating is None:
            return '-'
        return f'{obj._average_rating:.1f}'
