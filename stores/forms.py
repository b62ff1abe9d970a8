from django import forms
from django.conf import settings
from django.core.exceptions import ValidationError


class StoreForm(forms.Form):
    """Add/edit form for a store. Location arrives as flat address/lng/lat fields."""

    name = forms.CharField(
        max_length=200,
        error_messages={'required': 'Please enter a store name!'},
    )
    description = forms.CharField(widget=forms.Textarea, required=False)
    photo = forms.CharField(max_length=255, required=False)
    address = forms.CharField(
        max_length=255,
        error_messages={'required': 'You must supply an address!'},
    )
    longitude = forms.FloatField(
        min_value=-180, max_value=180,
        error_messages={'required': 'You must supply coordinates!'},
    )
    latitude = forms.FloatField(
        min_value=-90, max_value=90,
        error_messages={'required': 'You must supply coordinates!'},
    )
    tags = forms.MultipleChoiceField(widget=forms.CheckboxSelectMultiple, required=False)

    def __init__(self, *args, store=None, **kwargs):
        if store is not None and 'initial' not in kwargs:
            kwargs['initial'] = self.initial_for(store)
        super().__init__(*args, **kwargs)

        labels = list(settings.STORE_TAG_CHOICES)
        # Keep tags already on the store selectable even if no longer offered
        for label in (store.tags if store is not None else []):
            if label not in labels:
                labels.append(label)
        self.fields['tags'].choices = [(label, label) for label in labels]

    @staticmethod
    def initial_for(store) -> dict:
        coordinates = store.location['coordinates']
        return {
            'name': store.name,
            'description': store.description,
            'photo': store.photo,
            'address': store.address,
            'longitude': coordinates[0] if coordinates else None,
            'latitude': coordinates[1] if len(coordinates) > 1 else None,
            'tags': store.tags,
        }

    def to_payload(self) -> dict:
        """Shape cleaned data the way the store services expect it."""
        data = self.cleaned_data
        return {
            'name': data['name'],
            'description': data.get('description', ''),
            'photo': data.get('photo', ''),
            'tags': data.get('tags', []),
            'location': {
                'type': 'Point',
                'coordinates': [data['longitude'], data['latitude']],
                'address': data['address'],
            },
        }

    def add_service_errors(self, exc: ValidationError):
        """Attach model validation errors to the matching form fields."""
        if not hasattr(exc, 'error_dict'):
            self.add_error(None, exc)
            return
        for field, messages in exc.message_dict.items():
            target = field if field in self.fields else None
            for message in messages:
                self.add_error(target, message)
