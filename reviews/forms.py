from django import forms

RATING_CHOICES = [(value, str(value)) for value in range(5, 0, -1)]


class ReviewForm(forms.Form):
    text = forms.CharField(
        widget=forms.Textarea,
        error_messages={'required': 'Your review must have text!'},
    )
    rating = forms.TypedChoiceField(
        choices=RATING_CHOICES,
        coerce=int,
        widget=forms.RadioSelect,
        error_messages={'required': 'Please pick a rating!'},
    )
