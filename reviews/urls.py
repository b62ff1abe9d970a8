from django.urls import path

from . import views

app_name = 'reviews'

urlpatterns = [
    path('reviews/<int:store_id>/', views.add_review, name='add'),
]
