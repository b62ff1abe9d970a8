from django.urls import path

from . import views

app_name = 'stores'

urlpatterns = [
    path('', views.store_list, name='home'),
    path('stores/', views.store_list, name='list'),
    path('store/<slug:slug>/', views.store_detail, name='detail'),
    path('add/', views.add_store, name='add'),
    path('stores/<int:store_id>/edit/', views.edit_store, name='edit'),
    path('tags/', views.tag_list, name='tags'),
    path('tags/<str:tag>/', views.tag_list, name='tag'),
    path('top/', views.top_stores, name='top'),
]
