from django.urls import path
from . import views

app_name = 'families'

urlpatterns = [
    # New family form (home page)
    path('', views.family_create, name='create'),

    # Directory
    path('families/', views.directory, name='directory'),
    path('families/export/', views.export_directory, name='export'),

    # Family CRUD
    path('families/<int:pk>/', views.family_detail, name='detail'),
    path('families/<int:pk>/edit/', views.family_update, name='update'),
    path('families/<int:pk>/delete/', views.family_delete, name='delete'),
]
