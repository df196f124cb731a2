"""
URL configuration for HR Competency Sets module.
"""
from django.urls import path

from . import views

app_name = 'competency_sets'

urlpatterns = [
    # Set catalog endpoints
    path('sets/', views.competency_set_list, name='competency_set_list'),
    path('sets/copy-from-position/', views.competency_set_copy_from_position, name='competency_set_copy_from_position'),
    path('sets/<int:pk>/', views.competency_set_detail, name='competency_set_detail'),

    # Item endpoints
    path('sets/<int:pk>/items/', views.competency_set_items, name='competency_set_items'),
    path('sets/<int:pk>/items/<int:item_id>/', views.competency_set_item_detail, name='competency_set_item_detail'),
    path('sets/<int:pk>/items/<int:item_id>/move/', views.competency_set_item_move, name='competency_set_item_move'),

    # Apply / assignment endpoints
    path('sets/<int:pk>/apply/', views.competency_set_apply, name='competency_set_apply'),
    path('sets/<int:pk>/assignments/', views.competency_set_assignments, name='competency_set_assignments'),
    path('sets/<int:pk>/available-positions/', views.competency_set_available_positions, name='competency_set_available_positions'),
    path('assignments/<int:pk>/', views.competency_set_assignment_detail, name='competency_set_assignment_detail'),

    # Drift / sync endpoints
    path('sets/<int:pk>/changes/', views.competency_set_changes, name='competency_set_changes'),
    path('sets/<int:pk>/sync/', views.competency_set_sync, name='competency_set_sync'),

    # Position-side endpoints
    path('positions/<int:position_id>/applicable-sets/', views.position_applicable_sets, name='position_applicable_sets'),
]
