"""
URL configuration for HR Person module.
"""
from django.urls import path

from . import views

app_name = 'person'

urlpatterns = [
    # Position competency requirement endpoints
    path('positions/<int:position_id>/competency-requirements/', views.position_requirement_list, name='position_requirement_list'),
    path('competency-requirements/<int:pk>/', views.position_requirement_detail, name='position_requirement_detail'),
]
