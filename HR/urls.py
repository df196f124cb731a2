"""
HR App - Main URL Configuration
This file routes URLs to the appropriate sub-apps within the HR module.
"""
from django.urls import path, include

app_name = 'hr'

urlpatterns = [
    # Person Domain URLs (position competency requirements)
    path('person/', include('HR.person.urls')),
    # Competency Sets URLs
    path('competency-sets/', include('HR.competency_sets.urls')),
]
