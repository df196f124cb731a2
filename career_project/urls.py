"""
URL configuration for career_project project.

    hr/    competency sets and position requirements
    auth/  JWT token endpoints
"""
from django.urls import path, include

urlpatterns = [
    path('hr/', include('HR.urls')),

    # Authentication endpoints (tokens)
    path('auth/', include('core.user_accounts.auth_urls')),
]
