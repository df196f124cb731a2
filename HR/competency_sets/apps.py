"""
Competency Sets App Configuration
"""

from django.apps import AppConfig


class CompetencySetsConfig(AppConfig):
    """Configuration for the Competency Sets app"""
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'HR.competency_sets'
    label = 'competency_sets'
    verbose_name = 'Competency Sets'
