"""
Core Base Managers Module

Provides custom managers and querysets for base models.

**Architecture:**
- BaseQuerySet: Generic filtering (code/name/search)
- SoftDeleteQuerySet: For models with status field

Usage:
    from core.base.models import SoftDeleteMixin
    from core.base.managers import SoftDeleteManager

    class Position(SoftDeleteMixin, models.Model):
        objects = SoftDeleteManager()

    Position.objects.active()
"""

from django.db import models
from django.db.models import Q
from core.base.models import StatusChoices


class BaseQuerySet(models.QuerySet):
    """
    Base QuerySet with common filtering methods.

    Methods:
        - filter_by_search_params: Filter by code/name/search
    """

    search_fields = ('code', 'name')

    def filter_by_search_params(self, query_params):
        """
        Apply standard code/name/search filters from query parameters.

        Args:
            query_params: QueryDict or dict with optional keys:
                - code: Exact match (case-insensitive)
                - name: Contains match (case-insensitive)
                - search: Contains match across the queryset's search_fields

        Returns:
            Filtered QuerySet
        """
        queryset = self

        code = query_params.get('code')
        if code and 'code' in self.search_fields:
            queryset = queryset.filter(code__iexact=code)

        name = query_params.get('name')
        if name and 'name' in self.search_fields:
            queryset = queryset.filter(name__icontains=name)

        search = query_params.get('search')
        if search:
            condition = Q()
            for field in self.search_fields:
                condition |= Q(**{f'{field}__icontains': search})
            queryset = queryset.filter(condition)

        return queryset


class SoftDeleteQuerySet(BaseQuerySet):
    """
    QuerySet for SoftDeleteMixin models (models with status field).

    Methods:
        - active(): Return status=ACTIVE records
    """

    def active(self):
        """Return only active records (status=ACTIVE)."""
        return self.filter(status=StatusChoices.ACTIVE)


class SoftDeleteManager(models.Manager.from_queryset(SoftDeleteQuerySet)):
    """
    Manager for SoftDeleteMixin models.

    Usage:
        class Competency(SoftDeleteMixin, models.Model):
            objects = SoftDeleteManager()

        Competency.objects.active()
    """
    pass
