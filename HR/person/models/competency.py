from django.db import models
from django.core.exceptions import ValidationError
from core.base.models import SoftDeleteMixin, AuditMixin
from core.base.managers import SoftDeleteManager


class Competency(SoftDeleteMixin, AuditMixin, models.Model):
    """
    Competency definition (skills, knowledge, behaviours).

    System-wide competencies referenced by position requirements and
    competency set items.
    Examples: Communication, Delegation, Python Programming

    Mixins:
    - SoftDeleteMixin: Soft delete with status field (ACTIVE/INACTIVE)
    - AuditMixin: Tracks creation/updates

    Fields:
    - code: Unique identifier
    - name: Competency name
    - description: Detailed description
    - category: Free-text grouping shown next to the name (e.g. Leadership)
    """
    code = models.CharField(
        max_length=50,
        unique=True,
        db_index=True,
        help_text="Unique competency code"
    )

    name = models.CharField(
        max_length=255,
        help_text="Competency name (e.g., Communication, Delegation)"
    )

    description = models.TextField(
        blank=True,
        help_text="Detailed description of the competency"
    )

    category = models.CharField(
        max_length=100,
        blank=True,
        help_text="Competency category (e.g., Technical, Behavioral)"
    )

    objects = SoftDeleteManager()

    class Meta:
        db_table = 'hr_competency'
        verbose_name = 'Competency'
        verbose_name_plural = 'Competencies'
        ordering = ['category', 'name']
        indexes = [
            models.Index(fields=['status', 'category'], name='hr_competen_status_5d0b1a_idx'),
            models.Index(fields=['name'], name='hr_competen_name_9e2c47_idx'),
        ]

    def __str__(self):
        return f"{self.code} - {self.name}"

    def clean(self):
        """Validate competency data"""
        super().clean()

        if not self.name or not self.name.strip():
            raise ValidationError({'name': 'Competency name cannot be empty'})

        if not self.code or not self.code.strip():
            raise ValidationError({'code': 'Competency code cannot be empty'})
