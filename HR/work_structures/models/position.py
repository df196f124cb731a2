from django.db import models
from django.core.exceptions import ValidationError
from core.base.models import SoftDeleteMixin, AuditMixin
from core.base.managers import SoftDeleteManager


class Position(SoftDeleteMixin, AuditMixin, models.Model):
    """
    Job position.

    Positions own their competency requirements
    (person.PositionCompetencyRequirement) and may be linked to any number of
    competency sets through competency_sets.PositionCompetencySet.

    Mixins:
    - SoftDeleteMixin: Soft delete with status field (ACTIVE/INACTIVE)
    - AuditMixin: Tracks creation/updates

    Fields:
    - code: Unique position code
    - title: Position title shown in lists
    - department: Free-text department name
    - description: Optional long description
    """
    code = models.CharField(
        max_length=50,
        unique=True,
        db_index=True,
        help_text="Unique position code"
    )

    title = models.CharField(
        max_length=255,
        help_text="Position title (e.g., Engineering Manager)"
    )

    department = models.CharField(
        max_length=255,
        blank=True,
        help_text="Department the position belongs to"
    )

    description = models.TextField(
        blank=True,
        help_text="Detailed description of the position"
    )

    competencies = models.ManyToManyField(
        'person.Competency',
        through='person.PositionCompetencyRequirement',
        related_name='required_for_positions',
        blank=True,
        help_text="Required competencies with required levels"
    )

    objects = SoftDeleteManager()

    class Meta:
        db_table = 'hr_position'
        verbose_name = 'Position'
        verbose_name_plural = 'Positions'
        ordering = ['code']
        indexes = [
            models.Index(fields=['status', 'code'], name='hr_position_status_7c1f0e_idx'),
        ]

    def __str__(self):
        return f"{self.code} - {self.title}"

    def clean(self):
        """Validate position data"""
        super().clean()

        if not self.code or not self.code.strip():
            raise ValidationError({'code': 'Position code cannot be empty'})

        if not self.title or not self.title.strip():
            raise ValidationError({'title': 'Position title cannot be empty'})
