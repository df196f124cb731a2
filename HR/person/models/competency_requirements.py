from django.db import models
from core.base.models import AuditMixin
from HR.competency_config import validate_required_level
from .competency import Competency


class PositionCompetencyRequirement(AuditMixin, models.Model):
    """
    Through model for Position-Competency M2M relationship with required level.

    A position's requirements are the single source of truth for assessments.
    Competency sets only seed and re-synchronise them; rows created by a set
    are indistinguishable from rows entered by hand.

    Fields:
    - position: FK to Position
    - competency: FK to Competency
    - required_level: Integer on the configured competency level scale
    - is_mandatory: Whether the competency is mandatory for the position
    - updated_by / updated_at (AuditMixin): last modifier and modification time
    """
    position = models.ForeignKey(
        'work_structures.Position',
        on_delete=models.CASCADE,
        related_name='competency_requirements'
    )

    competency = models.ForeignKey(
        Competency,
        on_delete=models.PROTECT,
        related_name='position_requirements'
    )

    required_level = models.PositiveSmallIntegerField(
        help_text="Required proficiency level for this competency"
    )

    is_mandatory = models.BooleanField(
        default=True,
        help_text="Mandatory requirements must be met in assessments"
    )

    class Meta:
        db_table = 'hr_position_competency_requirement'
        verbose_name = 'Position Competency Requirement'
        verbose_name_plural = 'Position Competency Requirements'
        unique_together = ['position', 'competency']
        indexes = [
            models.Index(fields=['position', 'competency'], name='hr_position_positio_3a8e61_idx'),
        ]

    def __str__(self):
        return f"{self.position.code} requires {self.competency.name} at level {self.required_level}"

    def clean(self):
        """Validate competency requirement"""
        super().clean()
        validate_required_level(self.required_level)
