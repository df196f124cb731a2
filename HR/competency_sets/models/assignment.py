from django.conf import settings
from django.db import models
from django.utils import timezone

from core.base.models import AuditMixin


class PositionCompetencySet(AuditMixin, models.Model):
    """
    Link between a competency set and a position it has been assigned to.

    Pure association: deleting it never touches the position's requirements.
    Whether the position is in sync with the set is computed by the drift
    service, never stored.

    Fields:
    - assigned_by / assigned_date: who linked the set and when (first link only)
    - last_synced_date: when the set's items were last merged completely;
      NULL for links made without copying items
    - synced_items: snapshot of the set items merged at last_synced_date,
      used to recognise competencies the set has since dropped
    - set_version_hash: version hash of the set at last_synced_date
    - updated_by (AuditMixin): user who last merged or re-synced the link
    """
    position = models.ForeignKey(
        'work_structures.Position',
        on_delete=models.CASCADE,
        related_name='competency_set_assignments'
    )

    competency_set = models.ForeignKey(
        'competency_sets.CompetencySet',
        on_delete=models.CASCADE,
        related_name='assignments'
    )

    assigned_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='competency_set_assignments'
    )

    assigned_date = models.DateTimeField(default=timezone.now)

    last_synced_date = models.DateTimeField(null=True, blank=True)

    synced_items = models.JSONField(
        default=list,
        blank=True,
        help_text="[{competency_id, required_level, is_mandatory}] merged at last sync"
    )

    set_version_hash = models.CharField(max_length=64, blank=True)

    class Meta:
        db_table = 'hr_position_competency_set'
        verbose_name = 'Position Competency Set'
        verbose_name_plural = 'Position Competency Sets'
        ordering = ['position__code']
        unique_together = ['position', 'competency_set']

    def __str__(self):
        return f"{self.competency_set.name} -> {self.position.code}"

    @property
    def synced_competency_ids(self):
        return {entry['competency_id'] for entry in self.synced_items or []}

    def set_changed_since_sync(self, current_hash=None):
        """
        Has the set definition changed since the last full merge.

        Pass `current_hash` when it is already known to avoid reloading the
        set's items. Direct edits to the position's requirements are not seen
        here; use the drift diff for that.
        """
        if not self.last_synced_date:
            return True
        if current_hash is None:
            current_hash = self.competency_set.version_hash()
        return self.set_version_hash != current_hash
