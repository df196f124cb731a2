import hashlib

from django.conf import settings
from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Count, Q

from core.base.models import SoftDeleteMixin, AuditMixin
from core.base.managers import SoftDeleteManager, SoftDeleteQuerySet
from HR.competency_config import validate_required_level


class VisibilityChoices(models.TextChoices):
    PUBLIC = 'public', 'Public'
    PRIVATE = 'private', 'Private'


def compute_version_hash(entries):
    """
    Hash a set definition given (competency_id, required_level, is_mandatory)
    triples. Order-insensitive: reordering items does not change the hash.
    """
    canonical = '|'.join(
        f"{competency_id}:{level}:{int(bool(mandatory))}"
        for competency_id, level, mandatory in sorted(entries)
    )
    return hashlib.sha256(canonical.encode('utf-8')).hexdigest()


def items_hash(items):
    return compute_version_hash(
        (item.competency_id, item.required_level, item.is_mandatory) for item in items
    )


class CompetencySetQuerySet(SoftDeleteQuerySet):
    search_fields = ('name', 'description')

    def visible_to(self, user):
        """Public sets plus the user's own private sets."""
        return self.filter(Q(visibility=VisibilityChoices.PUBLIC) | Q(owner=user))

    def with_item_count(self):
        return self.annotate(item_count=Count('items', distinct=True))


class CompetencySet(SoftDeleteMixin, AuditMixin, models.Model):
    """
    Reusable, named, ordered bundle of competency requirements.

    A set is applied to positions by the merge engine; it never owns the
    position's requirements, it only seeds and re-synchronises them.

    Mixins:
    - SoftDeleteMixin: Sets that are referenced by assignments are deactivated
      instead of deleted
    - AuditMixin: Tracks creation/updates

    Fields:
    - name: Display name (e.g., Core Leadership)
    - description: Optional description
    - visibility: public (everyone) or private (owner only)
    - owner: User who owns the set and may edit it
    """
    name = models.CharField(
        max_length=200,
        help_text="Competency set name"
    )

    description = models.CharField(
        max_length=1000,
        blank=True,
        help_text="Optional description of the set"
    )

    visibility = models.CharField(
        max_length=10,
        choices=VisibilityChoices.choices,
        default=VisibilityChoices.PRIVATE,
        help_text="Public sets are visible to every user, private ones only to the owner"
    )

    owner = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.PROTECT,
        related_name='competency_sets',
        help_text="User who owns this set"
    )

    objects = SoftDeleteManager.from_queryset(CompetencySetQuerySet)()

    class Meta:
        db_table = 'hr_competency_set'
        verbose_name = 'Competency Set'
        verbose_name_plural = 'Competency Sets'
        ordering = ['name']
        indexes = [
            models.Index(fields=['status', 'visibility'], name='hr_competen_status_a41c2e_idx'),
        ]

    def __str__(self):
        return self.name

    @property
    def competency_count(self):
        count = getattr(self, 'item_count', None)
        if count is None:
            count = self.items.count()
        return count

    def can_edit(self, user):
        """Owners and admins may change a set."""
        if user is None or not getattr(user, 'is_authenticated', False):
            return False
        if self.owner_id == user.pk:
            return True
        return hasattr(user, 'is_admin') and user.is_admin()

    def version_hash(self):
        return compute_version_hash(
            self.items.values_list('competency_id', 'required_level', 'is_mandatory')
        )

    def clean(self):
        """Validate competency set"""
        super().clean()

        if not self.name or not self.name.strip():
            raise ValidationError({'name': 'Competency set name cannot be empty'})


class CompetencySetItem(models.Model):
    """
    One (competency, required level, mandatory flag) entry of a set.

    display_order is dense and 1-based; the catalog service renumbers it after
    every insert, delete and move.
    """
    competency_set = models.ForeignKey(
        CompetencySet,
        on_delete=models.CASCADE,
        related_name='items'
    )

    competency = models.ForeignKey(
        'person.Competency',
        on_delete=models.PROTECT,
        related_name='set_items'
    )

    required_level = models.PositiveSmallIntegerField(
        help_text="Level the set requires for this competency"
    )

    is_mandatory = models.BooleanField(default=True)

    display_order = models.PositiveIntegerField(
        default=1,
        help_text="1-based position of the item within the set"
    )

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        db_table = 'hr_competency_set_item'
        verbose_name = 'Competency Set Item'
        verbose_name_plural = 'Competency Set Items'
        ordering = ['display_order', 'id']
        unique_together = ['competency_set', 'competency']

    def __str__(self):
        return f"{self.competency_set.name}: {self.competency.name} at level {self.required_level}"

    def clean(self):
        super().clean()
        validate_required_level(self.required_level)
