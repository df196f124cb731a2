from django.db import models
from django.conf import settings


class StatusChoices(models.TextChoices):
    """
    Standard status choices for entities across the system.

    Competencies, positions and competency sets are never physically removed
    once other records point at them; they are switched to INACTIVE instead.
    """
    ACTIVE = 'active', 'Active'
    INACTIVE = 'inactive', 'Inactive'


class AuditMixin(models.Model):
    """
    Adds audit fields to track creation and modification metadata.

    Fields:
        - created_at: Timestamp when record was created
        - updated_at: Timestamp when record was last modified
        - created_by: User who created the record (optional)
        - updated_by: User who last modified the record (optional)

    Usage:
        class PositionCompetencyRequirement(AuditMixin, models.Model):
            required_level = models.PositiveSmallIntegerField()

    Note: created_by and updated_by are set by the service layer, which always
    receives the acting user explicitly.
    """
    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="Timestamp when record was created"
    )
    updated_at = models.DateTimeField(
        auto_now=True,
        help_text="Timestamp when record was last modified"
    )
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(app_label)s_%(class)s_created',
        help_text="User who created this record"
    )
    updated_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name='%(app_label)s_%(class)s_updated',
        help_text="User who last updated this record"
    )

    class Meta:
        abstract = True

    def stamp(self, user):
        """
        Record `user` as the last modifier (and creator for unsaved rows).

        Does not save; callers save with their own update_fields.
        """
        if self.pk is None and self.created_by_id is None:
            self.created_by = user
        self.updated_by = user
        return self


class SoftDeleteMixin(models.Model):
    """
    Mixin for models that support soft deletion.

    Instead of permanently deleting records, they are marked as inactive.
    This preserves referential integrity and audit history.

    Fields:
        - status: StatusChoices (ACTIVE/INACTIVE)

    Methods:
        - deactivate(): Marks record as inactive (soft delete)
        - update_fields(): Validated multi-field update
        - hard_delete(): Permanently deletes the record from database
    """
    status = models.CharField(
        max_length=10,
        choices=StatusChoices.choices,
        default=StatusChoices.ACTIVE,
        help_text="Record status. Set to INACTIVE instead of deleting."
    )

    class Meta:
        abstract = True

    @property
    def is_active(self):
        return self.status == StatusChoices.ACTIVE

    def deactivate(self):
        """
        Soft delete: mark as inactive instead of removing from DB.
        """
        self.status = StatusChoices.INACTIVE
        self.save(update_fields=['status', 'updated_at'] if hasattr(self, 'updated_at') else ['status'])

    def update_fields(self, field_updates: dict):
        """
        Update several fields at once, validate and save.

        Args:
            field_updates: Dict of field_name -> new_value for fields to update

        Returns:
            self (for chaining)

        Example:
            competency_set.update_fields({
                'name': 'Core Leadership',
                'visibility': 'public',
            })
        """
        for field_name, value in field_updates.items():
            setattr(self, field_name, value)
        self.full_clean()
        self.save()
        return self

    def hard_delete(self):
        """
        Permanently delete the record.
        """
        super().delete()
