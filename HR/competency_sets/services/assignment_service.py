import logging
from typing import List, Sequence

from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import QuerySet

from HR.competency_sets.dtos import AssignmentStatus, SyncResult
from HR.competency_sets.models import PositionCompetencySet, items_hash
from HR.competency_sets.services.drift_service import (
    CompetencyDriftService,
    compute_changes,
    count_matching,
    requirement_maps_for,
)
from HR.competency_sets.services.merge_service import CompetencySetMergeService
from HR.competency_sets.services.set_catalog_service import CompetencySetService
from HR.exceptions import NotFound, PartialApplyError, ensure_acting_user
from HR.work_structures.models import Position
from HR.person.services.position_requirement_service import PositionRequirementService

logger = logging.getLogger(__name__)


class PositionSetAssignmentService:
    """Links competency sets to positions and reports each link's sync state"""

    @staticmethod
    def get_assignment(user, assignment_id) -> PositionCompetencySet:
        """
        Assignment whose set is active and visible to `user`.

        Assignments of another user's private set are reported as missing.
        """
        queryset = PositionCompetencySet.objects.select_related('position', 'competency_set', 'assigned_by')
        try:
            assignment = queryset.get(pk=assignment_id)
        except PositionCompetencySet.DoesNotExist:
            raise NotFound('Assignment', assignment_id)

        try:
            CompetencySetService.get_set(user, assignment.competency_set_id)
        except NotFound:
            raise NotFound('Assignment', assignment_id)
        return assignment

    @staticmethod
    def assign(user, set_id, position_id, copy_items=False) -> PositionCompetencySet:
        """
        Link a set to a position.

        With copy_items the set is merged into the position first (see
        CompetencySetMergeService.apply_set). Without it only the link is
        recorded and the position's requirements are untouched. Linking an
        already linked pair returns the existing row.

        Raises:
            PartialApplyError: copy_items and some items could not be merged
        """
        ensure_acting_user(user)

        if copy_items:
            result = CompetencySetMergeService.apply_set(user, set_id, position_id)
            return PositionSetAssignmentService.get_assignment(user, result.assignment_id)

        competency_set = CompetencySetService.get_set(user, set_id)
        position = PositionRequirementService.get_position(position_id)
        with transaction.atomic():
            assignment, created = PositionCompetencySet.objects.get_or_create(
                position=position,
                competency_set=competency_set,
                defaults={'assigned_by': user, 'created_by': user, 'updated_by': user},
            )
        if created:
            logger.info("User %s assigned set %s to position %s", user.pk, competency_set.pk, position.pk)
        return assignment

    @staticmethod
    def assign_positions(user, set_id, position_ids: Sequence[int], copy_items=False) -> List[PositionCompetencySet]:
        """
        Assign a set to several positions.

        Every position is checked before anything is written. With copy_items,
        per-position merge failures are collected and raised together as one
        PartialApplyError carrying a SyncResult.
        """
        ensure_acting_user(user)
        if not position_ids:
            raise ValidationError({'position_ids': 'Select at least one position'})

        competency_set = CompetencySetService.get_set(user, set_id)
        unique_ids = list(dict.fromkeys(position_ids))
        found = set(Position.objects.active().filter(pk__in=unique_ids).values_list('pk', flat=True))
        for position_id in unique_ids:
            if position_id not in found:
                raise NotFound('Position', position_id)

        assignments = []
        sync_result = SyncResult(competency_set_id=competency_set.pk)
        retryable = False
        for position_id in unique_ids:
            if not copy_items:
                assignments.append(PositionSetAssignmentService.assign(user, competency_set.pk, position_id))
                continue
            try:
                result = CompetencySetMergeService.apply_set(user, competency_set.pk, position_id)
            except PartialApplyError as e:
                result = e.result
                retryable = retryable or e.retryable
            sync_result.results.append(result)
            assignments.append(PositionSetAssignmentService.get_assignment(user, result.assignment_id))

        if not sync_result.is_complete:
            raise PartialApplyError(sync_result, retryable=retryable)
        return assignments

    @staticmethod
    @transaction.atomic
    def unassign(user, assignment_id) -> None:
        """
        Remove the link only; the position keeps every requirement.

        Raises:
            NotFound: assignment missing or its set not visible to user
            PermissionDenied: user may see the set but not edit it
        """
        ensure_acting_user(user)
        assignment = PositionSetAssignmentService.get_assignment(user, assignment_id)
        CompetencySetService.get_editable_set(user, assignment.competency_set_id)
        logger.info(
            "User %s unassigned set %s from position %s",
            user.pk, assignment.competency_set_id, assignment.position_id
        )
        assignment.delete()

    @staticmethod
    def list_assignments(user, set_id) -> List[AssignmentStatus]:
        """Assignments of a set with their sync state, ordered by position code."""
        competency_set = CompetencySetService.get_set(user, set_id)
        items = CompetencyDriftService.set_items(competency_set)
        current_hash = items_hash(items)
        assignments = list(
            competency_set.assignments.select_related('position', 'assigned_by', 'updated_by')
            .order_by('position__code')
        )
        maps = requirement_maps_for([a.position_id for a in assignments])

        statuses = []
        for assignment in assignments:
            requirement_map = maps[assignment.position_id]
            changes = compute_changes(items, requirement_map, assignment.synced_competency_ids)
            statuses.append(AssignmentStatus(
                assignment=assignment,
                is_synced=not changes,
                competency_count=len(items),
                synced_competency_count=count_matching(items, requirement_map),
                pending_changes=len(changes),
                set_changed_since_sync=assignment.set_changed_since_sync(current_hash),
            ))
        return statuses

    @staticmethod
    def list_available_positions(user, set_id) -> QuerySet:
        """Active positions the set is not assigned to yet."""
        competency_set = CompetencySetService.get_set(user, set_id)
        return Position.objects.active().exclude(
            competency_set_assignments__competency_set=competency_set
        ).order_by('code')

    @staticmethod
    def is_synced(assignment: PositionCompetencySet) -> bool:
        return not CompetencyDriftService.diff_assignment(assignment)
