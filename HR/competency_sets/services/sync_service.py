import logging
from typing import Optional, Sequence

from django.core.exceptions import ValidationError

from HR.competency_sets.dtos import SyncResult
from HR.competency_sets.models import PositionCompetencySet
from HR.competency_sets.services.merge_service import CompetencySetMergeService
from HR.competency_sets.services.set_catalog_service import CompetencySetService
from HR.exceptions import NotFound, PartialApplyError, ensure_acting_user

logger = logging.getLogger(__name__)


class CompetencySetSyncService:
    """Re-applies a set to positions it is already assigned to"""

    @staticmethod
    def sync(user, set_id, assignment_ids: Sequence[int], timeout: Optional[float] = None) -> SyncResult:
        """
        Merge the set's current items into each selected assignment's position.

        Requirements the set has dropped are left on the positions; they keep
        showing up as 'removed' in the drift report until the snapshot of a
        complete merge replaces them.

        Validates (before anything is written):
        - Acting user is present
        - At least one assignment id is given
        - Every id is an assignment of this set whose position is active

        Raises:
            PartialApplyError: one or more positions were not fully merged;
                e.result is the SyncResult
        """
        ensure_acting_user(user)
        if not assignment_ids:
            raise ValidationError({'assignment_ids': 'Select at least one assignment to sync'})

        competency_set = CompetencySetService.get_set(user, set_id)
        unique_ids = list(dict.fromkeys(assignment_ids))
        assignments = PositionCompetencySet.objects.filter(
            competency_set=competency_set, pk__in=unique_ids
        ).select_related('position').in_bulk()

        for assignment_id in unique_ids:
            assignment = assignments.get(assignment_id)
            if assignment is None:
                raise NotFound('Assignment', assignment_id)
            if not assignment.position.is_active:
                raise NotFound('Position', assignment.position_id)

        result = SyncResult(competency_set_id=competency_set.pk)
        retryable = False
        for assignment_id in unique_ids:
            position_id = assignments[assignment_id].position_id
            try:
                merge = CompetencySetMergeService.apply_set(user, competency_set.pk, position_id, timeout=timeout)
            except PartialApplyError as e:
                merge = e.result
                retryable = retryable or e.retryable
            result.results.append(merge)

        logger.info(
            "User %s synced set %s: %d assignment(s) synced, %d failed",
            user.pk, competency_set.pk, result.succeeded_count, result.failed_count
        )

        if not result.is_complete:
            raise PartialApplyError(result, retryable=retryable)
        return result
