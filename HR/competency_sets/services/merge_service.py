import logging
import time
from typing import Callable, List, Optional

from django.conf import settings
from django.core.exceptions import ObjectDoesNotExist, ValidationError
from django.db import DatabaseError, transaction
from django.utils import timezone

from HR.competency_sets.dtos import ApplicableSet, ItemFailure, MergeResult
from HR.competency_sets.models import PositionCompetencySet, items_hash
from HR.competency_sets.services.set_catalog_service import CompetencySetService
from HR.exceptions import PartialApplyError, ensure_acting_user
from HR.person.services.position_requirement_service import PositionRequirementService

logger = logging.getLogger(__name__)

REASON_TIMEOUT = 'timeout'
REASON_CANCELLED = 'cancelled'


def is_fully_applied(items, requirement_map) -> bool:
    """
    True when the position already requires every item at the set's level or
    higher. Mandatory flags are not compared.
    """
    for item in items:
        requirement = requirement_map.get(item.competency_id)
        if requirement is None or requirement.required_level < item.required_level:
            return False
    return True


def snapshot_items(items) -> list:
    return [
        {
            'competency_id': item.competency_id,
            'required_level': item.required_level,
            'is_mandatory': item.is_mandatory,
        }
        for item in items
    ]


class CompetencySetMergeService:
    """
    Applies a competency set to a position's requirements.

    Merge is a union: competencies the position already has but the set does
    not are left untouched. Competencies in both take the set's level and
    mandatory flag, whatever the position had before.
    """

    @staticmethod
    def apply_set(user, set_id, position_id, timeout: Optional[float] = None,
                  cancel: Optional[Callable[[], bool]] = None) -> MergeResult:
        """
        Merge every item of the set into the position and record the assignment.

        Each item is written in its own transaction. A failing item does not
        undo the ones already written; it is reported in result.failed and the
        call raises PartialApplyError after the remaining items were tried.

        Args:
            timeout: seconds allowed for the whole apply; defaults to
                settings.COMPETENCY_SET_APPLY_TIMEOUT. Items not reached in time
                fail with reason 'timeout'.
            cancel: polled before each item; when it returns True the remaining
                items fail with reason 'cancelled'.

        Returns:
            MergeResult with created/updated competency ids

        Raises:
            PreconditionFailed: no acting user
            NotFound: set not visible to the user, or position missing
            PartialApplyError: at least one item failed; the assignment row
                exists but is not marked as synced
        """
        ensure_acting_user(user)
        competency_set = CompetencySetService.get_set(user, set_id)
        position = PositionRequirementService.get_position(position_id)
        items = list(competency_set.items.select_related('competency').order_by('display_order', 'id'))

        if timeout is None:
            timeout = getattr(settings, 'COMPETENCY_SET_APPLY_TIMEOUT', None)
        deadline = time.monotonic() + timeout if timeout is not None else None

        result = MergeResult(competency_set_id=competency_set.pk, position_id=position.pk)
        retryable = False

        for index, item in enumerate(items):
            reason = None
            if cancel is not None and cancel():
                result.cancelled = True
                reason = REASON_CANCELLED
            elif deadline is not None and time.monotonic() >= deadline:
                reason = REASON_TIMEOUT
            if reason:
                result.failed.extend(ItemFailure(rest.competency_id, reason) for rest in items[index:])
                retryable = True
                logger.warning(
                    "Applying set %s to position %s stopped (%s) with %d item(s) left",
                    competency_set.pk, position.pk, reason, len(items) - index
                )
                break

            if not item.competency.is_active:
                result.failed.append(ItemFailure(item.competency_id, f"Competency {item.competency.code} is inactive"))
                continue

            try:
                with transaction.atomic():
                    _, created = PositionRequirementService.upsert_for(
                        user, position, item.competency, item.required_level, item.is_mandatory
                    )
            except (ValidationError, ObjectDoesNotExist, DatabaseError) as e:
                logger.warning(
                    "Failed to apply competency %s of set %s to position %s: %s",
                    item.competency_id, competency_set.pk, position.pk, e
                )
                result.failed.append(ItemFailure(item.competency_id, str(e)))
                continue

            if created:
                result.created.append(item.competency_id)
            else:
                result.updated.append(item.competency_id)

        assignment = CompetencySetMergeService.record_assignment(
            user, competency_set, position, items, synced=result.is_complete
        )
        result.assignment_id = assignment.pk

        logger.info(
            "User %s applied set %s to position %s: %d created, %d updated, %d failed",
            user.pk, competency_set.pk, position.pk,
            len(result.created), len(result.updated), result.failed_count
        )

        if not result.is_complete:
            raise PartialApplyError(result, retryable=retryable)
        return result

    @staticmethod
    @transaction.atomic
    def record_assignment(user, competency_set, position, items, synced: bool) -> PositionCompetencySet:
        """
        Create or refresh the (position, set) link after a merge.

        The snapshot and version hash only move forward after a complete merge.
        """
        assignment, created = PositionCompetencySet.objects.get_or_create(
            position=position,
            competency_set=competency_set,
            defaults={'assigned_by': user, 'created_by': user, 'updated_by': user},
        )
        if synced:
            assignment.last_synced_date = timezone.now()
            assignment.synced_items = snapshot_items(items)
            assignment.set_version_hash = items_hash(items)
        assignment.updated_by = user
        assignment.save()
        return assignment

    @staticmethod
    def list_applicable_sets(user, position_id) -> List[ApplicableSet]:
        """
        Sets visible to the user, flagged with whether the position already
        satisfies them and whether they are assigned to it.
        """
        position = PositionRequirementService.get_position(position_id)
        requirement_map = PositionRequirementService.get_requirement_map(position.pk)
        assigned = set(
            PositionCompetencySet.objects.filter(position=position).values_list('competency_set_id', flat=True)
        )
        sets = CompetencySetService.list_sets(user).prefetch_related('items')

        return [
            ApplicableSet(
                competency_set=competency_set,
                is_fully_applied=is_fully_applied(competency_set.items.all(), requirement_map),
                is_assigned=competency_set.pk in assigned,
            )
            for competency_set in sets
        ]
