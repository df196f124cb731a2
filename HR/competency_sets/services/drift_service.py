import logging
from typing import Dict, Iterable, List

from HR.competency_sets.dtos import CompetencyChange, PositionSetChanges
from HR.competency_sets.models import PositionCompetencySet, items_hash
from HR.competency_sets.services.set_catalog_service import CompetencySetService
from HR.person.models import PositionCompetencyRequirement
from HR.person.services.position_requirement_service import PositionRequirementService

logger = logging.getLogger(__name__)

CHANGE_ADDED = 'added'
CHANGE_REMOVED = 'removed'
CHANGE_MODIFIED = 'modified'


def compute_changes(items, requirement_map: Dict[int, PositionCompetencyRequirement],
                    previously_synced_ids: Iterable[int] = ()) -> List[CompetencyChange]:
    """
    Compare a set's items with a position's requirements.

    - added: item has no requirement on the position
    - modified: level or mandatory flag differs (strict equality, a higher
      position level is still a difference)
    - removed: competency was merged from the set at the last sync, is no
      longer in the set, and the position still requires it

    Items are reported in display order, removed entries after them by name.
    """
    changes = []
    in_set = set()

    for item in items:
        in_set.add(item.competency_id)
        competency = item.competency
        requirement = requirement_map.get(item.competency_id)

        if requirement is None:
            changes.append(CompetencyChange(
                competency_id=item.competency_id,
                change_type=CHANGE_ADDED,
                competency_code=competency.code,
                competency_name=competency.name,
                category=competency.category or None,
                new_level=item.required_level,
                new_is_mandatory=item.is_mandatory,
            ))
            continue

        level_differs = requirement.required_level != item.required_level
        mandatory_differs = requirement.is_mandatory != item.is_mandatory
        if not (level_differs or mandatory_differs):
            continue

        change = CompetencyChange(
            competency_id=item.competency_id,
            change_type=CHANGE_MODIFIED,
            competency_code=competency.code,
            competency_name=competency.name,
            category=competency.category or None,
        )
        if level_differs:
            change.old_level = requirement.required_level
            change.new_level = item.required_level
        if mandatory_differs:
            change.old_is_mandatory = requirement.is_mandatory
            change.new_is_mandatory = item.is_mandatory
        changes.append(change)

    removed = []
    for competency_id in set(previously_synced_ids) - in_set:
        requirement = requirement_map.get(competency_id)
        if requirement is None:
            continue
        competency = requirement.competency
        removed.append(CompetencyChange(
            competency_id=competency_id,
            change_type=CHANGE_REMOVED,
            competency_code=competency.code,
            competency_name=competency.name,
            category=competency.category or None,
            old_level=requirement.required_level,
            old_is_mandatory=requirement.is_mandatory,
        ))
    removed.sort(key=lambda change: (change.competency_name, change.competency_id))

    return changes + removed


def count_matching(items, requirement_map) -> int:
    """Number of set items the position requires at exactly the set's level and flag."""
    matching = 0
    for item in items:
        requirement = requirement_map.get(item.competency_id)
        if requirement is not None and \
                requirement.required_level == item.required_level and \
                requirement.is_mandatory == item.is_mandatory:
            matching += 1
    return matching


def requirement_maps_for(position_ids) -> Dict[int, Dict[int, PositionCompetencyRequirement]]:
    """Requirements of several positions in one query, keyed by position then competency."""
    maps = {position_id: {} for position_id in position_ids}
    requirements = PositionCompetencyRequirement.objects.filter(
        position_id__in=maps.keys()
    ).select_related('competency')
    for requirement in requirements:
        maps[requirement.position_id][requirement.competency_id] = requirement
    return maps


class CompetencyDriftService:
    """Read-only comparison of competency sets against positions"""

    @staticmethod
    def set_items(competency_set) -> list:
        return list(competency_set.items.select_related('competency').order_by('display_order', 'id'))

    @staticmethod
    def diff(user, set_id, position_id) -> List[CompetencyChange]:
        """
        Changes that re-applying the set would make to the position.

        An empty list means the position is in sync with the set.

        Raises:
            NotFound: set not visible to user, or position missing
        """
        competency_set = CompetencySetService.get_set(user, set_id)
        position = PositionRequirementService.get_position(position_id)

        assignment = PositionCompetencySet.objects.filter(
            competency_set=competency_set, position=position
        ).first()
        previously_synced = assignment.synced_competency_ids if assignment else set()

        return compute_changes(
            CompetencyDriftService.set_items(competency_set),
            PositionRequirementService.get_requirement_map(position.pk),
            previously_synced,
        )

    @staticmethod
    def diff_assignment(assignment: PositionCompetencySet, items=None, requirement_map=None) -> List[CompetencyChange]:
        if items is None:
            items = CompetencyDriftService.set_items(assignment.competency_set)
        if requirement_map is None:
            requirement_map = requirement_maps_for([assignment.position_id])[assignment.position_id]
        return compute_changes(items, requirement_map, assignment.synced_competency_ids)

    @staticmethod
    def get_set_changes(user, set_id, only_out_of_sync=True) -> List[PositionSetChanges]:
        """
        Pending changes for every assignment of a set, ordered by position code.

        Args:
            only_out_of_sync: skip assignments that are already in sync
        """
        competency_set = CompetencySetService.get_set(user, set_id)
        items = CompetencyDriftService.set_items(competency_set)
        current_hash = items_hash(items)
        assignments = list(
            competency_set.assignments.select_related('position').order_by('position__code')
        )
        maps = requirement_maps_for([a.position_id for a in assignments])

        report = []
        for assignment in assignments:
            changes = compute_changes(items, maps[assignment.position_id], assignment.synced_competency_ids)
            if only_out_of_sync and not changes:
                continue
            report.append(PositionSetChanges(
                assignment_id=assignment.pk,
                position_id=assignment.position_id,
                position_code=assignment.position.code,
                position_title=assignment.position.title,
                changes=changes,
                set_changed_since_sync=assignment.set_changed_since_sync(current_hash),
            ))

        logger.debug(
            "Competency set %s: %d of %d assignment(s) reported",
            competency_set.pk, len(report), len(assignments)
        )
        return report
