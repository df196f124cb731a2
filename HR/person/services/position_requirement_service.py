import logging
from typing import Dict, Optional, Tuple

from django.db import transaction
from django.db.models import QuerySet

from HR.competency_config import validate_required_level
from HR.exceptions import NotFound, ConflictStale, ensure_acting_user
from HR.person.dtos import PositionRequirementUpsertDTO, PositionRequirementUpdateDTO
from HR.person.models import Competency, PositionCompetencyRequirement
from HR.work_structures.models import Position

logger = logging.getLogger(__name__)


class PositionRequirementService:
    """
    Read/write access to a position's live competency requirements.

    Knows nothing about competency sets; the merge engine calls upsert_for()
    once per set item.
    """

    @staticmethod
    def get_position(position_id) -> Position:
        try:
            return Position.objects.active().get(pk=position_id)
        except Position.DoesNotExist:
            raise NotFound('Position', position_id)

    @staticmethod
    def get_competency(competency_id) -> Competency:
        try:
            return Competency.objects.active().get(pk=competency_id)
        except Competency.DoesNotExist:
            raise NotFound('Competency', competency_id)

    @staticmethod
    def get_requirement(requirement_id) -> PositionCompetencyRequirement:
        try:
            return PositionCompetencyRequirement.objects.select_related(
                'position', 'competency'
            ).get(pk=requirement_id)
        except PositionCompetencyRequirement.DoesNotExist:
            raise NotFound('Requirement', requirement_id)

    @staticmethod
    def get_requirements(position_id) -> QuerySet:
        """
        Current requirements of a position, ordered by competency name.

        Raises:
            NotFound: position does not exist or is inactive
        """
        position = PositionRequirementService.get_position(position_id)
        return PositionCompetencyRequirement.objects.filter(
            position=position
        ).select_related('competency', 'updated_by').order_by('competency__name')

    @staticmethod
    def get_requirement_map(position_id) -> Dict[int, PositionCompetencyRequirement]:
        """Current requirements keyed by competency id."""
        return {
            requirement.competency_id: requirement
            for requirement in PositionRequirementService.get_requirements(position_id)
        }

    @staticmethod
    @transaction.atomic
    def upsert_requirement(user, dto: PositionRequirementUpsertDTO) -> Tuple[PositionCompetencyRequirement, bool]:
        """
        Create or overwrite the requirement for (position, competency).

        Validates:
        - Acting user is present
        - Required level is on the configured scale
        - Position and competency exist and are active

        Returns:
            (requirement, created)
        """
        ensure_acting_user(user)
        validate_required_level(dto.required_level)
        position = PositionRequirementService.get_position(dto.position_id)
        competency = PositionRequirementService.get_competency(dto.competency_id)
        return PositionRequirementService.upsert_for(
            user, position, competency, dto.required_level, dto.is_mandatory,
            expected_updated_at=dto.expected_updated_at
        )

    @staticmethod
    @transaction.atomic
    def upsert_for(user, position, competency, required_level, is_mandatory,
                   expected_updated_at=None) -> Tuple[PositionCompetencyRequirement, bool]:
        """
        Upsert with already-loaded position and competency.

        An existing row keeps its id, created_at and created_by; only the level,
        the mandatory flag and the updated_* audit fields change.
        """
        ensure_acting_user(user)
        validate_required_level(required_level)

        requirement = PositionCompetencyRequirement.objects.filter(
            position=position, competency=competency
        ).first()

        if requirement is None:
            requirement = PositionCompetencyRequirement(
                position=position,
                competency=competency,
                required_level=required_level,
                is_mandatory=is_mandatory,
            )
            requirement.stamp(user)
            requirement.save()
            return requirement, True

        _check_not_stale(requirement, expected_updated_at)
        requirement.required_level = required_level
        requirement.is_mandatory = is_mandatory
        requirement.stamp(user)
        requirement.save(update_fields=['required_level', 'is_mandatory', 'updated_by', 'updated_at'])
        return requirement, False

    @staticmethod
    @transaction.atomic
    def update(user, dto: PositionRequirementUpdateDTO) -> PositionCompetencyRequirement:
        """Update level and/or mandatory flag of an existing requirement."""
        ensure_acting_user(user)
        if dto.required_level is not None:
            validate_required_level(dto.required_level)

        requirement = PositionRequirementService.get_requirement(dto.requirement_id)
        _check_not_stale(requirement, dto.expected_updated_at)

        update_fields = ['updated_by', 'updated_at']
        if dto.required_level is not None:
            requirement.required_level = dto.required_level
            update_fields.append('required_level')
        if dto.is_mandatory is not None:
            requirement.is_mandatory = dto.is_mandatory
            update_fields.append('is_mandatory')

        requirement.stamp(user)
        requirement.save(update_fields=update_fields)
        return requirement

    @staticmethod
    def update_level(user, requirement_id, required_level, expected_updated_at=None) -> PositionCompetencyRequirement:
        return PositionRequirementService.update(user, PositionRequirementUpdateDTO(
            requirement_id=requirement_id,
            required_level=required_level,
            expected_updated_at=expected_updated_at,
        ))

    @staticmethod
    def update_mandatory(user, requirement_id, is_mandatory, expected_updated_at=None) -> PositionCompetencyRequirement:
        return PositionRequirementService.update(user, PositionRequirementUpdateDTO(
            requirement_id=requirement_id,
            is_mandatory=is_mandatory,
            expected_updated_at=expected_updated_at,
        ))

    @staticmethod
    @transaction.atomic
    def delete_requirement(user, requirement_id) -> None:
        ensure_acting_user(user)
        requirement = PositionRequirementService.get_requirement(requirement_id)
        logger.info(
            "User %s removed competency %s from position %s",
            user.pk, requirement.competency_id, requirement.position_id
        )
        requirement.delete()


def _check_not_stale(requirement, expected_updated_at: Optional[object]):
    if expected_updated_at is not None and requirement.updated_at != expected_updated_at:
        raise ConflictStale('Requirement', requirement.pk)
