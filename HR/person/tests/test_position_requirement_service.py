"""
Unit tests for PositionRequirementService
Tests upsert semantics, audit stamping, level validation and stale writes
"""
from datetime import timedelta

from django.test import TestCase, override_settings

from HR.exceptions import NotFound, InvalidLevel, PreconditionFailed, ConflictStale
from HR.person.dtos import PositionRequirementUpsertDTO
from HR.person.models import PositionCompetencyRequirement
from HR.person.services import PositionRequirementService
from core.base.test_utils import create_user, create_competency, create_position, add_requirement


class PositionRequirementServiceTest(TestCase):
    """Test PositionRequirementService business logic"""

    @classmethod
    def setUpTestData(cls):
        cls.user = create_user()
        cls.other_user = create_user(email='other@test.com', name='Other User')
        cls.communication = create_competency('COMM', 'Communication', 'Behavioral')
        cls.delegation = create_competency('DELEG', 'Delegation', 'Leadership')
        cls.position = create_position('ENG-MGR', 'Engineering Manager')

    def test_upsert_creates_requirement(self):
        dto = PositionRequirementUpsertDTO(
            position_id=self.position.id,
            competency_id=self.communication.id,
            required_level=3,
        )

        requirement, created = PositionRequirementService.upsert_requirement(self.user, dto)

        self.assertTrue(created)
        self.assertEqual(requirement.required_level, 3)
        self.assertTrue(requirement.is_mandatory)
        self.assertEqual(requirement.created_by, self.user)
        self.assertEqual(requirement.updated_by, self.user)

    def test_upsert_overwrites_in_place(self):
        """Existing row keeps id and creator; level, flag and modifier change"""
        existing = add_requirement(self.position, self.communication, 2, user=self.user)

        requirement, created = PositionRequirementService.upsert_requirement(
            self.other_user,
            PositionRequirementUpsertDTO(
                position_id=self.position.id,
                competency_id=self.communication.id,
                required_level=4,
                is_mandatory=False,
            )
        )

        self.assertFalse(created)
        self.assertEqual(requirement.id, existing.id)
        requirement.refresh_from_db()
        self.assertEqual(requirement.required_level, 4)
        self.assertFalse(requirement.is_mandatory)
        self.assertEqual(requirement.created_by, self.user)
        self.assertEqual(requirement.updated_by, self.other_user)
        self.assertEqual(PositionCompetencyRequirement.objects.filter(position=self.position).count(), 1)

    def test_upsert_rejects_out_of_range_level(self):
        for level in (0, 6, '3', True):
            with self.assertRaises(InvalidLevel):
                PositionRequirementService.upsert_requirement(
                    self.user,
                    PositionRequirementUpsertDTO(
                        position_id=self.position.id,
                        competency_id=self.communication.id,
                        required_level=level,
                    )
                )
        self.assertFalse(PositionCompetencyRequirement.objects.exists())

    @override_settings(COMPETENCY_LEVEL_MIN=1, COMPETENCY_LEVEL_MAX=10)
    def test_level_scale_follows_settings(self):
        requirement, _ = PositionRequirementService.upsert_requirement(
            self.user,
            PositionRequirementUpsertDTO(
                position_id=self.position.id,
                competency_id=self.communication.id,
                required_level=8,
            )
        )
        self.assertEqual(requirement.required_level, 8)

    def test_upsert_requires_acting_user(self):
        with self.assertRaises(PreconditionFailed):
            PositionRequirementService.upsert_requirement(
                None,
                PositionRequirementUpsertDTO(
                    position_id=self.position.id,
                    competency_id=self.communication.id,
                    required_level=3,
                )
            )

    def test_upsert_unknown_position(self):
        with self.assertRaises(NotFound):
            PositionRequirementService.upsert_requirement(
                self.user,
                PositionRequirementUpsertDTO(position_id=999999, competency_id=self.communication.id, required_level=3)
            )

    def test_upsert_inactive_competency(self):
        inactive = create_competency('OLD', 'Retired Skill')
        inactive.deactivate()

        with self.assertRaises(NotFound):
            PositionRequirementService.upsert_requirement(
                self.user,
                PositionRequirementUpsertDTO(position_id=self.position.id, competency_id=inactive.id, required_level=3)
            )

    def test_get_requirements_ordered_by_competency_name(self):
        add_requirement(self.position, self.delegation, 3)
        add_requirement(self.position, self.communication, 2)

        names = [r.competency.name for r in PositionRequirementService.get_requirements(self.position.id)]

        self.assertEqual(names, ['Communication', 'Delegation'])

    def test_get_requirement_map(self):
        add_requirement(self.position, self.delegation, 3)

        requirement_map = PositionRequirementService.get_requirement_map(self.position.id)

        self.assertEqual(list(requirement_map), [self.delegation.id])
        self.assertEqual(requirement_map[self.delegation.id].required_level, 3)

    def test_update_level_and_mandatory(self):
        requirement = add_requirement(self.position, self.communication, 2)

        PositionRequirementService.update_level(self.user, requirement.id, 5)
        PositionRequirementService.update_mandatory(self.user, requirement.id, False)

        requirement.refresh_from_db()
        self.assertEqual(requirement.required_level, 5)
        self.assertFalse(requirement.is_mandatory)
        self.assertEqual(requirement.updated_by, self.user)

    def test_update_with_stale_timestamp_conflicts(self):
        requirement = add_requirement(self.position, self.communication, 2)
        stale = requirement.updated_at - timedelta(seconds=5)

        with self.assertRaises(ConflictStale):
            PositionRequirementService.update_level(self.user, requirement.id, 4, expected_updated_at=stale)

        requirement.refresh_from_db()
        self.assertEqual(requirement.required_level, 2)

    def test_update_with_current_timestamp_succeeds(self):
        requirement = add_requirement(self.position, self.communication, 2)

        updated = PositionRequirementService.update_level(
            self.user, requirement.id, 4, expected_updated_at=requirement.updated_at
        )

        self.assertEqual(updated.required_level, 4)

    def test_delete_requirement(self):
        requirement = add_requirement(self.position, self.communication, 2)

        PositionRequirementService.delete_requirement(self.user, requirement.id)

        self.assertFalse(PositionCompetencyRequirement.objects.filter(pk=requirement.id).exists())

    def test_delete_unknown_requirement(self):
        with self.assertRaises(NotFound):
            PositionRequirementService.delete_requirement(self.user, 999999)
