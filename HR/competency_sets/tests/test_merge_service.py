"""
Unit tests for CompetencySetMergeService
Tests union merge, overwrite, idempotence, partial failure, timeout and cancellation
"""
from django.test import TestCase

from HR.competency_sets.dtos import CompetencySetCreateDTO, CompetencySetItemDTO
from HR.competency_sets.models import PositionCompetencySet
from HR.competency_sets.services import CompetencySetService, CompetencySetMergeService, is_fully_applied
from HR.exceptions import NotFound, PartialApplyError, PreconditionFailed
from HR.person.models import PositionCompetencyRequirement
from HR.person.services import PositionRequirementService
from core.base.test_utils import (
    create_user, create_competency, create_position, add_requirement, requirement_levels
)


class CompetencySetMergeServiceTest(TestCase):
    """Test applying competency sets to positions"""

    @classmethod
    def setUpTestData(cls):
        cls.user = create_user(email='hr@test.com', name='HR User')
        cls.other = create_user(email='other@test.com', name='Other')

        cls.comp_a = create_competency('A', 'Alpha')
        cls.comp_b = create_competency('B', 'Bravo')
        cls.comp_x = create_competency('X', 'Xray')
        cls.position = create_position('P1', 'Position One')

    def setUp(self):
        self.competency_set = CompetencySetService.create(self.user, CompetencySetCreateDTO(
            name='Basics',
            items=[
                CompetencySetItemDTO(self.comp_a.id, 2),
                CompetencySetItemDTO(self.comp_b.id, 3),
            ],
        ))

    def _apply(self, **kwargs):
        return CompetencySetMergeService.apply_set(self.user, self.competency_set.id, self.position.id, **kwargs)

    def test_apply_to_empty_position_creates_requirements(self):
        result = self._apply()

        self.assertEqual(result.created, [self.comp_a.id, self.comp_b.id])
        self.assertEqual(result.updated, [])
        self.assertTrue(result.is_complete)
        self.assertEqual(requirement_levels(self.position), {'A': (2, True), 'B': (3, True)})

    def test_apply_leaves_other_requirements_untouched(self):
        add_requirement(self.position, self.comp_x, 2)

        self._apply()

        self.assertEqual(requirement_levels(self.position)['X'], (2, True))
        self.assertEqual(len(requirement_levels(self.position)), 3)

    def test_apply_overwrites_existing_requirement(self):
        existing = add_requirement(self.position, self.comp_a, 1, is_mandatory=False)

        result = self._apply()

        self.assertEqual(result.updated, [self.comp_a.id])
        existing.refresh_from_db()
        self.assertEqual(existing.required_level, 2)
        self.assertTrue(existing.is_mandatory)
        self.assertEqual(existing.updated_by, self.user)

    def test_apply_twice_is_idempotent(self):
        self._apply()
        first_ids = set(PositionCompetencyRequirement.objects.filter(position=self.position).values_list('id', flat=True))

        result = self._apply()

        second_ids = set(PositionCompetencyRequirement.objects.filter(position=self.position).values_list('id', flat=True))
        self.assertEqual(first_ids, second_ids)
        self.assertEqual(result.created, [])
        self.assertEqual(result.updated, [self.comp_a.id, self.comp_b.id])
        self.assertEqual(requirement_levels(self.position), {'A': (2, True), 'B': (3, True)})
        self.assertEqual(
            PositionCompetencySet.objects.filter(position=self.position, competency_set=self.competency_set).count(), 1
        )

    def test_apply_records_synced_assignment(self):
        result = self._apply()

        assignment = PositionCompetencySet.objects.get(pk=result.assignment_id)
        self.assertEqual(assignment.assigned_by, self.user)
        self.assertIsNotNone(assignment.last_synced_date)
        self.assertEqual(assignment.synced_competency_ids, {self.comp_a.id, self.comp_b.id})
        self.assertEqual(assignment.set_version_hash, self.competency_set.version_hash())
        self.assertFalse(assignment.set_changed_since_sync())

    def test_reapply_keeps_assigned_date(self):
        first = PositionCompetencySet.objects.get(pk=self._apply().assignment_id)

        self._apply()

        second = PositionCompetencySet.objects.get(pk=first.pk)
        self.assertEqual(second.assigned_date, first.assigned_date)
        self.assertGreaterEqual(second.last_synced_date, first.last_synced_date)

    def test_partial_failure_reports_failed_items(self):
        self.comp_b.deactivate()

        with self.assertRaises(PartialApplyError) as ctx:
            self._apply()

        result = ctx.exception.result
        self.assertEqual(result.created, [self.comp_a.id])
        self.assertEqual(result.failed_competency_ids, [self.comp_b.id])
        self.assertFalse(ctx.exception.retryable)
        self.assertEqual(requirement_levels(self.position), {'A': (2, True)})

        assignment = PositionCompetencySet.objects.get(pk=result.assignment_id)
        self.assertIsNone(assignment.last_synced_date)
        self.assertEqual(assignment.synced_items, [])

    def test_timeout_marks_remaining_items(self):
        with self.assertRaises(PartialApplyError) as ctx:
            self._apply(timeout=0)

        result = ctx.exception.result
        self.assertTrue(ctx.exception.retryable)
        self.assertEqual([f.reason for f in result.failed], ['timeout', 'timeout'])
        self.assertEqual(result.succeeded_count, 0)
        self.assertFalse(PositionCompetencyRequirement.objects.filter(position=self.position).exists())

    def test_cancel_stops_between_items(self):
        calls = []

        def cancel():
            calls.append(1)
            return len(calls) > 1

        with self.assertRaises(PartialApplyError) as ctx:
            self._apply(cancel=cancel)

        result = ctx.exception.result
        self.assertTrue(result.cancelled)
        self.assertEqual(result.created, [self.comp_a.id])
        self.assertEqual(result.failed_competency_ids, [self.comp_b.id])
        self.assertEqual(result.failed[0].reason, 'cancelled')

    def test_apply_requires_acting_user(self):
        with self.assertRaises(PreconditionFailed):
            CompetencySetMergeService.apply_set(None, self.competency_set.id, self.position.id)
        self.assertFalse(PositionCompetencyRequirement.objects.exists())

    def test_apply_private_set_of_other_user(self):
        with self.assertRaises(NotFound):
            CompetencySetMergeService.apply_set(self.other, self.competency_set.id, self.position.id)

    def test_apply_unknown_position(self):
        with self.assertRaises(NotFound):
            CompetencySetMergeService.apply_set(self.user, self.competency_set.id, 999999)


class FullyAppliedTest(TestCase):
    """Test the fully-applied check and applicable set listing"""

    @classmethod
    def setUpTestData(cls):
        cls.user = create_user()
        cls.comp_a = create_competency('A', 'Alpha')
        cls.comp_b = create_competency('B', 'Bravo')
        cls.position = create_position('P1')

    def setUp(self):
        self.competency_set = CompetencySetService.create(self.user, CompetencySetCreateDTO(
            name='Needs A2', visibility='public', items=[CompetencySetItemDTO(self.comp_a.id, 2)]
        ))
        self.items = list(self.competency_set.items.all())

    def _map(self):
        return PositionRequirementService.get_requirement_map(self.position.id)

    def test_higher_level_counts_as_applied(self):
        add_requirement(self.position, self.comp_a, 4)
        self.assertTrue(is_fully_applied(self.items, self._map()))

    def test_equal_level_counts_as_applied(self):
        add_requirement(self.position, self.comp_a, 2, is_mandatory=False)
        self.assertTrue(is_fully_applied(self.items, self._map()))

    def test_lower_level_not_applied(self):
        add_requirement(self.position, self.comp_a, 1)
        self.assertFalse(is_fully_applied(self.items, self._map()))

    def test_missing_competency_not_applied(self):
        add_requirement(self.position, self.comp_b, 5)
        self.assertFalse(is_fully_applied(self.items, self._map()))

    def test_list_applicable_sets_flags(self):
        add_requirement(self.position, self.comp_a, 3)

        applicable = CompetencySetMergeService.list_applicable_sets(self.user, self.position.id)

        self.assertEqual(len(applicable), 1)
        self.assertEqual(applicable[0].competency_set.id, self.competency_set.id)
        self.assertTrue(applicable[0].is_fully_applied)
        self.assertFalse(applicable[0].is_assigned)

        CompetencySetMergeService.apply_set(self.user, self.competency_set.id, self.position.id)

        applicable = CompetencySetMergeService.list_applicable_sets(self.user, self.position.id)
        self.assertTrue(applicable[0].is_assigned)
