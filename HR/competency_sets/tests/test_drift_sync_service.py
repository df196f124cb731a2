"""
Unit tests for CompetencyDriftService and CompetencySetSyncService
Tests diff completeness, strict drift policy and sync convergence
"""
from django.test import TestCase
from django.core.exceptions import ValidationError

from HR.competency_sets.dtos import (
    CompetencySetCreateDTO,
    CompetencySetUpdateDTO,
    CompetencySetItemDTO,
    CompetencySetItemUpdateDTO,
)
from HR.competency_sets.services import (
    CompetencySetService,
    CompetencySetMergeService,
    PositionSetAssignmentService,
    CompetencyDriftService,
    CompetencySetSyncService,
    is_fully_applied,
)
from HR.exceptions import NotFound, PartialApplyError, PreconditionFailed
from HR.person.services import PositionRequirementService
from core.base.test_utils import (
    create_user, create_competency, create_position, add_requirement, requirement_levels
)


class CompetencyDriftServiceTest(TestCase):
    """Test the read-only diff between sets and positions"""

    @classmethod
    def setUpTestData(cls):
        cls.user = create_user()
        cls.comp_a = create_competency('A', 'Alpha', 'Core')
        cls.comp_b = create_competency('B', 'Bravo', 'Core')
        cls.comp_c = create_competency('C', 'Charlie')
        cls.comp_x = create_competency('X', 'Xray')
        cls.position = create_position('P1', 'Position One')

    def _create_set(self, items):
        return CompetencySetService.create(self.user, CompetencySetCreateDTO(name='Set', items=items))

    def _replace_items(self, competency_set, items):
        CompetencySetService.update(self.user, CompetencySetUpdateDTO(set_id=competency_set.id, items=items))

    def test_diff_reports_added_removed_and_modified(self):
        competency_set = self._create_set([
            CompetencySetItemDTO(self.comp_a.id, 2),
            CompetencySetItemDTO(self.comp_b.id, 3),
        ])
        add_requirement(self.position, self.comp_x, 5)
        CompetencySetMergeService.apply_set(self.user, competency_set.id, self.position.id)
        self._replace_items(competency_set, [
            CompetencySetItemDTO(self.comp_a.id, 4),
            CompetencySetItemDTO(self.comp_c.id, 1),
        ])

        changes = CompetencyDriftService.diff(self.user, competency_set.id, self.position.id)

        self.assertEqual(
            [(c.competency_id, c.change_type) for c in changes],
            [(self.comp_a.id, 'modified'), (self.comp_c.id, 'added'), (self.comp_b.id, 'removed')]
        )
        modified, added, removed = changes
        self.assertEqual((modified.old_level, modified.new_level), (2, 4))
        self.assertIsNone(modified.old_is_mandatory)
        self.assertEqual(modified.category, 'Core')
        self.assertEqual((added.old_level, added.new_level), (None, 1))
        self.assertIsNone(added.category)
        self.assertEqual((removed.old_level, removed.new_level), (3, None))
        self.assertEqual(removed.competency_name, 'Bravo')

    def test_diff_is_read_only(self):
        competency_set = self._create_set([CompetencySetItemDTO(self.comp_a.id, 2)])
        add_requirement(self.position, self.comp_a, 1)

        CompetencyDriftService.diff(self.user, competency_set.id, self.position.id)

        self.assertEqual(requirement_levels(self.position), {'A': (1, True)})

    def test_competencies_outside_the_set_never_reported(self):
        competency_set = self._create_set([CompetencySetItemDTO(self.comp_a.id, 2)])
        add_requirement(self.position, self.comp_a, 2)
        add_requirement(self.position, self.comp_x, 3)
        PositionSetAssignmentService.assign(self.user, competency_set.id, self.position.id)

        self.assertEqual(CompetencyDriftService.diff(self.user, competency_set.id, self.position.id), [])

    def test_mandatory_only_difference(self):
        competency_set = self._create_set([CompetencySetItemDTO(self.comp_a.id, 2, True)])
        add_requirement(self.position, self.comp_a, 2, is_mandatory=False)

        changes = CompetencyDriftService.diff(self.user, competency_set.id, self.position.id)

        self.assertEqual(len(changes), 1)
        self.assertEqual(changes[0].change_type, 'modified')
        self.assertIsNone(changes[0].old_level)
        self.assertEqual((changes[0].old_is_mandatory, changes[0].new_is_mandatory), (False, True))

    def test_higher_position_level_is_fully_applied_but_out_of_sync(self):
        competency_set = self._create_set([CompetencySetItemDTO(self.comp_a.id, 2)])
        add_requirement(self.position, self.comp_a, 4)
        assignment = PositionSetAssignmentService.assign(self.user, competency_set.id, self.position.id)

        items = list(competency_set.items.all())
        requirement_map = PositionRequirementService.get_requirement_map(self.position.id)
        self.assertTrue(is_fully_applied(items, requirement_map))

        changes = CompetencyDriftService.diff(self.user, competency_set.id, self.position.id)
        self.assertEqual(len(changes), 1)
        self.assertEqual((changes[0].old_level, changes[0].new_level), (4, 2))
        self.assertFalse(PositionSetAssignmentService.is_synced(assignment))

    def test_get_set_changes_lists_out_of_sync_assignments(self):
        competency_set = self._create_set([CompetencySetItemDTO(self.comp_a.id, 2)])
        synced_position = create_position('P2', 'Synced')
        CompetencySetMergeService.apply_set(self.user, competency_set.id, synced_position.id)
        PositionSetAssignmentService.assign(self.user, competency_set.id, self.position.id)

        report = CompetencyDriftService.get_set_changes(self.user, competency_set.id)

        self.assertEqual([r.position_code for r in report], ['P1'])
        self.assertFalse(report[0].is_synced)
        self.assertEqual(report[0].changes[0].change_type, 'added')

        full_report = CompetencyDriftService.get_set_changes(self.user, competency_set.id, only_out_of_sync=False)
        self.assertEqual([r.position_code for r in full_report], ['P1', 'P2'])
        self.assertTrue(full_report[1].is_synced)


class CompetencySetSyncServiceTest(TestCase):
    """Test explicit re-sync of assignments"""

    @classmethod
    def setUpTestData(cls):
        cls.user = create_user()
        cls.comp_a = create_competency('A', 'Alpha')
        cls.comp_b = create_competency('B', 'Bravo')
        cls.comp_c = create_competency('C', 'Charlie')
        cls.position_1 = create_position('P1')
        cls.position_2 = create_position('P2')

    def setUp(self):
        self.competency_set = CompetencySetService.create(self.user, CompetencySetCreateDTO(
            name='Set',
            items=[
                CompetencySetItemDTO(self.comp_a.id, 2),
                CompetencySetItemDTO(self.comp_b.id, 3),
            ],
        ))
        self.assignment_1 = PositionSetAssignmentService.assign(
            self.user, self.competency_set.id, self.position_1.id, copy_items=True
        )
        self.assignment_2 = PositionSetAssignmentService.assign(
            self.user, self.competency_set.id, self.position_2.id, copy_items=True
        )
        CompetencySetService.update(self.user, CompetencySetUpdateDTO(
            set_id=self.competency_set.id,
            items=[
                CompetencySetItemDTO(self.comp_a.id, 4),
                CompetencySetItemDTO(self.comp_c.id, 1),
            ],
        ))

    def test_sync_converges_every_assignment(self):
        report = CompetencyDriftService.get_set_changes(self.user, self.competency_set.id)
        self.assertEqual(len(report), 2)

        result = CompetencySetSyncService.sync(
            self.user, self.competency_set.id, [r.assignment_id for r in report]
        )

        self.assertTrue(result.is_complete)
        self.assertEqual(sorted(result.synced_assignment_ids), sorted([self.assignment_1.id, self.assignment_2.id]))
        self.assertEqual(CompetencyDriftService.get_set_changes(self.user, self.competency_set.id), [])
        for assignment in (self.assignment_1, self.assignment_2):
            assignment.refresh_from_db()
            self.assertTrue(PositionSetAssignmentService.is_synced(assignment))
            self.assertFalse(assignment.set_changed_since_sync())

    def test_sync_keeps_dropped_requirements(self):
        CompetencySetSyncService.sync(self.user, self.competency_set.id, [self.assignment_1.id])

        self.assertEqual(
            requirement_levels(self.position_1),
            {'A': (4, True), 'B': (3, True), 'C': (1, True)}
        )

    def test_sync_only_touches_selected_assignments(self):
        CompetencySetSyncService.sync(self.user, self.competency_set.id, [self.assignment_1.id])

        self.assertEqual(requirement_levels(self.position_2), {'A': (2, True), 'B': (3, True)})
        self.assertNotEqual(CompetencyDriftService.diff(self.user, self.competency_set.id, self.position_2.id), [])

    def test_sync_requires_assignment_ids(self):
        with self.assertRaises(ValidationError):
            CompetencySetSyncService.sync(self.user, self.competency_set.id, [])

    def test_sync_requires_acting_user(self):
        with self.assertRaises(PreconditionFailed):
            CompetencySetSyncService.sync(None, self.competency_set.id, [self.assignment_1.id])

    def test_sync_rejects_foreign_assignment_before_writing(self):
        other_set = CompetencySetService.create(self.user, CompetencySetCreateDTO(
            name='Other', items=[CompetencySetItemDTO(self.comp_a.id, 1)]
        ))
        foreign = PositionSetAssignmentService.assign(self.user, other_set.id, self.position_1.id)

        with self.assertRaises(NotFound):
            CompetencySetSyncService.sync(self.user, self.competency_set.id, [self.assignment_1.id, foreign.id])

        self.assertEqual(requirement_levels(self.position_1), {'A': (2, True), 'B': (3, True)})

    def test_sync_aggregates_partial_failures(self):
        self.comp_c.deactivate()

        with self.assertRaises(PartialApplyError) as ctx:
            CompetencySetSyncService.sync(
                self.user, self.competency_set.id, [self.assignment_1.id, self.assignment_2.id]
            )

        result = ctx.exception.result
        self.assertEqual(result.failed_count, 2)
        self.assertEqual(result.results[0].failed_competency_ids, [self.comp_c.id])
        self.assertEqual(requirement_levels(self.position_1)['A'], (4, True))


class CoreLeadershipScenarioTest(TestCase):
    """Create, assign, edit, diff and sync a set end to end"""

    def test_core_leadership_scenario(self):
        user = create_user()
        communication = create_competency('COMM', 'Communication')
        delegation = create_competency('DELEG', 'Delegation')
        position = create_position('P', 'Team Lead')

        competency_set = CompetencySetService.create(user, CompetencySetCreateDTO(
            name='Core Leadership',
            items=[
                CompetencySetItemDTO(communication.id, 3, True),
                CompetencySetItemDTO(delegation.id, 2, False),
            ],
        ))

        assignment = PositionSetAssignmentService.assign(user, competency_set.id, position.id, copy_items=True)
        self.assertEqual(requirement_levels(position), {'COMM': (3, True), 'DELEG': (2, False)})

        item = competency_set.items.get(competency=delegation)
        CompetencySetService.update_item(
            user, competency_set.id, item.id, CompetencySetItemUpdateDTO(required_level=4)
        )

        changes = CompetencyDriftService.diff(user, competency_set.id, position.id)
        self.assertEqual(len(changes), 1)
        self.assertEqual(changes[0].competency_id, delegation.id)
        self.assertEqual(changes[0].change_type, 'modified')
        self.assertEqual((changes[0].old_level, changes[0].new_level), (2, 4))

        CompetencySetSyncService.sync(user, competency_set.id, [assignment.id])

        self.assertEqual(CompetencyDriftService.diff(user, competency_set.id, position.id), [])
        self.assertEqual(requirement_levels(position), {'COMM': (3, True), 'DELEG': (4, False)})
