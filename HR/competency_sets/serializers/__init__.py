"""
Competency Sets Serializers
"""
from .competency_set_serializers import (
    CompetencySetItemSerializer,
    CompetencySetListSerializer,
    CompetencySetSerializer,
    CompetencySetItemInputSerializer,
    CompetencySetCreateSerializer,
    CompetencySetUpdateSerializer,
    CompetencySetItemUpdateSerializer,
    CompetencySetItemMoveSerializer,
    CopyFromPositionSerializer
)
from .assignment_serializers import (
    PositionSummarySerializer,
    PositionCompetencySetSerializer,
    AssignmentStatusSerializer,
    CompetencyChangeSerializer,
    PositionSetChangesSerializer,
    MergeResultSerializer,
    SyncResultSerializer,
    ApplicableSetSerializer,
    ApplySetSerializer,
    AssignPositionsSerializer,
    SyncAssignmentsSerializer
)

__all__ = [
    'CompetencySetItemSerializer',
    'CompetencySetListSerializer',
    'CompetencySetSerializer',
    'CompetencySetItemInputSerializer',
    'CompetencySetCreateSerializer',
    'CompetencySetUpdateSerializer',
    'CompetencySetItemUpdateSerializer',
    'CompetencySetItemMoveSerializer',
    'CopyFromPositionSerializer',
    'PositionSummarySerializer',
    'PositionCompetencySetSerializer',
    'AssignmentStatusSerializer',
    'CompetencyChangeSerializer',
    'PositionSetChangesSerializer',
    'MergeResultSerializer',
    'SyncResultSerializer',
    'ApplicableSetSerializer',
    'ApplySetSerializer',
    'AssignPositionsSerializer',
    'SyncAssignmentsSerializer',
]
