"""
Competency Sets Services

Services:
- CompetencySetService: Set catalog (create, update, delete, items, ordering)
- CompetencySetMergeService: Union-merge of a set into a position
- PositionSetAssignmentService: Set to position links and their sync state
- CompetencyDriftService: Read-only diff between a set and a position
- CompetencySetSyncService: Explicit re-sync of selected assignments
"""

from .set_catalog_service import CompetencySetService, reorder_items
from .merge_service import CompetencySetMergeService, is_fully_applied
from .assignment_service import PositionSetAssignmentService
from .drift_service import CompetencyDriftService, compute_changes
from .sync_service import CompetencySetSyncService

__all__ = [
    'CompetencySetService',
    'CompetencySetMergeService',
    'PositionSetAssignmentService',
    'CompetencyDriftService',
    'CompetencySetSyncService',
    'reorder_items',
    'is_fully_applied',
    'compute_changes',
]
