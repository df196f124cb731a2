"""
Data Transfer Objects for the Competency Sets domain.

Input DTOs are built by the write serializers (`to_dto()`) and consumed by
the services. Result DTOs (MergeResult, SyncResult, CompetencyChange, ...)
are produced by the services and rendered by the read serializers.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional


# ---------------------------------------------------------------------------
# Inputs
# ---------------------------------------------------------------------------

@dataclass
class CompetencySetItemDTO:
    """One item of a set as supplied by the caller"""
    competency_id: int
    required_level: int
    is_mandatory: bool = True


@dataclass
class CompetencySetCreateDTO:
    """DTO for creating a competency set with its items"""
    name: str
    description: Optional[str] = ''
    visibility: str = 'private'
    items: List[CompetencySetItemDTO] = field(default_factory=list)


@dataclass
class CompetencySetUpdateDTO:
    """
    DTO for updating a competency set.

    items=None leaves the stored items alone; a list (even empty) replaces
    them, reconciled by competency id.
    """
    set_id: int
    name: Optional[str] = None
    description: Optional[str] = None
    visibility: Optional[str] = None
    items: Optional[List[CompetencySetItemDTO]] = None
    expected_updated_at: Optional[datetime] = None


@dataclass
class CompetencySetItemUpdateDTO:
    """DTO for updating a single item in place"""
    required_level: Optional[int] = None
    is_mandatory: Optional[bool] = None


@dataclass
class CopyFromPositionDTO:
    """DTO for creating a set from a position's current requirements"""
    position_id: int
    name: str
    description: Optional[str] = ''
    visibility: str = 'private'


# ---------------------------------------------------------------------------
# Results
# ---------------------------------------------------------------------------

@dataclass
class ItemFailure:
    competency_id: int
    reason: str


@dataclass
class MergeResult:
    """Outcome of applying one set to one position"""
    competency_set_id: int
    position_id: int
    assignment_id: Optional[int] = None
    created: List[int] = field(default_factory=list)
    updated: List[int] = field(default_factory=list)
    failed: List[ItemFailure] = field(default_factory=list)
    cancelled: bool = False

    @property
    def succeeded(self) -> List[int]:
        return self.created + self.updated

    @property
    def succeeded_count(self) -> int:
        return len(self.succeeded)

    @property
    def failed_count(self) -> int:
        return len(self.failed)

    @property
    def failed_competency_ids(self) -> List[int]:
        return [failure.competency_id for failure in self.failed]

    @property
    def is_complete(self) -> bool:
        return not self.failed


@dataclass
class SyncResult:
    """Outcome of re-applying a set to a caller-selected list of assignments"""
    competency_set_id: int
    results: List[MergeResult] = field(default_factory=list)

    @property
    def synced_assignment_ids(self) -> List[int]:
        return [r.assignment_id for r in self.results if r.is_complete]

    @property
    def failed_assignment_ids(self) -> List[int]:
        return [r.assignment_id for r in self.results if not r.is_complete]

    @property
    def succeeded_count(self) -> int:
        return len(self.synced_assignment_ids)

    @property
    def failed_count(self) -> int:
        return len(self.failed_assignment_ids)

    @property
    def is_complete(self) -> bool:
        return all(r.is_complete for r in self.results)


@dataclass
class CompetencyChange:
    """One per-competency difference between a set and a position"""
    competency_id: int
    change_type: str  # "added", "removed", "modified"
    competency_code: str = ''
    competency_name: str = ''
    category: Optional[str] = None
    old_level: Optional[int] = None
    new_level: Optional[int] = None
    old_is_mandatory: Optional[bool] = None
    new_is_mandatory: Optional[bool] = None


@dataclass
class PositionSetChanges:
    """Pending changes for one assignment of a set"""
    assignment_id: int
    position_id: int
    position_code: str
    position_title: str
    changes: List[CompetencyChange] = field(default_factory=list)
    set_changed_since_sync: bool = False

    @property
    def is_synced(self) -> bool:
        return not self.changes


@dataclass
class AssignmentStatus:
    """An assignment annotated with its computed sync state"""
    assignment: object
    is_synced: bool
    competency_count: int
    synced_competency_count: int
    pending_changes: int = 0
    set_changed_since_sync: bool = False


@dataclass
class ApplicableSet:
    """A visible set as seen from one position"""
    competency_set: object
    is_fully_applied: bool
    is_assigned: bool
