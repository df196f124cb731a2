"""
Competency Sets Models

Models:
- CompetencySet: Named, ordered bundle of competency requirements
- CompetencySetItem: One competency entry of a set
- PositionCompetencySet: Assignment of a set to a position
"""

from .competency_set import CompetencySet, CompetencySetItem, VisibilityChoices, compute_version_hash, items_hash
from .assignment import PositionCompetencySet

__all__ = [
    'CompetencySet',
    'CompetencySetItem',
    'VisibilityChoices',
    'compute_version_hash',
    'items_hash',
    'PositionCompetencySet',
]
