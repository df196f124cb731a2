"""
Person Domain Serializers
"""
from .requirement_serializers import (
    CompetencySerializer,
    PositionCompetencyRequirementSerializer,
    PositionRequirementUpsertSerializer,
    PositionRequirementUpdateSerializer
)

__all__ = [
    'CompetencySerializer',
    'PositionCompetencyRequirementSerializer',
    'PositionRequirementUpsertSerializer',
    'PositionRequirementUpdateSerializer',
]
