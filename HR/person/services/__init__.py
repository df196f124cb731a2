"""
Person Domain Services

Business logic for competencies required by positions.
All writes to position requirements should go through these services.

Services:
- PositionRequirementService: Read, upsert, update and delete a position's
  competency requirements
"""

from .position_requirement_service import PositionRequirementService

__all__ = [
    'PositionRequirementService',
]
