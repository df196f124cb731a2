"""
Data Transfer Objects for Person Domain

DTOs for position competency requirement operations.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Optional


@dataclass
class PositionRequirementUpsertDTO:
    """DTO for creating or overwriting a position competency requirement"""
    position_id: int
    competency_id: int
    required_level: int
    is_mandatory: bool = True
    expected_updated_at: Optional[datetime] = None  # optimistic concurrency stamp


@dataclass
class PositionRequirementUpdateDTO:
    """DTO for single-field updates of an existing requirement"""
    requirement_id: int
    required_level: Optional[int] = None
    is_mandatory: Optional[bool] = None
    expected_updated_at: Optional[datetime] = None
