"""
Person Domain Models

Competency definitions and the per-position competency requirements that
competency sets seed and synchronise.

Models:
- Competency: System-wide competency definitions
- PositionCompetencyRequirement: Required level per (position, competency)
"""

from .competency import Competency
from .competency_requirements import PositionCompetencyRequirement

__all__ = [
    'Competency',
    'PositionCompetencyRequirement',
]
