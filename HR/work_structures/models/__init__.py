"""
Work Structures Models

Models:
- Position: Job positions that own competency requirements
"""

from .position import Position

__all__ = [
    'Position',
]
