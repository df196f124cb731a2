"""
Competency level scale shared by position requirements and competency sets.

The scale is read from settings (COMPETENCY_LEVEL_MIN / COMPETENCY_LEVEL_MAX)
at call time so tests can override it with override_settings.
"""
from django.conf import settings

from HR.exceptions import InvalidLevel

DEFAULT_LEVEL_MIN = 1
DEFAULT_LEVEL_MAX = 5


def get_level_scale():
    """Return the (min, max) bounds of the required-level scale."""
    low = getattr(settings, 'COMPETENCY_LEVEL_MIN', DEFAULT_LEVEL_MIN)
    high = getattr(settings, 'COMPETENCY_LEVEL_MAX', DEFAULT_LEVEL_MAX)
    return low, high


def validate_required_level(level, field='required_level'):
    """
    Validate a required level against the configured scale.

    Raises:
        InvalidLevel: level is not an integer or falls outside the scale
    """
    low, high = get_level_scale()
    # bool is an int subclass; True must not pass as level 1
    if isinstance(level, bool) or not isinstance(level, int):
        raise InvalidLevel(level, low, high, field=field)
    if level < low or level > high:
        raise InvalidLevel(level, low, high, field=field)
    return level
