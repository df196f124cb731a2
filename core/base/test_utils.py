"""
Shared fixtures for the competency test suites.
"""
from django.contrib.auth import get_user_model

from HR.person.models import Competency, PositionCompetencyRequirement
from HR.work_structures.models import Position

User = get_user_model()


def create_user(email='user@test.com', name='Test User', user_type_name='user'):
    return User.objects.create_user(
        email=email,
        name=name,
        phone_number='1234567890',
        password='testpass123',
        user_type_name=user_type_name,
    )


def create_competency(code, name=None, category='', user=None):
    return Competency.objects.create(
        code=code,
        name=name or code.title(),
        category=category,
        created_by=user,
        updated_by=user,
    )


def create_position(code, title=None, user=None):
    return Position.objects.create(
        code=code,
        title=title or code.title(),
        created_by=user,
        updated_by=user,
    )


def add_requirement(position, competency, level, is_mandatory=True, user=None):
    return PositionCompetencyRequirement.objects.create(
        position=position,
        competency=competency,
        required_level=level,
        is_mandatory=is_mandatory,
        created_by=user,
        updated_by=user,
    )


def requirement_levels(position):
    """{competency code: (required_level, is_mandatory)} for a position."""
    return {
        requirement.competency.code: (requirement.required_level, requirement.is_mandatory)
        for requirement in PositionCompetencyRequirement.objects.filter(
            position=position
        ).select_related('competency')
    }
