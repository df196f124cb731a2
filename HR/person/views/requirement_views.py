from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status
from django.core.exceptions import ValidationError

from HR.person.services.position_requirement_service import PositionRequirementService
from HR.person.serializers import (
    PositionCompetencyRequirementSerializer,
    PositionRequirementUpsertSerializer,
    PositionRequirementUpdateSerializer
)
from career_project.pagination import auto_paginate

# =================================================================================================
# POSITION COMPETENCY REQUIREMENT VIEWS
# =================================================================================================

@api_view(['GET', 'POST'])
@auto_paginate
def position_requirement_list(request, position_id):
    """
    List a position's competency requirements or upsert one.

    GET /hr/person/positions/<position_id>/competency-requirements/
    - Ordered by competency name

    POST /hr/person/positions/<position_id>/competency-requirements/
    - Creates the requirement, or overwrites level and mandatory flag of the
      existing one for the same competency (201 created / 200 updated)
    """
    if request.method == 'GET':
        requirements = PositionRequirementService.get_requirements(position_id)
        serializer = PositionCompetencyRequirementSerializer(requirements, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    elif request.method == 'POST':
        serializer = PositionRequirementUpsertSerializer(data=request.data)
        if serializer.is_valid():
            try:
                dto = serializer.to_dto(position_id)
                requirement, created = PositionRequirementService.upsert_requirement(request.user, dto)
                read_serializer = PositionCompetencyRequirementSerializer(requirement)
                return Response(
                    read_serializer.data,
                    status=status.HTTP_201_CREATED if created else status.HTTP_200_OK
                )
            except ValidationError as e:
                error_detail = e.message_dict if hasattr(e, 'message_dict') else str(e)
                return Response(error_detail, status=getattr(e, 'status_code', status.HTTP_400_BAD_REQUEST))
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
def position_requirement_detail(request, pk):
    """
    Retrieve, update or delete a single requirement.

    PUT/PATCH: required_level and/or is_mandatory, optional expected_updated_at
    (409 if the row changed since it was read)
    """
    if request.method == 'GET':
        requirement = PositionRequirementService.get_requirement(pk)
        return Response(PositionCompetencyRequirementSerializer(requirement).data, status=status.HTTP_200_OK)

    elif request.method in ['PUT', 'PATCH']:
        serializer = PositionRequirementUpdateSerializer(data=request.data)
        if serializer.is_valid():
            try:
                requirement = PositionRequirementService.update(request.user, serializer.to_dto(pk))
                return Response(PositionCompetencyRequirementSerializer(requirement).data, status=status.HTTP_200_OK)
            except ValidationError as e:
                error_detail = e.message_dict if hasattr(e, 'message_dict') else str(e)
                return Response(error_detail, status=getattr(e, 'status_code', status.HTTP_400_BAD_REQUEST))
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    elif request.method == 'DELETE':
        PositionRequirementService.delete_requirement(request.user, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
