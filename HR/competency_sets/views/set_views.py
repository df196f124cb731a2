from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status
from django.db import transaction
from django.core.exceptions import ValidationError

from HR.competency_sets.services.set_catalog_service import CompetencySetService
from HR.competency_sets.serializers import (
    CompetencySetListSerializer,
    CompetencySetSerializer,
    CompetencySetCreateSerializer,
    CompetencySetUpdateSerializer,
    CompetencySetItemSerializer,
    CompetencySetItemInputSerializer,
    CompetencySetItemUpdateSerializer,
    CompetencySetItemMoveSerializer,
    CopyFromPositionSerializer
)
from career_project.pagination import auto_paginate
from career_project.response_formatter import success_response


def _validation_error(e):
    error_detail = e.message_dict if hasattr(e, 'message_dict') else str(e)
    return Response(error_detail, status=getattr(e, 'status_code', status.HTTP_400_BAD_REQUEST))


# =================================================================================================
# COMPETENCY SET VIEWS
# =================================================================================================

@api_view(['GET', 'POST'])
@auto_paginate
def competency_set_list(request):
    """
    List visible competency sets or create a new one.

    GET /hr/competency-sets/sets/
    - Filters: visibility (public | private | all, default all), search (name, description)

    POST /hr/competency-sets/sets/
    - Create a set with its items; items are ordered as sent
    """
    if request.method == 'GET':
        competency_sets = CompetencySetService.list_sets(
            request.user,
            visibility=request.query_params.get('visibility', 'all'),
            search=request.query_params.get('search'),
        )
        serializer = CompetencySetListSerializer(competency_sets, many=True)
        return Response(serializer.data, status=status.HTTP_200_OK)

    elif request.method == 'POST':
        serializer = CompetencySetCreateSerializer(data=request.data)
        if serializer.is_valid():
            try:
                dto = serializer.to_dto()
                with transaction.atomic():
                    competency_set = CompetencySetService.create(request.user, dto)
                competency_set = CompetencySetService.get_set(request.user, competency_set.pk)
                return Response(CompetencySetSerializer(competency_set).data, status=status.HTTP_201_CREATED)
            except ValidationError as e:
                return _validation_error(e)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['POST'])
def competency_set_copy_from_position(request):
    """
    Create a new set from a position's current requirements.

    POST /hr/competency-sets/sets/copy-from-position/
    """
    serializer = CopyFromPositionSerializer(data=request.data)
    if serializer.is_valid():
        try:
            competency_set = CompetencySetService.copy_from_position(request.user, serializer.to_dto())
            competency_set = CompetencySetService.get_set(request.user, competency_set.pk)
            return Response(CompetencySetSerializer(competency_set).data, status=status.HTTP_201_CREATED)
        except ValidationError as e:
            return _validation_error(e)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'PUT', 'PATCH', 'DELETE'])
def competency_set_detail(request, pk):
    """
    Retrieve, update or delete a competency set.

    PUT/PATCH: any of name, description, visibility, items, expected_updated_at.
    Sending items replaces the item list (reconciled by competency).

    DELETE: removes the set, or deactivates it if positions are assigned to it.
    """
    if request.method == 'GET':
        competency_set = CompetencySetService.get_set(request.user, pk)
        return Response(CompetencySetSerializer(competency_set).data, status=status.HTTP_200_OK)

    elif request.method in ['PUT', 'PATCH']:
        serializer = CompetencySetUpdateSerializer(data=request.data)
        if serializer.is_valid():
            try:
                dto = serializer.to_dto(pk)
                with transaction.atomic():
                    competency_set = CompetencySetService.update(request.user, dto)
                return Response(CompetencySetSerializer(competency_set).data, status=status.HTTP_200_OK)
            except ValidationError as e:
                return _validation_error(e)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    elif request.method == 'DELETE':
        hard_deleted = CompetencySetService.delete(request.user, pk)
        if hard_deleted:
            return Response(status=status.HTTP_204_NO_CONTENT)
        return success_response(
            data={'id': pk, 'hard_deleted': False},
            message='Competency set is assigned to positions and was deactivated'
        )


# =================================================================================================
# COMPETENCY SET ITEM VIEWS
# =================================================================================================

@api_view(['GET', 'POST'])
def competency_set_items(request, pk):
    """
    GET  /hr/competency-sets/sets/<pk>/items/ - items in display order
    POST /hr/competency-sets/sets/<pk>/items/ - append an item
    """
    if request.method == 'GET':
        items = CompetencySetService.get_items(request.user, pk)
        return Response(CompetencySetItemSerializer(items, many=True).data, status=status.HTTP_200_OK)

    elif request.method == 'POST':
        serializer = CompetencySetItemInputSerializer(data=request.data)
        if serializer.is_valid():
            try:
                item = CompetencySetService.add_item(request.user, pk, serializer.to_dto())
                return Response(CompetencySetItemSerializer(item).data, status=status.HTTP_201_CREATED)
            except ValidationError as e:
                return _validation_error(e)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['PUT', 'PATCH', 'DELETE'])
def competency_set_item_detail(request, pk, item_id):
    if request.method in ['PUT', 'PATCH']:
        serializer = CompetencySetItemUpdateSerializer(data=request.data)
        if serializer.is_valid():
            try:
                item = CompetencySetService.update_item(request.user, pk, item_id, serializer.to_dto())
                return Response(CompetencySetItemSerializer(item).data, status=status.HTTP_200_OK)
            except ValidationError as e:
                return _validation_error(e)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)

    elif request.method == 'DELETE':
        CompetencySetService.remove_item(request.user, pk, item_id)
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['POST'])
def competency_set_item_move(request, pk, item_id):
    """
    Move an item one place up or down.

    POST /hr/competency-sets/sets/<pk>/items/<item_id>/move/  {"direction": "up" | "down"}
    Returns the full item list in its new order.
    """
    serializer = CompetencySetItemMoveSerializer(data=request.data)
    if serializer.is_valid():
        try:
            items = CompetencySetService.move_item(
                request.user, pk, item_id, serializer.validated_data['direction']
            )
            return Response(CompetencySetItemSerializer(items, many=True).data, status=status.HTTP_200_OK)
        except ValidationError as e:
            return _validation_error(e)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)
