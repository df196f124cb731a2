from rest_framework.decorators import api_view
from rest_framework.response import Response
from rest_framework import status
from django.core.exceptions import ValidationError

from HR.exceptions import PartialApplyError
from HR.competency_sets.services import (
    CompetencySetMergeService,
    PositionSetAssignmentService,
    CompetencyDriftService,
    CompetencySetSyncService
)
from HR.competency_sets.serializers import (
    PositionSummarySerializer,
    PositionCompetencySetSerializer,
    AssignmentStatusSerializer,
    CompetencyChangeSerializer,
    PositionSetChangesSerializer,
    MergeResultSerializer,
    SyncResultSerializer,
    ApplicableSetSerializer,
    ApplySetSerializer,
    AssignPositionsSerializer,
    SyncAssignmentsSerializer
)
from career_project.pagination import auto_paginate
from career_project.response_formatter import partial_response


def _validation_error(e):
    error_detail = e.message_dict if hasattr(e, 'message_dict') else str(e)
    return Response(error_detail, status=getattr(e, 'status_code', status.HTTP_400_BAD_REQUEST))


def _partial(e, serializer_class):
    data = dict(serializer_class(e.result).data)
    data['retryable'] = e.retryable
    return partial_response(str(e), data=data)


# =================================================================================================
# APPLY / ASSIGNMENT VIEWS
# =================================================================================================

@api_view(['POST'])
def competency_set_apply(request, pk):
    """
    Merge a set into a position and link them.

    POST /hr/competency-sets/sets/<pk>/apply/  {"position_id": 1, "timeout": 30}
    - 200: every item applied
    - 207: some items failed; data lists created, updated and failed competencies
    """
    serializer = ApplySetSerializer(data=request.data)
    if serializer.is_valid():
        try:
            result = CompetencySetMergeService.apply_set(
                request.user, pk,
                serializer.validated_data['position_id'],
                timeout=serializer.validated_data.get('timeout'),
            )
            return Response(MergeResultSerializer(result).data, status=status.HTTP_200_OK)
        except PartialApplyError as e:
            return _partial(e, MergeResultSerializer)
        except ValidationError as e:
            return _validation_error(e)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'POST'])
@auto_paginate
def competency_set_assignments(request, pk):
    """
    GET  /hr/competency-sets/sets/<pk>/assignments/ - assignments with sync state
    POST /hr/competency-sets/sets/<pk>/assignments/ - assign to positions
         {"position_ids": [1, 2], "copy_items": false}
    """
    if request.method == 'GET':
        statuses = PositionSetAssignmentService.list_assignments(request.user, pk)
        return Response(AssignmentStatusSerializer(statuses, many=True).data, status=status.HTTP_200_OK)

    elif request.method == 'POST':
        serializer = AssignPositionsSerializer(data=request.data)
        if serializer.is_valid():
            try:
                assignments = PositionSetAssignmentService.assign_positions(
                    request.user, pk,
                    serializer.validated_data['position_ids'],
                    copy_items=serializer.validated_data['copy_items'],
                )
                return Response(
                    PositionCompetencySetSerializer(assignments, many=True).data,
                    status=status.HTTP_201_CREATED
                )
            except PartialApplyError as e:
                return _partial(e, SyncResultSerializer)
            except ValidationError as e:
                return _validation_error(e)
        return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET', 'DELETE'])
def competency_set_assignment_detail(request, pk):
    """
    GET    /hr/competency-sets/assignments/<pk>/ - the link, if its set is visible to the user
    DELETE /hr/competency-sets/assignments/<pk>/ - unlink (set owner or admin); requirements stay on the position
    """
    if request.method == 'GET':
        assignment = PositionSetAssignmentService.get_assignment(request.user, pk)
        return Response(PositionCompetencySetSerializer(assignment).data, status=status.HTTP_200_OK)

    elif request.method == 'DELETE':
        PositionSetAssignmentService.unassign(request.user, pk)
        return Response(status=status.HTTP_204_NO_CONTENT)


@api_view(['GET'])
@auto_paginate
def competency_set_available_positions(request, pk):
    positions = PositionSetAssignmentService.list_available_positions(request.user, pk)
    return Response(PositionSummarySerializer(positions, many=True).data, status=status.HTTP_200_OK)


# =================================================================================================
# DRIFT / SYNC VIEWS
# =================================================================================================

@api_view(['GET'])
def competency_set_changes(request, pk):
    """
    Pending changes between a set and its positions.

    GET /hr/competency-sets/sets/<pk>/changes/?position_id=3
    - one position: flat list of changes (empty = in sync)

    GET /hr/competency-sets/sets/<pk>/changes/?only_out_of_sync=false
    - every assignment with its changes
    """
    position_id = request.query_params.get('position_id')
    if position_id:
        if not position_id.isdigit():
            return Response({'position_id': 'Position id must be an integer'}, status=status.HTTP_400_BAD_REQUEST)
        changes = CompetencyDriftService.diff(request.user, pk, position_id)
        return Response(CompetencyChangeSerializer(changes, many=True).data, status=status.HTTP_200_OK)

    only_out_of_sync = request.query_params.get('only_out_of_sync', 'true').lower() != 'false'
    report = CompetencyDriftService.get_set_changes(request.user, pk, only_out_of_sync=only_out_of_sync)
    return Response(PositionSetChangesSerializer(report, many=True).data, status=status.HTTP_200_OK)


@api_view(['POST'])
def competency_set_sync(request, pk):
    """
    Re-apply a set to the selected assignments.

    POST /hr/competency-sets/sets/<pk>/sync/  {"assignment_ids": [4, 7]}
    """
    serializer = SyncAssignmentsSerializer(data=request.data)
    if serializer.is_valid():
        try:
            result = CompetencySetSyncService.sync(
                request.user, pk,
                serializer.validated_data['assignment_ids'],
                timeout=serializer.validated_data.get('timeout'),
            )
            return Response(SyncResultSerializer(result).data, status=status.HTTP_200_OK)
        except PartialApplyError as e:
            return _partial(e, SyncResultSerializer)
        except ValidationError as e:
            return _validation_error(e)
    return Response(serializer.errors, status=status.HTTP_400_BAD_REQUEST)


@api_view(['GET'])
def position_applicable_sets(request, position_id):
    """
    Sets the user can apply to a position, flagged as fully applied / assigned.

    GET /hr/competency-sets/positions/<position_id>/applicable-sets/
    """
    applicable = CompetencySetMergeService.list_applicable_sets(request.user, position_id)
    return Response(ApplicableSetSerializer(applicable, many=True).data, status=status.HTTP_200_OK)
