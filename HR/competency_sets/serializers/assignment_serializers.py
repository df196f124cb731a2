"""
Serializers for set assignments and for the results of apply, diff and sync
"""
from rest_framework import serializers
from HR.competency_sets.models import PositionCompetencySet
from HR.competency_sets.serializers.competency_set_serializers import CompetencySetListSerializer
from HR.work_structures.models import Position


class PositionSummarySerializer(serializers.ModelSerializer):
    class Meta:
        model = Position
        fields = ['id', 'code', 'title', 'department']
        read_only_fields = fields


class PositionCompetencySetSerializer(serializers.ModelSerializer):
    """Read serializer for PositionCompetencySet model"""
    position_code = serializers.CharField(source='position.code', read_only=True)
    position_title = serializers.CharField(source='position.title', read_only=True)
    competency_set_name = serializers.CharField(source='competency_set.name', read_only=True)
    assigned_by_name = serializers.CharField(source='assigned_by.name', read_only=True, default=None)

    class Meta:
        model = PositionCompetencySet
        fields = [
            'id', 'position', 'position_code', 'position_title',
            'competency_set', 'competency_set_name',
            'assigned_by', 'assigned_by_name', 'assigned_date',
            'last_synced_date', 'updated_by', 'updated_at'
        ]
        read_only_fields = fields


class AssignmentStatusSerializer(serializers.Serializer):
    """Assignment row plus its computed sync state"""
    assignment = PositionCompetencySetSerializer(read_only=True)
    is_synced = serializers.BooleanField(read_only=True)
    competency_count = serializers.IntegerField(read_only=True)
    synced_competency_count = serializers.IntegerField(read_only=True)
    pending_changes = serializers.IntegerField(read_only=True)
    set_changed_since_sync = serializers.BooleanField(read_only=True)


class CompetencyChangeSerializer(serializers.Serializer):
    competency_id = serializers.IntegerField(read_only=True)
    competency_code = serializers.CharField(read_only=True)
    competency_name = serializers.CharField(read_only=True)
    category = serializers.CharField(read_only=True, allow_null=True)
    change_type = serializers.CharField(read_only=True)
    old_level = serializers.IntegerField(read_only=True, allow_null=True)
    new_level = serializers.IntegerField(read_only=True, allow_null=True)
    old_is_mandatory = serializers.BooleanField(read_only=True, allow_null=True)
    new_is_mandatory = serializers.BooleanField(read_only=True, allow_null=True)


class PositionSetChangesSerializer(serializers.Serializer):
    assignment_id = serializers.IntegerField(read_only=True)
    position_id = serializers.IntegerField(read_only=True)
    position_code = serializers.CharField(read_only=True)
    position_title = serializers.CharField(read_only=True)
    is_synced = serializers.BooleanField(read_only=True)
    set_changed_since_sync = serializers.BooleanField(read_only=True)
    changes = CompetencyChangeSerializer(many=True, read_only=True)


class ItemFailureSerializer(serializers.Serializer):
    competency_id = serializers.IntegerField(read_only=True)
    reason = serializers.CharField(read_only=True)


class MergeResultSerializer(serializers.Serializer):
    """Outcome of applying a set to one position"""
    competency_set_id = serializers.IntegerField(read_only=True)
    position_id = serializers.IntegerField(read_only=True)
    assignment_id = serializers.IntegerField(read_only=True, allow_null=True)
    created = serializers.ListField(child=serializers.IntegerField(), read_only=True)
    updated = serializers.ListField(child=serializers.IntegerField(), read_only=True)
    failed = ItemFailureSerializer(many=True, read_only=True)
    cancelled = serializers.BooleanField(read_only=True)
    succeeded_count = serializers.IntegerField(read_only=True)
    failed_count = serializers.IntegerField(read_only=True)
    is_complete = serializers.BooleanField(read_only=True)


class SyncResultSerializer(serializers.Serializer):
    """Outcome of syncing a set to several assignments"""
    competency_set_id = serializers.IntegerField(read_only=True)
    results = MergeResultSerializer(many=True, read_only=True)
    synced_assignment_ids = serializers.ListField(child=serializers.IntegerField(), read_only=True)
    failed_assignment_ids = serializers.ListField(child=serializers.IntegerField(), read_only=True)
    is_complete = serializers.BooleanField(read_only=True)


class ApplicableSetSerializer(serializers.Serializer):
    competency_set = CompetencySetListSerializer(read_only=True)
    is_fully_applied = serializers.BooleanField(read_only=True)
    is_assigned = serializers.BooleanField(read_only=True)


class ApplySetSerializer(serializers.Serializer):
    """Write serializer for applying a set to a position"""
    position_id = serializers.IntegerField()
    timeout = serializers.FloatField(required=False, allow_null=True, min_value=0)


class AssignPositionsSerializer(serializers.Serializer):
    """Write serializer for assigning a set to one or more positions"""
    position_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)
    copy_items = serializers.BooleanField(required=False, default=False)


class SyncAssignmentsSerializer(serializers.Serializer):
    """Write serializer for re-syncing selected assignments"""
    assignment_ids = serializers.ListField(child=serializers.IntegerField(), allow_empty=False)
    timeout = serializers.FloatField(required=False, allow_null=True, min_value=0)
