"""
Serializers for PositionCompetencyRequirement
"""
from rest_framework import serializers
from HR.person.models import Competency, PositionCompetencyRequirement
from HR.person.dtos import PositionRequirementUpsertDTO, PositionRequirementUpdateDTO


class CompetencySerializer(serializers.ModelSerializer):
    """Read serializer for Competency model"""

    class Meta:
        model = Competency
        fields = ['id', 'code', 'name', 'category', 'description', 'status']
        read_only_fields = fields


class PositionCompetencyRequirementSerializer(serializers.ModelSerializer):
    """Read serializer for a position's competency requirement"""
    position_code = serializers.CharField(source='position.code', read_only=True)
    competency_code = serializers.CharField(source='competency.code', read_only=True)
    competency_name = serializers.CharField(source='competency.name', read_only=True)
    category = serializers.CharField(source='competency.category', read_only=True)
    updated_by_name = serializers.CharField(source='updated_by.name', read_only=True, default=None)

    class Meta:
        model = PositionCompetencyRequirement
        fields = [
            'id', 'position', 'position_code',
            'competency', 'competency_code', 'competency_name', 'category',
            'required_level', 'is_mandatory',
            'updated_by', 'updated_by_name', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class PositionRequirementUpsertSerializer(serializers.Serializer):
    """Write serializer for creating or overwriting a requirement on a position"""
    competency_id = serializers.IntegerField()
    required_level = serializers.IntegerField()
    is_mandatory = serializers.BooleanField(required=False, default=True)
    expected_updated_at = serializers.DateTimeField(required=False, allow_null=True)

    def to_dto(self, position_id) -> PositionRequirementUpsertDTO:
        return PositionRequirementUpsertDTO(position_id=position_id, **self.validated_data)


class PositionRequirementUpdateSerializer(serializers.Serializer):
    """Write serializer for changing the level and/or mandatory flag"""
    required_level = serializers.IntegerField(required=False)
    is_mandatory = serializers.BooleanField(required=False)
    expected_updated_at = serializers.DateTimeField(required=False, allow_null=True)

    def validate(self, attrs):
        if 'required_level' not in attrs and 'is_mandatory' not in attrs:
            raise serializers.ValidationError("Provide required_level and/or is_mandatory")
        return attrs

    def to_dto(self, requirement_id) -> PositionRequirementUpdateDTO:
        return PositionRequirementUpdateDTO(requirement_id=requirement_id, **self.validated_data)
