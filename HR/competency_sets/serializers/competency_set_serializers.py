"""
Serializers for CompetencySet and CompetencySetItem models
"""
from rest_framework import serializers
from HR.competency_sets.models import CompetencySet, CompetencySetItem, VisibilityChoices
from HR.competency_sets.services.set_catalog_service import MOVE_UP, MOVE_DOWN
from HR.competency_sets.dtos import (
    CompetencySetItemDTO,
    CompetencySetCreateDTO,
    CompetencySetUpdateDTO,
    CompetencySetItemUpdateDTO,
    CopyFromPositionDTO
)


class CompetencySetItemSerializer(serializers.ModelSerializer):
    """Read serializer for CompetencySetItem model"""
    competency_code = serializers.CharField(source='competency.code', read_only=True)
    competency_name = serializers.CharField(source='competency.name', read_only=True)
    category = serializers.CharField(source='competency.category', read_only=True)

    class Meta:
        model = CompetencySetItem
        fields = [
            'id', 'competency', 'competency_code', 'competency_name', 'category',
            'required_level', 'is_mandatory', 'display_order'
        ]
        read_only_fields = fields


class CompetencySetListSerializer(serializers.ModelSerializer):
    """Read serializer for set listings (no items)"""
    owner_name = serializers.CharField(source='owner.name', read_only=True)
    competency_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = CompetencySet
        fields = [
            'id', 'name', 'description', 'visibility',
            'owner', 'owner_name', 'competency_count',
            'status', 'created_at', 'updated_at'
        ]
        read_only_fields = fields


class CompetencySetSerializer(CompetencySetListSerializer):
    """Read serializer for a single set with its ordered items"""
    items = serializers.SerializerMethodField()

    class Meta(CompetencySetListSerializer.Meta):
        fields = CompetencySetListSerializer.Meta.fields + ['items']
        read_only_fields = fields

    def get_items(self, obj):
        items = sorted(obj.items.all(), key=lambda item: (item.display_order, item.id))
        return CompetencySetItemSerializer(items, many=True).data


class CompetencySetItemInputSerializer(serializers.Serializer):
    """One item inside a create/update payload"""
    competency_id = serializers.IntegerField()
    required_level = serializers.IntegerField()
    is_mandatory = serializers.BooleanField(required=False, default=True)

    def to_dto(self) -> CompetencySetItemDTO:
        return CompetencySetItemDTO(**self.validated_data)


class CompetencySetCreateSerializer(serializers.Serializer):
    """Write serializer for creating a competency set"""
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')
    visibility = serializers.ChoiceField(choices=VisibilityChoices.choices, required=False,
                                         default=VisibilityChoices.PRIVATE)
    items = CompetencySetItemInputSerializer(many=True, required=False)

    def to_dto(self) -> CompetencySetCreateDTO:
        data = dict(self.validated_data)
        items = [CompetencySetItemDTO(**item) for item in data.pop('items', [])]
        return CompetencySetCreateDTO(items=items, **data)


class CompetencySetUpdateSerializer(serializers.Serializer):
    """
    Write serializer for updating a competency set.

    Omitting `items` keeps the stored items; sending a list replaces them.
    """
    name = serializers.CharField(max_length=200, required=False)
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True)
    visibility = serializers.ChoiceField(choices=VisibilityChoices.choices, required=False)
    items = CompetencySetItemInputSerializer(many=True, required=False)
    expected_updated_at = serializers.DateTimeField(required=False, allow_null=True)

    def to_dto(self, set_id) -> CompetencySetUpdateDTO:
        data = dict(self.validated_data)
        items = data.pop('items', None)
        if items is not None:
            items = [CompetencySetItemDTO(**item) for item in items]
        return CompetencySetUpdateDTO(set_id=set_id, items=items, **data)


class CompetencySetItemUpdateSerializer(serializers.Serializer):
    """Write serializer for updating a single item"""
    required_level = serializers.IntegerField(required=False)
    is_mandatory = serializers.BooleanField(required=False)

    def to_dto(self) -> CompetencySetItemUpdateDTO:
        return CompetencySetItemUpdateDTO(**self.validated_data)


class CompetencySetItemMoveSerializer(serializers.Serializer):
    direction = serializers.ChoiceField(choices=[MOVE_UP, MOVE_DOWN])


class CopyFromPositionSerializer(serializers.Serializer):
    """Write serializer for creating a set from a position's requirements"""
    position_id = serializers.IntegerField()
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(max_length=1000, required=False, allow_blank=True, default='')
    visibility = serializers.ChoiceField(choices=VisibilityChoices.choices, required=False,
                                         default=VisibilityChoices.PRIVATE)

    def to_dto(self) -> CopyFromPositionDTO:
        return CopyFromPositionDTO(**self.validated_data)
