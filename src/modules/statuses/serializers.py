"""Status catalog DRF serializers."""

from __future__ import annotations

from rest_framework import serializers

from modules.statuses.constants import EndStateType
from modules.statuses.models import StatusDefinition

# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class CreateStatusSerializer(serializers.Serializer):
    label = serializers.CharField(max_length=100)
    value = serializers.CharField(max_length=100, required=False, allow_blank=True)
    color = serializers.CharField(max_length=7, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    is_end_state = serializers.BooleanField(required=False, default=False)
    end_state_type = serializers.ChoiceField(
        choices=EndStateType.choices, required=False, allow_blank=True
    )
    is_default = serializers.BooleanField(required=False, default=False)
    sort_order = serializers.IntegerField(min_value=1, required=False)


class UpdateStatusSerializer(serializers.Serializer):
    label = serializers.CharField(max_length=100, required=False)
    value = serializers.CharField(max_length=100, required=False)
    color = serializers.CharField(max_length=7, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    is_end_state = serializers.BooleanField(required=False)
    end_state_type = serializers.ChoiceField(
        choices=EndStateType.choices, required=False, allow_blank=True
    )
    is_default = serializers.BooleanField(required=False)
    sort_order = serializers.IntegerField(min_value=1, required=False)


class ReorderStatusesSerializer(serializers.Serializer):
    ids = serializers.ListField(child=serializers.UUIDField(), allow_empty=False)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class StatusDefinitionSerializer(serializers.ModelSerializer):
    """Read serializer; ``order_count`` is present on catalog listings."""

    order_count = serializers.SerializerMethodField()

    class Meta:
        model = StatusDefinition
        fields = [
            "id",
            "label",
            "value",
            "color",
            "description",
            "is_end_state",
            "end_state_type",
            "is_default",
            "sort_order",
            "order_count",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_order_count(self, obj: StatusDefinition) -> int | None:
        return getattr(obj, "order_count", None)
