"""Order DRF serializers for API input/output.

The serializer operates at the Interface layer (API Views).
Business logic lives in the Service Layer, which receives
Pydantic DTOs from ``dtos.py``.
"""

from __future__ import annotations

from rest_framework import serializers

from modules.orders.dtos import OrderSnapshotDTO
from modules.orders.financials import compute_order_total
from modules.orders.models import Order, OrderLineGroup, OrderStatusHistory, PaymentEntry
from modules.statuses.constants import Remediation


def _amount(**kwargs) -> serializers.DecimalField:
    return serializers.DecimalField(max_digits=12, decimal_places=2, **kwargs)


# ---------------------------------------------------------------------------
# Input Serializers
# ---------------------------------------------------------------------------


class LineGroupInputSerializer(serializers.Serializer):
    """One furniture piece in an order creation request."""

    furniture_type = serializers.CharField(required=False, allow_blank=True)
    material_company = serializers.CharField(required=False, allow_blank=True)
    material_code = serializers.CharField(required=False, allow_blank=True)
    material_quantity = _amount(required=False, min_value=0)
    material_unit_price = _amount(required=False, min_value=0)
    labour_unit_price = _amount(required=False, min_value=0)
    labour_quantity = _amount(required=False, min_value=0)
    foam_enabled = serializers.BooleanField(required=False, default=False)
    foam_unit_price = _amount(required=False, min_value=0)
    foam_quantity = _amount(required=False, min_value=0)
    material_notes = serializers.CharField(required=False, allow_blank=True)
    labour_notes = serializers.CharField(required=False, allow_blank=True)
    foam_notes = serializers.CharField(required=False, allow_blank=True)
    customer_notes = serializers.CharField(required=False, allow_blank=True)


class CreateOrderSerializer(serializers.Serializer):
    """Validates the order creation request payload."""

    customer_id = serializers.UUIDField(required=False, allow_null=True)
    customer_name = serializers.CharField(max_length=255, required=False, allow_blank=True)
    customer_email = serializers.EmailField(required=False, allow_blank=True)
    customer_phone = serializers.CharField(max_length=30, required=False, allow_blank=True)
    customer_address = serializers.CharField(required=False, allow_blank=True)
    invoice_number = serializers.RegexField(
        r"^[A-Za-z0-9-]+$", max_length=20, required=False, allow_blank=True
    )
    description = serializers.CharField(required=False, allow_blank=True)
    platform = serializers.CharField(max_length=100, required=False, allow_blank=True)
    timeline = serializers.CharField(max_length=255, required=False, allow_blank=True)
    start_date = serializers.DateField(required=False, allow_null=True)
    deposit_required = _amount(required=False, min_value=0)
    pickup_delivery_enabled = serializers.BooleanField(required=False, default=False)
    pickup_delivery_cost = _amount(required=False, min_value=0)
    initial_payment = _amount(required=False, min_value=0)
    initial_payment_method = serializers.CharField(
        max_length=100, required=False, allow_blank=True
    )
    line_groups = LineGroupInputSerializer(many=True, required=False)


class RecordPaymentSerializer(serializers.Serializer):
    amount = _amount()
    paid_at = serializers.DateField(required=False)
    method = serializers.CharField(max_length=100, required=False, allow_blank=True)
    description = serializers.CharField(required=False, allow_blank=True)


class TransitionRequestSerializer(serializers.Serializer):
    status = serializers.CharField(max_length=100)


class TransitionInputSerializer(TransitionRequestSerializer):
    cancellation_reason = serializers.CharField(required=False, allow_blank=True)
    expected_resume_date = serializers.DateField(required=False, allow_null=True)
    pending_notes = serializers.CharField(required=False, allow_blank=True)


class TransitionResolveSerializer(TransitionRequestSerializer):
    choice = serializers.ChoiceField(choices=Remediation.choices)


# ---------------------------------------------------------------------------
# Output Serializers (Read)
# ---------------------------------------------------------------------------


class LineGroupSerializer(serializers.ModelSerializer):
    class Meta:
        model = OrderLineGroup
        fields = [
            "id",
            "position",
            "furniture_type",
            "material_company",
            "material_code",
            "material_quantity",
            "material_unit_price",
            "labour_unit_price",
            "labour_quantity",
            "foam_enabled",
            "foam_unit_price",
            "foam_quantity",
            "material_notes",
            "labour_notes",
            "foam_notes",
            "customer_notes",
        ]
        read_only_fields = fields


class PaymentEntrySerializer(serializers.ModelSerializer):
    class Meta:
        model = PaymentEntry
        fields = [
            "id",
            "amount",
            "paid_at",
            "entry_type",
            "method",
            "description",
            "created_at",
        ]
        read_only_fields = fields


class StatusHistorySerializer(serializers.ModelSerializer):
    """Read serializer for order status history records."""

    class Meta:
        model = OrderStatusHistory
        fields = [
            "id",
            "old_status",
            "new_status",
            "notes",
            "created_at",
        ]
        read_only_fields = fields


class OrderSerializer(serializers.ModelSerializer):
    """Read serializer for orders with line groups, payments and history."""

    total = serializers.SerializerMethodField()
    line_groups = LineGroupSerializer(many=True, read_only=True)
    payments = PaymentEntrySerializer(many=True, read_only=True)
    status_history = StatusHistorySerializer(many=True, read_only=True)

    class Meta:
        model = Order
        fields = [
            "id",
            "invoice_number",
            "customer_id",
            "customer_name",
            "customer_email",
            "customer_phone",
            "customer_address",
            "description",
            "platform",
            "timeline",
            "start_date",
            "status_value",
            "status_updated_at",
            "total",
            "deposit_required",
            "amount_paid",
            "pickup_delivery_enabled",
            "pickup_delivery_cost",
            "deposit_received",
            "deposit_received_at",
            "cancellation_reason",
            "cancelled_at",
            "completed_at",
            "pending_at",
            "expected_resume_date",
            "pending_notes",
            "created_at",
            "updated_at",
            "line_groups",
            "payments",
            "status_history",
        ]
        read_only_fields = fields

    def get_total(self, obj: Order) -> str:
        return str(compute_order_total(OrderSnapshotDTO.from_entity(obj)))


class OrderListSerializer(serializers.ModelSerializer):
    """Lightweight serializer for order list (no nested relations)."""

    total = serializers.SerializerMethodField()

    class Meta:
        model = Order
        fields = [
            "id",
            "invoice_number",
            "customer_id",
            "customer_name",
            "platform",
            "status_value",
            "total",
            "amount_paid",
            "deposit_required",
            "created_at",
        ]
        read_only_fields = fields

    def get_total(self, obj: Order) -> str:
        return str(compute_order_total(OrderSnapshotDTO.from_entity(obj)))


class CostBreakdownSerializer(serializers.Serializer):
    material = _amount()
    labour = _amount()
    foam = _amount()
    pickup_delivery = _amount()
    total = _amount()


class DepositStatusSerializer(serializers.Serializer):
    total = _amount()
    deposit = _amount()
    amount_paid = _amount()
    remaining = _amount()
    is_deposit_paid = serializers.BooleanField()
    is_fully_paid = serializers.BooleanField()


# ---------------------------------------------------------------------------
# Transition outcomes
# ---------------------------------------------------------------------------


class RequiresInputSerializer(serializers.Serializer):
    outcome = serializers.CharField()
    status = serializers.CharField(source="status.value")
    required = serializers.ListField(child=serializers.CharField())
    optional = serializers.ListField(child=serializers.CharField())


class RequiresResolutionSerializer(serializers.Serializer):
    outcome = serializers.CharField()
    status = serializers.CharField(source="status.value")
    kind = serializers.CharField()
    remediation = serializers.CharField()
    pending_amount = _amount()
    current_amount = _amount()
