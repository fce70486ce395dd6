"""Order, OrderLineGroup, PaymentEntry and OrderStatusHistory models.

Business rules implemented:
- ``status_value`` references ``StatusDefinition.value``; it only changes
  through the transition engine (enforced at service layer).
- Each status write generates a history record.
- ``invoice_number`` is unique; allocated from the numeric sequence when
  the client does not supply one.
- Customer FK uses SET_NULL: orders keep their own contact snapshot.
- ``PaymentEntry`` rows are append-only; ``amount_paid`` is the running
  balance maintained alongside them.
- Soft delete via ``deleted_at`` (inherited from SoftDeleteModel).
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models

from modules.core.models import BaseModel, SoftDeleteModel
from modules.orders.constants import (
    MONEY_DECIMAL_PLACES,
    MONEY_MAX_DIGITS,
    PaymentEntryType,
)
from shared.domain.events import DomainEventMixin


def _money_field(**kwargs) -> models.DecimalField:
    return models.DecimalField(
        max_digits=MONEY_MAX_DIGITS,
        decimal_places=MONEY_DECIMAL_PLACES,
        default=Decimal("0.00"),
        **kwargs,
    )


class Order(DomainEventMixin, SoftDeleteModel):
    """Order aggregate root.

    ``invoice_number`` is the human-facing identifier; the UUIDv7 ``id`` is
    used for API lookups.  Customer details are copied at creation so the
    invoice stays correct when the customer record changes.
    """

    invoice_number: models.CharField = models.CharField(max_length=20, unique=True)

    # Personal info snapshot
    customer: models.ForeignKey = models.ForeignKey(
        "customers.Customer",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="orders",
    )
    customer_name: models.CharField = models.CharField(max_length=255)
    customer_email: models.EmailField = models.EmailField(blank=True, default="")
    customer_phone: models.CharField = models.CharField(
        max_length=30, blank=True, default=""
    )
    customer_address: models.TextField = models.TextField(blank=True, default="")

    # Order details
    description: models.TextField = models.TextField(blank=True, default="")
    platform: models.CharField = models.CharField(max_length=100, blank=True, default="")
    timeline: models.CharField = models.CharField(max_length=255, blank=True, default="")
    start_date: models.DateField = models.DateField(null=True, blank=True)

    # Payment state
    deposit_required: models.DecimalField = _money_field()
    amount_paid: models.DecimalField = _money_field()
    pickup_delivery_enabled: models.BooleanField = models.BooleanField(default=False)
    pickup_delivery_cost: models.DecimalField = _money_field()
    deposit_received: models.BooleanField = models.BooleanField(default=False)
    deposit_received_at: models.DateTimeField = models.DateTimeField(
        null=True, blank=True
    )

    # Status
    status_value: models.CharField = models.CharField(max_length=100)
    status_updated_at: models.DateTimeField = models.DateTimeField(
        null=True, blank=True
    )

    # Transition metadata
    cancellation_reason: models.TextField = models.TextField(blank=True, default="")
    cancelled_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)
    completed_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)
    pending_at: models.DateTimeField = models.DateTimeField(null=True, blank=True)
    expected_resume_date: models.DateField = models.DateField(null=True, blank=True)
    pending_notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "orders"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["status_value"], name="orders_status_value_idx"),
            models.Index(fields=["-created_at"], name="orders_created_idx"),
        ]

    def __str__(self) -> str:
        return f"#{self.invoice_number} {self.customer_name} ({self.status_value})"


class OrderLineGroup(BaseModel):
    """One furniture piece of an order with its material, labour and foam."""

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="line_groups",
    )
    position: models.PositiveIntegerField = models.PositiveIntegerField(default=0)
    furniture_type: models.CharField = models.CharField(
        max_length=255, blank=True, default=""
    )
    material_company: models.CharField = models.CharField(
        max_length=255, blank=True, default=""
    )
    material_code: models.CharField = models.CharField(
        max_length=100, blank=True, default=""
    )
    material_quantity: models.DecimalField = _money_field()
    material_unit_price: models.DecimalField = _money_field()
    labour_unit_price: models.DecimalField = _money_field()
    labour_quantity: models.DecimalField = _money_field()
    foam_enabled: models.BooleanField = models.BooleanField(default=False)
    foam_unit_price: models.DecimalField = _money_field()
    foam_quantity: models.DecimalField = _money_field()
    material_notes: models.TextField = models.TextField(blank=True, default="")
    labour_notes: models.TextField = models.TextField(blank=True, default="")
    foam_notes: models.TextField = models.TextField(blank=True, default="")
    customer_notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_line_groups"
        ordering = ["position", "created_at"]

    def __str__(self) -> str:
        return f"{self.order_id} #{self.position} {self.furniture_type}"


class PaymentEntry(BaseModel):
    """Append-only payment history row.

    ``amount`` is signed: refunds are negative.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="payments",
    )
    amount: models.DecimalField = models.DecimalField(
        max_digits=MONEY_MAX_DIGITS,
        decimal_places=MONEY_DECIMAL_PLACES,
    )
    paid_at: models.DateField = models.DateField()
    entry_type: models.CharField = models.CharField(
        max_length=30,
        choices=PaymentEntryType.choices,
        default=PaymentEntryType.PAYMENT,
    )
    method: models.CharField = models.CharField(max_length=100, blank=True, default="")
    description: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_payment_entries"
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["order", "created_at"], name="payment_order_created_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.order_id}: {self.amount} ({self.entry_type})"


class OrderStatusHistory(BaseModel):
    """Append-only audit trail for order status writes.

    Inherits ``BaseModel`` (not ``SoftDeleteModel``): audit records are
    immutable and never soft-deleted.
    """

    order: models.ForeignKey = models.ForeignKey(
        "orders.Order",
        on_delete=models.CASCADE,
        related_name="status_history",
    )
    old_status: models.CharField = models.CharField(  # noqa: DJ01
        max_length=100,
        null=True,
        blank=True,
    )
    new_status: models.CharField = models.CharField(max_length=100)
    notes: models.TextField = models.TextField(blank=True, default="")

    class Meta:
        db_table = "order_status_history"
        ordering = ["-created_at"]
        indexes = [
            models.Index(
                fields=["order", "-created_at"],
                name="osh_order_created_idx",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.order_id} : {self.old_status} -> {self.new_status}"
