"""Order DTOs for the Service Layer and the transition engine.

Framework-agnostic data transfer objects using Pydantic v2.
DTOs are immutable (``frozen=True``).

Snapshots (read by the pure domain code):
- ``LineGroupDTO``, ``PaymentEntryDTO``, ``PaymentStateDTO``,
  ``OrderSnapshotDTO``; catalog entries are ``StatusDefinitionDTO``.

Inputs:
- ``CreateOrderDTO``, ``RecordPaymentDTO``, ``TransitionInputDTO``.

Money and quantity fields go through ``to_decimal``: missing, blank,
non-numeric and non-finite values become ``0`` instead of failing.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING, Annotated, List, Optional, Tuple
from uuid import UUID

from django.utils import timezone
from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    EmailStr,
    Field,
    field_validator,
    model_validator,
)

from modules.orders.constants import PaymentEntryType
from modules.orders.financials import ZERO, money, to_decimal
from modules.statuses.dtos import StatusDefinitionDTO

if TYPE_CHECKING:
    from modules.orders.models import Order, OrderLineGroup, PaymentEntry

__all__ = [
    "CreateOrderDTO",
    "LineGroupDTO",
    "Money",
    "OrderSnapshotDTO",
    "PaymentEntryDTO",
    "PaymentStateDTO",
    "RecordPaymentDTO",
    "StatusDefinitionDTO",
    "TransitionInputDTO",
]

Money = Annotated[Decimal, BeforeValidator(to_decimal)]


# ---------------------------------------------------------------------------
# Snapshots
# ---------------------------------------------------------------------------


class LineGroupDTO(BaseModel):
    """One furniture piece with its material, labour and foam pricing."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    furniture_type: str = ""
    material_company: str = ""
    material_code: str = ""
    material_quantity: Money = ZERO
    material_unit_price: Money = ZERO
    labour_unit_price: Money = ZERO
    labour_quantity: Money = ZERO
    foam_enabled: bool = False
    foam_unit_price: Money = ZERO
    foam_quantity: Money = ZERO
    material_notes: str = ""
    labour_notes: str = ""
    foam_notes: str = ""
    customer_notes: str = ""

    @classmethod
    def from_entity(cls, group: OrderLineGroup) -> LineGroupDTO:
        return cls(
            furniture_type=group.furniture_type,
            material_company=group.material_company,
            material_code=group.material_code,
            material_quantity=group.material_quantity,
            material_unit_price=group.material_unit_price,
            labour_unit_price=group.labour_unit_price,
            labour_quantity=group.labour_quantity,
            foam_enabled=group.foam_enabled,
            foam_unit_price=group.foam_unit_price,
            foam_quantity=group.foam_quantity,
            material_notes=group.material_notes,
            labour_notes=group.labour_notes,
            foam_notes=group.foam_notes,
            customer_notes=group.customer_notes,
        )


class PaymentEntryDTO(BaseModel):
    """A payment history entry; refunds carry a negative ``amount``."""

    model_config = ConfigDict(frozen=True)

    amount: Money
    paid_at: date
    entry_type: PaymentEntryType = PaymentEntryType.PAYMENT
    method: str = ""
    description: str = ""

    @classmethod
    def from_entity(cls, entry: PaymentEntry) -> PaymentEntryDTO:
        return cls(
            amount=entry.amount,
            paid_at=entry.paid_at,
            entry_type=entry.entry_type,
            method=entry.method,
            description=entry.description,
        )


class PaymentStateDTO(BaseModel):
    model_config = ConfigDict(frozen=True)

    deposit_required: Money = ZERO
    amount_paid: Money = ZERO
    pickup_delivery_enabled: bool = False
    pickup_delivery_cost: Money = ZERO
    payment_history: Tuple[PaymentEntryDTO, ...] = ()


class OrderSnapshotDTO(BaseModel):
    """Consistent, read-only view of an order for the domain rules."""

    model_config = ConfigDict(frozen=True)

    id: Optional[UUID] = None
    invoice_number: str = ""
    status_value: str = ""
    line_groups: Tuple[LineGroupDTO, ...] = ()
    payment: PaymentStateDTO = PaymentStateDTO()

    @classmethod
    def from_entity(cls, order: Order) -> OrderSnapshotDTO:
        """Build a snapshot from an Order and its related rows."""
        return cls(
            id=order.id,
            invoice_number=order.invoice_number,
            status_value=order.status_value,
            line_groups=tuple(
                LineGroupDTO.from_entity(group) for group in order.line_groups.all()
            ),
            payment=PaymentStateDTO(
                deposit_required=order.deposit_required,
                amount_paid=order.amount_paid,
                pickup_delivery_enabled=order.pickup_delivery_enabled,
                pickup_delivery_cost=order.pickup_delivery_cost,
                payment_history=tuple(
                    PaymentEntryDTO.from_entity(entry) for entry in order.payments.all()
                ),
            ),
        )


# ---------------------------------------------------------------------------
# Input DTOs
# ---------------------------------------------------------------------------


class CreateOrderDTO(BaseModel):
    """Immutable DTO for order creation.

    Either ``customer_id`` (the snapshot is copied from the customer record)
    or ``customer_name`` must be given.  ``invoice_number`` is allocated
    when omitted.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    customer_id: Optional[UUID] = None
    customer_name: str = ""
    customer_email: Optional[EmailStr] = None
    customer_phone: str = ""
    customer_address: str = ""
    invoice_number: Optional[str] = None
    description: str = ""
    platform: str = ""
    timeline: str = ""
    start_date: Optional[date] = None
    deposit_required: Money = ZERO
    pickup_delivery_enabled: bool = False
    pickup_delivery_cost: Money = ZERO
    initial_payment: Money = ZERO
    initial_payment_method: str = ""
    line_groups: List[LineGroupDTO] = Field(default_factory=list)

    @field_validator("deposit_required", "pickup_delivery_cost", "initial_payment")
    @classmethod
    def must_not_be_negative(cls, v: Decimal) -> Decimal:
        amount = money(v)
        if amount < ZERO:
            raise ValueError("Amount cannot be negative.")
        # -0.00 after rounding
        return amount.copy_abs()

    @field_validator("invoice_number", "customer_email", mode="before")
    @classmethod
    def blank_is_none(cls, v: Optional[str]) -> Optional[str]:
        if isinstance(v, str) and not v.strip():
            return None
        return v

    @model_validator(mode="after")
    def customer_is_identified(self):
        if self.customer_id is None and not self.customer_name:
            raise ValueError("Either customer_id or customer_name is required.")
        return self


class RecordPaymentDTO(BaseModel):
    """A manual payment; ``amount`` is rounded to cents and must stay positive."""

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    amount: Money
    paid_at: date = Field(default_factory=timezone.localdate)
    method: str = ""
    description: str = ""

    @field_validator("amount")
    @classmethod
    def amount_must_be_positive(cls, v: Decimal) -> Decimal:
        amount = money(v)
        if amount <= ZERO:
            raise ValueError("Payment amount must be at least 0.01.")
        return amount


class TransitionInputDTO(BaseModel):
    """Fields collected for a ``RequiresInput`` outcome.

    Presence rules depend on the target status and are checked by the
    transition engine, not here.
    """

    model_config = ConfigDict(frozen=True, str_strip_whitespace=True)

    cancellation_reason: str = ""
    expected_resume_date: Optional[date] = None
    pending_notes: str = ""
