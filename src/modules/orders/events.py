"""Domain events for the Orders bounded context."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional

from shared.domain.events import DomainEvent


@dataclass(frozen=True, kw_only=True)
class OrderCreated(DomainEvent):
    """Raised when an order is created."""

    invoice_number: str
    status_value: str


@dataclass(frozen=True, kw_only=True)
class OrderStatusChanged(DomainEvent):
    """Raised on every status write."""

    old_status: Optional[str]
    new_status: str


@dataclass(frozen=True, kw_only=True)
class OrderCompleted(DomainEvent):
    """Raised when an order reaches a ``done`` status."""

    amount_paid: Decimal


@dataclass(frozen=True, kw_only=True)
class OrderCancelled(DomainEvent):
    """Raised when an order reaches a ``cancelled`` status."""

    reason: str = ""
    refunded: Decimal = Decimal("0")


@dataclass(frozen=True, kw_only=True)
class OrderPutOnHold(DomainEvent):
    """Raised when an order reaches a ``pending`` status."""

    expected_resume_date: Optional[str] = None


@dataclass(frozen=True, kw_only=True)
class PaymentRecorded(DomainEvent):
    """Raised for every payment history entry, refunds included."""

    amount: Decimal
    entry_type: str
