"""Order money rules.

Pure functions over ``OrderSnapshotDTO``: no ORM access, no clock.  Every
amount is a ``Decimal``; unusable inputs count as zero and results are
rounded half-up to cents.

Total of an order::

    sum over line groups of
        material_unit_price * material_quantity
      + labour_unit_price * labour_quantity
      + foam_unit_price * foam_quantity      (when foam applies)
    + pickup_delivery_cost                   (when pickup/delivery is enabled)
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from modules.orders.dtos import LineGroupDTO, OrderSnapshotDTO

ZERO = Decimal("0")
CENT = Decimal("0.01")


def to_decimal(value: Any) -> Decimal:
    """Coerce *value* to a finite ``Decimal``; anything else becomes ``0``."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        result = value
    elif isinstance(value, (int, float)):
        result = Decimal(str(value))
    elif isinstance(value, str):
        try:
            result = Decimal(value.strip() or "0")
        except InvalidOperation:
            return ZERO
    else:
        return ZERO
    return result if result.is_finite() else ZERO


def money(value: Any) -> Decimal:
    return to_decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class CostBreakdown:
    material: Decimal
    labour: Decimal
    foam: Decimal
    pickup_delivery: Decimal
    total: Decimal


@dataclass(frozen=True)
class DepositStatus:
    total: Decimal
    deposit: Decimal
    amount_paid: Decimal
    remaining: Decimal
    is_deposit_paid: bool
    is_fully_paid: bool


def foam_applies(group: LineGroupDTO) -> bool:
    """Foam is charged when enabled, or whenever it carries a price."""
    return group.foam_enabled or group.foam_unit_price > ZERO


def get_cost_breakdown(order: OrderSnapshotDTO) -> CostBreakdown:
    material = labour = foam = ZERO
    for group in order.line_groups:
        material += group.material_unit_price * group.material_quantity
        labour += group.labour_unit_price * group.labour_quantity
        if foam_applies(group):
            foam += group.foam_unit_price * group.foam_quantity

    payment = order.payment
    pickup_delivery = (
        payment.pickup_delivery_cost if payment.pickup_delivery_enabled else ZERO
    )
    return CostBreakdown(
        material=money(material),
        labour=money(labour),
        foam=money(foam),
        pickup_delivery=money(pickup_delivery),
        total=money(material + labour + foam + pickup_delivery),
    )


def compute_order_total(order: OrderSnapshotDTO) -> Decimal:
    return get_cost_breakdown(order).total


def get_deposit_status(order: OrderSnapshotDTO) -> DepositStatus:
    total = compute_order_total(order)
    deposit = money(order.payment.deposit_required)
    amount_paid = money(order.payment.amount_paid)
    return DepositStatus(
        total=total,
        deposit=deposit,
        amount_paid=amount_paid,
        remaining=total - amount_paid,
        is_deposit_paid=amount_paid >= deposit,
        is_fully_paid=amount_paid >= total,
    )
