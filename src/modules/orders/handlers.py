"""Event handlers for Orders domain events.

Handlers run after the producing transaction commits (see
``modules.core.outbox``); they only log.
"""

from __future__ import annotations

import structlog

from modules.orders.events import (
    OrderCancelled,
    OrderCompleted,
    OrderCreated,
    OrderPutOnHold,
    OrderStatusChanged,
    PaymentRecorded,
)
from shared.domain.bus import IEventHandler

logger = structlog.get_logger(__name__)


class OrderCreatedHandler(IEventHandler[OrderCreated]):
    def handle(self, event: OrderCreated) -> None:
        logger.info(
            "order.event.created",
            order_id=str(event.aggregate_id),
            invoice_number=event.invoice_number,
            status=event.status_value,
        )


class OrderStatusChangedHandler(IEventHandler[OrderStatusChanged]):
    def handle(self, event: OrderStatusChanged) -> None:
        logger.info(
            "order.event.status_changed",
            order_id=str(event.aggregate_id),
            old_status=event.old_status,
            new_status=event.new_status,
        )


class OrderCompletedHandler(IEventHandler[OrderCompleted]):
    def handle(self, event: OrderCompleted) -> None:
        logger.info(
            "order.event.completed",
            order_id=str(event.aggregate_id),
            amount_paid=str(event.amount_paid),
        )


class OrderCancelledHandler(IEventHandler[OrderCancelled]):
    def handle(self, event: OrderCancelled) -> None:
        logger.info(
            "order.event.cancelled",
            order_id=str(event.aggregate_id),
            refunded=str(event.refunded),
        )


class OrderPutOnHoldHandler(IEventHandler[OrderPutOnHold]):
    def handle(self, event: OrderPutOnHold) -> None:
        logger.info(
            "order.event.put_on_hold",
            order_id=str(event.aggregate_id),
            expected_resume_date=event.expected_resume_date,
        )


class PaymentRecordedHandler(IEventHandler[PaymentRecorded]):
    def handle(self, event: PaymentRecorded) -> None:
        logger.info(
            "order.event.payment_recorded",
            order_id=str(event.aggregate_id),
            amount=str(event.amount),
            entry_type=event.entry_type,
        )


order_created_handler = OrderCreatedHandler()
order_status_changed_handler = OrderStatusChangedHandler()
order_completed_handler = OrderCompletedHandler()
order_cancelled_handler = OrderCancelledHandler()
order_put_on_hold_handler = OrderPutOnHoldHandler()
payment_recorded_handler = PaymentRecordedHandler()
