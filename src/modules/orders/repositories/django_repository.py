"""Django ORM implementation of the Order repository.

Satisfies ``IOrderRepository`` using Django's QuerySet API.
All write operations are wrapped in ``transaction.atomic()`` so the Order
aggregate (Order + line groups + payments + history + outbox rows) is
persisted atomically.

Concurrency control on transitions uses ``select_for_update()``: the
caller locks the order before the engine reads it, so the financial
preconditions cannot change before the patch is written.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Count

from modules.core.outbox import record_domain_events
from modules.orders.constants import INVOICE_NUMBER_START
from modules.orders.dtos import PaymentEntryDTO
from modules.orders.models import Order, OrderLineGroup, OrderStatusHistory, PaymentEntry
from modules.orders.repositories.interfaces import IOrderRepository
from modules.orders.transitions import OrderPatch

logger = structlog.get_logger(__name__)

RELATED = ("line_groups", "payments", "status_history")


class OrderDjangoRepository(IOrderRepository):
    """Concrete Order repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Create (aggregate root + children)
    # ------------------------------------------------------------------

    @transaction.atomic
    def create(self, data: Dict[str, Any]) -> Order:
        fields = dict(data)
        line_groups = fields.pop("line_groups", [])

        order = Order(**fields)
        order.save()

        OrderLineGroup.objects.bulk_create(
            [
                OrderLineGroup(order=order, position=position, **group)
                for position, group in enumerate(line_groups, start=1)
            ]
        )

        log = logger.bind(order_id=str(order.id), line_group_count=len(line_groups))
        log.info("order.persisted", invoice_number=order.invoice_number)
        return order

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[Order]:
        """Retrieve a live order with line groups, payments and history.

        Returns ``None`` for deleted, non-existent or malformed IDs.
        """
        try:
            return (
                Order.objects.alive()
                .select_related("customer")
                .prefetch_related(*RELATED)
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve a live order with a row-level lock (SELECT FOR UPDATE).

        Children are prefetched after the lock is taken, so the snapshot
        built from them is consistent with the locked row.
        """
        try:
            return (
                Order.objects.alive()
                .select_for_update()
                .prefetch_related(*RELATED)
                .filter(id=id)
                .first()
            )
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        queryset = Order.objects.alive().prefetch_related("line_groups")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    # ------------------------------------------------------------------
    # Save / Delete (IRepository contract)
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: Order) -> Order:
        """Persist an order and the domain events it collected."""
        entity.save()
        outbox = record_domain_events(entity, topic="orders")
        logger.info("order.saved", order_id=str(entity.id), event_count=len(outbox))
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Soft-delete an order by ID."""
        order = self.get_by_id(id)
        if not order:
            return False
        order.delete()
        logger.info("order.soft_deleted", order_id=str(id))
        return True

    # ------------------------------------------------------------------
    # Transition writes
    # ------------------------------------------------------------------

    @transaction.atomic
    def apply_patch(self, order: Order, patch: OrderPatch, notes: str = "") -> Order:
        old_status = order.status_value
        updates = patch.field_updates()
        for field, value in updates.items():
            setattr(order, field, value)
        order.save(update_fields=list(updates))

        if patch.payment_entry is not None:
            self.add_payment(order.id, patch.payment_entry)
        self.add_history(
            order_id=order.id,
            status=patch.status_value,
            notes=notes,
            old_status=old_status,
        )
        outbox = record_domain_events(order, topic="orders")

        logger.info(
            "order.patch_applied",
            order_id=str(order.id),
            fields=sorted(updates),
            event_count=len(outbox),
        )
        return order

    @transaction.atomic
    def add_history(
        self,
        order_id: UUID,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
    ) -> OrderStatusHistory:
        """Record a status write in the order's audit trail."""
        history = OrderStatusHistory(
            order_id=order_id,
            old_status=old_status,
            new_status=status,
            notes=notes,
        )
        history.save()

        logger.info(
            "order.history_added",
            order_id=str(order_id),
            old_status=old_status,
            new_status=status,
        )
        return history

    @transaction.atomic
    def add_payment(self, order_id: UUID, entry: PaymentEntryDTO) -> PaymentEntry:
        payment = PaymentEntry(
            order_id=order_id,
            amount=entry.amount,
            paid_at=entry.paid_at,
            entry_type=entry.entry_type,
            method=entry.method,
            description=entry.description,
        )
        payment.save()
        logger.info(
            "order.payment_added",
            order_id=str(order_id),
            amount=str(entry.amount),
            entry_type=entry.entry_type,
        )
        return payment

    # ------------------------------------------------------------------
    # Catalog usage and numbering
    # ------------------------------------------------------------------

    def count_with_status(self, status_value: str) -> int:
        return Order.objects.alive().filter(status_value=status_value).count()

    def counts_by_status(self) -> Dict[str, int]:
        rows = (
            Order.objects.alive()
            .order_by()
            .values("status_value")
            .annotate(total=Count("id"))
        )
        return {row["status_value"]: row["total"] for row in rows}

    def invoice_number_exists(self, invoice_number: str) -> bool:
        return Order.objects.filter(invoice_number=invoice_number).exists()

    def next_invoice_number(self) -> str:
        numbers = Order.objects.filter(invoice_number__regex=r"^[0-9]+$").values_list(
            "invoice_number", flat=True
        )
        highest = max((int(number) for number in numbers), default=None)
        if highest is None:
            return str(INVOICE_NUMBER_START)
        return str(highest + 1)
