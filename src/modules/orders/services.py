"""Order service layer (Use Cases).

Orchestrates order intake, payments and status transitions.  All write
operations are atomic; the service defines the unit-of-work boundary.

Business rules enforced:
- New orders start in the catalog's default status.
- A line group naming a material company must name one from the catalog;
  the stored name is the catalog spelling.
- Invoice numbers are unique; omitted ones are allocated from the sequence.
- Manual payments are positive; a received deposit tops ``amount_paid``
  up to the deposit.
- Status changes always go through ``StatusTransitionEngine``.  The order
  row is locked and the engine re-run inside the writing transaction, so
  an outcome computed from stale totals is never persisted.
- Every status write records history and domain events in the same
  transaction.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, List, Optional, Tuple
from uuid import UUID

import structlog
from django.db import transaction
from django.utils import timezone

from modules.core.exceptions import translate_persistence_errors
from modules.customers.exceptions import CustomerNotFound
from modules.materials.exceptions import UnknownMaterialCompany
from modules.orders.constants import PaymentEntryType
from modules.orders.dtos import OrderSnapshotDTO, PaymentEntryDTO
from modules.orders.events import (
    OrderCancelled,
    OrderCompleted,
    OrderCreated,
    OrderPutOnHold,
    OrderStatusChanged,
    PaymentRecorded,
)
from modules.orders.exceptions import (
    DuplicateInvoiceNumber,
    NoDepositRequired,
    OrderNotFound,
    UnexpectedTransitionStep,
)
from modules.orders.financials import (
    CostBreakdown,
    DepositStatus,
    get_cost_breakdown,
    get_deposit_status,
    money,
)
from modules.orders.transitions import (
    Apply,
    OrderPatch,
    RequiresInput,
    RequiresResolution,
    StatusTransitionEngine,
    TransitionOutcome,
)
from modules.statuses.constants import EndStateType
from modules.statuses.dtos import StatusDefinitionDTO
from modules.statuses.exceptions import NoDefaultStatus

if TYPE_CHECKING:
    from datetime import datetime

    from modules.customers.repositories.interfaces import ICustomerRepository
    from modules.materials.repositories.interfaces import IMaterialCompanyRepository
    from modules.orders.dtos import CreateOrderDTO, RecordPaymentDTO, TransitionInputDTO
    from modules.orders.models import Order
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.statuses.repositories.interfaces import IStatusRepository

logger = structlog.get_logger(__name__)


class OrderService:
    """Application service for Order use-cases.

    Receives repositories via constructor injection (DIP).  The catalog
    is read through ``status_repository`` on every transition and handed
    to a fresh engine.
    """

    def __init__(
        self,
        order_repository: IOrderRepository,
        status_repository: IStatusRepository,
        customer_repository: ICustomerRepository,
        material_repository: IMaterialCompanyRepository,
        clock: Callable[[], datetime] = timezone.now,
    ) -> None:
        self._order_repo = order_repository
        self._status_repo = status_repository
        self._customer_repo = customer_repository
        self._material_repo = material_repository
        self._clock = clock

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @translate_persistence_errors
    @transaction.atomic
    def create_order(self, dto: CreateOrderDTO) -> Order:
        """Create an order in the default status.

        Raises:
            NoDefaultStatus: the catalog has no default status.
            DuplicateInvoiceNumber: the invoice number is taken.
            CustomerNotFound: ``customer_id`` does not exist.
            UnknownMaterialCompany: a line group names a company missing
                from the catalog.
        """
        default = self._status_repo.get_default()
        if not default:
            raise NoDefaultStatus()

        if dto.invoice_number:
            if self._order_repo.invoice_number_exists(dto.invoice_number):
                raise DuplicateInvoiceNumber(
                    f"Invoice number {dto.invoice_number} is already used."
                )
            invoice_number = dto.invoice_number
        else:
            invoice_number = self._order_repo.next_invoice_number()

        log = logger.bind(invoice_number=invoice_number)
        log.info("order.creation_started")

        snapshot = self._customer_snapshot(dto)
        line_groups = self._line_groups(dto)
        now = self._clock()
        order = self._order_repo.create(
            {
                **snapshot,
                "invoice_number": invoice_number,
                "description": dto.description,
                "platform": dto.platform,
                "timeline": dto.timeline,
                "start_date": dto.start_date,
                "deposit_required": money(dto.deposit_required),
                "amount_paid": money(dto.initial_payment),
                "pickup_delivery_enabled": dto.pickup_delivery_enabled,
                "pickup_delivery_cost": money(dto.pickup_delivery_cost),
                "status_value": default.value,
                "status_updated_at": now,
                "line_groups": line_groups,
            }
        )

        if dto.initial_payment > 0:
            entry = PaymentEntryDTO(
                amount=money(dto.initial_payment),
                paid_at=timezone.localdate(now),
                entry_type=PaymentEntryType.INITIAL,
                method=dto.initial_payment_method,
                description="Payment at order creation",
            )
            self._order_repo.add_payment(order.id, entry)
            order.add_domain_event(
                PaymentRecorded(
                    aggregate_id=order.id,
                    amount=entry.amount,
                    entry_type=entry.entry_type,
                )
            )

        order.add_domain_event(
            OrderCreated(
                aggregate_id=order.id,
                invoice_number=invoice_number,
                status_value=default.value,
            )
        )
        self._order_repo.save(order)
        self._order_repo.add_history(
            order_id=order.id, status=default.value, notes="Order created"
        )

        log.info("order.created", order_id=str(order.id), status=default.value)
        return self._order_repo.get_by_id(str(order.id)) or order

    @translate_persistence_errors
    @transaction.atomic
    def record_payment(self, order_id: str, dto: RecordPaymentDTO) -> Order:
        """Append a manual payment and raise ``amount_paid`` by its amount.

        Raises:
            OrderNotFound: order does not exist.
        """
        order = self._lock(order_id)
        entry = PaymentEntryDTO(
            amount=money(dto.amount),
            paid_at=dto.paid_at,
            entry_type=PaymentEntryType.PAYMENT,
            method=dto.method,
            description=dto.description,
        )
        self._order_repo.add_payment(order.id, entry)

        order.amount_paid = money(order.amount_paid) + entry.amount
        order.add_domain_event(
            PaymentRecorded(
                aggregate_id=order.id, amount=entry.amount, entry_type=entry.entry_type
            )
        )
        self._order_repo.save(order)

        logger.info(
            "order.payment_recorded",
            order_id=str(order.id),
            amount=str(entry.amount),
            amount_paid=str(order.amount_paid),
        )
        return self._order_repo.get_by_id(str(order.id)) or order

    @translate_persistence_errors
    @transaction.atomic
    def mark_deposit_received(self, order_id: str) -> Order:
        """Flag the deposit as received, topping ``amount_paid`` up to it.

        Raises:
            OrderNotFound: order does not exist.
            NoDepositRequired: the order has no deposit.
        """
        order = self._lock(order_id)
        deposit = money(order.deposit_required)
        if deposit <= 0:
            raise NoDepositRequired()

        now = self._clock()
        shortfall = deposit - money(order.amount_paid)
        if shortfall > 0:
            entry = PaymentEntryDTO(
                amount=shortfall,
                paid_at=timezone.localdate(now),
                entry_type=PaymentEntryType.DEPOSIT,
                description="Deposit received",
            )
            self._order_repo.add_payment(order.id, entry)
            order.amount_paid = deposit
            order.add_domain_event(
                PaymentRecorded(
                    aggregate_id=order.id, amount=shortfall, entry_type=entry.entry_type
                )
            )

        order.deposit_received = True
        order.deposit_received_at = now
        self._order_repo.save(order)

        logger.info(
            "order.deposit_received",
            order_id=str(order.id),
            deposit=str(deposit),
            topped_up=str(max(shortfall, 0)),
        )
        return self._order_repo.get_by_id(str(order.id)) or order

    @translate_persistence_errors
    @transaction.atomic
    def delete_order(self, order_id: str) -> None:
        """Soft-delete an order; its payments and history are kept.

        Raises:
            OrderNotFound: order does not exist.
        """
        if not self._order_repo.delete(order_id):
            raise OrderNotFound(f"Order {order_id} not found.")
        logger.info("order.deleted", order_id=str(order_id))

    # ------------------------------------------------------------------
    # Status transitions
    # ------------------------------------------------------------------

    @translate_persistence_errors
    @transaction.atomic
    def request_status_change(
        self, order_id: str, status_value: str
    ) -> Tuple[TransitionOutcome, Order]:
        """Run the engine; an ``Apply`` outcome is persisted immediately.

        Returns the outcome and the (possibly updated) order.

        Raises:
            OrderNotFound: order does not exist.
            UnknownStatus: the status is not in the catalog.
        """
        order, engine, snapshot = self._prepare(order_id)
        outcome = engine.request_transition(snapshot, status_value)

        log = logger.bind(
            order_id=str(order.id),
            current_status=order.status_value,
            new_status=status_value,
            outcome=outcome.outcome,
        )
        if isinstance(outcome, Apply):
            order = self._persist(order, engine, outcome.patch, snapshot)
        log.info("order.transition_requested")
        return outcome, order

    @translate_persistence_errors
    @transaction.atomic
    def submit_transition_input(
        self, order_id: str, status_value: str, dto: TransitionInputDTO
    ) -> Order:
        """Complete a transition that required input.

        Raises:
            OrderNotFound, UnknownStatus
            UnexpectedTransitionStep: the transition does not need input now.
            MissingCancellationReason, MissingResumeDate, InvalidResumeDate
        """
        order, engine, snapshot = self._prepare(order_id)
        outcome = engine.request_transition(snapshot, status_value)
        if not isinstance(outcome, RequiresInput):
            logger.warning(
                "order.unexpected_transition_step",
                order_id=str(order.id),
                expected=RequiresInput.outcome,
                actual=outcome.outcome,
            )
            raise UnexpectedTransitionStep(
                f"Transition to '{status_value}' is {outcome.outcome}, not requires_input."
            )

        patch = engine.submit_input(snapshot, outcome, dto)
        return self._persist(order, engine, patch, snapshot)

    @translate_persistence_errors
    @transaction.atomic
    def resolve_transition(self, order_id: str, status_value: str, choice: str) -> Order:
        """Apply the offered remediation and the status write together.

        The engine is re-run on the locked order, so the remediation is
        computed from the current totals, not from the ones the client saw.

        Raises:
            OrderNotFound, UnknownStatus
            UnexpectedTransitionStep: no resolution is needed any more.
            ResolutionMismatch: *choice* is not the offered remediation.
        """
        order, engine, snapshot = self._prepare(order_id)
        outcome = engine.request_transition(snapshot, status_value)
        if not isinstance(outcome, RequiresResolution):
            logger.warning(
                "order.unexpected_transition_step",
                order_id=str(order.id),
                expected=RequiresResolution.outcome,
                actual=outcome.outcome,
            )
            raise UnexpectedTransitionStep(
                f"Transition to '{status_value}' is {outcome.outcome}, "
                "not requires_resolution."
            )

        patch = engine.apply_resolution(snapshot, outcome, choice)
        return self._persist(order, engine, patch, snapshot)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_order(self, order_id: str) -> Order:
        """Retrieve a single order by ID.

        Raises:
            OrderNotFound: if the order does not exist.
        """
        order = self._order_repo.get_by_id(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def list_orders(self, filters: Optional[Dict[str, Any]] = None) -> List[Order]:
        """Return a list of orders, optionally filtered."""
        return self._order_repo.list(filters)

    def get_financials(self, order_id: str) -> Tuple[CostBreakdown, DepositStatus]:
        snapshot = OrderSnapshotDTO.from_entity(self.get_order(order_id))
        return get_cost_breakdown(snapshot), get_deposit_status(snapshot)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _lock(self, order_id: str) -> Order:
        order = self._order_repo.get_for_update(order_id)
        if not order:
            raise OrderNotFound(f"Order {order_id} not found.")
        return order

    def _prepare(
        self, order_id: str
    ) -> Tuple[Order, StatusTransitionEngine, OrderSnapshotDTO]:
        order = self._lock(order_id)
        catalog = [StatusDefinitionDTO.from_entity(s) for s in self._status_repo.list()]
        engine = StatusTransitionEngine(catalog, clock=self._clock)
        return order, engine, OrderSnapshotDTO.from_entity(order)

    def _persist(
        self,
        order: Order,
        engine: StatusTransitionEngine,
        patch: OrderPatch,
        snapshot: OrderSnapshotDTO,
    ) -> Order:
        target = engine.status_for(patch.status_value)
        old_status = order.status_value

        order.add_domain_event(
            OrderStatusChanged(
                aggregate_id=order.id,
                old_status=old_status,
                new_status=patch.status_value,
            )
        )
        for event in self._end_state_events(order.id, target, patch, snapshot):
            order.add_domain_event(event)

        self._order_repo.apply_patch(order, patch, notes=_history_note(target, patch))
        logger.info(
            "order.status_applied",
            order_id=str(order.id),
            old_status=old_status,
            new_status=patch.status_value,
            amount_paid=str(order.amount_paid),
        )
        return self._order_repo.get_by_id(str(order.id)) or order

    @staticmethod
    def _end_state_events(
        order_id: UUID,
        target: StatusDefinitionDTO,
        patch: OrderPatch,
        snapshot: OrderSnapshotDTO,
    ) -> List[Any]:
        events: List[Any] = []
        if patch.payment_entry is not None:
            events.append(
                PaymentRecorded(
                    aggregate_id=order_id,
                    amount=patch.payment_entry.amount,
                    entry_type=patch.payment_entry.entry_type,
                )
            )
        if target.end_state_type == EndStateType.DONE:
            events.append(
                OrderCompleted(aggregate_id=order_id, amount_paid=patch.amount_paid)
            )
        elif target.end_state_type == EndStateType.CANCELLED:
            events.append(
                OrderCancelled(
                    aggregate_id=order_id,
                    reason=patch.cancellation_reason or "",
                    refunded=money(snapshot.payment.amount_paid),
                )
            )
        elif target.end_state_type == EndStateType.PENDING:
            resume = patch.expected_resume_date
            events.append(
                OrderPutOnHold(
                    aggregate_id=order_id,
                    expected_resume_date=resume.isoformat() if resume else None,
                )
            )
        return events

    def _customer_snapshot(self, dto: CreateOrderDTO) -> Dict[str, Any]:
        if dto.customer_id is None:
            return {
                "customer": None,
                "customer_name": dto.customer_name,
                "customer_email": dto.customer_email or "",
                "customer_phone": dto.customer_phone,
                "customer_address": dto.customer_address,
            }

        customer = self._customer_repo.get_by_id(str(dto.customer_id))
        if not customer:
            raise CustomerNotFound(f"Customer {dto.customer_id} not found.")
        return {
            "customer": customer,
            "customer_name": dto.customer_name or customer.name,
            "customer_email": dto.customer_email or customer.email,
            "customer_phone": dto.customer_phone or customer.phone,
            "customer_address": dto.customer_address or customer.address,
        }


    def _line_groups(self, dto: CreateOrderDTO) -> List[Dict[str, Any]]:
        groups = [group.model_dump() for group in dto.line_groups]
        for index, group in enumerate(groups):
            name = group["material_company"].strip()
            if not name:
                continue
            company = self._material_repo.get_by_name(name)
            if not company:
                logger.warning("order.unknown_material_company", material_company=name)
                raise UnknownMaterialCompany(
                    f"Material company '{name}' is not in the catalog.",
                    attr=f"line_groups.{index}.material_company",
                )
            group["material_company"] = company.name
        return groups

def _history_note(target: StatusDefinitionDTO, patch: OrderPatch) -> str:
    if patch.cancellation_reason:
        return f"Cancelled: {patch.cancellation_reason}"
    if patch.expected_resume_date is not None:
        note = f"On hold until {patch.expected_resume_date.isoformat()}"
        return f"{note}: {patch.pending_notes}" if patch.pending_notes else note
    if patch.payment_entry is not None:
        return patch.payment_entry.description
    return f"Status changed to {target.label}"
