"""Status transition engine.

Decides what moving an order to a catalog status entails.  The engine
never touches the database: it reads an ``OrderSnapshotDTO`` and the
catalog it was built with, and answers with one of

``Apply``
    write the carried ``OrderPatch`` now;
``RequiresInput``
    collect the named fields, then call ``submit_input``;
``RequiresResolution``
    payment and status disagree; the single offered remediation must be
    chosen through ``apply_resolution``.

Rules by target status:

==============  ===========================================================
regular         always ``Apply`` (status write only)
done            paid < total: resolution ``mark_fully_paid``;
                otherwise ``Apply`` with ``amount_paid = total``
cancelled       paid > 0: resolution ``refund_to_zero``;
                otherwise input ``cancellation_reason``
pending         input ``expected_resume_date`` (+ optional ``pending_notes``);
                payment is cleared
==============  ===========================================================

Payment checks run before any input is requested.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Callable, ClassVar, Dict, Iterable, Optional, Tuple, Union

from django.utils import timezone

from modules.orders.constants import (
    SYSTEM_PAYMENT_METHOD,
    PaymentEntryType,
    TransitionOutcomeKind,
)
from modules.orders.dtos import (
    OrderSnapshotDTO,
    PaymentEntryDTO,
    StatusDefinitionDTO,
    TransitionInputDTO,
)
from modules.orders.exceptions import (
    InvalidResumeDate,
    MissingCancellationReason,
    MissingResumeDate,
    ResolutionMismatch,
    UnexpectedTransitionStep,
)
from modules.orders.financials import ZERO, compute_order_total, money
from modules.statuses.constants import EndStateType, Remediation
from modules.statuses.exceptions import UnknownStatus

Clock = Callable[[], datetime]


@dataclass(frozen=True)
class OrderPatch:
    """Field writes for one transition, persisted in a single transaction.

    ``None`` means "leave unchanged"; ``payment_entry`` is appended to the
    payment history.
    """

    status_value: str
    status_updated_at: Optional[datetime] = None
    amount_paid: Optional[Decimal] = None
    completed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    pending_at: Optional[datetime] = None
    expected_resume_date: Optional[date] = None
    pending_notes: Optional[str] = None
    payment_entry: Optional[PaymentEntryDTO] = None

    def field_updates(self) -> Dict[str, Any]:
        updates = {}
        for item in fields(self):
            value = getattr(self, item.name)
            if item.name != "payment_entry" and value is not None:
                updates[item.name] = value
        return updates


@dataclass(frozen=True)
class Apply:
    patch: OrderPatch

    outcome: ClassVar[str] = TransitionOutcomeKind.APPLIED


@dataclass(frozen=True)
class RequiresInput:
    status: StatusDefinitionDTO
    required: Tuple[str, ...]
    optional: Tuple[str, ...] = ()

    outcome: ClassVar[str] = TransitionOutcomeKind.REQUIRES_INPUT


@dataclass(frozen=True)
class RequiresResolution:
    status: StatusDefinitionDTO
    kind: str
    remediation: str
    pending_amount: Decimal = ZERO
    current_amount: Decimal = ZERO

    outcome: ClassVar[str] = TransitionOutcomeKind.REQUIRES_RESOLUTION


TransitionOutcome = Union[Apply, RequiresInput, RequiresResolution]


class StatusTransitionEngine:
    """Validates status changes against an explicitly supplied catalog."""

    def __init__(
        self,
        catalog: Iterable[StatusDefinitionDTO],
        clock: Clock = timezone.now,
    ) -> None:
        self._catalog: Dict[str, StatusDefinitionDTO] = {
            status.value: status for status in catalog
        }
        self._clock = clock

    def status_for(self, status_value: str) -> StatusDefinitionDTO:
        try:
            return self._catalog[status_value]
        except KeyError:
            raise UnknownStatus(f"Status '{status_value}' is not in the catalog.") from None

    # ------------------------------------------------------------------
    # Step 1: request
    # ------------------------------------------------------------------

    def request_transition(
        self, order: OrderSnapshotDTO, status_value: str
    ) -> TransitionOutcome:
        """Raises ``UnknownStatus`` when *status_value* is not in the catalog."""
        target = self.status_for(status_value)

        if not target.is_end_state:
            return Apply(self._patch(target, self._clock()))

        paid = money(order.payment.amount_paid)

        if target.end_state_type == EndStateType.DONE:
            total = compute_order_total(order)
            if paid < total:
                return RequiresResolution(
                    status=target,
                    kind=EndStateType.DONE,
                    remediation=Remediation.MARK_FULLY_PAID,
                    pending_amount=total - paid,
                )
            now = self._clock()
            return Apply(
                self._patch(target, now, amount_paid=total, completed_at=now)
            )

        if target.end_state_type == EndStateType.CANCELLED:
            if paid > ZERO:
                return RequiresResolution(
                    status=target,
                    kind=EndStateType.CANCELLED,
                    remediation=Remediation.REFUND_TO_ZERO,
                    current_amount=paid,
                )
            return RequiresInput(status=target, required=("cancellation_reason",))

        return RequiresInput(
            status=target,
            required=("expected_resume_date",),
            optional=("pending_notes",),
        )

    # ------------------------------------------------------------------
    # Step 2a: collected input
    # ------------------------------------------------------------------

    def submit_input(
        self,
        order: OrderSnapshotDTO,
        outcome: RequiresInput,
        data: TransitionInputDTO,
    ) -> OrderPatch:
        """Validate the collected fields and build the patch.

        Raises:
            MissingCancellationReason: blank reason for a cancellation.
            MissingResumeDate: no resume date for a pending status.
            InvalidResumeDate: resume date before today.
        """
        target = outcome.status
        now = self._clock()

        if target.end_state_type == EndStateType.CANCELLED:
            reason = data.cancellation_reason.strip()
            if not reason:
                raise MissingCancellationReason()
            return self._patch(
                target,
                now,
                amount_paid=ZERO,
                cancellation_reason=reason,
                cancelled_at=now,
            )

        if target.end_state_type == EndStateType.PENDING:
            if data.expected_resume_date is None:
                raise MissingResumeDate()
            if data.expected_resume_date < timezone.localdate(now):
                raise InvalidResumeDate()
            return self._patch(
                target,
                now,
                amount_paid=ZERO,
                pending_at=now,
                expected_resume_date=data.expected_resume_date,
                pending_notes=data.pending_notes,
            )

        raise UnexpectedTransitionStep(
            f"Status '{target.value}' does not take transition input."
        )

    # ------------------------------------------------------------------
    # Step 2b: remediation
    # ------------------------------------------------------------------

    def apply_resolution(
        self,
        order: OrderSnapshotDTO,
        outcome: RequiresResolution,
        choice: str,
    ) -> OrderPatch:
        """Build the patch for the offered remediation.

        Raises ``ResolutionMismatch`` when *choice* is not the offered one.
        """
        if choice != outcome.remediation:
            raise ResolutionMismatch(
                f"Expected '{outcome.remediation}', got '{choice}'."
            )

        target = outcome.status
        now = self._clock()
        paid = money(order.payment.amount_paid)

        if outcome.kind == EndStateType.DONE:
            entry = PaymentEntryDTO(
                amount=outcome.pending_amount,
                paid_at=timezone.localdate(now),
                entry_type=PaymentEntryType.STATUS_FULL_PAYMENT,
                method=SYSTEM_PAYMENT_METHOD,
                description=f"Auto-payment for status change to {target.label}",
            )
            return self._patch(
                target,
                now,
                amount_paid=paid + outcome.pending_amount,
                completed_at=now,
                payment_entry=entry,
            )

        entry = PaymentEntryDTO(
            amount=-outcome.current_amount,
            paid_at=timezone.localdate(now),
            entry_type=PaymentEntryType.STATUS_REFUND,
            method=SYSTEM_PAYMENT_METHOD,
            description=f"Auto-refund for status change to {target.label}",
        )
        return self._patch(
            target,
            now,
            amount_paid=ZERO,
            cancelled_at=now,
            payment_entry=entry,
        )

    @staticmethod
    def _patch(target: StatusDefinitionDTO, now: datetime, **changes: Any) -> OrderPatch:
        return OrderPatch(status_value=target.value, status_updated_at=now, **changes)
