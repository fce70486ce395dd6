"""Order domain exceptions.

Raised by the transition engine and the Service Layer when business rules
are violated; rendered by the API-wide exception handler.
"""

from __future__ import annotations

from rest_framework import status

from modules.core.exceptions import DomainError


class OrderNotFound(DomainError):
    """The requested order does not exist or has been soft-deleted."""

    code = "order_not_found"
    status_code = status.HTTP_404_NOT_FOUND


class DuplicateInvoiceNumber(DomainError):
    """Another order already uses this invoice number."""

    code = "duplicate_invoice_number"
    status_code = status.HTTP_409_CONFLICT


class NoDepositRequired(DomainError):
    """The order has no deposit to receive."""

    code = "no_deposit_required"


class MissingCancellationReason(DomainError):
    """A cancellation reason is required."""

    code = "missing_cancellation_reason"


class MissingResumeDate(DomainError):
    """An expected resume date is required to put an order on hold."""

    code = "missing_resume_date"


class InvalidResumeDate(DomainError):
    """The expected resume date cannot be in the past."""

    code = "invalid_resume_date"


class ResolutionMismatch(DomainError):
    """The chosen remediation is not the one that was offered."""

    code = "resolution_mismatch"


class UnexpectedTransitionStep(DomainError):
    """The transition no longer needs this step; request it again."""

    code = "unexpected_transition_step"
    status_code = status.HTTP_409_CONFLICT
