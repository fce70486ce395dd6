"""Order domain constants.

Payment entry types, transition outcome names and invoice numbering.
"""

from django.db import models


class PaymentEntryType(models.TextChoices):
    PAYMENT = "payment", "Payment"
    DEPOSIT = "deposit", "Deposit"
    INITIAL = "initial", "Initial Payment"
    STATUS_FULL_PAYMENT = "status_full_payment", "Status Change - Full Payment"
    STATUS_REFUND = "status_refund", "Status Change - Refund"


class TransitionOutcomeKind(models.TextChoices):
    APPLIED = "applied", "Applied"
    REQUIRES_INPUT = "requires_input", "Requires input"
    REQUIRES_RESOLUTION = "requires_resolution", "Requires resolution"


SYSTEM_PAYMENT_METHOD = "System Adjustment"

# Customer invoice numbers are a gapless numeric sequence.
INVOICE_NUMBER_START = 101660

MONEY_MAX_DIGITS = 12
MONEY_DECIMAL_PLACES = 2
