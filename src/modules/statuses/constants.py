"""Status catalog constants.

``DEFAULT_STATUSES`` is the catalog seeded on a fresh installation; every
later change goes through ``StatusCatalogService``.
"""

from django.db import models


class EndStateType(models.TextChoices):
    NONE = "", "None"
    DONE = "done", "Done"
    CANCELLED = "cancelled", "Cancelled"
    PENDING = "pending", "Pending"


class Remediation(models.TextChoices):
    MARK_FULLY_PAID = "mark_fully_paid", "Mark the shortfall as paid"
    REFUND_TO_ZERO = "refund_to_zero", "Refund to zero"


DEFAULT_COLOR = "#2196f3"

DEFAULT_STATUSES: tuple[dict, ...] = (
    {
        "label": "In Progress",
        "value": "in_progress",
        "color": "#2196f3",
        "description": "Order accepted and being worked on",
        "is_default": True,
    },
    {
        "label": "Ready",
        "value": "ready",
        "color": "#4caf50",
        "description": "Work finished, waiting for pickup or delivery",
    },
    {
        "label": "Done",
        "value": "done",
        "color": "#607d8b",
        "description": "Delivered and fully paid",
        "is_end_state": True,
        "end_state_type": EndStateType.DONE,
    },
    {
        "label": "Cancelled",
        "value": "cancelled",
        "color": "#f44336",
        "description": "Order cancelled, any payment refunded",
        "is_end_state": True,
        "end_state_type": EndStateType.CANCELLED,
    },
    {
        "label": "Pending",
        "value": "pending",
        "color": "#ff9800",
        "description": "Order postponed by customer - waiting for resume",
        "is_end_state": True,
        "end_state_type": EndStateType.PENDING,
    },
)
