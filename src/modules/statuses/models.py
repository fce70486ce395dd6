"""StatusDefinition model.

Business rules implemented:
- ``value`` is the stable key orders reference; unique across the catalog.
- ``end_state_type`` is empty whenever ``is_end_state`` is false
  (normalised on every save).
- At most one definition carries ``is_default``; the Service Layer clears
  the others in the same transaction that sets a new default.
- ``sort_order`` is unique and dense; the Service Layer renumbers the
  catalog in one batch on reorder or on an explicit position.  It carries
  no DB unique constraint because a batch passes through intermediate
  states.
"""

from __future__ import annotations

from typing import Any

from django.db import models

from modules.core.models import BaseModel
from modules.statuses.constants import DEFAULT_COLOR, EndStateType


class StatusDefinition(BaseModel):
    """A named order status, optionally terminal (done/cancelled/pending)."""

    label: models.CharField = models.CharField(max_length=100)
    value: models.CharField = models.CharField(max_length=100, unique=True)
    color: models.CharField = models.CharField(max_length=7, default=DEFAULT_COLOR)
    description: models.TextField = models.TextField(blank=True, default="")
    is_end_state: models.BooleanField = models.BooleanField(default=False)
    end_state_type: models.CharField = models.CharField(
        max_length=20,
        choices=EndStateType.choices,
        blank=True,
        default=EndStateType.NONE,
    )
    is_default: models.BooleanField = models.BooleanField(default=False)
    sort_order: models.PositiveIntegerField = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = "status_definitions"
        ordering = ["sort_order", "created_at"]
        indexes = [
            models.Index(fields=["sort_order"], name="status_sort_order_idx"),
        ]

    def save(self, *args: Any, **kwargs: Any) -> None:
        if not self.is_end_state:
            self.end_state_type = EndStateType.NONE
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return f"{self.label} ({self.value})"
