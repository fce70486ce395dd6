"""Customer records referenced by workshop orders.

Business rules implemented:
- E-mail is unique across customers (case-insensitive, stored lower-case).
- Phone numbers are stored digits-only so look-ups ignore formatting.
- Soft delete via ``deleted_at`` (inherited from SoftDeleteModel); orders
  keep their own snapshot of the customer's contact details.
- Contact details are masked in ``__str__`` so they never reach the logs.
"""

from __future__ import annotations

import re

from django.db import models

from modules.core.models import SoftDeleteModel


class Customer(SoftDeleteModel):
    """Customer aggregate root."""

    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=254, unique=True)
    phone = models.CharField(max_length=20, blank=True, default="")
    address = models.TextField(blank=True, default="")
    notes = models.TextField(blank=True, default="")
    is_active = models.BooleanField(default=True)

    class Meta:
        db_table = "customers"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="customers_created_idx"),
            models.Index(fields=["is_active"], name="customers_active_idx"),
            models.Index(fields=["name"], name="customers_name_idx"),
        ]

    # ------------------------------------------------------------------
    # Sanitisation
    # ------------------------------------------------------------------

    @staticmethod
    def sanitize_phone(value: str) -> str:
        """Strip everything except digits and a leading ``+``."""
        value = (value or "").strip()
        prefix = "+" if value.startswith("+") else ""
        return prefix + re.sub(r"\D", "", value)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def save(self, *args, **kwargs) -> None:
        if self.email:
            self.email = self.email.strip().lower()
        if self.phone:
            self.phone = self.sanitize_phone(self.phone)
        super().save(*args, **kwargs)

    # ------------------------------------------------------------------
    # Display
    # ------------------------------------------------------------------

    def __str__(self) -> str:
        suffix = self.phone[-4:] if self.phone else "????"
        return f"{self.name} (phone: ***{suffix})"
