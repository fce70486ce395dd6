"""Material companies: the fabric suppliers line groups are priced from.

Business rules implemented:
- ``name`` is unique; look-ups from order line groups ignore case.
- ``sort_order`` is the manual display order of the supplier list.
- ``tax_rate`` is a percentage (0-100) kept for invoicing.
- Companies are removed physically; line groups store the company name
  as a snapshot, so existing orders are unaffected.
"""

from __future__ import annotations

from decimal import Decimal

from django.db import models

from modules.core.models import BaseModel

DEFAULT_TAX_RATE = Decimal("13.00")


class MaterialCompany(BaseModel):
    """A supplier in the material company catalog."""

    name = models.CharField(max_length=150, unique=True)
    contact_person = models.CharField(max_length=150, blank=True, default="")
    phone = models.CharField(max_length=20, blank=True, default="")
    email = models.EmailField(max_length=254, blank=True, default="")
    address = models.TextField(blank=True, default="")
    website = models.URLField(max_length=255, blank=True, default="")
    tax_rate = models.DecimalField(max_digits=5, decimal_places=2, default=DEFAULT_TAX_RATE)
    notes = models.TextField(blank=True, default="")
    sort_order = models.PositiveIntegerField(default=1)

    class Meta:
        db_table = "material_companies"
        ordering = ["sort_order", "created_at"]
        indexes = [
            models.Index(fields=["sort_order"], name="material_sort_order_idx"),
        ]

    def save(self, *args, **kwargs) -> None:
        self.name = (self.name or "").strip()
        if self.email:
            self.email = self.email.strip().lower()
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        return self.name
