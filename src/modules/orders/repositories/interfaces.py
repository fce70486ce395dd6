"""Order repository interface.

Extends ``IRepository[Order]`` with what the Order aggregate needs:
atomic creation with line groups, atomic application of a transition
patch, payment/status history and the usage counts the status catalog
relies on.

The Service Layer depends exclusively on this contract (DIP).
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.orders.dtos import PaymentEntryDTO
    from modules.orders.models import Order, OrderStatusHistory, PaymentEntry
    from modules.orders.transitions import OrderPatch


class IOrderRepository(IRepository["Order"]):
    """Repository contract for the Order aggregate root.

    The aggregate includes OrderLineGroup, PaymentEntry and
    OrderStatusHistory children.  Mutations must be atomic.
    """

    @abstractmethod
    def create(self, data: Dict[str, Any]) -> Order:
        """Create an order with its line groups atomically.

        ``data`` holds the Order fields plus ``line_groups`` (list of
        field dicts, in display order).
        """

    @abstractmethod
    def get_for_update(self, id: str) -> Optional[Order]:
        """Retrieve an order with a row-level lock for the current transaction."""

    @abstractmethod
    def apply_patch(self, order: Order, patch: OrderPatch, notes: str = "") -> Order:
        """Write a transition patch, its payment entry and history row atomically."""

    @abstractmethod
    def add_history(
        self,
        order_id: UUID,
        status: str,
        notes: str = "",
        old_status: Optional[str] = None,
    ) -> OrderStatusHistory:
        """Record a status write in the order's audit trail."""

    @abstractmethod
    def add_payment(self, order_id: UUID, entry: PaymentEntryDTO) -> PaymentEntry:
        """Append a payment history entry."""

    @abstractmethod
    def count_with_status(self, status_value: str) -> int:
        """Number of live orders whose status is *status_value*."""

    @abstractmethod
    def counts_by_status(self) -> Dict[str, int]:
        """Live order counts keyed by status value."""

    @abstractmethod
    def invoice_number_exists(self, invoice_number: str) -> bool:
        """Whether any order, deleted ones included, uses *invoice_number*."""

    @abstractmethod
    def next_invoice_number(self) -> str:
        """Highest numeric invoice number plus one."""
