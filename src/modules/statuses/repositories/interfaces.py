"""Status catalog repository interface.

``write_batch`` is the only way the Service Layer changes several
definitions at once (reorder, default switch); implementations must apply
the whole batch or nothing.
"""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Any, Dict, Optional, Sequence, Tuple
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.statuses.models import StatusDefinition

CatalogUpdate = Tuple[UUID, Dict[str, Any]]


class IStatusRepository(IRepository["StatusDefinition"]):
    """Repository contract for the status catalog.

    ``list`` returns definitions ordered by ``sort_order``.
    """

    @abstractmethod
    def get_by_value(self, value: str) -> Optional[StatusDefinition]:
        """Retrieve a definition by its machine key."""

    @abstractmethod
    def get_default(self) -> Optional[StatusDefinition]:
        """Return the default status for new orders, if any."""

    @abstractmethod
    def max_sort_order(self) -> int:
        """Highest ``sort_order`` in the catalog, ``0`` when empty."""

    @abstractmethod
    def write_batch(self, updates: Sequence[CatalogUpdate]) -> None:
        """Apply field updates to several definitions atomically."""
