"""Material company repository interface."""

from __future__ import annotations

from abc import abstractmethod
from typing import TYPE_CHECKING, Optional, Sequence, Tuple
from uuid import UUID

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.materials.models import MaterialCompany


class IMaterialCompanyRepository(IRepository["MaterialCompany"]):
    """Repository contract for the material company catalog.

    ``list`` returns companies in ``sort_order``.
    """

    @abstractmethod
    def get_by_name(self, name: str) -> Optional[MaterialCompany]:
        """Retrieve a company by name (case-insensitive)."""

    @abstractmethod
    def max_sort_order(self) -> int:
        """Highest ``sort_order`` in the catalog, ``0`` when empty."""

    @abstractmethod
    def set_positions(self, positions: Sequence[Tuple[UUID, int]]) -> None:
        """Write ``sort_order`` for several companies atomically."""
