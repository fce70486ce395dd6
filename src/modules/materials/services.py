"""Material company service layer (Use Cases).

Business rules enforced here:
- Company names are unique, ignoring case.
- New companies are appended to the end of the list; ``reorder`` rewrites
  every position in one transaction.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional, Sequence
from uuid import UUID

import structlog
from django.db import IntegrityError, transaction

from modules.core.exceptions import translate_persistence_errors
from modules.materials.exceptions import (
    InvalidMaterialCompanyOrder,
    MaterialCompanyAlreadyExists,
    MaterialCompanyNotFound,
)
from modules.materials.models import MaterialCompany

if TYPE_CHECKING:
    from modules.materials.dtos import (
        CreateMaterialCompanyDTO,
        UpdateMaterialCompanyDTO,
    )
    from modules.materials.repositories.interfaces import IMaterialCompanyRepository

logger = structlog.get_logger(__name__)


class MaterialCompanyService:
    """Application service for the material company catalog."""

    def __init__(self, repository: IMaterialCompanyRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @translate_persistence_errors
    @transaction.atomic
    def create_company(self, dto: CreateMaterialCompanyDTO) -> MaterialCompany:
        """Add a company at the end of the list.

        Raises:
            MaterialCompanyAlreadyExists: the name is taken.
        """
        self._ensure_name_free(dto.name)
        company = MaterialCompany(
            name=dto.name,
            contact_person=dto.contact_person,
            phone=dto.phone,
            email=dto.email or "",
            address=dto.address,
            website=dto.website,
            tax_rate=dto.tax_rate,
            notes=dto.notes,
            sort_order=self._repo.max_sort_order() + 1,
        )
        company = self._save(company)
        logger.info("material_company.created", company_id=str(company.id))
        return company

    @translate_persistence_errors
    @transaction.atomic
    def update_company(self, id: str, dto: UpdateMaterialCompanyDTO) -> MaterialCompany:
        """Update a company with the supplied fields.

        Raises:
            MaterialCompanyNotFound: the company does not exist.
            MaterialCompanyAlreadyExists: the new name belongs to another company.
        """
        company = self.get_company(id)
        if dto.name is not None and dto.name.lower() != company.name.lower():
            self._ensure_name_free(dto.name)

        for field, value in dto.model_dump(exclude_none=True).items():
            setattr(company, field, value)

        company = self._save(company)
        logger.info("material_company.updated", company_id=str(company.id))
        return company

    @translate_persistence_errors
    @transaction.atomic
    def delete_company(self, id: str) -> None:
        """Remove a company; orders keep the name they were priced with.

        Raises:
            MaterialCompanyNotFound: the company does not exist.
        """
        if not self._repo.delete(id):
            raise MaterialCompanyNotFound(f"Material company {id} not found.")
        logger.info("material_company.deleted", company_id=str(id))

    @translate_persistence_errors
    @transaction.atomic
    def reorder(self, ids: Sequence[str | UUID]) -> List[MaterialCompany]:
        """Assign ``sort_order = position`` following *ids* (1-based).

        Raises:
            InvalidMaterialCompanyOrder: *ids* is not a permutation of the catalog.
        """
        requested = [str(company_id) for company_id in ids]
        catalog = {str(company.id): company for company in self._repo.list()}
        if len(requested) != len(set(requested)) or set(requested) != set(catalog):
            raise InvalidMaterialCompanyOrder()

        self._repo.set_positions(
            [
                (catalog[company_id].id, position)
                for position, company_id in enumerate(requested, start=1)
            ]
        )
        logger.info("material_company.reordered", count=len(requested))
        return self._repo.list()

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_companies(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> List[MaterialCompany]:
        return self._repo.list(filters)

    def get_company(self, id: str) -> MaterialCompany:
        """Raises ``MaterialCompanyNotFound`` when absent."""
        company = self._repo.get_by_id(id)
        if not company:
            raise MaterialCompanyNotFound(f"Material company {id} not found.")
        return company

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _ensure_name_free(self, name: str) -> None:
        if self._repo.get_by_name(name):
            logger.warning("material_company.duplicate_name")
            raise MaterialCompanyAlreadyExists(f"Material company '{name}' already exists.")

    def _save(self, company: MaterialCompany) -> MaterialCompany:
        try:
            return self._repo.save(company)
        except IntegrityError as exc:
            raise MaterialCompanyAlreadyExists(
                f"Material company '{company.name}' already exists."
            ) from exc
