"""Django ORM implementation of the material company repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Max
from django.utils import timezone

from modules.materials.models import MaterialCompany
from modules.materials.repositories.interfaces import IMaterialCompanyRepository

logger = structlog.get_logger(__name__)


class MaterialCompanyDjangoRepository(IMaterialCompanyRepository):
    """Concrete material company repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[MaterialCompany]:
        """Returns ``None`` for non-existent or malformed IDs."""
        try:
            return MaterialCompany.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[MaterialCompany]:
        queryset = MaterialCompany.objects.order_by("sort_order", "created_at")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def get_by_name(self, name: str) -> Optional[MaterialCompany]:
        return MaterialCompany.objects.filter(name__iexact=name.strip()).first()

    def max_sort_order(self) -> int:
        result = MaterialCompany.objects.aggregate(highest=Max("sort_order"))
        return result["highest"] or 0

    @transaction.atomic
    def save(self, entity: MaterialCompany) -> MaterialCompany:
        is_new = entity._state.adding
        entity.save()
        logger.info("material_company.saved", company_id=str(entity.id), is_new=is_new)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        company = self.get_by_id(id)
        if not company:
            return False
        company.delete()
        logger.info("material_company.deleted", company_id=str(id))
        return True

    @transaction.atomic
    def set_positions(self, positions: Sequence[Tuple[UUID, int]]) -> None:
        now = timezone.now()
        for company_id, position in positions:
            MaterialCompany.objects.filter(id=company_id).update(
                sort_order=position, updated_at=now
            )
        logger.info("material_company.positions_written", count=len(positions))
