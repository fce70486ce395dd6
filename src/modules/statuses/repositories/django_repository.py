"""Django ORM implementation of the status catalog repository."""

from __future__ import annotations

from typing import Any, Dict, List, Optional, Sequence
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction
from django.db.models import Max
from django.utils import timezone

from modules.statuses.models import StatusDefinition
from modules.statuses.repositories.interfaces import CatalogUpdate, IStatusRepository

logger = structlog.get_logger(__name__)


class StatusDjangoRepository(IStatusRepository):
    """Concrete status repository backed by Django ORM."""

    # ------------------------------------------------------------------
    # Read
    # ------------------------------------------------------------------

    def get_by_id(self, id: str) -> Optional[StatusDefinition]:
        """Returns ``None`` for non-existent or malformed IDs."""
        try:
            return StatusDefinition.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[StatusDefinition]:
        queryset = StatusDefinition.objects.order_by("sort_order", "created_at")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    def get_by_value(self, value: str) -> Optional[StatusDefinition]:
        return StatusDefinition.objects.filter(value=value).first()

    def get_default(self) -> Optional[StatusDefinition]:
        return (
            StatusDefinition.objects.filter(is_default=True)
            .order_by("sort_order")
            .first()
        )

    def max_sort_order(self) -> int:
        result = StatusDefinition.objects.aggregate(highest=Max("sort_order"))
        return result["highest"] or 0

    # ------------------------------------------------------------------
    # Write
    # ------------------------------------------------------------------

    @transaction.atomic
    def save(self, entity: StatusDefinition) -> StatusDefinition:
        is_new = entity._state.adding
        entity.save()
        logger.info("status.saved", status_id=str(entity.id), is_new=is_new)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        status = self.get_by_id(id)
        if not status:
            return False
        status.delete()
        logger.info("status.deleted", status_id=str(id))
        return True

    @transaction.atomic
    def write_batch(self, updates: Sequence[CatalogUpdate]) -> None:
        now = timezone.now()
        for status_id, fields in updates:
            self._write_fields(status_id, {**fields, "updated_at": now})
        logger.info("status.batch_written", update_count=len(updates))

    def _write_fields(self, status_id: UUID, fields: Dict[str, Any]) -> None:
        StatusDefinition.objects.filter(id=status_id).update(**fields)
