"""Status catalog service layer (Use Cases).

Administers the ordered catalog of order statuses.

Business rules enforced:
- ``value`` is unique across the catalog.
- An end state declares its type (done / cancelled / pending).
- A status referenced by orders cannot be deleted or renamed.
- Exactly one default: setting a default clears every other one in the
  same transaction, the default cannot be deleted, and it cannot be
  cleared in place.
- ``sort_order`` is unique and dense: reorder assigns 1..n in one atomic
  batch, and an explicit position on create/update shifts the following
  rows in the same kind of batch.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Dict, List, Optional, Sequence
from uuid import UUID

import structlog
from django.db import IntegrityError, transaction

from modules.core.exceptions import translate_persistence_errors
from modules.statuses.constants import DEFAULT_STATUSES, EndStateType
from modules.statuses.dtos import CreateStatusDTO, StatusDefinitionDTO
from modules.statuses.exceptions import (
    CannotDeleteDefault,
    DuplicateValue,
    InvalidStatusOrder,
    MissingEndStateType,
    NoDefaultStatus,
    StatusInUse,
    StatusNotFound,
    UnknownStatus,
)
from modules.statuses.models import StatusDefinition

if TYPE_CHECKING:
    from modules.orders.repositories.interfaces import IOrderRepository
    from modules.statuses.dtos import UpdateStatusDTO
    from modules.statuses.repositories.interfaces import (
        CatalogUpdate,
        IStatusRepository,
    )

logger = structlog.get_logger(__name__)


class StatusCatalogService:
    """Application service for the status catalog.

    The order repository is only used to count orders per status value.
    """

    def __init__(
        self,
        status_repository: IStatusRepository,
        order_repository: IOrderRepository,
    ) -> None:
        self._status_repo = status_repository
        self._order_repo = order_repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @translate_persistence_errors
    @transaction.atomic
    def create_status(self, dto: CreateStatusDTO) -> StatusDefinition:
        """Add a status to the catalog.

        Raises:
            DuplicateValue: ``value`` already exists.
            MissingEndStateType: end state without a type.
        """
        log = logger.bind(value=dto.value)

        if self._status_repo.get_by_value(dto.value):
            log.warning("status.duplicate_value")
            raise DuplicateValue(f"Status value '{dto.value}' already exists.")
        if dto.is_end_state and dto.end_state_type == EndStateType.NONE:
            raise MissingEndStateType()

        status = StatusDefinition(
            label=dto.label,
            value=dto.value,
            color=dto.color,
            description=dto.description,
            is_end_state=dto.is_end_state,
            end_state_type=dto.end_state_type,
            is_default=dto.is_default or self._status_repo.get_default() is None,
            sort_order=self._status_repo.max_sort_order() + 1,
        )
        status = self._save_unique(status)
        if dto.sort_order is not None:
            self._place_at(status, dto.sort_order)
        if status.is_default:
            self._clear_other_defaults(keep=status.id)

        log.info("status.created", status_id=str(status.id), is_default=status.is_default)
        return status

    @translate_persistence_errors
    @transaction.atomic
    def update_status(self, id: str, dto: UpdateStatusDTO) -> StatusDefinition:
        """Update a status with the supplied fields.

        Raises:
            StatusNotFound: the status does not exist.
            DuplicateValue: the new value belongs to another status.
            StatusInUse: renaming the value of a status orders still use.
            MissingEndStateType: end state without a type.
        """
        status = self._get_or_raise(id)
        log = logger.bind(status_id=str(status.id), value=status.value)

        if dto.value is not None and dto.value != status.value:
            existing = self._status_repo.get_by_value(dto.value)
            if existing and existing.id != status.id:
                log.warning("status.duplicate_value", new_value=dto.value)
                raise DuplicateValue(f"Status value '{dto.value}' already exists.")
            in_use = self._order_repo.count_with_status(status.value)
            if in_use:
                log.warning("status.rename_in_use", count=in_use)
                raise StatusInUse(
                    in_use,
                    f"Cannot rename a status used by {in_use} order(s).",
                )
            status.value = dto.value

        is_end_state = (
            dto.is_end_state if dto.is_end_state is not None else status.is_end_state
        )
        end_state_type = (
            dto.end_state_type
            if dto.end_state_type is not None
            else status.end_state_type
        )
        if is_end_state and end_state_type == EndStateType.NONE:
            raise MissingEndStateType()
        status.is_end_state = is_end_state
        status.end_state_type = end_state_type if is_end_state else EndStateType.NONE

        for field in ("label", "color", "description"):
            value = getattr(dto, field)
            if value is not None:
                setattr(status, field, value)

        if dto.is_default and not status.is_default:
            status.is_default = True
            self._clear_other_defaults(keep=status.id)
        elif dto.is_default is False and status.is_default:
            log.info("status.default_clear_ignored")

        status = self._save_unique(status)
        if dto.sort_order is not None and dto.sort_order != status.sort_order:
            self._place_at(status, dto.sort_order)
        log.info("status.updated")
        return status

    @translate_persistence_errors
    @transaction.atomic
    def delete_status(self, id: str) -> None:
        """Remove a status from the catalog.

        Raises:
            StatusNotFound: the status does not exist.
            StatusInUse: orders still reference it.
            CannotDeleteDefault: it is the default status.
        """
        status = self._get_or_raise(id)
        log = logger.bind(status_id=str(status.id), value=status.value)

        in_use = self._order_repo.count_with_status(status.value)
        if in_use:
            log.warning("status.delete_in_use", count=in_use)
            raise StatusInUse(in_use)
        if status.is_default:
            log.warning("status.delete_default")
            raise CannotDeleteDefault()

        self._status_repo.delete(str(status.id))
        log.info("status.deleted")

    @translate_persistence_errors
    @transaction.atomic
    def reorder(self, ids: Sequence[str | UUID]) -> List[StatusDefinition]:
        """Assign ``sort_order = position`` following *ids* (1-based).

        Raises:
            UnknownStatus: an id is not part of the catalog.
            InvalidStatusOrder: *ids* is not a permutation of the catalog.
        """
        requested = [str(status_id) for status_id in ids]
        catalog = {str(status.id): status for status in self._status_repo.list()}

        unknown = [status_id for status_id in requested if status_id not in catalog]
        if unknown:
            raise UnknownStatus(f"Unknown status id(s): {', '.join(unknown)}.")
        if len(requested) != len(set(requested)) or set(requested) != set(catalog):
            raise InvalidStatusOrder()

        updates: List[CatalogUpdate] = [
            (catalog[status_id].id, {"sort_order": position})
            for position, status_id in enumerate(requested, start=1)
        ]
        self._status_repo.write_batch(updates)
        logger.info("status.reordered", count=len(updates))
        return self._status_repo.list()

    @translate_persistence_errors
    @transaction.atomic
    def set_default(self, id: str) -> StatusDefinition:
        """Make *id* the only default status.

        Raises:
            StatusNotFound: the status does not exist.
        """
        status = self._get_or_raise(id)
        updates: List[CatalogUpdate] = [
            (other.id, {"is_default": False})
            for other in self._status_repo.list({"is_default": True})
            if other.id != status.id
        ]
        updates.append((status.id, {"is_default": True}))
        self._status_repo.write_batch(updates)

        logger.info("status.default_set", status_id=str(status.id), value=status.value)
        return self._get_or_raise(str(status.id))

    @translate_persistence_errors
    @transaction.atomic
    def seed_defaults(self) -> List[StatusDefinition]:
        """Create the standard statuses that are missing from the catalog."""
        created: List[StatusDefinition] = []
        for definition in DEFAULT_STATUSES:
            if self._status_repo.get_by_value(definition["value"]):
                continue
            wants_default = definition.get("is_default", False)
            dto = CreateStatusDTO(
                **{
                    **definition,
                    "is_default": wants_default
                    and self._status_repo.get_default() is None,
                }
            )
            created.append(self.create_status(dto))
        logger.info("status.seeded", created=[status.value for status in created])
        return created

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_statuses(self) -> List[StatusDefinition]:
        """Catalog ordered by ``sort_order``; each item carries ``order_count``."""
        counts = self.usage_counts()
        statuses = self._status_repo.list()
        for status in statuses:
            status.order_count = counts.get(status.value, 0)
        return statuses

    def usage_counts(self) -> Dict[str, int]:
        return self._order_repo.counts_by_status()

    def get_status(self, id: str) -> StatusDefinition:
        """Raises ``StatusNotFound`` when absent."""
        return self._get_or_raise(id)

    def get_default(self) -> StatusDefinition:
        default = self._status_repo.get_default()
        if not default:
            raise NoDefaultStatus()
        return default

    def catalog(self) -> List[StatusDefinitionDTO]:
        """Snapshot of the catalog for the transition engine."""
        return [StatusDefinitionDTO.from_entity(s) for s in self._status_repo.list()]

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _get_or_raise(self, id: str) -> StatusDefinition:
        status = self._status_repo.get_by_id(id)
        if not status:
            raise StatusNotFound(f"Status {id} not found.")
        return status

    def _save_unique(self, status: StatusDefinition) -> StatusDefinition:
        """Save, mapping a lost race on the unique ``value`` to ``DuplicateValue``."""
        try:
            return self._status_repo.save(status)
        except IntegrityError as exc:
            logger.warning("status.duplicate_value", value=status.value, race=True)
            raise DuplicateValue(f"Status value '{status.value}' already exists.") from exc

    def _place_at(self, status: StatusDefinition, position: int) -> None:
        """Move *status* to *position* and renumber the catalog densely.

        Positions past the end are clamped to the last slot; every row whose
        ``sort_order`` changes is written in one batch.
        """
        others = [s for s in self._status_repo.list() if s.id != status.id]
        position = max(1, min(position, len(others) + 1))
        ordered = others[: position - 1] + [status] + others[position - 1 :]

        updates: List[CatalogUpdate] = [
            (entry.id, {"sort_order": index})
            for index, entry in enumerate(ordered, start=1)
            if entry.sort_order != index
        ]
        if updates:
            self._status_repo.write_batch(updates)
        status.sort_order = position

    def _clear_other_defaults(self, keep: Optional[UUID]) -> None:
        updates: List[CatalogUpdate] = [
            (other.id, {"is_default": False})
            for other in self._status_repo.list({"is_default": True})
            if other.id != keep
        ]
        if updates:
            self._status_repo.write_batch(updates)
