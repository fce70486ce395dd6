"""Status catalog domain exceptions.

Raised by ``StatusCatalogService`` and by the transition engine when a
requested status is not part of the catalog.
"""

from __future__ import annotations

from rest_framework import status

from modules.core.exceptions import DomainError


class UnknownStatus(DomainError):
    """The requested status is not part of the catalog."""

    code = "unknown_status"


class StatusNotFound(DomainError):
    """The status definition does not exist."""

    code = "status_not_found"
    status_code = status.HTTP_404_NOT_FOUND


class DuplicateValue(DomainError):
    """Another status definition already uses this value."""

    code = "duplicate_value"
    status_code = status.HTTP_409_CONFLICT


class MissingEndStateType(DomainError):
    """An end state must declare its type (done, cancelled or pending)."""

    code = "missing_end_state_type"


class StatusInUse(DomainError):
    """Orders still reference this status."""

    code = "status_in_use"
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, count: int, message: str = "") -> None:
        super().__init__(
            message or f"Status is used by {count} order(s).",
            count=count,
        )
        self.count = count


class CannotDeleteDefault(DomainError):
    """The default status cannot be deleted; set another default first."""

    code = "cannot_delete_default"
    status_code = status.HTTP_409_CONFLICT


class InvalidStatusOrder(DomainError):
    """A reorder must list every status of the catalog exactly once."""

    code = "invalid_status_order"


class NoDefaultStatus(DomainError):
    """The catalog has no default status for new orders."""

    code = "no_default_status"
    status_code = status.HTTP_409_CONFLICT
