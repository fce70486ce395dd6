"""Customer domain exceptions.

Raised by the Service Layer when business rules are violated and
rendered by the API-wide exception handler.
"""

from __future__ import annotations

from rest_framework import status

from modules.core.exceptions import DomainError


class CustomerAlreadyExists(DomainError):
    """A customer with the same e-mail address already exists."""

    code = "customer_already_exists"
    status_code = status.HTTP_409_CONFLICT


class CustomerNotFound(DomainError):
    """The requested customer does not exist or has been soft-deleted."""

    code = "customer_not_found"
    status_code = status.HTTP_404_NOT_FOUND
