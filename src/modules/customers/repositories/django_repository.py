"""Django ORM implementation of the Customer repository.

Methods return ``None`` / ``False`` for missing rows instead of raising;
the Service Layer decides how a missing entity is reported.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.customers.models import Customer
from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class CustomerDjangoRepository(ICustomerRepository):
    """Concrete Customer repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Customer]:
        """Retrieve a live customer by primary key.

        Returns ``None`` for soft-deleted, non-existent or malformed IDs.
        """
        try:
            return Customer.objects.alive().filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Customer]:
        queryset = Customer.objects.alive()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Customer) -> Customer:
        is_new = entity._state.adding
        entity.save()
        logger.info("customer.saved", customer_id=str(entity.id), is_new=is_new)
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        customer = self.get_by_id(id)
        if not customer:
            return False
        customer.delete()
        logger.info("customer.soft_deleted", customer_id=str(id))
        return True

    def get_by_email(self, email: str) -> Optional[Customer]:
        return Customer.objects.filter(email__iexact=email.strip()).first()
