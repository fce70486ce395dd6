"""Customer service layer (Use Cases).

Orchestrates business logic for the Customer aggregate, delegating
persistence to the injected ``ICustomerRepository``.

Business rules enforced here:
- E-mail addresses are unique across customers.
- Deletion is a soft delete; orders keep their contact snapshot.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Dict, List, Optional

import structlog
from django.db import transaction

from modules.customers.exceptions import CustomerAlreadyExists, CustomerNotFound
from modules.customers.models import Customer

if TYPE_CHECKING:
    from modules.customers.dtos import CreateCustomerDTO, UpdateCustomerDTO
    from modules.customers.repositories.interfaces import ICustomerRepository

logger = structlog.get_logger(__name__)


class CustomerService:
    """Application service for Customer use-cases.

    Receives an ``ICustomerRepository`` via constructor injection (DIP).
    """

    def __init__(self, repository: ICustomerRepository) -> None:
        self._repo = repository

    # ------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------

    @transaction.atomic
    def create_customer(self, dto: CreateCustomerDTO) -> Customer:
        """Create a new customer.

        Raises:
            CustomerAlreadyExists: the e-mail address is already registered.
        """
        if self._repo.get_by_email(dto.email):
            logger.warning("customer.duplicate_email")
            raise CustomerAlreadyExists("Email already registered.")

        customer = Customer(
            name=dto.name,
            email=dto.email,
            phone=dto.phone,
            address=dto.address,
            notes=dto.notes,
        )
        customer = self._repo.save(customer)
        logger.info("customer.created", customer_id=str(customer.id))
        return customer

    @transaction.atomic
    def update_customer(self, id: str, dto: UpdateCustomerDTO) -> Customer:
        """Update an existing customer with the supplied fields.

        Raises:
            CustomerNotFound: the customer does not exist.
            CustomerAlreadyExists: the new e-mail belongs to someone else.
        """
        customer = self._repo.get_by_id(id)
        if not customer:
            raise CustomerNotFound(f"Customer {id} not found.")

        log = logger.bind(customer_id=str(id))

        if dto.email is not None and dto.email != customer.email:
            existing = self._repo.get_by_email(dto.email)
            if existing and existing.id != customer.id:
                log.warning("customer.duplicate_email")
                raise CustomerAlreadyExists("Email already registered.")

        for field in ("name", "email", "phone", "address", "notes", "is_active"):
            value = getattr(dto, field)
            if value is not None:
                setattr(customer, field, value)

        customer = self._repo.save(customer)
        log.info("customer.updated")
        return customer

    @transaction.atomic
    def delete_customer(self, id: str) -> None:
        """Soft-delete a customer.

        Raises:
            CustomerNotFound: the customer does not exist.
        """
        if not self._repo.delete(id):
            raise CustomerNotFound(f"Customer {id} not found.")
        logger.info("customer.deleted", customer_id=str(id))

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def list_customers(
        self, filters: Optional[Dict[str, Any]] = None
    ) -> List[Customer]:
        return self._repo.list(filters)

    def get_customer(self, id: str) -> Customer:
        """Retrieve a single customer by ID.

        Raises:
            CustomerNotFound: the customer does not exist.
        """
        customer = self._repo.get_by_id(id)
        if not customer:
            raise CustomerNotFound(f"Customer {id} not found.")
        return customer
