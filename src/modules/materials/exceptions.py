"""Material company domain exceptions."""

from __future__ import annotations

from rest_framework import status

from modules.core.exceptions import DomainError


class MaterialCompanyNotFound(DomainError):
    """The requested material company does not exist."""

    code = "material_company_not_found"
    status_code = status.HTTP_404_NOT_FOUND


class MaterialCompanyAlreadyExists(DomainError):
    """A material company with the same name already exists."""

    code = "material_company_already_exists"
    status_code = status.HTTP_409_CONFLICT


class UnknownMaterialCompany(DomainError):
    """A line group names a material company that is not in the catalog."""

    code = "unknown_material_company"
    status_code = status.HTTP_400_BAD_REQUEST


class InvalidMaterialCompanyOrder(DomainError):
    """A reorder request must list every company exactly once."""

    code = "invalid_material_company_order"
    status_code = status.HTTP_400_BAD_REQUEST
