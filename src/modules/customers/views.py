"""Customer API views.

Exposes the ``CustomerService`` via HTTP using DRF ViewSets.
Domain exceptions propagate to the API-wide exception handler, which maps
them to their HTTP status; the view never swallows generic exceptions.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import validation_error_from_pydantic
from modules.customers.dtos import CreateCustomerDTO, UpdateCustomerDTO
from modules.customers.filters import CustomerFilter
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.customers.serializers import (
    CreateCustomerSerializer,
    CustomerSerializer,
    UpdateCustomerSerializer,
)
from modules.customers.services import CustomerService


class CustomerViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for Customer CRUD operations.

    Uses ``CustomerService`` with ``CustomerDjangoRepository`` (DIP).
    Listing goes through the filter backends; every write goes through the
    service/repository layer.
    """

    filterset_class = CustomerFilter
    search_fields = ["name", "email", "phone"]
    ordering_fields = ["created_at", "name", "email"]
    ordering = ["name", "-created_at"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]
    serializer_class = CustomerSerializer

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = CustomerService(repository=CustomerDjangoRepository())

    def get_queryset(self):
        return Customer.objects.alive()

    # ------------------------------------------------------------------
    # Retrieve
    # ------------------------------------------------------------------

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/customers/{pk}/"""
        customer = self._service.get_customer(pk)
        return Response(CustomerSerializer(customer).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/customers/"""
        serializer = CreateCustomerSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = CreateCustomerDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            raise validation_error_from_pydantic(exc) from exc

        customer = self._service.create_customer(dto)
        return Response(
            CustomerSerializer(customer).data, status=status.HTTP_201_CREATED
        )

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/customers/{pk}/"""
        serializer = UpdateCustomerSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            dto = UpdateCustomerDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            raise validation_error_from_pydantic(exc) from exc

        customer = self._service.update_customer(pk, dto)
        return Response(CustomerSerializer(customer).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/customers/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/customers/{pk}/"""
        self._service.delete_customer(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)
