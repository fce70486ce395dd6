"""Material company API views.

Listing goes through the filter backends and returns the whole catalog in
``sort_order``; writes go through ``MaterialCompanyService``.
"""

from __future__ import annotations

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.mixins import ListModelMixin
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import validation_error_from_pydantic
from modules.materials.dtos import CreateMaterialCompanyDTO, UpdateMaterialCompanyDTO
from modules.materials.filters import MaterialCompanyFilter
from modules.materials.models import MaterialCompany
from modules.materials.repositories.django_repository import (
    MaterialCompanyDjangoRepository,
)
from modules.materials.serializers import (
    CreateMaterialCompanySerializer,
    MaterialCompanySerializer,
    ReorderMaterialCompaniesSerializer,
    UpdateMaterialCompanySerializer,
)
from modules.materials.services import MaterialCompanyService


class MaterialCompanyViewSet(ListModelMixin, GenericViewSet):
    """ViewSet for the material company catalog."""

    filterset_class = MaterialCompanyFilter
    filter_backends = [DjangoFilterBackend]
    serializer_class = MaterialCompanySerializer
    pagination_class = None

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = MaterialCompanyService(repository=MaterialCompanyDjangoRepository())

    def get_queryset(self):
        return MaterialCompany.objects.order_by("sort_order", "created_at")

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/material-companies/{pk}/"""
        company = self._service.get_company(pk)
        return Response(MaterialCompanySerializer(company).data)

    def create(self, request: Request) -> Response:
        """POST /api/v1/material-companies/"""
        serializer = CreateMaterialCompanySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = CreateMaterialCompanyDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            raise validation_error_from_pydantic(exc) from exc

        company = self._service.create_company(dto)
        return Response(
            MaterialCompanySerializer(company).data, status=status.HTTP_201_CREATED
        )

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/material-companies/{pk}/"""
        serializer = UpdateMaterialCompanySerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            dto = UpdateMaterialCompanyDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            raise validation_error_from_pydantic(exc) from exc

        company = self._service.update_company(pk, dto)
        return Response(MaterialCompanySerializer(company).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/material-companies/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/material-companies/{pk}/"""
        self._service.delete_company(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    @action(detail=False, methods=["post"])
    def reorder(self, request: Request) -> Response:
        """POST /api/v1/material-companies/reorder/  ``{"ids": [...]}``"""
        serializer = ReorderMaterialCompaniesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        companies = self._service.reorder(serializer.validated_data["ids"])
        return Response(MaterialCompanySerializer(companies, many=True).data)
