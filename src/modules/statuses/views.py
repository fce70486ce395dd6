"""Status catalog API views.

Exposes ``StatusCatalogService`` via HTTP.  Domain exceptions propagate
to the API-wide exception handler.
"""

from __future__ import annotations

from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import validation_error_from_pydantic
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.statuses.dtos import CreateStatusDTO, UpdateStatusDTO
from modules.statuses.models import StatusDefinition
from modules.statuses.repositories.django_repository import StatusDjangoRepository
from modules.statuses.serializers import (
    CreateStatusSerializer,
    ReorderStatusesSerializer,
    StatusDefinitionSerializer,
    UpdateStatusSerializer,
)
from modules.statuses.services import StatusCatalogService


class StatusViewSet(GenericViewSet):
    """ViewSet for the status catalog.

    The catalog is small and always returned whole, in ``sort_order``.
    """

    queryset = StatusDefinition.objects.all()
    serializer_class = StatusDefinitionSerializer
    pagination_class = None

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = StatusCatalogService(
            status_repository=StatusDjangoRepository(),
            order_repository=OrderDjangoRepository(),
        )

    # ------------------------------------------------------------------
    # List / Retrieve
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/statuses/"""
        statuses = self._service.list_statuses()
        return Response(StatusDefinitionSerializer(statuses, many=True).data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/statuses/{pk}/"""
        definition = self._service.get_status(pk)
        return Response(StatusDefinitionSerializer(definition).data)

    # ------------------------------------------------------------------
    # Create / Update / Destroy
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/statuses/"""
        serializer = CreateStatusSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = CreateStatusDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            raise validation_error_from_pydantic(exc) from exc

        definition = self._service.create_status(dto)
        return Response(
            StatusDefinitionSerializer(definition).data,
            status=status.HTTP_201_CREATED,
        )

    def update(self, request: Request, pk: str | None = None) -> Response:
        """PUT/PATCH /api/v1/statuses/{pk}/"""
        serializer = UpdateStatusSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        try:
            dto = UpdateStatusDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            raise validation_error_from_pydantic(exc) from exc

        definition = self._service.update_status(pk, dto)
        return Response(StatusDefinitionSerializer(definition).data)

    def partial_update(self, request: Request, pk: str | None = None) -> Response:
        """PATCH /api/v1/statuses/{pk}/"""
        return self.update(request, pk)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/statuses/{pk}/"""
        self._service.delete_status(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Catalog-wide actions
    # ------------------------------------------------------------------

    @action(detail=False, methods=["post"])
    def reorder(self, request: Request) -> Response:
        """POST /api/v1/statuses/reorder/  ``{"ids": [...]}``"""
        serializer = ReorderStatusesSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        statuses = self._service.reorder(serializer.validated_data["ids"])
        return Response(StatusDefinitionSerializer(statuses, many=True).data)

    @action(detail=True, methods=["post"], url_path="set-default")
    def set_default(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/statuses/{pk}/set-default/"""
        definition = self._service.set_default(pk)
        return Response(StatusDefinitionSerializer(definition).data)
