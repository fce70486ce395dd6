"""Order API views.

Exposes the ``OrderService`` via HTTP using DRF ViewSets.  Domain
exceptions propagate to the API-wide exception handler.

A status change is a short conversation::

    POST /orders/{id}/transition/           {"status": "done"}
        -> applied | requires_input | requires_resolution
    POST /orders/{id}/transition/input/     {"status": ..., <fields>}
    POST /orders/{id}/transition/resolve/   {"status": ..., "choice": ...}
"""

from __future__ import annotations

from typing import Any, Dict

from django_filters.rest_framework import DjangoFilterBackend
from pydantic import ValidationError as PydanticValidationError
from rest_framework import status
from rest_framework.decorators import action
from rest_framework.filters import OrderingFilter, SearchFilter
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.throttling import BaseThrottle
from rest_framework.viewsets import GenericViewSet

from modules.core.exceptions import validation_error_from_pydantic
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.materials.repositories.django_repository import (
    MaterialCompanyDjangoRepository,
)
from modules.orders.dtos import CreateOrderDTO, RecordPaymentDTO, TransitionInputDTO
from modules.orders.filters import OrderFilter
from modules.orders.models import Order
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.serializers import (
    CostBreakdownSerializer,
    CreateOrderSerializer,
    DepositStatusSerializer,
    OrderListSerializer,
    OrderSerializer,
    RecordPaymentSerializer,
    RequiresInputSerializer,
    RequiresResolutionSerializer,
    TransitionInputSerializer,
    TransitionRequestSerializer,
    TransitionResolveSerializer,
)
from modules.orders.services import OrderService
from modules.orders.transitions import Apply, RequiresInput
from modules.statuses.repositories.django_repository import StatusDjangoRepository

TRANSITION_ACTIONS = {"transition", "transition_input", "transition_resolve"}


class OrderViewSet(GenericViewSet):
    """ViewSet for Order operations.

    Uses ``OrderService`` with injected repositories (DIP).
    Listing goes through the filter backends; every write goes through
    the service/repository layer.
    """

    serializer_class = OrderListSerializer
    filterset_class = OrderFilter
    search_fields = ["invoice_number", "customer_name", "customer_email", "description"]
    ordering_fields = ["created_at", "invoice_number", "status_value", "start_date"]
    ordering = ["-created_at", "-id"]
    filter_backends = [DjangoFilterBackend, SearchFilter, OrderingFilter]

    def __init__(self, **kwargs) -> None:
        super().__init__(**kwargs)
        self._service = OrderService(
            order_repository=OrderDjangoRepository(),
            status_repository=StatusDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            material_repository=MaterialCompanyDjangoRepository(),
        )

    def get_queryset(self):
        return Order.objects.alive().prefetch_related("line_groups", "payments")

    def get_throttles(self) -> list[BaseThrottle]:
        """Throttling scope per action."""
        throttle_scope: str | None
        if self.action == "create":
            throttle_scope = "order_creation"
        elif self.action in {"list", "retrieve"}:
            throttle_scope = "order_listing"
        elif self.action in TRANSITION_ACTIONS:
            throttle_scope = "status_transition"
        else:
            throttle_scope = None
        self.throttle_scope = throttle_scope
        return super().get_throttles()

    # ------------------------------------------------------------------
    # Create
    # ------------------------------------------------------------------

    def create(self, request: Request) -> Response:
        """POST /api/v1/orders/"""
        serializer = CreateOrderSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = CreateOrderDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            raise validation_error_from_pydantic(exc) from exc

        order = self._service.create_order(dto)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    # ------------------------------------------------------------------
    # List / Retrieve / Destroy
    # ------------------------------------------------------------------

    def list(self, request: Request) -> Response:
        """GET /api/v1/orders/

        Filtering, search and ordering come from ``filter_backends``;
        results are paginated.
        """
        queryset = self.filter_queryset(self.get_queryset())
        page = self.paginate_queryset(queryset)
        serializer = OrderListSerializer(page, many=True)
        return self.get_paginated_response(serializer.data)

    def retrieve(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/"""
        order = self._service.get_order(pk)
        return Response(OrderSerializer(order).data)

    def destroy(self, request: Request, pk: str | None = None) -> Response:
        """DELETE /api/v1/orders/{pk}/ (soft delete)"""
        self._service.delete_order(pk)
        return Response(status=status.HTTP_204_NO_CONTENT)

    # ------------------------------------------------------------------
    # Payments
    # ------------------------------------------------------------------

    @action(detail=True, methods=["get"])
    def financials(self, request: Request, pk: str | None = None) -> Response:
        """GET /api/v1/orders/{pk}/financials/"""
        breakdown, deposit = self._service.get_financials(pk)
        return Response(
            {
                "breakdown": CostBreakdownSerializer(breakdown).data,
                "deposit": DepositStatusSerializer(deposit).data,
            }
        )

    @action(detail=True, methods=["post"])
    def payments(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/payments/"""
        serializer = RecordPaymentSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            dto = RecordPaymentDTO(**serializer.validated_data)
        except PydanticValidationError as exc:
            raise validation_error_from_pydantic(exc) from exc

        order = self._service.record_payment(pk, dto)
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)

    @action(detail=True, methods=["post"])
    def deposit(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/deposit/"""
        order = self._service.mark_deposit_received(pk)
        return Response(OrderSerializer(order).data)

    # ------------------------------------------------------------------
    # Status transitions
    # ------------------------------------------------------------------

    @action(detail=True, methods=["post"])
    def transition(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/transition/"""
        serializer = TransitionRequestSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        outcome, order = self._service.request_status_change(
            pk, serializer.validated_data["status"]
        )
        if isinstance(outcome, Apply):
            return Response(_applied(order))
        if isinstance(outcome, RequiresInput):
            return Response(RequiresInputSerializer(outcome).data)
        return Response(RequiresResolutionSerializer(outcome).data)

    @action(detail=True, methods=["post"], url_path="transition/input")
    def transition_input(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/transition/input/"""
        serializer = TransitionInputSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        data = dict(serializer.validated_data)
        status_value = data.pop("status")
        try:
            dto = TransitionInputDTO(**data)
        except PydanticValidationError as exc:
            raise validation_error_from_pydantic(exc) from exc

        order = self._service.submit_transition_input(pk, status_value, dto)
        return Response(_applied(order))

    @action(detail=True, methods=["post"], url_path="transition/resolve")
    def transition_resolve(self, request: Request, pk: str | None = None) -> Response:
        """POST /api/v1/orders/{pk}/transition/resolve/"""
        serializer = TransitionResolveSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        order = self._service.resolve_transition(
            pk,
            serializer.validated_data["status"],
            serializer.validated_data["choice"],
        )
        return Response(_applied(order))


def _applied(order: Order) -> Dict[str, Any]:
    return {"outcome": Apply.outcome, "order": OrderSerializer(order).data}
