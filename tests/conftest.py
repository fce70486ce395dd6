from datetime import datetime, timezone as dt_timezone
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model
from rest_framework.test import APIClient

from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.materials.repositories.django_repository import (
    MaterialCompanyDjangoRepository,
)
from modules.orders.dtos import CreateOrderDTO, LineGroupDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.statuses.repositories.django_repository import StatusDjangoRepository
from modules.statuses.services import StatusCatalogService

FIXED_NOW = datetime(2025, 6, 15, 12, 0, tzinfo=dt_timezone.utc)


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


@pytest.fixture()
def api_client():
    """DRF APIClient for testing API endpoints."""
    return APIClient()


@pytest.fixture()
def api_client_with_correlation(api_client):
    """APIClient pre-configured with a known correlation ID header."""
    cid = "test-correlation-id-fixture"
    api_client.defaults["HTTP_X_REQUEST_ID"] = cid
    return api_client, cid


@pytest.fixture()
def auth_client():
    """APIClient with a force-authenticated Django user."""
    client = APIClient()
    user = get_user_model().objects.create_user(
        username="workshop", password="testpass123"
    )
    client.force_authenticate(user=user)
    return client


@pytest.fixture()
def catalog_service():
    return StatusCatalogService(
        status_repository=StatusDjangoRepository(),
        order_repository=OrderDjangoRepository(),
    )


@pytest.fixture()
def catalog(catalog_service):
    """The standard catalog: in_progress (default), ready, done, cancelled, pending."""
    catalog_service.seed_defaults()
    return {status.value: status for status in catalog_service.list_statuses()}


@pytest.fixture()
def fixed_now():
    return FIXED_NOW


@pytest.fixture()
def order_service(fixed_now):
    return OrderService(
        order_repository=OrderDjangoRepository(),
        status_repository=StatusDjangoRepository(),
        customer_repository=CustomerDjangoRepository(),
        material_repository=MaterialCompanyDjangoRepository(),
        clock=lambda: fixed_now,
    )


@pytest.fixture()
def make_order(catalog, order_service):
    """Create an order whose total is 250.00 unless line groups are given."""

    def _make(**overrides):
        data = {
            "customer_name": "Jane Doe",
            "line_groups": [
                LineGroupDTO(
                    furniture_type="Sofa",
                    material_quantity=Decimal("2"),
                    material_unit_price=Decimal("50"),
                    labour_unit_price=Decimal("150"),
                    labour_quantity=Decimal("1"),
                )
            ],
        }
        data.update(overrides)
        return order_service.create_order(CreateOrderDTO(**data))

    return _make
