"""Integration tests for order intake, listing, payments and deletion."""

from __future__ import annotations

import pytest

from modules.customers.models import Customer
from modules.orders.models import Order

pytestmark = pytest.mark.integration

URL = "/api/v1/orders/"

SOFA = {
    "furniture_type": "Sofa",
    "material_quantity": "2",
    "material_unit_price": "50",
    "labour_unit_price": "150",
    "labour_quantity": "1",
}


def _payload(**overrides):
    data = {"customer_name": "Jane Doe", "line_groups": [SOFA]}
    data.update(overrides)
    return data


class TestCreateOrder:
    def test_requires_authentication(self, api_client, catalog):
        response = api_client.post(URL, _payload(), format="json")
        assert response.status_code == 401

    def test_creates_in_default_status(self, auth_client, catalog):
        response = auth_client.post(URL, _payload(initial_payment="50"), format="json")

        assert response.status_code == 201
        body = response.json()
        assert body["invoice_number"] == "101660"
        assert body["status_value"] == "in_progress"
        assert body["total"] == "250.00"
        assert body["amount_paid"] == "50.00"
        assert len(body["payments"]) == 1
        assert body["status_history"][0]["new_status"] == "in_progress"

    def test_customer_snapshot_from_record(self, auth_client, catalog):
        customer = Customer.objects.create(name="Sam Lee", email="sam@example.com")

        response = auth_client.post(
            URL, {"customer_id": str(customer.id)}, format="json"
        )

        assert response.status_code == 201
        assert response.json()["customer_name"] == "Sam Lee"
        assert response.json()["customer_email"] == "sam@example.com"

    def test_missing_customer_details(self, auth_client, catalog):
        response = auth_client.post(URL, {"line_groups": [SOFA]}, format="json")
        assert response.status_code == 400

    def test_negative_price_is_rejected(self, auth_client, catalog):
        group = {**SOFA, "labour_unit_price": "-5"}
        response = auth_client.post(URL, _payload(line_groups=[group]), format="json")

        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "line_groups.0.labour_unit_price"

    def test_duplicate_invoice_number(self, auth_client, catalog):
        auth_client.post(URL, _payload(invoice_number="7001"), format="json")
        response = auth_client.post(URL, _payload(invoice_number="7001"), format="json")

        assert response.status_code == 409
        assert response.json()["errors"][0]["code"] == "duplicate_invoice_number"

    def test_empty_catalog(self, auth_client):
        response = auth_client.post(URL, _payload(), format="json")

        assert response.status_code == 409
        assert response.json()["errors"][0]["code"] == "no_default_status"
        assert Order.objects.count() == 0


class TestListAndRetrieve:
    def test_list_is_paginated(self, auth_client, make_order):
        for _ in range(3):
            make_order()

        response = auth_client.get(URL, {"page_size": 2})

        assert response.status_code == 200
        data = response.json()
        assert data["count"] == 3
        assert len(data["results"]) == 2
        assert data["results"][0]["total"] == "250.00"

    def test_filter_by_status(self, auth_client, make_order, order_service):
        order = make_order()
        make_order()
        order_service.request_status_change(str(order.id), "ready")

        response = auth_client.get(URL, {"status": "ready"})

        assert [o["id"] for o in response.json()["results"]] == [str(order.id)]

    def test_search_by_customer_name(self, auth_client, make_order):
        make_order(customer_name="Alice Tremblay")
        make_order(customer_name="Bob Martin")

        response = auth_client.get(URL, {"search": "tremblay"})

        assert [o["customer_name"] for o in response.json()["results"]] == [
            "Alice Tremblay"
        ]

    def test_retrieve_includes_line_groups(self, auth_client, make_order):
        order = make_order()

        response = auth_client.get(f"{URL}{order.id}/")

        assert response.status_code == 200
        assert response.json()["line_groups"][0]["furniture_type"] == "Sofa"

    def test_retrieve_malformed_id(self, auth_client, catalog):
        response = auth_client.get(f"{URL}not-a-uuid/")
        assert response.status_code == 404


class TestPaymentsApi:
    def test_record_payment(self, auth_client, make_order):
        order = make_order()

        response = auth_client.post(
            f"{URL}{order.id}/payments/",
            {"amount": "75.00", "method": "Cash"},
            format="json",
        )

        assert response.status_code == 201
        assert response.json()["amount_paid"] == "75.00"

    def test_zero_payment_is_rejected(self, auth_client, make_order):
        order = make_order()

        response = auth_client.post(
            f"{URL}{order.id}/payments/", {"amount": "0"}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "amount"

    def test_sub_cent_payment_adds_no_entry(self, auth_client, make_order):
        order = make_order()

        response = auth_client.post(
            f"{URL}{order.id}/payments/", {"amount": "0.004"}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "amount"
        assert order.payments.count() == 0

    def test_deposit_received(self, auth_client, make_order):
        order = make_order(deposit_required="100")

        response = auth_client.post(f"{URL}{order.id}/deposit/")

        assert response.status_code == 200
        assert response.json()["deposit_received"] is True
        assert response.json()["amount_paid"] == "100.00"

    def test_financials(self, auth_client, make_order):
        order = make_order(
            deposit_required="100",
            initial_payment="100",
            pickup_delivery_enabled=True,
            pickup_delivery_cost="40",
        )

        response = auth_client.get(f"{URL}{order.id}/financials/")

        assert response.status_code == 200
        data = response.json()
        assert data["breakdown"]["total"] == "290.00"
        assert data["breakdown"]["pickup_delivery"] == "40.00"
        assert data["deposit"]["remaining"] == "190.00"
        assert data["deposit"]["is_deposit_paid"] is True


class TestDeleteOrder:
    def test_soft_delete(self, auth_client, make_order):
        order = make_order()

        response = auth_client.delete(f"{URL}{order.id}/")

        assert response.status_code == 204
        assert auth_client.get(f"{URL}{order.id}/").status_code == 404
        assert Order.objects.filter(pk=order.pk, deleted_at__isnull=False).exists()
