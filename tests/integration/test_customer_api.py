"""Integration tests for the customer API."""

from __future__ import annotations

import pytest

from modules.customers.models import Customer

pytestmark = pytest.mark.integration

URL = "/api/v1/customers/"


@pytest.fixture()
def customer():
    return Customer.objects.create(
        name="Jane Doe", email="jane@example.com", phone="416-555-0101"
    )


class TestCustomerCrud:
    def test_create(self, auth_client):
        response = auth_client.post(
            URL,
            {"name": "Sam Lee", "email": "Sam@Example.com", "phone": "(647) 555-0199"},
            format="json",
        )

        assert response.status_code == 201
        body = response.json()
        assert body["email"] == "sam@example.com"
        assert body["phone"] == "6475550199"

    def test_duplicate_email(self, auth_client, customer):
        response = auth_client.post(
            URL, {"name": "Other", "email": "JANE@example.com"}, format="json"
        )

        assert response.status_code == 409
        assert response.json()["errors"][0]["code"] == "customer_already_exists"

    def test_missing_name(self, auth_client):
        response = auth_client.post(URL, {"email": "x@example.com"}, format="json")

        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "name"

    def test_retrieve(self, auth_client, customer):
        response = auth_client.get(f"{URL}{customer.id}/")
        assert response.status_code == 200
        assert response.json()["name"] == "Jane Doe"

    def test_partial_update(self, auth_client, customer):
        response = auth_client.patch(
            f"{URL}{customer.id}/", {"notes": "Prefers e-mail"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["notes"] == "Prefers e-mail"
        assert response.json()["email"] == "jane@example.com"

    def test_delete_is_soft(self, auth_client, customer):
        response = auth_client.delete(f"{URL}{customer.id}/")

        assert response.status_code == 204
        assert auth_client.get(f"{URL}{customer.id}/").status_code == 404
        assert Customer.objects.filter(pk=customer.pk).exists()

    def test_deleted_customer_keeps_order_snapshot(self, auth_client, customer, make_order):
        order = make_order(customer_id=customer.id, customer_name="")

        auth_client.delete(f"{URL}{customer.id}/")
        response = auth_client.get(f"/api/v1/orders/{order.id}/")

        assert response.json()["customer_name"] == "Jane Doe"


class TestCustomerListing:
    def test_paginated_list(self, auth_client):
        for i in range(3):
            Customer.objects.create(name=f"Customer {i}", email=f"c{i}@example.com")

        response = auth_client.get(URL, {"page_size": 2})

        data = response.json()
        assert data["count"] == 3
        assert len(data["results"]) == 2
        assert data["next"] is not None

    def test_page_size_is_capped(self, auth_client):
        Customer.objects.create(name="Only", email="only@example.com")

        response = auth_client.get(URL, {"page_size": 1000})

        assert response.status_code == 200

    def test_filter_by_name(self, auth_client, customer):
        Customer.objects.create(name="Bob Martin", email="bob@example.com")

        response = auth_client.get(URL, {"name": "jane"})

        assert [c["name"] for c in response.json()["results"]] == ["Jane Doe"]

    def test_ordering_by_name(self, auth_client):
        Customer.objects.create(name="Zoe", email="zoe@example.com")
        Customer.objects.create(name="Adam", email="adam@example.com")

        response = auth_client.get(URL, {"ordering": "name"})

        assert [c["name"] for c in response.json()["results"]] == ["Adam", "Zoe"]

    def test_inactive_filter(self, auth_client, customer):
        Customer.objects.create(name="Gone", email="gone@example.com", is_active=False)

        response = auth_client.get(URL, {"active": "false"})

        assert [c["name"] for c in response.json()["results"]] == ["Gone"]
