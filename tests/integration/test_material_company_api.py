"""Integration tests for the material company API and its use by orders."""

from __future__ import annotations

import pytest

from modules.materials.models import MaterialCompany
from modules.orders.models import OrderLineGroup

pytestmark = pytest.mark.integration

URL = "/api/v1/material-companies/"
ORDERS_URL = "/api/v1/orders/"


@pytest.fixture()
def companies():
    return {
        name: MaterialCompany.objects.create(name=name, sort_order=position)
        for position, name in enumerate(["Kravet", "Robert Allen", "Charlotte Fabrics"], start=1)
    }


def _order_payload(material_company):
    return {
        "customer_name": "Jane Doe",
        "line_groups": [
            {
                "furniture_type": "Sofa",
                "material_company": material_company,
                "material_quantity": "2",
                "material_unit_price": "50",
                "labour_unit_price": "150",
            }
        ],
    }


class TestMaterialCompanyCrud:
    def test_requires_authentication(self, api_client):
        assert api_client.get(URL).status_code == 401

    def test_create_is_appended(self, auth_client, companies):
        response = auth_client.post(
            URL,
            {"name": "Fabricut", "email": "Sales@Fabricut.example.com", "tax_rate": "5.00"},
            format="json",
        )

        assert response.status_code == 201
        body = response.json()
        assert body["sort_order"] == 4
        assert body["email"] == "sales@fabricut.example.com"
        assert body["tax_rate"] == "5.00"

    def test_default_tax_rate(self, auth_client):
        response = auth_client.post(URL, {"name": "Fabricut"}, format="json")

        assert response.status_code == 201
        assert response.json()["tax_rate"] == "13.00"

    def test_duplicate_name_ignores_case(self, auth_client, companies):
        response = auth_client.post(URL, {"name": "kravet"}, format="json")

        assert response.status_code == 409
        assert response.json()["errors"][0]["code"] == "material_company_already_exists"

    def test_invalid_email(self, auth_client):
        response = auth_client.post(
            URL, {"name": "Fabricut", "email": "fabricut"}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["attr"] == "email"

    def test_list_in_position_order(self, auth_client, companies):
        response = auth_client.get(URL)

        assert response.status_code == 200
        assert [c["name"] for c in response.json()] == [
            "Kravet",
            "Robert Allen",
            "Charlotte Fabrics",
        ]

    def test_filter_by_name(self, auth_client, companies):
        response = auth_client.get(URL, {"name": "allen"})

        assert [c["name"] for c in response.json()] == ["Robert Allen"]

    def test_patch(self, auth_client, companies):
        company = companies["Kravet"]

        response = auth_client.patch(
            f"{URL}{company.id}/", {"contact_person": "Dana"}, format="json"
        )

        assert response.status_code == 200
        assert response.json()["contact_person"] == "Dana"
        assert response.json()["name"] == "Kravet"

    def test_retrieve_unknown_id(self, auth_client):
        response = auth_client.get(f"{URL}00000000-0000-0000-0000-000000000000/")

        assert response.status_code == 404
        assert response.json()["errors"][0]["code"] == "material_company_not_found"

    def test_delete(self, auth_client, companies):
        response = auth_client.delete(f"{URL}{companies['Kravet'].id}/")

        assert response.status_code == 204
        assert not MaterialCompany.objects.filter(name="Kravet").exists()


class TestReorderMaterialCompanies:
    def test_reorder(self, auth_client, companies):
        ids = [str(companies[n].id) for n in ("Charlotte Fabrics", "Kravet", "Robert Allen")]

        response = auth_client.post(f"{URL}reorder/", {"ids": ids}, format="json")

        assert response.status_code == 200
        assert [(c["name"], c["sort_order"]) for c in response.json()] == [
            ("Charlotte Fabrics", 1),
            ("Kravet", 2),
            ("Robert Allen", 3),
        ]

    def test_partial_list_is_rejected(self, auth_client, companies):
        response = auth_client.post(
            f"{URL}reorder/", {"ids": [str(companies["Kravet"].id)]}, format="json"
        )

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "invalid_material_company_order"


class TestLineGroupMaterialCompany:
    def test_unknown_company_is_rejected(self, auth_client, catalog, companies):
        response = auth_client.post(ORDERS_URL, _order_payload("Acme Textiles"), format="json")

        assert response.status_code == 400
        error = response.json()["errors"][0]
        assert error["code"] == "unknown_material_company"
        assert error["attr"] == "line_groups.0.material_company"
        assert OrderLineGroup.objects.count() == 0

    def test_known_company_takes_the_catalog_spelling(self, auth_client, catalog, companies):
        response = auth_client.post(ORDERS_URL, _order_payload(" robert allen "), format="json")

        assert response.status_code == 201
        assert response.json()["line_groups"][0]["material_company"] == "Robert Allen"

    def test_blank_company_is_allowed(self, auth_client, catalog):
        response = auth_client.post(ORDERS_URL, _order_payload(""), format="json")

        assert response.status_code == 201
        assert response.json()["line_groups"][0]["material_company"] == ""

    def test_deleting_a_company_keeps_order_snapshots(self, auth_client, catalog, companies):
        auth_client.post(ORDERS_URL, _order_payload("Kravet"), format="json")

        auth_client.delete(f"{URL}{companies['Kravet'].id}/")

        assert list(OrderLineGroup.objects.values_list("material_company", flat=True)) == [
            "Kravet"
        ]
