"""Unit tests for MaterialCompanyService and the material company DTOs.

Covers:
- create_company: appended at the end, duplicate name, lost unique race.
- update_company: happy path, name collision, case-only rename.
- delete_company / reorder.
"""

from __future__ import annotations

from decimal import Decimal
from unittest.mock import MagicMock

import pytest
from django.db import IntegrityError
from pydantic import ValidationError

from modules.materials.dtos import CreateMaterialCompanyDTO, UpdateMaterialCompanyDTO
from modules.materials.exceptions import (
    InvalidMaterialCompanyOrder,
    MaterialCompanyAlreadyExists,
    MaterialCompanyNotFound,
)
from modules.materials.models import MaterialCompany
from modules.materials.services import MaterialCompanyService

pytestmark = pytest.mark.unit


@pytest.fixture()
def mock_repo():
    repo = MagicMock()
    repo.get_by_name.return_value = None
    repo.max_sort_order.return_value = 2
    repo.save.side_effect = lambda c: c
    return repo


@pytest.fixture()
def service(mock_repo):
    return MaterialCompanyService(repository=mock_repo)


def _make_company(**overrides) -> MaterialCompany:
    defaults = {"name": "Kravet", "sort_order": 1}
    defaults.update(overrides)
    company = MaterialCompany(**defaults)
    company.save()
    return company


# ===========================================================================
# DTOs
# ===========================================================================


class TestMaterialCompanyDTOs:
    def test_defaults(self):
        dto = CreateMaterialCompanyDTO(name="  Kravet ")

        assert dto.name == "Kravet"
        assert dto.email is None
        assert dto.tax_rate == Decimal("13.00")

    def test_blank_name_is_rejected(self):
        with pytest.raises(ValidationError):
            CreateMaterialCompanyDTO(name="   ")

    def test_blank_email_means_none(self):
        assert CreateMaterialCompanyDTO(name="Kravet", email=" ").email is None

    def test_invalid_email_is_rejected(self):
        with pytest.raises(ValidationError):
            CreateMaterialCompanyDTO(name="Kravet", email="kravet")

    @pytest.mark.parametrize("rate", ["-1", "100.01"])
    def test_tax_rate_out_of_range(self, rate):
        with pytest.raises(ValidationError):
            CreateMaterialCompanyDTO(name="Kravet", tax_rate=rate)

    def test_update_can_clear_email(self):
        dto = UpdateMaterialCompanyDTO(email="")
        assert dto.model_dump(exclude_none=True) == {"email": ""}


# ===========================================================================
# create_company
# ===========================================================================


class TestCreateCompany:
    def test_appended_at_the_end(self, service, mock_repo):
        company = service.create_company(
            CreateMaterialCompanyDTO(name="Robert Allen", email="trade@ra.example.com")
        )

        assert company.sort_order == 3
        assert company.email == "trade@ra.example.com"
        mock_repo.save.assert_called_once()

    def test_duplicate_name_ignores_case(self, service, mock_repo):
        mock_repo.get_by_name.return_value = _make_company()

        with pytest.raises(MaterialCompanyAlreadyExists):
            service.create_company(CreateMaterialCompanyDTO(name="KRAVET"))
        mock_repo.get_by_name.assert_called_once_with("KRAVET")
        mock_repo.save.assert_not_called()

    def test_lost_race_on_name_is_a_duplicate(self, service, mock_repo):
        mock_repo.save.side_effect = IntegrityError("unique constraint failed")

        with pytest.raises(MaterialCompanyAlreadyExists):
            service.create_company(CreateMaterialCompanyDTO(name="Kravet"))


# ===========================================================================
# update_company
# ===========================================================================


class TestUpdateCompany:
    def test_success(self, service, mock_repo):
        company = _make_company()
        mock_repo.get_by_id.return_value = company

        updated = service.update_company(
            str(company.id),
            UpdateMaterialCompanyDTO(contact_person="Dana", tax_rate=Decimal("5.00")),
        )

        assert updated.contact_person == "Dana"
        assert updated.tax_rate == Decimal("5.00")
        assert updated.name == "Kravet"

    def test_not_found(self, service, mock_repo):
        mock_repo.get_by_id.return_value = None

        with pytest.raises(MaterialCompanyNotFound):
            service.update_company("missing", UpdateMaterialCompanyDTO(name="X"))

    def test_name_collision(self, service, mock_repo):
        company = _make_company()
        mock_repo.get_by_id.return_value = company
        mock_repo.get_by_name.return_value = _make_company(name="Robert Allen")

        with pytest.raises(MaterialCompanyAlreadyExists):
            service.update_company(
                str(company.id), UpdateMaterialCompanyDTO(name="robert allen")
            )

    def test_case_only_rename_skips_the_lookup(self, service, mock_repo):
        company = _make_company()
        mock_repo.get_by_id.return_value = company

        updated = service.update_company(
            str(company.id), UpdateMaterialCompanyDTO(name="KRAVET")
        )

        assert updated.name == "KRAVET"
        mock_repo.get_by_name.assert_not_called()


# ===========================================================================
# delete_company / reorder
# ===========================================================================


class TestDeleteAndReorder:
    def test_delete_not_found(self, service, mock_repo):
        mock_repo.delete.return_value = False
        with pytest.raises(MaterialCompanyNotFound):
            service.delete_company("missing")

    def test_delete_success(self, service, mock_repo):
        mock_repo.delete.return_value = True
        service.delete_company("some-id")
        mock_repo.delete.assert_called_once_with("some-id")

    def test_reorder_writes_every_position(self, service, mock_repo):
        first = _make_company(name="Kravet", sort_order=1)
        second = _make_company(name="Robert Allen", sort_order=2)
        mock_repo.list.return_value = [first, second]

        service.reorder([second.id, first.id])

        mock_repo.set_positions.assert_called_once_with([(second.id, 1), (first.id, 2)])

    def test_reorder_needs_every_company_once(self, service, mock_repo):
        first = _make_company(name="Kravet", sort_order=1)
        second = _make_company(name="Robert Allen", sort_order=2)
        mock_repo.list.return_value = [first, second]

        with pytest.raises(InvalidMaterialCompanyOrder):
            service.reorder([first.id, first.id])
        mock_repo.set_positions.assert_not_called()
