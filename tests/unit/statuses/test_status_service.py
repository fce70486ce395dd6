"""Unit tests for StatusCatalogService using mocked repositories."""

from __future__ import annotations

from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from django.db import IntegrityError

from modules.statuses.constants import EndStateType
from modules.statuses.dtos import CreateStatusDTO, UpdateStatusDTO
from modules.statuses.exceptions import (
    CannotDeleteDefault,
    DuplicateValue,
    InvalidStatusOrder,
    MissingEndStateType,
    NoDefaultStatus,
    StatusInUse,
    StatusNotFound,
    UnknownStatus,
)
from modules.statuses.models import StatusDefinition
from modules.statuses.services import StatusCatalogService

pytestmark = pytest.mark.unit


def _status(value="ready", is_default=False, sort_order=1, **kwargs) -> StatusDefinition:
    return StatusDefinition(
        id=uuid4(),
        label=value.title(),
        value=value,
        is_default=is_default,
        sort_order=sort_order,
        **kwargs,
    )


@pytest.fixture()
def status_repo():
    repo = MagicMock()
    repo.get_by_value.return_value = None
    repo.get_default.return_value = _status("in_progress", is_default=True)
    repo.max_sort_order.return_value = 4
    repo.save.side_effect = lambda status: status
    repo.list.return_value = []
    return repo


@pytest.fixture()
def order_repo():
    repo = MagicMock()
    repo.count_with_status.return_value = 0
    repo.counts_by_status.return_value = {}
    return repo


@pytest.fixture()
def service(status_repo, order_repo):
    return StatusCatalogService(status_repository=status_repo, order_repository=order_repo)


# ============================================================================
# create_status
# ============================================================================


class TestCreateStatus:
    def test_appends_to_the_end_of_the_catalog(self, service, status_repo):
        status = service.create_status(CreateStatusDTO(label="Waiting Fabric"))

        assert status.value == "waiting_fabric"
        assert status.sort_order == 5
        assert status.is_default is False
        status_repo.write_batch.assert_not_called()

    def test_duplicate_value_is_rejected(self, service, status_repo):
        status_repo.get_by_value.return_value = _status("ready")

        with pytest.raises(DuplicateValue):
            service.create_status(CreateStatusDTO(label="Ready"))
        status_repo.save.assert_not_called()

    def test_end_state_needs_a_type(self, service, status_repo):
        with pytest.raises(MissingEndStateType):
            service.create_status(CreateStatusDTO(label="Closed", is_end_state=True))
        status_repo.save.assert_not_called()

    def test_first_status_of_an_empty_catalog_becomes_default(self, service, status_repo):
        status_repo.get_default.return_value = None

        status = service.create_status(CreateStatusDTO(label="New"))

        assert status.is_default is True

    def test_new_default_clears_the_previous_one(self, service, status_repo):
        previous = _status("in_progress", is_default=True)
        status_repo.list.return_value = [previous]

        status = service.create_status(CreateStatusDTO(label="Intake", is_default=True))

        status_repo.list.assert_called_with({"is_default": True})
        status_repo.write_batch.assert_called_once_with(
            [(previous.id, {"is_default": False})]
        )
        assert status.is_default is True

    def test_explicit_position_shifts_the_following_rows(self, service, status_repo):
        first, second = _status("in_progress", sort_order=1), _status("ready", sort_order=2)
        status_repo.list.return_value = [first, second]
        status_repo.max_sort_order.return_value = 2

        status = service.create_status(CreateStatusDTO(label="Intake", sort_order=1))

        assert status.sort_order == 1
        status_repo.write_batch.assert_called_once_with(
            [
                (status.id, {"sort_order": 1}),
                (first.id, {"sort_order": 2}),
                (second.id, {"sort_order": 3}),
            ]
        )

    def test_lost_race_on_value_is_a_duplicate(self, service, status_repo):
        status_repo.save.side_effect = IntegrityError("UNIQUE constraint failed")

        with pytest.raises(DuplicateValue):
            service.create_status(CreateStatusDTO(label="Ready"))


# ============================================================================
# update_status
# ============================================================================


class TestUpdateStatus:
    def test_not_found(self, service, status_repo):
        status_repo.get_by_id.return_value = None
        with pytest.raises(StatusNotFound):
            service.update_status(str(uuid4()), UpdateStatusDTO(label="X"))

    def test_renaming_a_used_value_is_rejected(self, service, status_repo, order_repo):
        status_repo.get_by_id.return_value = _status("ready")
        order_repo.count_with_status.return_value = 2

        with pytest.raises(StatusInUse) as exc_info:
            service.update_status("id", UpdateStatusDTO(value="ready_for_pickup"))

        assert exc_info.value.count == 2
        status_repo.save.assert_not_called()

    def test_renaming_to_an_existing_value_is_rejected(self, service, status_repo):
        status_repo.get_by_id.return_value = _status("ready")
        status_repo.get_by_value.return_value = _status("done")

        with pytest.raises(DuplicateValue):
            service.update_status("id", UpdateStatusDTO(value="done"))

    def test_label_and_color_change_even_when_in_use(self, service, status_repo, order_repo):
        status_repo.get_by_id.return_value = _status("ready")
        order_repo.count_with_status.return_value = 7

        status = service.update_status(
            "id", UpdateStatusDTO(label="Ready to go", color="#000000")
        )

        assert status.label == "Ready to go"
        assert status.color == "#000000"
        assert status.value == "ready"

    def test_turning_into_end_state_requires_type(self, service, status_repo):
        status_repo.get_by_id.return_value = _status("ready")
        with pytest.raises(MissingEndStateType):
            service.update_status("id", UpdateStatusDTO(is_end_state=True))

    def test_leaving_end_state_clears_type(self, service, status_repo):
        status_repo.get_by_id.return_value = _status(
            "done", is_end_state=True, end_state_type=EndStateType.DONE
        )
        status = service.update_status("id", UpdateStatusDTO(is_end_state=False))
        assert status.end_state_type == EndStateType.NONE

    def test_default_cannot_be_cleared_in_place(self, service, status_repo):
        status_repo.get_by_id.return_value = _status("in_progress", is_default=True)

        status = service.update_status("id", UpdateStatusDTO(is_default=False))

        assert status.is_default is True

    def test_moving_up_shifts_the_rows_in_between(self, service, status_repo):
        a, b, c = _status("a", sort_order=1), _status("b", sort_order=2), _status("c", sort_order=3)
        status_repo.get_by_id.return_value = c
        status_repo.list.return_value = [a, b, c]

        status = service.update_status(str(c.id), UpdateStatusDTO(sort_order=1))

        assert status.sort_order == 1
        status_repo.write_batch.assert_called_once_with(
            [
                (c.id, {"sort_order": 1}),
                (a.id, {"sort_order": 2}),
                (b.id, {"sort_order": 3}),
            ]
        )

    def test_same_position_writes_nothing(self, service, status_repo):
        status_repo.get_by_id.return_value = _status("ready", sort_order=2)

        service.update_status("id", UpdateStatusDTO(sort_order=2))

        status_repo.write_batch.assert_not_called()

    def test_rename_losing_a_race_is_a_duplicate(self, service, status_repo):
        status_repo.get_by_id.return_value = _status("ready")
        status_repo.save.side_effect = IntegrityError("UNIQUE constraint failed")

        with pytest.raises(DuplicateValue):
            service.update_status("id", UpdateStatusDTO(value="done"))


# ============================================================================
# delete_status
# ============================================================================


class TestDeleteStatus:
    def test_in_use_reports_the_count(self, service, status_repo, order_repo):
        status_repo.get_by_id.return_value = _status("ready")
        order_repo.count_with_status.return_value = 3

        with pytest.raises(StatusInUse) as exc_info:
            service.delete_status("id")

        assert exc_info.value.count == 3
        assert exc_info.value.extra == {"count": 3}
        status_repo.delete.assert_not_called()

    def test_default_cannot_be_deleted(self, service, status_repo):
        status_repo.get_by_id.return_value = _status("in_progress", is_default=True)

        with pytest.raises(CannotDeleteDefault):
            service.delete_status("id")
        status_repo.delete.assert_not_called()

    def test_unused_status_is_deleted(self, service, status_repo):
        status = _status("ready")
        status_repo.get_by_id.return_value = status

        service.delete_status(str(status.id))

        status_repo.delete.assert_called_once_with(str(status.id))


# ============================================================================
# reorder / set_default
# ============================================================================


class TestReorder:
    def test_positions_follow_the_given_ids(self, service, status_repo):
        a, b, c = _status("a"), _status("b"), _status("c")
        status_repo.list.return_value = [a, b, c]

        service.reorder([c.id, a.id, b.id])

        status_repo.write_batch.assert_called_once_with(
            [
                (c.id, {"sort_order": 1}),
                (a.id, {"sort_order": 2}),
                (b.id, {"sort_order": 3}),
            ]
        )

    def test_unknown_id_is_rejected(self, service, status_repo):
        a = _status("a")
        status_repo.list.return_value = [a]

        with pytest.raises(UnknownStatus):
            service.reorder([a.id, uuid4()])
        status_repo.write_batch.assert_not_called()

    def test_missing_id_is_rejected(self, service, status_repo):
        a, b = _status("a"), _status("b")
        status_repo.list.return_value = [a, b]

        with pytest.raises(InvalidStatusOrder):
            service.reorder([a.id])

    def test_repeated_id_is_rejected(self, service, status_repo):
        a, b = _status("a"), _status("b")
        status_repo.list.return_value = [a, b]

        with pytest.raises(InvalidStatusOrder):
            service.reorder([a.id, a.id, b.id])


class TestSetDefault:
    def test_single_batch_moves_the_flag(self, service, status_repo):
        old = _status("in_progress", is_default=True)
        new = _status("ready")
        status_repo.get_by_id.return_value = new
        status_repo.list.return_value = [old]

        service.set_default(str(new.id))

        status_repo.write_batch.assert_called_once_with(
            [(old.id, {"is_default": False}), (new.id, {"is_default": True})]
        )


# ============================================================================
# Queries
# ============================================================================


class TestQueries:
    def test_list_statuses_attaches_order_counts(self, service, status_repo, order_repo):
        status_repo.list.return_value = [_status("ready"), _status("done")]
        order_repo.counts_by_status.return_value = {"ready": 4}

        statuses = service.list_statuses()

        assert [s.order_count for s in statuses] == [4, 0]

    def test_missing_default(self, service, status_repo):
        status_repo.get_default.return_value = None
        with pytest.raises(NoDefaultStatus):
            service.get_default()
