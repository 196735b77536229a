"""Tests for payexport.services.projection."""

from datetime import date
from decimal import Decimal

from db.enums import DEFAULT_FIELDS, ExportField
from payexport.services.projection import ExportRow, project, project_all
from tests.conftest import make_record


def test_canonical_order_regardless_of_request_order() -> None:
    record = make_record()
    row: ExportRow = project(record, [ExportField.GATEWAY, ExportField.ID, ExportField.CUSTOMER_ID])
    assert list(row) == ["customer-id", "id", "gateway"]


def test_default_fields() -> None:
    record = make_record(id=7, customer_id=3, date=date(2023, 11, 2), total=Decimal("5"))
    row: ExportRow = project(record, DEFAULT_FIELDS)
    assert row == {
        "customer-id": "3",
        "date": "2023-11-02",
        "status": "complete",
        "amount": "5.00",
        "id": "7",
        "gateway": "stripe",
    }


def test_missing_values_are_empty_strings() -> None:
    row: ExportRow = project(make_record(), [ExportField.NOTE, ExportField.PHONE, ExportField.EMAIL])
    assert row == {"note": "", "email": "", "phone": ""}


def test_all_fields() -> None:
    record = make_record(
        name="Ada", note="n", address="London", email="ada@analytical.io", phone="1"
    )
    row: ExportRow = project(record, list(ExportField))
    assert list(row) == [f.value for f in ExportField]
    assert row["address"] == "London"


def test_project_all() -> None:
    rows = project_all([make_record(id=1), make_record(id=2)], [ExportField.ID])
    assert rows == [{"id": "1"}, {"id": "2"}]
