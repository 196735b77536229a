"""Project payment records onto the selected export fields."""

from collections.abc import Callable, Iterable, Sequence
from decimal import Decimal

from db.enums import ExportField
from payexport.services.store import PaymentRecord

ExportRow = dict[str, str]


def _text(value: object) -> str:
    return "" if value is None else str(value)


def _money(value: Decimal) -> str:
    return f"{value:.2f}"


_GETTERS: dict[ExportField, Callable[[PaymentRecord], str]] = {
    ExportField.CUSTOMER_ID: lambda r: _text(r.customer_id),
    ExportField.DATE: lambda r: r.date.isoformat(),
    ExportField.STATUS: lambda r: r.status,
    ExportField.AMOUNT: lambda r: _money(r.total),
    ExportField.ID: lambda r: _text(r.id),
    ExportField.GATEWAY: lambda r: _text(r.gateway),
    ExportField.NAME: lambda r: _text(r.name),
    ExportField.NOTE: lambda r: _text(r.note),
    ExportField.ADDRESS: lambda r: _text(r.address),
    ExportField.EMAIL: lambda r: _text(r.email),
    ExportField.PHONE: lambda r: _text(r.phone),
}


def project(record: PaymentRecord, fields: Iterable[ExportField]) -> ExportRow:
    """Return the selected fields of *record* in canonical field order."""
    selected: set[ExportField] = set(fields)
    return {f.value: _GETTERS[f](record) for f in ExportField if f in selected}


def project_all(records: Sequence[PaymentRecord], fields: Sequence[ExportField]) -> list[ExportRow]:
    return [project(record, fields) for record in records]
