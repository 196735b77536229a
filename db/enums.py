"""Enumeration types for the payment export tool.

These are the shared vocabularies: the filter parser validates against them
and the field projector orders its output by them.
"""

from enum import Enum


class ExportField(str, Enum):
    """Exportable payment fields, declared in canonical column order."""

    CUSTOMER_ID = "customer-id"
    DATE = "date"
    STATUS = "status"
    AMOUNT = "amount"
    ID = "id"
    GATEWAY = "gateway"
    NAME = "name"
    NOTE = "note"
    ADDRESS = "address"
    EMAIL = "email"
    PHONE = "phone"


DEFAULT_FIELDS: tuple[ExportField, ...] = (
    ExportField.CUSTOMER_ID,
    ExportField.DATE,
    ExportField.STATUS,
    ExportField.AMOUNT,
    ExportField.ID,
    ExportField.GATEWAY,
)


class PaymentStatus(str, Enum):
    """Payment status keys known to the payment ledger."""

    PENDING = "pending"
    PUBLISH = "publish"
    COMPLETE = "complete"
    REFUNDED = "refunded"
    PARTIALLY_REFUNDED = "partially_refunded"
    REVOKED = "revoked"
    FAILED = "failed"
    ABANDONED = "abandoned"
    PREAPPROVAL = "preapproval"
    CANCELLED = "cancelled"
    PROCESSING = "processing"
    ON_HOLD = "on_hold"


class ExportFormat(str, Enum):
    """Serialization format of an export."""

    CSV = "csv"
    JSON = "json"

    @property
    def extension(self) -> str:
        return f".{self.value}"


class OutputDestination(str, Enum):
    """Where an export is written."""

    SHELL = "shell"
    FILE = "file"


class NamedPeriod(str, Enum):
    """Relative date windows resolved by the period table."""

    TODAY = "today"
    YESTERDAY = "yesterday"
    THIS_WEEK = "this_week"
    LAST_WEEK = "last_week"
    THIS_MONTH = "this_month"
    LAST_MONTH = "last_month"
    THIS_QUARTER = "this_quarter"
    LAST_QUARTER = "last_quarter"
    THIS_YEAR = "this_year"
    LAST_YEAR = "last_year"


class AmountOperator(str, Enum):
    """Comparison applied to the payment total."""

    GREATER_THAN = ">"
    LESS_THAN = "<"
