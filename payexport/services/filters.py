"""Parse and validate raw export flags into a typed FilterSet.

Each flag is validated on its own; the only cross-flag rules are the
date-range / relative-window exclusion and the output / file / format
agreement. The first failing flag raises ``ValidationError``.
"""

import re
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from pathlib import Path

import structlog
from email_validator import EmailNotValidError, validate_email

from db.enums import (
    DEFAULT_FIELDS,
    AmountOperator,
    ExportField,
    ExportFormat,
    NamedPeriod,
    OutputDestination,
    PaymentStatus,
)
from payexport.services._helpers import split_csv_arg
from payexport.services.errors import ValidationError

logger = structlog.get_logger(__name__)

_DATE_RE = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")
_AMOUNT_RE = re.compile(r"^([><])\s?\$?(\d+(?:\.\d{1,2})?)$")
_PRODUCT_RE = re.compile(r"^\d+(?:\s*,\s*\d+)*$")
_DIGITS_RE = re.compile(r"^\d+$")


# ------------------------------------------------------------------
# Raw input
# ------------------------------------------------------------------


@dataclass
class RawExportArgs:
    """Flag values exactly as received from the command line."""

    start_date: str | None = None
    end_date: str | None = None
    last_days: str | None = None
    format: str | None = None
    fields: str | None = None
    output: str | None = None
    file: str | None = None
    amount_filter: str | None = None
    status_filter: str | None = None
    customer_filter: str | None = None
    product_filter: str | None = None


# ------------------------------------------------------------------
# Parsed filter values
# ------------------------------------------------------------------


@dataclass(frozen=True)
class ExplicitRange:
    start: date | None
    end: date | None


@dataclass(frozen=True)
class RelativeWindow:
    days: int | None = None
    period: NamedPeriod | None = None


DateSelector = ExplicitRange | RelativeWindow


@dataclass(frozen=True)
class AmountFilter:
    operator: AmountOperator
    amount: Decimal


@dataclass(frozen=True)
class CustomerById:
    customer_id: int


@dataclass(frozen=True)
class CustomerByEmail:
    email: str


CustomerIdentity = CustomerById | CustomerByEmail


@dataclass(frozen=True)
class ConsoleDestination:
    pass


@dataclass(frozen=True)
class FileDestination:
    path: Path


Destination = ConsoleDestination | FileDestination


@dataclass(frozen=True)
class FilterSet:
    date_selector: DateSelector | None = None
    amount: AmountFilter | None = None
    statuses: tuple[PaymentStatus, ...] | None = None
    customer: CustomerIdentity | None = None
    products: tuple[int, ...] | None = None
    fields: tuple[ExportField, ...] = DEFAULT_FIELDS
    fmt: ExportFormat = ExportFormat.CSV
    destination: Destination = field(default_factory=ConsoleDestination)


# ------------------------------------------------------------------
# Per-flag parsers
# ------------------------------------------------------------------


def parse_date(raw: str, flag: str = "--start-date") -> date:
    """Parse a strict ``YYYY-MM-DD`` date; the value must round-trip exactly."""
    parsed: date | None = None
    if _DATE_RE.fullmatch(raw):
        try:
            parsed = date.fromisoformat(raw)
        except ValueError:
            parsed = None
    if parsed is None or parsed.isoformat() != raw:
        raise ValidationError(
            flag, raw, f'Invalid date "{raw}". Format: YYYY-MM-DD (e.g., 2023-11-01).'
        )
    return parsed


def parse_relative_window(raw: str) -> RelativeWindow:
    value: str = raw.strip()
    if _DIGITS_RE.match(value):
        days: int = int(value)
        if days > 0:
            return RelativeWindow(days=days)
    else:
        token: str = value.lower().replace("-", "_").replace(" ", "_")
        try:
            return RelativeWindow(period=NamedPeriod(token))
        except ValueError:
            pass
    periods: str = ", ".join(p.value for p in NamedPeriod)
    raise ValidationError(
        "--last-days",
        raw,
        f'Invalid last days "{raw}". Must be a positive number or one of: {periods}.',
    )


def parse_amount_filter(raw: str) -> AmountFilter:
    """Parse ``'> $1,000.50'`` style filters into an operator and a magnitude."""
    candidate: str = raw.strip().replace(",", "")
    match = _AMOUNT_RE.match(candidate)
    if not match:
        raise ValidationError(
            "--amount-filter",
            raw,
            f"Invalid amount filter \"{raw}\". Expected e.g. '> $1.00' or '< $100'.",
        )
    operator, magnitude = match.groups()
    return AmountFilter(operator=AmountOperator(operator), amount=Decimal(magnitude))


def parse_status_filter(raw: str) -> tuple[PaymentStatus, ...]:
    tokens: list[str] = [t for t in split_csv_arg(raw) if t]
    if not tokens:
        raise ValidationError("--status-filter", raw, "Status filter must name at least one status.")

    statuses: list[PaymentStatus] = []
    for token in tokens:
        try:
            status: PaymentStatus = PaymentStatus(token.lower())
        except ValueError:
            available: str = ", ".join(s.value for s in PaymentStatus)
            raise ValidationError(
                "--status-filter",
                token,
                f'Invalid status "{token}". Available options: {available}',
            ) from None
        if status not in statuses:
            statuses.append(status)
    return tuple(statuses)


def parse_customer_filter(raw: str) -> CustomerIdentity:
    value: str = raw.strip()
    if _DIGITS_RE.match(value):
        return CustomerById(customer_id=int(value))
    try:
        info = validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise ValidationError(
            "--customer-filter",
            raw,
            f'Invalid customer filter "{raw}". Must be an email or integer '
            '(e.g., "client.name@company.com" or "20123").',
        ) from None
    return CustomerByEmail(email=info.normalized)


def parse_product_filter(raw: str) -> tuple[int, ...]:
    value: str = raw.strip()
    if not _PRODUCT_RE.match(value):
        raise ValidationError(
            "--product-filter",
            raw,
            f'Invalid product filter "{raw}". Must be a list of ids (e.g., "123,456").',
        )
    ids: list[int] = []
    for token in split_csv_arg(value):
        product_id: int = int(token)
        if product_id <= 0:
            raise ValidationError(
                "--product-filter", token, f'Invalid product id "{token}". Must be positive.'
            )
        if product_id not in ids:
            ids.append(product_id)
    return tuple(ids)


def parse_fields(raw: str) -> tuple[ExportField, ...]:
    """Parse a field list; the result is deduplicated and in canonical order."""
    requested: set[ExportField] = set()
    for token in split_csv_arg(raw):
        try:
            requested.add(ExportField(token.lower()))
        except ValueError:
            available: str = ", ".join(f.value for f in ExportField)
            raise ValidationError(
                "--fields", token, f'Invalid field "{token}". Available options: {available}'
            ) from None
    return tuple(f for f in ExportField if f in requested)


def parse_format(raw: str | None) -> ExportFormat:
    if raw is None:
        return ExportFormat.CSV
    try:
        return ExportFormat(raw.strip().lower())
    except ValueError:
        raise ValidationError(
            "--format", raw, f'Invalid format "{raw}". Options: csv, json.'
        ) from None


def parse_destination(output: str | None, file: str | None, fmt: ExportFormat) -> Destination:
    try:
        kind: OutputDestination = OutputDestination((output or "shell").strip().lower())
    except ValueError:
        raise ValidationError(
            "--output", output, f'Invalid output "{output}". Options: shell, file.'
        ) from None

    if kind is OutputDestination.SHELL:
        if file is not None:
            raise ValidationError(
                "--file", file, 'File argument is not allowed when output is set to "shell".'
            )
        return ConsoleDestination()

    if not file or not file.strip():
        raise ValidationError(
            "--file", file, 'File argument is required when output is set to "file".'
        )
    path: Path = Path(file.strip()).expanduser()
    if path.suffix.lower() != fmt.extension:
        raise ValidationError(
            "--file",
            file,
            f'File "{file}" must have a {fmt.extension} extension for {fmt.value} output.',
        )
    return FileDestination(path=path)


# ------------------------------------------------------------------
# Entry point
# ------------------------------------------------------------------


def _parse_date_selector(raw: RawExportArgs) -> DateSelector | None:
    if raw.last_days is not None:
        if raw.start_date is not None or raw.end_date is not None:
            raise ValidationError(
                "--last-days",
                raw.last_days,
                "Cannot use start date or end date with last days.",
            )
        return parse_relative_window(raw.last_days)

    start: date | None = parse_date(raw.start_date, "--start-date") if raw.start_date is not None else None
    end: date | None = parse_date(raw.end_date, "--end-date") if raw.end_date is not None else None
    if start is None and end is None:
        return None
    if start is not None and end is not None and start > end:
        raise ValidationError(
            "--end-date", raw.end_date, f"End date {end} is before start date {start}."
        )
    return ExplicitRange(start=start, end=end)


def parse_filters(raw: RawExportArgs) -> FilterSet:
    """Validate every flag and build the FilterSet, or raise ValidationError."""
    date_selector = _parse_date_selector(raw)
    fmt: ExportFormat = parse_format(raw.format)
    fields = parse_fields(raw.fields) if raw.fields is not None else DEFAULT_FIELDS
    destination = parse_destination(raw.output, raw.file, fmt)

    filters = FilterSet(
        date_selector=date_selector,
        amount=parse_amount_filter(raw.amount_filter) if raw.amount_filter is not None else None,
        statuses=parse_status_filter(raw.status_filter) if raw.status_filter is not None else None,
        customer=parse_customer_filter(raw.customer_filter) if raw.customer_filter is not None else None,
        products=parse_product_filter(raw.product_filter) if raw.product_filter is not None else None,
        fields=fields,
        fmt=fmt,
        destination=destination,
    )
    logger.debug("filters_parsed", fields=[f.value for f in fields], format=fmt.value)
    return filters
