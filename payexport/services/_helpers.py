"""Shared utilities for the service layer."""

import json
from datetime import UTC, date, datetime
from decimal import Decimal


def today_utc() -> date:
    return datetime.now(UTC).date()


def _json_default(obj: object) -> str:
    if isinstance(obj, (date, datetime)):
        return obj.isoformat()
    if isinstance(obj, Decimal):
        return str(obj)
    return str(obj)


def dump_json(obj: object, indent: int | None = None) -> str:
    return json.dumps(obj, default=_json_default, indent=indent)


def split_csv_arg(raw: str) -> list[str]:
    """Split a comma-separated flag value, stripping whitespace around tokens."""
    return [part.strip() for part in raw.split(",")]
