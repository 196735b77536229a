"""Payment export services."""

from payexport.services.errors import (
    ExportAborted,
    FileSystemError,
    PaymentExportError,
    StoreError,
    ValidationError,
)
from payexport.services.export import Exporter, ExportResult
from payexport.services.filters import FilterSet, RawExportArgs, parse_filters
from payexport.services.pipeline import ExportPipeline
from payexport.services.query import QuerySpec, build_query
from payexport.services.store import InMemoryPaymentStore, PaymentRecord, SqlPaymentStore

__all__ = [
    # Pipeline
    "ExportPipeline",
    "Exporter",
    "ExportResult",
    # Filters / query
    "FilterSet",
    "RawExportArgs",
    "parse_filters",
    "QuerySpec",
    "build_query",
    # Stores
    "InMemoryPaymentStore",
    "PaymentRecord",
    "SqlPaymentStore",
    # Exceptions
    "PaymentExportError",
    "ValidationError",
    "StoreError",
    "FileSystemError",
    "ExportAborted",
]
