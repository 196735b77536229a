"""Export pipeline: raw flags -> filters -> query -> fetch -> project -> export."""

from datetime import date

import structlog

from payexport.services._helpers import today_utc
from payexport.services.export import Exporter, ExportResult
from payexport.services.filters import FilterSet, RawExportArgs, parse_filters
from payexport.services.projection import project_all
from payexport.services.query import DEFAULT_MIN_DATE, QuerySpec, build_query
from payexport.services.store import RecordStore

logger = structlog.get_logger(__name__)


class ExportPipeline:
    """Runs one export invocation end to end.

    Validation and destination checks complete before the store is queried;
    any error propagates and nothing is written.
    """

    def __init__(
        self,
        store: RecordStore,
        exporter: Exporter,
        today: date | None = None,
        min_date: date = DEFAULT_MIN_DATE,
    ) -> None:
        self.store: RecordStore = store
        self.exporter: Exporter = exporter
        self.today: date | None = today
        self.min_date: date = min_date

    def run(self, raw: RawExportArgs) -> ExportResult:
        filters: FilterSet = parse_filters(raw)
        spec: QuerySpec = build_query(filters, self.today or today_utc(), self.min_date)

        self.exporter.prepare(filters.destination)

        logger.info("fetching_payments", query=spec.as_dict())
        records = self.store.fetch(spec)
        rows = project_all(records, filters.fields)

        result: ExportResult = self.exporter.export(
            rows, filters.fields, filters.fmt, filters.destination
        )
        logger.info("export_complete", rows=result.row_count, format=result.fmt.value)
        return result
