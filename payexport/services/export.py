"""Render projected rows to the console or to a CSV / JSON file."""

import csv
import os
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from pathlib import Path

import structlog
from rich.console import Console
from rich.prompt import Confirm
from rich.table import Table
from rich.text import Text

from db.enums import ExportField, ExportFormat
from payexport.services._helpers import dump_json
from payexport.services.errors import ExportAborted, FileSystemError
from payexport.services.filters import Destination, FileDestination
from payexport.services.projection import ExportRow

logger = structlog.get_logger(__name__)

ConfirmPolicy = Callable[[str], bool]


def assume_yes(prompt: str) -> bool:
    return True


def deny(prompt: str) -> bool:
    return False


def interactive_confirm(prompt: str) -> bool:
    return Confirm.ask(prompt, default=False)


def summary_line(count: int) -> str:
    noun: str = "payment" if count == 1 else "payments"
    return f"Exported {count} {noun}."


@dataclass
class ExportResult:
    row_count: int
    fmt: ExportFormat
    output_path: Path | None


def _nearest_existing(folder: Path) -> Path:
    while not folder.exists() and folder != folder.parent:
        folder = folder.parent
    return folder


class Exporter:
    """Serializes export rows and applies destination side effects."""

    def __init__(
        self,
        console: Console | None = None,
        confirm: ConfirmPolicy = deny,
        json_indent: int = 4,
    ) -> None:
        self.console: Console = console or Console()
        self.confirm: ConfirmPolicy = confirm
        self.json_indent: int = json_indent
        self._approved_folder: Path | None = None

    # ------------------------------------------------------------------
    # Destination checks
    # ------------------------------------------------------------------

    def prepare(self, destination: Destination) -> None:
        """Confirm directory creation / overwrite and check writability.

        Runs before any record is fetched and touches nothing on disk. An
        approved folder is created by ``export`` right before the write.
        """
        self._approved_folder = None
        if not isinstance(destination, FileDestination):
            return

        path: Path = destination.path
        parent: Path = path.parent
        create_parent: bool = not parent.exists()

        if create_parent and not self.confirm(f'Folder does not exist: "{parent}". Create it?'):
            raise ExportAborted(f"Export cancelled: folder {parent} was not created.")

        if path.exists() and not self.confirm(f'File already exists: "{path}". Overwrite?'):
            raise ExportAborted(f"Export cancelled: {path} was not overwritten.")

        ancestor: Path = _nearest_existing(parent)
        if not os.access(ancestor, os.W_OK):
            logger.error("folder_not_writable", folder=str(ancestor))
            raise FileSystemError(f'Folder is not writable: "{ancestor}".')

        if create_parent:
            self._approved_folder = parent

    def _create_approved_folder(self, path: Path) -> None:
        folder: Path | None = self._approved_folder
        if folder is None or folder != path.parent or folder.exists():
            return
        try:
            folder.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise FileSystemError(f'Could not create folder "{folder}": {exc}') from exc
        logger.info("folder_created", folder=str(folder))

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------

    def _render_table(self, rows: Sequence[ExportRow], fields: Sequence[ExportField]) -> None:
        table = Table()
        for f in fields:
            table.add_column(f.value)
        for row in rows:
            table.add_row(*(Text(row[f.value]) for f in fields))
        self.console.print(table)

    def _write_csv(self, path: Path, rows: Sequence[ExportRow], fields: Sequence[ExportField]) -> None:
        with open(path, "w", newline="", encoding="utf-8") as f:
            writer = csv.writer(f, lineterminator="\n")
            writer.writerow([field.value for field in fields])
            for row in rows:
                writer.writerow([row[field.value] for field in fields])

    def _write_json(self, path: Path, rows: Sequence[ExportRow]) -> None:
        with open(path, "w", encoding="utf-8") as f:
            f.write(dump_json(list(rows), indent=self.json_indent))
            f.write("\n")

    def export(
        self,
        rows: Sequence[ExportRow],
        fields: Sequence[ExportField],
        fmt: ExportFormat,
        destination: Destination,
    ) -> ExportResult:
        if not isinstance(destination, FileDestination):
            if fmt is ExportFormat.JSON:
                self.console.out(dump_json(list(rows), indent=self.json_indent), highlight=False)
            else:
                self._render_table(rows, fields)
            return ExportResult(row_count=len(rows), fmt=fmt, output_path=None)

        path: Path = destination.path
        self._create_approved_folder(path)
        try:
            if fmt is ExportFormat.JSON:
                self._write_json(path, rows)
            else:
                self._write_csv(path, rows, fields)
        except OSError as exc:
            logger.error("export_write_failed", path=str(path), error=str(exc))
            raise FileSystemError(f'Could not write "{path}": {exc}') from exc

        logger.info("export_written", path=str(path), rows=len(rows), format=fmt.value)
        return ExportResult(row_count=len(rows), fmt=fmt, output_path=path)
