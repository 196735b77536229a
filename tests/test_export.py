"""Tests for payexport.services.export."""

import io
import json
import os
from pathlib import Path

import pytest
from rich.console import Console

from db.enums import DEFAULT_FIELDS, ExportField, ExportFormat
from payexport.services.errors import ExportAborted, FileSystemError
from payexport.services.export import (
    Exporter,
    ExportResult,
    assume_yes,
    deny,
    summary_line,
)
from payexport.services.filters import ConsoleDestination, FileDestination
from payexport.services.projection import ExportRow

FIELDS: list[ExportField] = [ExportField.STATUS, ExportField.AMOUNT, ExportField.ID]
ROWS: list[ExportRow] = [
    {"status": "complete", "amount": "150.00", "id": "1"},
    {"status": "refunded", "amount": "20.00", "id": "2"},
]


def _console() -> tuple[Console, io.StringIO]:
    buf = io.StringIO()
    return Console(file=buf, width=120, color_system=None), buf


class RecordingConfirm:
    def __init__(self, answer: bool) -> None:
        self.answer = answer
        self.prompts: list[str] = []

    def __call__(self, prompt: str) -> bool:
        self.prompts.append(prompt)
        return self.answer


class TestConsole:
    def test_json_is_one_pretty_array(self) -> None:
        console, buf = _console()
        result: ExportResult = Exporter(console).export(ROWS, FIELDS, ExportFormat.JSON, ConsoleDestination())
        assert json.loads(buf.getvalue()) == ROWS
        assert '\n    {\n        "status": "complete"' in buf.getvalue()
        assert result.row_count == 2
        assert result.output_path is None

    def test_csv_renders_table(self) -> None:
        console, buf = _console()
        Exporter(console).export(ROWS, FIELDS, ExportFormat.CSV, ConsoleDestination())
        out: str = buf.getvalue()
        assert "status" in out and "amount" in out
        assert "refunded" in out and "150.00" in out
        assert "status,amount,id" not in out

    def test_table_does_not_interpret_markup(self) -> None:
        console, buf = _console()
        rows: list[ExportRow] = [{"note": "[bold]hi[/bold]"}]
        Exporter(console).export(rows, [ExportField.NOTE], ExportFormat.CSV, ConsoleDestination())
        assert "[bold]hi[/bold]" in buf.getvalue()


class TestFileWrite:
    def test_csv_file(self, tmp_path: Path) -> None:
        target: Path = tmp_path / "out.csv"
        exporter = Exporter(_console()[0])
        exporter.prepare(FileDestination(target))
        result = exporter.export(ROWS, FIELDS, ExportFormat.CSV, FileDestination(target))
        assert target.read_text(encoding="utf-8") == "status,amount,id\ncomplete,150.00,1\nrefunded,20.00,2\n"
        assert result.output_path == target
        assert result.row_count == 2

    def test_csv_header_only_when_empty(self, tmp_path: Path) -> None:
        target: Path = tmp_path / "empty.csv"
        Exporter(_console()[0]).export([], DEFAULT_FIELDS, ExportFormat.CSV, FileDestination(target))
        assert target.read_text(encoding="utf-8") == "customer-id,date,status,amount,id,gateway\n"

    def test_csv_quotes_embedded_commas(self, tmp_path: Path) -> None:
        target: Path = tmp_path / "notes.csv"
        rows: list[ExportRow] = [{"id": "1", "note": "gift, renewal"}]
        fields = [ExportField.ID, ExportField.NOTE]
        Exporter(_console()[0]).export(rows, fields, ExportFormat.CSV, FileDestination(target))
        assert target.read_text(encoding="utf-8") == 'id,note\n1,"gift, renewal"\n'

    def test_json_file(self, tmp_path: Path) -> None:
        target: Path = tmp_path / "out.json"
        Exporter(_console()[0], json_indent=2).export(ROWS, FIELDS, ExportFormat.JSON, FileDestination(target))
        text: str = target.read_text(encoding="utf-8")
        assert json.loads(text) == ROWS
        assert text.startswith('[\n  {\n    "status"')

    def test_write_failure(self, tmp_path: Path) -> None:
        target: Path = tmp_path / "missing-dir" / "out.csv"
        with pytest.raises(FileSystemError, match="Could not write"):
            Exporter(_console()[0]).export(ROWS, FIELDS, ExportFormat.CSV, FileDestination(target))


class TestPrepare:
    def test_console_needs_nothing(self) -> None:
        confirm = RecordingConfirm(False)
        Exporter(_console()[0], confirm).prepare(ConsoleDestination())
        assert confirm.prompts == []

    def test_approved_folder_created_only_on_write(self, tmp_path: Path) -> None:
        target: Path = tmp_path / "a" / "b" / "out.csv"
        confirm = RecordingConfirm(True)
        exporter = Exporter(_console()[0], confirm)
        exporter.prepare(FileDestination(target))
        assert not (tmp_path / "a").exists()
        assert len(confirm.prompts) == 1
        assert "Folder does not exist" in confirm.prompts[0]

        exporter.export(ROWS, FIELDS, ExportFormat.CSV, FileDestination(target))
        assert target.parent.is_dir()
        assert target.read_text(encoding="utf-8").startswith("status,amount,id\n")

    def test_declined_folder_creation(self, tmp_path: Path) -> None:
        target: Path = tmp_path / "new" / "out.csv"
        with pytest.raises(ExportAborted):
            Exporter(_console()[0], deny).prepare(FileDestination(target))
        assert not target.parent.exists()

    def test_existing_file_requires_consent(self, tmp_path: Path) -> None:
        target: Path = tmp_path / "out.json"
        target.write_text("[]", encoding="utf-8")
        confirm = RecordingConfirm(False)
        with pytest.raises(ExportAborted):
            Exporter(_console()[0], confirm).prepare(FileDestination(target))
        assert "File already exists" in confirm.prompts[0]
        assert target.read_text(encoding="utf-8") == "[]"

    def test_overwrite_with_consent(self, tmp_path: Path) -> None:
        target: Path = tmp_path / "out.json"
        target.write_text("[]", encoding="utf-8")
        Exporter(_console()[0], assume_yes).prepare(FileDestination(target))

    def test_no_prompt_for_new_file_in_existing_folder(self, tmp_path: Path) -> None:
        confirm = RecordingConfirm(False)
        Exporter(_console()[0], confirm).prepare(FileDestination(tmp_path / "out.csv"))
        assert confirm.prompts == []

    @pytest.mark.skipif(os.name == "nt" or os.geteuid() == 0, reason="needs POSIX permissions as non-root")
    def test_unwritable_folder(self, tmp_path: Path) -> None:
        locked: Path = tmp_path / "locked"
        locked.mkdir()
        locked.chmod(0o500)
        try:
            with pytest.raises(FileSystemError, match="not writable"):
                Exporter(_console()[0], assume_yes).prepare(FileDestination(locked / "sub" / "out.csv"))
        finally:
            locked.chmod(0o700)

    def test_unwritable_folder_via_access_check(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setattr("payexport.services.export.os.access", lambda path, mode: False)
        with pytest.raises(FileSystemError, match="not writable"):
            Exporter(_console()[0], assume_yes).prepare(FileDestination(tmp_path / "x" / "out.csv"))
        assert not (tmp_path / "x").exists()


def test_summary_line() -> None:
    assert summary_line(3) == "Exported 3 payments."
    assert summary_line(1) == "Exported 1 payment."
    assert summary_line(0) == "Exported 0 payments."
