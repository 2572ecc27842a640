"""Report files: flush reports of a test run, keyed by test id."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from softcheck.errors import ReportFileError
from softcheck.ledger import FailureLedger

_reports_adapter = TypeAdapter(dict[str, FailureLedger])


def dump_reports(reports: dict[str, FailureLedger], indent: int | None = 2) -> str:
    """Serialize reports to JSON, omitting empty buckets of each test."""
    return json.dumps({test_id: ledger.to_dict() for test_id, ledger in reports.items()}, indent=indent)


def write_reports(path: Path, reports: dict[str, FailureLedger], indent: int | None = 2) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(dump_reports(reports, indent=indent) + "\n", encoding="utf-8")


def load_reports(path: Path) -> dict[str, FailureLedger]:
    """Read a report file written by :func:`write_reports`.

    Raises
    ------
    ReportFileError
        If the file is missing or not a valid report.
    """
    try:
        raw = path.read_bytes()
    except OSError as exc:
        raise ReportFileError(path, exc.strerror or str(exc)) from exc
    try:
        return _reports_adapter.validate_json(raw)
    except ValidationError as exc:
        raise ReportFileError(path, f"invalid report: {exc.error_count()} errors") from exc


def count_failures(reports: dict[str, FailureLedger]) -> tuple[int, int]:
    """Return (unexpected, known) failure counts across all tests."""
    unexpected = sum(len(ledger.failures) for ledger in reports.values())
    known = sum(len(ledger.known_failures) for ledger in reports.values())
    return unexpected, known
