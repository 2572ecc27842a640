import io
import json

import pytest
from rich.console import Console

from softcheck.cli import EXIT_BAD_REPORT, EXIT_FAILURES, EXIT_OK, _run_gate, _run_show, main
from softcheck.errors import ReportFileError
from softcheck.ledger import FailureLedger
from softcheck.report import count_failures, dump_reports, load_reports, write_reports
from softcheck.types import Bucket


def make_ledger(failures: dict[str, str] | None = None, known: dict[str, str] | None = None) -> FailureLedger:
    ledger = FailureLedger()
    for label, message in (failures or {}).items():
        ledger.record(label, message, Bucket.FAILURES)
    for label, message in (known or {}).items():
        ledger.record(label, message, Bucket.KNOWN_FAILURES)
    return ledger


def make_console() -> Console:
    return Console(file=io.StringIO(), width=200)


def output(console: Console) -> str:
    return console.file.getvalue()


@pytest.fixture
def mixed_report(tmp_path):
    path = tmp_path / "soft.json"
    write_reports(
        path,
        {
            "tests/test_a.py::test_one": make_ledger({"totalCount": "expected 5 but was 4"}),
            "tests/test_a.py::test_two": make_ledger(known={"flakyCheck": "retrying"}),
        },
    )
    return path


@pytest.fixture
def known_only_report(tmp_path):
    path = tmp_path / "known.json"
    write_reports(path, {"tests/test_b.py::test_three": make_ledger(known={"legacyBug": "mismatch"})})
    return path


def test_dump_reports_omits_empty_buckets():
    dumped = json.loads(dump_reports({"t": make_ledger(known={"a": "b"})}))
    assert dumped == {"t": {"knownFailures": {"a": "b"}}}


def test_write_and_load_reports(mixed_report):
    reports = load_reports(mixed_report)

    assert list(reports) == ["tests/test_a.py::test_one", "tests/test_a.py::test_two"]
    assert reports["tests/test_a.py::test_two"].known_failures == {"flakyCheck": "retrying"}
    assert count_failures(reports) == (1, 1)


def test_load_missing_report(tmp_path):
    with pytest.raises(ReportFileError):
        load_reports(tmp_path / "missing.json")


def test_load_invalid_report(tmp_path):
    path = tmp_path / "bad.json"
    path.write_text('{"t": {"failures": ["not", "a", "mapping"]}}', encoding="utf-8")

    with pytest.raises(ReportFileError, match="invalid report"):
        load_reports(path)


class TestGate:
    """Tests for the gate command."""

    def test_fails_on_unexpected(self, mixed_report):
        console = make_console()
        assert _run_gate(mixed_report, console) == EXIT_FAILURES
        assert "1 unexpected failures" in output(console)

    def test_passes_with_known_only(self, known_only_report):
        console = make_console()
        assert _run_gate(known_only_report, console) == EXIT_OK
        assert "PASSED" in output(console)

    def test_fail_on_known(self, known_only_report):
        console = make_console()
        assert _run_gate(known_only_report, console, fail_on_known=True) == EXIT_FAILURES

    def test_bad_report(self, tmp_path):
        console = make_console()
        assert _run_gate(tmp_path / "missing.json", console) == EXIT_BAD_REPORT


class TestShow:
    """Tests for the show command."""

    def test_renders_tables(self, mixed_report):
        console = make_console()
        assert _run_show(mixed_report, console) == EXIT_OK

        text = output(console)
        assert "totalCount" in text
        assert "flakyCheck" in text
        assert "2 tests, 1 failures, 1 known failures" in text

    def test_empty_report(self, tmp_path):
        path = tmp_path / "empty.json"
        write_reports(path, {})
        console = make_console()

        assert _run_show(path, console) == EXIT_OK
        assert "No soft assertion failures" in output(console)


def test_main_exit_codes(mixed_report, known_only_report):
    with pytest.raises(SystemExit) as exc_info:
        main(["gate", str(mixed_report)])
    assert exc_info.value.code == EXIT_FAILURES

    with pytest.raises(SystemExit) as exc_info:
        main(["gate", str(known_only_report)])
    assert exc_info.value.code == EXIT_OK


def test_main_without_command_prints_help(capsys):
    with pytest.raises(SystemExit) as exc_info:
        main([])

    assert exc_info.value.code == EXIT_OK
    assert "softcheck" in capsys.readouterr().out
