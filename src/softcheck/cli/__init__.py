"""CLI for inspecting and gating soft assertion reports."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.table import Table

from softcheck.errors import ReportFileError
from softcheck.ledger import FailureLedger
from softcheck.report import count_failures, load_reports
from softcheck.types import Bucket

EXIT_OK = 0
EXIT_FAILURES = 1
EXIT_BAD_REPORT = 2


def main(argv: Sequence[str] | None = None) -> None:
    """Entry point for softcheck CLI."""
    parser = _build_parser()
    args = parser.parse_args(sys.argv[1:] if argv is None else list(argv))
    console = Console()

    if args.command == "show":
        raise SystemExit(_run_show(Path(args.report), console))

    if args.command == "gate":
        raise SystemExit(_run_gate(Path(args.report), console, fail_on_known=args.fail_on_known))

    parser.print_help()
    raise SystemExit(EXIT_OK)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="softcheck", description="Soft assertion report tools")
    subparsers = parser.add_subparsers(dest="command")

    show_parser = subparsers.add_parser("show", help="Print the failures of a report")
    show_parser.add_argument("report", help="Report file written by the pytest plugin")

    gate_parser = subparsers.add_parser(
        "gate", help="Exit non-zero when a report holds unexpected failures"
    )
    gate_parser.add_argument("report", help="Report file written by the pytest plugin")
    gate_parser.add_argument(
        "--fail-on-known",
        action="store_true",
        help="Also fail when only known failures were recorded",
    )
    return parser


def _ledger_table(test_id: str, ledger: FailureLedger) -> Table:
    table = Table(title=test_id, title_justify="left")
    table.add_column("Bucket")
    table.add_column("Label", style="bold")
    table.add_column("Message")
    for label, message in ledger.failures.items():
        table.add_row(f"[red]{Bucket.FAILURES.value}[/red]", label, message)
    for label, message in ledger.known_failures.items():
        table.add_row(f"[yellow]{Bucket.KNOWN_FAILURES.value}[/yellow]", label, message)
    return table


def _run_show(path: Path, console: Console) -> int:
    try:
        reports = load_reports(path)
    except ReportFileError as exc:
        console.print(f"[red]{exc}[/red]")
        return EXIT_BAD_REPORT

    if not reports:
        console.print("[green]No soft assertion failures recorded.[/green]")
        return EXIT_OK

    for test_id, ledger in reports.items():
        console.print(_ledger_table(test_id, ledger))

    unexpected, known = count_failures(reports)
    console.print(f"{len(reports)} tests, {unexpected} failures, {known} known failures")
    return EXIT_OK


def _run_gate(path: Path, console: Console, *, fail_on_known: bool = False) -> int:
    try:
        reports = load_reports(path)
    except ReportFileError as exc:
        console.print(f"[red]{exc}[/red]")
        return EXIT_BAD_REPORT

    unexpected, known = count_failures(reports)
    if unexpected:
        console.print(f"[red]FAILED[/red] {unexpected} unexpected failures ({known} known)")
        return EXIT_FAILURES
    if known and fail_on_known:
        console.print(f"[red]FAILED[/red] {known} known failures (--fail-on-known)")
        return EXIT_FAILURES

    console.print(f"[green]PASSED[/green] no unexpected failures ({known} known)")
    return EXIT_OK
