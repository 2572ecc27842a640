"""Error types raised by softcheck."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from softcheck.ledger import FailureLedger


class SoftcheckError(Exception):
    """Base class for hard errors (misuse or malfunction, never a check outcome)."""


class InvalidComparisonError(SoftcheckError, TypeError):
    """Raised when an ordering check receives non-numeric operands."""


class NormalizationError(SoftcheckError, ValueError):
    """Raised when probing a value for a date prefix fails unexpectedly."""

    def __init__(self, value: str, cause: Exception | None = None) -> None:
        self.value = value
        self.cause = cause
        message = f"Exception while normalizing value for soft assertion: {value!r}"
        if cause:
            message += f" ({type(cause).__name__}: {cause})"
        super().__init__(message)


class ReportSerializationError(SoftcheckError):
    """Raised when the failure ledger cannot be serialized on flush.

    The raw ledger content is kept on ``ledger`` so no failure data is lost.
    """

    def __init__(self, ledger: dict[str, dict[str, Any]], cause: Exception | None = None) -> None:
        self.ledger = ledger
        self.cause = cause
        message = f"Failed to serialize soft assertion report. Raw ledger: {ledger!r}"
        if cause:
            message += f"\nCause: {cause}"
        super().__init__(message)


class ReportFileError(SoftcheckError):
    """Raised when a saved report file cannot be read."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        self.reason = reason
        super().__init__(f"Cannot read report {path}: {reason}")


class SoftAssertionFailure(AssertionError):
    """Aggregate failure raised by flush, carrying every recorded failure."""

    def __init__(self, report: str, ledger: FailureLedger) -> None:
        self.report = ledger
        super().__init__(report)

    @property
    def failures(self) -> dict[str, str]:
        return dict(self.report.failures)

    @property
    def known_failures(self) -> dict[str, str]:
        return dict(self.report.known_failures)

    @property
    def has_unknown_failures(self) -> bool:
        return bool(self.report.failures)
