"""Soft assertion engine.

Checks never raise on failure. Each failed check is classified as a known or
unexpected failure and stored in the ledger of the current execution context;
:meth:`SoftAssertions.flush` turns the accumulated failures into a single
:class:`~softcheck.errors.SoftAssertionFailure`.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable, Iterator
from contextlib import contextmanager
from typing import Any

from softcheck.comparator import Comparison, compare_numeric, is_numeric
from softcheck.config import SoftcheckConfig
from softcheck.context import CheckOutcome, ExecutionContext, ExecutionContextStore
from softcheck.errors import InvalidComparisonError, ReportSerializationError, SoftAssertionFailure
from softcheck.normalize import normalize
from softcheck.registry import KnownFailureRegistry, get_known_failure_registry
from softcheck.types import Bucket

logger = logging.getLogger(__name__)


def sanitize_message(message: str) -> str:
    """Flatten a failure message so it embeds cleanly in the JSON report."""
    return message.replace("\r", " ").replace("\n", " ").replace('"', "'")


def _render(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


class SoftAssertions:
    """Deferred, classified checks for a test step.

    Parameters
    ----------
    config : SoftcheckConfig, optional
        Engine settings; defaults are used when omitted.
    registry : KnownFailureRegistry, optional
        Known-failure registry; the process-wide one when omitted.
    normalizer : Callable[[Any], str], optional
        Converts operands to their comparison string.

    Examples
    --------
    ::

        soft = SoftAssertions()
        soft.register_known_failure_labels("legacyBug")
        soft.assert_equals_to("legacyBug", 1, 2, "mismatch", "ok")
        soft.is_true("flagCheck", False, "flag must be true")
        soft.flush()  # raises SoftAssertionFailure with both buckets
    """

    def __init__(
        self,
        config: SoftcheckConfig | None = None,
        registry: KnownFailureRegistry | None = None,
        normalizer: Callable[[Any], str] = normalize,
    ) -> None:
        self._config = config or SoftcheckConfig()
        self._registry = registry if registry is not None else get_known_failure_registry()
        self._normalize = normalizer
        self._contexts = ExecutionContextStore()

    # Context handling

    @property
    def context(self) -> ExecutionContext:
        """Execution context bound to the caller, created on first use."""
        return self._contexts.get()

    @contextmanager
    def scope(self, ctx: ExecutionContext | None = None) -> Iterator[ExecutionContext]:
        """Bind ``ctx`` (or a fresh context) for the duration of the block."""
        with self._contexts.scope(ctx) as bound:
            yield bound

    def __enter__(self) -> SoftAssertions:
        self._contexts.push(ExecutionContext())
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            if exc_type is None:
                self.flush()
            else:
                self._reset(self.context)
        finally:
            self._contexts.pop()

    # Known failures

    def register_known_failure_labels(self, *labels: str | Iterable[str]) -> SoftAssertions:
        """Declare labels whose failures are expected."""
        self._registry.add(*labels)
        return self

    @property
    def known_failure_labels(self) -> frozenset[str]:
        return self._registry.labels()

    # Inspection

    @property
    def failures(self) -> dict[str, str]:
        return dict(self.context.ledger.failures)

    @property
    def known_failures(self) -> dict[str, str]:
        return dict(self.context.ledger.known_failures)

    def has_failures(self) -> bool:
        return not self.context.ledger.is_empty()

    # Checks

    def assert_equals_to(
        self, label: str, actual: Any, expected: Any, failure_msg: str, pass_msg: str | None = None
    ) -> SoftAssertions:
        """Check that ``actual`` equals ``expected`` after normalization.

        Numeric operands compare by value (``"5.0"`` equals ``5``); anything
        else compares as normalized strings.
        """
        comparison, actual_value, expected_value = self._compare(actual, expected)
        if comparison is not None:
            passed = comparison == Comparison.EQUAL
        else:
            passed = actual_value == expected_value
        message = f"[{failure_msg}] expected: {_render(expected)} but was: {_render(actual)}"
        return self._check(label, passed, message, pass_msg)

    def assert_not_equals_to(
        self, label: str, actual: Any, expected: Any, failure_msg: str, pass_msg: str | None = None
    ) -> SoftAssertions:
        """Check that ``actual`` differs from ``expected`` after normalization."""
        comparison, actual_value, expected_value = self._compare(actual, expected)
        if comparison is not None:
            passed = comparison != Comparison.EQUAL
        else:
            passed = actual_value != expected_value
        message = f"[{failure_msg}] expected: not {_render(expected)} but was: {_render(actual)}"
        return self._check(label, passed, message, pass_msg)

    def assert_greater_than(
        self, label: str, actual: Any, expected: Any, failure_msg: str, pass_msg: str | None = None
    ) -> SoftAssertions:
        """Check that ``actual`` is numerically greater than ``expected``.

        Raises
        ------
        InvalidComparisonError
            If either operand is not numeric.
        """
        comparison = self._compare_ordered(actual, expected, "GreaterThan")
        message = f"[{failure_msg}] expected: greater than {_render(expected)} but was: {_render(actual)}"
        return self._check(label, comparison == Comparison.GREATER, message, pass_msg)

    def assert_lesser_than(
        self, label: str, actual: Any, expected: Any, failure_msg: str, pass_msg: str | None = None
    ) -> SoftAssertions:
        """Check that ``actual`` is numerically less than ``expected``.

        Raises
        ------
        InvalidComparisonError
            If either operand is not numeric.
        """
        comparison = self._compare_ordered(actual, expected, "LesserThan")
        message = f"[{failure_msg}] expected: less than {_render(expected)} but was: {_render(actual)}"
        return self._check(label, comparison == Comparison.LESS, message, pass_msg)

    def assert_fail(self, label: str, failure_msg: str) -> SoftAssertions:
        """Record a failure for ``label`` unconditionally."""
        return self._check(label, False, failure_msg, None)

    def is_true(self, label: str, actual: bool, failure_msg: str, pass_msg: str | None = None) -> SoftAssertions:
        message = f"[{failure_msg}] expected: true but was: {_render(actual).lower()}"
        return self._check(label, bool(actual), message, pass_msg)

    def is_false(self, label: str, actual: bool, failure_msg: str, pass_msg: str | None = None) -> SoftAssertions:
        message = f"[{failure_msg}] expected: false but was: {_render(actual).lower()}"
        return self._check(label, not actual, message, pass_msg)

    # Flush

    def flush(self) -> None:
        """Raise every failure recorded in the current context, then reset.

        Does nothing when no check failed. The ledger, the pending batch and
        (unless configured otherwise) the known-failure registry are cleared
        whether or not this raises.

        Raises
        ------
        SoftAssertionFailure
            If any check failed since the last flush.
        ReportSerializationError
            If the report could not be serialized.
        """
        ctx = self.context
        try:
            if ctx.ledger.is_empty():
                return
            snapshot = ctx.ledger.snapshot()
            try:
                report = snapshot.to_json(indent=self._config.report_indent)
            except (ValueError, TypeError) as exc:
                raw = {
                    Bucket.FAILURES.value: dict(snapshot.failures),
                    Bucket.KNOWN_FAILURES.value: dict(snapshot.known_failures),
                }
                raise ReportSerializationError(raw, exc) from exc

            logger.warning(
                "Soft assertions failed%s: %d failures, %d known failures",
                f" in {ctx.name}" if ctx.name else "",
                len(snapshot.failures),
                len(snapshot.known_failures),
            )
            raise SoftAssertionFailure(report, snapshot)
        finally:
            self._reset(ctx)

    assert_all = flush

    def reset(self) -> None:
        """Discard recorded failures without raising."""
        self._reset(self.context)

    # Internals

    def _reset(self, ctx: ExecutionContext) -> None:
        ctx.reset()
        if self._config.clear_known_failures_on_flush:
            self._registry.clear()

    def _compare(self, actual: Any, expected: Any) -> tuple[Comparison | None, str, str]:
        """Normalize both operands and compare them numerically when possible.

        The comparison is ``None`` when the operands are not both numeric.
        """
        actual_value = self._normalize(actual)
        expected_value = self._normalize(expected)
        if not (is_numeric(actual_value) and is_numeric(expected_value)):
            return None, actual_value, expected_value
        try:
            return compare_numeric(actual_value, expected_value), actual_value, expected_value
        except (ValueError, ArithmeticError):
            logger.debug("Numeric comparison of %r and %r failed, comparing as strings", actual_value, expected_value)
            return None, actual_value, expected_value

    def _compare_ordered(self, actual: Any, expected: Any, check_name: str) -> Comparison:
        comparison, _, _ = self._compare(actual, expected)
        if comparison is None:
            msg = f"Provided arguments are not numeric to perform '{check_name}' check"
            raise InvalidComparisonError(msg)
        return comparison

    def _check(self, label: str, passed: bool, failure_message: str, pass_msg: str | None) -> SoftAssertions:
        ctx = self.context
        if passed:
            ctx.batch.add(CheckOutcome(passed=True))
            if pass_msg and self._config.log_pass_messages:
                logger.info("%s", pass_msg)
        else:
            ctx.batch.add(CheckOutcome(passed=False, message=failure_message))
        return self._classify(label, ctx)

    def _classify(self, label: str, ctx: ExecutionContext) -> SoftAssertions:
        try:
            message = ctx.batch.first_failure_message()
            if message is not None:
                bucket = Bucket.KNOWN_FAILURES if label in self._registry else Bucket.FAILURES
                ctx.ledger.record(label, sanitize_message(message), bucket)
                logger.debug("Recorded failed check %r under %s", label, bucket.value)
        finally:
            ctx.batch.reset()
        return self
