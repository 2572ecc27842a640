"""pytest integration.

Provides the ``soft`` fixture: a :class:`~softcheck.assertions.SoftAssertions`
bound to its own execution context for each test. Recorded failures are
flushed right after the test body, so they fail the test itself.

    @pytest.mark.known_failures("legacyBug")
    def test_totals(soft):
        soft.assert_equals_to("legacyBug", 1, 2, "mismatch")
        soft.assert_equals_to("totalCount", 5, 5, "wrong total")
"""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

import pytest

from softcheck.assertions import SoftAssertions
from softcheck.config import SoftcheckConfig, load_config
from softcheck.context import ExecutionContext
from softcheck.errors import SoftAssertionFailure
from softcheck.ledger import FailureLedger
from softcheck.report import write_reports

logger = logging.getLogger(__name__)

_CONFIG_KEY = pytest.StashKey[SoftcheckConfig]()
_REPORTS_KEY = pytest.StashKey[dict[str, FailureLedger]]()
_ENGINE_KEY = pytest.StashKey[SoftAssertions]()
_CONTEXT_KEY = pytest.StashKey[ExecutionContext]()


def pytest_addoption(parser: pytest.Parser) -> None:
    group = parser.getgroup("softcheck", "soft assertions")
    group.addoption(
        "--softcheck-report",
        dest="softcheck_report",
        default=None,
        help="Write soft assertion reports of failed tests to this JSON file",
    )


def pytest_configure(config: pytest.Config) -> None:
    config.addinivalue_line(
        "markers",
        "known_failures(*labels): register soft assertion labels whose failures are expected",
    )
    config.stash[_CONFIG_KEY] = load_config(config.rootpath)
    config.stash[_REPORTS_KEY] = {}


def pytest_unconfigure(config: pytest.Config) -> None:
    settings = config.stash.get(_CONFIG_KEY, None)
    reports = config.stash.get(_REPORTS_KEY, None)
    if settings is None or reports is None:
        return
    target = config.getoption("softcheck_report", None) or settings.report_path
    if not target:
        return
    path = Path(target)
    if not path.is_absolute():
        path = config.rootpath / path
    write_reports(path, reports, indent=settings.report_indent)
    logger.info("Wrote soft assertion reports for %d tests to %s", len(reports), path)


@pytest.hookimpl(wrapper=True)
def pytest_runtest_call(item: pytest.Item) -> Iterator[None]:
    engine = item.stash.get(_ENGINE_KEY, None)
    ctx = item.stash.get(_CONTEXT_KEY, None)
    try:
        result = yield
    except BaseException:
        if engine is not None and ctx is not None:
            with engine.scope(ctx):
                engine.reset()
        raise

    if engine is not None and ctx is not None:
        try:
            with engine.scope(ctx):
                engine.flush()
        except SoftAssertionFailure as exc:
            item.config.stash[_REPORTS_KEY][item.nodeid] = exc.report
            raise
    return result


@pytest.fixture
def soft(request: pytest.FixtureRequest) -> Iterator[SoftAssertions]:
    """Soft assertions for the current test, flushed after the test body."""
    settings = request.config.stash[_CONFIG_KEY]
    engine = SoftAssertions(config=settings)
    engine.register_known_failure_labels(settings.known_failures)
    for marker in request.node.iter_markers("known_failures"):
        engine.register_known_failure_labels(*marker.args)

    ctx = ExecutionContext(name=request.node.nodeid)
    request.node.stash[_ENGINE_KEY] = engine
    request.node.stash[_CONTEXT_KEY] = ctx
    with engine.scope(ctx):
        yield engine
