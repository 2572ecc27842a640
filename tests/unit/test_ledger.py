"""Tests for the failure ledger and the known-failure registry."""

import json
import threading

from softcheck.ledger import FailureLedger
from softcheck.registry import KnownFailureRegistry, get_known_failure_registry
from softcheck.types import Bucket


class TestFailureLedger:
    """Tests for FailureLedger."""

    def test_new_ledger_is_empty(self):
        ledger = FailureLedger()
        assert ledger.is_empty()
        assert ledger.to_dict() == {}

    def test_record_into_buckets(self):
        ledger = FailureLedger()
        ledger.record("totalCount", "expected 5 but was 4", Bucket.FAILURES)
        ledger.record("flakyCheck", "expected 'ok' but was 'retrying'", Bucket.KNOWN_FAILURES)

        assert ledger.failures == {"totalCount": "expected 5 but was 4"}
        assert ledger.known_failures == {"flakyCheck": "expected 'ok' but was 'retrying'"}
        assert not ledger.is_empty()

    def test_last_failure_wins_and_keeps_position(self):
        ledger = FailureLedger()
        ledger.record("a", "first", Bucket.FAILURES)
        ledger.record("b", "other", Bucket.FAILURES)
        ledger.record("a", "second", Bucket.FAILURES)

        assert list(ledger.failures.items()) == [("a", "second"), ("b", "other")]

    def test_label_held_by_one_bucket(self):
        ledger = FailureLedger()
        ledger.record("label", "unexpected", Bucket.FAILURES)
        ledger.record("label", "now known", Bucket.KNOWN_FAILURES)

        assert ledger.failures == {}
        assert ledger.known_failures == {"label": "now known"}

    def test_to_json_uses_report_keys(self):
        ledger = FailureLedger()
        ledger.record("totalCount", "expected 5 but was 4", Bucket.FAILURES)
        ledger.record("flakyCheck", "retrying", Bucket.KNOWN_FAILURES)

        report = ledger.to_json()

        assert json.loads(report) == {
            "failures": {"totalCount": "expected 5 but was 4"},
            "knownFailures": {"flakyCheck": "retrying"},
        }
        assert report.index('"failures"') < report.index('"knownFailures"')
        assert "\n  " in report

    def test_to_json_omits_empty_buckets(self):
        ledger = FailureLedger()
        ledger.record("flakyCheck", "retrying", Bucket.KNOWN_FAILURES)

        assert json.loads(ledger.to_json()) == {"knownFailures": {"flakyCheck": "retrying"}}

    def test_snapshot_is_independent(self):
        ledger = FailureLedger()
        ledger.record("a", "msg", Bucket.FAILURES)
        snapshot = ledger.snapshot()
        ledger.clear()

        assert ledger.is_empty()
        assert snapshot.failures == {"a": "msg"}

    def test_validates_from_report_keys(self):
        ledger = FailureLedger.model_validate({"knownFailures": {"x": "y"}})
        assert ledger.known_failures == {"x": "y"}
        assert ledger.failures == {}


class TestKnownFailureRegistry:
    """Tests for KnownFailureRegistry."""

    def test_add_and_contains(self):
        registry = KnownFailureRegistry()
        registry.add("a", "b")

        assert "a" in registry
        assert "c" not in registry
        assert len(registry) == 2

    def test_add_flattens_iterables(self):
        registry = KnownFailureRegistry()
        registry.add(["a", "b"], "c", ("d",))

        assert registry.labels() == frozenset({"a", "b", "c", "d"})

    def test_clear(self):
        registry = KnownFailureRegistry()
        registry.add("a")
        registry.clear()

        assert len(registry) == 0

    def test_labels_is_snapshot(self):
        registry = KnownFailureRegistry()
        registry.add("a")
        labels = registry.labels()
        registry.add("b")

        assert labels == frozenset({"a"})

    def test_global_registry_is_shared(self):
        assert get_known_failure_registry() is get_known_failure_registry()

    def test_registrations_visible_across_threads(self):
        registry = KnownFailureRegistry()

        def register(index: int) -> None:
            registry.add(f"label-{index}")

        threads = [threading.Thread(target=register, args=(i,)) for i in range(20)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()

        assert registry.labels() == frozenset(f"label-{i}" for i in range(20))
