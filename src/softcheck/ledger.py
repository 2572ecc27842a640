"""Per-context record of failed checks, split into classification buckets."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from softcheck.types import Bucket


class FailureLedger(BaseModel):
    """Failed checks recorded since the last flush.

    Attributes:
    ----------
    failures: dict[str, str]
        Unexpected failures, label -> message
    known_failures: dict[str, str]
        Failures whose label was registered as known, label -> message

    A label is held by at most one bucket. Recording a label again replaces
    its message (last failure wins) and keeps its position in the bucket.
    """

    model_config = ConfigDict(populate_by_name=True)

    failures: dict[str, str] = Field(default_factory=dict)
    known_failures: dict[str, str] = Field(default_factory=dict, alias="knownFailures")

    def bucket(self, bucket: Bucket) -> dict[str, str]:
        if bucket is Bucket.KNOWN_FAILURES:
            return self.known_failures
        return self.failures

    def record(self, label: str, message: str, bucket: Bucket) -> None:
        """Store ``message`` for ``label`` in ``bucket``."""
        other = Bucket.FAILURES if bucket is Bucket.KNOWN_FAILURES else Bucket.KNOWN_FAILURES
        self.bucket(other).pop(label, None)
        self.bucket(bucket)[label] = str(message)

    def is_empty(self) -> bool:
        return not self.failures and not self.known_failures

    def clear(self) -> None:
        self.failures.clear()
        self.known_failures.clear()

    def snapshot(self) -> FailureLedger:
        """Return an independent copy of the current content."""
        return self.model_copy(deep=True)

    def _empty_buckets(self) -> set[str]:
        return {name for name in ("failures", "known_failures") if not getattr(self, name)}

    def to_dict(self) -> dict[str, dict[str, str]]:
        """Raw content keyed by bucket name, omitting empty buckets."""
        return self.model_dump(by_alias=True, exclude=self._empty_buckets())

    def to_json(self, indent: int | None = 2) -> str:
        """Pretty-printed report with ``failures`` and ``knownFailures`` keys."""
        return self.model_dump_json(indent=indent, by_alias=True, exclude=self._empty_buckets())
