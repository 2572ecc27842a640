"""Process-wide registry of labels whose failures are expected."""

from __future__ import annotations

import logging
import threading
from collections.abc import Iterable

logger = logging.getLogger(__name__)


class KnownFailureRegistry:
    """Set of known-failure labels shared by every execution context.

    Registrations from any thread are visible to all others. Membership is
    looked up when a failure is recorded, so labels may be registered before
    or in between checks.
    """

    def __init__(self) -> None:
        self._labels: set[str] = set()
        self._lock = threading.Lock()

    def add(self, *labels: str | Iterable[str]) -> None:
        """Register labels; iterables of labels are flattened."""
        flat: list[str] = []
        for label in labels:
            if isinstance(label, str):
                flat.append(label)
            else:
                flat.extend(label)
        with self._lock:
            self._labels.update(flat)
        logger.debug("Registered known failure labels: %s", flat)

    def __contains__(self, label: object) -> bool:
        with self._lock:
            return label in self._labels

    def __len__(self) -> int:
        with self._lock:
            return len(self._labels)

    def labels(self) -> frozenset[str]:
        """Snapshot of the registered labels."""
        with self._lock:
            return frozenset(self._labels)

    def clear(self) -> None:
        with self._lock:
            self._labels.clear()


_known_failure_registry = KnownFailureRegistry()


def get_known_failure_registry() -> KnownFailureRegistry:
    """Get the global known-failure registry."""
    return _known_failure_registry


__all__ = [
    "KnownFailureRegistry",
    "get_known_failure_registry",
]
