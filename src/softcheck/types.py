"""Shared types for softcheck."""

from enum import Enum


class Bucket(Enum):
    """Failure ledger bucket a failed check is classified into."""

    FAILURES = "failures"  # Unexpected failures, fail the build
    KNOWN_FAILURES = "knownFailures"  # Pre-declared via the known-failure registry
