"""Shared fixtures for unit tests."""

import pytest

from softcheck import SoftAssertions, get_known_failure_registry


@pytest.fixture(autouse=True)
def clean_registry():
    """Clear the known-failure registry before and after each test."""
    get_known_failure_registry().clear()
    yield
    get_known_failure_registry().clear()


@pytest.fixture
def engine():
    """Provide an engine bound to a fresh execution context."""
    soft = SoftAssertions()
    with soft.scope():
        yield soft
