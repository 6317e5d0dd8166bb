"""Shared test fixtures for bizcoach tests."""
import pytest

from factories import NOW, InMemoryGateway


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def gateway():
    """Empty in-memory gateway; tests fill its lists."""
    return InMemoryGateway()
