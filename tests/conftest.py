"""Shared fixtures."""

import pytest

from factories import fixed_clock


@pytest.fixture
def clock():
    return fixed_clock
