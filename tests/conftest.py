"""
Shared test fixtures and configuration.
"""

from datetime import date, datetime
from pathlib import Path

import pytest

from paygen.core.engine.calendar import DEFAULT_CALENDAR
from paygen.core.engine.fields import FieldContext
from paygen.core.engine.random_source import RandomSource

# A Thursday with no bank holidays in the following weeks.
FIXED_NOW = datetime(2025, 2, 20, 10, 30, 0)
TODAY = FIXED_NOW.date()


def fixed_clock() -> datetime:
    return FIXED_NOW


@pytest.fixture
def rng() -> RandomSource:
    """A seeded random source."""
    return RandomSource(seed=1234)


@pytest.fixture
def clock():
    return fixed_clock


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def ctx(rng: RandomSource) -> FieldContext:
    """A field context pinned to the fixed date."""
    return FieldContext(rng=rng, today=TODAY, calendar=DEFAULT_CALENDAR)


@pytest.fixture
def output_root(tmp_path: Path) -> Path:
    """Return a temporary root for the output/ tree."""
    root = tmp_path / "out"
    root.mkdir()
    return root
