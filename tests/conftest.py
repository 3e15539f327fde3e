"""
Pytest configuration and shared fixtures.
"""

import tempfile
from fractions import Fraction
from pathlib import Path

import pytest

from chuk_tuning.config import EngineConfig, set_config
from chuk_tuning.core import Interval, RootContext, TimeMonzo
from chuk_tuning.temper import Temperament, ValBasis


@pytest.fixture(autouse=True)
def default_config():
    """Run every test against the default engine configuration."""
    previous = set_config(EngineConfig())
    yield
    set_config(previous)


@pytest.fixture
def temp_dir() -> Path:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def context() -> RootContext:
    """A root context with default up/lift sizes and C4 at unison."""
    return RootContext()


@pytest.fixture
def five_limit() -> ValBasis:
    """The 2.3.5 subgroup."""
    return ValBasis(3)


@pytest.fixture
def syntonic() -> TimeMonzo:
    """The syntonic comma 81/80."""
    return TimeMonzo.from_fraction(Fraction(81, 80))


@pytest.fixture
def meantone(syntonic: TimeMonzo) -> Temperament:
    """Meantone built from the syntonic comma."""
    return Temperament.from_commas([syntonic])


@pytest.fixture
def fifth() -> Interval:
    """A logarithmic just fifth."""
    return Interval(
        TimeMonzo.from_fraction(Fraction(3, 2)),
        "logarithmic",
        node=Interval.from_fraction(Fraction(3, 2)).node,
    )
