"""Property-based tests for exact arithmetic using Hypothesis."""

from fractions import Fraction
from typing import List

from hypothesis import HealthCheck, assume, given, settings
from hypothesis import strategies as st

from chuk_tuning.constants import IntervalDomain
from chuk_tuning.core import Interval, TimeMonzo
from chuk_tuning.temper import Val, ValBasis
from chuk_tuning.temper.linalg import hnf, kernel

# The autouse configuration fixture only resets global settings between tests
settings.register_profile(
    "tuning",
    max_examples=25,
    deadline=None,
    suppress_health_check=[HealthCheck.function_scoped_fixture],
)
settings.load_profile("tuning")


@st.composite
def positive_fractions(draw: st.DrawFn, limit: int = 500) -> Fraction:
    numerator = draw(st.integers(min_value=1, max_value=limit))
    denominator = draw(st.integers(min_value=1, max_value=limit))
    return Fraction(numerator, denominator)


@st.composite
def integer_matrices(draw: st.DrawFn) -> List[List[int]]:
    rows = draw(st.integers(min_value=1, max_value=3))
    columns = draw(st.integers(min_value=1, max_value=4))
    entry = st.integers(min_value=-20, max_value=20)
    return [draw(st.lists(entry, min_size=columns, max_size=columns)) for _ in range(rows)]


@given(positive_fractions(), positive_fractions())
def test_monzo_product_matches_fractions(a: Fraction, b: Fraction) -> None:
    """Monzo multiplication and division agree with fraction arithmetic."""
    x = TimeMonzo.from_fraction(a)
    y = TimeMonzo.from_fraction(b)
    assert x.mul(y).to_fraction() == a * b
    assert x.div(y).to_fraction() == a / b


@given(positive_fractions())
def test_octave_reduction_range(a: Fraction) -> None:
    """Reducing by the octave lands in [1, 2)."""
    reduced = TimeMonzo.from_fraction(a).reduce(TimeMonzo.from_fraction(2)).to_fraction()
    assert 1 <= reduced < 2
    assert (a / reduced).denominator == 1 or (reduced / a).denominator == 1


@given(
    positive_fractions(),
    st.integers(min_value=-8, max_value=8),
    st.sampled_from([Fraction(3), Fraction(3, 2)]),
)
def test_reduction_range(a: Fraction, power: int, equave: Fraction) -> None:
    """Reducing by a non-octave equave lands in [1, equave), exact powers included."""
    value = a * equave**power
    reduced = TimeMonzo.from_fraction(value).reduce(TimeMonzo.from_fraction(equave)).to_fraction()
    assert 1 <= reduced < equave
    ceiling = TimeMonzo.from_fraction(value).reduce(TimeMonzo.from_fraction(equave), ceiling=True)
    assert 1 < ceiling.to_fraction() <= equave


@given(st.integers(min_value=-12, max_value=12), st.sampled_from([Fraction(3), Fraction(3, 2)]))
def test_exact_powers_reduce_to_unison(power: int, equave: Fraction) -> None:
    """Whole powers of the equave reduce to exactly 1."""
    value = TimeMonzo.from_fraction(equave**power)
    assert value.reduce(TimeMonzo.from_fraction(equave)).to_fraction() == 1


@given(positive_fractions(), positive_fractions())
def test_logarithmic_addition_multiplies(a: Fraction, b: Fraction) -> None:
    """Stacking logarithmic intervals multiplies their values."""
    x = Interval(TimeMonzo.from_fraction(a), IntervalDomain.LOGARITHMIC)
    y = Interval(TimeMonzo.from_fraction(b), IntervalDomain.LOGARITHMIC)
    assert (x + y).to_fraction() == a * b
    assert (x - y).to_fraction() == a / b


@given(integer_matrices())
def test_hnf_idempotent(matrix: List[List[int]]) -> None:
    """A matrix in normal form stays put."""
    normal = hnf(matrix)
    assert hnf(normal) == normal


@given(integer_matrices())
def test_kernel_annihilates(matrix: List[List[int]]) -> None:
    """Every kernel vector maps to zero."""
    for vector in kernel(matrix):
        for row in matrix:
            assert sum(x * y for x, y in zip(row, vector)) == 0


@given(st.lists(st.integers(min_value=-50, max_value=50), min_size=3, max_size=3))
def test_basis_map_roundtrip(mapping: List[int]) -> None:
    """A val built from generator steps maps those generators to them."""
    basis = ValBasis.from_fractions(["3/2", "5/4", 2])
    assert Val.from_basis_map(mapping, basis).sval == mapping


@given(positive_fractions(limit=100), st.integers(min_value=1, max_value=72))
def test_val_dot_is_additive(a: Fraction, divisions: int) -> None:
    """Vals are homomorphisms from stacked intervals to step counts."""
    assume(a != 1)
    val = Val.patent(divisions)
    x = Interval(TimeMonzo.from_fraction(a), IntervalDomain.LOGARITHMIC)
    doubled = x + x
    assert val.dot(doubled).to_integer() == 2 * val.dot(x).to_integer()
