"""
Tests for vals and val combination.
"""

import math
from fractions import Fraction

import pytest

from chuk_tuning.constants import IntervalDomain
from chuk_tuning.core import Interval, TimeMonzo, TimeReal
from chuk_tuning.errors import ConstructionError, DomainError, InexactError
from chuk_tuning.temper import Val, ValBasis, tune


def patent(divisions: int, limit: int = 3) -> Val:
    return Val.patent(divisions, ValBasis(limit))


class TestConstruction:
    """Tests for building vals."""

    def test_patent(self) -> None:
        """The 12 patent val in the 5-limit."""
        assert patent(12).sval == [12, 19, 28]

    def test_patent_default_basis(self) -> None:
        """Without a basis the configured primes are used."""
        assert str(Val.patent(12)) == "<12 19 28 34 42 44 49 51 54]"

    def test_from_array(self) -> None:
        """A per-prime mapping."""
        assert Val.from_array([12, 19, 28]) == patent(12)

    def test_from_basis_map(self) -> None:
        """Step counts over a subgroup."""
        val = Val.from_basis_map([10, 16, 28], ValBasis.from_fractions([2, 3, 7]))
        assert val.sval == [10, 16, 28]
        assert val.divisions == 10

    def test_absolute_rejected(self) -> None:
        """Vals are relative covectors."""
        with pytest.raises(ConstructionError):
            Val(TimeMonzo(1, [12, 19, 28]), ValBasis(3))

    def test_integral_sval(self) -> None:
        """Fractional step counts are rejected when integers are required."""
        val = Val.from_array([Fraction(1, 2), 1, 1])
        with pytest.raises(InexactError):
            val.integral_sval()


class TestError:
    """Tests for Tenney-Euclidean val error."""

    def test_twelve(self) -> None:
        """12 equal in the 5-limit."""
        assert patent(12).error_te() == pytest.approx(3.477, abs=1e-2)

    def test_better_val_has_less_error(self) -> None:
        """31 is closer to just than 12 in the 5-limit."""
        assert patent(31).error_te() < patent(12).error_te()

    def test_zero_val(self) -> None:
        """The zero val misses every generator completely."""
        val = Val(TimeMonzo(0, [0, 0, 0]), ValBasis(3))
        assert val.error_te() == pytest.approx(1200)

    def test_one_division(self) -> None:
        """A single division over the default primes."""
        assert Val.patent(1).error_te() == pytest.approx(145.13, abs=0.05)

    def test_unnormalized(self) -> None:
        """Unnormalized error is the raw sum of squares."""
        val = Val(TimeMonzo(0, [0, 0, 0]), ValBasis(3))
        assert val.error_te(unnormalized=True) == pytest.approx(3)


class TestGeneralizedPatentVals:
    """Tests for walking generalized patent vals."""

    def test_walk(self) -> None:
        """The first steps up from one division."""
        val = patent(1)
        walk = [val.sval]
        for _ in range(4):
            val = val.next_gpv()
            walk.append(val.sval)
        assert walk == [[1, 2, 2], [1, 2, 3], [2, 2, 3], [2, 3, 3], [2, 3, 4]]

    def test_from_zero(self) -> None:
        """Zero divisions move to one."""
        val = Val(TimeMonzo(0, [0, 0, 0]), ValBasis(3))
        assert val.next_gpv().sval == [1, 0, 0]


class TestTune:
    """Tests for combining vals."""

    def test_twelve_and_nineteen(self) -> None:
        """12 + 19 = 31."""
        assert tune([patent(12), patent(19)]).sval == [31, 49, 72]

    def test_seven_limit(self) -> None:
        """Three vals in the 7-limit."""
        vals = [patent(5, 4), patent(17, 4), patent(19, 4)]
        assert tune(vals).sval == [41, 65, 95, 115]

    def test_search_radius(self) -> None:
        """A wider search finds larger combinations."""
        vals = [patent(31), patent(5)]
        assert tune(vals, search_radius=6).sval == [191, 302, 444]
        assert tune(vals, search_radius=1).sval == [31, 49, 72]

    def test_single_val(self) -> None:
        """A lone val is its own best combination."""
        assert tune([patent(12)]).sval == [12, 19, 28]

    def test_empty_rejected(self) -> None:
        """At least one val is needed."""
        with pytest.raises(ConstructionError):
            tune([])

    def test_mixed_bases_rejected(self) -> None:
        """Vals must share a basis."""
        with pytest.raises(ConstructionError):
            tune([patent(12), patent(12, 4)])


class TestArithmetic:
    """Tests for val arithmetic."""

    def test_add_sub(self) -> None:
        """Vals add component-wise."""
        assert (patent(12) + patent(19)).sval == [31, 49, 72]
        assert (patent(31) - patent(19)).sval == [12, 19, 28]

    def test_basis_mismatch(self) -> None:
        """Vals over different subgroups do not add."""
        with pytest.raises(DomainError):
            patent(12) + patent(12, 4)

    def test_scale(self) -> None:
        """Scaling by linear scalars."""
        assert (patent(12) * 2).sval == [24, 38, 56]
        assert (patent(12) * Interval.from_integer(2)).sval == [24, 38, 56]
        assert (patent(24) / 2).sval == [12, 19, 28]

    def test_scale_by_logarithmic_rejected(self, fifth: Interval) -> None:
        """Only linear scalars scale vals."""
        with pytest.raises(DomainError):
            patent(12) * fifth

    def test_neg_abs(self) -> None:
        """Negation and the positive representative."""
        negative = -patent(12)
        assert negative.sval == [-12, -19, -28]
        assert negative.abs() == patent(12)

    def test_dot_interval(self) -> None:
        """A val counts the steps of an interval."""
        assert patent(12).dot(Interval.from_fraction("3/2")).to_integer() == 7

    def test_dot_adds_steps(self) -> None:
        """Steps carried by the interval are counted too."""
        fifth = Interval(TimeMonzo.from_fraction(Fraction(3, 2)), IntervalDomain.LOGARITHMIC, 2)
        assert patent(12).dot(fifth).to_integer() == 9

    def test_dot_val(self) -> None:
        """Plain inner product of two vals."""
        assert patent(12).dot(patent(12)).to_integer() == 144 + 361 + 784

    def test_inverse(self) -> None:
        """The inverse maps to one step."""
        val = patent(12)
        inverse = val.inverse()
        assert inverse.domain == IntervalDomain.LOGARITHMIC
        assert val.dot(inverse).to_integer() == 1


class TestTempering:
    """Tests for retuning values."""

    def test_temper_fifth(self) -> None:
        """3/2 becomes seven semitones."""
        tempered = patent(12).temper(TimeMonzo.from_fraction(Fraction(3, 2)))
        assert tempered.total_cents() == pytest.approx(700)

    def test_residual_kept(self) -> None:
        """Primes outside the subgroup are untouched."""
        tempered = patent(12).temper(TimeMonzo.from_fraction(Fraction(7, 4)))
        assert tempered.total_cents() == pytest.approx(1200 * math.log2(7 / 4))

    def test_real_passes_through(self) -> None:
        """Reals cannot be tempered."""
        value = TimeReal.from_value(1.5)
        assert patent(12).temper(value) is value

    def test_temper_interval(self) -> None:
        """Intervals are unwrapped to their values."""
        tempered = patent(12).temper(Interval.from_fraction("3/2"))
        assert tempered.total_cents() == pytest.approx(700)

    def test_apply(self) -> None:
        """Applying keeps domain and metadata but drops the spelling."""
        interval = Interval.from_fraction("3/2")
        interval.label = "fifth"
        (tempered,) = patent(12).apply([interval])
        assert tempered.total_cents() == pytest.approx(700)
        assert tempered.label == "fifth"
        assert tempered.domain == IntervalDomain.LINEAR
        assert tempered.node is None


class TestDisplay:
    """Tests for spelling vals."""

    def test_standard(self) -> None:
        """Standard bases print bare."""
        assert patent(12).to_string() == "<12 19 28]"

    def test_subgroup(self) -> None:
        """Subgroup bases are appended."""
        val = Val.from_basis_map([10, 16, 28], ValBasis.from_fractions([2, 3, 7]))
        assert str(val) == "<10 16 28]@2.3.7"

    def test_json_roundtrip(self) -> None:
        """A val survives its tagged dictionary form."""
        val = patent(12)
        assert Val.reviver(val.to_json()) == val
