"""
Tests for Functional Just System spelling and literal nodes.
"""

from fractions import Fraction

import pytest

from chuk_tuning.core import (
    FJS,
    AbsoluteFJS,
    AbsolutePitch,
    AspiringFJS,
    CentsLiteral,
    FractionLiteral,
    IntegerLiteral,
    MonzoLiteral,
    NedjiLiteral,
    Pythagorean,
    StepLiteral,
    TimeMonzo,
    TimeReal,
    ValLiteral,
    as_absolute_fjs,
    as_fjs,
    formal_comma,
    literal_to_string,
    uninflect,
)
from chuk_tuning.core.fjs import absolute_pitch_name, pythagorean_name
from chuk_tuning.core.literals import (
    add_nodes,
    div_nodes,
    interval_value_as,
    mul_nodes,
    neg_node,
    node_from_json,
    node_to_json,
)


def ratio(value) -> TimeMonzo:
    return TimeMonzo.from_fraction(Fraction(value))


class TestFormalComma:
    """Tests for FJS formal commas."""

    def test_five(self) -> None:
        """The formal comma of 5 is 80/81."""
        assert formal_comma(5).to_fraction() == Fraction(80, 81)

    def test_seven(self) -> None:
        """The formal comma of 7 is 63/64."""
        assert formal_comma(7).to_fraction() == Fraction(63, 64)

    def test_eleven(self) -> None:
        """The formal comma of 11 is 33/32."""
        assert formal_comma(11).to_fraction() == Fraction(33, 32)

    def test_three_is_unison(self) -> None:
        """Pythagorean primes need no comma."""
        assert formal_comma(3).is_unity()


class TestPythagoreanNames:
    """Tests for Pythagorean interval names."""

    @pytest.mark.parametrize(
        "twos,threes,name",
        [
            (0, 0, Pythagorean("P", 1)),
            (-1, 1, Pythagorean("P", 5)),
            (2, -1, Pythagorean("P", 4)),
            (-6, 4, Pythagorean("M", 3)),
            (5, -3, Pythagorean("m", 3)),
            (-9, 6, Pythagorean("A", 4)),
            (10, -6, Pythagorean("d", 5)),
            (1, 0, Pythagorean("P", 8)),
        ],
    )
    def test_names(self, twos: int, threes: int, name: Pythagorean) -> None:
        """Common intervals get their usual names."""
        assert pythagorean_name(twos, threes) == name

    def test_descending(self) -> None:
        """Descending intervals get negative degrees."""
        assert pythagorean_name(1, -1) == Pythagorean("P", -5)

    def test_pitch_names(self) -> None:
        """Pitches relative to C4."""
        assert absolute_pitch_name(0, 0) == AbsolutePitch("C", "", 4)
        assert absolute_pitch_name(-1, 1) == AbsolutePitch("G", "", 4)
        assert absolute_pitch_name(1, -1) == AbsolutePitch("F", "", 3)
        assert absolute_pitch_name(-11, 7) == AbsolutePitch("C", "#", 4)
        assert absolute_pitch_name(5, -3) == AbsolutePitch("E", "b", 4)


class TestFJS:
    """Tests for FJS spelling of ratios."""

    def test_uninflect(self) -> None:
        """5/4 is a Pythagorean major third with a 5 superscript."""
        pythagorean, superscripts, subscripts = uninflect(ratio("5/4"))
        assert pythagorean.to_fraction() == Fraction(81, 64)
        assert superscripts == (5,)
        assert subscripts == ()

    def test_major_third(self) -> None:
        """5/4 spells as M3^5."""
        assert literal_to_string(as_fjs(ratio("5/4"))) == "M3^5"

    def test_harmonic_seventh(self) -> None:
        """7/4 spells as m7^7."""
        assert literal_to_string(as_fjs(ratio("7/4"))) == "m7^7"

    def test_minor_third(self) -> None:
        """6/5 spells as m3_5."""
        assert literal_to_string(as_fjs(ratio("6/5"))) == "m3_5"

    def test_fifth(self) -> None:
        """3/2 is plain P5."""
        assert as_fjs(ratio("3/2")) == FJS(Pythagorean("P", 5))

    def test_radical_has_no_spelling(self) -> None:
        """Irrational values cannot be spelled."""
        assert as_fjs(TimeMonzo.from_equal_temperament(Fraction(1, 2))) is None
        assert as_fjs(TimeReal.from_value(1.5)) is None

    def test_absolute(self) -> None:
        """Pitches spell against the reference C4."""
        c4 = TimeMonzo.from_fractional_frequency(Fraction(800, 3))
        e4 = c4.mul(ratio("5/4"))
        assert as_absolute_fjs(e4, c4) == AbsoluteFJS(AbsolutePitch("E", "", 4), (5,))
        assert as_absolute_fjs(c4, c4) == AbsoluteFJS(AbsolutePitch("C", "", 4))

    def test_absolute_time_mismatch(self) -> None:
        """A ratio is not a pitch of a frequency reference."""
        c4 = TimeMonzo.from_fractional_frequency(262)
        assert as_absolute_fjs(ratio("3/2"), c4) is None


class TestLiteralStrings:
    """Tests for spelling literal nodes."""

    def test_numbers(self) -> None:
        """Integers, fractions and cents."""
        assert literal_to_string(IntegerLiteral(5)) == "5"
        assert literal_to_string(FractionLiteral(6, 4)) == "6/4"
        assert literal_to_string(CentsLiteral(700.0)) == "700."
        assert literal_to_string(CentsLiteral(701.5, real=True)) == "701.5rc"

    def test_nedji(self) -> None:
        """Equal divisions with and without an equave."""
        assert literal_to_string(NedjiLiteral(7, 12)) == "7\\12"
        assert literal_to_string(NedjiLiteral(9, 13, 3)) == "9\\13<3>"

    def test_vectors(self) -> None:
        """Monzos and vals with inflections and bases."""
        monzo = MonzoLiteral((Fraction(-4), Fraction(4), Fraction(-1)))
        assert literal_to_string(monzo) == "[-4 4 -1>"
        val = ValLiteral((Fraction(12), Fraction(19)), ups=1, basis=("2", "3"))
        assert literal_to_string(val) == "^<12 19]@2.3"

    def test_steps(self) -> None:
        """Bare step counts."""
        assert literal_to_string(StepLiteral(3)) == "3°"

    def test_fjs_inflections(self) -> None:
        """Ups and lifts prefix FJS names."""
        node = FJS(Pythagorean("M", 3), (5,), ups=-2, lifts=1)
        assert literal_to_string(node) == "vv/M3^5"

    def test_aspiring_raises(self) -> None:
        """Aspiring nodes have no spelling until realized."""
        with pytest.raises(ValueError):
            literal_to_string(AspiringFJS())


class TestNodeAlgebra:
    """Tests for combining literal nodes."""

    def test_add_integers(self) -> None:
        """Integers add as integers."""
        assert add_nodes(IntegerLiteral(2), IntegerLiteral(3)) == IntegerLiteral(5)

    def test_add_fractions(self) -> None:
        """Fractions add and simplify."""
        assert add_nodes(FractionLiteral(3, 2), FractionLiteral(1, 2)) == IntegerLiteral(2)

    def test_add_nedji(self) -> None:
        """Equal divisions add stepwise."""
        assert add_nodes(NedjiLiteral(7, 12), NedjiLiteral(5, 12)) == NedjiLiteral(12, 12)
        assert add_nodes(NedjiLiteral(1, 2), NedjiLiteral(1, 3, 3)) is None

    def test_scale(self) -> None:
        """Logarithmic literals scale by integers."""
        assert mul_nodes(NedjiLiteral(7, 12), IntegerLiteral(2)) == NedjiLiteral(14, 12)
        assert mul_nodes(IntegerLiteral(3), CentsLiteral(100.0)) == CentsLiteral(300.0)

    def test_divide_nedji(self) -> None:
        """Dividing an equal division refines it."""
        assert div_nodes(NedjiLiteral(1, 1), IntegerLiteral(12)) == NedjiLiteral(1, 12)

    def test_neg(self) -> None:
        """Negation flips monzo components and inflections."""
        node = MonzoLiteral((Fraction(1), Fraction(-1)), ups=1)
        assert neg_node(node) == MonzoLiteral((Fraction(-1), Fraction(1)), ups=-1)

    def test_value_as_template(self) -> None:
        """Values are spelled in the shape of a template."""
        value = ratio("9/4")
        assert interval_value_as(value, FractionLiteral(6, 4)) == FractionLiteral(9, 4)
        assert interval_value_as(value, IntegerLiteral(1)) is None
        assert interval_value_as(value, FJS(Pythagorean("P", 5))) == AspiringFJS()

    def test_json_roundtrip(self) -> None:
        """Nodes survive their tagged dictionary form."""
        node = FJS(Pythagorean("m", 7), (7,), (5,), ups=1)
        assert node_from_json(node_to_json(node)) == node
        monzo = MonzoLiteral((Fraction(1, 2), Fraction(-3)), basis=("2", "3"))
        assert node_from_json(node_to_json(monzo)) == monzo
