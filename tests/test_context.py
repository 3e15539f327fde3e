"""
Tests for the root context.
"""

import gc
from fractions import Fraction

from chuk_tuning.constants import IntervalDomain
from chuk_tuning.core import (
    AbsoluteFJS,
    AbsolutePitch,
    AspiringAbsoluteFJS,
    Interval,
    MonzoLiteral,
    RootContext,
    TimeMonzo,
)


def frequency(value) -> Interval:
    return Interval(
        TimeMonzo.from_fractional_frequency(Fraction(value)),
        IntervalDomain.LOGARITHMIC,
        0,
        AspiringAbsoluteFJS(),
    )


class TestRootContext:
    """Tests for RootContext defaults and fragiles."""

    def test_defaults(self) -> None:
        """One step per up and five per lift."""
        context = RootContext()
        assert context.up.steps == 1
        assert context.lift.steps == 5
        assert context.up.value.is_unity()
        assert context.number_of_components == 9

    def test_absolute_spelling(self) -> None:
        """Pitches are spelled against C4."""
        context = RootContext(c4=TimeMonzo.from_fractional_frequency(Fraction(800, 3)))
        assert frequency(400).realize_node(context) == AbsoluteFJS(AbsolutePitch("G", "", 4))
        assert frequency(400).to_string(context) == "G4"

    def test_set_c4_breaks_fragiles(self) -> None:
        """Moving the reference pitch invalidates absolute spellings."""
        context = RootContext(c4=TimeMonzo.from_fractional_frequency(Fraction(800, 3)))
        pitch = Interval(
            TimeMonzo.from_fractional_frequency(400),
            IntervalDomain.LOGARITHMIC,
            0,
            AbsoluteFJS(AbsolutePitch("G", "", 4)),
        )
        raised = pitch.up(context)
        assert raised.node == AbsoluteFJS(AbsolutePitch("G", "", 4), ups=1)
        context.set_c4(TimeMonzo.from_fractional_frequency(Fraction(1600, 3)))
        assert raised.node == AspiringAbsoluteFJS()
        assert raised.to_string(context) == "^G3"

    def test_set_lift_drops_vectors(self) -> None:
        """Inflected monzo spellings cannot be re-derived."""
        context = RootContext()
        lifted = Interval(
            TimeMonzo.from_fraction(Fraction(3, 2)),
            IntervalDomain.LOGARITHMIC,
            0,
            MonzoLiteral((Fraction(-1), Fraction(1))),
        ).lift(context)
        assert str(lifted) == "/[-1 1>"
        context.set_lift(Interval(TimeMonzo.from_cents(3.0), IntervalDomain.LOGARITHMIC, 6))
        assert lifted.node is None
        assert context.fragile_intervals() == []

    def test_uninflected_not_fragile(self) -> None:
        """Plain arithmetic does not register fragiles."""
        context = RootContext()
        Interval.from_fraction("3/2") + Interval.from_fraction("1/2")
        assert context.fragile_intervals() == []

    def test_discarded_fragiles_released(self) -> None:
        """Inflected results that go out of scope are not kept alive."""
        context = RootContext()
        fifth = Interval(TimeMonzo.from_fraction(Fraction(3, 2)), IntervalDomain.LOGARITHMIC)
        kept = fifth.up(context)
        for _ in range(100):
            fifth.up(context)
        gc.collect()
        assert context.fragile_intervals() == [kept]

    def test_equal_fragiles_tracked_separately(self) -> None:
        """Fragiles are tracked by identity, not by value."""
        context = RootContext()
        fifth = Interval(TimeMonzo.from_fraction(Fraction(3, 2)), IntervalDomain.LOGARITHMIC)
        a = fifth.up(context)
        b = fifth.up(context)
        assert len(context.fragile_intervals()) == 2
        assert a == b
