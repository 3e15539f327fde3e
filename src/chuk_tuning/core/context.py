"""
Root context - the environment intervals are displayed against.

The context is owned by whoever evaluates programs. The core only reads
it: the reference pitch for absolute spellings, the step sizes of the
"up" and "lift" inflections, and the default prime component count.
"""

from __future__ import annotations

import weakref
from dataclasses import dataclass, field

from chuk_tuning.config import get_number_of_components
from chuk_tuning.constants import DEFAULT_LIFT_STEPS, DEFAULT_UP_STEPS, IntervalDomain
from chuk_tuning.core.interval import Interval
from chuk_tuning.core.monzo import TimeMonzo, TimeQuantity


def _unison_steps(steps: int) -> Interval:
    return Interval(TimeMonzo.from_fraction(1), IntervalDomain.LOGARITHMIC, steps)


@dataclass
class RootContext:
    """
    Reference pitch and inflection sizes.

    Intervals spelled with ups or absolute pitch names register themselves as
    fragile; changing the reference pitch or the inflections breaks their
    cached spellings so they are re-derived on the next display. Fragile
    intervals are held weakly so discarded results do not accumulate.
    """

    title: str = ""
    c4: TimeQuantity = field(default_factory=lambda: TimeMonzo.from_fraction(1))
    up: Interval = field(default_factory=lambda: _unison_steps(DEFAULT_UP_STEPS))
    lift: Interval = field(default_factory=lambda: _unison_steps(DEFAULT_LIFT_STEPS))
    number_of_components: int = field(default_factory=get_number_of_components)
    fragiles: weakref.WeakValueDictionary[int, Interval] = field(
        default_factory=weakref.WeakValueDictionary, repr=False, compare=False
    )

    def register_fragile(self, interval: Interval) -> None:
        """Remember an interval whose spelling depends on this context."""
        self.fragiles[id(interval)] = interval

    def fragile_intervals(self) -> list[Interval]:
        """Registered intervals that are still alive."""
        return list(self.fragiles.values())

    def break_fragiles(self) -> None:
        """Invalidate the cached spellings of every registered interval."""
        for interval in self.fragile_intervals():
            interval.break_node()
        self.fragiles.clear()

    def set_c4(self, c4: TimeQuantity) -> None:
        self.break_fragiles()
        self.c4 = c4

    def set_up(self, up: Interval) -> None:
        self.break_fragiles()
        self.up = up

    def set_lift(self, lift: Interval) -> None:
        self.break_fragiles()
        self.lift = lift
