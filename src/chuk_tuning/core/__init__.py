"""
Core values - the numeric layer everything else composes on.

- TimeMonzo / TimeReal: exact and inexact musical quantities
- Interval: a quantity tagged with a linear or logarithmic domain
- RootContext: reference pitch and inflection sizes for display
- Literal nodes: cached spellings of intervals (fractions, cents, FJS)
- FJS: Functional Just System names for ratios and pitches
"""

from chuk_tuning.core.context import RootContext
from chuk_tuning.core.fjs import as_absolute_fjs, as_fjs, formal_comma, uninflect
from chuk_tuning.core.interval import Color, Interval, count_ups_and_lifts, infect
from chuk_tuning.core.literals import (
    FJS,
    AbsoluteFJS,
    AbsolutePitch,
    AspiringAbsoluteFJS,
    AspiringFJS,
    CentsLiteral,
    FractionLiteral,
    IntegerLiteral,
    MonzoLiteral,
    NedjiLiteral,
    Node,
    Pythagorean,
    StepLiteral,
    ValLiteral,
    literal_to_string,
)
from chuk_tuning.core.monzo import TimeMonzo, TimeQuantity, TimeReal

__all__ = [
    # Values
    "TimeQuantity",
    "TimeMonzo",
    "TimeReal",
    # Intervals
    "Interval",
    "Color",
    "infect",
    "count_ups_and_lifts",
    "RootContext",
    # Literals
    "Node",
    "IntegerLiteral",
    "FractionLiteral",
    "CentsLiteral",
    "NedjiLiteral",
    "StepLiteral",
    "MonzoLiteral",
    "ValLiteral",
    "Pythagorean",
    "AbsolutePitch",
    "FJS",
    "AbsoluteFJS",
    "AspiringFJS",
    "AspiringAbsoluteFJS",
    "literal_to_string",
    # FJS
    "formal_comma",
    "uninflect",
    "as_fjs",
    "as_absolute_fjs",
]
