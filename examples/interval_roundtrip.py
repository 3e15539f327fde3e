#!/usr/bin/env python3
"""
Example: Interval Arithmetic and JSON Round-Trip.

Demonstrates:
1. Linear and logarithmic arithmetic on the same values
2. FJS spellings realized against a root context
3. Combining vals into a better equal temperament
4. Serializing intervals and vals to JSON and back

Usage:
    python examples/interval_roundtrip.py
"""

from fractions import Fraction

from chuk_tuning import Interval, IntervalDomain, RootContext, TimeMonzo, from_json, to_json
from chuk_tuning.core import AspiringFJS
from chuk_tuning.temper import Val, ValBasis, tune


def logarithmic(ratio: str) -> Interval:
    return Interval(
        TimeMonzo.from_fraction(Fraction(ratio)), IntervalDomain.LOGARITHMIC, 0, AspiringFJS()
    )


def main() -> None:
    print("=" * 60)
    print("Interval Arithmetic Demo")
    print("=" * 60)
    print()

    context = RootContext()

    # =========================================================================
    # Step 1: Domains
    # =========================================================================
    print("Step 1: Linear vs logarithmic")
    print("-" * 40)
    half = Interval.from_fraction("3/2")
    print(f"  linear 3/2 + 1/2 = {half + Interval.from_fraction('1/2')}")
    fifth = logarithmic("3/2")
    print(f"  logarithmic P5 + P5 = {(fifth + fifth).to_string(context)}")
    print(f"  (P5 + P5) / octave = {(fifth + fifth) / logarithmic('2')}")
    print()

    # =========================================================================
    # Step 2: FJS spellings
    # =========================================================================
    print("Step 2: FJS spellings")
    print("-" * 40)
    for ratio in ["5/4", "6/5", "7/4", "11/8"]:
        interval = logarithmic(ratio)
        print(f"  {ratio}: {interval.to_string(context)}, up: {interval.up(context).to_string(context)}")
    print()

    # =========================================================================
    # Step 3: Vals
    # =========================================================================
    print("Step 3: Combining vals")
    print("-" * 40)
    basis = ValBasis(3)
    twelve = Val.patent(12, basis)
    nineteen = Val.patent(19, basis)
    best = tune([twelve, nineteen])
    for val in (twelve, nineteen, best):
        print(f"  {val}: error {val.error_te():.3f}, fifth = {val.dot(fifth)} steps")
    print()

    # =========================================================================
    # Step 4: JSON
    # =========================================================================
    print("Step 4: JSON round-trip")
    print("-" * 40)
    text = to_json({"fifth": fifth.up(context), "val": best})
    print(f"  {len(text)} characters")
    revived = from_json(text)
    print(f"  fifth: {revived['fifth'].to_string(context)}")
    print(f"  val: {revived['val']}")


if __name__ == "__main__":
    main()
