"""
Numeric helpers shared by the exact and inexact quantities.

Python floats raise on division by zero, domain errors and overflow.
Musical reals follow IEEE semantics instead, so these helpers return
NaN and infinities where the builtins would raise.
"""

from __future__ import annotations

import math
from fractions import Fraction
from typing import Any

FractionValue = int | Fraction | str

NAN = float("nan")
INF = float("inf")


def to_fraction(value: Any) -> Fraction:
    """
    Coerce an int, Fraction, decimal string or JSON fraction to a Fraction.

    Floats are accepted only when they hold an integer value.
    """
    if isinstance(value, Fraction):
        return value
    if isinstance(value, bool):
        raise TypeError(f"Cannot interpret {value!r} as a fraction")
    if isinstance(value, int):
        return Fraction(value)
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"Float {value!r} is not an exact fraction")
        return Fraction(int(value))
    if isinstance(value, dict) and "n" in value and "d" in value:
        return Fraction(int(value["n"]), int(value["d"]))
    if isinstance(value, str):
        return Fraction(value)
    raise TypeError(f"Cannot interpret {value!r} as a fraction")


def fraction_to_json(value: Fraction) -> dict[str, int]:
    """Serialize a fraction as {"n": numerator, "d": denominator}."""
    return {"n": value.numerator, "d": value.denominator}


def fraction_reviver(obj: dict[str, Any]) -> Any:
    """JSON object hook turning {"n": ..., "d": ...} back into a Fraction."""
    if set(obj.keys()) == {"n", "d"} and isinstance(obj["n"], int) and isinstance(obj["d"], int):
        return Fraction(obj["n"], obj["d"])
    return obj


def format_fraction(value: Fraction) -> str:
    """Format a fraction as 'n' or 'n/d'."""
    if value.denominator == 1:
        return str(value.numerator)
    return f"{value.numerator}/{value.denominator}"


def format_float(value: float) -> str:
    """Format a float the way literals spell it: NaN, Infinity or shortest repr."""
    if math.isnan(value):
        return "NaN"
    if math.isinf(value):
        return "Infinity" if value > 0 else "-Infinity"
    return repr(value)


def int_log2(value: int) -> float:
    """Base-2 logarithm of a non-negative integer of any size."""
    if value == 0:
        return -INF
    return math.log2(value)


def fraction_log2(value: Fraction) -> float:
    """Base-2 logarithm of a positive fraction without converting it to float."""
    return int_log2(value.numerator) - int_log2(value.denominator)


def value_to_cents(value: float) -> float:
    """Convert a linear magnitude to cents: 0 gives -Infinity, negatives give NaN."""
    if math.isnan(value) or value < 0:
        return NAN
    if value == 0:
        return -INF
    if math.isinf(value):
        return INF
    return 1200 * math.log2(value)


def cents_to_value(cents: float) -> float:
    """Convert cents to a linear magnitude, overflowing to Infinity."""
    if math.isnan(cents):
        return NAN
    try:
        return math.pow(2, cents / 1200)
    except OverflowError:
        return INF


def ieee_div(a: float, b: float) -> float:
    """Float division with IEEE results for zero divisors."""
    try:
        return a / b
    except ZeroDivisionError:
        if a == 0 or math.isnan(a):
            return NAN
        return math.copysign(INF, a) * math.copysign(1.0, b)


def ieee_pow(base: float, exponent: float) -> float:
    """Float power with IEEE results instead of exceptions or complex numbers."""
    if base == 0 and exponent < 0:
        return INF
    try:
        return math.pow(base, exponent)
    except ValueError:
        return NAN
    except OverflowError:
        if base < 0 and float(exponent).is_integer() and int(exponent) % 2:
            return -INF
        return INF


def ieee_mod(a: float, b: float, ceiling: bool = False) -> float:
    """Floored modulo with IEEE results; `ceiling` maps exact zero to `b`."""
    if b == 0 or math.isnan(a) or math.isnan(b) or math.isinf(a):
        return NAN
    result = a % b
    if ceiling and result == 0:
        return b
    return result


def ieee_floor(value: float) -> float:
    """Floor that passes NaN and infinities through."""
    if math.isnan(value) or math.isinf(value):
        return value
    return math.floor(value)


def round_half_up(value: Fraction | float) -> int:
    """Round to the nearest integer, ties away from negative infinity."""
    return math.floor(value + Fraction(1, 2) if isinstance(value, Fraction) else value + 0.5)


def fraction_gcd(a: Fraction, b: Fraction) -> Fraction:
    """Greatest common divisor of two fractions."""
    return Fraction(math.gcd(a.numerator, b.numerator), math.lcm(a.denominator, b.denominator))


def fraction_lcm(a: Fraction, b: Fraction) -> Fraction:
    """Least common multiple of two fractions."""
    if a == 0 or b == 0:
        return Fraction(0)
    return Fraction(math.lcm(a.numerator, b.numerator), math.gcd(a.denominator, b.denominator))


def continued_fraction(value: Fraction) -> list[int]:
    """Continued fraction terms of a rational number."""
    terms: list[int] = []
    n, d = value.numerator, value.denominator
    while d:
        q = n // d
        terms.append(q)
        n, d = d, n - q * d
    return terms


def convergent(terms: list[int], index: int) -> Fraction:
    """The index-th convergent of a continued fraction (clamped to its length)."""
    if not terms:
        raise ValueError("Empty continued fraction")
    terms = terms[: index + 1]
    result = Fraction(terms[-1])
    for term in reversed(terms[:-1]):
        result = term + 1 / result
    return result
