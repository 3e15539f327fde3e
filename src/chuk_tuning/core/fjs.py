"""
Functional Just System spelling.

Every prime from 5 upward gets a formal comma: the prime divided by the
Pythagorean interval it sits closest to, found by the FJS master
algorithm. Dividing a ratio by its formal commas leaves a Pythagorean
interval that has an ordinary name (M3, P5, m7) and the removed primes
become superscripts (otonal) and subscripts (utonal):

    5/4 = M3 * (80/81)  ->  M3^5
    7/4 = m7 * (63/64)  ->  m7^7
"""

from __future__ import annotations

import math
from fractions import Fraction
from functools import lru_cache

from chuk_tuning.core.literals import FJS, AbsoluteFJS, AbsolutePitch, Pythagorean
from chuk_tuning.core.monzo import TimeMonzo, TimeQuantity
from chuk_tuning.core.primes import nth_prime, prime_cents, prime_index

RADIUS_OF_TOLERANCE = 1200 * math.log2(65 / 63)

# Search bound for the master algorithm (fifths on either side of the unison)
MAX_FIFTHS = 1000

_PERFECT_CENTERS = {0: 0, 3: -1, 4: 1}
_MAJOR_CENTERS = {1: 2, 2: 4, 5: 3, 6: 5}
_NOMINALS = "CDEFGAB"
_NOMINAL_FIFTHS = {"C": 0, "D": 2, "E": 4, "F": -1, "G": 1, "A": 3, "B": 5}


def _fifth_sequence():
    yield 0
    for k in range(1, MAX_FIFTHS + 1):
        yield k
        yield -k


@lru_cache(maxsize=256)
def _formal_comma_exponents(index: int) -> tuple[int, int]:
    target = prime_cents(index)
    fifth = prime_cents(1)
    for k in _fifth_sequence():
        offset = target - k * fifth
        deviation = (offset + 600) % 1200 - 600
        if abs(deviation) < RADIUS_OF_TOLERANCE:
            octaves = round((offset - deviation) / 1200)
            return -octaves, -k
    raise ValueError(f"No formal comma found for prime {nth_prime(index)}")


def formal_comma(prime: int) -> TimeMonzo:
    """
    The FJS formal comma of a prime.

    Args:
        prime: A prime >= 5 (2 and 3 get the unison)

    Returns:
        Exact comma within the radius of tolerance of the unison
    """
    index = prime_index(prime)
    exponents = [Fraction(0)] * (index + 1)
    if index >= 2:
        twos, threes = _formal_comma_exponents(index)
        exponents[0] = Fraction(twos)
        exponents[1] = Fraction(threes)
        exponents[index] = Fraction(1)
    return TimeMonzo(0, exponents)


def uninflect(monzo: TimeMonzo) -> tuple[TimeMonzo, tuple[int, ...], tuple[int, ...]] | None:
    """
    Split a ratio into its Pythagorean part and FJS inflections.

    Returns:
        (pythagorean, superscripts, subscripts), or None for radicals,
        cents offsets and non-positive values
    """
    if not monzo.is_fractional() or monzo.residual <= 0:
        return None
    monzo = monzo.expanded()
    if monzo.residual != 1:
        return None
    superscripts: list[int] = []
    subscripts: list[int] = []
    result: TimeQuantity = monzo
    for i in range(2, monzo.number_of_components):
        exponent = int(monzo.prime_exponents[i])
        if not exponent:
            continue
        prime = nth_prime(i)
        result = result.div(formal_comma(prime).pow(exponent))  # type: ignore[attr-defined]
        if exponent > 0:
            superscripts.extend([prime] * exponent)
        else:
            subscripts.extend([prime] * -exponent)
    if not isinstance(result, TimeMonzo):
        return None
    return result, tuple(superscripts), tuple(subscripts)


def pythagorean_name(twos: int, threes: int) -> Pythagorean:
    """
    Name a Pythagorean interval 2^twos * 3^threes.

    Descending intervals get a negative degree (P-5 is a descending fifth).
    """
    steps = 7 * twos + 11 * threes
    if steps < 0:
        name = pythagorean_name(-twos, -threes)
        return Pythagorean(name.quality, -name.degree)
    degree_class = steps % 7
    degree = steps + 1
    if degree_class in _PERFECT_CENTERS:
        offset = threes - _PERFECT_CENTERS[degree_class]
        count = offset // 7
        if count == 0:
            quality = "P"
        elif count > 0:
            quality = "A" * count
        else:
            quality = "d" * -count
    else:
        offset = threes - _MAJOR_CENTERS[degree_class]
        if offset == 0:
            quality = "M"
        elif offset == -7:
            quality = "m"
        elif offset > 0:
            quality = "A" * (offset // 7)
        else:
            quality = "d" * ((-7 - offset) // 7)
    return Pythagorean(quality, degree)


def absolute_pitch_name(twos: int, threes: int) -> AbsolutePitch:
    """Name the pitch 2^twos * 3^threes above C4."""
    steps = 7 * twos + 11 * threes
    letter_index = steps % 7
    nominal = _NOMINALS[letter_index]
    sharps = (threes - _NOMINAL_FIFTHS[nominal]) // 7
    accidentals = "#" * sharps if sharps > 0 else "b" * -sharps
    octave = 4 + (steps - letter_index) // 7
    return AbsolutePitch(nominal, accidentals, octave)


def _pythagorean_exponents(monzo: TimeMonzo) -> tuple[int, int]:
    twos = int(monzo.prime_exponents[0]) if monzo.number_of_components > 0 else 0
    threes = int(monzo.prime_exponents[1]) if monzo.number_of_components > 1 else 0
    return twos, threes


def as_fjs(value: TimeQuantity) -> FJS | None:
    """Spell a relative ratio in FJS, or None if it has no such spelling."""
    if not isinstance(value, TimeMonzo) or not value.is_scalar():
        return None
    parts = uninflect(value)
    if parts is None:
        return None
    pythagorean, superscripts, subscripts = parts
    twos, threes = _pythagorean_exponents(pythagorean)
    return FJS(pythagorean_name(twos, threes), superscripts, subscripts)


def as_absolute_fjs(value: TimeQuantity, c4: TimeQuantity) -> AbsoluteFJS | None:
    """Spell a pitch relative to the reference C4 in absolute FJS."""
    if not isinstance(value, TimeMonzo) or not isinstance(c4, TimeMonzo):
        return None
    if value.time_exponent != c4.time_exponent:
        return None
    relative = value.div(c4)
    if not isinstance(relative, TimeMonzo):
        return None
    parts = uninflect(relative)
    if parts is None:
        return None
    pythagorean, superscripts, subscripts = parts
    twos, threes = _pythagorean_exponents(pythagorean)
    return AbsoluteFJS(absolute_pitch_name(twos, threes), superscripts, subscripts)
