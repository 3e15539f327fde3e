"""
Time monzos - the numeric values behind every interval.

A musical quantity is either exact or inexact:
- TimeMonzo: rational exponents of the first k primes, a rational residual
  for everything the primes do not cover, an inexact cents offset and an
  exponent of time (0 = ratio, -1 = frequency, +1 = duration)
- TimeReal: a plain float magnitude with a float time exponent

Both derive from TimeQuantity. Exact arithmetic stays exact whenever the
result is rational-closed and otherwise promotes to TimeReal instead of
failing. TimeReal follows IEEE semantics: NaN and infinities propagate.
"""

from __future__ import annotations

import math
from fractions import Fraction
from functools import reduce as fold
from functools import total_ordering
from typing import Any

from chuk_tuning.config import get_config, get_number_of_components
from chuk_tuning.constants import ErrorMessages, IntervalDomain
from chuk_tuning.core.literals import (
    CentsLiteral,
    FractionLiteral,
    IntegerLiteral,
    MonzoLiteral,
    NedjiLiteral,
    format_cents,
)
from chuk_tuning.core.numeric import (
    INF,
    NAN,
    cents_to_value,
    continued_fraction,
    convergent,
    format_float,
    format_fraction,
    fraction_gcd,
    fraction_log2,
    fraction_to_json,
    ieee_div,
    ieee_floor,
    ieee_mod,
    ieee_pow,
    int_log2,
    round_half_up,
    to_fraction,
    value_to_cents,
)
from chuk_tuning.core.primes import (
    factorize,
    integer_divisors,
    integer_root,
    nth_prime,
    prime_cents,
    prime_limit_index,
    to_monzo_and_residual,
)
from chuk_tuning.errors import DomainError, InexactError, ReductionError, TuningError


def _coerce(value: Any) -> TimeQuantity | None:
    """Promote plain numbers to quantities for operator overloads."""
    if isinstance(value, TimeQuantity):
        return value
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, Fraction)):
        return TimeMonzo.from_fraction(value)
    if isinstance(value, float):
        return TimeReal.from_value(value)
    return None


def _exact_operand(value: Any, operation: str) -> TimeMonzo:
    if not isinstance(value, TimeMonzo):
        raise TypeError(
            ErrorMessages.UNSUPPORTED_OPERAND.format(operation=operation, kind=type(value).__name__)
        )
    return value


@total_ordering
class TimeQuantity:
    """
    Common base of TimeMonzo and TimeReal.

    Implements the operator protocol and the approximation helpers that only
    need the numeric value.
    """

    __slots__ = ()

    time_exponent: Any

    # Subclasses provide the arithmetic; these are the shared entry points.

    def value_of(self) -> float:
        raise NotImplementedError

    def total_cents(self, ignore_sign: bool = False) -> float:
        raise NotImplementedError

    def is_scalar(self) -> bool:
        """True for pure ratios (no time units)."""
        return self.time_exponent == 0

    def compare(self, other: TimeQuantity) -> int:
        """
        Compare numeric values.

        Returns:
            Negative, zero or positive like a classic comparator
        """
        if (
            isinstance(self, TimeMonzo)
            and isinstance(other, TimeMonzo)
            and self.is_fractional()
            and other.is_fractional()
        ):
            difference = self.to_fraction() - other.to_fraction()
            return (difference > 0) - (difference < 0)
        a = self.value_of()
        b = other.value_of()
        if a > 0 and b > 0:
            a = self.total_cents()
            b = other.total_cents()
        return (a > b) - (a < b)

    def _as_fraction(self) -> Fraction:
        if isinstance(self, TimeMonzo) and self.is_fractional():
            return self.to_fraction()
        return Fraction(self.value_of())

    def to_continued(self) -> list[int]:
        """Continued fraction expansion of the value (floats use their exact binary value)."""
        return continued_fraction(self._as_fraction())

    def get_convergent(self, n: int) -> Fraction:
        """The n-th continued fraction convergent of the value."""
        return convergent(self.to_continued(), n)

    def _result_components(self) -> int:
        if isinstance(self, TimeMonzo):
            return self.number_of_components
        return get_number_of_components()

    def approximate_harmonic(self, denominator: int) -> TimeMonzo:
        """Closest ratio of the form n/denominator."""
        if isinstance(self, TimeMonzo) and self.is_fractional():
            numerator = round_half_up(self.to_fraction() * denominator)
        else:
            numerator = round_half_up(self.value_of() * denominator)
        return TimeMonzo.from_fraction(Fraction(numerator, denominator), self._result_components())

    def approximate_subharmonic(self, numerator: int) -> TimeMonzo:
        """Closest ratio of the form numerator/n."""
        if isinstance(self, TimeMonzo) and self.is_fractional():
            denominator = round_half_up(numerator / self.to_fraction())
        else:
            denominator = round_half_up(ieee_div(numerator, self.value_of()))
        return TimeMonzo.from_fraction(
            Fraction(numerator, max(1, denominator)), self._result_components()
        )

    def approximate_simple(self, max_denominator: int) -> TimeMonzo:
        """Best rational approximation with a bounded denominator."""
        value = self._as_fraction().limit_denominator(max_denominator)
        return TimeMonzo.from_fraction(value, self._result_components())

    # Operator protocol

    def __float__(self) -> float:
        return self.value_of()

    def __mul__(self, other: Any) -> TimeQuantity:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self.mul(other)  # type: ignore[attr-defined]

    def __rmul__(self, other: Any) -> TimeQuantity:
        return self.__mul__(other)

    def __truediv__(self, other: Any) -> TimeQuantity:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self.div(other)  # type: ignore[attr-defined]

    def __rtruediv__(self, other: Any) -> TimeQuantity:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return other.div(self)  # type: ignore[attr-defined]

    def __add__(self, other: Any) -> TimeQuantity:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self.add(other)  # type: ignore[attr-defined]

    def __radd__(self, other: Any) -> TimeQuantity:
        return self.__add__(other)

    def __sub__(self, other: Any) -> TimeQuantity:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self.sub(other)  # type: ignore[attr-defined]

    def __rsub__(self, other: Any) -> TimeQuantity:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return other.sub(self)  # type: ignore[attr-defined]

    def __pow__(self, other: Any) -> TimeQuantity:
        return self.pow(other)  # type: ignore[attr-defined]

    def __mod__(self, other: Any) -> TimeQuantity:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self.mmod(other)  # type: ignore[attr-defined]

    def __neg__(self) -> TimeQuantity:
        return self.neg()  # type: ignore[attr-defined]

    def __abs__(self) -> TimeQuantity:
        return self.abs()  # type: ignore[attr-defined]

    def __eq__(self, other: object) -> bool:
        other_quantity = _coerce(other)
        if other_quantity is None:
            return NotImplemented
        return self.equals(other_quantity)  # type: ignore[attr-defined]

    def __lt__(self, other: Any) -> bool:
        other = _coerce(other)
        if other is None:
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        return hash((float(self.time_exponent), self.value_of()))

    def __str__(self) -> str:
        return self.to_string()  # type: ignore[attr-defined]

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.to_string()!r})"  # type: ignore[attr-defined]


class TimeMonzo(TimeQuantity):
    """
    Exact musical quantity.

    Value = prod(prime_i ** prime_exponents[i]) * residual
            * 2 ** (cents / 1200) * (1 s) ** time_exponent

    A zero residual represents zero regardless of the other fields.
    Instances are treated as immutable; mutate only fresh clones.
    """

    __slots__ = ("time_exponent", "prime_exponents", "residual", "cents")

    def __init__(
        self,
        time_exponent: int | Fraction,
        prime_exponents: list[Fraction] | list[int],
        residual: int | Fraction = 1,
        cents: float = 0.0,
    ) -> None:
        self.time_exponent = Fraction(time_exponent)
        self.prime_exponents = [Fraction(e) for e in prime_exponents]
        self.residual = Fraction(residual)
        self.cents = float(cents)

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def from_fraction(cls, value: Any, number_of_components: int | None = None) -> TimeMonzo:
        """
        Factor a fraction into a monzo.

        Args:
            value: int, Fraction or fraction string
            number_of_components: Primes to track (defaults to the configured count)

        Returns:
            TimeMonzo with everything beyond the tracked primes in the residual
        """
        if number_of_components is None:
            number_of_components = get_number_of_components()
        exponents, residual = to_monzo_and_residual(to_fraction(value), number_of_components)
        return cls(0, exponents, residual)

    @classmethod
    def from_integer(cls, value: int, number_of_components: int | None = None) -> TimeMonzo:
        """Factor an integer into a monzo."""
        return cls.from_fraction(Fraction(value), number_of_components)

    @classmethod
    def from_cents(cls, cents: float, number_of_components: int | None = None) -> TimeMonzo:
        """A pure cents offset over the unison."""
        if number_of_components is None:
            number_of_components = get_number_of_components()
        return cls(0, [0] * number_of_components, 1, cents)

    @classmethod
    def from_equal_temperament(
        cls,
        fraction_of_equave: Any,
        equave: Any = 2,
        number_of_components: int | None = None,
    ) -> TimeMonzo:
        """
        A step of an equal division such as 7\\12 (fraction_of_equave = 7/12).

        Raises:
            InexactError: If the equave does not factor inside the tracked primes
        """
        base = cls.from_fraction(equave, number_of_components)
        if abs(base.residual) != 1:
            raise InexactError(ErrorMessages.INEXACT_EXPONENTS.format(prime=base.residual))
        return base.pow(to_fraction(fraction_of_equave))  # type: ignore[return-value]

    @classmethod
    def from_fractional_frequency(
        cls, frequency: Any, number_of_components: int | None = None
    ) -> TimeMonzo:
        """An absolute frequency in Hz."""
        result = cls.from_fraction(frequency, number_of_components)
        result.time_exponent = Fraction(-1)
        return result

    def clone(self) -> TimeMonzo:
        """Copy that can be mutated without affecting this monzo."""
        return TimeMonzo(self.time_exponent, list(self.prime_exponents), self.residual, self.cents)

    # =========================================================================
    # Shape
    # =========================================================================

    @property
    def number_of_components(self) -> int:
        """Number of tracked primes."""
        return len(self.prime_exponents)

    @number_of_components.setter
    def number_of_components(self, value: int) -> None:
        current = len(self.prime_exponents)
        if value < current:
            residual = self.residual
            for i in range(value, current):
                exponent = self.prime_exponents[i]
                if exponent.denominator != 1:
                    raise InexactError(ErrorMessages.INEXACT_EXPONENTS.format(prime=nth_prime(i)))
                residual *= Fraction(nth_prime(i)) ** int(exponent)
            self.prime_exponents = self.prime_exponents[:value]
            self.residual = residual
        elif value > current:
            residual = self.residual
            for i in range(current, value):
                exponent = 0
                if residual:
                    p = nth_prime(i)
                    numerator, denominator = residual.numerator, residual.denominator
                    while numerator % p == 0:
                        numerator //= p
                        exponent += 1
                    while denominator % p == 0:
                        denominator //= p
                        exponent -= 1
                    residual = Fraction(numerator, denominator)
                self.prime_exponents.append(Fraction(exponent))
            self.residual = residual

    @property
    def octaves(self) -> Fraction:
        """Exponent of the prime 2."""
        return self.prime_exponents[0] if self.prime_exponents else Fraction(0)

    def _with_components(self, n: int) -> TimeMonzo:
        if n == len(self.prime_exponents):
            return self
        result = self.clone()
        result.number_of_components = n
        return result

    def _match(self, other: TimeMonzo) -> tuple[TimeMonzo, TimeMonzo]:
        n = max(len(self.prime_exponents), len(other.prime_exponents))
        return self._with_components(n), other._with_components(n)

    def expanded(self) -> TimeMonzo:
        """Copy with every prime factor of the residual moved into the vector."""
        if abs(self.residual) in (0, 1):
            return self
        needed = prime_limit_index(self.residual)
        return self._with_components(max(needed, len(self.prime_exponents)))

    # =========================================================================
    # Predicates
    # =========================================================================

    def is_fractional(self) -> bool:
        """True if the value is an exact fraction (integer exponents, no cents)."""
        return self.cents == 0 and all(e.denominator == 1 for e in self.prime_exponents)

    def is_integral(self) -> bool:
        """True if the value is an exact integer."""
        return (
            self.is_fractional()
            and self.residual.denominator == 1
            and all(e >= 0 for e in self.prime_exponents)
        )

    def is_equal_temperament(self) -> bool:
        """True if the value is a pure product of prime powers with unit residual."""
        return self.residual == 1 and self.cents == 0

    def is_power_of_two(self) -> bool:
        """True for exact (possibly fractional) powers of two."""
        if not self.is_equal_temperament():
            return False
        return all(e == 0 for e in self.prime_exponents[1:])

    def is_unity(self) -> bool:
        """True for the exact unison 1/1."""
        return (
            self.time_exponent == 0
            and self.residual == 1
            and self.cents == 0
            and all(e == 0 for e in self.prime_exponents)
        )

    def is_non_negative(self) -> bool:
        return self.residual >= 0

    # =========================================================================
    # Conversion
    # =========================================================================

    def to_fraction(self) -> Fraction:
        """
        Exact value as a fraction (time units are ignored).

        Raises:
            InexactError: For radicals or values with a cents offset
        """
        if not self.is_fractional():
            raise InexactError(ErrorMessages.NON_FRACTIONAL)
        numerator = self.residual.numerator
        denominator = self.residual.denominator
        for i, exponent in enumerate(self.prime_exponents):
            if exponent > 0:
                numerator *= nth_prime(i) ** int(exponent)
            elif exponent < 0:
                denominator *= nth_prime(i) ** int(-exponent)
        return Fraction(numerator, denominator)

    def to_integer(self) -> int:
        """Exact value as an integer."""
        value = self.to_fraction()
        if value.denominator != 1:
            raise InexactError(ErrorMessages.NON_INTEGRAL)
        return value.numerator

    def to_cents(self) -> float:
        return self.total_cents()

    def to_integer_monzo(self) -> list[int]:
        """Prime exponents as integers."""
        if not all(e.denominator == 1 for e in self.prime_exponents):
            raise InexactError(ErrorMessages.RADICAL_PRIMES)
        return [int(e) for e in self.prime_exponents]

    def to_equal_temperament(self) -> tuple[Fraction, Fraction]:
        """
        Express the value as a fraction of the simplest possible equave.

        Returns:
            (fraction_of_equave, equave) such that value == equave ** fraction_of_equave
        """
        if not self.is_equal_temperament():
            raise InexactError(ErrorMessages.NON_FRACTIONAL)
        nonzero = [e for e in self.prime_exponents if e]
        if not nonzero:
            return Fraction(0), Fraction(1)
        multiplier = fold(fraction_gcd, nonzero)
        equave = Fraction(1)
        for i, exponent in enumerate(self.prime_exponents):
            if exponent:
                equave *= Fraction(nth_prime(i)) ** int(exponent / multiplier)
        if equave < 1:
            return -multiplier, 1 / equave
        return multiplier, equave

    def total_cents(self, ignore_sign: bool = False) -> float:
        """
        Size of the value in cents.

        Zero is -Infinity and negative values are NaN unless ignore_sign is set.
        """
        if self.residual == 0:
            return -INF
        if self.residual < 0 and not ignore_sign:
            return NAN
        cents = self.cents
        for i, exponent in enumerate(self.prime_exponents):
            if exponent:
                cents += float(exponent) * prime_cents(i)
        if abs(self.residual) != 1:
            cents += 1200 * fraction_log2(abs(self.residual))
        return cents

    def value_of(self) -> float:
        """Linear magnitude as a float (overflows to Infinity)."""
        if self.is_fractional():
            try:
                return float(self.to_fraction())
            except OverflowError:
                return INF if self.residual > 0 else -INF
        sign = -1.0 if self.residual < 0 else 1.0
        if self.residual == 0:
            return 0.0
        return sign * cents_to_value(self.total_cents(ignore_sign=True))

    def tenney_height(self) -> float:
        """Base-2 Tenney height log2(n*d) generalized to radicals."""
        if self.residual == 0:
            return INF
        height = int_log2(abs(self.residual.numerator)) + int_log2(self.residual.denominator)
        for i, exponent in enumerate(self.prime_exponents):
            if exponent:
                height += abs(float(exponent)) * prime_cents(i) / 1200
        return height

    def prime_limit(self) -> int:
        """Largest prime involved in the value (1 for powers of nothing)."""
        if self.residual == 0:
            raise TuningError("Zero has no prime limit")
        limit = 1
        for i, exponent in enumerate(self.prime_exponents):
            if exponent:
                limit = nth_prime(i)
        factors = factorize(self.residual)
        if factors:
            limit = max(limit, max(factors))
        return limit

    def divisors(self) -> list[int]:
        """All divisors of an integral value."""
        return integer_divisors(self.to_integer())

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def neg(self) -> TimeMonzo:
        return TimeMonzo(self.time_exponent, list(self.prime_exponents), -self.residual, self.cents)

    def inverse(self) -> TimeMonzo:
        """Reciprocal value."""
        if self.residual == 0:
            raise ZeroDivisionError(ErrorMessages.DIVISION_BY_ZERO)
        return TimeMonzo(
            -self.time_exponent,
            [-e for e in self.prime_exponents],
            1 / self.residual,
            -self.cents,
        )

    def abs(self) -> TimeMonzo:
        return TimeMonzo(self.time_exponent, list(self.prime_exponents), abs(self.residual), self.cents)

    def pitch_abs(self) -> TimeMonzo:
        """Flip descending values to ascending ones."""
        result = self.abs()
        if result.total_cents() < 0:
            return result.inverse()
        return result

    def mul(self, other: TimeQuantity) -> TimeQuantity:
        """Multiply values (stack intervals)."""
        if isinstance(other, TimeReal):
            return other.mul(self)
        other = _exact_operand(other, "multiply by")
        a, b = self._match(other)
        return TimeMonzo(
            a.time_exponent + b.time_exponent,
            [x + y for x, y in zip(a.prime_exponents, b.prime_exponents)],
            a.residual * b.residual,
            a.cents + b.cents,
        )

    def div(self, other: TimeQuantity) -> TimeQuantity:
        """Divide values."""
        if isinstance(other, TimeReal):
            return TimeReal.from_monzo(self).div(other)
        other = _exact_operand(other, "divide by")
        if other.residual == 0:
            raise ZeroDivisionError(ErrorMessages.DIVISION_BY_ZERO)
        a, b = self._match(other)
        return TimeMonzo(
            a.time_exponent - b.time_exponent,
            [x - y for x, y in zip(a.prime_exponents, b.prime_exponents)],
            a.residual / b.residual,
            a.cents - b.cents,
        )

    def ldiv(self, other: TimeQuantity) -> TimeQuantity:
        """Divide other by this value."""
        if isinstance(other, TimeReal):
            return other.div(self)
        other = _exact_operand(other, "divide")
        return other.div(self)

    def _residual_power(self, exponent: Fraction) -> Fraction | None:
        residual = self.residual
        if residual == 0:
            if exponent < 0:
                raise ZeroDivisionError(ErrorMessages.DIVISION_BY_ZERO)
            return Fraction(0) if exponent > 0 else Fraction(1)
        p, q = exponent.numerator, exponent.denominator
        if q == 1:
            return residual**p
        if residual < 0 and q % 2 == 0:
            return None
        numerator = integer_root(abs(residual.numerator), q)
        denominator = integer_root(residual.denominator, q)
        if numerator is None or denominator is None:
            return None
        sign = -1 if residual < 0 else 1
        return (sign * Fraction(numerator, denominator)) ** p

    def pow(self, other: Any) -> TimeQuantity:
        """
        Raise to a power.

        Rational exponents keep the result exact when the residual has an
        exact root. Anything else promotes to TimeReal.
        """
        if isinstance(other, TimeQuantity):
            if isinstance(other, TimeMonzo) and other.is_scalar() and other.is_fractional():
                exponent = other.to_fraction()
            else:
                return TimeReal.from_monzo(self).pow(other)
        elif isinstance(other, float):
            if not other.is_integer():
                return TimeReal.from_monzo(self).pow(other)
            exponent = Fraction(int(other))
        else:
            exponent = to_fraction(other)
        if exponent.denominator > get_config().max_pow_denominator:
            return TimeReal.from_monzo(self).pow(float(exponent))
        residual = self._residual_power(exponent)
        if residual is None:
            return TimeReal.from_monzo(self).pow(float(exponent))
        return TimeMonzo(
            self.time_exponent * exponent,
            [e * exponent for e in self.prime_exponents],
            residual,
            self.cents * float(exponent),
        )

    def _exact_log(self, other: TimeMonzo) -> Fraction | None:
        if self.cents or other.cents or self.residual <= 0 or other.residual <= 0:
            return None
        a, b = self.expanded()._match(other.expanded())
        if a.residual != 1 or b.residual != 1:
            return None
        pairs = [(a.time_exponent, b.time_exponent)] + list(zip(a.prime_exponents, b.prime_exponents))
        ratio: Fraction | None = None
        for x, y in pairs:
            if y == 0:
                if x != 0:
                    return None
                continue
            if ratio is None:
                ratio = x / y
            elif x != ratio * y:
                return None
        return ratio

    def _log_ratio(self, other: TimeQuantity) -> Fraction | float:
        if isinstance(other, TimeMonzo):
            exact = self._exact_log(other)
            if exact is not None:
                return exact
        return ieee_div(self.total_cents(), other.total_cents())

    def log(self, other: TimeQuantity) -> Fraction | float:
        """
        Logarithm of this value in the base of other.

        Exact when one value is a rational power of the other.
        """
        return self._log_ratio(other)

    def _factors(self) -> dict[int, Fraction]:
        if self.residual == 0:
            raise TuningError(ErrorMessages.DOT_RESIDUAL.format(residual=self.residual))
        result: dict[int, Fraction] = {}
        for i, exponent in enumerate(self.prime_exponents):
            if exponent:
                result[nth_prime(i)] = exponent
        if abs(self.residual) != 1:
            for p, e in factorize(self.residual).items():
                result[p] = result.get(p, Fraction(0)) + e
        return result

    def dot(self, other: TimeQuantity) -> Fraction:
        """
        Inner product of prime exponent vectors.

        Residuals are factored so primes beyond the tracked ones contribute too.
        """
        if not isinstance(other, TimeMonzo):
            raise InexactError(ErrorMessages.REAL_DOT)
        if abs(self.residual) == 1 and abs(other.residual) == 1:
            return sum(
                (x * y for x, y in zip(self.prime_exponents, other.prime_exponents)),
                Fraction(0),
            )
        a = self._factors()
        b = other._factors()
        return sum((e * b[p] for p, e in a.items() if p in b), Fraction(0))

    def geometric_inverse(self) -> TimeMonzo:
        """
        The vector v with v.dot(self) == 1 pointing along this monzo.

        Raises:
            InexactError: For values with a cents offset or the unison
        """
        if self.cents:
            raise InexactError(ErrorMessages.INEXACT_INVERSE)
        expanded = self.expanded()
        magnitude = expanded.dot(expanded)
        if magnitude == 0:
            raise InexactError(ErrorMessages.ZERO_INVERSE)
        return TimeMonzo(0, [e / magnitude for e in expanded.prime_exponents])

    def add(self, other: TimeQuantity) -> TimeQuantity:
        """Linear addition of values."""
        if isinstance(other, TimeReal):
            return other.add(self)
        other = _exact_operand(other, "add")
        if self.time_exponent != other.time_exponent:
            raise DomainError(ErrorMessages.TIME_MISMATCH.format(operation="add"))
        if self.residual == 0:
            return other.clone()
        if other.residual == 0:
            return self.clone()
        ratio: TimeMonzo = self.div(other)  # type: ignore[assignment]
        if not ratio.is_fractional():
            return TimeReal.from_monzo(self).add(other)
        n = max(self.number_of_components, other.number_of_components)
        return other.mul(TimeMonzo.from_fraction(ratio.to_fraction() + 1, n))

    def sub(self, other: TimeQuantity) -> TimeQuantity:
        """Linear subtraction of values."""
        return self.add(other.neg())  # type: ignore[attr-defined]

    def lsub(self, other: TimeQuantity) -> TimeQuantity:
        """Subtract this value from other."""
        return other.add(self.neg())  # type: ignore[attr-defined]

    def lens_add(self, other: TimeQuantity) -> TimeQuantity:
        """
        Harmonic addition 1 / (1/self + 1/other), as resistors in parallel.

        Zero absorbs the other operand.

        Raises:
            ZeroDivisionError: If the reciprocals cancel out
        """
        if isinstance(other, TimeReal):
            return other.lens_add(self)
        other = _exact_operand(other, "lens add")
        if self.residual == 0:
            return self.clone()
        if other.residual == 0:
            return other.clone()
        return self.inverse().add(other.inverse()).inverse()  # type: ignore[attr-defined]

    def lens_sub(self, other: TimeQuantity) -> TimeQuantity:
        """Harmonic subtraction 1 / (1/self - 1/other)."""
        if isinstance(other, TimeReal):
            return TimeReal.from_monzo(self).lens_sub(other)
        other = _exact_operand(other, "lens subtract")
        if self.residual == 0:
            return self.clone()
        if other.residual == 0:
            return other.clone()
        return self.inverse().sub(other.inverse()).inverse()  # type: ignore[attr-defined]

    def gcd(self, other: TimeMonzo) -> TimeMonzo:
        """Greatest common divisor of two exact fractions."""
        a, b = self._match(other)
        if not (a.is_fractional() and b.is_fractional()):
            raise InexactError(ErrorMessages.NON_FRACTIONAL)
        return TimeMonzo(
            min(a.time_exponent, b.time_exponent),
            [min(x, y) for x, y in zip(a.prime_exponents, b.prime_exponents)],
            fraction_gcd(a.residual, b.residual),
        )

    def lcm(self, other: TimeMonzo) -> TimeMonzo:
        """Least common multiple of two exact fractions."""
        a, b = self._match(other)
        if not (a.is_fractional() and b.is_fractional()):
            raise InexactError(ErrorMessages.NON_FRACTIONAL)
        residual = abs(a.residual * b.residual) / fraction_gcd(a.residual, b.residual)
        return TimeMonzo(
            max(a.time_exponent, b.time_exponent),
            [max(x, y) for x, y in zip(a.prime_exponents, b.prime_exponents)],
            residual,
        )

    def stretch(self, scalar: float) -> TimeMonzo:
        """
        Scale the size in cents by a factor, keeping the exact part.

        The difference lands in the cents offset, so 3/2 stretched by 1.01
        is 3/2 plus about 7.02 cents.

        Raises:
            DomainError: For values with time units
        """
        if self.time_exponent != 0:
            raise DomainError(ErrorMessages.SCALAR_ONLY.format(operation="stretching"))
        offset = self.total_cents() * (float(scalar) - 1)
        return TimeMonzo(0, list(self.prime_exponents), self.residual, self.cents + offset)

    def project(self, base: TimeQuantity) -> TimeQuantity:
        """
        Swap the octave for another base.

        The exponent of two is replaced by the same power of base, so seven
        steps of 12-EDO project to seven steps of 12 equal divisions of base.
        """
        if not self.prime_exponents:
            return TimeReal.from_monzo(self).project(base)
        octaves = self.prime_exponents[0]
        rest = TimeMonzo(
            self.time_exponent, [Fraction(0)] + self.prime_exponents[1:], self.residual, self.cents
        )
        return rest.mul(base.pow(octaves))  # type: ignore[attr-defined]

    def mmod(self, other: TimeQuantity, ceiling: bool = False) -> TimeQuantity:
        """
        Linear modulo.

        Args:
            other: Modulus
            ceiling: Map exact multiples to the modulus instead of zero
        """
        if isinstance(other, TimeMonzo) and self.is_fractional() and other.is_fractional():
            divisor = other.to_fraction()
            if divisor == 0:
                raise ReductionError(ErrorMessages.DIVISION_BY_ZERO)
            value = self.to_fraction() % divisor
            if ceiling and value == 0:
                value = divisor
            n = max(self.number_of_components, other.number_of_components)
            result = TimeMonzo.from_fraction(value, n)
            result.time_exponent = self.time_exponent
            return result
        return TimeReal.from_monzo(self).mmod(other, ceiling)

    def reduce(self, other: TimeQuantity, ceiling: bool = False) -> TimeQuantity:
        """
        Logarithmic modulo, such as octave reduction.

        Raises:
            ReductionError: When reducing by a unison
        """
        if isinstance(other, TimeReal):
            return TimeReal.from_monzo(self).reduce(other, ceiling)
        other_cents = other.total_cents()
        if other_cents == 0:
            raise ReductionError(ErrorMessages.REDUCTION_BY_UNISON)
        ratio = self._log_ratio(other)
        if not math.isfinite(ratio):
            return TimeReal.from_monzo(self).reduce(other, ceiling)
        multiplier = math.ceil(ratio) - 1 if ceiling else math.floor(ratio)
        result = self.div(other.pow(multiplier))
        # Float ratios may land next to an integer; settle into [1, other) or (1, other]
        low, high = (1, 0) if ceiling else (0, 1)
        if other_cents > 0 and self.residual > 0:
            unity = TimeMonzo.from_integer(1, self.number_of_components)
            if result.compare(unity) < low:
                result = result.mul(other)
            elif result.compare(other) > -high:
                result = result.div(other)
        return result

    def round_to(self, other: TimeQuantity) -> TimeQuantity:
        """Round to the nearest multiple of other."""
        if isinstance(other, TimeMonzo) and self.is_fractional() and other.is_fractional():
            divisor = other.to_fraction()
            if divisor == 0:
                raise ReductionError(ErrorMessages.DIVISION_BY_ZERO)
            multiplier = round_half_up(self.to_fraction() / divisor)
            return other.mul(TimeMonzo.from_fraction(multiplier, other.number_of_components))
        return TimeReal.from_monzo(self).round_to(other)

    def pitch_round_to(self, other: TimeQuantity) -> TimeQuantity:
        """Round to the nearest power of other."""
        other_cents = other.total_cents()
        if other_cents == 0:
            raise ReductionError(ErrorMessages.REDUCTION_BY_UNISON)
        ratio = self._log_ratio(other)
        if not math.isfinite(ratio):
            return TimeReal.from_monzo(self).pitch_round_to(other)
        return other.pow(round_half_up(ratio))  # type: ignore[attr-defined]

    # =========================================================================
    # Comparison
    # =========================================================================

    def strict_equals(self, other: TimeQuantity) -> bool:
        """Representation-level equality (after padding to a common width)."""
        if not isinstance(other, TimeMonzo):
            return False
        if self.time_exponent != other.time_exponent or self.cents != other.cents:
            return False
        a, b = self._match(other)
        return a.residual == b.residual and a.prime_exponents == b.prime_exponents

    def equals(self, other: TimeQuantity) -> bool:
        """Numeric equality, valid across TimeMonzo and TimeReal."""
        if isinstance(other, TimeMonzo) and self.cents == 0 and other.cents == 0:
            if self.residual == 0 or other.residual == 0:
                return self.residual == other.residual
            return self.strict_equals(other)
        if float(self.time_exponent) != float(other.time_exponent):
            return False
        return self.value_of() == other.value_of()

    # =========================================================================
    # Display
    # =========================================================================

    def _estimated_digits(self) -> float:
        digits = len(str(abs(self.residual.numerator))) + len(str(self.residual.denominator))
        for i, exponent in enumerate(self.prime_exponents):
            if exponent:
                digits += abs(float(exponent)) * math.log10(nth_prime(i))
        return digits

    def _factored_string(self) -> str:
        parts: list[str] = []
        for i, exponent in enumerate(self.prime_exponents):
            if exponent == 1:
                parts.append(str(nth_prime(i)))
            elif exponent:
                parts.append(f"{nth_prime(i)}^{format_fraction(exponent)}")
        if self.residual != 1:
            parts.append(format_fraction(self.residual))
        if self.cents:
            parts.append(f"(1c)^{format_float(self.cents)}")
        if self.time_exponent == 1:
            parts.append("(1s)")
        elif self.time_exponent:
            parts.append(f"(1s)^{format_fraction(self.time_exponent)}")
        return "*".join(parts) if parts else "1"

    def to_string(self, domain: IntervalDomain = IntervalDomain.LINEAR) -> str:
        """
        Context-free spelling of the value.

        Linear values print as integers, fractions or frequencies when exact
        and small enough, otherwise as a product of prime powers. Logarithmic
        values print as steps of an equave, cents, or logarithmic(...).
        """
        if domain == IntervalDomain.LOGARITHMIC:
            if self.is_unity():
                return "0."
            if self.is_scalar() and self.is_equal_temperament():
                fraction, equave = self.to_equal_temperament()
                result = f"{fraction.numerator}\\{fraction.denominator}"
                if equave != 2:
                    result += f"<{format_fraction(equave)}>"
                return result
            if (
                self.is_scalar()
                and self.residual == 1
                and all(e == 0 for e in self.prime_exponents)
            ):
                return format_cents(self.cents)
            return f"logarithmic({self.to_string(IntervalDomain.LINEAR)})"
        if (
            self.is_fractional()
            and self.time_exponent in (0, -1, 1)
            and self._estimated_digits() <= get_config().fraction_digit_limit
        ):
            text = format_fraction(self.to_fraction())
            if self.time_exponent == -1:
                return f"{text} Hz"
            if self.time_exponent == 1:
                return f"{text} s"
            return text
        return self._factored_string()

    def as_integer_literal(self) -> IntegerLiteral | None:
        if self.is_scalar() and self.is_fractional():
            value = self.to_fraction()
            if value.denominator == 1:
                return IntegerLiteral(value.numerator)
        return None

    def as_fraction_literal(self, node: FractionLiteral | None = None) -> FractionLiteral | None:
        """Spell as a fraction, keeping the template's denominator when it divides evenly."""
        if not (self.is_scalar() and self.is_fractional()):
            return None
        value = self.to_fraction()
        if node is not None and node.denominator:
            numerator = value * node.denominator
            if numerator.denominator == 1:
                return FractionLiteral(numerator.numerator, node.denominator)
        return FractionLiteral(value.numerator, value.denominator)

    def as_nedji_literal(self, node: NedjiLiteral | None = None) -> NedjiLiteral | None:
        """Spell as steps of an equal division, keeping the template's division when possible."""
        if not (self.is_scalar() and self.is_equal_temperament()):
            return None
        fraction, equave = self.to_equal_temperament()
        if node is not None:
            template_equave = node.equave
            if equave == 1:
                return NedjiLiteral(0, node.denominator, node.equave_numerator, node.equave_denominator)
            exponent = self._exact_log(TimeMonzo.from_fraction(template_equave, self.number_of_components))
            if exponent is not None:
                steps = exponent * node.denominator
                if steps.denominator == 1:
                    return NedjiLiteral(
                        steps.numerator,
                        node.denominator,
                        node.equave_numerator,
                        node.equave_denominator,
                    )
        if equave == 2 or equave == 1:
            return NedjiLiteral(fraction.numerator, fraction.denominator)
        return NedjiLiteral(
            fraction.numerator, fraction.denominator, equave.numerator, equave.denominator
        )

    def as_cents_literal(self) -> CentsLiteral | None:
        if not self.is_scalar() or self.residual <= 0:
            return None
        return CentsLiteral(self.total_cents())

    def as_monzo_literal(self) -> MonzoLiteral | None:
        """Spell as a vector of prime exponents with trailing zeros trimmed."""
        if not (self.is_scalar() and self.is_equal_temperament()):
            return None
        components = list(self.prime_exponents)
        while components and components[-1] == 0:
            components.pop()
        return MonzoLiteral(tuple(components))

    # =========================================================================
    # JSON
    # =========================================================================

    def to_json(self) -> dict[str, Any]:
        return {
            "type": "TimeMonzo",
            "timeExponent": fraction_to_json(self.time_exponent),
            "primeExponents": [fraction_to_json(e) for e in self.prime_exponents],
            "residual": fraction_to_json(self.residual),
            "cents": self.cents,
        }

    @classmethod
    def reviver(cls, obj: dict[str, Any]) -> Any:
        """JSON object hook for tagged TimeMonzo dictionaries."""
        if obj.get("type") != "TimeMonzo":
            return obj
        return cls(
            to_fraction(obj["timeExponent"]),
            [to_fraction(e) for e in obj["primeExponents"]],
            to_fraction(obj["residual"]),
            obj.get("cents", 0.0),
        )


class TimeReal(TimeQuantity):
    """
    Inexact musical quantity.

    Used for irrational results, NaN and infinities. Arithmetic follows IEEE
    float semantics and never raises for degenerate inputs.
    """

    __slots__ = ("time_exponent", "value")

    def __init__(self, time_exponent: float, value: float) -> None:
        self.time_exponent = float(time_exponent)
        self.value = float(value)

    @classmethod
    def from_value(cls, value: float) -> TimeReal:
        return cls(0, value)

    @classmethod
    def from_cents(cls, cents: float) -> TimeReal:
        return cls(0, cents_to_value(cents))

    @classmethod
    def from_frequency(cls, frequency: float) -> TimeReal:
        """An absolute frequency in Hz."""
        return cls(-1, frequency)

    @classmethod
    def from_monzo(cls, monzo: TimeMonzo) -> TimeReal:
        return cls(float(monzo.time_exponent), monzo.value_of())

    def clone(self) -> TimeReal:
        return TimeReal(self.time_exponent, self.value)

    @staticmethod
    def _real(other: TimeQuantity) -> TimeReal:
        if isinstance(other, TimeReal):
            return other
        other = _exact_operand(other, "combine a real value with")
        return TimeReal.from_monzo(other)

    # Predicates

    def is_fractional(self) -> bool:
        return False

    def is_integral(self) -> bool:
        return False

    def is_equal_temperament(self) -> bool:
        return False

    def is_unity(self) -> bool:
        return self.time_exponent == 0 and self.value == 1

    def is_non_negative(self) -> bool:
        return self.value >= 0

    # Conversion

    def value_of(self) -> float:
        return self.value

    def total_cents(self, ignore_sign: bool = False) -> float:
        return value_to_cents(abs(self.value) if ignore_sign else self.value)

    def to_cents(self) -> float:
        return self.total_cents()

    def to_fraction(self) -> Fraction:
        raise InexactError(ErrorMessages.NON_FRACTIONAL)

    def to_integer(self) -> int:
        raise InexactError(ErrorMessages.NON_INTEGRAL)

    def tenney_height(self) -> float:
        return INF

    # Arithmetic

    def neg(self) -> TimeReal:
        return TimeReal(self.time_exponent, -self.value)

    def inverse(self) -> TimeReal:
        return TimeReal(-self.time_exponent, ieee_div(1.0, self.value))

    def abs(self) -> TimeReal:
        return TimeReal(self.time_exponent, abs(self.value))

    def pitch_abs(self) -> TimeReal:
        result = self.abs()
        if result.value < 1:
            return result.inverse()
        return result

    def mul(self, other: TimeQuantity) -> TimeReal:
        other = self._real(other)
        return TimeReal(self.time_exponent + other.time_exponent, self.value * other.value)

    def div(self, other: TimeQuantity) -> TimeReal:
        other = self._real(other)
        return TimeReal(self.time_exponent - other.time_exponent, ieee_div(self.value, other.value))

    def ldiv(self, other: TimeQuantity) -> TimeReal:
        return self._real(other).div(self)

    def pow(self, other: Any) -> TimeReal:
        if isinstance(other, TimeQuantity):
            exponent = other.value_of()
        else:
            exponent = float(other)
        return TimeReal(self.time_exponent * exponent, ieee_pow(self.value, exponent))

    def log(self, other: TimeQuantity) -> float:
        return ieee_div(self.total_cents(), other.total_cents())

    def dot(self, other: TimeQuantity) -> Fraction:
        raise InexactError(ErrorMessages.REAL_DOT)

    def geometric_inverse(self) -> TimeMonzo:
        raise InexactError(ErrorMessages.INEXACT_INVERSE)

    def add(self, other: TimeQuantity) -> TimeReal:
        other = self._real(other)
        if self.time_exponent != other.time_exponent:
            raise DomainError(ErrorMessages.TIME_MISMATCH.format(operation="add"))
        return TimeReal(self.time_exponent, self.value + other.value)

    def sub(self, other: TimeQuantity) -> TimeReal:
        other = self._real(other)
        if self.time_exponent != other.time_exponent:
            raise DomainError(ErrorMessages.TIME_MISMATCH.format(operation="subtract"))
        return TimeReal(self.time_exponent, self.value - other.value)

    def lsub(self, other: TimeQuantity) -> TimeReal:
        return self._real(other).sub(self)

    def _lens(self, other: TimeQuantity, sign: int, operation: str) -> TimeReal:
        other = self._real(other)
        if self.time_exponent != other.time_exponent:
            raise DomainError(ErrorMessages.TIME_MISMATCH.format(operation=operation))
        if self.value == 0 or other.value == 0:
            return TimeReal(self.time_exponent, 0.0)
        total = ieee_div(1.0, self.value) + sign * ieee_div(1.0, other.value)
        return TimeReal(self.time_exponent, ieee_div(1.0, total))

    def lens_add(self, other: TimeQuantity) -> TimeReal:
        return self._lens(other, 1, "lens add")

    def lens_sub(self, other: TimeQuantity) -> TimeReal:
        return self._lens(other, -1, "lens subtract")

    def stretch(self, scalar: float) -> TimeReal:
        if self.time_exponent != 0:
            raise DomainError(ErrorMessages.SCALAR_ONLY.format(operation="stretching"))
        return TimeReal(0, ieee_pow(self.value, float(scalar)))

    def project(self, base: TimeQuantity) -> TimeReal:
        if self.value <= 0:
            return TimeReal(self.time_exponent, NAN)
        return self._real(base).pow(math.log2(self.value))

    def mmod(self, other: TimeQuantity, ceiling: bool = False) -> TimeReal:
        return TimeReal(self.time_exponent, ieee_mod(self.value, other.value_of(), ceiling))

    def reduce(self, other: TimeQuantity, ceiling: bool = False) -> TimeReal:
        """Logarithmic modulo. Reducing by a unison gives NaN instead of raising."""
        ratio = ieee_div(self.total_cents(), other.total_cents())
        if not math.isfinite(ratio):
            return TimeReal(self.time_exponent, NAN)
        multiplier = math.ceil(ratio) - 1 if ceiling else math.floor(ratio)
        return self.div(self._real(other).pow(multiplier))

    def round_to(self, other: TimeQuantity) -> TimeReal:
        multiple = other.value_of()
        multiplier = ieee_floor(ieee_div(self.value, multiple) + 0.5)
        return TimeReal(self.time_exponent, multiplier * multiple)

    def pitch_round_to(self, other: TimeQuantity) -> TimeReal:
        ratio = ieee_div(self.total_cents(), other.total_cents())
        return self._real(other).pow(ieee_floor(ratio + 0.5))

    # Comparison

    def strict_equals(self, other: TimeQuantity) -> bool:
        if not isinstance(other, TimeReal) or self.time_exponent != other.time_exponent:
            return False
        if math.isnan(self.value) and math.isnan(other.value):
            return True
        return self.value == other.value

    def equals(self, other: TimeQuantity) -> bool:
        if self.time_exponent != float(other.time_exponent):
            return False
        return self.value == other.value_of()

    # Display

    def to_string(self, domain: IntervalDomain = IntervalDomain.LINEAR) -> str:
        if not math.isfinite(self.value):
            return format_float(self.value)
        if domain == IntervalDomain.LOGARITHMIC:
            return f"{format_float(self.total_cents())}rc"
        text = format_float(self.value)
        if self.time_exponent == 0:
            return f"{text}r"
        if self.time_exponent == -1:
            return f"{text} Hz"
        if self.time_exponent == 1:
            return f"{text} s"
        return f"{text}r*(1s)^{format_float(self.time_exponent)}"

    def as_integer_literal(self) -> None:
        return None

    def as_fraction_literal(self, node: FractionLiteral | None = None) -> None:
        return None

    def as_nedji_literal(self, node: NedjiLiteral | None = None) -> None:
        return None

    def as_cents_literal(self) -> CentsLiteral | None:
        if not self.is_scalar():
            return None
        return CentsLiteral(self.total_cents(), real=True)

    def as_monzo_literal(self) -> None:
        return None

    # JSON

    def to_json(self) -> dict[str, Any]:
        return {"type": "TimeReal", "timeExponent": self.time_exponent, "value": self.value}

    @classmethod
    def reviver(cls, obj: dict[str, Any]) -> Any:
        """JSON object hook for tagged TimeReal dictionaries."""
        if obj.get("type") != "TimeReal":
            return obj
        return cls(obj["timeExponent"], obj["value"])
