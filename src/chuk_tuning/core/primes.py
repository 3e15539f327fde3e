"""
Prime tables and factorization.

Monzos track exponents of the first k primes. Construction uses
trial division against that prefix so anything beyond it lands in
the residual; full factorization (for dot products and padding) is
delegated to sympy.
"""

from __future__ import annotations

import math
from fractions import Fraction
from functools import lru_cache

import sympy


@lru_cache(maxsize=4096)
def nth_prime(index: int) -> int:
    """The prime at a zero-based index (nth_prime(0) == 2)."""
    if index < 0:
        raise ValueError(f"Prime index must be non-negative, got {index}")
    return int(sympy.prime(index + 1))


def primes(count: int) -> list[int]:
    """The first `count` primes."""
    return [nth_prime(i) for i in range(count)]


@lru_cache(maxsize=4096)
def prime_cents(index: int) -> float:
    """Size of the prime at a zero-based index in cents."""
    return 1200 * math.log2(nth_prime(index))


@lru_cache(maxsize=4096)
def prime_index(prime: int) -> int:
    """Zero-based index of a prime (prime_index(5) == 2)."""
    if not sympy.isprime(prime):
        raise ValueError(f"{prime} is not a prime")
    return int(sympy.primepi(prime)) - 1


def factor_integer(value: int, number_of_components: int) -> tuple[list[int], int]:
    """
    Factor a positive integer by trial division against the first primes.

    Args:
        value: Positive integer
        number_of_components: How many primes to divide out

    Returns:
        (exponents, leftover) where leftover is coprime to the tracked primes
    """
    exponents = [0] * number_of_components
    for i in range(number_of_components):
        if value == 1:
            break
        p = nth_prime(i)
        while value % p == 0:
            value //= p
            exponents[i] += 1
    return exponents, value


def to_monzo_and_residual(
    value: Fraction, number_of_components: int
) -> tuple[list[Fraction], Fraction]:
    """
    Split a fraction into prime exponents and an untracked residual.

    Zero gives a zero vector and a zero residual. The sign stays in the residual.
    """
    if value == 0:
        return [Fraction(0)] * number_of_components, Fraction(0)
    numerator, n_rest = factor_integer(abs(value.numerator), number_of_components)
    denominator, d_rest = factor_integer(value.denominator, number_of_components)
    sign = -1 if value < 0 else 1
    exponents = [Fraction(n - d) for n, d in zip(numerator, denominator)]
    return exponents, Fraction(sign * n_rest, d_rest)


def factorize(value: Fraction) -> dict[int, int]:
    """
    Full prime factorization of a nonzero fraction (sign ignored).

    Denominator primes get negative exponents.
    """
    if value == 0:
        raise ValueError("Cannot factorize zero")
    result: dict[int, int] = {}
    for p, e in sympy.factorint(abs(value.numerator)).items():
        result[int(p)] = int(e)
    for p, e in sympy.factorint(value.denominator).items():
        result[int(p)] = result.get(int(p), 0) - int(e)
    return result


def prime_limit_index(value: Fraction) -> int:
    """Number of primes needed to factor a nonzero fraction completely."""
    factors = factorize(value)
    if not factors:
        return 0
    return prime_index(max(factors)) + 1


def integer_root(value: int, degree: int) -> int | None:
    """Exact integer root of a non-negative integer, or None if not a perfect power."""
    root, exact = sympy.integer_nthroot(value, degree)
    return int(root) if exact else None


def integer_divisors(value: int) -> list[int]:
    """All positive divisors of a positive integer in ascending order."""
    if value < 1:
        raise ValueError(f"Divisors are only defined for positive integers, got {value}")
    return [int(d) for d in sympy.divisors(value)]
