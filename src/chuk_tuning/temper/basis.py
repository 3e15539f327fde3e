"""
Subgroup bases.

A ValBasis is an ordered list of just intonation generators such as
2.3.7/5. Gram-Schmidt orthogonalization against the prime lattice gives
each generator an orthogonal component and a dual covector with

    dual[i] . value[j] == 0  for j < i
    dual[i] . ortho[j] == (1 if i == j else 0)

which is all that is needed to move monzos in and out of subgroup
coordinates.
"""

from __future__ import annotations

import logging
import math
from fractions import Fraction
from typing import TYPE_CHECKING, Any, Sequence

from chuk_tuning.config import get_number_of_components
from chuk_tuning.constants import ErrorMessages, LatticeWeighting
from chuk_tuning.core.literals import MonzoLiteral
from chuk_tuning.core.monzo import TimeMonzo, TimeQuantity
from chuk_tuning.core.numeric import format_fraction
from chuk_tuning.core.primes import nth_prime
from chuk_tuning.errors import ConstructionError, InexactError, ReductionError, SubgroupError
from chuk_tuning.temper.linalg import apply_transform, lll_transform

if TYPE_CHECKING:
    from chuk_tuning.core.interval import Interval
    from chuk_tuning.temper.val import Val

logger = logging.getLogger(__name__)

Vector = list[Fraction]


def _vector(monzo: TimeMonzo, width: int) -> Vector:
    exponents = list(monzo.prime_exponents[:width])
    return exponents + [Fraction(0)] * (width - len(exponents))


def _dot(a: Sequence[Fraction], b: Sequence[Fraction]) -> Fraction:
    return sum((x * y for x, y in zip(a, b)), Fraction(0))


def tenney_weights(width: int) -> list[float]:
    """log2 of the first width primes."""
    return [math.log2(nth_prime(i)) for i in range(width)]


class ValBasis:
    """
    Ordered list of independent generators of a just intonation subgroup.

    Construct from a count (the first n primes) or from a list of exact,
    positive, relative TimeMonzos.
    """

    __slots__ = ("value", "ortho", "dual", "_width")

    def __init__(self, basis: int | Sequence[TimeMonzo] | None = None) -> None:
        if basis is None:
            basis = get_number_of_components()
        if isinstance(basis, int):
            elements = [TimeMonzo.from_fraction(nth_prime(i), basis) for i in range(basis)]
        else:
            elements = list(basis)
        for element in elements:
            if not isinstance(element, TimeMonzo) or element.cents:
                raise ConstructionError(ErrorMessages.BASIS_INEXACT.format(value=element))
            if element.residual <= 0:
                raise ConstructionError(ErrorMessages.BASIS_NON_POSITIVE.format(value=element))
            if element.time_exponent:
                raise ConstructionError(ErrorMessages.BASIS_RELATIVE.format(value=element))
        expanded = [element.expanded() for element in elements]
        width = max((element.number_of_components for element in expanded), default=0)
        self._width = width
        self.value = [element._with_components(width) for element in expanded]
        self.ortho: list[TimeMonzo] = []
        self.dual: list[TimeMonzo] = []
        self._orthogonalize()

    def _orthogonalize(self) -> None:
        ortho_vectors: list[Vector] = []
        dual_vectors: list[Vector] = []
        for element in self.value:
            vector = _vector(element, self._width)
            o = list(vector)
            for ortho, dual in zip(ortho_vectors, dual_vectors):
                coefficient = _dot(dual, o)
                o = [x - coefficient * y for x, y in zip(o, ortho)]
            magnitude = _dot(o, o)
            if not magnitude:
                raise ConstructionError(ErrorMessages.BASIS_DEPENDENT)
            ortho_vectors.append(o)
            dual_vectors.append([x / magnitude for x in o])
        self.ortho = [TimeMonzo(0, o) for o in ortho_vectors]
        self.dual = [TimeMonzo(0, d) for d in dual_vectors]

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def standard(cls, size: int) -> ValBasis:
        """The first size primes."""
        return cls(size)

    @classmethod
    def from_fractions(cls, values: Sequence[Any]) -> ValBasis:
        """Basis from fractions such as [2, 3, Fraction(7, 5)] or ["2", "3", "7/5"]."""
        return cls([TimeMonzo.from_fraction(v) for v in values])

    def from_subgroup_monzo(self, coordinates: Sequence[Any]) -> TimeMonzo:
        """The standard monzo with the given subgroup coordinates."""
        result = [Fraction(0)] * self._width
        for coordinate, element in zip(coordinates, self.value):
            if coordinate:
                result = [
                    x + Fraction(coordinate) * y
                    for x, y in zip(result, _vector(element, self._width))
                ]
        return TimeMonzo(0, result)

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def size(self) -> int:
        """Number of generators."""
        return len(self.value)

    @property
    def number_of_components(self) -> int:
        """Number of primes spanned by the generators."""
        return self._width

    def is_standard(self) -> bool:
        """True if the basis is 2.3.5... up to its width."""
        if self.size != self._width:
            return False
        return all(
            element.is_fractional() and element.to_fraction() == nth_prime(i)
            for i, element in enumerate(self.value)
        )

    def is_primewise(self) -> bool:
        """True if every generator is a prime."""
        return all(
            element.is_fractional()
            and element.residual == 1
            and [e for e in element.prime_exponents if e] == [1]
            for element in self.value
        )

    def prime_supergroup(self) -> ValBasis:
        """Basis of every prime touched by a generator."""
        indices = sorted(
            {
                i
                for element in self.value
                for i, exponent in enumerate(element.prime_exponents)
                if exponent
            }
        )
        return ValBasis([TimeMonzo.from_fraction(nth_prime(i), self._width) for i in indices])

    def jip(self) -> list[float]:
        """Pure sizes of the generators in cents."""
        return [element.total_cents() for element in self.value]

    def equals(self, other: ValBasis) -> bool:
        if self.size != other.size:
            return False
        return all(a.equals(b) for a, b in zip(self.value, other.value))

    def strict_equals(self, other: ValBasis) -> bool:
        if self.size != other.size:
            return False
        return all(a.strict_equals(b) for a, b in zip(self.value, other.value))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ValBasis):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash(tuple(hash(element) for element in self.value))

    def __len__(self) -> int:
        return self.size

    # =========================================================================
    # Coordinates
    # =========================================================================

    def to_smonzo_and_residual(self, monzo: TimeMonzo) -> tuple[list[Fraction], TimeMonzo]:
        """
        Project a monzo onto the subgroup.

        Returns:
            (coordinates, residual) where coordinates may be fractional and
            residual is what the subgroup cannot express
        """
        monzo = monzo.expanded()
        width = max(self._width, monzo.number_of_components)
        remainder = _vector(monzo, width)
        coordinates = [Fraction(0)] * self.size
        for i in range(self.size - 1, -1, -1):
            dual = _vector(self.dual[i], width)
            coefficient = _dot(dual, remainder)
            coordinates[i] = coefficient
            if coefficient:
                element = _vector(self.value[i], width)
                remainder = [x - coefficient * y for x, y in zip(remainder, element)]
        residual = TimeMonzo(monzo.time_exponent, remainder, monzo.residual, monzo.cents)
        return coordinates, residual

    def to_subgroup_monzo(self, monzo: TimeMonzo) -> list[int]:
        """
        Integer coordinates of a monzo in this basis.

        Raises:
            SubgroupError: If the monzo is outside the subgroup or fractional inside it
        """
        coordinates, residual = self.to_smonzo_and_residual(monzo)
        if not residual.is_unity():
            raise SubgroupError(ErrorMessages.OUTSIDE_SUBGROUP)
        if any(c.denominator != 1 for c in coordinates):
            raise SubgroupError(ErrorMessages.FRACTIONAL_IN_SUBGROUP)
        return [int(c) for c in coordinates]

    # =========================================================================
    # Lattice reduction
    # =========================================================================

    def _vectors(self) -> list[Vector]:
        return [_vector(element, self._width) for element in self.value]

    def _reduced(self, transform: list[list[int]]) -> ValBasis:
        vectors = apply_transform(transform, self._vectors())
        return ValBasis([TimeMonzo(0, vector) for vector in vectors])

    def lll(self, weighting: LatticeWeighting | str = LatticeWeighting.TENNEY) -> ValBasis:
        """
        Lattice-reduced basis of the same subgroup.

        With no weighting the reduction is exact. Rounding in the exact
        Gram-Schmidt process cannot fail for an independent basis, but if
        it ever does the reduction falls back to floating point with unit
        weights.
        """
        weighting = LatticeWeighting(weighting)
        if not self.size:
            return ValBasis([])
        vectors = self._vectors()
        if weighting == LatticeWeighting.TENNEY:
            return self._reduced(lll_transform(vectors, tenney_weights(self._width)))
        try:
            transform = lll_transform(vectors)
        except ReductionError:
            logger.debug(f"Exact LLL failed on {self}, using floating point reduction")
            transform = lll_transform(vectors, [1.0] * self._width)
        return self._reduced(transform)

    def respell(
        self, monzo: TimeMonzo, weighting: LatticeWeighting | str = LatticeWeighting.TENNEY
    ) -> TimeMonzo:
        """
        Simplify a monzo by lattice vectors of this basis.

        Babai's nearest plane walk from the last generator to the first:
        each step removes the rounded projection onto a Gram-Schmidt
        vector. The result differs from the input by a product of
        generators.
        """
        weighting = LatticeWeighting(weighting)
        if not self.size:
            return monzo
        monzo = monzo.expanded()
        width = max(self._width, monzo.number_of_components)
        if weighting == LatticeWeighting.TENNEY:
            weights = tenney_weights(width)
        else:
            weights = [1.0] * width
        basis = [[float(x) * w for x, w in zip(_vector(e, width), weights)] for e in self.value]
        ortho: list[list[float]] = []
        for vector in basis:
            o = list(vector)
            for previous in ortho:
                coefficient = sum(x * y for x, y in zip(vector, previous)) / sum(
                    y * y for y in previous
                )
                o = [x - coefficient * y for x, y in zip(o, previous)]
            ortho.append(o)
        target = [float(x) * w for x, w in zip(_vector(monzo, width), weights)]
        exact = _vector(monzo, width)
        for i in range(self.size - 1, -1, -1):
            o = ortho[i]
            multiplier = round(sum(x * y for x, y in zip(target, o)) / sum(y * y for y in o))
            if multiplier:
                target = [x - multiplier * y for x, y in zip(target, basis[i])]
                element = _vector(self.value[i], width)
                exact = [x - multiplier * y for x, y in zip(exact, element)]
        return TimeMonzo(monzo.time_exponent, exact, monzo.residual, monzo.cents)

    # =========================================================================
    # Rebasing
    # =========================================================================

    def intrinsic_call(self, other: Interval | Val) -> Interval | Val:
        """
        Rebase an interval or a val into this basis.

        Intervals keep their value and get a monzo spelling in subgroup
        coordinates. Vals are re-expressed by their mapping of each
        generator.
        """
        from chuk_tuning.core.interval import Interval
        from chuk_tuning.temper.val import Val

        if isinstance(other, Val):
            return Val.from_basis_map([other.value.dot(b) for b in self.value], self)
        if isinstance(other, Interval):
            if not isinstance(other.value, TimeMonzo):
                raise SubgroupError(ErrorMessages.OUTSIDE_SUBGROUP)
            coordinates = self.to_subgroup_monzo(other.value)
            node = MonzoLiteral(
                tuple(Fraction(c) for c in coordinates), basis=tuple(self.element_strings())
            )
            return Interval(
                other.value,
                other.domain,
                other.steps,
                node,
                other.color,
                other.label,
                other.tracking_ids,
            )
        raise TypeError(f"Cannot rebase {type(other).__name__} into a subgroup")

    # =========================================================================
    # Display
    # =========================================================================

    def element_strings(self) -> list[str]:
        strings = []
        for element in self.value:
            if element.is_fractional():
                strings.append(format_fraction(element.to_fraction()))
            else:
                strings.append(element.to_string())
        return strings

    def to_string(self) -> str:
        """Dotted subgroup notation such as 2.3.7/5."""
        return ".".join(self.element_strings())

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"ValBasis({self.to_string()!r})"

    # =========================================================================
    # JSON
    # =========================================================================

    def to_json(self) -> dict[str, Any]:
        return {"type": "ValBasis", "value": [element.to_json() for element in self.value]}

    @classmethod
    def from_json(cls, data: dict[str, Any]) -> ValBasis:
        elements = []
        for element in data["value"]:
            if isinstance(element, dict):
                element = TimeMonzo.reviver(element)
            elements.append(element)
        return cls(elements)

    @classmethod
    def reviver(cls, obj: dict[str, Any]) -> Any:
        """JSON object hook for tagged ValBasis dictionaries."""
        if obj.get("type") != "ValBasis":
            return obj
        return cls.from_json(obj)


def as_monzo(value: TimeQuantity | Any) -> TimeMonzo:
    """Unwrap intervals and coerce fractions into exact monzos."""
    if isinstance(value, TimeMonzo):
        return value
    if isinstance(value, TimeQuantity):
        raise InexactError(ErrorMessages.NON_FRACTIONAL)
    inner = getattr(value, "value", None)
    if inner is not None:
        return as_monzo(inner)
    return TimeMonzo.from_fraction(value)


def as_quantity(value: TimeQuantity | Any) -> TimeQuantity:
    """Unwrap intervals and coerce fractions, keeping reals as they are."""
    if isinstance(value, TimeQuantity):
        return value
    inner = getattr(value, "value", None)
    if isinstance(inner, TimeQuantity):
        return inner
    return TimeMonzo.from_fraction(value)
