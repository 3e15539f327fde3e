"""
Vals - mappings from intervals to steps of an equal temperament.

A val is stored as a covector over the standard prime lattice together
with the subgroup basis it was written in. Its subgroup mapping (sval)
is the list of step counts it assigns to the basis generators:

    <12 19 28]        12-tone equal temperament in the 5-limit
    <10 16 28]@2.3.7  a val over the 2.3.7 subgroup
"""

from __future__ import annotations

import logging
import math
from fractions import Fraction
from typing import TYPE_CHECKING, Any, Sequence

from chuk_tuning.config import get_config
from chuk_tuning.constants import ErrorMessages, IntervalDomain
from chuk_tuning.core.literals import ValLiteral, literal_to_string, node_to_json, node_from_json
from chuk_tuning.core.monzo import TimeMonzo, TimeQuantity
from chuk_tuning.core.numeric import round_half_up
from chuk_tuning.errors import ConstructionError, DomainError, InexactError
from chuk_tuning.temper.basis import ValBasis, as_monzo, as_quantity
from chuk_tuning.temper.tuning import int_combine_tuning_maps

if TYPE_CHECKING:
    from chuk_tuning.core.interval import Interval

logger = logging.getLogger(__name__)


def _integral(values: Sequence[Fraction]) -> list[int] | None:
    if all(v.denominator == 1 for v in values):
        return [int(v) for v in values]
    return None


def _scalar(other: Any) -> TimeQuantity:
    from chuk_tuning.core.interval import Interval

    if isinstance(other, Interval):
        if other.domain != IntervalDomain.LINEAR or other.steps or not other.value.is_scalar():
            raise DomainError(ErrorMessages.VAL_SCALAR)
        return other.value
    if isinstance(other, TimeQuantity):
        return other
    return TimeMonzo.from_fraction(other)


class Val:
    """
    Mapping covector over a subgroup basis.

    Args:
        value: Covector over the standard primes
        basis: Subgroup the val was written in
        node: Cached literal used for display
    """

    __slots__ = ("value", "basis", "node")

    def __init__(self, value: TimeMonzo, basis: ValBasis, node: ValLiteral | None = None) -> None:
        if value.time_exponent:
            raise ConstructionError(ErrorMessages.BASIS_RELATIVE.format(value=value))
        if value.number_of_components < basis.number_of_components:
            value = value._with_components(basis.number_of_components)
        self.value = value
        self.basis = basis
        self.node = node

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def from_array(cls, mapping: Sequence[Any], basis: ValBasis | None = None) -> Val:
        """Val from a per-prime mapping such as [12, 19, 28]."""
        components = [Fraction(m) for m in mapping]
        if basis is None:
            basis = ValBasis(len(components))
        return cls(TimeMonzo(0, components), basis)

    @classmethod
    def from_basis_map(cls, mapping: Sequence[Any], basis: ValBasis) -> Val:
        """
        Val from the step counts of each basis generator.

        The covector is built one generator at a time. Adding a multiple
        of dual[i] corrects the mapping of generator i without disturbing
        the generators before it.
        """
        width = basis.number_of_components
        result = [Fraction(0)] * width
        for target, element, dual in zip(mapping, basis.value, basis.dual):
            exponents = element.prime_exponents
            current = sum((x * y for x, y in zip(result, exponents)), Fraction(0))
            correction = Fraction(target) - current
            if correction:
                result = [x + correction * y for x, y in zip(result, dual.prime_exponents)]
        return cls(TimeMonzo(0, result), basis)

    @classmethod
    def patent(cls, divisions: Any, basis: ValBasis | None = None) -> Val:
        """
        The patent val: every generator mapped to its nearest step count.

        Args:
            divisions: Steps per equave (the first generator)
            basis: Subgroup (defaults to the configured number of primes)
        """
        if basis is None:
            basis = ValBasis()
        jip = basis.jip()
        divisions = Fraction(divisions)
        mapping = [round_half_up(float(divisions) * cents / jip[0]) for cents in jip]
        mapping[0] = divisions
        return cls.from_basis_map(mapping, basis)

    def clone(self) -> Val:
        return Val(self.value.clone(), self.basis, self.node)

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def sval(self) -> list[Fraction]:
        """Step counts of the basis generators."""
        return [self.value.dot(element) for element in self.basis.value]

    def integral_sval(self) -> list[int]:
        """
        Step counts of the basis generators as integers.

        Raises:
            InexactError: If some generator maps to a fractional step count
        """
        sval = _integral(self.sval)
        if sval is None:
            raise InexactError(ErrorMessages.VAL_NON_INTEGRAL)
        return sval

    @property
    def equave(self) -> TimeMonzo:
        """The interval of equivalence (first basis generator)."""
        return self.basis.value[0]

    @property
    def divisions(self) -> Fraction:
        """Steps per equave."""
        return self.value.dot(self.equave)

    def error_te(
        self, weights: Sequence[float] | None = None, unnormalized: bool = False
    ) -> float:
        """
        Tenney-Euclidean error of the val.

        The val is scaled so the equave is pure and every generator's
        relative error is weighted by 1/size (optionally times a caller
        weight).

        Returns:
            RMS error in cents, or the raw sum of squares when unnormalized
        """
        jip = self.basis.jip()
        sval = [float(v) for v in self.sval]
        scale = jip[0] / sval[0] if sval[0] else 0.0
        total = 0.0
        for i, (steps, cents) in enumerate(zip(sval, jip)):
            weight = weights[i] if weights is not None and i < len(weights) else 1.0
            total += (weight * (steps * scale / cents - 1)) ** 2
        if unnormalized:
            return total
        return 1200 * math.sqrt(total / len(jip))

    def next_gpv(self, weights: Sequence[float] | None = None) -> Val:
        """
        The next generalized patent val.

        Increments each generator's step count in turn and keeps the
        candidate with the least error. A val of zero divisions moves to
        one division first.
        """
        sval = self.integral_sval()
        if not sval[0]:
            candidate = list(sval)
            candidate[0] += 1
            return Val.from_basis_map(candidate, self.basis)
        candidates = []
        for i in range(len(sval)):
            candidate = list(sval)
            candidate[i] += 1
            candidates.append(Val.from_basis_map(candidate, self.basis))
        # Ties go to the earliest generator
        return min(candidates, key=lambda val: val.error_te(weights))

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def _check_basis(self, other: Val) -> None:
        if not self.basis.equals(other.basis):
            raise DomainError(ErrorMessages.BASIS_MISMATCH)

    def neg(self) -> Val:
        return Val(self.value.inverse(), self.basis)

    def abs(self) -> Val:
        """Flip the val so that it maps the equave to a non-negative step count."""
        if self.divisions < 0:
            return self.neg()
        return Val(self.value, self.basis, self.node)

    def inverse(self) -> Interval:
        """The logarithmic interval whose dot product with this val is one."""
        from chuk_tuning.core.interval import Interval

        return Interval(self.value.geometric_inverse(), IntervalDomain.LOGARITHMIC)

    def add(self, other: Val) -> Val:
        self._check_basis(other)
        value: TimeMonzo = self.value.mul(other.value)  # type: ignore[assignment]
        return Val(value, self.basis)

    def sub(self, other: Val) -> Val:
        self._check_basis(other)
        value: TimeMonzo = self.value.div(other.value)  # type: ignore[assignment]
        return Val(value, self.basis)

    def mul(self, other: Any) -> Val:
        """Scale by a linear scalar."""
        value = self.value.pow(_scalar(other))
        if not isinstance(value, TimeMonzo):
            raise InexactError(ErrorMessages.VAL_NON_INTEGRAL)
        return Val(value, self.basis)

    def div(self, other: Any) -> Val:
        """Scale by the reciprocal of a linear scalar."""
        value = self.value.pow(_scalar(other).inverse())  # type: ignore[attr-defined]
        if not isinstance(value, TimeMonzo):
            raise InexactError(ErrorMessages.VAL_NON_INTEGRAL)
        return Val(value, self.basis)

    def dot(self, other: Interval | Val) -> Interval:
        """
        Map an interval to steps, or take the unweighted inner product with another val.

        Steps carried by an interval are added to its mapped step count.
        """
        from chuk_tuning.core.interval import Interval

        if isinstance(other, Val):
            product = self.value.dot(other.value)
        else:
            product = self.value.dot(as_monzo(other.value)) + other.steps
        value = TimeMonzo.from_fraction(product)
        return Interval(value, IntervalDomain.LINEAR, 0, value.as_fraction_literal())

    def __add__(self, other: Val) -> Val:
        return self.add(other)

    def __sub__(self, other: Val) -> Val:
        return self.sub(other)

    def __mul__(self, other: Any) -> Val:
        return self.mul(other)

    def __rmul__(self, other: Any) -> Val:
        return self.mul(other)

    def __truediv__(self, other: Any) -> Val:
        return self.div(other)

    def __neg__(self) -> Val:
        return self.neg()

    # =========================================================================
    # Tempering
    # =========================================================================

    def temper(self, value: TimeQuantity | Interval) -> TimeQuantity:
        """
        Retune a value to the nearest step of this val's equal temperament.

        Intervals are unwrapped to their values. Parts outside the subgroup
        are kept as they are. Reals pass through.
        """
        value = as_quantity(value)
        if not isinstance(value, TimeMonzo):
            return value
        coordinates, residual = self.basis.to_smonzo_and_residual(value)
        steps = sum((c * s for c, s in zip(coordinates, self.sval)), Fraction(0))
        divisions = self.divisions
        if not divisions:
            raise InexactError(ErrorMessages.ZERO_INVERSE)
        step = self.equave.pow(steps / divisions)
        return step.mul(residual)  # type: ignore[attr-defined]

    def apply(self, intervals: Sequence[Interval]) -> list[Interval]:
        """Temper a sequence of intervals, keeping their domain and metadata."""
        from chuk_tuning.core.interval import Interval

        return [
            Interval(
                self.temper(interval.value),
                interval.domain,
                interval.steps,
                None,
                interval.color,
                interval.label,
                interval.tracking_ids,
            )
            for interval in intervals
        ]

    # =========================================================================
    # Comparison
    # =========================================================================

    def equals(self, other: Val) -> bool:
        return self.basis.equals(other.basis) and self.value.equals(other.value)

    def strict_equals(self, other: Val) -> bool:
        return self.basis.strict_equals(other.basis) and self.value.strict_equals(other.value)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Val):
            return NotImplemented
        return self.equals(other)

    def __hash__(self) -> int:
        return hash((hash(self.value), hash(self.basis)))

    # =========================================================================
    # Display
    # =========================================================================

    def as_val_literal(self) -> ValLiteral:
        basis = () if self.basis.is_standard() else tuple(self.basis.element_strings())
        return ValLiteral(tuple(self.sval), basis=basis)

    def to_string(self) -> str:
        """Spell as <12 19 28], with @basis for non-standard subgroups."""
        if self.node is not None:
            return literal_to_string(self.node)
        return literal_to_string(self.as_val_literal())

    def break_node(self) -> None:
        self.node = None

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Val({self.to_string()!r})"

    # =========================================================================
    # JSON
    # =========================================================================

    def to_json(self) -> dict[str, Any]:
        return {
            "type": "Val",
            "value": self.value.to_json(),
            "basis": self.basis.to_json(),
            "node": node_to_json(self.node) if self.node is not None else None,
        }

    @classmethod
    def reviver(cls, obj: dict[str, Any]) -> Any:
        """JSON object hook for tagged Val dictionaries."""
        if obj.get("type") != "Val":
            return obj
        value = obj["value"]
        if isinstance(value, dict):
            value = TimeMonzo.reviver(value)
        basis = obj["basis"]
        if isinstance(basis, dict):
            basis = ValBasis.reviver(basis)
        node = obj.get("node")
        if isinstance(node, dict):
            node = node_from_json(node)
        return cls(value, basis, node)


def tune(
    vals: Sequence[Val],
    search_radius: int | None = None,
    weights: Sequence[float] | None = None,
) -> Val:
    """
    Combine vals into the one closest to the just intonation point.

    Tries every small integer combination of the vals and keeps the one
    with the least Tenney-weighted error. Combining 12 and 19 gives 31.

    Args:
        vals: Vals over a common basis
        search_radius: Largest coefficient tried (defaults to the configured radius)
        weights: Extra per-generator weights

    Returns:
        The best combination, normalized to a positive number of divisions

    Raises:
        ConstructionError: If no vals are given or their bases differ
    """
    if not vals:
        raise ConstructionError(ErrorMessages.VALS_REQUIRED)
    basis = vals[0].basis
    if any(not val.basis.equals(basis) for val in vals[1:]):
        raise ConstructionError(ErrorMessages.MIXED_BASES)
    if search_radius is None:
        search_radius = get_config().default_search_radius
    jip = basis.jip()
    weights = [
        weights[i] if weights is not None and i < len(weights) else 1.0 for i in range(len(jip))
    ]
    svals = [val.integral_sval() for val in vals]
    weighted = [[s * w / c for s, w, c in zip(sval, weights, jip)] for sval in svals]
    coefficients = int_combine_tuning_maps(weights, weighted, search_radius)
    mapping = [sum(c * sval[i] for c, sval in zip(coefficients, svals)) for i in range(len(jip))]
    if mapping[0] < 0:
        mapping = [-m for m in mapping]
    logger.debug(f"Combined {len(vals)} vals into {mapping} with coefficients {coefficients}")
    return Val.from_basis_map(mapping, basis)
