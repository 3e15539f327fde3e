"""
Regular temperaments.

A temperament is an integer mapping from a subgroup basis to a smaller
set of generators. It can be given by the vals it is supported by or
by the commas it makes vanish:

    Temperament.from_vals([12@2.3.5, 19@2.3.5])   meantone
    Temperament.from_commas([81/80])              meantone

Either way the mapping is saturated and put in Hermite normal form, so
equal temperaments compare equal regardless of how they were entered.
Every temperament also carries a Tenney-reduced comma basis, one
simplified preimage per generator and a lazily optimized tuning map.
"""

from __future__ import annotations

import logging
from fractions import Fraction
from typing import TYPE_CHECKING, Any, Sequence

import numpy as np

from chuk_tuning.config import get_config
from chuk_tuning.constants import MAX_INFERRED_PRIMES, ErrorMessages, LatticeWeighting, TuningMetric
from chuk_tuning.core.literals import ValLiteral, literal_to_string
from chuk_tuning.core.monzo import TimeMonzo, TimeQuantity
from chuk_tuning.core.primes import nth_prime
from chuk_tuning.errors import ConstructionError
from chuk_tuning.temper.basis import ValBasis, as_monzo, as_quantity
from chuk_tuning.temper.linalg import (
    cokernel,
    hnf,
    kernel,
    preimage,
    prune_zero_rows,
    saturate,
    transpose,
)
from chuk_tuning.temper.tuning import combine_tuning_maps, vanish_commas
from chuk_tuning.temper.val import Val, tune

if TYPE_CHECKING:
    from chuk_tuning.core.interval import Interval

logger = logging.getLogger(__name__)


def canonical_mapping(mapping: Sequence[Sequence[int]], width: int) -> list[list[int]]:
    """Saturated Hermite normal form without zero rows."""
    return prune_zero_rows(hnf(saturate(mapping, width)))


class Temperament:
    """
    Integer mapping of a subgroup basis with an optimized tuning.

    Args:
        mapping: Integer rows over the basis (canonicalized on construction)
        basis: Subgroup basis
        weights: Extra per-generator weights for the tuning optimization
        metric: Weighting scheme for the tuning optimization
        pure_equaves: Keep the first basis generator exactly pure
        vals: Vals the temperament was built from (used by tune)
    """

    def __init__(
        self,
        mapping: Sequence[Sequence[int]],
        basis: ValBasis,
        weights: Sequence[float] | None = None,
        metric: TuningMetric | str | None = None,
        pure_equaves: bool = False,
        vals: Sequence[Val] | None = None,
    ) -> None:
        self.basis = basis
        self.weights = list(weights) if weights else []
        self.metric = TuningMetric(metric or get_config().default_metric)
        self.pure_equaves = pure_equaves
        self.vals = list(vals) if vals else []
        self.canonical_mapping = canonical_mapping(mapping, basis.size)
        self.comma_basis = self._comma_basis()
        self.preimage = self._preimage()
        self._subgroup_mapping: np.ndarray | None = None
        logger.debug(
            f"Temperament of rank {self.rank} on {basis}: "
            f"{len(self.comma_basis.value)} comma(s), metric {self.metric.value}"
        )

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def from_vals(
        cls,
        vals: Sequence[Val],
        weights: Sequence[float] | None = None,
        metric: TuningMetric | str | None = None,
        pure_equaves: bool = False,
    ) -> Temperament:
        """
        Temperament supported by the given vals.

        Raises:
            ConstructionError: If no vals are given or their bases differ
        """
        if not vals:
            raise ConstructionError(ErrorMessages.VALS_REQUIRED)
        basis = vals[0].basis
        if any(not val.basis.equals(basis) for val in vals[1:]):
            raise ConstructionError(ErrorMessages.MIXED_BASES)
        mapping = [val.integral_sval() for val in vals]
        return cls(mapping, basis, weights, metric, pure_equaves, vals)

    @classmethod
    def from_commas(
        cls,
        commas: Sequence[Any],
        basis: ValBasis | None = None,
        full_prime_limit: bool = False,
        weights: Sequence[float] | None = None,
        metric: TuningMetric | str | None = None,
        pure_equaves: bool = False,
    ) -> Temperament:
        """
        The largest temperament that maps every comma to a unison.

        Args:
            commas: Commas as TimeMonzos, Intervals or fractions
            basis: Subgroup (inferred from the primes the commas touch when omitted)
            full_prime_limit: Infer every prime up to the largest one touched
        """
        monzos = [as_monzo(comma).expanded() for comma in commas]
        if basis is None:
            basis = infer_subgroup(monzos, full_prime_limit)
        rows = prune_zero_rows(hnf([basis.to_subgroup_monzo(monzo) for monzo in monzos]))
        mapping = cokernel(transpose(rows, basis.size), basis.size)
        return cls(mapping, basis, weights, metric, pure_equaves)

    def _comma_basis(self) -> ValBasis:
        commas = kernel(self.canonical_mapping, self.basis.size)
        if not commas:
            return ValBasis([])
        monzos = [self.basis.from_subgroup_monzo(row) for row in commas]
        return ValBasis(monzos).lll(LatticeWeighting.TENNEY)

    def _preimage(self) -> list[TimeMonzo]:
        generators = []
        for i, row in enumerate(preimage(self.canonical_mapping)):
            generator = self.basis.from_subgroup_monzo(row)
            generator = self.comma_basis.respell(generator, LatticeWeighting.TENNEY)
            if generator.total_cents() < 0:
                generator = generator.inverse()
                self.canonical_mapping[i] = [-x for x in self.canonical_mapping[i]]
            generators.append(generator)
        return generators

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def rank(self) -> int:
        """Number of generators."""
        return len(self.canonical_mapping)

    @property
    def dimensions(self) -> int:
        """Number of basis generators (the rank of just intonation on the basis)."""
        return self.basis.size

    def _weights(self) -> np.ndarray:
        jip = np.asarray(self.basis.jip())
        if self.metric == TuningMetric.TENNEY_PAKKANEN:
            heights = np.asarray([element.tenney_height() for element in self.basis.value])
        else:
            heights = jip / 1200
        extra = np.ones(len(jip))
        for i, weight in enumerate(self.weights[: len(jip)]):
            extra[i] = weight
        return extra / heights

    def _optimize(self) -> np.ndarray:
        jip = np.asarray(self.basis.jip())
        if not self.rank:
            return np.zeros_like(jip)
        if self.metric == TuningMetric.SUBGROUP and not self.basis.is_primewise():
            auxiliary = Temperament.from_commas(
                self.comma_basis.value,
                self.basis.prime_supergroup(),
                metric=TuningMetric.INHARMONIC,
            )
            tuning = np.asarray(
                [auxiliary.temper(element).total_cents() for element in self.basis.value]
            )
        else:
            weights = self._weights()
            weighted_jip = jip * weights
            commas = [self.basis.to_subgroup_monzo(c) for c in self.comma_basis.value]
            if len(commas) < self.rank:
                weighted_commas = np.asarray(commas, dtype=float) / weights
                tuning = vanish_commas(weighted_jip, weighted_commas) / weights
            else:
                weighted_mapping = np.asarray(self.canonical_mapping, dtype=float) * weights
                tuning = combine_tuning_maps(weighted_jip, weighted_mapping) / weights
        if self.pure_equaves and tuning[0]:
            tuning = tuning * (jip[0] / tuning[0])
        return tuning

    @property
    def subgroup_mapping(self) -> np.ndarray:
        """Optimized size in cents of each basis generator."""
        if self._subgroup_mapping is None:
            self._subgroup_mapping = self._optimize()
        return self._subgroup_mapping

    def error_te(self) -> float:
        """Weighted RMS deviation of the optimized tuning from just intonation in cents."""
        jip = np.asarray(self.basis.jip())
        weights = self._weights()
        return float(np.sqrt(np.mean(((self.subgroup_mapping - jip) * weights) ** 2)))

    def generators(self) -> list[float]:
        """Optimized sizes of the preimage generators in cents."""
        return [self.temper(generator).total_cents() for generator in self.preimage]

    def equals(self, other: Temperament) -> bool:
        return (
            self.basis.equals(other.basis)
            and self.canonical_mapping == other.canonical_mapping
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Temperament):
            return NotImplemented
        return self.equals(other)

    __hash__ = None  # type: ignore[assignment]

    # =========================================================================
    # Vals
    # =========================================================================

    def tempers_out(self, val: Val) -> bool:
        """True if the val maps every comma of the temperament to zero steps."""
        return all(not val.value.dot(comma) for comma in self.comma_basis.value)

    def supporting_gpvs(self, max_count: int, start: Val | None = None) -> list[Val]:
        """
        Generalized patent vals that support this temperament.

        Walks the GPVs upwards from start (one division by default) and
        keeps those that temper out every comma. The walk stops after
        max_count vals or at the configured division limit.
        """
        limit = get_config().gpv_max_divisions
        val = start if start is not None else Val.patent(1, self.basis)
        result: list[Val] = []
        while len(result) < max_count and val.divisions <= limit:
            if self.tempers_out(val):
                result.append(val)
            val = val.next_gpv(self.weights or None)
        return result

    def tune(
        self, search_radius: int | None = None, weights: Sequence[float] | None = None
    ) -> Val:
        """
        The val of this temperament closest to just intonation.

        Combines the vals the temperament was built from, or the first
        supporting GPVs of a temperament built from commas.
        """
        vals = self.vals or self.supporting_gpvs(self.rank)
        return tune(vals, search_radius, weights)

    # =========================================================================
    # Tempering
    # =========================================================================

    def temper(self, value: TimeQuantity | Interval) -> TimeQuantity:
        """
        Retune a value to its optimized size.

        Intervals are unwrapped to their values. Parts outside the subgroup
        are kept as they are. Reals cannot be retuned and pass through.
        """
        value = as_quantity(value)
        if not isinstance(value, TimeMonzo):
            return value
        coordinates, residual = self.basis.to_smonzo_and_residual(value)
        cents = float(sum(float(c) * t for c, t in zip(coordinates, self.subgroup_mapping)))
        return TimeMonzo.from_cents(cents, residual.number_of_components).mul(residual)

    def respell(self, monzo: TimeMonzo) -> TimeMonzo:
        """
        Simplest tempered equivalent of a monzo.

        The monzo is mapped to generator counts, rebuilt from the preimage
        and reduced by the comma basis. The part outside the subgroup is
        carried over unchanged.
        """
        coordinates, residual = self.basis.to_smonzo_and_residual(monzo)
        width = self.basis.number_of_components
        exponents = [Fraction(0)] * width
        for row, generator in zip(self.canonical_mapping, self.preimage):
            count = sum((c * x for c, x in zip(coordinates, row)), Fraction(0))
            if count:
                exponents = [
                    e + count * g for e, g in zip(exponents, generator.prime_exponents[:width])
                ]
        result = self.comma_basis.respell(TimeMonzo(0, exponents), LatticeWeighting.TENNEY)
        return result.mul(residual)  # type: ignore[return-value]

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
    # Display
    # =========================================================================

    def to_string(self) -> str:
        """Mapping rows as vals, followed by the subgroup."""
        rows = ", ".join(
            literal_to_string(ValLiteral(tuple(Fraction(x) for x in row)))
            for row in self.canonical_mapping
        )
        return f"Temperament([{rows}], {self.basis})"

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return self.to_string()


def infer_subgroup(monzos: Sequence[TimeMonzo], full_prime_limit: bool = False) -> ValBasis:
    """
    Smallest prime subgroup containing every monzo.

    Args:
        monzos: Exact monzos (residuals are factored first)
        full_prime_limit: Include every prime below the largest one touched

    Raises:
        ConstructionError: If a monzo touches an unreasonably large prime
    """
    indices: set[int] = set()
    for monzo in monzos:
        expanded = monzo.expanded()
        indices.update(i for i, e in enumerate(expanded.prime_exponents) if e)
    if not indices:
        return ValBasis([TimeMonzo.from_fraction(2, 1)])
    largest = max(indices)
    if largest >= MAX_INFERRED_PRIMES:
        raise ConstructionError(ErrorMessages.PRIME_LIMIT_EXCEEDED.format(index=MAX_INFERRED_PRIMES))
    if full_prime_limit:
        indices = set(range(largest + 1))
    width = largest + 1
    return ValBasis([TimeMonzo.from_fraction(nth_prime(i), width) for i in sorted(indices)])

