"""
Interval - a musical quantity tagged with an algebraic domain.

The same value behaves differently depending on its domain:
- Linear: ordinary numbers, 3/2 + 1/2 == 2
- Logarithmic: stacked pitches, adding two fifths multiplies their ratios

Intervals also carry an integer step count (abstract tuning steps such as
ups), a cached literal node used for display, and provenance metadata
(color, label, tracking ids) that arithmetic merges from its operands.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, replace
from fractions import Fraction
from functools import total_ordering
from typing import TYPE_CHECKING, Any

from chuk_tuning.constants import ErrorMessages, IntervalDomain
from chuk_tuning.core.fjs import as_absolute_fjs, as_fjs
from chuk_tuning.core.literals import (
    FJS,
    AbsoluteFJS,
    AspiringAbsoluteFJS,
    AspiringFJS,
    CentsLiteral,
    FractionLiteral,
    IntegerLiteral,
    MonzoLiteral,
    NedjiLiteral,
    Node,
    StepLiteral,
    ValLiteral,
    abs_node,
    add_nodes,
    div_nodes,
    interval_value_as,
    invert_node,
    literal_reviver,
    literal_to_string,
    mul_nodes,
    neg_node,
    node_to_json,
    sub_nodes,
)
from chuk_tuning.core.monzo import TimeMonzo, TimeQuantity, TimeReal
from chuk_tuning.core.numeric import to_fraction
from chuk_tuning.errors import DomainError, InexactError

if TYPE_CHECKING:
    from chuk_tuning.core.context import RootContext
    from chuk_tuning.temper.val import Val

LINEAR = IntervalDomain.LINEAR
LOGARITHMIC = IntervalDomain.LOGARITHMIC

# Spellings of plain numbers; in the logarithmic domain they stack multiplicatively
_LINEAR_NODES = (IntegerLiteral, FractionLiteral)


@dataclass(frozen=True)
class Color:
    """A display color such as 'red' or '#ff8800'."""

    value: str

    def __str__(self) -> str:
        return self.value


def _integral_steps(steps: Any) -> int:
    """Validate that a step count is a whole number."""
    if isinstance(steps, bool):
        raise TypeError(f"Invalid step count: {steps!r}")
    if isinstance(steps, int):
        return steps
    fraction = Fraction(steps)
    if fraction.denominator != 1:
        raise InexactError(ErrorMessages.STEPS_FRACTIONAL.format(steps=steps))
    return fraction.numerator


def _scalar(value: TimeQuantity) -> Fraction | float:
    if isinstance(value, TimeMonzo) and value.is_fractional():
        return value.to_fraction()
    return value.value_of()


def _stack_nodes(a: Node | None, b: Node | None, inverse: bool = False) -> Node | None:
    """Spell logarithmic addition (or subtraction) of two literals."""
    if isinstance(a, _LINEAR_NODES) and isinstance(b, _LINEAR_NODES):
        return div_nodes(a, b) if inverse else mul_nodes(a, b)
    return sub_nodes(a, b) if inverse else add_nodes(a, b)


def count_ups_and_lifts(steps: int, up_steps: int, lift_steps: int) -> tuple[int, int] | None:
    """
    Decompose a step count into ups and lifts.

    Lifts take as many steps as possible (rounding toward zero) and ups
    take the remainder.

    Returns:
        (ups, lifts), or None if the remainder is not a whole number of ups
    """
    lifts = math.trunc(Fraction(steps, lift_steps)) if lift_steps else 0
    remainder = steps - lifts * lift_steps
    if not up_steps:
        return (0, lifts) if remainder == 0 else None
    if remainder % up_steps:
        return None
    return remainder // up_steps, lifts


@total_ordering
class Interval:
    """
    Domain-tagged musical value.

    Every operator dispatches on the domains of its operands, keeps the
    step count integral and decides whether the cached node survives.
    """

    __slots__ = ("value", "domain", "steps", "node", "color", "label", "tracking_ids", "__weakref__")

    def __init__(
        self,
        value: TimeQuantity,
        domain: IntervalDomain | str = LINEAR,
        steps: int = 0,
        node: Node | None = None,
        color: Color | None = None,
        label: str = "",
        tracking_ids: set[int] | None = None,
    ) -> None:
        self.value = value
        self.domain = IntervalDomain(domain)
        self.steps = _integral_steps(steps)
        self.node = node
        self.color = color
        self.label = label
        self.tracking_ids: set[int] = set(tracking_ids) if tracking_ids else set()

    # =========================================================================
    # Construction
    # =========================================================================

    @classmethod
    def from_integer(cls, value: int, number_of_components: int | None = None) -> Interval:
        return cls(
            TimeMonzo.from_integer(value, number_of_components), LINEAR, 0, IntegerLiteral(value)
        )

    @classmethod
    def from_fraction(cls, value: Any, number_of_components: int | None = None) -> Interval:
        fraction = to_fraction(value)
        return cls(
            TimeMonzo.from_fraction(fraction, number_of_components),
            LINEAR,
            0,
            FractionLiteral(fraction.numerator, fraction.denominator),
        )

    @classmethod
    def from_value(cls, value: float) -> Interval:
        return cls(TimeReal.from_value(value), LINEAR)

    @classmethod
    def from_cents(cls, cents: float, number_of_components: int | None = None) -> Interval:
        return cls(
            TimeMonzo.from_cents(cents, number_of_components), LOGARITHMIC, 0, CentsLiteral(cents)
        )

    @classmethod
    def from_steps(cls, count: int, number_of_components: int | None = None) -> Interval:
        """A pure step count over the unison, such as 3°."""
        return cls(
            TimeMonzo.from_fraction(1, number_of_components), LOGARITHMIC, count, StepLiteral(count)
        )

    def _derive(
        self,
        value: TimeQuantity,
        domain: IntervalDomain,
        steps: int | Fraction = 0,
        node: Node | None = None,
        other: Interval | None = None,
    ) -> Interval:
        """New interval inheriting (infecting) metadata from the operands."""
        color, label, tracking_ids = infect(self, other)
        return Interval(value, domain, steps, node, color, label, tracking_ids)

    def shallow_clone(self) -> Interval:
        return Interval(
            self.value, self.domain, self.steps, self.node, self.color, self.label, self.tracking_ids
        )

    def clone(self) -> Interval:
        return Interval(
            self.value.clone(),  # type: ignore[attr-defined]
            self.domain,
            self.steps,
            self.node,
            self.color,
            self.label,
            self.tracking_ids,
        )

    # =========================================================================
    # Queries
    # =========================================================================

    def is_relative(self) -> bool:
        """True for ratios (no time units)."""
        return self.value.time_exponent == 0

    def is_absolute(self) -> bool:
        """True for frequencies and durations."""
        return not self.is_relative()

    def to_integer(self) -> int:
        return self.value.to_integer()  # type: ignore[attr-defined]

    def to_fraction(self) -> Fraction:
        return self.value.to_fraction()  # type: ignore[attr-defined]

    def total_cents(self) -> float:
        return self.value.total_cents()

    def value_of(self) -> float:
        return self.value.value_of()

    # =========================================================================
    # Arithmetic
    # =========================================================================

    def neg(self) -> Interval:
        """Negation: numeric in the linear domain, descending in the logarithmic one."""
        if self.domain == LINEAR:
            return self._derive(self.value.neg(), LINEAR, self.steps, neg_node(self.node))  # type: ignore[attr-defined]
        if isinstance(self.node, _LINEAR_NODES):
            node = invert_node(self.node)
        else:
            node = neg_node(self.node)
        return self._derive(self.value.inverse(), LOGARITHMIC, -self.steps, node)  # type: ignore[attr-defined]

    def inverse(self) -> Interval | Val:
        """
        Reciprocal of a linear interval, or the val measuring a logarithmic one.

        Raises:
            InexactError: For the geometric inverse of an irrational value
        """
        if self.domain == LINEAR:
            return self._derive(self.value.inverse(), LINEAR, -self.steps, invert_node(self.node))  # type: ignore[attr-defined]
        from chuk_tuning.temper.basis import ValBasis
        from chuk_tuning.temper.val import Val

        covector = self.value.geometric_inverse()  # type: ignore[attr-defined]
        return Val(covector, ValBasis.standard(covector.number_of_components))

    def abs(self) -> Interval:
        if self.domain == LINEAR:
            return self._derive(self.value.abs(), LINEAR, self.steps, abs_node(self.node))  # type: ignore[attr-defined]
        if self.value.total_cents() < 0:
            return self.neg()
        return self.shallow_clone()

    def _same_type_node(self, other: Interval, value: TimeQuantity) -> Node | None:
        if self.node is not None and other.node is not None and self.node.type == other.node.type:
            return interval_value_as(value, self.node, simplify=True)
        return None

    def add(self, other: Interval) -> Interval:
        """
        Add intervals.

        Linear values add as numbers, logarithmic values stack.
        """
        if self.domain != other.domain:
            raise DomainError(ErrorMessages.DOMAIN_MISMATCH.format(operation="addition"))
        if self.domain == LINEAR:
            if self.steps or other.steps:
                raise DomainError(ErrorMessages.LINEAR_STEPS.format(operation="addition"))
            node = add_nodes(self.node, other.node)
            value = self.value.add(other.value)  # type: ignore[attr-defined]
            steps = 0
        else:
            node = _stack_nodes(self.node, other.node)
            value = self.value.mul(other.value)  # type: ignore[attr-defined]
            steps = self.steps + other.steps
        if node is None:
            node = self._same_type_node(other, value)
        return self._derive(value, self.domain, steps, node, other)

    def sub(self, other: Interval) -> Interval:
        """Subtract intervals."""
        if self.domain != other.domain:
            raise DomainError(ErrorMessages.DOMAIN_MISMATCH.format(operation="subtraction"))
        if self.domain == LINEAR:
            if self.steps or other.steps:
                raise DomainError(ErrorMessages.LINEAR_STEPS.format(operation="subtraction"))
            node = sub_nodes(self.node, other.node)
            value = self.value.sub(other.value)  # type: ignore[attr-defined]
            steps = 0
        else:
            node = _stack_nodes(self.node, other.node, inverse=True)
            value = self.value.div(other.value)  # type: ignore[attr-defined]
            steps = self.steps - other.steps
        if node is None:
            node = self._same_type_node(other, value)
        return self._derive(value, self.domain, steps, node, other)

    def _log_lin_mul(self, logarithmic: Interval, linear: Interval, other: Interval) -> Interval:
        if linear.steps:
            raise DomainError(ErrorMessages.LINEAR_STEPS.format(operation="scaling"))
        node = None
        if not isinstance(logarithmic.node, _LINEAR_NODES):
            node = mul_nodes(logarithmic.node, linear.node)
        value = logarithmic.value.pow(linear.value)  # type: ignore[attr-defined]
        steps: Fraction | int = 0
        if logarithmic.steps:
            factor = _scalar(linear.value)
            if isinstance(factor, float):
                raise InexactError(
                    ErrorMessages.STEPS_FRACTIONAL.format(steps=logarithmic.steps * factor)
                )
            steps = logarithmic.steps * factor
        if node is None and logarithmic.node is not None:
            node = interval_value_as(value, logarithmic.node, simplify=True)
        return self._derive(value, LOGARITHMIC, steps, node, other)

    def mul(self, other: Interval) -> Interval:
        """
        Multiply intervals.

        A logarithmic interval times a linear scalar repeats it; two
        logarithmic intervals cannot be multiplied.
        """
        if self.domain == LOGARITHMIC and other.domain == LOGARITHMIC:
            raise DomainError(ErrorMessages.LOGARITHMIC_MUL)
        if other.domain == LOGARITHMIC:
            return self._log_lin_mul(other, self, other)
        if self.domain == LOGARITHMIC:
            return self._log_lin_mul(self, other, other)
        node = mul_nodes(self.node, other.node)
        value = self.value.mul(other.value)  # type: ignore[attr-defined]
        if node is None:
            node = self._same_type_node(other, value)
        return self._derive(value, LINEAR, self.steps + other.steps, node, other)

    def div(self, other: Interval) -> Interval:
        """
        Divide intervals.

        Dividing two logarithmic intervals takes a logarithm and returns a
        linear scalar (how many of other fit in this interval).
        """
        if self.domain == LOGARITHMIC and other.domain == LOGARITHMIC:
            if self.steps or other.steps:
                raise DomainError(ErrorMessages.LOGARITHMIC_STEPS.format(operation="division"))
            ratio = self.value.log(other.value)  # type: ignore[attr-defined]
            if isinstance(ratio, Fraction):
                value: TimeQuantity = TimeMonzo.from_fraction(ratio)
            else:
                value = TimeReal.from_value(ratio)
            return self._derive(value, LINEAR, 0, value.as_fraction_literal(), other)  # type: ignore[attr-defined]
        if self.domain == LOGARITHMIC:
            if other.steps:
                raise DomainError(ErrorMessages.LINEAR_STEPS.format(operation="division"))
            value = self.value.pow(other.value.inverse())  # type: ignore[attr-defined]
            steps: Fraction | int = 0
            if self.steps:
                divisor = _scalar(other.value)
                if isinstance(divisor, float):
                    raise InexactError(ErrorMessages.STEPS_FRACTIONAL.format(steps=self.steps / divisor))
                steps = Fraction(self.steps) / divisor
            node = None
            if not isinstance(self.node, _LINEAR_NODES):
                node = div_nodes(self.node, other.node)
            if node is None and self.node is not None:
                node = interval_value_as(value, self.node, simplify=True)
            return self._derive(value, LOGARITHMIC, steps, node, other)
        if other.domain == LOGARITHMIC:
            raise DomainError(ErrorMessages.DOMAIN_MISMATCH.format(operation="division"))
        node = div_nodes(self.node, other.node)
        value = self.value.div(other.value)  # type: ignore[attr-defined]
        if node is None:
            node = self._same_type_node(other, value)
        return self._derive(value, LINEAR, self.steps - other.steps, node, other)

    def _check_power_operands(self, other: Interval, operation: str) -> None:
        if self.domain != LINEAR or other.domain != LINEAR:
            raise DomainError(ErrorMessages.LINEAR_ONLY.format(operation=operation))
        if other.steps:
            raise DomainError(ErrorMessages.LINEAR_STEPS.format(operation=operation.lower()))
        if not other.value.is_scalar():
            raise DomainError(ErrorMessages.SCALAR_ONLY.format(operation=operation.lower()))

    def pow(self, other: Interval) -> Interval:
        """Raise a linear interval to a linear scalar power."""
        self._check_power_operands(other, "Exponentiation")
        value = self.value.pow(other.value)  # type: ignore[attr-defined]
        steps: Fraction | int = 0
        if self.steps:
            exponent = _scalar(other.value)
            if isinstance(exponent, float):
                raise InexactError(ErrorMessages.STEPS_FRACTIONAL.format(steps=self.steps * exponent))
            steps = self.steps * exponent
        node = interval_value_as(value, self.node, simplify=True)
        return self._derive(value, LINEAR, steps, node, other)

    def ipow(self, other: Interval) -> Interval:
        """Inverse power: the other-th root of a linear interval."""
        self._check_power_operands(other, "Root extraction")
        value = self.value.pow(other.value.inverse())  # type: ignore[attr-defined]
        steps: Fraction | int = 0
        if self.steps:
            exponent = _scalar(other.value)
            if isinstance(exponent, float):
                raise InexactError(ErrorMessages.STEPS_FRACTIONAL.format(steps=self.steps / exponent))
            steps = Fraction(self.steps) / exponent
        node = interval_value_as(value, self.node, simplify=True)
        return self._derive(value, LINEAR, steps, node, other)

    def log(self, other: Interval) -> Interval:
        """Logarithm of a linear interval in the base of another."""
        self._check_power_operands(other, "Logarithm")
        if self.steps:
            raise DomainError(ErrorMessages.LINEAR_STEPS.format(operation="logarithm"))
        ratio = self.value.log(other.value)  # type: ignore[attr-defined]
        if isinstance(ratio, Fraction):
            value: TimeQuantity = TimeMonzo.from_fraction(ratio)
        else:
            value = TimeReal.from_value(ratio)
        return self._derive(value, LINEAR, 0, value.as_fraction_literal(), other)  # type: ignore[attr-defined]

    def dot(self, other: Interval) -> Interval:
        """Inner product of the prime exponent vectors as a linear scalar."""
        product = self.value.dot(other.value)  # type: ignore[attr-defined]
        value = TimeMonzo.from_fraction(product)
        return self._derive(value, LINEAR, 0, value.as_fraction_literal(), other)

    def _lens(self, other: Interval, subtract: bool) -> Interval:
        operation = "harmonic subtraction" if subtract else "harmonic addition"
        if self.domain != other.domain:
            raise DomainError(ErrorMessages.DOMAIN_MISMATCH.format(operation=operation))
        if self.steps or other.steps:
            if self.domain == LINEAR:
                raise DomainError(ErrorMessages.LINEAR_STEPS.format(operation=operation))
            raise DomainError(ErrorMessages.LOGARITHMIC_STEPS.format(operation=operation))
        if self.domain == LINEAR:
            if subtract:
                value = self.value.lens_sub(other.value)  # type: ignore[attr-defined]
            else:
                value = self.value.lens_add(other.value)  # type: ignore[attr-defined]
            return self._derive(value, LINEAR, 0, self._same_type_node(other, value), other)
        # Lens sums of vectors: 1 / (1/u + 1/v) with v.dot(v) as the norm
        magnitude = self.value.dot(self.value)  # type: ignore[attr-defined]
        if not magnitude:
            return self._derive(self.value.clone(), LOGARITHMIC, 0, None, other)  # type: ignore[attr-defined]
        other_magnitude = other.value.dot(other.value)  # type: ignore[attr-defined]
        if not other_magnitude:
            return self._derive(other.value.clone(), LOGARITHMIC, 0, None, other)  # type: ignore[attr-defined]
        this_part = self.value.pow(1 / magnitude)  # type: ignore[attr-defined]
        other_part = other.value.pow(1 / other_magnitude)  # type: ignore[attr-defined]
        combined = this_part.div(other_part) if subtract else this_part.mul(other_part)
        return self._derive(combined.geometric_inverse(), LOGARITHMIC, 0, None, other)

    def lens_add(self, other: Interval) -> Interval:
        """
        Harmonic addition.

        Linear values combine as 1 / (1/a + 1/b). Logarithmic values are
        treated as vectors of prime exponents and combine the same way
        through their geometric inverses.

        Raises:
            DomainError: If the domains differ or either operand has steps
            InexactError: For logarithmic values that are not exact monzos
        """
        return self._lens(other, subtract=False)

    def lens_sub(self, other: Interval) -> Interval:
        """Harmonic subtraction, the inverse of lens_add."""
        return self._lens(other, subtract=True)

    def project(self, base: Interval) -> Interval:
        """
        Move an octave-based pitch onto another equave.

        The exponent of two becomes a power of base, so 7\\12 projected onto
        3 is 7\\12<3>. The result is always logarithmic.
        """
        value = self.value.project(base.value)  # type: ignore[attr-defined]
        return self._derive(value, LOGARITHMIC, self.steps, None, base)

    def backslash(self, other: Interval) -> Interval:
        """
        Build the equal-tempered step n\\m from two linear scalars.

        Integer operands keep an n\\m spelling for display.

        Raises:
            DomainError: Unless both operands are linear scalars
        """
        if not self.value.is_scalar() or not other.value.is_scalar():
            raise DomainError(ErrorMessages.SCALAR_ONLY.format(operation="backslashing"))
        if self.domain != LINEAR or other.domain != LINEAR:
            raise DomainError(ErrorMessages.LINEAR_ONLY.format(operation="Backslashing"))
        value = TimeMonzo.from_integer(2).pow(self.value.div(other.value))  # type: ignore[attr-defined]
        node = None
        if self.value.is_integral() and other.value.is_integral():
            node = NedjiLiteral(self.to_integer(), other.to_integer())
        return self._derive(value, LOGARITHMIC, 0, node, other)

    def _reduced_steps(self, other: Interval, value: TimeQuantity) -> int:
        if not other.steps:
            return self.steps
        multiplier = self.value.div(value).log(other.value)  # type: ignore[attr-defined]
        if isinstance(multiplier, float) and not math.isfinite(multiplier):
            return self.steps
        return self.steps - round(multiplier) * other.steps

    def mmod(self, other: Interval, ceiling: bool = False) -> Interval:
        """
        Modulo: numeric in the linear domain, equave reduction in the logarithmic one.

        Raises:
            ReductionError: When an exact value is reduced by a unison
        """
        if self.domain != other.domain:
            raise DomainError(ErrorMessages.DOMAIN_MISMATCH.format(operation="modulo"))
        if self.domain == LINEAR:
            if self.steps or other.steps:
                raise DomainError(ErrorMessages.LINEAR_STEPS.format(operation="modulo"))
            value = self.value.mmod(other.value, ceiling)  # type: ignore[attr-defined]
            return self._derive(value, LINEAR, 0, interval_value_as(value, self.node, True), other)
        value = self.value.reduce(other.value, ceiling)  # type: ignore[attr-defined]
        steps = self._reduced_steps(other, value)
        return self._derive(value, LOGARITHMIC, steps, interval_value_as(value, self.node, True), other)

    def reduce(self, other: Interval, ceiling: bool = False) -> Interval:
        """Reduce by repeated division regardless of domain (octave reduction)."""
        value = self.value.reduce(other.value, ceiling)  # type: ignore[attr-defined]
        steps = self._reduced_steps(other, value)
        return self._derive(value, self.domain, steps, interval_value_as(value, self.node, True), other)

    def round_to(self, other: Interval) -> Interval:
        """Round to a multiple (linear) or a power (logarithmic) of other."""
        if self.domain != other.domain:
            raise DomainError(ErrorMessages.DOMAIN_MISMATCH.format(operation="rounding"))
        if self.domain == LINEAR:
            value = self.value.round_to(other.value)  # type: ignore[attr-defined]
        else:
            value = self.value.pitch_round_to(other.value)  # type: ignore[attr-defined]
        return self._derive(value, self.domain, self.steps, interval_value_as(value, self.node, True), other)

    # =========================================================================
    # Inflections
    # =========================================================================

    def _inflect(self, step: Interval, count: int, context: RootContext, attribute: str) -> Interval:
        value = self.value.mul(step.value.pow(count))  # type: ignore[attr-defined]
        node = self.node
        if isinstance(node, (FJS, AbsoluteFJS, MonzoLiteral, ValLiteral)):
            node = replace(node, **{attribute: getattr(node, attribute) + count})
        elif not isinstance(node, (AspiringFJS, AspiringAbsoluteFJS)):
            node = None
        result = self._derive(value, self.domain, self.steps + count * step.steps, node)
        context.register_fragile(result)
        return result

    def up(self, context: RootContext) -> Interval:
        """Raise by the context's up inflection."""
        return self._inflect(context.up, 1, context, "ups")

    def down(self, context: RootContext) -> Interval:
        """Lower by the context's up inflection."""
        return self._inflect(context.up, -1, context, "ups")

    def lift(self, context: RootContext) -> Interval:
        """Raise by the context's lift inflection."""
        return self._inflect(context.lift, 1, context, "lifts")

    def drop(self, context: RootContext) -> Interval:
        """Lower by the context's lift inflection."""
        return self._inflect(context.lift, -1, context, "lifts")

    # =========================================================================
    # Comparison
    # =========================================================================

    def compare(self, other: Interval) -> int:
        """Compare values (step counts break ties)."""
        result = self.value.compare(other.value)
        if result:
            return result
        return (self.steps > other.steps) - (self.steps < other.steps)

    def equals(self, other: Interval) -> bool:
        """Numeric equality of values and step counts."""
        return self.steps == other.steps and self.value.equals(other.value)  # type: ignore[attr-defined]

    def strict_equals(self, other: Interval) -> bool:
        """Equality of domain, step count and value representation."""
        return (
            self.domain == other.domain
            and self.steps == other.steps
            and self.value.strict_equals(other.value)  # type: ignore[attr-defined]
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return self.equals(other)

    def __lt__(self, other: Interval) -> bool:
        if not isinstance(other, Interval):
            return NotImplemented
        return self.compare(other) < 0

    def __hash__(self) -> int:
        return hash((hash(self.value), self.steps))

    # Operators

    def __add__(self, other: Interval) -> Interval:
        return self.add(other)

    def __sub__(self, other: Interval) -> Interval:
        return self.sub(other)

    def __mul__(self, other: Interval) -> Interval:
        return self.mul(other)

    def __truediv__(self, other: Interval) -> Interval:
        return self.div(other)

    def __pow__(self, other: Interval) -> Interval:
        return self.pow(other)

    def __mod__(self, other: Interval) -> Interval:
        return self.mmod(other)

    def __neg__(self) -> Interval:
        return self.neg()

    def __abs__(self) -> Interval:
        return self.abs()

    # =========================================================================
    # Display
    # =========================================================================

    def realize_node(self, context: RootContext) -> Node | None:
        """
        Re-derive a concrete spelling of an aspiring node against a context.

        Returns:
            The realized node, the cached node if it needs no realization,
            or None if the value cannot be spelled that way
        """
        node = self.node
        if not isinstance(node, (AspiringFJS, AspiringAbsoluteFJS)):
            return node
        counts = count_ups_and_lifts(self.steps, context.up.steps, context.lift.steps)
        if counts is None:
            return None
        ups, lifts = counts
        value = self.value.div(context.up.value.pow(ups))  # type: ignore[attr-defined]
        value = value.div(context.lift.value.pow(lifts))
        if isinstance(node, AspiringFJS):
            realized: FJS | AbsoluteFJS | None = as_fjs(value)
        else:
            realized = as_absolute_fjs(value, context.c4)
        if realized is None:
            return None
        return replace(realized, ups=ups, lifts=lifts)

    def break_node(self, force: bool = False) -> None:
        """
        Invalidate a cached spelling that depends on the context.

        Realized FJS nodes fall back to aspiring ones and vectors carrying
        ups or lifts are dropped. With force every node is dropped.
        """
        node = self.node
        if force:
            self.node = None
        elif isinstance(node, FJS):
            self.node = AspiringFJS()
        elif isinstance(node, AbsoluteFJS):
            self.node = AspiringAbsoluteFJS()
        elif isinstance(node, (MonzoLiteral, ValLiteral)) and (node.ups or node.lifts):
            self.node = None

    def _value_string(self) -> str:
        text = self.value.to_string(self.domain)  # type: ignore[attr-defined]
        if self.steps:
            return f"{text}+{literal_to_string(StepLiteral(self.steps))}"
        return text

    def to_string(self, context: RootContext | None = None) -> str:
        """
        Spell the interval, preferring its cached node.

        Without a context aspiring nodes cannot be realized and the
        interval falls back to a context-free spelling of its value.
        """
        node = self.node
        if isinstance(node, (AspiringFJS, AspiringAbsoluteFJS)):
            node = self.realize_node(context) if context is not None else None
        elif self.steps and not isinstance(node, (FJS, AbsoluteFJS, MonzoLiteral, StepLiteral)):
            node = None
        text = literal_to_string(node) if node is not None else self._value_string()
        parts = [text]
        if self.color is not None:
            parts.append(self.color.value)
        if self.label:
            parts.append(f'"{self.label}"')
        return " ".join(parts)

    def __str__(self) -> str:
        return self.to_string()

    def __repr__(self) -> str:
        return f"Interval({self.to_string()!r}, {self.domain.value})"

    # =========================================================================
    # JSON
    # =========================================================================

    def to_json(self) -> dict[str, Any]:
        return {
            "type": "Interval",
            "value": self.value.to_json(),  # type: ignore[attr-defined]
            "domain": self.domain.value,
            "steps": self.steps,
            "label": self.label,
            "color": self.color.value if self.color is not None else None,
            "node": node_to_json(self.node) if self.node is not None else None,
            "trackingIds": sorted(self.tracking_ids),
        }

    @classmethod
    def reviver(cls, obj: dict[str, Any]) -> Any:
        """JSON object hook for tagged Interval dictionaries."""
        if obj.get("type") != "Interval":
            return obj
        value = obj["value"]
        if isinstance(value, dict):
            value = TimeReal.reviver(TimeMonzo.reviver(value))
        node = obj.get("node")
        if isinstance(node, dict):
            node = literal_reviver(node)
        color = obj.get("color")
        return cls(
            value,
            obj["domain"],
            obj.get("steps", 0),
            node,
            Color(color) if color else None,
            obj.get("label", ""),
            set(obj.get("trackingIds", [])),
        )


def infect(left: Interval, right: Interval | None) -> tuple[Color | None, str, set[int]]:
    """
    Merge provenance metadata of two operands.

    The left operand's color and label win when present; tracking ids are
    always united.
    """
    if right is None:
        return left.color, left.label, set(left.tracking_ids)
    color = left.color if left.color is not None else right.color
    label = left.label or right.label
    return color, label, left.tracking_ids | right.tracking_ids
