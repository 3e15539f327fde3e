"""
Literal nodes - display hints attached to intervals.

Nodes are the shapes a value was written in (integer, fraction, cents,
n-steps-of-equave, monzo, val, FJS). They are opaque to arithmetic:
an operation keeps a node only when the result has an obvious spelling
of the same shape, otherwise the interval falls back to a generic
representation of its value.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, fields, replace
from fractions import Fraction
from typing import TYPE_CHECKING, Any, ClassVar, Union

from chuk_tuning.core.numeric import format_float, format_fraction, to_fraction

if TYPE_CHECKING:
    from chuk_tuning.core.monzo import TimeQuantity


@dataclass(frozen=True)
class IntegerLiteral:
    """A plain integer such as 5."""

    value: int

    type: ClassVar[str] = "IntegerLiteral"


@dataclass(frozen=True)
class FractionLiteral:
    """A ratio such as 6/4 (not necessarily in lowest terms)."""

    numerator: int
    denominator: int

    type: ClassVar[str] = "FractionLiteral"


@dataclass(frozen=True)
class CentsLiteral:
    """A size in cents such as 701.955 (real=True marks an inexact value)."""

    cents: float
    real: bool = False

    type: ClassVar[str] = "CentsLiteral"


@dataclass(frozen=True)
class NedjiLiteral:
    """n steps of an equal division of an equave such as 7\\12 or 9\\13<3>."""

    numerator: int
    denominator: int
    equave_numerator: int | None = None
    equave_denominator: int | None = None

    type: ClassVar[str] = "NedjiLiteral"

    @property
    def equave(self) -> Fraction:
        """The equave as a fraction (2 when omitted)."""
        if self.equave_numerator is None:
            return Fraction(2)
        return Fraction(self.equave_numerator, self.equave_denominator or 1)


@dataclass(frozen=True)
class StepLiteral:
    """A bare step count such as 3° (abstract tuning steps)."""

    count: int

    type: ClassVar[str] = "StepLiteral"


@dataclass(frozen=True)
class MonzoLiteral:
    """An exponent vector such as [-4 4 -1> optionally over a subgroup basis."""

    components: tuple[Fraction, ...]
    ups: int = 0
    lifts: int = 0
    basis: tuple[str, ...] = ()

    type: ClassVar[str] = "MonzoLiteral"


@dataclass(frozen=True)
class ValLiteral:
    """A mapping vector such as <12 19 28] optionally over a subgroup basis."""

    components: tuple[Fraction, ...]
    ups: int = 0
    lifts: int = 0
    basis: tuple[str, ...] = ()

    type: ClassVar[str] = "ValLiteral"


@dataclass(frozen=True)
class Pythagorean:
    """A Pythagorean interval name: quality and signed degree (M3, P-5, AA4)."""

    quality: str
    degree: int


@dataclass(frozen=True)
class AbsolutePitch:
    """A Pythagorean pitch name: nominal, accidentals and octave (Eb4, F#3)."""

    nominal: str
    accidentals: str
    octave: int


@dataclass(frozen=True)
class FJS:
    """A relative Functional Just System interval such as M3^5 or m7^7."""

    pythagorean: Pythagorean
    superscripts: tuple[int, ...] = ()
    subscripts: tuple[int, ...] = ()
    ups: int = 0
    lifts: int = 0

    type: ClassVar[str] = "FJS"


@dataclass(frozen=True)
class AbsoluteFJS:
    """An absolute Functional Just System pitch such as Ab4^7."""

    pitch: AbsolutePitch
    superscripts: tuple[int, ...] = ()
    subscripts: tuple[int, ...] = ()
    ups: int = 0
    lifts: int = 0

    type: ClassVar[str] = "AbsoluteFJS"


@dataclass(frozen=True)
class AspiringFJS:
    """A relative FJS spelling that has not been realized against a context yet."""

    flavor: str = ""

    type: ClassVar[str] = "AspiringFJS"


@dataclass(frozen=True)
class AspiringAbsoluteFJS:
    """An absolute FJS spelling that has not been realized against a context yet."""

    flavor: str = ""

    type: ClassVar[str] = "AspiringAbsoluteFJS"


Node = Union[
    IntegerLiteral,
    FractionLiteral,
    CentsLiteral,
    NedjiLiteral,
    StepLiteral,
    MonzoLiteral,
    ValLiteral,
    FJS,
    AbsoluteFJS,
    AspiringFJS,
    AspiringAbsoluteFJS,
]

_NODE_CLASSES: dict[str, type] = {
    cls.type: cls
    for cls in (
        IntegerLiteral,
        FractionLiteral,
        CentsLiteral,
        NedjiLiteral,
        StepLiteral,
        MonzoLiteral,
        ValLiteral,
        FJS,
        AbsoluteFJS,
        AspiringFJS,
        AspiringAbsoluteFJS,
    )
}

_LINEAR_NODES = (IntegerLiteral, FractionLiteral)


# =============================================================================
# Formatting
# =============================================================================


def _inflection_prefix(ups: int, lifts: int) -> str:
    prefix = "^" * ups if ups > 0 else "v" * -ups
    return prefix + ("/" * lifts if lifts > 0 else "\\" * -lifts)


def _inflections(superscripts: tuple[int, ...], subscripts: tuple[int, ...]) -> str:
    result = ""
    if superscripts:
        result += "^" + ",".join(str(s) for s in superscripts)
    if subscripts:
        result += "_" + ",".join(str(s) for s in subscripts)
    return result


def _format_components(components: tuple[Fraction, ...]) -> str:
    return " ".join(format_fraction(c) for c in components)


def _format_basis(basis: tuple[str, ...]) -> str:
    return "@" + ".".join(basis) if basis else ""


def format_cents(cents: float) -> str:
    """Format cents as a decimal literal (integers keep a trailing dot)."""
    if math.isfinite(cents) and float(cents).is_integer():
        return f"{int(cents)}."
    return format_float(cents)


def literal_to_string(node: Node) -> str:
    """
    Spell a literal node back into source text.

    Aspiring nodes have no spelling until realized and raise ValueError.
    """
    if isinstance(node, IntegerLiteral):
        return str(node.value)
    if isinstance(node, FractionLiteral):
        return f"{node.numerator}/{node.denominator}"
    if isinstance(node, CentsLiteral):
        return format_cents(node.cents) + ("rc" if node.real else "")
    if isinstance(node, NedjiLiteral):
        result = f"{node.numerator}\\{node.denominator}"
        if node.equave_numerator is not None:
            result += f"<{format_fraction(node.equave)}>"
        return result
    if isinstance(node, StepLiteral):
        return f"{node.count}°"
    if isinstance(node, MonzoLiteral):
        prefix = _inflection_prefix(node.ups, node.lifts)
        return f"{prefix}[{_format_components(node.components)}>{_format_basis(node.basis)}"
    if isinstance(node, ValLiteral):
        prefix = _inflection_prefix(node.ups, node.lifts)
        return f"{prefix}<{_format_components(node.components)}]{_format_basis(node.basis)}"
    if isinstance(node, FJS):
        prefix = _inflection_prefix(node.ups, node.lifts)
        name = f"{node.pythagorean.quality}{node.pythagorean.degree}"
        return prefix + name + _inflections(node.superscripts, node.subscripts)
    if isinstance(node, AbsoluteFJS):
        prefix = _inflection_prefix(node.ups, node.lifts)
        pitch = node.pitch
        name = f"{pitch.nominal}{pitch.accidentals}{pitch.octave}"
        return prefix + name + _inflections(node.superscripts, node.subscripts)
    raise ValueError(f"Cannot spell unrealized node {node.type}")


# =============================================================================
# Node algebra
# =============================================================================


def _as_fraction(node: Node) -> Fraction:
    if isinstance(node, IntegerLiteral):
        return Fraction(node.value)
    if not isinstance(node, FractionLiteral):
        raise TypeError(f"Cannot read {node.type} as a fraction")
    return Fraction(node.numerator, node.denominator)


def _fraction_node(value: Fraction) -> Node:
    if value.denominator == 1:
        return IntegerLiteral(value.numerator)
    return FractionLiteral(value.numerator, value.denominator)


def add_nodes(a: Node | None, b: Node | None) -> Node | None:
    """Spell the sum of two literals, or None if there is no obvious spelling."""
    if isinstance(a, IntegerLiteral) and isinstance(b, IntegerLiteral):
        return IntegerLiteral(a.value + b.value)
    if isinstance(a, _LINEAR_NODES) and isinstance(b, _LINEAR_NODES):
        return _fraction_node(_as_fraction(a) + _as_fraction(b))
    if isinstance(a, NedjiLiteral) and isinstance(b, NedjiLiteral):
        if a.equave != b.equave:
            return None
        if a.denominator == b.denominator:
            return replace(a, numerator=a.numerator + b.numerator)
        step = Fraction(a.numerator, a.denominator) + Fraction(b.numerator, b.denominator)
        return replace(a, numerator=step.numerator, denominator=step.denominator)
    if isinstance(a, CentsLiteral) and isinstance(b, CentsLiteral):
        return CentsLiteral(a.cents + b.cents, a.real or b.real)
    if isinstance(a, StepLiteral) and isinstance(b, StepLiteral):
        return StepLiteral(a.count + b.count)
    if isinstance(a, MonzoLiteral) and isinstance(b, MonzoLiteral):
        if a.basis != b.basis or len(a.components) != len(b.components):
            return None
        return MonzoLiteral(
            tuple(x + y for x, y in zip(a.components, b.components)),
            a.ups + b.ups,
            a.lifts + b.lifts,
            a.basis,
        )
    return None


def neg_node(node: Node | None) -> Node | None:
    """Spell the negation of a literal."""
    if isinstance(node, IntegerLiteral):
        return IntegerLiteral(-node.value)
    if isinstance(node, FractionLiteral):
        return FractionLiteral(-node.numerator, node.denominator)
    if isinstance(node, NedjiLiteral):
        return replace(node, numerator=-node.numerator)
    if isinstance(node, CentsLiteral):
        return CentsLiteral(-node.cents, node.real)
    if isinstance(node, StepLiteral):
        return StepLiteral(-node.count)
    if isinstance(node, MonzoLiteral):
        return MonzoLiteral(
            tuple(-c for c in node.components), -node.ups, -node.lifts, node.basis
        )
    return None


def sub_nodes(a: Node | None, b: Node | None) -> Node | None:
    """Spell the difference of two literals."""
    if isinstance(a, IntegerLiteral) and isinstance(b, IntegerLiteral):
        return IntegerLiteral(a.value - b.value)
    return add_nodes(a, neg_node(b))


def _scale_node(node: Node, factor: int) -> Node | None:
    if isinstance(node, NedjiLiteral):
        return replace(node, numerator=node.numerator * factor)
    if isinstance(node, CentsLiteral):
        return CentsLiteral(node.cents * factor, node.real)
    if isinstance(node, StepLiteral):
        return StepLiteral(node.count * factor)
    if isinstance(node, MonzoLiteral):
        return MonzoLiteral(
            tuple(c * factor for c in node.components),
            node.ups * factor,
            node.lifts * factor,
            node.basis,
        )
    return None


def mul_nodes(a: Node | None, b: Node | None) -> Node | None:
    """Spell the product of two literals (a logarithmic literal times an integer scales it)."""
    if isinstance(a, IntegerLiteral) and isinstance(b, IntegerLiteral):
        return IntegerLiteral(a.value * b.value)
    if isinstance(a, _LINEAR_NODES) and isinstance(b, _LINEAR_NODES):
        return _fraction_node(_as_fraction(a) * _as_fraction(b))
    if isinstance(b, IntegerLiteral) and a is not None:
        return _scale_node(a, b.value)
    if isinstance(a, IntegerLiteral) and b is not None:
        return _scale_node(b, a.value)
    return None


def div_nodes(a: Node | None, b: Node | None) -> Node | None:
    """Spell the quotient of two literals."""
    if isinstance(a, _LINEAR_NODES) and isinstance(b, _LINEAR_NODES):
        divisor = _as_fraction(b)
        if divisor == 0:
            return None
        return _fraction_node(_as_fraction(a) / divisor)
    if isinstance(a, NedjiLiteral) and isinstance(b, IntegerLiteral) and b.value:
        sign = -1 if b.value < 0 else 1
        return replace(a, numerator=sign * a.numerator, denominator=a.denominator * abs(b.value))
    return None


def invert_node(node: Node | None) -> Node | None:
    """Spell the reciprocal of a linear literal."""
    if isinstance(node, _LINEAR_NODES):
        value = _as_fraction(node)
        if value == 0:
            return None
        return _fraction_node(1 / value)
    return None


def abs_node(node: Node | None) -> Node | None:
    """Spell the absolute value of a linear literal."""
    if isinstance(node, IntegerLiteral):
        return IntegerLiteral(abs(node.value))
    if isinstance(node, FractionLiteral):
        return FractionLiteral(abs(node.numerator), node.denominator)
    return None


def interval_value_as(
    value: TimeQuantity, node: Node | None, simplify: bool = False
) -> Node | None:
    """
    Spell a value in the same shape as a template node.

    Args:
        value: The value to spell
        node: Template literal
        simplify: Drop the template's denominators instead of matching them

    Returns:
        A node of the template's type, an aspiring node for FJS templates,
        or None if the value has no such spelling
    """
    if node is None:
        return None
    if isinstance(node, IntegerLiteral):
        return value.as_integer_literal()
    if isinstance(node, FractionLiteral):
        return value.as_fraction_literal(None if simplify else node)
    if isinstance(node, NedjiLiteral):
        return value.as_nedji_literal(None if simplify else node)
    if isinstance(node, CentsLiteral):
        return value.as_cents_literal()
    if isinstance(node, MonzoLiteral) and not node.basis:
        return value.as_monzo_literal()
    if isinstance(node, (FJS, AspiringFJS)):
        return AspiringFJS()
    if isinstance(node, (AbsoluteFJS, AspiringAbsoluteFJS)):
        return AspiringAbsoluteFJS()
    return None


# =============================================================================
# JSON
# =============================================================================


def _plain(value: Any) -> Any:
    if isinstance(value, Fraction):
        return {"n": value.numerator, "d": value.denominator}
    if isinstance(value, (list, tuple)):
        return [_plain(v) for v in value]
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    return value


def node_to_json(node: Node) -> dict[str, Any]:
    """Serialize a node as a tagged dictionary."""
    return {"type": node.type, **_plain(asdict(node))}


def node_from_json(data: dict[str, Any]) -> Node:
    """Rebuild a node from its tagged dictionary."""
    cls = _NODE_CLASSES.get(data.get("type", ""))
    if cls is None:
        raise ValueError(f"Unknown literal type: {data.get('type')!r}")
    kwargs: dict[str, Any] = {}
    for field in fields(cls):
        if field.name not in data:
            continue
        raw = data[field.name]
        if field.name == "components":
            raw = tuple(to_fraction(c) for c in raw)
        elif field.name in ("superscripts", "subscripts", "basis"):
            raw = tuple(raw)
        elif field.name == "pythagorean":
            raw = Pythagorean(**raw)
        elif field.name == "pitch":
            raw = AbsolutePitch(**raw)
        kwargs[field.name] = raw
    return cls(**kwargs)


def literal_reviver(obj: dict[str, Any]) -> Any:
    """JSON object hook for literal nodes."""
    if obj.get("type") in _NODE_CLASSES:
        return node_from_json(obj)
    return obj
