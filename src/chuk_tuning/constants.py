"""
Constants and enums for the tuning engine.

No magic strings - use enums for constrained values.
"""

from enum import Enum


class IntervalDomain(str, Enum):
    """
    Algebraic domain of an interval.

    Linear intervals add as numbers, logarithmic intervals stack:
    adding two logarithmic intervals multiplies their values.
    """

    LINEAR = "linear"
    LOGARITHMIC = "logarithmic"


class TuningMetric(str, Enum):
    """Weighting used when optimizing a temperament's tuning map."""

    SUBGROUP = "subgroup"  # Inharmonic over the enclosing prime supergroup
    INHARMONIC = "inharmonic"  # Weigh by literal interval size
    TENNEY_PAKKANEN = "Tenney-Pakkanen"  # Weigh by Tenney height


class LatticeWeighting(str, Enum):
    """Coordinate weighting for lattice reduction and respelling."""

    NONE = "none"  # Raw prime exponents
    TENNEY = "tenney"  # Prime exponents scaled by log2(prime)


# Steps carried by the default "up" and "lift" inflections
DEFAULT_UP_STEPS = 1
DEFAULT_LIFT_STEPS = 5

# Largest prime index searched when inferring a subgroup from a comma list
MAX_INFERRED_PRIMES = 1000


class ErrorMessages:
    """Error message templates."""

    REDUCTION_BY_UNISON = "Reduction by unison"
    DIVISION_BY_ZERO = "Division by zero"
    TIME_MISMATCH = "Cannot {operation} quantities with different time exponents"
    INEXACT_EXPONENTS = "Cannot move fractional exponent of prime {prime} into the residual"
    NON_INTEGRAL = "Value is not integral"
    NON_FRACTIONAL = "Value is not fractional"
    RADICAL_PRIMES = "Value has fractional prime exponents"
    INEXACT_INVERSE = "Geometric inverse of an inexact value is not exact"
    ZERO_INVERSE = "Geometric inverse of unison"
    DOT_RESIDUAL = "Cannot factor residual {residual} to compute the dot product"
    REAL_DOT = "Dot product of real values is not supported"
    STEPS_FRACTIONAL = "Step count {steps} is not an integer"
    LINEAR_STEPS = "Linear {operation} of stepped values is not supported"
    LOGARITHMIC_MUL = "At least one domain must be linear in multiplication"
    LOGARITHMIC_STEPS = "Logarithmic {operation} of stepped values is not supported"
    DOMAIN_MISMATCH = "Domains must match in {operation}"
    LINEAR_ONLY = "{operation} is only defined for linear intervals"
    FRACTIONAL_IN_SUBGROUP = "Monzo is fractional inside subgroup"
    OUTSIDE_SUBGROUP = "Monzo outside subgroup"
    BASIS_NON_POSITIVE = "Basis elements must be positive, got {value}"
    BASIS_INEXACT = "Basis elements must be exact, got {value}"
    BASIS_DEPENDENT = "Basis elements must be linearly independent"
    BASIS_RELATIVE = "Basis elements must be relative, got {value}"
    CONTORTED_MAPPING = "Mapping is contorted"
    BASIS_MISMATCH = "Val bases must be equal"
    VAL_NON_INTEGRAL = "Val mapping must be integral inside its subgroup"
    VAL_SCALAR = "Vals can only be scaled by linear scalars"
    VALS_REQUIRED = "At least one val is required"
    MIXED_BASES = "All vals must share the same basis"
    PRIME_LIMIT_EXCEEDED = "Cannot infer a subgroup beyond prime index {index}"
    UNKNOWN_COMMA = "Comma '{name}' not found."
    SCALAR_ONLY = "Only scalar {operation} is implemented"
    UNSUPPORTED_OPERAND = "Cannot {operation} {kind}"
