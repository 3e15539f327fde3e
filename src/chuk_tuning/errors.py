"""
Exception hierarchy for the tuning engine.

Every error is a ValueError so callers that only care about bad input
can catch the builtin type. The subclasses name the kind of failure:
- DomainError: linear/logarithmic mismatch or unsupported stepped values
- InexactError: a result that cannot stay exact where exactness is required
- SubgroupError: a monzo fractional inside or outside a subgroup basis
- ReductionError: reduction against a unison-equivalent divisor
- ConstructionError: invalid input to a constructor
"""


class TuningError(ValueError):
    """Base class for all tuning engine errors."""


class DomainError(TuningError):
    """Operands live in incompatible domains."""


class InexactError(TuningError):
    """An operation cannot produce an exact result."""


class SubgroupError(TuningError):
    """A value cannot be expressed inside a subgroup basis."""


class ReductionError(TuningError):
    """Degenerate reduction or modulo."""


class ConstructionError(TuningError):
    """Invalid constructor input."""
