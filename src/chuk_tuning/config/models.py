"""
Engine configuration model.

The configuration collects the tunable constants of the engine:
- How many primes a freshly constructed monzo tracks
- When exponentiation gives up on exactness
- Default tuning metric and search bounds for temperaments
"""

from __future__ import annotations

from pydantic import BaseModel, Field

from chuk_tuning.constants import TuningMetric


class EngineConfig(BaseModel):
    """Process-wide engine settings."""

    number_of_components: int = Field(
        default=9,
        ge=0,
        description="Number of primes tracked by new monzos (9 = primes up to 23)",
    )
    max_pow_denominator: int = Field(
        default=10000,
        ge=1,
        description="Largest exponent denominator kept exact by pow",
    )
    default_metric: TuningMetric = Field(
        default=TuningMetric.SUBGROUP,
        description="Tuning metric used by temperaments unless overridden",
    )
    default_search_radius: int = Field(
        default=1,
        ge=0,
        description="Coefficient radius of the integer val combination search",
    )
    gpv_max_divisions: int = Field(
        default=10000,
        ge=1,
        description="Upper bound on divisions walked while searching supporting GPVs",
    )
    fraction_digit_limit: int = Field(
        default=1000,
        ge=1,
        description="Largest estimated digit count printed as a plain fraction",
    )

    model_config = {"frozen": True, "extra": "forbid", "use_enum_values": False}
