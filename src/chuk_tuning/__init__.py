"""
chuk-tuning - exact arithmetic for microtonal tuning.

Layers:
- core: exact and inexact musical values, intervals, literal spellings, FJS
- temper: subgroup bases, vals and regular temperaments
- library: named commas and temperaments
- serialization: JSON interchange
"""

from chuk_tuning.config import EngineConfig, get_config, load_config, set_config
from chuk_tuning.constants import IntervalDomain, LatticeWeighting, TuningMetric
from chuk_tuning.core import Color, Interval, RootContext, TimeMonzo, TimeQuantity, TimeReal
from chuk_tuning.errors import (
    ConstructionError,
    DomainError,
    InexactError,
    ReductionError,
    SubgroupError,
    TuningError,
)
from chuk_tuning.library import CommaLibrary
from chuk_tuning.serialization import (
    TuningJSONEncoder,
    compose_revivers,
    from_json,
    to_json,
    tuning_object_hook,
)
from chuk_tuning.temper import Temperament, Val, ValBasis, tune

__version__ = "0.1.0"

__all__ = [
    # Values
    "TimeQuantity",
    "TimeMonzo",
    "TimeReal",
    "Interval",
    "Color",
    "RootContext",
    # Tempering
    "ValBasis",
    "Val",
    "Temperament",
    "tune",
    "CommaLibrary",
    # Enums
    "IntervalDomain",
    "TuningMetric",
    "LatticeWeighting",
    # Configuration
    "EngineConfig",
    "load_config",
    "get_config",
    "set_config",
    # Errors
    "TuningError",
    "DomainError",
    "InexactError",
    "SubgroupError",
    "ReductionError",
    "ConstructionError",
    # JSON
    "TuningJSONEncoder",
    "compose_revivers",
    "tuning_object_hook",
    "to_json",
    "from_json",
]
