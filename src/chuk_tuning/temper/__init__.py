"""
Tempering - subgroups, vals and regular temperaments.

- ValBasis: a just intonation subgroup with dual covectors
- Val: a mapping to steps of an equal temperament
- Temperament: an integer mapping with an optimized tuning
- linalg: integer Hermite normal form, kernels and lattice reduction
- tuning: least squares tuning maps
"""

from chuk_tuning.temper.basis import ValBasis
from chuk_tuning.temper.temperament import Temperament, infer_subgroup
from chuk_tuning.temper.tuning import combine_tuning_maps, int_combine_tuning_maps, vanish_commas
from chuk_tuning.temper.val import Val, tune

__all__ = [
    "ValBasis",
    "Val",
    "tune",
    "Temperament",
    "infer_subgroup",
    "combine_tuning_maps",
    "vanish_commas",
    "int_combine_tuning_maps",
]
