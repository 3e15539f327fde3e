"""
Comma library - named commas and temperaments shipped with the package.
"""

from chuk_tuning.library.loader import CommaLibrary
from chuk_tuning.library.models import CommaCatalog, CommaEntry, TemperamentEntry

__all__ = [
    "CommaLibrary",
    "CommaCatalog",
    "CommaEntry",
    "TemperamentEntry",
]
