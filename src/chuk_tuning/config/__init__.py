"""
Engine configuration.

- EngineConfig: pydantic model of the tunable constants
- load_config: read a YAML configuration file
- get_config / set_config: the active configuration
"""

from chuk_tuning.config.loader import (
    get_config,
    get_number_of_components,
    load_config,
    set_config,
    set_number_of_components,
)
from chuk_tuning.config.models import EngineConfig

__all__ = [
    "EngineConfig",
    "load_config",
    "get_config",
    "set_config",
    "get_number_of_components",
    "set_number_of_components",
]
