"""
Configuration loading and the active engine configuration.

Configuration can come from:
1. Defaults baked into EngineConfig
2. A YAML file loaded with load_config
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml

from chuk_tuning.config.models import EngineConfig

logger = logging.getLogger(__name__)

_active_config = EngineConfig()


def load_config(path: Path | str) -> EngineConfig:
    """
    Load an engine configuration from a YAML file.

    Args:
        path: Path to a YAML mapping of EngineConfig fields

    Returns:
        Validated EngineConfig
    """
    path = Path(path)
    with open(path) as f:
        data: dict[str, Any] | None = yaml.safe_load(f)
    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ValueError(f"Configuration file must contain a mapping: {path}")
    config = EngineConfig.model_validate(data)
    logger.debug(f"Loaded engine configuration from {path}")
    return config


def get_config() -> EngineConfig:
    """Get the active engine configuration."""
    return _active_config


def set_config(config: EngineConfig) -> EngineConfig:
    """
    Replace the active engine configuration.

    Returns:
        The previously active configuration
    """
    global _active_config
    previous = _active_config
    _active_config = config
    return previous


def get_number_of_components() -> int:
    """Default number of prime components for new monzos."""
    return _active_config.number_of_components


def set_number_of_components(n: int) -> None:
    """Set the default number of prime components for new monzos."""
    set_config(EngineConfig(**{**_active_config.model_dump(), "number_of_components": n}))
