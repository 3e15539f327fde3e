"""
Comma library loader - discovers and loads named commas and temperaments.

Entries can come from:
1. Built-in library (commas.yaml shipped with the package)
2. Project files (*.yaml in a user directory)
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from chuk_tuning.constants import ErrorMessages
from chuk_tuning.core.monzo import TimeMonzo
from chuk_tuning.errors import ConstructionError
from chuk_tuning.library.models import CommaCatalog, CommaEntry, TemperamentEntry
from chuk_tuning.temper.basis import ValBasis
from chuk_tuning.temper.temperament import Temperament

logger = logging.getLogger(__name__)


class CommaLibrary:
    """
    Named commas and temperaments.

    Definitions are loaded from YAML files in the library and project
    directories. Project entries override library entries with the same name.
    """

    def __init__(
        self,
        library_path: Path | None = None,
        project_path: Path | None = None,
    ):
        """
        Initialize the comma library.

        Args:
            library_path: Directory of built-in definitions
            project_path: Directory of project definitions
        """
        self.library_path = library_path or Path(__file__).parent
        self.project_path = project_path
        self._catalog: CommaCatalog | None = None
        self._cache: dict[str, Temperament] = {}

    @property
    def catalog(self) -> CommaCatalog:
        """Merged catalog of every definition file (loaded once)."""
        if self._catalog is None:
            merged = CommaCatalog()
            for directory in (self.library_path, self.project_path):
                if directory is None or not directory.exists():
                    continue
                for path in sorted(directory.glob("*.yaml")):
                    catalog = self._load_file(path)
                    if catalog:
                        merged.commas.update(catalog.commas)
                        merged.temperaments.update(catalog.temperaments)
            self._catalog = merged
        return self._catalog

    def list_commas(self) -> list[CommaEntry]:
        """List all available commas."""
        return list(self.catalog.commas.values())

    def list_temperaments(self) -> list[TemperamentEntry]:
        """List all available temperaments."""
        return list(self.catalog.temperaments.values())

    def get_comma(self, name: str) -> TimeMonzo | None:
        """
        Get a comma by name.

        Args:
            name: Comma name

        Returns:
            The comma as an exact monzo if found, None otherwise
        """
        entry = self.catalog.commas.get(name)
        if entry is None:
            return None
        return TimeMonzo.from_fraction(entry.ratio)

    def get_temperament(self, name: str) -> Temperament | None:
        """
        Get a temperament by name.

        Args:
            name: Temperament name

        Returns:
            Temperament if found, None otherwise

        Raises:
            ConstructionError: If the definition names an unknown comma
        """
        if name in self._cache:
            return self._cache[name]
        entry = self.catalog.temperaments.get(name)
        if entry is None:
            return None
        commas = [self._resolve_comma(comma) for comma in entry.commas]
        basis = None
        if entry.subgroup:
            basis = ValBasis.from_fractions(entry.subgroup.split("."))
        temperament = Temperament.from_commas(commas, basis)
        self._cache[name] = temperament
        return temperament

    def invalidate(self) -> None:
        """Forget loaded definitions so files are read again."""
        self._catalog = None
        self._cache.clear()

    def _resolve_comma(self, reference: str) -> TimeMonzo:
        comma = self.get_comma(reference)
        if comma is not None:
            return comma
        if "/" in reference or reference.isdigit():
            return TimeMonzo.from_fraction(reference)
        raise ConstructionError(ErrorMessages.UNKNOWN_COMMA.format(name=reference))

    def _load_file(self, path: Path) -> CommaCatalog | None:
        """Load a catalog from a YAML file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f)
            return self._parse_catalog(data or {})
        except (OSError, yaml.YAMLError, ValidationError) as e:
            logger.warning(f"Skipping comma library file {path}: {e}")
            return None

    def _parse_catalog(self, data: dict[str, Any]) -> CommaCatalog:
        """Parse a catalog from YAML data."""
        commas = {
            name: CommaEntry(name=name, **fields)
            for name, fields in (data.get("commas") or {}).items()
        }
        temperaments = {
            name: TemperamentEntry(name=name, **fields)
            for name, fields in (data.get("temperaments") or {}).items()
        }
        return CommaCatalog(commas=commas, temperaments=temperaments)
