"""
Tests for the comma library.

Tests cover:
- Loading the built-in commas and temperaments
- Project overrides and invalid files
- Caching and invalidation
"""

import tempfile
from fractions import Fraction
from pathlib import Path

import pytest

from chuk_tuning.errors import ConstructionError
from chuk_tuning.library import CommaLibrary, CommaEntry, TemperamentEntry

LIBRARY_PATH = Path(__file__).parent.parent / "src" / "chuk_tuning" / "library"


class TestModels:
    """Tests for library entry models."""

    def test_comma_entry(self) -> None:
        """Commas have a ratio and an optional description."""
        entry = CommaEntry(name="syntonic", ratio="81/80")
        assert entry.description == ""

    def test_temperament_needs_commas(self) -> None:
        """A temperament names at least one comma."""
        with pytest.raises(ValueError):
            TemperamentEntry(name="empty", commas=[])


class TestCommaLibrary:
    """Tests for CommaLibrary."""

    def test_list_commas(self) -> None:
        """Lists the built-in commas."""
        with tempfile.TemporaryDirectory() as tmp:
            library = CommaLibrary(library_path=LIBRARY_PATH, project_path=Path(tmp))
            names = [c.name for c in library.list_commas()]
            assert "syntonic" in names
            assert "schisma" in names

    def test_default_library_path(self) -> None:
        """The package directory is the default library."""
        library = CommaLibrary()
        assert library.get_comma("syntonic") is not None

    def test_get_comma(self) -> None:
        """Commas come back as exact monzos."""
        library = CommaLibrary(library_path=LIBRARY_PATH)
        comma = library.get_comma("syntonic")
        assert comma is not None
        assert comma.to_fraction() == Fraction(81, 80)

    def test_get_nonexistent_comma(self) -> None:
        """Returns None for unknown commas."""
        library = CommaLibrary(library_path=LIBRARY_PATH)
        assert library.get_comma("nonexistent") is None

    def test_get_temperament(self) -> None:
        """Builds temperaments from their commas."""
        library = CommaLibrary(library_path=LIBRARY_PATH)
        meantone = library.get_temperament("meantone")
        assert meantone is not None
        assert meantone.canonical_mapping == [[1, 0, -4], [0, 1, 4]]

    def test_temperament_subgroup(self) -> None:
        """Subgroups in the definition are honored."""
        library = CommaLibrary(library_path=LIBRARY_PATH)
        slendric = library.get_temperament("slendric")
        assert slendric is not None
        assert slendric.basis.to_string() == "2.3.7"
        assert slendric.rank == 2

    def test_temperament_cached(self) -> None:
        """Temperaments are built once."""
        library = CommaLibrary(library_path=LIBRARY_PATH)
        assert library.get_temperament("meantone") is library.get_temperament("meantone")

    def test_get_nonexistent_temperament(self) -> None:
        """Returns None for unknown temperaments."""
        library = CommaLibrary(library_path=LIBRARY_PATH)
        assert library.get_temperament("nonexistent") is None

    def test_every_builtin_temperament_builds(self) -> None:
        """Every shipped definition resolves."""
        library = CommaLibrary(library_path=LIBRARY_PATH)
        for entry in library.list_temperaments():
            temperament = library.get_temperament(entry.name)
            assert temperament is not None
            for comma in temperament.comma_basis.value:
                assert temperament.temper(comma).total_cents() == pytest.approx(0, abs=1e-6)


class TestProjectFiles:
    """Tests for project definition files."""

    def test_project_definitions(self) -> None:
        """Project files add temperaments with fraction commas."""
        with tempfile.TemporaryDirectory() as tmp:
            project_path = Path(tmp)
            (project_path / "mine.yaml").write_text(
                "temperaments:\n"
                "  twelve:\n"
                "    commas: [syntonic, '128/125']\n"
            )
            library = CommaLibrary(library_path=LIBRARY_PATH, project_path=project_path)
            twelve = library.get_temperament("twelve")
            assert twelve is not None
            assert twelve.canonical_mapping == [[12, 19, 28]]

    def test_project_overrides_library(self) -> None:
        """Project entries replace library entries with the same name."""
        with tempfile.TemporaryDirectory() as tmp:
            project_path = Path(tmp)
            (project_path / "override.yaml").write_text(
                "commas:\n  syntonic:\n    ratio: '80/81'\n"
            )
            library = CommaLibrary(library_path=LIBRARY_PATH, project_path=project_path)
            comma = library.get_comma("syntonic")
            assert comma is not None
            assert comma.to_fraction() == Fraction(80, 81)

    def test_unknown_comma_reference(self) -> None:
        """Temperaments naming missing commas raise."""
        with tempfile.TemporaryDirectory() as tmp:
            project_path = Path(tmp)
            (project_path / "broken.yaml").write_text(
                "temperaments:\n  broken:\n    commas: [no_such_comma]\n"
            )
            library = CommaLibrary(library_path=LIBRARY_PATH, project_path=project_path)
            with pytest.raises(ConstructionError, match="no_such_comma"):
                library.get_temperament("broken")

    def test_invalid_file_skipped(self) -> None:
        """Files that fail to parse are skipped."""
        with tempfile.TemporaryDirectory() as tmp:
            project_path = Path(tmp)
            (project_path / "invalid.yaml").write_text("temperaments:\n  bad:\n    commas: []\n")
            library = CommaLibrary(library_path=LIBRARY_PATH, project_path=project_path)
            assert library.get_temperament("bad") is None
            assert library.get_temperament("meantone") is not None

    def test_invalidate(self) -> None:
        """Invalidation picks up new files."""
        with tempfile.TemporaryDirectory() as tmp:
            project_path = Path(tmp)
            library = CommaLibrary(library_path=LIBRARY_PATH, project_path=project_path)
            assert library.get_comma("new") is None
            (project_path / "new.yaml").write_text("commas:\n  new:\n    ratio: '225/224'\n")
            assert library.get_comma("new") is None
            library.invalidate()
            comma = library.get_comma("new")
            assert comma is not None
            assert comma.to_fraction() == Fraction(225, 224)
