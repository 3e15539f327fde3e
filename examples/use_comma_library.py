#!/usr/bin/env python3
"""
Example: Using the Comma Library.

This demonstrates how named commas define regular temperaments. Each
temperament is built from the commas it makes vanish, then tuned so the
remaining intervals stay as close to just intonation as possible.

Usage:
    python examples/use_comma_library.py
"""

import tempfile
from fractions import Fraction
from pathlib import Path

from chuk_tuning import CommaLibrary, TimeMonzo

RATIOS = ["3/2", "5/4", "6/5", "7/4"]


def main() -> None:
    """Demonstrate the comma library."""
    print("CHUK Tuning Comma Library Demo")
    print("=" * 40)
    print()

    library_path = Path(__file__).parent.parent / "src/chuk_tuning/library"

    with tempfile.TemporaryDirectory() as tmp:
        library = CommaLibrary(library_path=library_path, project_path=Path(tmp))

        print("Available commas:")
        for entry in library.list_commas():
            comma = TimeMonzo.from_fraction(entry.ratio)
            print(f"  {entry.name}: {entry.ratio} ({comma.total_cents():.3f} cents)")
        print()

        print("Available temperaments:")
        for entry in library.list_temperaments():
            temperament = library.get_temperament(entry.name)
            if temperament is None:
                continue
            print(f"  {entry.name}: {entry.description}")
            print(f"    {temperament}")
            print(f"    Rank {temperament.rank}, TE error {temperament.error_te():.4f}")
        print()

        meantone = library.get_temperament("meantone")
        if not meantone:
            print("Failed to load meantone")
            return

        print("Meantone generators:")
        for generator, cents in zip(meantone.preimage, meantone.generators()):
            print(f"  {generator.to_fraction()}: {cents:.3f} cents")
        print()

        print("Tempered ratios:")
        for ratio in RATIOS:
            monzo = TimeMonzo.from_fraction(Fraction(ratio))
            tempered = meantone.temper(monzo)
            print(
                f"  {ratio}: {monzo.total_cents():.3f} -> {tempered.total_cents():.3f} cents"
            )
        print()

        print("Supporting equal temperaments:")
        for val in meantone.supporting_gpvs(6):
            print(f"  {val.divisions}: {val} (error {val.error_te():.3f})")
        print()

        # Project files add to (or override) the library
        (Path(tmp) / "extra.yaml").write_text(
            "temperaments:\n"
            "  twelve:\n"
            "    commas: [syntonic, diesis]\n"
            "    description: \"12 equal as a rank one temperament\"\n"
        )
        library.invalidate()
        twelve = library.get_temperament("twelve")
        if twelve:
            print(f"Project temperament: {twelve}")
            print(f"  Best val: {twelve.tune()}")


if __name__ == "__main__":
    main()
