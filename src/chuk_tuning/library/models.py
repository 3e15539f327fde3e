"""
Comma library models - named commas and the temperaments built from them.
"""

from __future__ import annotations

from pydantic import BaseModel, Field


class CommaEntry(BaseModel):
    """A named comma."""

    name: str = Field(..., description="Comma name (e.g. 'syntonic')")
    ratio: str = Field(..., description="Comma as a fraction string (e.g. '81/80')")
    description: str = Field(default="", description="Human-readable description")

    model_config = {"frozen": True}


class TemperamentEntry(BaseModel):
    """A named temperament defined by the commas it tempers out."""

    name: str = Field(..., description="Temperament name (e.g. 'meantone')")
    commas: list[str] = Field(
        ...,
        min_length=1,
        description="Comma names from the library, or fraction strings",
    )
    subgroup: str | None = Field(
        default=None,
        description="Dotted subgroup such as '2.3.7' (inferred from the commas when omitted)",
    )
    description: str = Field(default="", description="Human-readable description")

    model_config = {"frozen": True}


class CommaCatalog(BaseModel):
    """Contents of one library file."""

    commas: dict[str, CommaEntry] = Field(default_factory=dict)
    temperaments: dict[str, TemperamentEntry] = Field(default_factory=dict)
