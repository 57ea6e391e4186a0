"""Conversion options."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ConversionOptions(BaseModel):
    """Per-call limits for the type classifier."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_depth: int = Field(
        default=256,
        ge=1,
        description="Deepest nesting of classified types before giving up.",
    )
    detect_cycles: bool = Field(
        default=True,
        description="Fail as soon as a type is revisited on the active path.",
    )


DEFAULT_OPTIONS = ConversionOptions()
