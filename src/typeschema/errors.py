"""Error types for type conversion.

This module defines the exceptions raised while classifying a type,
along with the result types that let callers collect failures instead
of aborting at the first one.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, cast

if TYPE_CHECKING:
    from typeschema.nodes import SchemaNode


class ConversionError(Exception):
    """Base class for conversion failures.

    Carries the printable description of the offending type.
    """

    def __init__(self, message: str, description: str) -> None:
        super().__init__(message)
        self.message = message
        self.description = description


class UnsupportedTypeError(ConversionError):
    """Type matches none of the recognized shapes.

    Raised for the final fallback and for named types that are not one
    of the recognized generics. Not retryable: the input is outside what
    the classifier covers.
    """


class RecursionLimitExceeded(ConversionError):
    """Classification went deeper than allowed or revisited an active type."""

    def __init__(self, message: str, description: str, depth: int) -> None:
        super().__init__(message, description)
        self.depth = depth


class DescriptorError(ValueError):
    """Malformed descriptor graph data."""


@dataclass(frozen=True)
class ConversionResult:
    """Outcome of converting a single type.

    Exactly one of ``node`` and ``error`` is set.
    """

    node: SchemaNode | None = None
    error: ConversionError | None = None

    def __post_init__(self) -> None:
        if (self.node is None) == (self.error is None):
            msg = "ConversionResult needs exactly one of node and error"
            raise ValueError(msg)

    @property
    def success(self) -> bool:
        return self.error is None

    def unwrap(self) -> SchemaNode:
        """Return the node, or raise the stored error."""
        if self.error is not None:
            raise self.error
        return cast("SchemaNode", self.node)

    def format_error(self) -> str:
        """Format the failure for display."""
        if self.error is None:
            return "Conversion succeeded."
        return f"{type(self.error).__name__}: {self.error.message}"


@dataclass
class BatchConversionResult:
    """Outcome of converting several named types independently.

    Successful conversions land in ``nodes``; failures in ``errors``,
    both keyed by the caller-supplied name.
    """

    nodes: dict[str, SchemaNode] = field(default_factory=dict)
    errors: dict[str, ConversionError] = field(default_factory=dict)

    @property
    def success(self) -> bool:
        return not self.errors

    def format_errors(self) -> str:
        """Format all errors for display.

        Returns:
            A multi-line string with all errors formatted.

        """
        if self.success:
            return "Conversion passed."

        lines = [f"Conversion failed with {len(self.errors)} error(s):\n"]
        for i, (name, error) in enumerate(self.errors.items(), 1):
            lines.append(f"[{i}] {name}: {type(error).__name__}: {error.message}\n")

        return "\n".join(lines)
