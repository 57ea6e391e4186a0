"""Capability interface over a host type system.

The classifier never touches a concrete host API. Any type system that
can answer the questions below can be converted, by implementing
:class:`TypeIntrospector` as an adapter.

Handles are opaque to the classifier: a type handle ``T``, plus whatever
the host uses for property/parameter symbols and call signatures.
"""

from __future__ import annotations

import enum
from abc import ABC, abstractmethod
from collections.abc import Hashable, Sequence
from dataclasses import dataclass
from typing import Any


class TypeFlag(enum.Flag):
    """Capability flags of a type handle. Not mutually exclusive."""

    NONE = 0
    STRING = enum.auto()
    NUMBER = enum.auto()
    BOOLEAN = enum.auto()
    UNKNOWN = enum.auto()
    ANY = enum.auto()
    BIGINT = enum.auto()
    OBJECT = enum.auto()
    LITERAL = enum.auto()
    UNION = enum.auto()
    INTERSECTION = enum.auto()


@dataclass(frozen=True)
class BigIntLiteral:
    """Integer literal too large for a native number, as sign + base-10 digits."""

    negative: bool
    base10_value: str

    def __post_init__(self) -> None:
        if not (self.base10_value.isascii() and self.base10_value.isdecimal()):
            msg = f"base10_value must contain only ASCII digits, got {self.base10_value!r}"
            raise ValueError(msg)

    def to_int(self) -> int:
        """Reconstruct the exact signed integer."""
        value = int(self.base10_value)
        return -value if self.negative else value


type LiteralScalar = str | int | float | bool | BigIntLiteral


class TypeIntrospector[T](ABC):
    """Structural queries over type handles of type ``T``."""

    @abstractmethod
    def flags(self, type_: T) -> TypeFlag:
        """Capability flags of the type."""
        ...

    @abstractmethod
    def literal_value(self, type_: T) -> LiteralScalar:
        """Value of a literal type. Only called when LITERAL is set."""
        ...

    @abstractmethod
    def symbol_name(self, type_: T) -> str | None:
        """Name of the nominal declaration the type refers to, if any."""
        ...

    @abstractmethod
    def properties(self, type_: T) -> Sequence[Any]:
        """Member property symbols, own and inherited, in reported order."""
        ...

    @abstractmethod
    def property_name(self, symbol: Any) -> str:
        """Name of a property symbol."""
        ...

    @abstractmethod
    def is_optional(self, symbol: Any) -> bool:
        """Whether the property symbol is optional."""
        ...

    @abstractmethod
    def type_of_symbol(self, symbol: Any, location: Any) -> T:
        """Type of a property or parameter symbol as seen from ``location``."""
        ...

    @abstractmethod
    def call_signatures(self, type_: T) -> Sequence[Any]:
        """Call signatures of the type, in declaration order."""
        ...

    @abstractmethod
    def parameters(self, signature: Any) -> Sequence[Any]:
        """Parameter symbols of a signature, in order."""
        ...

    @abstractmethod
    def return_type(self, signature: Any) -> T:
        """Return type of a signature."""
        ...

    @abstractmethod
    def type_arguments(self, type_: T) -> Sequence[T]:
        """Type arguments of a generic reference."""
        ...

    @abstractmethod
    def is_tuple_reference(self, type_: T) -> bool:
        """Whether the type is a reference whose target is a tuple."""
        ...

    @abstractmethod
    def constituents(self, type_: T) -> Sequence[T]:
        """Member types of a union or intersection."""
        ...

    @abstractmethod
    def type_to_string(self, type_: T) -> str:
        """Printable description, used in error messages."""
        ...

    def type_id(self, type_: T) -> Hashable:
        """Stable identity of a type handle, used for cycle detection."""
        return id(type_)
