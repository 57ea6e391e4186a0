"""In-memory type descriptors and their introspector.

A :class:`TypeDescriptor` graph is a host-neutral snapshot of a type
system: whatever produced it (a compiler plugin, a dump script, a test)
describes each type by its flags and structure, and
:class:`DescriptorIntrospector` answers the classifier's questions from
it. Descriptors compare by identity and may form cycles, the same way
recursive declarations do in a real checker.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from typing import Any

from typeschema.errors import DescriptorError
from typeschema.introspect import (
    BigIntLiteral,
    LiteralScalar,
    TypeFlag,
    TypeIntrospector,
)

# Depth of nested types spelled out by DescriptorIntrospector.type_to_string
_DESCRIBE_DEPTH = 3


@dataclass(eq=False)
class PropertyDescriptor:
    """Member property or call parameter."""

    name: str
    type: TypeDescriptor
    optional: bool = False


@dataclass(eq=False)
class SignatureDescriptor:
    """Call signature."""

    parameters: list[PropertyDescriptor]
    returns: TypeDescriptor


@dataclass(eq=False)
class TypeDescriptor:
    """One type of the described type system.

    Attributes:
        flags: Capability flags.
        value: Literal value, when LITERAL is set.
        symbol: Name of the nominal declaration referenced, if any.
        properties: Members in reported order.
        signatures: Call signatures in declaration order.
        type_arguments: Arguments of a generic reference.
        tuple: True when this is a reference to a tuple type.
        types: Constituents of a union or intersection.
        name: Display name used in diagnostics.

    """

    flags: TypeFlag = TypeFlag.NONE
    value: LiteralScalar | None = None
    symbol: str | None = None
    properties: list[PropertyDescriptor] = field(default_factory=list)
    signatures: list[SignatureDescriptor] = field(default_factory=list)
    type_arguments: list[TypeDescriptor] = field(default_factory=list)
    tuple: bool = False
    types: list[TypeDescriptor] = field(default_factory=list)
    name: str | None = None


class DescriptorIntrospector(TypeIntrospector[TypeDescriptor]):
    """Introspector over :class:`TypeDescriptor` graphs.

    Descriptors hold already-resolved types, so the location hint is
    accepted and ignored.
    """

    def flags(self, type_: TypeDescriptor) -> TypeFlag:
        return type_.flags

    def literal_value(self, type_: TypeDescriptor) -> LiteralScalar:
        if type_.value is None:
            msg = f"Literal type has no value: {self.type_to_string(type_)}"
            raise DescriptorError(msg)
        return type_.value

    def symbol_name(self, type_: TypeDescriptor) -> str | None:
        return type_.symbol

    def properties(self, type_: TypeDescriptor) -> Sequence[PropertyDescriptor]:
        return type_.properties

    def property_name(self, symbol: PropertyDescriptor) -> str:
        return symbol.name

    def is_optional(self, symbol: PropertyDescriptor) -> bool:
        return symbol.optional

    def type_of_symbol(self, symbol: PropertyDescriptor, location: Any) -> TypeDescriptor:
        return symbol.type

    def call_signatures(self, type_: TypeDescriptor) -> Sequence[SignatureDescriptor]:
        return type_.signatures

    def parameters(self, signature: SignatureDescriptor) -> Sequence[PropertyDescriptor]:
        return signature.parameters

    def return_type(self, signature: SignatureDescriptor) -> TypeDescriptor:
        return signature.returns

    def type_arguments(self, type_: TypeDescriptor) -> Sequence[TypeDescriptor]:
        return type_.type_arguments

    def is_tuple_reference(self, type_: TypeDescriptor) -> bool:
        return type_.tuple

    def constituents(self, type_: TypeDescriptor) -> Sequence[TypeDescriptor]:
        return type_.types

    def type_to_string(self, type_: TypeDescriptor) -> str:
        return _describe(type_, _DESCRIBE_DEPTH)


def _describe(type_: TypeDescriptor, depth: int) -> str:
    """Best-effort rendering that stays finite on cyclic graphs."""
    if type_.name is not None:
        return type_.name
    if depth == 0:
        return "..."

    if TypeFlag.LITERAL in type_.flags and type_.value is not None:
        value = type_.value
        if isinstance(value, BigIntLiteral):
            return f"{value.to_int()}n"
        if isinstance(value, bool):
            return "true" if value else "false"
        return repr(value) if isinstance(value, str) else str(value)

    if type_.symbol is not None:
        if not type_.type_arguments:
            return type_.symbol
        args = ", ".join(_describe(a, depth - 1) for a in type_.type_arguments)
        return f"{type_.symbol}<{args}>"

    if TypeFlag.UNION in type_.flags and type_.types:
        return " | ".join(_describe(t, depth - 1) for t in type_.types)
    if TypeFlag.INTERSECTION in type_.flags and type_.types:
        return " & ".join(_describe(t, depth - 1) for t in type_.types)

    if TypeFlag.OBJECT in type_.flags:
        members = ", ".join(p.name for p in type_.properties)
        return f"{{ {members} }}" if members else "{}"

    names = [flag.name.lower() for flag in type_.flags if flag.name]
    return " & ".join(names) if names else "<untyped>"


def load_descriptors(data: Mapping[str, Any]) -> dict[str, TypeDescriptor]:
    """Build a descriptor graph from a JSON-compatible dump.

    The dump lists types by id under ``"types"``; references between
    types are by id, so recursive types load into cyclic graphs::

        {"types": {
            "node": {"flags": ["OBJECT"], "name": "Node",
                     "properties": [{"name": "next", "type": "node",
                                     "optional": true}]}
        }}

    Returns:
        Descriptors keyed by id.

    Raises:
        DescriptorError: Unknown flag names, dangling ids or bad shapes.

    """
    raw_types = data.get("types")
    if not isinstance(raw_types, Mapping):
        msg = "descriptor dump must contain a 'types' mapping"
        raise DescriptorError(msg)

    # First pass allocates every descriptor so references can point forward.
    descriptors = {type_id: TypeDescriptor() for type_id in raw_types}

    def resolve(type_id: Any, context: str) -> TypeDescriptor:
        if type_id not in descriptors:
            msg = f"{context} references unknown type id {type_id!r}"
            raise DescriptorError(msg)
        return descriptors[type_id]

    def load_property(raw: Mapping[str, Any], context: str) -> PropertyDescriptor:
        if "name" not in raw or "type" not in raw:
            msg = f"{context} must have 'name' and 'type'"
            raise DescriptorError(msg)
        return PropertyDescriptor(
            name=str(raw["name"]),
            type=resolve(raw["type"], context),
            optional=bool(raw.get("optional", False)),
        )

    for type_id, raw in raw_types.items():
        if not isinstance(raw, Mapping):
            msg = f"type {type_id!r} must be a mapping, got {type(raw).__name__}"
            raise DescriptorError(msg)

        descriptor = descriptors[type_id]
        descriptor.flags = _load_flags(raw.get("flags", ()), type_id)
        descriptor.value = _load_value(raw, type_id)
        descriptor.symbol = raw.get("symbol")
        descriptor.name = raw.get("name")
        descriptor.tuple = bool(raw.get("tuple", False))
        descriptor.properties = [
            load_property(p, f"property {i} of {type_id!r}")
            for i, p in enumerate(raw.get("properties", ()))
        ]
        descriptor.signatures = [
            SignatureDescriptor(
                parameters=[
                    load_property(p, f"parameter {j} of signature {i} of {type_id!r}")
                    for j, p in enumerate(s.get("parameters", ()))
                ],
                returns=resolve(s.get("returns"), f"signature {i} of {type_id!r}"),
            )
            for i, s in enumerate(raw.get("signatures", ()))
        ]
        descriptor.type_arguments = [
            resolve(a, f"type argument of {type_id!r}")
            for a in raw.get("typeArguments", ())
        ]
        descriptor.types = [
            resolve(t, f"constituent of {type_id!r}") for t in raw.get("types", ())
        ]

    return descriptors


def _load_flags(names: Sequence[str], type_id: Any) -> TypeFlag:
    flags = TypeFlag.NONE
    for name in names:
        try:
            flags |= TypeFlag[str(name).upper()]
        except KeyError:
            msg = f"type {type_id!r} has unknown flag {name!r}"
            raise DescriptorError(msg) from None
    return flags


def _load_value(raw: Mapping[str, Any], type_id: Any) -> LiteralScalar | None:
    if (bigint := raw.get("bigint")) is not None:
        try:
            return BigIntLiteral(
                negative=bool(bigint.get("negative", False)),
                base10_value=str(bigint["base10Value"]),
            )
        except (KeyError, ValueError, AttributeError) as error:
            msg = f"type {type_id!r} has a malformed bigint literal: {error}"
            raise DescriptorError(msg) from error

    value = raw.get("value")
    if value is not None and not isinstance(value, str | int | float | bool):
        msg = f"type {type_id!r} literal value must be a scalar, got {type(value).__name__}"
        raise DescriptorError(msg)
    return value
