"""Schema node variants produced by the type classifier."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import ClassVar, dataclass_transform

type LiteralValue = str | int | float | bool


@dataclass(frozen=True)
@dataclass_transform(frozen_default=True)
class SchemaNode:
    """Base for schema nodes."""

    tag: ClassVar[str]
    registry: ClassVar[dict[str, type[SchemaNode]]] = {}

    def __init_subclass__(cls, tag: str | None = None) -> None:
        """Register node subclass with automatic tag derivation."""
        dataclass(frozen=True)(cls)
        cls.tag = tag if tag is not None else cls.__name__.lower().removesuffix("node")

        if (existing := SchemaNode.registry.get(cls.tag)) and existing is not cls:
            msg = (
                f"Tag '{cls.tag}' already registered to {existing}. "
                "Choose a different tag."
            )
            raise ValueError(msg)

        SchemaNode.registry[cls.tag] = cls


def _check_children(tag: str, children: tuple[object, ...]) -> None:
    for child in children:
        if not isinstance(child, SchemaNode):
            msg = f"{tag} children must be schema nodes, got {type(child).__name__}"
            raise TypeError(msg)


class StringNode(SchemaNode, tag="string"):
    """String primitive."""


class NumberNode(SchemaNode, tag="number"):
    """Number primitive."""


class BooleanNode(SchemaNode, tag="boolean"):
    """Boolean primitive."""


class BigIntNode(SchemaNode, tag="bigint"):
    """Arbitrary precision integer primitive."""


class AnyNode(SchemaNode, tag="any"):
    """Accepts anything, unchecked."""


class UnknownNode(SchemaNode, tag="unknown"):
    """Accepts anything, must be narrowed before use."""


class DateNode(SchemaNode, tag="date"):
    """Calendar date and time."""


class LiteralNode(SchemaNode, tag="literal"):
    """Exactly one value: "a" → LiteralNode(value="a")."""

    value: LiteralValue

    def __post_init__(self) -> None:
        if not isinstance(self.value, str | int | float | bool):
            msg = f"Literal values must be str, int, float or bool, got {type(self.value)}"
            raise TypeError(msg)

    # True, 1 and 1.0 are distinct literals even though Python equates them.
    def __eq__(self, other: object) -> bool:
        if not isinstance(other, LiteralNode):
            return NotImplemented
        return (type(self.value), self.value) == (type(other.value), other.value)

    def __hash__(self) -> int:
        return hash((type(self.value), self.value))


class ArrayNode(SchemaNode, tag="array"):
    """Array[string] → ArrayNode(element=StringNode())."""

    element: SchemaNode

    def __post_init__(self) -> None:
        _check_children(self.tag, (self.element,))


class SetNode(SchemaNode, tag="set"):
    """Set[number] → SetNode(element=NumberNode())."""

    element: SchemaNode

    def __post_init__(self) -> None:
        _check_children(self.tag, (self.element,))


class MapNode(SchemaNode, tag="map"):
    """Map[string, number] → MapNode(key=StringNode(), value=NumberNode())."""

    key: SchemaNode
    value: SchemaNode

    def __post_init__(self) -> None:
        _check_children(self.tag, (self.key, self.value))


class RecordNode(SchemaNode, tag="record"):
    """Record[string, number] → RecordNode(key=StringNode(), value=NumberNode())."""

    key: SchemaNode
    value: SchemaNode

    def __post_init__(self) -> None:
        _check_children(self.tag, (self.key, self.value))


class OptionalNode(SchemaNode, tag="optional"):
    """Wraps exactly one node whose value may be absent."""

    inner: SchemaNode

    def __post_init__(self) -> None:
        _check_children(self.tag, (self.inner,))


class TupleNode(SchemaNode, tag="tuple"):
    """Fixed-length positional elements, some possibly optional."""

    elements: tuple[SchemaNode, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "elements", tuple(self.elements))
        if not self.elements:
            msg = "tuple node must have at least one element"
            raise ValueError(msg)
        _check_children(self.tag, self.elements)


class ObjectNode(SchemaNode, tag="object"):
    """Named properties in declaration order.

    Accepts a mapping or a sequence of ``(name, node)`` pairs and stores
    the pairs as a tuple so the node stays hashable.
    """

    properties: tuple[tuple[str, SchemaNode], ...] = field(default=())

    def __post_init__(self) -> None:
        pairs = self.properties
        if isinstance(pairs, Mapping):
            pairs = pairs.items()
        pairs = tuple((name, node) for name, node in pairs)

        seen: set[str] = set()
        for name, _ in pairs:
            if name in seen:
                msg = f"Duplicate object property: {name!r}"
                raise ValueError(msg)
            seen.add(name)

        _check_children(self.tag, tuple(node for _, node in pairs))
        object.__setattr__(self, "properties", pairs)

    @property
    def shape(self) -> dict[str, SchemaNode]:
        """Properties as an ordered name → node dict."""
        return dict(self.properties)


class FunctionNode(SchemaNode, tag="function"):
    """One call shape: positional argument nodes and a return node."""

    arguments: tuple[SchemaNode, ...]
    returns: SchemaNode

    def __post_init__(self) -> None:
        object.__setattr__(self, "arguments", tuple(self.arguments))
        _check_children(self.tag, (*self.arguments, self.returns))


class UnionNode(SchemaNode, tag="union"):
    """Choice between options: "x" | "y" → UnionNode(options=(...))."""

    options: tuple[SchemaNode, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "options", tuple(self.options))
        if not self.options:
            msg = "union node must have at least one option"
            raise ValueError(msg)
        _check_children(self.tag, self.options)


class IntersectionNode(SchemaNode, tag="intersection"):
    """Value must satisfy every member."""

    members: tuple[SchemaNode, ...]

    def __post_init__(self) -> None:
        object.__setattr__(self, "members", tuple(self.members))
        if not self.members:
            msg = "intersection node must have at least one member"
            raise ValueError(msg)
        _check_children(self.tag, self.members)


def format_node(node: SchemaNode) -> str:
    """Render a schema node as a compact, human-readable string.

    Examples:
        >>> format_node(ArrayNode(StringNode()))
        'string[]'
        >>> format_node(ObjectNode({"a": StringNode(), "b": OptionalNode(NumberNode())}))
        '{ a: string, b?: number }'

    """
    match node:
        case LiteralNode(value=bool() as value):
            return "true" if value else "false"
        case LiteralNode(value=value):
            return repr(value) if isinstance(value, str) else str(value)
        case ArrayNode(element=element):
            return f"{_wrap(element)}[]"
        case SetNode(element=element):
            return f"Set<{format_node(element)}>"
        case MapNode(key=key, value=value):
            return f"Map<{format_node(key)}, {format_node(value)}>"
        case RecordNode(key=key, value=value):
            return f"Record<{format_node(key)}, {format_node(value)}>"
        case OptionalNode(inner=inner):
            return f"{_wrap(inner)}?"
        case TupleNode(elements=elements):
            return f"[{', '.join(format_node(e) for e in elements)}]"
        case ObjectNode(properties=()):
            return "{}"
        case ObjectNode(properties=properties):
            return "{ " + ", ".join(_format_property(n, p) for n, p in properties) + " }"
        case FunctionNode(arguments=arguments, returns=returns):
            args = ", ".join(format_node(a) for a in arguments)
            return f"({args}) => {format_node(returns)}"
        case UnionNode(options=options):
            return " | ".join(_wrap(o) for o in options)
        case IntersectionNode(members=members):
            return " & ".join(_wrap(m) for m in members)
        case _:
            return node.tag


def _format_property(name: str, node: SchemaNode) -> str:
    if isinstance(node, OptionalNode):
        return f"{name}?: {format_node(node.inner)}"
    return f"{name}: {format_node(node)}"


def _wrap(node: SchemaNode) -> str:
    text = format_node(node)
    if isinstance(node, UnionNode | IntersectionNode | FunctionNode):
        return f"({text})"
    return text
