"""Recursive classification of host types into schema nodes.

A type handle is matched against an ordered rule table; the first rule
whose predicate holds builds the node, recursing through the same
:class:`Classifier` for every constituent type. Flags are not mutually
exclusive (a string literal is both STRING-like and LITERAL in some
hosts), so the table order is part of the contract:

    string, number, boolean, unknown, literal, any, bigint, object,
    named generic, union, intersection

Anything left over raises :class:`UnsupportedTypeError`.
"""

from __future__ import annotations

from collections.abc import Callable, Hashable, Mapping, Sequence
from typing import Any

import structlog

from typeschema.config import DEFAULT_OPTIONS, ConversionOptions
from typeschema.errors import (
    BatchConversionResult,
    ConversionError,
    ConversionResult,
    RecursionLimitExceeded,
    UnsupportedTypeError,
)
from typeschema.introspect import BigIntLiteral, TypeFlag, TypeIntrospector
from typeschema.nodes import (
    AnyNode,
    ArrayNode,
    BigIntNode,
    BooleanNode,
    DateNode,
    IntersectionNode,
    LiteralNode,
    MapNode,
    NumberNode,
    ObjectNode,
    OptionalNode,
    RecordNode,
    SchemaNode,
    SetNode,
    StringNode,
    TupleNode,
    UnionNode,
    UnknownNode,
)
from typeschema.signatures import from_signatures

log = structlog.get_logger()

# Tuple references expose their arity as a synthetic member.
_TUPLE_LENGTH_PROPERTY = "length"


class Classifier[T]:
    """Converts type handles of one host to schema nodes.

    One instance serves one top-level conversion: it tracks the types on
    the active path and the current depth, so it must not be shared
    between threads.
    """

    def __init__(
        self,
        introspector: TypeIntrospector[T],
        location: Any,
        options: ConversionOptions | None = None,
    ) -> None:
        self.introspector = introspector
        self.location = location
        self.options = options or DEFAULT_OPTIONS
        self._active: set[Hashable] = set()
        self._depth = 0

    def classify(self, type_: T) -> SchemaNode:
        """Convert a type handle, guarding against cycles and runaway depth."""
        if self._depth >= self.options.max_depth:
            description = self.introspector.type_to_string(type_)
            msg = (
                f"classification depth exceeded {self.options.max_depth}: "
                f"{description}"
            )
            raise RecursionLimitExceeded(msg, description, self._depth)

        key = self.introspector.type_id(type_) if self.options.detect_cycles else None
        if key is not None:
            if key in self._active:
                description = self.introspector.type_to_string(type_)
                log.warning("typeschema.cycle", type=description, depth=self._depth)
                msg = f"cyclic type reference: {description}"
                raise RecursionLimitExceeded(msg, description, self._depth)
            self._active.add(key)

        self._depth += 1
        try:
            return self._dispatch(type_)
        finally:
            self._depth -= 1
            if key is not None:
                self._active.discard(key)

    def _dispatch(self, type_: T) -> SchemaNode:
        flags = self.introspector.flags(type_)
        for predicate, handler in _RULES:
            if predicate(self, type_, flags):
                return handler(self, type_)

        description = self.introspector.type_to_string(type_)
        msg = f"unknown type: {description}"
        raise UnsupportedTypeError(msg, description)

    def _rejected(self, type_: T, error: Exception) -> UnsupportedTypeError:
        """Wrap a node or host failure so it stays within ConversionError."""
        description = self.introspector.type_to_string(type_)
        return UnsupportedTypeError(f"{error}: {description}", description)

    def _literal(self, type_: T) -> SchemaNode:
        try:
            value = self.introspector.literal_value(type_)
            if isinstance(value, BigIntLiteral):
                return LiteralNode(value.to_int())
            return LiteralNode(value)
        except (TypeError, ValueError) as error:
            raise self._rejected(type_, error) from error

    def _object(self, type_: T) -> SchemaNode:
        if self.introspector.is_tuple_reference(type_):
            return self._tuple(type_)

        properties = tuple(
            (self.introspector.property_name(symbol), self._property(symbol))
            for symbol in self.introspector.properties(type_)
        )
        function = from_signatures(
            self.introspector.call_signatures(type_),
            self.location,
            self.introspector,
            self.classify,
        )

        try:
            shape = ObjectNode(properties)
        except ValueError as error:
            raise self._rejected(type_, error) from error

        if function is None:
            return shape
        if not properties:
            return function
        return IntersectionNode((function, shape))

    def _tuple(self, type_: T) -> TupleNode:
        elements = tuple(
            self._property(symbol)
            for symbol in self.introspector.properties(type_)
            if self.introspector.property_name(symbol) != _TUPLE_LENGTH_PROPERTY
        )
        try:
            return TupleNode(elements)
        except ValueError as error:
            raise self._rejected(type_, error) from error

    def _property(self, symbol: Any) -> SchemaNode:
        node = self.classify(self.introspector.type_of_symbol(symbol, self.location))
        if self.introspector.is_optional(symbol):
            return OptionalNode(node)
        return node

    def _named(self, type_: T) -> SchemaNode:
        name = self.introspector.symbol_name(type_)
        builder = _NAMED_GENERICS.get(name) if name is not None else None
        if name is None or builder is None:
            msg = f"unknown named type: {name}"
            raise UnsupportedTypeError(msg, self.introspector.type_to_string(type_))
        return builder(self, name, type_)

    def _type_argument(self, name: str, type_: T, index: int) -> SchemaNode:
        arguments = self.introspector.type_arguments(type_)
        if index >= len(arguments):
            description = self.introspector.type_to_string(type_)
            msg = (
                f"{name} expects at least {index + 1} type argument(s) "
                f"but got {len(arguments)}: {description}"
            )
            raise UnsupportedTypeError(msg, description)
        return self.classify(arguments[index])

    def _union(self, type_: T) -> SchemaNode:
        options = tuple(self._each(self.introspector.constituents(type_)))
        try:
            return UnionNode(options)
        except ValueError as error:
            raise self._rejected(type_, error) from error

    def _intersection(self, type_: T) -> SchemaNode:
        members = tuple(self._each(self.introspector.constituents(type_)))
        try:
            return IntersectionNode(members)
        except ValueError as error:
            raise self._rejected(type_, error) from error

    def _each(self, types: Sequence[T]) -> list[SchemaNode]:
        return [self.classify(member) for member in types]


type _Predicate = Callable[[Classifier[Any], Any, TypeFlag], bool]
type _Handler = Callable[[Classifier[Any], Any], SchemaNode]
type _NamedBuilder = Callable[[Classifier[Any], str, Any], SchemaNode]


def _flag(flag: TypeFlag) -> _Predicate:
    return lambda _classifier, _type, flags: flag in flags


def _has_symbol(classifier: Classifier[Any], type_: Any, _flags: TypeFlag) -> bool:
    return classifier.introspector.symbol_name(type_) is not None


_RULES: tuple[tuple[_Predicate, _Handler], ...] = (
    (_flag(TypeFlag.STRING), lambda _c, _t: StringNode()),
    (_flag(TypeFlag.NUMBER), lambda _c, _t: NumberNode()),
    (_flag(TypeFlag.BOOLEAN), lambda _c, _t: BooleanNode()),
    (_flag(TypeFlag.UNKNOWN), lambda _c, _t: UnknownNode()),
    (_flag(TypeFlag.LITERAL), Classifier._literal),
    (_flag(TypeFlag.ANY), lambda _c, _t: AnyNode()),
    (_flag(TypeFlag.BIGINT), lambda _c, _t: BigIntNode()),
    (_flag(TypeFlag.OBJECT), Classifier._object),
    (_has_symbol, Classifier._named),
    (_flag(TypeFlag.UNION), Classifier._union),
    (_flag(TypeFlag.INTERSECTION), Classifier._intersection),
)


def _array(c: Classifier[Any], name: str, type_: Any) -> SchemaNode:
    return ArrayNode(c._type_argument(name, type_, 0))


def _set(c: Classifier[Any], name: str, type_: Any) -> SchemaNode:
    return SetNode(c._type_argument(name, type_, 0))


def _record(c: Classifier[Any], name: str, type_: Any) -> SchemaNode:
    return RecordNode(c._type_argument(name, type_, 0), c._type_argument(name, type_, 1))


def _map(c: Classifier[Any], name: str, type_: Any) -> SchemaNode:
    return MapNode(c._type_argument(name, type_, 0), c._type_argument(name, type_, 1))


_NAMED_GENERICS: dict[str, _NamedBuilder] = {
    "Array": _array,
    "ReadonlyArray": _array,
    "Date": lambda _c, _name, _type: DateNode(),
    "Set": _set,
    "Record": _record,
    "Map": _map,
}


def from_type[T](
    type_: T,
    location: Any,
    introspector: TypeIntrospector[T],
    options: ConversionOptions | None = None,
) -> SchemaNode:
    """Convert a host type to a schema node.

    Args:
        type_: Host type handle.
        location: Location hint for resolving property and parameter types.
        introspector: Adapter over the host type system.
        options: Depth and cycle limits; defaults when omitted.

    Returns:
        A freshly built schema node tree.

    Raises:
        UnsupportedTypeError: Some type in the tree has no schema equivalent.
        RecursionLimitExceeded: The type graph is cyclic or too deep.

    """
    return Classifier(introspector, location, options).classify(type_)


def try_from_type[T](
    type_: T,
    location: Any,
    introspector: TypeIntrospector[T],
    options: ConversionOptions | None = None,
) -> ConversionResult:
    """Like :func:`from_type`, but report failure as a result value."""
    try:
        node = from_type(type_, location, introspector, options)
    except ConversionError as error:
        log.debug(
            "typeschema.conversion_failed",
            error=type(error).__name__,
            type=error.description,
        )
        return ConversionResult(error=error)
    return ConversionResult(node=node)


def from_types[T](
    types: Mapping[str, T],
    location: Any,
    introspector: TypeIntrospector[T],
    options: ConversionOptions | None = None,
) -> BatchConversionResult:
    """Convert several named types, collecting every failure.

    Each type is converted independently; one failing type does not stop
    the others.
    """
    result = BatchConversionResult()
    for name, type_ in types.items():
        outcome = try_from_type(type_, location, introspector, options)
        if outcome.error is not None:
            result.errors[name] = outcome.error
        else:
            result.nodes[name] = outcome.unwrap()

    log.debug(
        "typeschema.batch",
        converted=len(result.nodes),
        failed=len(result.errors),
    )
    return result
