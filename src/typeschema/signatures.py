"""Convert call signatures to function schema nodes."""

from __future__ import annotations

from collections.abc import Callable, Sequence
from typing import Any

from typeschema.introspect import TypeIntrospector
from typeschema.nodes import FunctionNode, SchemaNode, UnionNode


def from_signatures[T](
    signatures: Sequence[Any],
    location: Any,
    introspector: TypeIntrospector[T],
    classify: Callable[[T], SchemaNode],
) -> SchemaNode | None:
    """Convert call signatures to a function node or a union of them.

    Args:
        signatures: Host call signatures, in declaration order.
        location: Location hint used to resolve parameter types.
        introspector: Host type system adapter.
        classify: Converts a single type handle; recursion goes through it.

    Returns:
        None when there are no signatures, a single FunctionNode for one
        signature, otherwise a UnionNode of FunctionNodes in signature
        order. Overloads are kept as separate call shapes, never merged.

    """
    functions = [
        _from_signature(signature, location, introspector, classify)
        for signature in signatures
    ]

    if not functions:
        return None
    if len(functions) == 1:
        return functions[0]
    return UnionNode(tuple(functions))


def _from_signature[T](
    signature: Any,
    location: Any,
    introspector: TypeIntrospector[T],
    classify: Callable[[T], SchemaNode],
) -> FunctionNode:
    arguments = tuple(
        classify(introspector.type_of_symbol(parameter, location))
        for parameter in introspector.parameters(signature)
    )
    return FunctionNode(
        arguments=arguments,
        returns=classify(introspector.return_type(signature)),
    )
