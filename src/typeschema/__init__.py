"""typeschema - Convert host type-system types to portable schema nodes."""

from typeschema.classify import (
    Classifier,
    from_type,
    from_types,
    try_from_type,
)
from typeschema.config import ConversionOptions
from typeschema.descriptors import (
    DescriptorIntrospector,
    PropertyDescriptor,
    SignatureDescriptor,
    TypeDescriptor,
    load_descriptors,
)
from typeschema.errors import (
    BatchConversionResult,
    ConversionError,
    ConversionResult,
    DescriptorError,
    RecursionLimitExceeded,
    UnsupportedTypeError,
)
from typeschema.introspect import (
    BigIntLiteral,
    TypeFlag,
    TypeIntrospector,
)
from typeschema.nodes import (
    AnyNode,
    ArrayNode,
    BigIntNode,
    BooleanNode,
    DateNode,
    FunctionNode,
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
    format_node,
)
from typeschema.signatures import from_signatures

__all__ = [
    # Schema nodes
    "AnyNode",
    "ArrayNode",
    # Results
    "BatchConversionResult",
    # Introspection
    "BigIntLiteral",
    "BigIntNode",
    "BooleanNode",
    # Conversion
    "Classifier",
    # Errors
    "ConversionError",
    # Configuration
    "ConversionOptions",
    "ConversionResult",
    "DateNode",
    "DescriptorError",
    # Descriptors
    "DescriptorIntrospector",
    "FunctionNode",
    "IntersectionNode",
    "LiteralNode",
    "MapNode",
    "NumberNode",
    "ObjectNode",
    "OptionalNode",
    "PropertyDescriptor",
    "RecordNode",
    "RecursionLimitExceeded",
    "SchemaNode",
    "SetNode",
    "SignatureDescriptor",
    "StringNode",
    "TupleNode",
    "TypeDescriptor",
    "TypeFlag",
    "TypeIntrospector",
    "UnionNode",
    "UnknownNode",
    "UnsupportedTypeError",
    "format_node",
    "from_signatures",
    "from_type",
    "from_types",
    "load_descriptors",
    "try_from_type",
]
