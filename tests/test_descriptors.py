"""Tests for typeschema.descriptors module."""

import json

import pytest

from typeschema.classify import from_type
from typeschema.descriptors import (
    DescriptorIntrospector,
    PropertyDescriptor,
    TypeDescriptor,
    load_descriptors,
)
from typeschema.errors import DescriptorError, RecursionLimitExceeded
from typeschema.introspect import BigIntLiteral, TypeFlag
from typeschema.nodes import (
    ArrayNode,
    FunctionNode,
    LiteralNode,
    NumberNode,
    ObjectNode,
    OptionalNode,
    StringNode,
    TupleNode,
    UnionNode,
)

USER_DUMP = """
{
  "types": {
    "string": {"flags": ["string"], "name": "string"},
    "number": {"flags": ["number"], "name": "number"},
    "admin": {"flags": ["literal"], "value": "admin"},
    "guest": {"flags": ["literal"], "value": "guest"},
    "role": {"flags": ["union"], "types": ["admin", "guest"]},
    "tags": {"symbol": "Array", "typeArguments": ["string"]},
    "point": {
      "flags": ["object"],
      "tuple": true,
      "properties": [
        {"name": "0", "type": "number"},
        {"name": "1", "type": "number"},
        {"name": "length", "type": "number"}
      ]
    },
    "greet": {
      "flags": ["object"],
      "signatures": [
        {"parameters": [{"name": "who", "type": "string"}], "returns": "string"}
      ]
    },
    "user": {
      "flags": ["object"],
      "name": "User",
      "properties": [
        {"name": "name", "type": "string"},
        {"name": "role", "type": "role"},
        {"name": "tags", "type": "tags", "optional": true},
        {"name": "home", "type": "point"},
        {"name": "greet", "type": "greet"}
      ]
    }
  }
}
"""


class TestLoadDescriptors:
    """Test building descriptor graphs from dumps."""

    def test_load_and_convert(self) -> None:
        """Test that a loaded graph converts end to end."""
        types = load_descriptors(json.loads(USER_DUMP))
        result = from_type(types["user"], None, DescriptorIntrospector())
        assert result == ObjectNode(
            {
                "name": StringNode(),
                "role": UnionNode((LiteralNode("admin"), LiteralNode("guest"))),
                "tags": OptionalNode(ArrayNode(StringNode())),
                "home": TupleNode((NumberNode(), NumberNode())),
                "greet": FunctionNode((StringNode(),), StringNode()),
            },
        )

    def test_references_share_descriptors(self) -> None:
        """Test that an id referenced twice resolves to one descriptor."""
        types = load_descriptors(json.loads(USER_DUMP))
        point = types["point"]
        assert point.properties[0].type is types["number"]
        assert point.properties[1].type is types["number"]

    def test_cyclic_graph(self) -> None:
        """Test that self references load as cycles."""
        types = load_descriptors(
            {
                "types": {
                    "node": {
                        "flags": ["OBJECT"],
                        "name": "Node",
                        "properties": [{"name": "next", "type": "node", "optional": True}],
                    },
                },
            },
        )
        node = types["node"]
        assert node.properties[0].type is node
        with pytest.raises(RecursionLimitExceeded):
            from_type(node, None, DescriptorIntrospector())

    def test_bigint_literal(self) -> None:
        """Test loading a big integer literal."""
        types = load_descriptors(
            {
                "types": {
                    "big": {
                        "flags": ["literal"],
                        "bigint": {"negative": True, "base10Value": "18446744073709551616"},
                    },
                },
            },
        )
        assert types["big"].value == BigIntLiteral(negative=True, base10_value="18446744073709551616")
        result = from_type(types["big"], None, DescriptorIntrospector())
        assert result == LiteralNode(-18446744073709551616)

    def test_missing_types_mapping(self) -> None:
        """Test that a dump without types is rejected."""
        with pytest.raises(DescriptorError, match="'types' mapping"):
            load_descriptors({})

    def test_unknown_flag(self) -> None:
        """Test that unknown flag names are rejected."""
        with pytest.raises(DescriptorError, match="unknown flag 'symbol'"):
            load_descriptors({"types": {"a": {"flags": ["symbol"]}}})

    def test_dangling_reference(self) -> None:
        """Test that references to missing ids are rejected."""
        with pytest.raises(DescriptorError, match="unknown type id 'missing'"):
            load_descriptors({"types": {"a": {"symbol": "Array", "typeArguments": ["missing"]}}})

    def test_property_without_type(self) -> None:
        """Test that properties need a name and a type."""
        with pytest.raises(DescriptorError, match="must have 'name' and 'type'"):
            load_descriptors({"types": {"a": {"flags": ["object"], "properties": [{"name": "x"}]}}})

    def test_malformed_bigint(self) -> None:
        """Test that bigint digits are validated."""
        with pytest.raises(DescriptorError, match="malformed bigint"):
            load_descriptors({"types": {"a": {"flags": ["literal"], "bigint": {"base10Value": "12a"}}}})

    @pytest.mark.parametrize("digits", ["12a", "²", "١٢", "", "-5"])
    def test_bigint_digits_must_be_ascii(self, digits: str) -> None:
        """Test that only ASCII decimal digits make a big integer literal."""
        with pytest.raises(ValueError, match="ASCII digits"):
            BigIntLiteral(negative=False, base10_value=digits)

    def test_non_scalar_value(self) -> None:
        """Test that literal values must be scalars."""
        with pytest.raises(DescriptorError, match="must be a scalar"):
            load_descriptors({"types": {"a": {"flags": ["literal"], "value": [1]}}})


class TestDescriptorIntrospector:
    """Test introspector queries and diagnostics."""

    introspector = DescriptorIntrospector()

    def test_literal_without_value(self) -> None:
        """Test that a LITERAL descriptor must carry a value."""
        with pytest.raises(DescriptorError, match="no value"):
            self.introspector.literal_value(TypeDescriptor(TypeFlag.LITERAL))

    def test_type_id_is_identity(self) -> None:
        """Test that distinct but equal-looking descriptors differ in identity."""
        a, b = TypeDescriptor(TypeFlag.STRING), TypeDescriptor(TypeFlag.STRING)
        assert self.introspector.type_id(a) != self.introspector.type_id(b)
        assert self.introspector.type_id(a) == self.introspector.type_id(a)

    @pytest.mark.parametrize(
        ("descriptor", "expected"),
        [
            (TypeDescriptor(name="User"), "User"),
            (TypeDescriptor(TypeFlag.LITERAL, value="x"), "'x'"),
            (TypeDescriptor(TypeFlag.LITERAL, value=False), "false"),
            (TypeDescriptor(TypeFlag.LITERAL, value=BigIntLiteral(False, "10")), "10n"),
            (TypeDescriptor(TypeFlag.STRING), "string"),
            (TypeDescriptor(), "<untyped>"),
            (
                TypeDescriptor(symbol="Map", type_arguments=[TypeDescriptor(TypeFlag.STRING), TypeDescriptor(TypeFlag.NUMBER)]),
                "Map<string, number>",
            ),
            (
                TypeDescriptor(TypeFlag.UNION, types=[TypeDescriptor(TypeFlag.STRING), TypeDescriptor(TypeFlag.NUMBER)]),
                "string | number",
            ),
            (
                TypeDescriptor(TypeFlag.OBJECT, properties=[PropertyDescriptor("a", TypeDescriptor(TypeFlag.STRING))]),
                "{ a }",
            ),
            (TypeDescriptor(TypeFlag.OBJECT), "{}"),
        ],
    )
    def test_type_to_string(self, descriptor: TypeDescriptor, expected: str) -> None:
        """Test diagnostic rendering."""
        assert self.introspector.type_to_string(descriptor) == expected

    def test_type_to_string_cyclic(self) -> None:
        """Test that rendering a cyclic reference terminates."""
        box = TypeDescriptor(symbol="Array")
        box.type_arguments.append(box)
        assert self.introspector.type_to_string(box) == "Array<Array<Array<...>>>"
