import json
import logging
from pathlib import Path

import pytest

from openapi_type_model.pipeline.analyzer import (
    ArrayType,
    BasicType,
    EnumType,
    MapType,
    ObjectType,
    RefType,
    TypeResolver,
    extract_inline,
)
from openapi_type_model.pipeline.config import ConversionConfig
from openapi_type_model.pipeline.examples import (
    MAX_RECURSION_TO_DISPLAY,
    TRUNCATION_SENTINEL,
    ExampleGenerator,
    RecursionGuard,
    primitive_example,
)
from openapi_type_model.pipeline.schema_ast import PrimitiveKind, SchemaNormalizer

FULL_PET = {"id": 0, "name": "string", "tag": "string"}


def load_definitions():
    with open(Path(__file__).parent / "test_data" / "petstore.json") as f:
        return json.load(f)["components"]["schemas"]


def ref(name):
    return {"$ref": f"#/components/schemas/{name}"}


@pytest.fixture
def normalizer():
    return SchemaNormalizer(load_definitions())


@pytest.fixture
def generator(normalizer):
    return ExampleGenerator(normalizer)


@pytest.mark.parametrize(
    "name,expected",
    [
        ("Pet", FULL_PET),
        ("Widget", {"label": "string", "size": 0.0}),
        ("WidgetList", [{"label": "string", "size": 0.0}]),
        ("Counts", {"string": 0}),
        ("Status", "available"),
        ("Priority", 1),
        ("Documented", {"a": "authored"}),
        ("Dog", {"kind": "string", "name": "string", "bark": True}),
        ("Audited", {"created": "1970-01-01T00:00:00Z", "author": "string"}),
        (
            "Order",
            {
                "id": "f81d4fae-7dec-11d0-a765-00a0c91e6bf6",
                "pet": FULL_PET,
                "shipping": {"street": "string", "geo": {"lat": 0.0}},
            },
        ),
    ],
)
def test_definition_examples(generator, name, expected):
    assert generator.generate_for_reference(name) == expected


def test_self_referencing_object_is_truncated(generator):
    assert generator.generate(ref("Node")) == {
        "value": "string",
        "child": {"value": "string", "child": TRUNCATION_SENTINEL},
    }


def test_mutual_recursion_is_truncated(generator):
    assert generator.generate(ref("Ping")) == {"pong": {"ping": {"pong": {"ping": TRUNCATION_SENTINEL}}}}


def test_recursive_array_is_truncated(generator):
    assert generator.generate(ref("Tree")) == [[TRUNCATION_SENTINEL]]


def test_custom_recursion_limit(generator):
    guard = RecursionGuard.with_unsafe_limit(1)
    assert generator.generate(ref("Node"), guard) == {"value": "string", "child": TRUNCATION_SENTINEL}


def test_siblings_are_expanded_independently(generator):
    schema = {"type": "object", "properties": {"left": ref("Node"), "right": ref("Node")}}
    example = generator.generate(schema)

    assert example["left"] == example["right"]
    assert example["left"]["child"]["child"] == TRUNCATION_SENTINEL


def test_unresolvable_reference(generator, caplog):
    with caplog.at_level(logging.WARNING):
        assert generator.generate_for_reference("Broken") == {"missing": {}}
    assert "DoesNotExist" in caplog.text


def test_reference_with_authored_example(generator):
    assert generator.generate({"$ref": "#/components/schemas/Pet", "example": {"id": 7}}) == {"id": 7}


def test_reference_without_generation(generator):
    assert generator.generate_for_reference("Pet", generate_missing=False) is None
    assert generator.generate_for_reference("Documented", generate_missing=False) == {"a": "authored"}


def test_optional_properties_can_be_left_out(normalizer):
    generator = ExampleGenerator(normalizer, ConversionConfig(generated_optional_property_examples_enabled=False))

    assert generator.generate_for_reference("Pet") == {"id": 0, "name": "string"}
    assert generator.example_for_properties({"a": {"type": "string", "required": True}, "b": {"type": "string"}}) == {
        "a": "string"
    }


@pytest.mark.parametrize(
    "schema,expected",
    [
        ({}, "untyped"),
        ({"type": "object"}, {}),
        ({"type": "string"}, "string"),
        ({"type": "string", "default": "fallback"}, "fallback"),
        ({"type": "integer"}, 0),
        ({"type": "number"}, 0.0),
        ({"type": "boolean"}, True),
        ({"type": "boolean", "default": False}, False),
        ({"type": "string", "example": "authored"}, "authored"),
        ({"type": "array"}, [{}]),
        ({"type": "array", "items": {"type": "integer"}}, [0]),
        ({"type": "object", "additionalProperties": {}}, {"string": "untyped"}),
        ({"enum": ["a", "b"]}, "a"),
        ({"enum": ["a", "b"], "default": "b"}, "b"),
        ({"type": ["string", "null"]}, "string"),
        ({"type": "object", "properties": {"n": {"type": "integer"}}, "example": {"n": 5}}, {"n": 5}),
    ],
)
def test_schema_examples(generator, schema, expected):
    assert generator.generate(schema) == expected


@pytest.mark.parametrize(
    "format,expected",
    [
        (None, "string"),
        ("byte", "Ynl0ZQ=="),
        ("date", "1970-01-01"),
        ("date-time", "1970-01-01T00:00:00Z"),
        ("email", "email@example.com"),
        ("password", "secret"),
        ("uuid", "f81d4fae-7dec-11d0-a765-00a0c91e6bf6"),
        ("hostname", "string"),
    ],
)
def test_string_format_examples(format, expected):
    assert primitive_example(PrimitiveKind.STRING, format) == expected


def test_untyped_primitive_example():
    assert primitive_example(PrimitiveKind.UNTYPED) == "untyped"


class TestRecursionGuard:
    def test_default_limit(self):
        assert RecursionGuard().limit == MAX_RECURSION_TO_DISPLAY == 2

    def test_enter_returns_a_new_guard(self):
        guard = RecursionGuard()
        entered = guard.enter("Node")

        assert guard.count("Node") == 0
        assert entered.count("Node") == 1
        assert entered.enter("Node").count("Node") == 2

    def test_enter_keeps_limit(self):
        guard = RecursionGuard.with_unsafe_limit(5).enter("Node").enter("Other")
        assert guard.limit == 5

    def test_exceeded(self):
        guard = RecursionGuard().enter("Node").enter("Node")
        assert not guard.exceeded("Node")
        assert guard.enter("Node").exceeded("Node")
        assert not guard.exceeded("Other")

    @pytest.mark.parametrize("limit", [0, -1, 1.5, "2", True, None])
    def test_invalid_limit(self, limit):
        with pytest.raises(ValueError):
            RecursionGuard.with_unsafe_limit(limit)


class TestGenerateForType:
    """Test examples generated from resolved types"""

    def setup_method(self):
        self.normalizer = SchemaNormalizer(load_definitions())
        self.generator = ExampleGenerator(self.normalizer)
        self.resolver = TypeResolver(self.normalizer)

    def test_definition_reference(self):
        assert self.generator.generate_for_type(self.resolver.resolve_schema(ref("Pet"))) == FULL_PET

    def test_recursive_definition_reference(self):
        node = self.resolver.resolve_schema(ref("Node"))
        assert self.generator.generate_for_type(node)["child"]["child"] == TRUNCATION_SENTINEL

    def test_hoisted_inline_reference(self):
        shipping = ObjectType(
            name="shipping",
            unique_name="Order shipping",
            properties={"street": {"type": "string"}},
        )
        ref_type = RefType(name="shipping", unique_name="Order shipping", resolved_type=shipping)

        assert self.generator.generate_for_type(ref_type) == {"street": "string"}

    def test_containers(self):
        string = BasicType(primitive_kind=PrimitiveKind.STRING, format="date")

        assert self.generator.generate_for_type(ArrayType(element_type=string)) == ["1970-01-01"]
        assert self.generator.generate_for_type(MapType(value_type=string)) == {"string": "1970-01-01"}

    def test_enum(self):
        assert self.generator.generate_for_type(EnumType(values=("on", "off"))) == "on"

    def test_missing_type(self):
        assert self.generator.generate_for_type(None) == {}


@pytest.mark.parametrize(
    "schema",
    [
        {"type": "integer", "enum": [1, 2]},
        {"type": "number", "enum": [1.5, 2.5]},
        {"type": "boolean", "enum": [False, True]},
        {"type": "string", "enum": ["on", "off"]},
    ],
)
def test_enum_example_matches_for_schema_and_type(normalizer, schema):
    generator = ExampleGenerator(normalizer)
    enum_type = TypeResolver(normalizer).resolve_schema(schema)

    assert generator.generate_for_type(enum_type) == generator.generate(schema) == schema["enum"][0]


def test_titled_inline_object_is_not_taken_for_a_definition(normalizer):
    generator = ExampleGenerator(normalizer)
    titled = TypeResolver(normalizer).resolve_schema({"title": "Pet", "properties": {"nick": {"type": "string"}}})
    hoisted = extract_inline(titled, "companion", "Owner companion")

    assert hoisted.type.name == hoisted.type.unique_name == "Pet"
    assert hoisted.type.inline
    assert generator.generate_for_type(hoisted.type) == {"nick": "string"}
