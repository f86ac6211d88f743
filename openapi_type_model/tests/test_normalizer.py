import json
from pathlib import Path

import pytest

from openapi_type_model.errors import SchemaConversionError
from openapi_type_model.pipeline.schema_ast import (
    ArrayModel,
    ComposedModel,
    EnumModel,
    MapModel,
    ModelKind,
    ObjectModel,
    PrimitiveKind,
    PrimitiveModel,
    ReferenceModel,
    SchemaNormalizer,
    collection_format_for,
    discriminator_name,
)


def load_test_data():
    """Load test cases from JSON file"""
    test_data_path = Path(__file__).parent / "test_data" / "normalizer_tests.json"
    with open(test_data_path) as f:
        return json.load(f)


@pytest.mark.parametrize("test_case", load_test_data(), ids=lambda tc: tc["name"])
def test_classification_precedence(test_case):
    """Test that each schema shape is classified as exactly one model kind"""
    model = SchemaNormalizer().normalize(test_case["schema"])
    assert model.kind is ModelKind(test_case["expected_kind"])


class TestSchemaNormalizer:
    """Test normalization of raw schema nodes"""

    def setup_method(self):
        self.normalizer = SchemaNormalizer(
            {
                "Pet": {
                    "type": "object",
                    "title": "A pet",
                    "required": ["id"],
                    "properties": {"id": {"type": "integer"}},
                }
            }
        )

    def test_untyped_sentinel(self):
        model = self.normalizer.normalize({"description": "anything"})
        assert isinstance(model, PrimitiveModel)
        assert model.is_untyped
        assert model.description == "anything"

    def test_none_is_untyped(self):
        model = self.normalizer.normalize(None)
        assert isinstance(model, PrimitiveModel)
        assert model.primitive_kind is PrimitiveKind.UNTYPED

    def test_primitive_metadata(self):
        model = self.normalizer.normalize(
            {"type": "string", "format": "email", "default": "a@b.c", "minLength": 3, "pattern": ".+@.+"}
        )
        assert model.primitive_kind is PrimitiveKind.STRING
        assert model.format == "email"
        assert model.has_default
        assert model.default == "a@b.c"
        assert model.min_length == 3
        assert model.pattern == ".+@.+"

    def test_nullable_type_list(self):
        model = self.normalizer.normalize({"type": ["string", "null"]})
        assert model.primitive_kind is PrimitiveKind.STRING

    def test_unknown_type_is_untyped(self):
        model = self.normalizer.normalize({"type": "file"})
        assert model.primitive_kind is PrimitiveKind.UNTYPED

    def test_reference_name(self):
        model = self.normalizer.normalize({"$ref": "#/components/schemas/Pet"})
        assert isinstance(model, ReferenceModel)
        assert model.ref == "#/components/schemas/Pet"
        assert model.ref_name == "Pet"

    def test_array_items(self):
        model = self.normalizer.normalize({"type": "array", "items": {"type": "integer"}, "minItems": 1})
        assert isinstance(model, ArrayModel)
        assert model.items.primitive_kind is PrimitiveKind.INTEGER
        assert model.items.source_path == "#/items"
        assert model.min_items == 1

    def test_array_without_items(self):
        model = self.normalizer.normalize({"type": "array"})
        assert isinstance(model, ArrayModel)
        assert model.items is None

    def test_tuple_items_keep_first(self):
        model = self.normalizer.normalize({"type": "array", "items": [{"type": "string"}, {"type": "integer"}]})
        assert model.items.primitive_kind is PrimitiveKind.STRING

    def test_array_collection_format(self):
        model = self.normalizer.normalize({"type": "array", "items": {"type": "string"}, "collectionFormat": "pipes"})
        assert model.collection_format == "pipes"

    def test_map_value(self):
        model = self.normalizer.normalize({"additionalProperties": {"$ref": "#/definitions/Pet"}})
        assert isinstance(model, MapModel)
        assert isinstance(model.value, ReferenceModel)
        assert model.value.source_path == "#/additionalProperties"

    def test_enum_keeps_declared_kind(self):
        model = self.normalizer.normalize({"type": "integer", "enum": [3, 1, 2]})
        assert isinstance(model, EnumModel)
        assert model.primitive_kind is PrimitiveKind.INTEGER
        assert model.values == (3, 1, 2)

    def test_enum_kind_inferred_from_values(self):
        model = self.normalizer.normalize({"enum": [1.5, 2.5]})
        assert model.primitive_kind is PrimitiveKind.NUMBER

    def test_empty_enum_is_not_an_enum(self):
        model = self.normalizer.normalize({"type": "string", "enum": []})
        assert isinstance(model, PrimitiveModel)

    def test_object_properties_keep_order(self):
        model = self.normalizer.normalize(
            {"properties": {"b": {"type": "string"}, "a": {"type": "string"}}, "required": ["a"]}
        )
        assert isinstance(model, ObjectModel)
        assert list(model.properties) == ["b", "a"]
        assert model.required == ("a",)

    def test_boolean_required_is_ignored(self):
        model = self.normalizer.normalize({"type": "string", "required": True})
        assert model.required == ()

    def test_composed_branches(self):
        model = self.normalizer.normalize(
            {
                "allOf": [{"$ref": "#/definitions/Pet"}, {"properties": {"x": {"type": "string"}}}],
                "discriminator": "petType",
            }
        )
        assert isinstance(model, ComposedModel)
        assert [b.kind for b in model.branches] == [ModelKind.REFERENCE, ModelKind.OBJECT]
        assert model.branches[1].source_path == "#/allOf/1"
        assert model.discriminator == "petType"

    def test_example_metadata(self):
        model = self.normalizer.normalize({"type": "string", "example": "x"})
        assert model.has_example
        assert model.example == "x"
        assert not self.normalizer.normalize({"type": "string"}).has_example

    def test_normalize_definition(self):
        model = self.normalizer.normalize_definition("Pet")
        assert isinstance(model, ObjectModel)
        assert model.title == "A pet"
        assert model.source_path == "#/definitions/Pet"

    def test_normalize_definition_is_memoized(self):
        assert self.normalizer.normalize_definition("Pet") is self.normalizer.normalize_definition("Pet")

    def test_normalize_missing_definition(self):
        assert self.normalizer.normalize_definition("Missing") is None

    def test_normalize_definitions(self):
        models = self.normalizer.normalize_definitions()
        assert list(models) == ["Pet"]


@pytest.mark.parametrize(
    "schema,path",
    [
        ([{"type": "string"}], "#"),
        ({"$ref": 5}, "#"),
        ({"$ref": ""}, "#"),
        ({"allOf": {"type": "string"}}, "#"),
        ({"enum": "abc"}, "#"),
        ({"properties": ["a", "b"]}, "#"),
        ({"properties": {"x": "string"}}, "#/properties/x"),
        ({"type": "array", "items": "string"}, "#/items"),
    ],
)
def test_malformed_schema_raises(schema, path):
    """Test that malformed nodes raise a conversion error naming the source path"""
    with pytest.raises(SchemaConversionError) as exc_info:
        SchemaNormalizer().normalize(schema)

    assert exc_info.value.source_path == path
    assert f"(at {path})" in str(exc_info.value)


@pytest.mark.parametrize(
    "schema,expected",
    [
        ({"discriminator": {"propertyName": "kind"}}, "kind"),
        ({"discriminator": "kind"}, "kind"),
        ({"discriminator": ""}, None),
        ({}, None),
    ],
)
def test_discriminator_name(schema, expected):
    assert discriminator_name(schema) == expected


@pytest.mark.parametrize(
    "parameter,expected",
    [
        ({"collectionFormat": "tsv"}, "tsv"),
        ({"style": "form"}, "multi"),
        ({"style": "form", "explode": True}, "multi"),
        ({"style": "form", "explode": False}, "csv"),
        ({"style": "simple"}, "csv"),
        ({"style": "pipeDelimited"}, "pipe"),
        ({"style": "spaceDelimited"}, "space"),
        ({"style": "deepObject"}, None),
        ({}, None),
    ],
)
def test_collection_format_for(parameter, expected):
    assert collection_format_for(parameter) == expected
