"""
Schema normalizer that classifies raw schema nodes.

Phase 1 of the pipeline: turn each raw (untyped) schema node into exactly
one normalized model shape, without resolving references.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from ...errors import SchemaConversionError
from ...utils import simple_ref_name
from .nodes import (
    ArrayModel,
    ComposedModel,
    EnumModel,
    MapModel,
    ObjectModel,
    PrimitiveKind,
    PrimitiveModel,
    ReferenceModel,
    SchemaModel,
)

logger = logging.getLogger(__name__)

# OpenAPI 3 parameter style -> legacy collection format
_STYLE_COLLECTION_FORMATS = {
    "simple": "csv",
    "pipeDelimited": "pipe",
    "spaceDelimited": "space",
}


def discriminator_name(schema: Mapping[str, Any]) -> str | None:
    """Return the discriminator property name declared on a schema.

    Accepts both the OpenAPI 3 object form (``{"propertyName": ...}``) and
    the Swagger 2 string form.
    """
    discriminator = schema.get("discriminator")
    if isinstance(discriminator, Mapping):
        return discriminator.get("propertyName")
    if isinstance(discriminator, str) and discriminator:
        return discriminator
    return None


def collection_format_for(parameter: Mapping[str, Any]) -> str | None:
    """Derive the array serialization format of a parameter."""
    if "collectionFormat" in parameter:
        return parameter["collectionFormat"]
    style = parameter.get("style")
    if style == "form":
        # explode defaults to true for form style
        return "multi" if parameter.get("explode", True) else "csv"
    return _STYLE_COLLECTION_FORMATS.get(style)


class SchemaNormalizer:
    """Classifies raw schema nodes into normalized models."""

    def __init__(self, definitions: Mapping[str, Any] | None = None):
        """
        Initialize the normalizer.

        Args:
            definitions: Reference name -> raw schema node for every named
                definition of the document
        """
        self.definitions = definitions or {}
        self._definition_cache: dict[str, SchemaModel] = {}

    def normalize_definition(self, name: str) -> SchemaModel | None:
        """Normalize a named definition, or return None if it does not exist."""
        if name in self._definition_cache:
            return self._definition_cache[name]
        if name not in self.definitions:
            return None

        model = self.normalize(self.definitions[name], f"#/definitions/{name}")
        self._definition_cache[name] = model
        return model

    def normalize_definitions(self) -> dict[str, SchemaModel]:
        """Normalize every named definition, keeping document order."""
        models = {}
        for name in self.definitions:
            models[name] = self.normalize_definition(name)
        return models

    def normalize(self, schema: Any, path: str = "#") -> SchemaModel:
        """
        Normalize a schema node.

        Args:
            schema: The raw schema node
            path: Current path in the document (for error messages)

        Returns:
            Appropriate SchemaModel subclass
        """
        if schema is None:
            return PrimitiveModel(source_path=path)
        if not isinstance(schema, Mapping):
            raise SchemaConversionError(f"Expected a schema object, got {type(schema).__name__}", path)

        metadata = self._extract_metadata(schema, path)

        if "allOf" in schema:
            return self._normalize_composed(schema, path, metadata)

        if "$ref" in schema:
            return self._normalize_reference(schema, path, metadata)

        if schema.get("type") == "array":
            return self._normalize_array(schema, path, metadata)

        additional = schema.get("additionalProperties")
        if isinstance(additional, Mapping) and "properties" not in schema:
            return MapModel(
                value=self.normalize(additional, f"{path}/additionalProperties"),
                **metadata,
            )

        if schema.get("enum"):
            return self._normalize_enum(schema, path, metadata)

        if "properties" in schema:
            return self._normalize_object(schema, path, metadata)

        return self._normalize_primitive(schema, path, metadata)

    def _extract_metadata(self, schema: Mapping[str, Any], path: str) -> dict[str, Any]:
        """Extract metadata shared by every model shape."""
        required = schema.get("required")
        # Swagger 2 parameters use a boolean "required"
        if not isinstance(required, list):
            required = []

        return {
            "source_path": path,
            "title": schema.get("title"),
            "description": schema.get("description"),
            "example": schema.get("example"),
            "has_example": schema.get("example") is not None,
            "required": tuple(required),
            "raw": dict(schema),
        }

    def _normalize_composed(self, schema: Mapping[str, Any], path: str, metadata: dict[str, Any]) -> ComposedModel:
        """Normalize an allOf composition."""
        all_of = schema["allOf"]
        if not isinstance(all_of, list):
            raise SchemaConversionError("allOf must be a list of schemas", path)

        branches = tuple(self.normalize(branch, f"{path}/allOf/{i}") for i, branch in enumerate(all_of))

        return ComposedModel(
            branches=branches,
            discriminator=discriminator_name(schema),
            **metadata,
        )

    def _normalize_reference(self, schema: Mapping[str, Any], path: str, metadata: dict[str, Any]) -> ReferenceModel:
        """Normalize a $ref node."""
        ref = schema["$ref"]
        if not isinstance(ref, str) or not ref:
            raise SchemaConversionError("$ref must be a non-empty string", path)

        return ReferenceModel(
            ref=ref,
            ref_name=simple_ref_name(ref),
            **metadata,
        )

    def _normalize_array(self, schema: Mapping[str, Any], path: str, metadata: dict[str, Any]) -> ArrayModel:
        """Normalize an array node."""
        items_schema = schema.get("items")
        items = None

        if items_schema is not None:
            if isinstance(items_schema, list):
                # Tuple-style items: keep the first one as the element type
                items_schema = items_schema[0] if items_schema else None
                path = f"{path}/items/0"
            else:
                path = f"{path}/items"
            if items_schema is not None:
                items = self.normalize(items_schema, path)
        else:
            logger.debug("Array schema at %s has no items", metadata["source_path"])

        return ArrayModel(
            items=items,
            min_items=schema.get("minItems"),
            max_items=schema.get("maxItems"),
            collection_format=collection_format_for(schema),
            **metadata,
        )

    def _normalize_enum(self, schema: Mapping[str, Any], path: str, metadata: dict[str, Any]) -> EnumModel:
        """Normalize an enum node."""
        values = schema["enum"]
        if not isinstance(values, list):
            raise SchemaConversionError("enum must be a list of values", path)

        if "type" in schema:
            primitive_kind = PrimitiveKind.from_schema_type(schema["type"])
        else:
            primitive_kind = self._infer_kind(values[0])

        return EnumModel(
            values=tuple(values),
            primitive_kind=primitive_kind,
            format=schema.get("format"),
            **metadata,
        )

    def _normalize_object(self, schema: Mapping[str, Any], path: str, metadata: dict[str, Any]) -> ObjectModel:
        """Normalize an object node with a property map."""
        properties = schema.get("properties") or {}
        if not isinstance(properties, Mapping):
            raise SchemaConversionError("properties must be a mapping", path)

        for prop_name, prop_schema in properties.items():
            if not isinstance(prop_schema, Mapping):
                raise SchemaConversionError(f"Property '{prop_name}' is not a schema object", f"{path}/properties/{prop_name}")

        return ObjectModel(
            properties=dict(properties),
            discriminator=discriminator_name(schema),
            **metadata,
        )

    def _normalize_primitive(self, schema: Mapping[str, Any], path: str, metadata: dict[str, Any]) -> PrimitiveModel:
        """Normalize a primitive node (or the untyped sentinel)."""
        primitive_kind = PrimitiveKind.from_schema_type(schema.get("type"))
        if primitive_kind is PrimitiveKind.UNTYPED:
            logger.debug("Schema at %s carries no type information", path)

        return PrimitiveModel(
            primitive_kind=primitive_kind,
            format=schema.get("format") or None,
            default=schema.get("default"),
            has_default="default" in schema,
            min_length=schema.get("minLength"),
            max_length=schema.get("maxLength"),
            pattern=schema.get("pattern"),
            minimum=schema.get("minimum"),
            maximum=schema.get("maximum"),
            exclusive_minimum=schema.get("exclusiveMinimum"),
            exclusive_maximum=schema.get("exclusiveMaximum"),
            **metadata,
        )

    def _infer_kind(self, value: Any) -> PrimitiveKind:
        """Infer the primitive kind from a literal value."""
        if isinstance(value, bool):
            return PrimitiveKind.BOOLEAN
        if isinstance(value, int):
            return PrimitiveKind.INTEGER
        if isinstance(value, float):
            return PrimitiveKind.NUMBER
        return PrimitiveKind.STRING
