"""
Normalized model definitions for OpenAPI schema nodes.

These nodes represent the classified shape of a raw schema node before any
reference resolution. A raw node may structurally match several shapes; the
normalizer picks exactly one, so downstream code dispatches on ``kind``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ModelKind(Enum):
    """Kind of normalized model."""

    PRIMITIVE = "primitive"  # string, integer, number, boolean, bare object, untyped
    ARRAY = "array"  # type: array
    COMPOSED = "composed"  # allOf
    REFERENCE = "reference"  # $ref
    ENUM = "enum"  # enum values
    MAP = "map"  # additionalProperties without properties
    OBJECT = "object"  # properties (possibly empty)


class PrimitiveKind(str, Enum):
    """Structural kind of a primitive schema."""

    STRING = "string"
    INTEGER = "integer"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    UNTYPED = "untyped"  # No type, no ref, no properties

    @staticmethod
    def from_schema_type(type_name: Any) -> PrimitiveKind:
        """Map a schema ``type`` value to a primitive kind."""
        if isinstance(type_name, list):
            # OpenAPI 3.1 style ["string", "null"]
            non_null = [t for t in type_name if t != "null"]
            type_name = non_null[0] if non_null else None
        try:
            return PrimitiveKind(type_name)
        except ValueError:
            return PrimitiveKind.UNTYPED


@dataclass(frozen=True)
class SchemaModel:
    """Base class for all normalized models."""

    # Original source location (for error messages and unique names)
    source_path: str = ""

    # Shared metadata
    title: str | None = None
    description: str | None = None
    example: Any = None
    has_example: bool = False
    required: tuple[str, ...] = ()

    # The raw node this model was built from
    raw: dict[str, Any] = field(default_factory=dict, compare=False, repr=False)

    kind = ModelKind.PRIMITIVE


@dataclass(frozen=True)
class PrimitiveModel(SchemaModel):
    """A primitive type (or the untyped sentinel)."""

    primitive_kind: PrimitiveKind = PrimitiveKind.UNTYPED
    format: str | None = None
    default: Any = None
    has_default: bool = False

    # Validation constraints (carried for the rendering layer)
    min_length: int | None = None
    max_length: int | None = None
    pattern: str | None = None
    minimum: float | None = None
    maximum: float | None = None
    exclusive_minimum: bool | float | None = None
    exclusive_maximum: bool | float | None = None

    kind = ModelKind.PRIMITIVE

    @property
    def is_untyped(self) -> bool:
        return self.primitive_kind is PrimitiveKind.UNTYPED


@dataclass(frozen=True)
class EnumModel(SchemaModel):
    """An enumeration of literal values."""

    values: tuple[Any, ...] = ()
    primitive_kind: PrimitiveKind = PrimitiveKind.STRING
    format: str | None = None

    kind = ModelKind.ENUM


@dataclass(frozen=True)
class ReferenceModel(SchemaModel):
    """A $ref to a named definition."""

    ref: str = ""  # Raw $ref string, e.g. "#/components/schemas/Pet"
    ref_name: str = ""  # Definition name, e.g. "Pet"

    kind = ModelKind.REFERENCE


@dataclass(frozen=True)
class ArrayModel(SchemaModel):
    """An array type."""

    items: SchemaModel | None = None
    min_items: int | None = None
    max_items: int | None = None

    # Serialization hints for array parameters
    collection_format: str | None = None

    kind = ModelKind.ARRAY


@dataclass(frozen=True)
class MapModel(SchemaModel):
    """A map type (additionalProperties without a property map)."""

    value: SchemaModel | None = None

    kind = ModelKind.MAP


@dataclass(frozen=True)
class ObjectModel(SchemaModel):
    """An object type with a property map."""

    # Property name -> raw schema node, in declaration order
    properties: dict[str, dict[str, Any]] = field(default_factory=dict)

    # Discriminator property declared directly on this schema
    discriminator: str | None = None

    kind = ModelKind.OBJECT


@dataclass(frozen=True)
class ComposedModel(SchemaModel):
    """A composition of schemas (allOf)."""

    branches: tuple[SchemaModel, ...] = ()

    # Discriminator declared on the composed schema itself
    discriminator: str | None = None

    kind = ModelKind.COMPOSED
