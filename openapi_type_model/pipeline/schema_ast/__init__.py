"""
Schema AST module.

Contains the normalized model definitions and the normalizer for raw
OpenAPI schema nodes.
"""

from __future__ import annotations

from .nodes import (
    ArrayModel,
    ComposedModel,
    EnumModel,
    MapModel,
    ModelKind,
    ObjectModel,
    PrimitiveKind,
    PrimitiveModel,
    ReferenceModel,
    SchemaModel,
)
from .normalizer import SchemaNormalizer, collection_format_for, discriminator_name

__all__ = [
    "SchemaModel",
    "ModelKind",
    "PrimitiveKind",
    "PrimitiveModel",
    "EnumModel",
    "ReferenceModel",
    "ArrayModel",
    "MapModel",
    "ObjectModel",
    "ComposedModel",
    "SchemaNormalizer",
    "collection_format_for",
    "discriminator_name",
]
