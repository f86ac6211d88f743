"""
Analyzer module.

Resolves normalized models into types: references, compositions and inline
object hoisting, plus the resolvers mapping references to output documents.
"""

from __future__ import annotations

from .inline_schema import (
    InlineResult,
    ResolvedProperties,
    collect_nested,
    extract_inline,
    resolve_properties,
)
from .polymorphism import PolymorphismClassifier, reconcile_required
from .reference_resolver import (
    DefinitionDocumentResolverDefault,
    DefinitionDocumentResolverFromDefinition,
    DefinitionDocumentResolverFromOperation,
    DocumentResolver,
    OperationDocumentNameResolver,
    PathOperation,
    SecurityDocumentResolver,
    no_link,
)
from .type_resolver import TypeResolver
from .types import (
    ArrayType,
    BasicType,
    EnumType,
    MapType,
    ObjectType,
    Polymorphism,
    PolymorphismNature,
    RefType,
    Type,
    TypeKind,
    resolve_ref_type,
)

__all__ = [
    # Types
    "Type",
    "TypeKind",
    "BasicType",
    "ArrayType",
    "MapType",
    "EnumType",
    "ObjectType",
    "RefType",
    "Polymorphism",
    "PolymorphismNature",
    "resolve_ref_type",
    # Resolution
    "TypeResolver",
    "PolymorphismClassifier",
    "reconcile_required",
    # Inline schemas
    "InlineResult",
    "ResolvedProperties",
    "extract_inline",
    "resolve_properties",
    "collect_nested",
    # Cross references
    "DocumentResolver",
    "DefinitionDocumentResolverDefault",
    "DefinitionDocumentResolverFromOperation",
    "DefinitionDocumentResolverFromDefinition",
    "SecurityDocumentResolver",
    "OperationDocumentNameResolver",
    "PathOperation",
    "no_link",
]
