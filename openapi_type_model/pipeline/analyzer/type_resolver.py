"""
Type resolver that turns normalized models into types.

Phase 2 of the pipeline: resolve references against the document's named
definitions, merge compositions and build the ``Type`` tree consumed by the
renderer and the example generator.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any

from ...utils import stringify_example
from ..schema_ast.nodes import (
    ArrayModel,
    ComposedModel,
    EnumModel,
    MapModel,
    ModelKind,
    ObjectModel,
    PrimitiveModel,
    ReferenceModel,
    SchemaModel,
)
from ..schema_ast.normalizer import SchemaNormalizer
from .polymorphism import PolymorphismClassifier
from .reference_resolver import no_link
from .types import (
    ArrayType,
    BasicType,
    EnumType,
    MapType,
    ObjectType,
    Polymorphism,
    RefType,
    Type,
)

logger = logging.getLogger(__name__)


class TypeResolver:
    """Resolves normalized models into types."""

    def __init__(self, normalizer: SchemaNormalizer, ref_resolver: Callable[[str], str | None] = no_link):
        """
        Initialize the resolver.

        Args:
            normalizer: Normalizer holding the document's named definitions
            ref_resolver: Maps a reference name to the document it links to
        """
        self.normalizer = normalizer
        self.ref_resolver = ref_resolver
        self.classifier = PolymorphismClassifier(self.resolve)

    def resolve_schema(self, schema: Any, path: str = "#") -> Type:
        """Normalize and resolve a raw schema node."""
        return self.resolve(self.normalizer.normalize(schema, path))

    def resolve_definition(self, name: str) -> Type | None:
        """Resolve a named definition's body, or None if it does not exist."""
        model = self.normalizer.normalize_definition(name)
        if model is None:
            return None
        return self.resolve(model, frozenset([name]))

    def resolve(self, model: SchemaModel, resolving: frozenset = frozenset()) -> Type:
        """
        Resolve a model to a type.

        Args:
            model: The normalized model
            resolving: Names of the references whose resolution is in
                progress; re-entering one of them yields a stub

        Returns:
            The resolved type
        """
        if model.kind is ModelKind.REFERENCE:
            return self._resolve_reference(model, resolving)

        if model.kind is ModelKind.COMPOSED:
            return self._resolve_composed(model, resolving)

        if model.kind is ModelKind.ARRAY:
            return self._resolve_array(model, resolving)

        if model.kind is ModelKind.MAP:
            return self._resolve_map(model, resolving)

        if model.kind is ModelKind.ENUM:
            return self._resolve_enum(model)

        if model.kind is ModelKind.OBJECT:
            return self._resolve_object(model)

        return self._resolve_primitive(model)

    def _resolve_reference(self, model: ReferenceModel, resolving: frozenset) -> Type:
        """Resolve a $ref to a RefType wrapping the referenced definition."""
        name = model.ref_name
        target = self.normalizer.normalize_definition(name)

        if target is None:
            logger.warning("Unresolvable reference '%s' at %s", model.ref, model.source_path)
            resolved_type = ObjectType(name=name, unique_name=name)
        elif name in resolving:
            # Cyclic reference: stop at a named stub
            logger.debug("Reference '%s' is already being resolved", name)
            resolved_type = ObjectType(name=name, unique_name=name)
        else:
            resolved_type = self.resolve(target, resolving | {name}).with_names(name, name)

        return RefType(
            name=name,
            unique_name=name,
            link_target=self.ref_resolver(name),
            resolved_type=resolved_type,
        )

    def _resolve_composed(self, model: ComposedModel, resolving: frozenset) -> ObjectType:
        """Resolve an allOf composition."""
        return self.classifier.classify(model, resolving)

    def _resolve_array(self, model: ArrayModel, resolving: frozenset) -> ArrayType:
        """Resolve an array; missing items degrade to an anonymous object."""
        if model.items is None:
            element_type = ObjectType()
        else:
            element_type = self.resolve(model.items, resolving)

        return ArrayType(
            name=model.title,
            element_type=element_type,
            collection_format=model.collection_format,
        )

    def _resolve_map(self, model: MapModel, resolving: frozenset) -> MapType:
        """Resolve a map."""
        value_type = self.resolve(model.value, resolving) if model.value is not None else ObjectType()
        return MapType(name=model.title, value_type=value_type)

    def _resolve_enum(self, model: EnumModel) -> EnumType:
        """Resolve an enum; values become display strings in source order."""
        values = tuple(v if isinstance(v, str) else stringify_example(v) for v in model.values)
        return EnumType(name=model.title, values=values, raw_values=tuple(model.values))

    def _resolve_object(self, model: ObjectModel) -> ObjectType:
        """Resolve an object with a property map."""
        return ObjectType(
            name=model.title,
            properties=dict(model.properties),
            polymorphism=Polymorphism(discriminator=model.discriminator),
            required=model.required,
        )

    def _resolve_primitive(self, model: PrimitiveModel) -> BasicType:
        """Resolve a primitive (or untyped) model."""
        return BasicType(
            name=model.title,
            primitive_kind=model.primitive_kind,
            format=model.format,
        )
