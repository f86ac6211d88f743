"""
Example generator.

Synthesizes a representative value for a schema or a resolved type. Authored
examples always win over generated ones; references are followed through the
document's named definitions, with a per-reference visit bound so that
self-referential schemas terminate.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any

from ..analyzer.type_resolver import TypeResolver
from ..analyzer.types import ArrayType, BasicType, EnumType, MapType, ObjectType, RefType, Type
from ..config import ConversionConfig
from ..schema_ast.nodes import (
    ArrayModel,
    ComposedModel,
    EnumModel,
    MapModel,
    ModelKind,
    ObjectModel,
    PrimitiveKind,
    PrimitiveModel,
    SchemaModel,
)
from ..schema_ast.normalizer import SchemaNormalizer

logger = logging.getLogger(__name__)

# Returned in place of a reference visited too many times
TRUNCATION_SENTINEL = "..."

# Number of times a reference is expanded along one generation path
MAX_RECURSION_TO_DISPLAY = 2

# Example values for string formats
STRING_FORMAT_EXAMPLES = {
    "byte": "Ynl0ZQ==",
    "date": "1970-01-01",
    "date-time": "1970-01-01T00:00:00Z",
    "email": "email@example.com",
    "password": "secret",
    "uuid": "f81d4fae-7dec-11d0-a765-00a0c91e6bf6",
}

# Map examples use this literal as their single key
MAP_EXAMPLE_KEY = "string"


@dataclass(frozen=True)
class RecursionGuard:
    """Per-reference visit counts along the current generation path.

    The guard is never mutated: ``enter`` returns a new guard, so sibling
    branches each start from the counts of their common parent.
    """

    visits: Mapping[str, int] = field(default_factory=dict)
    limit: int = field(init=False, default=MAX_RECURSION_TO_DISPLAY)

    @classmethod
    def with_unsafe_limit(cls, limit: int) -> RecursionGuard:
        """Create a guard expanding each reference up to ``limit`` times.

        Raising the limit makes output grow exponentially on recursive
        schemas; the default of 2 should be kept unless there is a reason.
        """
        if isinstance(limit, bool) or not isinstance(limit, int):
            raise ValueError(f"Recursion limit must be an integer, got {limit!r}")
        if limit < 1:
            raise ValueError(f"Recursion limit must be at least 1, got {limit}")

        guard = cls()
        object.__setattr__(guard, "limit", limit)
        return guard

    def count(self, ref_name: str) -> int:
        """Number of times a reference was entered along this path."""
        return self.visits.get(ref_name, 0)

    def enter(self, ref_name: str) -> RecursionGuard:
        """Return a guard with one more visit of ``ref_name``."""
        visits = dict(self.visits)
        visits[ref_name] = visits.get(ref_name, 0) + 1

        guard = RecursionGuard(visits)
        object.__setattr__(guard, "limit", self.limit)
        return guard

    def exceeded(self, ref_name: str) -> bool:
        """Whether ``ref_name`` was entered more often than allowed."""
        return self.count(ref_name) > self.limit


def primitive_example(primitive_kind: PrimitiveKind, format: str | None = None) -> Any:
    """Example value of a primitive kind without authored example or default."""
    if primitive_kind is PrimitiveKind.STRING:
        return STRING_FORMAT_EXAMPLES.get(format, "string")
    if primitive_kind is PrimitiveKind.INTEGER:
        return 0
    if primitive_kind is PrimitiveKind.NUMBER:
        return 0.0
    if primitive_kind is PrimitiveKind.BOOLEAN:
        return True
    if primitive_kind is PrimitiveKind.OBJECT:
        return {}
    return "untyped"


class ExampleGenerator:
    """Generates example values for schemas and types."""

    def __init__(self, normalizer: SchemaNormalizer, config: ConversionConfig | None = None):
        """
        Initialize the generator.

        Args:
            normalizer: Normalizer holding the document's named definitions
            config: Conversion configuration
        """
        self.normalizer = normalizer
        self.config = config or ConversionConfig()
        # Only used to merge allOf branches; example generation never links
        self.type_resolver = TypeResolver(normalizer)

    @property
    def include_optional_properties(self) -> bool:
        return self.config.generated_optional_property_examples_enabled

    def generate(self, schema: Any, guard: RecursionGuard | None = None, path: str = "#") -> Any:
        """
        Generate an example for a raw schema node.

        Args:
            schema: The raw schema node
            guard: Recursion guard of the enclosing generation, if any
            path: Path of the node in the document

        Returns:
            The example value
        """
        return self.generate_for_model(self.normalizer.normalize(schema, path), guard)

    def generate_for_model(self, model: SchemaModel, guard: RecursionGuard | None = None) -> Any:
        """Generate an example for a normalized model."""
        if guard is None:
            guard = RecursionGuard()

        if model.kind is ModelKind.REFERENCE:
            if model.has_example:
                return model.example
            return self.generate_for_reference(model.ref_name, guard)

        if model.has_example:
            return model.example

        if model.kind is ModelKind.ARRAY:
            return self._example_for_array(model, guard)

        if model.kind is ModelKind.MAP:
            return self._example_for_map(model, guard)

        if model.kind is ModelKind.COMPOSED:
            return self._example_for_composed(model, guard)

        if model.kind is ModelKind.OBJECT:
            return self._example_for_object(model, guard)

        if model.kind is ModelKind.ENUM:
            return self._example_for_enum(model)

        return self._example_for_primitive(model)

    def generate_for_reference(self, ref_name: str, guard: RecursionGuard | None = None, generate_missing: bool = True) -> Any:
        """
        Generate an example for a named definition.

        The definition's authored example is returned verbatim. Otherwise an
        example is generated from its shape, unless the reference has
        already been expanded as often as the guard allows on this path, in
        which case the truncation sentinel is returned.

        Args:
            ref_name: Name of the referenced definition
            guard: Recursion guard of the enclosing generation
            generate_missing: Whether to generate an example when the
                definition has none

        Returns:
            The example, ``None`` if there is none and generation is off
        """
        if guard is None:
            guard = RecursionGuard()

        model = self.normalizer.normalize_definition(ref_name)
        if model is None:
            logger.warning("Cannot generate an example for unresolvable reference '%s'", ref_name)
            return {}

        if model.has_example:
            return model.example
        if not generate_missing:
            return None

        guard = guard.enter(ref_name)
        if guard.exceeded(ref_name):
            logger.debug("Truncating example of '%s' after %d expansions", ref_name, guard.limit)
            return TRUNCATION_SENTINEL

        return self.generate_for_model(model, guard)

    def example_for_properties(
        self,
        properties: Mapping[str, Any],
        required: tuple[str, ...] = (),
        guard: RecursionGuard | None = None,
        path: str = "#",
    ) -> dict[str, Any]:
        """
        Generate an example mapping for a property map.

        Properties keep their declaration order. Non-required properties are
        left out when optional property examples are disabled.
        """
        if guard is None:
            guard = RecursionGuard()

        example = {}
        for prop_name, prop_schema in properties.items():
            if not self._wants_property(prop_name, prop_schema, required):
                continue
            prop_model = self.normalizer.normalize(prop_schema, f"{path}/properties/{prop_name}")
            example[prop_name] = self.generate_for_model(prop_model, guard)
        return example

    def generate_for_type(self, type_: Type | None, guard: RecursionGuard | None = None) -> Any:
        """
        Generate an example for a resolved type.

        Args:
            type_: The type
            guard: Recursion guard of the enclosing generation, if any

        Returns:
            The example value
        """
        if guard is None:
            guard = RecursionGuard()

        if type_ is None:
            return {}

        if isinstance(type_, RefType):
            if self._is_definition_reference(type_):
                return self.generate_for_reference(type_.name, guard)
            return self.generate_for_type(type_.resolved_type, guard)

        if isinstance(type_, ArrayType):
            return [self.generate_for_type(type_.element_type, guard)]

        if isinstance(type_, MapType):
            return {MAP_EXAMPLE_KEY: self.generate_for_type(type_.value_type, guard)}

        if isinstance(type_, ObjectType):
            return self.example_for_properties(type_.properties, type_.required, guard)

        if isinstance(type_, EnumType):
            if type_.raw_values:
                return type_.raw_values[0]
            return type_.values[0] if type_.values else "string"

        if isinstance(type_, BasicType):
            return primitive_example(type_.primitive_kind, type_.format)

        return {}

    def _is_definition_reference(self, ref: RefType) -> bool:
        if ref.inline or ref.name is None:
            return False
        return ref.name == ref.unique_name and ref.name in self.normalizer.definitions

    def _wants_property(self, prop_name: str, prop_schema: Any, required: tuple[str, ...]) -> bool:
        if self.include_optional_properties or prop_name in required:
            return True
        return isinstance(prop_schema, Mapping) and prop_schema.get("required") is True

    def _example_for_array(self, model: ArrayModel, guard: RecursionGuard) -> list[Any]:
        if model.items is None:
            return [{}]
        return [self.generate_for_model(model.items, guard)]

    def _example_for_map(self, model: MapModel, guard: RecursionGuard) -> dict[str, Any]:
        if model.value is None:
            return {MAP_EXAMPLE_KEY: {}}
        return {MAP_EXAMPLE_KEY: self.generate_for_model(model.value, guard)}

    def _example_for_composed(self, model: ComposedModel, guard: RecursionGuard) -> dict[str, Any]:
        merged = self.type_resolver.classifier.classify(model)
        return self.example_for_properties(merged.properties, merged.required, guard, model.source_path)

    def _example_for_object(self, model: ObjectModel, guard: RecursionGuard) -> dict[str, Any]:
        return self.example_for_properties(model.properties, model.required, guard, model.source_path)

    def _example_for_enum(self, model: EnumModel) -> Any:
        if "default" in model.raw:
            return model.raw["default"]
        return model.values[0]

    def _example_for_primitive(self, model: PrimitiveModel) -> Any:
        if model.has_default:
            return model.default
        return primitive_example(model.primitive_kind, model.format)
