"""
Inline schema extraction.

Anonymous object schemas declared in place (a property whose value is an
object literal, a response body without a $ref, ...) are hoisted into named
side definitions so the renderer can give each one its own section. The
hoisted definitions are returned alongside the rewritten type rather than
accumulated into a shared list.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any

from .types import ArrayType, MapType, ObjectType, RefType, Type


@dataclass(frozen=True)
class InlineResult:
    """A type together with the inline definitions hoisted out of it."""

    type: Type | None
    inline_definitions: tuple[ObjectType, ...] = ()


@dataclass(frozen=True)
class ResolvedProperties:
    """The types of an object's properties and everything hoisted from them."""

    types: dict[str, Type] = field(default_factory=dict)
    inline_definitions: tuple[ObjectType, ...] = ()


def extract_inline(type_: Type | None, name: str, unique_name: str) -> InlineResult:
    """
    Hoist the inline object types found in a type.

    An object type with at least one property becomes an inline definition
    (named ``name``/``unique_name`` when it is anonymous) and is replaced by
    a reference pointing at it. Arrays and maps are rewritten around their
    element and value types. Anything else is returned as is.

    Args:
        type_: The type to process
        name: Display name given to an anonymous hoisted object
        unique_name: Unique name given to an anonymous hoisted object

    Returns:
        InlineResult with the rewritten type and the hoisted definitions
    """
    if isinstance(type_, ObjectType) and type_.properties:
        if type_.name is None:
            type_ = type_.with_names(name, unique_name)
        ref = RefType(
            name=type_.name,
            unique_name=type_.unique_name,
            link_target=None,
            resolved_type=type_,
            inline=True,
        )
        return InlineResult(ref, (type_,))

    if isinstance(type_, ArrayType):
        inner = extract_inline(type_.element_type, name, unique_name)
        return InlineResult(
            dataclasses.replace(type_, element_type=inner.type),
            inner.inline_definitions,
        )

    if isinstance(type_, MapType):
        inner = extract_inline(type_.value_type, name, unique_name)
        return InlineResult(
            dataclasses.replace(type_, value_type=inner.type),
            inner.inline_definitions,
        )

    return InlineResult(type_)


def resolve_properties(
    properties: Mapping[str, Any],
    parent_unique_name: str,
    resolve_schema: Callable[[Any, str], Type],
    inline_enabled: bool = True,
    source_path: str | None = None,
) -> ResolvedProperties:
    """
    Resolve the property schemas of an object.

    Args:
        properties: Property name -> raw schema node
        parent_unique_name: Unique name of the owning object; hoisted
            property types are named ``"<parent> <property>"``
        resolve_schema: Resolves a raw schema node at a source path
        inline_enabled: Whether anonymous objects are hoisted
        source_path: Path of the owning schema, for error messages

    Returns:
        ResolvedProperties in declaration order
    """
    types: dict[str, Type] = {}
    inline_definitions: list[ObjectType] = []
    if source_path is None:
        source_path = f"#/{parent_unique_name}"

    for prop_name, prop_schema in properties.items():
        prop_type = resolve_schema(prop_schema, f"{source_path}/properties/{prop_name}")
        if inline_enabled:
            result = extract_inline(prop_type, prop_name, f"{parent_unique_name} {prop_name}")
            prop_type = result.type
            inline_definitions.extend(result.inline_definitions)
        types[prop_name] = prop_type

    return ResolvedProperties(types, tuple(inline_definitions))


def collect_nested(
    inline_definitions: tuple[ObjectType, ...],
    resolve_schema: Callable[[Any, str], Type],
) -> tuple[ObjectType, ...]:
    """
    Expand a list of hoisted definitions with the ones nested inside them.

    Each hoisted definition's properties are resolved in turn, and whatever
    they hoist is expanded the same way. The result is depth-first: every
    definition is directly followed by the definitions nested in it.
    """
    collected: list[ObjectType] = []
    for definition in inline_definitions:
        collected.append(definition)
        nested = resolve_properties(definition.properties, definition.unique_name, resolve_schema)
        collected.extend(collect_nested(nested.inline_definitions, resolve_schema))
    return tuple(collected)
