"""
Type definitions produced by the type resolver.

These nodes represent resolved schemas, ready to be consumed by a renderer or
by the example generator. All references are resolved; a ``RefType`` keeps
the name and document link of the reference while wrapping the resolved
shape.
"""

from __future__ import annotations

import dataclasses
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from ..schema_ast.nodes import PrimitiveKind


class TypeKind(Enum):
    """Kind of type."""

    BASIC = "basic"  # string, integer, number, boolean, object, untyped
    ARRAY = "array"  # list of element type
    MAP = "map"  # string keys -> value type
    ENUM = "enum"  # closed set of string values
    OBJECT = "object"  # property map
    REF = "ref"  # named reference to another type


class PolymorphismNature(Enum):
    """How an object type relates to the schemas it was composed from."""

    NONE = "none"
    COMPOSITION = "composition"
    INHERITANCE = "inheritance"


@dataclass(frozen=True)
class Polymorphism:
    """Polymorphism information of an object type."""

    nature: PolymorphismNature = PolymorphismNature.NONE
    discriminator: str | None = None


@dataclass(frozen=True)
class Type:
    """Base class for all types.

    ``unique_name`` defaults to ``name``; references and hoisted inline
    definitions override it so that it identifies the type in the whole
    document.
    """

    name: str | None = None
    unique_name: str | None = None

    kind = TypeKind.BASIC

    def __post_init__(self):
        if self.unique_name is None:
            object.__setattr__(self, "unique_name", self.name)

    def with_names(self, name: str | None, unique_name: str | None = None) -> Type:
        """Return a copy carrying a new name and unique name."""
        return dataclasses.replace(self, name=name, unique_name=unique_name if unique_name is not None else name)

    def display_schema(self) -> str:
        """Short plain-text description of the type."""
        return self.name or ""


@dataclass(frozen=True)
class BasicType(Type):
    """A primitive type."""

    primitive_kind: PrimitiveKind = PrimitiveKind.UNTYPED
    format: str | None = None

    kind = TypeKind.BASIC

    def display_schema(self) -> str:
        if self.format:
            return f"{self.primitive_kind.value} ({self.format})"
        return self.primitive_kind.value


@dataclass(frozen=True)
class ArrayType(Type):
    """An array of elements of a single type."""

    element_type: Type | None = None
    collection_format: str | None = None

    kind = TypeKind.ARRAY

    def display_schema(self) -> str:
        element = self.element_type.display_schema() if self.element_type else "object"
        suffix = f"({self.collection_format})" if self.collection_format else ""
        return f"< {element} > array{suffix}"


@dataclass(frozen=True)
class MapType(Type):
    """A map with string keys."""

    value_type: Type | None = None

    kind = TypeKind.MAP

    def display_schema(self) -> str:
        value = self.value_type.display_schema() if self.value_type else "object"
        return f"< string, {value} > map"


@dataclass(frozen=True)
class EnumType(Type):
    """An enumeration; values are kept as display strings in source order.

    ``raw_values`` holds the values as declared, for example generation.
    """

    values: tuple[str, ...] = ()
    raw_values: tuple[Any, ...] = ()

    kind = TypeKind.ENUM

    def display_schema(self) -> str:
        return "enum ({})".format(", ".join(self.values))


@dataclass(frozen=True)
class ObjectType(Type):
    """An object with named properties.

    Properties map to the raw schema nodes they were declared with, so the
    renderer can still read descriptions, constraints and examples.
    """

    properties: dict[str, dict[str, Any]] = field(default_factory=dict)
    polymorphism: Polymorphism = field(default_factory=Polymorphism)
    required: tuple[str, ...] = ()

    kind = TypeKind.OBJECT

    def display_schema(self) -> str:
        return "object"

    def is_required(self, property_name: str) -> bool:
        """Whether a property is required, by the object or by itself."""
        if property_name in self.required:
            return True
        prop = self.properties.get(property_name) or {}
        return prop.get("required") is True


@dataclass(frozen=True)
class RefType(Type):
    """A named reference to another type.

    Attributes:
        link_target: Document the referenced type is rendered in, or None
            when no inter-document link applies
        resolved_type: The referenced type
        inline: Whether the reference points at a hoisted inline definition
            rather than a named definition of the document
    """

    link_target: str | None = None
    resolved_type: Type | None = None
    inline: bool = False

    kind = TypeKind.REF

    def display_schema(self) -> str:
        return self.name or (self.resolved_type.display_schema() if self.resolved_type else "")


def resolve_ref_type(type_: Type | None) -> Type | None:
    """Recursively unwrap references down to a concrete type."""
    while isinstance(type_, RefType):
        type_ = type_.resolved_type
    return type_
