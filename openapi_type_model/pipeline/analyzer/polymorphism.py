"""
Polymorphism classification for composed (allOf) schemas.

Merges the properties of every composition branch into a single object type
and decides whether the composite is a plain composition or a discriminated
inheritance.
"""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Callable, Iterable

from ..schema_ast.nodes import ComposedModel, SchemaModel
from .types import ObjectType, Polymorphism, PolymorphismNature, Type, resolve_ref_type

logger = logging.getLogger(__name__)

# (model, references being resolved) -> type
ResolveFunction = Callable[[SchemaModel, frozenset], Type]


def _merge_names(target: list[str], names: Iterable[str]) -> None:
    for name in names:
        if name not in target:
            target.append(name)


class PolymorphismClassifier:
    """Merges allOf branches and classifies the result."""

    def __init__(self, resolve: ResolveFunction):
        """
        Initialize the classifier.

        Args:
            resolve: Function resolving a branch model to a type
        """
        self.resolve = resolve

    def classify(self, model: ComposedModel, resolving: frozenset = frozenset()) -> ObjectType:
        """
        Merge the branches of a composed model into one object type.

        Branches are visited in document order. On a property name collision
        the later branch's schema wins, while the property keeps the position
        it was first declared at. The composite is named after the last
        branch that has a name.

        Args:
            model: The composed model
            resolving: References currently being resolved

        Returns:
            ObjectType with merged properties and polymorphism information
        """
        nature = PolymorphismNature.NONE
        discriminator = None
        properties: dict = {}
        required: list[str] = []
        name = None
        merged = 0

        for branch in model.branches:
            branch_type = resolve_ref_type(self.resolve(branch, resolving))
            if branch_type is None:
                continue

            if branch_type.name is not None:
                name = branch_type.name

            if not isinstance(branch_type, ObjectType):
                logger.debug("Skipping non-object allOf branch at %s", branch.source_path)
                continue

            if branch_type.polymorphism.discriminator:
                nature = PolymorphismNature.INHERITANCE
                discriminator = branch_type.polymorphism.discriminator

            properties.update(branch_type.properties)
            _merge_names(required, branch_type.required)
            merged += 1

        # A single merged branch is not a composition
        if nature is PolymorphismNature.NONE and merged > 1:
            nature = PolymorphismNature.COMPOSITION

        if nature is not PolymorphismNature.INHERITANCE:
            discriminator = model.discriminator

        _merge_names(required, model.required)

        return ObjectType(
            name=name if name is not None else model.title,
            properties=properties,
            polymorphism=Polymorphism(nature=nature, discriminator=discriminator),
            required=tuple(required),
        )


def reconcile_required(object_type: ObjectType, owner_required: Iterable[str]) -> ObjectType:
    """Move required markers from the properties to the owning object.

    Every property listed in ``owner_required`` loses its own boolean
    ``required`` flag, so that it is only marked required once when rendered.
    ``required`` lists of nested object properties are left untouched.

    Args:
        object_type: The object type whose properties are reconciled
        owner_required: The owning schema's required list

    Returns:
        A copy of the object type; the input is not modified
    """
    required: list[str] = []
    _merge_names(required, owner_required)
    _merge_names(required, object_type.required)

    properties = {}
    for prop_name, prop_schema in object_type.properties.items():
        if prop_name in required and isinstance(prop_schema.get("required"), bool):
            prop_schema = {k: v for k, v in prop_schema.items() if k != "required"}
        properties[prop_name] = prop_schema

    return dataclasses.replace(object_type, properties=properties, required=tuple(required))
