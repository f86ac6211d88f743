"""
Plain data and text views of a document's type model, used by the CLI.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jinja2

from .pipeline import TypeModelBuilder, iter_operations
from .pipeline.analyzer import ArrayType, EnumType, InlineResult, MapType, ObjectType, RefType, Type

CURRENT_DIR = Path(__file__).parent


def type_to_dict(type_: Type | None) -> dict[str, Any] | None:
    """Convert a type to JSON-serializable data."""
    if type_ is None:
        return None

    data: dict[str, Any] = {
        "kind": type_.kind.value,
        "name": type_.name,
        "unique_name": type_.unique_name,
        "schema": type_.display_schema(),
    }

    if isinstance(type_, RefType):
        data["link_target"] = type_.link_target
        data["resolved_type"] = type_to_dict(type_.resolved_type)
    elif isinstance(type_, ArrayType):
        data["element_type"] = type_to_dict(type_.element_type)
        data["collection_format"] = type_.collection_format
    elif isinstance(type_, MapType):
        data["value_type"] = type_to_dict(type_.value_type)
    elif isinstance(type_, EnumType):
        data["values"] = list(type_.values)
    elif isinstance(type_, ObjectType):
        data["properties"] = list(type_.properties)
        data["required"] = list(type_.required)
        data["polymorphism"] = {
            "nature": type_.polymorphism.nature.value,
            "discriminator": type_.polymorphism.discriminator,
        }
    elif hasattr(type_, "primitive_kind"):
        data["primitive_kind"] = type_.primitive_kind.value
        data["format"] = type_.format

    return data


def _result_to_dict(result: InlineResult, inline_definitions: tuple[ObjectType, ...]) -> dict[str, Any]:
    return {
        "type": type_to_dict(result.type),
        "inline_definitions": [type_to_dict(d) for d in inline_definitions],
    }


def build_summary(document: dict[str, Any], builder: TypeModelBuilder) -> dict[str, Any]:
    """
    Collect the type model of a whole document.

    Args:
        document: The parsed document
        builder: Builder over the document's definitions

    Returns:
        Definitions and operations, in document order
    """
    definitions = {}
    for name in builder.definition_names():
        result = builder.definition_type(name)
        entry = _result_to_dict(result, builder.inline_definitions_closure(result))
        entry["document"] = builder.definition_document_resolver(name)
        definitions[name] = entry

    operations = []
    for operation in iter_operations(document.get("paths")):
        parameters = {}
        for parameter in operation.operation.get("parameters") or []:
            result = builder.parameter_type(operation, parameter)
            key = parameter.get("name") or parameter.get("$ref", "")
            parameters[key] = _result_to_dict(result, builder.inline_definitions_closure(result, from_operation=True))

        request_body = builder.request_body_type(operation)
        if request_body is not None:
            request_body = _result_to_dict(
                request_body, builder.inline_definitions_closure(request_body, from_operation=True)
            )

        responses = {}
        for status in operation.operation.get("responses") or {}:
            result = builder.response_type(operation, str(status))
            responses[str(status)] = _result_to_dict(result, builder.inline_definitions_closure(result, from_operation=True))

        operations.append(
            {
                "id": operation.id,
                "method": operation.method,
                "path": operation.path,
                "document": builder.operation_document(operation),
                "parameters": parameters,
                "request_body": request_body,
                "responses": responses,
                "request_examples": builder.request_examples(operation),
                "response_examples": builder.response_examples(operation),
            }
        )

    return {"definitions": definitions, "operations": operations}


def render_summary(summary: dict[str, Any]) -> str:
    """Render a summary as plain text."""
    jinja_env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(CURRENT_DIR / "templates")),
        lstrip_blocks=True,
        trim_blocks=True,
    )
    jinja_env.filters["json"] = json.dumps
    template = jinja_env.get_template("summary.txt.jinja2")
    return template.render(**summary)
