"""
Request and response example maps.

A request example resembles a literal HTTP request: the path template with
path and query parameters filled in, pseudo header lines and a body. A
response example map holds one example per status code.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any
from urllib.parse import quote_plus

from ...utils import simple_ref_name, stringify_example
from ..analyzer.reference_resolver import PathOperation
from ..config import ConversionConfig
from .example_generator import ExampleGenerator

logger = logging.getLogger(__name__)

# Swagger 2 parameter fields describing the parameter's own schema
_PARAMETER_SCHEMA_FIELDS = (
    "type",
    "format",
    "items",
    "enum",
    "default",
    "minimum",
    "maximum",
    "minLength",
    "maxLength",
    "pattern",
    "collectionFormat",
)


def encode_example_for_url(value: Any) -> str:
    """URL-encode an example value for use in a path or query string."""
    return quote_plus(stringify_example(value))


def parameter_schema(parameter: Mapping[str, Any]) -> dict[str, Any]:
    """Return the schema of a non-body parameter.

    OpenAPI 3 parameters carry a ``schema``; Swagger 2 parameters describe
    their type with fields on the parameter itself.
    """
    schema = parameter.get("schema")
    if isinstance(schema, Mapping):
        return dict(schema)
    return {k: parameter[k] for k in _PARAMETER_SCHEMA_FIELDS if k in parameter}


def first_media_type(content: Any) -> Mapping[str, Any] | None:
    """Return the first media type object of a ``content`` map."""
    if not isinstance(content, Mapping) or not content:
        return None
    media_type = next(iter(content.values()))
    return media_type if isinstance(media_type, Mapping) else None


class _ExampleMapBuilder:
    """Shared state of the request and response example builders."""

    def __init__(self, generator: ExampleGenerator, config: ConversionConfig | None = None):
        self.generator = generator
        self.config = config or generator.config

    @property
    def generate_missing(self) -> bool:
        return self.config.generated_examples_enabled

    def _schema_example(self, schema: Any, path: str) -> Any:
        """Authored or generated example of a body schema, or None."""
        if not isinstance(schema, Mapping):
            return None

        example = schema.get("example")
        if example is None and "$ref" in schema:
            example = self.generator.generate_for_reference(
                simple_ref_name(schema["$ref"]),
                generate_missing=self.generate_missing,
            )
        if example is None and self.generate_missing:
            example = self.generator.generate(schema, path=path)
        return example


class RequestExampleBuilder(_ExampleMapBuilder):
    """Builds the request example map of an operation."""

    def __init__(
        self,
        generator: ExampleGenerator,
        config: ConversionConfig | None = None,
        parameter_definitions: Mapping[str, Any] | None = None,
    ):
        """
        Initialize the builder.

        Args:
            generator: Example generator over the document's definitions
            config: Conversion configuration, defaults to the generator's
            parameter_definitions: Named parameters that ``$ref`` parameters
                point to
        """
        super().__init__(generator, config)
        self.parameter_definitions = parameter_definitions or {}

    def build(self, operation: PathOperation) -> dict[str, Any]:
        """
        Build the request example map of an operation.

        Keys are parameter locations: ``"path"`` holds the path template
        with path and query parameters filled in, ``"header"`` a
        ``name:"type"`` pseudo header, ``"body"`` the body example. Other
        locations hold the parameter's example value.

        Args:
            operation: The operation

        Returns:
            The example map, in parameter order
        """
        examples: dict[str, Any] = {}
        if self.generate_missing:
            examples["path"] = operation.path

        for index, parameter in enumerate(operation.operation.get("parameters") or []):
            parameter = self._resolve_parameter(parameter)
            if parameter is None:
                continue

            location = parameter.get("in")
            path = f"#/{operation.id}/parameters/{index}"
            if location == "body":
                example = self._body_example(parameter, parameter.get("schema"), path)
            elif self.generate_missing:
                example = self._located_example(parameter, location, examples, path)
            else:
                example = None

            if example is not None:
                examples[location] = example

        request_body = operation.operation.get("requestBody")
        if isinstance(request_body, Mapping):
            example = self._request_body_example(request_body, f"#/{operation.id}/requestBody")
            if example is not None:
                examples["body"] = example

        return examples

    def _resolve_parameter(self, parameter: Any) -> Mapping[str, Any] | None:
        if not isinstance(parameter, Mapping):
            return None
        if "$ref" not in parameter:
            return parameter

        name = simple_ref_name(parameter["$ref"])
        resolved = self.parameter_definitions.get(name)
        if resolved is None:
            logger.warning("Skipping unresolvable parameter reference '%s'", parameter["$ref"])
        return resolved

    def _located_example(self, parameter: Mapping[str, Any], location: str, examples: dict[str, Any], path: str) -> Any:
        name = parameter.get("name", "")
        schema = parameter_schema(parameter)

        if location == "header":
            return '{}:"{}"'.format(name, schema.get("type") or "string")

        value = self._parameter_value(parameter, schema, path)

        if location == "path":
            return examples["path"].replace("{" + name + "}", encode_example_for_url(value))

        if location == "query":
            if parameter.get("required") is True or self.config.generated_optional_query_parameter_example_enabled:
                separator = "&" if "?" in examples["path"] else "?"
                examples["path"] = f"{examples['path']}{separator}{name}={encode_example_for_url(value)}"
            return None

        return value

    def _parameter_value(self, parameter: Mapping[str, Any], schema: dict[str, Any], path: str) -> Any:
        """Authored example of a parameter, else a generated one."""
        value = parameter.get("example")
        if value is None:
            value = parameter.get("x-example")
        if value is not None:
            return value

        items = schema.get("items")
        if schema.get("type") == "array" and isinstance(items, Mapping):
            # Arrays are filled in with a single item
            return self.generator.generate(items, path=f"{path}/items")
        return self.generator.generate(schema, path=path)

    def _body_example(self, container: Mapping[str, Any], schema: Any, path: str) -> Any:
        example = self._authored_body_example(container, schema)
        if example is None:
            example = self._schema_example(schema, path)
        return example

    def _request_body_example(self, request_body: Mapping[str, Any], path: str) -> Any:
        media_type = first_media_type(request_body.get("content"))
        if media_type is None:
            return None
        return self._body_example(media_type, media_type.get("schema"), path)

    def _authored_body_example(self, container: Mapping[str, Any], schema: Any) -> Any:
        if not isinstance(schema, Mapping):
            schema = {}
        for candidate in (
            container.get("examples"),
            container.get("example"),
            schema.get("example"),
            container.get("x-examples"),
            schema.get("x-examples"),
        ):
            if candidate is not None:
                return candidate
        return None


class ResponseExampleBuilder(_ExampleMapBuilder):
    """Builds the response example map of an operation."""

    def build(self, operation: PathOperation) -> dict[str, Any]:
        """
        Build the response example map of an operation.

        Each status code, in document order, maps to the first media type's
        authored examples, else the schema's example, else a generated
        example when generation is enabled. Status codes without any
        example are left out.
        """
        examples: dict[str, Any] = {}
        responses = operation.operation.get("responses") or {}

        for status, response in responses.items():
            if not isinstance(response, Mapping):
                continue
            example = self._response_example(response, f"#/{operation.id}/responses/{status}")
            if example is not None:
                examples[str(status)] = example

        return examples

    def _response_example(self, response: Mapping[str, Any], path: str) -> Any:
        if "content" in response:
            media_type = first_media_type(response["content"])
            if media_type is None:
                return None
            container, schema = media_type, media_type.get("schema")
        else:
            # Swagger 2 puts schema and examples on the response itself
            container, schema = response, response.get("schema")

        example = container.get("examples")
        if example is None:
            example = container.get("example")
        if example is None:
            example = self._schema_example(schema, path)
        return example
