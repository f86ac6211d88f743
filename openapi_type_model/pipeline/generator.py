"""
Type model builder.

Entry point of the pipeline: exposes the resolved type of every part of a
document the rendering layer displays (definitions, properties, parameters,
request and response bodies), each with the inline definitions hoisted out
of it, and the request/response example maps of operations.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from typing import Any

from ..errors import SchemaConversionError, UnknownDefinitionError
from ..utils import simple_ref_name
from .analyzer import (
    BasicType,
    DefinitionDocumentResolverDefault,
    DefinitionDocumentResolverFromDefinition,
    DefinitionDocumentResolverFromOperation,
    InlineResult,
    ObjectType,
    OperationDocumentNameResolver,
    PathOperation,
    RefType,
    ResolvedProperties,
    SecurityDocumentResolver,
    Type,
    TypeResolver,
    collect_nested,
    extract_inline,
    reconcile_required,
    resolve_properties,
    resolve_ref_type,
)
from .config import ConversionContext
from .examples import ExampleGenerator, RequestExampleBuilder, ResponseExampleBuilder
from .examples.request_examples import first_media_type, parameter_schema
from .schema_ast import PrimitiveKind, SchemaNormalizer, collection_format_for

logger = logging.getLogger(__name__)

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch", "trace")

# Name of the body parameter derived from an OpenAPI 3 requestBody
BODY_PARAMETER_NAME = "Body"

# Prefix of the names given to inline response types
RESPONSE_LABEL = "Response"


def iter_operations(paths: Mapping[str, Any] | None) -> Iterator[PathOperation]:
    """Yield the operations of a ``paths`` object in document order."""
    for path, path_item in (paths or {}).items():
        if not isinstance(path_item, Mapping):
            continue
        shared_parameters = path_item.get("parameters") or []
        for method, operation in path_item.items():
            if method.lower() not in HTTP_METHODS or not isinstance(operation, Mapping):
                continue
            if shared_parameters:
                # Path-level parameters apply to every operation of the path
                operation = dict(operation)
                operation["parameters"] = list(shared_parameters) + list(operation.get("parameters") or [])
            yield PathOperation(method.upper(), path, operation)


def document_definitions(document: Mapping[str, Any]) -> dict[str, Any]:
    """Named schema definitions of an OpenAPI 3 or Swagger 2 document."""
    components = document.get("components") or {}
    if "schemas" in components:
        return dict(components["schemas"] or {})
    return dict(document.get("definitions") or {})


def document_parameters(document: Mapping[str, Any]) -> dict[str, Any]:
    """Named reusable parameters of an OpenAPI 3 or Swagger 2 document."""
    components = document.get("components") or {}
    if "parameters" in components:
        return dict(components["parameters"] or {})
    return dict(document.get("parameters") or {})


class TypeModelBuilder:
    """
    Builds the type model of an API description document.

    Every ``*_type`` method returns an ``InlineResult``: the resolved type
    and the inline definitions hoisted from it when inline schemas are
    enabled. Structural conversion failures are raised as
    ``SchemaConversionError`` naming the definition, parameter or response
    being converted.
    """

    def __init__(
        self,
        definitions: Mapping[str, Any] | None,
        context: ConversionContext | None = None,
        parameter_definitions: Mapping[str, Any] | None = None,
    ):
        """
        Initialize the builder.

        Args:
            definitions: Reference name -> raw schema of every named
                definition in the document
            context: Conversion context (configuration and output path)
            parameter_definitions: Reference name -> raw parameter of the
                document's reusable parameters
        """
        self.definitions = dict(definitions or {})
        self.context = context or ConversionContext()
        self.config = self.context.config
        self.parameter_definitions = dict(parameter_definitions or {})

        self.normalizer = SchemaNormalizer(self.definitions)

        # Cross-reference resolvers, one per calling context
        self.definition_document_resolver = DefinitionDocumentResolverDefault(self.context)
        self.definition_document_resolver_from_operation = DefinitionDocumentResolverFromOperation(self.context)
        self.definition_document_resolver_from_definition = DefinitionDocumentResolverFromDefinition(self.context)
        self.security_document_resolver = SecurityDocumentResolver(self.context)
        self.operation_document_name_resolver = OperationDocumentNameResolver(self.context)

        self.definition_type_resolver = TypeResolver(self.normalizer, self.definition_document_resolver_from_definition)
        self.operation_type_resolver = TypeResolver(self.normalizer, self.definition_document_resolver_from_operation)

        self.example_generator = ExampleGenerator(self.normalizer, self.config)
        self.request_example_builder = RequestExampleBuilder(
            self.example_generator, self.config, self.parameter_definitions
        )
        self.response_example_builder = ResponseExampleBuilder(self.example_generator, self.config)

    @property
    def inline_schema_enabled(self) -> bool:
        return self.config.inline_schema_enabled

    # Definitions

    def definition_type(self, name: str) -> InlineResult:
        """
        Resolve a named definition.

        Object definitions get their required markers reconciled and the
        anonymous objects of their properties hoisted. Any other definition
        is hoisted as a whole under ``"<name> inline"``.

        Args:
            name: The definition name

        Returns:
            InlineResult of the definition's type

        Raises:
            UnknownDefinitionError: If the document has no such definition
            SchemaConversionError: If the definition is malformed
        """
        try:
            model = self.normalizer.normalize_definition(name)
            if model is None:
                raise UnknownDefinitionError(name)

            logger.debug("Resolving definition '%s'", name)
            type_ = resolve_ref_type(self.definition_type_resolver.resolve(model, frozenset([name])))

            if not isinstance(type_, ObjectType):
                if self.inline_schema_enabled:
                    return extract_inline(type_, name, f"{name} inline")
                return InlineResult(type_)

            if type_.name is None:
                type_ = type_.with_names(name)
            type_ = reconcile_required(type_, model.required)
            properties = self._property_types(type_, name, self.definition_type_resolver, model.source_path)
            return InlineResult(type_, properties.inline_definitions)
        except SchemaConversionError as e:
            raise e.with_context(f"Cannot convert definition '{name}'") from e

    def definition_names(self) -> list[str]:
        """Names of the document's definitions, in document order."""
        return list(self.definitions)

    def property_types(
        self,
        object_type: ObjectType,
        parent_unique_name: str | None = None,
        from_operation: bool = False,
    ) -> ResolvedProperties:
        """
        Resolve the types of an object's properties.

        Args:
            object_type: The object type, typically from ``definition_type``
                or one of its inline definitions
            parent_unique_name: Prefix of the unique names of hoisted
                property types, defaults to the object's unique name
            from_operation: Whether the object was hoisted from an operation,
                which decides how references are linked

        Returns:
            ResolvedProperties with the property types and hoisted objects
        """
        parent = parent_unique_name or object_type.unique_name or ""
        resolver = self.operation_type_resolver if from_operation else self.definition_type_resolver
        try:
            return self._property_types(object_type, parent, resolver)
        except SchemaConversionError as e:
            raise e.with_context(f"Cannot convert properties of '{parent}'") from e

    def _property_types(
        self,
        object_type: ObjectType,
        parent_unique_name: str,
        resolver: TypeResolver,
        source_path: str | None = None,
    ) -> ResolvedProperties:
        return resolve_properties(
            object_type.properties,
            parent_unique_name,
            resolver.resolve_schema,
            inline_enabled=self.inline_schema_enabled,
            source_path=source_path,
        )

    def inline_definitions_closure(self, result: InlineResult, from_operation: bool = False) -> tuple[ObjectType, ...]:
        """
        Expand the inline definitions of a result with the nested ones.

        Args:
            result: A result of one of the ``*_type`` methods
            from_operation: Whether the result belongs to an operation, which
                decides how references are linked

        Returns:
            Every inline definition to render, depth-first
        """
        resolver = self.operation_type_resolver if from_operation else self.definition_type_resolver
        return collect_nested(result.inline_definitions, resolver.resolve_schema)

    # Operations

    def parameter_type(self, operation: PathOperation, parameter: Mapping[str, Any]) -> InlineResult:
        """
        Resolve the type of an operation parameter.

        Hoisted parameter types are named ``"<operation id> <parameter>"``.
        With flat bodies enabled, object types are left in place.

        Args:
            operation: The operation the parameter belongs to
            parameter: The raw parameter, possibly a ``$ref``

        Returns:
            InlineResult of the parameter's type
        """
        parameter = self._resolve_parameter(parameter)
        name = parameter.get("name") or ""
        path = f"#/{operation.id}/parameters/{name}"

        try:
            if "$ref" in parameter:
                # Unresolvable parameter reference, kept as a named stub
                ref_name = simple_ref_name(parameter["$ref"])
                stub = ObjectType(name=ref_name)
                link = self.definition_document_resolver_from_operation(ref_name)
                return InlineResult(RefType(name=ref_name, link_target=link, resolved_type=stub))

            if parameter.get("in") == "body":
                type_ = self._body_type(parameter.get("schema"), name, path)
            else:
                type_ = self._parameter_schema_type(parameter, name, path)
        except SchemaConversionError as e:
            raise e.with_context(f"Cannot convert parameter '{name}' of operation '{operation.id}'") from e

        return self._inline_operation_type(type_, name, f"{operation.id} {name}")

    def request_body_type(self, operation: PathOperation) -> InlineResult | None:
        """
        Resolve the type of an operation's OpenAPI 3 request body.

        The body is treated as a parameter named ``"Body"``. Returns None
        when the operation has no request body.
        """
        request_body = operation.operation.get("requestBody")
        if not isinstance(request_body, Mapping):
            return None

        media_type = first_media_type(request_body.get("content")) or {}
        path = f"#/{operation.id}/requestBody"
        try:
            type_ = self._body_type(media_type.get("schema"), BODY_PARAMETER_NAME, path)
        except SchemaConversionError as e:
            raise e.with_context(f"Cannot convert request body of operation '{operation.id}'") from e

        return self._inline_operation_type(type_, BODY_PARAMETER_NAME, f"{operation.id} {BODY_PARAMETER_NAME}")

    def response_type(self, operation: PathOperation, status: str) -> InlineResult:
        """
        Resolve the type of one response of an operation.

        A response without a schema is a plain string. Hoisted response
        types are named ``"Response <status>"``, uniquely
        ``"<operation id> Response <status>"``.

        Args:
            operation: The operation
            status: The response status code, e.g. ``"200"``

        Returns:
            InlineResult of the response's type
        """
        responses = operation.operation.get("responses") or {}
        response = responses.get(status)
        if response is None:
            response = responses.get(int(status)) if status.isdigit() else None
        response = response if isinstance(response, Mapping) else {}

        if "content" in response:
            schema = (first_media_type(response["content"]) or {}).get("schema")
        else:
            schema = response.get("schema")

        path = f"#/{operation.id}/responses/{status}"
        try:
            if schema is None:
                type_ = BasicType(name=str(status), primitive_kind=PrimitiveKind.STRING)
            else:
                type_ = self.operation_type_resolver.resolve_schema(schema, path)
        except SchemaConversionError as e:
            raise e.with_context(f"Cannot convert response '{status}' of operation '{operation.id}'") from e

        if not self.inline_schema_enabled:
            return InlineResult(type_)
        return extract_inline(type_, f"{RESPONSE_LABEL} {status}", f"{operation.id} {RESPONSE_LABEL} {status}")

    def request_examples(self, operation: PathOperation) -> dict[str, Any]:
        """Request example map of an operation, keyed by parameter location."""
        try:
            return self.request_example_builder.build(operation)
        except SchemaConversionError as e:
            raise e.with_context(f"Cannot generate request examples of operation '{operation.id}'") from e

    def response_examples(self, operation: PathOperation) -> dict[str, Any]:
        """Response example map of an operation, keyed by status code."""
        try:
            return self.response_example_builder.build(operation)
        except SchemaConversionError as e:
            raise e.with_context(f"Cannot generate response examples of operation '{operation.id}'") from e

    def operation_document(self, operation: PathOperation) -> str:
        """Document an operation is rendered in."""
        return self.operation_document_name_resolver(operation)

    def _resolve_parameter(self, parameter: Mapping[str, Any]) -> Mapping[str, Any]:
        if "$ref" not in parameter:
            return parameter
        resolved = self.parameter_definitions.get(simple_ref_name(parameter["$ref"]))
        if resolved is None:
            logger.warning("Unresolvable parameter reference '%s'", parameter["$ref"])
            return parameter
        return resolved

    def _body_type(self, schema: Any, name: str, path: str) -> Type:
        if schema is None:
            return BasicType(name=name, primitive_kind=PrimitiveKind.STRING)
        return self.operation_type_resolver.resolve_schema(schema, path)

    def _parameter_schema_type(self, parameter: Mapping[str, Any], name: str, path: str) -> Type:
        schema = parameter_schema(parameter)
        if schema.get("type") == "array" and "collectionFormat" not in schema:
            collection_format = collection_format_for(parameter)
            if collection_format is not None:
                schema["collectionFormat"] = collection_format

        type_ = self.operation_type_resolver.resolve_schema(schema, path)
        if type_.name is None:
            type_ = type_.with_names(name)
        return type_

    def _inline_operation_type(self, type_: Type, name: str, unique_name: str) -> InlineResult:
        if not self.inline_schema_enabled:
            return InlineResult(type_)
        if self.config.flat_body_enabled and isinstance(type_, ObjectType):
            return InlineResult(type_)
        return extract_inline(type_, name, unique_name)


def build_type_model(document: Mapping[str, Any], context: ConversionContext | None = None) -> TypeModelBuilder:
    """Create a builder over a parsed OpenAPI 3 or Swagger 2 document."""
    return TypeModelBuilder(
        document_definitions(document),
        context,
        parameter_definitions=document_parameters(document),
    )
