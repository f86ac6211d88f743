"""
Cross-reference resolvers.

Map a reference name to the output document it will be rendered in, relative
to the document doing the referencing. Which resolver applies depends on the
calling context (an operation, a definition or a security scheme).
"""

from __future__ import annotations

import posixpath
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from ...utils import normalize_name
from ..config import ConversionContext


class DocumentResolver:
    """Resolves a reference name to a document path, or None for no link."""

    def __init__(self, context: ConversionContext):
        self.context = context
        self.config = context.config

    def __call__(self, name: str) -> str | None:
        raise NotImplementedError

    def _links_enabled(self) -> bool:
        return self.config.inter_document_cross_references_enabled and self.context.output_path is not None

    def _add_file_extension(self, name: str) -> str:
        return self.config.markup_language.add_file_extension(name)

    def _prefixed(self, path: str) -> str:
        return (self.config.inter_document_cross_references_prefix or "") + path


class DefinitionDocumentResolverDefault(DocumentResolver):
    """Definition document as seen from the output root."""

    def __call__(self, name: str) -> str | None:
        if not self._links_enabled():
            return None
        if self.config.separated_definitions_enabled:
            document = self._add_file_extension(normalize_name(name))
            return self._prefixed(posixpath.join(self.config.separated_definitions_folder, document))
        return self._prefixed(self._add_file_extension(self.config.definitions_document))


class DefinitionDocumentResolverFromOperation(DefinitionDocumentResolverDefault):
    """Definition document as seen from an operation document."""

    def __call__(self, name: str) -> str | None:
        default_resolving = super().__call__(name)
        if default_resolving is not None and self.config.separated_operations_enabled:
            # Separated operations live one folder below the output root
            return posixpath.join("..", default_resolving)
        return default_resolving


class DefinitionDocumentResolverFromDefinition(DefinitionDocumentResolverDefault):
    """Definition document as seen from another definition document."""

    def __call__(self, name: str) -> str | None:
        default_resolving = super().__call__(name)
        if default_resolving is not None and self.config.separated_definitions_enabled:
            # Separated definitions are siblings of each other
            return self._prefixed(self._add_file_extension(normalize_name(name)))
        return default_resolving


class SecurityDocumentResolver(DocumentResolver):
    """Security document as seen from the output root."""

    def __call__(self, name: str) -> str | None:
        if not self._links_enabled():
            return None
        return self._prefixed(self._add_file_extension(self.config.security_document))


@dataclass(frozen=True)
class PathOperation:
    """An operation together with the path and method it is bound to."""

    method: str
    path: str
    operation: Mapping[str, Any]

    @property
    def id(self) -> str:
        """The operationId, or ``"<path> <method>"`` when the document has none."""
        operation_id = self.operation.get("operationId")
        if operation_id:
            return operation_id
        return f"{self.path} {self.method.lower()}"


class OperationDocumentNameResolver:
    """Resolves the document an operation is rendered in."""

    def __init__(self, context: ConversionContext):
        self.context = context
        self.config = context.config

    def __call__(self, operation: PathOperation) -> str:
        config = self.config
        if config.separated_operations_enabled:
            document = config.markup_language.add_file_extension(normalize_name(operation.id))
            return posixpath.join(config.separated_operations_folder, document)
        return config.markup_language.add_file_extension(config.paths_document)


def no_link(name: str) -> None:
    """Resolver for contexts that never produce inter-document links."""
    return None
