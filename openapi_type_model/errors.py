"""
Exceptions raised by the type model pipeline.
"""

from __future__ import annotations


class TypeModelError(Exception):
    """Base class for all errors raised while building the type model."""


class SchemaConversionError(TypeModelError):
    """Raised when a schema node cannot be structurally converted.

    Missing information never raises (it degrades to an untyped placeholder);
    this error is reserved for nodes whose shape is outright wrong, such as a
    list where a schema mapping is expected.
    """

    def __init__(self, message: str, source_path: str = ""):
        self.message = message
        self.source_path = source_path
        if source_path:
            message = f"{message} (at {source_path})"
        super().__init__(message)

    def with_context(self, context: str) -> SchemaConversionError:
        """Return a copy of this error prefixed with what was being converted."""
        return SchemaConversionError(f"{context}: {self.message}", self.source_path)


class UnknownDefinitionError(TypeModelError):
    """Raised when a named definition is requested that the document lacks."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(f"Unknown definition '{name}'")
