"""OpenAPI Type Model

A Python package for turning the schema graph of an OpenAPI/Swagger document
into a normalized, renderer-agnostic type model. Resolves cross references
between definitions and their output documents, merges allOf compositions
and generates cycle-safe example payloads.
"""

__version__ = "1.0.1"
__author__ = "François Lagunas"

from .errors import SchemaConversionError, TypeModelError, UnknownDefinitionError
from .pipeline import (
    ConversionConfig,
    ConversionContext,
    MarkupLanguage,
    TypeModelBuilder,
    build_type_model,
)

__all__ = [
    "TypeModelBuilder",
    "build_type_model",
    "ConversionConfig",
    "ConversionContext",
    "MarkupLanguage",
    "TypeModelError",
    "SchemaConversionError",
    "UnknownDefinitionError",
]
