"""
Pipeline - OpenAPI schema graph to renderer-agnostic type model.

This module provides a phased architecture for turning the schema graph of
an API description document into types and example payloads:

1. Phase 1 (Normalizer): Classify raw schema nodes into normalized models
2. Phase 2 (Analyzer): Resolve references, merge compositions, hoist inline objects
3. Phase 3 (Examples): Generate example values and request/response example maps
"""

from __future__ import annotations

from .config import ConversionConfig, ConversionContext, MarkupLanguage
from .generator import (
    TypeModelBuilder,
    build_type_model,
    document_definitions,
    document_parameters,
    iter_operations,
)

__all__ = [
    "TypeModelBuilder",
    "build_type_model",
    "document_definitions",
    "document_parameters",
    "iter_operations",
    "ConversionConfig",
    "ConversionContext",
    "MarkupLanguage",
]
