"""
Examples module.

Generates example values for schemas and types, and the request/response
example maps of operations.
"""

from __future__ import annotations

from .example_generator import (
    MAX_RECURSION_TO_DISPLAY,
    STRING_FORMAT_EXAMPLES,
    TRUNCATION_SENTINEL,
    ExampleGenerator,
    RecursionGuard,
    primitive_example,
)
from .request_examples import (
    RequestExampleBuilder,
    ResponseExampleBuilder,
    encode_example_for_url,
    parameter_schema,
)

__all__ = [
    "ExampleGenerator",
    "RecursionGuard",
    "primitive_example",
    "TRUNCATION_SENTINEL",
    "MAX_RECURSION_TO_DISPLAY",
    "STRING_FORMAT_EXAMPLES",
    "RequestExampleBuilder",
    "ResponseExampleBuilder",
    "encode_example_for_url",
    "parameter_schema",
]
