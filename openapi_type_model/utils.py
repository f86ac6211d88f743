"""
Utility functions for the OpenAPI type model.
"""

import json
import re
from typing import Any

# Characters allowed in an output document name
_NAME_FORBIDDEN_PATTERN = re.compile(r"[^0-9A-Za-z_-]+")

# Repeated separators collapse to the first one
_REPEATED_SEPARATOR_PATTERN = re.compile(r"([_-])[_-]+")


def normalize_name(name: str) -> str:
    """Turn an arbitrary identifier into something usable as a file name.

    Examples:
        "/test get" -> "test_get"
        "DefinitionName" -> "DefinitionName"
        "my--weird__name!" -> "my-weird_name"

    Args:
        name: The identifier (definition name, operation id, ...)

    Returns:
        The normalized name
    """
    if not name:
        return ""
    normalized = _NAME_FORBIDDEN_PATTERN.sub("_", name)
    normalized = _REPEATED_SEPARATOR_PATTERN.sub(r"\1", normalized)
    return normalized.strip("_-").strip()


def simple_ref_name(ref: str) -> str:
    """Extract the definition name from a $ref string.

    Local JSON pointers ("#/components/schemas/Pet", "#/definitions/Pet")
    keep their last segment, anything else is returned unchanged.
    """
    if ref.startswith("#/"):
        return ref.rsplit("/", 1)[-1]
    return ref


def stringify_example(value: Any) -> str:
    """Render an example value the way it would appear in a URL."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (dict, list)):
        return json.dumps(value)
    return str(value)
