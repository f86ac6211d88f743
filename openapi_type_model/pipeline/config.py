"""
Configuration for the type model pipeline.

Holds the switches the core consults (cross-reference layout, inline schema
hoisting, example generation) and the per-run output context.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum


class MarkupLanguage(str, Enum):
    """Markup language of the rendered output.

    Only used here to pick the file extension of cross-referenced documents.
    """

    ASCIIDOC = "asciidoc"
    MARKDOWN = "markdown"
    CONFLUENCE_MARKUP = "confluence_markup"

    @property
    def file_extension(self) -> str:
        return _FILE_EXTENSIONS[self]

    def add_file_extension(self, name: str) -> str:
        """Append this language's file extension to a document name."""
        return name + self.file_extension


_FILE_EXTENSIONS = {
    MarkupLanguage.ASCIIDOC: ".adoc",
    MarkupLanguage.MARKDOWN: ".md",
    MarkupLanguage.CONFLUENCE_MARKUP: ".txt",
}


@dataclass
class ConversionConfig:
    """Configuration options for type model conversion."""

    # Markup language of the rendered documents (drives file extensions)
    markup_language: MarkupLanguage = MarkupLanguage.ASCIIDOC

    # Cross-references between output documents
    inter_document_cross_references_enabled: bool = False
    inter_document_cross_references_prefix: str = ""

    # One file per definition / per operation
    separated_definitions_enabled: bool = False
    separated_operations_enabled: bool = False

    # Document and folder names (without extension)
    overview_document: str = "overview"
    paths_document: str = "paths"
    definitions_document: str = "definitions"
    security_document: str = "security"
    separated_operations_folder: str = "operations"
    separated_definitions_folder: str = "definitions"

    # Hoist anonymous object schemas into their own named definitions
    inline_schema_enabled: bool = True

    # Only hoist body parameter types that are not already objects
    flat_body_enabled: bool = False

    # Generate examples where the document does not provide any
    generated_examples_enabled: bool = False

    # Include optional query parameters in generated request paths
    generated_optional_query_parameter_example_enabled: bool = False

    # Include non-required properties in generated object examples
    generated_optional_property_examples_enabled: bool = True

    @staticmethod
    def from_dict(d: dict) -> ConversionConfig:
        """Create a config from a dictionary."""
        config = ConversionConfig()
        for k, v in d.items():
            if k == "markup_language":
                config.markup_language = MarkupLanguage(v)
            elif hasattr(config, k):
                setattr(config, k, v)
        return config

    def to_dict(self) -> dict:
        """Convert config to a dictionary."""
        return {
            "markup_language": self.markup_language.value,
            "inter_document_cross_references_enabled": self.inter_document_cross_references_enabled,
            "inter_document_cross_references_prefix": self.inter_document_cross_references_prefix,
            "separated_definitions_enabled": self.separated_definitions_enabled,
            "separated_operations_enabled": self.separated_operations_enabled,
            "overview_document": self.overview_document,
            "paths_document": self.paths_document,
            "definitions_document": self.definitions_document,
            "security_document": self.security_document,
            "separated_operations_folder": self.separated_operations_folder,
            "separated_definitions_folder": self.separated_definitions_folder,
            "inline_schema_enabled": self.inline_schema_enabled,
            "flat_body_enabled": self.flat_body_enabled,
            "generated_examples_enabled": self.generated_examples_enabled,
            "generated_optional_query_parameter_example_enabled": (self.generated_optional_query_parameter_example_enabled),
            "generated_optional_property_examples_enabled": self.generated_optional_property_examples_enabled,
        }


@dataclass
class ConversionContext:
    """State of one conversion run as seen by the core.

    Attributes:
        config: The conversion configuration
        output_path: Output directory of the run, ``None`` until the
            rendering layer assigns one
    """

    config: ConversionConfig = field(default_factory=ConversionConfig)
    output_path: str | None = None
