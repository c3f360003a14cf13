"""Markup repair layer for MJML import.

This module provides the static symbol tables and the text preprocessor that
fixes attribute-, entity- and void-tag-level problems before parsing.
"""

from .preprocess import (
    MarkupPreprocessor,
    PreprocessResult,
    RepairChange,
    RepairPass,
    close_void_elements,
    escape_attribute_ampersands,
    numericize_named_entities,
    preprocess,
    preprocess_with_report,
    resolve_duplicate_attributes,
)
from .tables import (
    NAMED_ENTITY_TO_CODEPOINT,
    PREDEFINED_ENTITIES,
    VOID_ELEMENTS,
)

__all__ = [
    "MarkupPreprocessor",
    "PreprocessResult",
    "RepairChange",
    "RepairPass",
    "close_void_elements",
    "escape_attribute_ampersands",
    "numericize_named_entities",
    "preprocess",
    "preprocess_with_report",
    "resolve_duplicate_attributes",
    "NAMED_ENTITY_TO_CODEPOINT",
    "PREDEFINED_ENTITIES",
    "VOID_ELEMENTS",
]
