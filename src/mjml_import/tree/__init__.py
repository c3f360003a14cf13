"""Block tree layer for MJML import.

This module provides the typed Block model, the strict structural parser and
the converter that turns parsed markup into Blocks.
"""

from .block import (
    CONTENT_PRESERVING_TYPES,
    DOCUMENT_WRAPPER_TYPE,
    TEXT_TYPE,
    Block,
    ElementCategory,
    denormalize_attribute_name,
    generate_block_id,
    normalize_attribute_name,
)
from .converter import BlockTreeConverter, convert, element_type, inner_markup
from .parser import StructuralParseResult, parse_markup

__all__ = [
    "CONTENT_PRESERVING_TYPES",
    "DOCUMENT_WRAPPER_TYPE",
    "TEXT_TYPE",
    "Block",
    "ElementCategory",
    "denormalize_attribute_name",
    "generate_block_id",
    "normalize_attribute_name",
    "BlockTreeConverter",
    "convert",
    "element_type",
    "inner_markup",
    "StructuralParseResult",
    "parse_markup",
]
