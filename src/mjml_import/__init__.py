"""MJML import pipeline for the block-based email editor.

Turns hand-edited or tool-exported MJML into the editor's typed Block tree:
a text preprocessor repairs near-miss markup, lxml parses it strictly, and a
converter maps the element tree to Blocks.

Progressive API Disclosure:
- Level 1: Simple functions - preprocess(), import_markup(), import_file()
- Level 2: Configured importer - MarkupImporter class
"""

__version__ = "0.1.0"
__author__ = "MJML Import Team"

# Level 1: Simple functions
# Level 2: Configured importer
from .api import ImportResult, MarkupImporter, import_file, import_markup
from .repair import PreprocessResult, preprocess, preprocess_with_report

# Configuration and error kinds
from .shared import (
    ImportConfig,
    InternalError,
    MarkupImportError,
    MarkupSyntaxError,
    StructureError,
)

# Block tree
from .tree import Block, ElementCategory

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1: Simple functions
    "preprocess",
    "preprocess_with_report",
    "import_markup",
    "import_file",

    # Level 2: Configured importer
    "MarkupImporter",

    # Result objects and data structures
    "ImportResult",
    "PreprocessResult",
    "Block",
    "ElementCategory",

    # Configuration and errors
    "ImportConfig",
    "MarkupImportError",
    "MarkupSyntaxError",
    "StructureError",
    "InternalError",
]
