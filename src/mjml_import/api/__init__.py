"""Public import API.

Level 1 functions ``import_markup`` and ``import_file``; Level 2 the
configurable ``MarkupImporter`` class.
"""

from .importer import ImportResult, MarkupImporter, import_file, import_markup

__all__ = ["ImportResult", "MarkupImporter", "import_file", "import_markup"]
