"""Structural parsing of repaired markup with lxml.

The importer relies on a strict XML parser: it either yields an element tree
or a diagnostic explaining why the markup is not well-formed. No recovery is
attempted here; recovery is limited to the text-level repair passes.
"""

from dataclasses import dataclass
from typing import Any, Optional

from lxml import etree

from mjml_import.shared.logging import get_logger


@dataclass
class StructuralParseResult:
    """Outcome of parsing repaired markup.

    Attributes:
        root: Root ``lxml`` element when parsing succeeded
        diagnostic: Parser message when parsing failed
        line: Line of the first error, if the parser reported one
        column: Column of the first error, if the parser reported one
    """
    root: Optional[Any] = None
    diagnostic: Optional[str] = None
    line: Optional[int] = None
    column: Optional[int] = None

    @property
    def success(self) -> bool:
        """Check if parsing produced a tree."""
        return self.root is not None and self.diagnostic is None


def _create_parser() -> etree.XMLParser:
    # Entity expansion and network access stay off for untrusted input.
    # The encoding is fixed because the text is already decoded; a declared
    # encoding in the document must not be applied a second time.
    return etree.XMLParser(
        encoding="utf-8",
        recover=False,
        resolve_entities=False,
        no_network=True,
        remove_comments=False,
        remove_pis=False,
    )


def parse_markup(
    text: str, correlation_id: Optional[str] = None
) -> StructuralParseResult:
    """Parse repaired markup into an element tree.

    Args:
        text: Markup that has been through the preprocessor
        correlation_id: Optional correlation ID for import call tracking

    Returns:
        StructuralParseResult with either ``root`` or ``diagnostic`` set
    """
    logger = get_logger(__name__, correlation_id, "parser")

    if not text.strip():
        return StructuralParseResult(diagnostic="Document is empty")

    try:
        # Bytes input lets documents carry an XML declaration
        root = etree.fromstring(text.encode("utf-8"), parser=_create_parser())
    except etree.XMLSyntaxError as e:
        logger.debug(
            "Markup rejected by XML parser",
            extra={"line": e.lineno, "column": e.offset}
        )
        return StructuralParseResult(
            diagnostic=str(e) or "Invalid XML",
            line=e.lineno,
            column=e.offset,
        )

    return StructuralParseResult(root=root)
