"""Conversion of a parsed MJML element tree into Blocks.

Content-preserving elements (``mj-text``, ``mj-button`` and friends) keep their
inner markup as an opaque string. Every other element becomes a structural
Block whose child elements are converted recursively.
"""

import copy
from typing import Any, Dict, List, Optional
from xml.sax.saxutils import escape

from lxml import etree

from mjml_import.shared.config import ImportConfig
from mjml_import.shared.logging import get_logger
from mjml_import.tree.block import (
    TEXT_TYPE,
    Block,
    ElementCategory,
    generate_block_id,
    normalize_attribute_name,
)


def local_name(name: str) -> str:
    """Strip a Clark-notation namespace (``{uri}name``) from a tag or attribute."""
    if name.startswith("{"):
        return name.rsplit("}", 1)[-1]
    return name


def _is_element(node: Any) -> bool:
    # Comments, processing instructions and entity nodes have non-string tags
    return isinstance(node.tag, str)


def _without_default_namespace(node: Any, namespace: str) -> Any:
    # Serializing a subtree re-declares every namespace in scope; markup that
    # was written without a prefix gets its local names back instead.
    node = copy.deepcopy(node)
    prefix = "{%s}" % namespace
    for descendant in node.iter():
        if _is_element(descendant) and descendant.tag.startswith(prefix):
            descendant.tag = descendant.tag[len(prefix):]
    etree.cleanup_namespaces(node)
    return node


def inner_markup(element: Any) -> str:
    """Serialize everything between an element's start and end tags.

    A default namespace inherited from an ancestor is not repeated on the
    serialized children.
    """
    default_namespace = element.nsmap.get(None)
    parts: List[str] = []
    if element.text:
        parts.append(escape(element.text))
    for child in element:
        if default_namespace and _is_element(child):
            child = _without_default_namespace(child, default_namespace)
        parts.append(etree.tostring(child, encoding="unicode", with_tail=True))
    return "".join(parts)


class BlockTreeConverter:
    """Walks an ``lxml`` element tree and emits the matching Block tree.

    Every call to ``convert`` produces a fresh tree with fresh ids; the
    converter keeps only per-call statistics.
    """

    def __init__(
        self,
        config: Optional[ImportConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ImportConfig()
        self.logger = get_logger(__name__, correlation_id, "converter")
        self.blocks_converted = 0
        self.dropped_text_count = 0

    def convert(self, element: Any) -> Block:
        """Convert ``element`` and its subtree into a Block.

        Args:
            element: Parsed ``lxml`` element, normally the document root

        Returns:
            Root Block of the converted subtree
        """
        self._reset_state()
        block = self._convert_element(element)
        self.logger.debug(
            "Converted element tree",
            extra={
                "blocks": self.blocks_converted,
                "dropped_text_nodes": self.dropped_text_count,
            }
        )
        return block

    def _reset_state(self) -> None:
        self.blocks_converted = 0
        self.dropped_text_count = 0

    def _convert_element(self, element: Any) -> Block:
        block_id = generate_block_id()
        block_type = element_type(element)
        attributes = {
            normalize_attribute_name(local_name(name)): value
            for name, value in element.attrib.items()
        }
        self.blocks_converted += 1

        if ElementCategory.for_type(block_type) is ElementCategory.CONTENT:
            return Block(
                id=block_id,
                type=block_type,
                attributes=attributes,
                content=self._preserved_content(element, block_type),
            )

        return self._convert_structural(element, block_id, block_type, attributes)

    def _preserved_content(self, element: Any, block_type: str) -> Optional[str]:
        content = inner_markup(element).strip()
        if not content:
            return None

        if (
            block_type == TEXT_TYPE
            and self.config.wrap_plain_text
            and not content.startswith("<")
        ):
            wrapper = self.config.plain_text_wrapper
            content = f"<{wrapper}>{content}</{wrapper}>"

        return content

    def _convert_structural(
        self,
        element: Any,
        block_id: str,
        block_type: str,
        attributes: Dict[str, str]
    ) -> Block:
        children: List[Block] = []
        text_parts: List[str] = []

        self._collect_text(element.text, text_parts)
        for child in element:
            if _is_element(child):
                children.append(self._convert_element(child))
            self._collect_text(child.tail, text_parts)

        text = "".join(text_parts)

        if children:
            if text:
                self._report_dropped_text(block_type, text)
            return Block(
                id=block_id, type=block_type, attributes=attributes, children=children
            )

        return Block(
            id=block_id,
            type=block_type,
            attributes=attributes,
            content=text or None,
        )

    @staticmethod
    def _collect_text(text: Optional[str], text_parts: List[str]) -> None:
        if text:
            stripped = text.strip()
            if stripped:
                text_parts.append(stripped)

    def _report_dropped_text(self, block_type: str, text: str) -> None:
        self.dropped_text_count += 1
        if self.config.log_dropped_text:
            self.logger.warning(
                "Discarded text beside child elements",
                extra={"block_type": block_type, "dropped_length": len(text)}
            )


def convert(element: Any, config: Optional[ImportConfig] = None) -> Block:
    """Convert a parsed element tree into a Block tree."""
    return BlockTreeConverter(config).convert(element)


def element_type(element: Any) -> str:
    """Block type of a parsed element: its local tag name, lower-cased."""
    return local_name(element.tag).lower()
