"""Typed Block tree produced by MJML import.

A ``Block`` is the unit the email editor works with. Each Block carries either
``content`` (opaque inner markup) or ``children`` (nested Blocks), never both.
Attribute names are stored in camelCase; the markup form is kebab-case.
"""

import re
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, FrozenSet, Iterator, List, Optional

DOCUMENT_WRAPPER_TYPE = "mjml"
TEXT_TYPE = "mj-text"

# Types whose inner markup is kept as opaque content instead of child Blocks
CONTENT_PRESERVING_TYPES: FrozenSet[str] = frozenset({
    "mj-raw",
    "mj-text",
    "mj-button",
    "mj-title",
    "mj-preview",
})

_CAMEL_HUMP_PATTERN = re.compile(r"([A-Z])")


class ElementCategory(Enum):
    """How the converter treats an element type."""
    CONTENT = "content"
    STRUCTURAL = "structural"

    @classmethod
    def for_type(cls, block_type: str) -> "ElementCategory":
        """Resolve the category of a lower-cased element type."""
        if block_type in CONTENT_PRESERVING_TYPES:
            return cls.CONTENT
        return cls.STRUCTURAL


def normalize_attribute_name(name: str) -> str:
    """Convert a kebab-case attribute name to camelCase.

    The first segment is lower-cased and every later segment gets an upper-case
    initial; hyphens are dropped. Names without a hyphen pass through.

    >>> normalize_attribute_name("background-color")
    'backgroundColor'
    >>> normalize_attribute_name("href")
    'href'
    >>> normalize_attribute_name("Background-Color")
    'backgroundColor'
    """
    if "-" not in name:
        return name
    first, *rest = name.split("-")
    return first.lower() + "".join(segment[:1].upper() + segment[1:] for segment in rest)


def denormalize_attribute_name(name: str) -> str:
    """Convert a camelCase attribute name back to its kebab-case markup form.

    >>> denormalize_attribute_name("backgroundColor")
    'background-color'
    """
    return _CAMEL_HUMP_PATTERN.sub(lambda m: "-" + m.group(1).lower(), name)


def generate_block_id() -> str:
    """Return a fresh opaque Block id."""
    return uuid.uuid4().hex


@dataclass(eq=False)
class Block:
    """Node of the editor's content tree.

    Attributes:
        id: Opaque id, unique within the tree
        type: Lower-cased element tag name, e.g. ``mj-section``
        attributes: camelCase attribute names mapped to their string values,
            in source order
        content: Inner markup of content-preserving types, or the text of a
            structural element that has no child elements
        children: Child Blocks in document order
    """

    id: str
    type: str
    attributes: Dict[str, str] = field(default_factory=dict)
    content: Optional[str] = None
    children: Optional[List["Block"]] = None

    def __post_init__(self) -> None:
        """Validate the content/children exclusivity."""
        if not self.type:
            raise ValueError("Block type cannot be empty")
        if self.content is not None and self.children is not None:
            raise ValueError(
                f"Block {self.type!r} cannot carry both content and children"
            )

    @property
    def category(self) -> ElementCategory:
        """Element category of this Block's type."""
        return ElementCategory.for_type(self.type)

    @property
    def block_count(self) -> int:
        """Number of Blocks in this subtree, including this one."""
        return sum(1 for _ in self.iter_blocks())

    def iter_blocks(self) -> Iterator["Block"]:
        """Iterate over this subtree in document (pre-)order."""
        stack = [self]
        while stack:
            block = stack.pop()
            yield block
            if block.children:
                stack.extend(reversed(block.children))

    def find(self, block_type: str) -> Optional["Block"]:
        """Find the first Block of ``block_type`` in this subtree."""
        for block in self.iter_blocks():
            if block.type == block_type:
                return block
        return None

    def find_all(self, block_type: str) -> List["Block"]:
        """Find all Blocks of ``block_type`` in this subtree."""
        return [block for block in self.iter_blocks() if block.type == block_type]

    def to_dict(self) -> Dict[str, Any]:
        """Convert Block to the dictionary shape consumed by the editor."""
        result: Dict[str, Any] = {
            "id": self.id,
            "type": self.type,
            "attributes": dict(self.attributes),
        }

        if self.content is not None:
            result["content"] = self.content

        if self.children is not None:
            result["children"] = [child.to_dict() for child in self.children]

        return result
