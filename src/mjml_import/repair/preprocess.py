"""Text-level repair of near-miss MJML markup.

Markup exported by other editors or edited by hand is often almost, but not
quite, well-formed XML. The preprocessor applies four independent passes, in
this order, before the markup reaches the XML parser:

1. close HTML void elements (``<br>`` becomes ``<br/>``)
2. rewrite legacy named character references as numeric ones
3. escape bare ampersands inside attribute values
4. collapse duplicate attributes, keeping the last value of each name

Every pass is a no-op on input it has already repaired, so ``preprocess`` is
idempotent. No pass attempts to fix element nesting.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List

from mjml_import.repair.tables import (
    NAMED_ENTITY_TO_CODEPOINT,
    PREDEFINED_ENTITIES,
    VOID_ELEMENTS,
)
from mjml_import.shared.logging import get_logger

_VOID_TAG_PATTERN = re.compile(
    r"<(" + "|".join(sorted(VOID_ELEMENTS)) + r")\b([^>]*[^/>])?>(?!/)",
    re.IGNORECASE,
)
_NAMED_ENTITY_PATTERN = re.compile(r"&([a-zA-Z]+);")
_ATTRIBUTE_VALUE_PATTERN = re.compile(r'="([^"]*)"')
_BARE_AMPERSAND_PATTERN = re.compile(
    r"&(?!(?:amp|lt|gt|quot|apos|#\d+|#x[0-9a-fA-F]+);)"
)
_TAG_PATTERN = re.compile(r"<([^>]+)>")
_ATTRIBUTE_PAIR_PATTERN = re.compile(r'(\S+)="([^"]*)"')
_TAG_NAME_PATTERN = re.compile(r"^([^\s>]+)")


class RepairPass(Enum):
    """The four repair passes, in the order they run."""
    VOID_ELEMENTS = "void_elements"
    NAMED_ENTITIES = "named_entities"
    ATTRIBUTE_AMPERSANDS = "attribute_ampersands"
    DUPLICATE_ATTRIBUTES = "duplicate_attributes"


@dataclass
class RepairChange:
    """Record of a single rewrite made by a repair pass.

    Attributes:
        repair_pass: Pass that made the rewrite
        position: Offset of the rewritten text in that pass's input
        original: Text before the rewrite
        replacement: Text after the rewrite
    """
    repair_pass: RepairPass
    position: int
    original: str
    replacement: str


@dataclass
class PreprocessResult:
    """Repaired markup with a record of what was changed.

    Attributes:
        text: Repaired markup
        changes: Every rewrite made, in pass order
        statistics: Number of rewrites per pass, keyed by pass value
    """
    text: str
    changes: List[RepairChange] = field(default_factory=list)
    statistics: Dict[str, int] = field(default_factory=dict)

    @property
    def repair_count(self) -> int:
        """Total number of rewrites across all passes."""
        return sum(self.statistics.values())

    @property
    def has_repairs(self) -> bool:
        """Check if any pass changed the input."""
        return self.repair_count > 0


class MarkupPreprocessor:
    """Runs the repair passes and records every rewrite they make.

    The preprocessor is stateless between calls; one instance can be shared.

    Examples:
        >>> MarkupPreprocessor().run('<mj-text>A<br>B&nbsp;</mj-text>').text
        '<mj-text>A<br/>B&#160;</mj-text>'
    """

    def __init__(self) -> None:
        self.logger = get_logger(__name__, None, "preprocessor")

    def run(self, raw: str) -> PreprocessResult:
        """Apply all repair passes to ``raw``.

        Args:
            raw: Markup as supplied by the user

        Returns:
            PreprocessResult with the repaired text and change records
        """
        changes: List[RepairChange] = []
        text = raw
        text = self.close_void_elements(text, changes)
        text = self.numericize_named_entities(text, changes)
        text = self.escape_attribute_ampersands(text, changes)
        text = self.resolve_duplicate_attributes(text, changes)

        statistics = {repair_pass.value: 0 for repair_pass in RepairPass}
        for change in changes:
            statistics[change.repair_pass.value] += 1

        if changes:
            self.logger.debug(
                "Repaired markup before parsing",
                extra={"input_length": len(raw), "repairs": statistics}
            )

        return PreprocessResult(text=text, changes=changes, statistics=statistics)

    def close_void_elements(self, text: str, changes: List[RepairChange]) -> str:
        """Self-close void elements, keeping tag case and attribute text."""
        def _close(match: re.Match[str]) -> str:
            attributes = (match.group(2) or "").rstrip()
            replacement = f"<{match.group(1)}{attributes}/>"
            self._record(changes, RepairPass.VOID_ELEMENTS, match, replacement)
            return replacement

        return _VOID_TAG_PATTERN.sub(_close, text)

    def numericize_named_entities(
        self, text: str, changes: List[RepairChange]
    ) -> str:
        """Rewrite known legacy named references as decimal references."""
        def _numericize(match: re.Match[str]) -> str:
            name = match.group(1).lower()
            if name in PREDEFINED_ENTITIES:
                return match.group(0)
            codepoint = NAMED_ENTITY_TO_CODEPOINT.get(name)
            if codepoint is None:
                return match.group(0)
            replacement = f"&#{codepoint};"
            self._record(changes, RepairPass.NAMED_ENTITIES, match, replacement)
            return replacement

        return _NAMED_ENTITY_PATTERN.sub(_numericize, text)

    def escape_attribute_ampersands(
        self, text: str, changes: List[RepairChange]
    ) -> str:
        """Escape ampersands in attribute values that do not start a reference."""
        def _escape(match: re.Match[str]) -> str:
            value = match.group(1)
            fixed = _BARE_AMPERSAND_PATTERN.sub("&amp;", value)
            if fixed == value:
                return match.group(0)
            replacement = f'="{fixed}"'
            self._record(changes, RepairPass.ATTRIBUTE_AMPERSANDS, match, replacement)
            return replacement

        return _ATTRIBUTE_VALUE_PATTERN.sub(_escape, text)

    def resolve_duplicate_attributes(
        self, text: str, changes: List[RepairChange]
    ) -> str:
        """Rebuild tags that repeat an attribute name.

        The last value of each name wins, at the position of its first
        occurrence. Tags without repeated names are left byte-for-byte intact.
        """
        def _deduplicate(match: re.Match[str]) -> str:
            tag_content = match.group(1)
            if "=" not in tag_content:
                return match.group(0)

            pairs = _ATTRIBUTE_PAIR_PATTERN.findall(tag_content)
            attributes: Dict[str, str] = {}
            for name, value in pairs:
                attributes[name] = value
            if len(attributes) == len(pairs):
                return match.group(0)

            replacement = f"<{_rebuild_tag(tag_content, attributes)}>"
            self._record(changes, RepairPass.DUPLICATE_ATTRIBUTES, match, replacement)
            return replacement

        return _TAG_PATTERN.sub(_deduplicate, text)

    @staticmethod
    def _record(
        changes: List[RepairChange],
        repair_pass: RepairPass,
        match: re.Match[str],
        replacement: str
    ) -> None:
        if replacement != match.group(0):
            changes.append(RepairChange(
                repair_pass=repair_pass,
                position=match.start(),
                original=match.group(0),
                replacement=replacement,
            ))


def _rebuild_tag(tag_content: str, attributes: Dict[str, str]) -> str:
    name_match = _TAG_NAME_PATTERN.match(tag_content)
    tag_name = name_match.group(1) if name_match else ""
    closing = " /" if tag_content.strip().endswith("/") else ""
    rendered = " ".join(f'{name}="{value}"' for name, value in attributes.items())
    if rendered:
        return f"{tag_name} {rendered}{closing}"
    return f"{tag_name}{closing}"


_default_preprocessor = MarkupPreprocessor()


def preprocess_with_report(raw: str) -> PreprocessResult:
    """Repair ``raw`` and report every rewrite that was made."""
    return _default_preprocessor.run(raw)


def preprocess(raw: str) -> str:
    """Repair near-miss markup so a strict XML parser can accept it.

    Args:
        raw: Markup as supplied by the user

    Returns:
        Repaired markup; unchanged where no repair applies

    Examples:
        >>> preprocess('<mj-image src="u?a=1&b=2">')
        '<mj-image src="u?a=1&amp;b=2">'
        >>> preprocess('<a x="1" y="2" x="3">')
        '<a x="3" y="2">'
    """
    return _default_preprocessor.run(raw).text


def close_void_elements(text: str) -> str:
    """Run only the void-element pass."""
    return _default_preprocessor.close_void_elements(text, [])


def numericize_named_entities(text: str) -> str:
    """Run only the named-entity pass."""
    return _default_preprocessor.numericize_named_entities(text, [])


def escape_attribute_ampersands(text: str) -> str:
    """Run only the attribute ampersand pass."""
    return _default_preprocessor.escape_attribute_ampersands(text, [])


def resolve_duplicate_attributes(text: str) -> str:
    """Run only the duplicate-attribute pass."""
    return _default_preprocessor.resolve_duplicate_attributes(text, [])
