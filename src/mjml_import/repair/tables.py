"""Static symbol tables used by the markup repair passes.

HTML allows a handful of conventions that strict XML rejects: void elements
left unclosed and a large vocabulary of named character references. These
tables describe the subset the preprocessor knows how to repair.
"""

from types import MappingProxyType
from typing import FrozenSet, Mapping

# HTML void elements, which XML requires to be self-closed
VOID_ELEMENTS: FrozenSet[str] = frozenset({
    "area",
    "base",
    "br",
    "col",
    "embed",
    "hr",
    "img",
    "input",
    "link",
    "meta",
    "param",
    "source",
    "track",
    "wbr",
})

# References XML predefines; these are never rewritten
PREDEFINED_ENTITIES: FrozenSet[str] = frozenset({"amp", "lt", "gt", "quot", "apos"})

NAMED_ENTITY_TO_CODEPOINT: Mapping[str, int] = MappingProxyType({
    # Whitespace and formatting
    "nbsp": 160,
    "ensp": 8194,
    "emsp": 8195,
    "thinsp": 8201,

    # Punctuation
    "bull": 8226,
    "hellip": 8230,
    "mdash": 8212,
    "ndash": 8211,
    "lsquo": 8216,
    "rsquo": 8217,
    "ldquo": 8220,
    "rdquo": 8221,
    "laquo": 171,
    "raquo": 187,

    # Symbols
    "copy": 169,
    "reg": 174,
    "trade": 8482,
    "sect": 167,
    "para": 182,
    "deg": 176,
    "plusmn": 177,
    "times": 215,
    "divide": 247,
    "micro": 181,
    "middot": 183,

    # Currency
    "euro": 8364,
    "pound": 163,
    "yen": 165,
    "cent": 162,

    # Arrows
    "larr": 8592,
    "rarr": 8594,
    "uarr": 8593,
    "darr": 8595,
    "harr": 8596,

    # Spanish and French punctuation
    "iexcl": 161,
    "iquest": 191,
})
