"""Error kinds reported by the MJML import entry point.

Every failure of an import call is reduced to one of three kinds: the repaired
markup did not parse, the parsed document has the wrong shape, or something
unanticipated went wrong while converting it.
"""

from typing import Optional


class MarkupImportError(Exception):
    """Base class for all import failures."""

    kind = "import"

    def __init__(self, detail: str) -> None:
        super().__init__(detail)
        self.detail = detail

    def __str__(self) -> str:
        return self.detail


class MarkupSyntaxError(MarkupImportError):
    """Repaired markup still failed to parse; ``detail`` is the parser message."""

    kind = "syntax"

    def __init__(
        self,
        detail: str,
        line: Optional[int] = None,
        column: Optional[int] = None
    ) -> None:
        super().__init__(detail)
        self.line = line
        self.column = column


class StructureError(MarkupImportError):
    """Markup parsed but the document shape is invalid."""

    kind = "structure"


class InputTooLargeError(StructureError):
    """Raw input exceeded the configured ``max_input_length``."""

    def __init__(self, length: int, limit: int) -> None:
        super().__init__(
            f"input length {length} exceeds the configured limit of {limit}"
        )
        self.length = length
        self.limit = limit


class InternalError(MarkupImportError):
    """Unanticipated failure while converting a parsed document."""

    kind = "internal"
