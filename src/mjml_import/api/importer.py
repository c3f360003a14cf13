"""MJML import entry point.

Runs the pipeline preprocess -> parse -> convert and reduces every failure to
one of three error kinds. Import functions never raise and never hand back a
partially built tree; inspect ``ImportResult.error`` or call
``ImportResult.unwrap()``.
"""

import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from mjml_import.repair.preprocess import PreprocessResult, preprocess_with_report
from mjml_import.shared import (
    DiagnosticEntry,
    DiagnosticSeverity,
    ImportConfig,
    InputTooLargeError,
    InternalError,
    MarkupImportError,
    MarkupSyntaxError,
    StructureError,
    get_logger,
)
from mjml_import.tree.block import Block
from mjml_import.tree.converter import BlockTreeConverter, element_type
from mjml_import.tree.parser import parse_markup

MS_PER_SECOND = 1000
WRONG_ROOT_MESSAGE = "root element must be the document wrapper"


@dataclass
class ImportResult:
    """Outcome of one import call.

    Exactly one of ``block`` and ``error`` is set once the call returns.
    """

    block: Optional[Block] = None
    error: Optional[MarkupImportError] = None
    preprocess_result: Optional[PreprocessResult] = None
    diagnostics: List[DiagnosticEntry] = field(default_factory=list)
    processing_time_ms: float = 0.0
    correlation_id: Optional[str] = None

    @property
    def success(self) -> bool:
        """Check if the import produced a Block tree."""
        return self.block is not None and self.error is None

    @property
    def repair_count(self) -> int:
        """Number of text repairs made before parsing."""
        if self.preprocess_result is None:
            return 0
        return self.preprocess_result.repair_count

    def unwrap(self) -> Block:
        """Return the Block tree, raising the recorded error on failure."""
        if self.error is not None:
            raise self.error
        if self.block is None:
            raise InternalError("import produced no result")
        return self.block

    def add_diagnostic(
        self,
        severity: DiagnosticSeverity,
        message: str,
        component: str,
        details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Add a diagnostic entry to the result."""
        self.diagnostics.append(DiagnosticEntry(
            severity=severity,
            message=message,
            component=component,
            details=details,
            correlation_id=self.correlation_id,
        ))

    def to_dict(self) -> Dict[str, Any]:
        """Convert result to a JSON-friendly dictionary."""
        result: Dict[str, Any] = {
            "success": self.success,
            "repair_count": self.repair_count,
            "processing_time_ms": self.processing_time_ms,
            "diagnostics": [diag.to_dict() for diag in self.diagnostics],
        }
        if self.block is not None:
            result["block"] = self.block.to_dict()
        if self.error is not None:
            result["error"] = {"kind": self.error.kind, "detail": self.error.detail}
        return result


def _fail(result: ImportResult, error: MarkupImportError) -> ImportResult:
    severity = (
        DiagnosticSeverity.CRITICAL
        if isinstance(error, InternalError) else DiagnosticSeverity.ERROR
    )
    result.block = None
    result.error = error
    result.add_diagnostic(severity, error.detail, "importer", {"kind": error.kind})
    return result


def _run_import(
    raw: str,
    config: ImportConfig,
    correlation_id: Optional[str]
) -> ImportResult:
    start_time = time.time()
    logger = get_logger(__name__, correlation_id, "importer")
    result = ImportResult(correlation_id=correlation_id)

    try:
        if config.max_input_length is not None and len(raw) > config.max_input_length:
            logger.warning(
                "Input rejected by size limit",
                extra={"input_length": len(raw), "limit": config.max_input_length}
            )
            return _fail(result, InputTooLargeError(len(raw), config.max_input_length))

        # Step 1: Text-level repairs
        result.preprocess_result = preprocess_with_report(raw)
        if result.preprocess_result.has_repairs:
            result.add_diagnostic(
                DiagnosticSeverity.WARNING,
                f"Repaired {result.preprocess_result.repair_count} markup issues",
                "preprocessor",
                dict(result.preprocess_result.statistics),
            )

        # Step 2: Strict structural parse
        parsed = parse_markup(result.preprocess_result.text, correlation_id)
        if not parsed.success:
            logger.warning(
                "Markup could not be parsed",
                extra={"line": parsed.line, "column": parsed.column}
            )
            return _fail(result, MarkupSyntaxError(
                parsed.diagnostic or "Invalid markup", parsed.line, parsed.column
            ))

        root_type = element_type(parsed.root)
        if root_type != config.root_tag:
            logger.warning(
                "Document has the wrong root element",
                extra={"root": root_type, "expected": config.root_tag}
            )
            return _fail(result, StructureError(WRONG_ROOT_MESSAGE))

        # Step 3: Block conversion
        converter = BlockTreeConverter(config, correlation_id)
        result.block = converter.convert(parsed.root)
        if converter.dropped_text_count:
            result.add_diagnostic(
                DiagnosticSeverity.WARNING,
                "Discarded text beside child elements",
                "converter",
                {"count": converter.dropped_text_count},
            )

        logger.info(
            "Markup import completed",
            extra={
                "blocks": converter.blocks_converted,
                "repair_count": result.repair_count,
            }
        )
        return result

    except Exception as e:
        logger.exception("Markup import failed unexpectedly")
        return _fail(result, InternalError(f"Failed to convert markup to blocks: {e}"))

    finally:
        result.processing_time_ms = (time.time() - start_time) * MS_PER_SECOND


def import_markup(
    raw: str,
    config: Optional[ImportConfig] = None,
    correlation_id: Optional[str] = None
) -> ImportResult:
    """Import MJML markup into a Block tree.

    Args:
        raw: MJML markup, possibly with HTML-isms the preprocessor repairs
        config: Import configuration (defaults to ``ImportConfig()``)
        correlation_id: Optional correlation ID for import call tracking

    Returns:
        ImportResult holding either the root Block or the error

    Examples:
        >>> result = import_markup('<mjml><mj-body></mj-body></mjml>')
        >>> result.success
        True
        >>> result.block.children[0].type
        'mj-body'

        >>> import_markup('<html></html>').error.kind
        'structure'
    """
    return _run_import(raw, config or ImportConfig(), correlation_id)


def import_file(
    file_path: Union[str, Path],
    encoding: str = "utf-8",
    config: Optional[ImportConfig] = None,
    correlation_id: Optional[str] = None
) -> ImportResult:
    """Import MJML markup from a file.

    A file that cannot be read is reported in the result, never raised.
    """
    logger = get_logger(__name__, correlation_id, "import_file")
    path = Path(file_path)

    try:
        raw = path.read_text(encoding=encoding)
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read markup file", extra={"file": str(path)})
        result = ImportResult(correlation_id=correlation_id)
        return _fail(result, InternalError(f"Could not read {path}: {e}"))

    return import_markup(raw, config, correlation_id)


class MarkupImporter:
    """Reusable importer with a fixed configuration and usage statistics.

    Examples:
        >>> importer = MarkupImporter(ImportConfig.strict())
        >>> importer.import_markup('<mjml/>').success
        True
        >>> importer.statistics["total_imports"]
        1
    """

    def __init__(
        self,
        config: Optional[ImportConfig] = None,
        correlation_id: Optional[str] = None
    ) -> None:
        self.config = config or ImportConfig()
        self.correlation_id = correlation_id
        self.logger = get_logger(__name__, correlation_id, "markup_importer")
        self.reset_statistics()

    def import_markup(
        self, raw: str, correlation_id_override: Optional[str] = None
    ) -> ImportResult:
        """Import markup with this importer's configuration."""
        result = _run_import(
            raw, self.config, correlation_id_override or self.correlation_id
        )

        self._import_count += 1
        self._total_processing_time += result.processing_time_ms
        if result.success:
            self._successful_imports += 1
        elif result.error is not None:
            self._failures[result.error.kind] = self._failures.get(result.error.kind, 0) + 1

        return result

    def reconfigure(self, **overrides: Any) -> None:
        """Replace configuration fields, e.g. ``reconfigure(max_input_length=1024)``."""
        self.config = self.config.override(**overrides)
        self.logger.info(
            "Importer reconfigured", extra={"overrides": sorted(overrides)}
        )

    @property
    def statistics(self) -> Dict[str, Any]:
        """Get importer usage statistics."""
        return {
            "total_imports": self._import_count,
            "successful_imports": self._successful_imports,
            "failures": dict(self._failures),
            "success_rate": (
                self._successful_imports / self._import_count
                if self._import_count > 0 else 0.0
            ),
            "total_processing_time_ms": self._total_processing_time,
            "average_processing_time_ms": (
                self._total_processing_time / self._import_count
                if self._import_count > 0 else 0.0
            ),
        }

    def reset_statistics(self) -> None:
        """Reset importer usage statistics."""
        self._import_count = 0
        self._successful_imports = 0
        self._failures: Dict[str, int] = {}
        self._total_processing_time = 0.0
