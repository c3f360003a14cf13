"""Configuration for the MJML import pipeline.

``ImportConfig`` is an immutable, validated settings object shared by the
converter, the importer and the CLI.
"""

import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

# 5 MiB bounds the synchronous preprocessing passes in the strict preset
STRICT_MAX_INPUT_LENGTH = 5 * 1024 * 1024


class ConfigError(Exception):
    """Base exception for configuration errors."""


class ConfigValidationError(ConfigError):
    """Exception raised when configuration validation fails."""

    def __init__(self, message: str, field_name: Optional[str] = None,
                 suggestions: Optional[List[str]] = None):
        super().__init__(message)
        self.field_name = field_name
        self.suggestions = suggestions or []


@dataclass(frozen=True)
class ImportConfig:
    """Settings controlling how markup is imported into a Block tree.

    Attributes:
        root_tag: Tag name the document wrapper element must carry
        wrap_plain_text: Wrap bare text content of ``mj-text`` in a paragraph
        plain_text_wrapper: Tag used when wrapping bare ``mj-text`` content
        max_input_length: Reject raw input longer than this many characters
            (``None`` disables the check)
        log_dropped_text: Log a warning when text beside child elements of a
            structural element is discarded
    """

    root_tag: str = "mjml"
    wrap_plain_text: bool = True
    plain_text_wrapper: str = "p"
    max_input_length: Optional[int] = None
    log_dropped_text: bool = True

    def __post_init__(self) -> None:
        """Validate configuration values."""
        if not self.root_tag or not self.root_tag.strip():
            raise ConfigValidationError(
                "root_tag cannot be empty", field_name="root_tag"
            )
        if self.root_tag != self.root_tag.lower():
            raise ConfigValidationError(
                "root_tag must be lower-case",
                field_name="root_tag",
                suggestions=[f"Use {self.root_tag.lower()!r}"],
            )
        if not self.plain_text_wrapper.isalnum():
            raise ConfigValidationError(
                "plain_text_wrapper must be a bare tag name",
                field_name="plain_text_wrapper",
            )
        if self.max_input_length is not None and self.max_input_length <= 0:
            raise ConfigValidationError(
                "max_input_length must be > 0 or None",
                field_name="max_input_length",
            )

    def override(self, **kwargs: Any) -> "ImportConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = ImportConfig().override(max_input_length=1024)
            >>> config.max_input_length
            1024
        """
        known = {f.name for f in fields(self)}
        unknown = sorted(set(kwargs) - known)
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {', '.join(unknown)}",
                field_name=unknown[0],
                suggestions=sorted(known),
            )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary format."""
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        """Convert configuration to JSON string."""
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ImportConfig":
        """Create configuration from dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @classmethod
    def from_json(cls, json_str: str) -> "ImportConfig":
        """Create configuration from JSON string."""
        try:
            data = json.loads(json_str)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid configuration JSON: {e}") from e
        if not isinstance(data, dict):
            raise ConfigError("Configuration JSON must be an object")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "ImportConfig":
        """Load configuration from a JSON file."""
        path = Path(config_path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not read configuration file {path}: {e}") from e
        return cls.from_json(text)

    # Preset factory methods
    @classmethod
    def default(cls) -> "ImportConfig":
        """Create the default configuration used by the editor."""
        return cls()

    @classmethod
    def strict(cls) -> "ImportConfig":
        """Create a configuration that bounds input size."""
        return cls(max_input_length=STRICT_MAX_INPUT_LENGTH)
