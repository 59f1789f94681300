"""Configuration for streaming XML to spreadsheet conversion.

The tunables here only trade memory against throughput: buffer, batch,
sample and queue sizes never change the rows that end up in the workbook.
"""

import json
from dataclasses import asdict, dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

# Defaults (powers of two where the value is a size)
DEFAULT_BUFFER_SIZE = 64 * 1024
DEFAULT_BATCH_SIZE = 2048
DEFAULT_HEADER_SAMPLE_SIZE = 128
DEFAULT_QUEUE_SIZE = 100
DEFAULT_COLUMN_WIDTH = 15.0
DEFAULT_HEADER_FILL = "E0E0E0"
DEFAULT_SHEET_NAME = "Sheet1"
DEFAULT_PROGRESS_INTERVAL = 1000

MAX_SHEET_NAME_LENGTH = 31  # Excel limit
HEX_COLOR_LENGTH = 6


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
class ConversionConfig:
    """Immutable settings shared by the parsers, the pipeline and the writer.

    Attributes:
        buffer_size: Bytes read from the input per parser feed
        batch_size: Rows buffered per sheet before they are flushed
        header_sample_size: Leading records inspected to build generic headers
        queue_size: Capacity of each bounded record stream
        column_width: Width applied to every header column
        header_fill: RGB hex fill of the header row
        generic_sheet_name: Sheet name used in generic mode
        progress_interval: Rows between progress log messages
        correlation_id: Optional id attached to every log record
    """

    buffer_size: int = DEFAULT_BUFFER_SIZE
    batch_size: int = DEFAULT_BATCH_SIZE
    header_sample_size: int = DEFAULT_HEADER_SAMPLE_SIZE
    queue_size: int = DEFAULT_QUEUE_SIZE
    column_width: float = DEFAULT_COLUMN_WIDTH
    header_fill: str = DEFAULT_HEADER_FILL
    generic_sheet_name: str = DEFAULT_SHEET_NAME
    progress_interval: int = DEFAULT_PROGRESS_INTERVAL
    correlation_id: Optional[str] = None

    def __post_init__(self) -> None:
        """Validate configuration values."""
        for name in ("buffer_size", "batch_size", "header_sample_size",
                     "queue_size", "progress_interval"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
                raise ConfigValidationError(
                    f"{name} must be a positive integer, got {value!r}",
                    field_name=name,
                )
        if (
            not isinstance(self.column_width, (int, float))
            or isinstance(self.column_width, bool)
            or self.column_width <= 0
        ):
            raise ConfigValidationError(
                f"column_width must be a number > 0, got {self.column_width!r}",
                field_name="column_width",
            )
        for name in ("header_fill", "generic_sheet_name"):
            if not isinstance(getattr(self, name), str):
                raise ConfigValidationError(
                    f"{name} must be a string, got {getattr(self, name)!r}",
                    field_name=name,
                )
        fill = self.header_fill.lstrip("#")
        if len(fill) != HEX_COLOR_LENGTH or any(
            c not in "0123456789abcdefABCDEF" for c in fill
        ):
            raise ConfigValidationError(
                f"header_fill must be a 6 digit hex color, got {self.header_fill!r}",
                field_name="header_fill",
                suggestions=["Use a value such as 'E0E0E0'"],
            )
        if not self.generic_sheet_name or len(
            self.generic_sheet_name
        ) > MAX_SHEET_NAME_LENGTH:
            raise ConfigValidationError(
                f"generic_sheet_name must be 1-{MAX_SHEET_NAME_LENGTH} characters",
                field_name="generic_sheet_name",
            )

    @property
    def header_fill_rgb(self) -> str:
        """Header fill without a leading '#', upper-cased."""
        return self.header_fill.lstrip("#").upper()

    def override(self, **kwargs: Any) -> "ConversionConfig":
        """Create a new configuration with specific overrides.

        Example:
            >>> config = ConversionConfig().override(batch_size=1)
            >>> config.batch_size
            1
        """
        unknown = set(kwargs) - {f.name for f in fields(self)}
        if unknown:
            raise ConfigValidationError(
                f"Unknown configuration fields: {sorted(unknown)}"
            )
        return replace(self, **kwargs)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ConversionConfig":
        """Create configuration from a dictionary, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})

    @classmethod
    def from_json(cls, json_str: str) -> "ConversionConfig":
        data = json.loads(json_str)
        if not isinstance(data, dict):
            raise ConfigValidationError("Configuration JSON must be an object")
        return cls.from_dict(data)

    @classmethod
    def from_file(cls, config_path: Union[str, Path]) -> "ConversionConfig":
        """Load configuration from a JSON file.

        Raises:
            ConfigError: If the file cannot be read or parsed
        """
        path = Path(config_path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigError(f"Could not read config file {path}: {e}") from e
        try:
            return cls.from_json(text)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in config file {path}: {e}") from e

    # Preset factory methods
    @classmethod
    def low_memory(cls) -> "ConversionConfig":
        """Small buffers and batches for constrained environments."""
        return cls(
            buffer_size=8 * 1024,
            batch_size=256,
            queue_size=16,
        )

    @classmethod
    def high_throughput(cls) -> "ConversionConfig":
        """Large buffers and batches for big inputs on roomy machines."""
        return cls(
            buffer_size=1024 * 1024,
            batch_size=16384,
            queue_size=1024,
            progress_interval=50000,
        )
