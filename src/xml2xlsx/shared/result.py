"""Result objects describing a finished conversion."""

from dataclasses import dataclass, field
from enum import Enum, auto
from pathlib import Path
from typing import Dict, List, Optional


class ConversionMode(Enum):
    """Conversion strategy chosen for a document."""

    GENERIC = auto()    # Flatten the auto-detected repeating element
    SVD = auto()        # Peripherals / registers / fields hierarchy


@dataclass
class ConversionResult:
    """Summary of a successful conversion.

    Attributes:
        output_path: Workbook written to storage
        mode: Strategy used for the conversion
        sheets: Sheet name to number of data rows written
        headers: Sheet name to its frozen header list
        repeating_element: Row element chosen in generic mode
        processing_time_ms: Wall-clock duration of the conversion
        correlation_id: Id attached to the conversion's log records
    """

    output_path: Path
    mode: ConversionMode
    sheets: Dict[str, int] = field(default_factory=dict)
    headers: Dict[str, List[str]] = field(default_factory=dict)
    repeating_element: Optional[str] = None
    processing_time_ms: float = 0.0
    correlation_id: Optional[str] = None

    @property
    def total_rows(self) -> int:
        """Data rows written across all sheets."""
        return sum(self.sheets.values())

    @property
    def rows_per_second(self) -> float:
        if self.processing_time_ms <= 0:
            return 0.0
        return (self.total_rows * 1000.0) / self.processing_time_ms
