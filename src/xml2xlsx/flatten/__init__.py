"""Generic flattening: repeating element detection and record streaming."""

from .detector import (
    MIN_OCCURRENCES,
    RepeatingElementDetector,
    detect_repeating_element,
    select_repeating_element,
)
from .flattener import Record, StreamingFlattener

__all__ = [
    "MIN_OCCURRENCES",
    "RepeatingElementDetector",
    "detect_repeating_element",
    "select_repeating_element",
    "Record",
    "StreamingFlattener",
]
