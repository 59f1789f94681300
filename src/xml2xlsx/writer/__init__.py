"""Batched sheet writer and spreadsheet backends."""

from .backend import (
    MemoryBackend,
    MemorySheet,
    OpenpyxlBackend,
    SpreadsheetBackend,
)
from .sheet_writer import FIRST_DATA_ROW, HEADER_ROW, SheetWriter

__all__ = [
    "MemoryBackend",
    "MemorySheet",
    "OpenpyxlBackend",
    "SpreadsheetBackend",
    "FIRST_DATA_ROW",
    "HEADER_ROW",
    "SheetWriter",
]
