"""Spreadsheet backends the sheet writer streams rows into.

``OpenpyxlBackend`` writes XLSX through openpyxl's write-only workbook, which
spools each sheet's rows to a temporary file instead of keeping cells in
memory. In that mode column dimensions are emitted together with the first
row, so widths must be set before the header row is streamed.
"""

import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

from openpyxl import Workbook
from openpyxl.cell import WriteOnlyCell
from openpyxl.styles import Font, PatternFill
from openpyxl.utils import get_column_letter

from xml2xlsx.shared.config import DEFAULT_HEADER_FILL
from xml2xlsx.shared.errors import SheetError, WriterError


class SpreadsheetBackend(ABC):
    """Capability to stream rows into named sheets and persist a workbook.

    Rows are addressed by 1-based index and must arrive in consecutive order;
    repeating an index that was already written is a no-op.
    """

    @abstractmethod
    def new_sheet(self, name: str) -> Any:
        """Create a sheet and return its handle."""

    @abstractmethod
    def set_column_width(self, sheet: Any, column_index: int, width: float) -> None:
        """Set the width of 1-based ``column_index``."""

    @abstractmethod
    def stream_row(
        self,
        sheet: Any,
        row_index: int,
        values: Sequence[str],
        header: bool = False
    ) -> None:
        """Write ``values`` as row ``row_index``; ``header`` rows are styled."""

    def finalize(self) -> None:
        """Formatting pass run once after the last row, before saving."""

    @abstractmethod
    def save(self, path: Union[str, Path]) -> None:
        """Persist the workbook."""


def _check_index(sheet_name: str, next_row: int, row_index: int) -> bool:
    """Return True if ``row_index`` must be written, False if already written."""
    if row_index < next_row:
        return False
    if row_index > next_row:
        raise WriterError(
            f"Non-consecutive row {row_index} for sheet {sheet_name!r}, "
            f"expected {next_row}"
        )
    return True


def _text_cell(sheet: Any, value: str) -> Any:
    """Cell holding ``value`` as literal text, never as a formula."""
    cell = WriteOnlyCell(sheet, value=value)
    if isinstance(value, str):
        cell.data_type = "s"
    return cell


class OpenpyxlBackend(SpreadsheetBackend):
    """XLSX backend built on openpyxl's write-only mode."""

    def __init__(self, header_fill: str = DEFAULT_HEADER_FILL) -> None:
        self.workbook = Workbook(write_only=True)
        self._header_font = Font(bold=True)
        self._header_fill = PatternFill(
            start_color=header_fill, end_color=header_fill, fill_type="solid"
        )
        self._next_row: Dict[str, int] = {}
        # Row writes of different sheets may come from different threads
        self._lock = threading.Lock()

    def new_sheet(self, name: str) -> Any:
        if name in self._next_row:
            raise SheetError(f"Sheet already exists: {name}")
        sheet = self.workbook.create_sheet(title=name)
        self._next_row[name] = 1
        return sheet

    def set_column_width(self, sheet: Any, column_index: int, width: float) -> None:
        sheet.column_dimensions[get_column_letter(column_index)].width = width

    def stream_row(
        self,
        sheet: Any,
        row_index: int,
        values: Sequence[str],
        header: bool = False
    ) -> None:
        with self._lock:
            if not _check_index(sheet.title, self._next_row[sheet.title], row_index):
                return
            row: List[Any] = [_text_cell(sheet, value) for value in values]
            if header:
                for cell in row:
                    cell.font = self._header_font
                    cell.fill = self._header_fill
            sheet.append(row)
            self._next_row[sheet.title] = row_index + 1

    def save(self, path: Union[str, Path]) -> None:
        try:
            self.workbook.save(str(path))
        except OSError as e:
            raise WriterError(f"Failed to save file {path}: {e}") from e


class MemorySheet:
    """Rows and column widths of one sheet held by ``MemoryBackend``."""

    def __init__(self, name: str) -> None:
        self.name = name
        self.rows: List[List[str]] = []
        self.header_rows: List[int] = []
        self.column_widths: Dict[int, float] = {}


class MemoryBackend(SpreadsheetBackend):
    """Backend keeping everything in memory, for previews and tests."""

    def __init__(self) -> None:
        self.sheets: Dict[str, MemorySheet] = {}
        self.finalized = False
        self.saved_to: Optional[Path] = None
        self.save_count = 0

    def new_sheet(self, name: str) -> MemorySheet:
        if name in self.sheets:
            raise SheetError(f"Sheet already exists: {name}")
        sheet = MemorySheet(name)
        self.sheets[name] = sheet
        return sheet

    def set_column_width(self, sheet: MemorySheet, column_index: int, width: float) -> None:
        sheet.column_widths[column_index] = width

    def stream_row(
        self,
        sheet: MemorySheet,
        row_index: int,
        values: Sequence[str],
        header: bool = False
    ) -> None:
        if not _check_index(sheet.name, len(sheet.rows) + 1, row_index):
            return
        sheet.rows.append(list(values))
        if header:
            sheet.header_rows.append(row_index)

    def finalize(self) -> None:
        self.finalized = True

    def save(self, path: Union[str, Path]) -> None:
        self.saved_to = Path(path)
        self.save_count += 1
