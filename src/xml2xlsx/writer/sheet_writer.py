"""Batched multi-sheet writer.

Rows are buffered per sheet and flushed to the backend once a sheet's buffer
reaches ``batch_size``. Each sheet's buffer is touched only by the task that
consumes that sheet's record stream, so buffers need no locking.
"""

from pathlib import Path
from types import TracebackType
from typing import Any, Dict, List, Mapping, Optional, Sequence, Type, Union

from xml2xlsx.shared.config import DEFAULT_BATCH_SIZE, DEFAULT_COLUMN_WIDTH
from xml2xlsx.shared.errors import (
    SheetError,
    UnknownSheetError,
    WriterClosedError,
    WriterError,
)
from xml2xlsx.shared.logging import get_logger

from .backend import SpreadsheetBackend

HEADER_ROW = 1
FIRST_DATA_ROW = 2


class SheetState:
    """Frozen headers, pending rows and write position of one sheet."""

    def __init__(self, handle: Any, headers: Sequence[str]) -> None:
        self.handle = handle
        self.headers: List[str] = list(headers)
        self.buffer: List[Mapping[str, str]] = []
        self.next_row = FIRST_DATA_ROW

    @property
    def rows_written(self) -> int:
        return self.next_row - FIRST_DATA_ROW

    def render(self, record: Mapping[str, str]) -> List[str]:
        """Order a record by the headers; unknown keys are dropped."""
        return [record.get(header, "") for header in self.headers]


class SheetWriter:
    """Buffer records per sheet and stream them to a spreadsheet backend.

    Example:
        >>> from xml2xlsx.writer import MemoryBackend
        >>> backend = MemoryBackend()
        >>> with SheetWriter(backend, "out.xlsx", batch_size=2) as writer:
        ...     writer.create_sheet("Sheet1", ["name", "qty"])
        ...     writer.write_row("Sheet1", {"name": "X", "qty": "3"})
        >>> backend.sheets["Sheet1"].rows
        [['name', 'qty'], ['X', '3']]
    """

    def __init__(
        self,
        backend: SpreadsheetBackend,
        output_path: Union[str, Path],
        batch_size: int = DEFAULT_BATCH_SIZE,
        column_width: float = DEFAULT_COLUMN_WIDTH,
        correlation_id: Optional[str] = None
    ) -> None:
        if batch_size <= 0:
            raise ValueError("batch_size must be > 0")
        self.backend = backend
        self.output_path = Path(output_path)
        self.batch_size = batch_size
        self.column_width = column_width
        self.logger = get_logger(__name__, correlation_id, "sheet_writer")
        self._sheets: Dict[str, SheetState] = {}
        self._closed = False

    def _check_open(self) -> None:
        if self._closed:
            raise WriterClosedError("Writer is already closed")

    def _sheet(self, sheet_name: str) -> SheetState:
        try:
            return self._sheets[sheet_name]
        except KeyError:
            raise UnknownSheetError(sheet_name) from None

    @property
    def sheet_names(self) -> List[str]:
        return list(self._sheets)

    def headers(self, sheet_name: str) -> List[str]:
        return list(self._sheet(sheet_name).headers)

    def rows_written(self, sheet_name: str) -> int:
        """Data rows already flushed to the backend for ``sheet_name``."""
        return self._sheet(sheet_name).rows_written

    def create_sheet(self, sheet_name: str, headers: Sequence[str]) -> None:
        """Create a sheet with a styled header row and frozen columns.

        Raises:
            SheetError: If the sheet already exists
            WriterError: If the backend fails
        """
        self._check_open()
        if sheet_name in self._sheets:
            raise SheetError(f"Sheet already exists: {sheet_name}")
        try:
            handle = self.backend.new_sheet(sheet_name)
            for column_index in range(1, len(headers) + 1):
                self.backend.set_column_width(handle, column_index, self.column_width)
            self.backend.stream_row(handle, HEADER_ROW, list(headers), header=True)
        except WriterError:
            raise
        except Exception as e:
            raise WriterError(f"Failed to create sheet {sheet_name}: {e}") from e
        self._sheets[sheet_name] = SheetState(handle, headers)
        self.logger.debug(
            f"Created sheet {sheet_name}",
            extra={"sheet": sheet_name, "columns": len(headers)},
        )

    def write_row(self, sheet_name: str, record: Mapping[str, str]) -> None:
        """Buffer ``record`` and flush the sheet once its batch is full.

        Raises:
            UnknownSheetError: If ``sheet_name`` was never created
        """
        self._check_open()
        sheet = self._sheet(sheet_name)
        sheet.buffer.append(record)
        if len(sheet.buffer) >= self.batch_size:
            self.flush(sheet_name)

    def flush(self, sheet_name: str) -> int:
        """Stream buffered rows of ``sheet_name`` in arrival order.

        Returns:
            Number of rows flushed; an empty buffer flushes nothing
        """
        self._check_open()
        sheet = self._sheet(sheet_name)
        if not sheet.buffer:
            return 0
        flushed = 0
        try:
            for record in sheet.buffer:
                self.backend.stream_row(sheet.handle, sheet.next_row, sheet.render(record))
                sheet.next_row += 1
                flushed += 1
        except WriterError:
            raise
        except Exception as e:
            raise WriterError(f"Failed to write row to {sheet_name}: {e}") from e
        finally:
            del sheet.buffer[:flushed]
        self.logger.debug(
            f"Flushed {flushed} rows to {sheet_name}",
            extra={"sheet": sheet_name, "rows": flushed},
        )
        return flushed

    def close(self) -> None:
        """Flush every sheet, finalize formatting and save exactly once."""
        self._check_open()
        for sheet_name in self._sheets:
            self.flush(sheet_name)
        self._closed = True
        try:
            self.backend.finalize()
        except WriterError:
            raise
        except Exception as e:
            raise WriterError(f"Failed to finalize workbook: {e}") from e
        self.logger.info(
            f"Saving file {self.output_path}",
            extra={"sheets": {name: s.rows_written for name, s in self._sheets.items()}},
        )
        self.backend.save(self.output_path)

    def abort(self) -> None:
        """Drop buffered rows and close without saving anything."""
        if self._closed:
            return
        self._closed = True
        for sheet in self._sheets.values():
            sheet.buffer.clear()
        self.logger.warning(
            "Conversion aborted, workbook not saved",
            extra={"output": str(self.output_path)},
        )

    def __enter__(self) -> "SheetWriter":
        return self

    def __exit__(
        self,
        exc_type: Optional[Type[BaseException]],
        exc: Optional[BaseException],
        traceback: Optional[TracebackType],
    ) -> None:
        if exc_type is None:
            if not self._closed:
                self.close()
        else:
            self.abort()
