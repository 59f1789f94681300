"""Exception hierarchy for XML to spreadsheet conversion.

Every failure surfaced by a conversion derives from ``ConversionError`` so that
callers (and the CLI) can report a single category of errors. None of these
conditions are considered transient; nothing in the package retries.
"""

from typing import Optional


class ConversionError(Exception):
    """Base exception for all conversion failures."""


class InputFileError(ConversionError):
    """Raised when the input document cannot be opened or read."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Cannot read input file {path}: {reason}")
        self.path = path
        self.reason = reason


class XMLStructureError(ConversionError):
    """Raised when the input is not well-formed XML."""

    def __init__(
        self,
        message: str,
        line: Optional[int] = None,
        column: Optional[int] = None,
    ) -> None:
        location = f" (line {line}, column {column})" if line is not None else ""
        super().__init__(f"XML parsing error: {message}{location}")
        self.line = line
        self.column = column


class RepeatingElementNotFoundError(ConversionError):
    """Raised when no element repeats often enough to be used as a row."""

    def __init__(self, min_occurrences: int) -> None:
        super().__init__(
            "Failed to detect repeating XML element: no element below the root "
            f"occurs at least {min_occurrences} times"
        )
        self.min_occurrences = min_occurrences


class NoColumnsError(ConversionError):
    """Raised when the sampled rows of a generic conversion hold no columns."""


class WriterError(ConversionError):
    """Raised when rows cannot be written or the workbook cannot be saved."""


class SheetError(WriterError):
    """Raised on invalid sheet operations such as creating a sheet twice."""


class UnknownSheetError(SheetError):
    """Raised when writing to a sheet that was never created."""

    def __init__(self, sheet_name: str) -> None:
        super().__init__(f"Sheet not found: {sheet_name}")
        self.sheet_name = sheet_name


class WriterClosedError(WriterError):
    """Raised when the writer is used after it was closed or aborted."""
