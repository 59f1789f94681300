"""Opening and rewinding XML input sources."""

import io
from contextlib import contextmanager
from pathlib import Path
from typing import BinaryIO, Iterator, Union

from xml2xlsx.shared.errors import InputFileError

# Type definitions for input data
InputType = Union[str, Path, BinaryIO]


def source_name(source: InputType) -> str:
    """Human readable name of a source for error messages."""
    if isinstance(source, (str, Path)):
        return str(source)
    return str(getattr(source, "name", "<stream>"))


@contextmanager
def open_source(input_data: InputType) -> Iterator[BinaryIO]:
    """Yield a binary handle positioned at the start of the document.

    Paths are opened here and closed on exit. File-like objects are used as
    given and left open for the caller.

    Raises:
        InputFileError: If the path does not exist or cannot be opened
    """
    if hasattr(input_data, "read"):
        yield input_data  # type: ignore[misc]
        return

    path = Path(input_data)  # type: ignore[arg-type]
    if not path.is_file():
        raise InputFileError(str(path), "file does not exist")
    try:
        handle = path.open("rb")
    except OSError as e:
        raise InputFileError(str(path), e.strerror or str(e)) from e
    with handle:
        yield handle


def rewind(source: BinaryIO) -> None:
    """Seek back to the start of the document for another pass.

    Raises:
        InputFileError: If the source does not support seeking
    """
    try:
        source.seek(0)
    except (OSError, ValueError, AttributeError, io.UnsupportedOperation) as e:
        raise InputFileError(
            source_name(source), f"failed to rewind input: {e}"
        ) from e
