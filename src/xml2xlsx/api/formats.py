"""Classification of input documents into conversion modes."""

from pathlib import Path
from typing import Union

from xml2xlsx.shared.config import DEFAULT_BUFFER_SIZE
from xml2xlsx.shared.errors import ConversionError
from xml2xlsx.shared.logging import get_logger
from xml2xlsx.shared.result import ConversionMode
from xml2xlsx.tokenization import open_source, peek_root_name

SVD_SUFFIX = ".svd"
SVD_ROOT_ELEMENT = "device"
XLSX_SUFFIX = ".xlsx"

logger = get_logger(__name__, component="format_detection")


def classify(
    input_path: Union[str, Path], buffer_size: int = DEFAULT_BUFFER_SIZE
) -> ConversionMode:
    """Choose the conversion mode for a file.

    Files ending in ``.svd`` and documents whose root element is ``device``
    are CMSIS-SVD. Anything else, including documents whose root cannot be
    read, goes through the generic converter, which then reports the actual
    problem.
    """
    path = Path(input_path)
    if path.suffix.lower() == SVD_SUFFIX:
        return ConversionMode.SVD
    try:
        with open_source(path) as source:
            root = peek_root_name(source, buffer_size)
    except ConversionError as e:
        logger.debug(f"Could not read root element of {path}: {e}")
        return ConversionMode.GENERIC
    return ConversionMode.SVD if root == SVD_ROOT_ELEMENT else ConversionMode.GENERIC


def derive_output_path(input_path: Union[str, Path]) -> Path:
    """Input path with its suffix replaced by ``.xlsx``."""
    return Path(input_path).with_suffix(XLSX_SUFFIX)
