"""Entry points for converting XML documents to XLSX workbooks.

Progressive disclosure, as in the rest of the package:

- ``convert_file()`` classifies a file and picks the converter
- ``convert_generic()`` / ``convert_svd()`` force one strategy and accept
  seekable binary file objects as well as paths
- ``GenericConverter`` / ``SVDConverter`` allow custom backends
"""

from pathlib import Path
from typing import Optional, Union

from xml2xlsx.pipeline import GenericConverter, SVDConverter
from xml2xlsx.shared.config import ConversionConfig
from xml2xlsx.shared.errors import InputFileError
from xml2xlsx.shared.logging import get_logger
from xml2xlsx.shared.result import ConversionMode, ConversionResult
from xml2xlsx.tokenization import InputType

from .formats import classify, derive_output_path


def convert_generic(
    input_data: InputType,
    output_path: Union[str, Path],
    config: Optional[ConversionConfig] = None
) -> ConversionResult:
    """Flatten the repeating element of ``input_data`` into one sheet.

    Examples:
        >>> result = convert_generic("items.xml", "items.xlsx")
        >>> result.repeating_element
        'item'
    """
    return GenericConverter(config).convert(input_data, output_path)


def convert_svd(
    input_data: InputType,
    output_path: Union[str, Path],
    config: Optional[ConversionConfig] = None
) -> ConversionResult:
    """Extract peripherals, registers and fields of an SVD document."""
    return SVDConverter(config).convert(input_data, output_path)


def convert_file(
    input_path: Union[str, Path],
    output_path: Optional[Union[str, Path]] = None,
    config: Optional[ConversionConfig] = None,
    mode: Optional[ConversionMode] = None
) -> ConversionResult:
    """Convert an XML file, detecting the conversion mode unless given.

    Args:
        input_path: XML or SVD file to convert
        output_path: Workbook to write (default: input path with ``.xlsx``)
        config: Conversion settings
        mode: Force a conversion mode instead of classifying the file

    Returns:
        ConversionResult describing the written workbook

    Raises:
        InputFileError: If the input file does not exist
        ConversionError: If the conversion fails
    """
    config = config or ConversionConfig()
    path = Path(input_path)
    if not path.is_file():
        raise InputFileError(str(path), "file does not exist")

    target = Path(output_path) if output_path is not None else derive_output_path(path)
    chosen = mode or classify(path, config.buffer_size)

    logger = get_logger(__name__, config.correlation_id, "convert_file")
    logger.info(
        "Starting conversion",
        extra={"input": str(path), "output": str(target), "mode": chosen.name},
    )
    if chosen is ConversionMode.SVD:
        return convert_svd(path, target, config)
    return convert_generic(path, target, config)
