"""xml2xlsx: streaming XML to Excel conversion.

Converts large XML documents into XLSX workbooks without loading the whole
document, either by flattening an auto-detected repeating element into one
sheet or by splitting CMSIS-SVD register descriptions into linked
Peripherals, Registers and Fields sheets.

Progressive API Disclosure:
- Level 1: Simple functions - convert_file(), convert_generic(), convert_svd()
- Level 2: Converter classes with custom backends - GenericConverter, SVDConverter
- Level 3: Building blocks - detector, flattener, extractor, SheetWriter
"""

__version__ = "0.1.0"
__author__ = "xml2xlsx developers"

# Level 1: Simple functions
from .api import classify, convert_file, convert_generic, convert_svd

# Level 2: Converter classes
from .pipeline import GenericConverter, SVDConverter

# Level 3: Building blocks
from .flatten import RepeatingElementDetector, StreamingFlattener
from .svd import EntityKind, SVDExtractor
from .writer import OpenpyxlBackend, SheetWriter

# Configuration, results and errors
from .shared import (
    ConversionConfig,
    ConversionError,
    ConversionMode,
    ConversionResult,
)

__all__ = [
    # Version and metadata
    "__author__",
    "__version__",

    # Level 1
    "classify",
    "convert_file",
    "convert_generic",
    "convert_svd",

    # Level 2
    "GenericConverter",
    "SVDConverter",

    # Level 3
    "RepeatingElementDetector",
    "StreamingFlattener",
    "EntityKind",
    "SVDExtractor",
    "OpenpyxlBackend",
    "SheetWriter",

    # Configuration, results and errors
    "ConversionConfig",
    "ConversionError",
    "ConversionMode",
    "ConversionResult",
]
