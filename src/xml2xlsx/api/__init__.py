"""Public conversion API."""

from .converter import convert_file, convert_generic, convert_svd
from .formats import classify, derive_output_path

__all__ = [
    "convert_file",
    "convert_generic",
    "convert_svd",
    "classify",
    "derive_output_path",
]
