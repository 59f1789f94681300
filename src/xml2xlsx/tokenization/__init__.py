"""XML tokenization layer.

Turns seekable byte sources into flat token streams consumed by the detector,
the flattener and the SVD extractor.
"""

from .source import InputType, open_source, rewind, source_name
from .tokenizer import (
    Token,
    TokenType,
    XMLTokenizer,
    iter_tokens,
    local_name,
    peek_root_name,
)

__all__ = [
    "InputType",
    "open_source",
    "rewind",
    "source_name",
    "Token",
    "TokenType",
    "XMLTokenizer",
    "iter_tokens",
    "local_name",
    "peek_root_name",
]
