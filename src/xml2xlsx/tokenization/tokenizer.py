"""Streaming XML tokenization on top of lxml's push parser.

The tokenizer reads the source in fixed-size chunks, feeds them to an
``lxml.etree.XMLParser`` with a collecting target and hands out a flat
sequence of start, text and end tokens. No element tree is ever built, so
memory stays bounded by the chunk size and the tokens of a single chunk.
"""

from collections import deque
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, BinaryIO, Deque, Iterator, Optional

from lxml import etree

from xml2xlsx.shared.config import DEFAULT_BUFFER_SIZE
from xml2xlsx.shared.errors import InputFileError, XMLStructureError
from xml2xlsx.shared.logging import get_logger

from .source import source_name


class TokenType(Enum):
    """XML token types produced by the tokenizer."""

    START = auto()      # Start tag, value is the local name
    TEXT = auto()       # Character data (including CDATA), value is the text
    END = auto()        # End tag, value is the local name


@dataclass(frozen=True)
class Token:
    """A single XML token."""

    type: TokenType
    value: str


def local_name(tag: str) -> str:
    """Strip a ``{namespace}`` prefix from a Clark-notation tag."""
    return tag.rsplit("}", 1)[1] if "}" in tag else tag


class _TokenCollector:
    """Parser target that queues tokens until the tokenizer drains them."""

    def __init__(self) -> None:
        self.pending: Deque[Token] = deque()

    def start(self, tag: str, attrib: Any, nsmap: Any = None) -> None:
        self.pending.append(Token(TokenType.START, local_name(tag)))

    def end(self, tag: str) -> None:
        self.pending.append(Token(TokenType.END, local_name(tag)))

    def data(self, data: str) -> None:
        self.pending.append(Token(TokenType.TEXT, data))

    def close(self) -> None:
        return None

    def drain(self) -> Iterator[Token]:
        while self.pending:
            yield self.pending.popleft()


class XMLTokenizer:
    """Chunked XML tokenizer.

    Example:
        >>> import io
        >>> tokens = XMLTokenizer().tokens(io.BytesIO(b"<a>x</a>"))
        >>> [t.type.name for t in tokens]
        ['START', 'TEXT', 'END']
    """

    def __init__(
        self,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        correlation_id: Optional[str] = None
    ) -> None:
        """Initialize the tokenizer.

        Args:
            buffer_size: Bytes read from the source per parser feed
            correlation_id: Optional correlation ID for log records
        """
        if buffer_size <= 0:
            raise ValueError("buffer_size must be > 0")
        self.buffer_size = buffer_size
        self.logger = get_logger(__name__, correlation_id, "xml_tokenizer")

    def _new_parser(self, target: _TokenCollector) -> etree.XMLParser:
        return etree.XMLParser(
            target=target,
            huge_tree=True,
            resolve_entities=False,
            no_network=True,
        )

    def tokens(self, source: BinaryIO) -> Iterator[Token]:
        """Tokenize ``source`` from its current position to the end.

        Tokens decoded before a syntax error are still yielded; the error is
        raised once they are exhausted.

        Raises:
            XMLStructureError: If the document is not well-formed
            InputFileError: If reading the source fails
        """
        collector = _TokenCollector()
        parser = self._new_parser(collector)
        try:
            while True:
                try:
                    chunk = source.read(self.buffer_size)
                except OSError as e:
                    raise InputFileError(source_name(source), str(e)) from e
                if not chunk:
                    break
                parser.feed(chunk)
                yield from collector.drain()
            parser.close()
        except etree.XMLSyntaxError as e:
            yield from collector.drain()
            line, column = getattr(e, "position", (None, None)) or (None, None)
            self.logger.debug(
                "XML syntax error", extra={"line": line, "column": column}
            )
            raise XMLStructureError(e.msg or str(e), line, column) from e
        yield from collector.drain()


def iter_tokens(
    source: BinaryIO, buffer_size: int = DEFAULT_BUFFER_SIZE
) -> Iterator[Token]:
    """Tokenize ``source`` with a default tokenizer."""
    return XMLTokenizer(buffer_size).tokens(source)


def peek_root_name(source: BinaryIO, buffer_size: int = DEFAULT_BUFFER_SIZE) -> str:
    """Local name of the document's root element.

    Only reads until the first start tag.

    Raises:
        XMLStructureError: If no start tag can be decoded
    """
    for token in iter_tokens(source, buffer_size):
        if token.type is TokenType.START:
            return token.value
    raise XMLStructureError("document has no root element")
