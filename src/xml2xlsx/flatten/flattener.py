"""Streaming flattener turning repeating elements into records."""

from typing import BinaryIO, Dict, Iterator, List, Optional

from xml2xlsx.shared.config import DEFAULT_BUFFER_SIZE
from xml2xlsx.shared.logging import get_logger
from xml2xlsx.tokenization import TokenType, XMLTokenizer

Record = Dict[str, str]


class StreamingFlattener:
    """Emit one record per occurrence of the repeating element.

    Each record maps the tag of a direct child of the repeating element to its
    trimmed text. Children without text are left out, and elements nested
    deeper than one level below the repeating element do not contribute.
    """

    def __init__(
        self,
        element_name: str,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        correlation_id: Optional[str] = None
    ) -> None:
        self.element_name = element_name
        self.tokenizer = XMLTokenizer(buffer_size, correlation_id)
        self.logger = get_logger(__name__, correlation_id, "flattener")
        self.records_emitted = 0

    def records(self, source: BinaryIO) -> Iterator[Record]:
        """Lazily flatten the document in ``source`` from its current position.

        Raises:
            XMLStructureError: If the document is malformed
        """
        row: Optional[Record] = None
        path: List[str] = []
        text: List[str] = []

        for token in self.tokenizer.tokens(source):
            if token.type is TokenType.TEXT:
                text.append(token.value)
                continue

            if token.type is TokenType.START:
                path.append(token.value)
                text.clear()
                if token.value == self.element_name:
                    row = {}
                continue

            # End tag: path[-1] is the closing element, path[-2] its parent
            if (
                row is not None
                and len(path) >= 2
                and path[-2] == self.element_name
                and token.value != self.element_name
            ):
                value = "".join(text).strip()
                if value:
                    row[token.value] = value

            if token.value == self.element_name and row is not None:
                self.records_emitted += 1
                yield row
                row = None

            if path:
                path.pop()
            text.clear()

        self.logger.info(
            f"Parsing completed: {self.records_emitted} rows",
            extra={"rows": self.records_emitted},
        )
