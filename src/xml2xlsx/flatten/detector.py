"""Detection of the element that represents one spreadsheet row.

A full pass over the document counts every start tag below the root. The most
frequent name wins, provided it occurs at least twice; among names with the
same count the one seen first in document order wins.
"""

from typing import BinaryIO, Dict, Optional

from xml2xlsx.shared.config import DEFAULT_BUFFER_SIZE
from xml2xlsx.shared.errors import RepeatingElementNotFoundError
from xml2xlsx.shared.logging import get_logger
from xml2xlsx.tokenization import TokenType, XMLTokenizer

MIN_OCCURRENCES = 2


def select_repeating_element(
    counts: Dict[str, int], min_occurrences: int = MIN_OCCURRENCES
) -> Optional[str]:
    """Pick the most frequent name from insertion-ordered ``counts``.

    Returns:
        The chosen name, or None if no name reaches ``min_occurrences``
    """
    best_name: Optional[str] = None
    best_count = 0
    for name, count in counts.items():
        # Strict comparison keeps the first-seen name on ties
        if count > best_count and count >= min_occurrences:
            best_name = name
            best_count = count
    return best_name


class RepeatingElementDetector:
    """Counts element occurrences and chooses the row element."""

    def __init__(
        self,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        min_occurrences: int = MIN_OCCURRENCES,
        correlation_id: Optional[str] = None
    ) -> None:
        self.tokenizer = XMLTokenizer(buffer_size, correlation_id)
        self.min_occurrences = min_occurrences
        self.logger = get_logger(__name__, correlation_id, "detector")
        self.counts: Dict[str, int] = {}

    def count_elements(self, source: BinaryIO) -> Dict[str, int]:
        """Count start tags at depth > 1 over the whole document.

        Raises:
            XMLStructureError: If the document is malformed
        """
        counts: Dict[str, int] = {}
        depth = 0
        for token in self.tokenizer.tokens(source):
            if token.type is TokenType.START:
                depth += 1
                if depth > 1:
                    counts[token.value] = counts.get(token.value, 0) + 1
            elif token.type is TokenType.END:
                depth -= 1
        self.counts = counts
        return counts

    def detect(self, source: BinaryIO) -> str:
        """Return the repeating element name of the document in ``source``.

        Raises:
            RepeatingElementNotFoundError: If no element repeats
            XMLStructureError: If the document is malformed
        """
        counts = self.count_elements(source)
        name = select_repeating_element(counts, self.min_occurrences)
        if name is None:
            self.logger.error(
                "No repeating element found",
                extra={"distinct_elements": len(counts)},
            )
            raise RepeatingElementNotFoundError(self.min_occurrences)
        self.logger.info(
            f"Detected repeating element: <{name}>",
            extra={"element": name, "occurrences": counts[name]},
        )
        return name


def detect_repeating_element(
    source: BinaryIO, buffer_size: int = DEFAULT_BUFFER_SIZE
) -> str:
    """Detect the row element of the document in ``source``."""
    return RepeatingElementDetector(buffer_size).detect(source)
