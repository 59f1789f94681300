"""Single-pass extraction of peripherals, registers and fields.

The extractor keeps one "current" entity per kind. Opening a register copies
the current peripheral's id and name into it; opening a field copies the
current register's and peripheral's. Children whose parent entity is not open
(a field outside any register, say) are ignored.
"""

import itertools
from typing import (
    TYPE_CHECKING,
    BinaryIO,
    Dict,
    Iterator,
    List,
    Mapping,
    Optional,
    Tuple,
)

from xml2xlsx.flatten import Record
from xml2xlsx.shared.config import DEFAULT_BUFFER_SIZE
from xml2xlsx.shared.logging import get_logger
from xml2xlsx.tokenization import TokenType, XMLTokenizer

from .entities import EntityKind, format_entity_id

if TYPE_CHECKING:
    from xml2xlsx.pipeline.streams import ErrorChannel, RecordStream

# Child containers that are not attributes of their parent entity
_NESTED_CONTAINERS = {
    EntityKind.PERIPHERAL: EntityKind.REGISTER.container,
    EntityKind.REGISTER: EntityKind.FIELD.container,
}

# Parent entity whose id and name are copied into a newly opened entity
_PARENTS = {
    EntityKind.REGISTER: EntityKind.PERIPHERAL,
    EntityKind.FIELD: EntityKind.REGISTER,
}

_KINDS_BY_TAG = {kind.tag: kind for kind in EntityKind}


class SVDExtractor:
    """Extract the three entity streams of a CMSIS-SVD document."""

    def __init__(
        self,
        buffer_size: int = DEFAULT_BUFFER_SIZE,
        correlation_id: Optional[str] = None
    ) -> None:
        self.tokenizer = XMLTokenizer(buffer_size, correlation_id)
        self.logger = get_logger(__name__, correlation_id, "svd_extractor")
        self.counts: Dict[EntityKind, int] = {kind: 0 for kind in EntityKind}

    def _open(
        self,
        kind: EntityKind,
        sequence: int,
        parent: Optional[Record],
    ) -> Record:
        record: Record = {"_id": format_entity_id(kind, sequence)}
        if parent is None:
            return record
        if kind is EntityKind.FIELD:
            record["_register_id"] = parent["_id"]
            record["_register_name"] = parent.get("name", "")
            record["_peripheral_id"] = parent["_peripheral_id"]
            record["_peripheral_name"] = parent["_peripheral_name"]
        else:
            record["_peripheral_id"] = parent["_id"]
            record["_peripheral_name"] = parent.get("name", "")
        return record

    def extract(self, source: BinaryIO) -> Iterator[Tuple[EntityKind, Record]]:
        """Lazily yield ``(kind, record)`` pairs in document order of completion.

        Raises:
            XMLStructureError: If the document is malformed
        """
        sequences = {kind: itertools.count() for kind in EntityKind}
        self.counts = {kind: 0 for kind in EntityKind}
        current: Dict[EntityKind, Optional[Record]] = {
            kind: None for kind in EntityKind
        }
        path: List[str] = []
        text: List[str] = []

        for token in self.tokenizer.tokens(source):
            if token.type is TokenType.TEXT:
                text.append(token.value)
                continue

            name = token.value
            if token.type is TokenType.START:
                path.append(name)
                text.clear()
                kind = _KINDS_BY_TAG.get(name)
                if kind is not None and kind.container in path:
                    parent_kind = _PARENTS.get(kind)
                    parent = current[parent_kind] if parent_kind is not None else None
                    if parent_kind is None or parent is not None:
                        current[kind] = self._open(kind, next(sequences[kind]), parent)
                        self.counts[kind] += 1
                continue

            value = "".join(text).strip()
            if value and len(path) >= 2:
                parent_tag = path[-2]
                owner = _KINDS_BY_TAG.get(parent_tag)
                if (
                    owner is not None
                    and current[owner] is not None
                    and name != owner.tag
                    and name != _NESTED_CONTAINERS.get(owner)
                ):
                    current[owner][name] = value  # type: ignore[index]

            kind = _KINDS_BY_TAG.get(name)
            if kind is not None and current[kind] is not None:
                record = current[kind]
                current[kind] = None
                yield kind, record  # type: ignore[misc]

            if path:
                path.pop()
            text.clear()

        self.logger.info(
            "SVD parsing completed: "
            f"{self.counts[EntityKind.PERIPHERAL]} peripherals, "
            f"{self.counts[EntityKind.REGISTER]} registers, "
            f"{self.counts[EntityKind.FIELD]} fields",
            extra={kind.container: count for kind, count in self.counts.items()},
        )

    def run(
        self,
        source: BinaryIO,
        streams: Mapping[EntityKind, "RecordStream"],
        errors: "ErrorChannel",
    ) -> None:
        """Producer loop: route records into one stream per entity kind.

        A failure is reported once on ``errors``. All streams are closed when
        the scan ends, whether it succeeded or not.
        """
        try:
            for kind, record in self.extract(source):
                streams[kind].put(record)
        except Exception as e:
            self.logger.error(f"SVD extraction failed: {e}")
            errors.report(e)
        finally:
            for stream in streams.values():
                stream.close()
