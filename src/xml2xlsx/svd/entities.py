"""Entity kinds of CMSIS-SVD documents and their sheet layouts."""

from enum import Enum
from typing import List

ID_WIDTH = 4


class EntityKind(Enum):
    """The three nested entity levels extracted from an SVD document."""

    PERIPHERAL = "peripheral"
    REGISTER = "register"
    FIELD = "field"

    @property
    def tag(self) -> str:
        """Element name opening an entity of this kind."""
        return self.value

    @property
    def container(self) -> str:
        """Element name that must enclose entities of this kind."""
        return self.value + "s"

    @property
    def id_prefix(self) -> str:
        return _ID_PREFIXES[self]

    @property
    def sheet_name(self) -> str:
        return self.container.capitalize()

    @property
    def headers(self) -> List[str]:
        return list(_HEADERS[self])


_ID_PREFIXES = {
    EntityKind.PERIPHERAL: "P",
    EntityKind.REGISTER: "R",
    EntityKind.FIELD: "F",
}

_HEADERS = {
    EntityKind.PERIPHERAL: (
        "_id", "name", "description", "groupName", "baseAddress",
        "size", "access", "resetValue",
    ),
    EntityKind.REGISTER: (
        "_id", "_peripheral_id", "_peripheral_name",
        "name", "displayName", "description",
        "addressOffset", "size", "access", "resetValue",
    ),
    EntityKind.FIELD: (
        "_id", "_register_id", "_register_name", "_peripheral_id", "_peripheral_name",
        "name", "description", "bitOffset", "bitWidth", "access",
    ),
}


def format_entity_id(kind: EntityKind, sequence: int) -> str:
    """Synthetic id such as ``P0000`` or ``R0012``."""
    return f"{kind.id_prefix}{sequence:0{ID_WIDTH}d}"
