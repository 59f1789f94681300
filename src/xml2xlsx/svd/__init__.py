"""Hierarchical extraction for CMSIS-SVD register descriptions."""

from .entities import ID_WIDTH, EntityKind, format_entity_id
from .extractor import SVDExtractor

__all__ = [
    "ID_WIDTH",
    "EntityKind",
    "format_entity_id",
    "SVDExtractor",
]
