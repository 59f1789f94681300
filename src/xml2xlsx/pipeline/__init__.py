"""Producer/consumer pipeline wiring parsers to the sheet writer."""

from .generic_converter import (
    GenericConverter,
    GenericProducer,
    default_backend,
    sample_headers,
)
from .streams import ErrorChannel, RecordStream, StreamClosedError, start_producer
from .svd_converter import SVDConverter

__all__ = [
    "GenericConverter",
    "GenericProducer",
    "default_backend",
    "sample_headers",
    "ErrorChannel",
    "RecordStream",
    "StreamClosedError",
    "start_producer",
    "SVDConverter",
]
