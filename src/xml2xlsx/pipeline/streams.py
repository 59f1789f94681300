"""Bounded record streams and the shared error channel.

Producers and consumers of a conversion only synchronize through these two
objects. A ``RecordStream`` is a bounded blocking queue with an explicit close:
``put`` suspends the producer while the queue is full and iteration suspends
the consumer while it is empty, which keeps the parser from running
arbitrarily far ahead of the writer.
"""

import queue
import threading
from typing import Callable, Iterator, List, Optional

from xml2xlsx.flatten import Record
from xml2xlsx.shared.config import DEFAULT_QUEUE_SIZE
from xml2xlsx.shared.logging import get_logger

_CLOSED = object()


class StreamClosedError(RuntimeError):
    """Raised when a producer puts into a stream it already closed."""


class RecordStream:
    """Single-producer, single-consumer bounded stream of records."""

    def __init__(self, maxsize: int = DEFAULT_QUEUE_SIZE, name: str = "records") -> None:
        if maxsize <= 0:
            raise ValueError("maxsize must be > 0")
        self.name = name
        self._queue: "queue.Queue[object]" = queue.Queue(maxsize=maxsize)
        self._closed = False
        self._exhausted = False

    @property
    def closed(self) -> bool:
        return self._closed

    def put(self, record: Record) -> None:
        """Append a record, blocking while the stream is full."""
        if self._closed:
            raise StreamClosedError(f"stream {self.name!r} is closed")
        self._queue.put(record)

    def close(self) -> None:
        """Signal end of stream. Idempotent."""
        if self._closed:
            return
        self._closed = True
        self._queue.put(_CLOSED)

    def _next(self) -> object:
        if self._exhausted:
            return _CLOSED
        item = self._queue.get()
        if item is _CLOSED:
            self._exhausted = True
        return item

    def __iter__(self) -> Iterator[Record]:
        while True:
            item = self._next()
            if item is _CLOSED:
                return
            yield item  # type: ignore[misc]

    def take(self, count: int) -> List[Record]:
        """Read up to ``count`` records, fewer if the stream ends first."""
        records: List[Record] = []
        while len(records) < count:
            item = self._next()
            if item is _CLOSED:
                break
            records.append(item)  # type: ignore[arg-type]
        return records

    def drain(self) -> int:
        """Discard records until the producer closes the stream.

        Used by a consumer that failed so that its producer never stays
        blocked on a full queue.
        """
        discarded = 0
        for _ in self:
            discarded += 1
        return discarded


class ErrorChannel:
    """Holds the first fatal error reported by any task of a conversion."""

    def __init__(self, correlation_id: Optional[str] = None) -> None:
        self._lock = threading.Lock()
        self._error: Optional[BaseException] = None
        self.logger = get_logger(__name__, correlation_id, "error_channel")

    @property
    def error(self) -> Optional[BaseException]:
        with self._lock:
            return self._error

    def report(self, error: BaseException) -> bool:
        """Record ``error`` unless an earlier one was already recorded.

        Returns:
            True if ``error`` became the surfaced error
        """
        with self._lock:
            if self._error is None:
                self._error = error
                return True
        self.logger.warning(
            f"Dropping secondary error: {error}",
            extra={"error_type": type(error).__name__},
        )
        return False

    def raise_if_set(self) -> None:
        error = self.error
        if error is not None:
            raise error


def start_producer(target: Callable[[], None], name: str) -> threading.Thread:
    """Run ``target`` on a daemon thread and return the started thread."""
    thread = threading.Thread(target=target, name=name, daemon=True)
    thread.start()
    return thread
