"""Tests for bounded record streams and the error channel."""

import threading

import pytest

from xml2xlsx.pipeline import ErrorChannel, RecordStream, StreamClosedError, start_producer


class TestRecordStream:
    """Test the bounded blocking stream."""

    def test_fifo_until_closed(self):
        stream = RecordStream(10)
        for i in range(3):
            stream.put({"i": str(i)})
        stream.close()
        assert [r["i"] for r in stream] == ["0", "1", "2"]

    def test_iteration_after_exhaustion(self):
        """Test iterating a finished stream again ends immediately."""
        stream = RecordStream(2)
        stream.close()
        assert list(stream) == []
        assert list(stream) == []
        assert stream.take(5) == []

    def test_put_after_close(self):
        stream = RecordStream(2)
        stream.close()
        with pytest.raises(StreamClosedError):
            stream.put({})

    def test_close_idempotent(self):
        stream = RecordStream(1)
        stream.close()
        stream.close()
        assert stream.closed
        assert list(stream) == []

    def test_take(self):
        stream = RecordStream(10)
        for i in range(5):
            stream.put({"i": str(i)})
        stream.close()
        assert len(stream.take(3)) == 3
        assert [r["i"] for r in stream.take(10)] == ["3", "4"]

    def test_invalid_size(self):
        with pytest.raises(ValueError):
            RecordStream(0)

    def test_backpressure(self):
        """Test a full stream suspends the producer until it is consumed."""
        stream = RecordStream(1)
        stream.put({"i": "0"})
        finished = threading.Event()

        def produce():
            stream.put({"i": "1"})
            finished.set()
            stream.close()

        thread = start_producer(produce, "test-producer")
        assert not finished.wait(0.2)
        assert [r["i"] for r in stream] == ["0", "1"]
        thread.join(timeout=5)
        assert finished.is_set()

    def test_drain_unblocks_producer(self):
        """Test draining lets a producer blocked on a full stream finish."""
        stream = RecordStream(2)

        def produce():
            for i in range(50):
                stream.put({"i": str(i)})
            stream.close()

        thread = start_producer(produce, "test-producer")
        assert stream.drain() == 50
        thread.join(timeout=5)
        assert not thread.is_alive()

    def test_start_producer_daemon(self):
        thread = start_producer(lambda: None, "noop")
        thread.join(timeout=5)
        assert thread.daemon
        assert thread.name == "noop"


class TestErrorChannel:
    """Test first-error-wins reporting."""

    def test_first_error_wins(self):
        errors = ErrorChannel()
        first = ValueError("first")
        assert errors.report(first) is True
        assert errors.report(RuntimeError("second")) is False
        assert errors.error is first

    def test_raise_if_set(self):
        errors = ErrorChannel()
        errors.raise_if_set()
        errors.report(KeyError("x"))
        with pytest.raises(KeyError):
            errors.raise_if_set()

    def test_concurrent_reports(self):
        errors = ErrorChannel()
        results = []
        lock = threading.Lock()

        def report(i):
            won = errors.report(ValueError(str(i)))
            with lock:
                results.append(won)

        threads = [threading.Thread(target=report, args=(i,)) for i in range(8)]
        for thread in threads:
            thread.start()
        for thread in threads:
            thread.join()
        assert results.count(True) == 1
