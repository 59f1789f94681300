"""Tests for the batched multi-sheet writer."""

import pytest

from xml2xlsx.shared.errors import (
    SheetError,
    UnknownSheetError,
    WriterClosedError,
    WriterError,
)
from xml2xlsx.writer import MemoryBackend, SheetWriter


class FailingBackend(MemoryBackend):
    """Memory backend whose data rows fail from ``fail_at`` on."""

    def __init__(self, fail_at=2):
        super().__init__()
        self.fail_at = fail_at

    def stream_row(self, sheet, row_index, values, header=False):
        if row_index >= self.fail_at:
            raise OSError("disk full")
        super().stream_row(sheet, row_index, values, header)


def make_writer(batch_size=3, backend=None):
    backend = backend or MemoryBackend()
    return backend, SheetWriter(backend, "out.xlsx", batch_size=batch_size)


class TestCreateSheet:
    """Test sheet creation."""

    def test_header_row(self):
        """Test the header row is written first and styled."""
        backend, writer = make_writer()
        writer.create_sheet("Sheet1", ["a", "b"])
        sheet = backend.sheets["Sheet1"]
        assert sheet.rows == [["a", "b"]]
        assert sheet.header_rows == [1]
        assert sheet.column_widths == {1: 15.0, 2: 15.0}
        assert writer.sheet_names == ["Sheet1"]
        assert writer.headers("Sheet1") == ["a", "b"]

    def test_custom_column_width(self):
        backend = MemoryBackend()
        writer = SheetWriter(backend, "out.xlsx", column_width=22.5)
        writer.create_sheet("S", ["a"])
        assert backend.sheets["S"].column_widths == {1: 22.5}

    def test_duplicate_sheet(self):
        _, writer = make_writer()
        writer.create_sheet("S", ["a"])
        with pytest.raises(SheetError):
            writer.create_sheet("S", ["a"])

    def test_backend_failure_wrapped(self):
        """Test non-writer exceptions from the backend become WriterError."""
        _, writer = make_writer(backend=FailingBackend(fail_at=1))
        with pytest.raises(WriterError, match="Failed to create sheet"):
            writer.create_sheet("S", ["a"])

    def test_invalid_batch_size(self):
        with pytest.raises(ValueError):
            SheetWriter(MemoryBackend(), "out.xlsx", batch_size=0)


class TestWriteRow:
    """Test buffering, ordering and rendering of rows."""

    def test_buffers_until_batch_full(self):
        """Test rows reach the backend only when a batch is full."""
        backend, writer = make_writer(batch_size=3)
        writer.create_sheet("S", ["a"])
        writer.write_row("S", {"a": "1"})
        writer.write_row("S", {"a": "2"})
        assert len(backend.sheets["S"].rows) == 1
        writer.write_row("S", {"a": "3"})
        assert backend.sheets["S"].rows == [["a"], ["1"], ["2"], ["3"]]
        assert writer.rows_written("S") == 3

    def test_missing_keys_blank_extra_keys_dropped(self):
        backend, writer = make_writer(batch_size=1)
        writer.create_sheet("S", ["a", "b"])
        writer.write_row("S", {"b": "2", "z": "ignored"})
        assert backend.sheets["S"].rows[1] == ["", "2"]

    def test_unknown_sheet(self):
        _, writer = make_writer()
        with pytest.raises(UnknownSheetError):
            writer.write_row("Nope", {"a": "1"})

    def test_sheets_are_independent(self):
        """Test each sheet keeps its own order and row numbering."""
        backend, writer = make_writer(batch_size=2)
        writer.create_sheet("A", ["v"])
        writer.create_sheet("B", ["v"])
        for i in range(5):
            writer.write_row("A", {"v": f"a{i}"})
            writer.write_row("B", {"v": f"b{i}"})
        writer.close()
        assert [r[0] for r in backend.sheets["A"].rows[1:]] == [f"a{i}" for i in range(5)]
        assert [r[0] for r in backend.sheets["B"].rows[1:]] == [f"b{i}" for i in range(5)]

    def test_row_write_failure_wrapped(self):
        _, writer = make_writer(batch_size=1, backend=FailingBackend(fail_at=2))
        writer.create_sheet("S", ["a"])
        with pytest.raises(WriterError, match="Failed to write row"):
            writer.write_row("S", {"a": "1"})


class TestFlush:
    """Test explicit flushing."""

    def test_empty_flush_is_noop(self):
        backend, writer = make_writer()
        writer.create_sheet("S", ["a"])
        assert writer.flush("S") == 0
        assert backend.sheets["S"].rows == [["a"]]

    def test_flush_returns_count(self):
        backend, writer = make_writer(batch_size=10)
        writer.create_sheet("S", ["a"])
        writer.write_row("S", {"a": "1"})
        writer.write_row("S", {"a": "2"})
        assert writer.flush("S") == 2
        assert writer.flush("S") == 0
        assert len(backend.sheets["S"].rows) == 3

    def test_flush_unknown_sheet(self):
        _, writer = make_writer()
        with pytest.raises(UnknownSheetError):
            writer.flush("Nope")


class TestCloseAndAbort:
    """Test the writer lifecycle."""

    def test_close_flushes_and_saves_once(self):
        """Test close writes pending rows, finalizes and saves."""
        backend, writer = make_writer(batch_size=100)
        writer.create_sheet("S", ["a"])
        writer.write_row("S", {"a": "1"})
        writer.close()
        assert backend.sheets["S"].rows == [["a"], ["1"]]
        assert backend.finalized
        assert backend.save_count == 1
        assert backend.saved_to.name == "out.xlsx"

    def test_use_after_close(self):
        _, writer = make_writer()
        writer.create_sheet("S", ["a"])
        writer.close()
        with pytest.raises(WriterClosedError):
            writer.write_row("S", {"a": "1"})
        with pytest.raises(WriterClosedError):
            writer.close()

    def test_context_manager_closes(self):
        backend = MemoryBackend()
        with SheetWriter(backend, "out.xlsx") as writer:
            writer.create_sheet("S", ["a"])
            writer.write_row("S", {"a": "1"})
        assert backend.save_count == 1
        assert backend.sheets["S"].rows[-1] == ["1"]

    def test_context_manager_after_explicit_close(self):
        backend = MemoryBackend()
        with SheetWriter(backend, "out.xlsx") as writer:
            writer.create_sheet("S", ["a"])
            writer.close()
        assert backend.save_count == 1

    def test_exception_aborts_without_saving(self):
        """Test a failure inside the block never saves a workbook."""
        backend = MemoryBackend()
        with pytest.raises(RuntimeError):
            with SheetWriter(backend, "out.xlsx", batch_size=10) as writer:
                writer.create_sheet("S", ["a"])
                writer.write_row("S", {"a": "1"})
                raise RuntimeError("boom")
        assert backend.save_count == 0
        assert backend.sheets["S"].rows == [["a"]]

    def test_abort_twice(self):
        backend, writer = make_writer()
        writer.abort()
        writer.abort()
        assert backend.save_count == 0


class TestBatchSizeInvariance:
    """Test batch size never changes sheet contents."""

    def test_identical_contents(self):
        records = [{"a": str(i), "b": str(i * 2)} for i in range(57)]

        def render(batch_size):
            backend, writer = make_writer(batch_size=batch_size)
            writer.create_sheet("S", ["a", "b"])
            for record in records:
                writer.write_row("S", record)
            writer.close()
            return backend.sheets["S"].rows

        assert render(1) == render(10000) == render(7)
