"""Tests for repeating element detection."""

import io

import pytest

from xml2xlsx.flatten import RepeatingElementDetector
from xml2xlsx.flatten.detector import detect_repeating_element, select_repeating_element
from xml2xlsx.shared.errors import RepeatingElementNotFoundError, XMLStructureError

ITEMS = (
    b"<items>"
    b"<item><name>X</name><qty>3</qty></item>"
    b"<item><name>Y</name><qty>5</qty></item>"
    b"</items>"
)


class TestSelectRepeatingElement:
    """Test selection from element counts."""

    def test_most_frequent(self):
        assert select_repeating_element({"a": 1, "b": 3, "c": 2}) == "b"

    def test_tie_keeps_first_seen(self):
        assert select_repeating_element({"x": 2, "y": 2}) == "x"

    def test_nothing_repeats(self):
        assert select_repeating_element({"a": 1, "b": 1}) is None

    def test_empty(self):
        assert select_repeating_element({}) is None

    def test_custom_minimum(self):
        assert select_repeating_element({"a": 2}, min_occurrences=3) is None


class TestRepeatingElementDetector:
    """Test detection over whole documents."""

    def test_single_repeated_name(self):
        """Test the only repeated element is chosen."""
        doc = b"<root><a/><b/><b/><c/></root>"
        assert detect_repeating_element(io.BytesIO(doc)) == "b"

    def test_items_document(self):
        """Test the row element wins the tie with its children."""
        assert detect_repeating_element(io.BytesIO(ITEMS)) == "item"

    def test_root_is_not_counted(self):
        detector = RepeatingElementDetector()
        counts = detector.count_elements(io.BytesIO(ITEMS))
        assert "items" not in counts
        assert counts == {"item": 2, "name": 2, "qty": 2}
        assert detector.counts == counts

    def test_tie_break_document_order(self):
        doc = b"<root><x/><y/><y/><x/></root>"
        assert detect_repeating_element(io.BytesIO(doc)) == "x"

    def test_no_repeats(self):
        """Test detection fails when no element occurs twice."""
        with pytest.raises(RepeatingElementNotFoundError):
            detect_repeating_element(io.BytesIO(b"<root><a/><b/></root>"))

    def test_root_only(self):
        with pytest.raises(RepeatingElementNotFoundError):
            detect_repeating_element(io.BytesIO(b"<root/>"))

    def test_malformed(self):
        with pytest.raises(XMLStructureError):
            detect_repeating_element(io.BytesIO(b"<root><a></root>"))

    def test_small_buffer(self):
        assert detect_repeating_element(io.BytesIO(ITEMS), buffer_size=5) == "item"
