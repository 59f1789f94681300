"""Tests for the chunked lxml tokenizer."""

import io

import pytest

from xml2xlsx.shared.errors import XMLStructureError
from xml2xlsx.tokenization import (
    Token,
    TokenType,
    XMLTokenizer,
    iter_tokens,
    local_name,
    peek_root_name,
)

DOCUMENT = (
    b'<?xml version="1.0" encoding="UTF-8"?>\n'
    b"<items>\n"
    b"  <item><name>X</name><qty>3</qty></item>\n"
    b"  <item><name>Y &amp; Z</name><note><![CDATA[a<b]]></note></item>\n"
    b"</items>\n"
)


def structural(tokens):
    return [t for t in tokens if t.type is not TokenType.TEXT]


def text_of(tokens):
    return "".join(t.value for t in tokens if t.type is TokenType.TEXT)


class TestXMLTokenizer:
    """Test token production."""

    def test_simple_document(self):
        """Test start, text and end tokens of a tiny document."""
        tokens = list(XMLTokenizer().tokens(io.BytesIO(b"<a>x</a>")))
        assert tokens == [
            Token(TokenType.START, "a"),
            Token(TokenType.TEXT, "x"),
            Token(TokenType.END, "a"),
        ]

    def test_entities_and_cdata_are_text(self):
        """Test entity references and CDATA arrive as decoded text."""
        tokens = list(iter_tokens(io.BytesIO(DOCUMENT)))
        text = text_of(tokens)
        assert "Y & Z" in text
        assert "a<b" in text

    def test_tiny_buffer_matches_default(self):
        """Test chunk size does not change the token stream."""
        default = list(XMLTokenizer().tokens(io.BytesIO(DOCUMENT)))
        tiny = list(XMLTokenizer(buffer_size=3).tokens(io.BytesIO(DOCUMENT)))
        assert structural(tiny) == structural(default)
        assert text_of(tiny) == text_of(default)

    def test_namespaces_stripped(self):
        """Test tags are reported by local name."""
        doc = b'<r xmlns="urn:x" xmlns:p="urn:p"><p:i/><i/></r>'
        names = [t.value for t in iter_tokens(io.BytesIO(doc)) if t.type is TokenType.START]
        assert names == ["r", "i", "i"]

    def test_invalid_buffer_size(self):
        with pytest.raises(ValueError):
            XMLTokenizer(buffer_size=0)

    def test_malformed_raises_structure_error(self):
        """Test mismatched tags raise XMLStructureError."""
        with pytest.raises(XMLStructureError):
            list(iter_tokens(io.BytesIO(b"<a><b></a>")))

    def test_truncated_document(self):
        with pytest.raises(XMLStructureError):
            list(iter_tokens(io.BytesIO(b"<a><b>text</b>")))

    def test_empty_input(self):
        with pytest.raises(XMLStructureError):
            list(iter_tokens(io.BytesIO(b"")))

    def test_lazy(self):
        """Test tokens are produced on demand."""
        tokens = XMLTokenizer(buffer_size=4).tokens(io.BytesIO(DOCUMENT))
        assert next(tokens) == Token(TokenType.START, "items")


class TestHelpers:
    """Test tokenizer helper functions."""

    def test_local_name(self):
        assert local_name("{urn:x}item") == "item"
        assert local_name("item") == "item"

    def test_peek_root_name(self):
        assert peek_root_name(io.BytesIO(DOCUMENT)) == "items"

    def test_peek_root_name_empty(self):
        with pytest.raises(XMLStructureError):
            peek_root_name(io.BytesIO(b""))
