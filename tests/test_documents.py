"""
Tests for documents - PDF and text sources.
"""
from __future__ import annotations

import fitz
import pytest

from deckgen.documents import PDFDocument, TextDocument, document_from_upload
from deckgen.exceptions import DocumentParseError, UnsupportedDocumentError
from deckgen.utils import sanitize_text


def make_pdf(*pages: str) -> bytes:
    """Build an in-memory PDF with one text line per page."""
    doc = fitz.open()
    for text in pages:
        page = doc.new_page()
        if text:
            page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


class TestPDFDocument:
    """Test PDF text extraction."""

    def test_extracts_text_from_every_page(self):
        document = PDFDocument("ad.pdf", make_pdf("Backend Engineer", "Acme, Paris"))

        parsed = document.parse()

        assert "Backend Engineer" in parsed.text
        assert "Acme, Paris" in parsed.text
        assert parsed.name == "ad.pdf"
        assert parsed.id == document.id

    def test_malformed_pdf_raises(self):
        with pytest.raises(DocumentParseError):
            PDFDocument("broken.pdf", b"this is not a pdf").parse()

    def test_pdf_without_text_layer_raises(self):
        with pytest.raises(DocumentParseError, match="no extractable text"):
            PDFDocument("scan.pdf", make_pdf("")).parse()

    def test_is_file(self):
        assert PDFDocument("a.pdf", b"").is_file


class TestTextDocument:
    """Test pasted text documents."""

    def test_parse_returns_sanitized_text(self):
        parsed = TextDocument("paste", "Line one  \n\n\n\nLine two\x00").parse()
        assert parsed.text == "Line one\n\nLine two"

    def test_empty_text_raises(self):
        with pytest.raises(DocumentParseError):
            TextDocument("paste", "   ").parse()

    def test_documents_get_unique_ids(self):
        assert TextDocument("a", "x").id != TextDocument("a", "x").id
        assert not TextDocument("a", "x").is_file


class TestDocumentFromUpload:
    """Test selecting a document source by extension."""

    def test_pdf_extension(self):
        document = document_from_upload("Resume.PDF", make_pdf("A. Dupont"))
        assert isinstance(document, PDFDocument)

    @pytest.mark.parametrize("filename", ["ad.txt", "ad.md"])
    def test_text_extensions(self, filename):
        document = document_from_upload(filename, "Backend Engineer".encode("utf-8"))
        assert isinstance(document, TextDocument)
        assert document.parse().text == "Backend Engineer"

    def test_invalid_utf8_raises(self):
        with pytest.raises(DocumentParseError, match="not valid UTF-8"):
            document_from_upload("ad.txt", b"\xff\xfe\xfa")

    @pytest.mark.parametrize("filename", ["resume.docx", "resume"])
    def test_unsupported_extension(self, filename):
        with pytest.raises(UnsupportedDocumentError) as exc_info:
            document_from_upload(filename, b"data")
        assert exc_info.value.status_code == 415


class TestSanitizeText:
    """Test text sanitization."""

    def test_empty(self):
        assert sanitize_text("") == ""

    def test_keeps_tabs_and_single_newlines(self):
        assert sanitize_text("a\tb\nc") == "a\tb\nc"
