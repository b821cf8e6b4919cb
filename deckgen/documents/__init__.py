"""
Document sources - Factory module for uploaded and pasted documents.

Selects the document implementation based on the file extension.
"""
from __future__ import annotations

from pathlib import Path

from ..exceptions import DocumentParseError, UnsupportedDocumentError
from .interface import Document, ParsedDocument
from .pdf_impl import PDFDocument
from .text_impl import TextDocument

TEXT_EXTENSIONS: frozenset[str] = frozenset({".txt", ".md"})


def document_from_upload(filename: str, content: bytes) -> Document:
    """
    Build a document from an uploaded file.

    Args:
        filename: Original file name (its extension selects the parser)
        content: Raw file bytes

    Raises:
        UnsupportedDocumentError: If the extension is not handled
        DocumentParseError: If a text file is not valid UTF-8
    """
    ext = Path(filename).suffix.lower()
    if ext == ".pdf":
        return PDFDocument(filename, content)
    if ext in TEXT_EXTENSIONS:
        try:
            return TextDocument(filename, content.decode("utf-8"))
        except UnicodeDecodeError as e:
            raise DocumentParseError(
                f"Document '{filename}' is not valid UTF-8 text",
                cause=e,
            ) from e
    raise UnsupportedDocumentError(f"File type {ext or '(none)'} not supported")


__all__ = [
    "Document",
    "ParsedDocument",
    "PDFDocument",
    "TextDocument",
    "document_from_upload",
]
