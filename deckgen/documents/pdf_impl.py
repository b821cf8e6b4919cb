"""
PDF document source.

Uses PyMuPDF to pull the text layer out of every page. Scanned PDFs
without a text layer are rejected rather than sent to a provider empty.
"""
from __future__ import annotations

import fitz  # PyMuPDF

from ..config import get_logger
from ..exceptions import DocumentParseError
from ..utils import sanitize_text
from .interface import Document

logger = get_logger("documents.pdf")


class PDFDocument(Document):
    """Document backed by the raw bytes of an uploaded PDF."""

    def __init__(self, name: str, content: bytes) -> None:
        super().__init__(name)
        self._content = content

    @property
    def is_file(self) -> bool:
        return True

    def get_parsed_content(self) -> str:
        """Extract text from every page of the PDF."""
        try:
            with fitz.open(stream=self._content, filetype="pdf") as doc:
                pages = [page.get_text("text") for page in doc]
        except Exception as e:
            logger.warning("Could not read PDF %s: %s", self.name, e)
            raise DocumentParseError(
                f"Could not read PDF '{self.name}'",
                details=str(e),
                cause=e,
            ) from e

        text = sanitize_text("\n\n".join(pages))
        if not text:
            raise DocumentParseError(
                f"PDF '{self.name}' has no extractable text",
                details="The file may be a scanned image without a text layer",
            )

        logger.debug("Parsed PDF %s | pages=%d | chars=%d", self.name, len(pages), len(text))
        return text
