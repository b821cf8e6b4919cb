"""
Plain-text document source, for text pasted by the user.
"""
from __future__ import annotations

from ..exceptions import DocumentParseError
from ..utils import sanitize_text
from .interface import Document


class TextDocument(Document):
    """Document whose content already is plain text. No parsing is needed."""

    def __init__(self, name: str, text: str) -> None:
        super().__init__(name)
        self._text = text

    @property
    def is_file(self) -> bool:
        return False

    def get_parsed_content(self) -> str:
        text = sanitize_text(self._text)
        if not text:
            raise DocumentParseError(f"Document '{self.name}' is empty")
        return text
