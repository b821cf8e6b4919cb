"""
Abstract interface for document sources.

A document is anything that can be turned into plain text for a provider:
an uploaded PDF, a pasted job description, etc.
"""
from __future__ import annotations

import uuid
from abc import ABC, abstractmethod
from dataclasses import dataclass


@dataclass(frozen=True)
class ParsedDocument:
    """Plain-text representation of a document, as handed to providers."""
    id: str
    name: str
    text: str


class Document(ABC):
    """
    Abstract document source.

    Every document gets a unique id at construction and keeps the name it
    was submitted under.
    """

    def __init__(self, name: str) -> None:
        self._id = str(uuid.uuid4())
        self._name = name

    @property
    def id(self) -> str:
        return self._id

    @property
    def name(self) -> str:
        return self._name

    @property
    @abstractmethod
    def is_file(self) -> bool:
        """Whether the document came from an uploaded file."""
        pass

    @abstractmethod
    def get_parsed_content(self) -> str:
        """
        Extract the plain text of the document.

        Raises:
            DocumentParseError: If the content cannot be read
        """
        pass

    def parse(self) -> ParsedDocument:
        """Parse the document into a ``ParsedDocument``."""
        return ParsedDocument(id=self.id, name=self.name, text=self.get_parsed_content())

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(id={self._id!r}, name={self._name!r})"
