"""
Provider layer for swappable implementations.

Each provider type has an abstract interface that concrete implementations
must satisfy. Providers are selected by name at runtime through the
registry built at startup.

Directory Structure:
    providers/
    ├── __init__.py           # This file
    └── llm/                  # Extraction / adaptation providers
        ├── __init__.py       # Registry - builds providers from config
        ├── interface.py      # Abstract interface all providers must implement
        ├── prompts.py        # Prompt templates
        ├── groq_impl.py      # Groq implementation
        └── gemini_impl.py    # Gemini implementation
"""

from .llm import ExtractionProviderInterface, ProviderRegistry

__all__ = ["ExtractionProviderInterface", "ProviderRegistry"]
