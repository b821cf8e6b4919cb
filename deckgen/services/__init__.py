"""Application services."""

from .synthesizer import SynthesizerService

__all__ = ["SynthesizerService"]
