"""
deckgen - structured resume and job ad extraction with LLM-based adaptation.
"""

__version__ = "1.0.0"
