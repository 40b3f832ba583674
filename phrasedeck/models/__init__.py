"""Data models for PhraseDeck."""

from .phrase import GenerationRequest, Phrase, WordAlignment

__all__ = [
    'GenerationRequest',
    'Phrase',
    'WordAlignment',
]
