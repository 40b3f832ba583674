"""UI components for PhraseDeck."""

from .deck_view import PhraseDeckView

__all__ = [
    'PhraseDeckView',
]
