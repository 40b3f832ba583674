"""Deck session-state module."""

from .controller import Deck, DeckController, RegenerationResult
from .cooldown import CooldownState, CooldownTimer

__all__ = ['Deck', 'DeckController', 'RegenerationResult', 'CooldownState', 'CooldownTimer']
