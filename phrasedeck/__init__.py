"""PhraseDeck - on-demand bilingual phrase cards"""

__version__ = "1.0.0"
__author__ = "PhraseDeck Team"

from .config import Config, LANGUAGES, LanguageDescriptor
from .deck import CooldownTimer, DeckController, RegenerationResult
from .models import GenerationRequest, Phrase, WordAlignment
from .services import GenerationClient, create_generation_client
from .session import DeckView, PhraseSession
from .speech import SpeechDispatcher, SpeechPlatform

__all__ = [
    'Config',
    'LANGUAGES',
    'LanguageDescriptor',
    'CooldownTimer',
    'DeckController',
    'RegenerationResult',
    'GenerationRequest',
    'Phrase',
    'WordAlignment',
    'GenerationClient',
    'create_generation_client',
    'DeckView',
    'PhraseSession',
    'SpeechDispatcher',
    'SpeechPlatform',
]
