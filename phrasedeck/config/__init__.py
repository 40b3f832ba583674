"""Configuration module for PhraseDeck."""

from .settings import Config
from .languages import LANG_CONFIG, LANGUAGES, LanguageDescriptor, get_language, get_language_codes
from .topics import CUSTOM_TOPIC, TOPICS, TOPIC_LABELS, get_topic_options, resolve_topic
from .config_manager import SettingsManager

__all__ = [
    'Config',
    'LANG_CONFIG',
    'LANGUAGES',
    'LanguageDescriptor',
    'get_language',
    'get_language_codes',
    'CUSTOM_TOPIC',
    'TOPICS',
    'TOPIC_LABELS',
    'get_topic_options',
    'resolve_topic',
    'SettingsManager',
]
