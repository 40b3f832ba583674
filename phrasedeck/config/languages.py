"""Language-specific configurations."""

from dataclasses import dataclass
from typing import Dict, List, Tuple


@dataclass(frozen=True)
class LanguageDescriptor:
    """Static reference data for one selectable language."""

    name: str
    code: str
    uses_latin_alphabet: bool

    @property
    def primary_subtag(self) -> str:
        """Two-letter primary subtag of the BCP-47 code (``zh`` for ``zh-CN``)."""
        return self.code[:2].lower()


LANGUAGES: Tuple[LanguageDescriptor, ...] = (
    LanguageDescriptor("English", "en-US", True),
    LanguageDescriptor("Spanish", "es-ES", True),
    LanguageDescriptor("French", "fr-FR", True),
    LanguageDescriptor("German", "de-DE", True),
    LanguageDescriptor("Chinese (Simplified)", "zh-CN", False),
    LanguageDescriptor("Japanese", "ja-JP", False),
    LanguageDescriptor("Korean", "ko-KR", False),
    LanguageDescriptor("Russian", "ru-RU", False),
    LanguageDescriptor("Italian", "it-IT", True),
    LanguageDescriptor("Portuguese", "pt-BR", True),
)

LANG_CONFIG: Dict[str, LanguageDescriptor] = {lang.code: lang for lang in LANGUAGES}


def get_language(code: str) -> LanguageDescriptor:
    """
    Look up a language by its code.

    Raises:
        KeyError: If the code is not configured
    """
    if code not in LANG_CONFIG:
        available = list(LANG_CONFIG.keys())
        raise KeyError(f"Language '{code}' not found. Available: {available}")
    return LANG_CONFIG[code]


def get_language_codes() -> List[str]:
    """Get language codes in display order."""
    return [lang.code for lang in LANGUAGES]
