"""Data models for generated phrase batches."""

from dataclasses import dataclass, field
from typing import Any, Dict, FrozenSet, Tuple

from ..config.languages import LanguageDescriptor
from ..errors import MalformedResponseError


def _require_str(data: Dict[str, Any], key: str, required: bool = True, non_empty: bool = False) -> str:
    """Read a string field from a payload object."""
    if key not in data:
        if required:
            raise MalformedResponseError(f"Missing '{key}' in phrase payload")
        return ""
    value = data[key]
    if not isinstance(value, str):
        raise MalformedResponseError(f"'{key}' must be a string, got {type(value).__name__}")
    if non_empty and not value.strip():
        raise MalformedResponseError(f"'{key}' is blank")
    return value


@dataclass(frozen=True)
class WordAlignment:
    """One word of the learning phrase with its reading and translation."""

    original: str
    translated: str
    transliteration: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "WordAlignment":
        if not isinstance(data, dict):
            raise MalformedResponseError("Word alignment entry is not an object")
        return cls(
            original=_require_str(data, "original"),
            translated=_require_str(data, "translated"),
            transliteration=_require_str(data, "transliteration", required=False),
        )

    def to_dict(self) -> Dict[str, str]:
        return {
            "original": self.original,
            "transliteration": self.transliteration,
            "translated": self.translated,
        }


@dataclass(frozen=True)
class Phrase:
    """
    One bilingual flashcard.

    Phonetics are empty strings for languages written in the Latin alphabet.
    ``word_by_word`` follows the word order of ``learning`` as returned by the
    generator; the order is not re-checked here.
    """

    native: str
    learning: str
    native_phonetics: str = ""
    learning_phonetics: str = ""
    word_by_word: Tuple[WordAlignment, ...] = ()

    @classmethod
    def from_dict(
        cls,
        data: Any,
        require_native_phonetics: bool = False,
        require_learning_phonetics: bool = False,
    ) -> "Phrase":
        """
        Build a Phrase from one element of the endpoint payload.

        Args:
            data: Decoded JSON object
            require_native_phonetics: Native language is not Latin-script,
                so 'native_phonetics' must be present
            require_learning_phonetics: Same for the learning language

        Raises:
            MalformedResponseError: If the object does not match the Phrase shape
        """
        if not isinstance(data, dict):
            raise MalformedResponseError("Phrase entry is not an object")

        words = data.get("word_by_word_learning")
        if words is None:
            words = []
        if not isinstance(words, list):
            raise MalformedResponseError("'word_by_word_learning' must be an array")

        return cls(
            native=_require_str(data, "native", non_empty=True),
            learning=_require_str(data, "learning", non_empty=True),
            native_phonetics=_require_str(data, "native_phonetics", required=require_native_phonetics),
            learning_phonetics=_require_str(data, "learning_phonetics", required=require_learning_phonetics),
            word_by_word=tuple(WordAlignment.from_dict(w) for w in words),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Serialize using the endpoint's wire keys."""
        return {
            "native": self.native,
            "learning": self.learning,
            "native_phonetics": self.native_phonetics,
            "learning_phonetics": self.learning_phonetics,
            "word_by_word_learning": [w.to_dict() for w in self.word_by_word],
        }


@dataclass(frozen=True)
class GenerationRequest:
    """Inputs for one generation call, built fresh from the deck before it is replaced."""

    native_language: LanguageDescriptor
    learning_language: LanguageDescriptor
    topic: str
    exclude_learning_phrases: FrozenSet[str] = field(default_factory=frozenset)
