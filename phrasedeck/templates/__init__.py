"""Prompt and response-schema templates for phrase generation."""

from typing import Any, Dict

from ..models import GenerationRequest

_WORD_FIELDS = ["original", "transliteration", "translated"]
_PHRASE_FIELDS = ["native", "learning", "native_phonetics", "learning_phonetics", "word_by_word_learning"]

# Structured-output schema in the endpoint's OpenAPI-subset dialect
PHRASE_SCHEMA: Dict[str, Any] = {
    "type": "ARRAY",
    "items": {
        "type": "OBJECT",
        "properties": {
            "native": {"type": "STRING"},
            "learning": {"type": "STRING"},
            "native_phonetics": {"type": "STRING"},
            "learning_phonetics": {"type": "STRING"},
            "word_by_word_learning": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        "original": {"type": "STRING"},
                        "transliteration": {"type": "STRING"},
                        "translated": {"type": "STRING"},
                    },
                    "required": list(_WORD_FIELDS),
                    "propertyOrdering": list(_WORD_FIELDS),
                },
            },
        },
        "required": list(_PHRASE_FIELDS),
        "propertyOrdering": list(_PHRASE_FIELDS),
    },
}


def to_json_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """
    Convert an OpenAPI-subset schema into strict JSON Schema.

    Type names are lower-cased, ``propertyOrdering`` is dropped, and every
    object gets ``additionalProperties: false`` with all properties required.
    """
    converted: Dict[str, Any] = {}
    for key, value in schema.items():
        if key == "propertyOrdering":
            continue
        if key == "type" and isinstance(value, str):
            converted["type"] = value.lower()
        elif key == "properties":
            converted["properties"] = {name: to_json_schema(prop) for name, prop in value.items()}
        elif key == "items":
            converted["items"] = to_json_schema(value)
        else:
            converted[key] = value

    if converted.get("type") == "object":
        converted["required"] = list(converted.get("properties", {}))
        converted["additionalProperties"] = False
    return converted


class PromptTemplates:
    """Container for the generation prompt."""

    SYSTEM_PROMPT = (
        "You are a language tutor producing short, natural, beginner-level phrases "
        "for bilingual flashcards. Follow the requested JSON structure exactly."
    )

    GENERATION_PROMPT = (
        'Generate a JSON array of {count} random, beginner-level phrases about "{topic}". '
        "{exclusion}For each phrase, provide:\n"
        "1. The original text in {native} ('native' key).\n"
        "2. The translation into {learning} ('learning' key).\n"
        "3. The transliteration of the native text ('native_phonetics' key) if it does not use "
        "the Latin alphabet (e.g., pinyin for Chinese, romaji for Japanese, romanization for "
        "Korean, Latin transliteration for Russian). If it uses the Latin alphabet, the value "
        "should be an empty string.\n"
        "4. The transliteration of the learning text ('learning_phonetics' key) if it does not "
        "use the Latin alphabet. If it does, the value should be an empty string.\n"
        "5. A word-by-word translation as a JSON array ('word_by_word_learning' key). Each object "
        "in the array should have three keys: 'original' for the word in the learning language, "
        "'transliteration' for its phonetic spelling (if applicable, otherwise empty), and "
        "'translated' for its {native} translation. Ensure the word-by-word list corresponds to "
        "the full learning phrase, in the same word order."
    )

    @classmethod
    def exclusion_clause(cls, excluded: Any) -> str:
        """Sentence asking the model not to repeat earlier phrases; empty when nothing to exclude."""
        if not excluded:
            return ""
        joined = ", ".join(sorted(excluded))
        return f"Please ensure none of the new phrases are identical to these: {joined}. "

    @classmethod
    def build_generation_prompt(cls, request: GenerationRequest, count: int) -> str:
        """
        Build the single prompt for one generation call.

        Args:
            request: Languages, topic and exclusion set
            count: Number of phrases to ask for

        Returns:
            Prompt text
        """
        return cls.GENERATION_PROMPT.format(
            count=count,
            topic=request.topic,
            exclusion=cls.exclusion_clause(request.exclude_learning_phrases),
            native=request.native_language.name,
            learning=request.learning_language.name,
        )
