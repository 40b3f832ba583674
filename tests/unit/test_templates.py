"""
Tests for prompt building, schema conversion and small formatting helpers.
"""
import pytest

from phrasedeck.models import GenerationRequest, Phrase, WordAlignment
from phrasedeck.templates import PHRASE_SCHEMA, PromptTemplates, to_json_schema
from phrasedeck.utils import TextParser, format_countdown, format_counter


class TestPrompt:

    def test_prompt_names_languages_topic_and_count(self, english, japanese):
        request = GenerationRequest(native_language=english, learning_language=japanese, topic="school")
        prompt = PromptTemplates.build_generation_prompt(request, 10)

        assert "JSON array of 10" in prompt
        assert '"school"' in prompt
        assert "in English ('native' key)" in prompt
        assert "into Japanese ('learning' key)" in prompt
        assert "identical to these" not in prompt

    def test_exclusion_clause_is_sorted(self):
        clause = PromptTemplates.exclusion_clause({"b", "a"})
        assert clause == "Please ensure none of the new phrases are identical to these: a, b. "

    def test_empty_exclusion_clause(self):
        assert PromptTemplates.exclusion_clause(frozenset()) == ""


class TestSchema:

    def test_phrase_schema_requires_every_field(self):
        item = PHRASE_SCHEMA["items"]
        assert item["required"] == list(item["properties"])

    def test_json_schema_conversion(self):
        converted = to_json_schema(PHRASE_SCHEMA)
        item = converted["items"]
        word = item["properties"]["word_by_word_learning"]["items"]

        assert converted["type"] == "array"
        assert item["type"] == "object"
        assert item["additionalProperties"] is False
        assert "propertyOrdering" not in item
        assert word["required"] == ["original", "transliteration", "translated"]

    def test_conversion_leaves_source_untouched(self):
        to_json_schema(PHRASE_SCHEMA)
        assert PHRASE_SCHEMA["type"] == "ARRAY"


class TestPhraseModel:

    def test_wire_round_trip_keeps_word_order(self):
        phrase = Phrase(
            native="Good morning",
            learning="おはよう ございます",
            learning_phonetics="ohayou gozaimasu",
            word_by_word=(
                WordAlignment("おはよう", "good morning", "ohayou"),
                WordAlignment("ございます", "(polite)", "gozaimasu"),
            ),
        )
        assert Phrase.from_dict(phrase.to_dict()) == phrase


class TestHelpers:

    @pytest.mark.parametrize("seconds, expected", [
        (300, "05:00"),
        (299.9, "04:59"),
        (61, "01:01"),
        (0.4, "00:00"),
        (-5, "00:00"),
    ])
    def test_format_countdown(self, seconds, expected):
        assert format_countdown(seconds) == expected

    def test_format_counter(self):
        assert format_counter((3, 10)) == "3/10"

    def test_clean_for_tts(self):
        assert TextParser.clean_for_tts("<b>Hola</b>&nbsp;  amigo\n") == "Hola amigo"

    def test_extract_json_text_strips_fence(self):
        assert TextParser.extract_json_text('```json\n[1, 2]\n```') == "[1, 2]"
