"""
Tests for language/topic tables and the persisted settings manager.
"""
import json

import pytest

from phrasedeck.config import (
    CUSTOM_TOPIC,
    LANGUAGES,
    SettingsManager,
    get_language,
    get_language_codes,
    get_topic_options,
    resolve_topic,
)


class TestLanguages:

    def test_ten_languages_in_display_order(self):
        assert len(LANGUAGES) == 10
        assert get_language_codes()[:2] == ["en-US", "es-ES"]

    @pytest.mark.parametrize("code", ["zh-CN", "ja-JP", "ko-KR", "ru-RU"])
    def test_non_latin_scripts(self, code):
        assert not get_language(code).uses_latin_alphabet

    def test_primary_subtag(self):
        assert get_language("pt-BR").primary_subtag == "pt"

    def test_unknown_code(self):
        with pytest.raises(KeyError, match="xx-XX"):
            get_language("xx-XX")


class TestTopics:

    def test_known_key_maps_to_prompt_text(self):
        assert resolve_topic("food_and_drink") == "food and drink"

    def test_custom_topic_is_trimmed(self):
        assert resolve_topic(CUSTOM_TOPIC, "  ordering coffee ") == "ordering coffee"

    def test_blank_custom_topic(self):
        with pytest.raises(ValueError, match="custom topic"):
            resolve_topic(CUSTOM_TOPIC, "   ")

    def test_unknown_key_passes_through(self):
        assert resolve_topic("space travel") == "space travel"

    def test_custom_option_is_last(self):
        options = get_topic_options()
        assert options[-1][0] == CUSTOM_TOPIC
        assert ("business", "Business") in options


class TestSettingsManager:

    def test_defaults_without_file(self, settings_file):
        settings = SettingsManager(str(settings_file))
        assert settings.get("AI_PROVIDER") == "gemini"
        assert settings.get("RETRIES") == 5
        assert settings.get("COOLDOWN_SECONDS") == 300
        assert not settings_file.exists()

    def test_is_singleton(self, settings_file):
        assert SettingsManager(str(settings_file)) is SettingsManager()

    def test_file_values_override_defaults(self, settings_file):
        settings_file.write_text(json.dumps({"LEARNING_LANG": "ja-JP"}), encoding="utf-8")
        assert SettingsManager(str(settings_file)).get("LEARNING_LANG") == "ja-JP"

    def test_environment_overrides_file(self, settings_file, monkeypatch):
        settings_file.write_text(json.dumps({"RETRIES": 2}), encoding="utf-8")
        monkeypatch.setenv("RETRIES", "7")
        monkeypatch.setenv("TEMPERATURE", "0.4")
        settings = SettingsManager(str(settings_file))
        assert settings.get("RETRIES") == 7
        assert settings.get("TEMPERATURE") == 0.4

    def test_unparsable_env_value_keeps_default(self, settings_file, monkeypatch):
        monkeypatch.setenv("RETRIES", "lots")
        assert SettingsManager(str(settings_file)).get("RETRIES") == 5

    def test_set_persists(self, settings_file):
        SettingsManager(str(settings_file)).set("TOPIC", "sports")
        assert json.loads(settings_file.read_text(encoding="utf-8"))["TOPIC"] == "sports"

        SettingsManager.reset_instance()
        assert SettingsManager(str(settings_file)).get("TOPIC") == "sports"

    def test_set_without_persist(self, settings_file):
        settings = SettingsManager(str(settings_file))
        settings.set("TOPIC", "sports", persist=False)
        assert settings.get("TOPIC") == "sports"
        assert not settings_file.exists()

    def test_corrupt_file_falls_back_to_defaults(self, settings_file):
        settings_file.write_text("{not json", encoding="utf-8")
        assert SettingsManager(str(settings_file)).get("NATIVE_LANG") == "en-US"

    def test_reset_single_key(self, settings_file):
        settings = SettingsManager(str(settings_file))
        settings.set("TOPIC", "sports")
        settings.reset("TOPIC")
        assert settings.get("TOPIC") == "common_conversation"

    def test_invalid_file_values_fall_back(self, settings_file):
        settings_file.write_text(
            json.dumps({"LEARNING_LANG": "xx-XX", "RETRIES": 0, "TOPIC": "sports"}), encoding="utf-8"
        )
        settings = SettingsManager(str(settings_file))
        assert settings.get("LEARNING_LANG") == "es-ES"
        assert settings.get("RETRIES") == 5
        assert settings.get("TOPIC") == "sports"

    def test_set_rejects_invalid_value(self, settings_file):
        settings = SettingsManager(str(settings_file))
        with pytest.raises(ValueError, match="NATIVE_LANG"):
            settings.set("NATIVE_LANG", "klingon")
        assert settings.get("NATIVE_LANG") == "en-US"
        assert not settings_file.exists()

    def test_int_accepted_for_float_setting(self, settings_file):
        settings = SettingsManager(str(settings_file))
        settings.set("TEMPERATURE", 1, persist=False)
        assert settings.get("TEMPERATURE") == 1

    def test_save_leaves_no_temp_files(self, settings_file):
        SettingsManager(str(settings_file)).set("TOPIC", "games")
        assert [p.name for p in settings_file.parent.iterdir()] == ["settings.json"]
