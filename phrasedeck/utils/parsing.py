"""Cleanup of model output: spoken text and JSON payloads."""

import html
import re
import unicodedata


class TextParser:
    """
    Text cleanup shared by the speech platform and the generation client.

    Generated phrases can carry stray markup or entities, and some models wrap
    structured output in a markdown fence even when asked for bare JSON.
    """

    MARKUP = re.compile(r'<[^>]+>')
    SPACES = re.compile(r'\s+')

    # ```json ... ``` around the whole payload
    CODE_FENCE_PATTERN = re.compile(r'^\s*```(?:json)?\s*(.*?)\s*```\s*$', re.DOTALL | re.IGNORECASE)

    @classmethod
    def normalize_unicode(cls, text: str) -> str:
        """NFC form, so the same phrase always hashes to the same audio file."""
        if not text:
            return ""
        return unicodedata.normalize('NFC', str(text))

    @classmethod
    def clean_for_tts(cls, text: str) -> str:
        """
        Plain, single-spaced text for the speech engine.

        Entities are decoded before tags are stripped, so an escaped
        ``&lt;b&gt;`` is removed as markup too.
        """
        if not text:
            return ""
        plain = cls.MARKUP.sub('', html.unescape(str(text)))
        return cls.normalize_unicode(cls.SPACES.sub(' ', plain).strip())

    @classmethod
    def extract_json_text(cls, text: str) -> str:
        """Strip a markdown fence around a JSON payload; other text is only trimmed."""
        if not text:
            return ""
        match = cls.CODE_FENCE_PATTERN.match(text)
        if match:
            return match.group(1)
        return text.strip()
