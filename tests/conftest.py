"""Shared fakes and fixtures for the PhraseDeck test suite."""

import asyncio
import json
from typing import Any, Dict, List, Optional, Union

import pytest

from phrasedeck.config import SettingsManager, get_language
from phrasedeck.services import AIConfig, BaseAIProvider, GenerationClient
from phrasedeck.speech import SpeechPlatform


def make_phrase_dict(index: int, prefix: str = "frase", phonetics: bool = False) -> Dict[str, Any]:
    """One payload element shaped like the endpoint's output."""
    return {
        "native": f"phrase {index}",
        "learning": f"{prefix} {index}",
        "native_phonetics": "",
        "learning_phonetics": f"reading {index}" if phonetics else "",
        "word_by_word_learning": [
            {"original": prefix, "transliteration": "", "translated": "phrase"},
            {"original": str(index), "transliteration": "", "translated": str(index)},
        ],
    }


def make_payload(count: int = 10, prefix: str = "frase", phonetics: bool = False) -> str:
    """JSON text for a batch of ``count`` phrases."""
    return json.dumps([make_phrase_dict(i, prefix, phonetics) for i in range(count)])


class ScriptedProvider(BaseAIProvider):
    """
    Provider that replays a script of outcomes instead of calling an endpoint.

    Each entry is either the raw text to return or an exception to raise.
    """

    def __init__(self, outcomes: List[Union[str, Exception]]):
        super().__init__(AIConfig(api_key="test"))
        self.outcomes = list(outcomes)
        self.prompts: List[str] = []
        self.closed = False

    async def complete_structured(self, prompt: str, schema: Dict[str, Any]) -> str:
        self.prompts.append(prompt)
        outcome = self.outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    async def close(self) -> None:
        self.closed = True


class SleepRecorder:
    """Stand-in for asyncio.sleep that returns immediately and records delays."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)


class FakeClock:
    """Manually advanced wall clock."""

    def __init__(self, now: float = 1_000_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class ClockSleep:
    """Sleep that advances a FakeClock by the requested delay, then yields."""

    def __init__(self, clock: FakeClock):
        self.clock = clock
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        self.clock.advance(delay)
        await asyncio.sleep(0)


class ParkedSleep:
    """Sleep that never returns on its own; keeps a watcher task parked."""

    def __init__(self):
        self.delays: List[float] = []

    async def __call__(self, delay: float) -> None:
        self.delays.append(delay)
        await asyncio.Event().wait()


class FakeSpeechPlatform(SpeechPlatform):
    """Records speak() calls; optionally rejects them."""

    def __init__(self, voices: Optional[Dict[str, str]] = None, fail_with: Optional[Exception] = None):
        self._catalog = dict(voices or {})
        self.fail_with = fail_with
        self.spoken: List[tuple] = []
        self.list_calls = 0
        self.closed = False

    async def list_voices(self) -> Dict[str, str]:
        self.list_calls += 1
        return dict(self._catalog)

    def speak(self, text: str, voice: Optional[str], language_code: str) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        self.spoken.append((text, voice, language_code))

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def english():
    return get_language("en-US")


@pytest.fixture
def spanish():
    return get_language("es-ES")


@pytest.fixture
def japanese():
    return get_language("ja-JP")


@pytest.fixture
def sleep_recorder():
    return SleepRecorder()


@pytest.fixture
def fake_clock():
    return FakeClock()


@pytest.fixture
def make_client(sleep_recorder):
    """Factory for a GenerationClient over a ScriptedProvider."""
    def _make(outcomes: List[Union[str, Exception]], **kwargs: Any) -> GenerationClient:
        kwargs.setdefault("sleep", sleep_recorder)
        return GenerationClient(ScriptedProvider(outcomes), **kwargs)
    return _make


@pytest.fixture
def settings_file(tmp_path, monkeypatch):
    """Fresh SettingsManager singleton backed by a temporary file."""
    for key in SettingsManager.DEFAULTS:
        monkeypatch.delenv(key, raising=False)
    SettingsManager.reset_instance()
    path = tmp_path / "settings.json"
    yield path
    SettingsManager.reset_instance()
