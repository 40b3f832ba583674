"""
One learner session: wires generation, deck, cooldown and speech together.

The session owns every piece of mutable state (deck, cooldown window, voice
catalog, chosen languages). It is created when the app starts and closed when
it ends; the renderer only reads DeckView snapshots.
"""

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, Tuple

from .config import Config, LanguageDescriptor, SettingsManager, get_language, resolve_topic
from .deck import CooldownTimer, DeckController, RegenerationResult
from .models import Phrase
from .services import GenerationClient, create_generation_client
from .speech import SpeechDispatcher, SpeechPlatform, SpeechPlatformRegistry
from .utils import format_countdown, format_counter


@dataclass(frozen=True)
class DeckView:
    """Read-only projection of session state for display."""
    phrase: Optional[Phrase]
    at_start: bool
    at_end: bool
    counter: Tuple[int, int]
    cooldown_remaining: float
    cooldown_active: bool
    is_generating: bool
    native_phonetics: str = ""
    learning_phonetics: str = ""

    @property
    def counter_text(self) -> str:
        return format_counter(self.counter)

    @property
    def countdown_text(self) -> str:
        return format_countdown(self.cooldown_remaining)

    @property
    def can_regenerate(self) -> bool:
        return not self.cooldown_active and not self.is_generating


class PhraseSession:
    """Facade used by the UI for one learner session."""

    def __init__(
        self,
        client: GenerationClient,
        speech_platform: Optional[SpeechPlatform] = None,
        cooldown_seconds: float = Config.COOLDOWN_SECONDS,
        progress_callback: Optional[Callable[[Dict[str, Any]], None]] = None,
        on_cooldown_expire: Optional[Callable[[], None]] = None,
        on_cooldown_tick: Optional[Callable[[float], None]] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        """
        Initialize the session.

        Args:
            client: Generation client
            speech_platform: TTS capability, or None if the host has none
            cooldown_seconds: Wait enforced between successful regenerations
            progress_callback: Receives {"event": ..., "message": ...} payloads
            on_cooldown_expire: Called when regeneration becomes available again
            on_cooldown_tick: Called with the remaining seconds while cooling down
            clock: Wall-clock source for the cooldown
        """
        self.cooldown = CooldownTimer(on_expire=on_cooldown_expire, on_tick=on_cooldown_tick, clock=clock)
        self.controller = DeckController(
            client,
            self.cooldown,
            cooldown_seconds=cooldown_seconds,
            progress_callback=progress_callback,
        )
        self.speech = SpeechDispatcher(speech_platform)
        self.native_language: Optional[LanguageDescriptor] = None
        self.learning_language: Optional[LanguageDescriptor] = None

    @classmethod
    def from_settings(
        cls,
        settings: Optional[SettingsManager] = None,
        platform_kwargs: Optional[Dict[str, Any]] = None,
        **kwargs: Any,
    ) -> "PhraseSession":
        """
        Build a session from persisted settings.

        Args:
            settings: Settings manager (defaults to the singleton)
            platform_kwargs: Passed to the speech platform factory
            **kwargs: Passed to the constructor (callbacks, clock)
        """
        settings = settings or SettingsManager()
        provider = settings.get("AI_PROVIDER", "gemini")
        model_key = "OPENAI_MODEL" if provider == "openai" else "GEMINI_MODEL"

        client = create_generation_client(
            provider=provider,
            model=settings.get(model_key),
            timeout=settings.get("TIMEOUT"),
            temperature=settings.get("TEMPERATURE"),
            max_attempts=settings.get("RETRIES"),
            base_delay_ms=settings.get("BASE_BACKOFF_MS"),
        )
        platform_kwargs = dict(platform_kwargs or {})
        platform_kwargs.setdefault("media_dir", settings.get("MEDIA_DIR"))
        speech_platform = SpeechPlatformRegistry.create(settings.get("SPEECH_PROVIDER"), **platform_kwargs)

        return cls(
            client,
            speech_platform=speech_platform,
            cooldown_seconds=settings.get("COOLDOWN_SECONDS"),
            **kwargs,
        )

    def _emit(self, event: str, message: str = "") -> None:
        self.controller.progress_callback({"event": event, "message": message})

    async def start(self) -> None:
        """Load the voice catalog. An empty or failed load is not fatal."""
        if self.speech.platform is None:
            self._emit("log", "[!] Text-to-speech is not supported on this platform")
            return
        try:
            voices = await self.speech.load_voices()
        except Exception as e:
            self._emit("log", f"[!] Voice catalog unavailable: {str(e)[:60]}")
            return
        self._emit("log", f"[OK] Loaded {len(voices)} voices")

    async def close(self) -> None:
        """Tear down timers, HTTP sessions and pending speech."""
        self.cooldown.cancel()
        await self.controller.client.close()
        await self.speech.close()

    async def __aenter__(self) -> "PhraseSession":
        await self.start()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    # ------------------------------------------------------------------
    # Regeneration
    # ------------------------------------------------------------------

    async def regenerate(
        self,
        topic_key: str,
        native_code: str,
        learning_code: str,
        custom_topic: str = "",
    ) -> RegenerationResult:
        """
        Validate the form inputs and request a new batch.

        Raises:
            ValueError: Missing language, unknown language or blank custom topic
            GenerationError: Retries exhausted
        """
        if not native_code or not learning_code or not topic_key:
            raise ValueError("Please select a native language, a learning language, and a topic.")
        try:
            native = get_language(native_code)
            learning = get_language(learning_code)
        except KeyError as e:
            raise ValueError(e.args[0]) from e
        topic = resolve_topic(topic_key, custom_topic)

        result = await self.controller.request_regeneration(topic, native, learning)
        if result is RegenerationResult.SUCCESS:
            self.native_language = native
            self.learning_language = learning
        return result

    # ------------------------------------------------------------------
    # Navigation and display
    # ------------------------------------------------------------------

    def next(self) -> Optional[Phrase]:
        return self.controller.next()

    def previous(self) -> Optional[Phrase]:
        return self.controller.previous()

    def current(self) -> Optional[Phrase]:
        return self.controller.current()

    def visible_phonetics(self, phrase: Optional[Phrase]) -> Tuple[str, str]:
        """Phonetics to show: only for languages not written in the Latin alphabet."""
        if phrase is None or self.native_language is None or self.learning_language is None:
            return ("", "")
        native = "" if self.native_language.uses_latin_alphabet else phrase.native_phonetics
        learning = "" if self.learning_language.uses_latin_alphabet else phrase.learning_phonetics
        return (native, learning)

    def view(self) -> DeckView:
        phrase = self.controller.current()
        native_phonetics, learning_phonetics = self.visible_phonetics(phrase)
        return DeckView(
            phrase=phrase,
            at_start=self.controller.at_start,
            at_end=self.controller.at_end,
            counter=self.controller.counter,
            cooldown_remaining=self.cooldown.remaining(),
            cooldown_active=self.cooldown.is_active(),
            is_generating=self.controller.is_generating,
            native_phonetics=native_phonetics,
            learning_phonetics=learning_phonetics,
        )

    # ------------------------------------------------------------------
    # Speech
    # ------------------------------------------------------------------

    def speak_current(self) -> bool:
        """
        Speak the current learning phrase.

        Returns:
            False when there is nothing to speak

        Raises:
            SpeechError: NoVoicesLoaded, UnsupportedPlatform or PlaybackFailed
        """
        phrase = self.controller.current()
        if phrase is None or self.learning_language is None:
            return False
        self.speech.speak(phrase.learning, self.learning_language.code)
        return True

    def speak_word(self, index: int) -> bool:
        """
        Speak one word tab's original text (not its transliteration).

        Raises:
            SpeechError: NoVoicesLoaded, UnsupportedPlatform or PlaybackFailed
        """
        phrase = self.controller.current()
        if phrase is None or self.learning_language is None:
            return False
        if not 0 <= index < len(phrase.word_by_word):
            return False
        self.speech.speak(phrase.word_by_word[index].original, self.learning_language.code)
        return True
