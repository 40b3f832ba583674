"""Speech dispatcher: text + language -> voice selection -> platform playback."""

import asyncio
from typing import Dict, Optional

from ..errors import NoVoicesLoaded, PlaybackFailed, SpeechError, UnsupportedPlatform
from .base import SpeechPlatform


class SpeechDispatcher:
    """
    Resolve a voice for a language and hand the text to the platform.

    Failure modes are kept apart so the caller can word its notice:
    no platform at all, a catalog that has not loaded yet, and a platform
    that refused the request. None of them is retried here.
    """

    def __init__(self, platform: Optional[SpeechPlatform], voices: Optional[Dict[str, str]] = None):
        """
        Initialize the dispatcher.

        Args:
            platform: Speech capability, or None when the host has none
            voices: Initial voice catalog (voice id -> language tag)
        """
        self.platform = platform
        self._voices: Dict[str, str] = dict(voices or {})
        self._reload_task: Optional[asyncio.Task] = None

    @property
    def voices(self) -> Dict[str, str]:
        return dict(self._voices)

    def set_voices(self, voices: Dict[str, str]) -> None:
        """Replace the catalog, e.g. from a platform 'voices changed' notification."""
        self._voices = dict(voices)

    async def load_voices(self) -> Dict[str, str]:
        """
        Load the catalog from the platform.

        Raises:
            UnsupportedPlatform: If there is no platform
        """
        if self.platform is None:
            raise UnsupportedPlatform("Text-to-speech is not supported on this platform.")
        self.set_voices(await self.platform.list_voices())
        return self.voices

    def refresh_voices(self) -> Optional[asyncio.Task]:
        """
        Schedule a catalog reload on the running loop.

        Returns:
            The reload task, or None when no reload could be scheduled
        """
        if self.platform is None:
            return None
        if self._reload_task and not self._reload_task.done():
            return self._reload_task
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return None
        self._reload_task = loop.create_task(self._reload())
        return self._reload_task

    async def _reload(self) -> None:
        try:
            await self.load_voices()
        except Exception as e:
            print(f"  [!] Voice catalog reload failed: {str(e)[:60]}")

    def select_voice(self, language_code: str) -> Optional[str]:
        """
        Pick a voice for ``language_code``.

        Exact tag match first, then the first voice sharing the two-letter
        primary subtag, else None.
        """
        wanted = language_code.lower()
        for voice_id, tag in self._voices.items():
            if tag.lower() == wanted:
                return voice_id

        primary = wanted[:2]
        for voice_id, tag in self._voices.items():
            if tag[:2].lower() == primary:
                return voice_id
        return None

    def speak(self, text: str, language_code: str) -> None:
        """
        Speak ``text`` in ``language_code``.

        Raises:
            UnsupportedPlatform: No speech capability
            NoVoicesLoaded: Catalog empty; a reload has been scheduled
            PlaybackFailed: The platform rejected the request
        """
        if self.platform is None:
            raise UnsupportedPlatform("Text-to-speech is not supported on this platform.")

        if not self._voices:
            self.refresh_voices()
            raise NoVoicesLoaded("Text-to-speech is not ready. Please try again shortly.")

        voice = self.select_voice(language_code)
        try:
            self.platform.speak(text, voice, language_code)
        except SpeechError:
            raise
        except Exception as e:
            raise PlaybackFailed(f"Speech synthesis failed: {e}", cause=e) from e

    async def close(self) -> None:
        if self._reload_task and not self._reload_task.done():
            self._reload_task.cancel()
        if self.platform is not None:
            await self.platform.close()
