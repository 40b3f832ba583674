"""Edge TTS speech platform - synthesize to mp3 and hand the file to a player."""

import asyncio
import hashlib
import os
import uuid
from pathlib import Path
from typing import Callable, Dict, Optional, Set

import edge_tts

from ..config import Config
from ..utils import ensure_dir
from ..utils.parsing import TextParser
from .base import SpeechPlatform


class EdgeTTSPlatform(SpeechPlatform):
    """
    Speech via Microsoft Edge's online TTS voices.

    speak() accepts the request synchronously and schedules synthesis on the
    running loop. When the mp3 is ready, ``on_audio_ready`` receives its path;
    failures after acceptance go to ``on_error``.
    """

    # Files smaller than this are treated as failed writes
    MIN_AUDIO_BYTES = 100

    def __init__(
        self,
        media_dir: Optional[str] = None,
        on_audio_ready: Optional[Callable[[str], None]] = None,
        on_error: Optional[Callable[[Exception], None]] = None,
        volume: str = "+0%",
    ):
        """
        Initialize the platform.

        Args:
            media_dir: Where synthesized mp3 files are written
            on_audio_ready: Called with the mp3 path once synthesis succeeds
            on_error: Called with the exception if synthesis fails
            volume: Volume adjustment (e.g., "+0%", "+40%")
        """
        self.media_dir = Path(media_dir or Config.MEDIA_DIR)
        self.on_audio_ready = on_audio_ready
        self.on_error = on_error
        self.volume = volume
        self._pending: Set[asyncio.Task] = set()

    async def list_voices(self) -> Dict[str, str]:
        """Fetch the voice list (ShortName -> Locale)."""
        voices = await edge_tts.list_voices()
        return {v["ShortName"]: v["Locale"] for v in voices}

    def audio_path(self, text: str, voice: Optional[str]) -> Path:
        """Deterministic mp3 path for a (voice, text) pair so repeats reuse the file."""
        digest = hashlib.md5(f"{voice or 'default'}|{text}".encode("utf-8")).hexdigest()[:16]
        return self.media_dir / f"_speech_{digest}.mp3"

    def speak(self, text: str, voice: Optional[str], language_code: str) -> None:
        clean_text = TextParser.clean_for_tts(text)
        if not clean_text:
            raise ValueError("Nothing to speak")

        # Raises RuntimeError when called off the event loop
        loop = asyncio.get_running_loop()

        output_path = self.audio_path(clean_text, voice)
        task = loop.create_task(self._synthesize(clean_text, voice, output_path))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _synthesize(self, text: str, voice: Optional[str], output_path: Path) -> None:
        """Generate the mp3 (atomic write: temp file, then rename) and report it."""
        if output_path.exists() and output_path.stat().st_size > self.MIN_AUDIO_BYTES:
            self._ready(output_path)
            return

        temp_path = None
        try:
            ensure_dir(str(output_path.parent))
            temp_path = f"{output_path}.{uuid.uuid4().hex[:8]}.tmp"

            if voice:
                communicate = edge_tts.Communicate(text, voice, volume=self.volume)
            else:
                communicate = edge_tts.Communicate(text, volume=self.volume)
            await communicate.save(temp_path)

            if os.path.exists(temp_path) and os.path.getsize(temp_path) > self.MIN_AUDIO_BYTES:
                os.replace(temp_path, output_path)
                temp_path = None
                self._ready(output_path)
            else:
                raise RuntimeError("Edge TTS produced an empty audio file")

        except Exception as e:
            print(f"  [!] Error generating speech: {str(e)[:50]}")
            if self.on_error:
                self.on_error(e)

        finally:
            if temp_path and os.path.exists(temp_path):
                os.remove(temp_path)

    def _ready(self, path: Path) -> None:
        if self.on_audio_ready:
            self.on_audio_ready(str(path))

    async def close(self) -> None:
        """Cancel synthesis still in progress."""
        for task in list(self._pending):
            task.cancel()
        if self._pending:
            await asyncio.gather(*self._pending, return_exceptions=True)
        self._pending.clear()
