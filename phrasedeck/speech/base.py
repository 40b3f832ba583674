"""Base speech platform class."""

from abc import ABC, abstractmethod
from typing import Dict, Optional


class SpeechPlatform(ABC):
    """
    Minimal speech-synthesis capability injected into the dispatcher.

    Subclasses list their voices (voice id -> language tag) and accept or
    reject a speak request synchronously. Playback itself may complete later;
    nothing here tracks it.
    """

    @abstractmethod
    async def list_voices(self) -> Dict[str, str]:
        """
        Load the voice catalog.

        Returns:
            Mapping of voice identifier to BCP-47 language tag
        """
        pass

    @abstractmethod
    def speak(self, text: str, voice: Optional[str], language_code: str) -> None:
        """
        Dispatch text for playback.

        Args:
            text: Text to speak
            voice: Voice identifier from the catalog, or None for best effort
            language_code: Language of the text

        Raises:
            Exception: Any exception means the platform rejected the request
        """
        pass

    async def close(self) -> None:
        """Release resources. Override when the platform holds any."""
        pass

    async def __aenter__(self) -> "SpeechPlatform":
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()
