"""
Speech Platform Registry - Strategy Pattern for pluggable TTS backends.

Enables runtime selection of the speech platform from settings without
modifying core code.
"""

from typing import Any, Callable, Dict, List, Optional

from .base import SpeechPlatform

NO_SPEECH = "none"


class SpeechPlatformRegistry:
    """
    Registry of speech platform factories.

    Usage:
        # Register a platform
        SpeechPlatformRegistry.register("edge-tts", EdgeTTSPlatform, set_default=True)

        # Get a platform instance
        platform = SpeechPlatformRegistry.create("edge-tts", on_audio_ready=play)
    """

    _factories: Dict[str, Callable[..., SpeechPlatform]] = {}
    _default: str = "edge-tts"

    @classmethod
    def register(
        cls,
        name: str,
        factory: Callable[..., SpeechPlatform],
        set_default: bool = False,
    ) -> None:
        """
        Register a speech platform.

        Args:
            name: Platform name (e.g., "edge-tts")
            factory: Class or callable returning a SpeechPlatform
            set_default: If True, set this as the default platform
        """
        cls._factories[name] = factory
        if set_default:
            cls._default = name

    @classmethod
    def create(cls, name: Optional[str] = None, **kwargs: Any) -> Optional[SpeechPlatform]:
        """
        Create a platform instance.

        Args:
            name: Platform name (uses default if None); "none" disables speech
            **kwargs: Passed to the factory

        Returns:
            Platform instance, or None when speech is disabled

        Raises:
            KeyError: If platform not found
        """
        provider = name or cls._default
        if provider == NO_SPEECH:
            return None

        if provider not in cls._factories:
            available = list(cls._factories.keys())
            raise KeyError(f"Speech platform '{provider}' not found. Available: {available}")
        return cls._factories[provider](**kwargs)

    @classmethod
    def list_platforms(cls) -> List[str]:
        """List all registered platforms."""
        return list(cls._factories.keys())

    @classmethod
    def get_default(cls) -> str:
        return cls._default

    @classmethod
    def set_default(cls, name: str) -> None:
        if name not in cls._factories:
            raise KeyError(f"Speech platform '{name}' not registered")
        cls._default = name


def _register_default_platforms() -> None:
    """Register built-in platforms on module load."""
    # Import here to avoid circular imports
    from .edge import EdgeTTSPlatform

    SpeechPlatformRegistry.register("edge-tts", EdgeTTSPlatform, set_default=True)


_register_default_platforms()
