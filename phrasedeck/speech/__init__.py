"""Speech module - voice selection and pluggable TTS platforms."""

from .base import SpeechPlatform
from .dispatcher import SpeechDispatcher
from .edge import EdgeTTSPlatform
from .playback import play_audio_file
from .registry import NO_SPEECH, SpeechPlatformRegistry

__all__ = [
    'SpeechPlatform',
    'SpeechDispatcher',
    'EdgeTTSPlatform',
    'play_audio_file',
    'NO_SPEECH',
    'SpeechPlatformRegistry',
]
