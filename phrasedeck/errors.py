"""Exception hierarchy for PhraseDeck.

Generation failures:
- TransportError / MalformedResponseError are retryable and never leave
  the GenerationClient on their own.
- GenerationError is terminal and carries the last underlying cause.

Speech failures (never retried automatically, never fatal to a session):
- NoVoicesLoaded, UnsupportedPlatform, PlaybackFailed
"""

from typing import Optional


class PhraseDeckError(Exception):
    """Base class for all PhraseDeck errors."""


class TransportError(PhraseDeckError):
    """Network failure or non-success HTTP status from the generation endpoint."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.status = status


class MalformedResponseError(PhraseDeckError):
    """Endpoint answered, but the payload is missing, unparsable or off-schema."""


class GenerationError(PhraseDeckError):
    """Raised once the retry budget is exhausted."""

    def __init__(self, message: str, last_error: Optional[Exception] = None, attempts: int = 0):
        super().__init__(message)
        self.last_error = last_error
        self.attempts = attempts


class SpeechError(PhraseDeckError):
    """Base class for speech dispatch failures."""


class NoVoicesLoaded(SpeechError):
    """The voice catalog is empty; the caller should retry after it reloads."""


class UnsupportedPlatform(SpeechError):
    """No speech synthesis capability is available at all."""


class PlaybackFailed(SpeechError):
    """The platform rejected the request at dispatch time."""

    def __init__(self, message: str, cause: Optional[BaseException] = None):
        super().__init__(message)
        self.cause = cause
