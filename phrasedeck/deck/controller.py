"""Deck controller: current batch, cursor, and regeneration gating."""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, FrozenSet, Optional, Tuple

from ..config import Config, LanguageDescriptor
from ..models import GenerationRequest, Phrase
from ..services import GenerationClient
from .cooldown import CooldownTimer


class RegenerationResult(Enum):
    """Outcome of a regeneration request that did not raise."""
    SUCCESS = "success"
    BLOCKED = "blocked"  # cooldown still running
    BUSY = "busy"        # another regeneration is in flight


@dataclass(frozen=True)
class Deck:
    """The displayed batch plus its cursor. Replaced wholesale, never patched."""
    phrases: Tuple[Phrase, ...] = ()
    current_index: int = 0

    @property
    def is_empty(self) -> bool:
        return not self.phrases

    def learning_phrases(self) -> FrozenSet[str]:
        return frozenset(p.learning for p in self.phrases)


class DeckController:
    """
    Owns the deck for one session.

    Navigation is synchronous and clamps at both ends. Regeneration is
    serialized: a second request while one is in flight is rejected, not
    queued. The deck and cooldown only change after a successful generation.
    """

    def __init__(
        self,
        client: GenerationClient,
        cooldown: CooldownTimer,
        cooldown_seconds: float = Config.COOLDOWN_SECONDS,
        progress_callback: Optional[Callable[[Dict[str, Any]], None]] = None,
    ) -> None:
        """
        Initialize the controller.

        Args:
            client: Generation client used for regeneration
            cooldown: Timer started after each successful regeneration
            cooldown_seconds: Length of the cooldown window
            progress_callback: Optional callback for progress updates.
                              Payload schema: {"event": "log"|"state", "message": str, ...}
        """
        self.client = client
        self.cooldown = cooldown
        self.cooldown_seconds = cooldown_seconds
        self.progress_callback = progress_callback or self._default_callback
        self._deck = Deck()
        self._in_flight = False

    @staticmethod
    def _default_callback(data: Dict[str, Any]) -> None:
        if data.get("event") == "log":
            print(data.get("message", ""))

    def _emit(self, event: str, message: str = "", **extra: Any) -> None:
        self.progress_callback({"event": event, "message": message, **extra})

    # ------------------------------------------------------------------
    # Read-only projections
    # ------------------------------------------------------------------

    @property
    def deck(self) -> Deck:
        return self._deck

    @property
    def is_generating(self) -> bool:
        return self._in_flight

    @property
    def at_start(self) -> bool:
        return self._deck.current_index == 0

    @property
    def at_end(self) -> bool:
        return self._deck.is_empty or self._deck.current_index == len(self._deck.phrases) - 1

    @property
    def counter(self) -> Tuple[int, int]:
        """(position, total) for display; (0, 0) before the first batch."""
        if self._deck.is_empty:
            return (0, 0)
        return (self._deck.current_index + 1, len(self._deck.phrases))

    def current(self) -> Optional[Phrase]:
        if self._deck.is_empty:
            return None
        return self._deck.phrases[self._deck.current_index]

    # ------------------------------------------------------------------
    # Navigation
    # ------------------------------------------------------------------

    def next(self) -> Optional[Phrase]:
        """Advance one phrase; no-op on the last phrase (no wrap-around)."""
        if self._deck.current_index < len(self._deck.phrases) - 1:
            self._move_to(self._deck.current_index + 1)
        return self.current()

    def previous(self) -> Optional[Phrase]:
        """Go back one phrase; no-op on the first phrase."""
        if self._deck.current_index > 0:
            self._move_to(self._deck.current_index - 1)
        return self.current()

    def _move_to(self, index: int) -> None:
        self._deck = Deck(phrases=self._deck.phrases, current_index=index)
        self._emit("state", index=index)

    # ------------------------------------------------------------------
    # Regeneration
    # ------------------------------------------------------------------

    async def request_regeneration(
        self,
        topic: str,
        native_lang: LanguageDescriptor,
        learning_lang: LanguageDescriptor,
    ) -> RegenerationResult:
        """
        Replace the deck with a fresh batch.

        Returns:
            SUCCESS, or BLOCKED / BUSY when the request was refused

        Raises:
            GenerationError: Retries exhausted; deck and cooldown untouched
        """
        if self.cooldown.is_active():
            self._emit("log", f"[!] Regeneration blocked, {self.cooldown.remaining():.0f}s of cooldown left")
            return RegenerationResult.BLOCKED
        if self._in_flight:
            self._emit("log", "[!] Regeneration already in progress")
            return RegenerationResult.BUSY

        request = GenerationRequest(
            native_language=native_lang,
            learning_language=learning_lang,
            topic=topic,
            exclude_learning_phrases=self._deck.learning_phrases(),
        )

        self._in_flight = True
        try:
            self._emit("state", generating=True)
            self._emit("log", f"Generating phrases about \"{topic}\" ({native_lang.name} -> {learning_lang.name})...")
            phrases = await self.client.generate(request)
        finally:
            self._in_flight = False
            self._emit("state", generating=False)

        repeats = request.exclude_learning_phrases.intersection(p.learning for p in phrases)
        if repeats:
            self._emit("log", f"[!] {len(repeats)} phrase(s) repeated from the previous batch")

        self._deck = Deck(phrases=tuple(phrases))
        self.cooldown.start(self.cooldown_seconds)
        self._emit("log", f"[OK] Loaded {len(phrases)} phrases")
        self._emit("state", index=0)
        return RegenerationResult.SUCCESS
