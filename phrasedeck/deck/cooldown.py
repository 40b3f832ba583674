"""Cooldown timer gating regeneration requests."""

import asyncio
import time
from dataclasses import dataclass, replace
from typing import Any, Awaitable, Callable, Optional

from ..config import Config


@dataclass(frozen=True)
class CooldownState:
    """One cooldown window. Replaced, never merged, on each start()."""
    end_timestamp: float = 0.0
    active: bool = False


class CooldownTimer:
    """
    Countdown window recomputed from the wall clock.

    Remaining time is always ``end_timestamp - now``, never accumulated from
    ticks, so late or missed ticks (or a suspended host) cannot skew it.

    Each start() spawns a watcher task on the running loop that fires
    ``on_expire`` once when the window ends. Without a running loop the host
    drives expiry by calling poll().
    """

    TICK_INTERVAL: float = 1.0

    def __init__(
        self,
        on_expire: Optional[Callable[[], None]] = None,
        on_tick: Optional[Callable[[float], None]] = None,
        clock: Callable[[], float] = time.time,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        """
        Initialize the timer.

        Args:
            on_expire: Called once per start() when the window runs out
            on_tick: Called with the remaining seconds on every watcher tick
            clock: Wall-clock source in seconds
            sleep: Awaitable used by the watcher between checks
        """
        self.on_expire = on_expire
        self.on_tick = on_tick
        self._clock = clock
        self._sleep = sleep
        self._state = CooldownState()
        self._generation = 0
        self._watcher: Optional[asyncio.Task] = None

    @property
    def state(self) -> CooldownState:
        return self._state

    def start(self, duration: float = Config.COOLDOWN_SECONDS) -> None:
        """Open a new window, superseding any window still running."""
        self._cancel_watcher()
        self._generation += 1
        self._state = CooldownState(end_timestamp=self._clock() + duration, active=True)
        self._watcher = self._spawn_watcher(self._generation)

    def remaining(self) -> float:
        """Seconds left in the current window, never negative."""
        return max(0.0, self._state.end_timestamp - self._clock())

    def is_active(self) -> bool:
        return self.remaining() > 0

    def poll(self) -> bool:
        """
        Fire expiry if the window has run out.

        Returns:
            True if this call delivered the expiry notification
        """
        if self._state.active and self.remaining() <= 0:
            return self._fire(self._generation)
        return False

    def cancel(self) -> None:
        """Tear down the current window without notifying."""
        self._cancel_watcher()
        self._generation += 1
        self._state = CooldownState()

    def _fire(self, generation: int) -> bool:
        # A superseded window must never notify
        if generation != self._generation or not self._state.active:
            return False
        self._state = replace(self._state, active=False)
        self._notify(self.on_expire)
        return True

    @staticmethod
    def _notify(callback: Optional[Callable[..., None]], *args: Any) -> None:
        # A failing renderer callback must not kill the watcher
        if callback is None:
            return
        try:
            callback(*args)
        except Exception as e:
            print(f"  [!] Cooldown callback failed: {e}")

    def _spawn_watcher(self, generation: int) -> Optional[asyncio.Task]:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            return None
        return loop.create_task(self._watch(generation))

    def _cancel_watcher(self) -> None:
        if self._watcher and not self._watcher.done():
            self._watcher.cancel()
        self._watcher = None

    async def _watch(self, generation: int) -> None:
        while generation == self._generation:
            left = self.remaining()
            if left <= 0:
                self._fire(generation)
                return
            self._notify(self.on_tick, left)
            await self._sleep(min(left, self.TICK_INTERVAL))
