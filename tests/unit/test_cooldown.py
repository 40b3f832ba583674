"""
Tests for CooldownTimer.
"""
import asyncio

import pytest

from phrasedeck.deck import CooldownTimer
from tests.conftest import ClockSleep, ParkedSleep


class TestCooldownWithoutLoop:
    """Host-driven expiry through poll()."""

    def test_inactive_before_start(self, fake_clock):
        timer = CooldownTimer(clock=fake_clock)
        assert not timer.is_active()
        assert timer.remaining() == 0

    def test_remaining_follows_wall_clock(self, fake_clock):
        timer = CooldownTimer(clock=fake_clock)
        timer.start(300)

        fake_clock.advance(120.5)
        assert timer.remaining() == pytest.approx(179.5)
        assert timer.is_active()

    def test_remaining_never_negative(self, fake_clock):
        timer = CooldownTimer(clock=fake_clock)
        timer.start(10)
        fake_clock.advance(1000)
        assert timer.remaining() == 0
        assert not timer.is_active()

    def test_remaining_is_monotonic(self, fake_clock):
        timer = CooldownTimer(clock=fake_clock)
        timer.start(60)
        readings = []
        for _ in range(70):
            readings.append(timer.remaining())
            fake_clock.advance(1)
        assert readings == sorted(readings, reverse=True)

    def test_poll_fires_once(self, fake_clock):
        fired = []
        timer = CooldownTimer(on_expire=lambda: fired.append(True), clock=fake_clock)
        timer.start(5)

        assert timer.poll() is False
        fake_clock.advance(5)
        assert timer.poll() is True
        assert timer.poll() is False
        assert fired == [True]

    def test_restart_replaces_window(self, fake_clock):
        timer = CooldownTimer(clock=fake_clock)
        timer.start(300)
        fake_clock.advance(200)
        timer.start(300)
        assert timer.remaining() == 300

    def test_cancel_does_not_notify(self, fake_clock):
        fired = []
        timer = CooldownTimer(on_expire=lambda: fired.append(True), clock=fake_clock)
        timer.start(5)
        timer.cancel()
        fake_clock.advance(10)

        assert timer.poll() is False
        assert fired == []


class TestCooldownWatcher:
    """Watcher task driven by the event loop."""

    @pytest.mark.asyncio
    async def test_watcher_ticks_then_expires(self, fake_clock):
        fired = []
        ticks = []
        sleep = ClockSleep(fake_clock)
        timer = CooldownTimer(
            on_expire=lambda: fired.append(fake_clock.now),
            on_tick=ticks.append,
            clock=fake_clock,
            sleep=sleep,
        )
        start = fake_clock.now
        timer.start(3)

        for _ in range(10):
            await asyncio.sleep(0)

        assert fired == [start + 3]
        assert ticks == [3, 2, 1]
        assert not timer.is_active()
        assert not timer.state.active

    @pytest.mark.asyncio
    async def test_fractional_window_sleeps_only_what_is_left(self, fake_clock):
        sleep = ClockSleep(fake_clock)
        timer = CooldownTimer(clock=fake_clock, sleep=sleep)
        timer.start(1.5)

        for _ in range(10):
            await asyncio.sleep(0)

        assert sleep.delays == [1.0, 0.5]

    @pytest.mark.asyncio
    async def test_superseded_window_never_notifies(self, fake_clock):
        fired = []
        timer = CooldownTimer(on_expire=lambda: fired.append("expired"), clock=fake_clock, sleep=ParkedSleep())
        timer.start(5)
        await asyncio.sleep(0)
        timer.start(300)
        await asyncio.sleep(0)

        fake_clock.advance(10)
        assert timer.poll() is False
        assert fired == []

        fake_clock.advance(300)
        assert timer.poll() is True
        assert fired == ["expired"]
        timer.cancel()

    @pytest.mark.asyncio
    async def test_cancel_stops_watcher(self, fake_clock):
        fired = []
        sleep = ParkedSleep()
        timer = CooldownTimer(on_expire=lambda: fired.append(True), clock=fake_clock, sleep=sleep)
        timer.start(5)
        await asyncio.sleep(0)
        watcher = timer._watcher

        timer.cancel()
        await asyncio.sleep(0)
        await asyncio.sleep(0)

        assert watcher.cancelled()
        assert fired == []

    @pytest.mark.asyncio
    async def test_raising_callbacks_are_reported_and_watcher_finishes(self, fake_clock, capsys):
        def broken_tick(left):
            raise RuntimeError("tick render failed")

        def broken_expire():
            raise RuntimeError("expire render failed")

        timer = CooldownTimer(
            on_expire=broken_expire,
            on_tick=broken_tick,
            clock=fake_clock,
            sleep=ClockSleep(fake_clock),
        )
        timer.start(2)
        watcher = timer._watcher

        for _ in range(10):
            await asyncio.sleep(0)

        assert watcher.done()
        assert watcher.exception() is None
        assert not timer.state.active
        out = capsys.readouterr().out
        assert "[!] Cooldown callback failed: tick render failed" in out
        assert "[!] Cooldown callback failed: expire render failed" in out

    def test_poll_survives_raising_expire_callback(self, fake_clock, capsys):
        def broken_expire():
            raise RuntimeError("gone")

        timer = CooldownTimer(on_expire=broken_expire, clock=fake_clock)
        timer.start(1)
        fake_clock.advance(1)

        assert timer.poll() is True
        assert timer.poll() is False
        assert "[!] Cooldown callback failed: gone" in capsys.readouterr().out
