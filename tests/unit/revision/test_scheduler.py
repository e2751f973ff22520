"""
Unit tests for the auto-clean debounce scheduler (scheduler.py).

Timings use short delays; assertions allow a few milliseconds of event loop
clock slack.
"""

import asyncio

import pytest

from textify.revision.scheduler import AutoCleanScheduler, SchedulerState


SLACK = 0.01


class CallRecorder:
    """Synchronous trigger that records the loop time of each call."""

    def __init__(self):
        self.calls = []

    def __call__(self):
        self.calls.append(asyncio.get_running_loop().time())


class TestDebounce:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_single_paste_fires_after_delay(self):
        trigger = CallRecorder()
        scheduler = AutoCleanScheduler(trigger, delay_ms=50)
        loop = asyncio.get_running_loop()

        pasted_at = loop.time()
        scheduler.notify_paste()
        assert scheduler.state is SchedulerState.PENDING

        await asyncio.sleep(0.15)

        assert len(trigger.calls) == 1
        assert trigger.calls[0] - pasted_at >= 0.05 - SLACK
        assert scheduler.state is SchedulerState.IDLE

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_burst_fires_once_after_last_paste(self):
        trigger = CallRecorder()
        scheduler = AutoCleanScheduler(trigger, delay_ms=200)
        loop = asyncio.get_running_loop()

        for _ in range(3):
            scheduler.notify_paste()
            last_paste = loop.time()
            await asyncio.sleep(0.05)

        assert trigger.calls == []
        assert scheduler.is_pending

        await asyncio.sleep(0.35)

        assert len(trigger.calls) == 1
        assert trigger.calls[0] - last_paste >= 0.2 - SLACK

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_separate_bursts_fire_separately(self):
        trigger = CallRecorder()
        scheduler = AutoCleanScheduler(trigger, delay_ms=30)

        scheduler.notify_paste()
        await asyncio.sleep(0.1)
        scheduler.notify_paste()
        await asyncio.sleep(0.1)

        assert len(trigger.calls) == 2

    @pytest.mark.unit
    def test_delay_defaults_to_settings(self):
        scheduler = AutoCleanScheduler(lambda: None)

        assert scheduler.delay_ms == 500
        assert scheduler.delay_seconds == 0.5


class TestCancellation:

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_cancel_disarms_pending_timer(self):
        trigger = CallRecorder()
        scheduler = AutoCleanScheduler(trigger, delay_ms=30)

        scheduler.notify_paste()
        scheduler.cancel()
        await asyncio.sleep(0.1)

        assert trigger.calls == []
        assert scheduler.state is SchedulerState.IDLE

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_aclose_cancels_started_clean(self):
        started = asyncio.Event()
        finished = []

        async def slow_clean():
            started.set()
            await asyncio.sleep(10)
            finished.append(True)

        scheduler = AutoCleanScheduler(slow_clean, delay_ms=10)
        scheduler.notify_paste()
        await asyncio.wait_for(started.wait(), timeout=1)

        await scheduler.aclose()

        assert finished == []

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_paste_after_close_is_ignored(self):
        trigger = CallRecorder()

        async with AutoCleanScheduler(trigger, delay_ms=10) as scheduler:
            pass

        scheduler.notify_paste()
        await asyncio.sleep(0.05)

        assert trigger.calls == []
        assert scheduler.state is SchedulerState.IDLE

    @pytest.mark.unit
    @pytest.mark.asyncio
    async def test_failing_trigger_does_not_break_scheduler(self):
        calls = []

        async def failing_clean():
            calls.append(True)
            raise RuntimeError("boom")

        scheduler = AutoCleanScheduler(failing_clean, delay_ms=10)

        scheduler.notify_paste()
        await asyncio.sleep(0.05)
        scheduler.notify_paste()
        await asyncio.sleep(0.05)

        assert len(calls) == 2
        await scheduler.aclose()
