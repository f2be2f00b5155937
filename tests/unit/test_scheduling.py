"""
Unit tests for named scheduled tasks
"""
import asyncio

import pytest

from poimap.core.scheduling import ScheduledTask


@pytest.mark.asyncio
async def test_schedule_fires_once_after_delay():
    calls = []

    async def callback(value):
        calls.append(value)

    task = ScheduledTask("test")
    task.schedule(0.01, callback, "a")
    assert task.pending

    await task.wait()

    assert calls == ["a"]
    assert not task.pending


@pytest.mark.asyncio
async def test_reschedule_replaces_pending():
    calls = []

    async def callback(value):
        calls.append(value)

    task = ScheduledTask("test")
    task.schedule(0.05, callback, "first")
    task.schedule(0.01, callback, "second")
    await task.wait()
    await asyncio.sleep(0.06)

    assert calls == ["second"]
    assert task.replaced_count == 1


@pytest.mark.asyncio
async def test_cancel_pending():
    calls = []

    async def callback():
        calls.append(True)

    task = ScheduledTask("test")
    task.schedule(0.01, callback)

    assert task.cancel() is True
    assert task.cancel() is False
    await asyncio.sleep(0.03)
    assert calls == []


@pytest.mark.asyncio
async def test_running_callback_is_not_cancelled_by_reschedule():
    started = asyncio.Event()
    release = asyncio.Event()
    finished = []

    async def slow(name):
        started.set()
        await release.wait()
        finished.append(name)

    task = ScheduledTask("test")
    first = task.schedule(0, slow, "first")
    await started.wait()
    assert task.running

    task.schedule(0.01, slow, "second")
    release.set()
    await first
    await task.wait()

    assert finished == ["first", "second"]


@pytest.mark.asyncio
async def test_cancel_takes_effect_immediately():
    async def callback():
        pass

    task = ScheduledTask("test")
    task.schedule(0.05, callback)
    task.cancel()

    assert not task.pending
    assert not task.running
    await task.wait()
    assert not task.pending


@pytest.mark.asyncio
async def test_schedule_after_cancel_is_not_a_replacement():
    calls = []

    async def callback(value):
        calls.append(value)

    task = ScheduledTask("test")
    task.schedule(0.05, callback, "cancelled")
    task.cancel()
    task.schedule(0.01, callback, "kept")

    assert task.pending
    await task.wait()

    assert calls == ["kept"]
    assert task.replaced_count == 0
