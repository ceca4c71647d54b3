"""
ScheduledTask and TaskRegistry tests
"""

import asyncio

import pytest

from motionblocks.lifecycle import ScheduledTask, TaskCategory, TaskRegistry, create_tracked_task


@pytest.mark.asyncio
async def test_fires_after_delay():
    calls = []
    timer = ScheduledTask(lambda: calls.append("fired"), 0.01)

    timer.schedule()
    assert timer.pending
    assert calls == []

    await timer.wait()

    assert calls == ["fired"]
    assert not timer.pending
    assert timer.fire_count == 1


@pytest.mark.asyncio
async def test_reschedule_coalesces():
    calls = []
    timer = ScheduledTask(lambda: calls.append("fired"), 0.02)

    for _ in range(5):
        timer.schedule()
        await asyncio.sleep(0.005)
    await timer.wait()

    assert calls == ["fired"]


@pytest.mark.asyncio
async def test_cancel():
    calls = []
    timer = ScheduledTask(lambda: calls.append("fired"), 0.01)

    timer.schedule()
    assert timer.cancel()
    assert not timer.cancel()

    await asyncio.sleep(0.05)
    assert calls == []


@pytest.mark.asyncio
async def test_async_callback_and_delay_override():
    calls = []

    async def callback():
        await asyncio.sleep(0)
        calls.append("fired")

    timer = ScheduledTask(callback, 10.0)
    timer.schedule(delay=0.01)
    await timer.wait()

    assert calls == ["fired"]


@pytest.mark.asyncio
async def test_callback_may_reschedule_itself():
    calls = []

    def callback():
        calls.append("fired")
        if len(calls) < 3:
            timer.schedule()

    timer = ScheduledTask(callback, 0.005)
    timer.schedule()
    await asyncio.sleep(0.1)

    assert calls == ["fired"] * 3


@pytest.mark.asyncio
async def test_tasks_are_registered():
    timer = ScheduledTask(lambda: None, 0.01, category=TaskCategory.DEBOUNCE,
                          description="test debounce", owner="owner-a")
    timer.schedule()

    registry = TaskRegistry.instance()
    active = registry.active(owner="owner-a")
    assert len(active) == 1
    assert active[0].info.category == TaskCategory.DEBOUNCE
    assert active[0].info.description == "test debounce"

    await timer.wait()
    assert registry.active(owner="owner-a") == []


@pytest.mark.asyncio
async def test_cancel_owner():
    a = ScheduledTask(lambda: None, 1.0, owner="a")
    b = ScheduledTask(lambda: None, 1.0, owner="b")
    a.schedule()
    b.schedule()

    registry = TaskRegistry.instance()
    assert registry.cancel_owner("a") == 1
    await asyncio.sleep(0.01)

    assert len(registry.cancelled()) == 1
    assert len(registry.active(owner="b")) == 1
    b.cancel()


@pytest.mark.asyncio
async def test_failed_task_is_recorded():
    async def boom():
        raise RuntimeError("boom")

    task = create_tracked_task(boom(), category=TaskCategory.GENERAL, description="failing task")
    with pytest.raises(RuntimeError):
        await task

    registry = TaskRegistry.instance()
    assert len(registry.failed()) == 1
    assert "failed=1" in registry.summary()


@pytest.mark.asyncio
async def test_registry_prunes_finished_records():
    registry = TaskRegistry(history_limit=3)
    TaskRegistry._instance = registry

    for _ in range(6):
        task = create_tracked_task(asyncio.sleep(0), category=TaskCategory.GENERAL, description="tick")
        await task

    assert len(registry.list_all()) <= 4
