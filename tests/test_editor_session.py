"""
EditorSession tests

The host boundary: program callbacks, active program switching, playback
requests and the example / clear buttons.
"""

import asyncio
import math

import pytest

from conftest import SETTLE_S
from motionblocks.compiler import compile_graph
from motionblocks.models.enums import BlockField, StepKind, ValueSlot
from motionblocks.models.errors import ProgramFormatError
from motionblocks.models.events import EventType
from motionblocks.models.step import AnimationStep
from motionblocks.services import EditorSession


PROGRAM = (
    AnimationStep("s1", StepKind.MOVE_BACKWARD, duration=1.5, distance=4.0),
    AnimationStep("s2", StepKind.ROTATE_X, duration=1.0, distance=math.pi / 2),
)


@pytest.fixture
def session(fast_config):
    editor = EditorSession(fast_config, name="test-session")
    editor.start()
    return editor


def _events(session, event_type):
    return [e for e in session.bus.get_event_history(100) if e.type == event_type]


@pytest.mark.asyncio
async def test_program_callback_fires_after_edit(session):
    received = []
    session.on_program_changed(received.append)

    session.load_example()
    await asyncio.sleep(SETTLE_S)

    assert len(received) == 1
    assert [s.kind for s in received[0]] == [StepKind.MOVE_UP, StepKind.ROTATE_Y, StepKind.SCALE_UP]
    assert session.program == received[0]


@pytest.mark.asyncio
async def test_async_program_callback(session):
    received = []

    async def save_steps(program):
        await asyncio.sleep(0)
        received.append(program)

    session.on_program_changed(save_steps)
    session.load_example()
    await asyncio.sleep(SETTLE_S)

    assert len(received) == 1


@pytest.mark.asyncio
async def test_set_active_program_rebuilds_without_callback(session):
    received = []
    session.on_program_changed(received.append)

    assert session.set_active_program(PROGRAM)
    assert session.program == PROGRAM

    await asyncio.sleep(SETTLE_S)

    assert received == []
    assert [s.kind for s in compile_graph(session.graph)] == [StepKind.MOVE_BACKWARD, StepKind.ROTATE_X]
    assert len(_events(session, EventType.PROGRAM_INSTALLED)) == 1


@pytest.mark.asyncio
async def test_switching_back_and_forth(session):
    other = (AnimationStep("o1", StepKind.PAUSE, duration=2.0),)

    session.set_active_program(PROGRAM)
    await asyncio.sleep(SETTLE_S)
    session.set_active_program(other)
    await asyncio.sleep(SETTLE_S)
    session.set_active_program(PROGRAM)
    await asyncio.sleep(SETTLE_S)

    assert [s.kind for s in compile_graph(session.graph)] == [StepKind.MOVE_BACKWARD, StepKind.ROTATE_X]
    assert len(_events(session, EventType.PROGRAM_INSTALLED)) == 3


@pytest.mark.asyncio
async def test_same_program_twice_is_skipped(session):
    assert session.set_active_program(PROGRAM)
    await asyncio.sleep(SETTLE_S)

    assert not session.set_active_program(list(PROGRAM))


@pytest.mark.asyncio
async def test_reinstalling_program_after_edit_rebuilds(session):
    session.set_active_program(PROGRAM)
    await asyncio.sleep(SETTLE_S)

    duration = session.graph.get_top_blocks()[0].next.get_slot_target(ValueSlot.DURATION)
    session.graph.set_field(duration, BlockField.VALUE, 5.0)
    await asyncio.sleep(SETTLE_S)
    assert session.program[0].duration == 5.0

    assert session.set_active_program(PROGRAM)
    assert session.program == PROGRAM
    await asyncio.sleep(SETTLE_S)

    assert [s.duration for s in compile_graph(session.graph)] == [1.5, 1.0]


@pytest.mark.asyncio
async def test_empty_active_program_then_play_is_empty(session):
    session.load_example()
    await asyncio.sleep(SETTLE_S)
    assert len(session.program) == 3

    session.set_active_program([])
    program = await session.request_play()

    assert program == ()
    empty = _events(session, EventType.EMPTY_PROGRAM)
    assert len(empty) == 1
    assert _events(session, EventType.PLAYBACK_REQUESTED) == []


@pytest.mark.asyncio
async def test_empty_active_program_after_rebuild(session):
    session.set_active_program([])
    await asyncio.sleep(SETTLE_S)

    assert await session.request_play() == ()
    assert _events(session, EventType.EMPTY_PROGRAM)[-1].reason == "no_steps"


@pytest.mark.asyncio
async def test_play_without_start_block(session):
    assert await session.request_play() == ()
    assert _events(session, EventType.EMPTY_PROGRAM)[-1].reason == "no_start_block"


@pytest.mark.asyncio
async def test_play_flushes_pending_edits(session):
    session.load_example()
    assert session.coordinator.compile_pending

    program = await session.request_play()

    assert len(program) == 3
    played = _events(session, EventType.PLAYBACK_REQUESTED)
    assert played[0].program == program


@pytest.mark.asyncio
async def test_play_returns_latest_edit(session):
    session.load_example()
    await asyncio.sleep(SETTLE_S)

    move = session.graph.get_top_blocks()[0].next
    session.graph.set_field(move, BlockField.DIRECTION, "moveForward")
    program = await session.request_play()

    assert program[0].kind == StepKind.MOVE_FORWARD


@pytest.mark.asyncio
async def test_stop_and_reset_requests(session):
    await session.request_stop()
    await session.request_reset()

    assert len(_events(session, EventType.PLAYBACK_STOP_REQUESTED)) == 1
    assert len(_events(session, EventType.PLAYBACK_RESET_REQUESTED)) == 1


@pytest.mark.asyncio
async def test_clear(session):
    received = []
    session.on_program_changed(received.append)
    session.load_example()

    await session.clear()
    await asyncio.sleep(SETTLE_S)

    assert received == [()]
    assert len(session.graph) == 0
    assert await session.request_play() == ()


@pytest.mark.asyncio
async def test_summary(session):
    session.load_example()
    await asyncio.sleep(SETTLE_S)

    summary = session.summary()

    assert summary.step_count == 3
    assert summary.total_duration == 4.0
    assert not summary.is_empty


@pytest.mark.asyncio
async def test_records_round_trip(session):
    session.set_active_program(PROGRAM)
    records = session.program_records()

    assert records[0] == {"id": "s1", "kind": "moveBackward", "duration": 1.5, "distance": 4.0}

    other = EditorSession()
    assert other.set_active_records(records)
    assert other.program == PROGRAM
    other.dispose()


@pytest.mark.asyncio
async def test_set_active_records_rejects_bad_input(session):
    with pytest.raises(ProgramFormatError):
        session.set_active_records([{"id": "x", "kind": "jump", "duration": 1}])


@pytest.mark.asyncio
async def test_warnings_exposed(session):
    session.load_example()
    move = session.graph.get_top_blocks()[0].next
    session.graph.set_field(move, BlockField.DIRECTION, "sideways")

    await session.request_play()

    assert [w.block_id for w in session.warnings] == [move.id]


@pytest.mark.asyncio
async def test_dispose_stops_pending_work(session):
    received = []
    session.on_program_changed(received.append)
    session.load_example()
    session.set_active_program(PROGRAM)

    session.dispose()

    assert session.disposed
    assert not session.set_active_program(())
    await asyncio.sleep(SETTLE_S)
    assert received == []


@pytest.mark.asyncio
async def test_context_manager(fast_config):
    async with EditorSession(fast_config) as session:
        session.load_example()
        program = await session.request_play()
        assert len(program) == 3

    assert session.disposed


@pytest.mark.asyncio
async def test_dispose_leaves_other_sessions_running(fast_config):
    first = EditorSession(fast_config)
    second = EditorSession(fast_config)
    first.start()
    second.start()
    received = []
    second.on_program_changed(received.append)

    second.load_example()
    first.dispose()
    await asyncio.sleep(SETTLE_S)

    assert not second.disposed
    assert len(received) == 1
    second.dispose()
