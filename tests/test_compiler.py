"""
Compiler tests

Graph -> Program: chain walking, slot defaults, REPEAT unrolling and the
warnings emitted for blocks that cannot be compiled.
"""

import math

import pytest

from motionblocks.compiler import Compiler, compile_graph
from motionblocks.compiler.compiler import positional_step_id
from motionblocks.graph import add_block, load_example
from motionblocks.models.enums import (
    BlockKind,
    BlockField,
    ValueSlot,
    StepKind,
    StepIdStrategy,
    WarningCode,
)


def _start(graph):
    return graph.create_block(BlockKind.START)


def _pause(graph, after=None, duration=1):
    return add_block(graph, BlockKind.PAUSE, values={ValueSlot.DURATION: duration}, after=after)


def _kinds(program):
    return [step.kind for step in program]


def test_no_start_block_gives_empty_program(graph):
    _pause(graph)
    add_block(graph, BlockKind.MOVE, fields={BlockField.DIRECTION: "moveUp"})

    assert compile_graph(graph) == ()


def test_empty_graph_gives_empty_program(graph):
    assert compile_graph(graph) == ()


def test_start_without_chain_gives_empty_program(graph):
    _start(graph)
    assert compile_graph(graph) == ()


def test_example_chain(graph):
    load_example(graph)

    program = compile_graph(graph)

    assert _kinds(program) == [StepKind.MOVE_UP, StepKind.ROTATE_Y, StepKind.SCALE_UP]

    move, rotate, scale = program
    assert (move.duration, move.distance, move.scale) == (1.0, 2.0, None)
    assert rotate.duration == 2.0
    assert rotate.distance == pytest.approx(math.pi)
    assert rotate.scale is None
    assert (scale.duration, scale.distance, scale.scale) == (1.0, None, 1.5)


def test_defaults_for_empty_slots(graph):
    start = _start(graph)
    move = add_block(graph, BlockKind.MOVE, fields={BlockField.DIRECTION: "moveLeft"}, after=start)
    rotate = add_block(graph, BlockKind.ROTATE, fields={BlockField.AXIS: "rotateZ"}, after=move)
    scale = add_block(graph, BlockKind.SCALE, fields={BlockField.TYPE: "scaleDown"}, after=rotate)
    add_block(graph, BlockKind.PAUSE, after=scale)

    compiler = Compiler()
    program = compiler.compile(graph)

    assert [(s.duration, s.distance, s.scale) for s in program] == [
        (1.0, 1.0, None),
        (1.0, pytest.approx(math.pi / 2), None),
        (1.0, None, 1.5),
        (1.0, None, None),
    ]
    assert all(w.code == WarningCode.MALFORMED_VALUE for w in compiler.warnings)
    assert len(compiler.warnings) == 7


def test_repeat_unrolls_body(graph):
    start = _start(graph)
    repeat = add_block(graph, BlockKind.REPEAT, values={ValueSlot.TIMES: 3}, after=start)
    graph.connect_statement(repeat, _pause(graph))

    program = compile_graph(graph)

    assert _kinds(program) == [StepKind.PAUSE] * 3
    assert all(step.duration == 1.0 for step in program)
    assert len({step.id for step in program}) == 3


def test_repeat_keeps_order_in_place(graph):
    start = _start(graph)
    before = add_block(graph, BlockKind.MOVE, fields={BlockField.DIRECTION: "moveUp"}, after=start)
    repeat = add_block(graph, BlockKind.REPEAT, values={ValueSlot.TIMES: 2}, after=before)
    add_block(graph, BlockKind.SCALE, fields={BlockField.TYPE: "scaleUp"}, after=repeat)

    body = add_block(graph, BlockKind.MOVE, fields={BlockField.DIRECTION: "moveLeft"})
    add_block(graph, BlockKind.MOVE, fields={BlockField.DIRECTION: "moveRight"}, after=body)
    graph.connect_statement(repeat, body)

    assert _kinds(compile_graph(graph)) == [
        StepKind.MOVE_UP,
        StepKind.MOVE_LEFT, StepKind.MOVE_RIGHT,
        StepKind.MOVE_LEFT, StepKind.MOVE_RIGHT,
        StepKind.SCALE_UP,
    ]


@pytest.mark.parametrize("times, expected", [(0, 0), (-2, 0), (2.9, 2), ("4", 4)])
def test_repeat_count_is_floored_and_clamped(graph, times, expected):
    start = _start(graph)
    repeat = add_block(graph, BlockKind.REPEAT, values={ValueSlot.TIMES: times}, after=start)
    graph.connect_statement(repeat, _pause(graph))
    _pause(graph, after=repeat, duration=5)

    program = compile_graph(graph)

    assert len(program) == expected + 1
    assert program[-1].duration == 5.0


def test_repeat_without_times_runs_once(graph):
    start = _start(graph)
    repeat = add_block(graph, BlockKind.REPEAT, after=start)
    graph.connect_statement(repeat, _pause(graph))

    assert len(compile_graph(graph)) == 1


def test_nested_repeat(graph):
    start = _start(graph)
    outer = add_block(graph, BlockKind.REPEAT, values={ValueSlot.TIMES: 2}, after=start)
    inner = add_block(graph, BlockKind.REPEAT, values={ValueSlot.TIMES: 3})
    graph.connect_statement(inner, _pause(graph))
    graph.connect_statement(outer, inner)

    program = compile_graph(graph)

    assert len(program) == 6
    assert len({step.id for step in program}) == 6


def test_empty_repeat_body(graph):
    start = _start(graph)
    add_block(graph, BlockKind.REPEAT, values={ValueSlot.TIMES: 5}, after=start)

    assert compile_graph(graph) == ()


def test_nested_start_skipped_with_warning(graph):
    start = _start(graph)
    repeat = add_block(graph, BlockKind.REPEAT, values={ValueSlot.TIMES: 1}, after=start)
    inner_start = graph.create_block(BlockKind.START)
    _pause(graph, after=inner_start)
    graph.connect_statement(repeat, inner_start)

    compiler = Compiler()
    program = compiler.compile(graph)

    assert _kinds(program) == [StepKind.PAUSE]
    assert [w.code for w in compiler.warnings] == [WarningCode.NESTED_START]
    assert compiler.warnings[0].block_id == inner_start.id


def test_unknown_block_skipped(graph):
    start = _start(graph)
    odd = graph.create_block("color_animation")
    graph.connect_next(start, odd)
    _pause(graph, after=odd)

    compiler = Compiler()
    program = compiler.compile(graph)

    assert _kinds(program) == [StepKind.PAUSE]
    assert compiler.warnings[0].code == WarningCode.UNKNOWN_BLOCK_KIND


@pytest.mark.parametrize("kind, field, value", [
    (BlockKind.MOVE, BlockField.DIRECTION, "rotateX"),
    (BlockKind.ROTATE, BlockField.AXIS, "sideways"),
    (BlockKind.SCALE, BlockField.TYPE, None),
    (BlockKind.MOVE, BlockField.DIRECTION, ["moveUp"]),
])
def test_invalid_discrete_field_skips_block(graph, kind, field, value):
    start = _start(graph)
    bad = add_block(graph, kind, fields={field: value}, after=start)
    _pause(graph, after=bad)

    compiler = Compiler()
    program = compiler.compile(graph)

    assert _kinds(program) == [StepKind.PAUSE]
    assert compiler.warnings[0].code == WarningCode.INVALID_FIELD


def test_multiple_starts_uses_first(graph):
    first = _start(graph)
    _pause(graph, after=first, duration=2)
    second = _start(graph)
    _pause(graph, after=second, duration=7)

    compiler = Compiler()
    program = compiler.compile(graph)

    assert [s.duration for s in program] == [2.0]
    assert compiler.warnings[0].code == WarningCode.MULTIPLE_STARTS


def test_detached_blocks_ignored(graph):
    start = _start(graph)
    _pause(graph, after=start)
    _pause(graph)   # floating, not under START

    assert len(compile_graph(graph)) == 1


def test_warnings_reset_between_runs(graph):
    start = _start(graph)
    add_block(graph, BlockKind.PAUSE, after=start)
    compiler = Compiler()

    compiler.compile(graph)
    assert compiler.warnings

    graph.clear()
    compiler.compile(graph)
    assert compiler.warnings == []


def test_deterministic_up_to_ids(graph):
    load_example(graph)

    first = compile_graph(graph)
    second = compile_graph(graph)

    assert [s.id for s in first] != [s.id for s in second]
    assert all(a.same_effect(b) for a, b in zip(first, second))


def test_positional_ids_are_stable(graph):
    load_example(graph)

    first = compile_graph(graph, StepIdStrategy.POSITIONAL)
    second = compile_graph(graph, StepIdStrategy.POSITIONAL)

    assert first == second
    assert first[1].id == positional_step_id(1, StepKind.ROTATE_Y) == "step_1_rotateY"


def test_compile_does_not_touch_graph(graph):
    load_example(graph)
    seen = []
    graph.add_change_listener(seen.append)

    compile_graph(graph)

    assert seen == []
