"""
Decompiler - animation program back to a block chain

Rebuilds the graph as START followed by one block per step. REPEAT blocks
are never reconstructed: an unrolled program comes back as a flat chain.
"""

from typing import Sequence, Tuple

from motionblocks.compiler.compiler import radians_to_degrees, DEFAULT_ANGLE_DEGREES
from motionblocks.graph.block_graph import BlockGraph
from motionblocks.models.block import Block
from motionblocks.models.enums import (
    BlockKind,
    BlockField,
    ValueSlot,
    ChangeReason,
    MOVE_KINDS,
    ROTATE_KINDS,
    SCALE_KINDS,
)
from motionblocks.models.step import AnimationStep
from motionblocks.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.DECOMPILER)

DEFAULT_START_ANCHOR = (20.0, 20.0)

_REASON = ChangeReason.PROGRAMMATIC


class Decompiler:
    """
    Program -> Graph rebuilder

    Every mutation is tagged PROGRAMMATIC. The caller is responsible for
    making sure the resulting notifications are not fed back into the
    compiler (ChangeCoordinator does this by suppressing them).

    Args:
        start_anchor: Workspace position of the START block
    """

    def __init__(self, start_anchor: Tuple[float, float] = DEFAULT_START_ANCHOR):
        self.start_anchor = start_anchor

    def decompile(self, graph: BlockGraph, program: Sequence[AnimationStep]) -> None:
        graph.clear(reason=_REASON)

        previous = graph.create_block(BlockKind.START, position=self.start_anchor, reason=_REASON)
        for step in program:
            block = self._build_block(graph, step)
            graph.connect_next(previous, block, reason=_REASON)
            previous = block

        log.info("Program restored to graph", steps=len(program), blocks=len(graph))

    def _build_block(self, graph: BlockGraph, step: AnimationStep) -> Block:
        kind = step.kind

        if kind in MOVE_KINDS:
            block = graph.create_block(BlockKind.MOVE, fields={BlockField.DIRECTION: kind.value}, reason=_REASON)
            if step.distance is not None:
                self._attach_literal(graph, block, ValueSlot.DISTANCE, step.distance)

        elif kind in ROTATE_KINDS:
            block = graph.create_block(BlockKind.ROTATE, fields={BlockField.AXIS: kind.value}, reason=_REASON)
            angle = radians_to_degrees(step.distance) if step.distance is not None else DEFAULT_ANGLE_DEGREES
            self._attach_literal(graph, block, ValueSlot.ANGLE, angle)

        elif kind in SCALE_KINDS:
            block = graph.create_block(BlockKind.SCALE, fields={BlockField.TYPE: kind.value}, reason=_REASON)
            if step.scale is not None:
                self._attach_literal(graph, block, ValueSlot.SCALE, step.scale)

        else:
            block = graph.create_block(BlockKind.PAUSE, reason=_REASON)

        self._attach_literal(graph, block, ValueSlot.DURATION, step.duration)
        return block

    def _attach_literal(self, graph: BlockGraph, block: Block, slot: str, value: float) -> None:
        literal = graph.create_block(BlockKind.NUMBER_LITERAL, fields={BlockField.VALUE: value}, reason=_REASON)
        graph.connect_value(block, slot, literal, reason=_REASON)


def decompile_program(graph: BlockGraph, program: Sequence[AnimationStep]) -> None:
    Decompiler().decompile(graph, program)
