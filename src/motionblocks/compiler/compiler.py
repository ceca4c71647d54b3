"""
Compiler - block graph to animation program

Walks the chain hanging off the START block, resolves slot values, unrolls
REPEAT bodies and emits an ordered tuple of AnimationSteps.

Compilation is total: missing START yields the empty program, bad values
fall back to defaults and unusable blocks are skipped with a warning.
"""

import math
import uuid
from dataclasses import replace
from typing import Callable, Dict, List, Optional

from motionblocks.compiler.diagnostics import CompileWarning
from motionblocks.compiler.value_resolver import ValueResolver
from motionblocks.graph.block_graph import BlockGraph
from motionblocks.models.block import Block
from motionblocks.models.enums import (
    BlockKind,
    BlockField,
    ValueSlot,
    StepKind,
    StepIdStrategy,
    WarningCode,
    MOVE_KINDS,
    ROTATE_KINDS,
    SCALE_KINDS,
)
from motionblocks.models.step import AnimationStep, Program, EMPTY_PROGRAM
from motionblocks.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.COMPILER)

# Slot defaults used when a value is missing or malformed
DEFAULT_DURATION = 1.0
DEFAULT_DISTANCE = 1.0
DEFAULT_ANGLE_DEGREES = 90.0
DEFAULT_SCALE = 1.5
DEFAULT_TIMES = 1.0

StepIdFactory = Callable[[int, StepKind], str]


def random_step_id(index: int, kind: StepKind) -> str:
    return f"step_{uuid.uuid4().hex}"


def positional_step_id(index: int, kind: StepKind) -> str:
    return f"step_{index}_{kind.value}"


STEP_ID_FACTORIES: Dict[StepIdStrategy, StepIdFactory] = {
    StepIdStrategy.RANDOM: random_step_id,
    StepIdStrategy.POSITIONAL: positional_step_id,
}


def degrees_to_radians(degrees: float) -> float:
    return degrees * math.pi / 180


def radians_to_degrees(radians: float) -> float:
    return radians * 180 / math.pi


class Compiler:
    """
    Graph -> Program compiler

    Example:
        compiler = Compiler()
        program = compiler.compile(graph)
        for warning in compiler.warnings:
            print(warning.code.name, warning.block_id)

    Args:
        step_ids: Id strategy for emitted steps (RANDOM by default)
    """

    def __init__(self, step_ids: StepIdStrategy = StepIdStrategy.RANDOM):
        self._id_factory = STEP_ID_FACTORIES[step_ids]
        self._warnings: List[CompileWarning] = []
        self._resolver = ValueResolver(sink=self._warnings.append)

    @property
    def warnings(self) -> List[CompileWarning]:
        """Warnings collected by the most recent compile() call"""
        return list(self._warnings)

    def compile(self, graph: BlockGraph) -> Program:
        self._warnings.clear()

        start = self._find_start(graph)
        if start is None:
            log.debug("No START block, program is empty")
            return EMPTY_PROGRAM

        drafts: List[AnimationStep] = []
        self._compile_chain(start.next, drafts)

        program = tuple(
            replace(step, id=self._id_factory(index, step.kind))
            for index, step in enumerate(drafts)
        )
        log.debug("Compiled program", steps=len(program), warnings=len(self._warnings))
        return program

    # -----------------------------
    # Traversal
    # -----------------------------

    def _find_start(self, graph: BlockGraph) -> Optional[Block]:
        starts = [b for b in graph.get_top_blocks() if b.kind == BlockKind.START]
        if not starts:
            return None
        if len(starts) > 1:
            self._warn(
                WarningCode.MULTIPLE_STARTS,
                starts[1],
                f"{len(starts)} START blocks found, using {starts[0].id}",
            )
        return starts[0]

    def _compile_chain(self, head: Optional[Block], out: List[AnimationStep]) -> None:
        """Compile head and everything after it into out (recurses only into REPEAT bodies)"""
        block = head
        while block is not None:
            self._compile_block(block, out)
            block = block.next

    def _compile_block(self, block: Block, out: List[AnimationStep]) -> None:
        kind = block.kind

        if kind == BlockKind.MOVE:
            step_kind = self._step_kind(block, BlockField.DIRECTION, MOVE_KINDS)
            if step_kind is not None:
                out.append(AnimationStep(
                    id="",
                    kind=step_kind,
                    duration=self._resolver.resolve(block, ValueSlot.DURATION, DEFAULT_DURATION),
                    distance=self._resolver.resolve(block, ValueSlot.DISTANCE, DEFAULT_DISTANCE),
                ))

        elif kind == BlockKind.ROTATE:
            step_kind = self._step_kind(block, BlockField.AXIS, ROTATE_KINDS)
            if step_kind is not None:
                angle = self._resolver.resolve(block, ValueSlot.ANGLE, DEFAULT_ANGLE_DEGREES)
                out.append(AnimationStep(
                    id="",
                    kind=step_kind,
                    duration=self._resolver.resolve(block, ValueSlot.DURATION, DEFAULT_DURATION),
                    distance=degrees_to_radians(angle),
                ))

        elif kind == BlockKind.SCALE:
            step_kind = self._step_kind(block, BlockField.TYPE, SCALE_KINDS)
            if step_kind is not None:
                out.append(AnimationStep(
                    id="",
                    kind=step_kind,
                    duration=self._resolver.resolve(block, ValueSlot.DURATION, DEFAULT_DURATION),
                    scale=self._resolver.resolve(block, ValueSlot.SCALE, DEFAULT_SCALE),
                ))

        elif kind == BlockKind.PAUSE:
            out.append(AnimationStep(
                id="",
                kind=StepKind.PAUSE,
                duration=self._resolver.resolve(block, ValueSlot.DURATION, DEFAULT_DURATION),
            ))

        elif kind == BlockKind.REPEAT:
            times = math.floor(max(0.0, self._resolver.resolve(block, ValueSlot.TIMES, DEFAULT_TIMES)))
            body: List[AnimationStep] = []
            self._compile_chain(block.statement_slot, body)
            # Ids are assigned after the walk, so each copy ends up with its own
            for _ in range(times):
                out.extend(body)

        elif kind == BlockKind.START:
            self._warn(WarningCode.NESTED_START, block, "START block inside a chain, skipped")

        else:
            self._warn(WarningCode.UNKNOWN_BLOCK_KIND, block, f"Unknown block kind {block.kind_name()}, skipped")

    def _step_kind(self, block: Block, field_name: str, allowed: frozenset) -> Optional[StepKind]:
        raw = block.get_field(field_name)
        try:
            step_kind = StepKind(raw)
        except (ValueError, TypeError):
            step_kind = None
        if step_kind not in allowed:
            self._warn(
                WarningCode.INVALID_FIELD,
                block,
                f"{field_name}={raw!r} is not valid for {block.kind_name()}, skipped",
            )
            return None
        return step_kind

    def _warn(self, code: WarningCode, block: Block, message: str) -> None:
        log.warn(message, block=block.id, code=code.name)
        self._warnings.append(CompileWarning(code=code, block_id=block.id, message=message))


def compile_graph(graph: BlockGraph, step_ids: StepIdStrategy = StepIdStrategy.RANDOM) -> Program:
    """Compile with a throwaway Compiler"""
    return Compiler(step_ids).compile(graph)
