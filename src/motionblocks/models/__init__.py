"""Domain models: blocks, steps, enums, events"""

from motionblocks.models.block import Block
from motionblocks.models.step import AnimationStep, Program, ProgramSummary, summarize, EMPTY_PROGRAM
from motionblocks.models.enums import BlockKind, StepKind

__all__ = [
    "Block",
    "AnimationStep",
    "Program",
    "ProgramSummary",
    "summarize",
    "EMPTY_PROGRAM",
    "BlockKind",
    "StepKind",
]
