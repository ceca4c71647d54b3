"""
motionblocks - bidirectional compiler between an editor block graph and a
linear animation program.
"""

__version__ = "0.1.0"

from motionblocks.models import AnimationStep, Block, BlockKind, Program, StepKind
from motionblocks.graph import BlockGraph
from motionblocks.compiler import Compiler, Decompiler, ValueResolver
from motionblocks.services import ChangeCoordinator, EditorSession, EventBus

__all__ = [
    "AnimationStep",
    "Block",
    "BlockKind",
    "Program",
    "StepKind",
    "BlockGraph",
    "Compiler",
    "Decompiler",
    "ValueResolver",
    "ChangeCoordinator",
    "EditorSession",
    "EventBus",
]
