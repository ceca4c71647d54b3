"""
Animation step domain models

AnimationStep is immutable once produced; a Program is an ordered tuple of
steps and is replaced wholesale on every recompilation.
"""

from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from motionblocks.models.enums import StepKind, MOVE_KINDS, ROTATE_KINDS, SCALE_KINDS


@dataclass(frozen=True)
class AnimationStep:
    """One compiled instruction for the playback engine"""
    id: str
    kind: StepKind
    duration: float
    distance: Optional[float] = None   # move units, or radians for rotations
    scale: Optional[float] = None      # multiplicative factor

    @property
    def is_move(self) -> bool:
        return self.kind in MOVE_KINDS

    @property
    def is_rotation(self) -> bool:
        return self.kind in ROTATE_KINDS

    @property
    def is_scale(self) -> bool:
        return self.kind in SCALE_KINDS

    def same_effect(self, other: "AnimationStep") -> bool:
        """Equal apart from id"""
        return (
            self.kind == other.kind
            and self.duration == other.duration
            and self.distance == other.distance
            and self.scale == other.scale
        )


Program = Tuple[AnimationStep, ...]

EMPTY_PROGRAM: Program = ()


@dataclass(frozen=True)
class ProgramSummary:
    """Status-bar numbers for a program"""
    step_count: int
    total_duration: float

    @property
    def is_empty(self) -> bool:
        return self.step_count == 0


def summarize(program: Sequence[AnimationStep]) -> ProgramSummary:
    return ProgramSummary(
        step_count=len(program),
        total_duration=sum(step.duration for step in program),
    )
