"""Recoverable compile problems"""

from dataclasses import dataclass
from typing import Callable, Optional

from motionblocks.models.enums import WarningCode


@dataclass(frozen=True)
class CompileWarning:
    """A block that was skipped or a value that fell back to its default"""
    code: WarningCode
    block_id: Optional[str]
    message: str


WarningSink = Callable[[CompileWarning], None]
