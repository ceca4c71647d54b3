"""
Editor configuration model

Timing and policy knobs of an editor session, parsed from YAML by
ConfigManager.
"""

from dataclasses import dataclass
from typing import Tuple

from motionblocks.models.enums import LogLevel, StepIdStrategy


@dataclass(frozen=True)
class EditorConfig:
    """Immutable editor configuration"""
    debounce_ms: float = 200.0           # quiet time before recompiling
    grace_ms: float = 100.0              # suppression tail after a decompile
    decompile_delay_ms: float = 100.0    # deferral before a host decompile runs
    ignore_programmatic_changes: bool = False
    step_ids: StepIdStrategy = StepIdStrategy.RANDOM
    start_anchor: Tuple[float, float] = (20.0, 20.0)
    log_level: LogLevel = LogLevel.INFO
    log_colors: bool = True

    @property
    def debounce_s(self) -> float:
        return self.debounce_ms / 1000

    @property
    def grace_s(self) -> float:
        return self.grace_ms / 1000

    @property
    def decompile_delay_s(self) -> float:
        return self.decompile_delay_ms / 1000
