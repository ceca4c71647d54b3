"""
Value Resolver

Reads numeric parameters from the literal blocks plugged into a block's
value slots. Resolution never raises: anything unusable becomes the
caller's default, which keeps the compiler total over malformed graphs.
"""

import math
from numbers import Real
from typing import Any, Optional

from motionblocks.compiler.diagnostics import CompileWarning, WarningSink
from motionblocks.models.block import Block
from motionblocks.models.enums import BlockKind, BlockField, WarningCode
from motionblocks.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.COMPILER)


def parse_number(value: Any) -> Optional[float]:
    """
    Parse a literal field value as a finite float.

    Accepts ints, floats and numeric strings; rejects booleans, NaN and
    infinities. Returns None when the value is unusable.
    """
    if isinstance(value, bool):
        return None
    if isinstance(value, Real):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    return number if math.isfinite(number) else None


class ValueResolver:
    """
    Resolves slot values with default substitution

    Args:
        sink: Optional callback receiving a CompileWarning per substitution
    """

    def __init__(self, sink: Optional[WarningSink] = None):
        self._sink = sink

    def resolve(self, block: Block, slot: str, default: float) -> float:
        child = block.get_slot_target(slot)

        if child is None:
            return self._fallback(block, slot, default, "slot is empty")
        if child.kind != BlockKind.NUMBER_LITERAL:
            return self._fallback(block, slot, default, f"slot holds {child.kind_name()}, not a number")

        number = parse_number(child.get_field(BlockField.VALUE))
        if number is None:
            return self._fallback(
                block, slot, default,
                f"literal value {child.get_field(BlockField.VALUE)!r} is not a finite number",
            )
        return number

    def _fallback(self, block: Block, slot: str, default: float, why: str) -> float:
        log.warn("Malformed value, using default", block=block.id, slot=slot, default=default, reason=why)
        if self._sink is not None:
            self._sink(CompileWarning(
                code=WarningCode.MALFORMED_VALUE,
                block_id=block.id,
                message=f"{slot}: {why}",
            ))
        return default


_default_resolver = ValueResolver()


def resolve(block: Block, slot: str, default: float) -> float:
    """Module-level shortcut using a resolver without a warning sink"""
    return _default_resolver.resolve(block, slot, default)
