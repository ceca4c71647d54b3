"""Block graph notifications"""

from dataclasses import dataclass
from typing import Optional

from motionblocks.models.events.base import Event
from motionblocks.models.events.types import EventType
from motionblocks.models.events.sources import EventSource
from motionblocks.models.enums import ChangeCategory, ChangeReason, GraphChangeType


_VALUE_CHANGES = frozenset({GraphChangeType.CHANGE})


@dataclass(init=False)
class GraphChangedEvent(Event):
    """Emitted by BlockGraph after every mutation"""
    change: GraphChangeType
    block_id: Optional[str]
    reason: ChangeReason

    def __init__(
        self,
        change: GraphChangeType,
        block_id: Optional[str] = None,
        reason: ChangeReason = ChangeReason.USER,
    ):
        """
        Args:
            change: CREATE, DELETE, MOVE, CHANGE or CLEAR
            block_id: Block the mutation applies to (None for CLEAR)
            reason: USER for direct manipulation, PROGRAMMATIC otherwise
        """
        super().__init__(type=EventType.GRAPH_CHANGED, source=EventSource.GRAPH)
        self.change = change
        self.block_id = block_id
        self.reason = reason

    @property
    def category(self) -> ChangeCategory:
        """STRUCTURAL for create/delete/move/clear, VALUE for field edits"""
        if self.change in _VALUE_CHANGES:
            return ChangeCategory.VALUE
        return ChangeCategory.STRUCTURAL

    @property
    def is_programmatic(self) -> bool:
        return self.reason == ChangeReason.PROGRAMMATIC
