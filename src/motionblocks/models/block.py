"""
Block domain model

A block is one node of the editor graph. Blocks are plain data; all
mutation goes through BlockGraph so that notifications are emitted.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, Optional, Tuple, Union

from motionblocks.models.enums import BlockKind


@dataclass(eq=False)
class Block:
    """
    Editor block

    Attributes:
        id: Unique within its graph
        kind: BlockKind, or the raw type string of a block the compiler does not know
        fields: Field name -> primitive value (DIRECTION, AXIS, TYPE, VALUE)
        value_slots: Slot name -> attached child block (or None)
        statement_slot: Head of the nested chain (REPEAT only)
        next: Following block in the chain
        previous: Preceding block in the chain
        parent: Block whose value/statement slot holds this block
        position: Workspace coordinates (meaningful for top blocks)
    """
    id: str
    kind: Union[BlockKind, str]
    fields: Dict[str, Any] = field(default_factory=dict)
    value_slots: Dict[str, Optional["Block"]] = field(default_factory=dict)
    statement_slot: Optional["Block"] = None
    next: Optional["Block"] = None
    previous: Optional["Block"] = None
    parent: Optional["Block"] = None
    position: Tuple[float, float] = (0.0, 0.0)

    @property
    def is_top(self) -> bool:
        """True when nothing links into this block"""
        return self.previous is None and self.parent is None

    def get_field(self, name: str, default: Any = None) -> Any:
        return self.fields.get(name, default)

    def get_slot_target(self, slot: str) -> Optional["Block"]:
        """Child attached to a value slot (None when empty or unknown)"""
        return self.value_slots.get(slot)

    def iter_chain(self) -> Iterator["Block"]:
        """This block and every block after it"""
        block: Optional[Block] = self
        while block is not None:
            yield block
            block = block.next

    def last_in_chain(self) -> "Block":
        block = self
        while block.next is not None:
            block = block.next
        return block

    def children(self) -> Iterator["Block"]:
        """Blocks directly held in slots (value children, then statement head)"""
        for child in self.value_slots.values():
            if child is not None:
                yield child
        if self.statement_slot is not None:
            yield self.statement_slot

    def kind_name(self) -> str:
        return self.kind.name if isinstance(self.kind, BlockKind) else str(self.kind)

    def __repr__(self) -> str:
        return f"Block(id={self.id!r}, kind={self.kind_name()}, fields={self.fields!r})"
