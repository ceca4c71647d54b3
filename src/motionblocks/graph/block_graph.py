"""
Block Graph - in-memory editor workspace

Holds blocks and their connections, answers connectivity queries and
notifies listeners after each mutation. No compilation logic lives here.
"""

from typing import Any, Callable, Dict, Iterator, List, Optional, Tuple, Union

from motionblocks.models.block import Block
from motionblocks.models.enums import (
    BlockKind,
    BLOCK_VALUE_SLOTS,
    ChangeReason,
    GraphChangeType,
)
from motionblocks.models.errors import GraphConnectionError
from motionblocks.models.events import GraphChangedEvent
from motionblocks.utils.logger import get_logger, LogCategory

log = get_logger().for_category(LogCategory.GRAPH)

ChangeListener = Callable[[GraphChangedEvent], None]


def _coerce_kind(kind: Union[BlockKind, str]) -> Union[BlockKind, str]:
    """Map an editor type string onto BlockKind; keep unknown strings as-is"""
    if isinstance(kind, BlockKind):
        return kind
    try:
        return BlockKind(kind)
    except ValueError:
        return kind


class BlockGraph:
    """
    Editor workspace graph

    Blocks are kept in creation order, which is also the order of
    get_top_blocks(). Every mutating method accepts a `reason` tag and emits
    a GraphChangedEvent to all listeners once the mutation is complete.

    Example:
        graph = BlockGraph()
        start = graph.create_block(BlockKind.START)
        move = graph.create_block(BlockKind.MOVE, fields={"DIRECTION": "moveUp"})
        graph.connect_next(start, move)

        dist = graph.create_block(BlockKind.NUMBER_LITERAL, fields={"VALUE": 2})
        graph.connect_value(move, "DISTANCE", dist)
    """

    def __init__(self):
        self._blocks: Dict[str, Block] = {}
        self._listeners: List[ChangeListener] = []
        self._next_id = 1

    # -----------------------------
    # Listeners
    # -----------------------------

    def add_change_listener(self, listener: ChangeListener) -> None:
        self._listeners.append(listener)

    def remove_change_listener(self, listener: ChangeListener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _emit(self, change: GraphChangeType, block: Optional[Block], reason: ChangeReason) -> None:
        event = GraphChangedEvent(change, block.id if block else None, reason)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                log.error(
                    f"Graph listener failed: {getattr(listener, '__name__', listener)}",
                    change=change.name,
                    error=str(e),
                )

    # -----------------------------
    # Queries
    # -----------------------------

    def get_top_blocks(self) -> List[Block]:
        """Blocks with nothing linking into them, in creation order"""
        return [b for b in self._blocks.values() if b.is_top]

    def get_block(self, block_id: str) -> Optional[Block]:
        return self._blocks.get(block_id)

    def all_blocks(self) -> List[Block]:
        return list(self._blocks.values())

    def chain(self, head: Optional[Block]) -> Iterator[Block]:
        """Iterate a chain from head following `next`"""
        if head is not None:
            yield from head.iter_chain()

    def __len__(self) -> int:
        return len(self._blocks)

    def __contains__(self, block: Block) -> bool:
        return self._blocks.get(block.id) is block

    # -----------------------------
    # Mutations
    # -----------------------------

    def create_block(
        self,
        kind: Union[BlockKind, str],
        fields: Optional[Dict[str, Any]] = None,
        position: Tuple[float, float] = (0.0, 0.0),
        reason: ChangeReason = ChangeReason.USER,
    ) -> Block:
        """Create a detached top block"""
        kind = _coerce_kind(kind)
        block_id = f"block_{self._next_id}"
        self._next_id += 1

        slots = BLOCK_VALUE_SLOTS.get(kind, ()) if isinstance(kind, BlockKind) else ()
        block = Block(
            id=block_id,
            kind=kind,
            fields=dict(fields or {}),
            value_slots={slot: None for slot in slots},
            position=position,
        )
        self._blocks[block_id] = block

        if not isinstance(kind, BlockKind):
            log.debug("Created block of unknown kind", block=block_id, kind=kind)

        self._emit(GraphChangeType.CREATE, block, reason)
        return block

    def connect_next(self, a: Block, b: Block, reason: ChangeReason = ChangeReason.USER) -> None:
        """
        Link b (with its following chain) right after a.

        Whatever followed a is re-attached after the end of b's chain.
        """
        self._require_member(a)
        self._require_member(b)
        if a is b:
            raise GraphConnectionError("Block cannot follow itself", a.id)
        if self._reaches(b, a):
            raise GraphConnectionError(f"Connecting {b.id} after {a.id} would create a cycle", b.id)

        self._detach(b)
        old_next = a.next
        a.next = b
        b.previous = a
        if old_next is not None and old_next is not b:
            tail = b.last_in_chain()
            tail.next = old_next
            old_next.previous = tail

        self._emit(GraphChangeType.MOVE, b, reason)

    def connect_value(
        self,
        block: Block,
        slot: str,
        child: Block,
        reason: ChangeReason = ChangeReason.USER,
    ) -> None:
        """Plug child into a value slot, displacing any previous child to the top level"""
        self._require_member(block)
        self._require_member(child)
        if slot not in block.value_slots:
            raise GraphConnectionError(f"{block.kind_name()} has no value slot {slot!r}", block.id)
        if block is child or self._reaches(child, block):
            raise GraphConnectionError(f"Connecting {child.id} into {block.id} would create a cycle", child.id)

        self._detach(child)
        displaced = block.value_slots.get(slot)
        if displaced is not None and displaced is not child:
            displaced.parent = None
        block.value_slots[slot] = child
        child.parent = block

        self._emit(GraphChangeType.MOVE, child, reason)

    def connect_statement(self, block: Block, head: Block, reason: ChangeReason = ChangeReason.USER) -> None:
        """Put a chain into the statement slot of a REPEAT block"""
        self._require_member(block)
        self._require_member(head)
        if block.kind != BlockKind.REPEAT:
            raise GraphConnectionError(f"{block.kind_name()} has no statement slot", block.id)
        if block is head or self._reaches(head, block):
            raise GraphConnectionError(f"Connecting {head.id} into {block.id} would create a cycle", head.id)

        self._detach(head)
        displaced = block.statement_slot
        if displaced is not None and displaced is not head:
            displaced.parent = None
        block.statement_slot = head
        head.parent = block

        self._emit(GraphChangeType.MOVE, head, reason)

    def disconnect(self, block: Block, reason: ChangeReason = ChangeReason.USER) -> None:
        """Detach block (and its following chain) into a top block"""
        self._require_member(block)
        if block.is_top:
            return
        self._detach(block)
        self._emit(GraphChangeType.MOVE, block, reason)

    def move_block(self, block: Block, x: float, y: float, reason: ChangeReason = ChangeReason.USER) -> None:
        self._require_member(block)
        block.position = (x, y)
        self._emit(GraphChangeType.MOVE, block, reason)

    def set_field(self, block: Block, name: str, value: Any, reason: ChangeReason = ChangeReason.USER) -> None:
        self._require_member(block)
        block.fields[name] = value
        self._emit(GraphChangeType.CHANGE, block, reason)

    def delete_block(self, block: Block, heal: bool = True, reason: ChangeReason = ChangeReason.USER) -> None:
        """
        Delete block together with everything held in its slots.

        Args:
            heal: Reconnect the previous block to the following one. Without
                  healing the following chain becomes a top block.
        """
        self._require_member(block)
        previous, parent, following = block.previous, block.parent, block.next
        was_statement_head = parent is not None and parent.statement_slot is block

        self._detach(block)
        if following is not None:
            block.next = None
            following.previous = None
            if heal and previous is not None:
                previous.next = following
                following.previous = previous
            elif heal and was_statement_head:
                parent.statement_slot = following
                following.parent = parent

        for doomed in self._subtree(block):
            self._blocks.pop(doomed.id, None)

        self._emit(GraphChangeType.DELETE, block, reason)

    def clear(self, reason: ChangeReason = ChangeReason.USER) -> None:
        """Remove every block"""
        self._blocks.clear()
        self._emit(GraphChangeType.CLEAR, None, reason)

    # -----------------------------
    # Internal helpers
    # -----------------------------

    def _require_member(self, block: Block) -> None:
        if block not in self:
            raise GraphConnectionError(f"Block {block.id} does not belong to this graph", block.id)

    def _detach(self, block: Block) -> None:
        """Cut the incoming link of block; its own next chain stays attached"""
        if block.previous is not None:
            block.previous.next = None
            block.previous = None
        if block.parent is not None:
            parent = block.parent
            if parent.statement_slot is block:
                parent.statement_slot = None
            for slot, child in parent.value_slots.items():
                if child is block:
                    parent.value_slots[slot] = None
            block.parent = None

    def _subtree(self, block: Block) -> List[Block]:
        """block plus all slot descendants (not its next chain)"""
        found: List[Block] = []
        stack = [block]
        while stack:
            current = stack.pop()
            found.append(current)
            for child in current.children():
                stack.extend(child.iter_chain())
        return found

    def _reaches(self, start: Block, target: Block) -> bool:
        """True if target is start, follows start, or sits in any slot below them"""
        seen = set()
        stack = [start]
        while stack:
            current = stack.pop()
            if current is target:
                return True
            if id(current) in seen:
                continue
            seen.add(id(current))
            if current.next is not None:
                stack.append(current.next)
            stack.extend(current.children())
        return False
