"""
Example workspace

The demo chain the editor loads from its "example" button:
START → move up 2 (1s) → rotate Y 180° (2s) → scale up 1.5 (1s)
"""

from typing import Dict, Optional

from motionblocks.graph.block_graph import BlockGraph
from motionblocks.models.block import Block
from motionblocks.models.enums import BlockKind, BlockField, ValueSlot, ChangeReason


def _literal_block(graph: BlockGraph, parent: Block, slot: str, value: float, reason: ChangeReason) -> None:
    literal = graph.create_block(BlockKind.NUMBER_LITERAL, fields={BlockField.VALUE: value}, reason=reason)
    graph.connect_value(parent, slot, literal, reason=reason)


def add_block(
    graph: BlockGraph,
    kind: BlockKind,
    fields: Optional[Dict[str, object]] = None,
    values: Optional[Dict[str, float]] = None,
    after: Optional[Block] = None,
    reason: ChangeReason = ChangeReason.USER,
) -> Block:
    """Create a block, plug literal children into its slots and chain it after `after`"""
    block = graph.create_block(kind, fields=fields, reason=reason)
    for slot, value in (values or {}).items():
        _literal_block(graph, block, slot, value, reason)
    if after is not None:
        graph.connect_next(after, block, reason=reason)
    return block


def load_example(graph: BlockGraph, reason: ChangeReason = ChangeReason.PROGRAMMATIC) -> Block:
    """Replace the graph content with the demo chain; returns the START block"""
    graph.clear(reason=reason)

    start = graph.create_block(BlockKind.START, position=(20.0, 20.0), reason=reason)
    move = add_block(
        graph, BlockKind.MOVE,
        fields={BlockField.DIRECTION: "moveUp"},
        values={ValueSlot.DISTANCE: 2, ValueSlot.DURATION: 1},
        after=start, reason=reason,
    )
    rotate = add_block(
        graph, BlockKind.ROTATE,
        fields={BlockField.AXIS: "rotateY"},
        values={ValueSlot.ANGLE: 180, ValueSlot.DURATION: 2},
        after=move, reason=reason,
    )
    add_block(
        graph, BlockKind.SCALE,
        fields={BlockField.TYPE: "scaleUp"},
        values={ValueSlot.SCALE: 1.5, ValueSlot.DURATION: 1},
        after=rotate, reason=reason,
    )
    return start
