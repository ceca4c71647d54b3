"""Editor block graph"""

from motionblocks.graph.block_graph import BlockGraph, ChangeListener
from motionblocks.graph.examples import add_block, load_example

__all__ = ["BlockGraph", "ChangeListener", "add_block", "load_example"]
