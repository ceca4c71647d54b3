"""
Exceptions raised at the edges of the compiler

Compilation itself never raises; these cover misuse of the graph API and
malformed program records handed in by the host.
"""

from typing import Optional


class MotionBlocksError(Exception):
    """Base class for all motionblocks errors"""


class GraphConnectionError(MotionBlocksError, ValueError):
    """
    Invalid graph connection.

    Raised when a connection would create a cycle, link a block to itself,
    target a slot the block does not have, or mix blocks of two graphs.
    """

    def __init__(self, message: str, block_id: Optional[str] = None):
        super().__init__(message)
        self.block_id = block_id


class ProgramFormatError(MotionBlocksError, ValueError):
    """Step records could not be turned into a program"""

    def __init__(self, message: str, errors: Optional[list] = None):
        super().__init__(message)
        self.errors = errors or []
