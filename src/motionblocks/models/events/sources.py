from enum import Enum, auto


class EventSource(Enum):
    """Event source identifiers"""
    GRAPH = auto()          # Block graph mutations
    COORDINATOR = auto()    # Change coordinator (compile / decompile)
    SESSION = auto()        # Editor session (host requests)
