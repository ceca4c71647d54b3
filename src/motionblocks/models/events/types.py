from enum import Enum, auto


class EventType(Enum):
    # Graph (synchronous listener notifications)
    GRAPH_CHANGED = auto()

    # Program
    PROGRAM_CHANGED = auto()
    PROGRAM_INSTALLED = auto()

    # Playback requests (host side)
    PLAYBACK_REQUESTED = auto()
    PLAYBACK_STOP_REQUESTED = auto()
    PLAYBACK_RESET_REQUESTED = auto()
    EMPTY_PROGRAM = auto()
