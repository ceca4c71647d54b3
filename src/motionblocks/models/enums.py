"""
Enums for the block editor compiler
"""

from enum import Enum, auto


class BlockKind(Enum):
    """
    Block types known to the compiler.

    Values are the editor's block type names, so a block created from the
    editor's own type string maps straight onto a member.
    """
    START = "animation_start"
    MOVE = "move_animation"
    ROTATE = "rotate_animation"
    SCALE = "scale_animation"
    PAUSE = "pause_animation"
    REPEAT = "repeat_animation"
    NUMBER_LITERAL = "number_value"


class StepKind(Enum):
    """Animation step tags (values are the wire tags)"""
    MOVE_UP = "moveUp"
    MOVE_DOWN = "moveDown"
    MOVE_LEFT = "moveLeft"
    MOVE_RIGHT = "moveRight"
    MOVE_FORWARD = "moveForward"
    MOVE_BACKWARD = "moveBackward"
    ROTATE_X = "rotateX"
    ROTATE_Y = "rotateY"
    ROTATE_Z = "rotateZ"
    SCALE_UP = "scaleUp"
    SCALE_DOWN = "scaleDown"
    PAUSE = "pause"


MOVE_KINDS = frozenset({
    StepKind.MOVE_UP,
    StepKind.MOVE_DOWN,
    StepKind.MOVE_LEFT,
    StepKind.MOVE_RIGHT,
    StepKind.MOVE_FORWARD,
    StepKind.MOVE_BACKWARD,
})
ROTATE_KINDS = frozenset({StepKind.ROTATE_X, StepKind.ROTATE_Y, StepKind.ROTATE_Z})
SCALE_KINDS = frozenset({StepKind.SCALE_UP, StepKind.SCALE_DOWN})


class BlockField:
    """Field names used on editor blocks"""
    DIRECTION = "DIRECTION"   # MOVE
    AXIS = "AXIS"             # ROTATE
    TYPE = "TYPE"             # SCALE
    VALUE = "VALUE"           # NUMBER_LITERAL


class ValueSlot:
    """Value input names used on editor blocks"""
    DISTANCE = "DISTANCE"
    DURATION = "DURATION"
    ANGLE = "ANGLE"
    SCALE = "SCALE"
    TIMES = "TIMES"


# Value inputs each block kind exposes
BLOCK_VALUE_SLOTS = {
    BlockKind.START: (),
    BlockKind.MOVE: (ValueSlot.DISTANCE, ValueSlot.DURATION),
    BlockKind.ROTATE: (ValueSlot.ANGLE, ValueSlot.DURATION),
    BlockKind.SCALE: (ValueSlot.SCALE, ValueSlot.DURATION),
    BlockKind.PAUSE: (ValueSlot.DURATION,),
    BlockKind.REPEAT: (ValueSlot.TIMES,),
    BlockKind.NUMBER_LITERAL: (),
}


class ChangeCategory(Enum):
    """Classification of a graph notification"""
    STRUCTURAL = auto()   # create / delete / move / clear
    VALUE = auto()        # field edit


class GraphChangeType(Enum):
    """What kind of mutation produced a graph notification"""
    CREATE = auto()
    DELETE = auto()
    MOVE = auto()
    CHANGE = auto()
    CLEAR = auto()


class ChangeReason(Enum):
    """
    Advisory origin tag of a graph mutation.

    Reason tags are never used to prevent feedback loops; the coordinator's
    SUPPRESSED state does that.
    """
    USER = auto()           # direct manipulation in the editor
    PROGRAMMATIC = auto()   # graph built by code (decompile, examples)


class CoordinatorState(Enum):
    """Change coordinator states"""
    IDLE = auto()
    SUPPRESSED = auto()


class WarningCode(Enum):
    """Recoverable problems found while compiling"""
    MALFORMED_VALUE = auto()
    UNKNOWN_BLOCK_KIND = auto()
    INVALID_FIELD = auto()
    NESTED_START = auto()
    MULTIPLE_STARTS = auto()


class StepIdStrategy(Enum):
    """How compiled steps get their ids"""
    RANDOM = "random"           # fresh uuid every compilation
    POSITIONAL = "positional"   # derived from index + kind, stable across edits


class LogLevel(Enum):
    """Log severity levels"""
    DEBUG = auto()
    INFO = auto()
    WARN = auto()
    ERROR = auto()


class LogCategory(Enum):
    """Log categories for grouping related events"""
    CONFIG = auto()       # Configuration loading, validation
    GRAPH = auto()        # Block graph mutations
    COMPILER = auto()     # Graph -> program
    DECOMPILER = auto()   # Program -> graph
    COORDINATOR = auto()  # Debounce, suppression
    SESSION = auto()      # Host-facing editor session
    EVENT = auto()        # Event bus events and handling
    TASK = auto()         # Timer tasks
    SYSTEM = auto()       # Startup, shutdown, errors

    GENERAL = auto()      # Default general category
