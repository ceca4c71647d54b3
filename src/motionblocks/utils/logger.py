"""
Structured console logger

One line per message plus an indented detail tree built from keyword
arguments:

    [14:23:45] COMPILER    ⚠ Malformed value, using default
               ├─ block: block_7
               └─ slot: DURATION

Modules bind a category once at import time:

    log = get_logger().for_category(LogCategory.COMPILER)
    log.warn("Malformed value, using default", block=block.id, slot=slot)
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional, TextIO
import sys

from motionblocks.models.enums import LogLevel, LogCategory


# === ANSI COLORS ===
class Colors:
    """ANSI escape codes for colored terminal output"""
    RESET = '\033[0m'
    DIM = '\033[2m'

    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    MAGENTA = '\033[35m'
    CYAN = '\033[36m'
    WHITE = '\033[37m'

    BRIGHT_BLUE = '\033[94m'
    BRIGHT_GREEN = '\033[92m'
    BRIGHT_YELLOW = '\033[93m'
    BRIGHT_MAGENTA = '\033[95m'
    BRIGHT_CYAN = '\033[96m'
    BRIGHT_WHITE = '\033[97m'


CATEGORY_COLORS = {
    LogCategory.CONFIG: Colors.CYAN,
    LogCategory.GRAPH: Colors.BRIGHT_BLUE,
    LogCategory.COMPILER: Colors.BRIGHT_YELLOW,
    LogCategory.DECOMPILER: Colors.BRIGHT_GREEN,
    LogCategory.COORDINATOR: Colors.BRIGHT_CYAN,
    LogCategory.SESSION: Colors.MAGENTA,
    LogCategory.EVENT: Colors.BRIGHT_MAGENTA,
    LogCategory.TASK: Colors.DIM,
    LogCategory.SYSTEM: Colors.BRIGHT_WHITE,
}

# symbol, color, rank
LEVEL_STYLE = {
    LogLevel.DEBUG: ('·', Colors.DIM, 0),
    LogLevel.INFO: ('✓', Colors.GREEN, 1),
    LogLevel.WARN: ('⚠', Colors.YELLOW, 2),
    LogLevel.ERROR: ('✗', Colors.RED, 3),
}

# Width of the longest category name (COORDINATOR)
CATEGORY_WIDTH = max(len(c.name) for c in LogCategory)
DETAIL_INDENT = " " * 11


def format_value(value: Any) -> str:
    """Compact rendering of detail values (enums by name, floats without noise)"""
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, float):
        return f"{value:g}"
    return str(value)


# === CORE LOGGER ===
class Logger:
    """
    Console logger shared by the whole package

    Args:
        min_level: Messages below this level are dropped
        use_colors: ANSI colors (turn off when piping to a file)
        stream: Output stream; sys.stdout is looked up on every write when None
    """

    def __init__(self, min_level: LogLevel = LogLevel.INFO, use_colors: bool = True,
                 stream: Optional[TextIO] = None):
        self.min_level = min_level
        self.use_colors = use_colors
        self.stream = stream

    def is_enabled(self, level: LogLevel) -> bool:
        return LEVEL_STYLE[level][2] >= LEVEL_STYLE[self.min_level][2]

    def _paint(self, text: str, color: str) -> str:
        return f"{color}{text}{Colors.RESET}" if self.use_colors else text

    def _headline(self, category: LogCategory, level: LogLevel, message: str) -> str:
        symbol, color, _ = LEVEL_STYLE[level]
        stamp = datetime.now().strftime('[%H:%M:%S]')
        cat = self._paint(category.name.ljust(CATEGORY_WIDTH), CATEGORY_COLORS.get(category, Colors.WHITE))
        return f"{stamp} {cat} {self._paint(symbol, color)} {self._paint(message, color)}"

    def _detail_lines(self, details: List[str]) -> List[str]:
        lines = []
        for i, detail in enumerate(details):
            branch = "└─" if i == len(details) - 1 else "├─"
            lines.append(f"{DETAIL_INDENT}{self._paint(branch, Colors.DIM)} {detail}")
        return lines

    def _emit(self, lines: List[str]) -> None:
        out = self.stream or sys.stdout
        for line in lines:
            print(line, file=out)

    def log(
        self,
        category: LogCategory,
        message: str,
        level: LogLevel = LogLevel.INFO,
        details: Optional[List[str]] = None,
        **fields: Any,
    ) -> None:
        """
        Write one message

        Args:
            category: Subsystem the message belongs to
            message: Headline text
            level: DEBUG, INFO, WARN or ERROR
            details: Preformatted detail lines
            **fields: Rendered as "key: value" detail lines, in call order
        """
        if not self.is_enabled(level):
            return

        tree = list(details or [])
        tree.extend(f"{key}: {format_value(value)}" for key, value in fields.items())
        self._emit([self._headline(category, level, message)] + self._detail_lines(tree))

    # === Level helpers ===
    def debug(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.DEBUG, **kw)
    def info(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.INFO, **kw)
    def warn(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.WARN, **kw)
    def error(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.ERROR, **kw)

    def for_category(self, category: LogCategory) -> 'BoundLogger':
        return BoundLogger(self, category)


class BoundLogger:
    """
    Logger with a fixed category and optional context fields

    Context fields are appended to the details of every message, e.g. the
    owning session name:

        log = base_log.bind(session="editor")
    """

    def __init__(self, base: Logger, category: LogCategory, context: Optional[Dict[str, Any]] = None):
        self._base = base
        self._category = category
        self._context = dict(context or {})

    def log(self, message: str, level: LogLevel = LogLevel.INFO, category: Optional[LogCategory] = None, **kw):
        if self._context:
            kw = {**kw, **self._context}
        self._base.log(category or self._category, message, level, **kw)

    def debug(self, message: str, **kw): self.log(message, LogLevel.DEBUG, **kw)
    def info(self, message: str, **kw): self.log(message, LogLevel.INFO, **kw)
    def warn(self, message: str, **kw): self.log(message, LogLevel.WARN, **kw)
    def error(self, message: str, **kw): self.log(message, LogLevel.ERROR, **kw)

    def with_category(self, category: LogCategory) -> 'BoundLogger':
        return BoundLogger(self._base, category, self._context)

    def bind(self, **context: Any) -> 'BoundLogger':
        return BoundLogger(self._base, self._category, {**self._context, **context})


# === Global instance helpers ===
_logger = Logger()


def get_logger() -> Logger:
    return _logger


def get_category_logger(category: LogCategory) -> BoundLogger:
    return _logger.for_category(category)


def configure_logger(min_level: LogLevel = LogLevel.INFO, use_colors: bool = True) -> None:
    """
    Reconfigure the shared logger in place.

    Bound loggers created at import time hold a reference to the same
    instance, so they pick up the new settings.
    """
    _logger.min_level = min_level
    _logger.use_colors = use_colors
