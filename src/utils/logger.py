"""
Structured category logger

Compact one-line records with optional key/value detail lines:

    [14:23:45] RELAY     ✓ Relayed desk.top <- ff00ff
               ├─ source: UDP
               └─ zone: top

Every module binds its own category once at import time:

    log = get_logger().for_category(LogCategory.RELAY)
    log.info("Broadcast fff to 3/3 devices")

The process-wide Logger is reconfigured in place by configure_logger(), so
bound loggers pick up the level from the `logging` config section.
"""

from datetime import datetime
from typing import Any, Dict, List, Optional
from models.enums import LogLevel, LogCategory


# === ANSI COLORS ===
class Colors:
    """ANSI escape codes for colored terminal output"""
    RESET = '\033[0m'
    DIM = '\033[2m'

    RED = '\033[31m'
    GREEN = '\033[32m'
    YELLOW = '\033[33m'
    BLUE = '\033[34m'
    MAGENTA = '\033[35m'
    CYAN = '\033[36m'
    WHITE = '\033[37m'

    BRIGHT_GREEN = '\033[92m'
    BRIGHT_YELLOW = '\033[93m'
    BRIGHT_BLUE = '\033[94m'
    BRIGHT_MAGENTA = '\033[95m'
    BRIGHT_CYAN = '\033[96m'
    BRIGHT_WHITE = '\033[97m'


CATEGORY_COLORS: Dict[LogCategory, str] = {
    LogCategory.RELAY: Colors.BRIGHT_MAGENTA,
    LogCategory.INGRESS: Colors.BRIGHT_GREEN,
    LogCategory.DISCOVERY: Colors.BRIGHT_YELLOW,
    LogCategory.REGISTRY: Colors.BRIGHT_CYAN,
    LogCategory.CODEC: Colors.BLUE,
    LogCategory.CONFIG: Colors.CYAN,
    LogCategory.EVENT: Colors.MAGENTA,
    LogCategory.API: Colors.BRIGHT_BLUE,
    LogCategory.SOCKETIO: Colors.BRIGHT_BLUE,
    LogCategory.SYSTEM: Colors.BRIGHT_WHITE,
}

LEVEL_STYLE = {
    LogLevel.DEBUG: ('·', Colors.DIM),
    LogLevel.INFO: ('✓', Colors.GREEN),
    LogLevel.WARN: ('⚠', Colors.YELLOW),
    LogLevel.ERROR: ('✗', Colors.RED),
}

LEVEL_ORDER = [LogLevel.DEBUG, LogLevel.INFO, LogLevel.WARN, LogLevel.ERROR]

CATEGORY_WIDTH = 9
DETAIL_INDENT = " " * 11


# === CORE LOGGER ===
class Logger:
    """
    Print-based structured logger.

    Args:
        min_level: records below this level are discarded
        use_colors: ANSI colors (turn off for log files and tests)
    """

    def __init__(self, min_level: LogLevel = LogLevel.INFO, use_colors: bool = True):
        self.min_level = min_level
        self.use_colors = use_colors

    def _enabled(self, level: LogLevel) -> bool:
        return LEVEL_ORDER.index(level) >= LEVEL_ORDER.index(self.min_level)

    def _paint(self, text: str, color: str) -> str:
        return f"{color}{text}{Colors.RESET}" if self.use_colors else text

    def _headline(self, category: LogCategory, level: LogLevel, message: str) -> str:
        symbol, color = LEVEL_STYLE[level]
        timestamp = datetime.now().strftime('[%H:%M:%S]')
        cat = self._paint(category.name.ljust(CATEGORY_WIDTH), CATEGORY_COLORS.get(category, Colors.WHITE))
        return f"{timestamp} {cat} {self._paint(symbol, color)} {self._paint(message, color)}"

    def _detail_lines(self, details: List[str]) -> List[str]:
        lines = []
        for i, detail in enumerate(details):
            branch = "└─" if i == len(details) - 1 else "├─"
            lines.append(f"{DETAIL_INDENT}{self._paint(branch, Colors.DIM)} {detail}")
        return lines

    def log(
        self,
        category: LogCategory,
        message: str,
        level: LogLevel = LogLevel.INFO,
        details: Optional[list] = None,
        **kwargs: Any
    ):
        """
        Emit one record.

        `details` are printed verbatim, keyword arguments as `key: value`,
        both as tree lines under the headline.
        """
        if not self._enabled(level):
            return

        all_details = list(details or []) + [f"{k}: {v}" for k, v in kwargs.items()]
        print(self._headline(category, level, message))
        for line in self._detail_lines(all_details):
            print(line)

    # === Level helpers ===
    def debug(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.DEBUG, **kw)
    def info(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.INFO, **kw)
    def warn(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.WARN, **kw)
    def error(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.ERROR, **kw)

    def for_category(self, category: LogCategory) -> 'BoundLogger':
        """Return a contextual logger bound to a specific category."""
        return BoundLogger(self, category)


class BoundLogger:
    """Logger bound to a default category."""

    def __init__(self, base: Logger, category: LogCategory):
        self._base = base
        self._category = category

    def log(self, message: str, level: LogLevel = LogLevel.INFO, category: Optional[LogCategory] = None, **kw):
        self._base.log(category or self._category, message, level, **kw)

    def debug(self, message: str, **kw): self.log(message, LogLevel.DEBUG, **kw)
    def info(self, message: str, **kw): self.log(message, LogLevel.INFO, **kw)
    def warn(self, message: str, **kw): self.log(message, LogLevel.WARN, **kw)
    def error(self, message: str, **kw): self.log(message, LogLevel.ERROR, **kw)

    def with_category(self, category: LogCategory) -> 'BoundLogger':
        return BoundLogger(self._base, category)


# === Global instance helpers ===
_logger = Logger()


def get_logger() -> Logger:
    return _logger


def configure_logger(min_level: LogLevel = LogLevel.INFO, use_colors: bool = True):
    """Reconfigure the process-wide logger in place."""
    _logger.min_level = min_level
    _logger.use_colors = use_colors
