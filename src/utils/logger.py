"""
Console logger for the effects runtime

One line per record, details as a tree below it:

    [14:23:45] RESOLVER  ⚠ Attribute rejected, default kept
               ├─ key: threshold
               └─ raw: abc

A sink (host console bridge, test capture) receives every emitted record as
(timestamp, level, category, "message (k: v, ...)").
"""

from datetime import datetime
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from models.enums import LogLevel, LogCategory

LogSink = Callable[[str, str, str, str], None]

RESET = '\033[0m'
DIM = '\033[2m'

CATEGORY_COLORS = {
    LogCategory.CONFIG: '\033[36m',
    LogCategory.RESOLVER: '\033[96m',
    LogCategory.REGISTRY: '\033[94m',
    LogCategory.CLASSES: '\033[34m',
    LogCategory.SAMPLING: '\033[93m',
    LogCategory.EVENT: '\033[95m',
    LogCategory.EFFECT: '\033[92m',
    LogCategory.STYLE: '\033[35m',
    LogCategory.HOST: '\033[37m',
    LogCategory.SYSTEM: '\033[97m',
}

# level -> (priority, symbol, colour)
LEVELS = {
    LogLevel.DEBUG: (0, '·', DIM),
    LogLevel.INFO: (1, '✓', '\033[32m'),
    LogLevel.WARN: (2, '⚠', '\033[33m'),
    LogLevel.ERROR: (3, '✗', '\033[31m'),
}

DETAIL_INDENT = " " * 11


def format_value(value: Any) -> str:
    """Render a detail value: enums by name, sequences comma-joined"""
    if isinstance(value, Enum):
        return value.name
    if isinstance(value, (list, tuple, set)):
        return ", ".join(format_value(v) for v in value)
    return str(value)


class Logger:
    """
    Structured logger with compact output format

    Example:
        logger.log(LogCategory.REGISTRY, "Instance created", effect="text-cursor", count=3)
    """

    def __init__(self, min_level: LogLevel = LogLevel.INFO, use_colors: bool = True):
        self.min_level = min_level
        self.use_colors = use_colors
        self._sink: Optional[LogSink] = None

    def enabled_for(self, level: LogLevel) -> bool:
        return LEVELS[level][0] >= LEVELS[self.min_level][0]

    def _paint(self, text: str, color: str) -> str:
        return f"{color}{text}{RESET}" if self.use_colors else text

    def set_sink(self, sink: Optional[LogSink]) -> None:
        """Attach an extra consumer for every emitted record; None detaches"""
        self._sink = sink

    def log(
        self,
        category: LogCategory,
        message: str,
        level: LogLevel = LogLevel.INFO,
        details: Optional[List[str]] = None,
        **kwargs
    ):
        if not self.enabled_for(level):
            return

        now = datetime.now()
        _, symbol, color = LEVELS[level]
        lines = list(details or [])
        lines.extend(f"{k}: {format_value(v)}" for k, v in kwargs.items())

        print(
            f"{now.strftime('[%H:%M:%S]')} "
            f"{self._paint(category.name.ljust(9), CATEGORY_COLORS.get(category, ''))} "
            f"{self._paint(symbol, color)} {self._paint(message, color)}"
        )
        for i, line in enumerate(lines):
            branch = "└─" if i == len(lines) - 1 else "├─"
            print(f"{DETAIL_INDENT}{self._paint(branch, DIM)} {line}")

        if self._sink:
            text = f"{message} ({', '.join(lines)})" if lines else message
            self._sink(now.isoformat(), level.name, category.name, text)

    def debug(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.DEBUG, **kw)
    def info(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.INFO, **kw)
    def warn(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.WARN, **kw)
    def error(self, category: LogCategory, message: str, **kw): self.log(category, message, LogLevel.ERROR, **kw)

    def for_category(self, category: LogCategory) -> 'BoundLogger':
        """Logger bound to one category"""
        return BoundLogger(self, category)


class BoundLogger:
    """
    Logger bound to a category and optional context details

    Context details (e.g. the effect name) are printed before the details of
    each call.

    Example:
        log = get_logger().for_category(LogCategory.EFFECT).bind(effect="ripple-button")
        log.info("Initialized")   # └─ effect: ripple-button
    """

    def __init__(self, base: Logger, category: LogCategory, context: Optional[Dict[str, Any]] = None):
        self._base = base
        self._category = category
        self._context = dict(context or {})

    def log(self, message: str, level: LogLevel = LogLevel.INFO, category: Optional[LogCategory] = None, **kw):
        details = {**self._context, **kw}
        self._base.log(category or self._category, message, level, **details)

    def debug(self, message: str, **kw): self.log(message, LogLevel.DEBUG, **kw)
    def info(self, message: str, **kw): self.log(message, LogLevel.INFO, **kw)
    def warn(self, message: str, **kw): self.log(message, LogLevel.WARN, **kw)
    def error(self, message: str, **kw): self.log(message, LogLevel.ERROR, **kw)

    def bind(self, **context) -> 'BoundLogger':
        return BoundLogger(self._base, self._category, {**self._context, **context})


_logger = Logger()


def get_logger() -> Logger:
    return _logger


def configure_logger(min_level: LogLevel = LogLevel.INFO, use_colors: bool = True):
    """
    Configure the logger singleton in place.

    Bound loggers created at import time and the attached sink stay valid.
    """
    _logger.min_level = min_level
    _logger.use_colors = use_colors
