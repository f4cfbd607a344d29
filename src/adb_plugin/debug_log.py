"""In-memory debug logging.

Every plugin dispatch and every stdlib ``logging`` record lands in a bounded
ring buffer. ``adb-plugin call --debug`` prints it afterwards and
``adb-plugin serve --export-log`` writes it to a file on exit, so no log file
has to be configured up front.
"""

from __future__ import annotations

import logging
import time
from collections import deque
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import TYPE_CHECKING, Any

from adb_plugin.limits import MAX_LOG_LINES, MAX_LOG_MESSAGE_LENGTH

if TYPE_CHECKING:
    from pathlib import Path


class LogSource(Enum):
    """Source of the log entry."""

    PLUGIN = "PLUGIN"
    LOGGING = "LOGGING"


@dataclass(slots=True)
class LogEntry:
    """A captured log entry."""

    group: str  # Level name (DEBUG, INFO, WARNING, ERROR)
    message: str
    timestamp: float
    source: LogSource

    def format(self) -> str:
        ts = datetime.fromtimestamp(self.timestamp).strftime("%Y-%m-%d %H:%M:%S.%f")[:-3]
        source = "[PY]" if self.source == LogSource.LOGGING else "[PL]"
        return f"{ts} {source} [{self.group}] {self.message}"


log_buffer: deque[LogEntry] = deque(maxlen=MAX_LOG_LINES)

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
}


class PluginLogger:
    """Simple logger that captures plugin messages for later viewing."""

    def __init__(self) -> None:
        self.level = logging.INFO

    def __call__(self, *args: object, **kwargs: Any) -> None:
        """Log at INFO level (default)."""
        self.info(*args, **kwargs)

    def _log(self, level: str, *args: object, **kwargs: Any) -> None:
        if LEVELS[level] < self.level:
            return

        output = " ".join(str(arg) for arg in args)
        if kwargs:
            key_values = " ".join(f"{key}={value!r}" for key, value in kwargs.items())
            output = f"{output} {key_values}" if output else key_values

        if len(output) > MAX_LOG_MESSAGE_LENGTH:
            output = output[:MAX_LOG_MESSAGE_LENGTH] + "... [truncated]"

        log_buffer.append(
            LogEntry(group=level, message=output, timestamp=time.time(), source=LogSource.PLUGIN)
        )

    def debug(self, *args: object, **kwargs: Any) -> None:
        """Log at DEBUG level."""
        self._log("DEBUG", *args, **kwargs)

    def info(self, *args: object, **kwargs: Any) -> None:
        """Log at INFO level."""
        self._log("INFO", *args, **kwargs)

    def warning(self, *args: object, **kwargs: Any) -> None:
        """Log at WARNING level."""
        self._log("WARNING", *args, **kwargs)

    def error(self, *args: object, **kwargs: Any) -> None:
        """Log at ERROR level."""
        self._log("ERROR", *args, **kwargs)


class DebugLogHandler(logging.Handler):
    """Logging handler that captures records from other libraries into the buffer."""

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            log_buffer.append(
                LogEntry(
                    group=record.levelname,
                    message=msg,
                    timestamp=record.created,
                    source=LogSource.LOGGING,
                )
            )
        except Exception:
            self.handleError(record)


_debug_logging_initialized: bool = False


def setup_debug_logging(level: str = "INFO") -> None:
    """Attach the buffer handler to the root logger and set both log levels.

    Idempotent: later calls only adjust the level.
    """
    global _debug_logging_initialized

    log.level = LEVELS.get(level.upper(), logging.INFO)
    logging.getLogger().setLevel(log.level)
    if _debug_logging_initialized:
        return

    handler = DebugLogHandler()
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logging.getLogger().addHandler(handler)

    _debug_logging_initialized = True
    log.debug("Debug logging initialized")


def clear_log_buffer() -> None:
    """Clear the log buffer."""
    log_buffer.clear()


def format_log_buffer() -> list[str]:
    """Render every buffered entry as a single line."""
    return [entry.format() for entry in log_buffer]


def export_logs_to_file(file_path: Path) -> int:
    """Export all logs from the buffer to a file.

    Args:
        file_path: Path to write the log file to

    Returns:
        Number of log entries written
    """
    file_path.parent.mkdir(parents=True, exist_ok=True)
    lines = format_log_buffer()
    with file_path.open("w", encoding="utf-8") as f:
        f.write("# adb-plugin debug log export\n")
        f.write(f"# Total entries: {len(lines)}\n\n")
        for line in lines:
            f.write(f"{line}\n")
    return len(lines)


log = PluginLogger()
