"""Leveled logger injected into the analysis components."""

import logging
from enum import IntEnum
from typing import Optional


class LogLevel(IntEnum):
    OFF, ERROR, WARNING, INFO, DEBUG = -1, 0, 1, 2, 3


_STDLIB_LEVELS = {
    LogLevel.ERROR: logging.ERROR,
    LogLevel.WARNING: logging.WARNING,
    LogLevel.INFO: logging.INFO,
    LogLevel.DEBUG: logging.DEBUG,
}


class AnalysisLogger:
    """Thin wrapper over the ``logging`` module with a verbosity threshold."""

    def __init__(self, level: LogLevel = LogLevel.INFO, name: str = "irscan",
                 log_file: Optional[str] = None):
        """Initialize the logger.

        Args:
            level: Highest level that is forwarded; ``LogLevel.OFF`` silences everything
            name: Name of the underlying ``logging`` logger
            log_file: Optional file that also receives the records
        """
        self.level = level
        self.logger = logging.getLogger(name)
        if log_file:
            handler = logging.FileHandler(log_file, encoding='utf-8')
            handler.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
            self.logger.addHandler(handler)

    def log(self, message: str, level: LogLevel = LogLevel.INFO) -> None:
        if level == LogLevel.OFF or level > self.level:
            return
        self.logger.log(_STDLIB_LEVELS[level], message)

    def log_error(self, message: str) -> None:
        self.log(message, level=LogLevel.ERROR)
