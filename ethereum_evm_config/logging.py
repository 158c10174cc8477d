"""
Logging configuration shared by the configuration layers and the command-line tools.

Provides a logger class with an additional VERBOSE level, UTC timestamp formatting and
an optional colored stdout handler.
"""

import logging
import sys
from datetime import datetime, timezone
from logging import LogRecord
from pathlib import Path
from typing import Any, ClassVar, Optional, Union, cast

# Custom log levels
VERBOSE_LEVEL = 15  # Between DEBUG (10) and INFO (20)

logging.addLevelName(VERBOSE_LEVEL, "VERBOSE")


class EvmLogger(logging.Logger):
    """Define custom log levels via a dedicated Logger class."""

    def verbose(
        self,
        msg: object,
        *args: Any,
        exc_info: Union[BaseException, bool, None] = None,
        stack_info: bool = False,
        stacklevel: int = 1,
        extra: Optional[dict[str, Any]] = None,
    ) -> None:
        """
        Log a message with VERBOSE level severity (15).

        This level is between DEBUG (10) and INFO (20), intended for messages
        more detailed than INFO but less verbose than DEBUG.
        """
        if self.isEnabledFor(VERBOSE_LEVEL):
            self._log(VERBOSE_LEVEL, msg, args, exc_info, extra, stack_info, stacklevel)


logging.setLoggerClass(EvmLogger)


def get_logger(name: str) -> EvmLogger:
    """Get a properly-typed logger with the custom logging levels."""
    return cast(EvmLogger, logging.getLogger(name))


logger = get_logger(__name__)


class UTCFormatter(logging.Formatter):
    """Log formatter that formats UTC timestamps with milliseconds and +00:00 suffix."""

    def formatTime(self, record, datefmt=None):  # noqa: D102,N802  # camelcase required
        dt = datetime.fromtimestamp(record.created, tz=timezone.utc)
        return dt.strftime("%Y-%m-%d %H:%M:%S.%f")[:-3] + "+00:00"


class ColorFormatter(UTCFormatter):
    """Formatter that adds ANSI color codes to log level names for terminal output."""

    running_in_docker: ClassVar[bool] = Path("/.dockerenv").exists()

    COLORS = {
        logging.DEBUG: "\033[37m",  # Gray
        VERBOSE_LEVEL: "\033[36m",  # Cyan
        logging.INFO: "\033[36m",  # Cyan
        logging.WARNING: "\033[33m",  # Yellow
        logging.ERROR: "\033[31m",  # Red
        logging.CRITICAL: "\033[41m",  # Red background
    }
    RESET = "\033[0m"

    def format(self, record: LogRecord) -> str:
        """Apply colorful formatting only when not running in Docker."""
        record_copy = logging.makeLogRecord(record.__dict__)
        if not self.running_in_docker:
            color = self.COLORS.get(record_copy.levelno, self.RESET)
            record_copy.levelname = f"{color}{record_copy.levelname}{self.RESET}"
        return super().format(record_copy)


class LogLevel:
    """Help parse a log-level provided on the command-line."""

    @classmethod
    def from_cli(cls, value: str) -> int:
        """
        Parse a logging level from CLI.

        Accepts standard level names (e.g. 'INFO', 'debug') or numeric values.
        """
        try:
            return int(value)
        except ValueError:
            pass

        level_name = value.upper()
        levels = logging.getLevelNamesMapping()
        if level_name in levels:
            return levels[level_name]

        valid = ", ".join(levels.keys())
        raise ValueError(f"Invalid log level '{value}'. Expected one of: {valid} or a number.")


def configure_logging(
    log_level: Union[int, str] = "INFO",
    log_file: Optional[Union[str, Path]] = None,
    log_to_stdout: bool = True,
    log_format: str = "%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    use_color: Optional[bool] = None,
) -> Optional[logging.FileHandler]:
    """
    Configure the root logger with the custom log levels and formatters.

    Args:
        log_level: The logging level to use (name or numeric value)
        log_file: Path to the log file (if None, no file logging is set up)
        log_to_stdout: Whether to log to stdout
        log_format: The log format string
        use_color: Whether to use colors in stdout output (auto-detected if None)

    Returns:
        The file handler if log_file is provided, otherwise None

    """
    root_logger = logging.getLogger()

    if isinstance(log_level, str):
        log_level = LogLevel.from_cli(log_level)
    root_logger.setLevel(log_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    file_handler_instance = None
    if log_file:
        log_path = Path(log_file)
        log_path.parent.mkdir(exist_ok=True, parents=True)

        file_handler_instance = logging.FileHandler(log_path, mode="w")
        file_handler_instance.setFormatter(UTCFormatter(fmt=log_format))
        root_logger.addHandler(file_handler_instance)

    if log_to_stdout:
        stream_handler = logging.StreamHandler(sys.stdout)

        if use_color is None:
            use_color = not ColorFormatter.running_in_docker and sys.stdout.isatty()

        if use_color:
            stream_handler.setFormatter(ColorFormatter(fmt=log_format))
        else:
            stream_handler.setFormatter(UTCFormatter(fmt=log_format))

        root_logger.addHandler(stream_handler)

    logger.verbose("Logging configured successfully.")
    return file_handler_instance
