"""
Hybrid logging for the input monitor.

One named stdlib logger carries a console handler (ANSI colours when the
stream is a terminal) and, optionally, a timestamped log file. Components
never touch it directly: each gets a ClassLogger that stamps its records
with a class name and filters at its own level, so the monitor can run at
DEBUG (raw transitions, suppressed bounces) while the demo stays at INFO.

    [12:04:31.207] [INFO] [ButtonPanel] Button select pressed
"""

import logging
import sys
import traceback
from contextlib import suppress
from datetime import datetime
from pathlib import Path
from typing import Dict, Optional, TextIO

RECORD_FORMAT = '[%(asctime)s.%(msecs)03d] [%(levelname)s] [%(class_name)s] %(message)s'
TIME_FORMAT = '%H:%M:%S'


class ColoredFormatter(logging.Formatter):
    """Bracketed record format with millisecond timestamps, optionally coloured by level"""

    LEVEL_COLORS = {
        logging.DEBUG: '\033[94m',     # Blue
        logging.INFO: '\033[92m',      # Green
        logging.WARNING: '\033[93m',   # Yellow
        logging.ERROR: '\033[91m',     # Red
        logging.CRITICAL: '\033[95m',  # Magenta
    }
    RESET = '\033[0m'

    def __init__(self, use_colors: bool = False):
        super().__init__(RECORD_FORMAT, datefmt=TIME_FORMAT)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        # Records from plain stdlib loggers have no class column
        if not hasattr(record, 'class_name'):
            record.class_name = record.name

        text = super().format(record)
        if not self.use_colors:
            return text
        color = self.LEVEL_COLORS.get(record.levelno)
        return f"{color}{text}{self.RESET}" if color else text


def describe_exception(exception: BaseException) -> str:
    """Type and innermost location of an exception, for one-line error logs"""
    frames = traceback.extract_tb(exception.__traceback__)
    if frames:
        where = f"File: {Path(frames[-1].filename).name} | Line: {frames[-1].lineno}"
    else:
        where = "File: unknown | Line: 0"
    return f"Type: {type(exception).__name__} | {where}"


class ClassLogger:
    """
    Logger handle for one component.

    Records go through the shared logger's handlers with `class_name` set.
    Messages below this handle's level are dropped before a record is built.
    """

    def __init__(self, main_logger: logging.Logger, class_name: str, level: int):
        self.main_logger = main_logger
        self.class_name = class_name
        self.level = level

    def is_enabled_for(self, level: int) -> bool:
        return level >= self.level

    def set_level(self, level: int) -> None:
        self.level = level

    def _log(self, level: int, message: str, exception: Optional[BaseException] = None) -> None:
        if not self.is_enabled_for(level):
            return
        exc_info = None
        if exception is not None:
            exc_info = (type(exception), exception, exception.__traceback__)
        record = self.main_logger.makeRecord(
            self.main_logger.name, level, self.class_name, 0, message, (), exc_info
        )
        record.class_name = self.class_name
        self.main_logger.handle(record)

    def debug(self, message: str) -> None:
        self._log(logging.DEBUG, message)

    def info(self, message: str) -> None:
        self._log(logging.INFO, message)

    def warning(self, message: str) -> None:
        self._log(logging.WARNING, message)

    def error(self, message: str, exception: Optional[BaseException] = None) -> None:
        """
        Log an error; with `exception`, append its type and location and
        attach the traceback, then flush so the record survives a crash.
        """
        if exception is None:
            self._log(logging.ERROR, message)
            return
        self._log(logging.ERROR, f"{message} | {describe_exception(exception)}", exception)
        self.flush()

    def critical(self, message: str) -> None:
        self._log(logging.CRITICAL, message)
        self.flush()

    def create_class_logger(self, class_name: str, level: Optional[int] = None) -> 'ClassLogger':
        """
        Derive a sibling logger that writes through the same handlers.

        Args:
            class_name: Name shown in the [class] column
            level: Minimum level, defaults to this logger's level
        """
        return ClassLogger(self.main_logger, class_name, self.level if level is None else level)

    def flush(self) -> None:
        for handler in self.main_logger.handlers:
            with suppress(OSError, ValueError):
                handler.flush()


class HybridLogger:
    """
    Factory owning the shared logger and its handlers.

    Usage:
        main_logger = HybridLogger("ButtonMonitor", log_dir="logs")
        monitor_logger = main_logger.get_class_logger("InputMonitor", logging.DEBUG)
        ...
        main_logger.cleanup()

    or as a context manager yielding the "Main" class logger.
    """

    def __init__(self,
                 name: str = "ButtonMonitor",
                 log_dir: Optional[str] = "logs",
                 stream: Optional[TextIO] = None):
        """
        Args:
            name: Logger name, also the log file prefix
            log_dir: Directory for the timestamped log file; None logs to console only
            stream: Console stream, stdout by default
        """
        self.name = name
        self.log_dir = log_dir
        self.log_file: Optional[Path] = None
        self.class_loggers: Dict[str, ClassLogger] = {}
        self.main_logger = self._create_logger(stream or sys.stdout)

    def _create_logger(self, stream: TextIO) -> logging.Logger:
        logger = logging.getLogger(self.name)
        logger.setLevel(logging.DEBUG)  # Class loggers do the filtering
        logger.propagate = False
        logger.handlers.clear()

        console_handler = logging.StreamHandler(stream)
        is_terminal = hasattr(stream, 'isatty') and stream.isatty()
        console_handler.setFormatter(ColoredFormatter(use_colors=is_terminal))
        logger.addHandler(console_handler)

        if self.log_dir is not None:
            directory = Path(self.log_dir)
            directory.mkdir(parents=True, exist_ok=True)
            self.log_file = directory / f"{self.name}_{datetime.now():%Y-%m-%d_%H-%M-%S}.log"
            file_handler = logging.FileHandler(self.log_file, encoding="utf-8")
            file_handler.setFormatter(ColoredFormatter(use_colors=False))
            logger.addHandler(file_handler)

        return logger

    def get_class_logger(self, class_name: str, level: int = logging.INFO) -> ClassLogger:
        """
        Logger for one component; repeated calls with the same name share a handle.

        Args:
            class_name: Name shown in the [class] column
            level: Minimum level (logging.DEBUG, INFO, WARNING, ERROR, CRITICAL)
        """
        if class_name not in self.class_loggers:
            self.class_loggers[class_name] = ClassLogger(self.main_logger, class_name, level)
        return self.class_loggers[class_name]

    def get_main_logger(self, level: int = logging.INFO) -> ClassLogger:
        return self.get_class_logger("Main", level)

    def cleanup(self) -> None:
        """Flush and close every handler"""
        for handler in list(self.main_logger.handlers):
            with suppress(OSError, ValueError):
                handler.flush()
                handler.close()
            self.main_logger.removeHandler(handler)

    def __enter__(self) -> ClassLogger:
        return self.get_main_logger()

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.cleanup()
