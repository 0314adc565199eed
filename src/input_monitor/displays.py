"""
Message displays for showing button activity
"""

import sys
from typing import List, Optional, TextIO

from .interfaces import IMessageDisplay


class ConsoleDisplay(IMessageDisplay):
    """Prints messages to a terminal stream, one line each"""

    def __init__(self, stream: Optional[TextIO] = None, prefix: str = "📟 "):
        self._stream = stream or sys.stdout
        self._prefix = prefix
        self.history: List[str] = []

    def show_message(self, text: str) -> None:
        self.history.append(text)
        print(f"{self._prefix}{text}", file=self._stream, flush=True)

    def clear(self) -> None:
        self.history.clear()


class LoggerDisplay(IMessageDisplay):
    """Sends messages to a ClassLogger at INFO level (headless runs)"""

    def __init__(self, logger):
        self._logger = logger

    def show_message(self, text: str) -> None:
        self._logger.info(f"Display: {text}")
