"""
Thread-safe shared flags: the application's keep-running state and
cooperative cancellation for blocking waits.
"""

import threading
from typing import Optional


class RunFlag:
    """
    "Keep running" state shared between a main loop and event handlers.

    Starts running. Handlers call stop(); the loop reads is_running.
    """

    def __init__(self):
        self._running = threading.Event()
        self._running.set()

    @property
    def is_running(self) -> bool:
        return self._running.is_set()

    def stop(self) -> None:
        self._running.clear()

    def __bool__(self) -> bool:
        return self.is_running


class CancellationToken:
    """Cooperative cancel signal checked by blocking waits between polls"""

    def __init__(self):
        self._cancelled = threading.Event()

    @property
    def is_cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        self._cancelled.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until cancelled or timeout; returns True if cancelled"""
        return self._cancelled.wait(timeout)
