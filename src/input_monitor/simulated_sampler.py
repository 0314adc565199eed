"""
In-memory line sampler for development machines and tests
"""

import threading
from typing import Callable, Dict, Optional

from utils import is_valid_gpio

from .interfaces import ILineSampler, LevelListener
from .levels import Level, PullMode


class SimulatedSampler(ILineSampler):
    """
    Simulated bank of input lines driven from code.

    Lines rest at the level implied by their pull mode. press() drives a line
    LOW (a pull-up button closing to ground), release() lets it float back.

    With push_edges=True the sampler behaves like an interrupt-capable
    platform: every level change is pushed synchronously to the registered
    listener instead of waiting to be polled.

    Example:
        sampler = SimulatedSampler(logger)
        monitor = DigitalInputMonitor(sampler, logger)
        monitor.configure(17)
        sampler.press(17)
        monitor.read(17)   # Level.LOW
    """

    def __init__(self,
                 logger,
                 push_edges: bool = False,
                 line_validator: Optional[Callable[[int], bool]] = None):
        """
        Args:
            logger: ClassLogger instance for logging
            push_edges: Deliver level changes to listeners as they happen
            line_validator: Predicate for valid line ids (header GPIOs by default)
        """
        self._logger = logger
        self._push_edges = push_edges
        self._line_validator = line_validator or is_valid_gpio
        self._pull_modes: Dict[int, PullMode] = {}
        self._driven: Dict[int, Level] = {}
        self._listeners: Dict[int, LevelListener] = {}
        self._lock = threading.RLock()

    def valid_line(self, line_id: int) -> bool:
        return self._line_validator(line_id)

    def setup_line(self, line_id: int, pull_mode: PullMode) -> None:
        with self._lock:
            self._pull_modes[line_id] = pull_mode
        self._logger.debug(f"Simulated line {line_id} configured ({pull_mode.value})")

    def read_level(self, line_id: int) -> Level:
        with self._lock:
            if line_id not in self._pull_modes:
                raise ValueError(f"Simulated line {line_id} is not set up")
            return self._current_level(line_id)

    def _current_level(self, line_id: int) -> Level:
        driven = self._driven.get(line_id)
        if driven is not None:
            return driven
        pull_mode = self._pull_modes.get(line_id, PullMode.UP)
        return pull_mode.rest_level

    def set_level(self, line_id: int, level: Optional[Level]) -> None:
        """
        Drive a line to a level, or None to let it return to rest.

        Lines may be driven before they are set up, like a button that is
        already held when the program starts.
        """
        with self._lock:
            before = self._current_level(line_id)
            if level is None:
                self._driven.pop(line_id, None)
            else:
                self._driven[line_id] = level
            after = self._current_level(line_id)
            listener = self._listeners.get(line_id) if before is not after else None

        if listener is not None:
            listener(line_id, after)

    def press(self, line_id: int) -> None:
        """Close the button: connect the line to ground"""
        self.set_level(line_id, Level.LOW)

    def release(self, line_id: int) -> None:
        """Open the button: the pull resistor returns the line to rest"""
        self.set_level(line_id, None)

    def add_edge_listener(self, line_id: int, listener: LevelListener) -> bool:
        if not self._push_edges:
            return False
        with self._lock:
            self._listeners[line_id] = listener
        return True

    def remove_edge_listener(self, line_id: int) -> None:
        with self._lock:
            self._listeners.pop(line_id, None)

    def release_line(self, line_id: int) -> None:
        with self._lock:
            self._listeners.pop(line_id, None)
            self._pull_modes.pop(line_id, None)

    def is_setup(self, line_id: int) -> bool:
        with self._lock:
            return line_id in self._pull_modes

    def cleanup(self) -> None:
        with self._lock:
            self._listeners.clear()
            self._pull_modes.clear()
            self._driven.clear()
        self._logger.debug("Simulated sampler cleaned up")
