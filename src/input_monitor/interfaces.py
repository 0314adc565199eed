"""
Abstract interfaces for line sampling, edge handling and message output
"""

from abc import ABC, abstractmethod
from typing import Callable

from .events import EdgeEvent
from .levels import Level, PullMode

# Raw level callback from interrupt-capable samplers: (line_id, level)
LevelListener = Callable[[int, Level], None]


class ILineSampler(ABC):
    """
    Abstract interface for the platform's digital input lines.

    Separates reading hardware state from debounce and event management.
    Allows different implementations: RPi.GPIO, simulated, network, etc.
    """

    @abstractmethod
    def valid_line(self, line_id: int) -> bool:
        """True if line_id names an input this sampler can drive"""
        pass

    @abstractmethod
    def setup_line(self, line_id: int, pull_mode: PullMode) -> None:
        """
        Configure a line as digital input.

        Args:
            line_id: Line identifier (BCM GPIO number)
            pull_mode: Internal pull resistor setting
        """
        pass

    @abstractmethod
    def read_level(self, line_id: int) -> Level:
        """
        Read the instantaneous level of a configured line.

        Returns:
            Level.HIGH or Level.LOW
        """
        pass

    @abstractmethod
    def release_line(self, line_id: int) -> None:
        """Return a single line to its unconfigured state"""
        pass

    def add_edge_listener(self, line_id: int, listener: LevelListener) -> bool:
        """
        Ask the platform to push level changes for a line.

        Returns:
            True if interrupt delivery was registered, False if the line
            has to be polled instead (the default).
        """
        return False

    def remove_edge_listener(self, line_id: int) -> None:
        """Stop interrupt delivery for a line (no-op for polled samplers)"""
        pass

    @abstractmethod
    def cleanup(self) -> None:
        """Release every line and sampler resource"""
        pass


class IEdgeHandler(ABC):
    """
    Receiver of debounced edge events.

    Subscriptions accept either an IEdgeHandler or a plain callable taking
    an EdgeEvent.
    """

    @abstractmethod
    def on_edge(self, event: EdgeEvent) -> None:
        """Handle one reported transition"""
        pass


class IMessageDisplay(ABC):
    """Output device that can show a short text message"""

    @abstractmethod
    def show_message(self, text: str) -> None:
        pass

    def clear(self) -> None:
        """Blank the display (optional)"""
        pass
