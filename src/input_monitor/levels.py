"""
Logical levels, edge kinds and pull resistor modes
"""

from enum import Enum


class Level(Enum):
    """Digital line level. With a pull-up, HIGH is rest and LOW is pressed."""

    LOW = 0
    HIGH = 1

    @property
    def is_asserted(self) -> bool:
        """True when a pull-up button on this line is pressed"""
        return self is Level.LOW

    @classmethod
    def from_raw(cls, value) -> 'Level':
        """Convert a raw 0/1 (or bool) reading into a Level"""
        return cls.HIGH if value else cls.LOW


class Edge(Enum):
    """Direction of a level transition"""

    FALLING = "falling"  # HIGH -> LOW, press
    RISING = "rising"    # LOW -> HIGH, release
    BOTH = "both"        # Either direction (subscriptions and waits only)

    @classmethod
    def between(cls, previous: Level, current: Level) -> 'Edge':
        """Edge for a transition; previous and current must differ"""
        if previous is current:
            raise ValueError(f"No edge between equal levels ({current.name})")
        return cls.FALLING if current is Level.LOW else cls.RISING

    def matches(self, edge: 'Edge') -> bool:
        """True if an observed edge satisfies this edge kind"""
        return self is Edge.BOTH or self is edge


class PullMode(Enum):
    """Pull resistor configuration for input lines"""

    UP = "up"      # Rest HIGH, pressed button pulls LOW
    DOWN = "down"  # Rest LOW
    OFF = "off"    # External resistor circuit

    @property
    def rest_level(self) -> Level:
        """Level of the line when nothing drives it"""
        return Level.LOW if self is PullMode.DOWN else Level.HIGH
