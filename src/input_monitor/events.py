"""
EdgeEvent - immutable record of one reported line transition
"""

from dataclasses import dataclass
from typing import Optional

from .levels import Edge, Level


@dataclass(frozen=True)
class EdgeEvent:
    """
    A debounced transition on one input line.

    Usage:
        def on_press(event: EdgeEvent) -> None:
            print(f"GPIO{event.line_id} {event.edge.value} at {event.timestamp:.3f}s")
    """
    line_id: int
    edge: Edge                            # FALLING or RISING, never BOTH
    level: Level                          # Level after the transition
    timestamp: float                      # Clock time the transition was observed
    sequence: int = 0                     # Per-line counter of observed transitions
    hold_duration: Optional[float] = None # Set by hold measurement only
    held: Optional[bool] = None           # Held past the threshold (hold measurement only)

    def __post_init__(self):
        if self.edge is Edge.BOTH:
            raise ValueError("An observed edge is FALLING or RISING, not BOTH")
        expected = Level.LOW if self.edge is Edge.FALLING else Level.HIGH
        if self.level is not expected:
            raise ValueError(f"{self.edge.name} edge must end at {expected.name}, got {self.level.name}")

    @property
    def is_press(self) -> bool:
        return self.edge is Edge.FALLING

    @property
    def is_release(self) -> bool:
        return self.edge is Edge.RISING

    def __str__(self) -> str:
        text = f"EdgeEvent(GPIO{self.line_id} {self.edge.name} #{self.sequence} @ {self.timestamp:.3f}s"
        if self.hold_duration is not None:
            text += f", held {self.hold_duration:.3f}s"
        return text + ")"
