"""
Time-window debounce filter
"""

from typing import Optional


class DebounceFilter:
    """
    Suppresses transitions that arrive too soon after the last reported one.

    Every transition on the line counts, whatever its direction: after a
    reported transition, anything within `window` seconds is dropped and the
    window only restarts on the next reported transition. A bouncing contact
    (F R F R F ... held ... R F R) therefore yields one press and one release.

    Example:
        f = DebounceFilter(0.1)
        f.accept(0.000)   # True  - press
        f.accept(0.004)   # False - bounce
        f.accept(0.500)   # True  - release
    """

    def __init__(self, window: float):
        if window < 0:
            raise ValueError(f"Debounce window must not be negative, got {window}")
        self.window = window
        self.suppressed_count = 0
        self._last_reported: Optional[float] = None

    def accept(self, timestamp: float) -> bool:
        """Decide whether a transition observed at `timestamp` is reported"""
        if self._last_reported is not None and timestamp - self._last_reported < self.window:
            self.suppressed_count += 1
            return False
        self._last_reported = timestamp
        return True

    @property
    def last_reported(self) -> Optional[float]:
        return self._last_reported

    def reset(self) -> None:
        self._last_reported = None
        self.suppressed_count = 0
