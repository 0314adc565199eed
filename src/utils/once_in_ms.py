"""
Timing utility for throttling execution in polling loops
"""

from typing import Optional

from .clock import Clock, MonotonicClock


class OnceInMs:
    """
    Timer for throttling code execution to at most once per interval.

    Use this to limit how often status reporting runs in a loop that itself
    samples buttons every few milliseconds.

    Example:
        status_timer = OnceInMs(10000)   # Once per 10 seconds

        while run_flag.is_running:
            state = panel.read_state()
            if status_timer.should_execute():
                logger.info(f"Status: {state}")
    """

    def __init__(self, interval_ms: int, clock: Optional[Clock] = None):
        """
        Args:
            interval_ms: Minimum milliseconds between executions
            clock: Time source, real monotonic time by default
        """
        self.interval_ms = interval_ms
        self.interval = interval_ms / 1000.0
        self._clock = clock or MonotonicClock()
        self.last_execution: Optional[float] = None

    def should_execute(self) -> bool:
        """
        Check if enough time has passed and update timer if so.

        The first call always returns True.
        """
        current = self._clock.now()
        if self.last_execution is None or current - self.last_execution >= self.interval:
            self.last_execution = current
            return True
        return False

    def reset(self) -> None:
        """Force next should_execute() call to return True"""
        self.last_execution = None

    def elapsed_ms(self) -> float:
        """Milliseconds since last execution (0 if never executed)"""
        if self.last_execution is None:
            return 0.0
        return (self._clock.now() - self.last_execution) * 1000

    def remaining_ms(self) -> float:
        """Milliseconds until next execution (can be negative if overdue)"""
        if self.last_execution is None:
            return 0.0
        return self.interval_ms - self.elapsed_ms()
