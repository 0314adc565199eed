"""
Polling wait primitive used by every blocking operation
"""

from typing import Callable, Optional

from .clock import Clock, MonotonicClock
from .run_control import CancellationToken

DEFAULT_POLL_INTERVAL = 0.005  # 5ms = 200Hz sampling rate

_default_clock = MonotonicClock()


def wait_until(condition: Callable[[], bool],
               timeout: Optional[float] = None,
               poll_interval: float = DEFAULT_POLL_INTERVAL,
               clock: Optional[Clock] = None,
               cancel: Optional[CancellationToken] = None) -> bool:
    """
    Poll `condition` until it returns True.

    Args:
        condition: Zero-argument predicate, evaluated once per poll
        timeout: Seconds to wait; None waits indefinitely
        poll_interval: Seconds between evaluations
        clock: Time source, real monotonic time by default
        cancel: Optional token; a cancelled token ends the wait

    Returns:
        True if the condition was met, False on timeout or cancellation
        (check cancel.is_cancelled to tell them apart)
    """
    if poll_interval <= 0:
        raise ValueError(f"poll_interval must be positive, got {poll_interval}")

    clock = clock or _default_clock
    deadline = None if timeout is None else clock.now() + timeout

    while True:
        if condition():
            return True
        if cancel is not None and cancel.is_cancelled:
            return False

        now = clock.now()
        if deadline is not None and now >= deadline:
            return False

        delay = poll_interval if deadline is None else min(poll_interval, deadline - now)
        clock.sleep(delay)
