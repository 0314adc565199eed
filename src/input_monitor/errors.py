"""
Exceptions raised by the input monitor
"""


class MonitorError(Exception):
    """Base class for every input monitor error"""


class ConfigurationError(MonitorError):
    """
    Line registration or configuration problem: duplicate line, invalid
    line id, inconsistent timing values. Recoverable by the caller
    (unconfigure first, or fix the config and retry).
    """


class UsageError(MonitorError):
    """
    Operation on something that was never configured (line, button,
    subscription). A programming mistake, not a condition to retry.
    """


class WaitTimeoutError(MonitorError, TimeoutError):
    """A blocking wait ran out of time before the expected transition"""


class WaitCancelledError(MonitorError):
    """A blocking wait was ended through its cancellation token"""
