"""
Utilities package - logging, timing and GPIO helpers shared by the input monitor
"""

from .hybrid_logger import HybridLogger, ClassLogger, ColoredFormatter, describe_exception
from .gpio_utils import (gpio_to_physical, physical_to_gpio, describe_pin, is_valid_gpio,
                         GPIO_TO_PHYSICAL, PHYSICAL_TO_GPIO)
from .once_in_ms import OnceInMs
from .clock import Clock, MonotonicClock, SimulatedClock
from .run_control import RunFlag, CancellationToken
from .waiting import wait_until, DEFAULT_POLL_INTERVAL

__all__ = [
    'HybridLogger',
    'ClassLogger',
    'ColoredFormatter',
    'describe_exception',
    'gpio_to_physical',
    'physical_to_gpio',
    'describe_pin',
    'is_valid_gpio',
    'GPIO_TO_PHYSICAL',
    'PHYSICAL_TO_GPIO',
    'OnceInMs',
    'Clock',
    'MonotonicClock',
    'SimulatedClock',
    'RunFlag',
    'CancellationToken',
    'wait_until',
    'DEFAULT_POLL_INTERVAL'
]
