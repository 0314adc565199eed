"""
Input Monitor Package

Debounced push-button input for single-board computers.
Reads pull-up GPIO lines through a sampler abstraction and turns raw level
changes into press / release / hold events.
"""

from .levels import Level, Edge, PullMode
from .errors import (MonitorError, ConfigurationError, UsageError,
                     WaitTimeoutError, WaitCancelledError)
from .events import EdgeEvent
from .interfaces import ILineSampler, IEdgeHandler, IMessageDisplay
from .debounce import DebounceFilter
from .monitor import DigitalInputMonitor, Subscription, DEFAULT_DEBOUNCE_WINDOW
from .gpio_sampler import GPIOSampler, GPIO_AVAILABLE
from .simulated_sampler import SimulatedSampler
from .config import ButtonConfig, MonitorConfig, default_six_button_config
from .panel_state import PanelState
from .panel import Button, ButtonPanel
from .displays import ConsoleDisplay, LoggerDisplay

__all__ = [
    "Level",
    "Edge",
    "PullMode",
    "MonitorError",
    "ConfigurationError",
    "UsageError",
    "WaitTimeoutError",
    "WaitCancelledError",
    "EdgeEvent",
    "ILineSampler",
    "IEdgeHandler",
    "IMessageDisplay",
    "DebounceFilter",
    "DigitalInputMonitor",
    "Subscription",
    "DEFAULT_DEBOUNCE_WINDOW",
    "GPIOSampler",
    "GPIO_AVAILABLE",
    "SimulatedSampler",
    "ButtonConfig",
    "MonitorConfig",
    "default_six_button_config",
    "PanelState",
    "Button",
    "ButtonPanel",
    "ConsoleDisplay",
    "LoggerDisplay"
]
