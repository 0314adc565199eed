"""
Button panel configuration
"""

from dataclasses import dataclass, field
from typing import List

from utils import is_valid_gpio

from .errors import ConfigurationError
from .levels import PullMode


@dataclass
class ButtonConfig:
    """One named push button and the GPIO line it is wired to"""
    name: str
    pin: int


@dataclass
class MonitorConfig:
    """Input monitor and button panel configuration"""

    buttons: List[ButtonConfig] = field(default_factory=list)
    pull_mode: PullMode = PullMode.UP

    # Timing configuration
    debounce_ms: int = 100
    poll_interval_ms: float = 5.0      # 200Hz sampling rate
    hold_threshold_ms: int = 3000

    # Computed properties
    @property
    def button_count(self) -> int:
        return len(self.buttons)

    @property
    def pins(self) -> List[int]:
        return [button.pin for button in self.buttons]

    @property
    def debounce_window(self) -> float:
        """Debounce window in seconds"""
        return self.debounce_ms / 1000.0

    @property
    def poll_interval(self) -> float:
        """Polling interval in seconds"""
        return self.poll_interval_ms / 1000.0

    @property
    def hold_threshold(self) -> float:
        """Hold threshold in seconds"""
        return self.hold_threshold_ms / 1000.0

    def validate(self) -> None:
        """Basic validation of configuration"""
        if not self.buttons:
            raise ConfigurationError("At least one button must be configured")

        names = [button.name for button in self.buttons]
        duplicate_names = {name for name in names if names.count(name) > 1}
        if duplicate_names:
            raise ConfigurationError(f"Duplicate button names: {sorted(duplicate_names)}")

        pins = self.pins
        duplicate_pins = {pin for pin in pins if pins.count(pin) > 1}
        if duplicate_pins:
            raise ConfigurationError(f"GPIO pins used by more than one button: {sorted(duplicate_pins)}")

        for button in self.buttons:
            if not button.name:
                raise ConfigurationError("Button names must not be empty")
            if not is_valid_gpio(button.pin):
                raise ConfigurationError(f"Button '{button.name}' GPIO pin {button.pin!r} out of valid range (0-27)")

        if self.debounce_ms < 0:
            raise ConfigurationError(f"Debounce must not be negative, got {self.debounce_ms}ms")
        if self.poll_interval_ms <= 0:
            raise ConfigurationError(f"Poll interval must be positive, got {self.poll_interval_ms}ms")
        if self.debounce_ms and self.poll_interval_ms > self.debounce_ms / 2:
            raise ConfigurationError(
                f"Poll interval {self.poll_interval_ms}ms must be at most half the "
                f"{self.debounce_ms}ms debounce window"
            )
        if self.hold_threshold_ms <= 0:
            raise ConfigurationError(f"Hold threshold must be positive, got {self.hold_threshold_ms}ms")


def default_six_button_config() -> MonitorConfig:
    """Six pull-up buttons, each between its GPIO and ground"""
    return MonitorConfig(
        buttons=[
            ButtonConfig("up", 5),
            ButtonConfig("down", 6),
            ButtonConfig("left", 13),
            ButtonConfig("right", 19),
            ButtonConfig("select", 26),
            ButtonConfig("back", 21),
        ],
        pull_mode=PullMode.UP,
        debounce_ms=100,
        poll_interval_ms=5,
        hold_threshold_ms=3000
    )
