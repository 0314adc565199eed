"""
Button panel - named push buttons on top of the input monitor
"""

from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from utils import CancellationToken, describe_pin

from .config import MonitorConfig
from .errors import UsageError
from .events import EdgeEvent
from .levels import Edge, Level, PullMode
from .monitor import DigitalInputMonitor, Subscription
from .panel_state import PanelState


@dataclass(frozen=True)
class Button:
    """A named button wired to exactly one input line"""
    name: str
    line_id: int


ButtonCallback = Callable[[Button, EdgeEvent], None]


class ButtonPanel:
    """
    Named buttons with state snapshots, callbacks and blocking waits.

    Configures one monitor line per button. Pressed means the line is LOW
    (pull-up wiring). Manages the previous snapshot for edge detection and
    the ignore-until-released filter.

    Example:
        panel = ButtonPanel.from_config(monitor, default_six_button_config(), logger)
        panel.on_press("select", lambda button, event: display.show_message(button.name))
        monitor.start()

        while run_flag.is_running:
            state = panel.read_state()
            if state.any_changed:
                logger.info(f"Buttons changed: {state}")
    """

    def __init__(self,
                 monitor: DigitalInputMonitor,
                 buttons: List[Button],
                 logger,
                 pull_mode: PullMode = PullMode.UP,
                 hold_threshold: float = 3.0):
        """
        Args:
            monitor: DigitalInputMonitor that owns the lines
            buttons: Buttons to configure, one line each
            logger: ClassLogger instance from HybridLogger.get_class_logger()
            pull_mode: Pull resistor mode for every button line
            hold_threshold: Default seconds for measure_hold()
        """
        self._monitor = monitor
        self._logger = logger
        self._hold_threshold = hold_threshold
        self._buttons: Dict[str, Button] = {}

        for button in buttons:
            if button.name in self._buttons:
                raise UsageError(f"Button '{button.name}' defined twice")
            monitor.configure(button.line_id, pull_mode)
            self._buttons[button.name] = button

        # All buttons start as not-pressed
        self._previous_state: Dict[str, bool] = {name: False for name in self._buttons}
        # True = ignore this button until released
        self._ignored_buttons: Dict[str, bool] = {name: False for name in self._buttons}

        pin_mapping = ", ".join(f"{b.name}={describe_pin(b.line_id)}" for b in buttons)
        self._logger.info(f"ButtonPanel initialized with {len(buttons)} buttons")
        self._logger.info(f"Pin mapping: {pin_mapping}")

    @classmethod
    def from_config(cls, monitor: DigitalInputMonitor, config: MonitorConfig, logger) -> 'ButtonPanel':
        config.validate()
        buttons = [Button(button.name, button.pin) for button in config.buttons]
        return cls(monitor, buttons, logger, config.pull_mode, config.hold_threshold)

    @property
    def names(self) -> List[str]:
        return list(self._buttons)

    def button(self, name: str) -> Button:
        try:
            return self._buttons[name]
        except KeyError:
            raise UsageError(f"Unknown button '{name}'") from None

    def is_pressed(self, name: str) -> bool:
        """Raw instantaneous state of one button"""
        return self._monitor.read(self.button(name).line_id) is Level.LOW

    def ignore_pressed_until_released(self) -> None:
        """
        Ignore currently pressed buttons until they are released.

        Ignored buttons report as not pressed in read_state() until they are
        physically released, then they work normally again. Useful at startup
        when a button may already be held.
        """
        for name in self._buttons:
            if self.is_pressed(name):
                self._ignored_buttons[name] = True
                self._previous_state[name] = False  # Prevent false "release" detection
                self._logger.debug(f"Button {name} will be ignored until released")

    def read_state(self) -> PanelState:
        """
        Read every button with ignore filtering and edge detection.

        Returns:
            PanelState with current/previous values and per-button changes
        """
        filtered_current_state: Dict[str, bool] = {}
        for name in self._buttons:
            is_pressed = self.is_pressed(name)
            if self._ignored_buttons[name]:
                if not is_pressed:
                    self._ignored_buttons[name] = False
                    self._logger.debug(f"Button {name} released, no longer ignored")
                filtered_current_state[name] = False
            else:
                filtered_current_state[name] = is_pressed

        state = PanelState(
            for_button=filtered_current_state,
            previous_state_of=self._previous_state.copy()
        )
        self._previous_state = filtered_current_state.copy()

        for name in state.just_pressed():
            self._logger.info(f"Button {name} pressed")
        for name in state.just_released():
            self._logger.debug(f"Button {name} released")

        return state

    def _subscribe(self, name: str, edge: Edge, handler: ButtonCallback,
                   debounce_window: Optional[float]) -> Subscription:
        button = self.button(name)

        def _on_edge(event: EdgeEvent) -> None:
            handler(button, event)

        return self._monitor.subscribe(button.line_id, edge, _on_edge, debounce_window)

    def on_press(self, name: str, handler: ButtonCallback,
                 debounce_window: Optional[float] = None) -> Subscription:
        """Call handler(button, event) on every debounced press"""
        return self._subscribe(name, Edge.FALLING, handler, debounce_window)

    def on_release(self, name: str, handler: ButtonCallback,
                   debounce_window: Optional[float] = None) -> Subscription:
        """Call handler(button, event) on every debounced release"""
        return self._subscribe(name, Edge.RISING, handler, debounce_window)

    def wait_for_press(self, name: str,
                       timeout: Optional[float] = None,
                       cancel: Optional[CancellationToken] = None) -> EdgeEvent:
        """Block until the named button is pressed"""
        return self._monitor.wait_for_edge(self.button(name).line_id, Edge.FALLING, timeout, cancel)

    def measure_hold(self, name: str,
                     threshold: Optional[float] = None,
                     timeout: Optional[float] = None,
                     cancel: Optional[CancellationToken] = None) -> EdgeEvent:
        """
        Wait for a press of the named button and time it.

        Returns:
            FALLING EdgeEvent with hold_duration and held set
        """
        threshold = self._hold_threshold if threshold is None else threshold
        event = self._monitor.measure_press(self.button(name).line_id, threshold, timeout, cancel)
        self._logger.info(
            f"Button {name} {'held' if event.held else 'pressed'} for {event.hold_duration:.2f}s"
        )
        return event

    def get_button_count(self) -> int:
        return len(self._buttons)
