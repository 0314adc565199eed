"""
GPIO-based line sampler implementation using RPi.GPIO
"""

import threading
from typing import Dict, List

try:
    import RPi.GPIO as GPIO
    GPIO_AVAILABLE = True
except (ImportError, RuntimeError):
    # RPi.GPIO is missing off the Pi, and refuses to import on non-Pi boards
    GPIO = None
    GPIO_AVAILABLE = False

from utils import is_valid_gpio, describe_pin

from .interfaces import ILineSampler, LevelListener
from .levels import Level, PullMode


class GPIOSampler(ILineSampler):
    """
    RPi.GPIO line sampler for production.

    Uses BCM numbering. Reads raw line levels and can register interrupt
    delivery through GPIO.add_event_detect. Debouncing is left to the
    monitor, so no bouncetime is passed to RPi.GPIO.
    """

    def __init__(self, logger):
        """
        Args:
            logger: ClassLogger instance for logging
        """
        if not GPIO_AVAILABLE:
            raise ImportError("RPi.GPIO is required but not available")

        self._logger = logger
        self._lines: Dict[int, PullMode] = {}
        self._listening: List[int] = []
        self._initialized = False
        self._lock = threading.Lock()

    def _pull_constant(self, pull_mode: PullMode) -> int:
        return {
            PullMode.UP: GPIO.PUD_UP,
            PullMode.DOWN: GPIO.PUD_DOWN,
            PullMode.OFF: GPIO.PUD_OFF,
        }[pull_mode]

    def setup(self) -> None:
        """Select BCM numbering; called automatically before the first line"""
        if self._initialized:
            return
        GPIO.setwarnings(False)
        GPIO.setmode(GPIO.BCM)
        self._initialized = True
        self._logger.info("GPIO sampler initialized (BCM numbering)")

    def valid_line(self, line_id: int) -> bool:
        return is_valid_gpio(line_id)

    def setup_line(self, line_id: int, pull_mode: PullMode) -> None:
        try:
            with self._lock:
                self.setup()
                GPIO.setup(line_id, GPIO.IN, pull_up_down=self._pull_constant(pull_mode))
                self._lines[line_id] = pull_mode
            self._logger.info(f"Input configured: {describe_pin(line_id)} ({pull_mode.value})")
        except Exception as e:
            self._logger.error(f"GPIO setup failed for {describe_pin(line_id)}: {e}", exception=e)
            raise

    def read_level(self, line_id: int) -> Level:
        return Level.HIGH if GPIO.input(line_id) == GPIO.HIGH else Level.LOW

    def add_edge_listener(self, line_id: int, listener: LevelListener) -> bool:
        def _on_event(channel):
            listener(channel, self.read_level(channel))

        try:
            GPIO.add_event_detect(line_id, GPIO.BOTH, callback=_on_event)
        except RuntimeError as e:
            # Edge detection can be refused (kernel sysfs issues on newer boards)
            self._logger.warning(f"Edge detection unavailable on {describe_pin(line_id)}, polling instead: {e}")
            return False

        with self._lock:
            self._listening.append(line_id)
        self._logger.debug(f"Edge detection enabled on {describe_pin(line_id)}")
        return True

    def remove_edge_listener(self, line_id: int) -> None:
        with self._lock:
            if line_id not in self._listening:
                return
            self._listening.remove(line_id)
        GPIO.remove_event_detect(line_id)

    def release_line(self, line_id: int) -> None:
        self.remove_edge_listener(line_id)
        with self._lock:
            if self._lines.pop(line_id, None) is None:
                return
        GPIO.cleanup(line_id)
        self._logger.debug(f"Released {describe_pin(line_id)}")

    def cleanup(self) -> None:
        """Cleanup GPIO resources"""
        if not self._initialized:
            return
        try:
            for line_id in list(self._listening):
                self.remove_edge_listener(line_id)
            GPIO.cleanup()
            self._logger.info("GPIO sampler cleaned up")
        except RuntimeError as e:
            self._logger.warning(f"GPIO cleanup failed: {e}")
        finally:
            self._lines.clear()
            self._initialized = False
