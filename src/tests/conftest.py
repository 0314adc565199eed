"""
Shared fixtures: everything runs on the simulated sampler and clock
"""

import logging
import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from input_monitor import DigitalInputMonitor, SimulatedSampler
from utils import HybridLogger, SimulatedClock


@pytest.fixture
def hybrid_logger():
    main_logger = HybridLogger("InputMonitorTests", log_dir=None)
    yield main_logger
    main_logger.cleanup()


@pytest.fixture
def logger(hybrid_logger):
    return hybrid_logger.get_class_logger("Test", logging.DEBUG)


@pytest.fixture
def clock():
    return SimulatedClock()


@pytest.fixture
def sampler(logger):
    return SimulatedSampler(logger)


@pytest.fixture
def monitor(sampler, logger, clock):
    monitor = DigitalInputMonitor(sampler, logger, clock=clock, poll_interval=0.005, debounce_window=0.1)
    yield monitor
    monitor.cleanup()


@pytest.fixture
def drive(clock, sampler, monitor):
    """
    Replay (time, pressed) steps on one line, polling after each step.

    Times are absolute seconds on the simulated clock.
    """
    def _drive(line_id, timeline):
        for when, pressed in timeline:
            clock.advance(when - clock.now())
            if pressed:
                sampler.press(line_id)
            else:
                sampler.release(line_id)
            monitor.poll_once()
    return _drive
