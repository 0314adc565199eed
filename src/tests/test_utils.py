"""
Tests for the utils package: clocks, waiting, throttling, flags, GPIO maps, logging
"""

import io
import logging

import pytest

from utils import (CancellationToken, HybridLogger, OnceInMs, RunFlag, SimulatedClock, describe_exception,
                   describe_pin, gpio_to_physical, is_valid_gpio, physical_to_gpio, wait_until)


class TestSimulatedClock:

    def test_advance_runsDueActionsInOrder(self):
        clock = SimulatedClock()
        calls = []
        clock.call_at(0.3, calls.append, "late")
        clock.call_at(0.1, calls.append, "early")
        clock.call_at(0.1, calls.append, "early-second")

        clock.advance(0.2)

        assert calls == ["early", "early-second"]
        assert clock.now() == pytest.approx(0.2)
        assert clock.pending_actions == 1

    def test_actionSeesItsScheduledTime(self):
        clock = SimulatedClock()
        seen = []
        clock.call_later(0.5, lambda: seen.append(clock.now()))

        clock.sleep(2.0)

        assert seen == [0.5]
        assert clock.now() == pytest.approx(2.0)

    def test_repeatedPollSteps_doNotDrift(self):
        clock = SimulatedClock()

        for _ in range(600):
            clock.sleep(0.005)

        assert clock.now() == 3.0

    def test_dueAction_runsImmediately(self):
        clock = SimulatedClock(start=1.0)
        calls = []

        clock.call_later(0, calls.append, "now")
        clock.call_at(0.5, calls.append, "past")

        assert calls == ["now", "past"]
        assert clock.pending_actions == 0

    def test_negativeAdvance_isIgnored(self):
        clock = SimulatedClock(start=5.0)

        clock.advance(-1.0)

        assert clock.now() == 5.0


class TestWaitUntil:

    def test_conditionAlreadyTrue_noSleep(self):
        clock = SimulatedClock()

        assert wait_until(lambda: True, timeout=1.0, clock=clock)
        assert clock.now() == 0.0

    def test_conditionBecomesTrue(self):
        clock = SimulatedClock()
        flag = []
        clock.call_later(0.05, flag.append, True)

        assert wait_until(lambda: bool(flag), timeout=1.0, poll_interval=0.01, clock=clock)
        assert clock.now() < 0.07

    def test_timeout_returnsFalse(self):
        clock = SimulatedClock()

        assert not wait_until(lambda: False, timeout=0.1, poll_interval=0.03, clock=clock)
        assert clock.now() == pytest.approx(0.1)

    def test_cancelled_returnsFalse(self):
        clock = SimulatedClock()
        token = CancellationToken()
        clock.call_later(0.02, token.cancel)

        assert not wait_until(lambda: False, poll_interval=0.01, clock=clock, cancel=token)
        assert token.is_cancelled

    def test_invalidPollInterval(self):
        with pytest.raises(ValueError):
            wait_until(lambda: True, poll_interval=0)


class TestOnceInMs:

    def test_throttles(self):
        clock = SimulatedClock()
        timer = OnceInMs(1000, clock)

        assert timer.should_execute()
        assert not timer.should_execute()

        clock.advance(0.5)
        assert not timer.should_execute()
        assert timer.remaining_ms() == pytest.approx(500)

        clock.advance(0.5)
        assert timer.should_execute()

    def test_reset(self):
        clock = SimulatedClock()
        timer = OnceInMs(1000, clock)
        timer.should_execute()

        timer.reset()

        assert timer.should_execute()


class TestRunControl:

    def test_runFlag_stops(self):
        flag = RunFlag()
        assert flag.is_running
        assert flag

        flag.stop()

        assert not flag.is_running
        assert not flag

    def test_cancellationToken(self):
        token = CancellationToken()
        assert not token.wait(0)

        token.cancel()

        assert token.is_cancelled
        assert token.wait(0)


class TestGpioUtils:

    def test_mapping_roundTrip(self):
        assert gpio_to_physical(17) == 11
        assert physical_to_gpio(11) == 17

    def test_unknownPins(self):
        assert gpio_to_physical(40) is None
        assert physical_to_gpio(1) is None  # 3.3V

    @pytest.mark.parametrize("value, expected", [
        (0, True), (27, True), (28, False), (-1, False), (True, False), ("4", False)
    ])
    def test_isValidGpio(self, value, expected):
        assert is_valid_gpio(value) is expected

    def test_describePin(self):
        assert describe_pin(17) == "GPIO17 (pin 11)"
        assert describe_pin(40) == "GPIO40 (not on header)"


class TestHybridLogger:

    def test_fileLog_includesClassName(self, tmp_path):
        main_logger = HybridLogger("FileTest", log_dir=str(tmp_path))
        logger = main_logger.get_class_logger("InputMonitor", logging.INFO)

        logger.info("line configured")
        logger.debug("filtered out")
        main_logger.cleanup()

        text = main_logger.log_file.read_text(encoding="utf-8")
        assert "[INFO] [InputMonitor] line configured" in text
        assert "filtered out" not in text

    def test_createClassLogger_sharesHandlers(self, tmp_path):
        main_logger = HybridLogger("SiblingTest", log_dir=str(tmp_path))
        parent = main_logger.get_main_logger(logging.INFO)
        child = parent.create_class_logger("ButtonPanel")

        child.info("from child")
        child.flush()
        main_logger.cleanup()

        assert child.level == logging.INFO
        assert "[ButtonPanel] from child" in main_logger.log_file.read_text(encoding="utf-8")

    def test_errorWithException_addsDetails(self, tmp_path):
        main_logger = HybridLogger("ErrorTest", log_dir=str(tmp_path))
        logger = main_logger.get_main_logger()

        try:
            raise ValueError("bad pin")
        except ValueError as e:
            logger.error("setup failed", exception=e)
        main_logger.cleanup()

        text = main_logger.log_file.read_text(encoding="utf-8")
        assert "setup failed | Type: ValueError" in text

    def test_noLogDir_consoleOnly(self):
        main_logger = HybridLogger("ConsoleOnly", log_dir=None)

        assert main_logger.log_file is None
        assert len(main_logger.main_logger.handlers) == 1
        main_logger.cleanup()

    def test_contextManager_returnsMainLogger(self):
        with HybridLogger("ContextTest", log_dir=None) as logger:
            assert logger.class_name == "Main"

    def test_nonTerminalStream_hasNoColors(self):
        stream = io.StringIO()
        main_logger = HybridLogger("PlainStream", log_dir=None, stream=stream)

        main_logger.get_class_logger("Panel").warning("stuck button")
        main_logger.cleanup()

        assert "\033[" not in stream.getvalue()
        assert "[WARNING] [Panel] stuck button" in stream.getvalue()

    def test_levelFiltering_perClass(self):
        stream = io.StringIO()
        main_logger = HybridLogger("LevelTest", log_dir=None, stream=stream)
        quiet = main_logger.get_class_logger("Quiet", logging.WARNING)

        assert not quiet.is_enabled_for(logging.INFO)
        quiet.info("hidden")
        quiet.set_level(logging.DEBUG)
        quiet.debug("shown")
        main_logger.cleanup()

        assert "hidden" not in stream.getvalue()
        assert "shown" in stream.getvalue()

    def test_describeException(self):
        try:
            raise RuntimeError("edge detection refused")
        except RuntimeError as e:
            description = describe_exception(e)

        assert description.startswith("Type: RuntimeError | File: test_utils.py | Line: ")

    def test_describeException_unraised(self):
        assert describe_exception(ValueError("x")) == "Type: ValueError | File: unknown | Line: 0"
