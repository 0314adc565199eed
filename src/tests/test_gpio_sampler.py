"""
Tests for GPIOSampler with RPi.GPIO replaced by a mock, so they run anywhere
"""

from unittest.mock import MagicMock, patch

import pytest

from input_monitor import Level, PullMode, gpio_sampler
from input_monitor.gpio_sampler import GPIOSampler


@pytest.fixture
def gpio():
    mock_gpio = MagicMock(name="RPi.GPIO")
    mock_gpio.HIGH = 1
    mock_gpio.LOW = 0
    with patch.object(gpio_sampler, "GPIO", mock_gpio), \
            patch.object(gpio_sampler, "GPIO_AVAILABLE", True):
        yield mock_gpio


@pytest.fixture
def gpio_sampler_instance(gpio, logger):
    return GPIOSampler(logger)


class TestGPIOSampler:

    def test_init_withoutLibrary_raisesImportError(self, logger):
        with patch.object(gpio_sampler, "GPIO_AVAILABLE", False):
            with pytest.raises(ImportError):
                GPIOSampler(logger)

    def test_setupLine_usesBcmAndPullUp(self, gpio, gpio_sampler_instance):
        gpio_sampler_instance.setup_line(17, PullMode.UP)

        gpio.setmode.assert_called_once_with(gpio.BCM)
        gpio.setup.assert_called_once_with(17, gpio.IN, pull_up_down=gpio.PUD_UP)

    @pytest.mark.parametrize("pull_mode, constant", [
        (PullMode.DOWN, "PUD_DOWN"),
        (PullMode.OFF, "PUD_OFF"),
    ])
    def test_setupLine_pullModes(self, gpio, gpio_sampler_instance, pull_mode, constant):
        gpio_sampler_instance.setup_line(5, pull_mode)

        gpio.setup.assert_called_once_with(5, gpio.IN, pull_up_down=getattr(gpio, constant))

    def test_setupLine_modeSelectedOnce(self, gpio, gpio_sampler_instance):
        gpio_sampler_instance.setup_line(5, PullMode.UP)
        gpio_sampler_instance.setup_line(6, PullMode.UP)

        assert gpio.setmode.call_count == 1

    def test_setupLine_failure_isReraised(self, gpio, gpio_sampler_instance):
        gpio.setup.side_effect = RuntimeError("channel busy")

        with pytest.raises(RuntimeError):
            gpio_sampler_instance.setup_line(17, PullMode.UP)

    @pytest.mark.parametrize("raw, expected", [(1, Level.HIGH), (0, Level.LOW)])
    def test_readLevel(self, gpio, gpio_sampler_instance, raw, expected):
        gpio.input.return_value = raw

        assert gpio_sampler_instance.read_level(17) is expected
        gpio.input.assert_called_with(17)

    def test_validLine_headerGpiosOnly(self, gpio_sampler_instance):
        assert gpio_sampler_instance.valid_line(17)
        assert not gpio_sampler_instance.valid_line(28)

    def test_addEdgeListener_registersBothEdges(self, gpio, gpio_sampler_instance):
        listener = MagicMock()
        gpio.input.return_value = 0

        assert gpio_sampler_instance.add_edge_listener(17, listener) is True

        args, kwargs = gpio.add_event_detect.call_args
        assert args == (17, gpio.BOTH)
        assert "bouncetime" not in kwargs

        # RPi.GPIO calls back with the channel number
        kwargs["callback"](17)
        listener.assert_called_once_with(17, Level.LOW)

    def test_addEdgeListener_refused_fallsBackToPolling(self, gpio, gpio_sampler_instance):
        gpio.add_event_detect.side_effect = RuntimeError("Failed to add edge detection")

        assert gpio_sampler_instance.add_edge_listener(17, MagicMock()) is False

    def test_removeEdgeListener(self, gpio, gpio_sampler_instance):
        gpio_sampler_instance.add_edge_listener(17, MagicMock())

        gpio_sampler_instance.remove_edge_listener(17)
        gpio_sampler_instance.remove_edge_listener(17)

        gpio.remove_event_detect.assert_called_once_with(17)

    def test_releaseLine_cleansUpChannel(self, gpio, gpio_sampler_instance):
        gpio_sampler_instance.setup_line(17, PullMode.UP)

        gpio_sampler_instance.release_line(17)

        gpio.cleanup.assert_called_once_with(17)

    def test_cleanup_releasesEverything(self, gpio, gpio_sampler_instance):
        gpio_sampler_instance.setup_line(17, PullMode.UP)
        gpio_sampler_instance.add_edge_listener(17, MagicMock())

        gpio_sampler_instance.cleanup()

        gpio.remove_event_detect.assert_called_once_with(17)
        gpio.cleanup.assert_called_once_with()

    def test_cleanup_beforeSetup_isNoop(self, gpio, gpio_sampler_instance):
        gpio_sampler_instance.cleanup()

        gpio.cleanup.assert_not_called()
