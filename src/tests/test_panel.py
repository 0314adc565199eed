"""
Tests for ButtonPanel, PanelState and MonitorConfig
"""

import pytest

from input_monitor import (Button, ButtonConfig, ButtonPanel, ConfigurationError, MonitorConfig,
                           PanelState, PullMode, UsageError, default_six_button_config)

BUTTONS = [Button("up", 5), Button("down", 6), Button("select", 26)]


@pytest.fixture
def panel(monitor, logger):
    return ButtonPanel(monitor, BUTTONS, logger, hold_threshold=1.0)


# ================================================================================
# PanelState
# ================================================================================

class TestPanelState:

    def test_derivedFields(self):
        state = PanelState(
            for_button={"up": True, "down": False, "select": True},
            previous_state_of={"up": False, "down": True, "select": True}
        )

        assert state.was_changed == {"up": True, "down": True, "select": False}
        assert state.total_buttons_pressed == 2
        assert state.any_changed
        assert state.just_pressed() == ["up"]
        assert state.just_released() == ["down"]
        assert state.get_button_count() == 3

    def test_noChanges(self):
        state = PanelState({"up": False}, {"up": False})

        assert not state.any_changed
        assert state.just_pressed() == []

    def test_mismatchedButtons_raisesValueError(self):
        with pytest.raises(ValueError):
            PanelState({"up": False}, {"down": False})

    def test_nonBoolValue_raisesTypeError(self):
        with pytest.raises(TypeError):
            PanelState({"up": 1}, {"up": False})

    def test_list_raisesTypeError(self):
        with pytest.raises(TypeError):
            PanelState([True], [False])

    def test_str_listsPressedAndChanged(self):
        state = PanelState({"up": True, "down": False}, {"up": False, "down": False})

        assert str(state) == "PanelState(pressed=['up'], changed=['up'], total_pressed=1)"


# ================================================================================
# ButtonPanel
# ================================================================================

class TestButtonPanel:

    def test_init_configuresOneLinePerButton(self, panel, monitor):
        assert monitor.line_ids == [5, 6, 26]
        assert panel.names == ["up", "down", "select"]
        assert panel.get_button_count() == 3

    def test_isPressed_pullUpLogic(self, panel, sampler):
        assert not panel.is_pressed("select")

        sampler.press(26)

        assert panel.is_pressed("select")

    def test_unknownButton_raisesUsageError(self, panel):
        with pytest.raises(UsageError):
            panel.is_pressed("missing")

    def test_duplicateName_raisesUsageError(self, monitor, logger):
        with pytest.raises(UsageError):
            ButtonPanel(monitor, [Button("a", 5), Button("a", 6)], logger)

    def test_sharedLine_raisesConfigurationError(self, monitor, logger):
        with pytest.raises(ConfigurationError):
            ButtonPanel(monitor, [Button("a", 5), Button("b", 5)], logger)

    def test_readState_detectsPressAndRelease(self, panel, sampler):
        assert not panel.read_state().any_changed

        sampler.press(5)
        state = panel.read_state()
        assert state.just_pressed() == ["up"]

        state = panel.read_state()
        assert not state.any_changed
        assert state.for_button["up"]

        sampler.release(5)
        assert panel.read_state().just_released() == ["up"]

    def test_ignorePressedUntilReleased(self, panel, sampler):
        sampler.press(6)
        panel.ignore_pressed_until_released()

        assert not panel.read_state().for_button["down"]

        sampler.release(6)
        assert not panel.read_state().any_changed

        sampler.press(6)
        assert panel.read_state().just_pressed() == ["down"]

    def test_onPress_passesButton(self, panel, sampler, monitor):
        received = []
        panel.on_press("select", lambda button, event: received.append((button, event)))

        sampler.press(26)
        monitor.poll_once()

        assert len(received) == 1
        button, event = received[0]
        assert button == Button("select", 26)
        assert event.is_press

    def test_onRelease(self, panel, sampler, monitor, clock):
        received = []
        panel.on_release("up", lambda button, event: received.append(button.name))

        sampler.press(5)
        monitor.poll_once()
        clock.advance(0.3)
        sampler.release(5)
        monitor.poll_once()

        assert received == ["up"]

    def test_waitForPress(self, panel, sampler, clock):
        clock.call_later(0.25, sampler.press, 6)

        event = panel.wait_for_press("down", timeout=1.0)

        assert event.line_id == 6

    def test_measureHold_usesDefaultThreshold(self, panel, sampler, clock):
        clock.call_later(0.1, sampler.press, 26)

        event = panel.measure_hold("select")

        assert event.held
        assert event.hold_duration == pytest.approx(1.0, abs=0.011)

    def test_fromConfig(self, monitor, logger):
        panel = ButtonPanel.from_config(monitor, default_six_button_config(), logger)

        assert panel.get_button_count() == 6
        assert panel.button("select").line_id == 26


# ================================================================================
# MonitorConfig
# ================================================================================

class TestMonitorConfig:

    def test_defaultConfig_isValid(self):
        config = default_six_button_config()

        config.validate()

        assert config.button_count == 6
        assert config.pull_mode is PullMode.UP
        assert config.debounce_window == pytest.approx(0.1)
        assert config.poll_interval == pytest.approx(0.005)
        assert config.hold_threshold == pytest.approx(3.0)

    @pytest.mark.parametrize("changes", [
        {"buttons": []},
        {"buttons": [ButtonConfig("a", 5), ButtonConfig("a", 6)]},
        {"buttons": [ButtonConfig("a", 5), ButtonConfig("b", 5)]},
        {"buttons": [ButtonConfig("a", 40)]},
        {"buttons": [ButtonConfig("", 5)]},
        {"debounce_ms": -1},
        {"poll_interval_ms": 0},
        {"poll_interval_ms": 60},
        {"hold_threshold_ms": 0},
    ])
    def test_invalid_raisesConfigurationError(self, changes):
        config = default_six_button_config()
        for key, value in changes.items():
            setattr(config, key, value)

        with pytest.raises(ConfigurationError):
            config.validate()

    def test_zeroDebounce_allowsAnyPollInterval(self):
        config = MonitorConfig(buttons=[ButtonConfig("a", 5)], debounce_ms=0, poll_interval_ms=50)

        config.validate()
