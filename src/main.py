#!/usr/bin/env python3
"""
Button Monitor Demo

Six pull-up push buttons, each wired between a GPIO line and ground.
Demonstrates the ways of reading them:

    events  - callbacks on press, a message per press, "back" quits
    wait    - blocking wait-for-edge on one button
    hold    - press-and-hold measurement on one button
    poll    - manual polling loop with edge detection

Usage:
    python main.py --mode events
    python main.py --mode hold --button select --hold-ms 2000
    python main.py --mode poll --simulate      # no GPIO hardware needed
    python main.py --simulate --display log    # messages to the log only
"""

import argparse
import logging
import random
import signal
import sys
import threading
from pathlib import Path
from typing import Dict, Optional

import psutil

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent))

from input_monitor import (Button, ButtonPanel, ConsoleDisplay, DigitalInputMonitor, Edge, EdgeEvent,
                           GPIOSampler, IMessageDisplay, LoggerDisplay, MonitorConfig, SimulatedSampler,
                           WaitCancelledError, WaitTimeoutError, default_six_button_config)
from utils import CancellationToken, Clock, HybridLogger, MonotonicClock, OnceInMs, RunFlag

STATUS_INTERVAL_MS = 10000
WAIT_SLICE = 1.0  # seconds per blocking wait before re-checking the run flag
QUIT_BUTTON = "back"


class ButtonDemo:
    """Runs one demo mode against a configured button panel"""

    def __init__(self,
                 config: MonitorConfig,
                 monitor: DigitalInputMonitor,
                 display: IMessageDisplay,
                 logger,
                 clock: Optional[Clock] = None):
        self.config = config
        self.monitor = monitor
        self.display = display
        self.logger = logger
        self.clock = clock or MonotonicClock()
        self.run_flag = RunFlag()
        self.cancel = CancellationToken()
        self.panel = ButtonPanel.from_config(
            monitor, config, logger.create_class_logger("ButtonPanel", logging.INFO)
        )
        self.button_click_counts: Dict[str, int] = {name: 0 for name in self.panel.names}
        self._status_timer = OnceInMs(STATUS_INTERVAL_MS, self.clock)
        self._process = psutil.Process()

    def request_stop(self) -> None:
        """Ask every loop and blocking wait to finish"""
        self.run_flag.stop()
        self.cancel.cancel()

    # ------------------------------------------------------------------
    # Modes
    # ------------------------------------------------------------------

    def run_events(self) -> None:
        """Callback mode: handlers run on the monitor thread"""
        for name in self.panel.names:
            self.panel.on_press(name, self._on_press)
        self.panel.on_press(QUIT_BUTTON, self._on_quit)

        self.logger.info(f"Event mode: press any button, '{QUIT_BUTTON}' quits")
        self.monitor.start()
        while self.run_flag.is_running:
            self._log_status_if_due()
            self.cancel.wait(WAIT_SLICE)

    def run_wait(self, name: str) -> None:
        """Blocking mode: wait_for_edge in the main thread"""
        self.logger.info(f"Wait mode: waiting for presses of '{name}'")
        while self.run_flag.is_running:
            try:
                event = self.panel.wait_for_press(name, timeout=WAIT_SLICE, cancel=self.cancel)
            except WaitTimeoutError:
                self._log_status_if_due()
                continue
            except WaitCancelledError:
                break
            self._on_press(self.panel.button(name), event)

    def run_hold(self, name: str, threshold: float) -> None:
        """Hold mode: tap vs. hold on one button"""
        self.logger.info(f"Hold mode: hold '{name}' for {threshold:.1f}s")
        while self.run_flag.is_running:
            try:
                event = self.panel.measure_hold(name, threshold, timeout=WAIT_SLICE, cancel=self.cancel)
            except WaitTimeoutError:
                self._log_status_if_due()
                continue
            except WaitCancelledError:
                break

            if event.held:
                self.display.show_message(f"{name} held {threshold:.1f}s")
                # Let go before measuring the next press
                self._wait_released(name)
            else:
                self.display.show_message(f"{name} tapped ({event.hold_duration:.2f}s)")

    def run_poll(self) -> None:
        """Polling mode: read all buttons every poll interval"""
        self.logger.info(f"Poll mode: sampling every {self.config.poll_interval_ms}ms")
        self.panel.ignore_pressed_until_released()
        while self.run_flag.is_running:
            state = self.panel.read_state()
            for name in state.just_pressed():
                self.button_click_counts[name] += 1
                self.display.show_message(f"{name} pressed (#{self.button_click_counts[name]})")
            if state.for_button.get(QUIT_BUTTON) and state.was_changed[QUIT_BUTTON]:
                self.request_stop()
            self._log_status_if_due()
            self.clock.sleep(self.config.poll_interval)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _on_press(self, button: Button, event: EdgeEvent) -> None:
        self.button_click_counts[button.name] += 1
        self.display.show_message(f"{button.name} pressed (#{self.button_click_counts[button.name]})")

    def _on_quit(self, button: Button, event: EdgeEvent) -> None:
        self.logger.info(f"Quit requested with '{button.name}'")
        self.request_stop()

    def _wait_released(self, name: str) -> None:
        if not self.panel.is_pressed(name):
            return
        try:
            self.monitor.wait_for_edge(self.panel.button(name).line_id,
                                       Edge.RISING, cancel=self.cancel)
        except WaitCancelledError:
            self.logger.debug(f"Stopped waiting for '{name}' release")

    def _log_status_if_due(self) -> None:
        if not self._status_timer.should_execute():
            return
        pressed = [name for name in self.panel.names if self.panel.is_pressed(name)]
        clicks = ", ".join(f"{name}:{count}" for name, count in self.button_click_counts.items() if count)
        memory_mb = self._process.memory_info().rss / (1024 * 1024)
        self.logger.info(
            f"Status: pressed={pressed or 'none'} | clicks: {clicks or 'none'} | memory {memory_mb:.1f}MB"
        )


def simulate_presses(sampler: SimulatedSampler, config: MonitorConfig, run_flag: RunFlag,
                     rng: Optional[random.Random] = None) -> None:
    """Press random buttons (never the quit button) until the run flag drops"""
    rng = rng or random.Random()
    pins = [button.pin for button in config.buttons if button.name != QUIT_BUTTON]
    pause = threading.Event()
    while run_flag.is_running:
        pause.wait(rng.uniform(0.5, 1.5))
        pin = rng.choice(pins)
        sampler.press(pin)
        pause.wait(rng.choice([0.1, 0.2, config.hold_threshold + 0.5]))
        sampler.release(pin)


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Debounced push button demo")
    parser.add_argument("--mode", choices=["events", "wait", "hold", "poll"], default="events")
    parser.add_argument("--button", default="select", help="Button used by wait and hold modes")
    parser.add_argument("--simulate", action="store_true", help="Use simulated buttons instead of GPIO")
    parser.add_argument("--display", choices=["console", "log"], default="console",
                        help="Where button messages go; 'log' suits headless runs")
    parser.add_argument("--debounce-ms", type=int, default=None)
    parser.add_argument("--hold-ms", type=int, default=None)
    parser.add_argument("--log-dir", default="logs", help="Directory for log files ('' disables)")
    parser.add_argument("--debug", action="store_true", help="Log raw transitions")
    return parser.parse_args(argv)


def create_display(args: argparse.Namespace, logger) -> IMessageDisplay:
    if args.display == "log":
        return LoggerDisplay(logger)
    return ConsoleDisplay()


def create_config(args: argparse.Namespace) -> MonitorConfig:
    config = default_six_button_config()
    if args.debounce_ms is not None:
        config.debounce_ms = args.debounce_ms
    if args.hold_ms is not None:
        config.hold_threshold_ms = args.hold_ms
    config.validate()
    return config


def main(argv=None) -> int:
    args = parse_args(argv)

    main_logger = HybridLogger("ButtonMonitor", log_dir=args.log_dir or None)
    demo_logger = main_logger.get_class_logger("ButtonDemo", logging.INFO)
    monitor_logger = main_logger.get_class_logger("InputMonitor", logging.DEBUG if args.debug else logging.INFO)

    demo_logger.info("🔲 BUTTON MONITOR DEMO")

    try:
        config = create_config(args)
        demo_logger.info(f"Button configuration: {config.button_count} buttons on GPIO {config.pins}")
        demo_logger.info(f"Debounce {config.debounce_ms}ms, poll {config.poll_interval_ms}ms, "
                         f"hold {config.hold_threshold_ms}ms")

        if args.simulate:
            sampler = SimulatedSampler(monitor_logger)
        else:
            sampler = GPIOSampler(monitor_logger)

        with DigitalInputMonitor(sampler, monitor_logger,
                                 poll_interval=config.poll_interval,
                                 debounce_window=config.debounce_window) as monitor:
            demo = ButtonDemo(config, monitor, create_display(args, demo_logger), demo_logger)
            signal.signal(signal.SIGTERM, lambda sig, frame: demo.request_stop())

            if args.simulate:
                threading.Thread(target=simulate_presses, args=(sampler, config, demo.run_flag),
                                 name="button-simulator", daemon=True).start()

            try:
                if args.mode == "events":
                    demo.run_events()
                elif args.mode == "wait":
                    demo.run_wait(args.button)
                elif args.mode == "hold":
                    demo.run_hold(args.button, config.hold_threshold)
                else:
                    demo.run_poll()
            except KeyboardInterrupt:
                demo_logger.info("⏹️  Stopped by user (Ctrl+C)")
            finally:
                demo.request_stop()
        return 0

    except Exception as e:
        demo_logger.error(f"Button monitor error: {e}", exception=e)
        return 1
    finally:
        demo_logger.info("✅ Button monitor shut down")
        main_logger.cleanup()


if __name__ == "__main__":
    sys.exit(main())
