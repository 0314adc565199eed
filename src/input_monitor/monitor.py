"""
Digital input monitor - debounced edge events over a line sampler
"""

import itertools
import logging
import threading
from typing import Callable, Dict, List, Optional, Union

from utils import Clock, MonotonicClock, OnceInMs, RunFlag, CancellationToken, wait_until, describe_pin
from utils import DEFAULT_POLL_INTERVAL

from .debounce import DebounceFilter
from .errors import ConfigurationError, UsageError, WaitTimeoutError, WaitCancelledError
from .events import EdgeEvent
from .interfaces import ILineSampler, IEdgeHandler
from .levels import Edge, Level, PullMode

DEFAULT_DEBOUNCE_WINDOW = 0.1  # 100ms
HOLD_TOLERANCE = 1e-9  # Float noise allowed when comparing a hold against its threshold
POLL_ERROR_LOG_INTERVAL_MS = 1000

EdgeCallback = Callable[[EdgeEvent], None]
Handler = Union[EdgeCallback, IEdgeHandler]


class Subscription:
    """Handle returned by subscribe(); pass it to unsubscribe()"""

    _ids = itertools.count(1)

    def __init__(self, line_id: int, edge_kind: Edge, callback: EdgeCallback, debounce_window: float):
        self.id = next(self._ids)
        self.line_id = line_id
        self.edge_kind = edge_kind
        self.debounce_window = debounce_window
        self.active = True
        self._callback = callback
        self._debounce = DebounceFilter(debounce_window)

    @property
    def suppressed_count(self) -> int:
        """Transitions dropped by this subscription's debounce window"""
        return self._debounce.suppressed_count

    def __repr__(self) -> str:
        return (f"<Subscription #{self.id} GPIO{self.line_id} {self.edge_kind.name} "
                f"debounce={self.debounce_window * 1000:.0f}ms>")


class _LineState:
    """Per-line bookkeeping; every field is guarded by `lock`"""

    def __init__(self, line_id: int, pull_mode: PullMode, level: Level, now: float):
        self.line_id = line_id
        self.pull_mode = pull_mode
        self.last_level = level
        self.changed_at = now
        self.sequence = 0
        self.interrupt_driven = False
        self.removed = False
        self.subscriptions: List[Subscription] = []
        self.lock = threading.RLock()


class DigitalInputMonitor:
    """
    Observes digital input lines and reports debounced transitions.

    Works in two ways, which can be mixed:
    - Event-driven: subscribe() handlers, then start() a background polling
      thread (or interrupt delivery where the sampler supports it).
    - Blocking: wait_for_edge() and measure_hold() poll from the caller's
      own thread, no background thread needed.

    Edge processing and handler calls for one line are serialized and
    delivered in the order the transitions were observed. Different lines
    may be handled concurrently.

    Example:
        main_logger = HybridLogger("buttons")
        logger = main_logger.get_class_logger("InputMonitor", logging.INFO)
        monitor = DigitalInputMonitor(GPIOSampler(logger), logger)

        monitor.configure(17, PullMode.UP)
        monitor.subscribe(17, Edge.FALLING, lambda e: print("pressed"), debounce_window=0.1)
        monitor.start()
    """

    def __init__(self,
                 sampler: ILineSampler,
                 logger,
                 clock: Optional[Clock] = None,
                 poll_interval: float = DEFAULT_POLL_INTERVAL,
                 debounce_window: float = DEFAULT_DEBOUNCE_WINDOW):
        """
        Args:
            sampler: ILineSampler giving access to the hardware lines
            logger: ClassLogger instance from HybridLogger.get_class_logger()
            clock: Time source (MonotonicClock by default, SimulatedClock in tests)
            poll_interval: Seconds between samples when polling
            debounce_window: Default debounce window for subscriptions, in seconds
        """
        if poll_interval <= 0:
            raise ConfigurationError(f"Poll interval must be positive, got {poll_interval}")
        if debounce_window < 0:
            raise ConfigurationError(f"Debounce window must not be negative, got {debounce_window}")
        if debounce_window and poll_interval > debounce_window / 2:
            raise ConfigurationError(
                f"Poll interval {poll_interval * 1000:.1f}ms too slow for "
                f"{debounce_window * 1000:.1f}ms debounce (must be at most half)"
            )

        self._sampler = sampler
        self._logger = logger
        self._clock = clock or MonotonicClock()
        self._poll_interval = poll_interval
        self._debounce_window = debounce_window

        self._lines: Dict[int, _LineState] = {}
        self._lock = threading.RLock()
        self._run_flag: Optional[RunFlag] = None
        self._thread: Optional[threading.Thread] = None
        self._poll_errors = 0

        self._logger.info(
            f"InputMonitor initialized: poll {poll_interval * 1000:.1f}ms, "
            f"debounce {debounce_window * 1000:.0f}ms"
        )

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------

    def configure(self, line_id: int, pull_mode: PullMode = PullMode.UP) -> None:
        """
        Register a line as digital input.

        Raises:
            ConfigurationError: line_id is invalid or already registered
        """
        if not self._sampler.valid_line(line_id):
            raise ConfigurationError(f"Invalid line id: {line_id!r}")

        with self._lock:
            if line_id in self._lines:
                raise ConfigurationError(
                    f"{describe_pin(line_id)} is already configured; unconfigure it first"
                )

            self._sampler.setup_line(line_id, pull_mode)
            level = self._sampler.read_level(line_id)
            state = _LineState(line_id, pull_mode, level, self._clock.now())
            self._lines[line_id] = state
            running = self.is_running

        if running:
            self._attach_interrupts(state)

        self._logger.info(f"Line configured: {describe_pin(line_id)}, pull {pull_mode.value}, level {level.name}")

    def unconfigure(self, line_id: int) -> None:
        """Release a line and drop its subscriptions"""
        with self._lock:
            state = self._require_line(line_id)
            del self._lines[line_id]

        with state.lock:
            state.removed = True
            for subscription in state.subscriptions:
                subscription.active = False
            state.subscriptions.clear()

        self._sampler.release_line(line_id)
        self._logger.info(f"Line unconfigured: {describe_pin(line_id)}")

    def is_configured(self, line_id: int) -> bool:
        with self._lock:
            return line_id in self._lines

    @property
    def line_ids(self) -> List[int]:
        with self._lock:
            return sorted(self._lines)

    def _require_line(self, line_id: int) -> _LineState:
        with self._lock:
            state = self._lines.get(line_id)
        if state is None:
            raise UsageError(f"Line {line_id!r} is not configured")
        return state

    # ------------------------------------------------------------------
    # Subscriptions
    # ------------------------------------------------------------------

    def subscribe(self,
                  line_id: int,
                  edge_kind: Edge,
                  handler: Handler,
                  debounce_window: Optional[float] = None) -> Subscription:
        """
        Call `handler` for every debounced transition of kind `edge_kind`.

        Args:
            line_id: Configured line
            edge_kind: Edge.FALLING (press), Edge.RISING (release) or Edge.BOTH
            handler: IEdgeHandler or callable taking an EdgeEvent
            debounce_window: Seconds; defaults to the monitor's window

        Returns:
            Subscription handle for unsubscribe()
        """
        state = self._require_line(line_id)

        if isinstance(handler, IEdgeHandler):
            callback = handler.on_edge
        elif callable(handler):
            callback = handler
        else:
            raise TypeError(f"Handler must be callable or an IEdgeHandler, got {type(handler).__name__}")

        window = self._debounce_window if debounce_window is None else debounce_window
        if window < 0:
            raise ConfigurationError(f"Debounce window must not be negative, got {window}")
        if window and window < 2 * self._poll_interval:
            self._logger.warning(
                f"Debounce {window * 1000:.1f}ms on {describe_pin(line_id)} is shorter than "
                f"two poll intervals; polled bounces may slip through"
            )

        subscription = Subscription(line_id, edge_kind, callback, window)
        with state.lock:
            state.subscriptions.append(subscription)

        self._logger.debug(f"Subscribed {subscription}")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        state = self._require_line(subscription.line_id)
        with state.lock:
            if subscription not in state.subscriptions:
                raise UsageError(f"Unknown subscription {subscription!r}")
            state.subscriptions.remove(subscription)
            subscription.active = False
        self._logger.debug(f"Unsubscribed {subscription}")

    # ------------------------------------------------------------------
    # Reading and edge processing
    # ------------------------------------------------------------------

    def read(self, line_id: int) -> Level:
        """
        Instantaneous level of a line, without blocking.

        Raises:
            UsageError: line is not configured
        """
        self._require_line(line_id)
        return self._sampler.read_level(line_id)

    def snapshot(self) -> Dict[int, Level]:
        """Current level of every configured line"""
        return {line_id: self._sampler.read_level(line_id) for line_id in self.line_ids}

    def poll_once(self) -> None:
        """Sample every polled line once and dispatch resulting edges"""
        with self._lock:
            states = list(self._lines.values())
        for state in states:
            self._service_line(state)

    def _service_line(self, state: _LineState) -> None:
        if state.interrupt_driven:
            return
        with state.lock:
            if state.removed:
                return
            self._process_level(state, self._sampler.read_level(state.line_id))

    def _on_interrupt(self, line_id: int, level: Level) -> None:
        with self._lock:
            state = self._lines.get(line_id)
        if state is None:
            return
        with state.lock:
            if not state.removed:
                self._process_level(state, level)

    def _process_level(self, state: _LineState, level: Level) -> None:
        """Turn a raw level into an edge event; caller holds state.lock"""
        if level is state.last_level:
            return

        now = self._clock.now()
        edge = Edge.between(state.last_level, level)
        state.last_level = level
        state.changed_at = now
        state.sequence += 1

        event = EdgeEvent(
            line_id=state.line_id,
            edge=edge,
            level=level,
            timestamp=now,
            sequence=state.sequence
        )
        if self._logger.is_enabled_for(logging.DEBUG):
            self._logger.debug(f"Raw {edge.name.lower()} on {describe_pin(state.line_id)} #{state.sequence}")

        for subscription in list(state.subscriptions):
            self._deliver(subscription, event)

    def _deliver(self, subscription: Subscription, event: EdgeEvent) -> None:
        if not subscription.active:
            return
        if not subscription._debounce.accept(event.timestamp):
            self._logger.debug(f"Bounce suppressed on GPIO{event.line_id} ({event.edge.name.lower()})")
            return
        if not subscription.edge_kind.matches(event.edge):
            return
        try:
            subscription._callback(event)
        except Exception as e:
            self._logger.error(f"Handler for {subscription!r} failed: {e}", exception=e)

    # ------------------------------------------------------------------
    # Blocking operations
    # ------------------------------------------------------------------

    def wait_for_edge(self,
                      line_id: int,
                      edge_kind: Edge = Edge.FALLING,
                      timeout: Optional[float] = None,
                      cancel: Optional[CancellationToken] = None,
                      debounce_window: float = 0.0) -> EdgeEvent:
        """
        Block until the next `edge_kind` transition on a line.

        Only transitions observed after the call count.

        Args:
            line_id: Configured line
            edge_kind: Edge kind to wait for
            timeout: Seconds; None blocks until the edge happens
            cancel: Optional token to abandon the wait from another thread
            debounce_window: Seconds of bounce suppression for this wait

        Returns:
            The EdgeEvent that ended the wait

        Raises:
            WaitTimeoutError: timeout elapsed first
            WaitCancelledError: cancel token fired first
        """
        state = self._require_line(line_id)

        # Flush transitions that happened before the call
        self._service_line(state)

        captured: List[EdgeEvent] = []
        subscription = self.subscribe(line_id, edge_kind, captured.append, debounce_window)

        def _edge_seen() -> bool:
            self._service_line(state)
            return bool(captured)

        try:
            seen = wait_until(_edge_seen, timeout, self._poll_interval, self._clock, cancel)
        finally:
            if subscription.active:
                self.unsubscribe(subscription)

        if seen:
            return captured[0]
        self._raise_wait_failure(line_id, f"{edge_kind.name.lower()} edge", cancel)

    def _await_level(self,
                     state: _LineState,
                     level: Level,
                     timeout: Optional[float],
                     cancel: Optional[CancellationToken]) -> Optional[float]:
        """Time the line reached `level`, or None if the wait ended first"""
        started = self._clock.now()

        def _at_level() -> bool:
            self._service_line(state)
            with state.lock:
                return state.last_level is level

        if not wait_until(_at_level, timeout, self._poll_interval, self._clock, cancel):
            return None
        with state.lock:
            return max(state.changed_at, started)

    def measure_press(self,
                      line_id: int,
                      threshold_duration: float,
                      timeout: Optional[float] = None,
                      cancel: Optional[CancellationToken] = None) -> EdgeEvent:
        """
        Wait for a press, then time it up to `threshold_duration`.

        Returns as soon as the line is released or the threshold passes,
        whichever is first.

        Args:
            line_id: Configured line
            threshold_duration: Seconds the line must stay LOW to count as held
            timeout: Seconds to wait for the press itself; None waits forever
            cancel: Optional token to abandon the measurement

        Returns:
            FALLING EdgeEvent annotated with hold_duration and held
        """
        if threshold_duration < 0:
            raise ValueError(f"Hold threshold must not be negative, got {threshold_duration}")
        state = self._require_line(line_id)

        pressed_at = self._await_level(state, Level.LOW, timeout, cancel)
        if pressed_at is None:
            self._raise_wait_failure(line_id, "press", cancel)
        with state.lock:
            sequence = state.sequence

        remaining = max(0.0, threshold_duration - (self._clock.now() - pressed_at))
        released_at = self._await_level(state, Level.HIGH, remaining, cancel)

        if released_at is None:
            if cancel is not None and cancel.is_cancelled:
                raise WaitCancelledError(f"Hold measurement on {describe_pin(line_id)} cancelled")
            # Still asserted when the threshold ran out
            duration = max(self._clock.now() - pressed_at, threshold_duration)
        else:
            duration = released_at - pressed_at

        held = duration + HOLD_TOLERANCE >= threshold_duration
        self._logger.debug(
            f"Hold on {describe_pin(line_id)}: {duration * 1000:.0f}ms "
            f"({'held' if held else 'released'} vs {threshold_duration * 1000:.0f}ms)"
        )
        return EdgeEvent(
            line_id=line_id,
            edge=Edge.FALLING,
            level=Level.LOW,
            timestamp=pressed_at,
            sequence=sequence,
            hold_duration=duration,
            held=held
        )

    def measure_hold(self,
                     line_id: int,
                     threshold_duration: float,
                     timeout: Optional[float] = None,
                     cancel: Optional[CancellationToken] = None) -> bool:
        """
        Wait for a press and report whether it lasted `threshold_duration`.

        Returns:
            True if the line stayed LOW for at least the threshold
        """
        return bool(self.measure_press(line_id, threshold_duration, timeout, cancel).held)

    def _raise_wait_failure(self, line_id: int, what: str, cancel: Optional[CancellationToken]):
        if cancel is not None and cancel.is_cancelled:
            raise WaitCancelledError(f"Wait for {what} on {describe_pin(line_id)} cancelled")
        raise WaitTimeoutError(f"Timed out waiting for {what} on {describe_pin(line_id)}")

    # ------------------------------------------------------------------
    # Background delivery
    # ------------------------------------------------------------------

    @property
    def is_running(self) -> bool:
        return self._run_flag is not None and self._run_flag.is_running

    def start(self) -> None:
        """Begin delivering events to subscribers in the background"""
        with self._lock:
            if self.is_running:
                return
            run_flag = self._run_flag = RunFlag()
            states = list(self._lines.values())

        for state in states:
            self._attach_interrupts(state)

        thread = threading.Thread(
            target=self._poll_loop, args=(run_flag,), name="input-monitor", daemon=True
        )
        with self._lock:
            self._thread = thread
        thread.start()

        interrupt_count = sum(1 for state in states if state.interrupt_driven)
        self._logger.info(
            f"Monitoring {len(states)} lines ({interrupt_count} interrupt-driven, "
            f"{len(states) - interrupt_count} polled)"
        )

    def _attach_interrupts(self, state: _LineState) -> None:
        if self._sampler.add_edge_listener(state.line_id, self._on_interrupt):
            with state.lock:
                state.interrupt_driven = True
                # Catch up on anything that changed before delivery started
                self._process_level(state, self._sampler.read_level(state.line_id))

    @property
    def poll_error_count(self) -> int:
        """Line reads that failed in the background polling thread"""
        return self._poll_errors

    def _poll_loop(self, run_flag: RunFlag) -> None:
        """
        Background sampling. A failed read is logged and that line is
        retried on the next cycle; other lines keep being served.
        """
        error_log_timer = OnceInMs(POLL_ERROR_LOG_INTERVAL_MS, self._clock)
        try:
            while run_flag.is_running:
                with self._lock:
                    states = list(self._lines.values())
                for state in states:
                    try:
                        self._service_line(state)
                    except Exception as e:
                        self._poll_errors += 1
                        if error_log_timer.should_execute():
                            self._logger.error(
                                f"Polling {describe_pin(state.line_id)} failed "
                                f"({self._poll_errors} errors so far): {e}",
                                exception=e
                            )
                self._clock.sleep(self._poll_interval)
        finally:
            # is_running must not report a dead thread as running
            run_flag.stop()

    def stop(self, join_timeout: float = 1.0) -> None:
        """Stop background delivery; blocking operations keep working"""
        with self._lock:
            if self._run_flag is None:
                return
            self._run_flag.stop()
            self._run_flag = None
            thread = self._thread
            self._thread = None
            states = list(self._lines.values())

        for state in states:
            if state.interrupt_driven:
                self._sampler.remove_edge_listener(state.line_id)
                with state.lock:
                    state.interrupt_driven = False

        if thread is not None and thread is not threading.current_thread():
            thread.join(join_timeout)
        self._logger.info("Monitoring stopped")

    def cleanup(self) -> None:
        """Stop monitoring and release every line"""
        self.stop()
        with self._lock:
            line_ids = list(self._lines)
        for line_id in line_ids:
            self.unconfigure(line_id)
        self._sampler.cleanup()
        self._logger.info("InputMonitor cleaned up")

    def __enter__(self) -> 'DigitalInputMonitor':
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        self.cleanup()
