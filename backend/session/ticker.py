"""
Repeating one-second tick sources.

The engine has exactly two of them: the shared block-timer tick and the
rest-countdown tick. Both are plain repeating timers with idempotent
start/stop; they are not general-purpose schedulers.
"""

import logging
from contextlib import nullcontext
from threading import Event, Lock, Thread
from typing import Callable, ContextManager, Optional, Protocol

logger = logging.getLogger(__name__)

DEFAULT_TICK_INTERVAL_SECONDS = 1.0


class Ticker(Protocol):
    """A repeating timer calling a callback once per interval."""

    @property
    def running(self) -> bool:
        ...

    def start(self) -> None:
        """Start ticking. No-op if already running."""
        ...

    def stop(self) -> None:
        """Stop ticking. No tick is delivered after stop() returns."""
        ...


class TickerFactory(Protocol):
    """Builds a ticker for a callback guarded by the consumer's lock."""

    def __call__(
        self,
        callback: Callable[[], None],
        lock: Optional[ContextManager] = None,
    ) -> Ticker:
        ...


class IntervalTicker:
    """
    Ticker backed by a daemon thread.

    ``stop()`` never joins the thread, so it is safe to call from inside the
    callback (a countdown reaching zero stops its own ticker).

    When ``lock`` is given, every tick takes it and re-checks that its own
    run was not stopped before calling back. A consumer that stops and
    restarts the ticker while holding that lock therefore never receives a
    tick from the run it stopped.

    Usage:
        ticker = IntervalTicker(scheduler.tick, interval_seconds=1.0, lock=scheduler.lock)
        ticker.start()
        ...
        ticker.stop()
    """

    def __init__(
        self,
        callback: Callable[[], None],
        interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS,
        name: str = "session-ticker",
        lock: Optional[ContextManager] = None,
    ):
        if interval_seconds <= 0:
            raise ValueError("interval_seconds must be positive")
        self._callback = callback
        self._interval = interval_seconds
        self._name = name
        self._tick_lock = lock if lock is not None else nullcontext()
        self._lock = Lock()
        self._thread: Optional[Thread] = None
        self._stop_event: Optional[Event] = None

    @property
    def running(self) -> bool:
        with self._lock:
            return self._thread is not None

    def start(self) -> None:
        with self._lock:
            if self._thread is not None:
                return
            stop_event = Event()
            thread = Thread(
                target=self._run,
                args=(stop_event,),
                name=self._name,
                daemon=True,
            )
            self._stop_event = stop_event
            self._thread = thread
        thread.start()
        logger.debug(f"{self._name} started ({self._interval}s interval)")

    def stop(self) -> None:
        with self._lock:
            if self._thread is None:
                return
            self._stop_event.set()
            self._thread = None
            self._stop_event = None
        logger.debug(f"{self._name} stopped")

    def _run(self, stop_event: Event) -> None:
        while not stop_event.wait(self._interval):
            with self._tick_lock:
                # stopped while this tick waited for the lock
                if stop_event.is_set():
                    break
                try:
                    self._callback()
                except Exception:
                    logger.exception(f"{self._name} tick callback failed")


def interval_ticker_factory(
    interval_seconds: float = DEFAULT_TICK_INTERVAL_SECONDS,
    name: str = "session-ticker",
) -> TickerFactory:
    """Build a TickerFactory producing IntervalTickers with the given interval."""

    def factory(
        callback: Callable[[], None],
        lock: Optional[ContextManager] = None,
    ) -> Ticker:
        return IntervalTicker(callback, interval_seconds=interval_seconds, name=name, lock=lock)

    return factory
