"""
Manually driven tickers for deterministic timer tests.

The engine builds its block ticker and its rest ticker through one
TickerFactory. ManualTickerFactory keeps every ticker it builds and tells
them apart by the object owning the callback.
"""
from typing import Callable, ContextManager, List, Optional

from backend.session.block_timers import BlockTimerScheduler
from backend.session.rest_timer import RestTimer


class ManualTicker:
    """Ticker that only fires when the test calls fire()."""

    def __init__(self, callback: Callable[[], None], lock: Optional[ContextManager] = None):
        self._callback = callback
        self.lock = lock
        self._running = False
        self.start_count = 0
        self.stop_count = 0

    @property
    def running(self) -> bool:
        return self._running

    @property
    def owner(self) -> object:
        return getattr(self._callback, "__self__", None)

    def start(self) -> None:
        if not self._running:
            self.start_count += 1
        self._running = True

    def stop(self) -> None:
        if self._running:
            self.stop_count += 1
        self._running = False

    def fire(self, times: int = 1) -> None:
        """Deliver ``times`` ticks, but only while running (like a real ticker)."""
        for _ in range(times):
            if not self._running:
                return
            self._callback()


class ManualTickerFactory:
    """
    TickerFactory producing ManualTickers.

    Usage:
        factory = ManualTickerFactory()
        scheduler = BlockTimerScheduler(factory)
        factory.block_ticker.fire(3)
    """

    def __init__(self):
        self.tickers: List[ManualTicker] = []

    def __call__(
        self,
        callback: Callable[[], None],
        lock: Optional[ContextManager] = None,
    ) -> ManualTicker:
        ticker = ManualTicker(callback, lock)
        self.tickers.append(ticker)
        return ticker

    def _find(self, owner_type: type) -> Optional[ManualTicker]:
        for ticker in self.tickers:
            if isinstance(ticker.owner, owner_type):
                return ticker
        return None

    @property
    def block_ticker(self) -> ManualTicker:
        ticker = self._find(BlockTimerScheduler)
        assert ticker is not None, "no block ticker was built"
        return ticker

    @property
    def rest_ticker(self) -> ManualTicker:
        ticker = self._find(RestTimer)
        assert ticker is not None, "no rest ticker was built"
        return ticker
