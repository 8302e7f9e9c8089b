"""
Unit tests for backend/session/ticker.py
"""

import threading
import time

import pytest

pytestmark = pytest.mark.unit

from backend.session.ticker import IntervalTicker, interval_ticker_factory


class TestIntervalTicker:
    def test_rejects_non_positive_interval(self):
        with pytest.raises(ValueError):
            IntervalTicker(lambda: None, interval_seconds=0)

    def test_start_and_stop_are_idempotent(self):
        ticker = IntervalTicker(lambda: None, interval_seconds=60)
        assert not ticker.running
        ticker.start()
        ticker.start()
        assert ticker.running
        ticker.stop()
        ticker.stop()
        assert not ticker.running

    def test_calls_callback_until_stopped(self):
        fired = threading.Event()
        ticker = IntervalTicker(fired.set, interval_seconds=0.01)
        ticker.start()
        try:
            assert fired.wait(timeout=2.0)
        finally:
            ticker.stop()

    def test_stop_from_inside_callback(self):
        done = threading.Event()

        def callback():
            ticker.stop()
            done.set()

        ticker = IntervalTicker(callback, interval_seconds=0.01)
        ticker.start()
        assert done.wait(timeout=2.0)
        assert not ticker.running

    def test_callback_errors_are_swallowed_and_logged(self):
        calls = []
        second = threading.Event()

        def callback():
            calls.append(1)
            if len(calls) >= 2:
                second.set()
            raise RuntimeError("boom")

        ticker = IntervalTicker(callback, interval_seconds=0.01)
        ticker.start()
        try:
            assert second.wait(timeout=2.0)
        finally:
            ticker.stop()


class TestFactory:
    def test_factory_builds_interval_tickers(self):
        factory = interval_ticker_factory(0.5, name="test")
        ticker = factory(lambda: None)
        assert isinstance(ticker, IntervalTicker)
        assert not ticker.running


class TestStopUnderConsumerLock:
    """Ticks take the consumer's lock and are dropped once their run is stopped."""

    def test_pending_tick_is_dropped_after_stop(self):
        lock = threading.RLock()
        ticks = []
        ticker = IntervalTicker(lambda: ticks.append(1), interval_seconds=0.02, lock=lock)

        with lock:
            ticker.start()
            # the first tick is now blocked on the lock
            time.sleep(0.1)
            ticker.stop()
        time.sleep(0.1)

        assert ticks == []

    def test_restart_delivers_only_new_ticks(self):
        lock = threading.RLock()
        runs = []
        current = {"run": 1}
        ticker = IntervalTicker(
            lambda: runs.append(current["run"]), interval_seconds=0.02, lock=lock
        )

        with lock:
            ticker.start()
            time.sleep(0.1)
            ticker.stop()
            current["run"] = 2
            ticker.start()
        time.sleep(0.1)
        ticker.stop()

        assert runs
        assert set(runs) == {2}

    def test_callback_runs_under_the_lock(self):
        lock = threading.RLock()
        held = []
        done = threading.Event()

        def callback():
            # another thread must not get the lock while a tick runs
            other = threading.Thread(target=lambda: held.append(lock.acquire(blocking=False)))
            other.start()
            other.join()
            ticker.stop()
            done.set()

        ticker = IntervalTicker(callback, interval_seconds=0.01, lock=lock)
        ticker.start()
        assert done.wait(timeout=2.0)
        assert held == [False]
