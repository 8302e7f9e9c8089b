"""
Unit tests for backend/session/rest_timer.py

Covers the single-slot countdown, presets, explicit stop, and the alert
fired when the countdown reaches zero.
"""

import time

import pytest

pytestmark = pytest.mark.unit

from backend.session.rest_timer import (
    DEFAULT_REST_SECONDS,
    REST_ALERT_CHIME,
    REST_ALERT_VIBRATION_MS,
    RestTimer,
)
from backend.session.ticker import IntervalTicker
from tests.fakes import ManualTickerFactory, RecordingAlertSink


@pytest.fixture
def factory() -> ManualTickerFactory:
    return ManualTickerFactory()


@pytest.fixture
def sink() -> RecordingAlertSink:
    return RecordingAlertSink()


@pytest.fixture
def timer(sink, factory) -> RestTimer:
    return RestTimer(sink, ticker_factory=factory)


class TestStart:
    def test_initial_state(self, timer):
        state = timer.state
        assert state.active is False
        assert state.seconds_remaining == 0
        assert state.preset_seconds == DEFAULT_REST_SECONDS

    def test_start_uses_default_preset(self, timer, factory):
        state = timer.start("s1")
        assert state.active is True
        assert state.seconds_remaining == 90
        assert state.after_set_id == "s1"
        assert factory.rest_ticker.running

    def test_explicit_seconds_become_the_new_preset(self, timer):
        timer.start("s1", 120)
        timer.stop()
        assert timer.start("s2").seconds_remaining == 120

    def test_start_replaces_running_countdown(self, timer, factory):
        timer.start("s1", 60)
        factory.rest_ticker.fire(10)
        state = timer.start("s2", 30)
        assert state.after_set_id == "s2"
        assert state.seconds_remaining == 30
        assert len(factory.tickers) == 1

    @pytest.mark.parametrize("seconds", [0, -5])
    def test_non_positive_seconds_rejected(self, timer, seconds):
        with pytest.raises(ValueError):
            timer.start("s1", seconds)
        assert timer.active is False

    def test_non_positive_default_rejected(self, sink, factory):
        with pytest.raises(ValueError):
            RestTimer(sink, ticker_factory=factory, default_seconds=0)


class TestCountdown:
    def test_tick_decrements(self, timer, factory):
        timer.start("s1", 5)
        factory.rest_ticker.fire(2)
        assert timer.state.seconds_remaining == 3

    def test_reaching_zero_alerts_once_and_clears(self, timer, factory, sink):
        timer.start("s1", 3)
        factory.rest_ticker.fire(10)
        assert timer.active is False
        assert timer.state.seconds_remaining == 0
        assert not factory.rest_ticker.running
        assert sink.vibrations == [REST_ALERT_VIBRATION_MS]
        assert sink.chimes == [REST_ALERT_CHIME]

    def test_preset_survives_expiry(self, timer, factory):
        timer.start("s1", 2)
        factory.rest_ticker.fire(2)
        assert timer.state.preset_seconds == 2

    def test_tick_while_inactive_is_ignored(self, timer, sink):
        timer.tick()
        assert sink.alert_count == 0


class TestStop:
    def test_stop_never_alerts(self, timer, factory, sink):
        timer.start("s1", 3)
        factory.rest_ticker.fire(2)
        timer.stop()
        assert timer.active is False
        assert not factory.rest_ticker.running
        assert sink.alert_count == 0

    def test_stop_is_idempotent(self, timer):
        timer.stop()
        timer.stop()
        assert timer.active is False


class TestAlertChime:
    def test_three_tones_rising(self):
        assert [t.frequency_hz for t in REST_ALERT_CHIME] == [880.0, 880.0, 1320.0]
        assert [t.start_seconds for t in REST_ALERT_CHIME] == [0.0, 0.2, 0.4]

    def test_failing_sink_does_not_break_countdown(self, factory):
        class BrokenSink:
            def vibrate(self, pattern_ms):
                raise RuntimeError("no motor")

            def play_chime(self, tones):
                raise RuntimeError("no speaker")

        timer = RestTimer(BrokenSink(), ticker_factory=factory)
        timer.start("s1", 1)
        factory.rest_ticker.fire()
        assert timer.active is False


class TestRestartWithRealTicker:
    def test_restart_never_receives_a_tick_of_the_cancelled_countdown(self, sink):
        locks = []

        def factory(callback, lock=None):
            locks.append(lock)
            return IntervalTicker(callback, interval_seconds=0.3, lock=lock)

        timer = RestTimer(sink, ticker_factory=factory)
        timer.start("s1", 60)
        with locks[0]:
            # the first countdown's tick comes due and waits for the lock
            time.sleep(0.5)
            timer.start("s2", 60)
        time.sleep(0.1)

        state = timer.state
        timer.stop()
        assert state.after_set_id == "s2"
        assert state.seconds_remaining == 60
