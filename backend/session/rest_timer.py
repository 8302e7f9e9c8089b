"""
Rest countdown.

A single-slot register: at most one rest countdown exists at any time.
Starting a new countdown cancels the previous one first. When a countdown
reaches zero it fires the rest alert (vibration + three-tone chime) through
an injected AlertSink and clears itself; stopping it explicitly never
alerts.
"""

import logging
from dataclasses import dataclass
from threading import RLock
from typing import Optional

from application.ports.alert_sink import AlertSink, ChimeTone
from backend.session.ticker import Ticker, TickerFactory, interval_ticker_factory

logger = logging.getLogger(__name__)

DEFAULT_REST_SECONDS = 90

# Vibrate/pause durations in milliseconds
REST_ALERT_VIBRATION_MS = [200, 100, 200, 100, 300]

# Two short A5 tones followed by an E6, 200ms apart
REST_ALERT_CHIME = (
    ChimeTone(frequency_hz=880.0, start_seconds=0.0, duration_seconds=0.15),
    ChimeTone(frequency_hz=880.0, start_seconds=0.2, duration_seconds=0.15),
    ChimeTone(frequency_hz=1320.0, start_seconds=0.4, duration_seconds=0.3),
)


@dataclass(frozen=True)
class RestTimerState:
    """Snapshot of the rest countdown."""
    active: bool = False
    seconds_remaining: int = 0
    preset_seconds: int = DEFAULT_REST_SECONDS
    after_set_id: Optional[str] = None


class RestTimer:
    """
    The one rest countdown of an engine instance.

    Usage:
        timer = RestTimer(alert_sink)
        timer.start("set-1")          # uses the last preset (90s by default)
        timer.start("set-2", 120)     # cancels set-1's countdown, preset=120
        timer.stop()                  # cancels without alerting
    """

    def __init__(
        self,
        alert_sink: AlertSink,
        ticker_factory: Optional[TickerFactory] = None,
        default_seconds: int = DEFAULT_REST_SECONDS,
    ):
        if default_seconds <= 0:
            raise ValueError("default_seconds must be positive")
        factory = ticker_factory or interval_ticker_factory(name="rest-ticker")
        self._lock = RLock()
        self._ticker: Ticker = factory(self.tick, lock=self._lock)
        self._alert_sink = alert_sink
        self._state = RestTimerState(preset_seconds=default_seconds)

    @property
    def state(self) -> RestTimerState:
        with self._lock:
            return self._state

    @property
    def active(self) -> bool:
        return self.state.active

    def start(self, after_set_id: Optional[str], seconds: Optional[int] = None) -> RestTimerState:
        """
        Start a countdown, cancelling any running one.

        Args:
            after_set_id: Set whose completion triggered the rest
            seconds: Explicit duration; defaults to the last preset

        Returns:
            The new state
        """
        if seconds is not None and seconds <= 0:
            raise ValueError("seconds must be positive")
        with self._lock:
            if self._state.active:
                logger.debug(f"Cancelling rest countdown after set {self._state.after_set_id}")
            self._ticker.stop()
            preset = seconds if seconds is not None else self._state.preset_seconds
            self._state = RestTimerState(
                active=True,
                seconds_remaining=preset,
                preset_seconds=preset,
                after_set_id=after_set_id,
            )
            self._ticker.start()
            logger.info(f"Rest countdown started: {preset}s after set {after_set_id}")
            return self._state

    def stop(self) -> None:
        """Cancel the countdown without alerting. Idempotent."""
        with self._lock:
            self._ticker.stop()
            if not self._state.active:
                return
            self._clear()
            logger.info("Rest countdown stopped")

    def tick(self) -> None:
        """Count down one second; expire when reaching zero."""
        with self._lock:
            if not self._state.active:
                return
            remaining = self._state.seconds_remaining - 1
            if remaining > 0:
                self._state = RestTimerState(
                    active=True,
                    seconds_remaining=remaining,
                    preset_seconds=self._state.preset_seconds,
                    after_set_id=self._state.after_set_id,
                )
                return
            self._ticker.stop()
            self._clear()
        self._fire_alert()

    def _clear(self) -> None:
        self._state = RestTimerState(preset_seconds=self._state.preset_seconds)

    def _fire_alert(self) -> None:
        logger.info("Rest countdown finished")
        try:
            self._alert_sink.vibrate(list(REST_ALERT_VIBRATION_MS))
        except Exception as e:
            logger.error(f"Rest alert vibration failed: {e}")
        try:
            self._alert_sink.play_chime(REST_ALERT_CHIME)
        except Exception as e:
            logger.error(f"Rest alert chime failed: {e}")
