"""
Alert sink that records alerts in the service log.

The server has no speaker or vibration motor; clients render the rest alert
from the session snapshot. This sink keeps the last alert so it can be
reported to polling clients.
"""
from dataclasses import dataclass
from datetime import datetime, timezone
from threading import Lock
from typing import List, Optional, Sequence, Tuple
import logging

from application.ports.alert_sink import ChimeTone

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordedAlert:
    fired_at: datetime
    vibration_ms: Tuple[int, ...] = ()
    tones: Tuple[ChimeTone, ...] = ()


class LoggingAlertSink:
    """
    AlertSink implementation writing to the logger.
    """

    def __init__(self):
        self._lock = Lock()
        self._last: Optional[RecordedAlert] = None

    @property
    def last_alert(self) -> Optional[RecordedAlert]:
        with self._lock:
            return self._last

    def vibrate(self, pattern_ms: List[int]) -> None:
        with self._lock:
            self._last = RecordedAlert(
                fired_at=datetime.now(timezone.utc),
                vibration_ms=tuple(pattern_ms),
            )
        logger.info(f"Rest alert: vibrate {pattern_ms}")

    def play_chime(self, tones: Sequence[ChimeTone]) -> None:
        with self._lock:
            previous = self._last
            self._last = RecordedAlert(
                fired_at=previous.fired_at if previous else datetime.now(timezone.utc),
                vibration_ms=previous.vibration_ms if previous else (),
                tones=tuple(tones),
            )
        frequencies = ", ".join(f"{t.frequency_hz:g}Hz" for t in tones)
        logger.info(f"Rest alert: chime {frequencies}")
