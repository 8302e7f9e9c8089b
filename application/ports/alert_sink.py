"""
Alert Sink Interface (Port).

Output device for the rest-timer expiry alert: a vibration pattern and a
short synthesized chime. Implementations live in infrastructure/alerts.
"""
from dataclasses import dataclass
from typing import List, Protocol, Sequence


@dataclass(frozen=True)
class ChimeTone:
    """One tone of a synthesized chime."""
    frequency_hz: float
    start_seconds: float
    duration_seconds: float
    gain: float = 0.3


class AlertSink(Protocol):
    """
    Abstract interface for user-facing alerts.
    """

    def vibrate(self, pattern_ms: List[int]) -> None:
        """
        Vibrate using an on/off pattern in milliseconds.

        Args:
            pattern_ms: Alternating vibrate/pause durations
        """
        ...

    def play_chime(self, tones: Sequence[ChimeTone]) -> None:
        """
        Play a sequence of tones.

        Args:
            tones: Tones with their start offsets relative to the chime start
        """
        ...
