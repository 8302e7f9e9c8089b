"""
Recording AlertSink for testing.
"""
from typing import List, Sequence, Tuple

from application.ports import ChimeTone


class RecordingAlertSink:
    """AlertSink that keeps every vibration and chime it was asked to play."""

    def __init__(self):
        self.vibrations: List[List[int]] = []
        self.chimes: List[Tuple[ChimeTone, ...]] = []

    def reset(self) -> None:
        self.vibrations.clear()
        self.chimes.clear()

    @property
    def alert_count(self) -> int:
        return len(self.chimes)

    def vibrate(self, pattern_ms: List[int]) -> None:
        self.vibrations.append(list(pattern_ms))

    def play_chime(self, tones: Sequence[ChimeTone]) -> None:
        self.chimes.append(tuple(tones))
