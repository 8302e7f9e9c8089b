"""
Block timer scheduler.

Tracks elapsed active seconds for every block that is currently in
progress. All timers are advanced by one shared tick source: each tick adds
exactly one second to every tracked timer, under a lock, so a tick never
interleaves with a block transition.

Timers are keyed by block id; presence in the map means "active". Starting
and stopping are idempotent. The shared ticker runs exactly while the map is
non-empty.
"""

import logging
import time
from dataclasses import dataclass
from threading import RLock
from typing import Dict, List, Optional, Set

from backend.session.ticker import Ticker, TickerFactory, interval_ticker_factory

logger = logging.getLogger(__name__)


@dataclass
class BlockTimer:
    """Ephemeral timer of one active block."""
    block_id: str
    session_id: str
    start_time: float
    elapsed: int = 0


class BlockTimerScheduler:
    """
    Owns the map block id -> BlockTimer and the shared tick source.

    Completed blocks keep their final elapsed value as a "recorded" entry
    until the session is cleared, so the session total stays correct after
    the timer itself is gone.
    """

    def __init__(self, ticker_factory: Optional[TickerFactory] = None):
        factory = ticker_factory or interval_ticker_factory(name="block-ticker")
        self._lock = RLock()
        self._ticker: Ticker = factory(self.tick, lock=self._lock)
        self._timers: Dict[str, BlockTimer] = {}
        # block id -> (session id, final elapsed) for completed blocks
        self._recorded: Dict[str, tuple] = {}

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    @property
    def lock(self) -> RLock:
        """Hold this to keep ticks out of a multi-step transition."""
        return self._lock

    @property
    def ticking(self) -> bool:
        return self._ticker.running

    def active_block_ids(self) -> Set[str]:
        with self._lock:
            return set(self._timers)

    def is_active(self, block_id: str) -> bool:
        with self._lock:
            return block_id in self._timers

    def elapsed(self, block_id: str) -> int:
        """Elapsed seconds of a running or recorded block (0 if unknown)."""
        with self._lock:
            timer = self._timers.get(block_id)
            if timer is not None:
                return timer.elapsed
            recorded = self._recorded.get(block_id)
            return recorded[1] if recorded else 0

    def total_elapsed(self, session_id: str) -> int:
        """Sum of running and recorded elapsed seconds for a session's blocks."""
        with self._lock:
            running = sum(t.elapsed for t in self._timers.values() if t.session_id == session_id)
            recorded = sum(e for sid, e in self._recorded.values() if sid == session_id)
            return running + recorded

    def snapshot(self) -> Dict[str, int]:
        """Elapsed seconds per active block."""
        with self._lock:
            return {block_id: t.elapsed for block_id, t in self._timers.items()}

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def activate(self, block_id: str, session_id: str) -> BlockTimer:
        """
        Start tracking ``block_id`` from zero.

        Re-activating a completed block discards its recorded value. Calling
        this for a block that is already running returns the running timer
        unchanged.
        """
        with self._lock:
            existing = self._timers.get(block_id)
            if existing is not None:
                return existing
            self._recorded.pop(block_id, None)
            timer = BlockTimer(
                block_id=block_id,
                session_id=session_id,
                start_time=time.time(),
            )
            self._timers[block_id] = timer
            self._ticker.start()
        logger.debug(f"Block timer started for {block_id}")
        return timer

    def deactivate(self, block_id: str) -> int:
        """
        Stop tracking ``block_id`` and return its final elapsed seconds.

        Stops the shared ticker when this was the last active timer. No-op
        (returns the recorded value, or 0) if the block is not active.
        """
        with self._lock:
            timer = self._timers.pop(block_id, None)
            if timer is None:
                return self.elapsed(block_id)
            self._recorded[block_id] = (timer.session_id, timer.elapsed)
            if not self._timers:
                self._ticker.stop()
        logger.debug(f"Block timer stopped for {block_id} after {timer.elapsed}s")
        return timer.elapsed

    def clear_session(self, session_id: str) -> None:
        """Forget recorded values of a session's completed blocks."""
        with self._lock:
            for block_id in [b for b, (sid, _) in self._recorded.items() if sid == session_id]:
                del self._recorded[block_id]

    def stop_all(self) -> List[str]:
        """Deactivate every running timer; returns the ids that were running."""
        with self._lock:
            ids = list(self._timers)
            for block_id in ids:
                self.deactivate(block_id)
            self._ticker.stop()
        return ids

    def tick(self) -> None:
        """Advance every active timer by one second."""
        with self._lock:
            for timer in self._timers.values():
                timer.elapsed += 1
