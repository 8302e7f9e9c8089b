"""
Registry of open session days.

The HTTP layer is stateless, the engine is not: timers keep running between
requests. The registry keeps one SessionOrchestrator per (athlete, date)
alive for the lifetime of the process.
"""

import logging
from datetime import date
from threading import Lock
from typing import Callable, Dict, List, Optional, Tuple

from backend.session.orchestrator import SessionOrchestrator

logger = logging.getLogger(__name__)

OrchestratorFactory = Callable[[str, date], SessionOrchestrator]


class SessionRegistry:
    """
    Process-wide map (athlete_id, date) -> SessionOrchestrator.

    Usage:
        registry = SessionRegistry(lambda athlete_id, day: SessionOrchestrator.open(...))
        orchestrator = registry.open(athlete_id, day)
    """

    def __init__(self, factory: OrchestratorFactory):
        self._factory = factory
        self._lock = Lock()
        self._open: Dict[Tuple[str, date], SessionOrchestrator] = {}

    def get(self, athlete_id: str, on_date: date) -> Optional[SessionOrchestrator]:
        with self._lock:
            return self._open.get((athlete_id, on_date))

    def open(self, athlete_id: str, on_date: date) -> SessionOrchestrator:
        """Return the open orchestrator for the day, loading it on first use."""
        key = (athlete_id, on_date)
        with self._lock:
            orchestrator = self._open.get(key)
            if orchestrator is None:
                orchestrator = self._factory(athlete_id, on_date)
                self._open[key] = orchestrator
        return orchestrator

    def close(self, athlete_id: str, on_date: date) -> bool:
        with self._lock:
            orchestrator = self._open.pop((athlete_id, on_date), None)
        if orchestrator is None:
            return False
        orchestrator.close()
        return True

    def close_all(self) -> List[Tuple[str, date]]:
        with self._lock:
            items = list(self._open.items())
            self._open.clear()
        for key, orchestrator in items:
            orchestrator.close()
        if items:
            logger.info(f"Closed {len(items)} open session day(s)")
        return [key for key, _ in items]
