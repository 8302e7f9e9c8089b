"""
Application-layer exceptions.

These exceptions are used across the engine and infrastructure layers.
Tree-level errors live in domain.exceptions and are re-exported here so
callers have a single import location.

Propagation policy:
- StructuralEditNotAllowed, NodeNotFound, BlockNotActive are raised to the
  caller; the request is rejected and nothing changes.
- PersistenceFailure and HistoryLookupFailure are raised by adapters and
  caught by the engine, which logs them and keeps its in-memory state.
"""

from typing import Optional

from domain.exceptions import NodeNotFound, SessionEngineError, StructuralEditNotAllowed


class BlockNotActive(SessionEngineError):
    """A transition that requires an active block was requested on an inactive one."""

    def __init__(self, block_id: str):
        super().__init__(f"Block '{block_id}' is not active")
        self.block_id = block_id


class PersistenceFailure(SessionEngineError):
    """Error during a read or write against a durable store.

    Raised by repository adapters. The session engine catches it, logs it
    and carries on; in-memory state is not rolled back.
    """

    def __init__(self, operation: str, cause: Optional[BaseException] = None):
        message = f"{operation} failed"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
        self.operation = operation
        self.cause = cause


class HistoryLookupFailure(SessionEngineError):
    """History/PB enrichment could not be loaded; annotations are omitted."""

    def __init__(self, athlete_id: str, cause: Optional[BaseException] = None):
        super().__init__(f"History lookup for athlete '{athlete_id}' failed: {cause}")
        self.athlete_id = athlete_id
        self.cause = cause


__all__ = [
    "SessionEngineError",
    "StructuralEditNotAllowed",
    "NodeNotFound",
    "BlockNotActive",
    "PersistenceFailure",
    "HistoryLookupFailure",
]
