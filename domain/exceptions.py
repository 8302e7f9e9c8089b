"""
Domain-level exceptions for the workout tree.

Raised by pure tree operations; the application layer re-exports them
together with its own persistence errors (see application.exceptions).
"""


class SessionEngineError(Exception):
    """Base class for all session engine errors."""

    pass


class StructuralEditNotAllowed(SessionEngineError):
    """Structural edit rejected.

    Raised when adding/removing blocks, exercises or sets, or editing target
    values, on a plan-derived session, or when the targeted block is
    currently active.
    """

    def __init__(self, message: str, *, session_id: str = None, block_id: str = None):
        super().__init__(message)
        self.message = message
        self.session_id = session_id
        self.block_id = block_id


class NodeNotFound(SessionEngineError, LookupError):
    """A block, exercise or set id does not exist in the session."""

    def __init__(self, kind: str, node_id: str):
        super().__init__(f"{kind} '{node_id}' not found")
        self.kind = kind
        self.node_id = node_id
