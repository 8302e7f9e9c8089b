"""
Pydantic schemas for API requests and responses.

Organized by feature/domain:
- sessions: Session execution requests and snapshots
"""

from api.schemas.sessions import (
    ActivateBlockRequest,
    ActivationResponse,
    AddExerciseRequest,
    CompleteBlockResponse,
    CreateCustomSessionRequest,
    DaySnapshotResponse,
    ExerciseHistoryResponse,
    LogSetRequest,
    RestStateResponse,
    SessionResponse,
    SetResponse,
    StartRestRequest,
)

__all__ = [
    "ActivateBlockRequest",
    "ActivationResponse",
    "AddExerciseRequest",
    "CompleteBlockResponse",
    "CreateCustomSessionRequest",
    "DaySnapshotResponse",
    "ExerciseHistoryResponse",
    "LogSetRequest",
    "RestStateResponse",
    "SessionResponse",
    "SetResponse",
    "StartRestRequest",
]
