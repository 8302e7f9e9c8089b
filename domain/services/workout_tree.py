"""
Pure edit operations on the workout tree.

Every function takes a Session and returns a new Session; nothing is
mutated in place, so callers can apply an edit and persist the result as
one step.

Plan-derived sessions are locked once scheduled: their structure (blocks,
exercises, sets) and their target values may not change. Only actual values
and completion flags can be edited; anything else raises
StructuralEditNotAllowed.
"""

from typing import Callable, List, Optional, Tuple

from domain.exceptions import NodeNotFound, StructuralEditNotAllowed
from domain.models import (
    ACTUAL_FIELDS,
    TARGET_FIELDS,
    Block,
    BlockMode,
    Session,
    SessionExercise,
    WorkoutSet,
)


BLOCK_METADATA_FIELDS = ("name", "mode", "rounds", "rest_between_rounds")


# =============================================================================
# Lookups
# =============================================================================


def block_index(session: Session, block_id: str) -> int:
    """Position of ``block_id`` in the session's block order."""
    for idx, block in enumerate(session.blocks):
        if block.id == block_id:
            return idx
    raise NodeNotFound("block", block_id)


def find_block(session: Session, block_id: str) -> Block:
    return session.blocks[block_index(session, block_id)]


def find_exercise(session: Session, block_id: str, exercise_id: str) -> SessionExercise:
    for exercise in find_block(session, block_id).exercises:
        if exercise.id == exercise_id:
            return exercise
    raise NodeNotFound("exercise", exercise_id)


def find_set(
    session: Session, block_id: str, exercise_id: str, set_id: str
) -> WorkoutSet:
    for workout_set in find_exercise(session, block_id, exercise_id).sets:
        if workout_set.id == set_id:
            return workout_set
    raise NodeNotFound("set", set_id)


# =============================================================================
# Internal helpers
# =============================================================================


def _ensure_structure_editable(session: Session, what: str) -> None:
    if session.is_plan_derived:
        raise StructuralEditNotAllowed(
            f"Cannot {what}: session '{session.id}' comes from an assigned plan",
            session_id=session.id,
        )


def _replace_block(
    session: Session, block_id: str, change: Callable[[Block], Block]
) -> Session:
    idx = block_index(session, block_id)
    blocks = list(session.blocks)
    blocks[idx] = change(blocks[idx])
    return session.with_blocks(blocks)


def _replace_exercise(
    session: Session,
    block_id: str,
    exercise_id: str,
    change: Callable[[SessionExercise], SessionExercise],
) -> Session:
    def apply(block: Block) -> Block:
        exercises = list(block.exercises)
        for idx, exercise in enumerate(exercises):
            if exercise.id == exercise_id:
                exercises[idx] = change(exercise)
                return block.with_exercises(exercises)
        raise NodeNotFound("exercise", exercise_id)

    return _replace_block(session, block_id, apply)


def _replace_set(
    session: Session,
    block_id: str,
    exercise_id: str,
    set_id: str,
    change: Callable[[WorkoutSet], WorkoutSet],
) -> Session:
    def apply(exercise: SessionExercise) -> SessionExercise:
        sets = list(exercise.sets)
        for idx, workout_set in enumerate(sets):
            if workout_set.id == set_id:
                sets[idx] = change(workout_set)
                return exercise.with_sets(sets)
        raise NodeNotFound("set", set_id)

    return _replace_exercise(session, block_id, exercise_id, apply)


def _check_fields(values: dict, allowed: Tuple[str, ...], kind: str) -> None:
    unknown = sorted(set(values) - set(allowed))
    if unknown:
        raise ValueError(f"Unknown {kind} field(s): {', '.join(unknown)}")


# =============================================================================
# Block operations
# =============================================================================


def add_block(session: Session, block: Block, position: Optional[int] = None) -> Session:
    """Insert ``block`` at ``position`` (default: append)."""
    _ensure_structure_editable(session, "add a block")
    if any(b.id == block.id for b in session.blocks):
        raise ValueError(f"Block '{block.id}' already exists")
    blocks = list(session.blocks)
    if position is None:
        blocks.append(block)
    else:
        blocks.insert(position, block)
    return session.with_blocks(blocks)


def remove_block(session: Session, block_id: str) -> Session:
    _ensure_structure_editable(session, "remove a block")
    idx = block_index(session, block_id)
    blocks = list(session.blocks)
    del blocks[idx]
    return session.with_blocks(blocks)


def update_block(session: Session, block_id: str, **fields) -> Session:
    """
    Update block metadata: name, mode, rounds, rest_between_rounds.

    rounds/rest_between_rounds are only accepted on Circuit blocks.
    """
    _check_fields(fields, BLOCK_METADATA_FIELDS, "block")
    _ensure_structure_editable(session, "edit block metadata")
    if "mode" in fields:
        fields["mode"] = BlockMode(fields["mode"])

    def apply(block: Block) -> Block:
        updated = block.model_copy(update=fields)
        if updated.mode != BlockMode.CIRCUIT and (
            updated.rounds is not None or updated.rest_between_rounds is not None
        ):
            raise ValueError("rounds/rest_between_rounds are only valid on Circuit blocks")
        return Block.model_validate(updated.model_dump())

    return _replace_block(session, block_id, apply)


def mark_block_completed(session: Session, block_id: str) -> Session:
    """Flag the block completed; session completion is recomputed."""
    return _replace_block(session, block_id, lambda b: b.mark_completed(True))


def reset_block_completion(session: Session, block_id: str) -> Session:
    return _replace_block(session, block_id, lambda b: b.mark_completed(False))


# =============================================================================
# Exercise operations
# =============================================================================


def add_exercise(
    session: Session,
    block_id: str,
    exercise: SessionExercise,
    position: Optional[int] = None,
) -> Session:
    _ensure_structure_editable(session, "add an exercise")

    def apply(block: Block) -> Block:
        if any(ex.id == exercise.id for ex in block.exercises):
            raise ValueError(f"Exercise '{exercise.id}' already exists in block '{block.id}'")
        exercises = list(block.exercises)
        if position is None:
            exercises.append(exercise)
        else:
            exercises.insert(position, exercise)
        return block.with_exercises(exercises)

    return _replace_block(session, block_id, apply)


def remove_exercise(session: Session, block_id: str, exercise_id: str) -> Session:
    _ensure_structure_editable(session, "remove an exercise")

    def apply(block: Block) -> Block:
        remaining = [ex for ex in block.exercises if ex.id != exercise_id]
        if len(remaining) == len(block.exercises):
            raise NodeNotFound("exercise", exercise_id)
        return block.with_exercises(remaining)

    return _replace_block(session, block_id, apply)


def reorder_exercise(
    session: Session, block_id: str, exercise_id: str, new_index: int
) -> Session:
    """Move an exercise to ``new_index`` within its block (clamped)."""
    _ensure_structure_editable(session, "reorder exercises")

    def apply(block: Block) -> Block:
        exercises: List[SessionExercise] = list(block.exercises)
        for idx, exercise in enumerate(exercises):
            if exercise.id == exercise_id:
                moved = exercises.pop(idx)
                target = max(0, min(new_index, len(exercises)))
                exercises.insert(target, moved)
                return block.with_exercises(exercises)
        raise NodeNotFound("exercise", exercise_id)

    return _replace_block(session, block_id, apply)


# =============================================================================
# Set operations
# =============================================================================


def add_set(
    session: Session, block_id: str, exercise_id: str, workout_set: WorkoutSet
) -> Session:
    _ensure_structure_editable(session, "add a set")

    def apply(exercise: SessionExercise) -> SessionExercise:
        if any(s.id == workout_set.id for s in exercise.sets):
            raise ValueError(f"Set '{workout_set.id}' already exists")
        return exercise.with_sets([*exercise.sets, workout_set])

    return _replace_exercise(session, block_id, exercise_id, apply)


def remove_set(session: Session, block_id: str, exercise_id: str, set_id: str) -> Session:
    _ensure_structure_editable(session, "remove a set")

    def apply(exercise: SessionExercise) -> SessionExercise:
        remaining = [s for s in exercise.sets if s.id != set_id]
        if len(remaining) == len(exercise.sets):
            raise NodeNotFound("set", set_id)
        return exercise.with_sets(remaining)

    return _replace_exercise(session, block_id, exercise_id, apply)


def update_set_target(
    session: Session, block_id: str, exercise_id: str, set_id: str, **targets
) -> Session:
    """Edit coach-prescribed values. Locked on plan-derived sessions."""
    _check_fields(targets, TARGET_FIELDS + ("type",), "target")
    _ensure_structure_editable(session, "edit target values")
    return _replace_set(
        session, block_id, exercise_id, set_id, lambda s: s.with_values(**targets)
    )


def update_set_actual(
    session: Session, block_id: str, exercise_id: str, set_id: str, **actuals
) -> Session:
    """Edit athlete-logged values. Allowed on every session."""
    _check_fields(actuals, ACTUAL_FIELDS, "actual")
    return _replace_set(
        session, block_id, exercise_id, set_id, lambda s: s.with_values(**actuals)
    )


def set_completion(
    session: Session, block_id: str, exercise_id: str, set_id: str, is_completed: bool
) -> Session:
    return _replace_set(
        session,
        block_id,
        exercise_id,
        set_id,
        lambda s: s.with_completion(is_completed),
    )
