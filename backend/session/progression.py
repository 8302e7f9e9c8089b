"""
Auto-progression policy.

Kept separate from "mark block complete": completing a block and choosing
what to run next are two decisions.
"""

from typing import Optional

from domain.models import Block, Session
from domain.services.workout_tree import block_index


def next_block_to_activate(session: Session, completed_block_id: str) -> Optional[Block]:
    """
    Block to activate after ``completed_block_id`` finished.

    Only the immediate successor by order is considered; if it is already
    completed (or there is none) nothing is activated.
    """
    idx = block_index(session, completed_block_id)
    if idx + 1 >= len(session.blocks):
        return None
    candidate = session.blocks[idx + 1]
    if candidate.completed:
        return None
    return candidate
