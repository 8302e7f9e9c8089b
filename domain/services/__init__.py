"""
Domain services for the session engine.

Pure functions over the domain models; no I/O.
"""

from domain.services import workout_tree

__all__ = ["workout_tree"]
