"""
Test Fixtures and Helpers for Fake Repositories.

This module provides pytest fixtures and helper functions for overriding
FastAPI dependencies with fake implementations.

Usage:
    from tests.fakes.conftest import override_dependency, reset_overrides

    def test_something(app):
        override_dependency(app, get_session_registry, registry)
        ...
        reset_overrides(app)
"""

from typing import Any, Callable, Dict

import pytest
from fastapi import FastAPI

from api import deps


def override_dependency(app: FastAPI, dependency: Callable, value: Any) -> None:
    """Make ``dependency`` return ``value`` for every request of ``app``."""
    app.dependency_overrides[dependency] = lambda: value


def override_many(app: FastAPI, overrides: Dict[Callable, Any]) -> None:
    for dependency, value in overrides.items():
        override_dependency(app, dependency, value)


def reset_overrides(app: FastAPI) -> None:
    app.dependency_overrides.clear()


@pytest.fixture
def override_deps():
    """
    Fixture returning an override helper; overrides are cleared afterwards.

    Usage:
        def test_x(app, override_deps):
            override_deps(app, deps.get_current_athlete, "athlete-1")
    """
    touched = []

    def _override(app: FastAPI, dependency: Callable, value: Any) -> None:
        override_dependency(app, dependency, value)
        touched.append(app)

    yield _override

    for app in touched:
        reset_overrides(app)


__all__ = [
    "deps",
    "override_dependency",
    "override_many",
    "reset_overrides",
    "override_deps",
]
