"""
Fake implementations of the application ports for testing.

Usage:
    from tests.fakes import FakeWorkoutLogStore, create_log_store

    store = create_log_store(logs=[log1, log2])
"""
from typing import Iterable, Optional

from domain.models import WorkoutLog
from tests.fakes.workout_log_store import FakeWorkoutLogStore


def create_log_store(
    *,
    logs: Optional[Iterable[WorkoutLog]] = None,
) -> FakeWorkoutLogStore:
    """
    Create a FakeWorkoutLogStore with optional pre-populated logs.

    Args:
        logs: Logs to seed, oldest first

    Returns:
        Pre-populated FakeWorkoutLogStore
    """
    store = FakeWorkoutLogStore()
    if logs:
        store.seed(logs)
    return store


__all__ = [
    "FakeWorkoutLogStore",
    "create_log_store",
]
