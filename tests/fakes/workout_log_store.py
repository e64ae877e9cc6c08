"""
Fake Workout Log Store for testing.

In-memory implementation of WorkoutLogStore with seeding and reset helpers.
"""
from typing import Iterable, List

from domain.models import WorkoutLog


class FakeWorkoutLogStore:
    """
    In-memory fake implementation of WorkoutLogStore for testing.

    Usage:
        store = FakeWorkoutLogStore()
        store.seed([log1, log2])
        store.append(log3)
        assert store.append_count == 1
    """

    def __init__(self):
        """Initialize with empty storage."""
        self._logs: List[WorkoutLog] = []
        self.append_count = 0

    def reset(self) -> None:
        """Clear all stored logs."""
        self._logs.clear()
        self.append_count = 0

    def seed(self, logs: Iterable[WorkoutLog]) -> None:
        """Pre-populate without counting as appends."""
        self._logs.extend(logs)

    # =========================================================================
    # WorkoutLogStore Protocol Methods
    # =========================================================================

    def list(self) -> List[WorkoutLog]:
        return list(self._logs)

    def append(self, log: WorkoutLog) -> None:
        self._logs.append(log)
        self.append_count += 1
