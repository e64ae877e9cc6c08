"""
In-memory implementation of WorkoutLogStore.

Holds logs already loaded by the caller (e.g. from a JSON array).
"""
from typing import Iterable, List, Optional

from domain.models import WorkoutLog


class InMemoryWorkoutLogStore:
    """List-backed WorkoutLogStore."""

    def __init__(self, logs: Optional[Iterable[WorkoutLog]] = None):
        self._logs: List[WorkoutLog] = list(logs or [])

    def list(self) -> List[WorkoutLog]:
        return list(self._logs)

    def append(self, log: WorkoutLog) -> None:
        self._logs.append(log)
