"""
Workout Log Store Interface (Port).

The caller owns an append-only store of completed workouts. The engine only
reads from it; the application appends after each finished session.
"""
from typing import List, Protocol

from domain.models import WorkoutLog


class WorkoutLogStore(Protocol):
    """
    Append-only workout log storage.

    Implementations return logs in append order (oldest first) and never
    modify a log once stored.
    """

    def list(self) -> List[WorkoutLog]:
        """
        Get every stored log.

        Returns:
            Logs in append order
        """
        ...

    def append(self, log: WorkoutLog) -> None:
        """
        Store a newly completed workout.

        Args:
            log: The completed workout
        """
        ...
