"""
Storage Interfaces (Ports) for the training load engine.

The engine never talks to storage itself. Callers hand it data read through
these protocols; concrete adapters live in infrastructure/.

Usage:
    from application.ports import WorkoutLogStore

    class TrainingService:
        def __init__(self, log_store: WorkoutLogStore):
            self.log_store = log_store
"""

from application.ports.workout_log_store import WorkoutLogStore

__all__ = [
    "WorkoutLogStore",
]
