"""
Workout log storage adapters.
"""

from infrastructure.storage.json_log_store import JsonLinesWorkoutLogStore
from infrastructure.storage.memory_log_store import InMemoryWorkoutLogStore

__all__ = [
    "JsonLinesWorkoutLogStore",
    "InMemoryWorkoutLogStore",
]
