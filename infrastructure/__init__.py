"""
Infrastructure Layer for the training load engine.

This package contains concrete implementations of the application ports:
- storage/: JSON-lines and in-memory workout log stores
"""

from infrastructure.storage import InMemoryWorkoutLogStore, JsonLinesWorkoutLogStore

__all__ = [
    "JsonLinesWorkoutLogStore",
    "InMemoryWorkoutLogStore",
]
