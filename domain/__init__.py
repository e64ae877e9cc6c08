"""
Domain layer for the training load engine.

This package contains pure domain models that are independent of storage and
presentation concerns, plus the converters that turn raw client records into
them.
"""

from domain.models import (
    ExperienceLevel,
    TrainingProgram,
    UserProfile,
    WorkoutLog,
)

__all__ = [
    "ExperienceLevel",
    "TrainingProgram",
    "UserProfile",
    "WorkoutLog",
]
