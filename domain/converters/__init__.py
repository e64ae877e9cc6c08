"""
Domain converters for turning raw client records into domain models.

This module provides pure converter functions:

- raw_to_workout_log / raw_to_workout_logs: stored log dicts -> WorkoutLog
- raw_to_program: generated program dict -> TrainingProgram
- raw_to_profile: onboarding profile dict -> UserProfile

Examples:
    >>> from domain.converters import raw_to_workout_log
    >>> log = raw_to_workout_log({"date": "2024-01-15", "completedExercises": []})
"""

from domain.converters.raw_feedback import (
    RawDataError,
    normalize_completion,
    normalize_experience,
    normalize_goal,
    normalize_trend,
    raw_to_profile,
    raw_to_program,
    raw_to_workout_log,
    raw_to_workout_logs,
)

__all__ = [
    "RawDataError",
    "normalize_experience",
    "normalize_goal",
    "normalize_completion",
    "normalize_trend",
    "raw_to_workout_log",
    "raw_to_workout_logs",
    "raw_to_program",
    "raw_to_profile",
]
