"""
Shared fixtures for the engine tests.

All date-dependent tests pin "today" to Wednesday 2024-01-17, so the current
week is Monday 2024-01-15 (inclusive) to Monday 2024-01-22 (exclusive).
"""
import datetime as dt
from typing import Sequence, Tuple, Union

import pytest

from backend.core.knowledge_base import load_knowledge_base
from backend.core.muscle_resolver import get_resolver
from backend.settings import get_settings
from domain.models import (
    CompletedExercise,
    ProgramExercise,
    TrainingProgram,
    WorkoutFeedback,
    WorkoutLog,
    WorkoutSession,
)

TODAY = dt.date(2024, 1, 17)
WEEK_START = dt.date(2024, 1, 15)

ExerciseEntry = Union[Tuple[str, int], Tuple[str, int, float], CompletedExercise]


@pytest.fixture
def today() -> dt.date:
    return TODAY


@pytest.fixture
def kb():
    return load_knowledge_base()


@pytest.fixture
def resolver():
    return get_resolver()


@pytest.fixture
def clean_settings():
    """Drop cached settings before and after a test that changes the environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def _completed(entry: ExerciseEntry) -> CompletedExercise:
    if isinstance(entry, CompletedExercise):
        return entry
    name, sets, *rest = entry
    return CompletedExercise(name=name, sets=sets, weight=rest[0] if rest else None)


@pytest.fixture
def make_log():
    """
    Factory for workout logs.

    Usage:
        make_log(exercises=[("Bench Press", 3)], pump_quality=2)
    """

    def _make(
        day: dt.date = TODAY,
        exercises: Sequence[ExerciseEntry] = (),
        session_id: str = "Day 1",
        **feedback,
    ) -> WorkoutLog:
        return WorkoutLog(
            date=day,
            session_id=session_id,
            completed_exercises=[_completed(e) for e in exercises],
            feedback=WorkoutFeedback(**feedback),
        )

    return _make


@pytest.fixture
def make_program():
    """
    Factory for programs: one list of (name, sets[, weight]) tuples per session.

    Usage:
        make_program([("Bench Press", 3, 60.0)], [("Squat", 4)])
    """

    def _make(*sessions: Sequence[tuple]) -> TrainingProgram:
        return TrainingProgram(
            sessions=[
                WorkoutSession(
                    name=f"Day {index}",
                    exercises=[
                        ProgramExercise(
                            name=name,
                            sets=sets,
                            reps="8-12",
                            weight=rest[0] if rest else None,
                        )
                        for name, sets, *rest in exercises
                    ],
                )
                for index, exercises in enumerate(sessions, start=1)
            ]
        )

    return _make
