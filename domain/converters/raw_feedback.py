"""
Converter: raw client records to strict domain models.

The client stores logs, programs and profiles as loosely-typed dictionaries:
camelCase keys, optional fields everywhere, Russian enum labels and ratings
that occasionally fall outside 1-5. This module is the single boundary where
that data is cleaned up before it reaches the engine:

- unknown enum labels map to documented defaults
- out-of-range optional ratings are dropped (logged at WARNING)
- structurally invalid records raise RawDataError

Both camelCase and snake_case keys are accepted.
"""

import datetime as dt
import logging
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from domain.models import (
    CompletionOutcome,
    ExperienceLevel,
    PerformanceTrend,
    TrainingGoal,
    TrainingProgram,
    UserProfile,
    WorkoutLog,
)

logger = logging.getLogger(__name__)


class RawDataError(ValueError):
    """A raw record could not be converted into a domain model."""


# Client labels -> domain enums. Keys are compared lowercased.
EXPERIENCE_LABELS = {
    "новичок (0-6 месяцев)": ExperienceLevel.BEGINNER,
    "любитель (6-24 месяцев)": ExperienceLevel.INTERMEDIATE,
    "атлет (2+ года)": ExperienceLevel.ADVANCED,
    "beginner": ExperienceLevel.BEGINNER,
    "intermediate": ExperienceLevel.INTERMEDIATE,
    "advanced": ExperienceLevel.ADVANCED,
}

COMPLETION_LABELS = {
    "все выполнил": CompletionOutcome.YES,
    "почти все": CompletionOutcome.MOSTLY,
    "не совсем": CompletionOutcome.NO,
    "yes": CompletionOutcome.YES,
    "mostly": CompletionOutcome.MOSTLY,
    "no": CompletionOutcome.NO,
}

GOAL_LABELS = {
    "снижение веса / рельеф": TrainingGoal.LOSE_FAT,
    "набор мышечной массы": TrainingGoal.BUILD_MUSCLE,
    "развитие силы": TrainingGoal.GET_STRONGER,
    "тонус и здоровье": TrainingGoal.GENERAL_HEALTH,
    "lose_fat": TrainingGoal.LOSE_FAT,
    "build_muscle": TrainingGoal.BUILD_MUSCLE,
    "get_stronger": TrainingGoal.GET_STRONGER,
    "general_health": TrainingGoal.GENERAL_HEALTH,
}

TREND_LABELS = {t.value: t for t in PerformanceTrend}


def _get(raw: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """Return the first present key (camelCase or snake_case)."""
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return default


def _label(value: Any) -> str:
    return str(value).strip().lower() if value is not None else ""


def _objects(value: Any, what: str) -> List[Dict[str, Any]]:
    """A list of JSON objects; anything else is a structural error."""
    if not isinstance(value, list):
        raise RawDataError(f"{what} must be an array, got {type(value).__name__}")
    for index, item in enumerate(value):
        if not isinstance(item, dict):
            raise RawDataError(f"{what}[{index}] must be an object, got {type(item).__name__}")
    return value


def normalize_experience(label: Any) -> ExperienceLevel:
    """Map a client experience label to a tier; unknown labels -> intermediate."""
    if isinstance(label, ExperienceLevel):
        return label
    return EXPERIENCE_LABELS.get(_label(label), ExperienceLevel.INTERMEDIATE)


def normalize_goal(label: Any) -> TrainingGoal:
    """Map a client goal label; unknown labels -> build_muscle."""
    if isinstance(label, TrainingGoal):
        return label
    return GOAL_LABELS.get(_label(label), TrainingGoal.BUILD_MUSCLE)


def normalize_completion(label: Any) -> CompletionOutcome:
    """Map a completion label; unknown labels -> yes."""
    if isinstance(label, CompletionOutcome):
        return label
    return COMPLETION_LABELS.get(_label(label), CompletionOutcome.YES)


def normalize_trend(label: Any) -> Optional[PerformanceTrend]:
    """Map a trend label; unknown or missing labels -> None (not reported)."""
    if label is None or label == "":
        return None
    trend = TREND_LABELS.get(_label(label))
    if trend is None:
        logger.warning(f"Dropping unknown performance trend: {label!r}")
    return trend


def _rating(value: Any, field_name: str) -> Optional[int]:
    """Coerce a 1-5 rating; anything else is dropped."""
    if value is None or value == "":
        return None
    try:
        rating = int(value)
    except (TypeError, ValueError):
        logger.warning(f"Dropping non-numeric {field_name}: {value!r}")
        return None
    if not 1 <= rating <= 5:
        logger.warning(f"Dropping out-of-range {field_name}: {rating}")
        return None
    return rating


def _parse_date(value: Any) -> dt.date:
    """Accept dates, datetimes and ISO strings (time part is ignored)."""
    if isinstance(value, dt.datetime):
        return value.date()
    if isinstance(value, dt.date):
        return value
    if isinstance(value, str) and len(value) >= 10:
        try:
            return dt.date.fromisoformat(value[:10])
        except ValueError as e:
            raise RawDataError(f"Invalid log date: {value!r}") from e
    raise RawDataError(f"Missing or invalid log date: {value!r}")


def _readiness(raw: Any) -> Optional[Dict[str, int]]:
    if not isinstance(raw, dict):
        return None
    values = {}
    for key in ("sleep", "food", "stress", "soreness"):
        rating = _rating(raw.get(key), f"readiness.{key}")
        if rating is None:
            logger.warning("Dropping incomplete readiness check-in")
            return None
        values[key] = rating
    return values


def _feedback(raw: Dict[str, Any]) -> Dict[str, Any]:
    pain_raw = raw.get("pain")
    if not isinstance(pain_raw, dict):
        pain_raw = {"hasPain": bool(pain_raw)}
    return {
        "completion": normalize_completion(raw.get("completion")),
        "pain": {
            "has_pain": bool(_get(pain_raw, "hasPain", "has_pain", default=False)),
            "location": _get(pain_raw, "location") or None,
            "details": _get(pain_raw, "details") or None,
        },
        "pump_quality": _rating(_get(raw, "pumpQuality", "pump_quality"), "pump_quality"),
        "soreness_24h": _rating(_get(raw, "soreness24h", "soreness_24h"), "soreness_24h"),
        "performance_trend": normalize_trend(
            _get(raw, "performanceTrend", "performance_trend")
        ),
        "readiness": _readiness(raw.get("readiness")),
    }


def _exercise(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "name": str(_get(raw, "name", default="")),
        "sets": _get(raw, "sets", default=0),
        "reps": str(_get(raw, "reps", default="")),
        "weight": _get(raw, "weight"),
        "rest": _get(raw, "rest", default=90),
        "is_warmup": bool(_get(raw, "isWarmup", "is_warmup", default=False)),
        "description": _get(raw, "description"),
    }


def raw_to_workout_log(raw: Dict[str, Any]) -> WorkoutLog:
    """
    Convert one raw client log into a WorkoutLog.

    Args:
        raw: Dictionary as stored by the client.

    Returns:
        Immutable WorkoutLog.

    Raises:
        RawDataError: If the record is structurally invalid.

    Examples:
        >>> log = raw_to_workout_log({
        ...     "date": "2024-01-15T10:30:00.000Z",
        ...     "sessionId": "Day 1",
        ...     "completedExercises": [{"name": "Squat", "sets": 3, "completedSets": []}],
        ...     "feedback": {"completion": "Все выполнил", "pain": {"hasPain": False}, "pumpQuality": 9},
        ... })
        >>> log.feedback.pump_quality is None
        True
    """
    if not isinstance(raw, dict):
        raise RawDataError(f"Workout log must be an object, got {type(raw).__name__}")

    exercises = []
    raw_exercises = _get(raw, "completedExercises", "completed_exercises", default=[])
    for raw_ex in _objects(raw_exercises, "completedExercises"):
        exercise = _exercise(raw_ex)
        exercise.pop("rest")
        exercise.pop("description")
        raw_sets = _get(raw_ex, "completedSets", "completed_sets", default=[])
        exercise["completed_sets"] = [
            {"reps": s.get("reps", 0), "weight": s.get("weight"), "rir": s.get("rir")}
            for s in _objects(raw_sets, "completedSets")
        ]
        exercises.append(exercise)

    feedback = raw.get("feedback") or {}
    if not isinstance(feedback, dict):
        raise RawDataError(f"feedback must be an object, got {type(feedback).__name__}")

    data = {
        "date": _parse_date(raw.get("date")),
        "session_id": str(_get(raw, "sessionId", "session_id", default="")),
        "completed_exercises": exercises,
        "feedback": _feedback(feedback),
    }
    try:
        return WorkoutLog.model_validate(data)
    except ValidationError as e:
        raise RawDataError(f"Invalid workout log: {e}") from e


def raw_to_workout_logs(raws: Iterable[Dict[str, Any]]) -> List[WorkoutLog]:
    """Convert a sequence of raw logs, preserving order."""
    return [raw_to_workout_log(raw) for raw in raws]


def raw_to_program(raw: Dict[str, Any]) -> TrainingProgram:
    """
    Convert a raw generated program into a TrainingProgram.

    Raises:
        RawDataError: If the record is structurally invalid.
    """
    if not isinstance(raw, dict):
        raise RawDataError(f"Program must be an object, got {type(raw).__name__}")

    sessions = [
        {
            "name": str(_get(session, "name", default="")),
            "exercises": [
                _exercise(ex) for ex in _objects(_get(session, "exercises", default=[]), "exercises")
            ],
        }
        for session in _objects(_get(raw, "sessions", default=[]), "sessions")
    ]
    try:
        return TrainingProgram.model_validate({"sessions": sessions})
    except ValidationError as e:
        raise RawDataError(f"Invalid program: {e}") from e


def raw_to_profile(raw: Dict[str, Any]) -> UserProfile:
    """
    Convert a raw onboarding profile into a UserProfile.

    Raises:
        RawDataError: If the record is structurally invalid.
    """
    if not isinstance(raw, dict):
        raise RawDataError(f"Profile must be an object, got {type(raw).__name__}")

    goals = raw.get("goals")
    primary_goal = goals.get("primary") if isinstance(goals, dict) else None
    data = {
        "experience": normalize_experience(raw.get("experience")),
        "has_injuries": bool(_get(raw, "hasInjuries", "has_injuries", default=False)),
        "injuries": str(_get(raw, "injuries", default="")),
        "primary_goal": normalize_goal(primary_goal or raw.get("primary_goal")),
        "days_per_week": _get(raw, "daysPerWeek", "days_per_week", default=3),
    }
    try:
        return UserProfile.model_validate(data)
    except ValidationError as e:
        raise RawDataError(f"Invalid profile: {e}") from e
