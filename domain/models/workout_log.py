"""
Workout log records.

A WorkoutLog is what the client appends after finishing a session: the
exercises actually performed plus subjective feedback. Logs are immutable
once created; raw client dictionaries are converted into these models by
domain.converters.raw_feedback.
"""

import datetime as dt
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class CompletionOutcome(str, Enum):
    """How much of the planned session was completed."""

    YES = "yes"
    MOSTLY = "mostly"
    NO = "no"


class PerformanceTrend(str, Enum):
    """Self-reported performance direction."""

    IMPROVING = "improving"
    STABLE = "stable"
    DECLINING = "declining"


class CompletedSet(BaseModel):
    """One performed set."""

    model_config = ConfigDict(frozen=True)

    reps: int = Field(default=0, ge=0)
    weight: Optional[float] = Field(default=None, ge=0)
    rir: Optional[int] = Field(default=None, ge=0, description="Reps in reserve")


class CompletedExercise(BaseModel):
    """An exercise as performed, with its declared prescription."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="")
    sets: int = Field(default=0, ge=0, description="Declared number of sets")
    reps: str = Field(default="", description="Declared reps, e.g. '8-12'")
    weight: Optional[float] = Field(default=None, ge=0)
    completed_sets: List[CompletedSet] = Field(default_factory=list)
    is_warmup: bool = False

    @property
    def performed_sets(self) -> int:
        """Logged sets if any were recorded, else the declared count."""
        return len(self.completed_sets) or self.sets or 0


class PainReport(BaseModel):
    """Pain flagged during or after a session."""

    model_config = ConfigDict(frozen=True)

    has_pain: bool = False
    location: Optional[str] = None
    details: Optional[str] = None


class ReadinessData(BaseModel):
    """
    Pre-session readiness check-in, each value 1-5 where higher is better.

    stress: 1 = very stressed, 5 = relaxed.
    soreness: 1 = very sore, 5 = fresh.
    """

    model_config = ConfigDict(frozen=True)

    sleep: int = Field(..., ge=1, le=5)
    food: int = Field(..., ge=1, le=5)
    stress: int = Field(..., ge=1, le=5)
    soreness: int = Field(..., ge=1, le=5)


class WorkoutFeedback(BaseModel):
    """Subjective feedback attached to a log."""

    model_config = ConfigDict(frozen=True)

    completion: CompletionOutcome = CompletionOutcome.YES
    pain: PainReport = Field(default_factory=PainReport)
    pump_quality: Optional[int] = Field(default=None, ge=1, le=5)
    soreness_24h: Optional[int] = Field(default=None, ge=1, le=5)
    performance_trend: Optional[PerformanceTrend] = None
    readiness: Optional[ReadinessData] = None


class WorkoutLog(BaseModel):
    """
    One completed training session.

    Examples:
        >>> log = WorkoutLog(
        ...     date=dt.date(2024, 1, 15),
        ...     session_id="Day 1 - Upper",
        ...     completed_exercises=[CompletedExercise(name="Bench Press", sets=3)],
        ... )
    """

    model_config = ConfigDict(frozen=True)

    date: dt.date
    session_id: str = Field(default="")
    completed_exercises: List[CompletedExercise] = Field(default_factory=list)
    feedback: WorkoutFeedback = Field(default_factory=WorkoutFeedback)
