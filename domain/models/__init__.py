"""
Domain models for the training load engine.

This package contains pure domain models that are independent of storage
and presentation concerns:
- MuscleGroup / VolumeBand / AntagonistGroup: the muscle taxonomy
- ExerciseDefinition / KeywordRule: the exercise catalog
- WorkoutLog and its feedback: what the user actually did
- TrainingProgram / UserProfile: what the user is asked to do
- Mesocycle / MesocycleState: periodization state

Usage:
    >>> from domain.models import TrainingProgram, WorkoutSession, ProgramExercise

    >>> program = TrainingProgram(
    ...     sessions=[
    ...         WorkoutSession(
    ...             name="Day 1 - Upper",
    ...             exercises=[ProgramExercise(name="Bench Press", sets=3, reps="8-12")],
    ...         )
    ...     ]
    ... )

    >>> # Serialize to JSON
    >>> json_str = program.model_dump_json(indent=2)
"""

from domain.models.muscle import (
    FALLBACK_VOLUME_BAND,
    AntagonistGroup,
    ExperienceLevel,
    MuscleGroup,
    VolumeBand,
)
from domain.models.exercise import (
    Equipment,
    ExerciseDefinition,
    KeywordRule,
    MovementPattern,
    RepRanges,
)
from domain.models.workout_log import (
    CompletedExercise,
    CompletedSet,
    CompletionOutcome,
    PainReport,
    PerformanceTrend,
    ReadinessData,
    WorkoutFeedback,
    WorkoutLog,
)
from domain.models.program import (
    ProgramExercise,
    TrainingGoal,
    TrainingProgram,
    UserProfile,
    WorkoutSession,
)
from domain.models.mesocycle import Mesocycle, MesocyclePhase, MesocycleState

__all__ = [
    # Muscles
    "ExperienceLevel",
    "MuscleGroup",
    "VolumeBand",
    "FALLBACK_VOLUME_BAND",
    "AntagonistGroup",
    # Exercises
    "MovementPattern",
    "Equipment",
    "RepRanges",
    "ExerciseDefinition",
    "KeywordRule",
    # Logs
    "CompletionOutcome",
    "PerformanceTrend",
    "CompletedSet",
    "CompletedExercise",
    "PainReport",
    "ReadinessData",
    "WorkoutFeedback",
    "WorkoutLog",
    # Programs
    "TrainingGoal",
    "ProgramExercise",
    "WorkoutSession",
    "TrainingProgram",
    "UserProfile",
    # Mesocycle
    "MesocyclePhase",
    "Mesocycle",
    "MesocycleState",
]
