"""
Training program and user profile models.

A TrainingProgram is a recurring weekly template produced by the external
program generator. It is treated as a value: every engine transform returns
a new program instead of modifying the one it was given.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.models.muscle import ExperienceLevel


class TrainingGoal(str, Enum):
    """Primary training goals."""

    LOSE_FAT = "lose_fat"
    BUILD_MUSCLE = "build_muscle"
    GET_STRONGER = "get_stronger"
    GENERAL_HEALTH = "general_health"


class ProgramExercise(BaseModel):
    """A prescribed exercise within a session."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="")
    sets: int = Field(default=0, ge=0)
    reps: str = Field(default="", description="Rep prescription, e.g. '8-12' or '5'")
    weight: Optional[float] = Field(default=None, ge=0, description="Suggested load")
    rest: int = Field(default=90, ge=0, description="Rest between sets in seconds")
    is_warmup: bool = False
    description: Optional[str] = None


class WorkoutSession(BaseModel):
    """A named training day."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(default="")
    exercises: List[ProgramExercise] = Field(default_factory=list)


class TrainingProgram(BaseModel):
    """A weekly program: an ordered list of sessions."""

    model_config = ConfigDict(frozen=True)

    sessions: List[WorkoutSession] = Field(default_factory=list)

    def iter_exercises(self, include_warmups: bool = False):
        """Yield (session_index, exercise) pairs in program order."""
        for index, session in enumerate(self.sessions):
            for exercise in session.exercises:
                if exercise.is_warmup and not include_warmups:
                    continue
                yield index, exercise


class UserProfile(BaseModel):
    """The parts of the onboarding profile the engine reads."""

    model_config = ConfigDict(frozen=True)

    experience: ExperienceLevel = ExperienceLevel.INTERMEDIATE
    has_injuries: bool = False
    injuries: str = Field(default="", description="Free-text injury notes")
    primary_goal: TrainingGoal = TrainingGoal.BUILD_MUSCLE
    days_per_week: int = Field(default=3, ge=1, le=7)
