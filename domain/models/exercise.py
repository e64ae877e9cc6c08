"""
Exercise catalog value objects.

An ExerciseDefinition is a static catalog entry: which muscle it targets,
which synergists it recruits, how it moves and what it needs. A KeywordRule
is the coarse fallback used when a free-text name matches no catalog entry.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field

from domain.models.muscle import ExperienceLevel


class MovementPattern(str, Enum):
    """Fundamental movement patterns."""

    HORIZONTAL_PUSH = "horizontal_push"
    VERTICAL_PUSH = "vertical_push"
    HORIZONTAL_PULL = "horizontal_pull"
    VERTICAL_PULL = "vertical_pull"
    SQUAT = "squat"
    HINGE = "hinge"
    LUNGE = "lunge"
    ISOLATION = "isolation"
    CARRY = "carry"
    ROTATION = "rotation"


class Equipment(str, Enum):
    """Equipment tags."""

    BARBELL = "barbell"
    DUMBBELL = "dumbbell"
    CABLE = "cable"
    MACHINE = "machine"
    BODYWEIGHT = "bodyweight"
    KETTLEBELL = "kettlebell"
    RESISTANCE_BAND = "resistance_band"
    EZ_BAR = "ez_bar"


class RepRanges(BaseModel):
    """Rep ranges per training goal (e.g. "8-12", "30-60s")."""

    model_config = ConfigDict(frozen=True)

    strength: str
    hypertrophy: str
    endurance: str


class ExerciseDefinition(BaseModel):
    """
    A catalog exercise.

    Examples:
        >>> bench = ExerciseDefinition(
        ...     id="bench_press_barbell",
        ...     name_en="Barbell Bench Press",
        ...     primary_muscle="chest",
        ...     secondary_muscles=["triceps", "shoulders"],
        ...     movement_pattern=MovementPattern.HORIZONTAL_PUSH,
        ...     is_compound=True,
        ...     equipment=[Equipment.BARBELL],
        ...     rep_ranges=RepRanges(strength="3-5", hypertrophy="6-12", endurance="12-15"),
        ... )
        >>> bench.uses(Equipment.BARBELL)
        True
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1)
    name_en: str = Field(..., min_length=1, description="English display name")
    name_ru: str = Field(default="", description="Russian display name")
    primary_muscle: str = Field(..., description="Muscle id receiving direct sets")
    secondary_muscles: List[str] = Field(
        default_factory=list,
        description="Ordered synergists receiving partial credit",
    )
    movement_pattern: MovementPattern
    is_compound: bool = False
    equipment: List[Equipment] = Field(default_factory=list)
    difficulty: ExperienceLevel = ExperienceLevel.BEGINNER
    rep_ranges: RepRanges
    contraindications: List[str] = Field(
        default_factory=list,
        description="Injury keywords (matched as substrings of the user's injury notes)",
    )

    @property
    def names(self) -> List[str]:
        """All display names the exercise can be matched by."""
        return [n for n in (self.name_en, self.name_ru) if n]

    def uses(self, equipment: Equipment) -> bool:
        """Check whether the exercise can be done with the given equipment."""
        return equipment in self.equipment


class KeywordRule(BaseModel):
    """Fallback mapping from a name stem to muscles."""

    model_config = ConfigDict(frozen=True)

    keyword: str = Field(..., min_length=1)
    primary: str
    secondary: List[str] = Field(default_factory=list)
