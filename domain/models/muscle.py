"""
Muscle taxonomy value objects.

Defines the static muscle groups, per-tier weekly volume bands and the
antagonist groupings used for balance checks. All models are immutable;
they are built once when the knowledge base loads.
"""

from enum import Enum
from typing import List

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ExperienceLevel(str, Enum):
    """Training experience tiers."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class MuscleGroup(BaseModel):
    """
    A trainable muscle group.

    Examples:
        >>> chest = MuscleGroup(
        ...     id="chest",
        ...     name_en="Chest",
        ...     name_ru="Грудные мышцы",
        ...     weekly_min_sets=10,
        ...     weekly_max_sets=20,
        ...     recovery_hours=48,
        ...     synergists=["triceps", "shoulders"],
        ... )
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., min_length=1, description="Stable muscle identifier")
    name_en: str = Field(..., description="English display name")
    name_ru: str = Field(default="", description="Russian display name")
    weekly_min_sets: int = Field(..., ge=0, description="Minimum effective volume (MEV)")
    weekly_max_sets: int = Field(..., ge=0, description="Maximum recoverable volume (MRV)")
    recovery_hours: int = Field(default=48, ge=0, description="Hours needed between sessions")
    synergists: List[str] = Field(
        default_factory=list,
        description="Muscles that receive partial credit when this muscle is trained",
    )

    @model_validator(mode="after")
    def validate_landmarks(self) -> "MuscleGroup":
        """MEV must not exceed MRV."""
        if self.weekly_min_sets > self.weekly_max_sets:
            raise ValueError(
                f"{self.id}: weekly_min_sets ({self.weekly_min_sets}) "
                f"exceeds weekly_max_sets ({self.weekly_max_sets})"
            )
        return self

    @property
    def default_band(self) -> "VolumeBand":
        """Band derived from MEV/MRV when no per-tier band is configured."""
        optimal = int((self.weekly_min_sets + self.weekly_max_sets) / 2 + 0.5)
        return VolumeBand(
            min=self.weekly_min_sets,
            optimal=optimal,
            max=self.weekly_max_sets,
        )


class VolumeBand(BaseModel):
    """Weekly set targets for one muscle at one experience tier."""

    model_config = ConfigDict(frozen=True)

    min: int = Field(..., ge=0, description="Lower bound (sets/week)")
    optimal: int = Field(..., ge=0, description="Target (sets/week)")
    max: int = Field(..., ge=0, description="Upper bound (sets/week)")

    @model_validator(mode="after")
    def validate_ordering(self) -> "VolumeBand":
        """Enforce min <= optimal <= max."""
        if not (self.min <= self.optimal <= self.max):
            raise ValueError(
                f"Volume band must satisfy min <= optimal <= max, "
                f"got {self.min}/{self.optimal}/{self.max}"
            )
        return self


# Used for muscle ids that are not part of the taxonomy at all.
FALLBACK_VOLUME_BAND = VolumeBand(min=8, optimal=12, max=16)


class AntagonistGroup(BaseModel):
    """Two opposing sets of muscles whose volume should stay balanced."""

    model_config = ConfigDict(frozen=True)

    name: str
    first: List[str] = Field(..., min_length=1)
    second: List[str] = Field(..., min_length=1)
    min_ratio: float = Field(default=0.67, gt=0)
    max_ratio: float = Field(default=1.5, gt=0)
