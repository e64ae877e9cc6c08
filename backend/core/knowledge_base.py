"""
Static training knowledge base.

Loads the YAML tables under shared/dictionaries (muscle taxonomy, per-tier
volume bands, synergist multipliers, antagonist groups, exercise catalog and
fallback keyword table) and validates them into immutable pydantic models.

The tables are loaded once per process:

    >>> from backend.core.knowledge_base import load_knowledge_base
    >>> kb = load_knowledge_base()
    >>> kb.volume_band("chest", "intermediate").optimal
    14
"""

import logging
from functools import lru_cache
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, Field, ValidationError

from backend.settings import get_settings
from domain.models import (
    FALLBACK_VOLUME_BAND,
    AntagonistGroup,
    ExerciseDefinition,
    ExperienceLevel,
    KeywordRule,
    MovementPattern,
    MuscleGroup,
    VolumeBand,
)

logger = logging.getLogger(__name__)

MUSCLE_GROUPS_FILE = "muscle_groups.yaml"
EXERCISE_CATALOG_FILE = "exercise_catalog.yaml"
MUSCLE_KEYWORDS_FILE = "muscle_keywords.yaml"


class KnowledgeBaseError(ValueError):
    """A knowledge base table is missing or violates an invariant."""


# =============================================================================
# Raw table schemas
# =============================================================================


class SynergistTable(BaseModel):
    default: float = Field(default=0.3, ge=0, le=1)
    pairs: Dict[str, float] = Field(default_factory=dict)


class SummaryBuckets(BaseModel):
    primary: List[str] = Field(default_factory=list)
    secondary: List[str] = Field(default_factory=list)


class MuscleTables(BaseModel):
    muscles: List[MuscleGroup]
    volume_bands: Dict[str, Dict[ExperienceLevel, VolumeBand]] = Field(default_factory=dict)
    synergist_multipliers: SynergistTable = Field(default_factory=SynergistTable)
    antagonist_groups: List[AntagonistGroup] = Field(default_factory=list)
    required_muscles: List[str] = Field(default_factory=list)
    summary_buckets: SummaryBuckets = Field(default_factory=SummaryBuckets)


class ExerciseTable(BaseModel):
    exercises: List[ExerciseDefinition]


class KeywordTable(BaseModel):
    keywords: List[KeywordRule]


# =============================================================================
# Knowledge Base
# =============================================================================


class KnowledgeBase:
    """
    Read-only view over the validated tables.

    Muscles and exercises keep the order they have in the YAML files; that
    order is used for reports and as the final tie-breaker when matching.
    """

    def __init__(
        self,
        muscle_tables: MuscleTables,
        exercises: List[ExerciseDefinition],
        keyword_rules: List[KeywordRule],
    ):
        self._tables = muscle_tables
        self._muscles: Dict[str, MuscleGroup] = {m.id: m for m in muscle_tables.muscles}
        self._exercises = list(exercises)
        self._exercise_index: Dict[str, ExerciseDefinition] = {e.id: e for e in exercises}
        self._keyword_rules = list(keyword_rules)
        self._check_references()

    def _check_references(self) -> None:
        """Every muscle id referenced by a table must exist in the taxonomy."""
        known = set(self._muscles)
        referenced: Dict[str, List[str]] = {
            "volume_bands": list(self._tables.volume_bands),
            "required_muscles": self._tables.required_muscles,
            "summary_buckets": self._tables.summary_buckets.primary
            + self._tables.summary_buckets.secondary,
        }
        for muscle in self._muscles.values():
            referenced[f"muscles.{muscle.id}.synergists"] = muscle.synergists
        for group in self._tables.antagonist_groups:
            referenced[f"antagonist_groups.{group.name}"] = group.first + group.second
        for exercise in self._exercises:
            referenced[f"exercises.{exercise.id}"] = [exercise.primary_muscle] + exercise.secondary_muscles
        for rule in self._keyword_rules:
            referenced[f"keywords.{rule.keyword}"] = [rule.primary] + rule.secondary

        for where, muscle_ids in referenced.items():
            unknown = sorted(set(muscle_ids) - known)
            if unknown:
                raise KnowledgeBaseError(f"{where} references unknown muscles: {unknown}")

        if len(self._exercise_index) != len(self._exercises):
            raise KnowledgeBaseError("exercise catalog contains duplicate ids")

    # -------------------------------------------------------------------------
    # Muscles
    # -------------------------------------------------------------------------

    @property
    def muscles(self) -> List[MuscleGroup]:
        """All muscle groups in taxonomy order."""
        return list(self._tables.muscles)

    @property
    def muscle_ids(self) -> List[str]:
        return [m.id for m in self._tables.muscles]

    def get_muscle(self, muscle_id: str) -> Optional[MuscleGroup]:
        return self._muscles.get(muscle_id)

    def display_name(self, muscle_id: str) -> str:
        """English display name, or the id itself for unknown muscles."""
        muscle = self.get_muscle(muscle_id)
        return muscle.name_en if muscle else muscle_id

    def volume_band(
        self, muscle_id: str, experience: Union[ExperienceLevel, str]
    ) -> VolumeBand:
        """
        Weekly set targets for a muscle at an experience tier.

        Falls back to the muscle's MEV/MRV when no tier band is configured,
        and to a generic 8/12/16 band for muscles outside the taxonomy.
        """
        tier = ExperienceLevel(experience)
        band = self._tables.volume_bands.get(muscle_id, {}).get(tier)
        if band is not None:
            return band
        muscle = self.get_muscle(muscle_id)
        if muscle is not None:
            return muscle.default_band
        return FALLBACK_VOLUME_BAND

    def synergist_multiplier(self, primary: str, secondary: str) -> float:
        """
        Partial-set credit a secondary muscle receives per set of the primary.

        Returns 0 unless the secondary is a listed synergist of the primary.
        """
        muscle = self._muscles.get(primary)
        if muscle is None or secondary not in muscle.synergists:
            return 0.0
        table = self._tables.synergist_multipliers
        return table.pairs.get(f"{primary}-{secondary}", table.default)

    @property
    def antagonist_groups(self) -> List[AntagonistGroup]:
        return list(self._tables.antagonist_groups)

    @property
    def required_muscles(self) -> List[str]:
        return list(self._tables.required_muscles)

    @property
    def primary_muscle_ids(self) -> List[str]:
        """Muscles shown in the primary bucket of the volume summary."""
        return list(self._tables.summary_buckets.primary)

    @property
    def secondary_muscle_ids(self) -> List[str]:
        """Muscles shown in the secondary bucket of the volume summary."""
        return list(self._tables.summary_buckets.secondary)

    def can_train_muscle(self, muscle_id: str, hours_since_last: float) -> bool:
        """Whether the muscle's recovery window has elapsed."""
        muscle = self.get_muscle(muscle_id)
        if muscle is None:
            return True
        return hours_since_last >= muscle.recovery_hours

    # -------------------------------------------------------------------------
    # Exercises
    # -------------------------------------------------------------------------

    @property
    def exercises(self) -> List[ExerciseDefinition]:
        return list(self._exercises)

    def get_exercise(self, exercise_id: str) -> Optional[ExerciseDefinition]:
        return self._exercise_index.get(exercise_id)

    def exercises_by_muscle(self, muscle_id: str) -> List[ExerciseDefinition]:
        return [e for e in self._exercises if e.primary_muscle == muscle_id]

    def exercises_by_pattern(
        self, pattern: Union[MovementPattern, str]
    ) -> List[ExerciseDefinition]:
        pattern = MovementPattern(pattern)
        return [e for e in self._exercises if e.movement_pattern == pattern]

    @property
    def keyword_rules(self) -> List[KeywordRule]:
        return list(self._keyword_rules)

    @staticmethod
    def is_exercise_safe(exercise: ExerciseDefinition, injuries: Optional[str]) -> bool:
        """
        Check an exercise against free-text injury notes.

        An exercise is unsafe when any of its contraindication keywords occurs
        in the notes (case-insensitive).
        """
        if not injuries:
            return True
        notes = injuries.lower().replace("ё", "е")
        return not any(c.lower() in notes for c in exercise.contraindications)


# =============================================================================
# Loading
# =============================================================================


def _read_yaml(path: Path) -> dict:
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise KnowledgeBaseError(f"Knowledge base file not found: {path}") from e
    except yaml.YAMLError as e:
        raise KnowledgeBaseError(f"Malformed YAML in {path}: {e}") from e
    if not isinstance(data, dict):
        raise KnowledgeBaseError(f"{path} must contain a mapping at the top level")
    return data


def build_knowledge_base(directory: Union[str, Path]) -> KnowledgeBase:
    """
    Read and validate the tables in a directory (uncached).

    Raises:
        KnowledgeBaseError: If a file is missing, malformed, or violates an
            invariant (e.g. a band with min > optimal).
    """
    directory = Path(directory)
    try:
        muscle_tables = MuscleTables.model_validate(_read_yaml(directory / MUSCLE_GROUPS_FILE))
        catalog = ExerciseTable.model_validate(_read_yaml(directory / EXERCISE_CATALOG_FILE))
        keywords = KeywordTable.model_validate(_read_yaml(directory / MUSCLE_KEYWORDS_FILE))
    except ValidationError as e:
        raise KnowledgeBaseError(f"Invalid knowledge base in {directory}: {e}") from e

    kb = KnowledgeBase(muscle_tables, catalog.exercises, keywords.keywords)
    logger.debug(
        f"Loaded knowledge base from {directory}: {len(kb.muscles)} muscles, "
        f"{len(kb.exercises)} exercises, {len(kb.keyword_rules)} keyword rules"
    )
    return kb


@lru_cache
def load_knowledge_base(path: Optional[str] = None) -> KnowledgeBase:
    """
    Get the process-wide knowledge base.

    Args:
        path: Directory with the YAML tables. Defaults to the configured
            knowledge_base_dir (shared/dictionaries).

    Returns:
        Cached KnowledgeBase instance. Clear with load_knowledge_base.cache_clear().
    """
    if path is None:
        path = str(get_settings().knowledge_base_path)
    return build_knowledge_base(path)
