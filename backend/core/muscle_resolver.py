"""
Exercise-to-Muscle Resolver.

Maps a free-text exercise name onto the muscle taxonomy using a staged
approach:
1. Catalog match (English and Russian names), ranked exact > whole-word
   containment > shared significant tokens
2. Keyword fallback (longest keyword found at the start of a word)
3. "unknown"

Matching is lossy; callers must tolerate the unknown bucket.
"""

import logging
import re
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from typing import List, Optional, Pattern, Tuple

from rapidfuzz import fuzz

from backend.core.knowledge_base import KnowledgeBase, load_knowledge_base
from backend.core.normalize import normalize
from backend.settings import get_settings
from domain.models import ExerciseDefinition, KeywordRule

logger = logging.getLogger(__name__)

UNKNOWN_MUSCLE = "unknown"


class ResolveMethod(str, Enum):
    """How the muscles were determined."""

    CATALOG_EXACT = "catalog_exact"
    CATALOG_CONTAINS = "catalog_contains"
    CATALOG_TOKENS = "catalog_tokens"
    KEYWORD = "keyword"
    NONE = "none"


# Lower tier wins.
_TIER_METHODS = {
    0: ResolveMethod.CATALOG_EXACT,
    1: ResolveMethod.CATALOG_CONTAINS,
    2: ResolveMethod.CATALOG_TOKENS,
}


@dataclass(frozen=True)
class MuscleTargets:
    """Result of resolving an exercise name."""

    primary: str
    secondary: Tuple[str, ...] = ()
    method: ResolveMethod = ResolveMethod.NONE
    exercise_id: Optional[str] = None

    @property
    def is_unknown(self) -> bool:
        return self.primary == UNKNOWN_MUSCLE


UNKNOWN_TARGETS = MuscleTargets(primary=UNKNOWN_MUSCLE)


@dataclass(frozen=True)
class _CatalogName:
    """Pre-normalized catalog name."""

    position: int
    exercise: ExerciseDefinition
    stripped: str  # qualifier-free form used for matching
    full: str  # form used for tie-breaking


class MuscleResolver:
    """
    Resolves exercise names to primary and secondary muscles.

    Pure and total: resolve() never raises.
    """

    def __init__(
        self,
        knowledge_base: Optional[KnowledgeBase] = None,
        min_shared_tokens: Optional[int] = None,
        min_token_length: Optional[int] = None,
    ):
        """
        Initialize the resolver.

        Args:
            knowledge_base: Tables to match against (defaults to the cached one)
            min_shared_tokens: Shared significant tokens for a fuzzy match
            min_token_length: Minimum length of a significant token
        """
        settings = get_settings()
        self._kb = knowledge_base or load_knowledge_base()
        self._min_shared_tokens = (
            min_shared_tokens if min_shared_tokens is not None else settings.fuzzy_min_shared_tokens
        )
        self._min_token_length = (
            min_token_length if min_token_length is not None else settings.fuzzy_min_token_length
        )

        self._catalog: List[_CatalogName] = []
        for position, exercise in enumerate(self._kb.exercises):
            for name in exercise.names:
                stripped = normalize(name)
                if stripped:
                    self._catalog.append(
                        _CatalogName(position, exercise, stripped, normalize(name, strip_qualifiers=False))
                    )

        # Keywords are stems: they must start a word but may end mid-word.
        self._keywords: List[Tuple[str, Pattern[str], KeywordRule]] = []
        for rule in self._kb.keyword_rules:
            keyword = normalize(rule.keyword, strip_qualifiers=False)
            if keyword:
                self._keywords.append((keyword, re.compile(r"(?<!\w)" + re.escape(keyword)), rule))

    @property
    def knowledge_base(self) -> KnowledgeBase:
        return self._kb

    def resolve(self, exercise_name: str) -> MuscleTargets:
        """
        Resolve an exercise name to muscles.

        Args:
            exercise_name: Free-text name, e.g. "Warm-up: DB Bench Press"

        Returns:
            MuscleTargets; primary is "unknown" when nothing matched
        """
        query = normalize(exercise_name) if isinstance(exercise_name, str) else ""
        if not query:
            return UNKNOWN_TARGETS

        targets = self._match_catalog(query, normalize(exercise_name, strip_qualifiers=False))
        if targets is None:
            targets = self._match_keyword(query)
        if targets is None:
            logger.debug(f"No muscle match for '{exercise_name}'")
            return UNKNOWN_TARGETS

        logger.debug(
            f"Resolved '{exercise_name}' -> {targets.primary} "
            f"({targets.method.value}, exercise={targets.exercise_id})"
        )
        return targets

    def find_exercise(self, exercise_name: str) -> Optional[ExerciseDefinition]:
        """Catalog entry the name resolves to, if any."""
        targets = self.resolve(exercise_name)
        if targets.exercise_id is None:
            return None
        return self._kb.get_exercise(targets.exercise_id)

    # -------------------------------------------------------------------------
    # Catalog matching
    # -------------------------------------------------------------------------

    def _match_catalog(self, query: str, query_full: str) -> Optional[MuscleTargets]:
        best: Optional[Tuple[int, float, int]] = None
        best_exercise: Optional[ExerciseDefinition] = None

        for candidate in self._catalog:
            tier = self._match_tier(query, candidate.stripped)
            if tier is None:
                continue
            score = fuzz.token_sort_ratio(query_full, candidate.full)
            key = (tier, -score, candidate.position)
            if best is None or key < best:
                best = key
                best_exercise = candidate.exercise

        if best is None or best_exercise is None:
            return None
        return MuscleTargets(
            primary=best_exercise.primary_muscle,
            secondary=tuple(best_exercise.secondary_muscles),
            method=_TIER_METHODS[best[0]],
            exercise_id=best_exercise.id,
        )

    def _match_tier(self, query: str, candidate: str) -> Optional[int]:
        """0 = exact, 1 = containment, 2 = shared tokens, None = no match."""
        if query == candidate:
            return 0
        if _contains_run(query.split(), candidate.split()):
            return 1
        if self._shared_tokens(query, candidate) >= self._min_shared_tokens:
            return 2
        return None

    def _shared_tokens(self, first: str, second: str) -> int:
        """Significant tokens of ``first`` sharing a stem with a token of ``second``."""
        words1 = [w for w in first.split() if len(w) >= self._min_token_length]
        words2 = [w for w in second.split() if len(w) >= self._min_token_length]
        return sum(1 for w in words1 if any(w.startswith(w2) or w2.startswith(w) for w2 in words2))

    # -------------------------------------------------------------------------
    # Keyword fallback
    # -------------------------------------------------------------------------

    def _match_keyword(self, query: str) -> Optional[MuscleTargets]:
        best: Optional[KeywordRule] = None
        best_length = 0
        for keyword, pattern, rule in self._keywords:
            if len(keyword) > best_length and pattern.search(query):
                best, best_length = rule, len(keyword)
        if best is None:
            return None
        return MuscleTargets(
            primary=best.primary,
            secondary=tuple(best.secondary),
            method=ResolveMethod.KEYWORD,
        )


def _contains_run(first: List[str], second: List[str]) -> bool:
    """
    True when the shorter word list appears as a contiguous run in the longer.

    The run must cover at least half of the longer list, so a lone "dip"
    does not claim "dip belt squat".
    """
    short, long_ = (first, second) if len(first) <= len(second) else (second, first)
    size = len(short)
    if size == 0 or 2 * size < len(long_):
        return False
    return any(long_[i:i + size] == short for i in range(len(long_) - size + 1))


@lru_cache
def get_resolver() -> MuscleResolver:
    """Process-wide resolver over the default knowledge base."""
    return MuscleResolver()


def resolve_muscles(exercise_name: str) -> MuscleTargets:
    """Resolve with the default resolver."""
    return get_resolver().resolve(exercise_name)
