"""
Weekly training volume aggregation.

Turns a workout history into per-muscle weekly set counts and compares them
with experience-adjusted targets:

- direct sets: sets of exercises whose primary muscle is the muscle
- indirect sets: fractional credit from synergist movements
- status: under / optimal / over the tier's volume band

Usage:
    >>> from backend.core.volume_tracker import calculate_weekly_volume
    >>> report = calculate_weekly_volume(logs, "intermediate", today=date(2024, 1, 17))
    >>> report.overall_status
    <OverallVolumeStatus.MIXED: 'mixed'>
"""

import datetime as dt
import logging
from collections import defaultdict
from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional, Sequence, Tuple, Union

from backend.core.advice import Advice
from backend.core.muscle_resolver import MuscleResolver, get_resolver
from backend.settings import get_settings
from backend.utils.rounding import round_half_up, round_int
from domain.models import ExperienceLevel, VolumeBand, WorkoutLog

logger = logging.getLogger(__name__)


# =============================================================================
# Enums
# =============================================================================


class VolumeStatus(str, Enum):
    """Where a muscle's weekly volume falls relative to its band."""

    UNDER = "under"
    OPTIMAL = "optimal"
    OVER = "over"


class OverallVolumeStatus(str, Enum):
    """Week-level verdict."""

    NEEDS_MORE = "needs_more"  # more than 3 muscles under
    TOO_MUCH = "too_much"  # more than 2 muscles over
    MIXED = "mixed"
    OPTIMAL = "optimal"


class SummaryStatus(str, Enum):
    """Verdict of the compact volume summary card."""

    EXCELLENT = "excellent"
    GOOD = "good"
    NEEDS_WORK = "needs_work"
    NO_DATA = "no_data"


_STATUS_ORDER = {VolumeStatus.UNDER: 0, VolumeStatus.OPTIMAL: 1, VolumeStatus.OVER: 2}


# =============================================================================
# Data Classes
# =============================================================================


@dataclass
class MuscleVolumeData:
    """Weekly volume for one muscle."""

    muscle_id: str
    name_en: str
    name_ru: str
    direct_sets: int
    indirect_sets: float  # one decimal
    total_sets: int
    target: VolumeBand
    status: VolumeStatus
    percent_of_optimal: int

    @property
    def target_min(self) -> int:
        return self.target.min


@dataclass
class WeeklyVolumeReport:
    """Per-muscle volume for one Monday-aligned week."""

    week_start: str  # ISO date, inclusive
    week_end: str  # ISO date, exclusive
    muscles: List[MuscleVolumeData]
    overall_status: OverallVolumeStatus
    undertrained_muscles: List[str]
    overtrained_muscles: List[str]
    recommendations: List[Advice]

    def get(self, muscle_id: str) -> Optional[MuscleVolumeData]:
        """Look up one muscle's entry."""
        return next((m for m in self.muscles if m.muscle_id == muscle_id), None)


@dataclass
class VolumeSummary:
    """Compact view of the current week for dashboards."""

    primary_muscles: List[MuscleVolumeData]
    secondary_muscles: List[MuscleVolumeData]
    overall_score: int  # 0-100
    status: SummaryStatus


# =============================================================================
# Aggregation
# =============================================================================


def week_window(today: Optional[dt.date] = None) -> Tuple[dt.date, dt.date]:
    """
    Monday-aligned, half-open week containing ``today``.

    Returns:
        (start, end) where start is a Monday and end = start + 7 days
    """
    today = today or dt.date.today()
    start = today - dt.timedelta(days=today.weekday())
    return start, start + dt.timedelta(days=7)


def count_muscle_sets(
    logs: Sequence[WorkoutLog],
    resolver: Optional[MuscleResolver] = None,
) -> Tuple[Dict[str, float], Dict[str, float]]:
    """
    Raw direct and indirect set counts per muscle id.

    Warm-up exercises are skipped. Unresolved names land in "unknown".
    """
    resolver = resolver or get_resolver()
    kb = resolver.knowledge_base
    direct: Dict[str, float] = defaultdict(float)
    indirect: Dict[str, float] = defaultdict(float)

    for log in logs:
        for exercise in log.completed_exercises:
            if exercise.is_warmup:
                continue
            count = exercise.performed_sets
            targets = resolver.resolve(exercise.name)
            direct[targets.primary] += count
            for secondary in targets.secondary:
                indirect[secondary] += count * kb.synergist_multiplier(targets.primary, secondary)

    return direct, indirect


def _classify(total: int, band: VolumeBand) -> VolumeStatus:
    if total < band.min:
        return VolumeStatus.UNDER
    if total > band.max:
        return VolumeStatus.OVER
    return VolumeStatus.OPTIMAL


def _build_report(
    week_logs: Sequence[WorkoutLog],
    experience: ExperienceLevel,
    start: dt.date,
    end: dt.date,
    resolver: MuscleResolver,
) -> WeeklyVolumeReport:
    kb = resolver.knowledge_base
    direct, indirect = count_muscle_sets(week_logs, resolver)

    muscles: List[MuscleVolumeData] = []
    undertrained: List[str] = []
    overtrained: List[str] = []

    for muscle in kb.muscles:
        direct_sets = round_int(direct.get(muscle.id, 0.0))
        indirect_sets = round_half_up(indirect.get(muscle.id, 0.0), 1)
        total_sets = direct_sets + round_int(indirect_sets)

        band = kb.volume_band(muscle.id, experience)
        status = _classify(total_sets, band)
        if status == VolumeStatus.UNDER:
            undertrained.append(muscle.name_en)
        elif status == VolumeStatus.OVER:
            overtrained.append(muscle.name_en)

        percent = round_int(total_sets / band.optimal * 100) if band.optimal > 0 else 0

        muscles.append(
            MuscleVolumeData(
                muscle_id=muscle.id,
                name_en=muscle.name_en,
                name_ru=muscle.name_ru,
                direct_sets=direct_sets,
                indirect_sets=indirect_sets,
                total_sets=total_sets,
                target=band,
                status=status,
                percent_of_optimal=percent,
            )
        )

    # sorted() is stable, so taxonomy order is kept within each status
    muscles = sorted(muscles, key=lambda m: _STATUS_ORDER[m.status])

    if len(undertrained) > 3:
        overall = OverallVolumeStatus.NEEDS_MORE
    elif len(overtrained) > 2:
        overall = OverallVolumeStatus.TOO_MUCH
    elif undertrained or overtrained:
        overall = OverallVolumeStatus.MIXED
    else:
        overall = OverallVolumeStatus.OPTIMAL

    recommendations: List[Advice] = []
    if undertrained:
        top = undertrained[:3]
        recommendations.append(
            Advice(
                code="volume.add_work",
                message=f"Add more work for: {', '.join(top)}",
                params={"muscles": top},
            )
        )
    if overtrained:
        recommendations.append(
            Advice(
                code="volume.reduce_work",
                message=f"Possibly too much work for: {', '.join(overtrained)}",
                params={"muscles": list(overtrained)},
            )
        )
    if not week_logs:
        recommendations.append(
            Advice(
                code="volume.start_training",
                message="Start training to track your weekly volume!",
            )
        )

    logger.debug(
        f"Volume week {start.isoformat()}: {len(week_logs)} logs, "
        f"{len(undertrained)} under, {len(overtrained)} over -> {overall.value}"
    )

    return WeeklyVolumeReport(
        week_start=start.isoformat(),
        week_end=end.isoformat(),
        muscles=muscles,
        overall_status=overall,
        undertrained_muscles=undertrained,
        overtrained_muscles=overtrained,
        recommendations=recommendations,
    )


def calculate_weekly_volume(
    logs: Sequence[WorkoutLog],
    experience: Union[ExperienceLevel, str] = ExperienceLevel.INTERMEDIATE,
    today: Optional[dt.date] = None,
    resolver: Optional[MuscleResolver] = None,
) -> WeeklyVolumeReport:
    """
    Weekly per-muscle volume report for the week containing ``today``.

    Args:
        logs: Workout history (any order, any span)
        experience: Experience tier used to pick volume bands
        today: Reference date (defaults to the current local date)
        resolver: Muscle resolver (defaults to the shared one)

    Returns:
        WeeklyVolumeReport with muscles sorted under -> optimal -> over
    """
    start, end = week_window(today)
    week_logs = [log for log in logs if start <= log.date < end]
    return _build_report(
        week_logs, ExperienceLevel(experience), start, end, resolver or get_resolver()
    )


def calculate_volume_history(
    logs: Sequence[WorkoutLog],
    weeks: Optional[int] = None,
    experience: Union[ExperienceLevel, str] = ExperienceLevel.INTERMEDIATE,
    today: Optional[dt.date] = None,
    resolver: Optional[MuscleResolver] = None,
) -> List[WeeklyVolumeReport]:
    """
    One report per trailing calendar week, oldest first.

    The last report covers the week containing ``today``; each report only
    counts logs from its own week.
    """
    if weeks is None:
        weeks = get_settings().volume_history_weeks
    today = today or dt.date.today()
    return [
        calculate_weekly_volume(
            logs, experience, today=today - dt.timedelta(weeks=offset), resolver=resolver
        )
        for offset in range(weeks - 1, -1, -1)
    ]


def get_muscles_needing_work(
    logs: Sequence[WorkoutLog],
    experience: Union[ExperienceLevel, str] = ExperienceLevel.INTERMEDIATE,
    today: Optional[dt.date] = None,
    resolver: Optional[MuscleResolver] = None,
) -> List[MuscleVolumeData]:
    """Muscles below their band in the current week."""
    report = calculate_weekly_volume(logs, experience, today=today, resolver=resolver)
    return [m for m in report.muscles if m.status == VolumeStatus.UNDER]


def get_volume_summary(
    logs: Sequence[WorkoutLog],
    experience: Union[ExperienceLevel, str] = ExperienceLevel.INTERMEDIATE,
    today: Optional[dt.date] = None,
    resolver: Optional[MuscleResolver] = None,
) -> VolumeSummary:
    """
    Compact summary of the current week.

    overall_score is the mean of each muscle's percent of optimal (capped at
    150 per muscle), capped at 100.
    """
    resolver = resolver or get_resolver()
    kb = resolver.knowledge_base
    report = calculate_weekly_volume(logs, experience, today=today, resolver=resolver)

    primary_ids = set(kb.primary_muscle_ids)
    secondary_ids = set(kb.secondary_muscle_ids)
    primary = [m for m in report.muscles if m.muscle_id in primary_ids]
    secondary = [m for m in report.muscles if m.muscle_id in secondary_ids]

    percents = [min(m.percent_of_optimal, 150) for m in report.muscles]
    average = sum(percents) / len(percents) if percents else 0
    score = min(100, round_int(average))

    if not any(m.total_sets > 0 for m in report.muscles):
        status = SummaryStatus.NO_DATA
    elif score >= 80:
        status = SummaryStatus.EXCELLENT
    elif score >= 50:
        status = SummaryStatus.GOOD
    else:
        status = SummaryStatus.NEEDS_WORK

    return VolumeSummary(
        primary_muscles=primary,
        secondary_muscles=secondary,
        overall_score=score,
        status=status,
    )
