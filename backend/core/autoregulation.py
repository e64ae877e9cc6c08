"""
Autoregulation from subjective recovery feedback.

Reads the trailing window of workout logs and decides whether the next
sessions need more or less load:
- Pump quality indicates muscle stimulus
- Soreness indicates recovery status
- Performance trend indicates adaptation
- Readiness check-ins can only make the decision more cautious

Rules:
- Low pump, not declining          -> increase volume (+1 set)
- Declining or repeated soreness   -> decrease volume (-1 set, -5% weight)
- Pain                             -> location-specific warning

Exercise substitution is left to the program generator; this module only
changes sets and weights.
"""

import logging
from collections import Counter
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence

from backend.core.advice import Advice
from backend.settings import get_settings
from backend.utils.rounding import round_int
from domain.models import (
    PerformanceTrend,
    ReadinessData,
    TrainingProgram,
    WorkoutLog,
    WorkoutSession,
)

logger = logging.getLogger(__name__)

NEUTRAL_SCORE = 3.0
LOW_PUMP_THRESHOLD = 2  # pump <= 2 counts as low
HIGH_SORENESS_THRESHOLD = 4  # soreness >= 4 counts as high
LOW_READINESS_AVERAGE = 2.5
VERY_LOW_READINESS = 2.0
HIGH_READINESS_AVERAGE = 4.0

# Readiness weights; each input is 1-5 with higher meaning more ready
READINESS_WEIGHTS = {
    "sleep": 0.35,
    "food": 0.20,
    "stress": 0.20,
    "soreness": 0.25,
}


# =============================================================================
# Types
# =============================================================================


class RecoveryStatus(str, Enum):
    UNDER_STIMULATED = "under_stimulated"
    OPTIMAL = "optimal"
    UNDER_RECOVERED = "under_recovered"


class AdjustmentType(str, Enum):
    INCREASE = "increase"
    DECREASE = "decrease"
    MAINTAIN = "maintain"


@dataclass
class RecoveryAnalysis:
    """Recovery signals over the trailing window."""

    overall_status: RecoveryStatus = RecoveryStatus.OPTIMAL
    avg_pump_quality: float = NEUTRAL_SCORE
    avg_soreness: float = NEUTRAL_SCORE
    performance_trend: PerformanceTrend = PerformanceTrend.STABLE
    consecutive_low_pump_workouts: int = 0
    consecutive_high_soreness_workouts: int = 0
    pain_reported: bool = False
    pain_locations: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class VolumeAdjustment:
    """Structural change applied to every exercise."""

    type: AdjustmentType
    sets_change: int  # -1, 0 or +1
    weight_change: float  # percent, e.g. -5
    reason: str = ""


MAINTAIN = VolumeAdjustment(
    type=AdjustmentType.MAINTAIN,
    sets_change=0,
    weight_change=0,
    reason="Progress is on track. Keep going.",
)


@dataclass
class AutoregulationRecommendation:
    volume_adjustment: VolumeAdjustment
    exercises_to_substitute: List[str] = field(default_factory=list)
    warnings: List[Advice] = field(default_factory=list)
    suggestions: List[Advice] = field(default_factory=list)


@dataclass
class AutoregulationResult:
    """Adjusted program plus the recommendation that produced it."""

    program: TrainingProgram
    recommendation: AutoregulationRecommendation
    analysis: RecoveryAnalysis
    readiness_score: float
    average_readiness: float


@dataclass
class StatusMessage:
    title: str
    description: str
    color: str  # green / yellow / red


# =============================================================================
# Analysis
# =============================================================================


def _trailing(logs: Sequence[WorkoutLog], window_size: Optional[int]) -> List[WorkoutLog]:
    if window_size is None:
        window_size = get_settings().autoregulation_window
    if window_size < 1:
        raise ValueError(f"window_size must be at least 1, got {window_size}")
    return list(logs)[-window_size:]


def _overall_trend(trends: List[PerformanceTrend]) -> PerformanceTrend:
    """Majority with recency: a single most-recent decline wins."""
    if not trends:
        return PerformanceTrend.STABLE
    counts = Counter(trends)
    if counts[PerformanceTrend.DECLINING] >= 2 or trends[-1] == PerformanceTrend.DECLINING:
        return PerformanceTrend.DECLINING
    if counts[PerformanceTrend.IMPROVING] >= 2:
        return PerformanceTrend.IMPROVING
    return PerformanceTrend.STABLE


def _trailing_run(values: List[Optional[int]], predicate) -> int:
    """Length of the run at the end of ``values`` satisfying ``predicate``."""
    run = 0
    for value in reversed(values):
        if value is None or not predicate(value):
            break
        run += 1
    return run


def analyze_recovery_signals(
    logs: Sequence[WorkoutLog],
    window_size: Optional[int] = None,
) -> RecoveryAnalysis:
    """
    Analyze the most recent workout logs for recovery signals.

    Args:
        logs: Workout history, oldest first
        window_size: Number of trailing logs to analyze

    Returns:
        RecoveryAnalysis (neutral defaults when there are no logs)

    Raises:
        ValueError: If window_size is below 1
    """
    recent = _trailing(logs, window_size)
    if not recent:
        return RecoveryAnalysis()

    pumps = [log.feedback.pump_quality for log in recent]
    soreness = [log.feedback.soreness_24h for log in recent]

    pump_values = [v for v in pumps if v is not None]
    soreness_values = [v for v in soreness if v is not None]
    avg_pump = sum(pump_values) / len(pump_values) if pump_values else NEUTRAL_SCORE
    avg_soreness = sum(soreness_values) / len(soreness_values) if soreness_values else NEUTRAL_SCORE

    trend = _overall_trend(
        [log.feedback.performance_trend for log in recent if log.feedback.performance_trend is not None]
    )

    low_pump_run = _trailing_run(pumps, lambda v: v <= LOW_PUMP_THRESHOLD)
    high_soreness_run = _trailing_run(soreness, lambda v: v >= HIGH_SORENESS_THRESHOLD)

    pain_reported = any(log.feedback.pain.has_pain for log in recent)
    pain_locations: List[str] = []
    for log in recent:
        location = log.feedback.pain.location
        if log.feedback.pain.has_pain and location and location not in pain_locations:
            pain_locations.append(location)

    if avg_pump <= LOW_PUMP_THRESHOLD and trend != PerformanceTrend.DECLINING:
        status = RecoveryStatus.UNDER_STIMULATED
    elif trend == PerformanceTrend.DECLINING or high_soreness_run >= 2:
        status = RecoveryStatus.UNDER_RECOVERED
    else:
        status = RecoveryStatus.OPTIMAL

    logger.debug(
        f"Recovery over {len(recent)} logs: status={status.value} pump={avg_pump:.2f} "
        f"soreness={avg_soreness:.2f} trend={trend.value}"
    )

    return RecoveryAnalysis(
        overall_status=status,
        avg_pump_quality=avg_pump,
        avg_soreness=avg_soreness,
        performance_trend=trend,
        consecutive_low_pump_workouts=low_pump_run,
        consecutive_high_soreness_workouts=high_soreness_run,
        pain_reported=pain_reported,
        pain_locations=pain_locations,
    )


def calculate_readiness_score(readiness: Optional[ReadinessData]) -> float:
    """
    Weighted readiness score on the 1-5 scale.

    Returns the neutral 3 when no check-in was recorded.
    """
    if readiness is None:
        return NEUTRAL_SCORE
    return sum(getattr(readiness, name) * weight for name, weight in READINESS_WEIGHTS.items())


def get_average_readiness(
    logs: Sequence[WorkoutLog],
    window_size: Optional[int] = None,
) -> float:
    """Mean readiness score of the window logs that carry a check-in (3 if none)."""
    scores = [
        calculate_readiness_score(log.feedback.readiness)
        for log in _trailing(logs, window_size)
        if log.feedback.readiness is not None
    ]
    if not scores:
        return NEUTRAL_SCORE
    return sum(scores) / len(scores)


# =============================================================================
# Recommendations
# =============================================================================


def generate_recommendation(analysis: RecoveryAnalysis) -> AutoregulationRecommendation:
    """Turn a recovery analysis into a volume adjustment plus advice."""
    warnings: List[Advice] = []
    suggestions: List[Advice] = []

    if analysis.overall_status == RecoveryStatus.UNDER_STIMULATED:
        adjustment = VolumeAdjustment(
            type=AdjustmentType.INCREASE,
            sets_change=1,
            weight_change=0,
            reason="Low pump points to insufficient stimulus. Adding volume.",
        )
        suggestions.append(
            Advice(
                code="technique.time_under_tension",
                message="Try increasing time under tension (lower the weight more slowly)",
            )
        )
        suggestions.append(
            Advice(
                code="technique.proximity_to_failure",
                message="Make sure your working sets end at or close to failure",
            )
        )
    elif analysis.overall_status == RecoveryStatus.UNDER_RECOVERED:
        adjustment = VolumeAdjustment(
            type=AdjustmentType.DECREASE,
            sets_change=-1,
            weight_change=-5,
            reason="Signs of under-recovery. Reducing load.",
        )
        warnings.append(
            Advice(
                code="recovery.under_recovered",
                message="You may be under-recovered. Pay attention to sleep and nutrition.",
            )
        )
        suggestions.append(
            Advice(code="recovery.extra_rest_day", message="Consider an extra rest day")
        )
    else:
        adjustment = MAINTAIN
        if analysis.performance_trend == PerformanceTrend.IMPROVING:
            suggestions.append(
                Advice(
                    code="progression.increase_weight",
                    message="Great progress! Try increasing the weight by 2.5-5%",
                    params={"min_percent": 2.5, "max_percent": 5},
                )
            )

    if analysis.pain_reported:
        locations = ", ".join(analysis.pain_locations)
        warnings.append(
            Advice(
                code="pain.reported",
                message=f"Pain reported: {locations}. Be careful." if locations else "Pain reported. Be careful.",
                params={"locations": list(analysis.pain_locations)},
            )
        )

    if analysis.consecutive_low_pump_workouts >= 3:
        warnings.append(
            Advice(
                code="technique.review",
                message=(
                    f"Pump has been low for {analysis.consecutive_low_pump_workouts} workouts "
                    "in a row. Consider reviewing your technique."
                ),
                params={"workouts": analysis.consecutive_low_pump_workouts},
            )
        )

    return AutoregulationRecommendation(
        volume_adjustment=adjustment,
        warnings=warnings,
        suggestions=suggestions,
    )


# =============================================================================
# Application
# =============================================================================


def apply_volume_adjustment(
    session: WorkoutSession,
    adjustment: VolumeAdjustment,
    min_sets: Optional[int] = None,
    max_sets: Optional[int] = None,
) -> WorkoutSession:
    """
    Apply an adjustment to every exercise of a session.

    Sets are clamped to [min_sets, max_sets]; weights are scaled by the percent
    change and rounded to whole units. A maintain adjustment returns the
    session unchanged.
    """
    if adjustment.type == AdjustmentType.MAINTAIN:
        return session

    settings = get_settings()
    min_sets = min_sets if min_sets is not None else settings.program_min_sets
    max_sets = max_sets if max_sets is not None else settings.program_max_sets

    exercises = []
    for exercise in session.exercises:
        sets = max(min_sets, min(max_sets, exercise.sets + adjustment.sets_change))
        weight = exercise.weight
        if weight and adjustment.weight_change != 0:
            weight = max(0, round_int(weight * (1 + adjustment.weight_change / 100)))
        exercises.append(exercise.model_copy(update={"sets": sets, "weight": weight}))

    return session.model_copy(update={"exercises": exercises})


def apply_autoregulation_to_program(
    program: TrainingProgram,
    logs: Sequence[WorkoutLog],
    window_size: Optional[int] = None,
) -> AutoregulationResult:
    """
    Analyze recent logs and apply the resulting adjustment to a program.

    Readiness can only push the decision toward caution:
    - average readiness below 2.5 forces a weight-only decrease (-10%)
    - latest readiness below 2 suggests a light day
    - high readiness with optimal, improving recovery adds an advisory suggestion

    Returns:
        AutoregulationResult; its program is the very same object as
        ``program`` when the final adjustment is maintain
    """
    analysis = analyze_recovery_signals(logs, window_size)
    recommendation = generate_recommendation(analysis)

    readiness_score = calculate_readiness_score(logs[-1].feedback.readiness) if logs else NEUTRAL_SCORE
    average_readiness = get_average_readiness(logs, window_size)

    if (
        average_readiness < LOW_READINESS_AVERAGE
        and recommendation.volume_adjustment.type != AdjustmentType.DECREASE
    ):
        recommendation.volume_adjustment = VolumeAdjustment(
            type=AdjustmentType.DECREASE,
            sets_change=0,
            weight_change=-10,
            reason="Low readiness. Reducing intensity.",
        )
        recommendation.warnings.append(
            Advice(
                code="readiness.low",
                message="Your readiness scores are low. Prioritize sleep and recovery.",
                params={"average": round(average_readiness, 2)},
            )
        )

    if readiness_score < VERY_LOW_READINESS:
        recommendation.suggestions.append(
            Advice(
                code="readiness.light_day",
                message="Consider a light session or active recovery today.",
                params={"score": round(readiness_score, 2)},
            )
        )

    if (
        average_readiness >= HIGH_READINESS_AVERAGE
        and analysis.overall_status == RecoveryStatus.OPTIMAL
        and analysis.performance_trend == PerformanceTrend.IMPROVING
    ):
        recommendation.suggestions.append(
            Advice(
                code="readiness.push_harder",
                message="Readiness is excellent! You can add weight or sets.",
                params={"average": round(average_readiness, 2)},
            )
        )

    adjustment = recommendation.volume_adjustment
    if adjustment.type == AdjustmentType.MAINTAIN:
        adjusted = program
    else:
        adjusted = program.model_copy(
            update={"sessions": [apply_volume_adjustment(s, adjustment) for s in program.sessions]}
        )

    logger.debug(
        f"Autoregulation: {adjustment.type.value} sets={adjustment.sets_change:+d} "
        f"weight={adjustment.weight_change:+g}% readiness={readiness_score:.2f}/{average_readiness:.2f}"
    )

    return AutoregulationResult(
        program=adjusted,
        recommendation=recommendation,
        analysis=analysis,
        readiness_score=readiness_score,
        average_readiness=average_readiness,
    )


# =============================================================================
# Display Helpers
# =============================================================================


_STATUS_MESSAGES = {
    RecoveryStatus.OPTIMAL: StatusMessage(
        title="Optimal recovery",
        description="You are recovering well. Keep it up!",
        color="green",
    ),
    RecoveryStatus.UNDER_STIMULATED: StatusMessage(
        title="Insufficient stimulus",
        description="You can increase the load for better progress.",
        color="yellow",
    ),
    RecoveryStatus.UNDER_RECOVERED: StatusMessage(
        title="Under-recovered",
        description="Focus on rest and nutrition.",
        color="red",
    ),
}


def get_status_message(analysis: RecoveryAnalysis) -> StatusMessage:
    """Human-readable status card for a recovery analysis."""
    return _STATUS_MESSAGES[analysis.overall_status]
