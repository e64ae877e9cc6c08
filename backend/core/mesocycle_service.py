"""
Mesocycle Service.

Manages the periodization block lifecycle as pure state transforms:
- Phase tracking (intro -> accumulation -> overreaching -> deload)
- Volume multipliers per phase
- Week progression and wrap-around into a new mesocycle
- Display-only volume scaling of the stored baseline program

Nothing here mutates its inputs; every transform returns a new state or
program (or the very same object when nothing changes).
"""

import datetime as dt
import logging
import math
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Sequence, Union

from backend.core.advice import Advice
from backend.settings import get_settings
from backend.utils.rounding import ceil_int, round_int
from domain.models import (
    Mesocycle,
    MesocyclePhase,
    MesocycleState,
    TrainingProgram,
    WorkoutLog,
)

logger = logging.getLogger(__name__)


# =============================================================================
# Phase tables
# =============================================================================


VOLUME_MULTIPLIERS: Dict[MesocyclePhase, float] = {
    MesocyclePhase.INTRO: 0.7,
    MesocyclePhase.ACCUMULATION: 1.0,
    MesocyclePhase.OVERREACHING: 1.2,
    MesocyclePhase.DELOAD: 0.5,
}


@dataclass(frozen=True)
class PhaseDescription:
    """UI copy for a phase."""

    title: str
    description: str
    color: str


PHASE_DESCRIPTIONS: Dict[MesocyclePhase, PhaseDescription] = {
    MesocyclePhase.INTRO: PhaseDescription(
        title="Intro week",
        description="Adapting to new exercises. Focus on technique with moderate weights.",
        color="blue",
    ),
    MesocyclePhase.ACCUMULATION: PhaseDescription(
        title="Accumulation",
        description="Main growth phase. Gradually increasing load.",
        color="green",
    ),
    MesocyclePhase.OVERREACHING: PhaseDescription(
        title="Overreaching",
        description="Peak load. Maximum volume for a growth stimulus.",
        color="orange",
    ),
    MesocyclePhase.DELOAD: PhaseDescription(
        title="Deload",
        description="Recovery. Reduced volume for supercompensation.",
        color="purple",
    ),
}


def _total_weeks(total_weeks: Optional[int]) -> int:
    return total_weeks or get_settings().mesocycle_total_weeks


def week_start(day: dt.date) -> dt.date:
    """Monday of the week containing ``day``."""
    return day - dt.timedelta(days=day.weekday())


def phase_for_week(week: int, total_weeks: Optional[int] = None) -> MesocyclePhase:
    """
    Phase of a week within the cycle.

    Week 1 is intro and the last week is deload; the weeks in between are
    split into accumulation (first half, rounded up) and overreaching. For
    the default 6-week cycle: 1 intro, 2-3 accumulation, 4-5 overreaching,
    6 deload. Weeks outside the cycle fall back to accumulation.
    """
    total = _total_weeks(total_weeks)
    if week < 1 or week > total:
        return MesocyclePhase.ACCUMULATION
    if week == 1:
        return MesocyclePhase.INTRO
    if week == total:
        return MesocyclePhase.DELOAD
    last_accumulation = 1 + math.ceil((total - 2) / 2)
    if week <= last_accumulation:
        return MesocyclePhase.ACCUMULATION
    return MesocyclePhase.OVERREACHING


# =============================================================================
# State transitions
# =============================================================================


def _new_mesocycle_id() -> str:
    return f"meso_{uuid.uuid4().hex[:12]}"


def _with_week(mesocycle: Mesocycle, week: int) -> Mesocycle:
    phase = phase_for_week(week, mesocycle.total_weeks)
    return mesocycle.model_copy(
        update={
            "week_number": week,
            "phase": phase,
            "volume_multiplier": VOLUME_MULTIPLIERS[phase],
        }
    )


def create_initial_state(
    start: Optional[dt.date] = None,
    split_id: str = "",
    total_weeks: Optional[int] = None,
) -> MesocycleState:
    """
    Create the state of a fresh mesocycle starting in the week of ``start``.

    Args:
        start: Any day of the first week (defaults to today)
        split_id: Identifier of the training split in use
        total_weeks: Cycle length (defaults to settings)

    Returns:
        MesocycleState at week 1, intro phase
    """
    monday = week_start(start or dt.date.today())
    mesocycle = Mesocycle(
        id=_new_mesocycle_id(),
        week_number=1,
        total_weeks=_total_weeks(total_weeks),
        phase=MesocyclePhase.INTRO,
        volume_multiplier=VOLUME_MULTIPLIERS[MesocyclePhase.INTRO],
        start_date=monday,
        split_id=split_id,
    )
    return MesocycleState(mesocycle=mesocycle, current_week_start=monday)


def advance_week(state: MesocycleState, today: Optional[dt.date] = None) -> MesocycleState:
    """
    Move to the next week.

    After the last week a new mesocycle begins at week 1 with a new id. Its
    start date is the Monday of ``today`` when given, otherwise the Monday
    right after the finished cycle.
    """
    mesocycle = state.mesocycle
    next_week = mesocycle.week_number + 1

    if next_week > mesocycle.total_weeks:
        start = (
            week_start(today)
            if today is not None
            else mesocycle.start_date + dt.timedelta(weeks=mesocycle.total_weeks)
        )
        new_cycle = _with_week(
            mesocycle.model_copy(update={"id": _new_mesocycle_id(), "start_date": start}),
            1,
        )
        logger.debug(f"Mesocycle {mesocycle.id} complete; starting {new_cycle.id} on {start}")
        return state.model_copy(
            update={"mesocycle": new_cycle, "current_week_start": start, "workouts_this_week": 0}
        )

    advanced = _with_week(mesocycle, next_week)
    logger.debug(f"Mesocycle {mesocycle.id}: week {next_week} ({advanced.phase.value})")
    return state.model_copy(
        update={
            "mesocycle": advanced,
            "current_week_start": mesocycle.start_date + dt.timedelta(weeks=next_week - 1),
            "workouts_this_week": 0,
        }
    )


def calculate_current_week(
    start: dt.date,
    today: Optional[dt.date] = None,
    total_weeks: Optional[int] = None,
) -> int:
    """Calendar week of the cycle containing ``today``, clamped to [1, total]."""
    today = today or dt.date.today()
    week = (today - start).days // 7 + 1
    return max(1, min(_total_weeks(total_weeks), week))


def sync_with_logs(
    state: MesocycleState,
    logs: Sequence[WorkoutLog],
    today: Optional[dt.date] = None,
) -> MesocycleState:
    """
    Re-derive the current week from the workout history.

    The cycle is re-anchored on the Monday of the earliest logged workout, so
    the stored week and the week derived from ``start_date`` always agree.
    The state is returned unchanged when there are no logs or nothing differs.
    """
    if not logs:
        return state

    first = week_start(min(log.date for log in logs))
    week = calculate_current_week(first, today, state.mesocycle.total_weeks)
    phase = phase_for_week(week, state.mesocycle.total_weeks)
    if (
        first == state.mesocycle.start_date
        and week == state.mesocycle.week_number
        and phase == state.mesocycle.phase
    ):
        return state

    logger.debug(f"Syncing mesocycle {state.mesocycle.id} to week {week} from logs starting {first}")
    mesocycle = _with_week(state.mesocycle, week).model_copy(update={"start_date": first})
    return state.model_copy(update={"mesocycle": mesocycle})


def record_workout(
    state: MesocycleState,
    log: WorkoutLog,
    today: Optional[dt.date] = None,
) -> MesocycleState:
    """Count a completed workout in the per-week counter."""
    tracked = week_start(state.current_week_start)
    current = week_start(today or dt.date.today())

    if current != tracked:
        return state.model_copy(
            update={"current_week_start": current, "workouts_this_week": 1, "last_workout_date": log.date}
        )

    in_week = tracked <= log.date < tracked + dt.timedelta(days=7)
    return state.model_copy(
        update={
            "workouts_this_week": state.workouts_this_week + 1 if in_week else 1,
            "last_workout_date": log.date,
        }
    )


# =============================================================================
# Volume application
# =============================================================================


PhaseSource = Union[MesocycleState, Mesocycle, MesocyclePhase, str, float, int]


def volume_multiplier(source: PhaseSource) -> float:
    """Multiplier for a state, a mesocycle, a phase (or its name) or a raw number."""
    if isinstance(source, MesocycleState):
        return source.mesocycle.volume_multiplier
    if isinstance(source, Mesocycle):
        return source.volume_multiplier
    if isinstance(source, (MesocyclePhase, str)):
        return VOLUME_MULTIPLIERS[MesocyclePhase(source)]
    return float(source)


def display_program(baseline: TrainingProgram, source: PhaseSource) -> TrainingProgram:
    """
    Program as shown for the current phase.

    Every exercise's sets are scaled by the phase multiplier and rounded up
    (minimum 1). The baseline is never modified; a multiplier of exactly 1.0
    returns the baseline itself.
    """
    multiplier = volume_multiplier(source)
    if multiplier == 1.0:
        return baseline

    sessions = [
        session.model_copy(
            update={
                "exercises": [
                    exercise.model_copy(update={"sets": max(1, ceil_int(exercise.sets * multiplier))})
                    for exercise in session.exercises
                ]
            }
        )
        for session in baseline.sessions
    ]
    return baseline.model_copy(update={"sessions": sessions})


# =============================================================================
# Summary & events
# =============================================================================


@dataclass
class MesocycleSummary:
    """Current position in the cycle, for UI display."""

    week_number: int
    total_weeks: int
    phase: MesocyclePhase
    phase_info: PhaseDescription
    volume_multiplier: float
    days_until_next_week: int
    days_until_deload: int
    progress_percent: int  # 0-100
    is_deload_week: bool
    is_last_week_before_deload: bool


def get_mesocycle_summary(
    state: MesocycleState,
    today: Optional[dt.date] = None,
) -> MesocycleSummary:
    """Summarize where ``today`` falls in the cycle."""
    today = today or dt.date.today()
    mesocycle = state.mesocycle
    total = mesocycle.total_weeks
    week = calculate_current_week(mesocycle.start_date, today, total)
    phase = phase_for_week(week, total)

    next_week_start = mesocycle.start_date + dt.timedelta(weeks=week)
    deload_start = mesocycle.start_date + dt.timedelta(weeks=total - 1)

    return MesocycleSummary(
        week_number=week,
        total_weeks=total,
        phase=phase,
        phase_info=PHASE_DESCRIPTIONS[phase],
        volume_multiplier=VOLUME_MULTIPLIERS[phase],
        days_until_next_week=max(0, (next_week_start - today).days),
        days_until_deload=max(0, (deload_start - today).days),
        progress_percent=round_int(week / total * 100),
        is_deload_week=phase == MesocyclePhase.DELOAD,
        is_last_week_before_deload=week == total - 1,
    )


class MesocycleEventType(str, Enum):
    PHASE_CHANGE = "phase_change"
    DELOAD_START = "deload_start"
    NEW_MESOCYCLE = "new_mesocycle"
    MESOCYCLE_COMPLETE = "mesocycle_complete"


@dataclass
class MesocycleEvent:
    type: MesocycleEventType
    params: Dict[str, Any] = field(default_factory=dict)


def check_mesocycle_events(
    old: Optional[MesocycleState],
    new: MesocycleState,
) -> List[MesocycleEvent]:
    """Events worth notifying the user about between two states."""
    events: List[MesocycleEvent] = []
    if old is None:
        return events

    if old.mesocycle.phase != new.mesocycle.phase:
        events.append(
            MesocycleEvent(
                MesocycleEventType.PHASE_CHANGE,
                {"old_phase": old.mesocycle.phase, "new_phase": new.mesocycle.phase},
            )
        )
        if new.mesocycle.phase == MesocyclePhase.DELOAD:
            events.append(
                MesocycleEvent(MesocycleEventType.DELOAD_START, {"week_number": new.mesocycle.week_number})
            )

    if old.mesocycle.id != new.mesocycle.id:
        events.append(MesocycleEvent(MesocycleEventType.NEW_MESOCYCLE, {"mesocycle_id": new.mesocycle.id}))
        events.append(
            MesocycleEvent(MesocycleEventType.MESOCYCLE_COMPLETE, {"mesocycle_id": old.mesocycle.id})
        )

    return events


def get_event_message(event: MesocycleEvent) -> Advice:
    """Notification text for an event."""
    if event.type == MesocycleEventType.PHASE_CHANGE:
        info = PHASE_DESCRIPTIONS[event.params["new_phase"]]
        message = f"New phase: {info.title}. {info.description}"
    elif event.type == MesocycleEventType.DELOAD_START:
        message = "Deload week! Volume drops by 50% for recovery."
    elif event.type == MesocycleEventType.MESOCYCLE_COMPLETE:
        message = "Mesocycle complete! Great work."
    else:
        message = "A new mesocycle has started!"
    return Advice(code=f"mesocycle.{event.type.value}", message=message, params=dict(event.params))
