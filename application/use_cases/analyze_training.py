"""
Analyze Training Use Case.

Runs the whole data flow over the caller's stored logs:

    logs + profile     -> weekly volume report and summary
    program + profile  -> validation result
    logs + program     -> autoregulated baseline
    baseline + phase   -> displayed program
    all of the above   -> prompt context text

Recording a finished workout appends it to the store and updates the
mesocycle bookkeeping.
"""
import datetime as dt
import logging
from dataclasses import dataclass
from typing import Optional

from application.ports import WorkoutLogStore
from backend.core.autoregulation import AutoregulationResult, apply_autoregulation_to_program
from backend.core.mesocycle_service import (
    MesocycleSummary,
    display_program,
    get_mesocycle_summary,
    record_workout,
    sync_with_logs,
)
from backend.core.muscle_resolver import MuscleResolver, get_resolver
from backend.core.program_validator import ProgramValidator, ValidationResult
from backend.core.prompt_context import build_prompt_context
from backend.core.volume_tracker import (
    VolumeSummary,
    WeeklyVolumeReport,
    calculate_weekly_volume,
    get_volume_summary,
)
from domain.models import MesocycleState, TrainingProgram, UserProfile, WorkoutLog

logger = logging.getLogger(__name__)


@dataclass
class TrainingSnapshot:
    """Everything the dashboard and the prompt builder need for one day."""

    volume: WeeklyVolumeReport
    volume_summary: VolumeSummary
    validation: ValidationResult
    autoregulation: AutoregulationResult
    mesocycle: Optional[MesocycleState]
    mesocycle_summary: Optional[MesocycleSummary]
    display_program: TrainingProgram
    prompt_context: str


class AnalyzeTrainingUseCase:
    """
    Use case combining the log store with the engine.

    The engine itself stays pure; this class only reads from and appends to
    the injected store.
    """

    def __init__(
        self,
        log_store: WorkoutLogStore,
        resolver: Optional[MuscleResolver] = None,
    ):
        """
        Initialize with required dependencies.

        Args:
            log_store: Append-only store of completed workouts
            resolver: Muscle resolver (defaults to the shared one)
        """
        self._log_store = log_store
        self._resolver = resolver or get_resolver()

    def snapshot(
        self,
        profile: UserProfile,
        program: TrainingProgram,
        mesocycle: Optional[MesocycleState] = None,
        today: Optional[dt.date] = None,
    ) -> TrainingSnapshot:
        """
        Analyze the stored history against a baseline program.

        Args:
            profile: User profile
            program: Stored baseline program
            mesocycle: Current mesocycle state, if periodization is enabled
            today: Reference date (defaults to the current local date)

        Returns:
            TrainingSnapshot; the baseline program itself is never modified
        """
        today = today or dt.date.today()
        logs = self._log_store.list()

        volume = calculate_weekly_volume(logs, profile.experience, today=today, resolver=self._resolver)
        summary = get_volume_summary(logs, profile.experience, today=today, resolver=self._resolver)
        validation = ProgramValidator(self._resolver).validate(program, profile)
        autoregulation = apply_autoregulation_to_program(program, logs)

        mesocycle_summary = None
        shown = autoregulation.program
        if mesocycle is not None:
            mesocycle = sync_with_logs(mesocycle, logs, today)
            mesocycle_summary = get_mesocycle_summary(mesocycle, today)
            shown = display_program(autoregulation.program, mesocycle)

        context = build_prompt_context(
            volume=volume,
            recovery=autoregulation.analysis,
            recommendation=autoregulation.recommendation,
            validation=validation,
            mesocycle=mesocycle_summary,
        )

        logger.debug(
            f"Snapshot for {today}: {len(logs)} logs, volume={volume.overall_status.value}, "
            f"validation={validation.score}"
        )

        return TrainingSnapshot(
            volume=volume,
            volume_summary=summary,
            validation=validation,
            autoregulation=autoregulation,
            mesocycle=mesocycle,
            mesocycle_summary=mesocycle_summary,
            display_program=shown,
            prompt_context=context,
        )

    def record_workout(
        self,
        log: WorkoutLog,
        mesocycle: Optional[MesocycleState] = None,
        today: Optional[dt.date] = None,
    ) -> Optional[MesocycleState]:
        """
        Append a finished workout and update the mesocycle counter.

        Returns:
            The updated mesocycle state, or None when none was given
        """
        self._log_store.append(log)
        if mesocycle is None:
            return None
        return record_workout(mesocycle, log, today)
