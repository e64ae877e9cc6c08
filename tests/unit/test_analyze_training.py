"""
Unit tests for AnalyzeTrainingUseCase.

Uses FakeWorkoutLogStore so no files are touched.
"""

import datetime as dt

import pytest

from application.use_cases import AnalyzeTrainingUseCase
from backend.core.autoregulation import AdjustmentType
from backend.core.mesocycle_service import create_initial_state
from backend.core.prompt_context import MESOCYCLE_HEADER, RECOVERY_HEADER, VOLUME_HEADER
from backend.core.volume_tracker import SummaryStatus
from domain.models import MesocyclePhase, PerformanceTrend, UserProfile
from tests.fakes import create_log_store


@pytest.fixture
def program(make_program):
    return make_program([("Bench Press", 4, 100.0), ("Barbell Row", 4, 80.0)], [("Barbell Back Squat", 4)])


@pytest.fixture
def logs(make_log):
    return [
        make_log(exercises=[("Bench Press", 4, 100.0), ("Barbell Row", 4, 80.0)], pump_quality=4),
        make_log(exercises=[("Barbell Back Squat", 4)], session_id="Day 2", pump_quality=4),
    ]


@pytest.mark.unit
class TestSnapshot:
    """Tests for the combined analysis."""

    def test_without_mesocycle(self, program, logs, today):
        use_case = AnalyzeTrainingUseCase(create_log_store(logs=logs))
        snapshot = use_case.snapshot(UserProfile(), program, today=today)

        chest = next(m for m in snapshot.volume.muscles if m.muscle_id == "chest")
        assert chest.direct_sets == 4
        assert snapshot.volume_summary.status != SummaryStatus.NO_DATA
        assert 0 <= snapshot.validation.score <= 100
        assert snapshot.autoregulation.recommendation.volume_adjustment.type == AdjustmentType.MAINTAIN
        assert snapshot.display_program is program
        assert snapshot.mesocycle is None
        assert snapshot.mesocycle_summary is None
        assert snapshot.prompt_context.startswith(VOLUME_HEADER)
        assert RECOVERY_HEADER in snapshot.prompt_context
        assert MESOCYCLE_HEADER not in snapshot.prompt_context

    def test_with_mesocycle(self, program, logs, today):
        use_case = AnalyzeTrainingUseCase(create_log_store(logs=logs))
        state = create_initial_state(today)
        snapshot = use_case.snapshot(UserProfile(), program, mesocycle=state, today=today)

        assert snapshot.mesocycle_summary.phase == MesocyclePhase.INTRO
        # 4 sets x 0.7 rounds up to 3
        assert [e.sets for e in snapshot.display_program.sessions[0].exercises] == [3, 3]
        assert [e.sets for e in program.sessions[0].exercises] == [4, 4]
        assert "Phase: intro (volume x0.7)" in snapshot.prompt_context

    def test_summary_follows_synced_mesocycle(self, program, make_log):
        """A state created after the first logged workout reports the synced week everywhere."""
        today = dt.date(2024, 2, 7)
        use_case = AnalyzeTrainingUseCase(create_log_store(logs=[make_log(day=dt.date(2024, 1, 17))]))
        state = create_initial_state(today)
        snapshot = use_case.snapshot(UserProfile(), program, mesocycle=state, today=today)

        synced = snapshot.mesocycle.mesocycle
        assert (synced.week_number, synced.phase) == (4, MesocyclePhase.OVERREACHING)
        assert synced.start_date == dt.date(2024, 1, 15)
        assert snapshot.mesocycle_summary.week_number == 4
        assert snapshot.mesocycle_summary.phase == MesocyclePhase.OVERREACHING
        assert snapshot.mesocycle_summary.volume_multiplier == synced.volume_multiplier == 1.2
        assert "Phase: overreaching (volume x1.2)" in snapshot.prompt_context

    def test_autoregulation_feeds_display(self, program, make_log, today):
        logs = [make_log(performance_trend=PerformanceTrend.DECLINING)] * 3
        use_case = AnalyzeTrainingUseCase(create_log_store(logs=logs))
        snapshot = use_case.snapshot(UserProfile(), program, today=today)

        bench = snapshot.display_program.sessions[0].exercises[0]
        assert (bench.sets, bench.weight) == (3, 95)
        assert program.sessions[0].exercises[0].weight == 100.0
        assert "Adjustment: decrease (sets -1, weight -5%)" in snapshot.prompt_context

    def test_empty_store(self, program, today):
        snapshot = AnalyzeTrainingUseCase(create_log_store()).snapshot(UserProfile(), program, today=today)
        assert snapshot.volume_summary.status == SummaryStatus.NO_DATA
        assert snapshot.autoregulation.readiness_score == 3.0


@pytest.mark.unit
class TestRecordWorkout:
    """Tests for appending finished workouts."""

    def test_appends_without_mesocycle(self, make_log):
        store = create_log_store()
        result = AnalyzeTrainingUseCase(store).record_workout(make_log())
        assert result is None
        assert store.append_count == 1
        assert len(store.list()) == 1

    def test_updates_mesocycle_counter(self, make_log, today):
        store = create_log_store()
        use_case = AnalyzeTrainingUseCase(store)
        state = create_initial_state(today)

        state = use_case.record_workout(make_log(), state, today)
        state = use_case.record_workout(make_log(session_id="Day 2"), state, today)

        assert state.workouts_this_week == 2
        assert state.last_workout_date == today
        assert store.append_count == 2
