"""
Unit tests for autoregulation from recovery feedback.
"""

import pytest

from backend.core.autoregulation import (
    AdjustmentType,
    RecoveryAnalysis,
    RecoveryStatus,
    VolumeAdjustment,
    analyze_recovery_signals,
    apply_autoregulation_to_program,
    apply_volume_adjustment,
    calculate_readiness_score,
    generate_recommendation,
    get_average_readiness,
    get_status_message,
)
from domain.models import PainReport, PerformanceTrend, ProgramExercise, ReadinessData, WorkoutSession

LOW = ReadinessData(sleep=1, food=1, stress=1, soreness=1)
HIGH = ReadinessData(sleep=5, food=5, stress=5, soreness=5)


@pytest.fixture
def program(make_program):
    return make_program([("Bench Press", 3, 100.0), ("Lat Pulldown", 3, 60.0)], [("Squat", 4)])


def _codes(advice):
    return [a.code for a in advice]


@pytest.mark.unit
class TestAnalyzeRecoverySignals:
    """Tests for the trailing-window analysis."""

    def test_no_logs_is_neutral(self):
        analysis = analyze_recovery_signals([])
        assert analysis.overall_status == RecoveryStatus.OPTIMAL
        assert analysis.avg_pump_quality == 3.0
        assert analysis.avg_soreness == 3.0
        assert analysis.performance_trend == PerformanceTrend.STABLE
        assert analysis.pain_reported is False

    def test_low_pump_run(self, make_log):
        logs = [make_log(pump_quality=v) for v in (1, 2, 1)]
        analysis = analyze_recovery_signals(logs)
        assert analysis.overall_status == RecoveryStatus.UNDER_STIMULATED
        assert analysis.consecutive_low_pump_workouts == 3
        assert analysis.avg_pump_quality == pytest.approx(4 / 3)

    def test_low_pump_run_breaks_on_good_pump(self, make_log):
        logs = [make_log(pump_quality=v) for v in (4, 2, 1)]
        analysis = analyze_recovery_signals(logs)
        assert analysis.consecutive_low_pump_workouts == 2
        # average 2.33 is above the low-pump threshold
        assert analysis.overall_status == RecoveryStatus.OPTIMAL

    def test_only_window_is_read(self, make_log):
        """Older logs outside the window do not count."""
        logs = [make_log(pump_quality=1)] * 3 + [make_log(pump_quality=5)] * 3
        analysis = analyze_recovery_signals(logs)
        assert analysis.avg_pump_quality == 5.0
        assert analysis.consecutive_low_pump_workouts == 0

    def test_custom_window(self, make_log):
        logs = [make_log(pump_quality=1), make_log(pump_quality=5)]
        assert analyze_recovery_signals(logs, window_size=1).avg_pump_quality == 5.0

    def test_zero_window_rejected(self, make_log):
        """A zero window must not fall back to reading the whole history."""
        logs = [make_log(pump_quality=1), make_log(pump_quality=5)]
        with pytest.raises(ValueError, match="window_size"):
            analyze_recovery_signals(logs, window_size=0)
        with pytest.raises(ValueError, match="window_size"):
            get_average_readiness(logs, window_size=0)

    def test_declining_trend(self, make_log):
        logs = [make_log(performance_trend=PerformanceTrend.DECLINING)] * 3
        analysis = analyze_recovery_signals(logs)
        assert analysis.performance_trend == PerformanceTrend.DECLINING
        assert analysis.overall_status == RecoveryStatus.UNDER_RECOVERED

    def test_latest_decline_wins(self, make_log):
        trends = [PerformanceTrend.IMPROVING, PerformanceTrend.IMPROVING, PerformanceTrend.DECLINING]
        analysis = analyze_recovery_signals([make_log(performance_trend=t) for t in trends])
        assert analysis.performance_trend == PerformanceTrend.DECLINING

    def test_improving_majority(self, make_log):
        trends = [PerformanceTrend.IMPROVING, PerformanceTrend.STABLE, PerformanceTrend.IMPROVING]
        analysis = analyze_recovery_signals([make_log(performance_trend=t) for t in trends])
        assert analysis.performance_trend == PerformanceTrend.IMPROVING

    def test_low_pump_while_declining_is_under_recovered(self, make_log):
        logs = [make_log(pump_quality=1, performance_trend=PerformanceTrend.DECLINING)] * 3
        assert analyze_recovery_signals(logs).overall_status == RecoveryStatus.UNDER_RECOVERED

    def test_repeated_high_soreness(self, make_log):
        logs = [make_log(soreness_24h=v) for v in (2, 4, 5)]
        analysis = analyze_recovery_signals(logs)
        assert analysis.consecutive_high_soreness_workouts == 2
        assert analysis.overall_status == RecoveryStatus.UNDER_RECOVERED

    def test_missing_value_breaks_run(self, make_log):
        logs = [make_log(soreness_24h=5), make_log(), make_log(soreness_24h=4)]
        analysis = analyze_recovery_signals(logs)
        assert analysis.consecutive_high_soreness_workouts == 1
        assert analysis.avg_soreness == 4.5

    def test_pain_locations_deduplicated(self, make_log):
        logs = [
            make_log(pain=PainReport(has_pain=True, location="knee")),
            make_log(pain=PainReport(has_pain=False, location="elbow")),
            make_log(pain=PainReport(has_pain=True, location="knee")),
        ]
        analysis = analyze_recovery_signals(logs)
        assert analysis.pain_reported is True
        assert analysis.pain_locations == ["knee"]


@pytest.mark.unit
class TestReadiness:
    """Tests for readiness scoring."""

    def test_score_bounds(self):
        assert calculate_readiness_score(HIGH) == pytest.approx(5.0)
        assert calculate_readiness_score(LOW) == pytest.approx(1.0)

    def test_weighted_score(self):
        readiness = ReadinessData(sleep=5, food=3, stress=3, soreness=1)
        assert calculate_readiness_score(readiness) == pytest.approx(1.75 + 0.6 + 0.6 + 0.25)

    def test_missing_check_in_is_neutral(self):
        assert calculate_readiness_score(None) == 3.0

    def test_average_ignores_logs_without_check_in(self, make_log):
        logs = [make_log(readiness=HIGH), make_log(), make_log(readiness=LOW)]
        assert get_average_readiness(logs) == pytest.approx(3.0)
        assert get_average_readiness([make_log()]) == 3.0


@pytest.mark.unit
class TestGenerateRecommendation:
    """Tests for analysis -> recommendation."""

    def test_under_stimulated_adds_a_set(self):
        recommendation = generate_recommendation(
            RecoveryAnalysis(overall_status=RecoveryStatus.UNDER_STIMULATED)
        )
        adjustment = recommendation.volume_adjustment
        assert (adjustment.type, adjustment.sets_change, adjustment.weight_change) == (
            AdjustmentType.INCREASE, 1, 0,
        )
        assert _codes(recommendation.suggestions) == [
            "technique.time_under_tension",
            "technique.proximity_to_failure",
        ]

    def test_under_recovered_backs_off(self):
        recommendation = generate_recommendation(
            RecoveryAnalysis(overall_status=RecoveryStatus.UNDER_RECOVERED)
        )
        adjustment = recommendation.volume_adjustment
        assert (adjustment.type, adjustment.sets_change, adjustment.weight_change) == (
            AdjustmentType.DECREASE, -1, -5,
        )
        assert _codes(recommendation.warnings) == ["recovery.under_recovered"]
        assert _codes(recommendation.suggestions) == ["recovery.extra_rest_day"]

    def test_optimal_improving_suggests_more_weight(self):
        recommendation = generate_recommendation(
            RecoveryAnalysis(performance_trend=PerformanceTrend.IMPROVING)
        )
        assert recommendation.volume_adjustment.type == AdjustmentType.MAINTAIN
        assert _codes(recommendation.suggestions) == ["progression.increase_weight"]

    def test_pain_warning(self):
        recommendation = generate_recommendation(
            RecoveryAnalysis(pain_reported=True, pain_locations=["knee", "elbow"])
        )
        pain = recommendation.warnings[0]
        assert pain.code == "pain.reported"
        assert "knee, elbow" in pain.message
        assert pain.params["locations"] == ["knee", "elbow"]

    def test_technique_review_after_three_low_pumps(self):
        recommendation = generate_recommendation(
            RecoveryAnalysis(
                overall_status=RecoveryStatus.UNDER_STIMULATED,
                consecutive_low_pump_workouts=3,
            )
        )
        assert "technique.review" in _codes(recommendation.warnings)


@pytest.mark.unit
class TestApplyVolumeAdjustment:
    """Tests for per-session adjustment."""

    def test_sets_and_weight(self):
        session = WorkoutSession(name="A", exercises=[ProgramExercise(name="Bench Press", sets=3, weight=100.0)])
        adjusted = apply_volume_adjustment(
            session, VolumeAdjustment(AdjustmentType.DECREASE, sets_change=-1, weight_change=-5)
        )
        assert adjusted.exercises[0].sets == 2
        assert adjusted.exercises[0].weight == 95
        assert session.exercises[0].sets == 3

    def test_sets_clamped(self):
        session = WorkoutSession(
            name="A",
            exercises=[ProgramExercise(name="Curl", sets=6), ProgramExercise(name="Row", sets=1)],
        )
        more = apply_volume_adjustment(session, VolumeAdjustment(AdjustmentType.INCREASE, 2, 0))
        less = apply_volume_adjustment(session, VolumeAdjustment(AdjustmentType.DECREASE, -2, 0))
        assert [e.sets for e in more.exercises] == [6, 3]
        assert [e.sets for e in less.exercises] == [4, 1]

    def test_missing_weight_untouched(self):
        session = WorkoutSession(name="A", exercises=[ProgramExercise(name="Plank", sets=3)])
        adjusted = apply_volume_adjustment(session, VolumeAdjustment(AdjustmentType.DECREASE, 0, -10))
        assert adjusted.exercises[0].weight is None

    def test_maintain_returns_same_session(self):
        session = WorkoutSession(name="A", exercises=[ProgramExercise(name="Plank", sets=3)])
        maintain = VolumeAdjustment(AdjustmentType.MAINTAIN, 0, 0)
        assert apply_volume_adjustment(session, maintain) is session


@pytest.mark.unit
class TestApplyAutoregulationToProgram:
    """Tests for the full autoregulation pass."""

    def test_maintain_returns_same_program(self, program, make_log):
        result = apply_autoregulation_to_program(program, [make_log(pump_quality=4)])
        assert result.recommendation.volume_adjustment.type == AdjustmentType.MAINTAIN
        assert result.program is program

    def test_no_logs(self, program):
        result = apply_autoregulation_to_program(program, [])
        assert result.program is program
        assert result.readiness_score == 3.0
        assert result.average_readiness == 3.0

    def test_declining_reduces_load(self, program, make_log):
        logs = [make_log(performance_trend=PerformanceTrend.DECLINING)] * 3
        result = apply_autoregulation_to_program(program, logs)
        day1 = result.program.sessions[0].exercises
        assert [e.sets for e in day1] == [2, 2]
        assert [e.weight for e in day1] == [95, 57]
        assert result.program.sessions[1].exercises[0].sets == 3
        assert program.sessions[0].exercises[0].sets == 3

    def test_low_pump_adds_sets(self, program, make_log):
        logs = [make_log(pump_quality=1)] * 3
        result = apply_autoregulation_to_program(program, logs)
        assert [e.sets for e in result.program.sessions[0].exercises] == [4, 4]
        assert result.program.sessions[0].exercises[0].weight == 100.0

    def test_low_readiness_forces_weight_cut(self, program, make_log):
        logs = [make_log(pump_quality=1, readiness=LOW)] * 3
        result = apply_autoregulation_to_program(program, logs)
        adjustment = result.recommendation.volume_adjustment
        assert (adjustment.type, adjustment.sets_change, adjustment.weight_change) == (
            AdjustmentType.DECREASE, 0, -10,
        )
        assert "readiness.low" in _codes(result.recommendation.warnings)
        assert "readiness.light_day" in _codes(result.recommendation.suggestions)
        bench = result.program.sessions[0].exercises[0]
        assert (bench.sets, bench.weight) == (3, 90)

    def test_low_readiness_keeps_existing_decrease(self, program, make_log):
        logs = [make_log(performance_trend=PerformanceTrend.DECLINING, readiness=LOW)] * 3
        result = apply_autoregulation_to_program(program, logs)
        assert result.recommendation.volume_adjustment.sets_change == -1
        assert "readiness.low" not in _codes(result.recommendation.warnings)

    def test_high_readiness_suggests_pushing(self, program, make_log):
        logs = [make_log(performance_trend=PerformanceTrend.IMPROVING, pump_quality=4, readiness=HIGH)] * 3
        result = apply_autoregulation_to_program(program, logs)
        assert "readiness.push_harder" in _codes(result.recommendation.suggestions)
        assert result.program is program


@pytest.mark.unit
class TestStatusMessage:
    """Tests for the status card."""

    def test_colors(self):
        assert get_status_message(RecoveryAnalysis()).color == "green"
        assert get_status_message(RecoveryAnalysis(overall_status=RecoveryStatus.UNDER_STIMULATED)).color == "yellow"
        assert get_status_message(RecoveryAnalysis(overall_status=RecoveryStatus.UNDER_RECOVERED)).color == "red"
