"""
Plain-text context blocks for program-generation prompts.

The engine results are embedded verbatim in prompts sent to the external
program generator, so the section headers and line prefixes below are a
stable contract:

    === VOLUME ANALYSIS ===
    Needs more volume: Back, Quads
    Possible overtraining: Chest
    [under] Back: 4 sets (29% of optimal)
    ...
"""

from typing import List, Optional

from backend.core.autoregulation import AutoregulationRecommendation, RecoveryAnalysis
from backend.core.mesocycle_service import MesocycleSummary
from backend.core.program_validator import ValidationResult
from backend.core.volume_tracker import WeeklyVolumeReport

VOLUME_HEADER = "=== VOLUME ANALYSIS ==="
RECOVERY_HEADER = "=== RECOVERY ==="
VALIDATION_HEADER = "=== PROGRAM VALIDATION ==="
MESOCYCLE_HEADER = "=== MESOCYCLE ==="


def format_volume_for_prompt(report: WeeklyVolumeReport, limit: int = 8) -> str:
    """
    Summarize a weekly volume report.

    Args:
        report: Current week's report (muscles already sorted under first)
        limit: Maximum number of per-muscle lines

    Returns:
        Multi-line text block
    """
    lines = [VOLUME_HEADER, f"Week: {report.week_start} to {report.week_end}"]
    if report.undertrained_muscles:
        lines.append(f"Needs more volume: {', '.join(report.undertrained_muscles)}")
    if report.overtrained_muscles:
        lines.append(f"Possible overtraining: {', '.join(report.overtrained_muscles)}")
    for muscle in report.muscles[:limit]:
        lines.append(
            f"[{muscle.status.value}] {muscle.name_en}: {muscle.total_sets} sets "
            f"({muscle.percent_of_optimal}% of optimal)"
        )
    return "\n".join(lines)


def format_recovery_for_prompt(
    analysis: RecoveryAnalysis,
    recommendation: Optional[AutoregulationRecommendation] = None,
) -> str:
    """Summarize recovery signals and, if given, the chosen adjustment."""
    lines = [
        RECOVERY_HEADER,
        f"Status: {analysis.overall_status.value}",
        f"Average pump: {analysis.avg_pump_quality:.1f}/5",
        f"Average soreness: {analysis.avg_soreness:.1f}/5",
        f"Performance trend: {analysis.performance_trend.value}",
    ]
    if analysis.pain_reported:
        locations = ", ".join(analysis.pain_locations) or "unspecified"
        lines.append(f"Pain: {locations}")

    if recommendation is not None:
        adjustment = recommendation.volume_adjustment
        lines.append(
            f"Adjustment: {adjustment.type.value} "
            f"(sets {adjustment.sets_change:+d}, weight {adjustment.weight_change:+g}%)"
        )
        for warning in recommendation.warnings:
            lines.append(f"Warning: {warning.message}")
    return "\n".join(lines)


def format_validation_for_prompt(result: ValidationResult) -> str:
    """Summarize validation issues for a gap-filling request."""
    lines = [VALIDATION_HEADER, f"Score: {result.score}/100", f"Valid: {'yes' if result.is_valid else 'no'}"]
    for issue in result.issues:
        lines.append(f"[{issue.severity.value}] {issue.type.value}: {issue.message}")
    return "\n".join(lines)


def format_mesocycle_for_prompt(summary: MesocycleSummary) -> str:
    """Summarize the current mesocycle position."""
    return "\n".join(
        [
            MESOCYCLE_HEADER,
            f"Week: {summary.week_number}/{summary.total_weeks}",
            f"Phase: {summary.phase.value} (volume x{summary.volume_multiplier:g})",
        ]
    )


def build_prompt_context(
    volume: Optional[WeeklyVolumeReport] = None,
    recovery: Optional[RecoveryAnalysis] = None,
    recommendation: Optional[AutoregulationRecommendation] = None,
    validation: Optional[ValidationResult] = None,
    mesocycle: Optional[MesocycleSummary] = None,
    volume_limit: int = 8,
) -> str:
    """Join the available sections, separated by blank lines."""
    sections: List[str] = []
    if volume is not None:
        sections.append(format_volume_for_prompt(volume, volume_limit))
    if recovery is not None:
        sections.append(format_recovery_for_prompt(recovery, recommendation))
    if validation is not None:
        sections.append(format_validation_for_prompt(validation))
    if mesocycle is not None:
        sections.append(format_mesocycle_for_prompt(mesocycle))
    return "\n\n".join(sections)
