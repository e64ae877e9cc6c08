"""
Program validator for generated training programs.

Validates a weekly program template against:
- Muscle coverage (every required muscle trained)
- Weekly volume within the tier's MEV-MRV band
- Training frequency (at least 2 sessions per muscle)
- Exercise uniqueness within a session
- Antagonist balance (push/pull, quads/hamstrings)
- Compound exercise share
- Contraindications from the user's injury notes

The caller uses has_all_major_muscles / get_missing_muscles to decide whether
the program needs a gap-filling generation pass.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Set

from backend.core.advice import Advice
from backend.core.knowledge_base import KnowledgeBase
from backend.core.muscle_resolver import MuscleResolver, get_resolver
from backend.utils.rounding import round_int
from domain.models import ExperienceLevel, TrainingProgram, UserProfile

logger = logging.getLogger(__name__)


class ValidationSeverity(str, Enum):
    """Severity level for validation issues."""

    ERROR = "error"  # Program should be regenerated or gap-filled
    WARNING = "warning"  # Should be reviewed
    INFO = "info"  # Informational only, not scored


class IssueType(str, Enum):
    """Kinds of validation issues."""

    MISSING_MUSCLE = "missing_muscle"
    LOW_VOLUME = "low_volume"
    HIGH_VOLUME = "high_volume"
    LOW_FREQUENCY = "low_frequency"
    DUPLICATE_EXERCISE = "duplicate_exercise"
    IMBALANCE = "imbalance"
    MISSING_COMPOUND = "missing_compound"
    CONTRAINDICATED_EXERCISE = "contraindicated_exercise"


@dataclass
class ValidationIssue:
    """A single validation issue."""

    type: IssueType
    severity: ValidationSeverity
    message: str
    muscle_group: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)
    suggestion: Optional[Advice] = None


@dataclass
class ValidationResult:
    """Result of program validation."""

    is_valid: bool
    score: int  # 0-100
    issues: List[ValidationIssue] = field(default_factory=list)
    suggestions: List[Advice] = field(default_factory=list)
    summary: Optional[str] = None

    @property
    def errors(self) -> List[ValidationIssue]:
        """Get error-level issues."""
        return [i for i in self.issues if i.severity == ValidationSeverity.ERROR]

    @property
    def warnings(self) -> List[ValidationIssue]:
        """Get warning-level issues."""
        return [i for i in self.issues if i.severity == ValidationSeverity.WARNING]

    @property
    def infos(self) -> List[ValidationIssue]:
        """Get info-level issues."""
        return [i for i in self.issues if i.severity == ValidationSeverity.INFO]

    def issues_of_type(self, issue_type: IssueType) -> List[ValidationIssue]:
        return [i for i in self.issues if i.type == issue_type]


@dataclass
class ValidationSummary:
    """Short verdict for UI display."""

    status: str  # good / warning / error
    title: str
    description: str


class ProgramValidator:
    """
    Validates generated training programs.

    Volume counts declared sets: the primary muscle gets every set, each
    secondary gets sets x synergist multiplier. Warm-ups are ignored.
    """

    ERROR_PENALTY = 15
    WARNING_PENALTY = 5
    MIN_FREQUENCY = 2
    MIN_COMPOUND_RATIO = 0.4

    # Checked for volume in addition to the required muscles
    EXTRA_CHECKED_MUSCLES = ("glutes",)

    def __init__(self, resolver: Optional[MuscleResolver] = None):
        """
        Initialize the validator.

        Args:
            resolver: Muscle resolver (defaults to the shared one)
        """
        self._resolver = resolver or get_resolver()

    @property
    def knowledge_base(self) -> KnowledgeBase:
        return self._resolver.knowledge_base

    # -------------------------------------------------------------------------
    # Metrics
    # -------------------------------------------------------------------------

    def weekly_sets_by_muscle(self, program: TrainingProgram) -> Dict[str, int]:
        """
        Declared weekly sets per muscle id.

        Every taxonomy muscle is present (0 when untrained).
        """
        kb = self.knowledge_base
        volume: Dict[str, float] = defaultdict(float)
        for _, exercise in program.iter_exercises():
            targets = self._resolver.resolve(exercise.name)
            volume[targets.primary] += exercise.sets
            for secondary in targets.secondary:
                volume[secondary] += exercise.sets * kb.synergist_multiplier(targets.primary, secondary)
        return {muscle_id: round_int(volume.get(muscle_id, 0.0)) for muscle_id in kb.muscle_ids}

    def frequency_by_muscle(self, program: TrainingProgram) -> Dict[str, int]:
        """Number of distinct sessions in which each muscle is a primary target."""
        sessions_hit: Dict[str, Set[int]] = defaultdict(set)
        for session_index, exercise in program.iter_exercises():
            sessions_hit[self._resolver.resolve(exercise.name).primary].add(session_index)
        return {
            muscle_id: len(sessions_hit.get(muscle_id, ()))
            for muscle_id in self.knowledge_base.muscle_ids
        }

    def missing_muscles(self, program: TrainingProgram) -> List[str]:
        """Required muscle ids with zero weekly sets."""
        volume = self.weekly_sets_by_muscle(program)
        return [m for m in self.knowledge_base.required_muscles if volume.get(m, 0) == 0]

    # -------------------------------------------------------------------------
    # Validation
    # -------------------------------------------------------------------------

    def validate(
        self,
        program: TrainingProgram,
        profile: Optional[UserProfile] = None,
    ) -> ValidationResult:
        """
        Validate a complete program.

        Args:
            program: Weekly program template
            profile: User profile (experience tier and injuries)

        Returns:
            ValidationResult with any issues found
        """
        profile = profile or UserProfile()
        volume = self.weekly_sets_by_muscle(program)
        frequency = self.frequency_by_muscle(program)

        issues: List[ValidationIssue] = []
        issues.extend(self._validate_coverage(volume, frequency, profile.experience, len(program.sessions)))
        issues.extend(self._validate_uniqueness(program))
        issues.extend(self._validate_balance(volume))
        issues.extend(self._validate_compounds(program))
        if profile.has_injuries or profile.injuries:
            issues.extend(self._validate_contraindications(program, profile.injuries))

        error_count = len([i for i in issues if i.severity == ValidationSeverity.ERROR])
        warning_count = len([i for i in issues if i.severity == ValidationSeverity.WARNING])

        is_valid = error_count == 0
        score = 100 - error_count * self.ERROR_PENALTY - warning_count * self.WARNING_PENALTY
        score = max(0, min(100, score))

        if is_valid and not issues:
            summary = "Program validated successfully with no issues."
        elif is_valid:
            summary = f"Program valid with {warning_count} warning(s)."
        else:
            summary = f"Program invalid: {error_count} error(s), {warning_count} warning(s)."

        logger.debug(f"Validated program with {len(program.sessions)} sessions: score={score}, {summary}")

        return ValidationResult(
            is_valid=is_valid,
            score=score,
            issues=issues,
            suggestions=[i.suggestion for i in issues if i.suggestion is not None],
            summary=summary,
        )

    def _validate_coverage(
        self,
        volume: Dict[str, int],
        frequency: Dict[str, int],
        experience: ExperienceLevel,
        session_count: int,
    ) -> List[ValidationIssue]:
        """
        Validate coverage, volume band and frequency of the checked muscles.

        Args:
            volume: Weekly sets per muscle
            frequency: Sessions per muscle
            experience: User experience tier
            session_count: Sessions in the program

        Returns:
            List of coverage-related issues
        """
        kb = self.knowledge_base
        issues = []
        required = kb.required_muscles
        checked = required + [m for m in self.EXTRA_CHECKED_MUSCLES if m not in required]

        for muscle_id in checked:
            name = kb.display_name(muscle_id)
            sets = volume.get(muscle_id, 0)
            band = kb.volume_band(muscle_id, experience)

            if sets == 0 and muscle_id in required:
                issues.append(
                    ValidationIssue(
                        type=IssueType.MISSING_MUSCLE,
                        severity=ValidationSeverity.ERROR,
                        message=f"Muscle group '{name}' is not trained",
                        muscle_group=muscle_id,
                        suggestion=Advice(
                            code="validation.add_muscle",
                            message=f"Add exercises for {name}",
                            params={"muscle": muscle_id},
                        ),
                    )
                )
            elif sets < band.min:
                issues.append(
                    ValidationIssue(
                        type=IssueType.LOW_VOLUME,
                        severity=ValidationSeverity.WARNING,
                        message=f"Low volume for {name}: {sets} sets (minimum {band.min})",
                        muscle_group=muscle_id,
                        details={"actual": sets, "min": band.min, "optimal": band.optimal},
                        suggestion=Advice(
                            code="validation.increase_volume",
                            message=f"Increase {name} volume to {band.optimal} sets",
                            params={"muscle": muscle_id, "target": band.optimal},
                        ),
                    )
                )
            elif sets > band.max:
                issues.append(
                    ValidationIssue(
                        type=IssueType.HIGH_VOLUME,
                        severity=ValidationSeverity.WARNING,
                        message=f"Too much volume for {name}: {sets} sets (maximum {band.max})",
                        muscle_group=muscle_id,
                        details={"actual": sets, "max": band.max},
                        suggestion=Advice(
                            code="validation.reduce_volume",
                            message=f"Reduce {name} volume to {band.max} sets",
                            params={"muscle": muscle_id, "target": band.max},
                        ),
                    )
                )

            hits = frequency.get(muscle_id, 0)
            if session_count >= self.MIN_FREQUENCY and sets > 0 and hits < self.MIN_FREQUENCY:
                issues.append(
                    ValidationIssue(
                        type=IssueType.LOW_FREQUENCY,
                        severity=ValidationSeverity.WARNING,
                        message=f"Low frequency for {name}: {hits}x/week (recommended {self.MIN_FREQUENCY}x)",
                        muscle_group=muscle_id,
                        details={"actual": hits, "recommended": self.MIN_FREQUENCY},
                        suggestion=Advice(
                            code="validation.increase_frequency",
                            message=f"Train {name} in at least {self.MIN_FREQUENCY} sessions per week",
                            params={"muscle": muscle_id, "target": self.MIN_FREQUENCY},
                        ),
                    )
                )

        return issues

    def _validate_uniqueness(self, program: TrainingProgram) -> List[ValidationIssue]:
        """Flag exercise names repeated within one session."""
        issues = []
        for session in program.sessions:
            seen: Set[str] = set()
            reported: Set[str] = set()
            for exercise in session.exercises:
                key = exercise.name.strip().lower()
                if not key:
                    continue
                if key in seen and key not in reported:
                    reported.add(key)
                    issues.append(
                        ValidationIssue(
                            type=IssueType.DUPLICATE_EXERCISE,
                            severity=ValidationSeverity.WARNING,
                            message=f"Exercise '{exercise.name.strip()}' appears more than once in '{session.name}'",
                            details={"session": session.name, "exercise": exercise.name.strip()},
                            suggestion=Advice(
                                code="validation.replace_duplicate",
                                message=f"Replace the repeated '{exercise.name.strip()}' in '{session.name}' with a different exercise",
                                params={"session": session.name, "exercise": exercise.name.strip()},
                            ),
                        )
                    )
                seen.add(key)
        return issues

    def _validate_balance(self, volume: Dict[str, int]) -> List[ValidationIssue]:
        """Check each antagonist group's volume ratio."""
        kb = self.knowledge_base
        issues = []
        for group in kb.antagonist_groups:
            first = sum(volume.get(m, 0) for m in group.first)
            second = sum(volume.get(m, 0) for m in group.second)
            if first <= 0 or second <= 0:
                continue

            ratio = first / second
            if group.min_ratio <= ratio <= group.max_ratio:
                continue

            # The lighter side needs more work
            lighter = group.second if ratio > group.max_ratio else group.first
            lighter_names = [kb.display_name(m) for m in lighter]
            issues.append(
                ValidationIssue(
                    type=IssueType.IMBALANCE,
                    severity=ValidationSeverity.WARNING,
                    message=(
                        f"Imbalance in {group.name}: {first} vs {second} sets "
                        f"(ratio {ratio:.2f}, expected {group.min_ratio}-{group.max_ratio})"
                    ),
                    details={"group": group.name, "first": first, "second": second, "ratio": round(ratio, 2)},
                    suggestion=Advice(
                        code="validation.balance_antagonists",
                        message=f"Add more work for {', '.join(lighter_names)} to balance {group.name}",
                        params={"group": group.name, "muscles": list(lighter)},
                    ),
                )
            )
        return issues

    def _validate_compounds(self, program: TrainingProgram) -> List[ValidationIssue]:
        """Report a low share of compound catalog exercises."""
        exercises = [e for _, e in program.iter_exercises()]
        if not exercises:
            return []

        compound_count = 0
        for exercise in exercises:
            definition = self._resolver.find_exercise(exercise.name)
            if definition is not None and definition.is_compound:
                compound_count += 1

        ratio = compound_count / len(exercises)
        if ratio >= self.MIN_COMPOUND_RATIO:
            return []
        return [
            ValidationIssue(
                type=IssueType.MISSING_COMPOUND,
                severity=ValidationSeverity.INFO,
                message=f"Few compound exercises ({ratio * 100:.0f}%, recommended 50-60%)",
                details={"compound": compound_count, "total": len(exercises)},
                suggestion=Advice(
                    code="validation.add_compound",
                    message="Replace some isolation work with compound movements",
                    params={"compound": compound_count, "total": len(exercises)},
                ),
            )
        ]

    def _validate_contraindications(
        self,
        program: TrainingProgram,
        injuries: str,
    ) -> List[ValidationIssue]:
        """Flag catalog exercises whose contraindications match the injury notes."""
        issues = []
        flagged: Set[str] = set()
        for session_index, exercise in program.iter_exercises():
            definition = self._resolver.find_exercise(exercise.name)
            if definition is None or KnowledgeBase.is_exercise_safe(definition, injuries):
                continue
            if definition.id in flagged:
                continue
            flagged.add(definition.id)
            issues.append(
                ValidationIssue(
                    type=IssueType.CONTRAINDICATED_EXERCISE,
                    severity=ValidationSeverity.WARNING,
                    message=f"'{exercise.name}' may aggravate the reported injury",
                    muscle_group=definition.primary_muscle,
                    details={"exercise_id": definition.id, "session": program.sessions[session_index].name},
                    suggestion=Advice(
                        code="validation.substitute_exercise",
                        message=f"Substitute '{exercise.name}' with a joint-friendly alternative",
                        params={"exercise": exercise.name, "exercise_id": definition.id},
                    ),
                )
            )
        return issues


# =============================================================================
# Module-level helpers
# =============================================================================


def validate_program(
    program: TrainingProgram,
    profile: Optional[UserProfile] = None,
    resolver: Optional[MuscleResolver] = None,
) -> ValidationResult:
    """Validate with a default ProgramValidator."""
    return ProgramValidator(resolver).validate(program, profile)


def has_all_major_muscles(
    program: TrainingProgram,
    resolver: Optional[MuscleResolver] = None,
) -> bool:
    """Whether every required muscle gets at least one weekly set."""
    return not ProgramValidator(resolver).missing_muscles(program)


def get_missing_muscles(
    program: TrainingProgram,
    resolver: Optional[MuscleResolver] = None,
) -> List[str]:
    """Display names of required muscles the program does not train."""
    validator = ProgramValidator(resolver)
    kb = validator.knowledge_base
    return [kb.display_name(m) for m in validator.missing_muscles(program)]


def get_validation_summary(result: ValidationResult) -> ValidationSummary:
    """Get summary verdict for UI display."""
    if result.score >= 80:
        return ValidationSummary(
            status="good",
            title="Program is balanced",
            description="All muscle groups are covered with adequate volume",
        )
    if result.score >= 50:
        return ValidationSummary(
            status="warning",
            title="Program could be improved",
            description=(
                result.suggestions[0].message
                if result.suggestions
                else "Consider adjusting the program"
            ),
        )
    first_error = next(iter(result.errors), None)
    return ValidationSummary(
        status="error",
        title="Program needs changes",
        description=first_error.message if first_error else "Serious problems found",
    )
