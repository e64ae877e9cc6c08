"""
Command-line entry point for the training load engine.

    python -m backend volume logs.jsonl --profile profile.json
    python -m backend validate program.json --profile profile.json
    python -m backend autoregulate program.json logs.json
    python -m backend display program.json --phase deload
    python -m backend context program.json logs.json --profile profile.json

Inputs are the client's raw JSON records. Logs may be a JSON array or a
.jsonl file with one log per line. Results are printed as JSON (or prompt
text for `context`).
"""
import argparse
import dataclasses
import datetime as dt
import json
import logging
import sys
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel

from application.use_cases import AnalyzeTrainingUseCase
from backend.core.autoregulation import apply_autoregulation_to_program
from backend.core.knowledge_base import KnowledgeBaseError
from backend.core.mesocycle_service import display_program, phase_for_week
from backend.core.program_validator import validate_program
from backend.core.volume_tracker import (
    calculate_volume_history,
    calculate_weekly_volume,
    get_volume_summary,
)
from backend.settings import get_settings
from domain.converters import RawDataError, raw_to_profile, raw_to_program, raw_to_workout_logs
from domain.models import MesocyclePhase, TrainingProgram, UserProfile, WorkoutLog
from infrastructure.storage import InMemoryWorkoutLogStore, JsonLinesWorkoutLogStore


def _jsonable(value: Any) -> Any:
    """Convert engine results (dataclasses, models, enums, dates) to JSON types."""
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {f.name: _jsonable(getattr(value, f.name)) for f in dataclasses.fields(value)}
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (dt.date, dt.datetime)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k.value if isinstance(k, Enum) else k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def _read_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def _load_logs(path: Optional[str]) -> List[WorkoutLog]:
    if path is None:
        return []
    if path.endswith(".jsonl"):
        return JsonLinesWorkoutLogStore(path).list()
    data = _read_json(path)
    if not isinstance(data, list):
        raise RawDataError(f"{path} must contain a JSON array of workout logs")
    return raw_to_workout_logs(data)


def _load_profile(path: Optional[str]) -> UserProfile:
    return raw_to_profile(_read_json(path)) if path else UserProfile()


def _load_program(path: str) -> TrainingProgram:
    return raw_to_program(_read_json(path))


def _parse_date(value: str) -> dt.date:
    try:
        return dt.date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid date '{value}', expected YYYY-MM-DD") from e


def _positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid number '{value}'") from e
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def _emit(result: Any) -> None:
    print(json.dumps(_jsonable(result), ensure_ascii=False, indent=2))


# =============================================================================
# Commands
# =============================================================================


def _cmd_volume(args: argparse.Namespace) -> None:
    logs = _load_logs(args.logs)
    experience = _load_profile(args.profile).experience
    if args.history is not None:
        _emit(calculate_volume_history(logs, args.history, experience, today=args.today))
    elif args.summary:
        _emit(get_volume_summary(logs, experience, today=args.today))
    else:
        _emit(calculate_weekly_volume(logs, experience, today=args.today))


def _cmd_validate(args: argparse.Namespace) -> None:
    _emit(validate_program(_load_program(args.program), _load_profile(args.profile)))


def _cmd_autoregulate(args: argparse.Namespace) -> None:
    result = apply_autoregulation_to_program(_load_program(args.program), _load_logs(args.logs))
    _emit(result)


def _cmd_display(args: argparse.Namespace) -> None:
    phase = phase_for_week(args.week) if args.week is not None else MesocyclePhase(args.phase)
    _emit(display_program(_load_program(args.program), phase))


def _cmd_context(args: argparse.Namespace) -> None:
    use_case = AnalyzeTrainingUseCase(InMemoryWorkoutLogStore(_load_logs(args.logs)))
    snapshot = use_case.snapshot(
        _load_profile(args.profile), _load_program(args.program), today=args.today
    )
    print(snapshot.prompt_context)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Training load analysis over client JSON records")
    subparsers = parser.add_subparsers(dest="command", required=True)

    volume = subparsers.add_parser("volume", help="Weekly per-muscle volume report")
    volume.add_argument("logs", help="Workout logs (.json array or .jsonl)")
    volume.add_argument("--profile", help="Profile JSON (experience tier)")
    volume.add_argument("--today", type=_parse_date, help="Reference date, YYYY-MM-DD")
    group = volume.add_mutually_exclusive_group()
    group.add_argument(
        "--history", type=_positive_int, metavar="WEEKS", help="Report the trailing WEEKS weeks"
    )
    group.add_argument("--summary", action="store_true", help="Print the compact summary")
    volume.set_defaults(func=_cmd_volume)

    validate = subparsers.add_parser("validate", help="Validate a generated program")
    validate.add_argument("program", help="Program JSON")
    validate.add_argument("--profile", help="Profile JSON")
    validate.set_defaults(func=_cmd_validate)

    autoregulate = subparsers.add_parser("autoregulate", help="Apply autoregulation to a program")
    autoregulate.add_argument("program", help="Program JSON")
    autoregulate.add_argument("logs", help="Workout logs (.json array or .jsonl)")
    autoregulate.set_defaults(func=_cmd_autoregulate)

    display = subparsers.add_parser("display", help="Program scaled for a mesocycle phase")
    display.add_argument("program", help="Program JSON")
    target = display.add_mutually_exclusive_group(required=True)
    target.add_argument("--phase", choices=[p.value for p in MesocyclePhase])
    target.add_argument("--week", type=_positive_int, help="Week of the mesocycle")
    display.set_defaults(func=_cmd_display)

    context = subparsers.add_parser("context", help="Prompt context text")
    context.add_argument("program", help="Program JSON")
    context.add_argument("logs", help="Workout logs (.json array or .jsonl)")
    context.add_argument("--profile", help="Profile JSON")
    context.add_argument("--today", type=_parse_date, help="Reference date, YYYY-MM-DD")
    context.set_defaults(func=_cmd_context)

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=get_settings().log_level, format="%(levelname)s %(name)s: %(message)s")

    try:
        args.func(args)
    except FileNotFoundError as e:
        print(f"Error: File not found: {e.filename}", file=sys.stderr)
        sys.exit(1)
    except json.JSONDecodeError as e:
        print(f"Error: Invalid JSON: {e}", file=sys.stderr)
        sys.exit(1)
    except (RawDataError, KnowledgeBaseError) as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
