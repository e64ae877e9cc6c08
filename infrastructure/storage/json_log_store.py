"""
JSON-lines implementation of WorkoutLogStore.

One log per line, in append order. Lines hold either canonical WorkoutLog
JSON or the raw client record format; both are read through the raw
converter so older exports keep loading.
"""
import json
import logging
from pathlib import Path
from typing import List, Union

from domain.converters import RawDataError, raw_to_workout_log
from domain.models import WorkoutLog

logger = logging.getLogger(__name__)


class JsonLinesWorkoutLogStore:
    """
    File-backed WorkoutLogStore.

    The file is created on first append. Reading a missing file yields no logs.
    """

    def __init__(self, path: Union[str, Path]):
        """
        Initialize with the backing file.

        Args:
            path: Location of the .jsonl file
        """
        self._path = Path(path)

    @property
    def path(self) -> Path:
        return self._path

    def list(self) -> List[WorkoutLog]:
        """
        Read every stored log.

        Raises:
            RawDataError: If a line is not valid JSON or not a valid log
        """
        if not self._path.exists():
            return []

        logs: List[WorkoutLog] = []
        with self._path.open("r", encoding="utf-8") as f:
            for line_number, line in enumerate(f, start=1):
                line = line.strip()
                if not line:
                    continue
                try:
                    raw = json.loads(line)
                except json.JSONDecodeError as e:
                    raise RawDataError(f"{self._path}:{line_number}: invalid JSON: {e}") from e
                logs.append(raw_to_workout_log(raw))

        logger.debug(f"Loaded {len(logs)} workout logs from {self._path}")
        return logs

    def append(self, log: WorkoutLog) -> None:
        """Append one log as a JSON line."""
        self._path.parent.mkdir(parents=True, exist_ok=True)
        with self._path.open("a", encoding="utf-8") as f:
            f.write(log.model_dump_json() + "\n")
