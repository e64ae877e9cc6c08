"""
Unit tests for the workout log store adapters.
"""
import json

import pytest

from domain.converters import RawDataError
from domain.models import PerformanceTrend, ReadinessData
from infrastructure.storage import InMemoryWorkoutLogStore, JsonLinesWorkoutLogStore


@pytest.mark.unit
class TestJsonLinesWorkoutLogStore:
    """Tests for the file-backed store."""

    def test_missing_file_is_empty(self, tmp_path):
        store = JsonLinesWorkoutLogStore(tmp_path / "logs.jsonl")
        assert store.list() == []
        assert not store.path.exists()

    def test_append_then_list(self, tmp_path, make_log, today):
        store = JsonLinesWorkoutLogStore(tmp_path / "nested" / "logs.jsonl")
        first = make_log(
            exercises=[("Bench Press", 3, 60.0)],
            pump_quality=4,
            performance_trend=PerformanceTrend.IMPROVING,
            readiness=ReadinessData(sleep=4, food=4, stress=3, soreness=5),
        )
        second = make_log(exercises=[("Squat", 4)], session_id="Day 2")
        store.append(first)
        store.append(second)

        assert store.list() == [first, second]
        assert len(store.path.read_text(encoding="utf-8").splitlines()) == 2

    def test_reads_raw_client_lines(self, tmp_path):
        path = tmp_path / "logs.jsonl"
        raw = {"date": "2024-01-15T08:00:00Z", "sessionId": "Day 1", "feedback": {"pumpQuality": 2}}
        path.write_text(json.dumps(raw, ensure_ascii=False) + "\n\n", encoding="utf-8")

        logs = JsonLinesWorkoutLogStore(path).list()
        assert len(logs) == 1
        assert logs[0].session_id == "Day 1"
        assert logs[0].feedback.pump_quality == 2

    def test_invalid_json_names_line(self, tmp_path):
        path = tmp_path / "logs.jsonl"
        path.write_text('{"date": "2024-01-15"}\n{not json\n', encoding="utf-8")
        with pytest.raises(RawDataError, match=r"logs\.jsonl:2"):
            JsonLinesWorkoutLogStore(path).list()

    def test_invalid_record(self, tmp_path):
        path = tmp_path / "logs.jsonl"
        path.write_text('{"sessionId": "Day 1"}\n', encoding="utf-8")
        with pytest.raises(RawDataError, match="date"):
            JsonLinesWorkoutLogStore(str(path)).list()


@pytest.mark.unit
class TestInMemoryWorkoutLogStore:
    """Tests for the list-backed store."""

    def test_empty(self):
        assert InMemoryWorkoutLogStore().list() == []

    def test_append_order(self, make_log):
        first = make_log(session_id="Day 1")
        store = InMemoryWorkoutLogStore([first])
        second = make_log(session_id="Day 2")
        store.append(second)
        assert [log.session_id for log in store.list()] == ["Day 1", "Day 2"]

    def test_list_is_a_copy(self, make_log):
        store = InMemoryWorkoutLogStore([make_log()])
        store.list().clear()
        assert len(store.list()) == 1
