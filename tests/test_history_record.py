import json
from dataclasses import FrozenInstanceError
from datetime import datetime
from types import SimpleNamespace

import pytest

from database.schemas import AHPHistoryCreate
from utils.ahp_config import Criterion
from utils.ahp_pipeline import AHPPipeline
from utils.history_record import HistoryRecord


@pytest.fixture
def record(history_payload):
    payload = AHPHistoryCreate.model_validate(history_payload(5))
    return AHPPipeline().evaluate_comparisons(payload)


def as_row(record, **overrides):
    columns = record.to_storage()
    columns.update(id=11, created_at=datetime(2025, 2, 3, 4, 5, 6))
    columns.update(overrides)
    return SimpleNamespace(**columns)


def test_record_is_immutable(record):
    with pytest.raises(FrozenInstanceError):
        record.reference_request = 2
    with pytest.raises(TypeError):
        record.alternative_results[Criterion.COMPLEXITY] = None


def test_storage_round_trip(record):
    restored = HistoryRecord.from_storage(as_row(record))

    assert restored.id == 11
    assert restored.criteria == record.criteria
    assert restored.alternatives == record.alternatives
    assert restored.reference_request == 5
    assert restored.criteria_result.weights == pytest.approx(record.criteria_result.weights)
    assert restored.criteria_result.cr == pytest.approx(record.criteria_result.cr)
    assert dict(restored.alternative_results).keys() == dict(record.alternative_results).keys()
    assert restored.global_priority() == record.global_priority()


def test_storage_columns_are_json(record):
    columns = record.to_storage()

    assert json.loads(columns['criteria']) == ["Urgency", "Importance", "Participants"]
    assert json.loads(columns['alternatives']) == ["Seminar", "Party"]
    assert set(json.loads(columns['alternative_comparison'])) == {"Urgency", "Importance", "Participants"}
    priority = json.loads(columns['priority_global'])
    assert priority['alternatives'] == ["Seminar", "Party"]
    assert [item['name'] for item in priority['priority']] == ["Seminar", "Party"]
    assert columns['is_delete'] is False


def test_corrupt_fields_are_read_as_missing(record):
    row = as_row(record, criteria_comparison="{broken", priority_global="[not json")
    restored = HistoryRecord.from_storage(row)

    assert restored.criteria_result is None
    assert restored.ranking is None
    assert restored.criteria == record.criteria
    assert restored.global_priority() == []
    assert restored.criteria_summary()['weights'] == []
    assert restored.criteria_summary()['cr'] is None


def test_unknown_criterion_key_is_skipped(record):
    stored = json.loads(record.to_storage()['alternative_comparison'])
    stored['Budget'] = stored['Urgency']
    restored = HistoryRecord.from_storage(as_row(record, alternative_comparison=json.dumps(stored)))

    assert set(restored.alternative_results) == {Criterion.URGENCY, Criterion.IMPORTANCE, Criterion.PARTICIPANTS}


def test_criteria_summary(record):
    summary = record.criteria_summary()

    assert summary['count'] == 3
    assert summary['labels'] == ["Urgency", "Importance", "Participants"]
    assert [w['name'] for w in summary['weights']] == summary['labels']
    assert all(len(w['weight'].split('.')[1]) == 4 for w in summary['weights'])
    assert len(summary['matrix']) == 3
    assert summary['matrix'][0][1] == 3


def test_alternative_summary_follows_criterion_order(history_payload):
    data = history_payload(5)
    data['alternative_comparison'] = {
        "Participants": data['alternative_comparison']['Participants'],
        "Urgency": data['alternative_comparison']['Urgency'],
    }
    record = AHPPipeline().evaluate_comparisons(AHPHistoryCreate.model_validate(data))

    assert [item['criterion'] for item in record.alternative_summary()] == ["Urgency", "Participants"]


def test_global_priority_formats_scores(record):
    priority = record.global_priority()

    assert [item['rank'] for item in priority] == [1, 2]
    assert all(len(item['score'].split('.')[1]) == 6 for item in priority)


def test_with_identity_returns_copy(record):
    stored = record.with_identity(3, datetime(2025, 1, 1))

    assert stored.id == 3
    assert record.id is None
    assert stored.ranking == record.ranking
