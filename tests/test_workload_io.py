import json
from pathlib import Path

import pytest

from hybrid_scheduler.models import ProcessInput
from hybrid_scheduler.validation import InvalidInput
from hybrid_scheduler.workload_io import (
    load_workload,
    prediction_to_dict,
    result_to_dict,
    sample_workload,
)
from hybrid_scheduler.algorithms import run_algorithm
from hybrid_scheduler.predictor import predict


def test_load_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text(
        '[{"id":"A","arrival_time":0,"burst_time":3,"priority":1,'
        '"cpu_utilization_hint":0.9,"io_bound_probability":0.1},'
        '{"id":"B","arrival_time":1,"burst_time":2.5}]'
    )
    procs = load_workload(p)
    assert isinstance(procs[0], ProcessInput)
    assert procs[0].cpu_utilization_hint == 0.9
    assert procs[1].burst_time == 2.5
    assert procs[1].priority == 3
    assert procs[1].cpu_utilization_hint == 0.6
    assert procs[1].io_bound_probability == 0.5


def test_load_json_camel_case(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text(json.dumps([
        {"id": "p1", "arrivalTime": 2, "burstTime": 6, "priority": 4,
         "cpuUtilizationHint": 0.7, "ioBoundProbability": 0.2},
    ]))
    procs = load_workload(p)
    assert procs == [ProcessInput("p1", 2, 6, 4, 0.7, 0.2)]


def test_load_csv(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("pid,arrival_time,burst_time,priority\nA,0,3,1\nB,1,2,\n")
    procs = load_workload(p)
    assert procs[0].id == "A"
    assert procs[0].arrival_time == 0
    assert isinstance(procs[0].arrival_time, int)
    assert procs[1].priority == 3


def test_unsupported_suffix(tmp_path: Path):
    p = tmp_path / "w.txt"
    p.write_text("")
    with pytest.raises(InvalidInput, match="Unsupported"):
        load_workload(p)


def test_missing_burst_time(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('[{"id":"A","arrival_time":0}]')
    with pytest.raises(InvalidInput, match="Invalid process entry"):
        load_workload(p)


def test_non_numeric_field(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("id,arrival_time,burst_time\nA,zero,3\n")
    with pytest.raises(InvalidInput):
        load_workload(p)


def test_malformed_json(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text("[{")
    with pytest.raises(InvalidInput, match="Malformed"):
        load_workload(p)


def test_json_must_be_a_list(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_text('{"id": "A"}')
    with pytest.raises(InvalidInput):
        load_workload(p)


def test_sample_workload_is_fresh():
    first = sample_workload()
    first.pop()
    assert len(sample_workload()) == 5


def test_result_to_dict_is_json_ready():
    result = run_algorithm("rr", sample_workload(), quantum=2)
    data = result_to_dict(result)
    assert data["algorithm"] == "rr"
    assert data["label"] == "Round Robin"
    assert data["processes"][0]["slice_history"][0] == {"start": 0, "end": 2}
    json.dumps(data)


def test_prediction_to_dict():
    data = prediction_to_dict(predict(sample_workload()))
    assert list(data) == ["p1", "p2", "p3", "p4", "p5"]
    assert set(data["p1"]) == {"predicted_burst_time", "predicted_priority", "predicted_quantum", "confidence"}


def test_json_that_is_not_utf8(tmp_path: Path):
    p = tmp_path / "w.json"
    p.write_bytes(b'[{"id": "\xff"}]')
    with pytest.raises(InvalidInput, match="UTF-8"):
        load_workload(p)


def test_csv_that_is_not_utf8(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_bytes(b"id,arrival_time,burst_time\n\xff,0,3\n")
    with pytest.raises(InvalidInput, match="UTF-8"):
        load_workload(p)


def test_csv_with_byte_order_mark(tmp_path: Path):
    p = tmp_path / "w.csv"
    p.write_text("id,arrival_time,burst_time\nA,0,3\n", encoding="utf-8-sig")
    procs = load_workload(p)
    assert procs[0].id == "A"
    assert procs[0].burst_time == 3


@pytest.mark.parametrize(
    "entry",
    [
        {"id": "A", "arrival_time": True, "burst_time": 3},
        {"id": "A", "arrival_time": 0, "burst_time": 3, "priority": False},
        {"id": "A", "arrival_time": 0, "burst_time": 3, "cpu_utilization_hint": True},
    ],
)
def test_booleans_are_not_numbers(tmp_path: Path, entry):
    p = tmp_path / "w.json"
    p.write_text(json.dumps([entry]))
    with pytest.raises(InvalidInput, match="Invalid process entry"):
        load_workload(p)
