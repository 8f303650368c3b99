from __future__ import annotations

import csv
import json
from dataclasses import asdict
from pathlib import Path
from typing import Any, Dict, List, Mapping, Sequence

from .models import PredictedAttributes, ProcessInput, SchedulingResult
from .validation import InvalidInput

DEFAULT_PRIORITY = 3
DEFAULT_CPU_HINT = 0.6
DEFAULT_IO_PROBABILITY = 0.5

# Accepted spellings for each field, snake_case first.
_FIELD_ALIASES = {
    "id": ("id", "pid"),
    "arrival_time": ("arrival_time", "arrivalTime"),
    "burst_time": ("burst_time", "burstTime"),
    "priority": ("priority",),
    "cpu_utilization_hint": ("cpu_utilization_hint", "cpuUtilizationHint"),
    "io_bound_probability": ("io_bound_probability", "ioBoundProbability"),
}


def sample_workload() -> List[ProcessInput]:
    """
    A small mixed workload of CPU-bound and I/O-bound processes.
    """
    return [
        ProcessInput("p1", arrival_time=0, burst_time=8, priority=2, cpu_utilization_hint=0.85, io_bound_probability=0.2),
        ProcessInput("p2", arrival_time=1, burst_time=4, priority=1, cpu_utilization_hint=0.4, io_bound_probability=0.7),
        ProcessInput("p3", arrival_time=2, burst_time=9, priority=4, cpu_utilization_hint=0.9, io_bound_probability=0.1),
        ProcessInput("p4", arrival_time=3, burst_time=5, priority=3, cpu_utilization_hint=0.55, io_bound_probability=0.45),
        ProcessInput("p5", arrival_time=4, burst_time=2, priority=5, cpu_utilization_hint=0.3, io_bound_probability=0.8),
    ]


def load_workload(path: str | Path) -> List[ProcessInput]:
    """
    Load a workload from a JSON or CSV file into a list of ProcessInput objects.
    """
    path = Path(path)
    suffix = path.suffix.lower()

    if suffix == ".json":
        return _load_json(path)
    if suffix == ".csv":
        return _load_csv(path)

    raise InvalidInput(f"Unsupported workload format: {suffix} (use .json or .csv)")


def _load_json(path: Path) -> List[ProcessInput]:
    with path.open("r", encoding="utf-8-sig") as f:
        try:
            raw = json.load(f)
        except json.JSONDecodeError as exc:
            raise InvalidInput(f"Malformed JSON workload {path}: {exc}") from exc
        except UnicodeDecodeError as exc:
            raise InvalidInput(f"Workload {path} is not valid UTF-8: {exc}") from exc

    if not isinstance(raw, list):
        raise InvalidInput("JSON workload must be a list of process objects")

    return [_process_from_mapping(entry) for entry in raw]


def _load_csv(path: Path) -> List[ProcessInput]:
    processes: List[ProcessInput] = []
    with path.open("r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        try:
            for row in reader:
                processes.append(_process_from_mapping(row))
        except UnicodeDecodeError as exc:
            raise InvalidInput(f"Workload {path} is not valid UTF-8: {exc}") from exc
    return processes


def _lookup(mapping: Mapping[str, Any], name: str):
    for alias in _FIELD_ALIASES[name]:
        value = mapping.get(alias)
        if value not in (None, ""):
            return value
    return None


def _float(value) -> float:
    if isinstance(value, bool):
        raise TypeError(f"expected a number, got {value!r}")
    return float(value)


def _number(value) -> float:
    number = _float(value)
    return int(number) if number.is_integer() else number


def _process_from_mapping(mapping) -> ProcessInput:
    if not isinstance(mapping, Mapping):
        raise InvalidInput(f"Invalid process entry: {mapping!r}")

    try:
        pid = _lookup(mapping, "id")
        arrival = _lookup(mapping, "arrival_time")
        burst = _lookup(mapping, "burst_time")
        if pid is None or arrival is None or burst is None:
            raise KeyError("id, arrival_time and burst_time are required")

        priority = _lookup(mapping, "priority")
        cpu = _lookup(mapping, "cpu_utilization_hint")
        io = _lookup(mapping, "io_bound_probability")

        return ProcessInput(
            id=str(pid),
            arrival_time=_number(arrival),
            burst_time=_number(burst),
            priority=_number(priority) if priority is not None else DEFAULT_PRIORITY,
            cpu_utilization_hint=_float(cpu) if cpu is not None else DEFAULT_CPU_HINT,
            io_bound_probability=_float(io) if io is not None else DEFAULT_IO_PROBABILITY,
        )
    except (KeyError, TypeError, ValueError) as exc:
        raise InvalidInput(f"Invalid process entry: {mapping!r}") from exc


def prediction_to_dict(predictions: Mapping[str, PredictedAttributes]) -> Dict[str, Dict[str, Any]]:
    return {pid: asdict(pred) for pid, pred in predictions.items()}


def result_to_dict(result: SchedulingResult) -> Dict[str, Any]:
    data = asdict(result)
    data["label"] = result.label
    return data


def results_to_json(results: Sequence[SchedulingResult], indent: int = 2) -> str:
    return json.dumps([result_to_dict(r) for r in results], indent=indent)
