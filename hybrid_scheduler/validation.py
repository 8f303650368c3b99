from __future__ import annotations

import math
from numbers import Real
from typing import Mapping, Sequence

from .models import PredictedAttributes, ProcessInput

MIN_PRIORITY = 1
MAX_PRIORITY = 10


class InvalidInput(ValueError):
    """
    Raised when a workload, quantum or prediction mapping cannot be scheduled.
    """


def _is_number(value) -> bool:
    return isinstance(value, Real) and not isinstance(value, bool) and math.isfinite(value)


def _is_integer(value) -> bool:
    if not _is_number(value):
        return False
    return float(value).is_integer()


def validate_process(process: ProcessInput) -> None:
    pid = process.id
    if not isinstance(pid, str) or not pid.strip():
        raise InvalidInput(f"Process id must be a non-empty string, got {pid!r}")

    if not _is_integer(process.arrival_time) or process.arrival_time < 0:
        raise InvalidInput(f"{pid}: arrival_time must be an integer >= 0, got {process.arrival_time!r}")

    if not _is_number(process.burst_time) or process.burst_time <= 0:
        raise InvalidInput(f"{pid}: burst_time must be > 0, got {process.burst_time!r}")

    if not _is_integer(process.priority) or not MIN_PRIORITY <= process.priority <= MAX_PRIORITY:
        raise InvalidInput(
            f"{pid}: priority must be an integer in [{MIN_PRIORITY}, {MAX_PRIORITY}], got {process.priority!r}"
        )

    for name in ("cpu_utilization_hint", "io_bound_probability"):
        value = getattr(process, name)
        if not _is_number(value) or not 0.0 <= value <= 1.0:
            raise InvalidInput(f"{pid}: {name} must be in [0, 1], got {value!r}")


def validate_workload(processes: Sequence[ProcessInput]) -> None:
    """
    Check the whole workload before anything is scheduled.

    Fails on the first problem found so callers never see a partial result.
    """
    if not processes:
        raise InvalidInput("Workload must contain at least one process")

    seen: set[str] = set()
    for process in processes:
        validate_process(process)
        if process.id in seen:
            raise InvalidInput(f"Duplicate process id '{process.id}'")
        seen.add(process.id)


def validate_quantum(quantum) -> None:
    if not _is_number(quantum) or quantum <= 0:
        raise InvalidInput(f"Quantum must be a positive number, got {quantum!r}")


def validate_predictions(
    processes: Sequence[ProcessInput],
    predictions: Mapping[str, PredictedAttributes],
) -> None:
    missing = [p.id for p in processes if p.id not in predictions]
    if missing:
        raise InvalidInput(f"Missing predictions for: {', '.join(missing)}")

    for process in processes:
        pred = predictions[process.id]
        if not _is_number(pred.predicted_quantum) or pred.predicted_quantum <= 0:
            raise InvalidInput(f"{process.id}: predicted_quantum must be > 0, got {pred.predicted_quantum!r}")
        if not _is_number(pred.predicted_priority):
            raise InvalidInput(f"{process.id}: predicted_priority must be a number, got {pred.predicted_priority!r}")
