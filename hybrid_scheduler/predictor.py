"""
Closed-form estimator used by the Hybrid AI policy.

For each process it derives a burst estimate, a priority tier, a preemption
quantum and a confidence score from the declared demand and the two workload
hints. The function is deterministic: the same workload always yields the
same predictions.
"""

from __future__ import annotations

import logging
import math
from typing import Dict, Sequence

from .models import PredictedAttributes, ProcessInput
from .validation import MAX_PRIORITY, MIN_PRIORITY, validate_workload

logger = logging.getLogger(__name__)

MIN_PREDICTED_BURST = 0.1
MIN_QUANTUM = 0.5
MAX_QUANTUM = 20.0


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def _round_half_up(value: float) -> int:
    """
    Round to the nearest integer, halves upward (2.5 -> 3).
    """
    return int(math.floor(value + 0.5))


def predict_process(process: ProcessInput) -> PredictedAttributes:
    cpu = process.cpu_utilization_hint
    io = process.io_bound_probability

    burst = max(MIN_PREDICTED_BURST, process.burst_time * (1 + cpu - io))
    priority = _round_half_up(_clamp(process.priority - 2 * cpu + 2 * io, MIN_PRIORITY, MAX_PRIORITY))
    confidence = 1 - abs(cpu - io)
    quantum = _clamp(burst * (0.5 + 0.5 * confidence), MIN_QUANTUM, MAX_QUANTUM)

    return PredictedAttributes(
        predicted_burst_time=burst,
        predicted_priority=priority,
        predicted_quantum=quantum,
        confidence=confidence,
    )


def predict(processes: Sequence[ProcessInput]) -> Dict[str, PredictedAttributes]:
    """
    Map every process id to its predicted attributes, in input order.

    Raises InvalidInput if the workload is malformed.
    """
    validate_workload(processes)
    predictions = {p.id: predict_process(p) for p in processes}
    logger.debug("Predicted attributes for %d processes", len(predictions))
    return predictions
