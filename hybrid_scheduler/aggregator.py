"""
Run every scheduling policy against one workload.
"""

from __future__ import annotations

import logging
from typing import Mapping, Optional, Sequence, Tuple

from .algorithms import ALGORITHMS, PREDICTION_CONSUMERS
from .models import ROUND_ROBIN, SCHEDULER_ORDER, PredictedAttributes, ProcessInput, SchedulingResult
from .predictor import predict
from .validation import validate_predictions, validate_quantum, validate_workload

logger = logging.getLogger(__name__)

DEFAULT_QUANTUM = 3


def run(
    processes: Sequence[ProcessInput],
    base_quantum: float = DEFAULT_QUANTUM,
    predictions: Optional[Mapping[str, PredictedAttributes]] = None,
) -> Tuple[SchedulingResult, ...]:
    """
    Schedule `processes` with FCFS, SJF, Priority, Round Robin and Hybrid AI,
    in that order.

    The predictor runs once per call unless `predictions` is supplied, and its
    output is handed only to the policies that read it. Raises InvalidInput
    before any policy runs if the workload, quantum or predictions are invalid.
    """
    workload = list(processes)
    validate_workload(workload)
    validate_quantum(base_quantum)

    if predictions is None:
        predictions = predict(workload)
    validate_predictions(workload, predictions)
    predictions = dict(predictions)

    results = []
    for key in SCHEDULER_ORDER:
        func = ALGORITHMS[key]
        # Each policy gets its own copy of the workload list.
        result = func(
            list(workload),
            quantum=base_quantum if key == ROUND_ROBIN else None,
            predictions=predictions if key in PREDICTION_CONSUMERS else None,
        )
        results.append(result)

    logger.info("Scheduled %d processes with %d policies", len(workload), len(results))
    return tuple(results)
