from __future__ import annotations

import heapq
import logging
from collections import deque
from typing import Callable, Deque, Dict, List, Mapping, Optional, Sequence, Tuple

from .metrics import compute_summary
from .models import (
    FCFS,
    HYBRID_AI,
    PRIORITY,
    ROUND_ROBIN,
    SJF,
    ExecutionSlice,
    PredictedAttributes,
    ProcessInput,
    ProcessResult,
    SchedulingResult,
)
from .predictor import predict
from .validation import InvalidInput, validate_predictions, validate_quantum, validate_workload

logger = logging.getLogger(__name__)

# Remaining work at or below this is treated as finished.
EPSILON = 1e-9

SelectKey = Callable[[ProcessInput, int], Tuple]


def _arrival_order(processes: Sequence[ProcessInput]) -> List[int]:
    return sorted(range(len(processes)), key=lambda i: (processes[i].arrival_time, i))


def _build_process_result(process: ProcessInput, slices: List[ExecutionSlice]) -> ProcessResult:
    start_time = slices[0].start
    finish_time = slices[-1].end
    turnaround_time = finish_time - process.arrival_time
    return ProcessResult(
        id=process.id,
        arrival_time=process.arrival_time,
        burst_time=process.burst_time,
        start_time=start_time,
        finish_time=finish_time,
        waiting_time=max(0.0, turnaround_time - process.burst_time),
        turnaround_time=turnaround_time,
        response_time=start_time - process.arrival_time,
        slice_history=tuple(slices),
    )


def _build_result(
    algorithm: str,
    processes: Sequence[ProcessInput],
    slices: Dict[int, List[ExecutionSlice]],
    quantum: Optional[float] = None,
    suggested_quantum: Optional[float] = None,
) -> SchedulingResult:
    results = tuple(_build_process_result(p, slices[i]) for i, p in enumerate(processes))
    result = SchedulingResult(
        algorithm=algorithm,
        processes=results,
        summary=compute_summary(results),
        quantum=quantum,
        suggested_quantum=suggested_quantum,
    )
    logger.debug(
        "%s finished %d processes, makespan=%s",
        algorithm,
        len(results),
        result.summary.total_execution_time,
    )
    return result


def _schedule_non_preemptive(
    algorithm: str,
    processes: Sequence[ProcessInput],
    select_key: SelectKey,
) -> SchedulingResult:
    """
    Shared loop for FCFS, SJF and Priority: pick one ready process by
    `select_key` and run it to completion.
    """
    order = _arrival_order(processes)
    next_arrival = 0

    time: float = 0
    ready: List[Tuple[Tuple, int]] = []
    slices: Dict[int, List[ExecutionSlice]] = {}

    while len(slices) < len(processes):
        while next_arrival < len(order) and processes[order[next_arrival]].arrival_time <= time:
            idx = order[next_arrival]
            heapq.heappush(ready, (select_key(processes[idx], idx), idx))
            next_arrival += 1

        if not ready:
            # CPU idle: jump to the next arrival.
            time = processes[order[next_arrival]].arrival_time
            logger.debug("%s idle until t=%s", algorithm, time)
            continue

        _, idx = heapq.heappop(ready)
        p = processes[idx]

        start_time = time
        end_time = start_time + p.burst_time
        slices[idx] = [ExecutionSlice(start=start_time, end=end_time)]
        logger.debug("%s runs %s [%s, %s)", algorithm, p.id, start_time, end_time)

        time = end_time

    return _build_result(algorithm, processes, slices)


def schedule_fcfs(
    processes: Sequence[ProcessInput],
    quantum: Optional[float] = None,
    predictions: Optional[Mapping[str, PredictedAttributes]] = None,
) -> SchedulingResult:
    """
    First-Come First-Served (non-preemptive).

    Earliest arrival first; ties keep input order.
    """
    return _schedule_non_preemptive(FCFS, processes, lambda p, i: (p.arrival_time, i))


def schedule_sjf(
    processes: Sequence[ProcessInput],
    quantum: Optional[float] = None,
    predictions: Optional[Mapping[str, PredictedAttributes]] = None,
) -> SchedulingResult:
    """
    Shortest Job First (non-preemptive).

    At each decision point, among processes that have arrived and are not yet
    completed, choose the one with the smallest burst time (tie-breaker:
    earlier arrival, then input order).
    """
    return _schedule_non_preemptive(SJF, processes, lambda p, i: (p.burst_time, p.arrival_time, i))


def schedule_priority(
    processes: Sequence[ProcessInput],
    quantum: Optional[float] = None,
    predictions: Optional[Mapping[str, PredictedAttributes]] = None,
) -> SchedulingResult:
    """
    Static Priority scheduling (non-preemptive).

    Lower numeric priority value means higher priority. Among ready
    processes, choose the one with the smallest priority; break ties
    by earlier arrival time, then input order.
    """
    return _schedule_non_preemptive(PRIORITY, processes, lambda p, i: (p.priority, p.arrival_time, i))


def _run_slice(remaining: float, quantum: float) -> float:
    # The last slice of a process always consumes exactly what is left.
    if remaining - quantum <= EPSILON:
        return remaining
    return quantum


def schedule_rr(
    processes: Sequence[ProcessInput],
    quantum: Optional[float] = None,
    predictions: Optional[Mapping[str, PredictedAttributes]] = None,
) -> SchedulingResult:
    """
    Round Robin scheduling with a fixed time quantum.

    Predictions, when given, do not change the schedule; their mean quantum
    is reported as `suggested_quantum` for comparison with the fixed one.
    """
    validate_quantum(quantum)

    order = _arrival_order(processes)
    next_arrival = 0

    remaining = [float(p.burst_time) for p in processes]
    slices: Dict[int, List[ExecutionSlice]] = {i: [] for i in range(len(processes))}
    finished = 0

    time: float = 0
    ready: Deque[int] = deque()

    def enqueue_new_arrivals(current_time: float) -> None:
        nonlocal next_arrival
        while next_arrival < len(order) and processes[order[next_arrival]].arrival_time <= current_time:
            ready.append(order[next_arrival])
            next_arrival += 1

    enqueue_new_arrivals(time)

    while finished < len(processes):
        if not ready:
            # Jump to next arrival if CPU is idle
            time = processes[order[next_arrival]].arrival_time
            logger.debug("rr idle until t=%s", time)
            enqueue_new_arrivals(time)
            continue

        idx = ready.popleft()
        run_time = _run_slice(remaining[idx], quantum)
        slice_start = time
        slice_end = time + run_time
        slices[idx].append(ExecutionSlice(start=slice_start, end=slice_end))

        time = slice_end
        remaining[idx] = 0.0 if run_time == remaining[idx] else remaining[idx] - run_time

        # Arrivals during this slice go ahead of the preempted process.
        enqueue_new_arrivals(time)

        if remaining[idx] > 0:
            ready.append(idx)
        else:
            finished += 1

    suggested = None
    if predictions:
        suggested = sum(predictions[p.id].predicted_quantum for p in processes) / len(processes)

    return _build_result(ROUND_ROBIN, processes, slices, quantum=quantum, suggested_quantum=suggested)


def schedule_hybrid(
    processes: Sequence[ProcessInput],
    quantum: Optional[float] = None,
    predictions: Optional[Mapping[str, PredictedAttributes]] = None,
) -> SchedulingResult:
    """
    Hybrid AI scheduling: predicted priority ordering with a predicted,
    per-process quantum.

    Every selection picks the ready process with the smallest predicted
    priority (then earlier arrival, then input order), so a newly arrived
    urgent process takes over at the next slice boundary. A preempted process
    goes back into the ready set and competes again by predicted priority.
    The base quantum is not used; each process slices by its own prediction.
    """
    if predictions is None:
        predictions = predict(processes)

    order = _arrival_order(processes)
    next_arrival = 0

    remaining = [float(p.burst_time) for p in processes]
    slices: Dict[int, List[ExecutionSlice]] = {i: [] for i in range(len(processes))}
    finished = 0

    time: float = 0
    ready: List[Tuple[Tuple, int]] = []

    def selection_key(idx: int) -> Tuple:
        p = processes[idx]
        return (predictions[p.id].predicted_priority, p.arrival_time, idx)

    def admit_new_arrivals(current_time: float) -> None:
        nonlocal next_arrival
        while next_arrival < len(order) and processes[order[next_arrival]].arrival_time <= current_time:
            idx = order[next_arrival]
            heapq.heappush(ready, (selection_key(idx), idx))
            next_arrival += 1

    while finished < len(processes):
        admit_new_arrivals(time)

        if not ready:
            time = processes[order[next_arrival]].arrival_time
            logger.debug("hybrid_ai idle until t=%s", time)
            continue

        _, idx = heapq.heappop(ready)
        p = processes[idx]
        run_time = _run_slice(remaining[idx], predictions[p.id].predicted_quantum)
        slice_start = time
        slice_end = time + run_time
        slices[idx].append(ExecutionSlice(start=slice_start, end=slice_end))
        logger.debug("hybrid_ai runs %s [%s, %s)", p.id, slice_start, slice_end)

        time = slice_end
        remaining[idx] = 0.0 if run_time == remaining[idx] else remaining[idx] - run_time

        if remaining[idx] > 0:
            heapq.heappush(ready, (selection_key(idx), idx))
        else:
            finished += 1

    return _build_result(HYBRID_AI, processes, slices)


ALGORITHMS = {
    FCFS: schedule_fcfs,
    SJF: schedule_sjf,
    PRIORITY: schedule_priority,
    ROUND_ROBIN: schedule_rr,
    HYBRID_AI: schedule_hybrid,
}

# Policies that read predictions.
PREDICTION_CONSUMERS = frozenset({ROUND_ROBIN, HYBRID_AI})


def run_algorithm(
    name: str,
    processes: Sequence[ProcessInput],
    quantum: Optional[float] = None,
    predictions: Optional[Mapping[str, PredictedAttributes]] = None,
) -> SchedulingResult:
    """
    Validate the inputs and dispatch to the requested algorithm.
    """
    key = name.lower()
    if key not in ALGORITHMS:
        raise InvalidInput(f"Unknown algorithm '{name}' (choose from {', '.join(ALGORITHMS)})")

    processes = list(processes)
    validate_workload(processes)
    if quantum is not None or key == ROUND_ROBIN:
        validate_quantum(quantum)
    if key in PREDICTION_CONSUMERS:
        if predictions is None:
            predictions = predict(processes)
        validate_predictions(processes, predictions)
    else:
        predictions = None

    func = ALGORITHMS[key]
    return func(processes, quantum=quantum, predictions=predictions)
