from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

FCFS = "fcfs"
SJF = "sjf"
PRIORITY = "priority"
ROUND_ROBIN = "rr"
HYBRID_AI = "hybrid_ai"

# Fixed order in which the aggregator reports results.
SCHEDULER_ORDER: Tuple[str, ...] = (FCFS, SJF, PRIORITY, ROUND_ROBIN, HYBRID_AI)

SCHEDULER_LABELS: Dict[str, str] = {
    FCFS: "First-Come First-Served",
    SJF: "Shortest Job First",
    PRIORITY: "Priority",
    ROUND_ROBIN: "Round Robin",
    HYBRID_AI: "Hybrid AI",
}

SCHEDULER_DESCRIPTIONS: Dict[str, str] = {
    FCFS: "Deterministic arrival ordering for workloads requiring strict fairness and ordering guarantees.",
    SJF: "Greedy selection of the shortest jobs to minimize average waiting time.",
    PRIORITY: "Priority-ordered execution emphasizing critical workloads and deterministic ordering.",
    ROUND_ROBIN: "Preemptive time slicing with fair sharing and prediction-informed quantum suggestions.",
    HYBRID_AI: "Adaptive quantum scheduling guided by predictions to reduce waiting time and raise CPU utilization.",
}


@dataclass(frozen=True)
class ProcessInput:
    id: str
    arrival_time: int
    burst_time: float
    priority: int
    cpu_utilization_hint: float = 0.6
    io_bound_probability: float = 0.5


@dataclass(frozen=True)
class PredictedAttributes:
    predicted_burst_time: float
    predicted_priority: int
    predicted_quantum: float
    confidence: float


@dataclass(frozen=True)
class ExecutionSlice:
    """
    One contiguous span during which a process occupied the CPU.
    """

    start: float
    end: float

    @property
    def duration(self) -> float:
        return self.end - self.start


@dataclass(frozen=True)
class ScheduledSlice:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: str
    start_time: float
    end_time: float


@dataclass(frozen=True)
class ProcessResult:
    id: str
    arrival_time: int
    burst_time: float
    start_time: float
    finish_time: float
    waiting_time: float
    turnaround_time: float
    response_time: float
    slice_history: Tuple[ExecutionSlice, ...] = ()


@dataclass(frozen=True)
class Summary:
    total_execution_time: float
    cpu_utilization: float
    throughput: float
    average_waiting_time: float
    average_turnaround_time: float
    average_response_time: float


@dataclass(frozen=True)
class SchedulingResult:
    algorithm: str
    processes: Tuple[ProcessResult, ...]
    summary: Summary
    quantum: Optional[float] = None
    suggested_quantum: Optional[float] = None

    @property
    def label(self) -> str:
        return SCHEDULER_LABELS.get(self.algorithm, self.algorithm)

    @property
    def timeline(self) -> List[ScheduledSlice]:
        """
        Every slice of every process, ordered by start time.
        """
        slices = [
            ScheduledSlice(pid=p.id, start_time=s.start, end_time=s.end)
            for p in self.processes
            for s in p.slice_history
        ]
        return sorted(slices, key=lambda s: (s.start_time, s.end_time))

