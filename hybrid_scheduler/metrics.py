from __future__ import annotations

from typing import Optional, Sequence

from .models import ProcessResult, SchedulingResult, Summary


def compute_summary(processes: Sequence[ProcessResult]) -> Summary:
    """
    Compute makespan, CPU utilization, throughput and per-process averages
    from a completed schedule.
    """
    if not processes:
        return Summary(
            total_execution_time=0.0,
            cpu_utilization=0.0,
            throughput=0.0,
            average_waiting_time=0.0,
            average_turnaround_time=0.0,
            average_response_time=0.0,
        )

    n = len(processes)
    makespan = max(p.finish_time for p in processes) - min(p.arrival_time for p in processes)
    cpu_busy_time = sum(s.duration for p in processes for s in p.slice_history)

    cpu_utilization = 100 * cpu_busy_time / makespan if makespan > 0 else 0.0
    throughput = n / makespan if makespan > 0 else 0.0

    return Summary(
        total_execution_time=makespan,
        cpu_utilization=cpu_utilization,
        throughput=throughput,
        average_waiting_time=sum(p.waiting_time for p in processes) / n,
        average_turnaround_time=sum(p.turnaround_time for p in processes) / n,
        average_response_time=sum(p.response_time for p in processes) / n,
    )


def cpu_leader(results: Sequence[SchedulingResult]) -> Optional[SchedulingResult]:
    """
    The result with the highest CPU utilization; the earliest wins a tie.
    """
    best = None
    for result in results:
        if best is None or result.summary.cpu_utilization > best.summary.cpu_utilization:
            best = result
    return best


def waiting_leader(results: Sequence[SchedulingResult]) -> Optional[SchedulingResult]:
    """
    The result with the lowest average waiting time; the earliest wins a tie.
    """
    best = None
    for result in results:
        if best is None or result.summary.average_waiting_time < best.summary.average_waiting_time:
            best = result
    return best
