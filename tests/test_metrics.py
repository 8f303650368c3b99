import pytest

from hybrid_scheduler.metrics import compute_summary, cpu_leader, waiting_leader
from hybrid_scheduler.models import ExecutionSlice, ProcessResult, SchedulingResult, Summary


def _result(pid, arrival, slices):
    history = tuple(ExecutionSlice(s, e) for s, e in slices)
    burst = sum(e - s for s, e in slices)
    finish = history[-1].end
    return ProcessResult(
        id=pid,
        arrival_time=arrival,
        burst_time=burst,
        start_time=history[0].start,
        finish_time=finish,
        waiting_time=finish - arrival - burst,
        turnaround_time=finish - arrival,
        response_time=history[0].start - arrival,
        slice_history=history,
    )


def _scheduling(name, utilization, waiting):
    summary = Summary(
        total_execution_time=10,
        cpu_utilization=utilization,
        throughput=0.3,
        average_waiting_time=waiting,
        average_turnaround_time=waiting + 3,
        average_response_time=1,
    )
    return SchedulingResult(algorithm=name, processes=(), summary=summary)


def test_summary_of_back_to_back_schedule():
    processes = [
        _result("a", 0, [(0, 4)]),
        _result("b", 1, [(4, 6)]),
    ]
    summary = compute_summary(processes)
    assert summary.total_execution_time == 6
    assert summary.cpu_utilization == pytest.approx(100)
    assert summary.throughput == pytest.approx(2 / 6)
    assert summary.average_waiting_time == pytest.approx(1.5)
    assert summary.average_turnaround_time == pytest.approx(4.5)
    assert summary.average_response_time == pytest.approx(1.5)


def test_makespan_starts_at_first_arrival():
    summary = compute_summary([_result("a", 2, [(2, 5)])])
    assert summary.total_execution_time == 3
    assert summary.cpu_utilization == pytest.approx(100)
    assert summary.throughput == pytest.approx(1 / 3)


def test_idle_time_lowers_utilization():
    processes = [
        _result("a", 0, [(0, 1), (3, 4)]),
        _result("b", 6, [(6, 8)]),
    ]
    summary = compute_summary(processes)
    assert summary.total_execution_time == 8
    assert summary.cpu_utilization == pytest.approx(50)


def test_empty_schedule_reports_zeros():
    summary = compute_summary([])
    assert summary.total_execution_time == 0
    assert summary.cpu_utilization == 0
    assert summary.throughput == 0


def test_leaders():
    results = [
        _scheduling("fcfs", 80, 4),
        _scheduling("sjf", 95, 2),
        _scheduling("rr", 95, 2),
    ]
    assert cpu_leader(results).algorithm == "sjf"
    assert waiting_leader(results).algorithm == "sjf"
    assert cpu_leader([]) is None
    assert waiting_leader([]) is None
