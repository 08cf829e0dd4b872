import pytest

from oslab.algorithms import run_schedule
from oslab.metrics import compute_process_metrics, compute_system_metrics, summarize_process_metrics
from oslab.models import Process, ScheduleBlock
from oslab.policies import FCFS, RoundRobin


def _pair():
    return [
        Process(1, arrival_time=0, burst_time=5),
        Process(2, arrival_time=2, burst_time=3),
    ]


def test_fcfs_averages():
    res = run_schedule(_pair(), FCFS())
    summary = summarize_process_metrics(res.processes)
    # P1: turnaround 5, waiting 0. P2: completes at 8, turnaround 6, waiting 3.
    assert summary["avg_turnaround"] == pytest.approx(5.5)
    assert summary["avg_waiting"] == pytest.approx(1.5)


def test_round_robin_completion_and_response():
    res = run_schedule(_pair(), RoundRobin(2))
    by_pid = {m.pid: m for m in res.processes}
    assert by_pid[1].completion_time == 8
    assert by_pid[2].completion_time == 7
    assert by_pid[2].response_time == 0
    assert by_pid[1].waiting_time == 3
    assert by_pid[2].waiting_time == 2


def test_metrics_skip_processes_missing_from_timeline():
    procs = [Process(1, 0, 2), Process(2, 0, 1)]
    metrics = compute_process_metrics(procs, [ScheduleBlock(1, 0, 2)])
    assert [m.pid for m in metrics] == [1]


def test_system_metrics_with_idle_gap():
    system = compute_system_metrics([ScheduleBlock(1, 0, 2), ScheduleBlock(2, 4, 6)])
    assert system.makespan == 6
    assert system.cpu_busy_time == 4
    assert system.cpu_utilization == pytest.approx(4 / 6)
    assert system.throughput == pytest.approx(2 / 6)


def test_empty_inputs_give_zero_metrics():
    assert summarize_process_metrics([]) == {"avg_waiting": 0.0, "avg_turnaround": 0.0, "avg_response": 0.0}
    system = compute_system_metrics([])
    assert system.makespan == 0
    assert system.throughput == 0.0
