import pytest

from rr_scheduler.metrics import compute_statistics, compute_system_metrics, process_metrics
from rr_scheduler.models import IDLE, GanttEntry, Process, ProcessState


def _done(pid, arrival, burst, completion):
    p = Process(id=pid, pid=1, name=pid, burst_time=burst, arrival_time=arrival)
    p.remaining_time = 0
    p.state = ProcessState.COMPLETED
    p.completion_time = completion
    p.turnaround_time = completion - arrival
    p.waiting_time = p.turnaround_time - burst
    return p


def test_statistics_no_data():
    stats = compute_statistics([])
    assert stats.count == 0
    assert stats.average_waiting is None
    assert stats.average_turnaround is None


def test_statistics_averages():
    stats = compute_statistics([_done("P1", 0, 4, 6), _done("P2", 1, 3, 9)])
    assert stats.count == 2
    assert stats.average_waiting == pytest.approx((2 + 5) / 2)
    assert stats.average_turnaround == pytest.approx((6 + 8) / 2)


def test_statistics_ignore_unfinished():
    running = Process(id="P3", pid=3, name="P3", burst_time=2, arrival_time=0)
    stats = compute_statistics([_done("P1", 0, 2, 2), running])
    assert stats.count == 1
    assert stats.average_waiting == 0


def test_system_metrics_with_idle():
    timeline = [GanttEntry(IDLE, 0, 2), GanttEntry("P1", 2, 5), GanttEntry("P2", 5, 6)]
    sys = compute_system_metrics(timeline, process_count=2)
    assert sys.makespan == 6
    assert sys.cpu_busy_time == 4
    assert sys.throughput == pytest.approx(2 / 6)
    assert sys.cpu_utilization == pytest.approx(4 / 6)


def test_system_metrics_empty():
    sys = compute_system_metrics([], process_count=0)
    assert sys.makespan == 0
    assert sys.throughput == 0.0


def test_process_metrics_keeps_order():
    rows = process_metrics([_done("P2", 1, 3, 9), _done("P1", 0, 4, 6)])
    assert [r.id for r in rows] == ["P2", "P1"]
    assert rows[0].waiting_time == 5
