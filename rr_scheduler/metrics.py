from __future__ import annotations

from typing import Iterable, List, Sequence

from .models import GanttEntry, Process, ProcessMetrics, Statistics, SystemMetrics


def compute_statistics(completed: Iterable[Process]) -> Statistics:
    """
    Return average waiting and turnaround time over completed processes.

    Averages are ``None`` when nothing has completed yet, so "no data" is never
    confused with a real average of zero. Always recomputed from the processes
    passed in; nothing is cached.
    """
    done = [p for p in completed if p.turnaround_time is not None]
    if not done:
        return Statistics(count=0, average_waiting=None, average_turnaround=None)

    n = len(done)
    return Statistics(
        count=n,
        average_waiting=sum(p.waiting_time for p in done) / n,
        average_turnaround=sum(p.turnaround_time for p in done) / n,
    )


def compute_system_metrics(timeline: Sequence[GanttEntry], process_count: int) -> SystemMetrics:
    """
    Compute makespan, CPU busy time, throughput and CPU utilization from the Gantt log.
    """
    if not timeline:
        return SystemMetrics(cpu_busy_time=0, makespan=0, throughput=0.0, cpu_utilization=0.0)

    makespan = timeline[-1].end_time
    cpu_busy_time = sum(entry.duration for entry in timeline if not entry.is_idle)

    throughput = process_count / makespan if makespan > 0 else 0.0
    cpu_utilization = cpu_busy_time / makespan if makespan > 0 else 0.0

    return SystemMetrics(
        cpu_busy_time=cpu_busy_time,
        makespan=makespan,
        throughput=throughput,
        cpu_utilization=cpu_utilization,
    )


def process_metrics(completed: Iterable[Process]) -> List[ProcessMetrics]:
    return [
        ProcessMetrics(
            id=p.id,
            pid=p.pid,
            name=p.name,
            arrival_time=p.arrival_time,
            burst_time=p.burst_time,
            completion_time=p.completion_time,
            waiting_time=p.waiting_time,
            turnaround_time=p.turnaround_time,
        )
        for p in completed
    ]
