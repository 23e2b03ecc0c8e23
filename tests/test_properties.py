import pytest

from rr_scheduler.engine import Simulation
from rr_scheduler.models import IDLE, ProcessSpec, ProcessState

WORKLOADS = {
    "staggered": [
        ProcessSpec("P1", burst_time=4, arrival_time=0),
        ProcessSpec("P2", burst_time=3, arrival_time=1),
        ProcessSpec("P3", burst_time=2, arrival_time=2),
    ],
    "idle_gap": [
        ProcessSpec("a", burst_time=5, arrival_time=0),
        ProcessSpec("b", burst_time=3, arrival_time=0),
        ProcessSpec("c", burst_time=1, arrival_time=4),
        ProcessSpec("d", burst_time=7, arrival_time=2),
        ProcessSpec("e", burst_time=2, arrival_time=20),
    ],
    "same_arrival": [
        ProcessSpec("a", burst_time=6, arrival_time=3),
        ProcessSpec("b", burst_time=2, arrival_time=3),
        ProcessSpec("c", burst_time=9, arrival_time=3),
        ProcessSpec("d", burst_time=4, arrival_time=3),
    ],
    "unsorted_input": [
        ProcessSpec("late", burst_time=3, arrival_time=8),
        ProcessSpec("early", burst_time=10, arrival_time=0),
        ProcessSpec("mid", burst_time=4, arrival_time=5),
        ProcessSpec("mid2", burst_time=1, arrival_time=5),
    ],
}

CASES = [(name, q) for name in WORKLOADS for q in (1, 2, 3, 5)]


def _ids(snapshot):
    ids = [p.id for p in snapshot.waiting]
    ids += [p.id for p in snapshot.ready]
    ids += [snapshot.running.id] if snapshot.running is not None else []
    ids += [p.id for p in snapshot.completed]
    return ids


def _all_processes(snapshot):
    procs = list(snapshot.waiting) + list(snapshot.ready) + list(snapshot.completed)
    if snapshot.running is not None:
        procs.append(snapshot.running)
    return procs


def _snapshots(sim):
    snaps = [sim.snapshot()]
    while not sim.is_completed:
        snaps.append(sim.tick())
    return snaps


@pytest.mark.parametrize("name, quantum", CASES)
def test_conservation(name, quantum):
    sim = Simulation(WORKLOADS[name], quantum=quantum)
    expected = sorted(p.id for p in sim.processes)

    for snap in _snapshots(sim):
        ids = _ids(snap)
        assert sorted(ids) == expected
        assert len(ids) == len(set(ids))


@pytest.mark.parametrize("name, quantum", CASES)
def test_remaining_time_monotonic(name, quantum):
    sim = Simulation(WORKLOADS[name], quantum=quantum)
    last = {p.id: p.remaining_time for p in sim.processes}
    zero_hits = {p.id: 0 for p in sim.processes}

    for snap in _snapshots(sim)[1:]:
        for p in _all_processes(snap):
            assert p.remaining_time <= last[p.id]
            if p.remaining_time == 0 and last[p.id] > 0:
                zero_hits[p.id] += 1
            assert (p.remaining_time == 0) == (p.state == ProcessState.COMPLETED)
            last[p.id] = p.remaining_time

    assert all(hits == 1 for hits in zero_hits.values())


@pytest.mark.parametrize("name, quantum", CASES)
def test_gantt_coverage(name, quantum):
    sim = Simulation(WORKLOADS[name], quantum=quantum)
    sim.run_to_completion()
    entries = sim.timeline.entries

    assert entries[0].start_time == 0
    for prev, cur in zip(entries, entries[1:]):
        assert prev.end_time == cur.start_time
        assert prev.occupant != cur.occupant
    assert entries[-1].end_time == sim.current_time
    assert sum(e.duration for e in entries) == sim.current_time

    busy = sum(e.duration for e in entries if e.occupant != IDLE)
    assert busy == sum(p.burst_time for p in sim.processes)


@pytest.mark.parametrize("name, quantum", CASES)
def test_round_robin_fairness(name, quantum):
    sim = Simulation(WORKLOADS[name], quantum=quantum)
    sim.run_to_completion()
    segments = [e.occupant for e in sim.timeline.entries]

    for pid in {p.id for p in sim.processes}:
        positions = [i for i, occ in enumerate(segments) if occ == pid]
        for start, end in zip(positions, positions[1:]):
            between = segments[start + 1 : end]
            assert IDLE not in between
            assert len(between) == len(set(between))


@pytest.mark.parametrize("name, quantum", CASES)
def test_statistics_identity(name, quantum):
    sim = Simulation(WORKLOADS[name], quantum=quantum)
    summary = sim.run_to_completion()

    assert len(summary.processes) == len(sim.processes)
    for p in summary.processes:
        assert p.turnaround_time == p.completion_time - p.arrival_time
        assert p.waiting_time == p.turnaround_time - p.burst_time
        assert p.turnaround_time >= 0
        assert p.waiting_time >= 0


@pytest.mark.parametrize("name, quantum", CASES)
def test_reset_is_idempotent(name, quantum):
    sim = Simulation(WORKLOADS[name], quantum=quantum)
    sim.run_to_completion()

    sim.reset()
    first = sim.run_to_completion()
    sim.reset()
    second = sim.run_to_completion()

    assert first.timeline == second.timeline
    assert first.statistics == second.statistics
    assert first.processes == second.processes
