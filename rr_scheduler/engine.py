from __future__ import annotations

import logging
from typing import List, Sequence

from .errors import ConfigurationError, PreconditionError
from .metrics import compute_statistics, compute_system_metrics, process_metrics
from .models import IDLE, PROCESS_COLORS, Process, ProcessSpec, RunSummary, Snapshot, Statistics
from .queues import QueueManager
from .timeline import TimelineRecorder

logger = logging.getLogger(__name__)

FIRST_PID = 1001
DEFAULT_QUANTUM = 2


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_quantum(quantum) -> int:
    if not _is_int(quantum) or quantum <= 0:
        raise ConfigurationError(f"Quantum must be a positive integer, got {quantum!r}")
    return quantum


def build_processes(specs: Sequence[ProcessSpec]) -> List[Process]:
    """
    Validate input rows and turn them into Process records in input order.

    Missing ids become ``P<n>`` (1-based input position) and missing pids are
    numbered from FIRST_PID, so the same input always yields the same identities.
    """
    if not specs:
        raise ConfigurationError("At least one process is required")

    processes: List[Process] = []
    seen_ids: set[str] = set()

    for index, spec in enumerate(specs):
        label = spec.id or spec.name or f"#{index + 1}"
        if not _is_int(spec.burst_time) or spec.burst_time <= 0:
            raise ConfigurationError(f"Process {label}: burst time must be a positive integer, got {spec.burst_time!r}")
        if not _is_int(spec.arrival_time) or spec.arrival_time < 0:
            raise ConfigurationError(
                f"Process {label}: arrival time must be a non-negative integer, got {spec.arrival_time!r}"
            )

        process_id = spec.id or f"P{index + 1}"
        if process_id == IDLE:
            raise ConfigurationError(f"Process id {IDLE!r} is reserved for idle time")
        if process_id in seen_ids:
            raise ConfigurationError(f"Duplicate process id {process_id!r}")
        seen_ids.add(process_id)

        processes.append(
            Process(
                id=process_id,
                pid=spec.pid if spec.pid is not None else FIRST_PID + index,
                name=spec.name or process_id,
                burst_time=spec.burst_time,
                arrival_time=spec.arrival_time,
                color=PROCESS_COLORS[index % len(PROCESS_COLORS)],
            )
        )

    return processes


class Simulation:
    """
    Round Robin tick engine over a fixed process list.

    All mutable scheduling state (clock, queues, running slot, Gantt log) lives
    here and is advanced only by :meth:`tick`, one time unit per call. Callers
    read it through :meth:`snapshot` and :meth:`summary`.
    """

    def __init__(self, processes: Sequence[ProcessSpec], quantum: int = DEFAULT_QUANTUM) -> None:
        self.quantum = validate_quantum(quantum)
        built = build_processes(processes)
        # Admission order is fixed here, once: stable on input order for equal arrivals.
        self.processes: List[Process] = sorted(built, key=lambda p: p.arrival_time)

        self.queues = QueueManager(self.quantum)
        self.timeline = TimelineRecorder()
        self.current_time = 0
        self._start()

    def _start(self) -> None:
        self.current_time = 0
        self.timeline.reset()
        for p in self.processes:
            p.restore()
        self.queues.load(self.processes)
        self.queues.admit_arrivals(self.current_time)
        logger.info("Simulation ready: %d processes, quantum %d", len(self.processes), self.quantum)

    @property
    def is_completed(self) -> bool:
        return not self.queues.has_pending

    @property
    def quantum_remaining(self) -> int:
        return self.queues.quantum_remaining

    def tick(self) -> Snapshot:
        """
        Advance the simulation by exactly one time unit and return a snapshot.

        Order within a tick: admit arrivals, dispatch if the CPU is free, run
        the current process (or record idle), then advance the clock.
        """
        if self.is_completed:
            raise PreconditionError(f"tick() called after the run completed at t={self.current_time}")

        queues = self.queues
        now = self.current_time

        queues.admit_arrivals(now)
        queues.dispatch_next()

        current = queues.running
        if current is not None:
            current.remaining_time -= 1
            self.timeline.record(current.id, now)

            if current.remaining_time == 0:
                queues.complete_current(now)
            elif queues.quantum_remaining == 1:
                queues.requeue_current()
            else:
                queues.quantum_remaining -= 1
        else:
            self.timeline.record(IDLE, now)
            logger.debug("t=%d: CPU idle", now)

        self.current_time += 1

        if self.is_completed:
            logger.info("Run completed at t=%d", self.current_time)

        return self.snapshot()

    def run_to_completion(self) -> RunSummary:
        while not self.is_completed:
            self.tick()
        return self.summary()

    def reset(self) -> Snapshot:
        """Discard all progress, keeping the same processes and quantum."""
        logger.info("Resetting simulation at t=%d", self.current_time)
        self._start()
        return self.snapshot()

    def statistics(self) -> Statistics:
        return compute_statistics(self.queues.completed)

    def snapshot(self) -> Snapshot:
        queues = self.queues
        return Snapshot(
            current_time=self.current_time,
            quantum=self.quantum,
            quantum_remaining=queues.quantum_remaining,
            waiting=tuple(p.copy() for p in queues.waiting),
            ready=tuple(p.copy() for p in queues.ready),
            running=queues.running.copy() if queues.running is not None else None,
            completed=tuple(p.copy() for p in queues.completed),
            gantt=self.timeline.entries,
            is_completed=self.is_completed,
        )

    def summary(self) -> RunSummary:
        """
        Per-process metrics in completion order, the Gantt log and both averages.

        Safe to call mid-run; only completed processes are reported.
        """
        completed = self.queues.completed
        timeline = list(self.timeline.entries)
        return RunSummary(
            quantum=self.quantum,
            processes=process_metrics(completed),
            timeline=timeline,
            statistics=compute_statistics(completed),
            system=compute_system_metrics(timeline, len(completed)),
        )
