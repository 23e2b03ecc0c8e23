from __future__ import annotations

import logging
from collections import deque
from typing import Deque, Iterable, List, Optional

from .errors import PreconditionError
from .models import Process, ProcessState

logger = logging.getLogger(__name__)


class QueueManager:
    """
    Owns the waiting, ready and completed collections plus the single running slot.

    Processes are admitted in the order they were handed in, which the engine
    fixes once at run start (stable sort by arrival time). Requeued processes
    always go to the tail of the ready queue.
    """

    def __init__(self, quantum: int) -> None:
        self.quantum = quantum
        self.quantum_remaining = 0
        self.waiting: Deque[Process] = deque()
        self.ready: Deque[Process] = deque()
        self.running: Optional[Process] = None
        self.completed: List[Process] = []

    def load(self, processes: Iterable[Process]) -> None:
        """Start over with every process in the waiting set, in the given order."""
        self.waiting = deque(processes)
        self.ready.clear()
        self.running = None
        self.completed = []
        self.quantum_remaining = 0
        for p in self.waiting:
            p.state = ProcessState.WAITING

    def admit_arrivals(self, current_time: int) -> List[Process]:
        arrived = [p for p in self.waiting if p.arrival_time <= current_time]
        if not arrived:
            return arrived

        self.waiting = deque(p for p in self.waiting if p.arrival_time > current_time)
        for p in arrived:
            p.state = ProcessState.READY
            self.ready.append(p)
            logger.debug("t=%d: %s arrived, ready queue length %d", current_time, p.id, len(self.ready))
        return arrived

    def dispatch_next(self) -> Optional[Process]:
        if self.running is not None or not self.ready:
            return None

        p = self.ready.popleft()
        p.state = ProcessState.RUNNING
        self.running = p
        self.quantum_remaining = self.quantum
        logger.debug("%s dispatched with quantum %d (remaining %d)", p.id, self.quantum, p.remaining_time)
        return p

    def requeue_current(self) -> Process:
        p = self._take_running("requeue_current")
        p.state = ProcessState.READY
        self.ready.append(p)
        logger.debug("%s quantum expired, requeued at position %d", p.id, len(self.ready))
        return p

    def complete_current(self, current_time: int) -> Process:
        """
        Move the running process to the completed set and fill in its metrics.

        ``current_time`` is the tick during which the last unit of work ran, so
        the process completes at the end of it.
        """
        p = self._take_running("complete_current")
        p.state = ProcessState.COMPLETED
        p.completion_time = current_time + 1
        p.turnaround_time = p.completion_time - p.arrival_time
        p.waiting_time = p.turnaround_time - p.burst_time
        self.completed.append(p)
        logger.debug(
            "%s completed at %d (turnaround %d, waiting %d)",
            p.id,
            p.completion_time,
            p.turnaround_time,
            p.waiting_time,
        )
        return p

    @property
    def has_pending(self) -> bool:
        return bool(self.waiting or self.ready or self.running is not None)

    def _take_running(self, operation: str) -> Process:
        if self.running is None:
            raise PreconditionError(f"{operation}() called with no running process")
        p = self.running
        self.running = None
        self.quantum_remaining = 0
        return p
