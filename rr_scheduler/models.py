from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Optional, Tuple

IDLE = "idle"

PROCESS_COLORS = ["red", "blue", "green", "orange1", "purple", "cyan", "pink1", "yellow"]
IDLE_COLOR = "grey50"


class ProcessState(str, Enum):
    WAITING = "waiting"
    READY = "ready"
    RUNNING = "running"
    COMPLETED = "completed"


@dataclass(frozen=True)
class ProcessSpec:
    """
    One row of input as supplied by the caller, before the run assigns identity.
    """

    name: str
    burst_time: int
    arrival_time: int = 0
    id: Optional[str] = None
    pid: Optional[int] = None


@dataclass
class Process:
    id: str
    pid: int
    name: str
    burst_time: int
    arrival_time: int
    color: str = PROCESS_COLORS[0]
    remaining_time: Optional[int] = None
    state: ProcessState = ProcessState.WAITING
    completion_time: Optional[int] = None
    waiting_time: Optional[int] = None
    turnaround_time: Optional[int] = None

    def __post_init__(self) -> None:
        if self.remaining_time is None:
            self.remaining_time = self.burst_time

    def restore(self) -> None:
        """Put runtime fields back to their pre-run values."""
        self.remaining_time = self.burst_time
        self.state = ProcessState.WAITING
        self.completion_time = None
        self.waiting_time = None
        self.turnaround_time = None

    def copy(self) -> "Process":
        return replace(self)


@dataclass(frozen=True)
class GanttEntry:
    """
    One contiguous interval of CPU occupancy. ``occupant`` is a process id or IDLE.
    """

    occupant: str
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time

    @property
    def is_idle(self) -> bool:
        return self.occupant == IDLE


@dataclass(frozen=True)
class Snapshot:
    """
    Read-only view of the run state taken after a tick.

    Processes are copies, so a renderer holding a snapshot never observes
    later mutation by the engine.
    """

    current_time: int
    quantum: int
    quantum_remaining: int
    waiting: Tuple[Process, ...]
    ready: Tuple[Process, ...]
    running: Optional[Process]
    completed: Tuple[Process, ...]
    gantt: Tuple[GanttEntry, ...]
    is_completed: bool


@dataclass(frozen=True)
class ProcessMetrics:
    id: str
    pid: int
    name: str
    arrival_time: int
    burst_time: int
    completion_time: int
    waiting_time: int
    turnaround_time: int


@dataclass(frozen=True)
class Statistics:
    count: int
    average_waiting: Optional[float]
    average_turnaround: Optional[float]


@dataclass(frozen=True)
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    throughput: float
    cpu_utilization: float


@dataclass
class RunSummary:
    quantum: int
    processes: List[ProcessMetrics] = field(default_factory=list)
    timeline: List[GanttEntry] = field(default_factory=list)
    statistics: Optional[Statistics] = None
    system: Optional[SystemMetrics] = None
