from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional


@dataclass(frozen=True)
class ProcessSpec:
    pid: str
    arrival_time: int
    burst_time: int
    priority: int = 0


@dataclass
class ProcessRunState:
    """
    Mutable bookkeeping for one process during a single simulation run.
    """

    spec: ProcessSpec
    remaining_time: int = 0
    start_time: Optional[int] = None
    completion_time: Optional[int] = None
    waiting_time: int = 0
    turnaround_time: int = 0

    @classmethod
    def from_spec(cls, spec: ProcessSpec) -> "ProcessRunState":
        return cls(spec=spec, remaining_time=spec.burst_time)

    @property
    def pid(self) -> str:
        return self.spec.pid

    @property
    def arrival_time(self) -> int:
        return self.spec.arrival_time

    @property
    def burst_time(self) -> int:
        return self.spec.burst_time

    @property
    def priority(self) -> int:
        return self.spec.priority

    @property
    def finished(self) -> bool:
        return self.completion_time is not None

    @property
    def response_time(self) -> Optional[int]:
        if self.start_time is None:
            return None
        return self.start_time - self.arrival_time

    def finish(self, time: int) -> None:
        self.remaining_time = 0
        self.completion_time = time
        self.turnaround_time = time - self.arrival_time
        self.waiting_time = self.turnaround_time - self.burst_time


@dataclass(frozen=True)
class GanttSegment:
    """
    One contiguous slice of execution for a process in the Gantt chart.
    """

    pid: str
    start_time: int
    end_time: int

    @property
    def duration(self) -> int:
        return self.end_time - self.start_time


@dataclass
class SystemMetrics:
    cpu_busy_time: int
    makespan: int
    idle_time: int
    throughput: float
    cpu_utilization: float


@dataclass
class SimulationResult:
    algorithm: str
    quantum: Optional[int]
    processes: List[ProcessRunState] = field(default_factory=list)
    timeline: List[GanttSegment] = field(default_factory=list)
    system: Optional[SystemMetrics] = None

    def process(self, pid: str) -> ProcessRunState:
        for state in self.processes:
            if state.pid == pid:
                return state
        raise KeyError(pid)

    def segments_for(self, pid: str) -> List[GanttSegment]:
        return [seg for seg in self.timeline if seg.pid == pid]
