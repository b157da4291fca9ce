"""
Scheduler visualizer package.

Simulates classical CPU scheduling policies (FCFS, SJF, Priority, Round Robin)
and renders per-process metrics and a Gantt timeline in the terminal.
"""

from .algorithms import (
    ALGORITHMS,
    run_algorithm,
    simulate_fcfs,
    simulate_priority,
    simulate_round_robin,
    simulate_sjf,
)
from .errors import EmptyRosterError, InvalidInputError, SchedulerError, UnknownProcessError
from .models import GanttSegment, ProcessRunState, ProcessSpec, SimulationResult
from .roster import Roster

__all__ = [
    "ALGORITHMS",
    "EmptyRosterError",
    "GanttSegment",
    "InvalidInputError",
    "ProcessRunState",
    "ProcessSpec",
    "Roster",
    "SchedulerError",
    "SimulationResult",
    "UnknownProcessError",
    "run_algorithm",
    "simulate_fcfs",
    "simulate_priority",
    "simulate_round_robin",
    "simulate_sjf",
]
